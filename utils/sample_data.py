from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional

from models.schema import RawPunchEvent

# Demo punches used when no source is configured
SAMPLE_EMPLOYEES = [
    {
        "employee_id": "EMP001",
        "employee_name": "John Doe",
        "email": "john.doe@example.com",
        "position": "Engineer",
        "punches": [time(9, 0), time(12, 0), time(13, 0), time(17, 30)],
    },
    {
        "employee_id": "EMP002",
        "employee_name": "Jane Smith",
        "email": "jane.smith@example.com",
        "position": "Designer",
        "punches": [time(8, 45), time(12, 15), time(13, 15), time(17, 15)],
    },
]


def get_sample_events(today: Optional[date] = None) -> List[RawPunchEvent]:
    today = today or date.today()
    yesterday = today - timedelta(days=1)
    events = []
    for day, emp in ((today, SAMPLE_EMPLOYEES[0]), (yesterday, SAMPLE_EMPLOYEES[1])):
        for i, punch in enumerate(emp["punches"]):
            stamp = datetime.combine(day, punch, tzinfo=timezone.utc)
            events.append(RawPunchEvent(
                employee_id=emp["employee_id"],
                employee_name=emp["employee_name"],
                email=emp["email"],
                position=emp["position"],
                timestamp=stamp.isoformat().replace("+00:00", "Z"),
                punch_type="IN" if i % 2 == 0 else "OUT",
            ))
    return events

from typing import List, Optional

from models.schema import RawPunchEvent

# In-process punch store written by the HTTP surface
punch_events: List[RawPunchEvent] = []

def insert_punch(event: RawPunchEvent) -> None:
    punch_events.append(event)

def get_all_punches() -> List[RawPunchEvent]:
    return list(punch_events)

def get_punches_for_employee(employee_id: str, punch_date: Optional[str] = None) -> List[RawPunchEvent]:
    return [
        p for p in punch_events
        if p.employee_id == employee_id and (punch_date is None or p.timestamp.startswith(punch_date))
    ]


def clear_punches() -> None:
    punch_events.clear()

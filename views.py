from datetime import date
from typing import List, Optional, Tuple

from aggregator import break_pairs, round2
from models.schema import AttendanceRecord, EmployeeSummary

FULL_DAY_HOURS = 8


def attendance_status(effective_hours: float) -> str:
    if effective_hours >= FULL_DAY_HOURS:
        return "Full Day"
    if effective_hours > 0:
        return "Partial Day"
    return "Absent"


def filter_by_email(records: List[AttendanceRecord], email: str) -> List[AttendanceRecord]:
    wanted = email.strip().lower()
    return [r for r in records if r.email.lower() == wanted]


def filter_by_month(records: List[AttendanceRecord], month: str) -> List[AttendanceRecord]:
    """Keep records whose date falls in ``month`` (YYYY-MM)."""
    return [r for r in records if r.date[:7] == month]


def filter_by_date(records: List[AttendanceRecord], day: date) -> List[AttendanceRecord]:
    return [r for r in records if r.date == day.isoformat()]


def filter_by_employee(records: List[AttendanceRecord], employee_id: str) -> List[AttendanceRecord]:
    return [r for r in records if r.employee_id == employee_id]


def most_recent_first(records: List[AttendanceRecord]) -> List[AttendanceRecord]:
    return sorted(records, key=lambda r: r.date, reverse=True)


def break_intervals(record: AttendanceRecord) -> List[Tuple[str, str]]:
    return break_pairs(record.breaks, record.check_out)


def summarize_employee(records: List[AttendanceRecord], employee_id: str) -> Optional[EmployeeSummary]:
    own = filter_by_employee(records, employee_id)
    if not own:
        return None

    statuses = [attendance_status(r.effective_hours) for r in own]
    total_effective = sum(r.effective_hours for r in own)
    return EmployeeSummary(
        employee_id=employee_id,
        employee_name=own[0].employee_name,
        days_recorded=len(own),
        full_days=statuses.count("Full Day"),
        partial_days=statuses.count("Partial Day"),
        absent_days=statuses.count("Absent"),
        total_effective_hours=round2(total_effective),
        average_effective_hours=round2(total_effective / len(own)),
        total_break_hours=round2(sum(r.total_break_hours for r in own)),
    )

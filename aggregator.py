import logging
import math
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Tuple

from models.schema import AttendanceRecord, RawPunchEvent

MS_PER_HOUR = 3_600_000


def parse_timestamp(timestamp: str) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp as written, or None when it is not one."""
    if not timestamp:
        return None
    text = timestamp.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def to_instant(value: datetime) -> datetime:
    # offset-less timestamps are read as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def calendar_date_of(timestamp: str) -> Optional[str]:
    parsed = parse_timestamp(timestamp)
    if parsed is None:
        return None
    return parsed.date().isoformat()


def hours_between(start: str, end: str) -> float:
    start_at = to_instant(parse_timestamp(start))
    end_at = to_instant(parse_timestamp(end))
    millis = (end_at - start_at).total_seconds() * 1000
    return millis / MS_PER_HOUR


def round2(value: float) -> float:
    # half rounds up, not to even
    return math.floor(value * 100 + 0.5) / 100


def is_valid_event(event: RawPunchEvent) -> bool:
    return bool(event.employee_id) and parse_timestamp(event.timestamp) is not None


def group_events(events: Iterable[RawPunchEvent]) -> Dict[Tuple[str, str], List[RawPunchEvent]]:
    groups: Dict[Tuple[str, str], List[RawPunchEvent]] = {}
    for event in events:
        if not is_valid_event(event):
            logging.debug(f"Dropping malformed punch: employee_id={event.employee_id!r} timestamp={event.timestamp!r}")
            continue
        key = (event.employee_id, calendar_date_of(event.timestamp))
        groups.setdefault(key, []).append(event)
    return groups


def break_pairs(breaks: List[str], check_out: str) -> List[Tuple[str, str]]:
    """Pair break timestamps two at a time; a trailing odd one ends at check-out."""
    pairs = []
    for i in range(0, len(breaks), 2):
        start = breaks[i]
        end = breaks[i + 1] if i + 1 < len(breaks) else check_out
        pairs.append((start, end))
    return pairs


def build_record(day_events: List[RawPunchEvent]) -> AttendanceRecord:
    # same instant written differently orders by text
    ordered = sorted(day_events, key=lambda e: (to_instant(parse_timestamp(e.timestamp)), e.timestamp))
    first = ordered[0]
    check_in = first.timestamp
    check_out = ordered[-1].timestamp
    breaks = [e.timestamp for e in ordered[1:-1]]

    total_break = 0.0
    for start, end in break_pairs(breaks, check_out):
        total_break += hours_between(start, end)

    total_break_hours = round2(total_break)
    effective_hours = round2(max(0.0, hours_between(check_in, check_out) - total_break_hours))

    return AttendanceRecord(
        employee_id=first.employee_id,
        employee_name=first.employee_name,
        email=first.email,
        date=calendar_date_of(check_in),
        check_in=check_in,
        check_out=check_out,
        breaks=breaks,
        total_break_hours=total_break_hours,
        effective_hours=effective_hours,
    )


def aggregate(events: Iterable[RawPunchEvent]) -> List[AttendanceRecord]:
    groups = group_events(events)
    records = [build_record(groups[key]) for key in sorted(groups)]
    logging.info(f"Aggregated {len(records)} attendance records")
    return records

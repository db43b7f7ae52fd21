"""Google Sheets (gviz JSON) payload adapter.

Turns the locale-formatted date and time cells of an attendance sheet into
ISO instants the aggregator can consume. Columns are, in order: Date, Time,
Employee_ID, Employee_Name, Employee_Email_ID, Position, Punch_In_or_Out.
"""
import json
import logging
import re
from datetime import date, datetime, timedelta, timezone
from typing import Any, List, Optional, Tuple

from models.schema import RawPunchEvent

SHEET_EPOCH = date(1899, 12, 30)
GVIZ_DATE = re.compile(r"^Date\((\d+),\s*(\d+),\s*(\d+)")


class SheetParseError(ValueError):
    """Raised when the payload itself is not gviz JSON."""


def parse_sheet_date(value: Any) -> Optional[date]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        try:
            return SHEET_EPOCH + timedelta(days=int(value // 1))
        except (ValueError, OverflowError):
            return None
    match = GVIZ_DATE.match(str(value).strip())
    if match:
        year, month, day = (int(part) for part in match.groups())
        try:
            # gviz months are zero-based
            return date(year, month + 1, day)
        except ValueError:
            return None
    return None


def parse_time_of_day(value: Any) -> Optional[Tuple[int, int]]:
    """Parse "03:44 PM", "03.44 PM" or "15:44" into (hour, minute)."""
    if isinstance(value, list) and len(value) >= 2:
        try:
            hours, minutes = int(value[0]), int(value[1])
        except (TypeError, ValueError):
            return None
    else:
        parts = str(value).strip().split()
        if not parts:
            return None
        clock = parts[0]
        period = parts[1].upper() if len(parts) > 1 else None
        pieces = clock.split(".") if "." in clock else clock.split(":")
        if len(pieces) < 2:
            return None
        try:
            hours, minutes = int(pieces[0]), int(pieces[1])
        except ValueError:
            return None
        if period == "PM" and hours != 12:
            hours += 12
        elif period == "AM" and hours == 12:
            hours = 0
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        return None
    return hours, minutes


def _cell(cols: List[Any], index: int) -> Any:
    if index >= len(cols) or not isinstance(cols[index], dict):
        return None
    return cols[index].get("v")


def _text(value: Any) -> str:
    if value is None:
        return ""
    # numeric cells arrive as floats, 1001.0 is the id "1001"
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def parse_sheet_row(row: dict) -> Optional[RawPunchEvent]:
    cols = row.get("c")
    if not isinstance(cols, list):
        cols = []
    date_value = _cell(cols, 0)
    time_value = _cell(cols, 1)
    if date_value is None or time_value is None:
        logging.warning(f"Missing date or time value: date={date_value!r} time={time_value!r}")
        return None

    day = parse_sheet_date(date_value)
    clock = parse_time_of_day(time_value)
    if day is None or clock is None:
        logging.warning(f"Unparsable date/time: date={date_value!r} time={time_value!r}")
        return None

    instant = datetime(day.year, day.month, day.day, clock[0], clock[1], tzinfo=timezone.utc)
    event = RawPunchEvent(
        employee_id=_text(_cell(cols, 2)),
        employee_name=_text(_cell(cols, 3)),
        email=_text(_cell(cols, 4)),
        position=_text(_cell(cols, 5)),
        punch_type=_text(_cell(cols, 6)),
        timestamp=instant.isoformat().replace("+00:00", "Z"),
    )
    if not event.employee_id:
        logging.warning(f"Row without employee id at {event.timestamp}")
        return None
    return event


def parse_sheet_json(text: str) -> List[RawPunchEvent]:
    start, end = text.find("{"), text.rfind("}")
    if start == -1 or end < start:
        raise SheetParseError("No JSON object in sheet response")
    try:
        data = json.loads(text[start:end + 1])
    except json.JSONDecodeError as exc:
        raise SheetParseError(f"Invalid sheet JSON: {exc}") from exc

    table = data.get("table") if isinstance(data, dict) else None
    if not isinstance(table, dict) or not isinstance(table.get("rows"), list):
        logging.warning("Invalid Google Sheets data format")
        return []

    events = []
    for row in table["rows"]:
        if not isinstance(row, dict):
            logging.warning(f"Skipping malformed sheet row: {row!r}")
            continue
        event = parse_sheet_row(row)
        if event is not None:
            events.append(event)
    logging.info(f"Parsed {len(events)} punch events from {len(table['rows'])} sheet rows")
    return events

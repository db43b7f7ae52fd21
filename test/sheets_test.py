import json
from datetime import date

import pytest

from utils.sheets import SheetParseError, parse_sheet_date, parse_sheet_json, parse_time_of_day


def cells(*values):
    return {"c": [None if v is None else {"v": v} for v in values]}


def gviz(rows):
    body = json.dumps({"version": "0.6", "status": "ok", "table": {"cols": [], "rows": rows}})
    return "/*O_o*/\ngoogle.visualization.Query.setResponse(" + body + ");"


def test_parse_sheet_json():
    text = gviz([
        cells(45352, "09:00 AM", "EMP001", "John Doe", "john.doe@example.com", "Engineer", "Punch In"),
        cells(45352, "05.30 PM", "EMP001", "John Doe", "john.doe@example.com", "Engineer", "Punch Out"),
    ])

    events = parse_sheet_json(text)

    assert [e.timestamp for e in events] == ["2024-03-01T09:00:00Z", "2024-03-01T17:30:00Z"]
    assert [e.punch_type for e in events] == ["IN", "OUT"]
    assert events[0].employee_id == "EMP001"
    assert events[0].email == "john.doe@example.com"
    assert events[0].position == "Engineer"


def test_bad_rows_are_dropped():
    text = gviz([
        cells(45352, None, "EMP001", "John Doe", "", "", "IN"),
        cells(45352, "nonsense", "EMP001", "John Doe", "", "", "IN"),
        cells(45352, "09:00 AM", None, "Nobody", "", "", "IN"),
        cells(45352, "10:00 AM", 42, "Numeric Id", "", "", "in"),
        cells(45352, "11:00 AM", 1001.0, "Float Id", "", "", "in"),
    ])

    events = parse_sheet_json(text)

    assert [e.employee_id for e in events] == ["42", "1001"]
    assert events[0].timestamp == "2024-03-01T10:00:00Z"


def test_malformed_rows_and_cells_do_not_abort_batch():
    good = cells(45352, "09:00 AM", "EMP001", "John Doe", "", "", "IN")
    later = cells(45352, "05:00 PM", "EMP001", "John Doe", "", "", "OUT")
    text = gviz([
        good,
        ["junk"],
        None,
        {"c": "not a list"},
        {"c": ["09:00", {"v": "09:00 AM"}, {"v": "EMP002"}]},
        {"c": [{"v": 45352}, {"v": ["x", "y"]}, {"v": "EMP003"}]},
        later,
    ])

    events = parse_sheet_json(text)

    assert [e.timestamp for e in events] == ["2024-03-01T09:00:00Z", "2024-03-01T17:00:00Z"]


@pytest.mark.parametrize("table", ["rows", ["rows"], 3])
def test_non_object_table_returns_empty_list(table):
    assert parse_sheet_json(json.dumps({"table": table})) == []


def test_missing_table_returns_empty_list():
    assert parse_sheet_json('setResponse({"status": "error"});') == []


@pytest.mark.parametrize("text", ["", "no json here", "setResponse({not json});"])
def test_unparsable_payload_raises(text):
    with pytest.raises(SheetParseError):
        parse_sheet_json(text)


@pytest.mark.parametrize("value, expected", [
    ("09:00 AM", (9, 0)),
    ("03.44 PM", (15, 44)),
    ("12:15 AM", (0, 15)),
    ("12:30 PM", (12, 30)),
    ("13:05", (13, 5)),
    ([9, 30, 0, 0], (9, 30)),
    ("25:00", None),
    ("9 AM", None),
    ("abc", None),
])
def test_parse_time_of_day(value, expected):
    assert parse_time_of_day(value) == expected


def test_parse_sheet_date():
    assert parse_sheet_date(45352) == date(2024, 3, 1)
    assert parse_sheet_date(45352.75) == date(2024, 3, 1)
    assert parse_sheet_date("Date(2024,2,1)") == date(2024, 3, 1)
    assert parse_sheet_date("Date(2024,12,1)") is None
    assert parse_sheet_date("yesterday") is None

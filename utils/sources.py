import logging
from typing import Any, Iterable, List, Optional

import requests
from pydantic import ValidationError

from models.schema import RawPunchEvent, SourceConfig
from utils.helper import get_all_punches
from utils.sample_data import get_sample_events
from utils.sheets import SheetParseError, parse_sheet_json

SHEET_URL = "https://docs.google.com/spreadsheets/d/{sheet_id}/gviz/tq?tqx=out:json"


class SourceError(Exception):
    """Punch events could not be fetched; distinct from an empty result."""


def rows_to_events(rows: Iterable[Any]) -> List[RawPunchEvent]:
    """Map JSON rows (script output or relational table rows) to punch events.

    Rows that are not objects or fail validation are dropped. A missing
    timestamp stays empty so the aggregator filters the row.
    """
    events = []
    for row in rows:
        if not isinstance(row, dict):
            logging.warning(f"Skipping non-object row: {row!r}")
            continue
        try:
            events.append(RawPunchEvent.model_validate(row))
        except ValidationError as exc:
            logging.warning(f"Skipping invalid row {row!r}: {exc}")
    return events


def _get(url: str, timeout: float) -> requests.Response:
    logging.info(f"Fetching punch events from {url}")
    try:
        response = requests.get(url, timeout=timeout)
    except requests.RequestException as exc:
        raise SourceError(f"Request to {url} failed: {exc}") from exc
    if not response.ok:
        raise SourceError(f"Failed to fetch attendance data: {response.status_code} {response.reason}")
    return response


class SheetSource:
    def __init__(self, sheet_id: str, timeout: float = 10.0):
        self.sheet_id = sheet_id
        self.timeout = timeout

    @property
    def url(self) -> str:
        return SHEET_URL.format(sheet_id=self.sheet_id)

    def fetch(self) -> List[RawPunchEvent]:
        response = _get(self.url, self.timeout)
        try:
            return parse_sheet_json(response.text)
        except SheetParseError as exc:
            raise SourceError(str(exc)) from exc


class ScriptSource:
    def __init__(self, url: str, timeout: float = 10.0):
        self.url = url
        self.timeout = timeout

    def fetch(self) -> List[RawPunchEvent]:
        response = _get(self.url, self.timeout)
        try:
            data = response.json()
        except ValueError as exc:
            raise SourceError(f"Invalid JSON from script: {exc}") from exc
        if not isinstance(data, list):
            raise SourceError("Invalid data format from script")
        return rows_to_events(data)


class StoreSource:
    def fetch(self) -> List[RawPunchEvent]:
        return get_all_punches()


class SampleSource:
    def fetch(self) -> List[RawPunchEvent]:
        return get_sample_events()


def source_from_config(config: Optional[SourceConfig]):
    config = config or SourceConfig()
    if config.sheet_id:
        return SheetSource(config.sheet_id, timeout=config.request_timeout)
    if config.script_url:
        return ScriptSource(config.script_url, timeout=config.request_timeout)
    if config.use_sample_data:
        return SampleSource()
    return StoreSource()

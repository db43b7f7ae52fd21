import logging
import threading
from datetime import date
from typing import Callable, Iterable, List, Optional

from aggregator import aggregate
from models.schema import AttendanceRecord, SourceConfig
from utils.sources import SourceError, source_from_config
import views

WATCHED_EVENTS = ("INSERT", "UPDATE", "DELETE")

Listener = Callable[[List[AttendanceRecord]], None]


class AttendanceService:
    """Fetches punch events, aggregates them and keeps the latest result.

    Every refresh is a full re-fetch and recompute. Refreshes are numbered;
    a result that finishes after a newer one has been applied is discarded.
    """

    def __init__(self, config: Optional[SourceConfig] = None, source=None,
                 tables: Iterable[str] = ("attendance",), events: Iterable[str] = WATCHED_EVENTS):
        self.config = config or SourceConfig()
        self._source = source or source_from_config(self.config)
        self._tables = set(tables)
        self._events = set(events)
        self._listeners: List[Listener] = []
        self._lock = threading.Lock()
        self._generation = 0
        self._applied = 0
        self._records: List[AttendanceRecord] = []
        self.last_error: Optional[SourceError] = None

    @property
    def source(self):
        return self._source

    def set_sheet_id(self, sheet_id: str) -> None:
        self.config.set_sheet_id(sheet_id)
        self._source = source_from_config(self.config)

    def set_script_url(self, url: str) -> None:
        self.config.set_script_url(url)
        self._source = source_from_config(self.config)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def refresh(self) -> List[AttendanceRecord]:
        with self._lock:
            self._generation += 1
            generation = self._generation

        try:
            events = self._source.fetch()
        except SourceError as exc:
            logging.error(f"Error fetching attendance data: {exc}")
            with self._lock:
                if generation >= self._applied:
                    self.last_error = exc
            raise

        records = aggregate(events)
        with self._lock:
            if generation < self._applied:
                logging.warning(f"Discarding stale refresh {generation}, {self._applied} already applied")
                return list(self._records)
            self._applied = generation
            self._records = records
            self.last_error = None

        self._notify(records)
        return list(records)

    def notify_change(self, event_type: str, table: str = "attendance") -> bool:
        """Re-run the aggregation for a watched change notification."""
        if table not in self._tables or event_type.upper() not in self._events:
            logging.debug(f"Ignoring {event_type} on {table}")
            return False
        self.refresh()
        return True

    def records(self, email: Optional[str] = None, month: Optional[str] = None,
                employee_id: Optional[str] = None, day: Optional[date] = None) -> List[AttendanceRecord]:
        result = list(self._records)
        if email:
            result = views.filter_by_email(result, email)
        if month:
            result = views.filter_by_month(result, month)
        if employee_id:
            result = views.filter_by_employee(result, employee_id)
        if day:
            result = views.filter_by_date(result, day)
        return views.most_recent_first(result)

    def _notify(self, records: List[AttendanceRecord]) -> None:
        for listener in list(self._listeners):
            try:
                listener(list(records))
            except Exception:
                logging.exception(f"Attendance listener {listener!r} failed")

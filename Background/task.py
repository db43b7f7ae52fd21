import logging
from typing import List, Optional

from fastapi import BackgroundTasks, FastAPI, HTTPException

from models.schema import AttendanceRecord, EmployeeSummary, RawPunchEvent, RefreshRequest, SourceConfig
from service import AttendanceService
from utils.helper import insert_punch
from utils.sources import SourceError
import views

app = FastAPI()
service = AttendanceService(SourceConfig.from_env())


def run_refresh():
    logging.info("Recomputing attendance records")
    try:
        records = service.refresh()
    except SourceError as exc:
        logging.error(f"Background refresh failed: {exc}")
        return
    logging.info(f"Attendance refresh completed with {len(records)} records.")


@app.post("/punch")
def receive_punch(event: RawPunchEvent, background_tasks: BackgroundTasks):
    insert_punch(event)
    background_tasks.add_task(run_refresh)
    return {"status": "Punch received, processing in background."}


@app.get("/attendance", response_model=List[AttendanceRecord])
def list_attendance(email: Optional[str] = None, month: Optional[str] = None, employee_id: Optional[str] = None):
    return service.records(email=email, month=month, employee_id=employee_id)


@app.get("/attendance/{employee_id}/summary", response_model=EmployeeSummary)
def employee_summary(employee_id: str):
    summary = views.summarize_employee(service.records(), employee_id)
    if summary is None:
        raise HTTPException(status_code=404, detail=f"No attendance records for {employee_id}")
    return summary


@app.post("/attendance/refresh")
def refresh_attendance(change: RefreshRequest):
    try:
        refreshed = service.notify_change(change.event_type, change.table)
    except SourceError as exc:
        raise HTTPException(status_code=502, detail=str(exc))
    return {"refreshed": refreshed, "records": len(service.records())}

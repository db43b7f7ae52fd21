import os
from typing import List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class RawPunchEvent(BaseModel):
    """One physical clock action as delivered by an event source.

    punch_type is carried for display and audit only; aggregation infers
    check-in, breaks and check-out from position in the sorted day.
    """

    employee_id: str = Field(default="", validation_alias=AliasChoices("employee_id", "employeeId"))
    employee_name: str = Field(default="", validation_alias=AliasChoices("employee_name", "employeeName"))
    email: str = Field(default="", validation_alias=AliasChoices("email", "emailId", "email_id"))
    position: str = ""
    timestamp: str = ""
    punch_type: Literal["IN", "OUT"] = Field(default="IN", validation_alias=AliasChoices("punch_type", "punchType"))

    @field_validator("employee_id", "employee_name", "email", "position", "timestamp", mode="before")
    @classmethod
    def _text(cls, value):
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("punch_type", mode="before")
    @classmethod
    def _punch_type(cls, value):
        return "OUT" if value is not None and "OUT" in str(value).upper() else "IN"


class AttendanceRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    employee_id: str = Field(alias="employeeId")
    employee_name: str = Field(alias="employeeName")
    email: str = ""
    date: str
    check_in: str = Field(alias="checkIn")
    check_out: str = Field(alias="checkOut")
    breaks: List[str] = []
    total_break_hours: float = Field(alias="totalBreakHours")
    effective_hours: float = Field(alias="effectiveHours")


class EmployeeSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    employee_id: str = Field(alias="employeeId")
    employee_name: str = Field(default="", alias="employeeName")
    days_recorded: int = Field(default=0, alias="daysRecorded")
    full_days: int = Field(default=0, alias="fullDays")
    partial_days: int = Field(default=0, alias="partialDays")
    absent_days: int = Field(default=0, alias="absentDays")
    total_effective_hours: float = Field(default=0.0, alias="totalEffectiveHours")
    average_effective_hours: float = Field(default=0.0, alias="averageEffectiveHours")
    total_break_hours: float = Field(default=0.0, alias="totalBreakHours")


class SourceConfig(BaseModel):
    """Where punch events come from. A sheet id and a script URL are exclusive."""

    sheet_id: Optional[str] = None
    script_url: Optional[str] = None
    request_timeout: float = 10.0
    use_sample_data: bool = False

    def set_sheet_id(self, sheet_id: str) -> None:
        self.sheet_id = sheet_id or None
        self.script_url = None

    def set_script_url(self, url: str) -> None:
        self.script_url = url or None
        self.sheet_id = None

    @classmethod
    def from_env(cls) -> "SourceConfig":
        config = cls(
            request_timeout=float(os.getenv("ATTENDANCE_REQUEST_TIMEOUT", "10")),
            use_sample_data=os.getenv("ATTENDANCE_USE_SAMPLE_DATA", "0").lower() in {"1", "true", "yes"},
        )
        sheet_id = os.getenv("ATTENDANCE_SHEET_ID")
        script_url = os.getenv("ATTENDANCE_SCRIPT_URL")
        if sheet_id:
            config.set_sheet_id(sheet_id)
        elif script_url:
            config.set_script_url(script_url)
        return config


class RefreshRequest(BaseModel):
    event_type: Literal["INSERT", "UPDATE", "DELETE"] = "UPDATE"
    table: str = "attendance"

from pydantic import Field, field_validator
from typing import List, Optional
from datetime import date, datetime
from teams_timesheet.schemas.base import ApiModel


class TimesheetDTO(ApiModel):
    id: Optional[str] = None
    user_id: str
    task_id: str
    timesheet_date: date
    hours: float
    status: int
    manager_comments: Optional[str] = None
    submitted_on: Optional[datetime] = None
    created_on: Optional[datetime] = None
    last_modified_on: Optional[datetime] = None


class TaskTimesheet(ApiModel):
    project_id: str
    project_title: str
    task_id: str
    task_title: str
    hours: float = 0
    status: int = 0
    manager_comments: Optional[str] = None
    timesheet_id: Optional[str] = None


class UserTimesheet(ApiModel):
    timesheet_date: date
    timesheet_details: List[TaskTimesheet] = []


class TaskHours(ApiModel):
    task_id: str
    hours: float = Field(ge=0, le=24)


class DayTimesheet(ApiModel):
    timesheet_date: date
    timesheet_details: List[TaskHours]


class SaveTimesheetsRequest(ApiModel):
    client_local_current_date: date
    timesheets: List[DayTimesheet]


class SubmitTimesheetsRequest(ApiModel):
    client_local_current_date: date
    timesheet_dates: List[date]


class DuplicateEffortsRequest(ApiModel):
    source_date: date
    target_dates: List[date]
    client_local_current_date: datetime

    @field_validator("target_dates")
    @classmethod
    def target_dates_required(cls, value: List[date]) -> List[date]:
        if not value:
            raise ValueError("At least one target date is required")
        return value


class FrozenDatesRequest(ApiModel):
    client_local_current_date: date
    timesheet_dates: List[date]


class RequestApproval(ApiModel):
    timesheet_id: str
    manager_comments: Optional[str] = None


class SubmittedRequest(ApiModel):
    user_id: str
    timesheet_date: date
    status: int
    total_hours: float
    project_titles: List[str]
    submitted_timesheet_ids: List[str]

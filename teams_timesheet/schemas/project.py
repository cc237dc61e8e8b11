from pydantic import Field, model_validator
from typing import List, Optional
from datetime import date
from teams_timesheet.schemas.base import ApiModel


class MemberCreate(ApiModel):
    user_id: str
    is_billable: bool = True


class TaskCreate(ApiModel):
    title: str = Field(min_length=1, max_length=200)
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class ProjectCreate(ApiModel):
    title: str = Field(min_length=1, max_length=200)
    client_name: str = Field(min_length=1, max_length=200)
    billable_hours: float = Field(ge=0)
    non_billable_hours: float = Field(ge=0)
    start_date: date
    end_date: date
    members: List[MemberCreate] = []
    tasks: List[TaskCreate] = []

    @model_validator(mode="after")
    def check_date_ranges(self):
        if self.end_date < self.start_date:
            raise ValueError("Project end date must be on or after its start date")
        for task in self.tasks:
            start = task.start_date or self.start_date
            end = task.end_date or self.end_date
            if start < self.start_date or end > self.end_date or end < start:
                raise ValueError(f"Task '{task.title}' must fall within the project dates")
        return self


class MemberDTO(ApiModel):
    id: str
    project_id: str
    user_id: str
    is_billable: bool


class TaskDTO(ApiModel):
    id: str
    project_id: str
    title: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class ProjectDTO(ApiModel):
    id: str
    title: str
    client_name: str
    billable_hours: float
    non_billable_hours: float
    start_date: date
    end_date: date
    members: List[MemberDTO] = []
    tasks: List[TaskDTO] = []


class ProjectUtilization(ApiModel):
    id: str
    title: str
    billable_hours: float
    non_billable_hours: float
    billable_utilized_hours: float
    non_billable_utilized_hours: float
    not_utilized_hours: float
    project_start_date: date
    project_end_date: date

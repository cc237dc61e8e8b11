from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session
from typing import Optional
from teams_timesheet.config import get_settings
from teams_timesheet.database import get_db
from teams_timesheet.repositories.accessors import RepositoryAccessors
from teams_timesheet.services.graph_users_service import GraphUsersService
from teams_timesheet.services.project_service import ProjectService
from teams_timesheet.services.reminder_service import ReminderService
from teams_timesheet.services.timesheet_service import TimesheetService


def get_current_user_id(x_user_object_id: Optional[str] = Header(None)) -> str:
    """Object id of the caller, set by the authenticating gateway in front of the API."""
    if not x_user_object_id:
        raise HTTPException(status_code=401, detail="Missing X-User-Object-Id header")
    return x_user_object_id


def get_access_token(authorization: Optional[str] = Header(None)) -> str:
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise HTTPException(status_code=401, detail="A bearer token is required")
    return token


def get_repository_accessors(db: Session = Depends(get_db)) -> RepositoryAccessors:
    return RepositoryAccessors(db)


def get_timesheet_service(accessors: RepositoryAccessors = Depends(get_repository_accessors)) -> TimesheetService:
    return TimesheetService(accessors)


def get_project_service(accessors: RepositoryAccessors = Depends(get_repository_accessors)) -> ProjectService:
    return ProjectService(accessors)


def get_graph_users_service(access_token: str = Depends(get_access_token)):
    service = GraphUsersService(access_token)
    try:
        yield service
    finally:
        service.close()


def get_reminder_service(accessors: RepositoryAccessors = Depends(get_repository_accessors)):
    service = ReminderService(accessors, get_settings().teams_webhook_url)
    try:
        yield service
    finally:
        service.client.close()

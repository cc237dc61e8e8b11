from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List
from datetime import date
from teams_timesheet.routers.dependencies import get_current_user_id, get_project_service
from teams_timesheet.schemas.project import MemberCreate, ProjectCreate, ProjectDTO, ProjectUtilization, TaskCreate
from teams_timesheet.services.project_service import ProjectService
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/projects", tags=["projects"])


def _not_found(project_id: str) -> HTTPException:
    logger.warning(f"Project {project_id} not found")
    return HTTPException(status_code=404, detail=f"Project {project_id} not found")


@router.post("", response_model=ProjectDTO, status_code=201)
async def create_project(
    project: ProjectCreate,
    user_id: str = Depends(get_current_user_id),
    service: ProjectService = Depends(get_project_service)
):
    return service.create_project(project, user_id)


@router.get("/{project_id}", response_model=ProjectDTO)
async def get_project(project_id: str, service: ProjectService = Depends(get_project_service)):
    project = service.get_project(project_id)
    if project is None:
        raise _not_found(project_id)
    return project


@router.post("/{project_id}/members", response_model=ProjectDTO)
async def add_members(
    project_id: str,
    members: List[MemberCreate],
    service: ProjectService = Depends(get_project_service)
):
    project = service.add_members(project_id, members)
    if project is None:
        raise _not_found(project_id)
    return project


@router.post("/{project_id}/tasks", response_model=ProjectDTO)
async def add_tasks(
    project_id: str,
    tasks: List[TaskCreate],
    service: ProjectService = Depends(get_project_service)
):
    try:
        project = service.add_tasks(project_id, tasks)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if project is None:
        raise _not_found(project_id)
    return project


@router.get("/{project_id}/utilization", response_model=ProjectUtilization)
async def get_project_utilization(
    project_id: str,
    start_date: date = Query(alias="startDate"),
    end_date: date = Query(alias="endDate"),
    service: ProjectService = Depends(get_project_service)
):
    try:
        utilization = service.get_project_utilization(project_id, start_date, end_date)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if utilization is None:
        raise _not_found(project_id)
    return utilization

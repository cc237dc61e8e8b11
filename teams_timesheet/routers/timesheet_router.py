from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List
from datetime import date
from teams_timesheet.mappers.timesheet_mapper import TimesheetMapper
from teams_timesheet.routers.dependencies import get_current_user_id, get_timesheet_service
from teams_timesheet.schemas.timesheet import (
    DuplicateEffortsRequest,
    FrozenDatesRequest,
    SaveTimesheetsRequest,
    SubmitTimesheetsRequest,
    TimesheetDTO,
    UserTimesheet,
)
from teams_timesheet.services.timesheet_service import TimesheetService
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/timesheets", tags=["timesheets"])


@router.get("", response_model=List[UserTimesheet])
async def get_timesheets(
    start_date: date = Query(alias="startDate"),
    end_date: date = Query(alias="endDate"),
    user_id: str = Depends(get_current_user_id),
    service: TimesheetService = Depends(get_timesheet_service)
):
    logger.info(f"Get timesheets- initiated for user {user_id} ({start_date} to {end_date})")
    try:
        timesheets = service.get_timesheets(start_date, end_date, user_id)
    except ValueError as e:
        logger.warning(f"Get timesheets- failed: {str(e)}")
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"Get timesheets- succeeded with {len(timesheets)} days")
    return timesheets


@router.post("", response_model=List[TimesheetDTO])
async def save_timesheets(
    request: SaveTimesheetsRequest,
    user_id: str = Depends(get_current_user_id),
    service: TimesheetService = Depends(get_timesheet_service)
):
    logger.info(f"Save timesheets- initiated for user {user_id}")
    try:
        saved = service.save_timesheets(user_id, request.timesheets, request.client_local_current_date)
    except ValueError as e:
        logger.warning(f"Save timesheets- failed: {str(e)}")
        raise HTTPException(status_code=400, detail=str(e))

    return [TimesheetMapper.map_for_view_model(timesheet) for timesheet in saved]


@router.post("/submit", response_model=List[TimesheetDTO])
async def submit_timesheets(
    request: SubmitTimesheetsRequest,
    user_id: str = Depends(get_current_user_id),
    service: TimesheetService = Depends(get_timesheet_service)
):
    logger.info(f"Submit timesheets- initiated for user {user_id}")
    try:
        submitted = service.submit_timesheets(user_id, request.timesheet_dates, request.client_local_current_date)
    except ValueError as e:
        logger.warning(f"Submit timesheets- failed: {str(e)}")
        raise HTTPException(status_code=400, detail=str(e))

    if not submitted:
        raise HTTPException(status_code=400, detail="No open timesheets with logged hours on the given dates")
    return [TimesheetMapper.map_for_view_model(timesheet) for timesheet in submitted]


@router.post("/duplicate", response_model=List[TimesheetDTO])
async def duplicate_efforts(
    request: DuplicateEffortsRequest,
    user_id: str = Depends(get_current_user_id),
    service: TimesheetService = Depends(get_timesheet_service)
):
    logger.info(f"Duplicate efforts- initiated for user {user_id} from {request.source_date}")
    try:
        target_dates = service.get_duplicable_target_dates(
            request.target_dates, request.client_local_current_date, user_id
        )
        if not target_dates:
            raise HTTPException(status_code=400, detail="All target dates are frozen or already have efforts")

        duplicated = service.duplicate_efforts(
            request.source_date, target_dates, request.client_local_current_date, user_id
        )
    except ValueError as e:
        logger.warning(f"Duplicate efforts- failed: {str(e)}")
        raise HTTPException(status_code=400, detail=str(e))

    if duplicated:
        service.repository_accessors.save_changes()
    logger.info(f"Duplicate efforts- succeeded with {len(duplicated)} new entries")
    return [TimesheetMapper.map_for_view_model(timesheet) for timesheet in duplicated]


@router.post("/not-yet-frozen-dates", response_model=List[date])
async def get_not_yet_frozen_dates(
    request: FrozenDatesRequest,
    service: TimesheetService = Depends(get_timesheet_service)
):
    return service.get_not_yet_frozen_timesheet_dates(request.timesheet_dates, request.client_local_current_date)

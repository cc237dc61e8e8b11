from fastapi import APIRouter, Depends, HTTPException, Query, Response
from typing import List
from teams_timesheet.models.timesheet import TimesheetStatus
from teams_timesheet.routers.dependencies import get_current_user_id, get_graph_users_service, get_timesheet_service
from teams_timesheet.schemas.timesheet import RequestApproval, SubmittedRequest
from teams_timesheet.services.graph_users_service import UsersDirectory
from teams_timesheet.services.timesheet_service import ApprovalOutcome, TimesheetService
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/manager/timesheets", tags=["manager"])


@router.get("", response_model=List[SubmittedRequest])
async def get_timesheets_by_status(
    status: int = Query(int(TimesheetStatus.SUBMITTED)),
    manager_id: str = Depends(get_current_user_id),
    service: TimesheetService = Depends(get_timesheet_service),
    graph: UsersDirectory = Depends(get_graph_users_service)
):
    try:
        timesheet_status = TimesheetStatus(status)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown timesheet status {status}")

    service.refresh_reportees(manager_id, graph)
    requests = service.get_timesheets_by_status(manager_id, timesheet_status)
    logger.info(f"Get timesheets by status- {len(requests)} {timesheet_status.name} requests for manager {manager_id}")
    return requests


def _transition(
    approvals: List[RequestApproval],
    status: TimesheetStatus,
    manager_id: str,
    service: TimesheetService,
    graph: UsersDirectory
) -> Response:
    if not approvals:
        raise HTTPException(status_code=400, detail="At least one timesheet is required")

    service.refresh_reportees(manager_id, graph)
    requested_ids = {approval.timesheet_id for approval in approvals}
    timesheets = service.get_submitted_timesheets_by_ids(manager_id, requested_ids)
    if len(timesheets) != len(requested_ids):
        logger.warning(f"Manager {manager_id} asked to {status.name.lower()} timesheets that are not pending with them")
        raise HTTPException(status_code=400, detail="Some timesheets are not submitted to you for approval")

    outcome = service.apply_status_transition(timesheets, approvals, status)
    if outcome is ApprovalOutcome.FAILED:
        logger.error(f"❌ Failed to mark {len(timesheets)} timesheets as {status.name}")
        raise HTTPException(status_code=500, detail="Unable to update the timesheets")

    return Response(status_code=204)


@router.post("/approve")
async def approve_timesheets(
    approvals: List[RequestApproval],
    manager_id: str = Depends(get_current_user_id),
    service: TimesheetService = Depends(get_timesheet_service),
    graph: UsersDirectory = Depends(get_graph_users_service)
):
    return _transition(approvals, TimesheetStatus.APPROVED, manager_id, service, graph)


@router.post("/reject")
async def reject_timesheets(
    approvals: List[RequestApproval],
    manager_id: str = Depends(get_current_user_id),
    service: TimesheetService = Depends(get_timesheet_service),
    graph: UsersDirectory = Depends(get_graph_users_service)
):
    return _transition(approvals, TimesheetStatus.REJECTED, manager_id, service, graph)

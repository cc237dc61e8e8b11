from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response
from typing import List, Optional
from teams_timesheet.routers.dependencies import get_current_user_id, get_graph_users_service, get_reminder_service
from teams_timesheet.schemas.base import ApiModel
from teams_timesheet.schemas.user import ReporteeDTO, UserDTO
from teams_timesheet.services.graph_users_service import GraphUsersService
from teams_timesheet.services.reminder_service import ReminderService
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["users"])


class ConversationReference(ApiModel):
    conversation_id: str
    service_url: str


@router.get("/me/reportees", response_model=List[ReporteeDTO])
async def get_my_reportees(
    search: Optional[str] = Query(None),
    graph: GraphUsersService = Depends(get_graph_users_service)
):
    logger.info("Get reportees- The HTTP GET call to get reportees has been initiated.")
    try:
        reportees = graph.get_my_reportees(search)
    except Exception:
        logger.exception("Error occurred while fetching reportees.")
        raise

    return [
        ReporteeDTO(id=user["id"], display_name=user.get("displayName"), user_principal_name=user.get("userPrincipalName"))
        for user in reportees
    ]


@router.get("/me/manager")
async def get_manager(graph: GraphUsersService = Depends(get_graph_users_service)):
    logger.info("Get manager- The HTTP GET call to get manager has been initiated.")
    try:
        return graph.get_manager()
    except Exception:
        logger.exception("Error occurred while fetching manager details.")
        raise


@router.post("/users", response_model=List[UserDTO])
async def get_users_profile(
    user_ids: List[str] = Body(...),
    graph: GraphUsersService = Depends(get_graph_users_service)
):
    if not user_ids:
        logger.error("User Id list cannot be null or empty.")
        raise HTTPException(status_code=400, detail="User Id list cannot be null or empty.")

    try:
        profiles = graph.get_users(user_ids)
    except Exception:
        logger.exception("Error occurred while fetching users profiles.")
        raise

    if not profiles:
        return Response(status_code=204)
    return [UserDTO(id=user_id, display_name=profile.get("displayName")) for user_id, profile in profiles.items()]


@router.put("/me/conversation", status_code=204)
async def register_conversation(
    reference: ConversationReference,
    user_id: str = Depends(get_current_user_id),
    reminders: ReminderService = Depends(get_reminder_service)
):
    """Called by the bot host when a user installs the app, so reminders can reach them."""
    try:
        reminders.register_conversation(user_id, reference.conversation_id, reference.service_url)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return Response(status_code=204)

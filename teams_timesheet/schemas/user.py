from typing import Optional
from teams_timesheet.schemas.base import ApiModel


class ReporteeDTO(ApiModel):
    id: str
    display_name: Optional[str] = None
    user_principal_name: Optional[str] = None


class UserDTO(ApiModel):
    id: str
    display_name: Optional[str] = None

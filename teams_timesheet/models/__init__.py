from teams_timesheet.models.timesheet import Timesheet, TimesheetStatus
from teams_timesheet.models.project import Project, Member, Task
from teams_timesheet.models.user import User
from teams_timesheet.models.conversation import Conversation

__all__ = ["Timesheet", "TimesheetStatus", "Project", "Member", "Task", "User", "Conversation"]

from datetime import date
from typing import List, Optional
from teams_timesheet.mappers.project_mapper import ProjectMapper
from teams_timesheet.models.project import Member, Project, Task
from teams_timesheet.repositories.accessors import RepositoryAccessors
from teams_timesheet.schemas.project import MemberCreate, ProjectCreate, ProjectDTO, ProjectUtilization, TaskCreate
import logging

logger = logging.getLogger(__name__)


class ProjectService:
    def __init__(self, repository_accessors: RepositoryAccessors, project_mapper: Optional[ProjectMapper] = None):
        self.repository_accessors = repository_accessors
        self.project_mapper = project_mapper or ProjectMapper()

    def create_project(self, project: ProjectCreate, user_id: str) -> ProjectDTO:
        if not user_id:
            raise ValueError("User id is required")

        entity = self.project_mapper.map_for_create_model(project, user_id)
        self.repository_accessors.project_repository.add(entity)
        self.repository_accessors.save_changes()
        logger.info(f"✅ Created project '{entity.title}' ({entity.id}) with {len(entity.members)} members")
        return self.project_mapper.map_for_view_model(entity)

    def get_project(self, project_id: str) -> Optional[ProjectDTO]:
        project = self.repository_accessors.project_repository.get_project(project_id)
        if project is None:
            return None
        return self.project_mapper.map_for_view_model(project)

    def add_members(self, project_id: str, members: List[MemberCreate]) -> Optional[ProjectDTO]:
        """Add members; a previously removed member is restored instead of duplicated."""
        project = self.repository_accessors.project_repository.get_project(project_id)
        if project is None:
            return None

        current = {member.user_id: member for member in project.members}
        for member in members:
            existing = current.get(member.user_id)
            if existing is not None:
                existing.is_removed = False
                existing.is_billable = member.is_billable
            else:
                project.members.append(Member(user_id=member.user_id, is_billable=member.is_billable))

        self.repository_accessors.save_changes()
        return self.project_mapper.map_for_view_model(project)

    def add_tasks(self, project_id: str, tasks: List[TaskCreate]) -> Optional[ProjectDTO]:
        project = self.repository_accessors.project_repository.get_project(project_id)
        if project is None:
            return None

        for task in tasks:
            start = task.start_date or project.start_date
            end = task.end_date or project.end_date
            if start < project.start_date or end > project.end_date or end < start:
                raise ValueError(f"Task '{task.title}' must fall within the project dates")
            project.tasks.append(Task(title=task.title, start_date=start, end_date=end))

        self.repository_accessors.save_changes()
        return self.project_mapper.map_for_view_model(project)

    def get_project_utilization(self, project_id: str, start_date: date, end_date: date) -> Optional[ProjectUtilization]:
        if end_date < start_date:
            raise ValueError("End date must be on or after start date")

        project: Optional[Project] = self.repository_accessors.project_repository.get_project(project_id)
        if project is None:
            return None

        timesheets = self.repository_accessors.timesheet_repository.get_project_timesheets(project_id, start_date, end_date)
        return self.project_mapper.map_for_project_utilization_view_model(project, timesheets)

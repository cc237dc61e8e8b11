from datetime import datetime
from typing import Iterable
from teams_timesheet.models.project import Project, Member, Task
from teams_timesheet.models.timesheet import Timesheet
from teams_timesheet.schemas.project import ProjectCreate, ProjectDTO, ProjectUtilization, MemberDTO, TaskDTO


class ProjectMapper:
    @staticmethod
    def map_for_create_model(project_view_model: ProjectCreate, user_id: str) -> Project:
        if project_view_model is None:
            raise ValueError("Project details are required")

        project = Project(
            title=project_view_model.title,
            client_name=project_view_model.client_name,
            billable_hours=project_view_model.billable_hours,
            non_billable_hours=project_view_model.non_billable_hours,
            start_date=project_view_model.start_date,
            end_date=project_view_model.end_date,
            created_by=user_id,
            created_on=datetime.utcnow(),
        )
        project.members = [
            Member(user_id=member.user_id, is_billable=member.is_billable, is_removed=False)
            for member in project_view_model.members
        ]
        project.tasks = [
            Task(
                title=task.title,
                start_date=task.start_date or project_view_model.start_date,
                end_date=task.end_date or project_view_model.end_date,
                is_removed=False,
            )
            for task in project_view_model.tasks
        ]
        return project

    @staticmethod
    def map_for_view_model(project: Project) -> ProjectDTO:
        if project is None:
            raise ValueError("Project is required")

        return ProjectDTO(
            id=project.id,
            title=project.title,
            client_name=project.client_name,
            billable_hours=project.billable_hours,
            non_billable_hours=project.non_billable_hours,
            start_date=project.start_date,
            end_date=project.end_date,
            members=[MemberDTO.model_validate(member) for member in project.members if not member.is_removed],
            tasks=[TaskDTO.model_validate(task) for task in project.tasks if not task.is_removed],
        )

    @staticmethod
    def map_for_project_utilization_view_model(project: Project, timesheets: Iterable[Timesheet]) -> ProjectUtilization:
        """Split logged hours by member billability and compare them to the project budget."""
        if project is None:
            raise ValueError("Project is required")

        billable_users = {member.user_id for member in project.members if member.is_billable}
        billable_utilized = 0.0
        non_billable_utilized = 0.0
        for timesheet in timesheets:
            if timesheet.user_id in billable_users:
                billable_utilized += timesheet.hours
            else:
                non_billable_utilized += timesheet.hours

        total_hours = project.billable_hours + project.non_billable_hours
        return ProjectUtilization(
            id=project.id,
            title=project.title,
            billable_hours=project.billable_hours,
            non_billable_hours=project.non_billable_hours,
            billable_utilized_hours=billable_utilized,
            non_billable_utilized_hours=non_billable_utilized,
            not_utilized_hours=total_hours - (billable_utilized + non_billable_utilized),
            project_start_date=project.start_date,
            project_end_date=project.end_date,
        )

from sqlalchemy.orm import Session, selectinload
from typing import List, Optional
from datetime import date
from teams_timesheet.models.project import Project, Member, Task
from teams_timesheet.repositories.base import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    model = Project

    def __init__(self, db: Session):
        super().__init__(db)

    def get_projects(self, start_date: date, end_date: date, user_id: str) -> List[Project]:
        """Active projects overlapping the date range where the user is a current member."""
        return (
            self.db.query(Project)
            .options(
                selectinload(Project.members),
                selectinload(Project.tasks).selectinload(Task.member_mapping),
            )
            .join(Member, Member.project_id == Project.id)
            .filter(
                Member.user_id == user_id,
                Member.is_removed.is_(False),
                Project.is_archived.is_(False),
                Project.start_date <= end_date,
                Project.end_date >= start_date,
            )
            .order_by(Project.title)
            .distinct()
            .all()
        )

    def get_project(self, project_id: str) -> Optional[Project]:
        return (
            self.db.query(Project)
            .options(selectinload(Project.members), selectinload(Project.tasks))
            .filter(Project.id == project_id)
            .first()
        )

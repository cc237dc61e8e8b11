from sqlalchemy.orm import Session, joinedload
from typing import Dict, Iterable, List
from datetime import date
from teams_timesheet.models.timesheet import Timesheet, TimesheetStatus
from teams_timesheet.models.project import Task
from teams_timesheet.models.user import User
from teams_timesheet.repositories.base import BaseRepository


class TimesheetRepository(BaseRepository[Timesheet]):
    model = Timesheet

    def __init__(self, db: Session):
        super().__init__(db)

    def get_timesheets(self, start_date: date, end_date: date, user_id: str) -> List[Timesheet]:
        """Entries of a user between two dates (both inclusive)."""
        return (
            self.db.query(Timesheet)
            .options(joinedload(Timesheet.task).joinedload(Task.project))
            .filter(
                Timesheet.user_id == user_id,
                Timesheet.timesheet_date >= start_date,
                Timesheet.timesheet_date <= end_date,
            )
            .order_by(Timesheet.timesheet_date)
            .all()
        )

    def get_timesheets_of_users_by_status(
        self,
        user_ids: Iterable[str],
        status: TimesheetStatus
    ) -> Dict[str, List[Timesheet]]:
        user_ids = list(user_ids)
        if not user_ids:
            return {}

        entries = (
            self.db.query(Timesheet)
            .options(joinedload(Timesheet.task).joinedload(Task.project))
            .filter(
                Timesheet.user_id.in_(user_ids),
                Timesheet.status == int(status),
            )
            .order_by(Timesheet.user_id, Timesheet.timesheet_date)
            .all()
        )

        grouped: Dict[str, List[Timesheet]] = {}
        for entry in entries:
            grouped.setdefault(entry.user_id, []).append(entry)
        return grouped

    def get_submitted_timesheets_by_ids(self, manager_id: str, timesheet_ids: Iterable[str]) -> List[Timesheet]:
        """Submitted entries among the given ids that belong to the manager's reportees."""
        timesheet_ids = list(timesheet_ids)
        if not timesheet_ids:
            return []

        return (
            self.db.query(Timesheet)
            .join(User, User.id == Timesheet.user_id)
            .filter(
                User.manager_id == manager_id,
                Timesheet.id.in_(timesheet_ids),
                Timesheet.status == int(TimesheetStatus.SUBMITTED),
            )
            .all()
        )

    def get_project_timesheets(self, project_id: str, start_date: date, end_date: date) -> List[Timesheet]:
        return (
            self.db.query(Timesheet)
            .join(Task, Task.id == Timesheet.task_id)
            .filter(
                Task.project_id == project_id,
                Timesheet.timesheet_date >= start_date,
                Timesheet.timesheet_date <= end_date,
            )
            .all()
        )

    def get_user_ids_with_hours(self, start_date: date, end_date: date) -> List[str]:
        rows = (
            self.db.query(Timesheet.user_id)
            .filter(
                Timesheet.timesheet_date >= start_date,
                Timesheet.timesheet_date <= end_date,
                Timesheet.hours > 0,
            )
            .distinct()
            .all()
        )
        return [row[0] for row in rows]

"""
Timesheet rules: freeze window, duplication, day views, saving, submission
and manager approval.
"""
from datetime import date, datetime
from enum import Enum
from typing import Dict, Iterable, List, Optional, Union
from teams_timesheet.config import Settings, get_settings
from teams_timesheet.mappers.timesheet_mapper import TimesheetMapper
from teams_timesheet.models.project import Project, Task
from teams_timesheet.models.timesheet import Timesheet, TimesheetStatus
from teams_timesheet.repositories.accessors import RepositoryAccessors
from teams_timesheet.services.graph_users_service import UsersDirectory
from teams_timesheet.schemas.timesheet import (
    DayTimesheet,
    RequestApproval,
    SubmittedRequest,
    TaskTimesheet,
    UserTimesheet,
)
from teams_timesheet.utils.dates import date_range, month_start, previous_month_start, to_date, week_bounds
import logging

logger = logging.getLogger(__name__)

LOCKED_STATUSES = (int(TimesheetStatus.SUBMITTED), int(TimesheetStatus.APPROVED))
SUBMITTABLE_STATUSES = (int(TimesheetStatus.NONE), int(TimesheetStatus.REJECTED))


class ApprovalOutcome(Enum):
    APPLIED = "applied"
    NO_OP = "no_op"
    FAILED = "failed"

    @property
    def succeeded(self) -> bool:
        return self is ApprovalOutcome.APPLIED


class TimesheetService:
    def __init__(
        self,
        repository_accessors: RepositoryAccessors,
        settings: Optional[Settings] = None,
        timesheet_mapper: Optional[TimesheetMapper] = None
    ):
        self.repository_accessors = repository_accessors
        self.settings = settings or get_settings()
        self.timesheet_mapper = timesheet_mapper or TimesheetMapper()

    # Freeze window

    def is_frozen(self, timesheet_date: Union[date, datetime], current_date: Union[date, datetime]) -> bool:
        """
        A date is frozen when it lies before the previous month, or in the
        previous month once the current day-of-month has passed the freeze day.
        Dates in the current month are never frozen.
        """
        timesheet_date = to_date(timesheet_date)
        current_date = to_date(current_date)

        if timesheet_date >= month_start(current_date):
            return False
        if timesheet_date >= previous_month_start(current_date):
            return current_date.day > self.settings.timesheet_freeze_day_of_month
        return True

    def get_not_yet_frozen_timesheet_dates(
        self,
        timesheet_dates: Iterable[Union[date, datetime]],
        current_date: Union[date, datetime]
    ) -> List[date]:
        if timesheet_dates is None:
            raise ValueError("Timesheet dates are required")

        return [to_date(d) for d in timesheet_dates if not self.is_frozen(d, current_date)]

    # Range retrieval

    def get_timesheets(self, start_date: date, end_date: date, user_id: str) -> List[UserTimesheet]:
        """One view per day on which the user has an active project, tasks ordered by title."""
        if not user_id:
            raise ValueError("User id is required")
        if end_date < start_date:
            raise ValueError("End date must be on or after start date")

        projects = self.repository_accessors.project_repository.get_projects(start_date, end_date, user_id)
        if not projects:
            logger.info(f"No active projects for user {user_id} between {start_date} and {end_date}")
            return []

        entries = self.repository_accessors.timesheet_repository.get_timesheets(start_date, end_date, user_id)
        logged = {(entry.task_id, entry.timesheet_date): entry for entry in entries}

        user_timesheets = []
        for day in date_range(start_date, end_date):
            active_projects = [p for p in projects if p.start_date <= day <= p.end_date]
            if not active_projects:
                continue

            details = []
            for project in active_projects:
                for task in project.tasks:
                    if not self._is_task_assigned(task, user_id, day):
                        continue
                    entry = logged.get((task.id, day))
                    details.append(TaskTimesheet(
                        project_id=project.id,
                        project_title=project.title,
                        task_id=task.id,
                        task_title=task.title,
                        hours=entry.hours if entry else 0,
                        status=entry.status if entry else int(TimesheetStatus.NONE),
                        manager_comments=entry.manager_comments if entry else None,
                        timesheet_id=entry.id if entry else None,
                    ))

            details.sort(key=lambda detail: detail.task_title)
            user_timesheets.append(UserTimesheet(timesheet_date=day, timesheet_details=details))

        return user_timesheets

    @staticmethod
    def _is_task_assigned(task: Task, user_id: str, day: date) -> bool:
        if task.is_removed:
            return False
        if task.start_date and day < task.start_date:
            return False
        if task.end_date and day > task.end_date:
            return False
        member = task.member_mapping
        if member is not None and (member.is_removed or member.user_id != user_id):
            return False
        return True

    # Duplication

    def get_duplicable_target_dates(
        self,
        target_dates: Iterable[Union[date, datetime]],
        current_date: Union[date, datetime],
        user_id: str
    ) -> List[date]:
        """Target dates that are open for editing and hold no logged entries yet."""
        targets = list(dict.fromkeys(self.get_not_yet_frozen_timesheet_dates(target_dates, current_date)))
        if not targets:
            return []

        existing = self.repository_accessors.timesheet_repository.get_timesheets(min(targets), max(targets), user_id)
        occupied = {entry.timesheet_date for entry in existing}
        return [target for target in targets if target not in occupied]

    def duplicate_efforts(
        self,
        source_date: date,
        target_dates: Iterable[Union[date, datetime]],
        current_timestamp: datetime,
        user_id: str
    ) -> List[Timesheet]:
        """
        Copy every entry of source_date onto each target date on which its
        task is still assigned to the user.

        New entries are queued on the session; the caller commits them with
        RepositoryAccessors.save_changes(). Repeating the call duplicates again.
        """
        if not user_id:
            raise ValueError("User id is required")
        if not target_dates:
            raise ValueError("At least one target date is required")
        source_date = to_date(source_date)
        targets = list(dict.fromkeys(to_date(d) for d in target_dates))

        projects = self.repository_accessors.project_repository.get_projects(
            min(targets + [source_date]), max(targets + [source_date]), user_id
        )
        task_projects = {task.id: (task, project) for project in projects for task in project.tasks}

        source_entries = [
            entry
            for entry in self.repository_accessors.timesheet_repository.get_timesheets(source_date, source_date, user_id)
            if to_date(entry.timesheet_date) == source_date and entry.task_id in task_projects
        ]
        if not source_entries:
            logger.info(f"Nothing to duplicate: user {user_id} has no entries on {source_date}")
            return []

        duplicated = []
        skipped = 0
        for target_date in targets:
            for entry in source_entries:
                task, project = task_projects[entry.task_id]
                if not (project.start_date <= target_date <= project.end_date) \
                        or not self._is_task_assigned(task, user_id, target_date):
                    skipped += 1
                    continue
                timesheet = self.timesheet_mapper.map_for_create_model(
                    user_id=user_id,
                    task_id=entry.task_id,
                    timesheet_date=target_date,
                    hours=entry.hours,
                    created_on=current_timestamp,
                )
                self.repository_accessors.timesheet_repository.add(timesheet)
                duplicated.append(timesheet)

        if skipped:
            logger.info(f"Skipped {skipped} copies whose task is not assigned on the target date")
        logger.info(f"📋 Queued {len(duplicated)} duplicated entries for user {user_id} from {source_date}")
        return duplicated

    # Saving and submission

    def save_timesheets(
        self,
        user_id: str,
        timesheets: List[DayTimesheet],
        current_date: Union[date, datetime]
    ) -> List[Timesheet]:
        """Create or update the user's hours per (task, date) and commit."""
        if not user_id:
            raise ValueError("User id is required")
        if not timesheets:
            raise ValueError("At least one timesheet is required")

        days = [day.timesheet_date for day in timesheets]
        frozen = [d for d in days if self.is_frozen(d, current_date)]
        if frozen:
            raise ValueError(f"Timesheets are frozen for: {', '.join(str(d) for d in sorted(frozen))}")

        start_date, end_date = min(days), max(days)
        week_start, _ = week_bounds(start_date)
        _, week_end = week_bounds(end_date)

        projects = self.repository_accessors.project_repository.get_projects(start_date, end_date, user_id)
        tasks = self._tasks_by_id(projects)

        timesheet_repository = self.repository_accessors.timesheet_repository
        existing = {
            (entry.task_id, entry.timesheet_date): entry
            for entry in timesheet_repository.get_timesheets(week_start, week_end, user_id)
        }

        requested: Dict[tuple, float] = {}
        for day in timesheets:
            for detail in day.timesheet_details:
                if detail.hours < 0:
                    raise ValueError("Hours cannot be negative")
                task = tasks.get(detail.task_id)
                if task is None or not self._is_task_assigned(task, user_id, day.timesheet_date):
                    raise ValueError(f"Task {detail.task_id} is not assigned to the user on {day.timesheet_date}")
                key = (detail.task_id, day.timesheet_date)
                entry = existing.get(key)
                if entry is not None and entry.status in LOCKED_STATUSES and entry.hours != detail.hours:
                    raise ValueError(f"Timesheet for {day.timesheet_date} is already submitted")
                requested[key] = detail.hours

        self._check_weekly_limit(existing, requested)

        now = datetime.utcnow()
        saved = []
        for (task_id, timesheet_date), hours in requested.items():
            entry = existing.get((task_id, timesheet_date))
            if entry is None:
                entry = self.timesheet_mapper.map_for_create_model(user_id, task_id, timesheet_date, hours, now)
                timesheet_repository.add(entry)
            elif entry.status not in LOCKED_STATUSES and entry.hours != hours:
                entry.hours = hours
                entry.status = int(TimesheetStatus.NONE)
                entry.last_modified_on = now
            saved.append(entry)

        affected = self.repository_accessors.save_changes()
        logger.info(f"💾 Saved timesheets for user {user_id}: {len(saved)} entries, {affected} rows written")
        return saved

    def _check_weekly_limit(self, existing: Dict[tuple, Timesheet], requested: Dict[tuple, float]) -> None:
        totals: Dict[date, float] = {}
        for key, entry in existing.items():
            if key not in requested:
                monday, _ = week_bounds(entry.timesheet_date)
                totals[monday] = totals.get(monday, 0) + entry.hours
        for (_, timesheet_date), hours in requested.items():
            monday, _ = week_bounds(timesheet_date)
            totals[monday] = totals.get(monday, 0) + hours

        limit = self.settings.weekly_efforts_limit
        for monday, total in sorted(totals.items()):
            if total > limit:
                raise ValueError(f"Week of {monday} has {total:g} hours, more than the {limit:g} hour limit")

    @staticmethod
    def _tasks_by_id(projects: Iterable[Project]) -> Dict[str, Task]:
        tasks = {}
        for project in projects:
            for task in project.tasks:
                tasks[task.id] = task
        return tasks

    def submit_timesheets(
        self,
        user_id: str,
        timesheet_dates: Iterable[date],
        current_date: Union[date, datetime]
    ) -> List[Timesheet]:
        """Move the user's open entries with logged hours on the given dates to Submitted."""
        if not user_id:
            raise ValueError("User id is required")
        dates = set(self.get_not_yet_frozen_timesheet_dates(timesheet_dates, current_date))
        if not dates:
            return []

        timesheet_repository = self.repository_accessors.timesheet_repository
        entries = [
            entry
            for entry in timesheet_repository.get_timesheets(min(dates), max(dates), user_id)
            if entry.timesheet_date in dates and entry.status in SUBMITTABLE_STATUSES and entry.hours > 0
        ]
        if not entries:
            return []

        now = datetime.utcnow()
        for entry in entries:
            entry.status = int(TimesheetStatus.SUBMITTED)
            entry.submitted_on = now
            entry.last_modified_on = now
            entry.manager_comments = None

        timesheet_repository.update(entries)
        self.repository_accessors.save_changes()
        logger.info(f"📤 User {user_id} submitted {len(entries)} entries")
        return entries

    # Approval

    def apply_status_transition(
        self,
        timesheets: List[Timesheet],
        approvals: List[RequestApproval],
        status: TimesheetStatus
    ) -> ApprovalOutcome:
        if timesheets is None or approvals is None:
            raise ValueError("Timesheets and approval details are required")
        if status not in (TimesheetStatus.APPROVED, TimesheetStatus.REJECTED):
            raise ValueError(f"Cannot move timesheets to status {status!r}")

        comments = {approval.timesheet_id: approval.manager_comments for approval in approvals}
        now = datetime.utcnow()
        changed = 0
        for timesheet in timesheets:
            comment = comments.get(timesheet.id)
            if timesheet.status == int(status) and timesheet.manager_comments == comment:
                continue
            timesheet.status = int(status)
            timesheet.manager_comments = comment
            timesheet.last_modified_on = now
            changed += 1

        self.repository_accessors.timesheet_repository.update(timesheets)
        affected = self.repository_accessors.save_changes()

        if affected > 0:
            outcome = ApprovalOutcome.APPLIED
        elif changed == 0:
            outcome = ApprovalOutcome.NO_OP
        else:
            outcome = ApprovalOutcome.FAILED

        log = logger.info if outcome.succeeded else logger.warning
        log(f"Status transition to {status.name}: {outcome.value} ({affected} rows, {len(timesheets)} timesheets)")
        return outcome

    def approve_or_reject_timesheets(
        self,
        timesheets: List[Timesheet],
        approvals: List[RequestApproval],
        status: TimesheetStatus
    ) -> bool:
        return self.apply_status_transition(timesheets, approvals, status).succeeded

    # Manager queries

    def refresh_reportees(self, manager_id: str, directory: UsersDirectory) -> List[str]:
        """Store the manager's current direct reports from the directory and return their ids."""
        if not manager_id:
            raise ValueError("Manager id is required")

        reportees = directory.get_my_reportees()
        self.repository_accessors.user_repository.sync_reportees(manager_id, reportees)
        self.repository_accessors.save_changes()
        logger.debug(f"Synced {len(reportees)} reportees for manager {manager_id}")
        return [reportee["id"] for reportee in reportees]

    def get_timesheets_by_status(self, manager_id: str, status: TimesheetStatus) -> List[SubmittedRequest]:
        """Reportee entries in a status, summarized per user and day."""
        if not manager_id:
            raise ValueError("Manager id is required")

        reportee_ids = self.repository_accessors.user_repository.get_reportee_ids(manager_id)
        grouped = self.repository_accessors.timesheet_repository.get_timesheets_of_users_by_status(reportee_ids, status)

        requests = []
        for user_id, entries in grouped.items():
            by_date: Dict[date, List[Timesheet]] = {}
            for entry in entries:
                by_date.setdefault(to_date(entry.timesheet_date), []).append(entry)

            for timesheet_date in sorted(by_date):
                day_entries = by_date[timesheet_date]
                project_titles = list(dict.fromkeys(
                    entry.task.project.title
                    for entry in day_entries
                    if entry.task is not None and entry.task.project is not None
                ))
                requests.append(SubmittedRequest(
                    user_id=user_id,
                    timesheet_date=timesheet_date,
                    status=int(status),
                    total_hours=sum(entry.hours for entry in day_entries),
                    project_titles=project_titles,
                    submitted_timesheet_ids=[entry.id for entry in day_entries],
                ))

        return requests

    def get_submitted_timesheets_by_ids(self, manager_id: str, timesheet_ids: Iterable[str]) -> List[Timesheet]:
        """Submitted reportee entries among timesheet_ids; an empty list when none match."""
        if not manager_id:
            raise ValueError("Manager id is required")
        if timesheet_ids is None:
            raise ValueError("Timesheet ids are required")

        wanted = set(timesheet_ids)
        if not wanted:
            return []

        timesheets = self.repository_accessors.timesheet_repository.get_submitted_timesheets_by_ids(manager_id, wanted)
        return [timesheet for timesheet in timesheets if timesheet.id in wanted]

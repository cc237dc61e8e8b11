from datetime import date

import pytest

from teams_timesheet.models.timesheet import TimesheetStatus
from teams_timesheet.schemas.timesheet import RequestApproval
from teams_timesheet.services.timesheet_service import ApprovalOutcome, TimesheetService
from tests.factories import make_timesheet, task_by_title


@pytest.fixture
def service(accessors, settings):
    return TimesheetService(accessors, settings=settings)


@pytest.fixture
def submitted(db, project):
    development = task_by_title(project, "Development")
    entries = [
        make_timesheet(development, date(2021, 2, 1), 6, status=TimesheetStatus.SUBMITTED),
        make_timesheet(development, date(2021, 2, 2), 4, status=TimesheetStatus.SUBMITTED),
    ]
    db.add_all(entries)
    db.commit()
    return entries


def _approvals(timesheets, comment="Thanks"):
    return [RequestApproval(timesheet_id=t.id, manager_comments=comment) for t in timesheets]


def test_repeating_a_decision_writes_nothing(db, service, submitted):
    approvals = _approvals(submitted)

    assert service.apply_status_transition(submitted, approvals, TimesheetStatus.APPROVED) is ApprovalOutcome.APPLIED
    assert service.apply_status_transition(submitted, approvals, TimesheetStatus.APPROVED) is ApprovalOutcome.NO_OP
    assert service.approve_or_reject_timesheets(submitted, approvals, TimesheetStatus.APPROVED) is False

    for timesheet in submitted:
        db.refresh(timesheet)
        assert timesheet.status == int(TimesheetStatus.APPROVED)
        assert timesheet.manager_comments == "Thanks"


def test_changed_comment_is_applied(service, submitted):
    service.apply_status_transition(submitted, _approvals(submitted), TimesheetStatus.REJECTED)

    outcome = service.apply_status_transition(submitted[:1], _approvals(submitted[:1], "Split by task"), TimesheetStatus.REJECTED)

    assert outcome is ApprovalOutcome.APPLIED
    assert submitted[0].manager_comments == "Split by task"


def test_save_changes_reports_zero_without_pending_work(accessors, submitted):
    assert accessors.save_changes() == 0

    submitted[0].hours = 7
    assert accessors.save_changes() == 1

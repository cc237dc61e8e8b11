from datetime import date

from teams_timesheet.models.project import Member
from teams_timesheet.models.timesheet import TimesheetStatus
from teams_timesheet.models.user import User
from tests.factories import MANAGER_ID, OTHER_USER_ID, USER_ID, make_project, make_timesheet, task_by_title


def test_get_projects_overlapping_range_for_member(accessors, project):
    repository = accessors.project_repository

    assert [p.id for p in repository.get_projects(date(2021, 3, 30), date(2021, 4, 5), USER_ID)] == [project.id]
    assert repository.get_projects(date(2021, 4, 1), date(2021, 4, 30), USER_ID) == []
    assert repository.get_projects(date(2021, 2, 1), date(2021, 2, 1), "someone-else") == []


def test_get_projects_skips_archived_projects_and_removed_members(db, accessors, project):
    archived = make_project(title="Archived")
    archived.is_archived = True
    db.add(archived)
    project.members[0].is_removed = True
    db.commit()

    assert accessors.project_repository.get_projects(date(2021, 2, 1), date(2021, 2, 1), USER_ID) == []


def test_get_projects_loads_tasks(accessors, project):
    found = accessors.project_repository.get_projects(date(2021, 2, 1), date(2021, 2, 1), USER_ID)[0]

    assert sorted(task.title for task in found.tasks) == ["Bug fixing", "Design", "Development"]


def test_save_changes_counts_written_rows(db, accessors, project):
    development = task_by_title(project, "Development")
    repository = accessors.timesheet_repository
    repository.add(make_timesheet(development, date(2021, 2, 1), 8))
    repository.add(make_timesheet(development, date(2021, 2, 2), 8))

    assert accessors.save_changes() == 2
    assert accessors.save_changes() == 0

    entries = repository.get_timesheets(date(2021, 2, 1), date(2021, 2, 2), USER_ID)
    entries[0].hours = entries[0].hours
    repository.update(entries)
    assert accessors.save_changes() == 0

    entries[0].hours = 4
    repository.update(entries)
    assert accessors.save_changes() == 1


def test_get_timesheets_is_user_and_range_scoped(db, accessors, project):
    development = task_by_title(project, "Development")
    db.add_all([
        make_timesheet(development, date(2021, 2, 1), 8),
        make_timesheet(development, date(2021, 2, 3), 8),
        make_timesheet(development, date(2021, 2, 1), 5, user_id=OTHER_USER_ID),
    ])
    db.commit()

    entries = accessors.timesheet_repository.get_timesheets(date(2021, 2, 1), date(2021, 2, 2), USER_ID)

    assert [(e.timesheet_date, e.hours) for e in entries] == [(date(2021, 2, 1), 8)]


def test_get_timesheets_of_users_by_status_groups_by_user(db, accessors, project):
    development = task_by_title(project, "Development")
    db.add_all([
        make_timesheet(development, date(2021, 2, 1), 8, status=TimesheetStatus.SUBMITTED),
        make_timesheet(development, date(2021, 2, 2), 8, status=TimesheetStatus.APPROVED),
        make_timesheet(development, date(2021, 2, 1), 5, user_id=OTHER_USER_ID, status=TimesheetStatus.SUBMITTED),
    ])
    db.commit()

    grouped = accessors.timesheet_repository.get_timesheets_of_users_by_status(
        [USER_ID, OTHER_USER_ID], TimesheetStatus.SUBMITTED
    )

    assert set(grouped) == {USER_ID, OTHER_USER_ID}
    assert [e.hours for e in grouped[USER_ID]] == [8]
    assert accessors.timesheet_repository.get_timesheets_of_users_by_status([], TimesheetStatus.SUBMITTED) == {}


def test_get_submitted_timesheets_by_ids_scoped_to_manager(db, accessors, project):
    development = task_by_title(project, "Development")
    submitted = make_timesheet(development, date(2021, 2, 1), 8, status=TimesheetStatus.SUBMITTED)
    draft = make_timesheet(development, date(2021, 2, 2), 8)
    db.add_all([submitted, draft])
    db.commit()

    repository = accessors.timesheet_repository
    ids = [submitted.id, draft.id]

    assert [t.id for t in repository.get_submitted_timesheets_by_ids(MANAGER_ID, ids)] == [submitted.id]
    assert repository.get_submitted_timesheets_by_ids("another-manager", ids) == []


def test_get_reportee_ids(db, accessors, project):
    db.add(User(id="outsider", display_name="Outsider", manager_id="another-manager"))
    db.commit()

    assert sorted(accessors.user_repository.get_reportee_ids(MANAGER_ID)) == sorted([USER_ID, OTHER_USER_ID])


def test_sync_reportees_moves_users_between_managers(db, accessors, project):
    accessors.user_repository.sync_reportees(MANAGER_ID, [{"id": USER_ID}, {"id": "new-hire", "displayName": "Lynne Robbins"}])
    accessors.save_changes()

    assert sorted(accessors.user_repository.get_reportee_ids(MANAGER_ID)) == sorted([USER_ID, "new-hire"])
    assert db.get(User, OTHER_USER_ID).manager_id is None
    assert db.get(User, "new-hire").display_name == "Lynne Robbins"
    assert db.get(User, USER_ID).display_name == "Adele Vance"


def test_get_user_ids_with_hours(db, accessors, project):
    development = task_by_title(project, "Development")
    project.members.append(Member(user_id=OTHER_USER_ID, is_billable=False))
    db.add_all([
        make_timesheet(development, date(2021, 2, 1), 8),
        make_timesheet(development, date(2021, 2, 2), 0, user_id=OTHER_USER_ID),
    ])
    db.commit()

    assert accessors.timesheet_repository.get_user_ids_with_hours(date(2021, 2, 1), date(2021, 2, 7)) == [USER_ID]

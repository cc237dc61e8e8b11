from datetime import date, datetime
from teams_timesheet.models.timesheet import Timesheet, TimesheetStatus
from teams_timesheet.schemas.timesheet import TimesheetDTO


class TimesheetMapper:
    @staticmethod
    def map_for_create_model(
        user_id: str,
        task_id: str,
        timesheet_date: date,
        hours: float,
        created_on: datetime
    ) -> Timesheet:
        return Timesheet(
            user_id=user_id,
            task_id=task_id,
            timesheet_date=timesheet_date,
            hours=hours,
            status=int(TimesheetStatus.NONE),
            created_on=created_on,
            last_modified_on=created_on,
        )

    @staticmethod
    def map_for_view_model(timesheet: Timesheet) -> TimesheetDTO:
        return TimesheetDTO.model_validate(timesheet)

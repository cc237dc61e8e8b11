from datetime import date, datetime
from unittest.mock import MagicMock

import pytest

from teams_timesheet.services.timesheet_service import TimesheetService


@pytest.fixture
def service(settings):
    return TimesheetService(MagicMock(), settings=settings)


def test_previous_month_dates_open_before_freeze_day(service):
    previous_month_dates = [date(2020, 12, 2)]

    not_yet_frozen = service.get_not_yet_frozen_timesheet_dates(previous_month_dates, date(2021, 1, 2))

    assert not_yet_frozen == previous_month_dates


def test_previous_month_dates_open_on_freeze_day(service):
    assert service.get_not_yet_frozen_timesheet_dates([date(2020, 12, 31)], date(2021, 1, 12)) == [date(2020, 12, 31)]


@pytest.mark.parametrize("current_date", [date(2021, 1, 13), date(2021, 1, 20), date(2021, 1, 31)])
@pytest.mark.parametrize("candidate", [date(2020, 12, 1), date(2020, 12, 15), date(2020, 12, 31)])
def test_previous_month_frozen_after_freeze_day(service, current_date, candidate):
    assert service.is_frozen(candidate, current_date)
    assert service.get_not_yet_frozen_timesheet_dates([candidate], current_date) == []


@pytest.mark.parametrize("current_date", [date(2021, 3, 1), date(2021, 3, 12), date(2021, 3, 31)])
def test_current_month_never_frozen(service, current_date):
    dates = [date(2021, 3, 1), date(2021, 3, 15), date(2021, 3, 31)]

    assert service.get_not_yet_frozen_timesheet_dates(dates, current_date) == dates


def test_older_than_previous_month_always_frozen(service):
    assert service.is_frozen(date(2020, 11, 30), date(2021, 1, 2))
    assert service.is_frozen(date(2019, 6, 1), date(2021, 1, 2))


def test_partitions_mixed_dates_in_input_order(service):
    dates = [date(2021, 2, 3), date(2021, 1, 20), date(2020, 12, 31), date(2021, 2, 1)]

    assert service.get_not_yet_frozen_timesheet_dates(dates, date(2021, 2, 10)) == [
        date(2021, 2, 3),
        date(2021, 1, 20),
        date(2021, 2, 1),
    ]


def test_accepts_datetimes(service):
    result = service.get_not_yet_frozen_timesheet_dates([datetime(2021, 1, 31, 18, 30)], datetime(2021, 2, 5, 9, 0))

    assert result == [date(2021, 1, 31)]


def test_freeze_day_comes_from_settings(settings):
    settings.timesheet_freeze_day_of_month = 1
    service = TimesheetService(MagicMock(), settings=settings)

    assert service.is_frozen(date(2021, 1, 31), date(2021, 2, 2))


def test_missing_dates_rejected(service):
    with pytest.raises(ValueError):
        service.get_not_yet_frozen_timesheet_dates(None, date(2021, 1, 2))

import datetime

from dateutil.relativedelta import relativedelta
from django.utils import timezone

GESTATION_WEEKS = 40


def today() -> datetime.date:
    return timezone.localdate()


def add_months(from_date: datetime.date, months: int) -> datetime.date:
    """Calendar-month arithmetic, clamped to the end of shorter months (Jan 31 + 1 month = Feb 28/29)."""
    return from_date + relativedelta(months=months)


def months_between(from_date: datetime.date, to_date: datetime.date) -> int:
    """Number of completed calendar months from `from_date` to `to_date`. Negative if `to_date` is earlier."""
    delta = relativedelta(to_date, from_date)
    return delta.years * 12 + delta.months


def estimated_conception_date(expected_delivery_date: datetime.date) -> datetime.date:
    return expected_delivery_date - datetime.timedelta(weeks=GESTATION_WEEKS)


def gestational_week(expected_delivery_date: datetime.date, on_date: datetime.date) -> int:
    """Completed weeks of gestation on `on_date`, counted from the conception date estimated from the EDD."""
    days = (on_date - estimated_conception_date(expected_delivery_date)).days
    return days // 7


def parse_iso_date(value: str | None) -> datetime.date | None:
    """Parse an ISO 8601 date or datetime string into a date object. Anything else gives None."""
    if not value:
        return None
    try:
        return datetime.date.fromisoformat(value)
    except (ValueError, TypeError):
        pass
    try:
        return datetime.datetime.fromisoformat(value).date()
    except (ValueError, TypeError):
        return None

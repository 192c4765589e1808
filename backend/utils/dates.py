import os
import re
from datetime import date, datetime, time, timedelta
from typing import Tuple

import pytz
from dateutil import parser
from dateutil.relativedelta import relativedelta

from exceptions import ValidationError

# All business dates (attendance days, invoice periods, "this month") are
# taken in the vendor's local calendar.
LOCAL_TZ = pytz.timezone(os.getenv("APP_TIMEZONE", "Asia/Kolkata"))

MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


def now_local() -> datetime:
    return datetime.now(LOCAL_TZ)


def today_local() -> date:
    return now_local().date()


def start_of_day(day: date) -> datetime:
    return LOCAL_TZ.localize(datetime.combine(day, time.min))


def day_range(start: date, end: date) -> Tuple[datetime, datetime]:
    """Half-open datetime bounds covering both whole days: [start 00:00, end+1 00:00)."""
    return start_of_day(start), start_of_day(end + timedelta(days=1))


def month_range(month: str) -> Tuple[date, date]:
    """Parse ``YYYY-MM`` into (first day of month, first day of next month)."""
    match = MONTH_PATTERN.match(month or "")
    if not match:
        raise ValidationError("Invalid month. Use the YYYY-MM format")
    year, month_number = int(match.group(1)), int(match.group(2))
    if not 1 <= month_number <= 12:
        raise ValidationError("Invalid month. Use the YYYY-MM format")
    first_day = date(year, month_number, 1)
    return first_day, first_day + relativedelta(months=1)


def current_month_bounds() -> Tuple[datetime, datetime]:
    first_day = today_local().replace(day=1)
    return start_of_day(first_day), start_of_day(first_day + relativedelta(months=1))


def parse_date(value, field_name: str) -> date:
    """Accept a date, a datetime or a parseable string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return parser.parse(str(value)).date()
    except (ValueError, OverflowError, TypeError):
        raise ValidationError(f"Invalid date format for {field_name}")

"""Date parsing utilities."""

from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

PERIODS = (
    "this-month",
    "last-month",
    "this-quarter",
    "last-quarter",
    "this-year",
    "last-year",
)


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports:
    - ISO dates: "2024-01-15"
    - German dates (day first): "15.01.2024", "15.1.24"
    - Other formats dateutil understands: "January 15, 2024"
    - Relative dates: "today"/"heute", "yesterday"/"gestern"

    Args:
        date_str: Date string

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "heute": today,
        "yesterday": today - timedelta(days=1),
        "gestern": today - timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    # dateutil reads "2024-01-05" as year-day-month when dayfirst is set
    try:
        return date.fromisoformat(date_str)
    except ValueError:
        pass

    try:
        return date_parser.parse(date_str, dayfirst=True).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def _quarter_start(day: date) -> date:
    return day.replace(month=3 * ((day.month - 1) // 3) + 1, day=1)


def get_date_range(period: str, today: date | None = None) -> tuple[date, date]:
    """Get start and end dates for a reporting period.

    Current periods end today; past periods cover the whole month,
    quarter (VAT return period) or year.

    Args:
        period: One of PERIODS
        today: Reference date, defaults to the current date

    Returns:
        Tuple of (start_date, end_date)

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = today or date.today()

    if period == "this-month":
        return today.replace(day=1), today

    if period == "last-month":
        end_date = today.replace(day=1) - timedelta(days=1)
        return end_date.replace(day=1), end_date

    if period == "this-quarter":
        return _quarter_start(today), today

    if period == "last-quarter":
        end_date = _quarter_start(today) - timedelta(days=1)
        return _quarter_start(end_date), end_date

    if period == "this-year":
        return today.replace(month=1, day=1), today

    if period == "last-year":
        start_date = today.replace(month=1, day=1) - relativedelta(years=1)
        return start_date, start_date.replace(month=12, day=31)

    raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")

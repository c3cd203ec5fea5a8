"""Date utilities for wallosctl.

Pure functions for payment date calculation and date normalization.
"""

import calendar
import re
from datetime import date, timedelta

import pandas as pd

from wallosctl.domain.billing import BillingSchedule
from wallosctl.domain.models import Cycle
from wallosctl.errors import InvalidRequestError

_YEAR_FIRST_PATTERN = re.compile(r"^\d{4}\s*[-/.]")


def local_today() -> date:
    """Get today's date in local time."""
    return date.today()


def normalize_date(raw: str | date) -> date:
    """Normalize a caller-supplied date.

    ISO dates (YYYY-MM-DD) are taken as-is. Other year-leading dates
    ("2025/07/01") are read year-first. Anything else goes through
    pandas.to_datetime with day-first parsing, since people type dates in
    every format imaginable.

    Args:
        raw: Date string or date.

    Returns:
        Parsed date.

    Raises:
        InvalidRequestError: If the date is blank or cannot be parsed.
    """
    if isinstance(raw, date):
        return raw
    text = str(raw).strip()
    if not text:
        raise InvalidRequestError(f"Date must not be blank, got {raw!r}")
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass

    year_first = _YEAR_FIRST_PATTERN.match(text) is not None
    try:
        parsed = pd.to_datetime(text, dayfirst=not year_first, yearfirst=year_first)
    except (ValueError, pd.errors.ParserError) as e:
        raise InvalidRequestError(f"Could not parse date '{raw}': {e}") from e
    if pd.isna(parsed):
        raise InvalidRequestError(f"Could not parse date '{raw}'")
    return parsed.date()


def add_months(base: date, months: int) -> date:
    """Add calendar months, clamping to the last day of shorter months."""
    total_months = base.month - 1 + months
    year = base.year + total_months // 12
    month = total_months % 12 + 1
    day = min(base.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def advance(anchor: date, schedule: BillingSchedule, periods: int = 1) -> date:
    """Move ``anchor`` forward by ``periods`` billing periods.

    Always computed from the anchor, so month-end dates don't drift
    (Jan 31 -> Feb 28 -> Mar 31, not Mar 28).
    """
    count = schedule.frequency * periods
    if schedule.cycle == Cycle.DAILY:
        return anchor + timedelta(days=count)
    if schedule.cycle == Cycle.WEEKLY:
        return anchor + timedelta(weeks=count)
    if schedule.cycle == Cycle.MONTHLY:
        return add_months(anchor, count)
    return add_months(anchor, 12 * count)


def compute_payment_dates(
    start_date: str | date | None,
    next_payment: str | date | None,
    schedule: BillingSchedule,
    today: date | None = None,
) -> tuple[date, date]:
    """Compute (start_date, next_payment) from partial input.

    - Neither given: both are today.
    - Only start given: next payment is start advanced by whole billing
      periods until it lies strictly after today. Start is untouched.
    - Only next payment given: start takes the same value.
    - Both given: used as-is, no ordering check.

    Args:
        start_date: Optional subscription start.
        next_payment: Optional next payment date.
        schedule: Billing schedule used to advance the start date.
        today: Reference date. Defaults to local today.

    Returns:
        Tuple of (start_date, next_payment).
    """
    today = today or local_today()
    start = normalize_date(start_date) if start_date is not None else None
    upcoming = normalize_date(next_payment) if next_payment is not None else None

    if start is None and upcoming is None:
        return today, today

    if upcoming is not None:
        return (start or upcoming), upcoming

    assert start is not None
    periods = 0
    candidate = start
    while candidate <= today:
        periods += 1
        candidate = advance(start, schedule, periods)
    return start, candidate

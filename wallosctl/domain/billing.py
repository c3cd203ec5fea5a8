"""Pure functions for billing period normalization.

Callers describe billing periods loosely ("quarterly", "2 weeks", "m", 3).
The backend only understands a (cycle, frequency) pair, where cycle is the
unit ordinal and frequency the multiplier applied to it.
"""

import logging
import re
from typing import NamedTuple

from wallosctl.domain.models import Cycle
from wallosctl.errors import InvalidRequestError

logger = logging.getLogger(__name__)


class BillingSchedule(NamedTuple):
    """Backend encoding of a billing period."""

    cycle: Cycle
    frequency: int


# alias -> (cycle, implied frequency)
PERIOD_ALIASES: dict[str, tuple[Cycle, int]] = {
    "daily": (Cycle.DAILY, 1),
    "day": (Cycle.DAILY, 1),
    "d": (Cycle.DAILY, 1),
    "weekly": (Cycle.WEEKLY, 1),
    "week": (Cycle.WEEKLY, 1),
    "w": (Cycle.WEEKLY, 1),
    "bi-weekly": (Cycle.WEEKLY, 2),
    "biweekly": (Cycle.WEEKLY, 2),
    "fortnightly": (Cycle.WEEKLY, 2),
    "monthly": (Cycle.MONTHLY, 1),
    "month": (Cycle.MONTHLY, 1),
    "m": (Cycle.MONTHLY, 1),
    "bi-monthly": (Cycle.MONTHLY, 2),
    "bimonthly": (Cycle.MONTHLY, 2),
    "quarterly": (Cycle.MONTHLY, 3),
    "quarter": (Cycle.MONTHLY, 3),
    "q": (Cycle.MONTHLY, 3),
    "semi-annually": (Cycle.MONTHLY, 6),
    "semiannually": (Cycle.MONTHLY, 6),
    "semi-annual": (Cycle.MONTHLY, 6),
    "half-yearly": (Cycle.MONTHLY, 6),
    "biannually": (Cycle.MONTHLY, 6),
    "yearly": (Cycle.YEARLY, 1),
    "annually": (Cycle.YEARLY, 1),
    "annual": (Cycle.YEARLY, 1),
    "year": (Cycle.YEARLY, 1),
    "y": (Cycle.YEARLY, 1),
}

UNIT_CYCLES: dict[str, Cycle] = {
    "day": Cycle.DAILY,
    "week": Cycle.WEEKLY,
    "month": Cycle.MONTHLY,
    "year": Cycle.YEARLY,
}

_QUANTITY_PATTERN = re.compile(r"^(\d+)\s*(day|week|month|year)s?$")


def parse_billing_period(
    period: str | int | float | None = None, frequency: int | float | None = None
) -> BillingSchedule:
    """Map a free-form billing period to the backend's (cycle, frequency) pair.

    An explicit ``frequency`` always replaces the multiplier implied by the
    period. Unrecognized periods fall back to monthly with a warning.

    Args:
        period: Alias ("quarterly"), quantity ("3 months") or cycle ordinal (1-4).
        frequency: Optional explicit multiplier.

    Returns:
        BillingSchedule for the period.

    Raises:
        InvalidRequestError: If ``frequency`` is given but not a positive integer.
    """
    override = None if frequency is None else _as_multiplier(frequency)

    if period is None or (isinstance(period, str) and not period.strip()):
        return BillingSchedule(Cycle.MONTHLY, override or 1)

    ordinal = _as_ordinal(period)
    if ordinal is not None:
        return BillingSchedule(ordinal, override or 1)

    normalized = str(period).strip().lower()

    if normalized in PERIOD_ALIASES:
        cycle, implied = PERIOD_ALIASES[normalized]
        return BillingSchedule(cycle, override or implied)

    match = _QUANTITY_PATTERN.match(normalized)
    if match and int(match.group(1)) > 0:
        return BillingSchedule(UNIT_CYCLES[match.group(2)], override or int(match.group(1)))

    logger.warning('Unable to parse billing period "%s", defaulting to monthly', period)
    return BillingSchedule(Cycle.MONTHLY, override or 1)


def _as_multiplier(frequency: int | float) -> int:
    # JSON callers send whole numbers as floats (2.0)
    if isinstance(frequency, float) and frequency.is_integer():
        frequency = int(frequency)
    if isinstance(frequency, bool) or not isinstance(frequency, int) or frequency < 1:
        raise InvalidRequestError(f"Billing frequency must be a positive integer, got {frequency!r}")
    return frequency


def _as_ordinal(period: str | int | float) -> Cycle | None:
    if isinstance(period, bool):
        return None
    if isinstance(period, int):
        value = period
    elif isinstance(period, float):
        if not period.is_integer():
            return None
        value = int(period)
    elif str(period).strip().isdigit():
        value = int(str(period).strip())
    else:
        return None
    try:
        return Cycle(value)
    except ValueError:
        return None

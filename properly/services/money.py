"""
Money and billing-period helpers — pure functions, no I/O.

All currency values are ``Decimal`` quantised to cents with ROUND_HALF_UP so
that totals, differences and percentages never drift beyond two places.
"""
from collections.abc import Iterable
from datetime import date, datetime, time
from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
               "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


# ─── Money ────────────────────────────────────────────────────────────────────

def to_money(value: Decimal | int | float | str | None) -> Decimal:
    """Quantise to cents. Floats go through ``str`` to avoid binary noise."""
    if value is None:
        return ZERO
    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def sum_money(values: Iterable[Decimal]) -> Decimal:
    return to_money(sum(values, Decimal("0")))


def percentage(part: Decimal | int, whole: Decimal | int) -> Decimal:
    """``part / whole × 100`` to two places; 0 when ``whole`` is not positive."""
    if whole <= 0:
        return ZERO
    return to_money(Decimal(part) / Decimal(whole) * 100)


# ─── Dates ────────────────────────────────────────────────────────────────────

def as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def as_instant(value: date | datetime) -> datetime:
    """A bare date is taken as midnight at the start of that day."""
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def start_of_day(day: date, like: datetime) -> datetime:
    """Midnight of ``day`` in the same timezone (or naivety) as ``like``."""
    return datetime.combine(as_date(day), time.min, tzinfo=like.tzinfo)


def same_billing_period(day: date | datetime, now: date | datetime) -> bool:
    return day.year == now.year and day.month == now.month


def first_of_month(now: date | datetime) -> date:
    return date(now.year, now.month, 1)


def in_date_range(day: date | datetime, date_from: date | None, date_to: date | None) -> bool:
    """Inclusive on both ends; a missing bound is unbounded."""
    day = as_date(day)
    if date_from is not None and day < date_from:
        return False
    if date_to is not None and day > date_to:
        return False
    return True

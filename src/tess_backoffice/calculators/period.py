"""Payroll period resolution."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Callable

ALL_TIME_LABEL = "All Time"


class PeriodSelector(str, Enum):
    """Logical period selectors."""

    CURRENT = "current"
    LAST = "last"
    ALL = "all"


@dataclass(frozen=True)
class ResolvedPeriod:
    """A display label plus a membership test for dates."""

    selector: str
    label: str
    _predicate: Callable[[date], bool]

    def contains(self, value: date | datetime | str) -> bool:
        """Check whether a date (or ISO date string) falls in the period."""
        return self._predicate(_as_date(value))

    def matches_label(self, period_label: str) -> bool:
        """Check whether a salary period label belongs to this period.

        Adjustment labels share the primary label as a prefix.
        """
        return period_label.startswith(self.label)


def month_label(value: date) -> str:
    """Format a date as ``"<Month> <Year>"``."""
    return f"{calendar.month_name[value.month]} {value.year}"


def previous_month(value: date) -> date:
    """First day of the month before ``value``."""
    if value.month == 1:
        return date(value.year - 1, 12, 1)
    return date(value.year, value.month - 1, 1)


def resolve_period(selector: PeriodSelector | str, now: date | datetime) -> ResolvedPeriod:
    """Resolve a period selector against ``now``.

    - ``current``: the calendar month of ``now``
    - ``last``: the calendar month before ``now``
    - ``all``: every date, labelled "All Time"

    Unrecognized selectors never raise: they get the "All Time" label and
    match no dates.
    """
    today = _as_date(now)
    key = selector.value if isinstance(selector, PeriodSelector) else str(selector)

    if key == PeriodSelector.CURRENT.value:
        return _month_period(key, today)
    if key == PeriodSelector.LAST.value:
        return _month_period(key, previous_month(today))
    if key == PeriodSelector.ALL.value:
        return ResolvedPeriod(key, ALL_TIME_LABEL, lambda _: True)
    return ResolvedPeriod(key, ALL_TIME_LABEL, lambda _: False)


def _month_period(key: str, anchor: date) -> ResolvedPeriod:
    return ResolvedPeriod(
        key,
        month_label(anchor),
        lambda d: d.year == anchor.year and d.month == anchor.month,
    )


def _as_date(value: date | datetime | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = value.strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()

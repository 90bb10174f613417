"""
Work Calendar - Monday to Friday workweek arithmetic.

Implements:
- Workday predicate
- Advancing by N working days
- Snapping weekend instants forward to Monday
- Clamping an instant to the 07:00 workday start
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta

WORKDAY_START = time(7, 0)

# datetime.weekday(): Monday == 0 ... Sunday == 6
SATURDAY = 5
SUNDAY = 6


def is_workday(instant: datetime) -> bool:
    """True when the instant falls Monday-Friday."""
    return instant.weekday() < SATURDAY


def advance_working_days(instant: datetime, n: int) -> datetime:
    """
    Instant of the `n`-th weekday after `instant`.

    The returned instant keeps the input's time of day. `n <= 0` returns the
    input unchanged, so a one-day task ends on the day it works. Any 7
    consecutive days hold exactly 5 weekdays, so whole weeks are jumped and
    only the last 1-5 weekdays are stepped.
    """
    if n <= 0:
        return instant
    weeks = (n - 1) // 5
    current = instant + timedelta(days=weeks * 7)
    counted = weeks * 5
    while counted < n:
        current = current + timedelta(days=1)
        if is_workday(current):
            counted += 1
    return current


def snap_to_next_workday(instant: datetime) -> datetime:
    """Move Saturday/Sunday instants to Monday, keeping the time of day."""
    weekday = instant.weekday()
    if weekday == SATURDAY:
        return instant + timedelta(days=2)
    if weekday == SUNDAY:
        return instant + timedelta(days=1)
    return instant


def at_workday_start(instant: datetime) -> datetime:
    """Same calendar day, reset to 07:00:00."""
    return instant.replace(
        hour=WORKDAY_START.hour,
        minute=WORKDAY_START.minute,
        second=0,
        microsecond=0,
    )


def continues_same_workday(previous_end: datetime, candidate: datetime) -> bool:
    """
    True when work can carry on at `previous_end` instead of resetting to 07:00.

    The previous end must be on a weekday, on the candidate's calendar date,
    and strictly after the workday start. The full time of day is compared, so
    an end at 07:30 continues at 07:30; only ends at or before 07:00 reset.
    """
    return (
        is_workday(previous_end)
        and previous_end.date() == candidate.date()
        and previous_end.time() > WORKDAY_START
    )


def project_anchor(day: date) -> datetime:
    """Project start instant: the given date at 07:00."""
    return datetime.combine(day, WORKDAY_START)

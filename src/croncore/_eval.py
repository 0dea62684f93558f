from __future__ import annotations

import calendar
import logging
from bisect import bisect_left, bisect_right
from collections.abc import Iterator
from datetime import date, datetime, timedelta

from ._instant import UTC, to_utc
from ._pattern import FieldConstraint, Pattern

logger = logging.getLogger(__name__)

# =============================================================================
# Search Limits
# =============================================================================
# MAX_SEARCH_YEARS (8): the search reports exhaustion once the candidate year
# moves more than this many years away from the starting instant. Eight years
# spans the gap between Feb 29ths across a skipped century leap year
# (2096 -> 2104).
#
# MAX_ITERATIONS (1000): upper bound on carry steps in one search. Each
# iteration either returns a match or carries into a coarser field, and an
# unsatisfiable pattern costs at most a couple of carries per month, so the
# year horizon is always reached first.
# =============================================================================

# =============================================================================
# Carry Propagation
# =============================================================================
# A candidate is the list [year, month, day, hour, minute, second]. Each pass
# walks the levels from month down to second and snaps the level to the
# nearest allowed value in the search direction:
#
#   - unchanged:     move on to the next finer level
#   - moved:         reset every finer level to its extreme (1/0 going forward,
#                    12/31/23/59/59 going backward) and keep walking
#   - nothing left:  bump the next coarser level by one and restart the pass
#
# Bumping does not normalize; a month of 13 or an hour of -1 simply has no
# allowed value on the next pass and carries again. Days are clamped to the
# month length when they are sought.
# =============================================================================

MAX_SEARCH_YEARS = 8
MAX_ITERATIONS = 1000

_MIN_YEAR = 1
_MAX_YEAR = 9999

_YEAR, _MONTH, _DAY, _HOUR, _MINUTE, _SECOND = range(6)
_FORWARD_RESET = (0, 1, 1, 0, 0, 0)
_BACKWARD_RESET = (0, 12, 31, 23, 59, 59)
_LEVEL_FIELDS = {_MONTH: "months", _HOUR: "hours", _MINUTE: "minutes", _SECOND: "seconds"}


# --- Calendar helpers ---


def _days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def _cron_weekday(year: int, month: int, day: int) -> int:
    """Cron DOW number: Sunday=0, Monday=1, ..., Saturday=6."""
    return date(year, month, day).isoweekday() % 7


def _last_weekday_of_month(year: int, month: int) -> int:
    d = date(year, month, _days_in_month(year, month))
    while d.isoweekday() in (6, 7):
        d -= timedelta(days=1)
    return d.day


def _nearest_weekday(year: int, month: int, target_day: int) -> int | None:
    """Day of the weekday nearest to `target_day`, never leaving the month.

    Returns None when the month is shorter than `target_day`.
    """
    last_day = _days_in_month(year, month)
    if target_day > last_day:
        return None

    dow = date(year, month, target_day).isoweekday()
    if dow == 6:
        # Saturday: Friday before, unless that is in the previous month
        return target_day + 2 if target_day == 1 else target_day - 1
    if dow == 7:
        # Sunday: Monday after, unless that is in the next month
        return target_day - 2 if target_day == last_day else target_day + 1
    return target_day


# --- Matching ---


def _dom_matches(c: FieldConstraint, year: int, month: int, day: int) -> bool:
    if day in c.values:
        return True
    if c.last_day and day == _days_in_month(year, month):
        return True
    if c.last_weekday and day == _last_weekday_of_month(year, month):
        return True
    return any(_nearest_weekday(year, month, t) == day for t in c.nearest_weekday)


def _dow_matches(c: FieldConstraint, year: int, month: int, day: int) -> bool:
    weekday = _cron_weekday(year, month, day)
    if weekday in c.values:
        return True
    if weekday in c.last_of_month and day + 7 > _days_in_month(year, month):
        return True
    return (weekday, (day - 1) // 7 + 1) in c.nth_of_month


def _day_matches(pattern: Pattern, year: int, month: int, day: int) -> bool:
    dom = pattern.days_of_month
    dow = pattern.days_of_week
    if dom.wildcard and dow.wildcard:
        return True
    if dow.wildcard:
        return _dom_matches(dom, year, month, day)
    if dom.wildcard:
        return _dow_matches(dow, year, month, day)
    if pattern.dom_and_dow:
        return _dom_matches(dom, year, month, day) and _dow_matches(dow, year, month, day)
    return _dom_matches(dom, year, month, day) or _dow_matches(dow, year, month, day)


def matches(pattern: Pattern, dt: datetime) -> bool:
    """Whether the UTC instant `dt` satisfies the pattern. Sub-second parts are ignored."""
    t = to_utc(dt)
    return (
        t.second in pattern.seconds
        and t.minute in pattern.minutes
        and t.hour in pattern.hours
        and t.month in pattern.months
        and _day_matches(pattern, t.year, t.month, t.day)
    )


# --- Search ---


def next_occurrence(pattern: Pattern, start: datetime, inclusive: bool = False) -> datetime | None:
    origin = to_utc(start)
    floor = origin.replace(microsecond=0)
    try:
        if inclusive and origin.microsecond == 0:
            candidate = floor
        else:
            candidate = floor + timedelta(seconds=1)
    except OverflowError:
        return None
    return _search(pattern, candidate, forward=True, limit_year=origin.year + MAX_SEARCH_YEARS)


def previous_occurrence(
    pattern: Pattern, start: datetime, inclusive: bool = False
) -> datetime | None:
    origin = to_utc(start)
    floor = origin.replace(microsecond=0)
    try:
        if inclusive or origin.microsecond:
            candidate = floor
        else:
            candidate = floor - timedelta(seconds=1)
    except OverflowError:
        return None
    return _search(pattern, candidate, forward=False, limit_year=origin.year - MAX_SEARCH_YEARS)


def next_n_occurrences(pattern: Pattern, start: datetime, count: int) -> list[datetime]:
    results: list[datetime] = []
    current = start
    for _ in range(count):
        nxt = next_occurrence(pattern, current)
        if nxt is None:
            break
        results.append(nxt)
        current = nxt
    return results


def _search(
    pattern: Pattern, candidate: datetime, *, forward: bool, limit_year: int
) -> datetime | None:
    parts = [
        candidate.year,
        candidate.month,
        candidate.day,
        candidate.hour,
        candidate.minute,
        candidate.second,
    ]
    reset = _FORWARD_RESET if forward else _BACKWARD_RESET

    for _ in range(MAX_ITERATIONS):
        year = parts[_YEAR]
        beyond = year > limit_year if forward else year < limit_year
        if beyond or not _MIN_YEAR <= year <= _MAX_YEAR:
            break

        for level in range(_MONTH, _SECOND + 1):
            target = _seek_level(pattern, parts, level, forward)
            if target is None:
                # Carry into the coarser level and start the pass over.
                parts[level - 1] += 1 if forward else -1
                parts[level:] = reset[level:]
                break
            if target != parts[level]:
                parts[level] = target
                parts[level + 1 :] = reset[level + 1 :]
        else:
            return datetime(*parts, tzinfo=UTC)

    logger.debug(
        "no %s occurrence of %r before year %d",
        "next" if forward else "previous",
        pattern.canonical,
        limit_year,
    )
    return None


def _seek_level(pattern: Pattern, parts: list[int], level: int, forward: bool) -> int | None:
    current = parts[level]
    if level == _DAY:
        return _seek_day(pattern, parts[_YEAR], parts[_MONTH], current, forward)
    values = getattr(pattern, _LEVEL_FIELDS[level]).sorted_values
    if forward:
        i = bisect_left(values, current)
        return values[i] if i < len(values) else None
    i = bisect_right(values, current)
    return values[i - 1] if i > 0 else None


def _seek_day(pattern: Pattern, year: int, month: int, day: int, forward: bool) -> int | None:
    last_day = _days_in_month(year, month)
    if forward:
        days = range(max(day, 1), last_day + 1)
    else:
        days = range(min(day, last_day), 0, -1)
    for d in days:
        if _day_matches(pattern, year, month, d):
            return d
    return None


# --- Iterator functions ---


def occurrences(pattern: Pattern, from_: datetime) -> Iterator[datetime]:
    """Returns a lazy iterator of occurrences strictly after `from_`.

    Each step is one bounded search, so the caller can stop at any point. The
    iterator ends when a search finds nothing within the horizon.
    """
    current = from_
    while True:
        nxt = next_occurrence(pattern, current)
        if nxt is None:
            return
        current = nxt
        yield nxt


def between(pattern: Pattern, from_: datetime, to: datetime) -> Iterator[datetime]:
    """Returns a bounded iterator of occurrences where `from_ < occurrence <= to`."""
    end = to_utc(to)
    for dt in occurrences(pattern, from_):
        if dt > end:
            return
        yield dt

from __future__ import annotations

from collections.abc import Callable

from ._pattern import (
    HOUR,
    MINUTE,
    MONTH_NAMES,
    SECOND,
    WEEKDAY_NAMES,
    FieldConstraint,
    FieldDomain,
    Pattern,
)

# Fixed times are listed individually up to this many hours; beyond that the
# hours are described as a set.
_MAX_LISTED_TIMES = 6


def describe(pattern: Pattern) -> str:
    """Render an English sentence for the pattern.

    The output depends only on the pattern's constraints, never on locale or
    the current time.
    """
    parts = [_describe_time(pattern)]

    days = _describe_days(pattern)
    if days:
        parts.append(days)

    if not pattern.months.wildcard:
        parts.append("in " + _format_set(pattern.months.sorted_values, _month_name))

    return " ".join(parts)


# --- Time of day ---


def _describe_time(p: Pattern) -> str:
    sec, minute, hour = p.seconds, p.minutes, p.hours
    seconds_matter = p.has_seconds and sec.sorted_values != (0,)

    if seconds_matter:
        if sec.wildcard and minute.wildcard and hour.wildcard:
            return "Every second"
        n = _step_of(sec, SECOND)
        if n and minute.wildcard and hour.wildcard:
            return f"Every {n} seconds"
        s, m, h = _single(sec), _single(minute), _single(hour)
        if s is not None and m is not None and h is not None:
            return f"At {h:02d}:{m:02d}:{s:02d}"
        return _describe_time_generic(p, seconds_matter)

    if minute.wildcard and hour.wildcard:
        return "Every minute"

    n = _step_of(minute, MINUTE)
    if n and hour.wildcard:
        return f"Every {n} minutes"

    m = _single(minute)
    if m is not None:
        if hour.wildcard:
            return f"At minute {m} past every hour"
        n = _step_of(hour, HOUR)
        if n:
            return f"At minute {m} past every {n} hours"
        if len(hour.values) <= _MAX_LISTED_TIMES:
            return "At " + _join([f"{h:02d}:{m:02d}" for h in hour.sorted_values])

    return _describe_time_generic(p, seconds_matter)


def _describe_time_generic(p: Pattern, seconds_matter: bool) -> str:
    pieces: list[str] = []
    if seconds_matter:
        pieces.append(_unit_phrase(p.seconds, SECOND, "second"))
    pieces.append(_unit_phrase(p.minutes, MINUTE, "minute"))
    if not p.hours.wildcard:
        pieces.append(_unit_phrase(p.hours, HOUR, "hour"))

    text = " past ".join(pieces)
    if text.startswith("every"):
        return text[0].upper() + text[1:]
    return "At " + text


def _unit_phrase(c: FieldConstraint, domain: FieldDomain, unit: str) -> str:
    if c.wildcard:
        return f"every {unit}"
    n = _step_of(c, domain)
    if n:
        return f"every {n} {unit}s"
    single = _single(c)
    if single is not None:
        return f"{unit} {single}"
    return f"{unit}s {_format_set(c.sorted_values, str)}"


# --- Days ---


def _describe_days(p: Pattern) -> str | None:
    dom, dow = p.days_of_month, p.days_of_week
    if dom.wildcard and dow.wildcard:
        return None

    dom_text = None if dom.wildcard else _describe_days_of_month(dom)
    dow_text = None if dow.wildcard else _describe_days_of_week(dow)
    if dom_text and dow_text:
        joiner = "and" if p.dom_and_dow else "or"
        return f"{dom_text} {joiner} {dow_text}"
    return dom_text or dow_text


def _describe_days_of_month(c: FieldConstraint) -> str:
    values = c.sorted_values
    if not c.has_markers and len(values) > 2 and _is_step_from_first_day(values):
        return f"on every {_ordinal(values[1] - values[0])} day of the month"

    items = _format_items(values, _ordinal)
    if c.last_day:
        items.append("last day")
    if c.last_weekday:
        items.append("last weekday")
    items.extend(f"weekday nearest the {_ordinal(d)}" for d in sorted(c.nearest_weekday))
    return f"on the {_join(items)} of the month"


def _describe_days_of_week(c: FieldConstraint) -> str:
    items = _format_items(c.sorted_values, _weekday_name)
    items.extend(f"the last {_weekday_name(d)} of the month" for d in sorted(c.last_of_month))
    items.extend(
        f"the {_ordinal(n)} {_weekday_name(d)} of the month" for d, n in sorted(c.nth_of_month)
    )
    return "on " + _join(items)


def _is_step_from_first_day(values: tuple[int, ...]) -> bool:
    step = values[1] - values[0]
    return values[0] == 1 and step > 1 and values == tuple(range(1, 32, step))


# --- Formatting helpers ---


def _single(c: FieldConstraint) -> int | None:
    if c.wildcard or len(c.values) != 1 or c.has_markers:
        return None
    return next(iter(c.values))


def _step_of(c: FieldConstraint, domain: FieldDomain) -> int | None:
    """The step N when the values are exactly `*/N` over the domain."""
    values = c.sorted_values
    if c.wildcard or len(values) < 2:
        return None
    step = values[1] - values[0]
    if step <= 1 or values != tuple(range(domain.minimum, domain.maximum + 1, step)):
        return None
    return step


def _format_set(values: tuple[int, ...], name: Callable[[int], str]) -> str:
    return _join(_format_items(values, name))


def _format_items(values: tuple[int, ...], name: Callable[[int], str]) -> list[str]:
    """Name each value, collapsing runs of three or more into `X through Y`."""
    items: list[str] = []
    i = 0
    while i < len(values):
        j = i
        while j + 1 < len(values) and values[j + 1] == values[j] + 1:
            j += 1
        if j - i >= 2:
            items.append(f"{name(values[i])} through {name(values[j])}")
        else:
            items.extend(name(v) for v in values[i : j + 1])
        i = j + 1
    return items


def _join(items: list[str]) -> str:
    if len(items) <= 1:
        return "".join(items)
    return ", ".join(items[:-1]) + " and " + items[-1]


def _weekday_name(n: int) -> str:
    return WEEKDAY_NAMES[n]


def _month_name(n: int) -> str:
    return MONTH_NAMES[n - 1]


def _ordinal(n: int) -> str:
    return f"{n}{_ordinal_suffix(n)}"


def _ordinal_suffix(n: int) -> str:
    mod100 = n % 100
    if 11 <= mod100 <= 13:
        return "th"
    match n % 10:
        case 1:
            return "st"
        case 2:
            return "nd"
        case 3:
            return "rd"
        case _:
            return "th"

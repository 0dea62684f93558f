from __future__ import annotations

import logging
from dataclasses import replace

from ._display import render
from ._error import CronError
from ._pattern import (
    DOMAINS,
    FieldConstraint,
    FieldDomain,
    FieldKind,
    Pattern,
    SecondsPolicy,
    every,
)

logger = logging.getLogger(__name__)

_DAY_KINDS = (FieldKind.DAY_OF_MONTH, FieldKind.DAY_OF_WEEK)

_SHORTCUTS: dict[str, str] = {
    "@yearly": "0 0 1 1 *",
    "@annually": "0 0 1 1 *",
    "@monthly": "0 0 1 * *",
    "@weekly": "0 0 * * 0",
    "@daily": "0 0 * * *",
    "@midnight": "0 0 * * *",
    "@hourly": "0 * * * *",
}


def parse(
    text: str,
    seconds: SecondsPolicy | str | None = SecondsPolicy.OPTIONAL,
    *,
    dom_and_dow: bool = False,
) -> Pattern:
    """Parse a 5- or 6-field cron pattern (or an @ shortcut) into a Pattern."""
    policy = SecondsPolicy.from_option(seconds)
    trimmed = text.strip()

    if trimmed.startswith("@"):
        expanded = _expand_shortcut(trimmed, policy, text)
    else:
        expanded = trimmed

    tokens = expanded.split()
    count = len(tokens)
    if count == 6 and policy.accepts_six:
        has_seconds = True
    elif count == 5 and policy.accepts_five:
        has_seconds = False
        tokens.insert(0, "0")
    else:
        raise CronError.field_count(_field_count_message(policy, count), text)

    constraints: list[FieldConstraint] = []
    for token, domain in zip(tokens, DOMAINS):
        try:
            constraints.append(parse_field(token, domain))
        except CronError as e:
            raise e.with_input(text) from None

    pattern = Pattern(
        *constraints,
        has_seconds=has_seconds,
        seconds_policy=policy,
        dom_and_dow=dom_and_dow,
        source=text,
    )
    return replace(pattern, canonical=render(pattern))


def validate(text: str, seconds: SecondsPolicy | str | None = SecondsPolicy.OPTIONAL) -> bool:
    try:
        parse(text, seconds)
        return True
    except CronError:
        return False


def _expand_shortcut(trimmed: str, policy: SecondsPolicy, text: str) -> str:
    expanded = _SHORTCUTS.get(trimmed.lower())
    if expanded is None:
        raise CronError.field_count(f"unknown @ shortcut: {trimmed}", text)
    if policy is SecondsPolicy.REQUIRED:
        expanded = "0 " + expanded
    logger.debug("expanded %s to %r", trimmed, expanded)
    return expanded


def _field_count_message(policy: SecondsPolicy, count: int) -> str:
    match policy:
        case SecondsPolicy.REQUIRED:
            return f"expected 6 fields (seconds required), got {count}"
        case SecondsPolicy.DISALLOWED:
            return f"expected 5 fields (seconds disallowed), got {count}"
        case _:
            return f"expected 5 or 6 fields, got {count}"


# --- Field grammar ---


def parse_field(text: str, domain: FieldDomain) -> FieldConstraint:
    """Parse one field's text into a FieldConstraint over `domain`.

    Comma-separated parts are unioned. The result is tagged as a wildcard only
    when every part is `*`, `?` or `*/1`.
    """
    index = domain.index
    if not text:
        raise CronError.malformed(index, text, "empty field")

    values: set[int] = set()
    wildcard = True
    last_day = False
    last_weekday = False
    nearest: set[int] = set()
    last_of_month: set[int] = set()
    nth: set[tuple[int, int]] = set()

    for part in text.split(","):
        if not part:
            raise CronError.malformed(index, text, "empty list item")
        upper = part.upper()

        if domain.kind is FieldKind.DAY_OF_MONTH and upper == "L":
            last_day = True
            wildcard = False
            continue
        if domain.kind is FieldKind.DAY_OF_MONTH and upper == "LW":
            last_weekday = True
            wildcard = False
            continue
        if domain.kind is FieldKind.DAY_OF_MONTH and upper.endswith("W") and part[:-1].isdigit():
            nearest.add(_parse_value(part[:-1], domain, part))
            wildcard = False
            continue
        if domain.kind is FieldKind.DAY_OF_WEEK and "#" in part:
            nth.add(_parse_nth_weekday(part, domain))
            wildcard = False
            continue
        if domain.kind is FieldKind.DAY_OF_WEEK and upper.endswith("L") and len(part) > 1:
            last_of_month.add(_canonical_dow(_parse_value(part[:-1], domain, part)))
            wildcard = False
            continue

        part_values, part_wildcard = _parse_part(part, domain)
        values.update(part_values)
        wildcard = wildcard and part_wildcard

    if domain.kind is FieldKind.DAY_OF_WEEK:
        values = {_canonical_dow(v) for v in values}

    if wildcard:
        return every(domain)

    return FieldConstraint(
        frozenset(values),
        last_day=last_day,
        last_weekday=last_weekday,
        nearest_weekday=frozenset(nearest),
        last_of_month=frozenset(last_of_month),
        nth_of_month=frozenset(nth),
    )


def _parse_part(part: str, domain: FieldDomain) -> tuple[list[int], bool]:
    """Parse one list item: `*`, `?`, `N`, `A-B`, `A/S`, `*/S` or `A-B/S`."""
    index = domain.index

    if part.count("/") > 1:
        raise CronError.malformed(index, part, "more than one '/'")
    base, slash, step_text = part.partition("/")

    step = 1
    if slash:
        step = _parse_step(step_text, domain, part)

    if base == "?":
        if domain.kind not in _DAY_KINDS or slash:
            raise CronError.malformed(index, part, "'?' is only allowed alone in day fields")
        return list(range(domain.minimum, domain.maximum + 1)), True

    if base == "*":
        start, end = domain.minimum, domain.maximum
        return list(range(start, end + 1, step)), step == 1

    if "-" in base:
        start_text, _, end_text = base.partition("-")
        start = _parse_value(start_text, domain, part)
        end = _parse_value(end_text, domain, part)
        if start > end:
            raise CronError.inverted_range(index, part)
        return list(range(start, end + 1, step)), False

    start = _parse_value(base, domain, part)
    if not slash:
        return [start], False
    return list(range(start, domain.maximum + 1, step)), False


def _parse_step(step_text: str, domain: FieldDomain, part: str) -> int:
    try:
        step = int(step_text)
    except ValueError:
        raise CronError.malformed(domain.index, part, "step must be an integer") from None
    if step <= 0:
        raise CronError.non_positive_step(domain.index, part)
    return step


def _parse_value(token: str, domain: FieldDomain, part: str) -> int:
    index = domain.index
    if not token:
        raise CronError.malformed(index, part, "missing value")

    if token.isascii() and token.isdigit():
        value = int(token)
    elif token.isalpha():
        alias = domain.lookup(token)
        if alias is None:
            raise CronError.unknown_alias(index, token)
        value = alias
    else:
        raise CronError.malformed(index, part)

    if value < domain.minimum or value > domain.maximum:
        raise CronError.out_of_domain(index, token, value, domain.minimum, domain.maximum)
    return value


def _parse_nth_weekday(part: str, domain: FieldDomain) -> tuple[int, int]:
    """Parse `D#N`, the N-th (1-5) weekday D of the month."""
    day_text, _, nth_text = part.partition("#")
    weekday = _canonical_dow(_parse_value(day_text, domain, part))
    if not (nth_text.isascii() and nth_text.isdigit()):
        raise CronError.malformed(domain.index, part, "expected D#N")
    nth = int(nth_text)
    if nth < 1 or nth > 5:
        raise CronError.out_of_domain(domain.index, nth_text, nth, 1, 5)
    return weekday, nth


def _canonical_dow(value: int) -> int:
    """Day-of-week 7 and 0 both mean Sunday."""
    return 0 if value == 7 else value



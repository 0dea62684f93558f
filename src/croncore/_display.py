from __future__ import annotations

from ._pattern import DOMAINS, FieldConstraint, FieldDomain, FieldKind, Pattern


def render(pattern: Pattern) -> str:
    """Render the canonical text of a pattern.

    Fields are joined by single spaces in the order
    `[second] minute hour day-of-month month day-of-week`; the second field is
    omitted for five-field patterns.
    """
    parts = [render_field(c, d) for c, d in zip(pattern.fields, DOMAINS)]
    if not pattern.has_seconds:
        parts = parts[1:]
    return " ".join(parts)


def render_field(constraint: FieldConstraint, domain: FieldDomain) -> str:
    if constraint.wildcard:
        return "*"

    items: list[str] = []
    if constraint.values:
        items.append(_render_values(constraint.sorted_values, domain))

    if domain.kind is FieldKind.DAY_OF_MONTH:
        if constraint.last_day:
            items.append("L")
        if constraint.last_weekday:
            items.append("LW")
        items.extend(f"{d}W" for d in sorted(constraint.nearest_weekday))
    elif domain.kind is FieldKind.DAY_OF_WEEK:
        items.extend(f"{d}L" for d in sorted(constraint.last_of_month))
        items.extend(f"{d}#{n}" for d, n in sorted(constraint.nth_of_month))

    return ",".join(items)


def _render_values(values: tuple[int, ...], domain: FieldDomain) -> str:
    step = _as_step(values, domain)
    if step is not None:
        return step
    return _render_list(values)


def _as_step(values: tuple[int, ...], domain: FieldDomain) -> str | None:
    """Return `*/N` or `S/N` if `values` is exactly that step's expansion."""
    if len(values) < 3:
        return None
    step = values[1] - values[0]
    if step <= 1:
        return None
    start = values[0]
    expanded = range(start, domain.maximum + 1, step)
    if domain.kind is FieldKind.DAY_OF_WEEK:
        expected = tuple(sorted({0 if v == 7 else v for v in expanded}))
    else:
        expected = tuple(expanded)
    if expected != values:
        return None
    if start == domain.minimum:
        return f"*/{step}"
    return f"{start}/{step}"


def _render_list(values: tuple[int, ...]) -> str:
    """Comma list where runs of three or more consecutive values become `A-B`."""
    parts: list[str] = []
    i = 0
    while i < len(values):
        j = i
        while j + 1 < len(values) and values[j + 1] == values[j] + 1:
            j += 1
        if j - i >= 2:
            parts.append(f"{values[i]}-{values[j]}")
            i = j + 1
        else:
            parts.append(str(values[i]))
            i += 1
    return ",".join(parts)

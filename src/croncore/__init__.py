from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime

from ._describe import describe
from ._display import render as canonical_text
from ._error import CronError, CronErrorKind
from ._eval import MAX_ITERATIONS, MAX_SEARCH_YEARS
from ._eval import between as _between
from ._eval import matches
from ._eval import next_n_occurrences, next_occurrence, previous_occurrence
from ._eval import occurrences as _occurrences
from ._instant import UTC, from_epoch_ms, to_epoch_ms, utc_now
from ._parser import parse, parse_field, validate
from ._pattern import (
    DAY_OF_MONTH,
    DAY_OF_WEEK,
    DOMAINS,
    HOUR,
    MINUTE,
    MONTH,
    SECOND,
    FieldConstraint,
    FieldDomain,
    FieldKind,
    Pattern,
    SecondsPolicy,
)


def has_seconds(pattern: Pattern) -> bool:
    return pattern.has_seconds


def parse_and_describe(text: str, seconds: SecondsPolicy | str | None = None) -> dict[str, str]:
    """Parse `text` and describe it in one call. Raises CronError if invalid."""
    pattern = parse(text, seconds)
    return {"pattern": text, "description": describe(pattern)}


class Cron:
    _pattern: Pattern

    def __init__(
        self,
        text: str,
        seconds: SecondsPolicy | str | None = None,
        *,
        dom_and_dow: bool = False,
    ) -> None:
        self._pattern = parse(text, seconds, dom_and_dow=dom_and_dow)

    @classmethod
    def from_pattern(cls, pattern: Pattern) -> Cron:
        cron = cls.__new__(cls)
        cron._pattern = pattern
        return cron

    @classmethod
    def parse(cls, text: str, seconds: SecondsPolicy | str | None = None) -> Cron:
        return cls(text, seconds)

    @classmethod
    def validate(cls, text: str, seconds: SecondsPolicy | str | None = None) -> bool:
        return validate(text, seconds)

    def matches(self, dt: datetime) -> bool:
        return matches(self._pattern, dt)

    def next_from(self, start: datetime | None = None, inclusive: bool = False) -> datetime | None:
        return next_occurrence(self._pattern, _or_now(start), inclusive)

    def next_n_from(self, count: int, start: datetime | None = None) -> list[datetime]:
        return next_n_occurrences(self._pattern, _or_now(start), count)

    def previous_from(
        self, start: datetime | None = None, inclusive: bool = False
    ) -> datetime | None:
        return previous_occurrence(self._pattern, _or_now(start), inclusive)

    def require_next(self, start: datetime | None = None, inclusive: bool = False) -> datetime:
        """Like `next_from`, but raises CronError(kind="exhausted") instead of returning None."""
        result = self.next_from(start, inclusive)
        if result is None:
            raise CronError.exhausted(self._pattern.canonical)
        return result

    def occurrences(self, from_: datetime | None = None) -> Iterator[datetime]:
        """Returns a lazy iterator of occurrences strictly after `from_`.

        The iterator is unbounded for satisfiable patterns; limit it with
        `itertools.islice` or stop consuming it.
        """
        return _occurrences(self._pattern, _or_now(from_))

    def between(self, from_: datetime, to: datetime) -> Iterator[datetime]:
        """Returns a bounded iterator of occurrences where `from_ < occurrence <= to`."""
        return _between(self._pattern, from_, to)

    def describe(self) -> str:
        return describe(self._pattern)

    @property
    def pattern(self) -> str:
        """The canonical text of the parsed pattern."""
        return self._pattern.canonical

    @property
    def source(self) -> str:
        return self._pattern.source

    @property
    def has_seconds(self) -> bool:
        return self._pattern.has_seconds

    @property
    def seconds_policy(self) -> SecondsPolicy:
        return self._pattern.seconds_policy

    @property
    def expression(self) -> Pattern:
        return self._pattern

    def __str__(self) -> str:
        return self._pattern.canonical

    def __repr__(self) -> str:
        return f"Cron({self._pattern.canonical!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cron):
            return NotImplemented
        return self._pattern == other._pattern

    def __hash__(self) -> int:
        return hash(self._pattern)


def _or_now(dt: datetime | None) -> datetime:
    return utc_now() if dt is None else dt


__all__ = [
    "Cron",
    "CronError",
    "CronErrorKind",
    "Pattern",
    "FieldConstraint",
    "FieldDomain",
    "FieldKind",
    "SecondsPolicy",
    "DOMAINS",
    "SECOND",
    "MINUTE",
    "HOUR",
    "DAY_OF_MONTH",
    "MONTH",
    "DAY_OF_WEEK",
    "MAX_SEARCH_YEARS",
    "MAX_ITERATIONS",
    "UTC",
    "parse",
    "parse_field",
    "validate",
    "matches",
    "next_occurrence",
    "next_n_occurrences",
    "previous_occurrence",
    "describe",
    "canonical_text",
    "has_seconds",
    "parse_and_describe",
    "from_epoch_ms",
    "to_epoch_ms",
]

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ._error import CronError


class FieldKind(Enum):
    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY_OF_MONTH = "day-of-month"
    MONTH = "month"
    DAY_OF_WEEK = "day-of-week"

    @property
    def index(self) -> int:
        """Slot position in a six-field pattern: second=0 ... day-of-week=5."""
        return _KIND_INDEX[self]

    def __str__(self) -> str:
        return self.value


_KIND_INDEX = {kind: i for i, kind in enumerate(FieldKind)}


class SecondsPolicy(Enum):
    OPTIONAL = "optional"
    REQUIRED = "required"
    DISALLOWED = "disallowed"

    @classmethod
    def from_option(cls, value: SecondsPolicy | str | None) -> SecondsPolicy:
        if value is None:
            return cls.OPTIONAL
        if isinstance(value, SecondsPolicy):
            return value
        if not isinstance(value, str):
            raise CronError.option("'seconds' option must be a string")
        try:
            return cls(value.lower())
        except ValueError:
            raise CronError.option(
                "'seconds' option must be 'optional', 'required', or 'disallowed'"
            ) from None

    @property
    def accepts_five(self) -> bool:
        return self is not SecondsPolicy.REQUIRED

    @property
    def accepts_six(self) -> bool:
        return self is not SecondsPolicy.DISALLOWED

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class FieldDomain:
    kind: FieldKind
    minimum: int
    maximum: int
    aliases: dict[str, int] = field(default_factory=dict, hash=False, compare=False)

    @property
    def index(self) -> int:
        return self.kind.index

    def lookup(self, name: str) -> int | None:
        return self.aliases.get(name.lower())


_MONTH_ALIASES: dict[str, int] = {
    "jan": 1,
    "january": 1,
    "feb": 2,
    "february": 2,
    "mar": 3,
    "march": 3,
    "apr": 4,
    "april": 4,
    "may": 5,
    "jun": 6,
    "june": 6,
    "jul": 7,
    "july": 7,
    "aug": 8,
    "august": 8,
    "sep": 9,
    "september": 9,
    "oct": 10,
    "october": 10,
    "nov": 11,
    "november": 11,
    "dec": 12,
    "december": 12,
}

_WEEKDAY_ALIASES: dict[str, int] = {
    "sun": 0,
    "sunday": 0,
    "mon": 1,
    "monday": 1,
    "tue": 2,
    "tuesday": 2,
    "wed": 3,
    "wednesday": 3,
    "thu": 4,
    "thursday": 4,
    "fri": 5,
    "friday": 5,
    "sat": 6,
    "saturday": 6,
}

SECOND = FieldDomain(FieldKind.SECOND, 0, 59)
MINUTE = FieldDomain(FieldKind.MINUTE, 0, 59)
HOUR = FieldDomain(FieldKind.HOUR, 0, 23)
DAY_OF_MONTH = FieldDomain(FieldKind.DAY_OF_MONTH, 1, 31)
MONTH = FieldDomain(FieldKind.MONTH, 1, 12, _MONTH_ALIASES)
DAY_OF_WEEK = FieldDomain(FieldKind.DAY_OF_WEEK, 0, 7, _WEEKDAY_ALIASES)

DOMAINS: tuple[FieldDomain, ...] = (SECOND, MINUTE, HOUR, DAY_OF_MONTH, MONTH, DAY_OF_WEEK)

WEEKDAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


@dataclass(frozen=True, slots=True)
class FieldConstraint:
    """Parsed form of one field.

    `values` holds the plain allowed numbers. `wildcard` records that the field
    was written unrestricted (`*`, `?` or `*/1`), which the day rule depends on.
    The remaining members are day-field markers that depend on the calendar:

    - `last_day` (`L`) and `last_weekday` (`LW`) for day-of-month,
    - `nearest_weekday` (`15W`) for day-of-month,
    - `last_of_month` (`5L`) and `nth_of_month` (`5#3`) for day-of-week.
    """

    values: frozenset[int]
    wildcard: bool = False
    last_day: bool = False
    last_weekday: bool = False
    nearest_weekday: frozenset[int] = frozenset()
    last_of_month: frozenset[int] = frozenset()
    nth_of_month: frozenset[tuple[int, int]] = frozenset()

    @property
    def has_markers(self) -> bool:
        return bool(
            self.last_day
            or self.last_weekday
            or self.nearest_weekday
            or self.last_of_month
            or self.nth_of_month
        )

    @property
    def sorted_values(self) -> tuple[int, ...]:
        return tuple(sorted(self.values))

    def __contains__(self, value: object) -> bool:
        return value in self.values


def every(domain: FieldDomain) -> FieldConstraint:
    """The unrestricted constraint for a domain."""
    top = 6 if domain.kind is FieldKind.DAY_OF_WEEK else domain.maximum
    return FieldConstraint(frozenset(range(domain.minimum, top + 1)), wildcard=True)


@dataclass(frozen=True, slots=True)
class Pattern:
    seconds: FieldConstraint
    minutes: FieldConstraint
    hours: FieldConstraint
    days_of_month: FieldConstraint
    months: FieldConstraint
    days_of_week: FieldConstraint
    has_seconds: bool
    seconds_policy: SecondsPolicy = SecondsPolicy.OPTIONAL
    dom_and_dow: bool = False
    source: str = field(default="", compare=False)
    canonical: str = ""

    @property
    def fields(self) -> tuple[FieldConstraint, ...]:
        return (
            self.seconds,
            self.minutes,
            self.hours,
            self.days_of_month,
            self.months,
            self.days_of_week,
        )

    def __str__(self) -> str:
        return self.canonical

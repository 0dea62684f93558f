from __future__ import annotations

from typing import Literal

CronErrorKind = Literal[
    "field_count",
    "unknown_alias",
    "out_of_domain",
    "inverted_range",
    "non_positive_step",
    "malformed_token",
    "exhausted",
    "option",
]

FIELD_NAMES = ("second", "minute", "hour", "day-of-month", "month", "day-of-week")


class CronError(Exception):
    kind: CronErrorKind
    field_index: int | None
    token: str | None
    input_text: str | None

    def __init__(
        self,
        kind: CronErrorKind,
        message: str,
        field_index: int | None = None,
        token: str | None = None,
        input_text: str | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.field_index = field_index
        self.token = token
        self.input_text = input_text

    @property
    def field_name(self) -> str | None:
        if self.field_index is None:
            return None
        return FIELD_NAMES[self.field_index]

    @classmethod
    def field_count(cls, message: str, input_text: str) -> CronError:
        return cls("field_count", message, input_text=input_text)

    @classmethod
    def unknown_alias(cls, field_index: int, token: str) -> CronError:
        return cls(
            "unknown_alias",
            f"unknown {FIELD_NAMES[field_index]} name: {token!r}",
            field_index,
            token,
        )

    @classmethod
    def out_of_domain(
        cls, field_index: int, token: str, value: int, minimum: int, maximum: int
    ) -> CronError:
        return cls(
            "out_of_domain",
            f"{FIELD_NAMES[field_index]} must be {minimum}-{maximum}, got {value}",
            field_index,
            token,
        )

    @classmethod
    def inverted_range(cls, field_index: int, token: str) -> CronError:
        return cls(
            "inverted_range",
            f"{FIELD_NAMES[field_index]} range start must be <= end: {token!r}",
            field_index,
            token,
        )

    @classmethod
    def non_positive_step(cls, field_index: int, token: str) -> CronError:
        return cls(
            "non_positive_step",
            f"{FIELD_NAMES[field_index]} step must be positive: {token!r}",
            field_index,
            token,
        )

    @classmethod
    def malformed(cls, field_index: int, token: str, detail: str | None = None) -> CronError:
        message = f"malformed {FIELD_NAMES[field_index]} token: {token!r}"
        if detail:
            message += f" ({detail})"
        return cls("malformed_token", message, field_index, token)

    @classmethod
    def exhausted(cls, pattern: str) -> CronError:
        return cls("exhausted", f"no occurrence of {pattern!r} within the search horizon")

    @classmethod
    def option(cls, message: str) -> CronError:
        return cls("option", message)

    def with_input(self, input_text: str) -> CronError:
        """Attach the full pattern text so `display_rich` can point at the token."""
        self.input_text = input_text
        return self

    def display_rich(self) -> str:
        if self.token and self.input_text and self.field_index is not None:
            start = _locate_token(self.input_text, self.field_index, self.token)
            if start is not None:
                out = f"error: {self}\n"
                out += f"  {self.input_text}\n"
                out += " " * (start + 2) + "^" * max(len(self.token), 1)
                return out
        return f"error: {self}"


def _locate_token(input_text: str, field_index: int, token: str) -> int | None:
    # Field indexes count the seconds slot; five-field input starts at minute.
    fields: list[tuple[int, str]] = []
    pos = 0
    for part in input_text.split():
        pos = input_text.index(part, pos)
        fields.append((pos, part))
        pos += len(part)
    if len(fields) == 5:
        field_index -= 1
    if not 0 <= field_index < len(fields):
        return None
    offset, text = fields[field_index]
    found = text.find(token)
    return None if found < 0 else offset + found

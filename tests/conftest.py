from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

import pytest

from croncore import UTC

CONFORMANCE_PATH = Path(__file__).parent / "conformance.json"


def load_conformance() -> dict:  # type: ignore[type-arg]
    with open(CONFORMANCE_PATH) as f:
        return json.load(f)


def parse_instant(s: str) -> datetime:
    """Parse '2024-01-01T00:00:00+00:00' into a UTC datetime."""
    dt = datetime.fromisoformat(s)
    if dt.tzinfo is None:
        raise ValueError(f"expected an offset in {s!r}")
    return dt.astimezone(UTC)


def format_instant(dt: datetime) -> str:
    """Format a UTC datetime as '2024-01-01T00:00:00+00:00'."""
    if dt.tzinfo is None:
        raise ValueError("datetime must be timezone-aware")
    return dt.astimezone(UTC).isoformat()


def utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=UTC)


@pytest.fixture(scope="session")
def conformance() -> dict:  # type: ignore[type-arg]
    return load_conformance()


@pytest.fixture(scope="session")
def default_now(conformance: dict) -> datetime:  # type: ignore[type-arg]
    return parse_instant(conformance["now"])

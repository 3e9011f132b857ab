"""Compact duration tokens used by the engine's query-string parameters."""

from __future__ import annotations

import re
from datetime import timedelta

_TOKEN_RE = re.compile(r"^(?P<amount>\d+)(?P<unit>d|h|m|s|ms|micros|nanos)$")

# Largest unit first so formatting picks the coarsest exact representation.
_UNITS: tuple[tuple[str, timedelta], ...] = (
    ("d", timedelta(days=1)),
    ("h", timedelta(hours=1)),
    ("m", timedelta(minutes=1)),
    ("s", timedelta(seconds=1)),
    ("ms", timedelta(milliseconds=1)),
    ("micros", timedelta(microseconds=1)),
)

MINUS_ONE = "-1"
ZERO = "0"
# "-1" is the engine's "no timeout" sentinel, not a real negative span.
_MINUS_ONE_DELTA = timedelta(milliseconds=-1)


def is_duration_token(value: str) -> bool:
    return value in (MINUS_ONE, ZERO) or _TOKEN_RE.match(value) is not None


def format_duration(value: timedelta | str | int | float) -> str:
    """Render ``value`` as a duration token such as ``30s`` or ``5m``.

    Integers and floats are read as milliseconds. Strings must already be
    valid tokens and are returned unchanged.
    """
    if isinstance(value, bool):
        raise ValueError("booleans are not durations")
    if isinstance(value, str):
        token = value.strip()
        if not is_duration_token(token):
            raise ValueError(f"invalid duration token {value!r}")
        return token
    if isinstance(value, (int, float)):
        try:
            value = timedelta(milliseconds=value)
        except OverflowError as error:
            raise ValueError(f"duration {value!r}ms is out of range") from error
    if not isinstance(value, timedelta):
        raise ValueError(f"cannot format {type(value).__name__} as a duration")

    if value == _MINUS_ONE_DELTA:
        return MINUS_ONE
    if value < timedelta(0):
        raise ValueError(f"negative duration {value!r}")
    if value == timedelta(0):
        return "0s"

    for unit, size in _UNITS:
        amount, remainder = divmod(value, size)
        if not remainder:
            return f"{amount}{unit}"
    # timedelta resolution is one microsecond, so the loop always returns.
    raise ValueError(f"cannot format duration {value!r}")


def parse_duration(token: str) -> timedelta:
    token = token.strip()
    if token == ZERO:
        return timedelta(0)
    if token == MINUS_ONE:
        return _MINUS_ONE_DELTA

    match = _TOKEN_RE.match(token)
    if match is None:
        raise ValueError(f"invalid duration token {token!r}")

    amount = int(match.group("amount"))
    unit = match.group("unit")
    try:
        if unit == "nanos":
            return timedelta(microseconds=round(amount / 1000))
        for name, size in _UNITS:
            if name == unit:
                return size * amount
    except OverflowError as error:
        raise ValueError(f"duration token {token!r} is out of range") from error
    raise ValueError(f"unknown duration unit {unit!r}")

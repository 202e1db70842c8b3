# flagtree CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Contains the pure string-to-value conversions used by the concrete flag kinds.

Every function here takes raw text from the command line or the environment
and either returns a typed value or raises `ValueError`. None of them touch
flag state, so they are safe to call outside any lock.

Functions:
- coerce_bool: Strict boolean parsing (`true/t/1/yes/y/on`, `false/f/0/no/n/off`).
- coerce_int: Base-10 integer within an inclusive range.
- coerce_float: Float parsing that rejects NaN.
- coerce_duration: Go-style durations such as `1h30m`, `250ms`, `1.5s`.
- coerce_size: Byte sizes such as `512`, `10KB`, `1.5GiB`, `4k`.
- coerce_datetime: Date/time parsing backed by `dateutil`.
- split_items: Delimiter split with trimming and empty items dropped.
- format_duration / format_size: Reverse renderings used in help output.
"""
from __future__ import annotations

import math
import re
from datetime import datetime, timedelta
from decimal import Decimal

from dateutil import parser as date_parser

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

TRUE_VALUES = {"true", "t", "1", "yes", "y", "on"}
FALSE_VALUES = {"false", "f", "0", "no", "n", "off"}

DURATION_UNITS: dict[str, float] = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
    "d": 86400.0,
}

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h|d)")

SIZE_UNITS: dict[str, int] = {
    "": 1,
    "b": 1,
    "byte": 1,
    "bytes": 1,
    "kb": 1000,
    "mb": 1000**2,
    "gb": 1000**3,
    "tb": 1000**4,
    "pb": 1000**5,
    "kib": 1024,
    "mib": 1024**2,
    "gib": 1024**3,
    "tib": 1024**4,
    "pib": 1024**5,
    "k": 1024,
    "m": 1024**2,
    "g": 1024**3,
    "t": 1024**4,
    "p": 1024**5,
}

_SIZE_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?|\.\d+)\s*([a-zA-Z]*)\s*$")


def coerce_bool(value: str) -> bool:
    """
    Convert a string to a boolean.

    An empty string is treated as `True` so that a bare `--flag` (or an
    empty inline value) enables the flag.

    Raises:
        ValueError: If the text is not a recognised boolean spelling.
    """
    if isinstance(value, bool):
        return value
    text = value.strip().lower()
    if text == "" or text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise ValueError(f"'{value}' is not a valid boolean")


def coerce_int(value: str, minimum: int = INT64_MIN, maximum: int = INT64_MAX) -> int:
    """Parse a base-10 integer and check it lies within [minimum, maximum]."""
    text = value.strip()
    if not text:
        raise ValueError("empty integer value")
    number = int(text, 10)
    if number < minimum or number > maximum:
        raise ValueError(f"{number} is out of range [{minimum}, {maximum}]")
    return number


def coerce_float(value: str) -> float:
    number = float(value.strip())
    if math.isnan(number):
        raise ValueError("NaN is not a valid number")
    return number


def coerce_duration(value: str) -> timedelta:
    """
    Parse a Go-style duration string.

    A duration is an optionally signed sequence of decimal numbers, each
    with an optional fraction and a unit suffix: `300ms`, `-1.5h`, `2h45m`.
    Valid units are `ns`, `us` (or `µs`), `ms`, `s`, `m`, `h` and `d`. The
    single value `0` needs no unit.

    Raises:
        ValueError: If the text does not follow the grammar.
    """
    text = value.strip()
    if not text:
        raise ValueError("empty duration")
    sign = 1
    if text[0] in "+-":
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    if text == "0":
        return timedelta(0)
    seconds = 0.0
    position = 0
    for match in _DURATION_PART.finditer(text):
        if match.start() != position:
            break
        amount, unit = match.groups()
        seconds += DURATION_UNITS[unit] * float(amount)
        position = match.end()
    if position == 0 or position != len(text):
        raise ValueError(f"invalid duration '{value}'")
    return timedelta(seconds=seconds * sign)


def format_duration(value: timedelta) -> str:
    """Render a timedelta back into the compact `1h2m3s` form."""
    total = value.total_seconds()
    if total == 0:
        return "0s"
    sign = "-" if total < 0 else ""
    total = abs(total)
    hours, remainder = divmod(total, 3600)
    minutes, seconds = divmod(remainder, 60)
    parts = []
    if hours:
        parts.append(f"{int(hours)}h")
    if minutes:
        parts.append(f"{int(minutes)}m")
    if seconds:
        if seconds < 1 and not parts:
            parts.append(f"{round(seconds * 1000, 3):g}ms")
        else:
            parts.append(f"{round(seconds, 6):g}s")
    return sign + "".join(parts)


def coerce_size(value: str) -> int:
    """
    Parse a byte size with an optional unit.

    Units are case-insensitive. `KB`, `MB`, `GB`, `TB`, `PB` are decimal
    (powers of 1000); `KiB` .. `PiB` and the bare letters `K`, `M`, `G`,
    `T`, `P` are binary (powers of 1024). Fractions are allowed; the amount
    is multiplied exactly and truncated to whole bytes.

    Raises:
        ValueError: On an unknown unit, a negative size or malformed text.
    """
    match = _SIZE_PATTERN.match(value)
    if not match:
        raise ValueError(f"invalid size '{value}'")
    amount, unit = match.groups()
    multiplier = SIZE_UNITS.get(unit.lower())
    if multiplier is None:
        raise ValueError(f"unknown size unit '{unit}'")
    return int(Decimal(amount) * multiplier)


def format_size(value: int) -> str:
    for unit, multiplier in (("PiB", 1024**5), ("GiB", 1024**3), ("MiB", 1024**2), ("KiB", 1024)):
        if value >= multiplier and value % multiplier == 0:
            return f"{value // multiplier}{unit}"
    return f"{value}B"


def coerce_datetime(value: str) -> datetime:
    """Parse a date or date-time string with `dateutil`."""
    text = value.strip()
    if not text:
        raise ValueError("empty time value")
    try:
        return date_parser.parse(text)
    except (date_parser.ParserError, OverflowError) as error:
        raise ValueError(f"invalid time '{value}'") from error


def split_items(value: str, delimiter: str = ",") -> list[str]:
    """Split on `delimiter`, strip each item and drop empty ones."""
    return [item.strip() for item in value.split(delimiter) if item.strip()]

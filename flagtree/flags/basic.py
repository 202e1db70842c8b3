# flagtree CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Scalar flag kinds: strings, booleans, the integer family and floats.

Each kind is a thin `Flag` subclass that supplies a `FlagType`, a default
when none is given and a `parse()` built on the helpers in
`flagtree.flags.coercion`.

The integer kinds differ only in their accepted range:

| kind         | range                  |
|--------------|------------------------|
| IntFlag      | signed 64-bit          |
| Int64Flag    | signed 64-bit          |
| UintFlag     | 0 .. 2**64 - 1         |
| Uint8Flag    | 0 .. 255               |
| Uint16Flag   | 0 .. 65535             |
| Uint32Flag   | 0 .. 2**32 - 1         |
| Uint64Flag   | 0 .. 2**64 - 1         |
"""
from __future__ import annotations

from typing import Any

from flagtree.flags.coercion import (
    INT64_MAX,
    INT64_MIN,
    coerce_bool,
    coerce_float,
    coerce_int,
)
from flagtree.flags.flag import Flag
from flagtree.flags.flag_type import FlagType


class StringFlag(Flag[str]):
    """Stores the raw text unchanged."""

    flag_type = FlagType.STRING

    def normalize_default(self, default: Any) -> str:
        return "" if default is None else str(default)

    def parse(self, text: str) -> str:
        return text

    def length(self) -> int:
        return len(self.get())

    def contains(self, substring: str) -> bool:
        return substring in self.get()


class BoolFlag(Flag[bool]):
    """
    Boolean flag. May appear bare on the command line (`--verbose`), which
    sets it to `True`, or with an inline value (`--verbose=false`).
    """

    flag_type = FlagType.BOOL

    def normalize_default(self, default: Any) -> bool:
        return False if default is None else bool(default)

    def parse(self, text: str) -> bool:
        return coerce_bool(text)

    def format_value(self, value: bool) -> str:
        return "true" if value else "false"

    @property
    def is_bool(self) -> bool:
        return True

    def toggle(self) -> None:
        self.set_value(not self.get())


class _IntegerFlag(Flag[int]):
    minimum: int = INT64_MIN
    maximum: int = INT64_MAX

    def normalize_default(self, default: Any) -> int:
        if default is None:
            return 0
        if isinstance(default, bool) or not isinstance(default, int):
            raise TypeError(f"{type(self).__name__} default must be an int, got {default!r}")
        return default

    def parse(self, text: str) -> int:
        return coerce_int(text, self.minimum, self.maximum)


class IntFlag(_IntegerFlag):
    flag_type = FlagType.INT


class Int64Flag(_IntegerFlag):
    flag_type = FlagType.INT64


class UintFlag(_IntegerFlag):
    flag_type = FlagType.UINT
    minimum = 0
    maximum = 2**64 - 1


class Uint8Flag(_IntegerFlag):
    flag_type = FlagType.UINT8
    minimum = 0
    maximum = 2**8 - 1


class Uint16Flag(_IntegerFlag):
    flag_type = FlagType.UINT16
    minimum = 0
    maximum = 2**16 - 1


class Uint32Flag(_IntegerFlag):
    flag_type = FlagType.UINT32
    minimum = 0
    maximum = 2**32 - 1


class Uint64Flag(_IntegerFlag):
    flag_type = FlagType.UINT64
    minimum = 0
    maximum = 2**64 - 1


class FloatFlag(Flag[float]):
    """64-bit float. `NaN` is rejected, infinities are accepted."""

    flag_type = FlagType.FLOAT64

    def normalize_default(self, default: Any) -> float:
        return 0.0 if default is None else float(default)

    def parse(self, text: str) -> float:
        return coerce_float(text)

    def format_value(self, value: float) -> str:
        return f"{value:g}"

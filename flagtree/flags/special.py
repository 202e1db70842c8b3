# flagtree CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Flag kinds with domain specific parsing.

- EnumFlag: one value out of a fixed set of choices
- DurationFlag: Go-style durations (`1h30m`, `250ms`) stored as `timedelta`
- TimeFlag: dates and timestamps parsed by `dateutil`, stored as `datetime`
- SizeFlag: byte sizes with units (`10MB`, `1.5GiB`), stored as `int`
- PathFlag: filesystem paths stored as `pathlib.Path` (`~` expanded)
- IPFlag / IPv4Flag / IPv6Flag: addresses from the `ipaddress` module
- URLFlag: absolute URLs with a scheme and a host
"""
from __future__ import annotations

import ipaddress
import threading
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Sequence
from urllib.parse import urlparse

from flagtree.exceptions import FlagValidationError
from flagtree.flags.coercion import (
    coerce_datetime,
    coerce_duration,
    coerce_size,
    format_duration,
    format_size,
)
from flagtree.flags.flag import Flag
from flagtree.flags.flag_type import FlagType


class EnumFlag(Flag[str]):
    """
    String flag restricted to a set of choices.

    Args:
        choices (Sequence[str]): Allowed values. Must be non-empty and may not contain "".
        case_sensitive (bool): When False, input is matched case-insensitively and
            stored in the spelling used by `choices`.

    An empty default means "no choice made". A non-empty default must be one
    of the choices.
    """

    flag_type = FlagType.ENUM

    def __init__(
        self,
        long_name: str = "",
        short_name: str = "",
        description: str = "",
        default: Any = None,
        *,
        choices: Sequence[str] = (),
        case_sensitive: bool = True,
        **kwargs: Any,
    ) -> None:
        choices = list(choices)
        if not choices:
            raise FlagValidationError("enum flag requires at least one choice")
        if any(choice == "" for choice in choices):
            raise FlagValidationError("empty string cannot be used as an enum choice")
        self.case_sensitive = case_sensitive
        self._choices: list[str] = list(dict.fromkeys(choices))
        self._lookup: dict[str, str] = {
            self._key(choice): choice for choice in self._choices
        }
        super().__init__(long_name, short_name, description, default, **kwargs)

    def _key(self, value: str) -> str:
        return value if self.case_sensitive else value.lower()

    def normalize_default(self, default: Any) -> str:
        if default is None or default == "":
            return ""
        default = str(default)
        canonical = self._lookup.get(self._key(default))
        if canonical is None:
            raise FlagValidationError(
                f"default value '{default}' must be one of: {', '.join(self._choices)}"
            )
        return canonical

    def parse(self, text: str) -> str:
        if text == "":
            raise ValueError("empty value not allowed for enum flag")
        canonical = self._lookup.get(self._key(text))
        if canonical is None:
            raise ValueError(
                f"invalid enum value '{text}', allowed values are: {', '.join(self._choices)}"
            )
        return canonical

    def is_allowed(self, value: str) -> bool:
        return self._key(value) in self._lookup

    def enum_values(self) -> list[str]:
        return list(self._choices)

    @property
    def choices(self) -> list[str]:
        return self.enum_values()


class DurationFlag(Flag[timedelta]):
    flag_type = FlagType.DURATION

    def normalize_default(self, default: Any) -> timedelta:
        if default is None:
            return timedelta(0)
        if isinstance(default, str):
            return coerce_duration(default)
        if isinstance(default, (int, float)):
            return timedelta(seconds=default)
        return default

    def parse(self, text: str) -> timedelta:
        return coerce_duration(text)

    def format_value(self, value: timedelta) -> str:
        return format_duration(value)


class TimeFlag(Flag[datetime]):
    """
    Date/time flag. Anything `dateutil.parser.parse` understands is accepted
    (`2025-01-02`, `2025-01-02T15:04:05Z`, `Jan 2 2025 3pm`, ...).

    The last accepted input text is kept in `raw_input`, updated under the
    same lock as the stored value.
    """

    flag_type = FlagType.TIME

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self._input_lock = threading.Lock()
        self._raw_input: str = ""
        super().__init__(*args, **kwargs)

    @property
    def raw_input(self) -> str:
        with self._input_lock:
            return self._raw_input

    def normalize_default(self, default: Any) -> datetime:
        if default is None:
            return datetime.min
        if isinstance(default, str):
            return coerce_datetime(default)
        return default

    def parse(self, text: str) -> datetime:
        return coerce_datetime(text)

    def set(self, text: str) -> None:
        value = self._convert(text)
        with self._input_lock:
            super().set_value(value)
            self._raw_input = text

    def set_value(self, value: datetime) -> None:
        with self._input_lock:
            super().set_value(value)
            self._raw_input = self.format_value(value)

    def reset(self) -> None:
        with self._input_lock:
            super().reset()
            self._raw_input = ""

    def format_value(self, value: datetime) -> str:
        if value == datetime.min:
            return ""
        return value.isoformat()


class SizeFlag(Flag[int]):
    """Byte size. See `coerce_size` for the accepted units."""

    flag_type = FlagType.SIZE

    def normalize_default(self, default: Any) -> int:
        if default is None:
            return 0
        if isinstance(default, str):
            return coerce_size(default)
        if default < 0:
            raise ValueError("size cannot be negative")
        return int(default)

    def parse(self, text: str) -> int:
        return coerce_size(text)

    def format_value(self, value: int) -> str:
        return format_size(value)


class PathFlag(Flag[Path]):
    """
    Filesystem path. The path is not required to exist; it is only checked
    for being non-empty and has a leading `~` expanded.

    Args:
        absolute (bool): Make the stored path absolute relative to the cwd.
    """

    flag_type = FlagType.PATH

    def __init__(self, *args: Any, absolute: bool = False, **kwargs: Any) -> None:
        self.absolute = absolute
        super().__init__(*args, **kwargs)

    def _to_path(self, text: str | Path) -> Path:
        path = Path(text).expanduser()
        return path.absolute() if self.absolute else path

    def normalize_default(self, default: Any) -> Path:
        if default is None or default == "":
            return Path()
        return self._to_path(default)

    def parse(self, text: str) -> Path:
        if not text.strip():
            raise ValueError("path cannot be empty")
        if "\x00" in text:
            raise ValueError("path cannot contain NUL bytes")
        return self._to_path(text.strip())


class IPFlag(Flag[Any]):
    """IPv4 or IPv6 address."""

    flag_type = FlagType.IP
    version: int | None = None
    unspecified = "0.0.0.0"

    def normalize_default(self, default: Any) -> Any:
        if default is None or default == "":
            return ipaddress.ip_address(self.unspecified)
        return self.parse(str(default))

    def parse(self, text: str) -> Any:
        address = ipaddress.ip_address(text.strip())
        if self.version is not None and address.version != self.version:
            raise ValueError(f"'{text}' is not an IPv{self.version} address")
        return address


class IPv4Flag(IPFlag):
    flag_type = FlagType.IP4
    version = 4


class IPv6Flag(IPFlag):
    flag_type = FlagType.IP6
    version = 6
    unspecified = "::"


class URLFlag(Flag[str]):
    """
    Absolute URL. Requires a scheme and a network location.

    Args:
        schemes (Sequence[str] | None): Restrict the accepted schemes, e.g. ("http", "https").
    """

    flag_type = FlagType.URL

    def __init__(self, *args: Any, schemes: Sequence[str] | None = None, **kwargs: Any) -> None:
        self.schemes = tuple(scheme.lower() for scheme in schemes) if schemes else None
        super().__init__(*args, **kwargs)

    def normalize_default(self, default: Any) -> str:
        if default is None or default == "":
            return ""
        return self.parse(str(default))

    def parse(self, text: str) -> str:
        text = text.strip()
        if not text:
            raise ValueError("url cannot be empty")
        parsed = urlparse(text)
        if not parsed.scheme:
            raise ValueError(f"url '{text}' must include a scheme")
        if not parsed.netloc:
            raise ValueError(f"url '{text}' must include a host")
        if self.schemes and parsed.scheme.lower() not in self.schemes:
            raise ValueError(
                f"url scheme '{parsed.scheme}' not allowed, expected one of: {', '.join(self.schemes)}"
            )
        return parsed.geturl()

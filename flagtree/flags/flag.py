# flagtree CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `Flag`, the public interface implemented by every flag kind.

A `Flag` owns a `BaseFlag` (composition, not inheritance) and forwards the
shared operations to it. Each concrete kind only contributes:

- `flag_type`: its `FlagType`
- `parse(text)`: a pure string → value conversion that raises `ValueError`
  on malformed input
- optionally `format_value(value)` and `normalize_default(default)`

`set(text)` is always "parse, then delegate the commit to the base", so a
malformed value never touches the stored state.

Example:
    port = IntFlag("port", "p", "Port to listen on", default=8080)
    port.set("9090")
    port.get()       # 9090
    port.reset()
    port.get()       # 8080
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from flagtree.exceptions import FlagTreeError, FlagValidationError
from flagtree.flags.base_flag import BaseFlag, Validator
from flagtree.flags.flag_type import FlagType

T = TypeVar("T")


class Flag(ABC, Generic[T]):
    """
    Abstract flag interface backed by an owned `BaseFlag`.

    Args:
        long_name (str): Long name, used as `--long_name`.
        short_name (str): Short name, used as `-s`.
        description (str): Help text.
        default (T): Default value returned while the flag is unset.
        validator (Validator | None): Optional callable rejecting values by raising.
        env (str): Optional environment variable bound to the flag.
    """

    flag_type: FlagType = FlagType.UNKNOWN

    def __init__(
        self,
        long_name: str = "",
        short_name: str = "",
        description: str = "",
        default: Any = None,
        *,
        validator: Validator | None = None,
        env: str = "",
    ) -> None:
        self._base: BaseFlag[T] = BaseFlag()
        self.init(long_name, short_name, description, self.normalize_default(default))
        if validator is not None:
            self._base.set_validator(validator)
        if env:
            self._base.bind_env(env)

    def init(self, long_name: str, short_name: str, description: str, default: T) -> None:
        """Initialize metadata. Raises on a second call."""
        self._base.init(long_name, short_name, description, default)

    def normalize_default(self, default: Any) -> T:
        """Turn the constructor default into a typed value. Kinds override this."""
        return default

    @abstractmethod
    def parse(self, text: str) -> T:
        """Convert command-line or environment text into a typed value."""

    def format_value(self, value: T) -> str:
        """Render a typed value for help and `str()`."""
        return str(value)

    def _convert(self, text: str) -> T:
        try:
            return self.parse(text)
        except FlagTreeError:
            raise
        except (ValueError, TypeError, OverflowError) as error:
            raise FlagValidationError(
                f"invalid value {text!r} for flag {self.display_name}", cause=error
            ) from error

    def set(self, text: str) -> None:
        """Parse `text` and commit the result through the base flag."""
        self._base.set(self._convert(text))

    def set_value(self, value: T) -> None:
        """Commit an already typed value (validator still runs)."""
        self._base.set(value)

    def check(self, text: str) -> T:
        """Parse and validate `text` without committing it."""
        value = self._convert(text)
        self._base.validate(value)
        return value

    def get(self) -> T:
        return self._base.get()

    def value_ref(self) -> T:
        """Live stored object. Mutations bypass validation and locking."""
        return self._base.value_ref()

    def reset(self) -> None:
        self._base.reset()

    def is_set(self) -> bool:
        return self._base.is_set()

    def bind_env(self, env_name: str) -> Flag[T]:
        """Bind an environment variable name. Returns the flag for chaining."""
        self._base.bind_env(env_name)
        return self

    @property
    def env_var(self) -> str:
        return self._base.env_var

    def set_validator(self, validator: Validator | None) -> Flag[T]:
        self._base.set_validator(validator)
        return self

    def clear_validator(self) -> None:
        self._base.clear_validator()

    def has_validator(self) -> bool:
        return self._base.has_validator()

    @property
    def name(self) -> str:
        return self._base.name

    @property
    def long_name(self) -> str:
        return self._base.long_name

    @property
    def short_name(self) -> str:
        return self._base.short_name

    @property
    def description(self) -> str:
        return self._base.description

    @property
    def display_name(self) -> str:
        return self._base.display_name

    @property
    def default(self) -> T:
        return self._base.default

    @property
    def is_bool(self) -> bool:
        """True if the flag may appear without a value on the command line."""
        return False

    def enum_values(self) -> list[str]:
        """Allowed values for enum kinds, empty otherwise."""
        return []

    def default_text(self) -> str:
        return self.format_value(self.default)

    def __str__(self) -> str:
        return self.format_value(self.get())

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(name={self.display_name!r}, "
            f"type={self.flag_type}, set={self.is_set()})"
        )

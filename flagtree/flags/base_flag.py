# flagtree CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `BaseFlag`, the generic state holder shared by every flag kind.

A `BaseFlag[T]` owns the metadata (names, description, bound environment
variable), the typed default, the current value and the optional validator
of one flag, all guarded by a per-instance lock. Concrete flag kinds own a
`BaseFlag` and hand it already-converted values; the base is the only place
where a value is validated and committed.

Lifecycle:
    Uninitialized → Initialized(unset) → Initialized(set) → Initialized(unset)

`init()` is the only way out of Uninitialized and refuses to run twice.
`reset()` is the only way back to unset.
"""
from __future__ import annotations

import threading
from copy import deepcopy
from typing import Any, Callable, Generic, TypeVar

from flagtree.exceptions import FlagValidationError, InvalidNameError

T = TypeVar("T")

Validator = Callable[[Any], None]


class _Unset:
    def __repr__(self) -> str:
        return "<unset>"


UNSET: Any = _Unset()


class BaseFlag(Generic[T]):
    """
    Thread-safe value cell with default, validator and environment binding.

    A validator is any callable taking the candidate value; it rejects the
    value by raising (usually `ValueError`). The error is wrapped in a
    `FlagValidationError` and the previous state is kept.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._initialized: bool = False
        self._long_name: str = ""
        self._short_name: str = ""
        self._description: str = ""
        self._default: Any = UNSET
        self._value: Any = UNSET
        self._is_set: bool = False
        self._validator: Validator | None = None
        self._env_var: str = ""

    def init(
        self, long_name: str, short_name: str, description: str, default: T
    ) -> None:
        """
        Initialize the flag metadata. May only be called once.

        Raises:
            FlagValidationError: If the flag is already initialized or the default is None.
            InvalidNameError: If both names are empty.
        """
        with self._lock:
            if self._initialized:
                raise FlagValidationError(
                    f"flag {self._display_name()} already initialized"
                )
            if not long_name and not short_name:
                raise InvalidNameError("long name and short name cannot both be empty")
            if default is None:
                raise FlagValidationError("default value cannot be None")
            self._long_name = long_name
            self._short_name = short_name
            self._description = description
            self._default = deepcopy(default)
            self._initialized = True

    def _display_name(self) -> str:
        if self._long_name and self._short_name:
            return f"--{self._long_name}/-{self._short_name}"
        if self._long_name:
            return f"--{self._long_name}"
        return f"-{self._short_name}"

    @property
    def initialized(self) -> bool:
        with self._lock:
            return self._initialized

    @property
    def name(self) -> str:
        """Long name if present, else short name."""
        return self._long_name or self._short_name

    @property
    def long_name(self) -> str:
        return self._long_name

    @property
    def short_name(self) -> str:
        return self._short_name

    @property
    def description(self) -> str:
        return self._description

    @property
    def display_name(self) -> str:
        """`--long/-s`, `--long` or `-s`."""
        return self._display_name()

    @property
    def default(self) -> T:
        return deepcopy(self._default)

    def get(self) -> T:
        """Return a copy of the current value if set, else a copy of the default."""
        with self._lock:
            if self._is_set:
                return deepcopy(self._value)
            return deepcopy(self._default)

    def value_ref(self) -> T:
        """
        Return the live stored object (current value if set, else default).

        Mutating the returned object bypasses validation and locking. Callers
        that do so are responsible for their own synchronization.
        """
        with self._lock:
            return self._value if self._is_set else self._default

    def validate(self, value: T) -> None:
        """Run the validator against `value` without committing it."""
        with self._lock:
            self._run_validator(value)

    def _run_validator(self, value: T) -> None:
        if self._validator is None:
            return
        try:
            self._validator(value)
        except FlagValidationError:
            raise
        except Exception as error:
            raise FlagValidationError(
                f"invalid value for {self._display_name()}", cause=error
            ) from error

    def set(self, value: T) -> None:
        """
        Validate and commit `value`.

        The value is copied before it is validated and stored, so the flag
        never aliases caller-owned lists or dicts.
        """
        candidate = deepcopy(value)
        with self._lock:
            if not self._initialized:
                raise FlagValidationError("flag is not initialized")
            self._run_validator(candidate)
            self._value = candidate
            self._is_set = True

    def reset(self) -> None:
        """Return to the unset state; `get()` reads the default again."""
        with self._lock:
            self._value = UNSET
            self._is_set = False

    def is_set(self) -> bool:
        with self._lock:
            return self._is_set

    def set_validator(self, validator: Validator | None) -> None:
        with self._lock:
            self._validator = validator

    def clear_validator(self) -> None:
        self.set_validator(None)

    def has_validator(self) -> bool:
        with self._lock:
            return self._validator is not None

    def bind_env(self, env_name: str) -> None:
        with self._lock:
            self._env_var = env_name

    @property
    def env_var(self) -> str:
        with self._lock:
            return self._env_var

# flagtree CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines all custom exception classes used by the flagtree toolkit.

Every error raised by a public entry point is a `FlagTreeError`, a structured
exception carrying a stable `code`, a human readable `message` and an optional
wrapped `cause`. Callers can branch on the class, on `code`, or both.

Exception Hierarchy:
- FlagTreeError
    ├── InvalidNameError
    ├── AlreadyExistsError
    ├── NotFoundError
    ├── FlagValidationError
    │     └── EnvOverlayError
    ├── ParseFailedError
    ├── MutexGroupViolationError
    ├── RequiredGroupViolationError
    ├── InvalidGroupMemberError
    └── CyclicReferenceError
"""
from __future__ import annotations


class FlagTreeError(Exception):
    """Base exception for flagtree. Carries a code, a message and an optional cause."""

    default_code = "FLAGTREE_ERROR"

    def __init__(
        self,
        message: str = "",
        cause: BaseException | None = None,
        code: str | None = None,
    ) -> None:
        self.code: str = code or self.default_code
        self.message: str = message
        self.cause: BaseException | None = cause
        super().__init__(str(self))
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class InvalidNameError(FlagTreeError):
    """Raised when a flag, command or group name is empty or contains illegal characters."""

    default_code = "INVALID_NAME"


class AlreadyExistsError(FlagTreeError):
    """Raised when a name is already registered."""

    default_code = "ALREADY_EXISTS"


class NotFoundError(FlagTreeError):
    """Raised when a lookup by name misses."""

    default_code = "NOT_FOUND"


class FlagValidationError(FlagTreeError):
    """Raised when a value is rejected by a validator or a type conversion."""

    default_code = "VALIDATION_FAILED"


class EnvOverlayError(FlagValidationError):
    """Raised once for every environment value that failed during the overlay pass."""

    def __init__(self, errors: list[FlagTreeError]) -> None:
        self.errors: list[FlagTreeError] = list(errors)
        joined = "; ".join(str(error) for error in self.errors)
        super().__init__(f"failed to load environment variables: {joined}")


class ParseFailedError(FlagTreeError):
    """Raised when the token list does not follow the flag grammar."""

    default_code = "PARSE_FAILED"


class MutexGroupViolationError(FlagTreeError):
    """Raised when a mutually exclusive group has too many (or too few) flags set."""

    default_code = "MUTEX_GROUP_VIOLATION"

    def __init__(self, message: str, group: str, flags: list[str]) -> None:
        self.group = group
        self.flags = flags
        super().__init__(message)


class RequiredGroupViolationError(FlagTreeError):
    """Raised when flags of a required group are missing."""

    default_code = "REQUIRED_GROUP_VIOLATION"

    def __init__(self, message: str, group: str, flags: list[str]) -> None:
        self.group = group
        self.flags = flags
        super().__init__(message)


class InvalidGroupMemberError(FlagTreeError):
    """Raised when a group references a flag name that is not registered."""

    default_code = "INVALID_GROUP_MEMBER"


class CyclicReferenceError(FlagTreeError):
    """Raised when attaching a subcommand would make a command its own descendant."""

    default_code = "CYCLIC_REFERENCE"

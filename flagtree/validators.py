# flagtree CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Reusable validator factories for flags, plus a prompt_toolkit adapter.

A flag validator is any callable taking the candidate value and raising
`ValueError` to reject it. The factories below build such callables:

Numbers:      number_range, positive, non_negative, port
Strings:      string_length, string_not_empty, string_regex, string_prefix,
              string_suffix, string_contains, string_one_of, email, hostname,
              file_extension
Durations:    duration_range
Times:        time_after, time_before, time_range
Slices:       slice_length, slice_not_empty, slice_unique, slice_contains
Maps:         map_keys, map_required_keys, map_size
Combinators:  all_of, any_of, negate, optional

`prompt_validator(flag)` turns any flag into a prompt_toolkit `Validator`
that accepts exactly the text the flag would accept on the command line.

Example:
    port = cmd.int("port", "p", "Port", default=8080, validator=number_range(1, 65535))
    name = cmd.string("name", validator=all_of(string_not_empty(), string_max_length(32)))
"""
from __future__ import annotations

import re
from datetime import datetime, timedelta
from typing import Any, Callable, Iterable, Sequence

from prompt_toolkit.validation import ValidationError, Validator

from flagtree.exceptions import FlagTreeError
from flagtree.flags import Flag

ValueValidator = Callable[[Any], None]

_EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9._%+\-]+@[A-Za-z0-9.\-]+\.[A-Za-z]{2,}$")
_HOSTNAME_LABEL = re.compile(r"^(?!-)[A-Za-z0-9\-]{1,63}(?<!-)$")


def number_range(minimum: float, maximum: float) -> ValueValidator:
    """Accept numbers within [minimum, maximum]."""
    if minimum > maximum:
        raise ValueError(f"invalid range: {minimum} > {maximum}")

    def validate(value: float) -> None:
        if not minimum <= value <= maximum:
            raise ValueError(f"value {value} out of range [{minimum}, {maximum}]")

    return validate


def positive() -> ValueValidator:
    def validate(value: float) -> None:
        if value <= 0:
            raise ValueError(f"value {value} must be positive")

    return validate


def non_negative() -> ValueValidator:
    def validate(value: float) -> None:
        if value < 0:
            raise ValueError(f"value {value} must not be negative")

    return validate


def port() -> ValueValidator:
    """Accept TCP/UDP port numbers 1..65535."""
    return number_range(1, 65535)


def string_length(minimum: int = 0, maximum: int | None = None) -> ValueValidator:
    def validate(value: str) -> None:
        if len(value) < minimum:
            raise ValueError(f"length {len(value)} is shorter than {minimum}")
        if maximum is not None and len(value) > maximum:
            raise ValueError(f"length {len(value)} is longer than {maximum}")

    return validate


def string_min_length(minimum: int) -> ValueValidator:
    return string_length(minimum=minimum)


def string_max_length(maximum: int) -> ValueValidator:
    return string_length(maximum=maximum)


def string_not_empty() -> ValueValidator:
    def validate(value: str) -> None:
        if not value.strip():
            raise ValueError("value cannot be empty")

    return validate


def string_regex(pattern: str) -> ValueValidator:
    """Accept strings fully matching `pattern`."""
    compiled = re.compile(pattern)

    def validate(value: str) -> None:
        if not compiled.fullmatch(value):
            raise ValueError(f"'{value}' does not match pattern '{pattern}'")

    return validate


def string_prefix(prefix: str) -> ValueValidator:
    def validate(value: str) -> None:
        if not value.startswith(prefix):
            raise ValueError(f"'{value}' must start with '{prefix}'")

    return validate


def string_suffix(suffix: str) -> ValueValidator:
    def validate(value: str) -> None:
        if not value.endswith(suffix):
            raise ValueError(f"'{value}' must end with '{suffix}'")

    return validate


def string_contains(substring: str) -> ValueValidator:
    def validate(value: str) -> None:
        if substring not in value:
            raise ValueError(f"'{value}' must contain '{substring}'")

    return validate


def string_one_of(*allowed: str) -> ValueValidator:
    def validate(value: str) -> None:
        if value not in allowed:
            raise ValueError(f"'{value}' must be one of: {', '.join(allowed)}")

    return validate


def email() -> ValueValidator:
    def validate(value: str) -> None:
        if not _EMAIL_PATTERN.match(value):
            raise ValueError(f"'{value}' is not a valid email address")

    return validate


def hostname() -> ValueValidator:
    def validate(value: str) -> None:
        name = value[:-1] if value.endswith(".") else value
        if not name or len(name) > 253:
            raise ValueError(f"'{value}' is not a valid hostname")
        if not all(_HOSTNAME_LABEL.match(label) for label in name.split(".")):
            raise ValueError(f"'{value}' is not a valid hostname")

    return validate


def file_extension(*extensions: str) -> ValueValidator:
    """Accept paths whose suffix is one of `extensions` (case-insensitive, leading dot optional)."""
    normalized = {ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in extensions}

    def validate(value: Any) -> None:
        text = str(value).lower()
        if not any(text.endswith(ext) for ext in normalized):
            raise ValueError(f"'{value}' must have one of the extensions: {', '.join(sorted(normalized))}")

    return validate


def duration_range(minimum: timedelta, maximum: timedelta) -> ValueValidator:
    def validate(value: timedelta) -> None:
        if not minimum <= value <= maximum:
            raise ValueError(f"duration {value} out of range [{minimum}, {maximum}]")

    return validate


def time_after(moment: datetime) -> ValueValidator:
    def validate(value: datetime) -> None:
        if not value > moment:
            raise ValueError(f"time {value.isoformat()} must be after {moment.isoformat()}")

    return validate


def time_before(moment: datetime) -> ValueValidator:
    def validate(value: datetime) -> None:
        if not value < moment:
            raise ValueError(f"time {value.isoformat()} must be before {moment.isoformat()}")

    return validate


def time_range(start: datetime, end: datetime) -> ValueValidator:
    def validate(value: datetime) -> None:
        if not start <= value <= end:
            raise ValueError(
                f"time {value.isoformat()} out of range [{start.isoformat()}, {end.isoformat()}]"
            )

    return validate


def slice_length(minimum: int = 0, maximum: int | None = None) -> ValueValidator:
    def validate(value: Sequence[Any]) -> None:
        if len(value) < minimum:
            raise ValueError(f"expected at least {minimum} items, got {len(value)}")
        if maximum is not None and len(value) > maximum:
            raise ValueError(f"expected at most {maximum} items, got {len(value)}")

    return validate


def slice_not_empty() -> ValueValidator:
    return slice_length(minimum=1)


def slice_unique() -> ValueValidator:
    def validate(value: Sequence[Any]) -> None:
        seen = set()
        for item in value:
            if item in seen:
                raise ValueError(f"duplicate item '{item}'")
            seen.add(item)

    return validate


def slice_contains(element: Any) -> ValueValidator:
    def validate(value: Sequence[Any]) -> None:
        if element not in value:
            raise ValueError(f"'{element}' is required")

    return validate


def map_keys(*allowed: str) -> ValueValidator:
    """Reject keys outside `allowed`."""

    def validate(value: dict[str, Any]) -> None:
        unknown = sorted(set(value) - set(allowed))
        if unknown:
            raise ValueError(f"unknown keys: {', '.join(unknown)}")

    return validate


def map_required_keys(*required: str) -> ValueValidator:
    def validate(value: dict[str, Any]) -> None:
        missing = [key for key in required if key not in value]
        if missing:
            raise ValueError(f"missing keys: {', '.join(missing)}")

    return validate


def map_size(minimum: int = 0, maximum: int | None = None) -> ValueValidator:
    return slice_length(minimum, maximum)


def all_of(*validators: ValueValidator) -> ValueValidator:
    """Run every validator in order; the first failure wins."""

    def validate(value: Any) -> None:
        for validator in validators:
            validator(value)

    return validate


def any_of(*validators: ValueValidator) -> ValueValidator:
    """Accept the value if at least one validator accepts it."""

    def validate(value: Any) -> None:
        errors = []
        for validator in validators:
            try:
                validator(value)
                return
            except ValueError as error:
                errors.append(str(error))
        raise ValueError("; ".join(errors) or "no validator accepted the value")

    return validate


def negate(validator: ValueValidator, message: str = "value is not allowed") -> ValueValidator:
    def validate(value: Any) -> None:
        try:
            validator(value)
        except ValueError:
            return
        raise ValueError(message)

    return validate


def optional(validator: ValueValidator) -> ValueValidator:
    """Skip `validator` for empty values ("", [], {}, None)."""

    def validate(value: Any) -> None:
        if value is None or (hasattr(value, "__len__") and len(value) == 0):
            return
        validator(value)

    return validate


class FlagValueValidator(Validator):
    """prompt_toolkit validator that accepts what `flag.check()` accepts."""

    def __init__(self, flag: Flag) -> None:
        self.flag = flag

    def validate(self, document) -> None:
        try:
            self.flag.check(document.text)
        except FlagTreeError as error:
            raise ValidationError(
                message=str(error), cursor_position=len(document.text)
            ) from error


def prompt_validator(flag: Flag) -> Validator:
    """Adapt `flag` for use as `PromptSession(validator=...)`."""
    return FlagValueValidator(flag)


def choices_validator(choices: Iterable[str], error_message: str | None = None) -> Validator:
    """prompt_toolkit validator for a fixed set of words (case-insensitive)."""
    choices = list(choices)

    def validate(text: str) -> bool:
        return text.lower() in [choice.lower() for choice in choices]

    if error_message is None:
        error_message = f"Invalid input. Choices: {{{', '.join(choices)}}}."

    return Validator.from_callable(validate, error_message=error_message)

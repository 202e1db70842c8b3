# flagtree CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Plain data types carried by a `Command`.

- `CommandConfig`: declarative per-command settings (version, description, usage,
  examples, notes, groups, language, env prefix, completion, subcommands).
- `MutexGroup`: flags of which at most one (or exactly one) may be set.
- `RequiredGroup`: flags which must all be set.
- `Example`: a usage line with a description, rendered in help output.
- `Language`: help output language.

These are declarative records; they are evaluated by
`flagtree.validation` and rendered by `flagtree.help`.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from flagtree.command import Command


class Language(Enum):
    """Help output language."""

    EN = "en"
    ZH = "zh"

    @classmethod
    def _missing_(cls, value: object) -> Language:
        if isinstance(value, str):
            normalized = value.strip().lower()
            aliases = {"english": "en", "chinese": "zh", "cn": "zh", "zh-cn": "zh"}
            normalized = aliases.get(normalized, normalized)
            for member in cls:
                if member.value == normalized:
                    return member
        valid = ", ".join(member.value for member in cls)
        raise ValueError(f"Invalid {cls.__name__}: '{value}'. Must be one of: {valid}")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Example:
    """A usage example shown in help output."""

    description: str
    usage: str


@dataclass
class MutexGroup:
    """
    Mutually exclusive flags.

    Attributes:
        name (str): Group name used in error messages.
        flags (list[str]): Member flag names; long and short aliases may be mixed.
        allow_none (bool): When False, exactly one member must be set.
    """

    name: str
    flags: list[str] = field(default_factory=list)
    allow_none: bool = True


@dataclass
class RequiredGroup:
    """Flags that must all be set together."""

    name: str
    flags: list[str] = field(default_factory=list)


@dataclass
class CommandConfig:
    """
    Per-command configuration.

    Attributes:
        version (str): Version string. Only honoured on the root command.
        description (str): One-line description shown in help output.
        help (str): Full custom help text; replaces the generated help when set.
        usage (str): Custom usage line; generated from the command path when empty.
        logo_text (str): Banner printed above the help text.
        examples (list[Example]): Usage examples.
        notes (list[str]): Free-form notes printed at the end of the help text.
        mutex_groups (list[MutexGroup]): Mutually exclusive groups.
        required_groups (list[RequiredGroup]): Required groups.
        language (Language): Help output language.
        env_prefix (str): Prefix prepended to every bound environment variable.
            Read from the root command.
        completion (bool): Whether the `--completion` builtin is registered.
        subcommands (list[Command]): Children attached at construction.

    A `Command` never keeps the config it was built from: every field is
    applied through the matching setter, so the same checks and
    normalization apply as for the imperative API.
    """

    version: str = ""
    description: str = ""
    help: str = ""
    usage: str = ""
    logo_text: str = ""
    examples: list[Example] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)
    mutex_groups: list[MutexGroup] = field(default_factory=list)
    required_groups: list[RequiredGroup] = field(default_factory=list)
    language: Language = Language.EN
    env_prefix: str = ""
    completion: bool = False
    subcommands: list[Command] = field(default_factory=list)

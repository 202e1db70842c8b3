# flagtree CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Builtin flags and their handlers.

Every command carries a `--help/-h` flag. The root command additionally
carries `--version/-v` once a version is configured and `--completion
<shell>` once completion is enabled. The names of these flags are reserved
in the owning command's `BuiltinFlags` table, so user flags cannot take them.

`handle_builtin_flags()` is what `Command.parse_and_run()` calls after
parsing: it writes the requested output and raises the matching flow signal.
"""
from __future__ import annotations

import threading
from enum import Enum
from typing import TYPE_CHECKING

from flagtree.command_types import Language
from flagtree.console import console as default_console
from flagtree.flags import BoolFlag, EnumFlag, Flag
from flagtree.logger import logger
from flagtree.signals import CompletionSignal, HelpSignal, VersionSignal

if TYPE_CHECKING:
    from rich.console import Console

    from flagtree.command import Command

HELP_LONG_NAME = "help"
HELP_SHORT_NAME = "h"
VERSION_LONG_NAME = "version"
VERSION_SHORT_NAME = "v"
COMPLETION_LONG_NAME = "completion"


class Shell(Enum):
    """Shells a completion script can be generated for."""

    NONE = "none"
    BASH = "bash"
    POWERSHELL = "powershell"
    PWSH = "pwsh"

    @classmethod
    def choices(cls) -> list[Shell]:
        return list(cls)

    @classmethod
    def _missing_(cls, value: object) -> Shell:
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        valid = ", ".join(member.value for member in cls)
        raise ValueError(f"Invalid {cls.__name__}: '{value}'. Must be one of: {valid}")

    def __str__(self) -> str:
        return self.value


SHELL_NAMES = [shell.value for shell in Shell]

BUILTIN_DESCRIPTIONS: dict[Language, dict[str, str]] = {
    Language.EN: {
        HELP_LONG_NAME: "Show help information",
        VERSION_LONG_NAME: "Show version information",
        COMPLETION_LONG_NAME: "Generate shell completion script. Supported shells: {shells}",
    },
    Language.ZH: {
        HELP_LONG_NAME: "显示帮助信息",
        VERSION_LONG_NAME: "显示版本信息",
        COMPLETION_LONG_NAME: "生成Shell自动补全脚本, 支持的Shell: {shells}",
    },
}


def builtin_description(name: str, language: Language) -> str:
    text = BUILTIN_DESCRIPTIONS[language][name]
    return text.format(shells=", ".join(SHELL_NAMES))


class BuiltinFlags:
    """
    Reserved name table and builtin flag instances of one command.

    Attributes:
        help (BoolFlag): Always present.
        version (BoolFlag | None): Present on a root command with a version.
        completion (EnumFlag | None): Present on a root command with completion enabled.
    """

    def __init__(self, language: Language = Language.EN) -> None:
        self._lock = threading.Lock()
        self._names: set[str] = set()
        self.help: BoolFlag = BoolFlag(
            HELP_LONG_NAME,
            HELP_SHORT_NAME,
            builtin_description(HELP_LONG_NAME, language),
        )
        self.version: BoolFlag | None = None
        self.completion: EnumFlag | None = None

    def mark_as_builtin(self, *names: str) -> None:
        with self._lock:
            self._names.update(name for name in names if name)

    def is_builtin(self, name: str) -> bool:
        if not name:
            return False
        with self._lock:
            return name in self._names

    def reserved_names(self) -> list[str]:
        with self._lock:
            return sorted(self._names)

    def new_version_flag(self, language: Language) -> BoolFlag:
        self.version = BoolFlag(
            VERSION_LONG_NAME,
            VERSION_SHORT_NAME,
            builtin_description(VERSION_LONG_NAME, language),
        )
        return self.version

    def new_completion_flag(self, language: Language) -> EnumFlag:
        self.completion = EnumFlag(
            COMPLETION_LONG_NAME,
            "",
            builtin_description(COMPLETION_LONG_NAME, language),
            default=Shell.NONE.value,
            choices=SHELL_NAMES,
            case_sensitive=False,
        )
        return self.completion

    def flags(self) -> list[Flag]:
        return [flag for flag in (self.help, self.version, self.completion) if flag is not None]

    def is_builtin_flag(self, flag: Flag) -> bool:
        return any(flag is builtin for builtin in self.flags())

    def any_set(self) -> bool:
        """True if the user asked for help, version or a completion script."""
        if self.help.is_set() or (self.version is not None and self.version.is_set()):
            return True
        return self.completion is not None and self.completion.is_set()


def handle_builtin_flags(command: Command, console: Console | None = None) -> None:
    """
    Write the output requested by a builtin flag of `command` and raise its signal.

    Help wins over version, version wins over completion. Returns normally
    when no builtin flag was set (or `--completion none` was given).

    Raises:
        HelpSignal: After printing the help text.
        VersionSignal: After printing the version string.
        CompletionSignal: After writing the completion script.
    """
    console = console or default_console
    builtins = command.builtins
    if builtins.help.get():
        logger.debug("[%s] --help requested", command.path)
        command.print_help(console=console)
        raise HelpSignal()
    if builtins.version is not None and builtins.version.get():
        logger.debug("[%s] --version requested", command.path)
        console.out(command.config.version, highlight=False)
        raise VersionSignal()
    if builtins.completion is not None and builtins.completion.is_set():
        shell = Shell(builtins.completion.get())
        if shell is Shell.NONE:
            return
        logger.debug("[%s] completion script requested for %s", command.path, shell)
        console.out(command.completion_script(shell.value), highlight=False)
        raise CompletionSignal()

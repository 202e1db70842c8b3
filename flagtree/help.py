# flagtree CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Provides `RichHelpRenderer`, the default `HelpRenderer`.

The help text of a command is laid out as:

    <logo text>
    Name: app, a
    Desc: What the app does
    Usage: app [global options] [subcmd] [options]

    Options:
      --port, -p int          Port to listen on (default: 8080) [env: APP_PORT]
      ...
    SubCmds:
      serve, s                Start the server
    Examples:
    Notes:

Flags with a short name are listed first, then by long name. Headings are
translated when the command's language is `zh`. A custom help text set via
`Command.set_help()` replaces the generated text entirely.

`render()` returns plain text. `print()` writes the same content to a rich
console with styling.
"""
from __future__ import annotations

from io import StringIO
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape

from flagtree.builtins import builtin_description
from flagtree.command_types import Language
from flagtree.flags import Flag

if TYPE_CHECKING:
    from flagtree.command import Command

DESCRIPTION_PADDING = 4

TEMPLATES: dict[Language, dict[str, str]] = {
    Language.EN: {
        "name": "Name",
        "desc": "Desc",
        "usage": "Usage",
        "global_options": "[global options]",
        "subcmd": "[subcmd]",
        "options_hint": "[options]",
        "options": "Options",
        "subcmds": "SubCmds",
        "examples": "Examples",
        "notes": "Notes",
        "default": "default",
        "choices": "choices",
        "env": "env",
    },
    Language.ZH: {
        "name": "名称",
        "desc": "描述",
        "usage": "用法",
        "global_options": "[全局选项]",
        "subcmd": "[子命令]",
        "options_hint": "[选项]",
        "options": "选项",
        "subcmds": "子命令",
        "examples": "示例",
        "notes": "注意事项",
        "default": "默认值",
        "choices": "可选值",
        "env": "环境变量",
    },
}


def _flag_sort_key(flag: Flag) -> tuple[bool, str, str]:
    return (not flag.short_name, flag.long_name, flag.short_name)


def _option_text(flag: Flag) -> str:
    names = []
    if flag.long_name:
        names.append(f"--{flag.long_name}")
    if flag.short_name:
        names.append(f"-{flag.short_name}")
    text = ", ".join(names)
    if not flag.is_bool:
        text = f"{text} {flag.flag_type}"
    return text


def _subcommand_text(command: Command) -> str:
    return ", ".join(name for name in (command.long_name, command.short_name) if name)


class RichHelpRenderer:
    """
    Renders command help with rich markup.

    Args:
        width (int): Line width used by `render()`.
    """

    def __init__(self, width: int = 100) -> None:
        self.width = width

    def _usage(self, command: Command, text: dict[str, str]) -> str:
        if command.config.usage:
            return command.config.usage
        usage = command.path
        if command.has_subcommands():
            if command.is_root:
                usage += f" {text['global_options']}"
            usage += f" {text['subcmd']}"
        return f"{usage} {text['options_hint']}"

    def _describe_flag(self, command: Command, flag: Flag, text: dict[str, str]) -> str:
        if command.builtins.is_builtin_flag(flag):
            description = builtin_description(flag.long_name, command.language)
        else:
            description = flag.description
        parts = [escape(description)] if description else []
        choices = flag.enum_values()
        if choices and not command.builtins.is_builtin_flag(flag):
            parts.append(f"[dim]({text['choices']}: {escape(', '.join(choices))})[/dim]")
        default = flag.default_text()
        if default and not flag.is_bool:
            parts.append(f"[dim]({text['default']}: {escape(default)})[/dim]")
        if flag.env_var:
            parts.append(f"[dim]\\[{text['env']}: {escape(command.env_prefix + flag.env_var)}][/dim]")
        return " ".join(parts)

    def markup_lines(self, command: Command) -> list[str]:
        """Build the help text as a list of rich markup lines."""
        config = command.config
        if config.help:
            return [escape(config.help)]
        text = TEMPLATES[command.language]
        lines: list[str] = []
        if config.logo_text:
            lines.append(escape(config.logo_text))
        lines.append(f"[bold]{text['name']}:[/bold] {escape(_subcommand_text(command))}")
        if config.description:
            lines.append(f"[bold]{text['desc']}:[/bold] {escape(config.description)}")
        lines.append(f"[bold]{text['usage']}:[/bold] {escape(self._usage(command, text))}")

        flags = sorted(command.flag_list(), key=_flag_sort_key)
        if flags:
            lines.append("")
            lines.append(f"[bold]{text['options']}:[/bold]")
            options = [_option_text(flag) for flag in flags]
            column = max(len(option) for option in options) + DESCRIPTION_PADDING
            for flag, option in zip(flags, options):
                padding = " " * (column - len(option))
                lines.append(f"  {escape(option)}{padding}{self._describe_flag(command, flag, text)}")

        subcommands = sorted(
            command.subcommands(),
            key=lambda sub: (not sub.short_name, sub.long_name, sub.short_name),
        )
        if subcommands:
            lines.append("")
            lines.append(f"[bold]{text['subcmds']}:[/bold]")
            names = [_subcommand_text(sub) for sub in subcommands]
            column = max(len(name) for name in names) + DESCRIPTION_PADDING
            for sub, name in zip(subcommands, names):
                padding = " " * (column - len(name))
                lines.append(f"  {escape(name)}{padding}{escape(sub.description)}")

        if config.examples:
            lines.append("")
            lines.append(f"[bold]{text['examples']}:[/bold]")
            for index, example in enumerate(config.examples, start=1):
                lines.append(f"  {index}. {escape(example.description)}")
                lines.append(f"     [cyan]{escape(example.usage)}[/cyan]")

        if config.notes:
            lines.append("")
            lines.append(f"[bold]{text['notes']}:[/bold]")
            for index, note in enumerate(config.notes, start=1):
                lines.append(f"  {index}. {escape(note)}")
        return lines

    def render(self, command: Command) -> str:
        buffer = StringIO()
        plain = Console(
            file=buffer,
            width=self.width,
            color_system=None,
            highlight=False,
            soft_wrap=True,
            emoji=False,
        )
        for line in self.markup_lines(command):
            plain.print(line)
        return buffer.getvalue()

    def print(self, command: Command, console: Console) -> None:
        for line in self.markup_lines(command):
            console.print(line)

# flagtree CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Shell completion for flagtree command trees.

- `ScriptCompletionGenerator` is the default `CompletionGenerator`. It walks
  the command tree once and emits a self-contained bash or PowerShell script
  that knows every command path, its flags, which flags take a value and the
  choices of enum flags.
- `CommandCompleter` is a prompt_toolkit `Completer` over the same tree, for
  interactive prompt sessions.

Example:
    app.set_completion(True)
    app.parse_and_run(["--completion", "bash"])   # writes the script, raises CompletionSignal

    session = PromptSession(completer=CommandCompleter(app))
"""
from __future__ import annotations

import os
import re
import shlex
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from flagtree.builtins import Shell
from flagtree.exceptions import FlagValidationError
from flagtree.flags import Flag

if TYPE_CHECKING:
    from flagtree.command import Command


@dataclass
class CompletionNode:
    """Completion data for one command path."""

    path: str
    words: list[str] = field(default_factory=list)
    routes: dict[str, str] = field(default_factory=dict)
    values: dict[str, list[str]] = field(default_factory=dict)
    takes_value: list[str] = field(default_factory=list)


def _flag_names(flag: Flag) -> list[str]:
    names = []
    if flag.long_name:
        names.append(f"--{flag.long_name}")
    if flag.short_name:
        names.append(f"-{flag.short_name}")
    return names


def collect_nodes(root: Command) -> list[CompletionNode]:
    """Flatten the tree below `root` into one `CompletionNode` per command."""
    nodes: list[CompletionNode] = []

    def walk(command: Command, path: str) -> None:
        node = CompletionNode(path=path)
        for flag in command.flag_list():
            names = _flag_names(flag)
            node.words.extend(names)
            if flag.is_bool:
                continue
            node.takes_value.extend(names)
            choices = flag.enum_values()
            if choices:
                for name in names:
                    node.values[name] = choices
        children = command.subcommands()
        for child in children:
            for alias in (child.long_name, child.short_name):
                if alias:
                    node.words.append(alias)
                    node.routes[alias] = f"{path} {child.name}"
        nodes.append(node)
        for child in children:
            walk(child, f"{path} {child.name}")

    walk(root, root.name)
    return nodes


def _function_name(program: str) -> str:
    return "_" + re.sub(r"[^A-Za-z0-9_]", "_", program) + "_completion"


BASH_TEMPLATE = r"""# bash completion for @PROG@
# generated by flagtree; load with: source <(@PROG@ --completion bash)

declare -A @FUNC@_opts=(
@OPTS@
)
declare -A @FUNC@_routes=(
@ROUTES@
)
declare -A @FUNC@_values=(
@VALUES@
)
declare -A @FUNC@_takes_value=(
@TAKES@
)

@FUNC@() {
    local cur prev path word i
    cur="${COMP_WORDS[COMP_CWORD]}"
    prev=""
    (( COMP_CWORD > 0 )) && prev="${COMP_WORDS[COMP_CWORD-1]}"
    path="@ROOT@"
    for (( i=1; i<COMP_CWORD; i++ )); do
        word="${COMP_WORDS[i]}"
        if [[ -n "${@FUNC@_takes_value[$path|$word]}" ]]; then
            (( i++ ))
            continue
        fi
        if [[ -n "${@FUNC@_routes[$path $word]}" ]]; then
            path="${@FUNC@_routes[$path $word]}"
        fi
    done
    if [[ -n "${@FUNC@_values[$path|$prev]}" ]]; then
        COMPREPLY=( $(compgen -W "${@FUNC@_values[$path|$prev]}" -- "$cur") )
        return 0
    fi
    if [[ -n "${@FUNC@_takes_value[$path|$prev]}" ]]; then
        COMPREPLY=( $(compgen -f -- "$cur") )
        return 0
    fi
    COMPREPLY=( $(compgen -W "${@FUNC@_opts[$path]}" -- "$cur") )
    return 0
}

complete -o default -F @FUNC@ @PROG@
"""

PWSH_TEMPLATE = r"""# PowerShell completion for @PROG@
# generated by flagtree; load with: @PROG@ --completion pwsh | Out-String | Invoke-Expression

Register-ArgumentCompleter -Native -CommandName '@PROG@' -ScriptBlock {
    param($wordToComplete, $commandAst, $cursorPosition)

    $opts = @{
@OPTS@
    }
    $routes = @{
@ROUTES@
    }
    $values = @{
@VALUES@
    }
    $takesValue = @{
@TAKES@
    }

    $elements = @($commandAst.CommandElements | ForEach-Object { $_.ToString() })
    $limit = $elements.Count
    if ($wordToComplete -ne '') { $limit = $limit - 1 }
    $path = '@ROOT@'
    for ($i = 1; $i -lt $limit; $i++) {
        $word = $elements[$i]
        if ($takesValue.ContainsKey("$path|$word")) { $i++; continue }
        if ($routes.ContainsKey("$path $word")) { $path = $routes["$path $word"] }
    }
    $prev = ''
    if ($limit -gt 1) { $prev = $elements[$limit - 1] }

    if ($values.ContainsKey("$path|$prev")) {
        $candidates = $values["$path|$prev"]
    } elseif ($takesValue.ContainsKey("$path|$prev")) {
        return
    } else {
        $candidates = $opts[$path]
    }
    $candidates | Where-Object { $_ -like "$wordToComplete*" } | ForEach-Object {
        [System.Management.Automation.CompletionResult]::new($_, $_, 'ParameterValue', $_)
    }
}
"""


def _bash_quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"').replace("$", "\\$") + '"'


def _pwsh_quote(text: str) -> str:
    return "'" + text.replace("'", "''") + "'"


class ScriptCompletionGenerator:
    """Generates bash and PowerShell completion scripts."""

    def generate(self, command: Command, shell: str) -> str:
        """
        Return a completion script for the tree rooted at `command`.

        Raises:
            FlagValidationError: If `shell` is not a supported shell.
        """
        try:
            selected = Shell(shell)
        except ValueError as error:
            raise FlagValidationError(f"unsupported shell '{shell}'", cause=error) from error
        if selected is Shell.NONE:
            return ""
        nodes = collect_nodes(command)
        if selected is Shell.BASH:
            return self._bash(command, nodes)
        return self._pwsh(command, nodes)

    def _bash(self, command: Command, nodes: list[CompletionNode]) -> str:
        opts, routes, values, takes = [], [], [], []
        for node in nodes:
            opts.append(f"    [{_bash_quote(node.path)}]={_bash_quote(' '.join(node.words))}")
            for alias, target in node.routes.items():
                routes.append(f"    [{_bash_quote(f'{node.path} {alias}')}]={_bash_quote(target)}")
            for name, choices in node.values.items():
                values.append(
                    f"    [{_bash_quote(f'{node.path}|{name}')}]={_bash_quote(' '.join(choices))}"
                )
            for name in node.takes_value:
                takes.append(f"    [{_bash_quote(f'{node.path}|{name}')}]=1")
        return self._fill(BASH_TEMPLATE, command, opts, routes, values, takes)

    def _pwsh(self, command: Command, nodes: list[CompletionNode]) -> str:
        opts, routes, values, takes = [], [], [], []
        indent = " " * 8
        for node in nodes:
            words = ", ".join(_pwsh_quote(word) for word in node.words)
            opts.append(f"{indent}{_pwsh_quote(node.path)} = @({words})")
            for alias, target in node.routes.items():
                routes.append(f"{indent}{_pwsh_quote(f'{node.path} {alias}')} = {_pwsh_quote(target)}")
            for name, choices in node.values.items():
                listed = ", ".join(_pwsh_quote(choice) for choice in choices)
                values.append(f"{indent}{_pwsh_quote(f'{node.path}|{name}')} = @({listed})")
            for name in node.takes_value:
                takes.append(f"{indent}{_pwsh_quote(f'{node.path}|{name}')} = $true")
        return self._fill(PWSH_TEMPLATE, command, opts, routes, values, takes)

    def _fill(
        self,
        template: str,
        command: Command,
        opts: list[str],
        routes: list[str],
        values: list[str],
        takes: list[str],
    ) -> str:
        return (
            template.replace("@OPTS@", "\n".join(opts))
            .replace("@ROUTES@", "\n".join(routes))
            .replace("@VALUES@", "\n".join(values))
            .replace("@TAKES@", "\n".join(takes))
            .replace("@FUNC@", _function_name(command.name))
            .replace("@PROG@", command.name)
            .replace("@ROOT@", command.name)
        )


class CommandCompleter(Completer):
    """
    prompt_toolkit completer for a flagtree command tree.

    The first tokens select subcommands; after that, subcommand names and
    flag names of the selected command are offered. After an enum flag its
    choices are offered instead.

    Args:
        command (Command): The command whose arguments are being typed
            (its own name is not expected in the input).
    """

    def __init__(self, command: Command):
        self.command = command

    def _walk(self, tokens: list[str]) -> tuple[Command, Flag | None]:
        current = self.command
        pending: Flag | None = None
        for token in tokens:
            if pending is not None:
                pending = None
                continue
            if token.startswith("-") and len(token) > 1:
                name = token.lstrip("-").split("=", 1)[0]
                flag = current.get_flag(name)
                if flag is not None and not flag.is_bool and "=" not in token:
                    pending = flag
                continue
            child = current.get_subcommand(token)
            if child is not None:
                current = child
        return current, pending

    def get_completions(self, document: Document, complete_event) -> Iterable[Completion]:
        text = document.text_before_cursor
        try:
            tokens = shlex.split(text)
        except ValueError:
            return
        cursor_at_end_of_token = text.endswith((" ", "\t")) or not text
        stub = "" if cursor_at_end_of_token or not tokens else tokens[-1]
        consumed = tokens if cursor_at_end_of_token else tokens[:-1]
        command, pending = self._walk(consumed)

        if pending is not None:
            suggestions = pending.enum_values()
        else:
            suggestions = []
            for sub in command.subcommands():
                suggestions.extend(name for name in (sub.long_name, sub.short_name) if name)
            for flag in command.flag_list():
                suggestions.extend(_flag_names(flag))
        yield from self._yield_lcp_completions(suggestions, stub)

    def _ensure_quote(self, text: str) -> str:
        if " " in text or "\t" in text:
            return f'"{text}"'
        return text

    def _yield_lcp_completions(self, suggestions: list[str], stub: str) -> Iterable[Completion]:
        matches = [s for s in suggestions if s.startswith(stub)]
        if not matches:
            return
        lcp = os.path.commonprefix(matches)
        if len(matches) > 1 and len(lcp) > len(stub) and not lcp.startswith("-"):
            yield Completion(lcp, start_position=-len(stub), display=lcp)
        for match in matches:
            yield Completion(
                self._ensure_quote(match), start_position=-len(stub), display=match
            )

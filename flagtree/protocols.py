# flagtree CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines the structural protocols for the collaborators a `Command` hands its
parsed tree to.

Protocols:
- HelpRenderer: Renders the help text of one command.
- CompletionGenerator: Produces a shell completion script for a command tree.

Any object with the matching method can be plugged in through
`Command.set_help_renderer()` / `Command.set_completion_generator()`.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from flagtree.command import Command


@runtime_checkable
class HelpRenderer(Protocol):
    def render(self, command: Command) -> str: ...


@runtime_checkable
class CompletionGenerator(Protocol):
    def generate(self, command: Command, shell: str) -> str: ...

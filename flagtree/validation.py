# flagtree CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Validation engine for flag groups, names and the subcommand tree.

Post-parse checks, run by the parser in this order:
- `validate_mutex_groups`: at most one member of a mutex group is set
  (exactly one when the group does not allow none)
- `validate_required_groups`: every member of a required group is set
- `validate_enum_flags`: every enum flag holds one of its choices

Group members are resolved through the command's flag registry, so long and
short aliases of the same flag count once. A member name that is not
registered raises `InvalidGroupMemberError`.

Setup checks:
- `validate_name`: rejects names containing whitespace or punctuation
- `has_cycle` / `validate_subcommand`: keep the command tree acyclic and
  the children's names unique
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from flagtree.exceptions import (
    AlreadyExistsError,
    CyclicReferenceError,
    FlagTreeError,
    FlagValidationError,
    InvalidGroupMemberError,
    InvalidNameError,
    MutexGroupViolationError,
    RequiredGroupViolationError,
)
from flagtree.flags import EnumFlag, Flag

if TYPE_CHECKING:
    from flagtree.command import Command

INVALID_NAME_CHARS = " !@#$%^&*(){}[]|\\;:'\"<>,.?/"
MAX_TREE_DEPTH = 100


def validate_name(name: str, kind: str = "flag") -> None:
    """
    Raise `InvalidNameError` if `name` cannot be used on the command line.

    Empty names are allowed here; callers decide whether at least one of the
    long/short pair must be present.
    """
    if not name:
        return
    if name.startswith("-"):
        raise InvalidNameError(f"{kind} name '{name}' cannot start with '-'")
    bad = sorted({char for char in name if char in INVALID_NAME_CHARS or not char.isprintable()})
    if bad:
        raise InvalidNameError(
            f"{kind} name '{name}' contains invalid characters: {''.join(bad)!r}"
        )


def _resolve_members(command: Command, group_kind: str, group_name: str, names: Iterable[str]) -> list[Flag]:
    members: list[Flag] = []
    seen: set[int] = set()
    for name in names:
        flag = command.flags.get(name)
        if flag is None:
            raise InvalidGroupMemberError(
                f"flag '{name}' in {group_kind} group '{group_name}' is not registered"
            )
        if id(flag) not in seen:
            seen.add(id(flag))
            members.append(flag)
    return members


def validate_mutex_groups(command: Command) -> None:
    for group in command.mutex_groups():
        members = _resolve_members(command, "mutex", group.name, group.flags)
        set_flags = [flag.display_name for flag in members if flag.is_set()]
        if len(set_flags) > 1:
            raise MutexGroupViolationError(
                f"flags {', '.join(set_flags)} in mutex group '{group.name}' are mutually exclusive",
                group.name,
                set_flags,
            )
        if not set_flags and not group.allow_none:
            names = [flag.display_name for flag in members]
            raise MutexGroupViolationError(
                f"one of the flags {', '.join(names)} in mutex group '{group.name}' must be set",
                group.name,
                names,
            )


def validate_required_groups(command: Command) -> None:
    for group in command.required_groups():
        members = _resolve_members(command, "required", group.name, group.flags)
        missing = [flag.display_name for flag in members if not flag.is_set()]
        if missing:
            raise RequiredGroupViolationError(
                f"required group '{group.name}' is missing flags: {', '.join(missing)}",
                group.name,
                missing,
            )


def validate_enum_flags(command: Command) -> None:
    for flag in command.flags.list():
        if not isinstance(flag, EnumFlag):
            continue
        value = flag.get()
        if value == "" and not flag.is_set():
            continue
        if not flag.is_allowed(value):
            raise FlagValidationError(
                f"invalid value '{value}' for flag {flag.display_name}, "
                f"allowed values are: {', '.join(flag.enum_values())}"
            )


def validate_command(command: Command) -> None:
    """Run every post-parse check against `command`."""
    validate_mutex_groups(command)
    validate_required_groups(command)
    validate_enum_flags(command)


def has_cycle(parent: Command, child: Command) -> bool:
    """
    Return True if attaching `child` under `parent` would create a cycle.

    That is the case when `child` is `parent` itself or one of its ancestors.
    A chain deeper than `MAX_TREE_DEPTH` is treated as a cycle.
    """
    current: Command | None = parent
    depth = 0
    while current is not None:
        if current is child:
            return True
        depth += 1
        if depth > MAX_TREE_DEPTH:
            return True
        current = current.parent
    return False


def validate_subcommand(parent: Command, child: Command | None) -> None:
    """
    Check that `child` can be attached under `parent`.

    Raises:
        FlagTreeError: If `child` is None.
        CyclicReferenceError: If attaching would create a cycle.
        AlreadyExistsError: If `child` already has a parent or one of its
            names is taken by an existing subcommand.
    """
    if child is None:
        raise FlagTreeError("subcommand cannot be None", code="NIL_COMMAND")
    if has_cycle(parent, child):
        raise CyclicReferenceError(
            f"cannot add '{child.name}' under '{parent.path}': cyclic reference"
        )
    if child.parent is not None:
        raise AlreadyExistsError(
            f"command '{child.name}' is already a subcommand of '{child.parent.path}'"
        )
    for name in (child.long_name, child.short_name):
        if name and parent.has_subcommand(name):
            raise AlreadyExistsError(
                f"subcommand name '{name}' already exists under '{parent.path}'"
            )

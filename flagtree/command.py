# flagtree CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `Command`, one node of a flagtree command tree.

A `Command` owns:
- a flag `Registry` and the `FlagSet` that parses tokens against it
- the positional arguments left over after parsing
- its subcommands, kept in a second `Registry` keyed by long and short name
- a back-reference to its parent (None for the root)
- a `CommandConfig` with version, description, examples, groups, ...
- an optional run function

Key Features:
- Typed flag constructors (`cmd.string(...)`, `cmd.int(...)`, `cmd.enum(...)`)
- Builtin `--help/-h` on every command, `--version/-v` and `--completion`
  on the root once configured
- Mutually exclusive and required flag groups
- Environment variable binding with a tree-wide prefix
- Batch subcommand attachment with cycle and collision checks
- `parse()` / `parse_only()` / `parse_and_run()` entry points that never
  exit the process

Example:
    app = Command("app", description="Demo application")
    app.set_version("1.0.0")
    verbose = app.bool("verbose", "V", "Verbose output")

    serve = Command("serve", "s", "Start the server")
    port = serve.int("port", "p", "Port to listen on", default=8080).bind_env("PORT")
    serve.set_run(lambda cmd: print(f"serving on {port.get()}"))

    app.add_subcommands(serve)
    app.parse_and_run(["--verbose", "serve", "--port", "9000"])
"""
from __future__ import annotations

import sys
import threading
from datetime import datetime, timedelta
from typing import Any, Callable, Sequence

from rich.console import Console

from flagtree.builtins import (
    COMPLETION_LONG_NAME,
    HELP_LONG_NAME,
    HELP_SHORT_NAME,
    VERSION_LONG_NAME,
    VERSION_SHORT_NAME,
    BuiltinFlags,
    handle_builtin_flags,
)
from flagtree.command_types import (
    CommandConfig,
    Example,
    Language,
    MutexGroup,
    RequiredGroup,
)
from flagtree.completion import ScriptCompletionGenerator
from flagtree.console import console as default_console
from flagtree.exceptions import (
    AlreadyExistsError,
    InvalidNameError,
    NotFoundError,
)
from flagtree.flag_set import FlagSet
from flagtree.flags import (
    BoolFlag,
    DurationFlag,
    EnumFlag,
    Flag,
    FloatFlag,
    Int64Flag,
    IntFlag,
    IntSliceFlag,
    IPFlag,
    IPv4Flag,
    IPv6Flag,
    MapFlag,
    PathFlag,
    SizeFlag,
    StringFlag,
    StringSliceFlag,
    TimeFlag,
    Uint8Flag,
    Uint16Flag,
    Uint32Flag,
    Uint64Flag,
    UintFlag,
    URLFlag,
)
from flagtree.help import RichHelpRenderer
from flagtree.logger import logger
from flagtree.parser import parse_and_route
from flagtree.protocols import CompletionGenerator, HelpRenderer
from flagtree.registry import Registry
from flagtree.validation import validate_name, validate_subcommand

RunFunc = Callable[["Command"], Any]


class Command:
    """
    A command or subcommand with its own flags, arguments and children.

    Args:
        long_name (str): Long command name, e.g. "serve".
        short_name (str): Short alias, e.g. "s".
        description (str): One-line description for help output.
        config (CommandConfig | None): Declarative configuration, applied through the setters.
        run (RunFunc | None): Called with the command by `run()` / `parse_and_run()`.

    Raises:
        InvalidNameError: If both names are empty or a name has invalid characters.
        AlreadyExistsError: If `config` declares duplicate groups or subcommand names.
    """

    # Guards the check-and-set of `parent` across every tree.
    _tree_lock = threading.RLock()

    def __init__(
        self,
        long_name: str = "",
        short_name: str = "",
        description: str = "",
        *,
        config: CommandConfig | None = None,
        run: RunFunc | None = None,
    ) -> None:
        if not long_name and not short_name:
            raise InvalidNameError("command long name and short name cannot both be empty")
        if long_name and long_name == short_name:
            raise InvalidNameError(
                f"command long name and short name cannot be the same: '{long_name}'"
            )
        validate_name(long_name, "command")
        validate_name(short_name, "command")
        self._lock = threading.RLock()
        self.long_name: str = long_name
        self.short_name: str = short_name
        source = config or CommandConfig()
        self.config: CommandConfig = CommandConfig(
            description=description or source.description,
            help=source.help,
            usage=source.usage,
            logo_text=source.logo_text,
            examples=list(source.examples),
            notes=list(source.notes),
            language=Language(source.language),
        )
        self.parent: Command | None = None
        self.flags: Registry[Flag] = Registry("flag")
        self.flag_set: FlagSet = FlagSet(self.name, self.flags)
        self.builtins: BuiltinFlags = BuiltinFlags(self.config.language)
        self._subcommands: Registry[Command] = Registry("subcommand")
        self._args: list[str] = []
        self._parsed: bool = False
        self._routed: Command | None = None
        self._run: RunFunc | None = run
        self._help_renderer: HelpRenderer | None = None
        self._completion_generator: CompletionGenerator | None = None
        self._add_help()
        self._apply_config(source)

    def _apply_config(self, source: CommandConfig) -> None:
        self.set_env_prefix(source.env_prefix)
        for mutex in source.mutex_groups:
            self.add_mutex_group(mutex.name, mutex.flags, allow_none=mutex.allow_none)
        for required in source.required_groups:
            self.add_required_group(required.name, required.flags)
        if source.version:
            self.set_version(source.version)
        if source.completion:
            self.set_completion(True)
        if source.subcommands:
            self.add_subcommands(*source.subcommands)

    def _add_help(self) -> None:
        self.flags.register(self.builtins.help, HELP_LONG_NAME, HELP_SHORT_NAME)
        self.builtins.mark_as_builtin(HELP_LONG_NAME, HELP_SHORT_NAME)

    @property
    def name(self) -> str:
        """Long name if present, else short name."""
        return self.long_name or self.short_name

    @property
    def description(self) -> str:
        return self.config.description

    # Tree

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def root(self) -> Command:
        current = self
        while current.parent is not None:
            current = current.parent
        return current

    @property
    def path(self) -> str:
        """Space separated names from the root down to this command."""
        names = []
        current: Command | None = self
        while current is not None:
            names.append(current.name)
            current = current.parent
        return " ".join(reversed(names))

    def add_subcommands(self, *children: Command) -> None:
        """
        Attach several subcommands at once.

        Every child is validated (cycles, names taken by existing children or
        by another child in the same call, `None` members) before any of
        them is attached. On error the tree is left unchanged.

        Raises:
            CyclicReferenceError: If a child is this command or one of its ancestors.
            AlreadyExistsError: On a name collision or a child that already has a parent.
        """
        with Command._tree_lock, self._lock:
            pending: set[str] = set()
            seen: set[int] = set()
            for child in children:
                validate_subcommand(self, child)
                if id(child) in seen:
                    raise AlreadyExistsError(
                        f"subcommand '{child.name}' appears twice in the same batch"
                    )
                seen.add(id(child))
                for name in (child.long_name, child.short_name):
                    if name and name in pending:
                        raise AlreadyExistsError(
                            f"subcommand name '{name}' already exists under '{self.path}'"
                        )
                    if name:
                        pending.add(name)
            self._subcommands.register_many(
                (child, child.long_name, child.short_name) for child in children
            )
            for child in children:
                child.parent = self
                logger.debug("[%s] attached subcommand '%s'", self.path, child.name)

    def add_subcommand(self, child: Command) -> Command:
        self.add_subcommands(child)
        return child

    def validate_subcommand(self, child: Command) -> None:
        """Raise if `child` cannot be attached under this command."""
        validate_subcommand(self, child)

    def get_subcommand(self, name: str) -> Command | None:
        return self._subcommands.get(name)

    def has_subcommand(self, name: str) -> bool:
        return self._subcommands.has(name)

    def has_subcommands(self) -> bool:
        return self._subcommands.count() > 0

    def subcommands(self) -> list[Command]:
        """Distinct subcommands in the order they were attached."""
        return self._subcommands.list()

    # Flags

    def add_flag(self, flag: Flag) -> Flag:
        """
        Register a flag on this command.

        Raises:
            InvalidNameError: If a name has invalid characters or is reserved by a builtin flag.
            AlreadyExistsError: If a name is already registered.
        """
        self._check_flag_names(flag)
        self.flags.register(flag, flag.long_name, flag.short_name)
        return flag

    def add_flags(self, *flags: Flag) -> None:
        """Register several flags; nothing is registered if any of them is rejected."""
        for flag in flags:
            self._check_flag_names(flag)
        self.flags.register_many((flag, flag.long_name, flag.short_name) for flag in flags)

    def _check_flag_names(self, flag: Flag) -> None:
        for name in (flag.long_name, flag.short_name):
            validate_name(name, "flag")
            if self.builtins.is_builtin(name):
                raise InvalidNameError(f"flag name '{name}' is reserved for a builtin flag")

    def get_flag(self, name: str) -> Flag | None:
        return self.flags.get(name)

    def has_flag(self, name: str) -> bool:
        return self.flags.has(name)

    def flag_list(self) -> list[Flag]:
        """Distinct flags in registration order, builtins included."""
        return self.flags.list()

    def remove_flag(self, name: str) -> Flag:
        """
        Unregister a user flag by any of its names.

        Raises:
            NotFoundError: If no flag is registered under `name`.
            InvalidNameError: If `name` belongs to a builtin flag.
        """
        flag = self.flags.get(name)
        if flag is None:
            raise NotFoundError(f"flag '{name}' not found")
        if self.builtins.is_builtin_flag(flag):
            raise InvalidNameError(f"builtin flag '{name}' cannot be removed")
        return self.flags.unregister(name)

    def string(
        self, long_name: str = "", short_name: str = "", description: str = "", default: str = "", **kwargs: Any
    ) -> StringFlag:
        return self.add_flag(StringFlag(long_name, short_name, description, default, **kwargs))

    def bool(
        self, long_name: str = "", short_name: str = "", description: str = "", default: bool = False, **kwargs: Any
    ) -> BoolFlag:
        return self.add_flag(BoolFlag(long_name, short_name, description, default, **kwargs))

    def int(
        self, long_name: str = "", short_name: str = "", description: str = "", default: int = 0, **kwargs: Any
    ) -> IntFlag:
        return self.add_flag(IntFlag(long_name, short_name, description, default, **kwargs))

    def int64(
        self, long_name: str = "", short_name: str = "", description: str = "", default: int = 0, **kwargs: Any
    ) -> Int64Flag:
        return self.add_flag(Int64Flag(long_name, short_name, description, default, **kwargs))

    def uint(
        self, long_name: str = "", short_name: str = "", description: str = "", default: int = 0, **kwargs: Any
    ) -> UintFlag:
        return self.add_flag(UintFlag(long_name, short_name, description, default, **kwargs))

    def uint8(
        self, long_name: str = "", short_name: str = "", description: str = "", default: int = 0, **kwargs: Any
    ) -> Uint8Flag:
        return self.add_flag(Uint8Flag(long_name, short_name, description, default, **kwargs))

    def uint16(
        self, long_name: str = "", short_name: str = "", description: str = "", default: int = 0, **kwargs: Any
    ) -> Uint16Flag:
        return self.add_flag(Uint16Flag(long_name, short_name, description, default, **kwargs))

    def uint32(
        self, long_name: str = "", short_name: str = "", description: str = "", default: int = 0, **kwargs: Any
    ) -> Uint32Flag:
        return self.add_flag(Uint32Flag(long_name, short_name, description, default, **kwargs))

    def uint64(
        self, long_name: str = "", short_name: str = "", description: str = "", default: int = 0, **kwargs: Any
    ) -> Uint64Flag:
        return self.add_flag(Uint64Flag(long_name, short_name, description, default, **kwargs))

    def float(
        self, long_name: str = "", short_name: str = "", description: str = "", default: float = 0.0, **kwargs: Any
    ) -> FloatFlag:
        return self.add_flag(FloatFlag(long_name, short_name, description, default, **kwargs))

    def enum(
        self,
        long_name: str = "",
        short_name: str = "",
        description: str = "",
        default: str = "",
        choices: Sequence[str] = (),
        **kwargs: Any,
    ) -> EnumFlag:
        return self.add_flag(
            EnumFlag(long_name, short_name, description, default, choices=choices, **kwargs)
        )

    def duration(
        self,
        long_name: str = "",
        short_name: str = "",
        description: str = "",
        default: timedelta | str | None = None,
        **kwargs: Any,
    ) -> DurationFlag:
        return self.add_flag(DurationFlag(long_name, short_name, description, default, **kwargs))

    def time(
        self,
        long_name: str = "",
        short_name: str = "",
        description: str = "",
        default: datetime | str | None = None,
        **kwargs: Any,
    ) -> TimeFlag:
        return self.add_flag(TimeFlag(long_name, short_name, description, default, **kwargs))

    def size(
        self, long_name: str = "", short_name: str = "", description: str = "", default: int | str = 0, **kwargs: Any
    ) -> SizeFlag:
        return self.add_flag(SizeFlag(long_name, short_name, description, default, **kwargs))

    def path_flag(
        self, long_name: str = "", short_name: str = "", description: str = "", default: str = "", **kwargs: Any
    ) -> PathFlag:
        return self.add_flag(PathFlag(long_name, short_name, description, default, **kwargs))

    def ip(
        self, long_name: str = "", short_name: str = "", description: str = "", default: str = "", **kwargs: Any
    ) -> IPFlag:
        return self.add_flag(IPFlag(long_name, short_name, description, default, **kwargs))

    def ipv4(
        self, long_name: str = "", short_name: str = "", description: str = "", default: str = "", **kwargs: Any
    ) -> IPv4Flag:
        return self.add_flag(IPv4Flag(long_name, short_name, description, default, **kwargs))

    def ipv6(
        self, long_name: str = "", short_name: str = "", description: str = "", default: str = "", **kwargs: Any
    ) -> IPv6Flag:
        return self.add_flag(IPv6Flag(long_name, short_name, description, default, **kwargs))

    def url(
        self, long_name: str = "", short_name: str = "", description: str = "", default: str = "", **kwargs: Any
    ) -> URLFlag:
        return self.add_flag(URLFlag(long_name, short_name, description, default, **kwargs))

    def string_slice(
        self,
        long_name: str = "",
        short_name: str = "",
        description: str = "",
        default: Sequence[str] | None = None,
        **kwargs: Any,
    ) -> StringSliceFlag:
        return self.add_flag(StringSliceFlag(long_name, short_name, description, default, **kwargs))

    def int_slice(
        self,
        long_name: str = "",
        short_name: str = "",
        description: str = "",
        default: Sequence[int] | None = None,
        **kwargs: Any,
    ) -> IntSliceFlag:
        return self.add_flag(IntSliceFlag(long_name, short_name, description, default, **kwargs))

    def map(
        self,
        long_name: str = "",
        short_name: str = "",
        description: str = "",
        default: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> MapFlag:
        return self.add_flag(MapFlag(long_name, short_name, description, default, **kwargs))

    # Groups

    def add_mutex_group(self, name: str, flags: Sequence[str], allow_none: bool = True) -> MutexGroup:
        """
        Declare flags of which at most one may be set.

        Member names are resolved when the command is validated, so flags
        may be registered after the group.

        Raises:
            InvalidNameError: If `name` is empty or `flags` is empty.
            AlreadyExistsError: If a mutex group with this name exists.
        """
        if not name:
            raise InvalidNameError("mutex group name cannot be empty")
        if not flags:
            raise InvalidNameError(f"mutex group '{name}' needs at least one flag")
        with self._lock:
            if any(group.name == name for group in self.config.mutex_groups):
                raise AlreadyExistsError(f"mutex group '{name}' already exists")
            group = MutexGroup(name=name, flags=list(flags), allow_none=allow_none)
            self.config.mutex_groups.append(group)
            return group

    def remove_mutex_group(self, name: str) -> MutexGroup:
        with self._lock:
            for index, group in enumerate(self.config.mutex_groups):
                if group.name == name:
                    return self.config.mutex_groups.pop(index)
        raise NotFoundError(f"mutex group '{name}' not found")

    def get_mutex_group(self, name: str) -> MutexGroup | None:
        with self._lock:
            return next((g for g in self.config.mutex_groups if g.name == name), None)

    def mutex_groups(self) -> list[MutexGroup]:
        with self._lock:
            return list(self.config.mutex_groups)

    def add_required_group(self, name: str, flags: Sequence[str]) -> RequiredGroup:
        """Declare flags that must all be set. Same rules as `add_mutex_group()`."""
        if not name:
            raise InvalidNameError("required group name cannot be empty")
        if not flags:
            raise InvalidNameError(f"required group '{name}' needs at least one flag")
        with self._lock:
            if any(group.name == name for group in self.config.required_groups):
                raise AlreadyExistsError(f"required group '{name}' already exists")
            group = RequiredGroup(name=name, flags=list(flags))
            self.config.required_groups.append(group)
            return group

    def remove_required_group(self, name: str) -> RequiredGroup:
        with self._lock:
            for index, group in enumerate(self.config.required_groups):
                if group.name == name:
                    return self.config.required_groups.pop(index)
        raise NotFoundError(f"required group '{name}' not found")

    def get_required_group(self, name: str) -> RequiredGroup | None:
        with self._lock:
            return next((g for g in self.config.required_groups if g.name == name), None)

    def required_groups(self) -> list[RequiredGroup]:
        with self._lock:
            return list(self.config.required_groups)

    # Configuration

    def set_version(self, version: str) -> None:
        """Set the version and register `--version/-v`. Ignored on subcommands."""
        if not self.is_root:
            logger.warning(
                "[%s] version can only be set on the root command, ignoring '%s'",
                self.path,
                version,
            )
            return
        with self._lock:
            self.config.version = version
            if version and self.builtins.version is None:
                flag = self.builtins.new_version_flag(self.config.language)
                self.flags.register(flag, VERSION_LONG_NAME, VERSION_SHORT_NAME)
                self.builtins.mark_as_builtin(VERSION_LONG_NAME, VERSION_SHORT_NAME)

    @property
    def version(self) -> str:
        return self.config.version

    def set_completion(self, enabled: bool = True) -> None:
        """Enable `--completion <shell>` on the root command."""
        if not self.is_root:
            logger.warning("[%s] completion can only be enabled on the root command", self.path)
            return
        with self._lock:
            self.config.completion = enabled
            if enabled and self.builtins.completion is None:
                flag = self.builtins.new_completion_flag(self.config.language)
                self.flags.register(flag, COMPLETION_LONG_NAME, "")
                self.builtins.mark_as_builtin(COMPLETION_LONG_NAME)

    def set_env_prefix(self, prefix: str) -> None:
        """
        Set the prefix for bound environment variables. A trailing `_` is added
        when missing, so `set_env_prefix("APP")` makes `PORT` read `APP_PORT`.
        Only the root's prefix is used.
        """
        if prefix and not prefix.endswith("_"):
            prefix = f"{prefix}_"
        with self._lock:
            self.config.env_prefix = prefix

    @property
    def env_prefix(self) -> str:
        return self.root.config.env_prefix

    def set_language(self, language: Language | str) -> None:
        self.config.language = Language(language)

    @property
    def language(self) -> Language:
        return self.config.language

    def set_description(self, description: str) -> None:
        self.config.description = description

    def set_usage(self, usage: str) -> None:
        self.config.usage = usage

    def set_help(self, text: str) -> None:
        """Replace the generated help with `text`."""
        self.config.help = text

    def set_logo_text(self, text: str) -> None:
        self.config.logo_text = text

    def add_example(self, description: str, usage: str) -> None:
        with self._lock:
            self.config.examples.append(Example(description=description, usage=usage))

    def add_examples(self, *examples: Example) -> None:
        with self._lock:
            self.config.examples.extend(examples)

    def add_note(self, note: str) -> None:
        with self._lock:
            self.config.notes.append(note)

    def add_notes(self, *notes: str) -> None:
        with self._lock:
            self.config.notes.extend(notes)

    def set_help_renderer(self, renderer: HelpRenderer) -> None:
        self._help_renderer = renderer

    def set_completion_generator(self, generator: CompletionGenerator) -> None:
        self._completion_generator = generator

    # Arguments and parse state

    @property
    def args(self) -> list[str]:
        """Positional arguments left over after parsing."""
        with self._lock:
            return list(self._args)

    def arg(self, index: int) -> str:
        """Return argument `index`, or "" when out of range."""
        with self._lock:
            if 0 <= index < len(self._args):
                return self._args[index]
            return ""

    def narg(self) -> int:
        with self._lock:
            return len(self._args)

    @property
    def is_parsed(self) -> bool:
        with self._lock:
            return self._parsed

    @property
    def routed_command(self) -> Command:
        """The deepest command reached by the last parse, or self."""
        with self._lock:
            return self._routed or self

    def _capture_args(self, remaining: list[str]) -> None:
        with self._lock:
            self._args.extend(remaining)
            self._parsed = True

    def _set_routed(self, routed: Command) -> None:
        with self._lock:
            self._routed = routed

    def parse(self, args: Sequence[str] | None = None) -> Command:
        """
        Parse `args` (default `sys.argv[1:]`) and route into subcommands.

        Returns:
            Command: The deepest command selected by the tokens.
        """
        tokens = list(sys.argv[1:] if args is None else args)
        return parse_and_route(self, tokens, route=True)

    def parse_only(self, args: Sequence[str] | None = None) -> Command:
        """Parse `args` for this command without routing into subcommands."""
        tokens = list(sys.argv[1:] if args is None else args)
        parse_and_route(self, tokens, route=False)
        return self

    def parse_and_run(self, args: Sequence[str] | None = None, console: Console | None = None) -> Any:
        """
        Parse, handle builtin flags, then run the selected command.

        When the selected command has no run function its help is printed.

        Raises:
            HelpSignal / VersionSignal / CompletionSignal: After the builtin output was written.
        """
        routed = self.parse(args)
        chain: list[Command] = []
        current: Command | None = routed
        while current is not None:
            chain.append(current)
            current = current.parent
        for command in reversed(chain):
            handle_builtin_flags(command, console=console)
        if routed._run is None:
            logger.debug("[%s] no run function, showing help", routed.path)
            routed.print_help(console=console)
            return None
        return routed.run()

    # Execution

    def set_run(self, run: RunFunc) -> None:
        self._run = run

    def has_run(self) -> bool:
        return self._run is not None

    def run(self) -> Any:
        """
        Call the run function with this command.

        Raises:
            NotFoundError: If no run function was set.
        """
        if self._run is None:
            raise NotFoundError(f"command '{self.path}' has no run function")
        return self._run(self)

    # Help and completion

    def _resolve_help_renderer(self) -> HelpRenderer:
        current: Command | None = self
        while current is not None:
            if current._help_renderer is not None:
                return current._help_renderer
            current = current.parent
        return RichHelpRenderer()

    def _resolve_completion_generator(self) -> CompletionGenerator:
        generator = self.root._completion_generator
        if generator is not None:
            return generator
        return ScriptCompletionGenerator()

    def help(self) -> str:
        """Return the help text of this command."""
        return self._resolve_help_renderer().render(self)

    def print_help(self, console: Console | None = None) -> None:
        console = console or default_console
        renderer = self._resolve_help_renderer()
        print_to = getattr(renderer, "print", None)
        if callable(print_to):
            print_to(self, console)
        else:
            console.out(renderer.render(self), highlight=False)

    def completion_script(self, shell: str) -> str:
        """Return a completion script for the whole tree this command belongs to."""
        return self._resolve_completion_generator().generate(self.root, shell)

    def __repr__(self) -> str:
        return (
            f"Command(name={self.name!r}, short_name={self.short_name!r}, "
            f"flags={self.flags.count()}, subcommands={self._subcommands.count()})"
        )

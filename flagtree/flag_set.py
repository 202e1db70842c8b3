# flagtree CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Provides `FlagSet`, the token-level parser that applies command-line tokens
to the flags of a single command.

Recognized forms:
- `--name value`, `--name=value`
- `-n value`, `-n=value` (a single dash may also be used with long names)
- `--verbose` for boolean flags, optionally `--verbose=false`
- `-abc` expanded to `-a -b -c` when every letter is a boolean short flag
- `--` ends flag parsing and is consumed

Flag parsing stops at the first token that is not a flag (or at a lone
`-`). Everything from there on is returned untouched, so subcommand names
and the subcommand's own flags are left for routing.

Errors are raised as `ParseFailedError`; a malformed value keeps the
conversion or validator error as its cause.
"""
from __future__ import annotations

from flagtree.exceptions import FlagTreeError, ParseFailedError
from flagtree.flags import Flag
from flagtree.logger import logger
from flagtree.registry import Registry

TERMINATOR = "--"


class FlagSet:
    """
    Parses tokens against a flag registry.

    Attributes:
        name (str): Owner name used in error messages.
        registry (Registry[Flag]): Where flag names are resolved.
    """

    def __init__(self, name: str, registry: Registry[Flag]) -> None:
        self.name = name
        self.registry = registry
        self._parsed: bool = False
        self._args: list[str] = []
        self._actual: dict[int, Flag] = {}

    @property
    def parsed(self) -> bool:
        return self._parsed

    @property
    def args(self) -> list[str]:
        """Tokens left over by the last `parse()`."""
        return list(self._args)

    def narg(self) -> int:
        return len(self._args)

    def arg(self, index: int) -> str:
        """Return the remaining token at `index`, or "" when out of range."""
        if 0 <= index < len(self._args):
            return self._args[index]
        return ""

    def lookup(self, name: str) -> Flag | None:
        return self.registry.get(name)

    def visit(self) -> list[Flag]:
        """Flags that were set by the last `parse()`, in the order they were seen."""
        return list(self._actual.values())

    def parse(self, tokens: list[str]) -> list[str]:
        """
        Apply `tokens` to the registered flags.

        Returns:
            list[str]: The tokens left after flag parsing stopped.

        Raises:
            ParseFailedError: On an unknown flag, a missing value or a rejected value.
        """
        self._parsed = True
        self._actual = {}
        index = 0
        while index < len(tokens):
            token = tokens[index]
            if token == TERMINATOR:
                index += 1
                break
            if len(token) < 2 or not token.startswith("-"):
                break
            index = self._parse_one(tokens, index)
        self._args = list(tokens[index:])
        logger.debug("[%s] flag parsing done, remaining args: %s", self.name, self._args)
        return list(self._args)

    def _parse_one(self, tokens: list[str], index: int) -> int:
        token = tokens[index]
        double_dash = token.startswith("--")
        body = token[2:] if double_dash else token[1:]
        if not body or body.startswith("-") or body.startswith("="):
            raise ParseFailedError(f"bad flag syntax: {token}")

        name, has_value, value = body.partition("=")
        flag = self.registry.get(name)

        if flag is None and not double_dash and not has_value:
            bundle = self._expand_posix_bundling(name)
            if bundle:
                for short_flag in bundle:
                    self._apply(short_flag, f"-{short_flag.short_name}", "true")
                return index + 1

        if flag is None:
            self._raise_unknown_flag_error(token, name)

        if has_value:
            self._apply(flag, token, value)
            return index + 1
        if flag.is_bool:
            self._apply(flag, token, "true")
            return index + 1
        if index + 1 >= len(tokens):
            raise ParseFailedError(f"flag needs an argument: {token}")
        self._apply(flag, token, tokens[index + 1])
        return index + 2

    def _expand_posix_bundling(self, letters: str) -> list[Flag]:
        """Resolve `-abc` into boolean flags a, b, c. Returns [] if it is not a bundle."""
        if len(letters) < 2:
            return []
        bundle = []
        for letter in letters:
            flag = self.registry.get(letter)
            if flag is None or not flag.is_bool or flag.short_name != letter:
                return []
            bundle.append(flag)
        return bundle

    def _apply(self, flag: Flag, token: str, value: str) -> None:
        try:
            flag.set(value)
        except FlagTreeError as error:
            raise ParseFailedError(
                f"invalid value {value!r} for flag {token}", cause=error
            ) from error
        self._actual[id(flag)] = flag

    def _raise_unknown_flag_error(self, token: str, name: str) -> None:
        suggestions = sorted(
            f"--{alias}" if len(alias) > 1 else f"-{alias}"
            for alias in self.registry.names()
            if alias.startswith(name)
        )
        if suggestions:
            raise ParseFailedError(
                f"unrecognized option '{token}'. Did you mean one of: {', '.join(suggestions)}?"
            )
        raise ParseFailedError(
            f"unrecognized option '{token}'. Use --help to see available options."
        )

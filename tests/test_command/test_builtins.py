import logging
from io import StringIO

import pytest
from rich.console import Console

from flagtree import Command
from flagtree.builtins import BuiltinFlags, Shell, builtin_description
from flagtree.command_types import Language
from flagtree.exceptions import (
    FlagValidationError,
    InvalidNameError,
    ParseFailedError,
    RequiredGroupViolationError,
)
from flagtree.signals import CompletionSignal, FlowSignal, HelpSignal, VersionSignal


@pytest.fixture
def capture():
    buffer = StringIO()
    console = Console(file=buffer, color_system=None, width=120)
    return console, buffer


def test_help_on_every_command():
    root = Command("app")
    child = Command("child")
    root.add_subcommands(child)
    assert root.has_flag("help") and root.has_flag("h")
    assert child.has_flag("help") and child.has_flag("h")
    assert root.builtins.is_builtin("h")


def test_help_prints_and_signals(capture):
    console, buffer = capture
    cmd = Command("app", description="Demo app")
    ran = []
    cmd.set_run(ran.append)

    with pytest.raises(HelpSignal):
        cmd.parse_and_run(["-h"], console=console)

    assert "Desc: Demo app" in buffer.getvalue()
    assert ran == []


def test_help_on_subcommand_shows_subcommand_help(capture):
    console, buffer = capture
    root = Command("app")
    child = Command("deploy", description="Deploy things")
    root.add_subcommands(child)

    with pytest.raises(HelpSignal):
        root.parse_and_run(["deploy", "--help"], console=console)

    assert "Name: deploy" in buffer.getvalue()


def test_help_on_subcommand_ignores_parent_groups(capture):
    console, buffer = capture
    root = Command("app")
    root.string("token")
    root.add_required_group("auth", ["token"])
    root.add_subcommands(Command("serve", description="Serve things"))

    with pytest.raises(HelpSignal):
        root.parse_and_run(["serve", "--help"], console=console)

    assert "Name: serve" in buffer.getvalue()


def test_parent_groups_checked_without_builtin():
    root = Command("app")
    root.string("token")
    root.add_required_group("auth", ["token"])
    serve = Command("serve")
    root.add_subcommands(serve)

    with pytest.raises(RequiredGroupViolationError, match="auth"):
        root.parse(["serve"])
    assert serve.is_parsed


def test_signals_are_not_exceptions():
    assert issubclass(HelpSignal, FlowSignal)
    assert not issubclass(FlowSignal, Exception)


def test_version_prints_and_signals(capture):
    console, buffer = capture
    cmd = Command("app")
    cmd.set_version("1.2.3")

    with pytest.raises(VersionSignal):
        cmd.parse_and_run(["--version"], console=console)

    assert buffer.getvalue().strip() == "1.2.3"


def test_version_short_name(capture):
    console, buffer = capture
    cmd = Command("app")
    cmd.set_version("1.2.3")
    with pytest.raises(VersionSignal):
        cmd.parse_and_run(["-v"], console=console)


def test_help_wins_over_version(capture):
    console, buffer = capture
    cmd = Command("app")
    cmd.set_version("1.2.3")
    with pytest.raises(HelpSignal):
        cmd.parse_and_run(["-v", "-h"], console=console)


def test_no_version_flag_without_version():
    cmd = Command("app")
    assert not cmd.has_flag("version")
    with pytest.raises(ParseFailedError):
        cmd.parse(["--version"])


def test_version_on_subcommand_is_ignored_with_warning(caplog):
    root = Command("app")
    child = Command("child")
    root.add_subcommands(child)

    with caplog.at_level(logging.WARNING, logger="flagtree"):
        child.set_version("9.9.9")

    assert child.version == ""
    assert not child.has_flag("version")
    assert "version can only be set on the root command" in caplog.text


def test_version_reserves_names_only_on_root():
    root = Command("app")
    root.set_version("1.0")
    child = Command("child")
    root.add_subcommands(child)

    with pytest.raises(InvalidNameError):
        root.bool("verbose", "v")
    child.bool("verbose", "v")
    assert child.has_flag("v")


def test_help_name_is_reserved():
    cmd = Command("app")
    with pytest.raises(InvalidNameError, match="reserved"):
        cmd.string("help")
    with pytest.raises(InvalidNameError):
        cmd.bool("hidden", "h")


def test_version_set_twice_registers_once():
    cmd = Command("app")
    cmd.set_version("1.0")
    cmd.set_version("1.1")
    assert cmd.version == "1.1"
    assert sum(1 for flag in cmd.flag_list() if flag.long_name == "version") == 1


def test_completion_writes_script_and_signals(capture):
    console, buffer = capture
    cmd = Command("app")
    cmd.set_completion(True)

    with pytest.raises(CompletionSignal):
        cmd.parse_and_run(["--completion", "bash"], console=console)

    assert "complete -o default -F _app_completion app" in buffer.getvalue()


def test_completion_none_is_a_no_op(capture):
    console, buffer = capture
    cmd = Command("app", run=lambda command: "ran")
    cmd.set_completion(True)
    assert cmd.parse_and_run(["--completion", "none"], console=console) == "ran"


def test_completion_rejects_unknown_shell():
    cmd = Command("app")
    cmd.set_completion(True)
    with pytest.raises(ParseFailedError) as exc_info:
        cmd.parse(["--completion", "fish"])
    assert isinstance(exc_info.value.cause, FlagValidationError)


def test_completion_is_root_only(caplog):
    root = Command("app")
    child = Command("child")
    root.add_subcommands(child)
    with caplog.at_level(logging.WARNING, logger="flagtree"):
        child.set_completion(True)
    assert not child.has_flag("completion")


def test_builtin_flags_table():
    builtins = BuiltinFlags()
    builtins.mark_as_builtin("help", "h", "")
    assert builtins.reserved_names() == ["h", "help"]
    assert not builtins.is_builtin("")
    assert builtins.flags() == [builtins.help]
    assert not builtins.any_set()

    builtins.new_completion_flag(Language.EN)
    assert builtins.completion.get() == "none"
    assert builtins.is_builtin_flag(builtins.completion)


def test_shell_aliases():
    assert Shell("BASH") is Shell.BASH
    assert str(Shell.PWSH) == "pwsh"
    with pytest.raises(ValueError):
        Shell("fish")


def test_builtin_descriptions_are_localized():
    assert builtin_description("help", Language.EN) == "Show help information"
    assert builtin_description("help", Language.ZH) == "显示帮助信息"
    assert "bash, powershell, pwsh" in builtin_description("completion", Language.EN)

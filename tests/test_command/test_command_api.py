from datetime import timedelta
from ipaddress import ip_address
from pathlib import Path

import pytest

from flagtree import Command, CommandConfig, Example, Language, MutexGroup, RequiredGroup
from flagtree.exceptions import AlreadyExistsError, InvalidNameError, NotFoundError
from flagtree.flags import (
    BoolFlag,
    DurationFlag,
    EnumFlag,
    FlagType,
    IntFlag,
    MapFlag,
    StringFlag,
)


def test_typed_constructors_register_flags():
    cmd = Command("app")
    cmd.string("name", "n", default="anon")
    cmd.int("count", "c", default=1)
    cmd.int64("offset")
    cmd.uint("limit")
    cmd.uint8("level")
    cmd.uint16("port16")
    cmd.uint32("mask")
    cmd.uint64("huge")
    cmd.float("ratio")
    cmd.enum("mode", "m", choices=["a", "b"])
    cmd.duration("timeout", default="5s")
    cmd.time("since")
    cmd.size("limit-size", default="1KiB")
    cmd.path_flag("config")
    cmd.ip("bind")
    cmd.ipv4("bind4")
    cmd.ipv6("bind6")
    cmd.url("endpoint")
    cmd.string_slice("tags")
    cmd.int_slice("ids")
    cmd.map("labels")

    types = {flag.name: flag.flag_type for flag in cmd.flag_list()}
    assert types["help"] is FlagType.BOOL
    assert types["mode"] is FlagType.ENUM
    assert types["tags"] is FlagType.STRING_SLICE
    assert types["labels"] is FlagType.MAP
    assert len(cmd.flag_list()) == 22

    cmd.parse(
        [
            "-n", "bob",
            "--timeout", "1m",
            "--bind", "10.0.0.1",
            "--config", "app.toml",
            "--labels", "a=1",
        ]
    )
    assert cmd.get_flag("n").get() == "bob"
    assert cmd.get_flag("timeout").get() == timedelta(minutes=1)
    assert cmd.get_flag("bind").get() == ip_address("10.0.0.1")
    assert cmd.get_flag("config").get() == Path("app.toml")
    assert cmd.get_flag("labels").get() == {"a": "1"}
    assert cmd.get_flag("limit-size").get() == 1024


def test_constructors_return_concrete_flags():
    cmd = Command("app")
    assert isinstance(cmd.string("s"), StringFlag)
    assert isinstance(cmd.bool("b"), BoolFlag)
    assert isinstance(cmd.int("i"), IntFlag)
    assert isinstance(cmd.enum("e", choices=["x"]), EnumFlag)
    assert isinstance(cmd.duration("d"), DurationFlag)
    assert isinstance(cmd.map("m"), MapFlag)


def test_add_flag_and_duplicates():
    cmd = Command("app")
    flag = cmd.add_flag(StringFlag("output", "o"))
    assert cmd.get_flag("o") is flag
    assert cmd.has_flag("output")

    with pytest.raises(AlreadyExistsError):
        cmd.add_flag(StringFlag("other", "o"))
    assert not cmd.has_flag("other")


def test_add_flags_is_atomic():
    cmd = Command("app")
    cmd.string("taken")
    with pytest.raises(AlreadyExistsError):
        cmd.add_flags(StringFlag("fresh"), StringFlag("taken"))
    assert not cmd.has_flag("fresh")


def test_flag_names_are_validated():
    cmd = Command("app")
    with pytest.raises(InvalidNameError):
        cmd.string("bad name")
    with pytest.raises(InvalidNameError):
        cmd.string("ok", "!")


def test_remove_flag():
    cmd = Command("app")
    cmd.int("count", "c")
    removed = cmd.remove_flag("c")
    assert removed.long_name == "count"
    assert not cmd.has_flag("count")

    with pytest.raises(NotFoundError):
        cmd.remove_flag("count")
    with pytest.raises(InvalidNameError):
        cmd.remove_flag("help")


def test_flag_list_keeps_registration_order():
    cmd = Command("app")
    cmd.string("zeta")
    cmd.string("alpha")
    assert [flag.name for flag in cmd.flag_list()] == ["help", "zeta", "alpha"]


def test_config_is_applied_at_construction():
    config = CommandConfig(version="2.0.0", completion=True, language=Language.ZH)
    cmd = Command("app", config=config)
    assert cmd.version == "2.0.0"
    assert cmd.has_flag("version")
    assert cmd.has_flag("completion")
    assert cmd.language is Language.ZH


def test_description_argument_overrides_config():
    cmd = Command("app", description="short", config=CommandConfig(description="long"))
    assert cmd.description == "short"


def test_config_env_prefix_is_normalized(monkeypatch):
    monkeypatch.setenv("APP_PORT", "9000")
    cmd = Command("app", config=CommandConfig(env_prefix="APP"))
    port = cmd.int("port", env="PORT")

    cmd.parse([])

    assert cmd.env_prefix == "APP_"
    assert port.get() == 9000


def test_config_groups_are_checked():
    config = CommandConfig(mutex_groups=[MutexGroup("g", ["a"]), MutexGroup("g", ["b"])])
    with pytest.raises(AlreadyExistsError):
        Command("app", config=config)

    with pytest.raises(InvalidNameError):
        Command("app", config=CommandConfig(required_groups=[RequiredGroup("files", [])]))


def test_config_is_copied_not_shared():
    config = CommandConfig(mutex_groups=[MutexGroup("fmt", ["json", "yaml"], allow_none=False)])
    first = Command("one", config=config)
    second = Command("two", config=config)

    first.add_mutex_group("extra", ["x"])

    assert first.config is not config
    assert [group.name for group in second.mutex_groups()] == ["fmt"]
    assert second.get_mutex_group("fmt").allow_none is False
    assert config.mutex_groups == [MutexGroup("fmt", ["json", "yaml"], allow_none=False)]


def test_config_subcommands_are_attached():
    serve = Command("serve", "s")
    stop = Command("stop")
    app = Command("app", config=CommandConfig(subcommands=[serve, stop]))

    assert app.subcommands() == [serve, stop]
    assert serve.parent is app
    assert app.parse(["s"]) is serve


def test_config_subcommand_collision_is_rejected():
    config = CommandConfig(subcommands=[Command("serve", "s"), Command("sync", "s")])
    with pytest.raises(AlreadyExistsError):
        Command("app", config=config)


def test_setters():
    cmd = Command("app")
    cmd.set_description("Demo")
    cmd.set_usage("app [flags]")
    cmd.set_logo_text("APP")
    cmd.set_help("custom")
    cmd.set_language("chinese")
    cmd.add_example("Run it", "app run")
    cmd.add_examples(Example("Stop it", "app stop"))
    cmd.add_note("first")
    cmd.add_notes("second", "third")

    assert cmd.description == "Demo"
    assert cmd.config.usage == "app [flags]"
    assert cmd.config.logo_text == "APP"
    assert cmd.config.help == "custom"
    assert cmd.language is Language.ZH
    assert [example.usage for example in cmd.config.examples] == ["app run", "app stop"]
    assert cmd.config.notes == ["first", "second", "third"]


def test_env_prefix_gets_trailing_underscore():
    cmd = Command("app")
    cmd.set_env_prefix("APP")
    assert cmd.env_prefix == "APP_"
    cmd.set_env_prefix("")
    assert cmd.env_prefix == ""


def test_run_function():
    seen = []
    cmd = Command("app", run=lambda command: seen.append(command) or "done")
    assert cmd.has_run()
    assert cmd.run() == "done"
    assert seen == [cmd]


def test_run_without_function():
    cmd = Command("app")
    assert not cmd.has_run()
    with pytest.raises(NotFoundError):
        cmd.run()


def test_parse_and_run_calls_routed_command():
    root = Command("app")
    serve = Command("serve")
    port = serve.int("port", default=8080)
    serve.set_run(lambda command: port.get())
    root.add_subcommands(serve)

    assert root.parse_and_run(["serve", "--port", "9000"]) == 9000


def test_parse_and_run_prints_help_without_run_function():
    from io import StringIO

    from rich.console import Console

    buffer = StringIO()
    console = Console(file=buffer, color_system=None, width=120)
    root = Command("app", description="Demo")

    assert root.parse_and_run([], console=console) is None
    assert "Name: app" in buffer.getvalue()


def test_args_accessors():
    cmd = Command("app")
    cmd.parse(["a", "b"])
    assert cmd.args == ["a", "b"]
    assert cmd.arg(1) == "b"
    assert cmd.arg(2) == ""
    assert cmd.arg(-1) == ""
    assert cmd.narg() == 2


def test_repr():
    cmd = Command("app", "a")
    assert repr(cmd) == "Command(name='app', short_name='a', flags=1, subcommands=0)"

import pytest

from flagtree import Command
from flagtree.exceptions import EnvOverlayError, ParseFailedError


def test_command_line_beats_environment(monkeypatch):
    monkeypatch.setenv("FOO", "env_value")
    cmd = Command("app")
    flag = cmd.string("x", description="Example").bind_env("FOO")

    cmd.parse(["--x", "cmd_value"])

    assert flag.get() == "cmd_value"


def test_environment_beats_default(monkeypatch):
    monkeypatch.setenv("FOO", "env_value")
    cmd = Command("app")
    flag = cmd.string("x", default="default").bind_env("FOO")

    cmd.parse([])

    assert flag.get() == "env_value"
    assert flag.is_set()


def test_default_when_environment_absent(monkeypatch):
    monkeypatch.delenv("FOO", raising=False)
    cmd = Command("app")
    flag = cmd.string("x", default="default").bind_env("FOO")

    cmd.parse([])

    assert flag.get() == "default"
    assert not flag.is_set()


def test_empty_environment_value_is_ignored(monkeypatch):
    monkeypatch.setenv("PORT", "")
    cmd = Command("app")
    port = cmd.int("port", default=80).bind_env("PORT")

    cmd.parse([])

    assert port.get() == 80
    assert not port.is_set()


def test_env_prefix_is_taken_from_root(monkeypatch):
    monkeypatch.setenv("MYAPP_PORT", "9000")
    monkeypatch.setenv("PORT", "1")
    root = Command("app")
    root.set_env_prefix("MYAPP")
    serve = Command("serve")
    port = serve.int("port", "p", default=8080).bind_env("PORT")
    root.add_subcommands(serve)

    assert serve.env_prefix == "MYAPP_"
    root.parse(["serve"])

    assert port.get() == 9000


def test_all_environment_errors_are_reported_together(monkeypatch):
    monkeypatch.setenv("APP_COUNT", "many")
    monkeypatch.setenv("APP_RATIO", "half")
    cmd = Command("app")
    cmd.set_env_prefix("APP_")
    count = cmd.int("count").bind_env("COUNT")
    ratio = cmd.float("ratio").bind_env("RATIO")

    with pytest.raises(EnvOverlayError) as exc_info:
        cmd.parse([])

    error = exc_info.value
    assert len(error.errors) == 2
    assert "APP_COUNT" in str(error)
    assert "APP_RATIO" in str(error)
    assert error.code == "VALIDATION_FAILED"
    assert not count.is_set()
    assert not ratio.is_set()


def test_valid_environment_values_apply_even_when_others_fail(monkeypatch):
    monkeypatch.setenv("GOOD", "ok")
    monkeypatch.setenv("BAD", "not-a-number")
    cmd = Command("app")
    good = cmd.string("good").bind_env("GOOD")
    cmd.int("bad").bind_env("BAD")

    with pytest.raises(EnvOverlayError):
        cmd.parse([])

    assert good.get() == "ok"


def test_shared_environment_variable_is_applied_once(monkeypatch):
    monkeypatch.setenv("SHARED", "value")
    cmd = Command("app")
    first = cmd.string("first").bind_env("SHARED")
    second = cmd.string("second").bind_env("SHARED")

    cmd.parse([])

    assert first.get() == "value"
    assert not second.is_set()


def test_environment_value_runs_validator(monkeypatch):
    def positive(value):
        if value <= 0:
            raise ValueError("must be positive")

    monkeypatch.setenv("WORKERS", "-3")
    cmd = Command("app")
    cmd.int("workers", validator=positive).bind_env("WORKERS")

    with pytest.raises(EnvOverlayError, match="must be positive"):
        cmd.parse([])


def test_bad_command_line_value_still_fails_after_overlay(monkeypatch):
    monkeypatch.setenv("COUNT", "3")
    cmd = Command("app")
    count = cmd.int("count").bind_env("COUNT")

    with pytest.raises(ParseFailedError):
        cmd.parse(["--count", "x"])

    assert count.get() == 3

import pytest

from flagtree import Command
from flagtree.exceptions import MutexGroupViolationError, ParseFailedError


@pytest.fixture
def tree():
    root = Command("app", "a", "Demo")
    verbose = root.bool("verbose", "V")
    serve = Command("serve", "s", "Start the server")
    port = serve.int("port", "p", default=8080)
    admin = Command("admin")
    reset = Command("reset")
    admin.add_subcommands(reset)
    root.add_subcommands(serve, admin)
    return root, serve, admin, reset, verbose, port


def test_routes_to_subcommand_and_parses_its_flags(tree):
    root, serve, _, _, verbose, port = tree

    routed = root.parse(["--verbose", "serve", "--port", "9000", "extra"])

    assert routed is serve
    assert verbose.get() is True
    assert port.get() == 9000
    assert serve.args == ["extra"]
    assert root.args == ["serve", "--port", "9000", "extra"]
    assert root.routed_command is serve


def test_routes_by_short_name(tree):
    root, serve, *_ = tree
    assert root.parse(["s", "-p", "1"]) is serve


def test_routes_through_several_levels(tree):
    root, _, admin, reset, *_ = tree
    routed = root.parse(["admin", "reset", "now"])
    assert routed is reset
    assert admin.is_parsed
    assert reset.arg(0) == "now"
    assert admin.routed_command is reset


def test_unknown_first_token_stays_an_argument(tree):
    root, serve, *_ = tree
    routed = root.parse(["deploy", "serve"])
    assert routed is root
    assert root.args == ["deploy", "serve"]
    assert not serve.is_parsed


def test_no_tokens_routes_to_root(tree):
    root, *_ = tree
    assert root.parse([]) is root
    assert root.narg() == 0


def test_parse_runs_once(tree):
    root, serve, _, _, _, port = tree
    first = root.parse(["serve", "--port", "1"])
    second = root.parse(["serve", "--port", "2"])

    assert first is second is serve
    assert port.get() == 1


def test_parse_only_does_not_route(tree):
    root, serve, *_ = tree
    result = root.parse_only(["serve", "--port", "1"])

    assert result is root
    assert root.args == ["serve", "--port", "1"]
    assert not serve.is_parsed


def test_parse_defaults_to_sys_argv(tree, monkeypatch):
    root, serve, *_ = tree
    monkeypatch.setattr("sys.argv", ["app", "serve"])
    assert root.parse() is serve


def test_parent_flags_are_not_visible_to_child(tree):
    root, serve, *_ = tree
    with pytest.raises(ParseFailedError, match="unrecognized option '--verbose'"):
        root.parse(["serve", "--verbose"])


def test_validation_runs_per_command(tree):
    root, serve, *_ = tree
    serve.bool("tls")
    serve.bool("plain")
    serve.add_mutex_group("transport", ["tls", "plain"])

    with pytest.raises(MutexGroupViolationError):
        root.parse(["serve", "--tls", "--plain"])

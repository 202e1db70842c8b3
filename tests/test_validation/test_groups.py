import pytest

from flagtree import Command
from flagtree.exceptions import (
    AlreadyExistsError,
    FlagValidationError,
    InvalidGroupMemberError,
    InvalidNameError,
    MutexGroupViolationError,
    NotFoundError,
    RequiredGroupViolationError,
)
from flagtree.validation import validate_command, validate_enum_flags


@pytest.fixture
def cmd():
    command = Command("build")
    command.bool("run", "r", "Run after building")
    command.bool("parallel", "p", "Build in parallel")
    command.string("input", "i")
    command.string("output", "o")
    return command


@pytest.mark.parametrize("tokens", [["-r", "-p"], ["--run", "-p"], ["-rp"]])
def test_mutex_group_rejects_two_members(cmd, tokens):
    cmd.add_mutex_group("mode", ["run", "parallel"])

    with pytest.raises(MutexGroupViolationError) as exc_info:
        cmd.parse(tokens)

    error = exc_info.value
    assert error.code == "MUTEX_GROUP_VIOLATION"
    assert error.group == "mode"
    assert error.flags == ["--run/-r", "--parallel/-p"]
    assert str(error).count("--run/-r") == 1
    assert "mutually exclusive" in str(error)


def test_mutex_group_mixing_aliases_counts_each_flag_once(cmd):
    cmd.add_mutex_group("mode", ["run", "r", "parallel"])
    cmd.parse(["--run", "-r"])
    assert cmd.get_flag("run").get() is True


def test_mutex_group_allows_one_or_none(cmd):
    cmd.add_mutex_group("mode", ["r", "p"])
    cmd.parse(["-p"])
    assert cmd.get_flag("parallel").get() is True


def test_mutex_group_without_allow_none(cmd):
    cmd.add_mutex_group("mode", ["run", "parallel"], allow_none=False)
    with pytest.raises(MutexGroupViolationError, match="must be set"):
        cmd.parse([])


def test_required_group_lists_missing_flags(cmd):
    cmd.add_required_group("io", ["input", "output"])

    with pytest.raises(RequiredGroupViolationError) as exc_info:
        cmd.parse(["--input", "a.txt"])

    assert exc_info.value.flags == ["--output/-o"]
    assert "required group 'io' is missing flags: --output/-o" in str(exc_info.value)


def test_required_group_satisfied(cmd):
    cmd.add_required_group("io", ["i", "o"])
    cmd.parse(["-i", "a", "-o", "b"])
    assert cmd.get_flag("o").get() == "b"


def test_environment_counts_toward_required_group(cmd, monkeypatch):
    monkeypatch.setenv("BUILD_OUTPUT", "dist")
    cmd.get_flag("output").bind_env("BUILD_OUTPUT")
    cmd.add_required_group("io", ["input", "output"])
    cmd.parse(["-i", "src"])
    assert cmd.get_flag("output").get() == "dist"


def test_mutex_checked_before_required(cmd):
    cmd.add_mutex_group("mode", ["run", "parallel"])
    cmd.add_required_group("io", ["input", "output"])
    with pytest.raises(MutexGroupViolationError):
        cmd.parse(["-r", "-p"])


def test_unknown_group_member(cmd):
    cmd.add_mutex_group("mode", ["run", "turbo"])
    with pytest.raises(InvalidGroupMemberError, match="'turbo'"):
        cmd.parse([])


def test_help_skips_group_validation(cmd):
    cmd.add_required_group("io", ["input", "output"])
    cmd.parse(["--help"])
    assert cmd.builtins.help.get() is True


def test_group_management(cmd):
    group = cmd.add_mutex_group("mode", ["run", "parallel"])
    assert cmd.get_mutex_group("mode") is group
    assert cmd.mutex_groups() == [group]

    with pytest.raises(AlreadyExistsError):
        cmd.add_mutex_group("mode", ["run"])
    with pytest.raises(InvalidNameError):
        cmd.add_mutex_group("", ["run"])
    with pytest.raises(InvalidNameError):
        cmd.add_required_group("io", [])

    assert cmd.remove_mutex_group("mode") is group
    assert cmd.get_mutex_group("mode") is None
    with pytest.raises(NotFoundError):
        cmd.remove_mutex_group("mode")

    required = cmd.add_required_group("io", ["input"])
    assert cmd.required_groups() == [required]
    assert cmd.remove_required_group("io") is required
    assert cmd.get_required_group("io") is None
    with pytest.raises(NotFoundError):
        cmd.remove_required_group("io")


def test_enum_recheck_catches_direct_mutation():
    cmd = Command("app")
    mode = cmd.enum("mode", choices=["fast", "safe"])
    mode.set("fast")
    validate_enum_flags(cmd)

    mode._base._value = "reckless"
    with pytest.raises(FlagValidationError, match="allowed values are: fast, safe"):
        validate_command(cmd)


def test_unset_empty_enum_passes():
    cmd = Command("app")
    cmd.enum("mode", choices=["fast", "safe"])
    validate_command(cmd)

import pytest

from flagtree.exceptions import FlagValidationError
from flagtree.flags import FlagType, IntSliceFlag, MapFlag, StringSliceFlag


def test_string_slice_splits_trims_and_drops_empties():
    flag = StringSliceFlag("tags", "t")
    flag.set(" a, b,,c ,")
    assert flag.get() == ["a", "b", "c"]
    assert flag.length() == 3
    assert flag.contains("b")
    assert flag.flag_type is FlagType.STRING_SLICE


def test_string_slice_set_replaces_previous_value():
    flag = StringSliceFlag("tags", default=["x"])
    flag.set("a")
    flag.set("b,c")
    assert flag.get() == ["b", "c"]


def test_string_slice_empty_string_is_empty_list():
    flag = StringSliceFlag("tags", default=["x"])
    flag.set("")
    assert flag.get() == []
    assert flag.is_set()
    assert flag.is_empty()


def test_string_slice_custom_delimiter():
    flag = StringSliceFlag("paths", delimiter=":")
    flag.set("/bin:/usr/bin")
    assert flag.get() == ["/bin", "/usr/bin"]
    assert str(flag) == "/bin:/usr/bin"


def test_slice_rejects_empty_delimiter():
    with pytest.raises(ValueError):
        StringSliceFlag("tags", delimiter="")


def test_int_slice():
    flag = IntSliceFlag("ids", default=[1])
    assert flag.get() == [1]
    flag.set("3, 4,5")
    assert flag.get() == [3, 4, 5]
    assert flag.flag_type is FlagType.INT_SLICE


def test_int_slice_rejects_bad_item_atomically():
    flag = IntSliceFlag("ids", default=[1])
    with pytest.raises(FlagValidationError):
        flag.set("1,two,3")
    assert flag.get() == [1]
    assert not flag.is_set()


def test_map_flag_parses_pairs():
    flag = MapFlag("labels", "l")
    flag.set("env=prod, tier = web ,,empty=")
    assert flag.get() == {"env": "prod", "tier": "web", "empty": ""}
    assert flag.get_key("env") == "prod"
    assert flag.get_key("missing", "dflt") == "dflt"
    assert flag.has_key("tier")
    assert not flag.has_key("")
    assert flag.keys() == ["empty", "env", "tier"]
    assert flag.length() == 3


def test_map_value_may_contain_delimiter():
    flag = MapFlag("opts")
    flag.set("query=a=b")
    assert flag.get() == {"query": "a=b"}


@pytest.mark.parametrize("text", ["novalue", "=value", " = x"])
def test_map_flag_rejects_malformed_pairs(text):
    flag = MapFlag("labels")
    with pytest.raises(FlagValidationError):
        flag.set(text)
    assert flag.get() == {}


def test_map_flag_custom_delimiters():
    flag = MapFlag("labels", pair_delimiter=";", key_delimiter=":")
    flag.set("a:1;b:2")
    assert flag.get() == {"a": "1", "b": "2"}
    assert str(flag) == "a:1;b:2"


def test_map_flag_rejects_same_delimiters():
    with pytest.raises(ValueError):
        MapFlag("labels", pair_delimiter="=", key_delimiter="=")


def test_map_empty_string_is_empty_map():
    flag = MapFlag("labels", default={"a": "1"})
    flag.set("")
    assert flag.get() == {}
    assert flag.is_empty()

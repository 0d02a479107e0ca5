"""
Tests for the dict utilities
"""

# Third Party
import pytest

# Local
from amp_upgrade.utils import nested_get, nested_pop, nested_set

## nested_set ##################################################################


def test_nested_set_creates_intermediate_dicts():
    """Make sure missing intermediate levels are created"""
    dct = {}
    nested_set(dct, "foo.bar.baz", 1)
    assert dct == {"foo": {"bar": {"baz": 1}}}


def test_nested_set_overwrites_leaf():
    """Make sure an existing leaf is replaced and its siblings kept"""
    dct = {"foo": {"bar": 1, "bat": 2}}
    nested_set(dct, "foo.bar", 3)
    assert dct == {"foo": {"bar": 3, "bat": 2}}


def test_nested_set_non_dict_intermediate():
    """Make sure a scalar in the middle of the path is an error"""
    with pytest.raises(TypeError):
        nested_set({"foo": 1}, "foo.bar", 2)


## nested_get ##################################################################


def test_nested_get_present():
    """Make sure a nested value is found"""
    assert nested_get({"foo": {"bar": {"baz": 1}}}, "foo.bar.baz") == 1


def test_nested_get_missing():
    """Make sure missing keys at any level give the default"""
    dct = {"foo": {"bar": 1}}
    assert nested_get(dct, "foo.bat") is None
    assert nested_get(dct, "baz.bat", "dflt") == "dflt"


def test_nested_get_null_intermediate():
    """Make sure a null intermediate value is treated as missing"""
    assert nested_get({"foo": None}, "foo.bar", 5) == 5


def test_nested_get_present_null_leaf():
    """Make sure an explicit null leaf is returned as is"""
    assert nested_get({"foo": {"bar": None}}, "foo.bar", 5) is None


def test_nested_get_non_dict_intermediate():
    """Make sure a scalar in the middle of the path is an error"""
    with pytest.raises(TypeError):
        nested_get({"foo": "bar"}, "foo.bar")


## nested_pop ##################################################################


def test_nested_pop_present():
    """Make sure the leaf is removed and its siblings kept"""
    dct = {"foo": {"bar": 1, "bat": 2}}
    assert nested_pop(dct, "foo.bar")
    assert dct == {"foo": {"bat": 2}}


def test_nested_pop_top_level():
    """Make sure an un-nested key can be removed"""
    dct = {"foo": 1}
    assert nested_pop(dct, "foo")
    assert dct == {}


def test_nested_pop_missing():
    """Make sure popping a missing key is a no-op"""
    dct = {"foo": {"bat": 2}}
    assert not nested_pop(dct, "foo.bar")
    assert not nested_pop(dct, "baz.bar")
    assert dct == {"foo": {"bat": 2}}

"""
Common utilities shared across the upgrade steps
"""

# Standard
from typing import Any

# First Party
import alog

# Local
from . import constants

log = alog.use_channel("UPUTL")

# Sentinel for missing dict values
__MISSING__ = "__MISSING__"

## Dicts #######################################################################


def nested_set(dct: dict, key: str, val: Any):
    """Helper to set values in a dict using 'foo.bar' key notation

    Args:
        dct:  dict
            The dict into which the key will be set
        key:  str
            Key that may contain '.' notation indicating dict nesting
        val:  Any
            The value to place at the nested key
    """
    parts = key.split(constants.NESTED_DICT_DELIM)
    for i, part in enumerate(parts[:-1]):
        dct = dct.setdefault(part, {})
        if not isinstance(dct, dict):
            raise TypeError(
                "Intermediate key {} is not a dict".format(  # pylint: disable=consider-using-f-string
                    constants.NESTED_DICT_DELIM.join(parts[: i + 1])
                )
            )
    dct[parts[-1]] = val


def nested_get(dct: dict, key: str, dflt=None) -> Any:
    """Helper to get values from a dict using 'foo.bar' key notation

    Args:
        dct:  dict
            The dict to read from
        key:  str
            Key that may contain '.' notation indicating dict nesting

    Returns:
        val:  Any
            Whatever is found at the given key or dflt if the key is not found.
            This includes missing (or null) intermediate dicts.
    """
    parts = key.split(constants.NESTED_DICT_DELIM)
    for i, part in enumerate(parts[:-1]):
        dct = dct.get(part, __MISSING__)
        if dct is __MISSING__ or dct is None:
            return dflt
        if not isinstance(dct, dict):
            raise TypeError(
                "Intermediate key {} is not a dict".format(  # pylint: disable=consider-using-f-string
                    constants.NESTED_DICT_DELIM.join(parts[: i + 1])
                )
            )
    return dct.get(parts[-1], dflt)


def nested_pop(dct: dict, key: str) -> bool:
    """Helper to remove a value from a dict using 'foo.bar' key notation

    Args:
        dct:  dict
            The dict to remove the key from
        key:  str
            Key that may contain '.' notation indicating dict nesting

    Returns:
        removed:  bool
            True if the key was present and has been removed
    """
    parent_key, _, leaf = key.rpartition(constants.NESTED_DICT_DELIM)
    parent = nested_get(dct, parent_key) if parent_key else dct
    if not isinstance(parent, dict) or leaf not in parent:
        return False
    del parent[leaf]
    return True

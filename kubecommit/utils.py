"""
Common utilities shared across the library
"""

# Standard
from typing import Any

# Local
from . import constants

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
                f"Intermediate key {constants.NESTED_DICT_DELIM.join(parts[:i + 1])} is not a dict"
            )
    dct[parts[-1]] = val


def nested_get(dct: dict, key: str, dflt=None) -> Any:
    """Helper to get values from a dict using 'foo.bar' key notation

    Args:
        dct:  dict
            The dict to read from
        key:  str
            Key that may contain '.' notation indicating dict nesting
        dflt:  Any
            Value returned when any part of the key is missing

    Returns:
        val:  Any
            Whatever is found at the given key or dflt if the key is not found.
            This includes missing intermediate dicts.
    """
    parts = key.split(constants.NESTED_DICT_DELIM)
    for i, part in enumerate(parts[:-1]):
        dct = dct.get(part, __MISSING__)
        if dct is __MISSING__:
            return dflt
        if not isinstance(dct, dict):
            raise TypeError(
                f"Intermediate key {constants.NESTED_DICT_DELIM.join(parts[:i + 1])} is not a dict"
            )
    return dct.get(parts[-1], dflt)


def nested_has(dct: dict, key: str) -> bool:
    """Determine whether a 'foo.bar' style key is present in the dict"""
    return nested_get(dct, key, __MISSING__) is not __MISSING__


## Strings #####################################################################


def title_case(verb: str) -> str:
    """Upper-case the first letter of each word and join the words together so
    that the result can be used as a CamelCase event reason. The remaining
    letters of each word are left untouched.
    """
    return "".join(word[:1].upper() + word[1:] for word in verb.split())

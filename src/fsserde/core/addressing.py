from __future__ import annotations

"""
Path Addressing.

Pure naming convention mapping the children of a composite node onto
filesystem names: sequence/tuple indices, struct field names, map keys
and the reserved enum markers. No state, no I/O.
"""

import os
import re
from typing import Any

from fsserde.domain.constants import VALUE_MARKER, VARIANT_MARKER
from fsserde.domain.errors import CustomError, KeyMustBeAStringError

# Any name that parses as a non-negative integer is owned by the codec
_INDEX_RX = re.compile(r"\+?[0-9]+")

_UNSAFE_NAMES = ("", os.curdir, os.pardir)
_SEPARATORS = tuple(s for s in (os.sep, os.altsep, "\0") if s)


def child_path(parent: str, name: str) -> str:
    """Join a parent path with a child's text name."""
    return os.path.join(parent, name)


def index_path(parent: str, index: int) -> str:
    """Path of the element at `index` inside a sequence/tuple directory."""
    return child_path(parent, str(index))


def field_path(parent: str, field_name: str) -> str:
    return child_path(parent, field_name)


def variant_marker_path(parent: str) -> str:
    return child_path(parent, VARIANT_MARKER)


def variant_value_path(parent: str) -> str:
    return child_path(parent, VALUE_MARKER)


def is_index_name(name: str) -> bool:
    """
    Check whether a directory entry is a codec-owned sequence index.

    Args:
        name: Entry name inside a sequence/tuple directory.

    Returns:
        bool: True for names such as '0', '17' or '007'.
    """
    return bool(_INDEX_RX.fullmatch(name))


def map_key_name(key: Any) -> str:
    """
    Render a map key as a child name.

    Only string keys are representable; numbers, booleans, bytes and
    composites are rejected. A key must also name exactly one child: empty
    keys, "." and "..", and keys holding a path separator or NUL are refused.

    Args:
        key: Map key value.

    Returns:
        str: The child name.

    Raises:
        KeyMustBeAStringError: If the key is not a string.
        CustomError: If the string cannot be used as a single entry name.
    """
    if not isinstance(key, str):
        raise KeyMustBeAStringError(key)
    if key in _UNSAFE_NAMES or any(sep in key for sep in _SEPARATORS):
        raise CustomError(f"Map key {key!r} is not a valid entry name")
    return key

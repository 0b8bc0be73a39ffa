from __future__ import annotations

"""
Scalar Text Conversions.

Canonical, locale-free formatting of leaf values and the strict parsers
used when reading them back. Parsers accept exactly the canonical
grammar (no thousands separators, no underscores) and raise the typed
ParseError subclasses with a parser diagnostic.
"""

import re
from typing import Optional

from fsserde.domain.constants import FALSE_TEXT, TRUE_TEXT
from fsserde.domain.errors import ParseBoolError, ParseFloatError, ParseIntError
from fsserde.domain.shapes import Int

_INT_RX = re.compile(r"[+-]?[0-9]+")
_FLOAT_RX = re.compile(
    r"[+-]?(inf|infinity|nan|([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?)",
    re.IGNORECASE,
)

# -----------------------------------------------------------------------------
# FORMATTING
# -----------------------------------------------------------------------------

def format_bool(value: bool) -> str:
    return TRUE_TEXT if value else FALSE_TEXT


def format_int(value: int) -> str:
    return str(int(value))


def format_float(value: float) -> str:
    # repr() is the shortest text that round-trips exactly
    return repr(float(value))


def format_char(value: str) -> str:
    if not isinstance(value, str) or len(value) != 1:
        raise ValueError(f"Expected a single character, got {value!r}")
    return value


# -----------------------------------------------------------------------------
# PARSING
# -----------------------------------------------------------------------------

def parse_bool(text: str) -> bool:
    """
    Parse the literal 'true' or 'false'.

    Raises:
        ParseBoolError: For any other text.
    """
    if text == TRUE_TEXT:
        return True
    if text == FALSE_TEXT:
        return False
    raise ParseBoolError(text, "provided string was not `true` or `false`")


def parse_int(text: str, shape: Optional[Int] = None) -> int:
    """
    Parse a base-10 integer, range-checked against a fixed-width shape.

    Args:
        text: Candidate text.
        shape: Integer shape giving the accepted range (unbounded if None).

    Returns:
        int: Parsed value.

    Raises:
        ParseIntError: On empty text, invalid digits or overflow.
    """
    if not text:
        raise ParseIntError(text, "cannot parse integer from empty string")
    if not _INT_RX.fullmatch(text):
        raise ParseIntError(text, "invalid digit found in string")

    low, high = shape.bounds if shape is not None else (None, None)
    if low is not None and low >= 0 and text.startswith("-"):
        raise ParseIntError(text, "invalid digit found in string")

    value = int(text)
    if high is not None and value > high:
        raise ParseIntError(text, "number too large to fit in target type")
    if low is not None and value < low:
        raise ParseIntError(text, "number too small to fit in target type")
    return value


def parse_float(text: str) -> float:
    """
    Parse a decimal/exponent float, or inf/infinity/nan.

    Raises:
        ParseFloatError: On empty or malformed text.
    """
    if not text:
        raise ParseFloatError(text, "cannot parse float from empty string")
    if not _FLOAT_RX.fullmatch(text):
        raise ParseFloatError(text, "invalid float literal")
    return float(text)


def char_from_byte(raw: bytes) -> str:
    """
    Map a single stored byte to the character of the same code point.

    Multi-byte characters are not reassembled: only the first byte of the
    file is considered.
    """
    return chr(raw[0])

from __future__ import annotations

"""
Codec Error Taxonomy.

Every failure raised by the encoder or decoder derives from FsSerdeError,
so callers can catch the whole family or a single kind. Structural
mismatches (missing paths, arity, discriminants) are kept apart from
content-parsing failures (bool/int/float text).
"""

from typing import Optional


class FsSerdeError(Exception):
    """Base class for all filesystem codec failures."""


# -----------------------------------------------------------------------------
# I/O
# -----------------------------------------------------------------------------

class FsIOError(FsSerdeError):
    """
    An underlying filesystem operation failed.

    Attributes:
        path: Path the operation targeted.
        cause: The original OSError, or the UnicodeError raised while
               converting file content to or from text.
    """

    def __init__(self, path: str, cause: Exception) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"I/O failure at '{path}': {cause}")


class PathNotFoundError(FsSerdeError):
    """A required file or directory does not exist."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"File not found: '{path}'")


class EmptyFileError(FsSerdeError):
    """A character was read from a zero-length file."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Cannot read a character from empty file '{path}'")


# -----------------------------------------------------------------------------
# CONTENT PARSING
# -----------------------------------------------------------------------------

class ParseError(FsSerdeError):
    """
    Scalar file content does not parse as the requested type.

    Attributes:
        text: The (trimmed) text that failed to parse.
        diagnostic: Message produced by the underlying parser.
    """
    kind = "scalar"

    def __init__(self, text: str, diagnostic: str) -> None:
        self.text = text
        self.diagnostic = diagnostic
        super().__init__(f"Invalid {self.kind} {text!r}: {diagnostic}")


class ParseBoolError(ParseError):
    kind = "bool"


class ParseIntError(ParseError):
    kind = "int"


class ParseFloatError(ParseError):
    kind = "float"


# -----------------------------------------------------------------------------
# STRUCTURE
# -----------------------------------------------------------------------------

class InvalidLengthError(FsSerdeError):
    """A fixed-arity tuple has a different number of contiguous indices on disk."""

    def __init__(self, expected: int, got: int, path: Optional[str] = None) -> None:
        self.expected = expected
        self.got = got
        self.path = path
        super().__init__(f"Invalid length: expected {expected}, got {got}")


class InvalidEnumError(FsSerdeError):
    """The stored discriminant does not match any declared variant name."""

    def __init__(self, variant: str) -> None:
        self.variant = variant
        super().__init__(f"Invalid enum variant: {variant!r}")


class KeyMustBeAStringError(FsSerdeError):
    """A map key cannot be rendered as a string-like scalar."""

    def __init__(self, key: object = None) -> None:
        self.key = key
        super().__init__(f"Map key must be a string, got {type(key).__name__}")


class CustomError(FsSerdeError):
    """Generic error reported while describing or rebuilding a value."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UnsupportedError(FsSerdeError):
    """The codec has no filesystem representation for the requested shape."""

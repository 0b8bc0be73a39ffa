from __future__ import annotations

"""
fsserde: map structured values onto a directory tree and back.

Composite values become directories, scalar leaves become files holding
their canonical text (or raw bytes).
"""

from .api import from_fs, from_fs_any, from_fs_in_place, to_fs
from .core.decoder import TreeDecoder
from .core.encoder import TreeEncoder
from .domain.config import CodecConfig, get_default_config, validate_config
from .domain.errors import (
    CustomError,
    EmptyFileError,
    FsIOError,
    FsSerdeError,
    InvalidEnumError,
    InvalidLengthError,
    KeyMustBeAStringError,
    ParseBoolError,
    ParseError,
    ParseFloatError,
    ParseIntError,
    PathNotFoundError,
    UnsupportedError,
)
from .domain.shapes import (
    I8,
    I16,
    I32,
    I64,
    U8,
    U16,
    U32,
    U64,
    UNIT,
    AnyShape,
    Bool,
    Bytes,
    Char,
    EnumOf,
    EnumValue,
    Field,
    Float,
    IgnoredShape,
    Int,
    MapOf,
    NewtypeOf,
    OptionOf,
    SeqOf,
    Shape,
    Str,
    StructOf,
    TupleOf,
    Unit,
    UnitStructOf,
    Variant,
)

__version__ = "0.1.0"

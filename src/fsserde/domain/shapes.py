from __future__ import annotations

"""
Data-Model Shape Descriptors.

Provides the tagged union of node shapes that the encoder and decoder walk
recursively: scalars, options, sequences, tuples, maps, structs and enums
with unit/newtype/tuple/struct payloads. A shape describes WHAT is stored
at a path; optional `build` callbacks turn decoded primitives back into
concrete caller objects.

A child shape of None means "infer from the value" when encoding and
"read schema-less" when decoding.
"""

import dataclasses
import enum
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Iterable, Optional, Tuple, Union

# -----------------------------------------------------------------------------
# SENTINELS
# -----------------------------------------------------------------------------

class _UnitType:
    """Singleton standing for the unit value (stored as an empty file)."""
    _instance: Optional["_UnitType"] = None

    def __new__(cls) -> "_UnitType":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNIT"


class _MissingType:
    def __repr__(self) -> str:
        return "MISSING"


UNIT = _UnitType()
MISSING: Any = _MissingType()

Builder = Callable[..., Any]

# -----------------------------------------------------------------------------
# SHAPE KINDS
# -----------------------------------------------------------------------------
KIND_BOOL = "bool"
KIND_INT = "int"
KIND_FLOAT = "float"
KIND_CHAR = "char"
KIND_STR = "str"
KIND_BYTES = "bytes"
KIND_UNIT = "unit"
KIND_UNIT_STRUCT = "unit_struct"
KIND_OPTION = "option"
KIND_NEWTYPE = "newtype"
KIND_SEQ = "seq"
KIND_TUPLE = "tuple"
KIND_MAP = "map"
KIND_STRUCT = "struct"
KIND_ENUM = "enum"
KIND_ANY = "any"
KIND_IGNORED = "ignored"

VARIANT_UNIT = "unit"
VARIANT_NEWTYPE = "newtype"
VARIANT_TUPLE = "tuple"
VARIANT_STRUCT = "struct"

VARIANT_KINDS = (VARIANT_UNIT, VARIANT_NEWTYPE, VARIANT_TUPLE, VARIANT_STRUCT)


@dataclass(frozen=True)
class Shape:
    """Base class of every shape descriptor."""
    kind: ClassVar[str] = ""


# -----------------------------------------------------------------------------
# SCALAR SHAPES
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Bool(Shape):
    kind: ClassVar[str] = KIND_BOOL


@dataclass(frozen=True)
class Int(Shape):
    """
    Integer shape, optionally bounded to a fixed machine width.

    Attributes:
        bits: Width in bits (8/16/32/64), or None for an unbounded int.
        signed: Whether negative values are allowed.
    """
    kind: ClassVar[str] = KIND_INT
    bits: Optional[int] = None
    signed: bool = True

    @property
    def bounds(self) -> Tuple[Optional[int], Optional[int]]:
        """Inclusive (min, max) range accepted by this shape."""
        if self.bits is None:
            return (None, None) if self.signed else (0, None)
        if self.signed:
            half = 1 << (self.bits - 1)
            return -half, half - 1
        return 0, (1 << self.bits) - 1


@dataclass(frozen=True)
class Float(Shape):
    kind: ClassVar[str] = KIND_FLOAT


@dataclass(frozen=True)
class Char(Shape):
    kind: ClassVar[str] = KIND_CHAR


@dataclass(frozen=True)
class Str(Shape):
    kind: ClassVar[str] = KIND_STR


@dataclass(frozen=True)
class Bytes(Shape):
    kind: ClassVar[str] = KIND_BYTES


@dataclass(frozen=True)
class Unit(Shape):
    kind: ClassVar[str] = KIND_UNIT


@dataclass(frozen=True)
class UnitStructOf(Shape):
    """Named unit struct; stored like unit, rebuilt through `build`."""
    kind: ClassVar[str] = KIND_UNIT_STRUCT
    build: Optional[Builder] = None


# -----------------------------------------------------------------------------
# COMPOSITE SHAPES
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class OptionOf(Shape):
    kind: ClassVar[str] = KIND_OPTION
    inner: Optional[Shape] = None


@dataclass(frozen=True)
class NewtypeOf(Shape):
    """
    Transparent wrapper: stored exactly like its inner shape.

    `describe` extracts the inner value from a wrapper object on encode;
    `build` wraps the decoded inner value.
    """
    kind: ClassVar[str] = KIND_NEWTYPE
    inner: Optional[Shape] = None
    build: Optional[Builder] = None
    describe: Optional[Callable[[Any], Any]] = None


@dataclass(frozen=True)
class SeqOf(Shape):
    kind: ClassVar[str] = KIND_SEQ
    item: Optional[Shape] = None


@dataclass(frozen=True)
class TupleOf(Shape):
    kind: ClassVar[str] = KIND_TUPLE
    items: Tuple[Optional[Shape], ...] = ()
    build: Optional[Builder] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class MapOf(Shape):
    kind: ClassVar[str] = KIND_MAP
    key: Optional[Shape] = None
    value: Optional[Shape] = None


@dataclass(frozen=True)
class Field:
    """
    Declared struct field.

    Attributes:
        name: On-disk child name.
        shape: Shape of the field value (None infers from the value).
        default: Value used when the field is missing on disk.
        default_factory: Zero-argument callable producing that value.
    """
    name: str
    shape: Optional[Shape] = None
    default: Any = MISSING
    default_factory: Any = MISSING

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING or self.default_factory is not MISSING

    def missing_value(self) -> Any:
        if self.default_factory is not MISSING:
            return self.default_factory()
        return self.default


@dataclass(frozen=True)
class StructOf(Shape):
    kind: ClassVar[str] = KIND_STRUCT
    fields: Tuple[Field, ...] = ()
    build: Optional[Builder] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(_as_field(f) for f in self.fields))

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fields)


@dataclass(frozen=True)
class Variant:
    """
    Declared enum variant.

    Attributes:
        name: Discriminant text written to disk.
        kind: One of 'unit', 'newtype', 'tuple', 'struct'.
        payload: Payload shape (inner shape, TupleOf or StructOf).
        build: Optional callback producing the concrete variant value.
    """
    name: str
    kind: str = VARIANT_UNIT
    payload: Optional[Shape] = None
    build: Optional[Builder] = None

    def __post_init__(self) -> None:
        if self.kind not in VARIANT_KINDS:
            raise ValueError(f"Unknown variant kind: {self.kind!r}")

    @classmethod
    def unit(cls, name: str, build: Optional[Builder] = None) -> "Variant":
        return cls(name, VARIANT_UNIT, None, build)

    @classmethod
    def newtype(cls, name: str, shape: Optional[Shape] = None, build: Optional[Builder] = None) -> "Variant":
        return cls(name, VARIANT_NEWTYPE, shape, build)

    @classmethod
    def tuple(cls, name: str, items: Iterable[Optional[Shape]], build: Optional[Builder] = None) -> "Variant":
        return cls(name, VARIANT_TUPLE, TupleOf(tuple(items)), build)

    @classmethod
    def struct(cls, name: str, fields: Iterable[Union[Field, Tuple[str, Shape]]],
               build: Optional[Builder] = None) -> "Variant":
        return cls(name, VARIANT_STRUCT, StructOf(tuple(fields)), build)


@dataclass(frozen=True)
class EnumOf(Shape):
    """
    Enum shape: an ordered list of variants, matched first-wins by exact name.

    `describe` maps a caller object to an EnumValue (or Enum member) before
    encoding; without it EnumValue, Enum members and plain strings are accepted.
    """
    kind: ClassVar[str] = KIND_ENUM
    variants: Tuple[Variant, ...] = ()
    describe: Optional[Callable[[Any], Any]] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "variants", tuple(self.variants))

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(v.name for v in self.variants)

    def find(self, name: str) -> Optional[Variant]:
        for variant in self.variants:
            if variant.name == name:
                return variant
        return None

    @classmethod
    def from_enum(cls, enum_cls: type) -> "EnumOf":
        """Build a unit-only enum shape from a Python Enum class (member names)."""
        return cls(tuple(
            Variant.unit(name, build=_member_builder(enum_cls, name))
            for name in enum_cls.__members__
        ))


@dataclass(frozen=True)
class AnyShape(Shape):
    """Schema-less node: directories read as maps, files as strings."""
    kind: ClassVar[str] = KIND_ANY


@dataclass(frozen=True)
class IgnoredShape(Shape):
    """Value the caller does not want; decodes to None without I/O."""
    kind: ClassVar[str] = KIND_IGNORED


# Fixed-width integer shapes
I8 = Int(8, True)
I16 = Int(16, True)
I32 = Int(32, True)
I64 = Int(64, True)
U8 = Int(8, False)
U16 = Int(16, False)
U32 = Int(32, False)
U64 = Int(64, False)

# -----------------------------------------------------------------------------
# VALUES
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class EnumValue:
    """
    Generic enum variant value, used when no variant builder is supplied.

    Attributes:
        variant: Variant name.
        payload: None for unit variants, the inner value for newtype
                 variants, a tuple for tuple variants, a dict for struct
                 variants.
        kind: Variant kind.
    """
    variant: str
    payload: Any = None
    kind: str = VARIANT_UNIT

    @classmethod
    def unit(cls, variant: str) -> "EnumValue":
        return cls(variant, None, VARIANT_UNIT)

    @classmethod
    def newtype(cls, variant: str, value: Any) -> "EnumValue":
        return cls(variant, value, VARIANT_NEWTYPE)

    @classmethod
    def tuple(cls, variant: str, *items: Any) -> "EnumValue":
        return cls(variant, tuple(items), VARIANT_TUPLE)

    @classmethod
    def struct(cls, variant: str, **fields: Any) -> "EnumValue":
        return cls(variant, dict(fields), VARIANT_STRUCT)


# -----------------------------------------------------------------------------
# SHAPE INFERENCE
# -----------------------------------------------------------------------------

def infer_shape(value: Any) -> Optional[Shape]:
    """
    Derive the shape of a plain Python value for schema-less encoding.

    Child shapes are left as None and inferred again per child.

    Args:
        value: Value about to be encoded.

    Returns:
        Optional[Shape]: Matching shape, or None for an unrecognised type.
    """
    if value is None:
        return OptionOf(None)
    if value is UNIT:
        return Unit()
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return Bool()
    if isinstance(value, int):
        return Int()
    if isinstance(value, float):
        return Float()
    if isinstance(value, str):
        return Str()
    if isinstance(value, (bytes, bytearray)):
        return Bytes()
    if isinstance(value, EnumValue):
        return EnumOf((_infer_variant(value),))
    if isinstance(value, enum.Enum):
        return EnumOf((Variant.unit(value.name),))
    if isinstance(value, tuple):
        return TupleOf((None,) * len(value))
    if isinstance(value, list):
        return SeqOf(None)
    if isinstance(value, dict):
        return MapOf(None, None)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return StructOf(tuple(Field(f.name) for f in dataclasses.fields(value)))
    return None


def _infer_variant(value: EnumValue) -> Variant:
    if value.kind == VARIANT_NEWTYPE:
        return Variant.newtype(value.variant)
    if value.kind == VARIANT_TUPLE:
        return Variant.tuple(value.variant, (None,) * len(value.payload or ()))
    if value.kind == VARIANT_STRUCT:
        return Variant.struct(value.variant, [Field(name) for name in (value.payload or {})])
    return Variant.unit(value.variant)


def _as_field(item: Union[Field, Tuple[str, Optional[Shape]]]) -> Field:
    if isinstance(item, Field):
        return item
    name, shape = item
    return Field(name, shape)


def _member_builder(enum_cls: type, name: str) -> Builder:
    def build() -> Any:
        return enum_cls[name]
    return build

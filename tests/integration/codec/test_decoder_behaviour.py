from __future__ import annotations

"""
Integration tests for the Tree Decoder.

Reads hand-built trees to pin down trimming, parse failures, missing
paths, tuple arity, enum discriminant matching, struct field policies
and schema-less reads.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar

import pytest

from fsserde import (
    I32,
    U8,
    UNIT,
    AnyShape,
    Bool,
    Bytes,
    Char,
    CodecConfig,
    CustomError,
    EmptyFileError,
    EnumOf,
    EnumValue,
    Field,
    Float,
    FsIOError,
    IgnoredShape,
    InvalidEnumError,
    InvalidLengthError,
    MapOf,
    NewtypeOf,
    OptionOf,
    ParseBoolError,
    ParseFloatError,
    ParseIntError,
    PathNotFoundError,
    SeqOf,
    Shape,
    Str,
    StructOf,
    TupleOf,
    Unit,
    UnitStructOf,
    UnsupportedError,
    Variant,
    from_fs,
    from_fs_any,
    to_fs,
)


@dataclass(frozen=True)
class UserId:
    value: int


class Marker:
    pass


@dataclass(frozen=True)
class Opaque(Shape):
    kind: ClassVar[str] = "opaque"


# -----------------------------------------------------------------------------
# SCALARS
# -----------------------------------------------------------------------------

def test_numbers_and_bools_are_trimmed(root: Path) -> None:
    """Verify surrounding whitespace is ignored for bool, int and float."""
    (root / "b").write_text(" true \n")
    (root / "i").write_text("\t42\n")
    (root / "f").write_text(" -0.5 ")
    assert from_fs(root / "b", Bool()) is True
    assert from_fs(root / "i", I32) == 42
    assert from_fs(root / "f", Float()) == -0.5


def test_trimming_can_be_disabled(root: Path) -> None:
    """Verify trim_scalars=False parses the raw text."""
    (root / "i").write_text(" 42")
    with pytest.raises(ParseIntError):
        from_fs(root / "i", I32, config=CodecConfig(trim_scalars=False))

    (root / "n").write_bytes(b"5\n")
    with pytest.raises(ParseIntError):
        from_fs(root / "n", I32, config=CodecConfig(trim_scalars=False))
    assert from_fs(root / "n", I32) == 5


def test_strings_are_not_trimmed(root: Path) -> None:
    """Verify string content is returned verbatim."""
    (root / "s").write_bytes(b"  padded\n")
    assert from_fs(root / "s", Str()) == "  padded\n"


def test_parse_failures_are_typed(root: Path) -> None:
    """Verify each scalar kind raises its own parse error."""
    (root / "b").write_text("yes")
    (root / "i").write_text("12a")
    (root / "f").write_text("one")
    (root / "u").write_text("256")

    with pytest.raises(ParseBoolError):
        from_fs(root / "b", Bool())
    with pytest.raises(ParseIntError) as exc:
        from_fs(root / "i", I32)
    assert "invalid digit" in exc.value.diagnostic
    with pytest.raises(ParseFloatError):
        from_fs(root / "f", Float())
    with pytest.raises(ParseIntError, match="too large"):
        from_fs(root / "u", U8)


def test_char_reads_first_byte(root: Path) -> None:
    """Verify a char is the first byte of the file."""
    (root / "c").write_text("xyz")
    assert from_fs(root / "c", Char()) == "x"

    # Multi-byte characters are not reassembled
    (root / "m").write_bytes("é".encode("utf-8"))
    assert from_fs(root / "m", Char()) == "\xc3"


def test_char_from_empty_file(root: Path) -> None:
    """Verify an empty file has no character to read."""
    (root / "c").write_bytes(b"")
    with pytest.raises(EmptyFileError):
        from_fs(root / "c", Char())


def test_bytes_are_raw(root: Path) -> None:
    """Verify byte content is returned without decoding."""
    (root / "raw").write_bytes(b"\r\n\x00")
    assert from_fs(root / "raw", Bytes()) == b"\r\n\x00"


def test_missing_scalar_is_file_not_found(root: Path) -> None:
    """Verify a missing leaf is reported as not found."""
    with pytest.raises(PathNotFoundError):
        from_fs(root / "missing", I32)
    with pytest.raises(PathNotFoundError):
        from_fs(root / "missing", Str())


def test_undecodable_text_is_io_error(root: Path) -> None:
    """Verify content invalid in the configured encoding surfaces as FsIOError."""
    (root / "s").write_bytes(b"\xff\xfe")
    with pytest.raises(FsIOError) as exc:
        from_fs(root / "s", Str())
    assert isinstance(exc.value.cause, UnicodeDecodeError)

    (root / "e").write_bytes(b"\xff")
    with pytest.raises(FsIOError):
        from_fs(root / "e", EnumOf([Variant.unit("A")]))


def test_scalar_read_from_directory_is_io_error(root: Path) -> None:
    """Verify reading a directory as a leaf is an I/O failure."""
    (root / "d").mkdir()
    with pytest.raises(FsIOError):
        from_fs(root / "d", Str())


def test_unit_requires_a_file(root: Path) -> None:
    """Verify unit is the presence of a regular file."""
    (root / "u").write_text("content is ignored")
    (root / "d").mkdir()
    assert from_fs(root / "u", Unit()) is UNIT
    with pytest.raises(PathNotFoundError):
        from_fs(root / "missing", Unit())
    with pytest.raises(PathNotFoundError):
        from_fs(root / "d", Unit())


def test_unit_struct_uses_builder(root: Path) -> None:
    """Verify unit structs are produced by their builder."""
    (root / "u").write_bytes(b"")
    assert isinstance(from_fs(root / "u", UnitStructOf(build=Marker)), Marker)


def test_ignored_shape_reads_nothing(root: Path) -> None:
    """Verify ignored values decode to None without touching the disk."""
    assert from_fs(root / "missing", IgnoredShape()) is None


# -----------------------------------------------------------------------------
# OPTIONS AND NEWTYPES
# -----------------------------------------------------------------------------

def test_option_reflects_existence(root: Path) -> None:
    """Verify optional values map absence to None."""
    (root / "present").write_text("5")
    assert from_fs(root / "present", OptionOf(I32)) == 5
    assert from_fs(root / "absent", OptionOf(I32)) is None


def test_newtype_is_transparent(root: Path) -> None:
    """Verify newtypes read their inner value, optionally built."""
    (root / "id").write_text("17")
    assert from_fs(root / "id", NewtypeOf(I32)) == 17
    assert from_fs(root / "id", NewtypeOf(I32, build=UserId)) == UserId(17)


# -----------------------------------------------------------------------------
# SEQUENCES
# -----------------------------------------------------------------------------

def test_sequence_stops_at_first_gap(root: Path) -> None:
    """Verify sequence reads stop at the first missing index."""
    seq = root / "S"
    seq.mkdir()
    for name, text in (("0", "1"), ("1", "2"), ("3", "4")):
        (seq / name).write_text(text)
    assert from_fs(seq, SeqOf(I32)) == [1, 2]


def test_sequence_from_missing_path_is_empty(root: Path) -> None:
    """Verify a missing sequence directory reads as empty."""
    assert from_fs(root / "nothing", SeqOf(I32)) == []


def test_tuple_arity_mismatch(root: Path) -> None:
    """Verify tuples reject both fewer and more indices than declared."""
    target = root / "T"
    target.mkdir()
    (target / "0").write_text("1")
    (target / "1").write_text("2")

    with pytest.raises(InvalidLengthError) as exc:
        from_fs(target, TupleOf((I32, I32, I32)))
    assert (exc.value.expected, exc.value.got) == (3, 2)

    (target / "2").write_text("3")
    with pytest.raises(InvalidLengthError) as exc:
        from_fs(target, TupleOf((I32, I32)))
    assert (exc.value.expected, exc.value.got) == (2, 3)


def test_tuple_builder(root: Path) -> None:
    """Verify tuple builders receive the elements positionally."""
    target = root / "T"
    target.mkdir()
    (target / "0").write_text("3")
    (target / "1").write_text("4")
    assert from_fs(target, TupleOf((I32, I32))) == (3, 4)
    assert from_fs(target, TupleOf((I32, I32), build=lambda a, b: a * b)) == 12


# -----------------------------------------------------------------------------
# MAPS AND STRUCTS
# -----------------------------------------------------------------------------

def test_map_reads_every_entry(root: Path) -> None:
    """Verify every directory entry becomes a map key."""
    target = root / "M"
    target.mkdir()
    (target / "test").write_text("100")
    (target / "passed").write_text("2100")
    assert from_fs(target, MapOf(Str(), I32)) == {"test": 100, "passed": 2100}


def test_map_key_must_decode_from_string(root: Path) -> None:
    """Verify non-string key shapes are rejected."""
    target = root / "M"
    target.mkdir()
    (target / "1").write_text("x")
    with pytest.raises(CustomError):
        from_fs(target, MapOf(I32, Str()))


def test_map_keys_as_unit_enum(root: Path) -> None:
    """Verify unit enum keys are resolved from entry names."""
    target = root / "M"
    target.mkdir()
    (target / "on").write_text("1")
    keys = EnumOf([Variant.unit("on"), Variant.unit("off")])
    assert from_fs(target, MapOf(keys, I32)) == {EnumValue.unit("on"): 1}


def test_map_of_missing_directory(root: Path) -> None:
    """Verify a missing map directory is reported as not found."""
    with pytest.raises(PathNotFoundError):
        from_fs(root / "missing", MapOf(Str(), Str()))


def test_struct_ignores_foreign_files(root: Path) -> None:
    """Verify undeclared entries are ignored on read."""
    target = root / "cfg"
    target.mkdir()
    (target / "name").write_text("svc")
    (target / "README.md").write_text("not a field")
    shape = StructOf([("name", Str())])
    assert from_fs(target, shape) == {"name": "svc"}


def test_struct_missing_field_policies(root: Path) -> None:
    """Verify optional and defaulted fields tolerate absence."""
    target = root / "cfg"
    target.mkdir()
    (target / "name").write_text("svc")

    shape = StructOf([
        Field("name", Str()),
        Field("alias", OptionOf(Str())),
        Field("retries", I32, default=3),
        Field("tags", SeqOf(Str()), default_factory=list),
    ])
    assert from_fs(target, shape) == {"name": "svc", "alias": None, "retries": 3, "tags": []}

    required = StructOf([Field("name", Str()), Field("port", I32)])
    with pytest.raises(PathNotFoundError):
        from_fs(target, required)


# -----------------------------------------------------------------------------
# ENUMS
# -----------------------------------------------------------------------------

ENUM = EnumOf([
    Variant.unit("A"),
    Variant.newtype("C", I32),
    Variant.tuple("T", [I32, Str()]),
    Variant.struct("S", [("x", I32)]),
])


def test_enum_unit_variant_from_file(root: Path) -> None:
    """Verify a file holding a variant name decodes as a unit variant."""
    (root / "e").write_text("A")
    assert from_fs(root / "e", ENUM) == EnumValue.unit("A")


def test_enum_matching_is_exact(root: Path) -> None:
    """Verify discriminants are matched without case folding or trimming."""
    (root / "e").write_text("a")
    with pytest.raises(InvalidEnumError) as exc:
        from_fs(root / "e", ENUM)
    assert exc.value.variant == "a"

    (root / "trailing").write_text("A\n")
    with pytest.raises(InvalidEnumError):
        from_fs(root / "trailing", ENUM)


def test_enum_compound_variants(root: Path) -> None:
    """Verify newtype, tuple and struct variants read their payload."""
    newtype = root / "n"
    newtype.mkdir()
    (newtype / "variant").write_text("C")
    (newtype / "value").write_text("100")
    assert from_fs(newtype, ENUM) == EnumValue.newtype("C", 100)

    tup = root / "t"
    tup.mkdir()
    (tup / "variant").write_text("T")
    (tup / "0").write_text("1")
    (tup / "1").write_text("one")
    assert from_fs(tup, ENUM) == EnumValue.tuple("T", 1, "one")

    struct = root / "s"
    struct.mkdir()
    (struct / "variant").write_text("S")
    (struct / "x").write_text("9")
    assert from_fs(struct, ENUM) == EnumValue.struct("S", x=9)


def test_enum_unit_variant_in_directory(root: Path) -> None:
    """Verify a marker-only directory decodes as a unit variant."""
    target = root / "e"
    target.mkdir()
    (target / "variant").write_text("A")
    assert from_fs(target, ENUM) == EnumValue.unit("A")


def test_enum_payload_variant_stored_as_file(root: Path) -> None:
    """Verify a payload variant cannot be read from a plain file."""
    (root / "e").write_text("C")
    with pytest.raises(CustomError):
        from_fs(root / "e", ENUM)


def test_enum_directory_without_marker(root: Path) -> None:
    """Verify a compound enum directory requires its marker."""
    (root / "e").mkdir()
    with pytest.raises(PathNotFoundError):
        from_fs(root / "e", ENUM)


def test_enum_first_declared_match_wins(root: Path) -> None:
    """Verify the first variant declared under a name is used."""
    (root / "e").write_text("X")
    shape = EnumOf([
        Variant.unit("X", build=lambda: "first"),
        Variant.unit("X", build=lambda: "second"),
    ])
    assert from_fs(root / "e", shape) == "first"


def test_enum_variant_builders(root: Path) -> None:
    """Verify struct variant builders receive keyword arguments."""
    target = root / "e"
    target.mkdir()
    (target / "variant").write_text("Point")
    (target / "x").write_text("1")
    (target / "y").write_text("2")
    shape = EnumOf([Variant.struct("Point", [("x", I32), ("y", I32)], build=lambda x, y: (x, y))])
    assert from_fs(target, shape) == (1, 2)


# -----------------------------------------------------------------------------
# SCHEMA-LESS
# -----------------------------------------------------------------------------

def test_schema_less_read(root: Path) -> None:
    """Verify schema-less reads map directories to dicts and files to text."""
    target = root / "any"
    (target / "nested").mkdir(parents=True)
    (target / "name").write_text("svc")
    (target / "nested" / "port").write_text("80")

    assert from_fs_any(target) == {"name": "svc", "nested": {"port": "80"}}
    assert from_fs(target / "name", AnyShape()) == "svc"

    with pytest.raises(PathNotFoundError):
        from_fs_any(root / "missing")


def test_unknown_shape_kind_is_unsupported(root: Path) -> None:
    """Verify shapes without a filesystem representation are rejected."""
    (root / "x").write_text("1")
    with pytest.raises(UnsupportedError):
        from_fs(root / "x", Opaque())
    with pytest.raises(UnsupportedError):
        to_fs(root / "x", 1, IgnoredShape())

from __future__ import annotations

"""
Tree Decoder.

Reads a directory/file tree back into values, directed by the shape the
caller requests. Each recursive step is a pure function of the current
filesystem state below a path; nothing is cached between calls.

Without a schema (AnyShape or None) directories are read as maps and
files as strings.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from fsserde.core import addressing
from fsserde.core.scalars import char_from_byte, parse_bool, parse_float, parse_int
from fsserde.domain.config import CodecConfig, get_default_config
from fsserde.domain.errors import (
    CustomError,
    EmptyFileError,
    InvalidEnumError,
    InvalidLengthError,
    PathNotFoundError,
    UnsupportedError,
)
from fsserde.domain.shapes import (
    KIND_ANY,
    KIND_BOOL,
    KIND_BYTES,
    KIND_CHAR,
    KIND_ENUM,
    KIND_FLOAT,
    KIND_IGNORED,
    KIND_INT,
    KIND_MAP,
    KIND_NEWTYPE,
    KIND_OPTION,
    KIND_SEQ,
    KIND_STR,
    KIND_STRUCT,
    KIND_TUPLE,
    KIND_UNIT,
    KIND_UNIT_STRUCT,
    UNIT,
    VARIANT_NEWTYPE,
    VARIANT_STRUCT,
    VARIANT_TUPLE,
    VARIANT_UNIT,
    AnyShape,
    EnumOf,
    EnumValue,
    Int,
    MapOf,
    NewtypeOf,
    OptionOf,
    SeqOf,
    Shape,
    StructOf,
    TupleOf,
    UnitStructOf,
    Variant,
)
from fsserde.infra import fs

logger = logging.getLogger(__name__)

Handler = Callable[[str, Any], Any]


class TreeDecoder:
    """
    Schema-directed reader of values from a directory tree.

    Attributes:
        config: Codec options (text encoding, scalar trimming).
    """

    def __init__(self, config: Optional[CodecConfig] = None) -> None:
        self.config = config or get_default_config()
        self._handlers: Dict[str, Handler] = {
            KIND_BOOL: self._decode_bool,
            KIND_INT: self._decode_int,
            KIND_FLOAT: self._decode_float,
            KIND_CHAR: self._decode_char,
            KIND_STR: self._decode_str,
            KIND_BYTES: self._decode_bytes,
            KIND_UNIT: self._decode_unit,
            KIND_UNIT_STRUCT: self._decode_unit_struct,
            KIND_OPTION: self._decode_option,
            KIND_NEWTYPE: self._decode_newtype,
            KIND_SEQ: self._decode_seq,
            KIND_TUPLE: self._decode_tuple,
            KIND_MAP: self._decode_map,
            KIND_STRUCT: self._decode_struct,
            KIND_ENUM: self._decode_enum,
            KIND_ANY: self._decode_any,
            KIND_IGNORED: self._decode_ignored,
        }

    # ==========================================================================
    # PUBLIC API
    # ==========================================================================

    def decode(self, path: str, shape: Optional[Shape] = None) -> Any:
        """
        Read the value stored at `path` as `shape`.

        Args:
            path: Root path of the stored value.
            shape: Requested shape; None reads schema-less.

        Returns:
            Any: The reconstructed value.

        Raises:
            FsSerdeError: On the first structural, parsing or I/O failure.
        """
        path = str(path)
        if shape is None:
            shape = AnyShape()

        handler = self._handlers.get(shape.kind)
        if handler is None:
            raise UnsupportedError(f"Shape '{shape.kind}' cannot be read from the filesystem")

        logger.debug(f"Decoding {shape.kind} at '{path}'")
        return handler(path, shape)

    # ==========================================================================
    # LEAVES
    # ==========================================================================

    def _read_text(self, path: str) -> str:
        return fs.read_text(path, self.config.encoding)

    def _scalar_text(self, path: str) -> str:
        text = self._read_text(path)
        return text.strip() if self.config.trim_scalars else text

    def _decode_bool(self, path: str, shape: Shape) -> bool:
        return parse_bool(self._scalar_text(path))

    def _decode_int(self, path: str, shape: Int) -> int:
        return parse_int(self._scalar_text(path), shape)

    def _decode_float(self, path: str, shape: Shape) -> float:
        return parse_float(self._scalar_text(path))

    def _decode_char(self, path: str, shape: Shape) -> str:
        raw = fs.read_first_byte(path)
        if not raw:
            raise EmptyFileError(path)
        return char_from_byte(raw)

    def _decode_str(self, path: str, shape: Shape) -> str:
        return self._read_text(path)

    def _decode_bytes(self, path: str, shape: Shape) -> bytes:
        return fs.read_bytes(path)

    def _decode_unit(self, path: str, shape: Shape) -> Any:
        # Content is ignored, only the file's presence matters
        if not fs.is_file(path):
            raise PathNotFoundError(path)
        return UNIT

    def _decode_unit_struct(self, path: str, shape: UnitStructOf) -> Any:
        self._decode_unit(path, shape)
        return shape.build() if shape.build is not None else UNIT

    def _decode_ignored(self, path: str, shape: Shape) -> None:
        return None

    # ==========================================================================
    # TRANSPARENT WRAPPERS
    # ==========================================================================

    def _decode_option(self, path: str, shape: OptionOf) -> Any:
        if not fs.exists(path):
            return None
        return self.decode(path, shape.inner)

    def _decode_newtype(self, path: str, shape: NewtypeOf) -> Any:
        inner = self.decode(path, shape.inner)
        return shape.build(inner) if shape.build is not None else inner

    # ==========================================================================
    # SEQUENCES
    # ==========================================================================

    def _decode_seq(self, path: str, shape: SeqOf) -> List[Any]:
        items: List[Any] = []
        index = 0
        while fs.exists(addressing.index_path(path, index)):
            items.append(self.decode(addressing.index_path(path, index), shape.item))
            index += 1
        return items

    def _decode_tuple(self, path: str, shape: TupleOf) -> Any:
        items = self._tuple_items(path, shape)
        return shape.build(*items) if shape.build is not None else tuple(items)

    def _tuple_items(self, path: str, shape: TupleOf) -> Tuple[Any, ...]:
        expected = len(shape.items)
        got = _count_indices(path)
        if got != expected:
            logger.debug(f"Tuple arity mismatch at '{path}': expected {expected}, got {got}")
            raise InvalidLengthError(expected, got, path)
        return tuple(
            self.decode(addressing.index_path(path, index), item_shape)
            for index, item_shape in enumerate(shape.items)
        )

    # ==========================================================================
    # MAPS AND STRUCTS
    # ==========================================================================

    def _decode_map(self, path: str, shape: MapOf) -> Dict[Any, Any]:
        result: Dict[Any, Any] = {}
        for name in fs.list_entries(path):
            key = self._decode_key(name, shape.key)
            result[key] = self.decode(addressing.child_path(path, name), shape.value)
        return result

    def _decode_key(self, name: str, shape: Optional[Shape]) -> Any:
        """Rebuild a map key from an entry name; keys are always read as strings."""
        if shape is None or shape.kind in (KIND_STR, KIND_ANY):
            return name
        if shape.kind == KIND_CHAR and len(name) == 1:
            return name
        if isinstance(shape, NewtypeOf):
            inner = self._decode_key(name, shape.inner)
            return shape.build(inner) if shape.build is not None else inner
        if isinstance(shape, EnumOf):
            variant = shape.find(name)
            if variant is None:
                raise InvalidEnumError(name)
            if variant.kind == VARIANT_UNIT:
                return _build_variant(variant, None)
        raise CustomError(f"invalid type: string {name!r}, expected {shape.kind}")

    def _decode_struct(self, path: str, shape: StructOf) -> Any:
        values = self._decode_fields(path, shape)
        return shape.build(**values) if shape.build is not None else values

    def _decode_fields(self, path: str, shape: StructOf) -> Dict[str, Any]:
        """Read declared fields only; any other entry in the directory is ignored."""
        values: Dict[str, Any] = {}
        for field in shape.fields:
            child = addressing.field_path(path, field.name)
            if field.has_default and not fs.exists(child):
                values[field.name] = field.missing_value()
                continue
            values[field.name] = self.decode(child, field.shape)
        return values

    # ==========================================================================
    # ENUMS
    # ==========================================================================

    def _decode_enum(self, path: str, shape: EnumOf) -> Any:
        is_compound = fs.is_dir(path)
        if is_compound:
            discriminant = self._read_text(addressing.variant_marker_path(path))
        else:
            discriminant = self._read_text(path)

        variant = shape.find(discriminant)
        if variant is None:
            logger.debug(f"Unknown discriminant {discriminant!r} at '{path}', expected one of {shape.names}")
            raise InvalidEnumError(discriminant)

        if not is_compound:
            if variant.kind != VARIANT_UNIT:
                raise CustomError(f"invalid type: unit variant, expected {variant.kind} variant")
            return _build_variant(variant, None)

        payload: Any = None
        if variant.kind == VARIANT_NEWTYPE:
            payload = self.decode(addressing.variant_value_path(path), variant.payload)
        elif variant.kind == VARIANT_TUPLE:
            tuple_shape = variant.payload if isinstance(variant.payload, TupleOf) else TupleOf(())
            payload = self._tuple_items(path, tuple_shape)
        elif variant.kind == VARIANT_STRUCT:
            struct_shape = variant.payload if isinstance(variant.payload, StructOf) else StructOf(())
            payload = self._decode_fields(path, struct_shape)
        return _build_variant(variant, payload)

    # ==========================================================================
    # SCHEMA-LESS
    # ==========================================================================

    def _decode_any(self, path: str, shape: Shape) -> Any:
        if fs.is_dir(path):
            return self._decode_map(path, MapOf(None, None))
        if fs.is_file(path):
            return self._read_text(path)
        raise PathNotFoundError(path)


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _count_indices(path: str) -> int:
    """Number of contiguous index entries 0, 1, ... present under `path`."""
    count = 0
    while fs.exists(addressing.index_path(path, count)):
        count += 1
    return count


def _build_variant(variant: Variant, payload: Any) -> Any:
    if variant.build is None:
        return EnumValue(variant.name, payload, variant.kind)
    if variant.kind == VARIANT_NEWTYPE:
        return variant.build(payload)
    if variant.kind == VARIANT_TUPLE:
        return variant.build(*payload)
    if variant.kind == VARIANT_STRUCT:
        return variant.build(**payload)
    return variant.build()

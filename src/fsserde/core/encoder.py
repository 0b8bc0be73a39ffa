from __future__ import annotations

"""
Tree Encoder.

Walks a value depth-first and mirrors it onto the filesystem: scalar
leaves become files, composite nodes become directories. Every write
first clears an incompatible previous occupant of the path, and sequence
writes reconcile stale numeric children left behind by a longer value.

The encoder is stateless; a single instance may be reused for any number
of independent calls.
"""

import enum
import logging
from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from fsserde.core import addressing
from fsserde.core.scalars import format_bool, format_char, format_float, format_int
from fsserde.domain.config import CodecConfig, get_default_config
from fsserde.domain.errors import CustomError, FsIOError, UnsupportedError
from fsserde.domain.shapes import (
    KIND_ANY,
    KIND_BOOL,
    KIND_BYTES,
    KIND_CHAR,
    KIND_ENUM,
    KIND_FLOAT,
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
    VARIANT_NEWTYPE,
    VARIANT_STRUCT,
    VARIANT_TUPLE,
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
    Variant,
    infer_shape,
)
from fsserde.infra import fs

logger = logging.getLogger(__name__)

Handler = Callable[[str, Any, Any], None]


class TreeEncoder:
    """
    Depth-first writer of values onto a directory tree.

    Attributes:
        config: Codec options (text encoding, map pruning).
    """

    def __init__(self, config: Optional[CodecConfig] = None) -> None:
        self.config = config or get_default_config()
        self._handlers: Dict[str, Handler] = {
            KIND_BOOL: self._encode_bool,
            KIND_INT: self._encode_int,
            KIND_FLOAT: self._encode_float,
            KIND_CHAR: self._encode_char,
            KIND_STR: self._encode_str,
            KIND_BYTES: self._encode_bytes,
            KIND_UNIT: self._encode_unit,
            KIND_UNIT_STRUCT: self._encode_unit,
            KIND_OPTION: self._encode_option,
            KIND_NEWTYPE: self._encode_newtype,
            KIND_SEQ: self._encode_seq,
            KIND_TUPLE: self._encode_tuple,
            KIND_MAP: self._encode_map,
            KIND_STRUCT: self._encode_struct,
            KIND_ENUM: self._encode_enum,
        }

    # ==========================================================================
    # PUBLIC API
    # ==========================================================================

    def encode(self, path: str, value: Any, shape: Optional[Shape] = None) -> None:
        """
        Write `value` at `path`, replacing whatever node lives there.

        Args:
            path: Target filesystem path (file or directory to be).
            value: Value to store.
            shape: Shape descriptor; inferred from the value when None.

        Raises:
            FsSerdeError: On the first I/O failure, non-string map key or
                          value/shape mismatch. Earlier writes are kept.
        """
        path = str(path)
        if shape is None or shape.kind == KIND_ANY:
            shape = infer_shape(value)
            if shape is None:
                raise CustomError(f"Cannot encode value of type {type(value).__name__} at '{path}'")

        handler = self._handlers.get(shape.kind)
        if handler is None:
            raise UnsupportedError(f"Shape '{shape.kind}' cannot be written to the filesystem")

        logger.debug(f"Encoding {shape.kind} at '{path}'")
        handler(path, value, shape)

    # ==========================================================================
    # LEAVES
    # ==========================================================================

    def _write_text(self, path: str, text: str) -> None:
        try:
            content = text.encode(self.config.encoding)
        except UnicodeError as e:
            raise FsIOError(path, e) from e
        fs.write_file(path, content)

    def _encode_bool(self, path: str, value: Any, shape: Shape) -> None:
        _expect(value, bool, shape, path)
        self._write_text(path, format_bool(value))

    def _encode_int(self, path: str, value: Any, shape: Int) -> None:
        _expect(value, int, shape, path)
        low, high = shape.bounds
        if (low is not None and value < low) or (high is not None and value > high):
            raise CustomError(f"Integer {value} out of range for {shape} at '{path}'")
        self._write_text(path, format_int(value))

    def _encode_float(self, path: str, value: Any, shape: Shape) -> None:
        _expect(value, (int, float), shape, path)
        self._write_text(path, format_float(value))

    def _encode_char(self, path: str, value: Any, shape: Shape) -> None:
        try:
            text = format_char(value)
        except ValueError as e:
            raise CustomError(f"{e} at '{path}'") from e
        self._write_text(path, text)

    def _encode_str(self, path: str, value: Any, shape: Shape) -> None:
        _expect(value, str, shape, path)
        self._write_text(path, value)

    def _encode_bytes(self, path: str, value: Any, shape: Shape) -> None:
        _expect(value, (bytes, bytearray, memoryview), shape, path)
        fs.write_file(path, bytes(value))

    def _encode_unit(self, path: str, value: Any, shape: Shape) -> None:
        fs.write_file(path, b"")

    # ==========================================================================
    # TRANSPARENT WRAPPERS
    # ==========================================================================

    def _encode_option(self, path: str, value: Any, shape: OptionOf) -> None:
        if value is None:
            # Absence is the non-existence of the path
            fs.remove_path(path)
            return
        self.encode(path, value, shape.inner)

    def _encode_newtype(self, path: str, value: Any, shape: NewtypeOf) -> None:
        inner = shape.describe(value) if shape.describe is not None else value
        self.encode(path, inner, shape.inner)

    # ==========================================================================
    # SEQUENCES
    # ==========================================================================

    def _encode_seq(self, path: str, value: Any, shape: SeqOf) -> None:
        if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
            raise CustomError(f"Expected a sequence at '{path}', got {type(value).__name__}")
        items = list(value)
        self._prepare_sequence_dir(path)
        self._write_elements(path, items, [shape.item] * len(items))

    def _encode_tuple(self, path: str, value: Any, shape: TupleOf) -> None:
        items = self._tuple_items(path, value, shape)
        self._prepare_sequence_dir(path)
        self._write_elements(path, items, shape.items)

    def _tuple_items(self, path: str, value: Any, shape: TupleOf) -> List[Any]:
        if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
            raise CustomError(f"Expected a tuple at '{path}', got {type(value).__name__}")
        items = list(value)
        if len(items) != len(shape.items):
            raise CustomError(
                f"Expected a tuple of {len(shape.items)} elements at '{path}', got {len(items)}"
            )
        return items

    def _prepare_sequence_dir(self, path: str) -> None:
        """
        Make `path` a directory free of stale indices.

        A file at the path is removed; inside an existing directory every
        entry named by a non-negative integer is deleted, other entries are
        left alone.
        """
        if fs.is_file(path):
            fs.remove_file(path)
        elif fs.is_dir(path):
            removed = 0
            for name in fs.list_entries(path):
                if addressing.is_index_name(name):
                    fs.remove_path(addressing.child_path(path, name))
                    removed += 1
            if removed:
                logger.debug(f"Reconciled {removed} stale index entries in '{path}'")
        fs.ensure_dir(path)

    def _write_elements(self, path: str, items: Sequence[Any], shapes: Sequence[Optional[Shape]]) -> None:
        for index, (item, item_shape) in enumerate(zip(items, shapes)):
            self.encode(addressing.index_path(path, index), item, item_shape)

    # ==========================================================================
    # MAPS AND STRUCTS
    # ==========================================================================

    def _prepare_struct_dir(self, path: str) -> None:
        if fs.is_file(path):
            fs.remove_file(path)
        fs.ensure_dir(path)

    def _encode_map(self, path: str, value: Any, shape: MapOf) -> None:
        if not isinstance(value, Mapping):
            raise CustomError(f"Expected a mapping at '{path}', got {type(value).__name__}")
        self._prepare_struct_dir(path)

        written = set()
        for key, item in value.items():
            name = addressing.map_key_name(key)
            self.encode(addressing.child_path(path, name), item, shape.value)
            written.add(name)

        if self.config.prune_map_keys:
            for name in fs.list_entries(path):
                if name not in written:
                    fs.remove_path(addressing.child_path(path, name))

    def _encode_struct(self, path: str, value: Any, shape: StructOf) -> None:
        self._prepare_struct_dir(path)
        self._write_fields(path, value, shape)

    def _write_fields(self, path: str, value: Any, shape: StructOf) -> None:
        for field in shape.fields:
            item = _field_value(value, field.name, path)
            self.encode(addressing.field_path(path, field.name), item, field.shape)

    # ==========================================================================
    # ENUMS
    # ==========================================================================

    def _encode_enum(self, path: str, value: Any, shape: EnumOf) -> None:
        name, payload = _describe_variant(value, shape, path)
        variant = shape.find(name)
        if variant is None:
            raise CustomError(f"Variant {name!r} is not declared for the enum at '{path}'")

        if variant.kind == VARIANT_NEWTYPE:
            self._encode_newtype_variant(path, variant, payload)
        elif variant.kind == VARIANT_TUPLE:
            tuple_shape = variant.payload if isinstance(variant.payload, TupleOf) else TupleOf(())
            items = self._tuple_items(path, payload, tuple_shape)
            self._prepare_sequence_dir(path)
            self._write_marker(path, variant)
            self._write_elements(path, items, tuple_shape.items)
        elif variant.kind == VARIANT_STRUCT:
            struct_shape = variant.payload if isinstance(variant.payload, StructOf) else StructOf(())
            self._prepare_struct_dir(path)
            self._write_marker(path, variant)
            self._write_fields(path, payload, struct_shape)
        else:
            self._write_text(path, variant.name)

    def _encode_newtype_variant(self, path: str, variant: Variant, payload: Any) -> None:
        if fs.is_dir(path):
            # Only the previous marker and payload are replaced
            fs.remove_path(addressing.variant_marker_path(path))
            fs.remove_path(addressing.variant_value_path(path))
        elif fs.is_file(path):
            fs.remove_file(path)
        fs.ensure_dir(path)
        self._write_marker(path, variant)
        self.encode(addressing.variant_value_path(path), payload, variant.payload)

    def _write_marker(self, path: str, variant: Variant) -> None:
        self._write_text(addressing.variant_marker_path(path), variant.name)


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _expect(value: Any, types: Any, shape: Shape, path: str) -> None:
    """Reject values whose Python type does not fit the requested shape."""
    if not isinstance(value, types) or (types is int and isinstance(value, bool)):
        raise CustomError(
            f"Expected {shape.kind} value at '{path}', got {type(value).__name__}"
        )


def _field_value(value: Any, name: str, path: str) -> Any:
    """Fetch a struct field from a mapping or an attribute-bearing object."""
    if isinstance(value, Mapping):
        if name not in value:
            raise CustomError(f"Missing field '{name}' for struct at '{path}'")
        return value[name]
    try:
        return getattr(value, name)
    except AttributeError as e:
        raise CustomError(f"Missing field '{name}' for struct at '{path}'") from e


def _describe_variant(value: Any, shape: EnumOf, path: str) -> Tuple[str, Any]:
    """Resolve a value into (variant name, payload)."""
    if shape.describe is not None:
        value = shape.describe(value)

    if isinstance(value, EnumValue):
        return value.variant, value.payload
    if isinstance(value, enum.Enum):
        return value.name, None
    if isinstance(value, str):
        return value, None
    raise CustomError(f"Cannot describe {type(value).__name__} as an enum variant at '{path}'")

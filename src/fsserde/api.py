from __future__ import annotations

"""
Public Entry Points.

Write a value to a directory tree, read it back, or read it into an
existing object. Each call builds a fresh, stateless encoder/decoder;
errors propagate to the caller unchanged and a failed write may leave a
partially updated tree behind.
"""

import dataclasses
import logging
import os
from collections.abc import MutableMapping, MutableSequence
from typing import Any, Optional, Union

from fsserde.core.decoder import TreeDecoder
from fsserde.core.encoder import TreeEncoder
from fsserde.domain.config import CodecConfig
from fsserde.domain.errors import CustomError
from fsserde.domain.shapes import AnyShape, MapOf, SeqOf, Shape, StructOf

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


def to_fs(path: PathLike, value: Any, shape: Optional[Shape] = None, *,
          config: Optional[CodecConfig] = None) -> None:
    """
    Serialize a value to the filesystem rooted at `path`.

    Args:
        path: Root path; becomes a file or a directory depending on the shape.
        value: Value to write.
        shape: Shape descriptor, inferred from the value when omitted.
        config: Codec options.
    """
    TreeEncoder(config).encode(os.fspath(path), value, shape)


def from_fs(path: PathLike, shape: Shape, *, config: Optional[CodecConfig] = None) -> Any:
    """
    Deserialize the value stored under `path`.

    Args:
        path: Root path written by to_fs().
        shape: Shape descriptor of the expected value.
        config: Codec options.

    Returns:
        Any: The decoded value.
    """
    return TreeDecoder(config).decode(os.fspath(path), shape)


def from_fs_any(path: PathLike, *, config: Optional[CodecConfig] = None) -> Any:
    """Read a tree without a schema: directories as dicts, files as strings."""
    return TreeDecoder(config).decode(os.fspath(path), AnyShape())


def from_fs_in_place(path: PathLike, shape: Shape, place: Any, *,
                     config: Optional[CodecConfig] = None) -> None:
    """
    Deserialize into an existing container or object.

    Struct shapes update attributes (or keys, for a mutable mapping) of
    `place`; map shapes replace the content of a mutable mapping; sequence
    shapes replace the content of a mutable sequence.

    Args:
        path: Root path written by to_fs().
        shape: StructOf, MapOf or SeqOf descriptor.
        place: Object updated in place.
        config: Codec options.

    Raises:
        CustomError: If `place` cannot receive a value of this shape.
    """
    decoder = TreeDecoder(config)
    path = os.fspath(path)

    if isinstance(shape, StructOf):
        # Decode to plain field values, bypassing the builder
        values = decoder.decode(path, dataclasses.replace(shape, build=None))
        if isinstance(place, MutableMapping):
            place.update(values)
        else:
            for name, value in values.items():
                setattr(place, name, value)
    elif isinstance(shape, MapOf) and isinstance(place, MutableMapping):
        values = decoder.decode(path, shape)
        place.clear()
        place.update(values)
    elif isinstance(shape, SeqOf) and isinstance(place, MutableSequence):
        place[:] = decoder.decode(path, shape)
    else:
        raise CustomError(
            f"Cannot decode {shape.kind} in place into {type(place).__name__}"
        )
    logger.debug(f"Decoded {shape.kind} in place from '{path}'")

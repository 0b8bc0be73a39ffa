from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Thin wrappers over 'os' and 'shutil' used by the tree codec. Every
OSError, and every failure to decode or encode file text, is re-raised
as FsIOError carrying the offending path; a missing file on a read is
reported as PathNotFoundError so callers can tell absence apart from
other I/O failures.
"""

import logging
import os
import shutil
from contextlib import contextmanager
from typing import Iterator, List

from fsserde.domain.errors import FsIOError, PathNotFoundError

logger = logging.getLogger(__name__)


@contextmanager
def _io_errors(path: str) -> Iterator[None]:
    """Translate OSError and text codec failures into the codec taxonomy."""
    try:
        yield
    except FileNotFoundError as e:
        raise PathNotFoundError(path) from e
    except (OSError, UnicodeError) as e:
        raise FsIOError(path, e) from e


# -----------------------------------------------------------------------------
# INSPECTION API
# -----------------------------------------------------------------------------

def exists(path: str) -> bool:
    return os.path.exists(path)


def is_dir(path: str) -> bool:
    return os.path.isdir(path)


def is_file(path: str) -> bool:
    return os.path.isfile(path)


def list_entries(path: str) -> List[str]:
    """
    List the names directly inside a directory.

    Order follows the platform's enumeration and is not guaranteed.

    Args:
        path: Directory to inspect.

    Returns:
        List[str]: Entry names (not paths).

    Raises:
        PathNotFoundError: If the directory does not exist.
        FsIOError: If the path is not a directory or cannot be read.
    """
    with _io_errors(path):
        return os.listdir(path)


# -----------------------------------------------------------------------------
# READ API
# -----------------------------------------------------------------------------

def read_text(path: str, encoding: str) -> str:
    """Return the whole content of a file as text (untrimmed)."""
    with _io_errors(path):
        with open(path, "r", encoding=encoding, newline="") as f:
            return f.read()


def read_bytes(path: str) -> bytes:
    """Return the whole content of a file as raw bytes."""
    with _io_errors(path):
        with open(path, "rb") as f:
            return f.read()


def read_first_byte(path: str) -> bytes:
    """Return the first byte of a file, or b'' when the file is empty."""
    with _io_errors(path):
        with open(path, "rb") as f:
            return f.read(1)


# -----------------------------------------------------------------------------
# WRITE API
# -----------------------------------------------------------------------------

def write_file(path: str, content: bytes) -> None:
    """
    Create or overwrite a file, whatever currently occupies the path.

    A directory at the path is removed recursively first and the parent
    hierarchy is created when missing.

    Args:
        path: Target file path.
        content: Raw bytes to store.
    """
    if os.path.isdir(path):
        remove_tree(path)
    parent = os.path.dirname(path)
    if parent:
        ensure_dir(parent)
    with _io_errors(path):
        with open(path, "wb") as f:
            f.write(content)


def ensure_dir(path: str) -> None:
    """Recursively create a directory hierarchy (idempotent)."""
    with _io_errors(path):
        os.makedirs(path, exist_ok=True)


def remove_file(path: str) -> None:
    with _io_errors(path):
        os.remove(path)


def remove_tree(path: str) -> None:
    """Remove a directory and everything beneath it."""
    with _io_errors(path):
        shutil.rmtree(path)


def remove_path(path: str) -> None:
    """
    Remove whatever exists at a path (file or directory tree).

    A missing path is not an error.

    Args:
        path: Target path.
    """
    if os.path.isdir(path) and not os.path.islink(path):
        logger.debug(f"Removing directory tree '{path}'")
        remove_tree(path)
    elif os.path.lexists(path):
        logger.debug(f"Removing file '{path}'")
        remove_file(path)

from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

1. Makes the 'src' directory importable without installation.
2. Provides shared helpers to inspect trees written by the codec.
"""

import os
import sys
from pathlib import Path
from typing import Dict

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def root(tmp_path: Path) -> Path:
    """Fresh directory under which each test writes its trees."""
    target = tmp_path / "tree"
    target.mkdir()
    return target


def snapshot(path: Path) -> Dict[str, bytes]:
    """
    Capture a tree as {relative path: content}; directories map to b'<dir>'.

    Used to compare the on-disk state of two writes.
    """
    result: Dict[str, bytes] = {}
    if path.is_file():
        result["."] = path.read_bytes()
        return result
    for current, dirs, files in os.walk(path):
        rel_dir = os.path.relpath(current, path)
        for d in dirs:
            result[os.path.normpath(os.path.join(rel_dir, d))] = b"<dir>"
        for f in files:
            result[os.path.normpath(os.path.join(rel_dir, f))] = Path(current, f).read_bytes()
    return result


@pytest.fixture
def tree_snapshot():
    return snapshot

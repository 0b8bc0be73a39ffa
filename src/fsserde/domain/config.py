from __future__ import annotations

"""
Codec Configuration.

Holds the immutable options that tune how scalar files are written and
read, plus the validation layer that turns untrusted mappings (JSON,
environment, CLI-style dicts) into a typed CodecConfig.
"""

import codecs
import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Tuple

from fsserde.domain.constants import DEFAULT_ENCODING

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# CONFIGURATION MODEL
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class CodecConfig:
    """
    Immutable options shared by a TreeEncoder/TreeDecoder pair.

    Attributes:
        encoding: Text encoding of scalar files.
        prune_map_keys: When True, a map write also removes directory
                        entries that are not keys of the map being written.
                        Struct writes are never pruned.
        trim_scalars: Strip surrounding whitespace before parsing
                      bool/int/float content.
    """
    encoding: str = DEFAULT_ENCODING
    prune_map_keys: bool = False
    trim_scalars: bool = True


def get_default_config() -> CodecConfig:
    """
    Return the default codec configuration.

    Returns:
        CodecConfig: Defaults matching the canonical on-disk format.
    """
    return CodecConfig()


# -----------------------------------------------------------------------------
# VALIDATION
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[CodecConfig, List[str]]:
    """
    Validate and normalize a raw configuration mapping.

    Unknown keys are reported and dropped; invalid values fall back to the
    defaults unless strict mode is requested.

    Args:
        config: Raw configuration data (dict, CodecConfig or None).
        strict: If True, raise TypeError/ValueError instead of falling back.

    Returns:
        Tuple[CodecConfig, List[str]]: Normalized config and warnings.
    """
    warnings: List[str] = []
    defaults = asdict(get_default_config())

    if isinstance(config, CodecConfig):
        return config, warnings

    if config is None:
        return get_default_config(), warnings

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return get_default_config(), warnings

    merged: Dict[str, Any] = dict(defaults)

    for key, value in config.items():
        if key not in defaults:
            msg = f"Unknown config key '{key}'."
            if strict:
                raise ValueError(msg)
            warnings.append(f"{msg} Ignored.")
            continue
        merged[key] = value

    merged["encoding"] = _as_encoding(merged["encoding"], defaults["encoding"], warnings, strict)
    for name in ("prune_map_keys", "trim_scalars"):
        merged[name] = _as_bool(merged[name], defaults[name], name, warnings, strict)

    return CodecConfig(**merged), warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _as_encoding(value: Any, fallback: str, warnings: List[str], strict: bool) -> str:
    """Accept only encodings known to the codecs registry."""
    if isinstance(value, str) and value.strip():
        try:
            return codecs.lookup(value.strip()).name
        except LookupError:
            msg = f"Unknown encoding '{value}'."
    else:
        msg = f"Invalid field 'encoding': expected str, received {type(value).__name__}."

    if strict:
        raise ValueError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce common textual/numeric spellings into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Field '{field}' converted from number {value} to bool.")
            return bool(value)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in ("true", "1", "yes", "y", "on"):
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in ("false", "0", "no", "n", "off"):
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback

from __future__ import annotations

"""
Codec Constants.

Reserved on-disk names and defaults shared by the encoder and decoder.
"""

# -----------------------------------------------------------------------------
# RESERVED CHILD NAMES (compound enum directories)
# -----------------------------------------------------------------------------
VARIANT_MARKER = "variant"
VALUE_MARKER = "value"

# -----------------------------------------------------------------------------
# SCALAR TEXT
# -----------------------------------------------------------------------------
DEFAULT_ENCODING = "utf-8"

TRUE_TEXT = "true"
FALSE_TEXT = "false"

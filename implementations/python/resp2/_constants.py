"""RESP2 constants: type tags, the line delimiter, and default decoder limits.

Wire reference: each frame starts with a one-byte type tag; line fields end
with CR LF; bulk payloads are length-prefixed.
"""

from __future__ import annotations

__protocol_version__ = "2"

# ── Type tags (single byte each) ─────────────────────────────
TAG_SIMPLE_STRING: int = ord("+")
TAG_ERROR: int = ord("-")
TAG_INTEGER: int = ord(":")
TAG_BULK_STRING: int = ord("$")
TAG_ARRAY: int = ord("*")

# Line delimiter.  Bulk payloads may contain it; line fields may not
# contain either byte on its own.
CRLF = b"\r\n"
CR = b"\r"
LF = b"\n"

# Length/count that marks a null bulk string or a null array.
NULL_LENGTH: int = -1

# ── Signed 64-bit integer range ──────────────────────────────
# Python ints are arbitrary-precision, so the range is checked by hand.
INT64_MIN: int = -(2**63)
INT64_MAX: int = 2**63 - 1

# Longest digit run that can still fit an int64 (9223372036854775807).
INT64_MAX_DIGITS: int = 19

# ── Default decoder limits ───────────────────────────────────
# Guard against deeply nested or oversized hostile input.  All of them
# can be overridden per call.
MAX_DEPTH: int = 32
MAX_BULK_LENGTH: int = 512 * 1024 * 1024   # Redis proto-max-bulk-len
MAX_ARRAY_LENGTH: int = 2**31 - 1          # Redis multibulk bound

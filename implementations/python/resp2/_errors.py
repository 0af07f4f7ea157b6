"""RESP2 error codes and exception classes.

Every failure the package reports carries one of the ERR_* codes below.
``decode`` hands them back inside an ``Invalid`` outcome; everything else
(``parse``, ``Reader``, value construction) raises ``RespError``.
"""

from __future__ import annotations

from typing import Tuple

# ── Error codes ──────────────────────────────────────────────
# Grep-friendly; tests and conformance vectors compare against these.

ERR_TAG: str = "ERR_TAG"                  # unknown leading type byte
ERR_LINE: str = "ERR_LINE"                # bare CR or LF inside a line
ERR_INTEGER: str = "ERR_INTEGER"          # malformed or out-of-range decimal
ERR_LENGTH: str = "ERR_LENGTH"            # negative length other than -1
ERR_FRAMING: str = "ERR_FRAMING"          # bulk payload not followed by CR LF
ERR_LIMIT_DEPTH: str = "ERR_LIMIT_DEPTH"  # array nesting exceeds max_depth
ERR_LIMIT_SIZE: str = "ERR_LIMIT_SIZE"    # declared size or buffer over limit
ERR_VALUE: str = "ERR_VALUE"              # value violates its construction contract
ERR_INCOMPLETE: str = "ERR_INCOMPLETE"    # frame needs more bytes

# Codes an Invalid decode outcome can carry.
DECODE_ERRORS: Tuple[str, ...] = (
    ERR_TAG,
    ERR_LINE,
    ERR_INTEGER,
    ERR_LENGTH,
    ERR_FRAMING,
    ERR_LIMIT_DEPTH,
    ERR_LIMIT_SIZE,
)


class RespError(Exception):
    """Exception for RESP2 processing errors.

    The `.code` attribute is one of the ERR_* strings above.
    """

    def __init__(self, code: str, msg: str = "") -> None:
        super().__init__(msg or code)
        self.code = code


class ReplyError(Exception):
    """An error reply received from a peer, as a Python exception object.

    ``to_python`` returns these instead of raising them, so an error nested
    inside an array reply does not abort the conversion of its siblings.
    """

    def __init__(self, kind: str, message: str) -> None:
        super().__init__("{} {}".format(kind, message) if kind else message)
        self.kind = kind
        self.message = message

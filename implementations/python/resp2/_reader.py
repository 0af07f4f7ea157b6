"""Incremental frame reader.

``decode`` is stateless, so a caller reading from a socket has to keep the
bytes of a partial frame somewhere and retry once more arrive.  Reader is
that somewhere: feed() appends, gets() decodes from the start of the
buffer and drops the bytes of every frame it returns.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, Optional

from ._core import Buffer, decode
from ._errors import ERR_LIMIT_SIZE, RespError
from ._result import Complete, Invalid
from ._values import Value

_log = logging.getLogger(__name__)


class Reader:
    """Buffer partial input and hand out whole frames.

    max_buffer caps the bytes held at any time; feed() raises
    RespError(ERR_LIMIT_SIZE) rather than grow past it.  Any other keyword
    argument is passed through to decode().

    Once a frame is Invalid there is no way to find where the next one
    starts, so every later gets() raises the same error until reset().
    """

    def __init__(self, *, max_buffer: Optional[int] = None, **decode_options: Any) -> None:
        self._buf = bytearray()
        self._max_buffer = max_buffer
        self._options = decode_options
        self._invalid: Optional[Invalid] = None

    @property
    def buffered(self) -> int:
        return len(self._buf)

    def feed(self, data: Buffer) -> None:
        if self._max_buffer is not None and len(self._buf) + len(data) > self._max_buffer:
            raise RespError(ERR_LIMIT_SIZE,
                            "reader buffer would exceed {} bytes".format(self._max_buffer))
        self._buf += data

    def gets(self) -> Optional[Value]:
        """Return the next complete value, or None if more bytes are needed."""
        if self._invalid is not None:
            self._invalid.unwrap()
        outcome = decode(self._buf, **self._options)
        if isinstance(outcome, Complete):
            del self._buf[:outcome.consumed]
            return outcome.value
        if isinstance(outcome, Invalid):
            _log.debug("reader failed with %d bytes buffered: [%s] %s",
                       len(self._buf), outcome.code, outcome.reason)
            self._invalid = outcome
            outcome.unwrap()
        return None

    def reset(self) -> None:
        """Drop buffered bytes and any recorded failure."""
        self._buf.clear()
        self._invalid = None

    def __iter__(self) -> Iterator[Value]:
        while True:
            value = self.gets()
            if value is None:
                return
            yield value

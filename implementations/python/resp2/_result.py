"""Decode outcomes.

``decode`` returns exactly one of three things:

    Complete(value, consumed)  — one whole frame was read
    Incomplete()               — a valid prefix; buffer more bytes and retry
    Invalid(code, reason)      — no continuation can make this a frame

Keeping "need more bytes" apart from "bad bytes" is the point of this
module: callers that conflate them either hang on garbage or drop frames
that were merely split across reads.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

from ._errors import ERR_INCOMPLETE, RespError
from ._values import Value


@dataclass(frozen=True)
class Complete:
    value: Value
    consumed: int

    def unwrap(self) -> Tuple[Value, int]:
        return self.value, self.consumed


@dataclass(frozen=True)
class Incomplete:
    def unwrap(self) -> Tuple[Value, int]:
        raise RespError(ERR_INCOMPLETE, "incomplete frame")


@dataclass(frozen=True)
class Invalid:
    code: str
    reason: str

    def unwrap(self) -> Tuple[Value, int]:
        raise RespError(self.code, self.reason)


DecodeOutcome = Union[Complete, Incomplete, Invalid]

INCOMPLETE = Incomplete()

#!/usr/bin/env python3
# tools/invariants_runner.py
#
# Codec invariants (property tests) for resp2.
#
# This runner:
# - generates random values (all five variants, nested arrays) within limits
# - checks the algebraic invariants of encode/decode
#
# Exit code:
#   0 -> all checks passed
#   1 -> invariant violation

import os, sys, json, base64, random
from typing import Any, Dict

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, os.path.join(ROOT, "implementations", "python"))

import resp2
from resp2 import Array, BulkString, Complete, Error, Incomplete, Integer, SimpleString
from resp2._constants import INT64_MAX, INT64_MIN

SEED = int(os.environ.get("RESP2_SEED", "1337"))
TRIALS = int(os.environ.get("RESP2_TRIALS", "2000"))
MAX_GEN_DEPTH = int(os.environ.get("RESP2_GEN_MAX_DEPTH", "6"))
MAX_ITEMS = int(os.environ.get("RESP2_GEN_MAX_ITEMS", "6"))
MAX_TEXT = int(os.environ.get("RESP2_GEN_MAX_TEXT", "24"))
MAX_BYTES = int(os.environ.get("RESP2_GEN_MAX_BYTES", "32"))

random.seed(SEED)

def b64(b: bytes) -> str:
    return base64.b64encode(b).decode("ascii")

def rand_text() -> bytes:
    # Any byte except CR and LF; mostly printable ASCII.
    out = []
    for _ in range(random.randint(0, MAX_TEXT)):
        if random.random() < 0.85:
            out.append(random.randint(0x20, 0x7E))
        else:
            out.append(random.choice([b for b in range(256) if b not in (0x0D, 0x0A)]))
    return bytes(out)

def rand_bytes() -> bytes:
    # Bias toward payloads that look like framing.
    if random.random() < 0.2:
        return random.choice([b"\r\n", b"$-1\r\n", b"*1\r\n:1\r\n", b"\r", b"\n\r"])
    return bytes(random.getrandbits(8) for _ in range(random.randint(0, MAX_BYTES)))

def rand_int() -> int:
    r = random.random()
    if r < 0.2:
        return random.choice([0, -1, 1, INT64_MAX, INT64_MIN])
    if r < 0.6:
        return random.randint(-1000, 1000)
    return random.randint(INT64_MIN, INT64_MAX)

def gen_value(depth: int) -> resp2.Value:
    r = random.random()
    if depth < MAX_GEN_DEPTH and r < 0.30:
        return Array([gen_value(depth + 1) for _ in range(random.randint(0, MAX_ITEMS))])
    if r < 0.35:
        return resp2.NULL_ARRAY
    if r < 0.40:
        return resp2.NULL_BULK_STRING
    if r < 0.55:
        return SimpleString(rand_text())
    if r < 0.65:
        return Error(rand_text())
    if r < 0.80:
        return Integer(rand_int())
    return BulkString(rand_bytes())

def fail(label: str, v: resp2.Value, ctx: Dict[str, Any]) -> int:
    print("INVARIANT FAIL:", label)
    print("VALUE:", repr(v)[:2000])
    print("CTX:", json.dumps(ctx)[:2000])
    return 1

def main() -> int:
    for t in range(TRIALS):
        v = gen_value(0)

        # (1) Encode stability (encode twice, same bytes)
        wire = resp2.encode(v)
        if resp2.encode(v) != wire:
            return fail("encode stability", v, {"trial": t})

        # (2) Round-trip: decode(encode(v)) == Complete(v, len)
        if resp2.decode(wire) != Complete(v, len(wire)):
            return fail("round-trip", v, {"trial": t, "wire_b64": b64(wire)})

        # (3) Trailing bytes are never consumed
        out = resp2.decode(wire + resp2.encode(gen_value(0)))
        if out != Complete(v, len(wire)):
            return fail("trailing frame consumed", v, {"trial": t})

        # (4) Every strict prefix is Incomplete, never Invalid
        for cut in range(len(wire)):
            if not isinstance(resp2.decode(wire[:cut]), Incomplete):
                return fail("prefix not incomplete", v, {"trial": t, "cut": cut, "wire_b64": b64(wire)})

        # (5) Lenient decoding agrees on canonical input
        if resp2.decode(wire, canonical=False) != Complete(v, len(wire)):
            return fail("lenient disagrees", v, {"trial": t})

        # (6) Python adapter is lossless for values without errors or simple strings
        py = resp2.to_python(v)
        if not _has_line_values(v) and resp2.from_python(py) != _as_bulk(v):
            return fail("python adapter round-trip", v, {"trial": t})

    print(f"OK: invariants passed for TRIALS={TRIALS} seed={SEED}")
    return 0

def _has_line_values(v: resp2.Value) -> bool:
    if isinstance(v, (SimpleString, Error)):
        return True
    if isinstance(v, Array) and v.items is not None:
        return any(_has_line_values(item) for item in v.items)
    return False

def _as_bulk(v: resp2.Value) -> resp2.Value:
    # to_python turns a null array into None, which from_python reads back
    # as a null bulk string.
    if isinstance(v, Array):
        if v.items is None:
            return resp2.NULL_BULK_STRING
        return Array([_as_bulk(item) for item in v.items])
    return v

if __name__ == "__main__":
    raise SystemExit(main())

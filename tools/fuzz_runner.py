#!/usr/bin/env python3
# tools/fuzz_runner.py
#
# Mutation fuzzing of the resp2 decoder.
#
# Generates three fuzz categories:
#   A) random VALID frames, mutated (byte flips, CR/LF injection, splices, cuts)
#   B) random byte soup with a plausible type tag in front
#   C) random VALID frames split at random points and fed to a Reader
#
# For every input the decoder must return exactly one of Complete /
# Incomplete / Invalid without raising, and every Complete frame must
# re-encode to exactly the bytes it consumed.  Any violation prints a
# minimal repro payload and exits non-zero.

import os, sys, json, base64, random
from typing import Any, Dict, List

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, os.path.join(ROOT, "implementations", "python"))

import resp2
from resp2 import Array, BulkString, Complete, Error, Incomplete, Integer, Invalid, SimpleString
from resp2._errors import DECODE_ERRORS

SEED = int(os.environ.get("RESP2_SEED", "4242"))
ROUNDS = int(os.environ.get("RESP2_FUZZ_ROUNDS", "5000"))

random.seed(SEED)

def b64(b: bytes) -> str:
    return base64.b64encode(b).decode("ascii")

def violation(label: str, data: bytes, detail: Any, ctx: Dict[str, Any]) -> None:
    print("VIOLATION:", label)
    print("DETAIL:", detail)
    print("CTX:", json.dumps(dict(ctx, input_b64=b64(data)))[:4000])
    raise SystemExit(1)

# --- generators ---

def rand_line(nmax: int) -> bytes:
    n = random.randint(0, nmax)
    return bytes(random.choice(b"abcXYZ019 !@#$%-+:*") for _ in range(n))

def rand_value(depth: int = 0) -> resp2.Value:
    r = random.random()
    if depth > 4 or r < 0.55:
        k = random.randint(0, 4)
        if k == 0:
            return SimpleString(rand_line(12))
        if k == 1:
            return Error(rand_line(12))
        if k == 2:
            return Integer(random.choice([0, -1, 1, 2**63 - 1, -(2**63), random.randint(-10**6, 10**6)]))
        if k == 3 and random.random() < 0.1:
            return resp2.NULL_BULK_STRING
        return BulkString(bytes(random.getrandbits(8) for _ in range(random.randint(0, 24))))
    if r < 0.6:
        return resp2.NULL_ARRAY
    return Array([rand_value(depth + 1) for _ in range(random.randint(0, 5))])

def mutate(frame: bytes) -> bytes:
    buf = bytearray(frame)
    for _ in range(random.randint(1, 3)):
        op = random.random()
        pos = random.randint(0, len(buf))
        if op < 0.3 and buf:
            buf[min(pos, len(buf) - 1)] = random.getrandbits(8)
        elif op < 0.5:
            buf[pos:pos] = random.choice([b"\r", b"\n", b"\r\n", b"-", b"0", b"*", b"$"])
        elif op < 0.7:
            del buf[pos:pos + random.randint(1, 4)]
        elif op < 0.85:
            buf = buf[:pos]
        else:
            other = resp2.encode(rand_value())
            buf[pos:pos] = other[:random.randint(0, len(other))]
    return bytes(buf)

def rand_soup() -> bytes:
    body = bytes(random.choice(b"0123456789-+\r\nab$*:") for _ in range(random.randint(0, 30)))
    return bytes([random.choice(b"+-:$*")]) + body

# --- checks ---

def check_decode(data: bytes, ctx: Dict[str, Any]) -> None:
    for canonical in (True, False):
        try:
            out = resp2.decode(data, canonical=canonical)
        except Exception as e:  # any escape is the bug we are hunting
            violation("decode raised", data, repr(e), ctx)
        if not isinstance(out, (Complete, Incomplete, Invalid)):
            violation("not a decode outcome", data, repr(out), ctx)
        if isinstance(out, Invalid) and out.code not in DECODE_ERRORS:
            violation("unknown error code", data, out.code, ctx)
        if isinstance(out, Complete):
            if not 0 < out.consumed <= len(data):
                violation("consumed out of range", data, out.consumed, ctx)
            if canonical and resp2.encode(out.value) != data[:out.consumed]:
                violation("re-encode mismatch", data, repr(out.value), ctx)

def check_chunked(value: resp2.Value, ctx: Dict[str, Any]) -> None:
    wire = resp2.encode(value) * 2
    cuts = sorted(random.sample(range(len(wire) + 1), min(4, len(wire) + 1)))
    reader = resp2.Reader()
    got: List[resp2.Value] = []
    prev = 0
    for cut in cuts + [len(wire)]:
        reader.feed(wire[prev:cut])
        got.extend(reader)
        prev = cut
    if got != [value, value] or reader.buffered:
        violation("chunked reader mismatch", wire, {"cuts": cuts, "got": repr(got)}, ctx)

def main() -> int:
    for i in range(ROUNDS):
        r = random.random()

        # A) mutated valid frames
        if r < 0.60:
            frame = resp2.encode(rand_value())
            check_decode(mutate(frame), {"round": i, "category": "A"})
            continue

        # B) byte soup behind a type tag
        if r < 0.80:
            check_decode(rand_soup(), {"round": i, "category": "B"})
            continue

        # C) valid frames through a Reader in random chunks
        check_chunked(rand_value(), {"round": i, "category": "C"})

    print(f"OK: fuzz rounds={ROUNDS} seed={SEED} (no violations)")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())

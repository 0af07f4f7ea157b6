#!/usr/bin/env python3
"""
verify_bundle.py — integrity check for the resp2 conformance bundle.

Checks:
1) manifest.sha256 integrity (sha256(file-bytes) for each listed artifact)
2) every vector has an expected result and vice versa
3) Optional: re-run the Python conformance suite against the bundle

Exit code 0 on success; non-zero on failure.
"""
from __future__ import annotations
import argparse, hashlib, json, os, subprocess, sys
from pathlib import Path

REQUIRED = ["conformance_vectors.json", "conformance_expected.json"]
SUITE = Path(__file__).resolve().parent.parent / "implementations" / "python" / "tests" / "test_conformance.py"

def sha256_file(p: Path) -> str:
    return hashlib.sha256(p.read_bytes()).hexdigest()

def die(msg: str) -> None:
    print("FAIL:", msg, file=sys.stderr)
    sys.exit(2)

def parse_manifest(manifest_path: Path):
    lines = manifest_path.read_text(encoding="utf-8").splitlines()
    entries = []
    for ln in lines:
        ln = ln.strip()
        if not ln or ln.startswith("#"):
            continue
        parts = ln.split()
        if len(parts) != 2:
            die(f"bad manifest line: {ln!r}")
        h, rel = parts
        if len(h) != 64:
            die(f"bad sha256 in manifest line: {ln!r}")
        entries.append((h.lower(), rel))
    return entries

def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--dir", default=os.path.dirname(os.path.abspath(__file__)), help="bundle directory")
    ap.add_argument("--rerun", action="store_true", help="re-run the conformance suite against the bundle")
    args = ap.parse_args()

    root = Path(args.dir).resolve()
    manifest = root / "manifest.sha256"
    if not manifest.exists():
        die("manifest.sha256 missing")

    entries = parse_manifest(manifest)

    # 1) manifest integrity
    listed = {rel for _, rel in entries}
    for rel in REQUIRED:
        if rel not in listed:
            die(f"manifest does not list {rel}")
    for expected_hash, rel in entries:
        p = root / rel
        if not p.exists():
            die(f"manifest references missing file: {rel}")
        got = sha256_file(p)
        if got != expected_hash:
            die(f"hash mismatch for {rel}: got {got} expected {expected_hash}")

    anchor = hashlib.sha256(manifest.read_bytes()).hexdigest()
    print("bundle_anchor_sha256 =", anchor)

    # 2) vectors and expectations pair up one-to-one
    vectors = json.loads((root / "conformance_vectors.json").read_text(encoding="utf-8"))["vectors"]
    expected = json.loads((root / "conformance_expected.json").read_text(encoding="utf-8"))["expected"]
    ids = [v["test_id"] for v in vectors]
    if len(ids) != len(set(ids)):
        die("duplicate test_id in conformance_vectors.json")
    missing = sorted(set(ids) - set(expected))
    if missing:
        die(f"vectors without expected result: {missing}")
    orphans = sorted(set(expected) - set(ids))
    if orphans:
        die(f"expected results without vector: {orphans}")
    print(f"vectors = {len(ids)}")

    # 3) Optional rerun
    if args.rerun:
        subprocess.check_call([sys.executable, str(SUITE), "--vectors-dir", str(root)])

    print("OK")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())

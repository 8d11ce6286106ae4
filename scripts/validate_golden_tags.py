#!/usr/bin/env python3
"""
Golden Tags Validation Script

Runs ztags end to end on tests/fixtures/scenario (a.zig imports b.zig) and
compares the written tags file against the frozen copy in
tests/fixtures/scenario/tags.

CRITICAL ASSERTIONS:
- Header declares a sorted, utf-8 tags file
- Exactly 14 entries, in (identifier, file, snippet) order
- Every entry carries the expected kind

Any failure indicates a regression in the tree walker, the import traversal
or the tag writer.
"""

import os
import shutil
import subprocess
import sys
import tempfile
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SCENARIO = ROOT / "tests" / "fixtures" / "scenario"

EXPECTED_ENTRY_COUNT = 14


def run_ztags(workdir):
    """Run ztags from `workdir` on a.zig with relative paths."""
    result = subprocess.run(
        [sys.executable, "-m", "ztags", "-r", "-o", "tags.out", "a.zig"],
        capture_output=True,
        text=True,
        cwd=workdir,
        env={**os.environ, "PYTHONPATH": str(ROOT)},
    )

    if result.returncode != 0:
        raise RuntimeError(f"ztags failed: {result.stderr}")

    return (workdir / "tags.out").read_text(encoding="utf-8")


def validate_results(actual, golden):
    """Compare actual output with the golden tags file line by line."""
    failures = []
    actual_lines = actual.splitlines()
    golden_lines = golden.splitlines()

    if actual_lines[:2] != golden_lines[:2]:
        failures.append(f"HEADER CHANGED: {actual_lines[:2]}")

    entries = actual_lines[2:]
    if len(entries) != EXPECTED_ENTRY_COUNT:
        failures.append(f"ENTRY COUNT CHANGED: Expected {EXPECTED_ENTRY_COUNT}, got {len(entries)}")

    missing = set(golden_lines) - set(actual_lines)
    extra = set(actual_lines) - set(golden_lines)
    for line in sorted(missing):
        failures.append(f"MISSING: {line}")
    for line in sorted(extra):
        failures.append(f"EXTRA: {line}")

    if not missing and not extra and actual_lines != golden_lines:
        failures.append("ORDER CHANGED: entries are not in (identifier, file, snippet) order")

    return failures


def main():
    print("=" * 70)
    print("GOLDEN TAGS: Regression Validation")
    print("=" * 70)
    print()
    print(f"Testing: {SCENARIO.relative_to(ROOT)}")
    print()

    try:
        golden = (SCENARIO / "tags").read_text(encoding="utf-8")

        with tempfile.TemporaryDirectory() as tmp:
            workdir = Path(tmp) / "scenario"
            shutil.copytree(SCENARIO, workdir)

            print("Running ztags...")
            actual = run_ztags(workdir)

        print("Validating against golden tags file...")
        failures = validate_results(actual, golden)

        if failures:
            print()
            print("❌ VALIDATION FAILED")
            print("=" * 70)
            for failure in failures:
                print(f"  • {failure}")
            print()
            print("If changes are intentional, regenerate tests/fixtures/scenario/tags")
            print("and commit it together with the code change.")
            print()
            sys.exit(1)
        else:
            print("✅ ALL ASSERTIONS PASSED")
            print(f"  ✓ {EXPECTED_ENTRY_COUNT} entries, sorted, with expected kinds")
            print()
            sys.exit(0)

    except FileNotFoundError as e:
        print(f"❌ ERROR: {e}")
        sys.exit(2)
    except Exception as e:
        print(f"❌ UNEXPECTED ERROR: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(2)


if __name__ == "__main__":
    main()

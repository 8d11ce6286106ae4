"""Lightweight timing traces on stderr, switched on by ZTAGS_TRACE=1 or --verbose."""

import os
import sys
import time

__all__ = ["now", "is_enabled", "set_enabled", "trace"]

_ENABLED = os.environ.get("ZTAGS_TRACE") == "1"

# Allow toggling at runtime for tests and the --verbose flag

def is_enabled():
    global _ENABLED
    return _ENABLED


def set_enabled(value: bool):
    global _ENABLED
    _ENABLED = bool(value)


def now():
    return time.perf_counter() * 1000


def trace(message):
    if _ENABLED:
        print(f"# {message}", file=sys.stderr)

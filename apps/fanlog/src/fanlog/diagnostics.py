"""
Fallback diagnostic channel for fanlog's own failures.
"""

from __future__ import annotations

import sys


def report(message: str) -> None:
    """Print one diagnostic line to the process stderr, never raising."""
    try:
        print(f"fanlog: {message}", file=sys.stderr, flush=True)
    except (OSError, ValueError):
        # stderr closed or broken; nothing left to tell
        pass

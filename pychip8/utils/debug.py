"""Category-gated debug logging for the CHIP-8 emulator.

Categories come from the ``CHIP8_DEBUG`` environment variable (see
:data:`ENV_VAR`) as a comma-separated list such as ``cpu,machine``, or from
``run.py --debug``. ``all`` enables every category.
"""

from __future__ import annotations

import os
from typing import FrozenSet, Optional

ENV_VAR = "CHIP8_DEBUG"

# Categories emitted by the emulator itself.
KNOWN_CATEGORIES: FrozenSet[str] = frozenset({"cpu", "machine", "input", "loader", "app"})
ALL = "all"

_active: Optional[FrozenSet[str]] = None


def parse_categories(value: str) -> FrozenSet[str]:
    """Split a ``cpu, Input`` style list into lower-case category names."""

    return frozenset(part.strip().lower() for part in value.split(",") if part.strip())


def reload_categories(value: Optional[str] = None) -> FrozenSet[str]:
    """Re-read the active categories.

    With ``value`` None the next check reads :data:`ENV_VAR` again; otherwise
    ``value`` replaces whatever the environment says.
    """

    global _active
    _active = None if value is None else parse_categories(value)
    return active_categories()


def active_categories() -> FrozenSet[str]:
    global _active
    if _active is None:
        _active = parse_categories(os.environ.get(ENV_VAR, ""))
    return _active


def debug_enabled(category: str | None = None) -> bool:
    categories = active_categories()
    if not categories:
        return False
    if category is None or ALL in categories:
        return True
    return category.lower() in categories


def debug_log(category: str, message: str, *args) -> None:
    if not debug_enabled(category):
        return
    if args:
        try:
            message = message % args
        except (TypeError, ValueError):
            message = f"{message} {args!r}"
    print(f"[CHIP8][{category}] {message}")

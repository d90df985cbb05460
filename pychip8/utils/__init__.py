"""Utility helpers for the CHIP-8 emulator."""

from .debug import KNOWN_CATEGORIES, active_categories, debug_enabled, debug_log, parse_categories, reload_categories

__all__ = [
    "KNOWN_CATEGORIES",
    "active_categories",
    "debug_enabled",
    "debug_log",
    "parse_categories",
    "reload_categories",
]

"""Video helpers: font table, framebuffer and frame rendering."""

from __future__ import annotations

from .display import SCREEN_HEIGHT, SCREEN_WIDTH, Display
from .font import FONT_SET, FONT_START, GLYPH_BYTES, glyph, glyph_address
from .palette import MONOCHROME, parse_hex_color, validate_palette
from .renderer import RenderResult, Renderer

__all__ = [
    "Display",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "FONT_SET",
    "FONT_START",
    "GLYPH_BYTES",
    "glyph",
    "glyph_address",
    "MONOCHROME",
    "parse_hex_color",
    "validate_palette",
    "Renderer",
    "RenderResult",
]

"""Palette definitions for CHIP-8 rendering."""

from __future__ import annotations

import string
from typing import Sequence, Tuple

RGBColor = Tuple[int, int, int]


MONOCHROME: Tuple[RGBColor, RGBColor] = ((0, 0, 0), (0xFF, 0xFF, 0xFF))


def validate_palette(palette: Sequence[RGBColor]) -> Tuple[RGBColor, RGBColor]:
    if len(palette) != 2:
        raise ValueError("palette must contain exactly two colours (off and on)")
    if any(len(color) != 3 for color in palette):
        raise ValueError("palette entries must be RGB tuples")
    return tuple(tuple(int(channel) & 0xFF for channel in color) for color in palette)  # type: ignore[return-value]


def parse_hex_color(text: str) -> RGBColor:
    """Parse ``#rrggbb`` (or ``rrggbb``) into an RGB tuple."""

    value = text.strip()
    if value.startswith("#"):
        value = value[1:]
    if len(value) != 6 or not all(char in string.hexdigits for char in value):
        raise ValueError(f"expected a 6-digit hex colour, got {text!r}")
    number = int(value, 16)
    return ((number >> 16) & 0xFF, (number >> 8) & 0xFF, number & 0xFF)

"""Built-in 4x5 hexadecimal font."""

from __future__ import annotations

from typing import Final

FONT_START: Final[int] = 0x000
GLYPH_BYTES: Final[int] = 5
GLYPH_COUNT: Final[int] = 16

FONT_SET: Final[bytes] = bytes(
    (
        0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
        0x20, 0x60, 0x20, 0x20, 0x70,  # 1
        0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
        0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
        0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
        0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
        0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
        0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
        0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
        0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
        0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
        0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
        0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
        0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
        0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
        0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
    )
)


def glyph_address(digit: int) -> int:
    """Return the memory offset of the glyph for hex ``digit``.

    The multiplication is not masked: ``FX29`` with ``VX > 0xF`` points past
    the font table, as on the original machine.
    """

    return FONT_START + digit * GLYPH_BYTES


def glyph(digit: int) -> bytes:
    if not 0 <= digit < GLYPH_COUNT:
        raise ValueError(f"no glyph for digit {digit}")
    offset = digit * GLYPH_BYTES
    return FONT_SET[offset : offset + GLYPH_BYTES]

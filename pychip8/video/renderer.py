"""Convert the CHIP-8 bitmap into RGB frames for presentation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .display import Display
from .palette import MONOCHROME, RGBColor, validate_palette


@dataclass
class RenderResult:
    """Packed RGB frame produced by :class:`Renderer`."""

    width: int
    height: int
    pixels: bytes

    def get_pixel(self, x: int, y: int) -> RGBColor:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} frame")
        offset = (y * self.width + x) * 3
        return (self.pixels[offset], self.pixels[offset + 1], self.pixels[offset + 2])

    def to_surface(self):
        import pygame  # type: ignore

        return pygame.image.frombuffer(self.pixels, (self.width, self.height), "RGB")


class Renderer:
    """Scale the 64x32 bitmap and map cells to palette colours."""

    def __init__(self, palette: Sequence[RGBColor] = MONOCHROME) -> None:
        self._off, self._on = validate_palette(palette)

    def render(self, display: Display, *, scale: int = 1) -> RenderResult:
        if scale <= 0:
            raise ValueError("scale must be positive")

        off = bytes(self._off)
        on = bytes(self._on)
        width = display.WIDTH * scale
        lines: list[bytes] = []
        for row in display.rows():
            line = b"".join((on if cell else off) * scale for cell in row)
            lines.extend([line] * scale)
        return RenderResult(width=width, height=display.HEIGHT * scale, pixels=b"".join(lines))

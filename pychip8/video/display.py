"""64x32 one-bit framebuffer written by the draw instructions."""

from __future__ import annotations

from typing import Iterator

SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32


class Display:
    """Row-major monochrome bitmap, one byte (0 or 1) per cell."""

    WIDTH = SCREEN_WIDTH
    HEIGHT = SCREEN_HEIGHT

    def __init__(self) -> None:
        self._cells = bytearray(self.WIDTH * self.HEIGHT)

    def clear(self) -> None:
        self._cells[:] = bytes(len(self._cells))

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.WIDTH and 0 <= y < self.HEIGHT

    def get_pixel(self, x: int, y: int) -> int:
        return self._cells[self._index(x, y)]

    def toggle(self, x: int, y: int) -> bool:
        """XOR the cell at ``(x, y)`` and return True if it was lit before."""

        index = self._index(x, y)
        was_set = self._cells[index] == 1
        self._cells[index] ^= 1
        return was_set

    def lit_count(self) -> int:
        return sum(self._cells)

    def rows(self) -> Iterator[bytes]:
        for y in range(self.HEIGHT):
            start = y * self.WIDTH
            yield bytes(self._cells[start : start + self.WIDTH])

    def snapshot(self) -> bytes:
        return bytes(self._cells)

    def _index(self, x: int, y: int) -> int:
        if not self.contains(x, y):
            raise IndexError(f"pixel ({x}, {y}) outside {self.WIDTH}x{self.HEIGHT} display")
        return y * self.WIDTH + x

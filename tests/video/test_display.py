"""Tests for the 64x32 framebuffer and font table."""

from __future__ import annotations

import pytest

from pychip8.video import FONT_SET, Display, glyph, glyph_address


def test_display_starts_blank() -> None:
    display = Display()

    assert (display.WIDTH, display.HEIGHT) == (64, 32)
    assert display.lit_count() == 0
    assert len(display.snapshot()) == 64 * 32


def test_toggle_reports_previous_state() -> None:
    display = Display()

    assert display.toggle(5, 6) is False
    assert display.get_pixel(5, 6) == 1
    assert display.toggle(5, 6) is True
    assert display.get_pixel(5, 6) == 0


def test_snapshot_is_row_major() -> None:
    display = Display()
    display.toggle(1, 2)

    assert display.snapshot()[2 * 64 + 1] == 1
    assert list(display.rows())[2][1] == 1


def test_clear() -> None:
    display = Display()
    display.toggle(0, 0)
    display.toggle(63, 31)

    display.clear()

    assert display.lit_count() == 0


@pytest.mark.parametrize("x, y", [(-1, 0), (64, 0), (0, 32)])
def test_out_of_range_pixel_raises(x: int, y: int) -> None:
    display = Display()

    assert display.contains(x, y) is False
    with pytest.raises(IndexError):
        display.toggle(x, y)


def test_font_table_layout() -> None:
    assert len(FONT_SET) == 80
    assert glyph(0) == bytes((0xF0, 0x90, 0x90, 0x90, 0xF0))
    assert glyph(0xF) == bytes((0xF0, 0x80, 0xF0, 0x80, 0x80))
    assert glyph_address(0xA) == 50


def test_glyph_rejects_non_hex_digit() -> None:
    with pytest.raises(ValueError):
        glyph(16)

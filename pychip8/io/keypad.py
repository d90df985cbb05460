"""Sixteen-key hexadecimal keypad."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from pychip8.utils import debug_enabled, debug_log

KEY_COUNT = 16

# Host layout       Keypad
#   1 2 3 4          1 2 3 C
#   q w e r          4 5 6 D
#   a s d f          7 8 9 E
#   z x c v          A 0 B F
KEY_MAP_TEMPLATE: Mapping[str, int] = {
    "1": 0x1,
    "2": 0x2,
    "3": 0x3,
    "4": 0xC,
    "q": 0x4,
    "w": 0x5,
    "e": 0x6,
    "r": 0xD,
    "a": 0x7,
    "s": 0x8,
    "d": 0x9,
    "f": 0xE,
    "z": 0xA,
    "x": 0x0,
    "c": 0xB,
    "v": 0xF,
}


@dataclass
class Keypad:
    """Level-triggered input vector read by the skip-key and wait-key instructions.

    Only the host writes to the keypad; the CPU reads it at the instant an
    instruction executes and never infers press or release edges.
    """

    _keys: list[bool] = field(default_factory=lambda: [False] * KEY_COUNT)

    def press(self, key: int) -> None:
        self._set(key, True)

    def release(self, key: int) -> None:
        self._set(key, False)

    def press_host_key(self, name: str) -> bool:
        """Press the keypad key mapped to host key ``name``; False if unmapped."""

        key = self._lookup(name)
        if key is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped_press=%s", name)
            return False
        self.press(key)
        return True

    def release_host_key(self, name: str) -> bool:
        key = self._lookup(name)
        if key is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped_release=%s", name)
            return False
        self.release(key)
        return True

    def set_state(self, pressed: "list[bool] | tuple[bool, ...]") -> None:
        """Replace the whole input vector at once."""

        if len(pressed) != KEY_COUNT:
            raise ValueError(f"expected {KEY_COUNT} key states, got {len(pressed)}")
        for key, value in enumerate(pressed):
            self._set(key, bool(value))

    def is_pressed(self, key: int) -> bool:
        return self._keys[self._check(key)]

    def first_pressed(self) -> int | None:
        """Return the lowest pressed key index, or None when nothing is held."""

        for key, pressed in enumerate(self._keys):
            if pressed:
                return key
        return None

    def reset(self) -> None:
        for key in range(KEY_COUNT):
            self._set(key, False)

    def snapshot(self) -> tuple[bool, ...]:
        return tuple(self._keys)

    def _set(self, key: int, pressed: bool) -> None:
        index = self._check(key)
        before = self._keys[index]
        self._keys[index] = pressed
        if before != pressed and debug_enabled("input"):
            debug_log("input", "key=%X pressed=%s", index, pressed)

    @staticmethod
    def _check(key: int) -> int:
        if not 0 <= key < KEY_COUNT:
            raise ValueError(f"keypad key out of range: {key}")
        return key

    @staticmethod
    def _lookup(name: str) -> int | None:
        return KEY_MAP_TEMPLATE.get(name.lower())

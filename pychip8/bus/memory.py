"""Flat 4 KiB address space for the CHIP-8 machine.

Every access is bounds-checked against ``0x000-0xFFF``; an instruction that
walks ``I`` past the end of memory gets a :class:`MemoryAccessError` rather
than a silently wrapped or truncated access.
"""

from __future__ import annotations

from dataclasses import dataclass

MEMORY_SIZE = 0x1000
PROGRAM_START = 0x200


class MemoryAccessError(Exception):
    """Raised when an access falls outside the address space."""

    def __init__(self, address: int, length: int = 1) -> None:
        if length == 1:
            detail = f"address {address:#05x}"
        else:
            detail = f"range {address:#05x}-{address + length - 1:#05x}"
        super().__init__(f"{detail} outside memory 0x000-{MEMORY_SIZE - 1:#05x}")
        self.address = address
        self.length = length


@dataclass
class Memory:
    """Byte-addressable RAM covering the whole CHIP-8 address space."""

    length: int = MEMORY_SIZE

    def __post_init__(self) -> None:
        if self.length <= 0:
            raise ValueError("memory must have a positive length")
        self._data = bytearray(self.length)

    def __len__(self) -> int:
        return self.length

    def _check(self, address: int, length: int = 1) -> None:
        if address < 0 or address + length > self.length:
            raise MemoryAccessError(address, length)

    def load8(self, address: int) -> int:
        self._check(address)
        return self._data[address]

    def store8(self, address: int, value: int) -> None:
        self._check(address)
        self._data[address] = value & 0xFF

    def load16(self, address: int) -> int:
        """Read a big-endian word, the byte order of CHIP-8 instructions."""

        self._check(address, 2)
        return (self._data[address] << 8) | self._data[address + 1]

    def store16(self, address: int, value: int) -> None:
        self._check(address, 2)
        self._data[address] = (value >> 8) & 0xFF
        self._data[address + 1] = value & 0xFF

    def read_block(self, address: int, length: int) -> bytes:
        self._check(address, length)
        return bytes(self._data[address : address + length])

    def write_block(self, address: int, data: bytes) -> None:
        if not data:
            return
        self._check(address, len(data))
        self._data[address : address + len(data)] = data

    def clear(self) -> None:
        self._data[:] = bytes(self.length)

    def snapshot(self) -> bytes:
        return bytes(self._data)

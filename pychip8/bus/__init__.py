"""Memory bus for the CHIP-8 machine."""

from .memory import MEMORY_SIZE, PROGRAM_START, Memory, MemoryAccessError

__all__ = [
    "MEMORY_SIZE",
    "PROGRAM_START",
    "Memory",
    "MemoryAccessError",
]

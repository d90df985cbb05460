"""CPU package for the CHIP-8 emulator."""

from .core import (
    CPUError,
    CPUState,
    Chip8CPU,
    DrawOutOfBoundsError,
    SpriteEdgePolicy,
    StackOverflowError,
    StackUnderflowError,
    UnknownOpcodeError,
)
from . import opcodes

__all__ = [
    "Chip8CPU",
    "CPUState",
    "CPUError",
    "UnknownOpcodeError",
    "StackOverflowError",
    "StackUnderflowError",
    "DrawOutOfBoundsError",
    "SpriteEdgePolicy",
    "opcodes",
]

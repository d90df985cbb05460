"""Program loaders for the CHIP-8 emulator."""

from __future__ import annotations

from .program import (
    MAX_PROGRAM_LENGTH,
    ProgramImage,
    ProgramLoadError,
    load_program,
    load_program_from_path,
    load_program_from_stream,
)

__all__ = [
    "MAX_PROGRAM_LENGTH",
    "ProgramImage",
    "ProgramLoadError",
    "load_program",
    "load_program_from_path",
    "load_program_from_stream",
]

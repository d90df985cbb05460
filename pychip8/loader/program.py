"""Raw program image loading."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO

from pychip8.bus import MEMORY_SIZE, PROGRAM_START, Memory
from pychip8.utils import debug_enabled, debug_log

MAX_PROGRAM_LENGTH = MEMORY_SIZE - PROGRAM_START


class ProgramLoadError(RuntimeError):
    """Raised when a program image cannot be read or does not fit in memory."""


@dataclass
class ProgramImage:
    """A program image and the address it was loaded at."""

    data: bytes
    name: str = ""
    start: int = PROGRAM_START
    source: Path | None = field(default=None, compare=False)

    @property
    def length(self) -> int:
        return len(self.data)

    @property
    def end(self) -> int:
        """Last address written, or ``start - 1`` for an empty image."""

        return self.start + self.length - 1


def load_program(data: bytes, memory: Memory, *, name: str = "") -> ProgramImage:
    """Copy ``data`` verbatim into ``memory`` at the program start address."""

    payload = bytes(data)
    if len(payload) > MAX_PROGRAM_LENGTH:
        raise ProgramLoadError(
            f"program is {len(payload)} bytes; at most {MAX_PROGRAM_LENGTH} bytes fit above {PROGRAM_START:#05x}"
        )
    memory.write_block(PROGRAM_START, payload)
    if debug_enabled("loader"):
        debug_log("loader", "loaded name=%s length=%d", name or "<bytes>", len(payload))
    return ProgramImage(data=payload, name=name)


def load_program_from_stream(stream: BinaryIO, memory: Memory, *, name: str = "") -> ProgramImage:
    # Read one byte past the limit so oversized streams are detected without
    # slurping arbitrarily large inputs.
    payload = stream.read(MAX_PROGRAM_LENGTH + 1)
    return load_program(payload, memory, name=name)


def load_program_from_path(path: Path, memory: Memory) -> ProgramImage:
    """Load a program image from the filesystem."""

    path = Path(path)
    try:
        with path.open("rb") as handle:
            image = load_program_from_stream(handle, memory, name=path.stem)
    except OSError as exc:
        raise ProgramLoadError(f"unable to read program {path}: {exc.strerror or exc}") from exc
    image.source = path
    return image

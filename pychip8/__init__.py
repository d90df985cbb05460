"""Python CHIP-8 virtual machine.

The interpreter core lives in :mod:`pychip8.cpu` and :mod:`pychip8.system`;
:mod:`pychip8.ui` provides the pygame frontend used by ``run.py``.
"""

from __future__ import annotations

from . import bus, cpu, io, loader, system, ui, utils, video

__version__ = "0.1.0"

__all__: list[str] = [
    "bus",
    "cpu",
    "io",
    "loader",
    "system",
    "ui",
    "utils",
    "video",
]

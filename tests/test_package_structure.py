"""Baseline tests ensuring the package layout loads correctly."""

import pychip8


def test_package_exports() -> None:
    for name in ("bus", "cpu", "io", "loader", "system", "ui", "utils", "video"):
        assert hasattr(pychip8, name), f"missing submodule: {name}"


def test_cpu_exports() -> None:
    from pychip8 import cpu

    for name in ("Chip8CPU", "CPUState", "CPUError", "UnknownOpcodeError", "StackOverflowError", "StackUnderflowError"):
        assert hasattr(cpu, name), f"cpu missing symbol: {name}"


def test_error_hierarchy() -> None:
    from pychip8.cpu import CPUError, DrawOutOfBoundsError, StackOverflowError, StackUnderflowError, UnknownOpcodeError
    from pychip8.loader import ProgramLoadError

    for error in (UnknownOpcodeError, StackOverflowError, StackUnderflowError, DrawOutOfBoundsError):
        assert issubclass(error, CPUError)
    assert issubclass(ProgramLoadError, RuntimeError)

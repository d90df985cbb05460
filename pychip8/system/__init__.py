"""CHIP-8 system assembly helpers."""

from __future__ import annotations

from .machine import Machine, MachineConfig, StepResult, StepStatus, create_machine

__all__ = [
    "MachineConfig",
    "Machine",
    "StepResult",
    "StepStatus",
    "create_machine",
]

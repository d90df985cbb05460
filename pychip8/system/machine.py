"""CHIP-8 machine assembly and cycle driver."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from pychip8.bus import Memory, MemoryAccessError
from pychip8.cpu import CPUError, CPUState, Chip8CPU, SpriteEdgePolicy
from pychip8.io import Keypad
from pychip8.loader import ProgramImage, load_program, load_program_from_path
from pychip8.utils import debug_enabled, debug_log
from pychip8.video import FONT_SET, FONT_START, Display


class StepStatus(Enum):
    EXECUTED = "executed"
    STALLED = "stalled"
    FAULTED = "faulted"


@dataclass(frozen=True)
class StepResult:
    """Outcome of one :meth:`Machine.step` call.

    ``pc`` and ``opcode`` describe the instruction that was fetched; ``opcode``
    is None when the fault happened before a word could be read.
    """

    status: StepStatus
    pc: int
    opcode: int | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.status is not StepStatus.FAULTED


@dataclass
class MachineConfig:
    """Runtime configuration for the CHIP-8 machine."""

    seed: Optional[int] = None
    sprite_edge: SpriteEdgePolicy = SpriteEdgePolicy.WRAP
    program: Optional[bytes] = None
    program_name: str = ""


@dataclass
class Machine:
    """Aggregates memory, CPU, display and keypad and drives the cycle."""

    config: MachineConfig
    memory: Memory
    display: Display
    keypad: Keypad
    cpu: Chip8CPU
    program: ProgramImage | None = None
    fault: StepResult | None = field(default=None)

    @property
    def state(self) -> CPUState:
        return self.cpu.state

    @property
    def halted(self) -> bool:
        return self.fault is not None

    @property
    def sound_active(self) -> bool:
        return self.cpu.state.sound_timer > 0

    def step(self) -> StepResult:
        """Run one fetch-decode-execute cycle followed by timer decay.

        A stalled wait-key cycle leaves the timers alone. After a fault the
        machine is halted and every further call returns the same result
        until :meth:`reset`.
        """

        if self.fault is not None:
            return self.fault

        pc = self.cpu.state.pc
        try:
            completed = self.cpu.step()
        except (CPUError, MemoryAccessError) as exc:
            self.fault = StepResult(StepStatus.FAULTED, pc, self.cpu.last_opcode, exc)
            if debug_enabled("machine"):
                debug_log("machine", "fault pc=%03x error=%s", pc, exc)
            return self.fault

        if not completed:
            return StepResult(StepStatus.STALLED, pc, self.cpu.last_opcode)

        self.cpu.tick_timers()
        return StepResult(StepStatus.EXECUTED, pc, self.cpu.last_opcode)

    def run(self, max_steps: int) -> StepResult:
        """Step until a stall, a fault or ``max_steps`` executed cycles."""

        if max_steps <= 0:
            raise ValueError("max_steps must be positive")
        result = self.step()
        steps = 1
        while result.status is StepStatus.EXECUTED and steps < max_steps:
            result = self.step()
            steps += 1
        return result

    def load_program(self, data: bytes, *, name: str = "") -> ProgramImage:
        self.program = load_program(data, self.memory, name=name)
        return self.program

    def load_program_from_path(self, path: Path) -> ProgramImage:
        self.program = load_program_from_path(path, self.memory)
        return self.program

    def reset(self) -> None:
        """Return to power-on state and reload the last program, if any."""

        _initialise_memory(self.memory)
        self.display.clear()
        self.keypad.reset()
        self.cpu.reset()
        self.cpu.rng = random.Random(self.config.seed)
        self.fault = None
        if self.program is not None:
            self.program = load_program(self.program.data, self.memory, name=self.program.name)
        if debug_enabled("machine"):
            debug_log("machine", "reset program=%s", self.program.name if self.program else "<none>")


def _initialise_memory(memory: Memory) -> None:
    memory.clear()
    memory.write_block(FONT_START, FONT_SET)


def create_machine(config: MachineConfig | None = None) -> Machine:
    """Instantiate a CHIP-8 machine with the requested configuration."""

    config = config or MachineConfig()

    memory = Memory()
    _initialise_memory(memory)
    display = Display()
    keypad = Keypad()
    cpu = Chip8CPU(
        memory,
        display,
        keypad,
        rng=random.Random(config.seed),
        sprite_edge=config.sprite_edge,
    )

    machine = Machine(
        config=config,
        memory=memory,
        display=display,
        keypad=keypad,
        cpu=cpu,
    )
    if config.program is not None:
        machine.load_program(config.program, name=config.program_name)
    return machine

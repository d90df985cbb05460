"""Pygame frontend for the CHIP-8 emulator."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from pychip8.cpu import SpriteEdgePolicy
from pychip8.loader import ProgramLoadError
from pychip8.system import Machine, MachineConfig, StepResult, StepStatus, create_machine
from pychip8.utils import debug_enabled, debug_log
from pychip8.video import MONOCHROME, Renderer
from pychip8.video.palette import RGBColor

_FRAME_RATE = 60


@dataclass
class AppConfig:
    """Configuration for the CHIP-8 emulator frontend."""

    program_path: Optional[Path] = None
    scale: int = 10
    fullscreen: bool = False
    seed: Optional[int] = None
    sprite_edge: SpriteEdgePolicy = SpriteEdgePolicy.WRAP
    palette: Sequence[RGBColor] = MONOCHROME
    frame_rate: int = _FRAME_RATE


class Chip8App:
    """Pygame event loop stepping the machine once per frame."""

    def __init__(self, config: AppConfig) -> None:
        if config.scale <= 0:
            raise ValueError("scale must be positive")
        if config.frame_rate <= 0:
            raise ValueError("frame_rate must be positive")
        self._config = config
        self._running = False
        self._machine: Machine | None = None
        self._renderer = Renderer(config.palette)
        self._reported_fault: StepResult | None = None
        self._frame_counter = 0

    @property
    def machine(self) -> Machine | None:
        return self._machine

    def run(self) -> None:
        try:
            import pygame  # type: ignore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to run the UI") from exc

        machine = self.prepare()

        pygame.init()
        pygame.display.set_caption(self._caption())

        surface_size = (machine.display.WIDTH * self._config.scale, machine.display.HEIGHT * self._config.scale)
        flags = pygame.FULLSCREEN if self._config.fullscreen else 0
        screen = pygame.display.set_mode(surface_size, flags)
        clock = pygame.time.Clock()
        self._running = True

        while self._running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self._running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    self._running = False
                elif event.type == pygame.KEYDOWN:
                    self._handle_key_event(pygame.key.name(event.key), pressed=True)
                elif event.type == pygame.KEYUP:
                    self._handle_key_event(pygame.key.name(event.key), pressed=False)

            result = self.tick()
            if result.status is StepStatus.FAULTED and result is not self._reported_fault:
                self._report_fault(result)
                pygame.display.set_caption(self._caption(result))

            frame = self._renderer.render(machine.display, scale=self._config.scale)
            screen.blit(frame.to_surface(), (0, 0))
            pygame.display.flip()

            clock.tick(self._config.frame_rate)
            self._frame_counter += 1

        pygame.quit()

    def prepare(self) -> Machine:
        """Create the machine and load the configured program without opening a window."""

        if self._config.program_path is None:
            raise RuntimeError("a program image is required")
        machine = self._create_machine()
        self._load_program(machine, self._config.program_path)
        self._machine = machine
        self._reported_fault = None
        return machine

    def tick(self) -> StepResult:
        """Advance the machine by one frame (one instruction plus timer decay)."""

        if self._machine is None:
            raise RuntimeError("no machine loaded")
        result = self._machine.step()
        if debug_enabled("app") and result.status is StepStatus.STALLED and self._frame_counter % 60 == 0:
            debug_log("app", "waiting for key pc=%03x", result.pc)
        return result

    def _handle_key_event(self, name: str, *, pressed: bool) -> None:
        if self._machine is None:
            return
        keypad = self._machine.keypad
        handled = keypad.press_host_key(name) if pressed else keypad.release_host_key(name)
        if debug_enabled("input"):
            debug_log("input", "event=%s pressed=%s mapped=%s", name, pressed, handled)

    def _create_machine(self) -> Machine:
        return create_machine(
            MachineConfig(
                seed=self._config.seed,
                sprite_edge=self._config.sprite_edge,
            )
        )

    def _load_program(self, machine: Machine, program_path: Path) -> None:
        try:
            image = machine.load_program_from_path(program_path)
        except ProgramLoadError as exc:
            raise RuntimeError(str(exc)) from exc
        if debug_enabled("app"):
            debug_log("app", "program=%s bytes=%d", image.name, image.length)

    def _report_fault(self, result: StepResult) -> None:
        self._reported_fault = result
        opcode = "----" if result.opcode is None else f"{result.opcode:04X}"
        message = f"machine halted: pc={result.pc:03X} opcode={opcode} error={result.error}"
        debug_log("app", message)
        print(message, file=sys.stderr)

    def _caption(self, fault: StepResult | None = None) -> str:
        name = self._machine.program.name if self._machine and self._machine.program else ""
        caption = f"CHIP-8 - {name}" if name else "CHIP-8"
        if fault is not None:
            caption += " [halted]"
        return caption



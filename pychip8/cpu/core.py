"""CHIP-8 interpreter core."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum

from pychip8.bus import PROGRAM_START, Memory
from pychip8.io import Keypad
from pychip8.utils import debug_enabled, debug_log
from pychip8.video import Display, glyph_address

from .opcodes import DecodedInstruction, DecodeTable, OPCODE_TABLE

REGISTER_COUNT = 16
STACK_DEPTH = 16
FLAG_REGISTER = 0xF
ADDRESS_LIMIT = 0xFFF


class CPUError(Exception):
    """Base error for faults raised while executing an instruction."""

    def __init__(self, message: str, *, pc: int) -> None:
        super().__init__(f"{message} at pc={pc:#05x}")
        self.pc = pc


class UnknownOpcodeError(CPUError):
    """Raised when an instruction word matches no known operation."""

    def __init__(self, opcode: int, *, pc: int) -> None:
        super().__init__(f"unknown opcode {opcode:#06x}", pc=pc)
        self.opcode = opcode


class StackOverflowError(CPUError):
    """Raised by CALL when all sixteen stack slots are in use."""


class StackUnderflowError(CPUError):
    """Raised by RET when the stack is empty."""


class DrawOutOfBoundsError(CPUError):
    """Raised by DRW under :attr:`SpriteEdgePolicy.ERROR` for off-screen pixels."""

    def __init__(self, x: int, y: int, *, pc: int) -> None:
        super().__init__(f"sprite pixel ({x}, {y}) outside display", pc=pc)
        self.x = x
        self.y = y


class SpriteEdgePolicy(Enum):
    """How DRW treats sprite pixels that fall past the display edges."""

    WRAP = "wrap"
    CLIP = "clip"
    ERROR = "error"


@dataclass
class CPUState:
    """Register file, stack and timers.

    ``VF`` is not a separate field: :attr:`vf` reads and writes index 15 of
    :attr:`v`, so the flag is visible to FX55/FX65 like any other register.
    """

    v: bytearray = field(default_factory=lambda: bytearray(REGISTER_COUNT))
    i: int = 0x000
    pc: int = PROGRAM_START
    sp: int = 0
    stack: list[int] = field(default_factory=lambda: [0] * STACK_DEPTH)
    delay_timer: int = 0
    sound_timer: int = 0

    @property
    def vf(self) -> int:
        return self.v[FLAG_REGISTER]

    @vf.setter
    def vf(self, value: int) -> None:
        self.v[FLAG_REGISTER] = value & 0xFF


@dataclass
class Chip8CPU:
    """Fetch-decode-execute engine operating on memory, display and keypad."""

    memory: Memory
    display: Display
    keypad: Keypad
    rng: random.Random = field(default_factory=random.Random)
    sprite_edge: SpriteEdgePolicy = SpriteEdgePolicy.WRAP
    instruction_table: DecodeTable = field(default=OPCODE_TABLE)

    state: CPUState = field(default_factory=CPUState)
    waiting_for_key: bool = False
    last_opcode: int | None = None

    def reset(self) -> None:
        """Reset registers, stack and timers; PC returns to the program start."""

        self.state = CPUState()
        self.waiting_for_key = False
        self.last_opcode = None

    def step(self) -> bool:
        """Execute one instruction.

        Returns False when the instruction stalled (FX0A with no key held); in
        that case nothing, PC included, has changed. Timers are not touched
        here, see :meth:`tick_timers`.
        """

        self.waiting_for_key = False
        self.last_opcode = None
        pc_before = self.state.pc
        word = self._fetch_word()
        self.last_opcode = word
        decoded = self._decode(word)
        if debug_enabled("cpu"):
            debug_log("cpu", "pc=%03x opcode=%04x %s", pc_before, word, decoded.disassemble())

        handler = getattr(self, decoded.instruction.handler, None)
        if handler is None:
            raise CPUError(f"handler '{decoded.instruction.handler}' not implemented", pc=pc_before)
        handler(decoded)

        if self.waiting_for_key:
            if debug_enabled("cpu"):
                debug_log("cpu", "wait-key stall pc=%03x", pc_before)
            return False
        return True

    def tick_timers(self) -> None:
        """Decrement both timers by one, stopping at zero."""

        if self.state.delay_timer > 0:
            self.state.delay_timer -= 1
        if self.state.sound_timer > 0:
            self.state.sound_timer -= 1

    # ------------------------------------------------------------------
    # Flow control

    def op_cls(self, _: DecodedInstruction) -> None:
        self.display.clear()
        self._advance()

    def op_ret(self, _: DecodedInstruction) -> None:
        state = self.state
        if state.sp == 0:
            raise StackUnderflowError("return with empty stack", pc=state.pc)
        state.sp -= 1
        state.pc = state.stack[state.sp]
        self._advance()

    def op_jp(self, op: DecodedInstruction) -> None:
        self.state.pc = op.nnn

    def op_call(self, op: DecodedInstruction) -> None:
        state = self.state
        if state.sp >= STACK_DEPTH:
            raise StackOverflowError(f"call with full stack ({STACK_DEPTH} entries)", pc=state.pc)
        state.stack[state.sp] = state.pc
        state.sp += 1
        state.pc = op.nnn

    def op_jp_offset(self, op: DecodedInstruction) -> None:
        self.state.pc = op.nnn + self.state.v[0]

    # ------------------------------------------------------------------
    # Conditional skips

    def op_se_imm(self, op: DecodedInstruction) -> None:
        self._skip_if(self.state.v[op.x] == op.nn)

    def op_sne_imm(self, op: DecodedInstruction) -> None:
        self._skip_if(self.state.v[op.x] != op.nn)

    def op_se_reg(self, op: DecodedInstruction) -> None:
        self._skip_if(self.state.v[op.x] == self.state.v[op.y])

    def op_sne_reg(self, op: DecodedInstruction) -> None:
        self._skip_if(self.state.v[op.x] != self.state.v[op.y])

    def op_skp(self, op: DecodedInstruction) -> None:
        self._skip_if(self.keypad.is_pressed(self.state.v[op.x] & 0xF))

    def op_sknp(self, op: DecodedInstruction) -> None:
        self._skip_if(not self.keypad.is_pressed(self.state.v[op.x] & 0xF))

    # ------------------------------------------------------------------
    # Register loads and arithmetic

    def op_ld_imm(self, op: DecodedInstruction) -> None:
        self.state.v[op.x] = op.nn
        self._advance()

    def op_add_imm(self, op: DecodedInstruction) -> None:
        v = self.state.v
        v[op.x] = (v[op.x] + op.nn) & 0xFF
        self._advance()

    def op_ld_reg(self, op: DecodedInstruction) -> None:
        self.state.v[op.x] = self.state.v[op.y]
        self._advance()

    def op_or(self, op: DecodedInstruction) -> None:
        self.state.v[op.x] |= self.state.v[op.y]
        self._advance()

    def op_and(self, op: DecodedInstruction) -> None:
        self.state.v[op.x] &= self.state.v[op.y]
        self._advance()

    def op_xor(self, op: DecodedInstruction) -> None:
        self.state.v[op.x] ^= self.state.v[op.y]
        self._advance()

    # For the flag-setting operations VF is written before VX. With X == 0xF
    # the result therefore lands on top of the flag.

    def op_add_reg(self, op: DecodedInstruction) -> None:
        state = self.state
        v = state.v
        state.vf = 1 if v[op.y] > 0xFF - v[op.x] else 0
        v[op.x] = (v[op.x] + v[op.y]) & 0xFF
        self._advance()

    def op_sub(self, op: DecodedInstruction) -> None:
        state = self.state
        v = state.v
        state.vf = 0 if v[op.y] > v[op.x] else 1
        v[op.x] = (v[op.x] - v[op.y]) & 0xFF
        self._advance()

    def op_shr(self, op: DecodedInstruction) -> None:
        state = self.state
        v = state.v
        state.vf = v[op.x] & 0x01
        v[op.x] = v[op.x] >> 1
        self._advance()

    def op_subn(self, op: DecodedInstruction) -> None:
        state = self.state
        v = state.v
        state.vf = 0 if v[op.x] > v[op.y] else 1
        v[op.x] = (v[op.y] - v[op.x]) & 0xFF
        self._advance()

    def op_shl(self, op: DecodedInstruction) -> None:
        state = self.state
        v = state.v
        state.vf = v[op.x] >> 7
        v[op.x] = (v[op.x] << 1) & 0xFF
        self._advance()

    def op_rnd(self, op: DecodedInstruction) -> None:
        self.state.v[op.x] = self.rng.randrange(0x100) & op.nn
        self._advance()

    # ------------------------------------------------------------------
    # Index register and memory

    def op_ld_i(self, op: DecodedInstruction) -> None:
        self.state.i = op.nnn
        self._advance()

    def op_add_i(self, op: DecodedInstruction) -> None:
        state = self.state
        total = state.i + state.v[op.x]
        state.vf = 1 if total > ADDRESS_LIMIT else 0
        state.i = total & 0xFFFF
        self._advance()

    def op_ld_font(self, op: DecodedInstruction) -> None:
        self.state.i = glyph_address(self.state.v[op.x])
        self._advance()

    def op_bcd(self, op: DecodedInstruction) -> None:
        value = self.state.v[op.x]
        self.memory.write_block(self.state.i, bytes((value // 100, (value // 10) % 10, value % 10)))
        self._advance()

    def op_store_regs(self, op: DecodedInstruction) -> None:
        state = self.state
        self.memory.write_block(state.i, bytes(state.v[: op.x + 1]))
        state.i = (state.i + op.x + 1) & 0xFFFF
        self._advance()

    def op_load_regs(self, op: DecodedInstruction) -> None:
        state = self.state
        state.v[: op.x + 1] = self.memory.read_block(state.i, op.x + 1)
        state.i = (state.i + op.x + 1) & 0xFFFF
        self._advance()

    # ------------------------------------------------------------------
    # Timers and keypad

    def op_ld_from_delay(self, op: DecodedInstruction) -> None:
        self.state.v[op.x] = self.state.delay_timer
        self._advance()

    def op_ld_delay(self, op: DecodedInstruction) -> None:
        self.state.delay_timer = self.state.v[op.x]
        self._advance()

    def op_ld_sound(self, op: DecodedInstruction) -> None:
        self.state.sound_timer = self.state.v[op.x]
        self._advance()

    def op_wait_key(self, op: DecodedInstruction) -> None:
        key = self.keypad.first_pressed()
        if key is None:
            self.waiting_for_key = True
            return
        self.state.v[op.x] = key
        self._advance()

    # ------------------------------------------------------------------
    # Display

    def op_drw(self, op: DecodedInstruction) -> None:
        state = self.state
        sprite = self.memory.read_block(state.i, op.n)
        origin_x = state.v[op.x]
        origin_y = state.v[op.y]
        pixels = self._sprite_pixels(sprite, origin_x, origin_y)

        collided = False
        for x, y in pixels:
            if self.display.toggle(x, y):
                collided = True
        state.vf = 1 if collided else 0
        self._advance()

    def _sprite_pixels(self, sprite: bytes, origin_x: int, origin_y: int) -> list[tuple[int, int]]:
        """Return display coordinates of the set bits in ``sprite``.

        Every coordinate is resolved before the caller touches the display,
        so an ERROR-policy fault leaves the bitmap unchanged.
        """

        width = self.display.WIDTH
        height = self.display.HEIGHT
        policy = self.sprite_edge
        resolved: list[tuple[int, int]] = []

        for row, bits in enumerate(sprite):
            for column in range(8):
                if not bits & (0x80 >> column):
                    continue
                x = origin_x + column
                y = origin_y + row
                if policy is SpriteEdgePolicy.WRAP:
                    resolved.append((x % width, y % height))
                elif policy is SpriteEdgePolicy.CLIP:
                    x = origin_x % width + column
                    y = origin_y % height + row
                    if x < width and y < height:
                        resolved.append((x, y))
                else:
                    if not self.display.contains(x, y):
                        raise DrawOutOfBoundsError(x, y, pc=self.state.pc)
                    resolved.append((x, y))
        return resolved

    # ------------------------------------------------------------------
    # Helpers

    def _fetch_word(self) -> int:
        return self.memory.load16(self.state.pc)

    def _decode(self, word: int) -> DecodedInstruction:
        decoded = self.instruction_table.decode(word)
        if decoded is None:
            raise UnknownOpcodeError(word, pc=self.state.pc)
        return decoded

    def _advance(self) -> None:
        self.state.pc += 2

    def _skip_if(self, condition: bool) -> None:
        self.state.pc += 4 if condition else 2

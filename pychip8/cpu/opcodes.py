"""Opcode metadata and decode table for the CHIP-8 instruction set.

Instruction words are classified by their high nibble into sixteen families.
Most families hold a single instruction; families ``0x0``, ``0x8``, ``0xE`` and
``0xF`` select the exact instruction with a secondary field of the word,
given by :data:`FAMILY_SELECTORS`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Iterable, List, Mapping, Sequence

FAMILY_COUNT: Final[int] = 16

# Mask applied to the word to obtain the selector within a family. Family 0x0
# selects on the low nibble only, so 0NN0 clears the screen and 0NNE returns.
FAMILY_SELECTORS: Final[Mapping[int, int]] = {
    0x0: 0x000F,
    0x8: 0x000F,
    0xE: 0x00FF,
    0xF: 0x00FF,
}


@dataclass(frozen=True)
class Instruction:
    """Metadata describing a single CHIP-8 operation."""

    family: int
    mnemonic: str
    handler: str
    operands: str = ""
    selector: int | None = None

    def __post_init__(self) -> None:
        if not 0 <= self.family < FAMILY_COUNT:
            raise ValueError(f"family out of range: {self.family}")
        mask = FAMILY_SELECTORS.get(self.family)
        if mask is None and self.selector is not None:
            raise ValueError(f"family {self.family:X} does not take a selector")
        if mask is not None:
            if self.selector is None:
                raise ValueError(f"family {self.family:X} requires a selector")
            if self.selector & ~mask:
                raise ValueError(f"selector {self.selector:#x} outside mask {mask:#x}")

    @property
    def pattern(self) -> str:
        """Human readable opcode pattern such as ``8XY4``."""

        if self.family == 0x0:
            return "00EE" if self.selector == 0xE else "00E0"
        if self.family == 0x8:
            return f"8XY{self.selector:X}"
        if self.family in (0xE, 0xF):
            return f"{self.family:X}X{self.selector:02X}"
        return f"{self.family:X}" + {
            0x1: "NNN",
            0x2: "NNN",
            0x3: "XNN",
            0x4: "XNN",
            0x5: "XY0",
            0x6: "XNN",
            0x7: "XNN",
            0x9: "XY0",
            0xA: "NNN",
            0xB: "NNN",
            0xC: "XNN",
            0xD: "XYN",
        }[self.family]


@dataclass(frozen=True)
class DecodedInstruction:
    """An instruction word paired with the operation it selects."""

    word: int
    instruction: Instruction

    @property
    def x(self) -> int:
        return (self.word & 0x0F00) >> 8

    @property
    def y(self) -> int:
        return (self.word & 0x00F0) >> 4

    @property
    def n(self) -> int:
        return self.word & 0x000F

    @property
    def nn(self) -> int:
        return self.word & 0x00FF

    @property
    def nnn(self) -> int:
        return self.word & 0x0FFF

    def disassemble(self) -> str:
        operands = self.instruction.operands.format(x=self.x, y=self.y, n=self.n, nn=self.nn, nnn=self.nnn)
        if not operands:
            return self.instruction.mnemonic
        return f"{self.instruction.mnemonic} {operands}"


class OpcodeTable:
    """Mutable builder for the per-family dispatch table."""

    def __init__(self) -> None:
        self._single: List[Instruction | None] = [None] * FAMILY_COUNT
        self._selected: dict[int, dict[int, Instruction]] = {family: {} for family in FAMILY_SELECTORS}

    def register(self, instruction: Instruction) -> None:
        family = instruction.family
        if instruction.selector is None:
            existing = self._single[family]
            if existing is not None:
                raise ValueError(f"family {family:X} already registered as {existing.mnemonic}")
            self._single[family] = instruction
            return
        entries = self._selected[family]
        existing = entries.get(instruction.selector)
        if existing is not None:
            raise ValueError(f"opcode {instruction.pattern} already registered as {existing.mnemonic}")
        entries[instruction.selector] = instruction

    def register_all(self, instructions: Iterable[Instruction]) -> None:
        for instruction in instructions:
            self.register(instruction)

    def freeze(self) -> "DecodeTable":
        return DecodeTable(tuple(self._single), {family: dict(entries) for family, entries in self._selected.items()})


class DecodeTable:
    """Immutable lookup from instruction words to :class:`Instruction` records."""

    def __init__(
        self,
        single: Sequence[Instruction | None],
        selected: Mapping[int, Mapping[int, Instruction]],
    ) -> None:
        self._single = tuple(single)
        self._selected = {family: dict(entries) for family, entries in selected.items()}

    def lookup(self, word: int) -> Instruction | None:
        """Return the instruction selected by ``word`` or None when unknown."""

        family = (word >> 12) & 0xF
        mask = FAMILY_SELECTORS.get(family)
        if mask is None:
            return self._single[family]
        return self._selected[family].get(word & mask)

    def decode(self, word: int) -> DecodedInstruction | None:
        instruction = self.lookup(word)
        if instruction is None:
            return None
        return DecodedInstruction(word & 0xFFFF, instruction)

    def instructions(self) -> Iterable[Instruction]:
        for instruction in self._single:
            if instruction is not None:
                yield instruction
        for entries in self._selected.values():
            yield from entries.values()

    def __len__(self) -> int:
        return sum(1 for _ in self.instructions())


def build_instruction_table(instructions: Iterable[Instruction]) -> DecodeTable:
    """Build a decode table from instruction metadata."""

    table = OpcodeTable()
    table.register_all(instructions)
    return table.freeze()


DEFAULT_INSTRUCTIONS: Sequence[Instruction] = (
    Instruction(0x0, "CLS", "op_cls", selector=0x0),
    Instruction(0x0, "RET", "op_ret", selector=0xE),
    Instruction(0x1, "JP", "op_jp", "{nnn:#05x}"),
    Instruction(0x2, "CALL", "op_call", "{nnn:#05x}"),
    Instruction(0x3, "SE", "op_se_imm", "V{x:X}, {nn:#04x}"),
    Instruction(0x4, "SNE", "op_sne_imm", "V{x:X}, {nn:#04x}"),
    Instruction(0x5, "SE", "op_se_reg", "V{x:X}, V{y:X}"),
    Instruction(0x6, "LD", "op_ld_imm", "V{x:X}, {nn:#04x}"),
    Instruction(0x7, "ADD", "op_add_imm", "V{x:X}, {nn:#04x}"),
    # Register/register arithmetic
    Instruction(0x8, "LD", "op_ld_reg", "V{x:X}, V{y:X}", selector=0x0),
    Instruction(0x8, "OR", "op_or", "V{x:X}, V{y:X}", selector=0x1),
    Instruction(0x8, "AND", "op_and", "V{x:X}, V{y:X}", selector=0x2),
    Instruction(0x8, "XOR", "op_xor", "V{x:X}, V{y:X}", selector=0x3),
    Instruction(0x8, "ADD", "op_add_reg", "V{x:X}, V{y:X}", selector=0x4),
    Instruction(0x8, "SUB", "op_sub", "V{x:X}, V{y:X}", selector=0x5),
    Instruction(0x8, "SHR", "op_shr", "V{x:X}", selector=0x6),
    Instruction(0x8, "SUBN", "op_subn", "V{x:X}, V{y:X}", selector=0x7),
    Instruction(0x8, "SHL", "op_shl", "V{x:X}", selector=0xE),
    Instruction(0x9, "SNE", "op_sne_reg", "V{x:X}, V{y:X}"),
    Instruction(0xA, "LD", "op_ld_i", "I, {nnn:#05x}"),
    Instruction(0xB, "JP", "op_jp_offset", "V0, {nnn:#05x}"),
    Instruction(0xC, "RND", "op_rnd", "V{x:X}, {nn:#04x}"),
    Instruction(0xD, "DRW", "op_drw", "V{x:X}, V{y:X}, {n}"),
    # Keypad
    Instruction(0xE, "SKP", "op_skp", "V{x:X}", selector=0x9E),
    Instruction(0xE, "SKNP", "op_sknp", "V{x:X}", selector=0xA1),
    # Timers, index register and memory transfers
    Instruction(0xF, "LD", "op_ld_from_delay", "V{x:X}, DT", selector=0x07),
    Instruction(0xF, "LD", "op_wait_key", "V{x:X}, K", selector=0x0A),
    Instruction(0xF, "LD", "op_ld_delay", "DT, V{x:X}", selector=0x15),
    Instruction(0xF, "LD", "op_ld_sound", "ST, V{x:X}", selector=0x18),
    Instruction(0xF, "ADD", "op_add_i", "I, V{x:X}", selector=0x1E),
    Instruction(0xF, "LD", "op_ld_font", "F, V{x:X}", selector=0x29),
    Instruction(0xF, "LD", "op_bcd", "B, V{x:X}", selector=0x33),
    Instruction(0xF, "LD", "op_store_regs", "[I], V{x:X}", selector=0x55),
    Instruction(0xF, "LD", "op_load_regs", "V{x:X}, [I]", selector=0x65),
)


OPCODE_TABLE: DecodeTable = build_instruction_table(DEFAULT_INSTRUCTIONS)

"""Tests for the CHIP-8 decode table."""

from __future__ import annotations

import pytest

from pychip8.cpu import Chip8CPU
from pychip8.cpu.opcodes import (
    DEFAULT_INSTRUCTIONS,
    OPCODE_TABLE,
    Instruction,
    OpcodeTable,
    build_instruction_table,
)


def test_table_covers_the_instruction_set() -> None:
    assert len(OPCODE_TABLE) == 34
    patterns = {instruction.pattern for instruction in OPCODE_TABLE.instructions()}
    for pattern in ("00E0", "00EE", "1NNN", "8XY4", "8XYE", "DXYN", "EX9E", "FX0A", "FX65"):
        assert pattern in patterns


def test_every_handler_exists_on_cpu() -> None:
    for instruction in DEFAULT_INSTRUCTIONS:
        assert callable(getattr(Chip8CPU, instruction.handler, None)), instruction.handler


@pytest.mark.parametrize(
    "word, handler",
    [
        (0x00E0, "op_cls"),
        (0x00EE, "op_ret"),
        (0x0000, "op_cls"),  # family 0x0 selects on the low nibble
        (0x0AE0, "op_cls"),
        (0x02EE, "op_ret"),
        (0x1FFF, "op_jp"),
        (0x5AB3, "op_se_reg"),  # low nibble is ignored outside selector families
        (0x8AB6, "op_shr"),
        (0xEA9E, "op_skp"),
        (0xF733, "op_bcd"),
    ],
)
def test_lookup_selects_handler(word: int, handler: str) -> None:
    instruction = OPCODE_TABLE.lookup(word)

    assert instruction is not None
    assert instruction.handler == handler


@pytest.mark.parametrize("word", [0x00E1, 0x0123, 0x800F, 0xE19F, 0xF000])
def test_lookup_unknown_words(word: int) -> None:
    assert OPCODE_TABLE.lookup(word) is None
    assert OPCODE_TABLE.decode(word) is None


def test_decoded_operand_fields() -> None:
    decoded = OPCODE_TABLE.decode(0xD3A7)

    assert decoded is not None
    assert (decoded.x, decoded.y, decoded.n, decoded.nn, decoded.nnn) == (0x3, 0xA, 0x7, 0xA7, 0x3A7)


@pytest.mark.parametrize(
    "word, text",
    [
        (0x00E0, "CLS"),
        (0x1234, "JP 0x234"),
        (0x6A0F, "LD VA, 0x0f"),
        (0x8124, "ADD V1, V2"),
        (0xD125, "DRW V1, V2, 5"),
        (0xF20A, "LD V2, K"),
        (0xF355, "LD [I], V3"),
    ],
)
def test_disassemble(word: int, text: str) -> None:
    decoded = OPCODE_TABLE.decode(word)

    assert decoded is not None
    assert decoded.disassemble() == text


def test_duplicate_registration_rejected() -> None:
    table = OpcodeTable()
    table.register(Instruction(0x1, "JP", "op_jp"))

    with pytest.raises(ValueError):
        table.register(Instruction(0x1, "JMP", "op_jp"))


def test_duplicate_selector_rejected() -> None:
    with pytest.raises(ValueError):
        build_instruction_table(
            (
                Instruction(0x8, "OR", "op_or", selector=0x1),
                Instruction(0x8, "ORR", "op_or", selector=0x1),
            )
        )


def test_selector_rules_enforced() -> None:
    with pytest.raises(ValueError):
        Instruction(0x1, "JP", "op_jp", selector=0x0)
    with pytest.raises(ValueError):
        Instruction(0xF, "LD", "op_bcd")
    with pytest.raises(ValueError):
        Instruction(0x8, "OR", "op_or", selector=0x10)
    with pytest.raises(ValueError):
        Instruction(0x10, "BAD", "op_bad")

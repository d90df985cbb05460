"""Cycle driver tests: timer decay, stalls, faults and reset."""

from __future__ import annotations

import struct

import pytest

from pychip8.bus import MemoryAccessError
from pychip8.cpu import SpriteEdgePolicy, StackOverflowError, UnknownOpcodeError
from pychip8.loader import ProgramLoadError
from pychip8.system import MachineConfig, StepStatus, create_machine
from pychip8.video import FONT_SET


def assemble(*words: int) -> bytes:
    return struct.pack(f">{len(words)}H", *words)


def make_machine(*words: int, **config):
    return create_machine(MachineConfig(program=assemble(*words), **config))


def test_power_on_state() -> None:
    machine = create_machine()

    assert machine.memory.read_block(0, 80) == FONT_SET
    assert machine.memory.load8(80) == 0
    assert machine.state.pc == 0x200
    assert machine.display.lit_count() == 0
    assert machine.program is None
    assert not machine.halted


def test_config_program_is_loaded() -> None:
    machine = make_machine(0x6001, program_name="tiny")

    assert machine.memory.load16(0x200) == 0x6001
    assert machine.program is not None
    assert machine.program.name == "tiny"


def test_step_executes_and_decays_timers() -> None:
    machine = make_machine(0x6105)
    machine.state.delay_timer = 3
    machine.state.sound_timer = 1

    result = machine.step()

    assert result.status is StepStatus.EXECUTED
    assert result.ok
    assert result.pc == 0x200
    assert result.opcode == 0x6105
    assert machine.state.v[1] == 5
    assert machine.state.delay_timer == 2
    assert machine.state.sound_timer == 0


def test_sound_active_follows_sound_timer() -> None:
    machine = make_machine(0x6102, 0xF118, 0x1204)

    assert not machine.sound_active
    machine.step()
    machine.step()
    assert machine.sound_active  # set to 2, decayed to 1
    machine.step()
    assert not machine.sound_active


def test_wait_key_stall_freezes_pc_and_timers() -> None:
    machine = make_machine(0xF30A)
    machine.state.delay_timer = 5
    machine.state.sound_timer = 5

    for _ in range(3):
        result = machine.step()
        assert result.status is StepStatus.STALLED
        assert result.ok
        assert machine.state.pc == 0x200
        assert machine.state.delay_timer == 5
        assert machine.state.sound_timer == 5

    machine.keypad.press(0xB)
    result = machine.step()

    assert result.status is StepStatus.EXECUTED
    assert machine.state.v[3] == 0xB
    assert machine.state.pc == 0x202
    assert machine.state.delay_timer == 4
    assert machine.state.sound_timer == 4


def test_running_until_jump_lands_on_target() -> None:
    machine = make_machine(0x6A05, 0xFA15, 0x1456)

    machine.step()
    machine.step()
    assert machine.state.delay_timer == 4
    machine.step()

    assert machine.state.pc == 0x456
    assert machine.state.delay_timer == 3


def test_clear_then_draw_row_sets_eight_cells() -> None:
    machine = make_machine(0x00E0, 0xA20A, 0xD011, 0x1206, 0x0000, 0xFF00)

    machine.run(3)

    assert machine.display.lit_count() == 8
    assert machine.state.vf == 0


def test_unknown_opcode_faults_and_halts() -> None:
    machine = make_machine(0x6001, 0x0123)
    machine.state.delay_timer = 10

    machine.step()
    result = machine.step()

    assert result.status is StepStatus.FAULTED
    assert not result.ok
    assert isinstance(result.error, UnknownOpcodeError)
    assert result.pc == 0x202
    assert result.opcode == 0x0123
    assert machine.halted
    assert machine.state.delay_timer == 9

    again = machine.step()
    assert again is result
    assert machine.state.pc == 0x202
    assert machine.state.delay_timer == 9


def test_zero_filled_memory_executes_as_clear_screen() -> None:
    machine = create_machine()
    machine.display.toggle(5, 5)

    result = machine.run(4)

    assert result.status is StepStatus.EXECUTED
    assert result.opcode == 0x0000
    assert machine.state.pc == 0x208
    assert machine.display.lit_count() == 0


def test_stack_overflow_is_reported() -> None:
    machine = make_machine(0x2200)

    for _ in range(16):
        assert machine.step().status is StepStatus.EXECUTED
    result = machine.step()

    assert result.status is StepStatus.FAULTED
    assert isinstance(result.error, StackOverflowError)


def test_fetch_past_memory_is_reported() -> None:
    machine = make_machine(0x1FFF)

    machine.step()
    result = machine.step()

    assert result.status is StepStatus.FAULTED
    assert isinstance(result.error, MemoryAccessError)
    assert result.pc == 0xFFF
    assert result.opcode is None


def test_draw_error_policy_faults_machine() -> None:
    machine = make_machine(0xA000, 0x603E, 0xD015, sprite_edge=SpriteEdgePolicy.ERROR)

    result = machine.run(10)

    assert result.status is StepStatus.FAULTED
    assert machine.display.lit_count() == 0


def test_reset_reloads_program_and_clears_fault() -> None:
    machine = make_machine(0xA300, 0x6107, 0xF155, 0x0123)

    result = machine.run(10)
    assert result.status is StepStatus.FAULTED
    assert machine.memory.load8(0x301) == 7

    machine.memory.store8(0x250, 0x99)
    machine.display.toggle(1, 1)
    machine.keypad.press(0x2)
    machine.reset()

    assert not machine.halted
    assert machine.state.pc == 0x200
    assert machine.memory.load16(0x200) == 0xA300
    assert machine.memory.load8(0x250) == 0
    assert machine.memory.load8(0x301) == 0
    assert machine.memory.read_block(0, 80) == FONT_SET
    assert machine.display.lit_count() == 0
    assert machine.keypad.first_pressed() is None
    assert machine.step().status is StepStatus.EXECUTED


def test_seeded_random_is_reproducible_across_reset() -> None:
    program = (0xC1FF, 0xC2FF, 0xC3FF)
    first = make_machine(*program, seed=42)
    second = make_machine(*program, seed=42)

    first.run(3)
    second.run(3)
    values = bytes(first.state.v[1:4])
    assert values == bytes(second.state.v[1:4])

    first.reset()
    first.run(3)
    assert bytes(first.state.v[1:4]) == values


def test_run_stops_at_stall() -> None:
    machine = make_machine(0x6001, 0x6102, 0xF00A, 0x6203)

    result = machine.run(100)

    assert result.status is StepStatus.STALLED
    assert result.pc == 0x204
    assert machine.state.v[2] == 0


def test_run_rejects_non_positive_limit() -> None:
    machine = create_machine()

    with pytest.raises(ValueError):
        machine.run(0)


def test_load_program_rejects_oversized_image() -> None:
    machine = create_machine()

    with pytest.raises(ProgramLoadError):
        machine.load_program(bytes(4000))
    assert machine.program is None

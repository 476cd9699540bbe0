# tests/core/test_cpu_cycle.py
"""
Chip8Cpu の命令サイクル、停止/リセット、ホスト向けインターフェースのテスト。
"""
import random

import pytest

from retro_chip8.core.cpu import Chip8Cpu
from retro_chip8.core.errors import (
    MachineHaltedError, MemoryAccessError, ProgramTooLargeError,
    StackOverflowError, StackUnderflowError, UnknownOpcodeError,
)
from retro_chip8.core.snapshot import BusAccessType, InstructionKind
from retro_chip8.instructions import Quirks

# @intent:test_suite フェッチ→デコード→PC更新→実行の流れと、致命的エラー時の停止を検証します。

def make_cpu(*words, **kwargs):
    cpu = Chip8Cpu(**kwargs)
    program = []
    for word in words:
        program += [(word >> 8) & 0xFF, word & 0xFF]
    cpu.load_program(program)
    return cpu

class TestCycle:
    def test_snapshot_contents(self):
        cpu = make_cpu(0x6A2B)
        snapshot = cpu.cycle()
        assert snapshot.operation.kind == InstructionKind.LD_VX_KK
        assert snapshot.state.v[0xA] == 0x2B
        assert snapshot.state.pc == 0x202
        assert snapshot.metadata.cycle_count == 1
        assert snapshot.metadata.address == 0x200
        assert snapshot.metadata.symbol_info == "0x200: LD VA, #2B"
        reads = [a for a in snapshot.bus_activity if a.access_type == BusAccessType.READ]
        assert [a.address for a in reads] == [0x200, 0x201]
        assert snapshot.writes() == []

    def test_snapshot_is_detached_from_state(self):
        cpu = make_cpu(0x6001, 0x6002)
        first = cpu.cycle()
        cpu.cycle()
        assert first.state.v[0] == 1
        assert cpu.get_state().v[0] == 2

    def test_write_activity_recorded(self):
        cpu = make_cpu(0x6A9C, 0xA400, 0xFA33)
        cpu.cycle()
        cpu.cycle()
        snapshot = cpu.cycle()
        assert [(a.address, a.data) for a in snapshot.writes()] == [(0x400, 1), (0x401, 5), (0x402, 6)]

    def test_pc_advances_by_two(self):
        cpu = make_cpu(0x6001, 0x6102, 0x6203)
        for _ in range(3):
            cpu.cycle()
        assert cpu.get_state().pc == 0x206
        assert cpu.cycle_count == 3

    def test_jump_is_exact(self):
        cpu = make_cpu(0x1208, 0x0000, 0x0000, 0x0000, 0x6A01)
        cpu.cycle()
        assert cpu.get_state().pc == 0x208
        cpu.cycle()
        assert cpu.get_state().v[0xA] == 1

    def test_call_return_symmetry(self):
        # 0x200: CALL 0x206 / 0x202: LD V1,#01 / 0x204: JP 0x204 / 0x206: LD V0,#07 / 0x208: RET
        cpu = make_cpu(0x2206, 0x6101, 0x1204, 0x6007, 0x00EE)
        cpu.cycle()
        assert cpu.get_state().sp == 1
        cpu.cycle()
        cpu.cycle()
        state = cpu.get_state()
        assert state.pc == 0x202
        assert state.sp == 0
        cpu.cycle()
        assert state.v[0] == 7
        assert state.v[1] == 1

    def test_key_wait_stalls_until_pressed(self):
        cpu = make_cpu(0xF50A, 0x6101)
        for _ in range(5):
            cpu.cycle()
            assert cpu.get_state().pc == 0x200
        cpu.press_key(0xB)
        cpu.cycle()
        assert cpu.get_state().pc == 0x202
        assert cpu.get_state().v[5] == 0xB

    def test_timers_are_independent_of_cycle(self):
        cpu = make_cpu(0x6003, 0xF015, 0xF018)
        for _ in range(3):
            cpu.cycle()
        assert cpu.sound_active
        cpu.tick_timers()
        cpu.tick_timers()
        assert cpu.get_state().delay_timer == 1
        cpu.tick_timers()
        cpu.tick_timers()
        state = cpu.get_state()
        assert state.delay_timer == 0
        assert state.sound_timer == 0
        assert not cpu.sound_active

    def test_draw_then_framebuffer_snapshot(self):
        # LD F,V0 (glyph 0) / DRW V1,V1,5
        cpu = make_cpu(0xF029, 0xD115)
        cpu.cycle()
        cpu.cycle()
        frame = cpu.get_framebuffer()
        assert len(frame) == 32
        assert len(frame[0]) == 64
        assert frame[0][:5] == (True, True, True, True, False)

    def test_seeded_rng_is_reproducible(self):
        a = make_cpu(0xC0FF, rng=random.Random(7))
        b = make_cpu(0xC0FF, rng=random.Random(7))
        assert a.cycle().state.v[0] == b.cycle().state.v[0]

    def test_quirks_passed_to_instructions(self):
        cpu = make_cpu(0x6104, 0x8016, quirks=Quirks(shift_uses_vy=True))
        cpu.cycle()
        cpu.cycle()
        assert cpu.get_state().v[0] == 2
        assert cpu.quirks.shift_uses_vy

class TestFaults:
    def test_unknown_opcode_halts(self):
        cpu = make_cpu(0x6001, 0x5121)
        cpu.cycle()
        with pytest.raises(UnknownOpcodeError) as excinfo:
            cpu.cycle()
        assert excinfo.value.pc == 0x202
        assert excinfo.value.opcode == 0x5121
        assert cpu.halted
        assert cpu.last_error is excinfo.value

    def test_halted_machine_refuses_cycle(self):
        cpu = make_cpu(0x00EE)
        with pytest.raises(StackUnderflowError):
            cpu.cycle()
        with pytest.raises(MachineHaltedError):
            cpu.cycle()

    def test_fault_carries_pc_and_opcode(self):
        cpu = make_cpu(0x00EE)
        with pytest.raises(StackUnderflowError) as excinfo:
            cpu.cycle()
        assert excinfo.value.pc == 0x200
        assert excinfo.value.opcode == 0x00EE
        assert "0x200" in str(excinfo.value)

    def test_stack_overflow_on_recursion(self):
        cpu = make_cpu(0x2200)
        for _ in range(16):
            cpu.cycle()
        with pytest.raises(StackOverflowError):
            cpu.cycle()
        assert cpu.halted

    def test_fetch_past_end_of_memory(self):
        cpu = make_cpu(0x1FFF)
        cpu.cycle()
        with pytest.raises(MemoryAccessError) as excinfo:
            cpu.cycle()
        assert excinfo.value.pc == 0xFFF
        assert excinfo.value.opcode is None

    def test_reset_restarts_and_reloads_program(self):
        cpu = make_cpu(0x6A05, 0x00EE)
        cpu.cycle()
        with pytest.raises(StackUnderflowError):
            cpu.cycle()
        cpu.reset()
        assert not cpu.halted
        assert cpu.last_error is None
        assert cpu.cycle_count == 0
        state = cpu.get_state()
        assert state.pc == 0x200
        assert state.v[0xA] == 0
        assert state.memory.dump(0x200, 2) == bytes([0x6A, 0x05])
        cpu.cycle()
        assert cpu.get_state().v[0xA] == 5

    def test_reset_keeps_held_keys(self):
        cpu = make_cpu(0xF30A)
        cpu.press_key(0x9)
        cpu.reset()
        assert cpu.get_state().keys[0x9]
        cpu.cycle()
        assert cpu.get_state().v[3] == 0x9
        assert cpu.get_state().pc == 0x202

    def test_reset_without_program(self):
        cpu = make_cpu(0x6A05)
        cpu.reset(keep_program=False)
        assert cpu.get_state().memory.dump(0x200, 2) == bytes([0, 0])

    def test_oversized_program_rejected(self):
        cpu = Chip8Cpu()
        with pytest.raises(ProgramTooLargeError):
            cpu.load_program(bytes(3585))
        assert cpu.get_state().memory.dump(0x200, 4) == bytes(4)

class TestHostInterface:
    def test_take_frame_if_dirty(self):
        cpu = make_cpu(0xF029, 0xD015, 0x6001)
        assert cpu.take_frame_if_dirty() is not None
        assert cpu.take_frame_if_dirty() is None
        cpu.cycle()
        cpu.cycle()
        frame = cpu.take_frame_if_dirty()
        assert frame == cpu.get_framebuffer()
        assert frame[0][0]
        cpu.cycle()
        assert cpu.take_frame_if_dirty() is None

    def test_program_size(self):
        cpu = Chip8Cpu()
        assert cpu.program_size == 0
        cpu.load_program([0x00, 0xE0])
        assert cpu.program_size == 2
        cpu.reset(keep_program=False)
        assert cpu.program_size == 0

    def test_press_and_release(self):
        cpu = Chip8Cpu()
        cpu.press_key(0xF)
        assert cpu.get_state().keys[0xF]
        cpu.release_key(0xF)
        assert not cpu.get_state().keys[0xF]

    @pytest.mark.parametrize("key", [-1, 16])
    def test_key_out_of_range(self, key):
        cpu = Chip8Cpu()
        with pytest.raises(ValueError):
            cpu.press_key(key)

    def test_set_keys(self):
        cpu = Chip8Cpu()
        cpu.set_keys([i % 2 == 0 for i in range(16)])
        assert cpu.get_state().keys[0]
        assert not cpu.get_state().keys[1]

    def test_register_map(self):
        cpu = make_cpu(0x6A2B)
        cpu.cycle()
        regs = cpu.get_register_map()
        assert regs["VA"] == 0x2B
        assert regs["PC"] == 0x202
        assert set(regs) == {f"V{i:X}" for i in range(16)} | {"I", "PC", "SP", "DT", "ST"}

    def test_register_layout_covers_register_map(self):
        cpu = Chip8Cpu()
        names = {r.name for group in cpu.get_register_layout() for r in group.registers}
        assert names == set(cpu.get_register_map())

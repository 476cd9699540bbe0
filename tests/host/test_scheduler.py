# tests/host/test_scheduler.py
"""
CycleSchedulerの単体テスト。
"""
import pytest

from retro_chip8.core.cpu import Chip8Cpu
from retro_chip8.core.errors import UnknownOpcodeError
from retro_chip8.host.scheduler import CycleScheduler

# @intent:test_suite 経過時間からサイクル数/ティック数への変換と端数の蓄積を検証します。

class TestAdvance:
    def test_whole_second_slice(self):
        scheduler = CycleScheduler(cycles_per_second=512, timer_hz=64, max_frame_time=1.0)
        assert scheduler.advance(0.5) == (256, 32)

    def test_fractions_accumulate(self):
        scheduler = CycleScheduler(cycles_per_second=4, timer_hz=2, max_frame_time=1.0)
        assert scheduler.advance(0.125) == (0, 0)
        assert scheduler.advance(0.125) == (1, 0)
        assert scheduler.advance(0.25) == (1, 1)

    def test_elapsed_is_capped(self):
        scheduler = CycleScheduler(cycles_per_second=512, timer_hz=64, max_frame_time=0.25)
        assert scheduler.advance(10.0) == (128, 16)

    def test_reset_drops_fraction(self):
        scheduler = CycleScheduler(cycles_per_second=4, timer_hz=2, max_frame_time=1.0)
        scheduler.advance(0.125)
        scheduler.reset()
        assert scheduler.advance(0.125) == (0, 0)

    def test_negative_elapsed(self):
        with pytest.raises(ValueError):
            CycleScheduler().advance(-0.5)

    @pytest.mark.parametrize("cps, hz", [(0, 60), (500, 0), (-1, 60)])
    def test_invalid_rates(self, cps, hz):
        with pytest.raises(ValueError):
            CycleScheduler(cycles_per_second=cps, timer_hz=hz)

class TestRunFrame:
    def _cpu(self, program):
        cpu = Chip8Cpu()
        cpu.load_program(program)
        return cpu

    def test_runs_cycles_and_ticks(self):
        # LD V0,#0A / LD DT,V0 / JP 0x204
        cpu = self._cpu([0x60, 0x0A, 0xF0, 0x15, 0x12, 0x04])
        scheduler = CycleScheduler(cycles_per_second=16, timer_hz=8, max_frame_time=1.0)
        executed = scheduler.run_frame(cpu, 0.5)
        assert executed == 8
        assert cpu.cycle_count == 8
        assert cpu.get_state().delay_timer == 10 - 4

    def test_fault_propagates(self):
        cpu = self._cpu([0xFF, 0xFF])
        scheduler = CycleScheduler(cycles_per_second=16, timer_hz=8, max_frame_time=1.0)
        with pytest.raises(UnknownOpcodeError):
            scheduler.run_frame(cpu, 0.5)
        assert cpu.halted

# retro_chip8/host/scheduler.py
"""
ホストスケジューラ

経過した実時間を、命令サイクル数とタイマーティック数に変換します。
命令レート（通常500Hz）とタイマーレート（60Hz）は互いに独立です。
時計はホストから注入されるため、このモジュール自体は時刻を参照しません。
"""
from typing import Tuple

from retro_chip8.core.cpu import Chip8Cpu

# @intent:responsibility 実時間の経過に応じて cycle() と tick_timers() を呼ぶ回数を算出し、実行します。
class CycleScheduler:
    """
    端数を蓄積しながら、経過時間あたりのサイクル数/ティック数を決定するスケジューラ。
    """
    # @intent:pre-condition cycles_per_second, timer_hz は正の値である必要があります。
    # @intent:rationale max_frame_time を超える経過時間は切り捨て、長時間停止後に大量のサイクルを一気に消化しないようにします。
    def __init__(self, cycles_per_second: int = 500, timer_hz: int = 60, max_frame_time: float = 0.25):
        if cycles_per_second <= 0 or timer_hz <= 0:
            raise ValueError("cycles_per_second and timer_hz must be positive.")
        self.cycles_per_second = cycles_per_second
        self.timer_hz = timer_hz
        self.max_frame_time = max_frame_time
        self._cycle_budget = 0.0
        self._timer_budget = 0.0

    def reset(self) -> None:
        self._cycle_budget = 0.0
        self._timer_budget = 0.0

    # @intent:responsibility 経過時間（秒）から、このフレームで実行すべき (サイクル数, タイマーティック数) を返します。
    def advance(self, elapsed: float) -> Tuple[int, int]:
        if elapsed < 0:
            raise ValueError("Elapsed time must not be negative.")
        elapsed = min(elapsed, self.max_frame_time)

        self._cycle_budget += elapsed * self.cycles_per_second
        self._timer_budget += elapsed * self.timer_hz
        cycles = int(self._cycle_budget)
        ticks = int(self._timer_budget)
        self._cycle_budget -= cycles
        self._timer_budget -= ticks
        return cycles, ticks

    # @intent:responsibility 1フレーム分の処理（命令サイクルとタイマー減算）を実行し、実行したサイクル数を返します。
    # @intent:post-condition cycle()中の致命的エラーはそのまま呼び出し元へ伝播します。
    def run_frame(self, cpu: Chip8Cpu, elapsed: float) -> int:
        cycles, ticks = self.advance(elapsed)
        for _ in range(cycles):
            cpu.cycle()
        for _ in range(ticks):
            cpu.tick_timers()
        return cycles

# retro_chip8/core/state.py
"""
Core Layer (マシン状態)

このモジュールは、CHIP-8マシンの全ての可変状態（メモリ、レジスタ、タイマー、
スタック、フレームバッファ、キー状態）を保持するデータ構造を定義します。

メモリマップ:
    0x000-0x04F  フォントスプライト (16文字 x 5バイト)
    0x050-0x1FF  インタプリタ予約領域
    0x200-0xFFF  プログラム / データ領域
"""
from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from retro_chip8.core.errors import ProgramTooLargeError
from retro_chip8.core.framebuffer import FrameBuffer
from retro_chip8.transport.bus import Bus, MEMORY_SIZE

PROGRAM_START = 0x200
FONT_START = 0x000
FONT_GLYPH_SIZE = 5
NUM_REGISTERS = 16
STACK_DEPTH = 16
NUM_KEYS = 16
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START

# @intent:constant 16進数字0-Fのスプライト（各5バイト）。0x000から数字順に配置されます。
FONTSET = (
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
)

# @intent:responsibility ある時点のレジスタ群を不変に記録します。Snapshotに格納されます。
@dataclass(frozen=True)
class RegisterSnapshot:
    pc: int
    sp: int
    i: int
    v: Tuple[int, ...]
    stack: Tuple[int, ...]
    delay_timer: int
    sound_timer: int

# @intent:responsibility CHIP-8マシンの全ての可変状態を単一の集約として保持します。
# @intent:rationale 状態の変更はInstruction Layerの実行関数からのみ行われます。
#                  フレームバッファは集約が所有し、外部へはスナップショット経由でのみ公開します。
@dataclass
class Chip8State:
    """
    CHIP-8のマシン状態を保持するデータクラス。
    生成時にフォントがロードされ、フレームバッファはクリアされた状態になります。
    """
    pc: int = PROGRAM_START  # Program Counter
    sp: int = 0              # Stack Pointer (0 = empty)
    i: int = 0               # Index Register
    delay_timer: int = 0
    sound_timer: int = 0
    v: List[int] = field(default_factory=lambda: [0] * NUM_REGISTERS)
    stack: List[int] = field(default_factory=lambda: [0] * STACK_DEPTH)
    keys: List[bool] = field(default_factory=lambda: [False] * NUM_KEYS)
    memory: Bus = field(default_factory=Bus, repr=False)
    framebuffer: FrameBuffer = field(default_factory=FrameBuffer, repr=False)

    def __post_init__(self):
        self.load_fontset()
        self.clear_display()

    # @intent:responsibility フォントスプライトを0x000-0x04Fにロードします。
    def load_fontset(self) -> None:
        self.memory.load(FONT_START, FONTSET)

    # @intent:responsibility フレームバッファの全ピクセルをOFFにします。
    def clear_display(self) -> None:
        self.framebuffer.clear()

    # @intent:responsibility プログラムイメージを0x200から順にメモリへコピーします。
    # @intent:pre-condition イメージは0x200からメモリ末尾までに収まる必要があります。
    # @intent:rationale 収まらないイメージは切り詰めずにProgramTooLargeErrorで拒否し、メモリには一切書き込みません。
    def load_program(self, data: Iterable[int]) -> int:
        """
        プログラムをロードし、書き込んだバイト数を返します。
        二度呼ぶと、以前の内容をクリアせずに上書きします。
        """
        payload = bytes(data)
        if len(payload) > MAX_PROGRAM_SIZE:
            raise ProgramTooLargeError(
                f"Program of {len(payload)} bytes exceeds the {MAX_PROGRAM_SIZE} bytes available from {PROGRAM_START:#05x}"
            )
        return self.memory.load(PROGRAM_START, payload)

    # @intent:responsibility 遅延タイマーとサウンドタイマーを1ずつ減算します（0で止まります）。
    def tick_timers(self) -> None:
        if self.delay_timer > 0:
            self.delay_timer -= 1
        if self.sound_timer > 0:
            self.sound_timer -= 1

    # @intent:responsibility キー状態をまとめて上書きします。
    # @intent:pre-condition 16個の要素を持つ必要があります。
    def set_keys(self, keys: Iterable[bool]) -> None:
        new_keys = [bool(k) for k in keys]
        if len(new_keys) != NUM_KEYS:
            raise ValueError(f"Expected {NUM_KEYS} key states, got {len(new_keys)}.")
        self.keys[:] = new_keys

    def freeze(self) -> RegisterSnapshot:
        return RegisterSnapshot(
            pc=self.pc,
            sp=self.sp,
            i=self.i,
            v=tuple(self.v),
            stack=tuple(self.stack),
            delay_timer=self.delay_timer,
            sound_timer=self.sound_timer,
        )

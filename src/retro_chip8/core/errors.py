# retro_chip8/core/errors.py
"""
Core Layer (エラー定義)

CHIP-8マシンの実行中に発生する致命的な状態を型付き例外として定義します。
ホストは`cycle()`の境界でこれらを捕捉し、マシンを停止・診断・再起動できます。
"""
from typing import Optional


# @intent:responsibility 全てのCHIP-8実行時エラーの基底クラスです。
# @intent:rationale 障害発生時のPCとオペコードを保持し、ホスト側で診断情報として表示できるようにします。
class Chip8Error(Exception):
    """
    CHIP-8エミュレーションにおける致命的エラーの基底クラス。
    """
    def __init__(self, message: str, pc: Optional[int] = None, opcode: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.pc = pc
        self.opcode = opcode

    # @intent:responsibility 例外発生後に、障害命令のアドレスとオペコードを付与します。
    def attach(self, pc: int, opcode: Optional[int]) -> None:
        if self.pc is None:
            self.pc = pc
        if self.opcode is None:
            self.opcode = opcode

    def __str__(self) -> str:
        location = ""
        if self.pc is not None:
            location += f" at PC={self.pc:#05x}"
        if self.opcode is not None:
            location += f" (opcode {self.opcode:04X})"
        return f"{self.message}{location}"


class UnknownOpcodeError(Chip8Error):
    """デコード表に一致しないオペコード。"""
    def __init__(self, opcode: int, pc: Optional[int] = None):
        super().__init__(f"Unknown opcode {opcode:04X}", pc=pc, opcode=opcode)


class StackOverflowError(Chip8Error):
    """スタックが満杯(sp == 16)の状態でのサブルーチン呼び出し。"""


class StackUnderflowError(Chip8Error):
    """スタックが空(sp == 0)の状態でのリターン。"""


# @intent:rationale メモリ層は従来IndexErrorで範囲外アクセスを報告していたため、互換性のため両方を継承します。
class MemoryAccessError(Chip8Error, IndexError):
    """4KiBのアドレス空間外へのアクセス。"""


# @intent:rationale ロード時の不正入力はValueErrorとして扱われてきたため、両方を継承します。
class ProgramTooLargeError(Chip8Error, ValueError):
    """0x200からメモリ末尾までに収まらないプログラムイメージ。"""


class MachineHaltedError(Chip8Error):
    """致命的エラーで停止したマシンに対して、リセット前に`cycle()`が呼ばれた。"""

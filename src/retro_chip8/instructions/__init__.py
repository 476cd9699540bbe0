# src/retro_chip8/instructions/__init__.py
"""
CHIP-8命令セット実装パッケージ。

デコード(オペコード -> Operation)と実行(Operation -> 状態遷移)を分離し、
それぞれ単独でテストできるようにしています。
"""
from typing import Optional

from retro_chip8.core.errors import UnknownOpcodeError
from retro_chip8.core.snapshot import Operation
from retro_chip8.core.state import Chip8State
from .base import ExecutionContext, Quirks, make_operation
from .maps import DECODE_MAP, EXECUTE_MAP

# @intent:responsibility CHIP-8のオペコードをデコードします。
# @intent:post-condition どのパターンにも一致しない場合はUnknownOpcodeErrorを送出します。
def decode_opcode(opcode: int, pc: Optional[int] = None) -> Operation:
    """
    16ビットのオペコードをデコードし、命令種別で識別されるOperationを返します。
    """
    for mask, pattern, kind in DECODE_MAP.get((opcode >> 12) & 0xF, ()):
        if opcode & mask == pattern:
            return make_operation(opcode, kind)
    raise UnknownOpcodeError(opcode, pc=pc)

# @intent:responsibility デコードされたCHIP-8命令を実行します。
def execute_instruction(operation: Operation, state: Chip8State, ctx: Optional[ExecutionContext] = None) -> None:
    """
    デコードされた命令を実行し、マシンの状態を変更します。
    PCは呼び出し前に次の命令へ進めておく必要があります。
    """
    executor = EXECUTE_MAP[operation.kind]
    executor(state, operation, ctx if ctx is not None else ExecutionContext())

__all__ = [
    "ExecutionContext",
    "Quirks",
    "decode_opcode",
    "execute_instruction",
]

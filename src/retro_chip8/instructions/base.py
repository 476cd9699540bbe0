# src/retro_chip8/instructions/base.py
"""
CHIP-8命令実装用の共通ユーティリティ。
"""
import random
from dataclasses import dataclass, field
from typing import Callable, Dict

from retro_chip8.core.snapshot import InstructionKind, Operation
from retro_chip8.core.state import Chip8State

# @intent:responsibility 解釈が分かれる命令の挙動を切り替えるフラグを保持します。
@dataclass(frozen=True)
class Quirks:
    """
    shift_uses_vy:
        8xy6/8xyE のシフト元。Falseなら Vx をその場でシフト（現代的なインタプリタの挙動）、
        Trueなら Vx = Vy >> 1 / Vy << 1（オリジナルCOSMAC VIPの挙動）。
        技術資料の記述が曖昧なため、既定値はVxとし、フラグで選択できるようにしています。
    load_store_increments_i:
        Fx55/Fx65 の実行後に I を x + 1 だけ進めるか（オリジナルの挙動）。
    """
    shift_uses_vy: bool = False
    load_store_increments_i: bool = False

# @intent:responsibility 実行関数が状態以外に必要とする外部要素（乱数源、互換フラグ）をまとめます。
@dataclass
class ExecutionContext:
    quirks: Quirks = field(default_factory=Quirks)
    rng: random.Random = field(default_factory=random.Random)

    # @intent:responsibility Cxkk用の一様な8ビット乱数を返します。
    def random_byte(self) -> int:
        return self.rng.randrange(0x100)

Executor = Callable[[Chip8State, Operation, ExecutionContext], None]

# @intent:utility_function 次の命令をスキップします（PCを2進める）。
def skip_next(state: Chip8State) -> None:
    state.pc = (state.pc + 2) & 0xFFFF

# @intent:utility_function VFへフラグ値を書き込みます。演算結果の書き込みより後に呼ぶ必要があります。
def set_flag(state: Chip8State, value: bool) -> None:
    state.v[0xF] = 1 if value else 0

# @intent:map 命令種別ごとのニーモニックとオペランド表記。Operation生成時に使用します。
OPERAND_FORMATS: Dict[InstructionKind, tuple] = {
    InstructionKind.CLS: ("CLS", ()),
    InstructionKind.RET: ("RET", ()),
    InstructionKind.JP: ("JP", ("${nnn:03X}",)),
    InstructionKind.CALL: ("CALL", ("${nnn:03X}",)),
    InstructionKind.SE_VX_KK: ("SE", ("V{x:X}", "#{kk:02X}")),
    InstructionKind.SNE_VX_KK: ("SNE", ("V{x:X}", "#{kk:02X}")),
    InstructionKind.SE_VX_VY: ("SE", ("V{x:X}", "V{y:X}")),
    InstructionKind.LD_VX_KK: ("LD", ("V{x:X}", "#{kk:02X}")),
    InstructionKind.ADD_VX_KK: ("ADD", ("V{x:X}", "#{kk:02X}")),
    InstructionKind.LD_VX_VY: ("LD", ("V{x:X}", "V{y:X}")),
    InstructionKind.OR: ("OR", ("V{x:X}", "V{y:X}")),
    InstructionKind.AND: ("AND", ("V{x:X}", "V{y:X}")),
    InstructionKind.XOR: ("XOR", ("V{x:X}", "V{y:X}")),
    InstructionKind.ADD_VX_VY: ("ADD", ("V{x:X}", "V{y:X}")),
    InstructionKind.SUB: ("SUB", ("V{x:X}", "V{y:X}")),
    InstructionKind.SHR: ("SHR", ("V{x:X}", "V{y:X}")),
    InstructionKind.SUBN: ("SUBN", ("V{x:X}", "V{y:X}")),
    InstructionKind.SHL: ("SHL", ("V{x:X}", "V{y:X}")),
    InstructionKind.SNE_VX_VY: ("SNE", ("V{x:X}", "V{y:X}")),
    InstructionKind.LD_I: ("LD", ("I", "${nnn:03X}")),
    InstructionKind.JP_V0: ("JP", ("V0", "${nnn:03X}")),
    InstructionKind.RND: ("RND", ("V{x:X}", "#{kk:02X}")),
    InstructionKind.DRW: ("DRW", ("V{x:X}", "V{y:X}", "{n}")),
    InstructionKind.SKP: ("SKP", ("V{x:X}",)),
    InstructionKind.SKNP: ("SKNP", ("V{x:X}",)),
    InstructionKind.LD_VX_DT: ("LD", ("V{x:X}", "DT")),
    InstructionKind.LD_VX_K: ("LD", ("V{x:X}", "K")),
    InstructionKind.LD_DT_VX: ("LD", ("DT", "V{x:X}")),
    InstructionKind.LD_ST_VX: ("LD", ("ST", "V{x:X}")),
    InstructionKind.ADD_I_VX: ("ADD", ("I", "V{x:X}")),
    InstructionKind.LD_F_VX: ("LD", ("F", "V{x:X}")),
    InstructionKind.LD_B_VX: ("LD", ("B", "V{x:X}")),
    InstructionKind.LD_MEM_VX: ("LD", ("[I]", "V{x:X}")),
    InstructionKind.LD_VX_MEM: ("LD", ("V{x:X}", "[I]")),
}

# @intent:responsibility オペコードから各フィールドを切り出し、指定種別のOperationを生成します。
def make_operation(opcode: int, kind: InstructionKind) -> Operation:
    fields = {
        "x": (opcode >> 8) & 0xF,
        "y": (opcode >> 4) & 0xF,
        "n": opcode & 0xF,
        "kk": opcode & 0xFF,
        "nnn": opcode & 0xFFF,
    }
    mnemonic, templates = OPERAND_FORMATS[kind]
    operands = [t.format(**fields) for t in templates]
    return Operation(opcode=opcode, kind=kind, mnemonic=mnemonic, operands=operands, **fields)

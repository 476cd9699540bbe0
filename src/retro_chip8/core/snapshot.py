# retro_chip8/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、デコード済み命令と、1サイクル実行後のマシン状態を記録する
不変のデータ構造を定義します。UIへの情報提供とトレースログに用います。
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from retro_chip8.core.state import RegisterSnapshot
from retro_chip8.transport.bus import BusAccess, BusAccessType

# @intent:responsibility デコード結果の命令種別を識別するタグです。
# @intent:rationale 同じニーモニック(LD, ADD, SE...)でも意味が異なるため、実行関数の選択には種別を用います。
class InstructionKind(Enum):
    CLS = "CLS"
    RET = "RET"
    JP = "JP"
    CALL = "CALL"
    SE_VX_KK = "SE_VX_KK"
    SNE_VX_KK = "SNE_VX_KK"
    SE_VX_VY = "SE_VX_VY"
    LD_VX_KK = "LD_VX_KK"
    ADD_VX_KK = "ADD_VX_KK"
    LD_VX_VY = "LD_VX_VY"
    OR = "OR"
    AND = "AND"
    XOR = "XOR"
    ADD_VX_VY = "ADD_VX_VY"
    SUB = "SUB"
    SHR = "SHR"
    SUBN = "SUBN"
    SHL = "SHL"
    SNE_VX_VY = "SNE_VX_VY"
    LD_I = "LD_I"
    JP_V0 = "JP_V0"
    RND = "RND"
    DRW = "DRW"
    SKP = "SKP"
    SKNP = "SKNP"
    LD_VX_DT = "LD_VX_DT"
    LD_VX_K = "LD_VX_K"
    LD_DT_VX = "LD_DT_VX"
    LD_ST_VX = "LD_ST_VX"
    ADD_I_VX = "ADD_I_VX"
    LD_F_VX = "LD_F_VX"
    LD_B_VX = "LD_B_VX"
    LD_MEM_VX = "LD_MEM_VX"
    LD_VX_MEM = "LD_VX_MEM"

# @intent:responsibility デコードされた命令の詳細を記録します。
@dataclass(frozen=True) # 不変データ構造
class Operation:
    """
    デコードされた命令。オペコードから切り出した各フィールドを保持し、
    実行関数はこの値だけを見て状態遷移を行います。
    """
    opcode: int
    kind: InstructionKind
    mnemonic: str # 例: "LD"
    operands: List[str] = field(default_factory=list) # 例: ["V3", "#2A"]
    x: int = 0    # bits 8-11
    y: int = 0    # bits 4-7
    n: int = 0    # low nibble
    kk: int = 0   # low byte
    nnn: int = 0  # low 12 bits
    length: int = 2 # 命令のバイト長

    @property
    def opcode_hex(self) -> str:
        return f"{self.opcode:04X}"

    def text(self) -> str:
        if self.operands:
            return f"{self.mnemonic} " + ", ".join(self.operands)
        return self.mnemonic

# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True) # 不変データ構造
class Metadata:
    """
    実行に関するメタデータ（累計サイクル数、命令のアドレスなど）を記録するデータクラス。
    """
    cycle_count: int
    address: int = 0
    symbol_info: Optional[str] = None # 例: "0x0200: LD V0, #05"

# @intent:responsibility 1サイクル実行後のマシン状態を不変に記録します。
@dataclass(frozen=True) # 不変データ構造
class Snapshot:
    """
    ある一時点におけるレジスタ群とバスアクセスを記録した不変のデータ構造。
    """
    state: RegisterSnapshot
    operation: Operation
    metadata: Metadata
    bus_activity: List[BusAccess] = field(default_factory=list)

    def writes(self) -> List[BusAccess]:
        return [a for a in self.bus_activity if a.access_type == BusAccessType.WRITE]

__all__ = [
    "BusAccess",
    "BusAccessType",
    "InstructionKind",
    "Metadata",
    "Operation",
    "Snapshot",
]

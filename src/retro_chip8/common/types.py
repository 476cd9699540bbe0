"""
UI向けのレジスタ表示定義。
Chip8Cpuが返し、RegisterViewがパネルの組み立てに使います。
"""
from typing import List, NamedTuple

# @intent:data_structure 1本のレジスタの名前と、16進表示の桁数を決めるビット幅。
class RegisterInfo(NamedTuple):
    name: str
    width: int

# @intent:data_structure パネル上で1つの枠にまとめて表示するレジスタ群。
class RegisterLayoutInfo(NamedTuple):
    group_name: str
    registers: List[RegisterInfo]

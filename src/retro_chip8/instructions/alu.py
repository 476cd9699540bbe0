# src/retro_chip8/instructions/alu.py
"""
算術論理演算命令の実装。

VF(レジスタ0xF)はフラグ出力として使われます。フラグは演算結果の書き込み後に設定するため、
x == 0xF の場合でも直後にVFを読むとフラグ値が観測されます。

8xy6 / 8xyE のシフト元について:
    CHIP-8の技術資料ではシフト元がVxかVyかの記述が曖昧です。既定ではVxをその場でシフトし、
    Quirks.shift_uses_vy がTrueの場合はVyをシフトした結果をVxに格納します。
"""
from retro_chip8.core.snapshot import Operation
from retro_chip8.core.state import Chip8State
from .base import ExecutionContext, set_flag

# --- 6xkk LD Vx, byte ---
def execute_ld_vx_kk(state: Chip8State, op: Operation, ctx: ExecutionContext) -> None:
    state.v[op.x] = op.kk

# --- 7xkk ADD Vx, byte ---
# @intent:responsibility 8ビットで折り返す加算。VFは変更しません。
def execute_add_vx_kk(state: Chip8State, op: Operation, ctx: ExecutionContext) -> None:
    state.v[op.x] = (state.v[op.x] + op.kk) & 0xFF

# --- 8xy0 LD Vx, Vy ---
def execute_ld_vx_vy(state: Chip8State, op: Operation, ctx: ExecutionContext) -> None:
    state.v[op.x] = state.v[op.y]

# --- 8xy1 OR Vx, Vy ---
def execute_or(state: Chip8State, op: Operation, ctx: ExecutionContext) -> None:
    state.v[op.x] |= state.v[op.y]

# --- 8xy2 AND Vx, Vy ---
def execute_and(state: Chip8State, op: Operation, ctx: ExecutionContext) -> None:
    state.v[op.x] &= state.v[op.y]

# --- 8xy3 XOR Vx, Vy ---
def execute_xor(state: Chip8State, op: Operation, ctx: ExecutionContext) -> None:
    state.v[op.x] ^= state.v[op.y]

# --- 8xy4 ADD Vx, Vy ---
# @intent:responsibility 加算し、8ビットを超えた場合にVF=1(キャリー)とします。
def execute_add_vx_vy(state: Chip8State, op: Operation, ctx: ExecutionContext) -> None:
    res = state.v[op.x] + state.v[op.y]
    state.v[op.x] = res & 0xFF
    set_flag(state, res > 0xFF)

# --- 8xy5 SUB Vx, Vy ---
# @intent:responsibility Vx - Vy。ボローが発生しなかった場合(Vx >= Vy)にVF=1とします。
def execute_sub(state: Chip8State, op: Operation, ctx: ExecutionContext) -> None:
    vx, vy = state.v[op.x], state.v[op.y]
    state.v[op.x] = (vx - vy) & 0xFF
    set_flag(state, vx >= vy)

# --- 8xy7 SUBN Vx, Vy ---
# @intent:responsibility Vy - Vx。ボローが発生しなかった場合(Vy >= Vx)にVF=1とします。
def execute_subn(state: Chip8State, op: Operation, ctx: ExecutionContext) -> None:
    vx, vy = state.v[op.x], state.v[op.y]
    state.v[op.x] = (vy - vx) & 0xFF
    set_flag(state, vy >= vx)

# --- 8xy6 SHR Vx {, Vy} ---
# @intent:responsibility 右シフトし、押し出された最下位ビットをVFに格納します。
def execute_shr(state: Chip8State, op: Operation, ctx: ExecutionContext) -> None:
    src = state.v[op.y] if ctx.quirks.shift_uses_vy else state.v[op.x]
    state.v[op.x] = src >> 1
    set_flag(state, src & 0x01)

# --- 8xyE SHL Vx {, Vy} ---
# @intent:responsibility 左シフト（8ビットで折り返し）し、押し出された最上位ビットをVFに格納します。
def execute_shl(state: Chip8State, op: Operation, ctx: ExecutionContext) -> None:
    src = state.v[op.y] if ctx.quirks.shift_uses_vy else state.v[op.x]
    state.v[op.x] = (src << 1) & 0xFF
    set_flag(state, src >> 7)

# --- Cxkk RND Vx, byte ---
# @intent:responsibility 一様な8ビット乱数とkkの論理積をVxに格納します。
def execute_rnd(state: Chip8State, op: Operation, ctx: ExecutionContext) -> None:
    state.v[op.x] = ctx.random_byte() & op.kk

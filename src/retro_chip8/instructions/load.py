# src/retro_chip8/instructions/load.py
"""
ロード/ストア命令（Iレジスタ、タイマー、メモリブロック転送）の実装。
"""
from retro_chip8.core.snapshot import Operation
from retro_chip8.core.state import Chip8State, FONT_START, FONT_GLYPH_SIZE
from .base import ExecutionContext

# --- Annn LD I, addr ---
def execute_ld_i(state: Chip8State, op: Operation, ctx: ExecutionContext) -> None:
    state.i = op.nnn

# --- Fx07 LD Vx, DT ---
def execute_ld_vx_dt(state: Chip8State, op: Operation, ctx: ExecutionContext) -> None:
    state.v[op.x] = state.delay_timer

# --- Fx15 LD DT, Vx ---
def execute_ld_dt_vx(state: Chip8State, op: Operation, ctx: ExecutionContext) -> None:
    state.delay_timer = state.v[op.x]

# --- Fx18 LD ST, Vx ---
def execute_ld_st_vx(state: Chip8State, op: Operation, ctx: ExecutionContext) -> None:
    state.sound_timer = state.v[op.x]

# --- Fx1E ADD I, Vx ---
# @intent:responsibility 16ビット加算。フラグは変更しません。
def execute_add_i_vx(state: Chip8State, op: Operation, ctx: ExecutionContext) -> None:
    state.i = (state.i + state.v[op.x]) & 0xFFFF

# --- Fx29 LD F, Vx ---
# @intent:responsibility Vxの値に対応する16進数字スプライトのアドレスをIに設定します。
def execute_ld_f_vx(state: Chip8State, op: Operation, ctx: ExecutionContext) -> None:
    state.i = FONT_START + state.v[op.x] * FONT_GLYPH_SIZE

# --- Fx33 LD B, Vx ---
# @intent:responsibility Vxの10進表現（百の位、十の位、一の位）をI, I+1, I+2に格納します。
def execute_ld_b_vx(state: Chip8State, op: Operation, ctx: ExecutionContext) -> None:
    value = state.v[op.x]
    bus = state.memory
    bus.write(state.i, value // 100)
    bus.write(state.i + 1, (value // 10) % 10)
    bus.write(state.i + 2, value % 10)

# --- Fx55 LD [I], Vx ---
# @intent:responsibility V0からVxまで（両端を含む）をIから始まるメモリに格納します。
def execute_ld_mem_vx(state: Chip8State, op: Operation, ctx: ExecutionContext) -> None:
    for idx in range(op.x + 1):
        state.memory.write(state.i + idx, state.v[idx])
    if ctx.quirks.load_store_increments_i:
        state.i = (state.i + op.x + 1) & 0xFFFF

# --- Fx65 LD Vx, [I] ---
# @intent:responsibility Iから始まるメモリをV0からVxまで（両端を含む）に読み込みます。
def execute_ld_vx_mem(state: Chip8State, op: Operation, ctx: ExecutionContext) -> None:
    for idx in range(op.x + 1):
        state.v[idx] = state.memory.read(state.i + idx)
    if ctx.quirks.load_store_increments_i:
        state.i = (state.i + op.x + 1) & 0xFFFF

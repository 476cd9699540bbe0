# src/retro_chip8/instructions/display.py
"""
表示命令（画面クリア、スプライト描画）の実装。
"""
from retro_chip8.core.snapshot import Operation
from retro_chip8.core.state import Chip8State
from .base import ExecutionContext, set_flag

# --- 00E0 CLS ---
def execute_cls(state: Chip8State, op: Operation, ctx: ExecutionContext) -> None:
    state.clear_display()

# --- Dxyn DRW Vx, Vy, nibble ---
# @intent:responsibility I から始まるnバイトのスプライトを(Vx, Vy)にXOR合成で描画します。
# @intent:post-condition 描画したビットが既存のONピクセルと重なった場合VF=1、それ以外はVF=0。
#                       座標は横64、縦32で折り返されます。
def execute_drw(state: Chip8State, op: Operation, ctx: ExecutionContext) -> None:
    # 座標はVFをリセットする前に読み出す（x, yがVFを指す場合に備える）
    x = state.v[op.x]
    y = state.v[op.y]
    set_flag(state, False)

    collision = False
    for row in range(op.n):
        sprite_byte = state.memory.read(state.i + row)
        if state.framebuffer.draw_row(x, y + row, sprite_byte):
            collision = True
    set_flag(state, collision)

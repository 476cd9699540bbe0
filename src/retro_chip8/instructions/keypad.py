# src/retro_chip8/instructions/keypad.py
"""
キー入力命令の実装。
"""
from retro_chip8.core.snapshot import Operation
from retro_chip8.core.state import Chip8State
from .base import ExecutionContext, skip_next

# --- Ex9E SKP Vx ---
# @intent:responsibility Vxのキーが押されていれば次の命令をスキップします。
def execute_skp(state: Chip8State, op: Operation, ctx: ExecutionContext) -> None:
    if state.keys[state.v[op.x] & 0xF]:
        skip_next(state)

# --- ExA1 SKNP Vx ---
# @intent:responsibility Vxのキーが押されていなければ次の命令をスキップします。
def execute_sknp(state: Chip8State, op: Operation, ctx: ExecutionContext) -> None:
    if not state.keys[state.v[op.x] & 0xF]:
        skip_next(state)

# --- Fx0A LD Vx, K ---
# @intent:responsibility キーが押されるまで待機し、押されたキーの番号をVxに格納します。
# @intent:rationale 待機はスレッドを止めずにPCを2戻すことで表現します。同じ命令が次サイクルで再実行され、
#                  その間にホストがキー状態を更新できます。複数押下時は最小の番号を採用します。
def execute_ld_vx_k(state: Chip8State, op: Operation, ctx: ExecutionContext) -> None:
    for index, pressed in enumerate(state.keys):
        if pressed:
            state.v[op.x] = index
            return
    state.pc = (state.pc - 2) & 0xFFFF

# src/retro_chip8/instructions/control.py
"""
制御命令（ジャンプ、サブルーチン、条件スキップ）の実装。
"""
from retro_chip8.core.errors import StackOverflowError, StackUnderflowError
from retro_chip8.core.snapshot import Operation
from retro_chip8.core.state import Chip8State, STACK_DEPTH
from .base import ExecutionContext, skip_next

# --- 00EE RET ---
# @intent:responsibility スタックから戻りアドレスをポップしてPCに設定します。
# @intent:pre-condition sp > 0 である必要があります。
def execute_ret(state: Chip8State, op: Operation, ctx: ExecutionContext) -> None:
    if state.sp == 0:
        raise StackUnderflowError("Return with empty stack")
    state.sp -= 1
    state.pc = state.stack[state.sp]

# --- 1nnn JP ---
# @intent:responsibility PCをnnnに設定します（+2はしません）。
def execute_jp(state: Chip8State, op: Operation, ctx: ExecutionContext) -> None:
    state.pc = op.nnn

# --- 2nnn CALL ---
# @intent:responsibility 戻りアドレス（次の命令）をプッシュしてからnnnへジャンプします。
# @intent:pre-condition sp < 16 である必要があります。
def execute_call(state: Chip8State, op: Operation, ctx: ExecutionContext) -> None:
    if state.sp >= STACK_DEPTH:
        raise StackOverflowError(f"Call with full stack (depth {STACK_DEPTH})")
    # state.pc is already pointing to the NEXT instruction
    state.stack[state.sp] = state.pc
    state.sp += 1
    state.pc = op.nnn

# --- 3xkk SE Vx, byte ---
def execute_se_vx_kk(state: Chip8State, op: Operation, ctx: ExecutionContext) -> None:
    if state.v[op.x] == op.kk:
        skip_next(state)

# --- 4xkk SNE Vx, byte ---
def execute_sne_vx_kk(state: Chip8State, op: Operation, ctx: ExecutionContext) -> None:
    if state.v[op.x] != op.kk:
        skip_next(state)

# --- 5xy0 SE Vx, Vy ---
def execute_se_vx_vy(state: Chip8State, op: Operation, ctx: ExecutionContext) -> None:
    if state.v[op.x] == state.v[op.y]:
        skip_next(state)

# --- 9xy0 SNE Vx, Vy ---
def execute_sne_vx_vy(state: Chip8State, op: Operation, ctx: ExecutionContext) -> None:
    if state.v[op.x] != state.v[op.y]:
        skip_next(state)

# --- Bnnn JP V0, addr ---
# @intent:responsibility PCをnnn + V0に設定します。
def execute_jp_v0(state: Chip8State, op: Operation, ctx: ExecutionContext) -> None:
    state.pc = (op.nnn + state.v[0]) & 0xFFFF

# retro_chip8/core/cpu.py
"""
Core Layer (CPU)

このモジュールは、CHIP-8マシンの命令サイクル（フェッチ→デコード→PC更新→実行）の駆動と、
ホストから呼ばれる狭いインターフェース（cycle, tick_timers, キー入力, プログラムロード）を提供します。
具体的な命令の振る舞いはInstruction Layerに移譲されます。

並行性:
    cycle()は再入可能ではありません。ホストはcycle()、tick_timers()、キー状態の更新を
    単一の論理スレッド上で直列に呼び出す必要があります。
"""
import logging
import random
from typing import Dict, Iterable, List, Optional

from retro_chip8.common.types import RegisterInfo, RegisterLayoutInfo
from retro_chip8.core.errors import Chip8Error, MachineHaltedError
from retro_chip8.core.framebuffer import FrameSnapshot
from retro_chip8.core.snapshot import Metadata, Operation, Snapshot
from retro_chip8.core.state import Chip8State, NUM_KEYS, NUM_REGISTERS
from retro_chip8.instructions import ExecutionContext, Quirks, decode_opcode, execute_instruction

logger = logging.getLogger(__name__)

# @intent:responsibility CHIP-8の命令サイクルとマシン状態のライフサイクルを管理します。
class Chip8Cpu:
    """
    CHIP-8 CPUをエミュレートするクラス。
    ホストは cycle() を命令レート（通常500Hz）で、tick_timers() を60Hzで、それぞれ独立に呼び出します。
    """
    # @intent:responsibility CPUと初期状態を生成します。
    def __init__(self, quirks: Optional[Quirks] = None, rng: Optional[random.Random] = None):
        self._context = ExecutionContext(
            quirks=quirks if quirks is not None else Quirks(),
            rng=rng if rng is not None else random.Random(),
        )
        self._state: Chip8State = self._create_initial_state()
        self._cycle_count: int = 0
        self._program: bytes = b""
        self._halted_by: Optional[Chip8Error] = None
        # @intent:rationale Stateオブジェクトの直接操作を避けるため、protectedな命名規則を採用。
        #                  外部からのアクセスは`get_state()`などのメソッドを介して行う。

    # @intent:responsibility 初期状態のChip8Stateを生成します（フォントロード済み、画面クリア済み）。
    def _create_initial_state(self) -> Chip8State:
        return Chip8State()

    @property
    def quirks(self) -> Quirks:
        return self._context.quirks

    @property
    def cycle_count(self) -> int:
        return self._cycle_count

    # @intent:responsibility 致命的エラーで停止しているかを返します。
    @property
    def halted(self) -> bool:
        return self._halted_by is not None

    @property
    def last_error(self) -> Optional[Chip8Error]:
        return self._halted_by

    # @intent:responsibility 音を鳴らすべきか（sound_timer != 0）を返します。
    @property
    def sound_active(self) -> bool:
        return self._state.sound_timer != 0

    # @intent:responsibility 現在のマシン状態を返します。
    def get_state(self) -> Chip8State:
        return self._state

    # @intent:responsibility 表示側向けにフレームバッファの不変スナップショットを返します。
    def get_framebuffer(self) -> FrameSnapshot:
        return self._state.framebuffer.snapshot()

    # @intent:responsibility 前回の取得以降に画面が変化していればスナップショットを返し、変化フラグを下ろします。
    # @intent:post-condition 変化がなければNoneを返します。表示側はフレームバッファ本体に触れません。
    def take_frame_if_dirty(self) -> Optional[FrameSnapshot]:
        framebuffer = self._state.framebuffer
        if not framebuffer.dirty:
            return None
        framebuffer.dirty = False
        return framebuffer.snapshot()

    # @intent:responsibility 現在保持しているプログラムイメージのバイト数を返します（未ロードなら0）。
    @property
    def program_size(self) -> int:
        return len(self._program)

    # @intent:responsibility プログラムイメージを0x200からロードし、リセット時に再ロードできるよう保持します。
    def load_program(self, data: Iterable[int]) -> int:
        payload = bytes(data)
        size = self._state.load_program(payload)
        self._program = payload
        logger.info("Loaded program of %d bytes", size)
        return size

    # @intent:responsibility マシンを初期状態に戻し、最後にロードしたプログラムを再ロードします。
    # @intent:rationale 致命的エラーからの再起動にも使います。停止状態もここで解除されます。
    #                  キー状態はホスト側の物理キーを反映したものなので、リセット後も引き継ぎます。
    def reset(self, keep_program: bool = True) -> None:
        held_keys = list(self._state.keys)
        self._state = self._create_initial_state()
        self._state.set_keys(held_keys)
        self._cycle_count = 0
        self._halted_by = None
        if not keep_program:
            self._program = b""
        if self._program:
            self._state.load_program(self._program)
        logger.info("Machine reset")

    # @intent:responsibility 遅延タイマーとサウンドタイマーを1ずつ減らします。cycle()とは独立に呼ばれます。
    def tick_timers(self) -> None:
        self._state.tick_timers()

    # @intent:responsibility キー状態(16個)をまとめて上書きします。
    def set_keys(self, keys: Iterable[bool]) -> None:
        self._state.set_keys(keys)

    def press_key(self, key: int) -> None:
        self._check_key(key)
        self._state.keys[key] = True

    def release_key(self, key: int) -> None:
        self._check_key(key)
        self._state.keys[key] = False

    def _check_key(self, key: int) -> None:
        if not 0 <= key < NUM_KEYS:
            raise ValueError(f"Key index {key} out of range 0x0-0xF.")

    # @intent:responsibility メモリから次のオペコード（ビッグエンディアン16ビット）をフェッチします。
    def _fetch(self) -> int:
        return self._state.memory.read_word(self._state.pc)

    # @intent:responsibility フェッチしたオペコードを解析し、Operationオブジェクトに変換します。
    def _decode(self, opcode: int) -> Operation:
        return decode_opcode(opcode, self._state.pc)

    # @intent:responsibility 命令実行前にPCを命令長分進めます。
    # @intent:rationale ジャンプ/コール命令がPCを直接代入しても二重に進まないよう、実行前に更新します。
    def _update_pc(self, operation: Operation) -> None:
        self._state.pc = (self._state.pc + operation.length) & 0xFFFF

    # @intent:responsibility デコードされた命令を実行し、マシンの状態を更新します。
    def _execute(self, operation: Operation) -> None:
        execute_instruction(operation, self._state, self._context)

    # @intent:responsibility CPUを1命令サイクル進め、その結果のスナップショットを返します。
    # @intent:flow ログクリア -> 停止判定 -> フェッチ -> デコード -> PC更新 -> 実行 -> Snapshot生成
    # @intent:post-condition 致命的エラーは型付き例外として送出され、以降はreset()まで停止状態になります。
    def step(self) -> Snapshot:
        """
        CPUを1命令サイクル進め、その時点のレジスタとバスアクセスを含むSnapshotを返します。
        """
        if self._halted_by is not None:
            raise MachineHaltedError(f"Machine halted by: {self._halted_by}")

        bus = self._state.memory
        bus.get_and_clear_activity_log()
        initial_pc = self._state.pc
        opcode: Optional[int] = None

        try:
            opcode = self._fetch()
            operation = self._decode(opcode)
            self._update_pc(operation)
            self._execute(operation)
        except Chip8Error as exc:
            exc.attach(initial_pc, opcode)
            self._halted_by = exc
            logger.error("Machine halted: %s", exc)
            raise

        return self._create_snapshot(initial_pc, operation)

    # @intent:responsibility ホスト向けの単一ステップ実行プリミティブです（step()と同じ）。
    def cycle(self) -> Snapshot:
        return self.step()

    # @intent:responsibility スナップショットを生成します。
    def _create_snapshot(self, initial_pc: int, operation: Operation) -> Snapshot:
        bus_activity = self._state.memory.get_and_clear_activity_log()
        self._cycle_count += 1

        symbol_info = f"{initial_pc:#05x}: {operation.text()}"
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(symbol_info)

        return Snapshot(
            state=self._state.freeze(),
            operation=operation,
            metadata=Metadata(cycle_count=self._cycle_count, address=initial_pc, symbol_info=symbol_info),
            bus_activity=bus_activity,
        )

    # @intent:responsibility UI表示用に、現在のレジスタ値を辞書形式で提供します。
    def get_register_map(self) -> Dict[str, int]:
        s = self._state
        reg_map = {f"V{idx:X}": s.v[idx] for idx in range(NUM_REGISTERS)}
        reg_map.update({"I": s.i, "PC": s.pc, "SP": s.sp, "DT": s.delay_timer, "ST": s.sound_timer})
        return reg_map

    # @intent:responsibility UIのレジスタ表示レイアウト（グループ化）を定義します。
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [
            RegisterLayoutInfo("General Purpose", [RegisterInfo(f"V{idx:X}", 8) for idx in range(NUM_REGISTERS)]),
            RegisterLayoutInfo("Index/Pointers", [
                RegisterInfo("I", 16), RegisterInfo("PC", 16), RegisterInfo("SP", 8)
            ]),
            RegisterLayoutInfo("Timers", [
                RegisterInfo("DT", 8), RegisterInfo("ST", 8)
            ]),
        ]

# retro_chip8/transport/bus.py
"""
Transport Layer (メモリバス)

このモジュールは、CHIP-8の4KiBアドレス空間を抽象化し、
範囲チェック付きの読み書きとアクセスの記録を行う責務を負います。
"""
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List

from retro_chip8.core.errors import MemoryAccessError

MEMORY_SIZE = 0x1000

# @intent:responsibility 記録したメモリアクセスが読み出しか書き込みかを区別します。
class BusAccessType(Enum):
    READ = "READ"
    WRITE = "WRITE"

# @intent:responsibility 1命令の実行中に発生した1バイト分のメモリアクセスです。Snapshotに格納されます。
@dataclass(frozen=True)
class BusAccess:
    address: int
    data: int
    access_type: BusAccessType

# @intent:responsibility CHIP-8のメモリ空間を保持し、全ての命令からのアクセスを仲介します。
# @intent:rationale 命令ごとのアクセスを記録し、Snapshotに含めることでシステムの観測可能性を高めます。
class Bus:
    """
    4KiBのメモリ空間を保持するバス。
    範囲外アクセスはMemoryAccessErrorとして報告されます。
    """
    # @intent:responsibility 指定サイズのゼロクリアされたメモリとアクセスログを初期化します。
    # @intent:pre-condition sizeは正の整数である必要があります。
    def __init__(self, size: int = MEMORY_SIZE):
        if not isinstance(size, int) or size <= 0:
            raise ValueError("Memory size must be a positive integer.")
        self._memory = bytearray(size)
        self._size = size
        self._bus_activity_log: List[BusAccess] = []

    # @intent:responsibility メモリのサイズを返します。
    def get_size(self) -> int:
        return self._size

    def _check(self, address: int) -> None:
        if not 0 <= address < self._size:
            raise MemoryAccessError(f"Address {address:#06x} out of bounds for memory of size {self._size:#06x}")

    # @intent:responsibility 命令実行中のアクセスを順に記録します。
    def _log_access(self, address: int, data: int, access_type: BusAccessType) -> None:
        self._bus_activity_log.append(BusAccess(address=address, data=data, access_type=access_type))

    # @intent:responsibility 前回の呼び出し以降に記録されたアクセスを返し、記録を空にします。
    # @intent:rationale Chip8Cpu.step()はフェッチ前とSnapshot生成時に呼び、1命令分のアクセスだけを切り出します。
    def get_and_clear_activity_log(self) -> List[BusAccess]:
        log = self._bus_activity_log
        self._bus_activity_log = []
        return log

    # @intent:responsibility 1バイトを読み出し、アクセスとして記録します。
    # @intent:pre-condition アドレスはメモリの有効範囲内である必要があります。
    def read(self, address: int) -> int:
        self._check(address)
        data = self._memory[address]
        self._log_access(address, data, BusAccessType.READ)
        return data

    # @intent:responsibility 記録を残さずに1バイトを参照します（表示やテスト用）。
    def peek(self, address: int) -> int:
        self._check(address)
        return self._memory[address]

    # @intent:responsibility 1バイトを書き込み、アクセスとして記録します。
    def write(self, address: int, data: int) -> None:
        self._check(address)
        if not 0 <= data <= 0xFF:
            raise ValueError(f"Cannot store {data} at {address:#05x}: not a byte value.")
        self._memory[address] = data
        self._log_access(address, data, BusAccessType.WRITE)

    # @intent:responsibility ビッグエンディアンの16ビットワードを読み込みます（命令フェッチ用）。
    def read_word(self, address: int) -> int:
        self._check(address)
        self._check(address + 1)
        return (self.read(address) << 8) | self.read(address + 1)

    # @intent:responsibility ローダー用に、ログを残さずバイト列を一括で書き込みます。
    # @intent:pre-condition 書き込み範囲全体がメモリ内に収まる必要があります。範囲外の場合は何も書き込みません。
    def load(self, address: int, data: Iterable[int]) -> int:
        payload = bytes(data)
        if payload:
            self._check(address)
            self._check(address + len(payload) - 1)
        self._memory[address:address + len(payload)] = payload
        return len(payload)

    # @intent:responsibility 指定範囲のメモリ内容をログなしで返します。
    def dump(self, address: int, length: int) -> bytes:
        if length <= 0:
            return b""
        self._check(address)
        self._check(address + length - 1)
        return bytes(self._memory[address:address + length])

from dataclasses import dataclass, field
from typing import Dict, Optional

# @intent:constant COSMAC VIPの16キー配列をQWERTYキーボードの左側4x4に割り当てた既定のキーマップ。
#   1 2 3 C        1 2 3 4
#   4 5 6 D   <-   Q W E R
#   7 8 9 E        A S D F
#   A 0 B F        Z X C V
DEFAULT_KEYMAP: Dict[str, int] = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "q": 0x4, "w": 0x5, "e": 0x6, "r": 0xD,
    "a": 0x7, "s": 0x8, "d": 0x9, "f": 0xE,
    "z": 0xA, "x": 0x0, "c": 0xB, "v": 0xF,
}

@dataclass
class QuirkConfig:
    shift_uses_vy: bool = False
    load_store_increments_i: bool = False

@dataclass
class DisplayConfig:
    scale: int = 10
    foreground: str = "#33FF66"
    background: str = "#101010"

@dataclass
class SystemConfig:
    rom: Optional[str] = None
    cycles_per_second: int = 500
    timer_hz: int = 60
    seed: Optional[int] = None
    log_level: str = "WARNING"
    quirks: QuirkConfig = field(default_factory=QuirkConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    keymap: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_KEYMAP))

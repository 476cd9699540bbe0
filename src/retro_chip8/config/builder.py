import logging
import random
from typing import Dict

from retro_chip8.core.cpu import Chip8Cpu
from retro_chip8.core.state import NUM_KEYS
from retro_chip8.instructions import Quirks
from retro_chip8.loader.loader import RomLoader
from .models import SystemConfig, QuirkConfig

logger = logging.getLogger(__name__)

# @intent:responsibility システム構成（Config）に基づいて、CPUを生成し、互換フラグ・乱数源・ROMを適用します。
class SystemBuilder:
    def build_system(self, config: SystemConfig) -> Chip8Cpu:
        cpu = Chip8Cpu(
            quirks=self.build_quirks(config.quirks),
            rng=random.Random(config.seed),
        )
        if config.rom:
            RomLoader().load_rom(config.rom, cpu)
        return cpu

    def build_quirks(self, quirk_config: QuirkConfig) -> Quirks:
        return Quirks(
            shift_uses_vy=quirk_config.shift_uses_vy,
            load_store_increments_i=quirk_config.load_store_increments_i,
        )

    # @intent:responsibility キーマップから範囲外のCHIP-8キーを除外します。
    # @intent:rationale 不正なエントリは起動を妨げず、警告を出して無視します。
    def build_keymap(self, config: SystemConfig) -> Dict[str, int]:
        keymap = {}
        for host_key, chip8_key in config.keymap.items():
            if not 0 <= chip8_key < NUM_KEYS:
                logger.warning("Ignoring keymap entry '%s' -> %#x: CHIP-8 key out of range", host_key, chip8_key)
                continue
            keymap[host_key] = chip8_key
        return keymap

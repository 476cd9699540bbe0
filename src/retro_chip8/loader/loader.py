# retro_chip8/loader/loader.py
"""
ROMローダーモジュール。
生のバイナリイメージ（ビッグエンディアンの命令列）を読み込み、0x200からロードします。
"""
import logging

from retro_chip8.core.cpu import Chip8Cpu

logger = logging.getLogger(__name__)

class RomLoader:
    """
    CHIP-8 ROMファイルを読み込み、CPUのメモリへロードするローダー。
    0x200からメモリ末尾までに収まらない場合はProgramTooLargeErrorを送出します。
    """
    def load_rom(self, file_path: str, cpu: Chip8Cpu) -> int:
        with open(file_path, 'rb') as f:
            data = f.read()
        size = cpu.load_program(data)
        logger.info("Loaded ROM %s (%d bytes)", file_path, size)
        return size

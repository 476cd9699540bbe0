# src/retro_chip8/ui/app.py
"""
Qtアプリケーションのエントリポイント。
設定とROMを読み込み、メインウィンドウを起動します。
"""
import argparse
import logging
import sys
from typing import List, Optional

from PySide6.QtWidgets import QApplication

from retro_chip8.config.loader import ConfigLoader
from retro_chip8.config.models import SystemConfig
from .main_window import MainWindow

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="retro-chip8", description="CHIP-8 emulator")
    parser.add_argument("rom", nargs="?", help="path to a raw CHIP-8 ROM image")
    parser.add_argument("--config", help="YAML system configuration")
    parser.add_argument("--scale", type=int, help="display scale factor")
    return parser.parse_args(argv)

# @intent:responsibility コマンドライン引数を設定ファイルの内容に上書き適用します。
def build_config(args: argparse.Namespace) -> SystemConfig:
    config = ConfigLoader().load_from_file(args.config) if args.config else SystemConfig()
    if args.rom:
        config.rom = args.rom
    if args.scale:
        config.display.scale = args.scale
    return config

# @intent:responsibility アプリケーションを起動し、メインウィンドウを表示します。
def main(argv: Optional[List[str]] = None):
    args = parse_args(argv)
    config = build_config(args)
    logging.basicConfig(level=config.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    app = QApplication(sys.argv[:1])
    main_win = MainWindow(config)
    main_win.show()
    if main_win.cpu.program_size:
        main_win.run_action.trigger()
    sys.exit(app.exec())

if __name__ == '__main__':
    main()

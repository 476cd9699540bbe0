# src/retro_chip8/ui/keypad_view.py
"""
16キーパッドの凡例ウィジェット。

COSMAC VIPの配列どおりに4x4で並べ、各キーに割り当てられたホストのキーと
現在押されているかどうかを表示します。
"""
from typing import Dict, Sequence

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QGridLayout, QLabel, QWidget

from retro_chip8.ui.keymap import KeyMapper

# @intent:constant 画面上の並び順（上段から）。
KEYPAD_ROWS = (
    (0x1, 0x2, 0x3, 0xC),
    (0x4, 0x5, 0x6, 0xD),
    (0x7, 0x8, 0x9, 0xE),
    (0xA, 0x0, 0xB, 0xF),
)

IDLE_STYLE = "border: 1px solid #333; color: #BBBBBB;"
PRESSED_STYLE = "border: 1px solid #00AAAA; background-color: #00AAAA; color: #121212;"

# @intent:responsibility キー割り当ての凡例と押下状態を表示します。
class KeypadView(QWidget):
    def __init__(self, key_mapper: KeyMapper, parent=None):
        super().__init__(parent)
        self._cells: Dict[int, QLabel] = {}
        grid = QGridLayout(self)
        grid.setSpacing(2)
        for row, keys in enumerate(KEYPAD_ROWS):
            for col, key in enumerate(keys):
                host = "/".join(k.upper() for k in key_mapper.host_keys_for(key)) or "-"
                cell = QLabel(f"{key:X}\n{host}")
                cell.setAlignment(Qt.AlignCenter)
                cell.setStyleSheet(IDLE_STYLE)
                grid.addWidget(cell, row, col)
                self._cells[key] = cell

    # @intent:responsibility 押下中のキーを強調表示します。
    def update_keys(self, keys: Sequence[bool]) -> None:
        for key, cell in self._cells.items():
            cell.setStyleSheet(PRESSED_STYLE if keys[key] else IDLE_STYLE)

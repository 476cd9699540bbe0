# src/retro_chip8/ui/register_view.py
"""
CHIP-8のレジスタとコールスタックを表示するパネル。

レジスタ欄はChip8Cpu.get_register_layout()のグループ定義から生成し、
V0-VFのように数の多いグループは4列のグリッドに並べます。
"""
from typing import Dict, Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QGridLayout, QGroupBox, QLabel, QListWidget, QVBoxLayout, QWidget

from retro_chip8.core.cpu import Chip8Cpu
from retro_chip8.core.state import STACK_DEPTH
from retro_chip8.ui.fonts import get_monospace_font_family

GRID_COLUMNS = 4

GROUP_STYLE = """
    QGroupBox { font-weight: bold; border: 1px solid #222; border-radius: 4px; margin-top: 18px; color: #EEE; }
    QGroupBox::title { subcontrol-origin: margin; left: 8px; padding: 0 4px; color: #00AAAA; }
"""

# @intent:responsibility レジスタ値とスタック内容をサイクルごとに表示します。
class RegisterView(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setStyleSheet("background-color: #121212; color: #BBBBBB;")
        self._font_family = get_monospace_font_family()
        self._cpu: Optional[Chip8Cpu] = None
        self._register_labels: Dict[str, QLabel] = {}
        self._digits: Dict[str, int] = {}

        self._root = QVBoxLayout(self)
        self._root.setContentsMargins(5, 5, 5, 5)
        self._stack_list: Optional[QListWidget] = None

    # @intent:responsibility 表示対象のCPUを差し替え、パネルを組み立て直します。
    def set_cpu(self, cpu: Chip8Cpu) -> None:
        self._cpu = cpu
        self._rebuild()
        self.update_registers()

    def _rebuild(self) -> None:
        while self._root.count():
            widget = self._root.takeAt(0).widget()
            if widget is not None:
                widget.deleteLater()
        self._register_labels.clear()
        self._digits.clear()

        for group in self._cpu.get_register_layout():
            box = QGroupBox(group.group_name)
            box.setStyleSheet(GROUP_STYLE)
            grid = QGridLayout(box)
            grid.setSpacing(3)
            for index, reg in enumerate(group.registers):
                row, col = divmod(index, GRID_COLUMNS)
                self._digits[reg.name] = (reg.width + 3) // 4
                value = QLabel()
                value.setStyleSheet(f"font-family: '{self._font_family}', monospace; color: #FFD700;")
                value.setAlignment(Qt.AlignRight)
                grid.addWidget(QLabel(reg.name), row, col * 2)
                grid.addWidget(value, row, col * 2 + 1)
                self._register_labels[reg.name] = value
            self._root.addWidget(box)

        self._stack_list = QListWidget()
        self._stack_list.setStyleSheet(f"font-family: '{self._font_family}', monospace;")
        stack_box = QGroupBox("Stack")
        stack_box.setStyleSheet(GROUP_STYLE)
        QVBoxLayout(stack_box).addWidget(self._stack_list)
        self._root.addWidget(stack_box)
        self._root.addStretch()

    # @intent:responsibility 現在のレジスタ値とスタック（使用中の段のみ、上が最新）を反映します。
    def update_registers(self) -> None:
        if self._cpu is None:
            return
        for name, value in self._cpu.get_register_map().items():
            label = self._register_labels.get(name)
            if label is not None:
                label.setText(f"0x{value:0{self._digits[name]}X}")

        state = self._cpu.get_state()
        self._stack_list.clear()
        for depth in reversed(range(min(state.sp, STACK_DEPTH))):
            self._stack_list.addItem(f"{depth:2d}: 0x{state.stack[depth]:03X}")

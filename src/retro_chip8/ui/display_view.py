"""
Display View モジュール。

CHIP-8のフレームバッファ（64x32）を拡大して描画するウィジェットを提供します。
表示側はフレームバッファの不変スナップショットのみを参照します。
"""
from typing import Optional

from PySide6.QtWidgets import QWidget
from PySide6.QtCore import QSize
from PySide6.QtGui import QPainter, QColor, QPaintEvent

from retro_chip8.core.framebuffer import FrameSnapshot, WIDTH, HEIGHT

# @intent:responsibility フレームバッファのスナップショットを拡大表示します。
class DisplayView(QWidget):
    """
    フレームバッファを描画するウィジェット。
    """
    def __init__(self, scale: int = 10, foreground: str = "#33FF66", background: str = "#101010", parent=None):
        super().__init__(parent)
        self._scale = scale
        self._foreground = QColor(foreground)
        self._background = QColor(background)
        self._frame: Optional[FrameSnapshot] = None
        self.setFixedSize(self.sizeHint())

    def sizeHint(self) -> QSize:
        return QSize(WIDTH * self._scale, HEIGHT * self._scale)

    # @intent:responsibility 新しいスナップショットを受け取り、再描画を要求します。
    def update_frame(self, frame: FrameSnapshot) -> None:
        self._frame = frame
        self.update()

    def paintEvent(self, event: QPaintEvent):
        painter = QPainter(self)
        painter.fillRect(self.rect(), self._background)
        if self._frame is not None:
            scale = self._scale
            for y, row in enumerate(self._frame):
                for x, lit in enumerate(row):
                    if lit:
                        painter.fillRect(x * scale, y * scale, scale, scale, self._foreground)
        painter.end()

# retro_chip8/core/framebuffer.py
"""
Core Layer (フレームバッファ)

64x32のモノクロ表示を保持します。変更はクリアとスプライト描画のみで行われ、
表示側には不変のスナップショットとしてのみ公開されます。
"""
from typing import List, Tuple

WIDTH = 64
HEIGHT = 32

FrameSnapshot = Tuple[Tuple[bool, ...], ...]

# @intent:responsibility 表示状態（ピクセルのON/OFF）を行優先で保持します。
class FrameBuffer:
    """
    CHIP-8のフレームバッファ。32行 x 64列のブール値グリッド。
    """
    def __init__(self, width: int = WIDTH, height: int = HEIGHT):
        self.width = width
        self.height = height
        self._pixels: List[List[bool]] = [[False] * width for _ in range(height)]
        self.dirty = True
        # @intent:rationale dirtyフラグは表示側が再描画の要否を判断するためのもので、エミュレーション結果には影響しません。

    # @intent:responsibility 全てのピクセルをOFFにします。何度呼んでも結果は同じです。
    def clear(self) -> None:
        for row in self._pixels:
            for col in range(self.width):
                row[col] = False
        self.dirty = True

    # @intent:responsibility 1ピクセルをXOR合成し、既にONだったピクセルに当たったかを返します。
    # @intent:post-condition 座標は画面サイズで折り返されます。
    def xor_pixel(self, x: int, y: int) -> bool:
        row = self._pixels[y % self.height]
        col = x % self.width
        collision = row[col]
        row[col] = not collision
        self.dirty = True
        return collision

    # @intent:responsibility 8ビット幅のスプライト行を描画し、衝突の有無を返します。
    def draw_row(self, x: int, y: int, sprite_byte: int) -> bool:
        collision = False
        for bit in range(8):
            if sprite_byte & (0x80 >> bit):
                if self.xor_pixel(x + bit, y):
                    collision = True
        return collision

    # @intent:responsibility 表示側向けに、現在の内容の不変コピーを返します。
    def snapshot(self) -> FrameSnapshot:
        return tuple(tuple(row) for row in self._pixels)

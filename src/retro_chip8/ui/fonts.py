"""
UIフォント管理モジュール。

レジスタパネルなどで使用する等幅フォントを、プラットフォームに応じて選択します。
"""
from functools import lru_cache

from PySide6.QtGui import QFontDatabase

PREFERRED_FONTS = ("Consolas", "Menlo", "DejaVu Sans Mono", "Courier New")

# @intent:responsibility 現在のシステムで利用可能な等幅フォントファミリー名を返します。
# @intent:rationale フォント一覧の取得は高コストなため、初回の結果をキャッシュします。
@lru_cache(maxsize=1)
def get_monospace_font_family() -> str:
    available_families = QFontDatabase.families()
    for font in PREFERRED_FONTS:
        if font in available_families:
            return font
    return QFontDatabase.systemFont(QFontDatabase.FixedFont).family()
"""
キーマッピングモジュール。

ホストのキーボード入力（キーの文字）をCHIP-8の16キーパッドの番号へ変換します。
Qtに依存しないため、ウィジェットなしで単体テストできます。
"""
from typing import Dict, Optional

from retro_chip8.config.models import DEFAULT_KEYMAP

# @intent:responsibility ホストのキー文字とCHIP-8キー番号の対応を保持し、変換します。
class KeyMapper:
    def __init__(self, keymap: Optional[Dict[str, int]] = None):
        source = keymap if keymap is not None else DEFAULT_KEYMAP
        self._keymap = {key.lower(): value for key, value in source.items()}

    # @intent:responsibility キー文字に対応するCHIP-8キー番号を返します。割り当てがなければNone。
    def translate(self, key_text: str) -> Optional[int]:
        if not key_text:
            return None
        return self._keymap.get(key_text.lower())

    def host_keys_for(self, chip8_key: int) -> list:
        return sorted(k for k, v in self._keymap.items() if v == chip8_key)

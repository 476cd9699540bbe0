import yaml
from typing import Dict, Any, Optional
from .models import SystemConfig, QuirkConfig, DisplayConfig, DEFAULT_KEYMAP

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

class ConfigLoader:
    def load_from_file(self, path: str) -> SystemConfig:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        return self._parse_config(data or {})

    def load_from_string(self, text: str) -> SystemConfig:
        return self._parse_config(yaml.safe_load(text) or {})

    def _parse_config(self, data: Dict[str, Any]) -> SystemConfig:
        if not isinstance(data, dict):
            raise ValueError("Configuration root must be a mapping.")

        cycles_per_second = self._parse_int(data.get("cycles_per_second", 500))
        timer_hz = self._parse_int(data.get("timer_hz", 60))
        if cycles_per_second <= 0 or timer_hz <= 0:
            raise ValueError("cycles_per_second and timer_hz must be positive.")

        log_level = str(data.get("log_level", "WARNING")).upper()
        if log_level not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {log_level}")

        # Parse Quirks
        quirk_data = self._parse_section(data, "quirks")
        quirks = QuirkConfig(
            shift_uses_vy=self._parse_bool(quirk_data.get("shift_uses_vy", False), "quirks.shift_uses_vy"),
            load_store_increments_i=self._parse_bool(
                quirk_data.get("load_store_increments_i", False), "quirks.load_store_increments_i"
            ),
        )

        # Parse Display
        display_data = self._parse_section(data, "display")
        display = DisplayConfig(
            scale=self._parse_int(display_data.get("scale", 10)),
            foreground=str(display_data.get("foreground", "#33FF66")),
            background=str(display_data.get("background", "#101010")),
        )
        if display.scale <= 0:
            raise ValueError("display.scale must be positive.")

        # Parse Keymap (host key -> CHIP-8 key)
        keymap_data = data.get("keymap")
        if keymap_data is None:
            keymap = dict(DEFAULT_KEYMAP)
        elif not isinstance(keymap_data, dict):
            raise ValueError("keymap must be a mapping of host key to CHIP-8 key.")
        else:
            keymap = {str(key).lower(): self._parse_int(value) for key, value in keymap_data.items()}

        return SystemConfig(
            rom=data.get("rom"),
            cycles_per_second=cycles_per_second,
            timer_hz=timer_hz,
            seed=self._parse_optional_int(data.get("seed")),
            log_level=log_level,
            quirks=quirks,
            display=display,
            keymap=keymap,
        )

    # @intent:responsibility 省略可能なサブセクション（quirks, display）を取り出します。省略時は空の辞書です。
    def _parse_section(self, data: Dict[str, Any], name: str) -> Dict[str, Any]:
        section = data.get(name)
        if section is None:
            return {}
        if not isinstance(section, dict):
            raise ValueError(f"{name} must be a mapping.")
        return section

    # @intent:responsibility YAMLの真偽値だけを受け付けます。"false"のような文字列は曖昧なため拒否します。
    def _parse_bool(self, value: Any, name: str) -> bool:
        if isinstance(value, bool):
            return value
        raise ValueError(f"{name} must be true or false, got {value!r}")

    def _parse_optional_int(self, value: Any) -> Optional[int]:
        if value is None:
            return None
        return self._parse_int(value)

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            if value.lower().startswith("0x"):
                return int(value, 16)
            return int(value)
        raise ValueError(f"Invalid integer format: {value}")

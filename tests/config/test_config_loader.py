import pytest

from retro_chip8.config.loader import ConfigLoader
from retro_chip8.config.models import DEFAULT_KEYMAP, SystemConfig

SAMPLE_YAML = """
rom: roms/pong.ch8
cycles_per_second: 700
timer_hz: 60
seed: "0x2A"
log_level: debug
quirks:
  shift_uses_vy: true
  load_store_increments_i: true
display:
  scale: 12
  foreground: "#FFFFFF"
keymap:
  Up: "0x5"
  down: 8
"""

def test_load_from_string():
    config = ConfigLoader().load_from_string(SAMPLE_YAML)
    assert config.rom == "roms/pong.ch8"
    assert config.cycles_per_second == 700
    assert config.timer_hz == 60
    assert config.seed == 42
    assert config.log_level == "DEBUG"
    assert config.quirks.shift_uses_vy
    assert config.quirks.load_store_increments_i
    assert config.display.scale == 12
    assert config.display.foreground == "#FFFFFF"
    assert config.display.background == "#101010"
    assert config.keymap == {"up": 5, "down": 8}

def test_load_from_file(tmp_path):
    path = tmp_path / "chip8.yaml"
    path.write_text(SAMPLE_YAML)
    config = ConfigLoader().load_from_file(str(path))
    assert config.cycles_per_second == 700
    assert config.keymap["up"] == 5

def test_empty_document_uses_defaults():
    config = ConfigLoader().load_from_string("")
    assert config == SystemConfig()
    assert config.keymap == DEFAULT_KEYMAP
    assert config.keymap is not DEFAULT_KEYMAP

@pytest.mark.parametrize("text", [
    "- 1\n- 2\n",
    "cycles_per_second: 0\n",
    "timer_hz: -60\n",
    "log_level: LOUD\n",
    "display:\n  scale: 0\n",
    "cycles_per_second: fast\n",
    "seed: true\n",
    "seed: 1.5\n",
    "quirks:\n  shift_uses_vy: \"false\"\n",
    "quirks:\n  load_store_increments_i: 1\n",
    "quirks: [shift_uses_vy]\n",
    "quirks: true\n",
    "display: 12\n",
    "keymap: [1, 2]\n",
    "keymap: q\n",
])
def test_invalid_config(text):
    with pytest.raises(ValueError):
        ConfigLoader().load_from_string(text)

def test_quirk_flags_accept_yaml_booleans():
    config = ConfigLoader().load_from_string("quirks:\n  shift_uses_vy: false\n  load_store_increments_i: yes\n")
    assert config.quirks.shift_uses_vy is False
    assert config.quirks.load_store_increments_i is True

def test_empty_sections_use_defaults():
    config = ConfigLoader().load_from_string("quirks:\ndisplay:\n")
    assert config.quirks.shift_uses_vy is False
    assert config.display.scale == 10

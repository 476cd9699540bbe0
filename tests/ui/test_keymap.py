from retro_chip8.config.models import DEFAULT_KEYMAP
from retro_chip8.ui.keymap import KeyMapper

def test_default_layout():
    mapper = KeyMapper()
    assert mapper.translate("1") == 0x1
    assert mapper.translate("4") == 0xC
    assert mapper.translate("x") == 0x0
    assert mapper.translate("v") == 0xF

def test_case_insensitive():
    mapper = KeyMapper()
    assert mapper.translate("Q") == mapper.translate("q") == 0x4

def test_unmapped_and_empty():
    mapper = KeyMapper()
    assert mapper.translate("p") is None
    assert mapper.translate("") is None

def test_default_covers_all_keys():
    assert sorted(DEFAULT_KEYMAP.values()) == list(range(16))

def test_custom_keymap():
    mapper = KeyMapper({"Up": 0x5, "k": 0x5})
    assert mapper.translate("up") == 0x5
    assert mapper.host_keys_for(0x5) == ["k", "up"]
    assert mapper.translate("1") is None

import pytest

from epos.keyboard import Keyboard


def test_plain_letter():
    assert Keyboard().translate(0x1E) == 0x1E61


def test_shifted_letter_via_feed():
    kb = Keyboard()
    assert kb.feed(0x2A) is None
    assert kb.state.lshift
    assert kb.feed(0x1E) == 0x1E41
    assert kb.last_key == 0x1E41


def test_shift_release_restores_lowercase():
    kb = Keyboard()
    kb.feed(0x36)
    kb.feed(0xB6)
    assert not kb.state.rshift
    assert kb.feed(0x1E) == 0x1E61


def test_release_sets_break_bit():
    kb = Keyboard()
    assert kb.translate(0x9E) == kb.translate(0x1E) | 0x8000


def test_ctrl_letter():
    kb = Keyboard()
    kb.feed(0x1D)
    assert kb.feed(0x2E) == 0x2E03


def test_alt_takes_precedence_over_ctrl():
    kb = Keyboard()
    kb.feed(0x1D)
    kb.feed(0x38)
    assert kb.translate(0x1E) == 0x1E00


def test_caps_lock_toggles():
    kb = Keyboard()
    assert kb.set_state(0x3A) is True
    assert kb.state.caps
    assert kb.set_state(0xBA) is True
    assert kb.state.caps
    assert kb.translate(0x1E) == 0x1E41
    kb.set_state(0x3A)
    assert not kb.state.caps


def test_caps_with_shift_uses_lowercase():
    kb = Keyboard()
    kb.feed(0x3A)
    kb.feed(0x2A)
    assert kb.translate(0x1E) == 0x1E61


def test_num_lock_keypad():
    kb = Keyboard()
    assert kb.translate(0x47) == 0x4700
    kb.feed(0x45)
    assert kb.translate(0x47) == 0x4737
    kb.feed(0x2A)
    assert kb.translate(0x47) == 0x4700


@pytest.mark.parametrize("scan", [0xE0, 0xE1, 0x59, 0x7F])
def test_ignored_codes(scan):
    kb = Keyboard()
    assert kb.translate(scan) == 0
    assert kb.feed(scan) is None
    assert kb.last_key is None


def test_non_modifier_not_state():
    kb = Keyboard()
    assert kb.set_state(0x1E) is False
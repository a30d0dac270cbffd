# Copyright (c) 2026 yacurses contributors
# SPDX-License-Identifier: ISC
#
# Key decoding: the raw curses key code -> CursesKey mapping, which must be
# total and deterministic, and its inverse used when pushing keys back.

import pytest

import yacurses
from yacurses import (
    ArrowDown,
    ArrowLeft,
    ArrowRight,
    ArrowUp,
    Backspace,
    Byte,
    CursesKey,
    Delete,
    End,
    Enter,
    Function,
    Home,
    Insert,
    Keypad5,
    PageDown,
    PageUp,
    Resize,
    Unknown,
    decode_key,
    encode_key,
)


def test_enter_codes(fake):
    assert decode_key(10) == Enter()
    assert decode_key(13) == Enter()
    assert decode_key(fake.KEY_ENTER) == Enter()


def test_printable_byte():
    key = decode_key(112)
    assert key == Byte(112)
    assert key.value == 112
    assert key.char == "p"


def test_unknown_code():
    key = decode_key(99999)
    assert key == Unknown(99999)
    assert key.value == 99999


def test_backspace_codes(fake):
    assert decode_key(127) == Backspace()
    assert decode_key(fake.KEY_BACKSPACE) == Backspace()
    # Ctrl-H stays a plain byte
    assert decode_key(8) == Byte(8)


def test_control_and_high_bytes():
    assert decode_key(0) == Byte(0)
    assert decode_key(27) == Byte(27)
    assert decode_key(9) == Byte(9)
    assert decode_key(255) == Byte(255)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("KEY_UP", ArrowUp()),
        ("KEY_DOWN", ArrowDown()),
        ("KEY_LEFT", ArrowLeft()),
        ("KEY_RIGHT", ArrowRight()),
        ("KEY_IC", Insert()),
        ("KEY_DC", Delete()),
        ("KEY_HOME", Home()),
        ("KEY_END", End()),
        ("KEY_PPAGE", PageUp()),
        ("KEY_NPAGE", PageDown()),
        ("KEY_B2", Keypad5()),
        ("KEY_RESIZE", Resize()),
        ("KEY_A1", Home()),
        ("KEY_A3", PageUp()),
        ("KEY_C1", End()),
        ("KEY_C3", PageDown()),
    ],
)
def test_special_keys(fake, name, expected):
    assert decode_key(getattr(fake, name)) == expected


def test_function_keys(fake):
    assert decode_key(fake.KEY_F0) == Function(0)
    assert decode_key(fake.KEY_F0 + 1) == Function(1)
    assert decode_key(fake.KEY_F0 + 12) == Function(12)
    assert decode_key(fake.KEY_F0 + 63) == Function(63)
    # KEY_F0 + 64 is KEY_DL, which isn't a function key
    assert decode_key(fake.KEY_F0 + 64) == Unknown(fake.KEY_F0 + 64)


def test_pdcurses_keypad(fake):
    # Constants that only exist on PDCurses are picked up when present
    fake.KEY_A2 = 0x1C2
    fake.PADENTER = 0x1CB
    fake.PADSTAR = 0x1CF
    assert decode_key(0x1C2) == ArrowUp()
    assert decode_key(0x1CB) == Enter()
    assert decode_key(0x1CF) == Byte.from_char("*")


def test_missing_constants_skipped(fake):
    # On ncurses there's no KEY_A2, so its PDCurses value is unrecognized
    assert decode_key(0x1C2) == Unknown(0x1C2)


def test_negative_codes_are_unknown():
    assert decode_key(-1) == Unknown(-1)
    assert decode_key(-1000) == Unknown(-1000)


def test_decoding_is_total():
    for code in range(-300, 1200):
        key = decode_key(code)
        assert isinstance(key, CursesKey)
        if not 0 <= code <= 255 and isinstance(key, Unknown):
            assert key.value == code


def test_decoding_is_deterministic():
    for code in (0, 10, 112, 127, 259, 265, 410, 99999, -5):
        assert decode_key(code) == decode_key(code)
        assert hash(decode_key(code)) == hash(decode_key(code))


def test_key_equality_by_variant():
    # Same payload, different variant
    assert Byte(5) != Function(5)
    assert Function(5) != Unknown(5)
    assert Enter() != Backspace()
    assert Enter() == Enter()
    assert len({Enter(), Enter(), Byte(1), Byte(1), Function(1)}) == 3


def test_keys_are_immutable():
    key = Byte(65)
    with pytest.raises(AttributeError):
        key.value = 66
    with pytest.raises(AttributeError):
        key._value = 66
    assert key == Byte(65)


def test_byte_range_checked():
    with pytest.raises(ValueError):
        Byte(256)
    with pytest.raises(ValueError):
        Byte(-1)


def test_repr():
    assert repr(Byte(112)) == "Byte(112)"
    assert repr(Enter()) == "Enter()"
    assert repr(Unknown(99999)) == "Unknown(99999)"


@pytest.mark.parametrize(
    "key",
    [
        Byte(112),
        Enter(),
        Backspace(),
        ArrowUp(),
        Delete(),
        Keypad5(),
        Resize(),
        Function(5),
        Unknown(99999),
    ],
)
def test_encode_inverts_decode(key):
    assert decode_key(encode_key(key)) == key


def test_table_follows_module(fake, monkeypatch):
    # A platform with different key values decodes with its own constants
    other = type(fake)()
    other.KEY_UP = 0x1F0
    monkeypatch.setattr(yacurses, "curses", other)
    assert decode_key(0x1F0) == ArrowUp()
    assert decode_key(fake.KEY_UP) != ArrowUp()

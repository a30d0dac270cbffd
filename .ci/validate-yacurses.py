#!/usr/bin/env python3
"""Validate yacurses against the platform's real curses module.

Exercises key decoding with the native KEY_* constants, attribute bit
mapping, and, when a terminal is available, a full session lifecycle:
init, drawing, ACS lookups, and end.

Run from the project root: python .ci/validate-yacurses.py
"""

import os
import sys

# Ensure the project root (CWD) is on the import path, since Python
# adds the script's directory (.ci/) rather than CWD by default.
sys.path.insert(0, os.getcwd())

_IS_WINDOWS = os.name == "nt"


def check_key_decoding():
    """decode_key()/encode_key() with native constants -- no terminal required."""
    import curses

    import yacurses
    from yacurses import decode_key, encode_key

    assert decode_key(10) == yacurses.Enter(), "newline is Enter"
    assert decode_key(13) == yacurses.Enter(), "carriage return is Enter"
    assert decode_key(127) == yacurses.Backspace(), "DEL is Backspace"
    assert decode_key(ord("a")) == yacurses.Byte(ord("a")), "plain byte"
    assert decode_key(-1) == yacurses.Unknown(-1), "ERR is Unknown"

    for name, key in (
        ("KEY_UP", yacurses.ArrowUp()),
        ("KEY_DOWN", yacurses.ArrowDown()),
        ("KEY_LEFT", yacurses.ArrowLeft()),
        ("KEY_RIGHT", yacurses.ArrowRight()),
        ("KEY_HOME", yacurses.Home()),
        ("KEY_END", yacurses.End()),
        ("KEY_PPAGE", yacurses.PageUp()),
        ("KEY_NPAGE", yacurses.PageDown()),
        ("KEY_IC", yacurses.Insert()),
        ("KEY_DC", yacurses.Delete()),
        ("KEY_BACKSPACE", yacurses.Backspace()),
        ("KEY_ENTER", yacurses.Enter()),
        ("KEY_RESIZE", yacurses.Resize()),
    ):
        code = getattr(curses, name, None)
        if code is None:
            print("  {} missing on this platform, skipped".format(name))
            continue
        assert decode_key(code) == key, name
        assert decode_key(encode_key(key)) == key, name + " round trip"

    for n in range(13):
        assert decode_key(curses.KEY_F0 + n) == yacurses.Function(n), "F{}".format(n)

    # Every code decodes to something
    for code in range(-10, 1024):
        assert isinstance(decode_key(code), yacurses.CursesKey), code

    print("Key decoding checks passed")


def check_attributes():
    """Attribute bit mapping with native A_* constants."""
    import curses

    from yacurses import Attributes, attributes_from_native, native_attributes

    assert native_attributes(Attributes.BOLD) == curses.A_BOLD, "BOLD bit"
    assert native_attributes(Attributes(0)) == 0, "empty set"

    every = Attributes(0)
    for attr in Attributes:
        every |= attr
    bits = native_attributes(every)
    assert bits & curses.A_CHARTEXT == 0, "attribute bits overlap characters"
    assert attributes_from_native(bits) == attributes_from_native(
        native_attributes(attributes_from_native(bits))
    ), "stable round trip"

    print("Attribute checks passed")


def check_session():
    """Full Curses session lifecycle.

    Requires a real TTY on stdin/stdout (a native console on Windows).
    """
    if not (os.isatty(sys.stdin.fileno()) and os.isatty(sys.stdout.fileno())):
        print("Session checks skipped (no TTY)")
        return

    import yacurses
    from yacurses import Curses, Position

    with Curses() as win:
        size = win.get_terminal_size()
        assert size.x_count > 0 and size.y_count > 0, "terminal size"

        win.move_cursor(Position(0, 0))
        win.print_str("yacurses")
        assert win.read_str(Position(0, 0), 8) == "yacurses", "read back"
        assert win.get_cursor_position() == Position(8, 0), "cursor advanced"

        for name in yacurses.ACS_NAMES:
            try:
                win.acs(name)
            except yacurses.UnsupportedCapability:
                print("  no {} glyph on this platform".format(name))

        try:
            win.move_cursor(Position(size.x_count, 0))
        except yacurses.OutOfBounds:
            pass
        else:
            raise AssertionError("move past the right edge accepted")

        win.set_timeout(0)
        win.flush_events()
        assert win.poll_events() is None, "no pending input"
        win.refresh()

    assert not win.active, "session ended"
    # A new session can start once the old one has ended
    yacurses.run(lambda win: win.refresh())
    print("Session checks passed")


if __name__ == "__main__":
    check_key_decoding()
    check_attributes()
    check_session()
    print("All checks passed")

#!/usr/bin/env python3

# Copyright (c) 2026 yacurses contributors
# SPDX-License-Identifier: ISC

"""
Small demos of the yacurses session API. Each demo waits for a key before
exiting and restores the terminal however it exits.

Sample usage:

  $ yacurses-demo hello
  $ yacurses-demo --no-color keys

Demos:

  hello       Prints "Hello world!" at column 3, row 2
  attributes  Prints a line with each text attribute
  ascii       Prints every alternate character set glyph
  keys        Shows each decoded key until 'q' is pressed. 'p' drops to the
              shell and prints color and screen information.
"""

import argparse
import sys

import yacurses
from yacurses import Attributes, Byte, ColorID, CursorVisibility, Position, Unknown


def hello(win):
    win.move_cursor(Position(3, 2))
    win.print_str("Hello world!")
    win.refresh()
    win.poll_events()


def attributes(win):
    for attr, text in (
        (Attributes.UNDERLINE, "Underlined text"),
        (Attributes.REVERSE, "Color inversed"),
        (Attributes.BLINK, "Blinking text"),
        (Attributes.BOLD, "Bold text"),
        (Attributes.INVIS, "Invisible text"),
        (Attributes.ITALIC, "Italic text"),
        (Attributes.BOLD | Attributes.UNDERLINE, "Bold and underlined text"),
    ):
        win.set_attributes(attr, True)
        win.print_str(text + "\n")
        win.set_attributes(attr, False)

    win.refresh()
    win.poll_events()


def ascii_chars(win):
    for name in yacurses.ACS_NAMES:
        try:
            win.print_ch(win.acs(name))
        except yacurses.UnsupportedCapability:
            win.print_ch("?")

    win.refresh()
    win.poll_events()


def _print_shell_info(win):
    # Prints color and screen information while in shell mode

    max_id = win.get_max_color_id()
    if max_id is not None:
        for cid in range(min(max_id, 7) + 1):
            r, g, b = win.get_color_id_rgb(ColorID(cid))
            print(f"{ColorID(cid)!r}: [{r:.3f}, {g:.3f}, {b:.3f}]")
    print("cursor:", win.get_cursor_position())
    print("size:", win.get_terminal_size())
    print("max color id:", max_id)
    print("max color pair:", win.get_max_color_pair())
    input("Press Enter to return ")


def keys(win):
    win.set_echo(False)
    win.set_cursor_visibility(CursorVisibility.INVISIBLE)
    if win.can_change_colors():
        win.set_color_id_rgb(ColorID.WHITE, (1.0, 1.0, 1.0))

    size = win.get_terminal_size()
    win.move_cursor(Position(0, 0))
    win.print_str("Press keys ('q' quits, 'p' shows terminal info)")

    # Box the key display in with line-drawing glyphs
    width = min(size.x_count - 1, 40)
    win.move_cursor(Position(0, 1))
    win.print_ch(win.acs_ulcorner())
    win.copy_glyphs([win.acs_hline()] * (width - 2))
    win.move_cursor(Position(width - 1, 1))
    win.print_ch(win.acs_urcorner())
    win.refresh()

    quit_key = Byte.from_char("q")
    info_key = Byte.from_char("p")
    while True:
        key = win.poll_events()
        if key == quit_key:
            break
        if key == info_key:
            with win.shell_mode():
                _print_shell_info(win)
            continue

        win.move_cursor(Position(1, 2))
        win.print_str(f"{key!r:<{width - 2}}"[: width - 2])
        if isinstance(key, Unknown):
            win.move_cursor(Position(1, 3))
            win.print_str(f"unknown key code {key.value}")
        win.refresh()


_DEMOS = {
    "hello": hello,
    "attributes": attributes,
    "ascii": ascii_chars,
    "keys": keys,
}


def main():
    parser = argparse.ArgumentParser(
        formatter_class=argparse.RawDescriptionHelpFormatter, description=__doc__
    )

    parser.add_argument(
        "demo",
        nargs="?",
        default="hello",
        choices=sorted(_DEMOS),
        help="Demo to run (default: hello)",
    )

    parser.add_argument(
        "--no-color",
        dest="color",
        action="store_false",
        default=None,
        help="Don't start colors, even if the terminal has them",
    )

    args = parser.parse_args()

    try:
        with yacurses.Curses(color=args.color) as win:
            _DEMOS[args.demo](win)
    except KeyboardInterrupt:
        pass
    except yacurses.CursesError as e:
        sys.exit(f"{parser.prog}: {e}")


if __name__ == "__main__":
    main()

#!/usr/bin/env python3

# Copyright (c) 2026 yacurses contributors
# SPDX-License-Identifier: ISC

"""
yacurses -- yet another curses wrapper

A safe session layer over the standard library curses module (ncurses on
Unix, PDCurses through windows-curses on Windows). curses keeps its state in
C globals, is not thread-safe, reports failure through ERR return codes and
needs its calls made in a strict order. This module hides all of that behind
one owning handle:

  with yacurses.Curses() as win:
      win.move_cursor(yacurses.Position(3, 2))
      win.print_str("Hello world!")
      win.refresh()
      key = win.poll_events()

Overview
========

Curses:
  The session. Constructing it initializes curses (only one may be active at
  a time, and only from the thread that created it). end(), leaving the
  'with' block, or run() puts the terminal back the way it was.

Attributes:
  Flag set of text attributes (BOLD, UNDERLINE, ...), applied and removed in
  batches with Curses.set_attributes().

CursesKey:
  Closed set of decoded keys. decode_key() turns a raw curses key code into
  one, never failing: codes it doesn't recognize become Unknown(code).

Alternate character set:
  Curses.acs_hline(), Curses.acs_ulcorner(), etc., return line-drawing and
  symbol glyphs for the current terminal.

Errors
======

Every failed curses call raises a subclass of CursesError (WriteFailure,
RefreshFailure, OutOfBounds, AttributeFailure, ReadFailure,
UnsupportedCapability, SessionError) naming the operation that failed.

Environment
===========

NO_COLOR:
  If set to a non-empty value, colors are not started.

YACURSES_COLOR:
  "0"/"no"/"false"/"off" disables colors, "1"/"yes"/"true"/"on" enables them
  (overriding NO_COLOR).

YACURSES_ESCDELAY:
  Milliseconds to wait after ESC for the rest of an escape sequence.
"""

import contextlib
import curses
import enum
import functools
import os
import sys
import threading
import weakref
from collections import namedtuple


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class CursesError(Exception):
    """
    Base class for errors raised by session operations.

    op:
      Name of the operation that failed, e.g. "move_cursor" or "refresh".
    """

    def __init__(self, op, message=None):
        self.op = op
        self.message = message
        super().__init__(f"{op}: {message}" if message else f"{op} failed")


class WriteFailure(CursesError):
    """A character or string write was rejected."""


class RefreshFailure(CursesError):
    """Flushing the off-screen buffer to the terminal failed."""


class OutOfBounds(CursesError):
    """A position, row, color or pair lies outside what the terminal has."""


class AttributeFailure(CursesError):
    """An attribute or mode toggle was rejected."""


class ReadFailure(CursesError):
    """Reading (or pushing back) input failed."""


class UnsupportedCapability(CursesError):
    """The terminal lacks the capability the operation needs."""


class SessionError(CursesError):
    """
    The session was used outside its lifecycle: a second session while one is
    active, use after end(), or use from a thread other than the owner.
    """


def _native(op, exc_class, func, *args):
    # Calls a curses function, turning curses.error (ERR from the C call) into
    # 'exc_class'

    try:
        return func(*args)
    except curses.error as e:
        raise exc_class(op, str(e) or None) from e


def _warn(*args):
    # Prints a warning to stderr. If a session is active, curses mode is left
    # while printing, as the warning would get mangled otherwise.

    session = _session
    suspended = False
    if session is not None and session.win is not None and not session.ended:
        try:
            curses.endwin()
            suspended = True
        except curses.error:
            pass

    print("yacurses warning: ", end="", file=sys.stderr)
    print(*args, file=sys.stderr)

    if suspended:
        try:
            session.win.refresh()
        except curses.error:
            pass


# ---------------------------------------------------------------------------
# Plain value types
# ---------------------------------------------------------------------------


class Position(namedtuple("Position", "x y")):
    """
    A cell on the screen. 'x' is the column and 'y' the row, both counted
    from 0 at the top-left corner.
    """

    __slots__ = ()


class TerminalSize(namedtuple("TerminalSize", "x_count y_count")):
    """
    The extents of the screen. Valid positions have 0 <= x < x_count and
    0 <= y < y_count.
    """

    __slots__ = ()

    def contains(self, pos):
        """True if the Position (or (x, y) tuple) 'pos' is on the screen."""
        x, y = pos
        return 0 <= x < self.x_count and 0 <= y < self.y_count


class CursorVisibility(enum.IntEnum):
    """Use with Curses.set_cursor_visibility()."""

    INVISIBLE = 0
    NORMAL = 1
    # Not supported by all terminals
    VERY_VISIBLE = 2


class ColorID(int):
    """
    Index into the terminal's color palette. Not an RGB value.

    The named constants give the index most likely to show as that color by
    default. Terminals with color have at least 8 slots.
    """

    __slots__ = ()

    _NAMES = {}

    def __repr__(self):
        name = ColorID._NAMES.get(int(self))
        return "ColorID." + name if name else f"ColorID({int(self)})"


ColorID.BLACK = ColorID(0)
ColorID.RED = ColorID(1)
ColorID.GREEN = ColorID(2)
ColorID.YELLOW = ColorID(3)
ColorID.BLUE = ColorID(4)
ColorID.MAGENTA = ColorID(5)
ColorID.CYAN = ColorID(6)
ColorID.WHITE = ColorID(7)

for _attr in ("BLACK", "RED", "GREEN", "YELLOW", "BLUE", "MAGENTA", "CYAN", "WHITE"):
    ColorID._NAMES[int(getattr(ColorID, _attr))] = _attr
del _attr


# ---------------------------------------------------------------------------
# Attributes
# ---------------------------------------------------------------------------


class Attributes(enum.Flag):
    """
    Text attributes that can be applied to a cell. Combine with '|', remove
    with '& ~'. Attributes(0) is the empty set.

    What actually shows depends on the terminal. The Linux console, for
    example, has no underline, italic or invisible text. Unsupported
    attributes are ignored by curses.
    """

    # Usually the same as REVERSE
    STANDOUT = enum.auto()
    UNDERLINE = enum.auto()
    REVERSE = enum.auto()
    BLINK = enum.auto()
    DIM = enum.auto()
    BOLD = enum.auto()
    # Draw from the alternate character set (line drawing)
    ALT_CHAR_SET = enum.auto()
    INVIS = enum.auto()
    ITALIC = enum.auto()


# Attributes -> name of the curses constant holding its bit
_NATIVE_ATTRIBUTE_NAMES = {
    Attributes.STANDOUT: "A_STANDOUT",
    Attributes.UNDERLINE: "A_UNDERLINE",
    Attributes.REVERSE: "A_REVERSE",
    Attributes.BLINK: "A_BLINK",
    Attributes.DIM: "A_DIM",
    Attributes.BOLD: "A_BOLD",
    Attributes.ALT_CHAR_SET: "A_ALTCHARSET",
    Attributes.INVIS: "A_INVIS",
    Attributes.ITALIC: "A_ITALIC",
}


def native_attributes(attrs):
    """
    Returns the curses attribute bits for 'attrs'. Attributes the platform
    has no constant for (A_ITALIC on old curses, say) contribute nothing.
    """
    bits = 0
    for flag, name in _NATIVE_ATTRIBUTE_NAMES.items():
        if flag in attrs:
            bits |= getattr(curses, name, 0)
    return bits


def attributes_from_native(bits):
    """
    Inverse of native_attributes(): returns the Attributes whose curses bits
    are all set in 'bits'. Character and color bits are ignored.
    """
    attrs = Attributes(0)
    for flag, name in _NATIVE_ATTRIBUTE_NAMES.items():
        native = getattr(curses, name, 0)
        if native and bits & native == native:
            attrs |= flag
    return attrs


def apply_attributes(state, attrs, enable):
    """
    Returns the active attribute set after turning 'attrs' on (enable=True)
    or off (enable=False) in 'state'. Turning off only clears the bits in
    'attrs', leaving other active attributes alone.
    """
    if enable:
        return state | attrs
    return state & ~attrs


# ---------------------------------------------------------------------------
# Glyphs
# ---------------------------------------------------------------------------


class CursesGlyph(namedtuple("CursesGlyph", "ch color_pair attributes")):
    """
    A single character cell to draw: character code (0-255), color pair
    (None for the terminal's default colors), and Attributes.
    """

    __slots__ = ()

    def __new__(cls, ch, color_pair=None, attributes=Attributes(0)):
        if not 0 <= ch <= 255:
            raise ValueError(
                f"character code {ch} doesn't fit in a cell (use print_str() "
                "for non-ASCII text)"
            )
        return super().__new__(cls, ch, color_pair, attributes)

    @classmethod
    def from_chtype(cls, value):
        """Splits a native curses cell value into a glyph."""
        pair = curses.pair_number(value & curses.A_COLOR)
        return cls(
            value & curses.A_CHARTEXT,
            pair or None,
            attributes_from_native(value),
        )

    def as_chtype(self):
        """Returns the native curses cell value for the glyph."""
        value = self.ch | native_attributes(self.attributes)
        if self.color_pair:
            value |= curses.color_pair(self.color_pair)
        return value


def _to_glyph(c):
    # Accepts a CursesGlyph, a one-character string, or a character code

    if isinstance(c, CursesGlyph):
        return c
    if isinstance(c, str):
        if len(c) != 1:
            raise ValueError(f"expected a single character, got {c!r}")
        return CursesGlyph(ord(c))
    return CursesGlyph(c)


# ---------------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------------


class CursesKey:
    """
    Base class of the decoded keys returned by Curses.poll_events() and
    decode_key(). Keys are immutable and compare equal by value:

      decode_key(10) == Enter()
      decode_key(ord("p")) == Byte(ord("p"))
    """

    __slots__ = ()

    def _payload(self):
        return ()

    def __eq__(self, other):
        if not isinstance(other, CursesKey):
            return NotImplemented
        return type(self) is type(other) and self._payload() == other._payload()

    def __hash__(self):
        return hash((type(self).__name__,) + self._payload())

    def __repr__(self):
        args = ", ".join(map(str, self._payload()))
        return f"{type(self).__name__}({args})"


class _ValueKey(CursesKey):
    __slots__ = ("_value",)

    def __init__(self, value):
        object.__setattr__(self, "_value", value)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def value(self):
        return self._value

    def _payload(self):
        return (self._value,)


class Byte(_ValueKey):
    """A plain byte: letters, digits, symbols, Tab, Esc, control keys."""

    __slots__ = ()

    def __init__(self, value):
        if not 0 <= value <= 255:
            raise ValueError(f"byte value {value} outside 0..255")
        super().__init__(value)

    @classmethod
    def from_char(cls, ch):
        """Byte.from_char("q") == Byte(113)"""
        return cls(ord(ch))

    @property
    def char(self):
        return chr(self._value)


class Function(_ValueKey):
    """
    Function key n (Function(1) is F1). Terminal emulators often grab these
    before the program sees them.
    """

    __slots__ = ()


class Unknown(_ValueKey):
    """A raw key code that isn't recognized."""

    __slots__ = ()


class Enter(CursesKey):
    __slots__ = ()


class Backspace(CursesKey):
    __slots__ = ()


class ArrowUp(CursesKey):
    __slots__ = ()


class ArrowDown(CursesKey):
    __slots__ = ()


class ArrowLeft(CursesKey):
    __slots__ = ()


class ArrowRight(CursesKey):
    __slots__ = ()


class Insert(CursesKey):
    __slots__ = ()


class Delete(CursesKey):
    __slots__ = ()


class Home(CursesKey):
    __slots__ = ()


class End(CursesKey):
    __slots__ = ()


class PageUp(CursesKey):
    __slots__ = ()


class PageDown(CursesKey):
    __slots__ = ()


class Keypad5(CursesKey):
    """The middle keypad key, with numlock off."""

    __slots__ = ()


class Resize(CursesKey):
    """The terminal was resized."""

    __slots__ = ()


# F0 through F63, as in ncurses' KEY_F(n). KEY_F0 + 64 is KEY_DL.
_FUNCTION_KEY_COUNT = 64

# (curses constant name, decoded key). Constants missing on a platform are
# skipped, and the first entry for a code wins. The KEY_A2/B1/B3/C2 and PAD*
# constants only exist on PDCurses.
_SPECIAL_KEYS = (
    ("KEY_ENTER", Enter()),
    ("PADENTER", Enter()),
    ("KEY_BACKSPACE", Backspace()),
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
    # Keypad with numlock off
    ("KEY_A1", Home()),
    ("KEY_A2", ArrowUp()),
    ("KEY_A3", PageUp()),
    ("KEY_B1", ArrowLeft()),
    ("KEY_B3", ArrowRight()),
    ("KEY_C1", End()),
    ("KEY_C2", ArrowDown()),
    ("KEY_C3", PageDown()),
    ("PADSLASH", Byte.from_char("/")),
    ("PADSTAR", Byte.from_char("*")),
    ("PADMINUS", Byte.from_char("-")),
    ("PADPLUS", Byte.from_char("+")),
)

# Key -> name of the curses constant un_get_event() pushes back for it
_ENCODE_NAMES = {
    Enter(): "KEY_ENTER",
    Backspace(): "KEY_BACKSPACE",
    ArrowUp(): "KEY_UP",
    ArrowDown(): "KEY_DOWN",
    ArrowLeft(): "KEY_LEFT",
    ArrowRight(): "KEY_RIGHT",
    Insert(): "KEY_IC",
    Delete(): "KEY_DC",
    Home(): "KEY_HOME",
    End(): "KEY_END",
    PageUp(): "KEY_PPAGE",
    PageDown(): "KEY_NPAGE",
    Keypad5(): "KEY_B2",
    Resize(): "KEY_RESIZE",
}


@functools.lru_cache(maxsize=None)
def _key_table(module):
    # Returns a dict mapping raw codes to decoded keys for the curses module
    # 'module'. Cached per module, since the values are constants.

    table = {
        ord("\n"): Enter(),
        ord("\r"): Enter(),
        # DEL, which is what most terminals send for Backspace
        0x7F: Backspace(),
    }
    for name, key in _SPECIAL_KEYS:
        code = getattr(module, name, None)
        if code is not None:
            table.setdefault(code, key)
    return table


def decode_key(code):
    """
    Decodes the raw key code 'code' (as returned by curses' getch()) into a
    CursesKey. Never fails: unrecognized codes, including negative ones,
    decode to Unknown(code).

    Enter is reported for "\\n", "\\r" and KEY_ENTER, and Backspace for DEL
    (127) and KEY_BACKSPACE. Other codes in 0..255 are Byte(code).
    """
    key = _key_table(curses).get(code)
    if key is not None:
        return key

    if 0 <= code <= 255:
        return Byte(code)

    f0 = getattr(curses, "KEY_F0", None)
    if f0 is not None and f0 <= code < f0 + _FUNCTION_KEY_COUNT:
        return Function(code - f0)

    return Unknown(code)


def encode_key(key):
    """
    Returns a raw key code that decode_key() turns back into 'key'. Used to
    push keys back onto the input queue.
    """
    if isinstance(key, _ValueKey):
        if isinstance(key, Function):
            return curses.KEY_F0 + key.value
        return key.value

    name = _ENCODE_NAMES.get(key)
    code = getattr(curses, name, None) if name else None
    if code is None:
        raise ValueError(f"{key!r} has no key code on this platform")
    return code


# ---------------------------------------------------------------------------
# Alternate character set
# ---------------------------------------------------------------------------

# (name, description). The glyph comes from curses.ACS_<NAME>, which curses
# only fills in once initscr() has run.
_ACS_GLYPHS = (
    ("block", "Solid square block, but sometimes a hash."),
    ("board", "Board of squares, often just a hash."),
    ("btee", "Bottom T."),
    ("bullet", "Bullet point."),
    ("ckboard", "Checkerboard, usually like a 50% stipple."),
    ("darrow", "Down arrow."),
    ("degree", "Degree symbol (like with an angle)."),
    ("diamond", "Diamond."),
    ("gequal", "Greater-than or equal to."),
    ("hline", "Horizontal line."),
    ("lantern", "Lantern symbol."),
    ("larrow", "Left arrow."),
    ("lequal", "Less-than or equal to."),
    ("llcorner", "Lower left corner of a box."),
    ("lrcorner", "Lower right corner of a box."),
    ("ltee", "Left T."),
    ("nequal", "Not equal to."),
    ("pi", "Greek pi."),
    ("plminus", "Plus/minus."),
    ("plus", 'Plus shaped "line" in all four directions.'),
    ("rarrow", "Right arrow."),
    ("rtee", "Right T."),
    ("s1", "Horizontal scan line 1."),
    ("s3", "Horizontal scan line 3."),
    ("s7", "Horizontal scan line 7."),
    ("s9", "Horizontal scan line 9."),
    ("sterling", "British pounds sterling."),
    ("ttee", "Top T."),
    ("uarrow", "Up arrow."),
    ("ulcorner", "Upper left corner of a box."),
    ("urcorner", "Upper right corner of a box."),
    ("vline", "Vertical line."),
)

ACS_NAMES = tuple(name for name, _ in _ACS_GLYPHS)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

_TRUE_STRINGS = ("1", "yes", "true", "on")
_FALSE_STRINGS = ("0", "no", "false", "off")


def _read_env_config():
    # Returns (color, escdelay) from the environment. See the module
    # docstring. escdelay is None if curses' default should be kept.

    color = not os.environ.get("NO_COLOR")

    val = os.environ.get("YACURSES_COLOR")
    if val is not None:
        if val.lower() in _TRUE_STRINGS:
            color = True
        elif val.lower() in _FALSE_STRINGS:
            color = False
        else:
            _warn(f"Ignoring YACURSES_COLOR={val!r}, expected on/off")

    escdelay = None
    val = os.environ.get("YACURSES_ESCDELAY")
    if val is not None:
        try:
            escdelay = int(val)
        except ValueError:
            _warn(f"Ignoring YACURSES_ESCDELAY={val!r}, expected milliseconds")
        else:
            if escdelay < 0:
                _warn(f"Ignoring negative YACURSES_ESCDELAY ({escdelay})")
                escdelay = None

    return color, escdelay


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------

# _SessionState of the active session, if any. Guarded by _session_lock.
_session = None
_session_lock = threading.Lock()


class _SessionState:
    # What ending a session needs. Kept apart from Curses and holding no
    # reference to it, so that a finalizer can end a dropped session.

    __slots__ = ("win", "ended", "orig_visibility", "acs_cache")

    def __init__(self):
        self.win = None
        self.ended = False
        # Cursor visibility from before the first set_cursor_visibility()
        self.orig_visibility = None
        # ACS name -> CursesGlyph
        self.acs_cache = {}

    def end(self):
        # Restores the terminal and releases the guard. Runs at most once.
        # Failures are warned about, not raised.

        global _session

        if self.ended:
            return
        self.ended = True

        failures = []
        if self.orig_visibility is not None:
            try:
                curses.curs_set(self.orig_visibility)
            except curses.error as e:
                failures.append(f"restoring the cursor: {e}")
        try:
            # Saved so that a later session resumes with the same settings
            curses.def_prog_mode()
        except curses.error as e:
            failures.append(f"def_prog_mode(): {e}")
        try:
            curses.endwin()
        except curses.error as e:
            failures.append(f"endwin(): {e}")

        self.acs_cache.clear()
        with _session_lock:
            if _session is self:
                _session = None

        for failure in failures:
            _warn("Error while ending curses mode:", failure)


class Curses:
    """
    Handle to the terminal's curses mode. Only one can be active at a time.

    Creating a Curses initializes curses: color is started if available
    (unless disabled), keypad keys (arrows, function keys, ...) are decoded,
    and input is read in cbreak mode, one key at a time. end() restores the
    terminal. Once a session has ended, a new one may be created, and curses
    mode resumes.

    The session must only be used from the thread that created it.

    A session that is dropped without end() is ended when it is garbage
    collected, or at the latest when the interpreter exits.

    color:
      True/False to force colors on or off. None (the default) follows the
      environment (NO_COLOR, YACURSES_COLOR).

    escdelay:
      Milliseconds to wait after ESC for the rest of an escape sequence, or
      None to follow YACURSES_ESCDELAY (or keep curses' default).

    Raises SessionError if a session is already active, and CursesError if
    curses can't be initialized. Note that curses itself prints an error and
    exits the process if the terminal type is unknown.
    """

    def __init__(self, color=None, escdelay=None):
        global _session

        self._win = None
        self._owner = threading.get_ident()
        self._attributes = Attributes(0)
        self._color_pair = None
        self._color_started = False
        self._timeout = -1
        self._state = _SessionState()

        with _session_lock:
            if _session is not None:
                raise SessionError("init", "curses is already active")
            _session = self._state

        try:
            self._start(color, escdelay)
        except BaseException:
            self._state.ended = True
            with _session_lock:
                _session = None
            raise

        # Ends the session if the handle is dropped, or at interpreter exit
        self._finalizer = weakref.finalize(self, self._state.end)

    @classmethod
    def init(cls, **kwargs):
        """Same as Curses(**kwargs)."""
        return cls(**kwargs)

    def _start(self, color, escdelay):
        env_color, env_escdelay = _read_env_config()
        if color is None:
            color = env_color
        if escdelay is None:
            escdelay = env_escdelay

        try:
            win = curses.initscr()
        except curses.error as e:
            raise CursesError("init", f"initscr() failed: {e}") from e
        if win is None:
            raise CursesError("init", "initscr() returned no window")

        if color and curses.has_colors():
            try:
                curses.start_color()
                self._color_started = True
            except curses.error:
                # Couldn't allocate the color tables. Color operations report
                # UnsupportedCapability later.
                pass

        try:
            win.keypad(True)
        except curses.error:
            # Keypad keys then arrive as raw escape bytes
            pass

        try:
            curses.cbreak()
        except curses.error as e:
            try:
                curses.endwin()
            except curses.error:
                pass
            raise CursesError("init", "couldn't set cbreak mode") from e

        self._win = self._state.win = win

        if escdelay is not None:
            if hasattr(curses, "set_escdelay"):
                try:
                    curses.set_escdelay(escdelay)
                except curses.error:
                    _warn(f"Couldn't set the escape delay to {escdelay} ms")
            else:
                _warn("Setting the escape delay needs Python 3.9+, ignoring it")

    def _check(self, op):
        # Raises SessionError unless the session can be used from this thread

        if self._state.ended:
            raise SessionError(op, "the curses session has ended")
        if threading.get_ident() != self._owner:
            raise SessionError(op, "used from a thread that doesn't own the session")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.end()

    def __repr__(self):
        if self._state.ended:
            return "<Curses session, ended>"
        return "<Curses session, active, attributes {}>".format(self._attributes)

    @property
    def active(self):
        """True until the session has ended."""
        return not self._state.ended

    @property
    def attributes(self):
        """The currently active Attributes."""
        return self._attributes

    # --- Lifecycle ---

    def end(self):
        """
        Ends the session, restoring the terminal's modes (echo, cursor,
        cooked input). Calling it again does nothing. Failures while
        restoring are reported as warnings on stderr rather than raised, so
        that this is safe to call during cleanup.

        Like every other operation, end() must be called from the thread
        that created the session, and raises SessionError otherwise. Sessions
        dropped without end() are ended by their finalizer instead, from
        whichever thread collects them or at interpreter exit.
        """
        if self._state.ended:
            return
        if threading.get_ident() != self._owner:
            raise SessionError("end", "used from a thread that doesn't own the session")
        # Runs _SessionState.end() and unregisters the exit hook
        self._finalizer()

    @contextlib.contextmanager
    def shell_mode(self):
        """
        Context manager that returns the terminal to shell mode, so that
        stdout and stderr work normally, and switches back to curses mode on
        exit:

          with win.shell_mode():
              print("some output")

        Curses mode is not resumed if the session was ended inside the
        block. If the block raises and resuming fails too, the exception
        from the block is propagated and the failure is warned about.
        """
        self._check("shell_mode")
        try:
            curses.def_prog_mode()
        except curses.error:
            # Only fails before initscr()
            pass
        _native("shell_mode", RefreshFailure, curses.endwin)
        try:
            yield self
        except BaseException:
            if not self._state.ended:
                try:
                    self._win.refresh()
                except curses.error as e:
                    _warn("Couldn't resume curses mode:", e)
            raise
        if not self._state.ended:
            _native("shell_mode", RefreshFailure, self._win.refresh)

    # --- Output ---

    def refresh(self):
        """Pushes all updates out to the physical screen."""
        self._check("refresh")
        _native("refresh", RefreshFailure, self._win.refresh)

    def get_cursor_position(self):
        """Returns the cursor's Position."""
        self._check("get_cursor_position")
        y, x = self._win.getyx()
        return Position(x, y)

    def get_terminal_size(self):
        """Returns the TerminalSize."""
        self._check("get_terminal_size")
        y_count, x_count = self._win.getmaxyx()
        return TerminalSize(x_count, y_count)

    def move_cursor(self, pos):
        """
        Moves the cursor to the Position (or (x, y) tuple) 'pos'. Raises
        OutOfBounds, leaving the cursor where it was, if 'pos' is outside the
        screen.
        """
        self._check("move_cursor")
        x, y = pos
        if not self.get_terminal_size().contains(pos):
            raise OutOfBounds("move_cursor", f"({x}, {y}) is outside the screen")
        _native("move_cursor", OutOfBounds, self._win.move, y, x)

    def print_ch(self, c):
        """
        Prints a character (a CursesGlyph, one-character string, or character
        code), advancing the cursor. Wraps to the next line in the last
        column, and scrolls in the last row if scrolling is enabled.
        """
        self._check("print_ch")
        _native("print_ch", WriteFailure, self._win.addch, _to_glyph(c).as_chtype())

    def print_str(self, s):
        """
        Prints the string 's' from the cursor, advancing it. Wraps like
        print_ch(). Writing the bottom-right cell fails unless scrolling is
        enabled.
        """
        self._check("print_str")
        _native("print_str", WriteFailure, self._win.addstr, s)

    def insert_ch(self, c):
        """
        Inserts a character under the cursor, pushing the rest of the line one
        cell right (the last character falls off). The cursor doesn't move.
        """
        self._check("insert_ch")
        _native("insert_ch", WriteFailure, self._win.insch, _to_glyph(c).as_chtype())

    def delete_ch(self):
        """
        Deletes the character under the cursor, pulling the rest of the line
        one cell left. The cursor doesn't move.
        """
        self._check("delete_ch")
        _native("delete_ch", WriteFailure, self._win.delch)

    def copy_glyphs(self, glyphs):
        """
        Writes 'glyphs' from the cursor position without advancing the cursor
        or wrapping. Glyphs that would go past the right edge are dropped.
        """
        self._check("copy_glyphs")
        win = self._win
        y, x = win.getyx()
        max_y, max_x = win.getmaxyx()

        for i, c in enumerate(glyphs):
            col = x + i
            if col >= max_x:
                break
            ch = _to_glyph(c).as_chtype()
            if (y, col) == (max_y - 1, max_x - 1):
                # addch() would fail moving the cursor past the last cell
                _native("copy_glyphs", WriteFailure, win.insch, y, col, ch)
            else:
                _native("copy_glyphs", WriteFailure, win.addch, y, col, ch)

        _native("copy_glyphs", WriteFailure, win.move, y, x)

    def read_str(self, pos, length=None):
        """
        Returns the text in the off-screen buffer starting at 'pos', up to
        'length' cells (default: to the end of the row). Attributes are not
        included. The cursor doesn't move.
        """
        self._check("read_str")
        x, y = pos
        size = self.get_terminal_size()
        if not size.contains(pos):
            raise OutOfBounds("read_str", f"({x}, {y}) is outside the screen")
        if length is None:
            length = size.x_count - x

        win = self._win
        cur_y, cur_x = win.getyx()
        try:
            data = _native("read_str", ReadFailure, win.instr, y, x, length)
        finally:
            _native("read_str", ReadFailure, win.move, cur_y, cur_x)
        return data.decode("utf-8", "replace")

    def clear(self):
        """Clears the screen and moves the cursor to (0, 0)."""
        self._check("clear")
        _native("clear", WriteFailure, self._win.clear)

    # --- Modes and attributes ---

    def set_echo(self, echoing):
        """Sets whether typed keys are echoed to the screen."""
        self._check("set_echo")
        if echoing:
            _native("set_echo", AttributeFailure, curses.echo)
        else:
            _native("set_echo", AttributeFailure, curses.noecho)

    def set_cursor_visibility(self, vis):
        """
        Sets the CursorVisibility and returns the previous one. The
        visibility from before the first call is restored by end().
        """
        self._check("set_cursor_visibility")
        old = _native(
            "set_cursor_visibility", AttributeFailure, curses.curs_set, int(vis)
        )
        try:
            old = CursorVisibility(old)
        except ValueError:
            raise AttributeFailure(
                "set_cursor_visibility", f"unexpected previous visibility {old}"
            ) from None

        if self._state.orig_visibility is None:
            self._state.orig_visibility = old
        return old

    def set_attributes(self, attrs, enable):
        """
        Turns the Attributes in 'attrs' on (enable=True) or off
        (enable=False) for everything printed afterwards. Other active
        attributes are left alone. Attributes stay on until turned off.
        """
        self._check("set_attributes")
        bits = native_attributes(attrs)
        if enable:
            _native("set_attributes", AttributeFailure, self._win.attron, bits)
        else:
            _native("set_attributes", AttributeFailure, self._win.attroff, bits)
        self._attributes = apply_attributes(self._attributes, attrs, enable)

    def set_background(self, c):
        """
        Sets the background glyph, shown in blank cells and combined with
        printed characters.
        """
        self._check("set_background")
        ch = _to_glyph(c).as_chtype()
        _native("set_background", AttributeFailure, self._win.bkgd, ch)

    def get_background(self):
        """Returns the background CursesGlyph."""
        self._check("get_background")
        return CursesGlyph.from_chtype(self._win.getbkgd())

    def set_scrollable(self, yes):
        """Sets whether the screen scrolls when writing past the last row."""
        self._check("set_scrollable")
        _native("set_scrollable", AttributeFailure, self._win.scrollok, yes)

    def set_scroll_region(self, top, bottom):
        """
        Limits scrolling to rows top..bottom (inclusive). Rows outside it stay
        put. By default the whole screen scrolls.
        """
        self._check("set_scroll_region")
        rows = self.get_terminal_size().y_count
        if not 0 <= top <= bottom < rows:
            raise OutOfBounds(
                "set_scroll_region", f"rows {top}..{bottom} outside 0..{rows - 1}"
            )
        _native("set_scroll_region", OutOfBounds, self._win.setscrreg, top, bottom)

    def scroll(self, n):
        """
        Scrolls by 'n' lines. Positive moves text up, negative down. Needs
        set_scrollable(True).
        """
        self._check("scroll")
        _native("scroll", WriteFailure, self._win.scroll, n)

    # --- Colors ---

    def has_color(self):
        """True if the terminal supports colors at all."""
        self._check("has_color")
        return curses.has_colors()

    def can_change_colors(self):
        """True if set_color_id_rgb() can redefine palette colors."""
        self._check("can_change_colors")
        return self._color_started and curses.can_change_color()

    def get_max_color_id(self):
        """Returns the highest ColorID, or None without color."""
        self._check("get_max_color_id")
        colors = getattr(curses, "COLORS", 0) if self._color_started else 0
        if colors <= 0:
            return None
        return ColorID(min(colors - 1, 255))

    def get_max_color_pair(self):
        """Returns the highest usable color pair, or None without color."""
        self._check("get_max_color_pair")
        pairs = getattr(curses, "COLOR_PAIRS", 0) if self._color_started else 0
        if pairs <= 1:
            return None
        return min(pairs - 1, 255)

    def _require_color(self, op):
        if not self._color_started or not curses.has_colors():
            raise UnsupportedCapability(op, "the terminal has no color support")

    def _check_color_id(self, op, color_id):
        max_id = self.get_max_color_id()
        if max_id is None or not 0 <= color_id <= max_id:
            raise OutOfBounds(op, f"color {color_id} outside 0..{max_id}")

    def _check_pair(self, op, pair, lowest=1):
        max_pair = self.get_max_color_pair()
        if max_pair is None or not lowest <= pair <= max_pair:
            raise OutOfBounds(op, f"color pair {pair} outside {lowest}..{max_pair}")

    def set_color_id_rgb(self, color_id, rgb):
        """
        Redefines palette entry 'color_id' as the (r, g, b) color 'rgb', or
        the closest the terminal has. Components are clamped to 0.0..1.0.
        """
        self._check("set_color_id_rgb")
        self._require_color("set_color_id_rgb")
        if not curses.can_change_color():
            raise UnsupportedCapability(
                "set_color_id_rgb", "the terminal can't change its colors"
            )
        self._check_color_id("set_color_id_rgb", color_id)

        r, g, b = (int(max(0.0, min(1.0, c)) * 1000) for c in rgb)
        _native(
            "set_color_id_rgb", AttributeFailure, curses.init_color, color_id, r, g, b
        )

    def get_color_id_rgb(self, color_id):
        """Returns the (r, g, b) components of 'color_id', each 0.0..1.0."""
        self._check("get_color_id_rgb")
        self._require_color("get_color_id_rgb")
        self._check_color_id("get_color_id_rgb", color_id)

        r, g, b = _native(
            "get_color_id_rgb", AttributeFailure, curses.color_content, color_id
        )
        return (r / 1000, g / 1000, b / 1000)

    def set_color_pair_content(self, pair, fg, bg):
        """
        Makes color pair 'pair' draw with foreground 'fg' and background 'bg'.
        Cells already using the pair change color at once.
        """
        self._check("set_color_pair_content")
        self._require_color("set_color_pair_content")
        self._check_pair("set_color_pair_content", pair)
        self._check_color_id("set_color_pair_content", fg)
        self._check_color_id("set_color_pair_content", bg)
        _native(
            "set_color_pair_content", AttributeFailure, curses.init_pair, pair, fg, bg
        )

    def get_color_pair_content(self, pair):
        """Returns the (fg, bg) ColorIDs of color pair 'pair'."""
        self._check("get_color_pair_content")
        self._require_color("get_color_pair_content")
        self._check_pair("get_color_pair_content", pair, lowest=0)
        fg, bg = _native(
            "get_color_pair_content", AttributeFailure, curses.pair_content, pair
        )
        return (ColorID(fg), ColorID(bg))

    def set_active_color_pair(self, pair):
        """
        Sets the color pair used for everything printed afterwards. None
        selects the terminal's default colors.
        """
        self._check("set_active_color_pair")
        if pair is not None:
            self._require_color("set_active_color_pair")
            self._check_pair("set_active_color_pair", pair)

        op = "set_active_color_pair"
        win = self._win
        _native(op, AttributeFailure, win.attroff, curses.A_COLOR)
        if pair is not None:
            _native(op, AttributeFailure, win.attron, curses.color_pair(pair))
        self._color_pair = pair

    # --- Input ---

    def set_timeout(self, ms):
        """
        Sets how long poll_events() waits for a key:

          Negative: forever (the default). poll_events() always returns a key.
          Zero: not at all. poll_events() returns None if no key is ready.
          Positive: up to 'ms' milliseconds before returning None.
        """
        self._check("set_timeout")
        self._win.timeout(ms)
        self._timeout = ms

    def poll_events(self):
        """
        Waits for the next key and returns it as a CursesKey. By default this
        blocks the calling thread until a key arrives. Terminal resizes arrive
        as Resize().

        Returns None only if a timeout was set with set_timeout() and it
        expired. Raises ReadFailure if reading fails while blocking.
        """
        self._check("poll_events")
        code = _native("poll_events", ReadFailure, self._win.getch)
        if code == -1:
            if self._timeout < 0:
                raise ReadFailure("poll_events", "getch() failed")
            return None
        return decode_key(code)

    def un_get_event(self, key):
        """Pushes 'key' back so that the next poll_events() returns it."""
        self._check("un_get_event")
        _native("un_get_event", ReadFailure, curses.ungetch, encode_key(key))

    def flush_events(self):
        """Discards any keys typed but not yet read."""
        self._check("flush_events")
        _native("flush_events", ReadFailure, curses.flushinp)

    # --- Alternate character set ---

    def acs(self, name):
        """
        Returns the alternate character set glyph 'name' (see ACS_NAMES),
        e.g. win.acs("hline"). Looked up once per session, then cached. What
        actually shows is up to the terminal.

        Raises UnsupportedCapability if the platform has no such glyph.
        """
        self._check("acs")
        glyph = self._state.acs_cache.get(name)
        if glyph is not None:
            return glyph

        if name not in ACS_NAMES:
            raise ValueError(f"unknown alternate character set glyph {name!r}")
        value = getattr(curses, "ACS_" + name.upper(), None)
        if value is None:
            raise UnsupportedCapability("acs", f"no {name} glyph on this platform")

        glyph = self._state.acs_cache[name] = CursesGlyph.from_chtype(value)
        return glyph


def _acs_getter(name, doc):
    def getter(self):
        return self.acs(name)

    getter.__name__ = getter.__qualname__ = "acs_" + name
    getter.__doc__ = doc
    return getter


# Curses.acs_block(), Curses.acs_hline(), ...
for _name, _doc in _ACS_GLYPHS:
    setattr(Curses, "acs_" + _name, _acs_getter(_name, _doc))
del _name, _doc


# ---------------------------------------------------------------------------
# Safe entry point
# ---------------------------------------------------------------------------


def run(fn, *args, **kwargs):
    """
    Creates a session, calls fn(session, *args, **kwargs), and ends the
    session however fn() exits. Returns what fn() returns, or None if it was
    interrupted with Ctrl-C.
    """
    win = None
    try:
        win = Curses()
        return fn(win, *args, **kwargs)
    except KeyboardInterrupt:
        pass
    finally:
        if win is not None:
            win.end()

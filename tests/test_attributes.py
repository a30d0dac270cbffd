# Copyright (c) 2026 yacurses contributors
# SPDX-License-Identifier: ISC
#
# Attribute model: the pure set operations, the translation to curses bits,
# and how a session applies attribute batches.

import itertools

import pytest

import yacurses
from yacurses import (
    Attributes,
    apply_attributes,
    attributes_from_native,
    native_attributes,
)

ALL = (
    Attributes.STANDOUT,
    Attributes.UNDERLINE,
    Attributes.REVERSE,
    Attributes.BLINK,
    Attributes.DIM,
    Attributes.BOLD,
    Attributes.ALT_CHAR_SET,
    Attributes.INVIS,
    Attributes.ITALIC,
)


def _subsets():
    for n in range(3):
        for combo in itertools.combinations(ALL, n):
            attrs = Attributes(0)
            for flag in combo:
                attrs |= flag
            yield attrs


def test_enable_then_disable_restores_state():
    for state in _subsets():
        for attrs in _subsets():
            if attrs & state:
                # Disabling also clears bits that were on before
                continue
            on = apply_attributes(state, attrs, True)
            assert apply_attributes(on, attrs, False) == state


def test_order_independent():
    bold_underline = Attributes.BOLD | Attributes.UNDERLINE
    a = apply_attributes(
        apply_attributes(Attributes(0), bold_underline, True), Attributes.ITALIC, True
    )
    b = apply_attributes(
        apply_attributes(Attributes(0), Attributes.ITALIC, True), bold_underline, True
    )
    assert a == b == Attributes.BOLD | Attributes.UNDERLINE | Attributes.ITALIC


def test_disable_leaves_other_attributes():
    state = Attributes.BOLD | Attributes.UNDERLINE | Attributes.BLINK
    assert apply_attributes(state, Attributes.UNDERLINE, False) == (
        Attributes.BOLD | Attributes.BLINK
    )
    # Disabling something that isn't on changes nothing
    assert apply_attributes(state, Attributes.ITALIC, False) == state


def test_native_bits(fake):
    assert native_attributes(Attributes(0)) == 0
    assert native_attributes(Attributes.BOLD) == fake.A_BOLD
    assert native_attributes(Attributes.BOLD | Attributes.ITALIC) == (
        fake.A_BOLD | fake.A_ITALIC
    )


def test_native_round_trip(fake):
    attrs = Attributes.REVERSE | Attributes.DIM | Attributes.ALT_CHAR_SET
    assert attributes_from_native(native_attributes(attrs) | ord("x")) == attrs


def test_missing_native_constant_is_a_no_op(fake):
    # Old curses builds have no A_ITALIC
    del fake.A_ITALIC
    assert native_attributes(Attributes.ITALIC) == 0
    assert native_attributes(Attributes.ITALIC | Attributes.BOLD) == fake.A_BOLD
    assert attributes_from_native(fake.A_BOLD) == Attributes.BOLD


def test_single_native_call_per_batch(fake, win):
    before = fake.calls_to("attron")
    win.set_attributes(Attributes.BOLD | Attributes.UNDERLINE | Attributes.BLINK, True)
    assert fake.calls_to("attron") == before + 1
    assert fake.stdscr.attrs == fake.A_BOLD | fake.A_UNDERLINE | fake.A_BLINK

    before = fake.calls_to("attroff")
    win.set_attributes(Attributes.BOLD | Attributes.BLINK, False)
    assert fake.calls_to("attroff") == before + 1
    assert fake.stdscr.attrs == fake.A_UNDERLINE


def test_session_tracks_active_set(fake, win):
    assert win.attributes == Attributes(0)
    win.set_attributes(Attributes.BOLD | Attributes.UNDERLINE, True)
    win.set_attributes(Attributes.ITALIC, True)
    assert win.attributes == Attributes.BOLD | Attributes.UNDERLINE | Attributes.ITALIC

    win.set_attributes(Attributes.BOLD | Attributes.UNDERLINE, False)
    assert win.attributes == Attributes.ITALIC
    win.set_attributes(Attributes.ITALIC, False)
    assert win.attributes == Attributes(0)
    assert fake.stdscr.attrs == 0


def test_order_independent_in_session(fake, win):
    win.set_attributes(Attributes.ITALIC, True)
    win.set_attributes(Attributes.BOLD | Attributes.UNDERLINE, True)
    first = (win.attributes, fake.stdscr.attrs)
    win.set_attributes(
        Attributes.ITALIC | Attributes.BOLD | Attributes.UNDERLINE, False
    )

    win.set_attributes(Attributes.BOLD | Attributes.UNDERLINE, True)
    win.set_attributes(Attributes.ITALIC, True)
    assert (win.attributes, fake.stdscr.attrs) == first


def test_attributes_persist_across_prints(fake, win):
    win.set_attributes(Attributes.BOLD, True)
    win.print_str("ab")
    win.print_str("c")
    row = fake.stdscr.cells[0]
    assert all(cell & fake.A_BOLD for cell in row[:3])

    win.set_attributes(Attributes.BOLD, False)
    win.print_str("d")
    assert not row[3] & fake.A_BOLD


def test_failed_toggle_raises_and_keeps_state(fake, win):
    fake.fail.add("attron")
    with pytest.raises(yacurses.AttributeFailure) as excinfo:
        win.set_attributes(Attributes.BOLD, True)
    assert excinfo.value.op == "set_attributes"
    assert win.attributes == Attributes(0)

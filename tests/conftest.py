# Copyright (c) 2026 yacurses contributors
# SPDX-License-Identifier: ISC
#
# Shared fixtures for the yacurses pytest suite. Every test runs against a
# FakeCurses instance instead of the real curses module, so no terminal is
# needed.

import os
import sys

import pytest

# Ensure yacurses is importable from the project root
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import yacurses  # noqa: E402
from fakecurses import FakeCurses  # noqa: E402

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Remove environment variables that change how sessions start."""
    for var in ("NO_COLOR", "YACURSES_COLOR", "YACURSES_ESCDELAY"):
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture(autouse=True)
def fake(monkeypatch):
    """Substitute a fresh FakeCurses for the curses module.

    Any session a test leaves active is ended afterwards, so that the next
    test can create its own.
    """
    fake = FakeCurses()
    monkeypatch.setattr(yacurses, "curses", fake)
    yield fake
    if yacurses._session is not None:
        yacurses._session.end()


@pytest.fixture
def win(fake):
    """An active session on the fake terminal."""
    with yacurses.Curses() as win:
        yield win

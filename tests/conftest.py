"""Shared test fixtures for beattime tests."""

from __future__ import annotations

import pytest

from beattime.model.tempo import Transport

CLOCK_NOW = 100.0


@pytest.fixture
def transport() -> Transport:
    """120 BPM, 4 beats per measure, 192 PPQ, clock frozen at 100s."""
    return Transport(bpm=120.0, time_signature=4, ppq=192, clock=lambda: CLOCK_NOW)

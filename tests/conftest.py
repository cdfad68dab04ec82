"""Shared pytest fixtures."""

from __future__ import annotations

import pytest

from english import ENGLISH_LETTER_DISTRIBUTION
from throughput import TextEntryThroughput


SAMPLE_PRESENTED = "my watch fell in the waterprevailing wind from the east"
SAMPLE_TRANSCRIBED = "my wacch fell in waterpreviling wind on the east"


@pytest.fixture
def english():
    return ENGLISH_LETTER_DISTRIBUTION


@pytest.fixture
def meter():
    return TextEntryThroughput.english()


@pytest.fixture
def sample_pair() -> tuple[str, str]:
    return SAMPLE_PRESENTED, SAMPLE_TRANSCRIBED

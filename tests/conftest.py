"""Shared test fixtures for the paragrafs test suite.

WHY: Most test modules need short timed-token sequences. Building them
from plain words keeps each test focused on the behaviour it checks.

HOW: make_tokens() turns words into back-to-back one-second tokens; the
fixtures provide the recurring sample streams (filler/gap scenario and
the quick-brown-fox sentence).

RULES:
- Tokens are frozen dataclasses, so fixtures can be shared safely
- Timings are whole or half seconds to keep float assertions exact
"""

from typing import List

import pytest

from paragrafs.core.ir import BreakMarker, Token

SOFT = BreakMarker.SOFT
HARD = BreakMarker.HARD


def make_tokens(text: str, start: float = 0.0, step: float = 1.0) -> List[Token]:
    """One token per whitespace-separated word, each ``step`` seconds long."""
    return [
        Token(start=start + i * step, end=start + (i + 1) * step, text=word)
        for i, word in enumerate(text.split())
    ]


@pytest.fixture
def filler_gap_tokens():
    """Two fillers, a pause before "quick", and sentence punctuation at the end."""
    return [
        Token(0, 0.25, "uh"),
        Token(0.25, 0.5, "umm"),
        Token(0.5, 1, "The"),
        Token(2, 3, "quick"),
        Token(4, 5, "brown"),
        Token(6, 6.5, "fox!"),
    ]


@pytest.fixture
def misheard_fox_tokens():
    """ASR output of "The quick brown fox jumps" with three misheard words."""
    return make_tokens("The Buick crown flock jumps")

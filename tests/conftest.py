"""Shared test fixtures for the readalong_sync test suite.

WHY: Estimator, renderer, session, formatter, and CLI tests all need the
same small page of text with known sentence and word counts, and session
tests need a ticker they can fire by hand.

HOW: SAMPLE_PAGE segments into three six-word sentences (18 words total).
At the English rate of 180 wpm that is 3 words per second, so 6 seconds of
audio covers the whole page. The ticker_factory fixture hands out
ManualTicker instances and records them in manual_tickers.

RULES:
- Durations in tests avoid exact word boundaries so floor() is stable
- Sessions built in tests use ManualTicker, never real timers
"""

from typing import List

import pytest

from readalong_sync.core.ticker import ManualTicker


SAMPLE_PAGE = (
    "It was the best of times. "
    "It was the worst of times. "
    "Mrs. Smith read the letter aloud."
)

SAMPLE_SENTENCES = [
    "It was the best of times.",
    "It was the worst of times.",
    "Mrs. Smith read the letter aloud.",
]

FRENCH_PAGE = "Bonjour tout le monde. Il fait beau aujourd'hui."

FRENCH_SENTENCES = [
    "Bonjour tout le monde.",
    "Il fait beau aujourd'hui.",
]


@pytest.fixture
def sample_page():
    """Three sentences of six words each."""
    return SAMPLE_PAGE


@pytest.fixture
def sample_sentences():
    """SAMPLE_PAGE, already segmented."""
    return list(SAMPLE_SENTENCES)


@pytest.fixture
def french_page():
    return FRENCH_PAGE


@pytest.fixture
def manual_tickers() -> List[ManualTicker]:
    """Every ManualTicker created by ticker_factory, in creation order."""
    return []


@pytest.fixture
def ticker_factory(manual_tickers):
    """TickerFactory that builds ManualTicker instances and records them."""

    def _factory(interval_s, callback):
        ticker = ManualTicker(interval_s, callback)
        manual_tickers.append(ticker)
        return ticker

    return _factory


@pytest.fixture
def page_file(tmp_path):
    """SAMPLE_PAGE written to a UTF-8 file."""
    path = tmp_path / "page.txt"
    path.write_text(SAMPLE_PAGE, encoding="utf-8")
    return path

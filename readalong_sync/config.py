"""Configuration constants, speaking-rate table, and .env loading.

WHY: Centralizes every tunable value of the read-along engine so it is
easy to find, update, and override. The speaking-rate table, the test-mode
cadence, and the pagination defaults are plain data structures — not buried
in logic — so both humans and coding agents can modify them confidently.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level dicts and numbers, each with an environment override.
rate_for() is the Speaking-Rate Model: a static lookup with a default.

RULES:
- SPEAKING_RATES maps ISO 639-1 codes → words per minute
- Unknown, empty, or None language codes resolve to DEFAULT_SPEAKING_RATE
- rate_for() never raises and always returns a positive integer
- Malformed numeric environment values fall back to the built-in default
- Library modules read these constants; only the CLI configures logging
"""

from __future__ import annotations

import os
from typing import Optional

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()


def _env_float(name: str, default: float) -> float:
    """Read a positive float from the environment, falling back to default."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _env_int(name: str, default: int) -> int:
    """Read a positive int from the environment, falling back to default."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


# ---------------------------------------------------------------------------
# Speaking-rate model: ISO 639-1 → words per minute
# ---------------------------------------------------------------------------

SPEAKING_RATES: dict[str, int] = {
    "en": 180,
    "es": 160,
    "fr": 170,
    "de": 150,
    "it": 175,
    "pt": 165,
    "ru": 155,
}

DEFAULT_SPEAKING_RATE = 170
"""Rate used for any language missing from SPEAKING_RATES."""


def rate_for(language: Optional[str]) -> int:
    """Resolve the narration speaking rate for a language code.

    WHY: The position estimator converts elapsed seconds into spoken words,
    which needs an assumed words-per-minute rate for the narration language.

    HOW: Normalize the code (lowercase, drop any region suffix such as
    "-US" or "_br") and look it up in SPEAKING_RATES.

    RULES:
    - Known codes return their table entry
    - Unknown, empty, or None codes return DEFAULT_SPEAKING_RATE
    - Never raises
    """
    if not language:
        return DEFAULT_SPEAKING_RATE
    code = language.strip().lower().replace("_", "-").split("-", 1)[0]
    return SPEAKING_RATES.get(code, DEFAULT_SPEAKING_RATE)


# ---------------------------------------------------------------------------
# Languages offered as reading targets
# ---------------------------------------------------------------------------

SUPPORTED_LANGUAGES: dict[str, str] = {
    "en": "English",
    "fr": "French",
    "de": "German",
    "es": "Spanish",
    "ru": "Russian",
    "it": "Italian",
    "pt": "Portuguese",
    "zh": "Chinese",
    "ja": "Japanese",
}


def language_name(code: Optional[str]) -> str:
    """Human-readable name for a language code, or the upper-cased code."""
    if not code:
        return ""
    return SUPPORTED_LANGUAGES.get(code.lower(), code.upper())


# ---------------------------------------------------------------------------
# Engine defaults
# ---------------------------------------------------------------------------

DEFAULT_LANGUAGE = os.getenv("READALONG_DEFAULT_LANGUAGE", "en").strip().lower() or "en"

TEST_MODE_TICK_S = _env_float("READALONG_TEST_TICK_S", 1.0)
"""Seconds between synthetic test-mode ticks."""

TEST_MODE_WORD_BOUND = 10
"""The test-mode word index wraps to zero after this many ticks."""

TEST_MODE_SENTENCE_LIMIT = 3
"""Test mode only cycles through the first few sentences of the page."""

DEFAULT_WORDS_PER_PAGE = _env_int("READALONG_WORDS_PER_PAGE", 300)

TTS_MAX_CHUNK_CHARS = _env_int("READALONG_TTS_MAX_CHARS", 4000)
"""Narration services cap request length; chunks stay under this size."""

LOG_LEVEL = os.getenv("READALONG_LOG_LEVEL", "WARNING").strip().upper() or "WARNING"

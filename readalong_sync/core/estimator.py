"""Open-loop position estimation and sentence progress calculation.

WHY: The narration audio arrives without word timestamps. To highlight
the sentence and word being read, the engine estimates how many words
have been spoken from the elapsed playback time and an assumed speaking
rate for the narration language.

HOW: estimate() resolves the effective synchronization state first — test
mode returns its own indices, idle / isolated-sentence playback / zero
duration return an empty Position. For whole-page playback it converts
elapsed seconds into an expected word count, walks the sentences with a
running partial sum to find the active sentence, and clamps the word
offset into that sentence. progress_for() turns the position into a
completion percentage for the active sentence.

RULES:
- expected_words = floor(elapsed_s / 60 * wpm)
- Active sentence: first sentence whose cumulative word count exceeds
  expected_words; past the end clamps to the last sentence
- Word index: expected_words - words_before_sentence, clamped to
  [0, words_in_sentence - 1]
- TestMode indices are returned verbatim (override, not estimate)
- No feedback from the audio content: drift is an accepted limitation
- Never raises; every malformed input has a fallback
"""

from __future__ import annotations

import logging
import math
import sys
from typing import Callable, Dict, Optional, Sequence

from readalong_sync.config import rate_for
from readalong_sync.core.ir import (
    Idle,
    PlaybackProgress,
    PlayingSentence,
    PlayingWhole,
    Position,
    SyncState,
    TestMode,
)
from readalong_sync.core.segmenter import count_words, tokenize

logger = logging.getLogger(__name__)

RateLookup = Callable[[Optional[str]], int]

_NO_POSITION = Position()

# Stand-in word count when elapsed time is too large to represent; the
# estimator clamps it to the last word of the page.
_ALL_WORDS_SPOKEN = sys.maxsize


def total_words(sentences: Sequence[str]) -> int:
    """Total number of whitespace-delimited words across all sentences."""
    return sum(count_words(s) for s in sentences)


def estimated_duration(text: str, language: Optional[str] = None, rates: RateLookup = rate_for) -> float:
    """Seconds a narrator would need for ``text`` at the language's rate."""
    wpm = rates(language)
    if wpm <= 0:
        return 0.0
    return count_words(text) / wpm * 60


def expected_words_spoken(progress: PlaybackProgress, wpm: int) -> int:
    """floor(elapsed minutes * wpm) for clamped playback progress.

    A product that overflows to infinity means every word has been spoken.
    """
    if wpm <= 0:
        return 0
    elapsed_s = progress.clamped().elapsed_s
    words = elapsed_s / 60 * wpm
    if not math.isfinite(words):
        return _ALL_WORDS_SPOKEN
    return min(int(math.floor(words)), _ALL_WORDS_SPOKEN)


def estimate(
    state: SyncState,
    progress: PlaybackProgress,
    sentences: Sequence[str],
    language: Optional[str] = None,
    rates: RateLookup = rate_for,
) -> Position:
    """Estimate which sentence and word are being narrated.

    Args:
        state: The effective synchronization state for this tick.
        progress: Untrusted playback progress from the audio collaborator.
        sentences: The sentence list the narration reads.
        language: Narration language code, used for the speaking rate.
        rates: Speaking-rate lookup (defaults to config.rate_for).

    Returns:
        Position with both indices set, or both None when estimation is
        suspended or impossible.
    """
    if isinstance(state, TestMode):
        return Position(sentence_index=state.sentence_index, word_index=state.word_index)

    if isinstance(state, Idle):
        logger.debug("Estimation skipped: not playing")
        return _NO_POSITION
    if isinstance(state, PlayingSentence):
        logger.debug("Estimation skipped: sentence %s playing in isolation", state.sentence_index)
        return _NO_POSITION
    if not isinstance(state, PlayingWhole):
        return _NO_POSITION

    safe = progress.clamped()
    if safe.duration_s == 0:
        logger.debug("Estimation skipped: audio duration is 0")
        return _NO_POSITION

    total = total_words(sentences)
    if total == 0:
        return _NO_POSITION
    word_counts = [count_words(s) for s in sentences]

    wpm = rates(language)
    expected = expected_words_spoken(safe, wpm)

    logger.debug(
        "Estimating position: elapsed=%.2fs expected_words=%d wpm=%d lang=%s total_words=%d",
        safe.elapsed_s, expected, wpm, language, total,
    )

    # Running partial sum: first sentence whose cumulative count passes expected
    words_before = 0
    active = len(word_counts) - 1
    for index, count in enumerate(word_counts):
        if words_before + count > expected:
            active = index
            break
        words_before += count
    else:
        # Over-estimate: clamp to the last sentence
        words_before = total - word_counts[active]

    offset = expected - words_before
    word_index = max(0, min(offset, word_counts[active] - 1))
    return Position(sentence_index=active, word_index=word_index)


def progress_for(
    sentence_index: Optional[int],
    word_index: Optional[int],
    sentences: Sequence[str],
) -> Optional[float]:
    """Completion percentage of the active sentence.

    RULES:
    - ((word_index + 1) / words_in_sentence) * 100, clamped to [0, 100]
    - None when no sentence is active, the index is out of range, or the
      sentence has no words
    """
    if sentence_index is None or word_index is None:
        return None
    if sentence_index < 0 or sentence_index >= len(sentences):
        return None
    words = tokenize(sentences[sentence_index])
    if not words:
        return None
    percentage = (word_index + 1) / len(words) * 100
    return min(100.0, max(0.0, percentage))


def progress_map(position: Position, sentences: Sequence[str]) -> Dict[int, float]:
    """{active sentence index: percentage}, or {} when nothing is active."""
    if not position.is_active:
        return {}
    percentage = progress_for(position.sentence_index, position.word_index, sentences)
    if percentage is None:
        return {}
    return {position.sentence_index: percentage}

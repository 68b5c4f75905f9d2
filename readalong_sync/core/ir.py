"""Data model shared by the segmenter, estimator, renderer, and session.

WHY: The read-along engine passes a handful of small values between its
stages — playback progress from the audio collaborator, the session's
synchronization state, the estimated position, and the tagged words handed
to the presentation layer. Typed, immutable dataclasses make every stage
independently testable and keep the stages decoupled.

HOW: Frozen dataclasses and str-valued enums:
  ReadingMode       — "paragraph" (one narration track) or "sentence"
  WordTag           — highlight tag assigned to each rendered word
  PlaybackProgress  — untrusted fraction + duration, with clamped()
  Idle / PlayingWhole / PlayingSentence / TestMode — the state union
  Position          — active sentence and word index (or None)
  WordSegment       — one tagged word of a rendered sentence
  RenderedSentence  — a sentence with its tagged words
  ReadModel         — everything the presentation layer observes per tick

RULES:
- Exactly one SyncState is effective at a time
- Word indices are zero-based and only meaningful within one sentence
- Progress percentages are keyed by sentence index, values in [0, 100]
- Enums inherit from str so values serialize cleanly to JSON
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple, Union


class ReadingMode(str, enum.Enum):
    """How the page is narrated.

    RULES:
    - paragraph: one narration track for the page in the primary language
    - sentence: per-language narration tracks; one language is selected
    """

    PARAGRAPH = "paragraph"
    SENTENCE = "sentence"


class WordTag(str, enum.Enum):
    """Highlight tag of a rendered word. Every word gets exactly one."""

    CURRENT = "current"
    PAST = "past"
    ACTIVE_SENTENCE = "active_sentence"
    INACTIVE = "inactive"


@dataclass(frozen=True)
class PlaybackProgress:
    """Playback position reported by the external audio collaborator.

    WHY: The audio element reports progress as a fraction of the total
    duration. Neither value can be trusted (NaN before metadata loads,
    fractions slightly above 1 at the end of playback).

    RULES:
    - fraction: elapsed share of the narration, clamped to [0, 1]
    - duration_s: total narration length in seconds, never negative
    - clamped() maps NaN/inf/negative values to safe defaults
    """

    fraction: float = 0.0
    duration_s: float = 0.0

    def clamped(self) -> "PlaybackProgress":
        fraction = self.fraction
        if fraction is None or not isinstance(fraction, (int, float)) or math.isnan(fraction):
            fraction = 0.0
        fraction = min(1.0, max(0.0, float(fraction)))

        duration = self.duration_s
        if duration is None or not isinstance(duration, (int, float)) or not math.isfinite(duration):
            duration = 0.0
        duration = max(0.0, float(duration))
        return PlaybackProgress(fraction=fraction, duration_s=duration)

    @property
    def elapsed_s(self) -> float:
        safe = self.clamped()
        return safe.fraction * safe.duration_s


# ---------------------------------------------------------------------------
# Synchronization state (tagged union)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Idle:
    """No narration is playing."""

    kind: str = field(default="idle", init=False)


@dataclass(frozen=True)
class PlayingWhole:
    """The whole-page narration track is playing."""

    kind: str = field(default="playing_whole", init=False)


@dataclass(frozen=True)
class PlayingSentence:
    """A single sentence is narrated in isolation; page estimation is suspended."""

    sentence_index: int
    kind: str = field(default="playing_sentence", init=False)


@dataclass(frozen=True)
class TestMode:
    """Synthetic, timer-driven highlighting used to verify the UI without audio."""

    __test__ = False  # not a pytest test class

    sentence_index: int = 0
    word_index: int = 0
    kind: str = field(default="test_mode", init=False)


AudioState = Union[Idle, PlayingWhole, PlayingSentence]
SyncState = Union[Idle, PlayingWhole, PlayingSentence, TestMode]


# ---------------------------------------------------------------------------
# Derived outputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Position:
    """Estimated highlight position. Both indices are None when nothing is active."""

    sentence_index: Optional[int] = None
    word_index: Optional[int] = None

    @property
    def is_active(self) -> bool:
        return self.sentence_index is not None


@dataclass(frozen=True)
class WordSegment:
    """One whitespace-delimited word with its highlight tag."""

    text: str
    word_index: int
    sentence_index: int
    tag: WordTag


@dataclass(frozen=True)
class RenderedSentence:
    """A sentence of the page with every word tagged."""

    sentence_index: int
    text: str
    words: Tuple[WordSegment, ...] = ()


@dataclass(frozen=True)
class ReadModel:
    """The single read model the presentation layer observes.

    WHY: Consumers must only ever see the latest, internally consistent
    result of a tick — the position, the progress derived from it, and the
    rendering derived from both.

    RULES:
    - state: the effective SyncState (TestMode shadows any audio state)
    - position: Position from the estimator
    - progress: {active sentence index: percentage}, or {} when idle
    - sentences: every sentence of the active text, rendered and tagged
    - language: the narration language used for the speaking rate
    - generation: increments on every published tick
    """

    state: SyncState
    position: Position
    progress: Dict[int, float]
    sentences: Tuple[RenderedSentence, ...]
    language: str
    reading_mode: ReadingMode
    generation: int = 0

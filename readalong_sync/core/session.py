"""Synchronization session: the stateful coordinator of the read-along engine.

WHY: The presentation layer needs one place that knows the reading mode,
the selected narration language, whether audio or test mode is driving the
highlight, and the latest derived position/progress/rendering. Keeping the
derivation a pure function of an immutable snapshot makes every tick
reproducible and lets any scheduler (timer thread, event loop, UI callback,
test harness) drive the session.

HOW: SyncSession owns the mutable inputs — page sentences, per-language
translated sentences, audio state, optional test state, playback progress.
Every command or tick builds a SessionSnapshot and runs derive(), which
evaluates the state precedence once and computes position → progress →
rendering in dependency order. The resulting ReadModel is stored and
published to listeners. Test mode owns a Ticker; each tick carries the
generation it was scheduled under so stale ticks are ignored.

RULES:
- Audio state is exactly one of Idle, PlayingWhole, PlayingSentence
- Starting whole-page playback while a sentence plays (or vice versa)
  passes through Idle first
- TestMode shadows the audio state without tearing it down
- Test ticks advance the word index; wrapping past TEST_MODE_WORD_BOUND
  advances the sentence index within the first TEST_MODE_SENTENCE_LIMIT
  sentences and resets the word index
- Stopping test mode cancels the ticker synchronously, resets the indices,
  and bumps the test generation; stale ticks change nothing
- Consumers only observe the latest ReadModel, never a history
- One session per page/session pairing; no state shared across instances
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from readalong_sync.config import (
    DEFAULT_LANGUAGE,
    TEST_MODE_SENTENCE_LIMIT,
    TEST_MODE_TICK_S,
    TEST_MODE_WORD_BOUND,
)
from readalong_sync.core.estimator import estimate, progress_map
from readalong_sync.core.highlight import render_page
from readalong_sync.core.ir import (
    AudioState,
    Idle,
    PlaybackProgress,
    PlayingSentence,
    PlayingWhole,
    ReadingMode,
    ReadModel,
    SyncState,
    TestMode,
)
from readalong_sync.core.segmenter import segment
from readalong_sync.core.ticker import ThreadingTicker, Ticker, TickerFactory

logger = logging.getLogger(__name__)

Listener = Callable[[ReadModel], None]


# ---------------------------------------------------------------------------
# Tick events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProgressTick:
    """New playback progress from the audio collaborator."""

    fraction: float
    duration_s: float


@dataclass(frozen=True)
class TestTick:
    """A test-mode timer tick scheduled under ``generation``."""

    __test__ = False  # not a pytest test class

    generation: int


TickEvent = Union[ProgressTick, TestTick, None]


# ---------------------------------------------------------------------------
# Pure derivation
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SessionSnapshot:
    """Every input the derivation needs, frozen at one instant."""

    audio_state: AudioState
    test_state: Optional[TestMode]
    progress: PlaybackProgress
    sentences: Tuple[str, ...]
    language: str
    reading_mode: ReadingMode
    generation: int = 0

    @property
    def effective_state(self) -> SyncState:
        """TestMode when present, otherwise the audio state."""
        if self.test_state is not None:
            return self.test_state
        return self.audio_state


def derive(snapshot: SessionSnapshot) -> ReadModel:
    """Compute the read model for one tick: position → progress → render."""
    state = snapshot.effective_state
    position = estimate(state, snapshot.progress, snapshot.sentences, snapshot.language)
    progress = progress_map(position, snapshot.sentences)
    rendered = tuple(render_page(snapshot.sentences, position))
    return ReadModel(
        state=state,
        position=position,
        progress=progress,
        sentences=rendered,
        language=snapshot.language,
        reading_mode=snapshot.reading_mode,
        generation=snapshot.generation,
    )


def advance_test_state(state: TestMode, sentence_count: int) -> TestMode:
    """Next synthetic test-mode position.

    The word index wraps at TEST_MODE_WORD_BOUND; each wrap moves to the
    next of the first TEST_MODE_SENTENCE_LIMIT sentences (cycling).
    """
    word_index = (state.word_index + 1) % TEST_MODE_WORD_BOUND
    sentence_index = state.sentence_index
    if word_index == 0:
        limit = max(1, min(sentence_count, TEST_MODE_SENTENCE_LIMIT))
        sentence_index = (sentence_index + 1) % limit
    return TestMode(sentence_index=sentence_index, word_index=word_index)


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


class SyncSession:
    """Stateful coordinator for one page of one reading session.

    WHY: Highlighting depends on several inputs that change independently
    (playback progress, play/stop commands, test mode, narration language).
    The session serializes those changes and republishes a consistent
    ReadModel after each one.

    HOW: Commands mutate the inputs under a re-entrant lock, then call
    _publish(), which derives and stores the new ReadModel and notifies
    listeners. The lock exists because ThreadingTicker delivers test ticks
    from a timer thread.

    RULES:
    - read_model always reflects the most recent command or tick
    - Listener exceptions are logged, never propagated
    - close() releases the ticker and drops listeners
    """

    def __init__(
        self,
        page_text: Optional[str] = "",
        primary_language: Optional[str] = None,
        reading_mode: Union[ReadingMode, str] = ReadingMode.PARAGRAPH,
        languages: Optional[Sequence[str]] = None,
        ticker_factory: TickerFactory = ThreadingTicker,
        tick_interval_s: float = TEST_MODE_TICK_S,
    ) -> None:
        self._lock = threading.RLock()
        self.primary_language = (primary_language or DEFAULT_LANGUAGE).lower()
        self.reading_mode = ReadingMode(reading_mode)
        self.languages: List[str] = [lang.lower() for lang in languages] if languages else [self.primary_language]
        self._ticker_factory = ticker_factory
        self._tick_interval_s = tick_interval_s

        self._original_sentences: Tuple[str, ...] = tuple(segment(page_text))
        self._translations: Dict[str, Tuple[str, ...]] = {}
        self._narration_language: Optional[str] = None

        self._audio_state: AudioState = Idle()
        self._progress = PlaybackProgress()
        self._test_state: Optional[TestMode] = None
        self._test_generation = 0
        self._ticker: Optional[Ticker] = None

        self._listeners: List[Listener] = []
        self._generation = 0
        self._read_model = derive(self.snapshot())

    def __enter__(self) -> "SyncSession":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # -- read side ---------------------------------------------------------

    @property
    def read_model(self) -> ReadModel:
        with self._lock:
            return self._read_model

    @property
    def sentences(self) -> Tuple[str, ...]:
        """Sentences of the original page text."""
        return self._original_sentences

    @property
    def translations(self) -> Dict[str, Tuple[str, ...]]:
        with self._lock:
            return dict(self._translations)

    @property
    def narration_language(self) -> str:
        """Language whose speaking rate drives estimation."""
        with self._lock:
            if self.reading_mode is ReadingMode.SENTENCE and self._narration_language:
                return self._narration_language
            return self.primary_language

    @property
    def active_sentences(self) -> Tuple[str, ...]:
        """Sentences the narration reads: a translation in sentence mode, if loaded."""
        with self._lock:
            if self.reading_mode is ReadingMode.SENTENCE and self._narration_language in self._translations:
                return self._translations[self._narration_language]
            return self._original_sentences

    @property
    def audio_state(self) -> AudioState:
        with self._lock:
            return self._audio_state

    @property
    def state(self) -> SyncState:
        """The effective state: test mode shadows the audio state."""
        with self._lock:
            return self._test_state if self._test_state is not None else self._audio_state

    @property
    def test_mode_active(self) -> bool:
        with self._lock:
            return self._test_state is not None

    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return SessionSnapshot(
                audio_state=self._audio_state,
                test_state=self._test_state,
                progress=self._progress,
                sentences=self.active_sentences,
                language=self.narration_language,
                reading_mode=self.reading_mode,
                generation=self._generation,
            )

    def add_listener(self, listener: Listener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    # -- tick entry point --------------------------------------------------

    def tick(self, event: TickEvent = None) -> ReadModel:
        """Apply one event and return the freshly derived read model.

        ProgressTick replaces the playback progress. TestTick advances test
        mode when its generation is current and is ignored otherwise. None
        just recomputes.
        """
        with self._lock:
            if isinstance(event, TestTick):
                if self._test_state is None or event.generation != self._test_generation:
                    logger.debug(
                        "Ignoring stale test tick (generation %d, current %d)",
                        event.generation, self._test_generation,
                    )
                    return self._read_model
                self._test_state = advance_test_state(self._test_state, len(self.active_sentences))
            elif isinstance(event, ProgressTick):
                self._progress = PlaybackProgress(event.fraction, event.duration_s).clamped()
            return self._publish()

    def update_progress(self, fraction: float, duration_s: float) -> ReadModel:
        return self.tick(ProgressTick(fraction=fraction, duration_s=duration_s))

    # -- page and language commands ----------------------------------------

    def load_page(self, page_text: Optional[str]) -> ReadModel:
        """Replace the page text model. Playback stops; test mode restarts at 0/0."""
        with self._lock:
            self._original_sentences = tuple(segment(page_text))
            self._translations = {}
            self._narration_language = None
            self._set_audio_state(Idle(), reason="page change")
            self._progress = PlaybackProgress()
            if self._test_state is not None:
                self._test_state = TestMode()
            logger.info("Loaded page with %d sentences", len(self._original_sentences))
            return self._publish()

    def set_translations(self, translations: Mapping[str, Optional[str]]) -> ReadModel:
        """Segment per-language translated text once and keep it for the page.

        Languages with empty text are skipped. The narration language is
        kept if it is still available, otherwise it becomes the first
        requested language that has a translation.
        """
        with self._lock:
            segmented: Dict[str, Tuple[str, ...]] = {}
            for lang, text in translations.items():
                sentences = tuple(segment(text))
                if sentences:
                    segmented[lang.lower()] = sentences
            self._translations = segmented

            if self._narration_language not in segmented:
                preferred = [lang for lang in self.languages if lang in segmented]
                fallback = list(segmented)
                chosen = (preferred or fallback or [None])[0]
                if chosen != self._narration_language:
                    logger.info("Narration language set to %s", chosen)
                self._narration_language = chosen
            return self._publish()

    def select_narration_language(self, language: Optional[str]) -> ReadModel:
        """Choose which language's narration drives estimation in sentence mode.

        An empty or None code clears the selection so the primary language
        is used. Does not change the synchronization state.
        """
        with self._lock:
            code = (language or "").strip().lower() or None
            if code is None:
                logger.debug("Narration language cleared; using %s", self.primary_language)
            elif code not in self._translations:
                logger.debug("No translated sentences for %s; using page sentences", code)
            self._narration_language = code
            return self._publish()

    # -- playback commands -------------------------------------------------

    def play_whole(self, duration_s: Optional[float] = None) -> ReadModel:
        """Whole-page narration started (or resumed)."""
        with self._lock:
            if isinstance(self._audio_state, PlayingSentence):
                self._set_audio_state(Idle(), reason="switching to whole-page narration")
            if duration_s is not None:
                self._progress = PlaybackProgress(self._progress.fraction, duration_s).clamped()
            self._set_audio_state(PlayingWhole(), reason="play whole page")
            return self._publish()

    def play_sentence(self, sentence_index: int) -> ReadModel:
        """An isolated sentence narration started; whole-page estimation pauses."""
        with self._lock:
            if isinstance(self._audio_state, PlayingWhole):
                self._set_audio_state(Idle(), reason="switching to sentence narration")
            count = len(self.active_sentences)
            index = max(0, min(sentence_index, count - 1)) if count else 0
            self._set_audio_state(PlayingSentence(sentence_index=index), reason="play sentence")
            return self._publish()

    def stop(self, reason: str = "stop") -> ReadModel:
        """Playback stopped, paused, or completed."""
        with self._lock:
            self._set_audio_state(Idle(), reason=reason)
            return self._publish()

    # -- test mode ---------------------------------------------------------

    def start_test_mode(self) -> ReadModel:
        with self._lock:
            if self._test_state is not None:
                return self._read_model
            self._test_generation += 1
            generation = self._test_generation
            self._test_state = TestMode()
            self._ticker = self._ticker_factory(
                self._tick_interval_s,
                lambda: self.tick(TestTick(generation=generation)),
            )
            self._ticker.start()
            logger.info("Test mode started (generation %d)", generation)
            return self._publish()

    def stop_test_mode(self) -> ReadModel:
        with self._lock:
            if self._test_state is None:
                return self._read_model
            if self._ticker is not None:
                self._ticker.cancel()
                self._ticker = None
            self._test_state = None
            self._test_generation += 1
            logger.info("Test mode stopped")
            return self._publish()

    def toggle_test_mode(self) -> ReadModel:
        with self._lock:
            if self._test_state is None:
                return self.start_test_mode()
            return self.stop_test_mode()

    def close(self) -> None:
        """Stop test mode and drop listeners. Safe to call more than once."""
        with self._lock:
            self.stop_test_mode()
            self._listeners = []

    # -- internals ---------------------------------------------------------

    def _set_audio_state(self, new_state: AudioState, reason: str) -> None:
        if new_state != self._audio_state:
            logger.info("Audio state %s -> %s (%s)", self._audio_state.kind, new_state.kind, reason)
        self._audio_state = new_state

    def _publish(self) -> ReadModel:
        self._generation += 1
        self._read_model = derive(self.snapshot())
        for listener in list(self._listeners):
            try:
                listener(self._read_model)
            except Exception:
                logger.exception("Read model listener failed")
        return self._read_model

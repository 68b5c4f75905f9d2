"""Highlight rendering: sentences → tagged word segments.

WHY: The presentation layer needs to know, for every word on the page,
whether it is the word being spoken, already spoken, waiting in the active
sentence, or outside the active sentence. Producing tagged data instead of
markup keeps the engine independent of any UI technology.

HOW: Tokenize the sentence exactly as the estimator counts words, then tag
each token by comparing the sentence index and word index against the
active position.

RULES:
- current: active sentence and the active word
- past: active sentence, a word before the active word
- active_sentence: active sentence, not yet reached
- inactive: any word of a sentence that is not active
- Tags are mutually exclusive and total; output is deterministic
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from readalong_sync.core.ir import Position, RenderedSentence, WordSegment, WordTag
from readalong_sync.core.segmenter import tokenize


def _tag_for(
    word_index: int,
    is_active_sentence: bool,
    active_word_index: Optional[int],
) -> WordTag:
    if not is_active_sentence:
        return WordTag.INACTIVE
    if active_word_index is None:
        return WordTag.ACTIVE_SENTENCE
    if word_index == active_word_index:
        return WordTag.CURRENT
    if word_index < active_word_index:
        return WordTag.PAST
    return WordTag.ACTIVE_SENTENCE


def render(
    sentence: str,
    sentence_index: int,
    active_sentence_index: Optional[int],
    active_word_index: Optional[int],
) -> List[WordSegment]:
    """Tag every word of one sentence.

    Args:
        sentence: The sentence text.
        sentence_index: Position of this sentence on the page.
        active_sentence_index: The estimated active sentence, or None.
        active_word_index: The estimated active word, or None.

    Returns:
        One WordSegment per whitespace-delimited token, in order.
    """
    is_active = active_sentence_index is not None and active_sentence_index == sentence_index
    return [
        WordSegment(
            text=word,
            word_index=index,
            sentence_index=sentence_index,
            tag=_tag_for(index, is_active, active_word_index),
        )
        for index, word in enumerate(tokenize(sentence))
    ]


def render_page(sentences: Sequence[str], position: Position) -> List[RenderedSentence]:
    """Render every sentence of the page against one position."""
    return [
        RenderedSentence(
            sentence_index=index,
            text=sentence,
            words=tuple(render(sentence, index, position.sentence_index, position.word_index)),
        )
        for index, sentence in enumerate(sentences)
    ]

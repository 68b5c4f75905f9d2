"""Unit tests for highlight rendering."""

import pytest

from readalong_sync.core.highlight import render, render_page
from readalong_sync.core.ir import Position, WordTag

SENTENCE = "Hello brave new world."


def _tags(segments):
    return [s.tag for s in segments]


class TestRender:
    """Tagging words of one sentence against the active position."""

    def test_current_and_past(self):
        segments = render(SENTENCE, 0, 0, 1)
        assert _tags(segments) == [
            WordTag.PAST,
            WordTag.CURRENT,
            WordTag.ACTIVE_SENTENCE,
            WordTag.ACTIVE_SENTENCE,
        ]

    def test_first_word_current(self):
        assert _tags(render(SENTENCE, 2, 2, 0))[0] is WordTag.CURRENT

    def test_inactive_sentence(self):
        assert set(_tags(render(SENTENCE, 1, 0, 1))) == {WordTag.INACTIVE}

    def test_no_active_sentence(self):
        assert set(_tags(render(SENTENCE, 0, None, None))) == {WordTag.INACTIVE}

    def test_active_sentence_without_word(self):
        assert set(_tags(render(SENTENCE, 0, 0, None))) == {WordTag.ACTIVE_SENTENCE}

    def test_word_index_past_the_end_marks_all_past(self):
        assert set(_tags(render(SENTENCE, 0, 0, 9))) == {WordTag.PAST}

    def test_exactly_one_current_word(self):
        segments = render(SENTENCE, 0, 0, 3)
        assert _tags(segments).count(WordTag.CURRENT) == 1

    def test_segment_fields(self):
        segments = render(SENTENCE, 4, 4, 0)
        assert [s.text for s in segments] == ["Hello", "brave", "new", "world."]
        assert [s.word_index for s in segments] == [0, 1, 2, 3]
        assert {s.sentence_index for s in segments} == {4}

    def test_deterministic(self):
        assert render(SENTENCE, 0, 0, 2) == render(SENTENCE, 0, 0, 2)

    @pytest.mark.parametrize("sentence", ["", "   "])
    def test_empty_sentence(self, sentence):
        assert render(sentence, 0, 0, 0) == []


class TestRenderPage:

    def test_one_entry_per_sentence(self, sample_sentences):
        rendered = render_page(sample_sentences, Position(1, 2))
        assert [r.sentence_index for r in rendered] == [0, 1, 2]
        assert [r.text for r in rendered] == sample_sentences

    def test_only_active_sentence_is_tagged(self, sample_sentences):
        rendered = render_page(sample_sentences, Position(1, 2))
        assert {w.tag for w in rendered[0].words} == {WordTag.INACTIVE}
        assert {w.tag for w in rendered[2].words} == {WordTag.INACTIVE}
        assert rendered[1].words[2].tag is WordTag.CURRENT

    def test_words_rejoin_to_sentence(self, sample_sentences):
        rendered = render_page(sample_sentences, Position())
        assert [" ".join(w.text for w in r.words) for r in rendered] == sample_sentences

    def test_empty_page(self):
        assert render_page([], Position(0, 0)) == []

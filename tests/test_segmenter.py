"""Unit tests for sentence segmentation and tokenization.

WHY: Every downstream index depends on the segmenter. A sentence split in
the wrong place shifts every later sentence and word offset, so the
highlight drifts for the rest of the page.

HOW: Cases cover plain prose, abbreviations, the lookahead rules, newline
handling, the degenerate inputs, and the regressions where an abbreviation
used to come back as a standalone sentence.
"""

import pytest

from readalong_sync.core.segmenter import (
    ABBREVIATIONS,
    closes_sentence,
    count_words,
    is_abbreviation,
    segment,
    tokenize,
)


# ---------------------------------------------------------------------------
# Basic splitting
# ---------------------------------------------------------------------------


class TestBasicSplitting:
    """Plain prose with terminal punctuation."""

    def test_simple_sentences(self):
        text = "This is first sentence. This is second sentence. This is third sentence."
        assert segment(text) == [
            "This is first sentence.",
            "This is second sentence.",
            "This is third sentence.",
        ]

    def test_exclamation_and_question_marks(self):
        assert segment("What a day! How are you? I am fine.") == [
            "What a day!",
            "How are you?",
            "I am fine.",
        ]

    def test_no_terminal_punctuation_is_one_sentence(self):
        text = "This is a sentence without ending punctuation"
        assert segment(text) == [text]

    def test_lowercase_after_period_still_splits(self):
        assert segment("This is first. this should still be separate sentence.") == [
            "This is first.",
            "this should still be separate sentence.",
        ]

    def test_ellipsis_ends_sentence_once(self):
        assert segment("This is weird... But it happens sometimes.") == [
            "This is weird...",
            "But it happens sometimes.",
        ]

    def test_sentences_are_trimmed(self):
        assert segment("  Leading space. Trailing space.  ") == [
            "Leading space.",
            "Trailing space.",
        ]

    def test_long_literary_sentences(self):
        text = (
            "It was the best of times, it was the worst of times. "
            "There were a king with a large jaw and a queen with a plain face, "
            "on the throne of England."
        )
        assert segment(text) == [
            "It was the best of times, it was the worst of times.",
            "There were a king with a large jaw and a queen with a plain face, "
            "on the throne of England.",
        ]

    def test_hyphenated_numbers(self):
        text = (
            "It was the year of Our Lord one thousand seven hundred and seventy-five. "
            "Spiritual revelations were conceded to England."
        )
        assert segment(text) == [
            "It was the year of Our Lord one thousand seven hundred and seventy-five.",
            "Spiritual revelations were conceded to England.",
        ]


# ---------------------------------------------------------------------------
# Degenerate input
# ---------------------------------------------------------------------------


class TestDegenerateInput:
    """Empty, blank, and non-string input never raises."""

    @pytest.mark.parametrize("text", ["", "   ", "\n\n", None, 42, ["a. b."]])
    def test_returns_empty_list(self, text):
        assert segment(text) == []

    def test_only_punctuation(self):
        assert segment("...") == ["..."]


# ---------------------------------------------------------------------------
# Abbreviations
# ---------------------------------------------------------------------------


class TestAbbreviations:
    """Known abbreviations never close a sentence."""

    def test_mrs(self):
        assert segment("Mrs. Smith went to the store. She bought apples.") == [
            "Mrs. Smith went to the store.",
            "She bought apples.",
        ]

    def test_mr(self):
        assert segment("Mr. Johnson is here. He brought documents.") == [
            "Mr. Johnson is here.",
            "He brought documents.",
        ]

    def test_dr(self):
        assert segment("Dr. Williams examined the patient. The diagnosis was clear.") == [
            "Dr. Williams examined the patient.",
            "The diagnosis was clear.",
        ]

    def test_multiple_abbreviations_in_one_sentence(self):
        text = "Mr. and Mrs. Johnson visited Dr. Smith yesterday. They were very pleased."
        assert segment(text) == [
            "Mr. and Mrs. Johnson visited Dr. Smith yesterday.",
            "They were very pleased.",
        ]

    def test_business_abbreviations(self):
        assert segment("Apple Inc. released new products. Microsoft Corp. followed suit.") == [
            "Apple Inc. released new products.",
            "Microsoft Corp. followed suit.",
        ]

    def test_meridiem(self):
        assert segment("The meeting is at 3:30 p.m. today. Don't be late.") == [
            "The meeting is at 3:30 p.m. today.",
            "Don't be late.",
        ]

    def test_etc_is_not_an_abbreviation(self):
        assert segment("We need apples, oranges, bananas, etc. Please buy them today.") == [
            "We need apples, oranges, bananas, etc.",
            "Please buy them today.",
        ]

    def test_text_ending_with_abbreviation(self):
        assert segment("The company is called Apple Inc.") == [
            "The company is called Apple Inc.",
        ]

    def test_et_al_phrase(self):
        assert segment("Smith et al. Found the same result. Nobody else did.") == [
            "Smith et al. Found the same result.",
            "Nobody else did.",
        ]

    def test_matching_is_case_sensitive(self):
        # "MRS" is not in the table, so the period closes the sentence
        assert segment("Ask MRS. Then leave.") == ["Ask MRS.", "Then leave."]

    def test_southcott_example(self):
        text = (
            "Mrs. Southcott had recently attained her five-and-twentieth blessed birthday. "
            "Even the Cock-lane ghost had been laid."
        )
        assert segment(text) == [
            "Mrs. Southcott had recently attained her five-and-twentieth blessed birthday.",
            "Even the Cock-lane ghost had been laid.",
        ]


class TestAbbreviationRegressions:
    """Abbreviations must never come back as standalone sentences."""

    @pytest.mark.parametrize("text", [
        "Mrs. Smith is nice.",
        "Hello Mrs. Johnson how are you?",
        "The letter was from Mrs. Brown yesterday.",
        "Mrs. Southcott had recently attained her five-and-twentieth blessed birthday.",
    ])
    def test_mrs_never_standalone(self, text):
        assert "Mrs." not in [s.strip() for s in segment(text)]

    @pytest.mark.parametrize("abbrev", sorted(ABBREVIATIONS))
    def test_every_abbreviation_never_standalone(self, abbrev):
        token = "{}.".format(abbrev)
        result = segment("Hello {} Smith is here. How are you?".format(token))
        assert token not in [s.strip() for s in result]
        assert result == ["Hello {} Smith is here.".format(token), "How are you?"]

    def test_abbreviation_does_not_change_sentence_count(self):
        assert len(segment("First sentence. Second sentence. Third sentence.")) == 3
        assert len(segment("First sentence with Mr. Smith. Second sentence. Third sentence.")) == 3


class TestIsAbbreviation:
    """The abbreviation check in isolation."""

    @pytest.mark.parametrize("buffer", ["Hello Mr.", "at 3 p.m.", "Mrs.", "see e.g.", "Smith et al."])
    def test_known(self, buffer):
        assert is_abbreviation(buffer)

    @pytest.mark.parametrize("buffer", ["", "   ", "The end.", "etc.", "mr."])
    def test_unknown(self, buffer):
        assert not is_abbreviation(buffer)

    def test_table_contains_titles(self):
        assert {"Mr", "Mrs", "Ms", "Dr", "Prof"} <= ABBREVIATIONS


# ---------------------------------------------------------------------------
# Lookahead
# ---------------------------------------------------------------------------


class TestLookahead:
    """Which characters after a mark confirm a boundary."""

    def test_end_of_text(self):
        assert closes_sentence("Done.", 4)

    def test_space_then_letter(self):
        assert closes_sentence("Done. Next", 4)

    def test_space_then_end_of_text(self):
        assert closes_sentence("Done. ", 4)

    def test_newline(self):
        assert closes_sentence("Done.\nNext", 4)

    def test_carriage_return(self):
        assert closes_sentence("Done.\r\nNext", 4)

    @pytest.mark.parametrize("text", ["Done.. x", "Done. 42", 'Done. "Next"', "Done.  Next", "3.5"])
    def test_no_boundary(self, text):
        index = text.index(".")
        assert not closes_sentence(text, index)

    def test_decimal_number_not_split(self):
        assert segment("The price rose 3.5 percent. Nobody noticed.") == [
            "The price rose 3.5 percent.",
            "Nobody noticed.",
        ]

    def test_quote_after_mark_does_not_split(self):
        assert segment('He said "Stop." Then he left.') == ['He said "Stop." Then he left.']

    def test_digit_after_space_does_not_split(self):
        assert segment("See chapter one. 42 is the answer.") == [
            "See chapter one. 42 is the answer.",
        ]


class TestNewlines:
    """Newlines after terminal punctuation are sentence boundaries."""

    def test_newline_boundary(self):
        assert segment("First sentence.\nSecond sentence.") == [
            "First sentence.",
            "Second sentence.",
        ]

    def test_crlf_boundary(self):
        assert segment("First sentence.\r\nSecond sentence.") == [
            "First sentence.",
            "Second sentence.",
        ]

    def test_newline_without_punctuation_does_not_split(self):
        assert segment("A line\nthat continues.") == ["A line\nthat continues."]


# ---------------------------------------------------------------------------
# Tokenization
# ---------------------------------------------------------------------------


class TestTokenize:
    """Whitespace tokenization shared by the estimator and renderer."""

    def test_punctuation_stays_attached(self):
        assert tokenize("Hello, world!") == ["Hello,", "world!"]

    def test_collapses_whitespace(self):
        assert tokenize("  a \t b\nc  ") == ["a", "b", "c"]

    def test_non_string(self):
        assert tokenize(None) == []

    def test_count_words(self):
        assert count_words("Mrs. Smith read the letter aloud.") == 6
        assert count_words("") == 0


# ---------------------------------------------------------------------------
# Whole-output properties
# ---------------------------------------------------------------------------


class TestSegmentationProperties:
    """Whatever the input, sentences are trimmed and no word is lost."""

    @pytest.mark.parametrize("text", [
        "This is first sentence. This is second sentence.",
        "Mrs. Smith went to the store. She bought apples!",
        "Wait... what? Really?! Yes.",
        "It costs 3.50 dollars. That is cheap.",
        'He said "Stop." Then he left.',
        "First line.\nSecond line.\r\nThird line.\rFourth line.",
        "Two  spaces.  Then more.   End.",
        "Meet Dr. Jones at 10 a.m. on Mon. He is late.",
        "  Leading and trailing blanks.  \n\n  Another paragraph.  ",
        "No terminal punctuation at all",
        "Smith et al. wrote it. See e.g. chapter two.",
        "Tabs\tinside. And\tmore.",
    ])
    def test_sentences_trimmed_and_words_preserved(self, text):
        result = segment(text)
        assert result
        assert all(s and s == s.strip() for s in result)
        assert " ".join(result).split() == text.split()

"""Sentence segmentation and word tokenization for page text.

WHY: Highlighting works sentence by sentence, so raw page prose has to be
split into sentences before anything can be estimated or rendered. Naive
splitting on "." breaks "Mrs. Smith" into two sentences and cuts decimal
numbers apart; a wrong split shifts every later sentence's word offsets.

HOW: A small two-state scanner walks the text one character at a time,
accumulating a buffer:
  ACCUMULATING        — ordinary characters are appended to the buffer
  TENTATIVE_BOUNDARY  — entered on ".", "!" or "?"; resolved immediately by
                        the abbreviation check and the one-to-two character
                        lookahead, then either closes the sentence or falls
                        back to ACCUMULATING
The abbreviation check and the lookahead are separate functions so each
can be tested in isolation.

RULES:
- Terminal punctuation: ".", "!", "?"
- The last whitespace-delimited word before the mark (trailing marks
  stripped) is compared case-sensitively against ABBREVIATIONS; a match
  never closes a sentence
- Otherwise the mark closes the sentence only when followed by end of text,
  a newline, or a single space followed by end of text or an ASCII letter
  (either case)
- The whitespace character that triggered the boundary is consumed
- Any non-empty remainder becomes the final sentence
- Empty, whitespace-only, None, or non-string input → []
- Never raises
"""

from __future__ import annotations

import enum
import re
import string
from typing import Any, List

# Punctuation that may end a sentence.
TERMINAL_PUNCTUATION = frozenset({".", "!", "?"})

# Known abbreviations whose trailing period never ends a sentence.
# Matching is case-sensitive; meridiem marks are listed in both cases.
ABBREVIATIONS = frozenset({
    # titles
    "Mr", "Mrs", "Ms", "Dr", "Prof", "Sr", "Jr",
    # addresses
    "St", "Ave", "Rd", "Blvd",
    # corporate
    "Co", "Corp", "Inc", "Ltd",
    # latin
    "vs", "e.g", "i.e", "cf", "et al",
    # references and units
    "No", "Vol", "Ch", "pp", "Fig", "Ref",
    # months
    "Jan", "Feb", "Mar", "Apr", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
    # weekdays
    "Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun",
    # meridiem
    "a.m", "p.m", "A.M", "P.M",
})

_TRAILING_TERMINALS_RE = re.compile(r"[.!?]+$")
_ASCII_LETTERS = frozenset(string.ascii_letters)
_NEWLINES = frozenset({"\n", "\r"})


class _ScanState(enum.Enum):
    ACCUMULATING = "accumulating"
    TENTATIVE_BOUNDARY = "tentative_boundary"


def tokenize(sentence: Any) -> List[str]:
    """Split a sentence into whitespace-delimited words.

    Punctuation attached to a word stays part of that word. This is the
    single definition of "word" used by the estimator and the renderer.
    """
    if not isinstance(sentence, str):
        return []
    return sentence.split()


def count_words(sentence: Any) -> int:
    return len(tokenize(sentence))


def is_abbreviation(buffer: str) -> bool:
    """Return True if the buffer ends with a known abbreviation plus marks.

    WHY: "Mrs." and "Inc." end in a period but almost never end a sentence.

    HOW: Take the last whitespace-delimited word of the trimmed buffer and
    strip its trailing terminal marks. Multi-word entries ("et al") are
    matched against the last two words joined by a single space.

    RULES:
    - Case-sensitive comparison against ABBREVIATIONS
    - An empty buffer is never an abbreviation
    """
    words = buffer.split()
    if not words:
        return False
    candidate = _TRAILING_TERMINALS_RE.sub("", words[-1])
    if candidate in ABBREVIATIONS:
        return True
    if len(words) >= 2:
        phrase = "{} {}".format(words[-2], candidate)
        return phrase in ABBREVIATIONS
    return False


def closes_sentence(text: str, index: int) -> bool:
    """Decide from the lookahead whether the mark at ``index`` ends a sentence.

    RULES:
    - End of text → True
    - Newline ("\\n" or "\\r") → True
    - A single space followed by end of text or an ASCII letter → True
    - Anything else (another mark, a digit, a quote, two spaces) → False
    """
    next_index = index + 1
    if next_index >= len(text):
        return True
    next_char = text[next_index]
    if next_char in _NEWLINES:
        return True
    if next_char == " ":
        after_index = index + 2
        if after_index >= len(text):
            return True
        return text[after_index] in _ASCII_LETTERS
    return False


def _consumed_whitespace(text: str, index: int) -> int:
    """Number of characters after ``index`` swallowed by a sentence boundary."""
    next_index = index + 1
    if next_index >= len(text):
        return 0
    if text.startswith("\r\n", next_index):
        return 2
    if text[next_index] in _NEWLINES or text[next_index] == " ":
        return 1
    return 0


def segment(text: Any) -> List[str]:
    """Split page text into an ordered list of trimmed, non-empty sentences.

    Args:
        text: Raw page text. None, non-strings, and blank text yield [].

    Returns:
        Sentences in reading order. Re-joining them with single spaces
        approximates the input modulo whitespace normalization.
    """
    if not isinstance(text, str) or not text.strip():
        return []

    sentences: List[str] = []
    buffer: List[str] = []
    state = _ScanState.ACCUMULATING

    def _flush() -> None:
        sentence = "".join(buffer).strip()
        if sentence:
            sentences.append(sentence)
        buffer.clear()

    i = 0
    length = len(text)
    while i < length:
        char = text[i]
        buffer.append(char)

        if char in TERMINAL_PUNCTUATION:
            state = _ScanState.TENTATIVE_BOUNDARY

        if state is _ScanState.TENTATIVE_BOUNDARY:
            state = _ScanState.ACCUMULATING
            if not is_abbreviation("".join(buffer)) and closes_sentence(text, i):
                _flush()
                i += _consumed_whitespace(text, i)

        i += 1

    _flush()
    return sentences

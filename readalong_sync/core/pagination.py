"""Book pagination and narration chunking.

WHY: Page text handed to the segmenter comes from splitting a whole book
into pages of roughly equal length, and narration services reject
requests over a character limit. Both splits should prefer sentence ends
so a page or chunk does not begin mid-sentence.

HOW: paginate() walks the book's words, and when a page fills up it cuts
after the last ".", "?" or "!" if that mark sits in the last 30% of the
page text, carrying the remaining words to the next page. split_for_tts()
groups sentence-like runs into chunks that stay under max_length.

RULES:
- Words are whitespace-delimited; pages are re-joined with single spaces
- A page cut happens after words_per_page words; the sentence-end cut is
  only taken when it falls beyond 70% of the page text
- get_page() is 1-based and raises ValueError outside the book
- split_for_tts() returns [text] unchanged when it already fits
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List

from readalong_sync.config import DEFAULT_WORDS_PER_PAGE, TTS_MAX_CHUNK_CHARS

# Share of the page text after which a sentence end is an acceptable cut.
_SENTENCE_CUT_THRESHOLD = 0.7

_SENTENCE_RUN_RE = re.compile(r"[^.!?]+[.!?]+")


@dataclass(frozen=True)
class Page:
    """One page of a book.

    Attributes:
        content: Page text, words joined by single spaces.
        page_number: 1-based page number.
        total_pages: Number of pages in the book.
    """

    content: str
    page_number: int
    total_pages: int


def _last_sentence_end(text: str) -> int:
    return max(text.rfind("."), text.rfind("?"), text.rfind("!"))


def paginate(content: str, words_per_page: int = DEFAULT_WORDS_PER_PAGE) -> List[str]:
    """Split book text into pages of about ``words_per_page`` words.

    Args:
        content: Full book text.
        words_per_page: Target number of words per page (minimum 1).

    Returns:
        Page texts in order. Empty or blank content yields [].
    """
    if not content:
        return []
    words_per_page = max(1, words_per_page)

    pages: List[str] = []
    current: List[str] = []

    for word in content.split():
        current.append(word)
        if len(current) < words_per_page:
            continue

        page_text = " ".join(current)
        cut = _last_sentence_end(page_text)
        if cut > len(page_text) * _SENTENCE_CUT_THRESHOLD:
            pages.append(page_text[:cut + 1])
            current = page_text[cut + 1:].split()
        else:
            pages.append(page_text)
            current = []

    if current:
        pages.append(" ".join(current))

    return pages


def get_page(
    content: str,
    page_number: int,
    words_per_page: int = DEFAULT_WORDS_PER_PAGE,
) -> Page:
    """Return one page of the book.

    Raises:
        ValueError: If page_number is outside 1..total_pages.
    """
    pages = paginate(content, words_per_page)
    if page_number < 1 or page_number > len(pages):
        raise ValueError(
            "Invalid page number {}. Book has {} pages.".format(page_number, len(pages))
        )
    return Page(content=pages[page_number - 1], page_number=page_number, total_pages=len(pages))


def split_for_tts(text: str, max_length: int = TTS_MAX_CHUNK_CHARS) -> List[str]:
    """Split text into narration requests no longer than ``max_length``.

    Sentence runs are packed greedily; a single run longer than the limit
    becomes its own chunk. Text after the last sentence end is kept.
    """
    if len(text) <= max_length:
        return [text]

    matches = list(_SENTENCE_RUN_RE.finditer(text))
    runs = [m.group(0) for m in matches]
    tail = text[matches[-1].end():] if matches else text
    if tail.strip():
        runs.append(tail)

    chunks: List[str] = []
    current = ""
    for run in runs:
        if current and len(current + run) > max_length:
            chunks.append(current.strip())
            current = run
        else:
            current += run

    if current.strip():
        chunks.append(current.strip())

    return chunks

"""HTML span formatter reproducing the reader's highlight styling.

WHY: A static HTML preview of the highlight is the quickest way to check
what a reader would see at a given tick, without running the web client.

HOW: Each sentence becomes a <p>; each word a <span> carrying the utility
classes of its tag plus data-word / data-sentence attributes. Words are
joined by single spaces. Text is HTML-escaped.

RULES:
- Every span has the base transition classes
- current → strong yellow highlight; past → light yellow;
  active_sentence → faint yellow; inactive → base classes only
- Output suffix: "-readalong.html"
"""

from __future__ import annotations

import html
from typing import Dict, List

from readalong_sync.core.ir import ReadModel, RenderedSentence, WordTag
from readalong_sync.formatters.base import BaseFormatter, FormatterOutput

BASE_CLASSES = "inline transition-all duration-300 ease-in-out"

TAG_CLASSES: Dict[WordTag, str] = {
    WordTag.CURRENT: "bg-yellow-300 text-yellow-900 font-semibold px-1 rounded shadow-sm animate-pulse",
    WordTag.PAST: "bg-yellow-100 text-yellow-800 px-1 rounded",
    WordTag.ACTIVE_SENTENCE: "bg-yellow-50",
    WordTag.INACTIVE: "",
}


def _span(text: str, word_index: int, sentence_index: int, tag: WordTag) -> str:
    extra = TAG_CLASSES[tag]
    classes = "{} {}".format(BASE_CLASSES, extra) if extra else BASE_CLASSES
    return '<span class="{}" data-word="{}" data-sentence="{}">{}</span>'.format(
        classes, word_index, sentence_index, html.escape(text),
    )


def render_sentence_html(rendered: RenderedSentence) -> str:
    """Spans for one rendered sentence, joined by single spaces."""
    return " ".join(
        _span(w.text, w.word_index, w.sentence_index, w.tag) for w in rendered.words
    )


class HTMLSpansFormatter(BaseFormatter):
    """Formatter that produces one <p> of tagged spans per sentence."""

    @property
    def name(self) -> str:
        return "HTML Spans"

    def format(self, read_model: ReadModel) -> List[FormatterOutput]:
        paragraphs = [
            '<p data-sentence="{}">{}</p>'.format(
                rendered.sentence_index, render_sentence_html(rendered),
            )
            for rendered in read_model.sentences
        ]
        content = "\n".join(paragraphs)
        if content:
            content += "\n"
        return [
            FormatterOutput(
                suffix="-readalong.html",
                content=content,
                media_type="text/html",
            )
        ]

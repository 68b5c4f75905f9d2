"""Plain text formatter for terminals and logs.

WHY: The CLI simulation prints the read model after every tick; a compact
text view makes the moving highlight easy to follow.

HOW: One line per sentence. The current word is wrapped in brackets,
past words in underscores, and the active sentence is prefixed by its
completion percentage; other sentences are indented to line up.

RULES:
- "[word]" marks the current word, "_word_" a past word
- Active sentence prefix: " 42%> "; other sentences: six spaces
- Output suffix: "-readalong.txt"
"""

from __future__ import annotations

from typing import List

from readalong_sync.core.ir import ReadModel, WordSegment, WordTag
from readalong_sync.formatters.base import BaseFormatter, FormatterOutput

_INACTIVE_PREFIX = " " * 6


def _mark(word: WordSegment) -> str:
    if word.tag is WordTag.CURRENT:
        return "[{}]".format(word.text)
    if word.tag is WordTag.PAST:
        return "_{}_".format(word.text)
    return word.text


class PlainTextFormatter(BaseFormatter):
    """Formatter that produces one marked-up line per sentence."""

    @property
    def name(self) -> str:
        return "Plain Text"

    def format(self, read_model: ReadModel) -> List[FormatterOutput]:
        lines: List[str] = []
        for rendered in read_model.sentences:
            text = " ".join(_mark(w) for w in rendered.words)
            percentage = read_model.progress.get(rendered.sentence_index)
            if percentage is not None:
                lines.append("{:>3.0f}%> {}".format(percentage, text))
            else:
                lines.append(_INACTIVE_PREFIX + text)

        content = "\n".join(lines)
        if content:
            content += "\n"
        return [
            FormatterOutput(
                suffix="-readalong.txt",
                content=content,
                media_type="text/plain",
            )
        ]

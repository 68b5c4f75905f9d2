"""Read-model formatter registry — pluggable output hub.

WHY: The CLI (and any embedding application) needs a single lookup to
find the right formatter by name. A central dict makes it trivial to add
new formats: create the formatter class, import it here, add one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["json_view"]()``.

RULES:
- Keys are snake_case identifiers (used in CLI flags)
- Values are BaseFormatter subclasses (not instances)
- Every formatter listed here must be importable without side effects
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from readalong_sync.formatters.html_spans import HTMLSpansFormatter
from readalong_sync.formatters.json_view import JSONViewFormatter
from readalong_sync.formatters.plain_text import PlainTextFormatter

if TYPE_CHECKING:
    from readalong_sync.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "plain_text": PlainTextFormatter,
    "json_view": JSONViewFormatter,
    "html_spans": HTMLSpansFormatter,
}

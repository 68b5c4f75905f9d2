"""Abstract base formatter and output container.

WHY: The read model is presentation-agnostic tagged data. Different
consumers want it in different shapes — JSON for a web client, HTML spans
for a quick preview, plain text for a terminal. This base class enforces a
consistent interface so the CLI can work with any formatter generically.

HOW: BaseFormatter is an ABC with two requirements — a ``name`` property
and a ``format()`` method. FormatterOutput is a plain dataclass that
bundles a file suffix with its content and MIME type.

RULES:
- Subclasses MUST implement ``name`` (human-readable) and ``format()``
- ``format()`` returns a list; every current formatter returns one item
- ``suffix`` starts with a hyphen, e.g. ``"-readalong.json"``
- Formatters never mutate the ReadModel
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from readalong_sync.core.ir import ReadModel


@dataclass
class FormatterOutput:
    """One rendered output produced by a formatter.

    Attributes:
        suffix: File suffix appended to a source stem when saved,
                e.g. ``"-readalong.html"``.
        content: The rendered content.
        media_type: MIME type for the content, e.g. ``"text/html"``.
    """

    suffix: str
    content: str
    media_type: str


class BaseFormatter(ABC):
    """Abstract base for all read-model formatters.

    To add a new output format:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter
    3. Implement format() and name
    4. Register in FORMATTERS dict in formatters/__init__.py
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'HTML Spans'."""

    @abstractmethod
    def format(self, read_model: ReadModel) -> list[FormatterOutput]:
        """Convert one read model into one or more outputs.

        Args:
            read_model: The latest derived output of a sync session.

        Returns:
            List of FormatterOutput objects.
        """

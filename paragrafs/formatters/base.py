"""Abstract base formatter and output container.

WHY: Every output format consumes the same marked segments but produces
different file content. This base class enforces a consistent interface
so the CLI can work with any formatter generically.

HOW: BaseFormatter is an ABC with two requirements: a ``name`` property
and a ``format()`` method. FormatterOutput is a plain dataclass that
bundles a file suffix with its content and MIME type.

RULES:
- Subclasses MUST implement ``name`` (human-readable) and ``format()``
- ``format()`` returns a list; current formatters return one item
- ``suffix`` starts with a hyphen, e.g. ``"-segments.json"``
- The caller is responsible for prepending the source filename stem
- max_seconds_per_line=None lets each formatter pick its own line policy
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from paragrafs.core.ir import MarkedSegment


@dataclass
class FormatterOutput:
    """One output file produced by a formatter.

    Attributes:
        suffix: File suffix appended to the source stem,
                e.g. ``"-segments.json"`` → ``"talk-segments.json"``.
        content: The file content.
        media_type: MIME type for the content, e.g. ``"application/json"``.
    """

    suffix: str
    content: str
    media_type: str


class BaseFormatter(ABC):
    """Abstract base for all output formatters.

    To add a new output format:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter
    3. Implement format() and name
    4. Register in FORMATTERS dict in formatters/__init__.py
    """

    def __init__(self, max_seconds_per_line: float | None = None) -> None:
        self.max_seconds_per_line = max_seconds_per_line

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'Segments JSON'."""

    @abstractmethod
    def format(self, segments: list[MarkedSegment]) -> list[FormatterOutput]:
        """Convert marked segments into one or more output files.

        Args:
            segments: Output of the segmentation pipeline.

        Returns:
            List of FormatterOutput objects, each containing a file suffix,
            content string, and MIME type.
        """

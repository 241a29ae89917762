"""Plain text paragraphs formatter.

WHY: Editors need a simple, readable transcript for review and archival:
no timecodes, just paragraphs. This is the simplest output format and
serves as the baseline proof that the pluggable formatter pattern works.

HOW: map_segments_into_formatted_segments() renders each marked segment
as text with newlines at line breaks. Segments become paragraphs
separated by a blank line.

RULES:
- One paragraph per segment, double newline between paragraphs
- Without max_seconds_per_line every SOFT break starts a new line
- Output suffix: "-paragraphs.txt"
- Media type: "text/plain"
"""

from __future__ import annotations

from typing import List

from paragrafs.core.formatting import map_segments_into_formatted_segments
from paragrafs.core.ir import MarkedSegment
from paragrafs.formatters.base import BaseFormatter, FormatterOutput


class PlainTextFormatter(BaseFormatter):
    """Formatter that produces blank-line separated paragraphs."""

    @property
    def name(self) -> str:
        return "Plain Text"

    def format(self, segments: List[MarkedSegment]) -> List[FormatterOutput]:
        formatted = map_segments_into_formatted_segments(segments, self.max_seconds_per_line)
        paragraphs = [segment.text for segment in formatted if segment.text]

        content = "\n\n".join(paragraphs)
        if content:
            content += "\n"

        return [
            FormatterOutput(
                suffix="-paragraphs.txt",
                content=content,
                media_type="text/plain",
            )
        ]

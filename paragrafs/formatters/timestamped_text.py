"""Timestamped transcript formatter.

WHY: Reviewers skim a transcript and jump to the audio. A timestamp at
the start of each line ("1:05: ...") is the most useful plain-text form
for that.

HOW: Delegates to core.formatting.format_segments_to_timestamped_transcript.
Lines break at HARD markers, and at SOFT markers once the line lasts at
least max_seconds_per_line and ends a sentence.

RULES:
- Line format: "m:ss: text" (h:mm:ss past one hour)
- Without an explicit limit, config.MAX_SECONDS_PER_LINE applies
- Output suffix: "-timestamped.txt", trailing newline when non-empty
"""

from __future__ import annotations

from typing import List

from paragrafs import config
from paragrafs.core.formatting import format_segments_to_timestamped_transcript
from paragrafs.core.ir import MarkedSegment
from paragrafs.formatters.base import BaseFormatter, FormatterOutput


class TimestampedTextFormatter(BaseFormatter):
    """Formatter that writes one timestamped line per display line."""

    @property
    def name(self) -> str:
        return "Timestamped Text"

    def format(self, segments: List[MarkedSegment]) -> List[FormatterOutput]:
        limit = self.max_seconds_per_line
        if limit is None:
            limit = config.MAX_SECONDS_PER_LINE

        content = format_segments_to_timestamped_transcript(segments, limit)
        if content:
            content += "\n"

        return [
            FormatterOutput(
                suffix="-timestamped.txt",
                content=content,
                media_type="text/plain",
            )
        ]

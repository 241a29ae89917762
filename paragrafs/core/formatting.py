"""Flatten marked segments into display lines.

WHY: After segmentation the paragraphs still carry break markers. Readers
need plain lines: a timestamped transcript ("0:05: text") or segments
whose text has newlines where the markers say a line should end.

HOW: A LineBuffer collects tokens until a break marker asks for a flush.
HARD breaks always flush. SOFT breaks flush only once the buffered line
is long enough (max_seconds_per_line), so lines are not cut arbitrarily.

RULES:
- HARD breaks always end the current line
- The timestamped transcript only flushes on a SOFT break if the buffered
  line ends with sentence punctuation (no mid-sentence cuts)
- Every segment flushes its remaining buffer at its end
- Token texts are joined with single spaces, lines with newlines
"""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence

from paragrafs.core.ir import BreakMarker, MarkedSegment, Segment, Token
from paragrafs.core.text import format_seconds_to_timestamp, is_ending_with_punctuation

LineFormatter = Callable[[Token], str]


class LineBuffer:
    """Accumulates tokens for the line currently being built."""

    def __init__(self) -> None:
        self.tokens: List[Token] = []
        self.start: Optional[float] = None

    def append(self, token: Token) -> None:
        if self.start is None:
            self.start = token.start
        self.tokens.append(token)

    def is_empty(self) -> bool:
        return not self.tokens

    def duration(self) -> float:
        """Seconds from the first buffered token's start to the last one's end."""
        if self.start is None or not self.tokens:
            return 0.0
        return self.tokens[-1].end - self.start

    def ends_sentence(self) -> bool:
        return bool(self.tokens) and is_ending_with_punctuation(self.tokens[-1].text)

    def flush(self) -> Optional[Token]:
        """Return the buffered line as one token and reset, or None if empty."""
        if not self.tokens:
            return None
        line = Token(
            start=self.tokens[0].start,
            end=self.tokens[-1].end,
            text=" ".join(t.text for t in self.tokens),
        )
        self.tokens = []
        self.start = None
        return line


def _default_line_format(line: Token) -> str:
    return "{}: {}".format(format_seconds_to_timestamp(line.start), line.text)


def format_segments_to_timestamped_transcript(
    segments: Sequence[MarkedSegment],
    max_seconds_per_line: float,
    format_line: Optional[LineFormatter] = None,
) -> str:
    """Render segments as a transcript with a timestamp at each line start.

    WHY: A timestamped transcript is the main human-readable output. Lines
    should be long enough to read comfortably but only end where a
    sentence ends.

    HOW: Walk each segment's items. Tokens go into the line buffer. A HARD
    break flushes. A SOFT break flushes when the buffered line lasts at
    least max_seconds_per_line and its last token ends a sentence.

    RULES:
    - Default line format: "m:ss: text" (h:mm:ss past one hour)
    - format_line receives the line as a Token (start, end, joined text)
    - Lines are joined with "\\n"

    Args:
        segments: Marked segments from the segmentation pipeline.
        max_seconds_per_line: Minimum line duration before a soft break flushes.
        format_line: Optional custom renderer for each line.

    Returns:
        The transcript text.
    """
    render = format_line or _default_line_format
    lines: List[str] = []

    for segment in segments:
        buffer = LineBuffer()

        for item in segment.tokens:
            if item is BreakMarker.HARD:
                line = buffer.flush()
            elif item is BreakMarker.SOFT:
                line = None
                if buffer.duration() >= max_seconds_per_line and buffer.ends_sentence():
                    line = buffer.flush()
            else:
                buffer.append(item)
                continue

            if line is not None:
                lines.append(render(line))

        line = buffer.flush()
        if line is not None:
            lines.append(render(line))

    return "\n".join(lines)


def map_segments_into_formatted_segments(
    segments: Sequence[MarkedSegment],
    max_seconds_per_line: Optional[float] = None,
) -> List[Segment]:
    """Turn marked segments into plain segments with newline-separated text.

    RULES:
    - HARD breaks always start a new line
    - SOFT breaks start a new line when no maximum is given, or when the
      buffered line already lasts longer than max_seconds_per_line
    - Returned segment tokens are the real tokens only, markers removed
    - start/end are copied from the marked segment
    """
    formatted: List[Segment] = []

    for segment in segments:
        buffer = LineBuffer()
        text_parts: List[str] = []
        flat_tokens: List[Token] = []

        for item in segment.tokens:
            if item is BreakMarker.HARD:
                line = buffer.flush()
            elif item is BreakMarker.SOFT:
                line = None
                if not max_seconds_per_line or buffer.duration() > max_seconds_per_line:
                    line = buffer.flush()
            else:
                buffer.append(item)
                flat_tokens.append(item)
                continue

            if line is not None:
                text_parts.append(line.text)

        line = buffer.flush()
        if line is not None:
            text_parts.append(line.text)

        formatted.append(Segment(
            start=segment.start,
            end=segment.end,
            text="\n".join(text_parts),
            tokens=flat_tokens,
        ))

    return formatted

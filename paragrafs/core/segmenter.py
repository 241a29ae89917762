"""Paragraph segmentation: divider marking, cleanup, grouping, and merging.

WHY: ASR output is a flat run of timed words with no paragraph structure.
Readers need paragraphs that start at natural boundaries (pauses,
sentence ends, filler words, known opening phrases) and stay within a
readable duration. This module decides where those boundaries go.

HOW: Four passes, each producing new lists:
  1. mark_tokens_with_dividers(): interleave SOFT/HARD break markers
  2. cleanup_isolated_tokens(): drop soft breaks that strand one word
  3. group_marked_tokens_into_segments(): close segments at breaks once
     the running duration passes the maximum
  4. merge_short_segments_with_previous(): fold tiny segments backwards
mark_and_combine_segments() runs all four over a list of input segments.

RULES:
- Filler tokens are replaced by a soft break; they never reach the output
- Hint phrases put a HARD break before their first token
- HARD breaks survive every pass; only SOFT breaks are elided
- Segments only close right before a break marker (or at end of input)
- Input lists and segments are never mutated
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from paragrafs.core.ir import (
    BreakMarker,
    Hints,
    MarkedSegment,
    MarkedToken,
    Segment,
    SegmentationOptions,
    Token,
    is_break,
)
from paragrafs.core.text import is_ending_with_punctuation, normalize_token_text

logger = logging.getLogger(__name__)


def estimate_segment_from_token(token: Token) -> Segment:
    """Split a multi-word token into evenly timed word tokens.

    WHY: Some providers return a whole phrase as one timed token. Without
    word timings nothing downstream can place breaks inside it, so each
    word gets an equal share of the token's duration.

    RULES:
    - Words are split on whitespace
    - The returned segment keeps the token's text, start, and end
    """
    words = token.text.split()
    if not words:
        return Segment(start=token.start, end=token.end, text=token.text, tokens=[])

    slot = (token.end - token.start) / len(words)
    tokens = [
        Token(
            start=token.start + i * slot,
            end=token.start + (i + 1) * slot,
            text=word,
        )
        for i, word in enumerate(words)
    ]
    return Segment(start=token.start, end=token.end, text=token.text, tokens=tokens)


def is_hint_matched(
    normalized_texts: Sequence[str],
    hints: Hints,
    index: int,
) -> bool:
    """True if one of the hint phrases starts at ``index``.

    HOW: Look up the phrases keyed by the normalized word at ``index`` and
    compare each one word by word against the following tokens.

    RULES:
    - normalized_texts must be normalized with hints.normalization
    - Match is exact, ordered, and contiguous
    - A phrase running past the end of the tokens never matches
    """
    candidates = hints.map.get(normalized_texts[index])
    if not candidates:
        return False

    for words in candidates:
        end = index + len(words)
        if end > len(normalized_texts):
            continue
        if list(normalized_texts[index:end]) == words:
            return True

    return False


def mark_tokens_with_dividers(
    tokens: Sequence[Token],
    gap_threshold: float,
    fillers: Optional[Sequence[str]] = None,
    hints: Optional[Hints] = None,
) -> List[MarkedToken]:
    """Interleave break markers with tokens in a single left-to-right scan.

    WHY: Paragraph boundaries come from several independent signals. This
    pass records every candidate boundary; later passes decide which ones
    to honour.

    HOW: For each token:
      1. Filler word → SOFT break in its place, token dropped
      2. Hint phrase starts here → HARD break before the token
      3. Gap since the previous real token > gap_threshold → SOFT break
      4. The token itself
      5. Sentence punctuation at the end → SOFT break after it

    RULES:
    - Filler matching uses the raw token text
    - Hint matching uses text normalized with hints.normalization
    - Fillers do not update the previous-end time used for gaps
    - Consecutive breaks are allowed here; cleanup is a separate pass

    Args:
        tokens: Ordered tokens.
        gap_threshold: Silence in seconds that starts a new paragraph.
        fillers: Filler words (e.g. "uh", "umm").
        hints: Phrases that always start a new line.

    Returns:
        Tokens with BreakMarker items interspersed.
    """
    filler_set = frozenset(fillers or ())
    normalized: List[str] = []
    if hints is not None:
        normalized = [normalize_token_text(t.text, hints.normalization) for t in tokens]

    marked: List[MarkedToken] = []
    prev_end: Optional[float] = None

    for index, token in enumerate(tokens):
        if token.text in filler_set:
            marked.append(BreakMarker.SOFT)
            continue

        if hints is not None and normalized[index] and is_hint_matched(normalized, hints, index):
            marked.append(BreakMarker.HARD)

        if prev_end is not None and token.start - prev_end > gap_threshold:
            marked.append(BreakMarker.SOFT)

        marked.append(token)

        if is_ending_with_punctuation(token.text):
            marked.append(BreakMarker.SOFT)

        prev_end = token.end

    return marked


def cleanup_isolated_tokens(marked: Sequence[MarkedToken]) -> List[MarkedToken]:
    """Drop soft breaks that are redundant or would strand a single token.

    WHY: Sentence punctuation, pauses, and fillers often fire close
    together, which would leave one word alone on a line ("Yes." on its
    own). Such breaks are noise; removing them keeps the word with its
    neighbours.

    HOW: A SOFT break is dropped when:
      - the next item is a break or the end of the stream, or
      - the item after next is a break or the end of the stream (the
        single token in between would be stranded), or
      - the last item already kept is a SOFT break.

    RULES:
    - HARD breaks are never removed
    - Tokens are never removed
    - Running the pass twice gives the same result as running it once
    """
    result: List[MarkedToken] = []
    total = len(marked)

    for i, item in enumerate(marked):
        if item is not BreakMarker.SOFT:
            result.append(item)
            continue

        nxt = marked[i + 1] if i + 1 < total else None
        after_next = marked[i + 2] if i + 2 < total else None

        if nxt is None or is_break(nxt):
            continue
        if after_next is None or is_break(after_next):
            continue
        if result and result[-1] is BreakMarker.SOFT:
            continue

        result.append(item)

    return result


def group_marked_tokens_into_segments(
    marked: Sequence[MarkedToken],
    max_seconds_per_segment: float,
) -> List[MarkedSegment]:
    """Chunk marked tokens into segments bounded by duration.

    WHY: Very long paragraphs are hard to read and navigate. Closing a
    segment only where a break already exists keeps sentences whole.

    HOW: Accumulate items into a buffer while tracking the first and last
    real token times. Once the buffer spans more than the maximum and the
    next item is a break, close the buffer as a segment.

    RULES:
    - A segment is only closed right before a break marker
    - The trailing buffer is flushed at the end if it holds a real token
    - Segments without real tokens are never emitted
    """
    segments: List[MarkedSegment] = []
    buffer: List[MarkedToken] = []
    segment_start: Optional[float] = None
    segment_end: Optional[float] = None

    for i, item in enumerate(marked):
        if not is_break(item):
            if segment_start is None:
                segment_start = item.start
            segment_end = item.end

        buffer.append(item)

        if segment_start is None or segment_end is None:
            continue

        next_is_break = i + 1 < len(marked) and is_break(marked[i + 1])
        if segment_end - segment_start > max_seconds_per_segment and next_is_break:
            segments.append(MarkedSegment(start=segment_start, end=segment_end, tokens=buffer))
            buffer = []
            segment_start = None
            segment_end = None

    if buffer and segment_start is not None and segment_end is not None:
        segments.append(MarkedSegment(start=segment_start, end=segment_end, tokens=buffer))

    return segments


def merge_short_segments_with_previous(
    segments: Sequence[MarkedSegment],
    min_words_per_segment: int,
) -> List[MarkedSegment]:
    """Fold segments with too few words into the segment before them.

    RULES:
    - Word count excludes break markers
    - A short first segment has no predecessor and is kept as is
    - Markers (including HARD breaks) travel with the merged tokens
    - The merged segment's end becomes the short segment's end
    """
    result: List[MarkedSegment] = []

    for segment in segments:
        if segment.word_count() < min_words_per_segment and result:
            prev = result[-1]
            result[-1] = MarkedSegment(
                start=prev.start,
                end=segment.end,
                tokens=prev.tokens + list(segment.tokens),
            )
        else:
            result.append(MarkedSegment(
                start=segment.start,
                end=segment.end,
                tokens=list(segment.tokens),
            ))

    return result


def mark_and_combine_segments(
    segments: Sequence[Segment],
    options: SegmentationOptions,
) -> List[MarkedSegment]:
    """Run the full segmentation pipeline over transcription segments.

    HOW: Flatten every segment's tokens, then mark → clean → group → merge.

    Args:
        segments: Segments from the transcription provider.
        options: Thresholds, fillers, and hints for the pipeline.

    Returns:
        Marked segments ready for a formatter.
    """
    tokens = [token for segment in segments for token in segment.tokens]

    marked = mark_tokens_with_dividers(
        tokens,
        gap_threshold=options.gap_threshold,
        fillers=options.fillers,
        hints=options.hints,
    )
    cleaned = cleanup_isolated_tokens(marked)
    grouped = group_marked_tokens_into_segments(cleaned, options.max_seconds_per_segment)
    combined = merge_short_segments_with_previous(grouped, options.min_words_per_segment)

    logger.debug(
        "Segmented %d tokens into %d segments (%d before merging)",
        len(tokens), len(combined), len(grouped),
    )
    return combined

"""Paragrafs: paragraph segmentation, ground-truth alignment, hint mining.

WHY: ASR and OCR providers return flat arrays of timed words. Readers and
editors need paragraphs and lines, editors correct the wording as plain
text, and recurring phrases make good line-break hints. This package
turns timed words into readable, timed transcripts.

HOW: Three independent pipelines over the same IR:
  segment: mark breaks, clean, group, merge, then format
  align: LCS-anchor a corrected transcript onto timed tokens
  mine: count repeated n-grams and feed them back as hints

RULES:
- All pipelines consume and produce the core IR dataclasses
- Adding an output format = one new formatter module, no core changes
- Core functions are pure; I/O lives in loaders, wordlists, and the CLI
"""

from paragrafs.core.aligner import (
    sync_tokens_with_ground_truth,
    update_segment_with_ground_truth,
)
from paragrafs.core.formatting import (
    format_segments_to_timestamped_transcript,
    map_segments_into_formatted_segments,
)
from paragrafs.core.hints import generate_hints_from_segments, generate_hints_from_tokens
from paragrafs.core.ir import (
    ArabicNormalization,
    BreakMarker,
    GeneratedHint,
    GroundedSegment,
    GroundedToken,
    HintMiningOptions,
    Hints,
    MarkedSegment,
    Segment,
    SegmentationOptions,
    Token,
)
from paragrafs.core.segmenter import (
    cleanup_isolated_tokens,
    estimate_segment_from_token,
    group_marked_tokens_into_segments,
    mark_and_combine_segments,
    mark_tokens_with_dividers,
    merge_short_segments_with_previous,
)
from paragrafs.core.selection import get_first_matching_token, get_first_token_for_selection
from paragrafs.core.text import (
    create_hints,
    create_hints_from_generated,
    format_seconds_to_timestamp,
    is_ending_with_punctuation,
    normalize_token_text,
    normalize_word,
    tokenize_ground_truth,
)

__version__ = "0.1.0"

__all__ = [
    "ArabicNormalization",
    "BreakMarker",
    "GeneratedHint",
    "GroundedSegment",
    "GroundedToken",
    "HintMiningOptions",
    "Hints",
    "MarkedSegment",
    "Segment",
    "SegmentationOptions",
    "Token",
    "cleanup_isolated_tokens",
    "create_hints",
    "create_hints_from_generated",
    "estimate_segment_from_token",
    "format_seconds_to_timestamp",
    "format_segments_to_timestamped_transcript",
    "generate_hints_from_segments",
    "generate_hints_from_tokens",
    "get_first_matching_token",
    "get_first_token_for_selection",
    "group_marked_tokens_into_segments",
    "is_ending_with_punctuation",
    "map_segments_into_formatted_segments",
    "mark_and_combine_segments",
    "mark_tokens_with_dividers",
    "merge_short_segments_with_previous",
    "normalize_token_text",
    "normalize_word",
    "sync_tokens_with_ground_truth",
    "tokenize_ground_truth",
    "update_segment_with_ground_truth",
]

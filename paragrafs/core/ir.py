"""Intermediate representation dataclasses for tokens, segments, and hints.

WHY: Upstream transcription or OCR hands us a flat array of timed words.
Every stage of the library (marking, grouping, formatting, grounding,
mining) works on the same handful of shapes, so they live in one place
and form the stable contract between the stages.

HOW: Plain dataclasses form the hierarchy:
  Token: one word with start/end seconds
  Segment: a run of tokens plus its display text
  BreakMarker: SOFT or HARD boundary interleaved with tokens
  MarkedSegment: a run of tokens and break markers
  GroundedToken: a token reconciled against ground truth
  GroundedSegment: a segment whose tokens are grounded
  Hints: normalized phrases keyed by their first word
  GeneratedHint: one mined n-gram candidate

RULES:
- All times are float seconds; nothing is rounded here
- Token and GroundedToken are frozen: stages build new tokens, never edit
- A MarkedToken is either a Token or a BreakMarker, never a sentinel string
- MarkedSegment.start/end come from its first/last real token only
- Hints are built once by the caller and only read while marking
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union


@dataclass(frozen=True)
class Token:
    """A single timed word.

    Attributes:
        start: Start time in seconds.
        end: End time in seconds (``start <= end`` for well-formed input).
        text: The transcribed text.
    """

    start: float
    end: float
    text: str


@dataclass(frozen=True)
class GroundedToken(Token):
    """A token whose text has been reconciled against a ground-truth transcript.

    ``is_unknown`` is True when the token had no counterpart in the ground
    truth; its original text and timing are kept so callers can filter it
    out or render it as low confidence.
    """

    is_unknown: bool = False


class BreakMarker(str, enum.Enum):
    """Boundary markers interleaved with tokens during segmentation.

    WHY: The source transcripts contain words only. Paragraph and line
    boundaries are decided by the marker and honoured (or elided) by later
    stages, so they need an explicit, unambiguous representation that can
    never collide with a token's text.

    HOW: Inherits from str so values serialize cleanly to JSON.

    RULES:
    - SOFT: a boundary hint that later stages may elide
    - HARD: always produces a line boundary, never removed by cleanup
    """

    SOFT = "soft"
    HARD = "hard"


MarkedToken = Union[Token, BreakMarker]


def is_break(item: MarkedToken) -> bool:
    """True if the marked item is a break marker rather than a token."""
    return isinstance(item, BreakMarker)


@dataclass
class Segment:
    """A contiguous run of tokens with a human-readable text.

    RULES:
    - start == tokens[0].start and end == tokens[-1].end when tokens exist
    - text joins token texts with spaces (lines joined with newlines)
    """

    start: float
    end: float
    text: str
    tokens: List[Token] = field(default_factory=list)


@dataclass
class GroundedSegment:
    """A segment whose tokens were synced with a human-corrected transcript."""

    start: float
    end: float
    text: str
    tokens: List[GroundedToken] = field(default_factory=list)


@dataclass
class MarkedSegment:
    """A segment during the marking stage: tokens interleaved with breaks.

    WHY: Grouping and merging move whole runs of tokens and markers around.
    The markers must travel with the tokens so the formatter can still
    decide where lines end.

    RULES:
    - start is the first real token's start, end the last real token's end
    - tokens may contain BreakMarker items anywhere
    """

    start: float
    end: float
    tokens: List[MarkedToken] = field(default_factory=list)

    def word_count(self) -> int:
        """Number of real (non-marker) tokens in this segment."""
        return sum(1 for t in self.tokens if not is_break(t))


@dataclass(frozen=True)
class ArabicNormalization:
    """Optional Arabic-specific folding applied on top of word normalization.

    Attributes:
        normalize_alef: Fold أ, إ and آ to bare alef.
        normalize_hamza: Fold waw/ya hamza seats to a standalone hamza.
        normalize_ya: Fold alef maqsura (ى) to ya (ي).
        remove_tatweel: Drop the tatweel (kashida) elongation character.
    """

    normalize_alef: bool = False
    normalize_hamza: bool = False
    normalize_ya: bool = False
    remove_tatweel: bool = False


@dataclass
class Hints:
    """Normalized hint phrases keyed by their first normalized word.

    WHY: The divider marker checks every token against the hints. Keying
    by first word keeps the check to the handful of phrases that could
    possibly start at that token.

    RULES:
    - map values are lists of normalized word lists
    - normalization is the exact setting used to build map; tokens are
      normalized with it before matching
    """

    map: Dict[str, List[List[str]]]
    normalization: ArabicNormalization


@dataclass
class GeneratedHint:
    """A frequent n-gram mined from a token stream.

    Attributes:
        count: Number of occurrences.
        length: Number of words in the phrase.
        normalized_phrase: Space-joined normalized words (the identity).
        phrase: The most common surface rendering seen.
        first_occurrence_index: Token index of the first occurrence.
        top_surface_forms: Up to three most common surface renderings.
    """

    count: int
    length: int
    normalized_phrase: str
    phrase: str
    first_occurrence_index: Optional[int] = None
    top_surface_forms: List[str] = field(default_factory=list)


@dataclass
class SegmentationOptions:
    """Options for the mark -> clean -> group -> merge pipeline.

    Attributes:
        gap_threshold: Silence (seconds) between tokens that triggers a soft break.
        max_seconds_per_segment: Duration after which a segment closes at the next break.
        min_words_per_segment: Segments with fewer words fold into the previous one.
        fillers: Filler words replaced by soft breaks (exact text match).
        hints: Phrases that always start a new line.
    """

    gap_threshold: float
    max_seconds_per_segment: float
    min_words_per_segment: int
    fillers: List[str] = field(default_factory=list)
    hints: Optional[Hints] = None


@dataclass
class HintMiningOptions:
    """Options for n-gram hint mining.

    RULES:
    - min_n/max_n bound the n-gram length (inclusive)
    - top_k=None means no cut-off
    - dedupe is "closed" or "none"
    - boundary is "segment" (never cross segments) or "none"
    - normalization holds overrides merged onto the default normalization
    """

    min_n: int = 2
    max_n: int = 6
    min_count: int = 2
    top_k: Optional[int] = None
    dedupe: str = "closed"
    boundary: str = "segment"
    stopwords: List[str] = field(default_factory=list)
    normalization: Optional[Dict[str, bool]] = None

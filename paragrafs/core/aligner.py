"""Ground-truth alignment: carry ASR timings over to a human-corrected text.

WHY: Editors fix transcripts as plain text, which throws away the word
timings the segmenter and formatters depend on. Aligning the corrected
words back onto the timed tokens keeps the timings while adopting the
editor's wording.

HOW:
  1. tokenize_ground_truth() splits the corrected text into words.
  2. Both sides are normalized with normalize_word() for comparison only.
  3. An LCS over the normalized words gives order-preserving matches.
  4. find_anchors() pins the first and last positions and keeps a
     strictly increasing chain of anchors.
  5. Each gap between two anchors is reconciled:
       - token and word pairs are substituted 1:1 (timing kept),
       - surplus tokens are kept but flagged is_unknown,
       - surplus words get synthesized tokens with interpolated timings.
  6. Tokens after the last anchor are flagged is_unknown.

RULES:
- Output text always comes from the ground truth surface form, never the
  normalized form
- Anchors are strictly increasing in both token and ground-truth index
- The first output token carries the first ground-truth word; with more
  than one token and word, the last output token carries the last word
- Empty ground truth flags every token unknown; no tokens gives []
- Ground-truth words after the last anchor are dropped
"""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence, Tuple

from paragrafs.core.ir import GroundedSegment, GroundedToken, Segment, Token
from paragrafs.core.lcs import build_lcs_table, extract_lcs_matches
from paragrafs.core.segmenter import estimate_segment_from_token
from paragrafs.core.text import normalize_word, tokenize_ground_truth

logger = logging.getLogger(__name__)

Anchor = Tuple[int, int]


def _natural_matches(tokens: Sequence[Token], gt_words: Sequence[str]) -> Dict[int, int]:
    normalized_tokens = [normalize_word(t.text) for t in tokens]
    normalized_gt = [normalize_word(w) for w in gt_words]
    table = build_lcs_table(normalized_tokens, normalized_gt)
    return extract_lcs_matches(table, normalized_tokens, normalized_gt)


def find_anchors(matches: Dict[int, int], token_count: int, word_count: int) -> List[Anchor]:
    """Turn LCS matches into a monotonic anchor chain with pinned boundaries.

    RULES:
    - (0, 0) is always the first anchor
    - With more than one token and word, (last token, last word) is the
      final anchor; any LCS match that would cross it is dropped
    - Remaining matches are kept in token order only while their
      ground-truth index keeps increasing

    Args:
        matches: token index -> ground-truth index, from extract_lcs_matches().
        token_count: Number of tokens.
        word_count: Number of ground-truth words.

    Returns:
        (token index, ground-truth index) pairs, strictly increasing in both.
    """
    if token_count == 0 or word_count == 0:
        return []

    pin_last = token_count > 1 and word_count > 1
    last_token, last_word = token_count - 1, word_count - 1

    anchors: List[Anchor] = [(0, 0)]
    for token_index in sorted(matches):
        word_index = matches[token_index]
        if token_index == 0 or word_index <= anchors[-1][1]:
            continue
        if pin_last and (token_index >= last_token or word_index >= last_word):
            continue
        anchors.append((token_index, word_index))

    if pin_last:
        anchors.append((last_token, last_word))

    return anchors


def interpolate_missing_words(
    start_time: float,
    end_time: float,
    words: Sequence[str],
) -> List[GroundedToken]:
    """Synthesize evenly timed tokens for words with no ASR counterpart.

    The window is divided into one equal slot per word. An empty or
    inverted window gives zero-length tokens at start_time.
    """
    if not words:
        return []

    slot = max(0.0, end_time - start_time) / len(words)
    return [
        GroundedToken(
            start=start_time + i * slot,
            end=start_time + (i + 1) * slot,
            text=word,
        )
        for i, word in enumerate(words)
    ]


def _unknown(token: Token) -> GroundedToken:
    return GroundedToken(start=token.start, end=token.end, text=token.text, is_unknown=True)


def _substitute(token: Token, word: str) -> GroundedToken:
    return GroundedToken(start=token.start, end=token.end, text=word)


def _reconcile_gap(
    gap_tokens: Sequence[Token],
    gap_words: Sequence[str],
    gap_start: float,
    gap_end: float,
) -> List[GroundedToken]:
    """Reconcile the tokens and words strictly between two anchors."""
    paired = min(len(gap_tokens), len(gap_words))
    result = [_substitute(gap_tokens[i], gap_words[i]) for i in range(paired)]

    result.extend(_unknown(token) for token in gap_tokens[paired:])

    missing = gap_words[paired:]
    if missing:
        # Insert after the last emitted token so synthesized times stay ordered
        start = result[-1].end if result else gap_start
        result.extend(interpolate_missing_words(start, gap_end, missing))

    return result


def sync_tokens_with_ground_truth(
    tokens: Sequence[Token],
    ground_truth: str,
) -> List[GroundedToken]:
    """Align timed tokens to a corrected transcript.

    WHY: See module docstring. This is the token-level entry point; use
    update_segment_with_ground_truth() for whole segments with a fallback.

    HOW: Anchors split both sequences into gaps. The anchors are walked in
    order with explicit indices, so every emitted token is placed by
    position and never looked up by its timing.

    Args:
        tokens: Timed ASR tokens in order.
        ground_truth: The corrected plain text.

    Returns:
        Grounded tokens in time order.
    """
    if not tokens:
        return []

    gt_words = tokenize_ground_truth(ground_truth)
    if not gt_words:
        return [_unknown(t) for t in tokens]

    matches = _natural_matches(tokens, gt_words)
    anchors = find_anchors(matches, len(tokens), len(gt_words))
    logger.debug(
        "Aligning %d tokens to %d words: %d LCS matches, %d anchors",
        len(tokens), len(gt_words), len(matches), len(anchors),
    )

    first_token, first_word = anchors[0]
    result: List[GroundedToken] = [_substitute(tokens[first_token], gt_words[first_word])]

    for (prev_token, prev_word), (token_index, word_index) in zip(anchors, anchors[1:]):
        result.extend(_reconcile_gap(
            tokens[prev_token + 1:token_index],
            gt_words[prev_word + 1:word_index],
            gap_start=tokens[prev_token].end,
            gap_end=tokens[token_index].start,
        ))
        result.append(_substitute(tokens[token_index], gt_words[word_index]))

    last_token, last_word = anchors[-1]
    leftover_words = gt_words[last_word + 1:]
    if leftover_words:
        logger.debug("Dropping %d ground-truth words after the last anchor", len(leftover_words))
    result.extend(_unknown(t) for t in tokens[last_token + 1:])

    return result


def update_segment_with_ground_truth(segment: Segment, ground_truth: str) -> GroundedSegment:
    """Ground a whole segment, falling back to even word estimation.

    RULES:
    - Empty ground truth: every token flagged unknown, text unchanged
    - Tokens with at least one natural LCS match: full alignment
    - No tokens or no overlap at all: the ground truth is spread evenly
      over the segment's start..end (estimate_segment_from_token)
    - start/end always stay the segment's own
    """
    gt_words = tokenize_ground_truth(ground_truth)
    if not gt_words:
        return GroundedSegment(
            start=segment.start,
            end=segment.end,
            text=segment.text,
            tokens=[_unknown(t) for t in segment.tokens],
        )

    if segment.tokens and _natural_matches(segment.tokens, gt_words):
        return GroundedSegment(
            start=segment.start,
            end=segment.end,
            text=" ".join(gt_words),
            tokens=sync_tokens_with_ground_truth(segment.tokens, ground_truth),
        )

    logger.debug("No overlap with ground truth; estimating %d words evenly", len(gt_words))
    estimated = estimate_segment_from_token(Token(start=segment.start, end=segment.end, text=ground_truth))
    return GroundedSegment(
        start=segment.start,
        end=segment.end,
        text=estimated.text,
        tokens=[GroundedToken(start=t.start, end=t.end, text=t.text) for t in estimated.tokens],
    )

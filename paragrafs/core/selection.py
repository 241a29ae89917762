"""Map text selections and search phrases back to timed tokens.

WHY: Editors select text in a rendered segment or search for a phrase
and want to jump to its position in the audio. Both need the token that
starts the selection.

RULES:
- Unresolvable selections return None; nothing here raises
- Spans are found by sequential search, so repeated words resolve to the
  occurrence after the previous token
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from paragrafs.core.ir import Segment, Token
from paragrafs.core.text import NormalizationLike, normalize_token_text, resolve_normalization

Span = Tuple[int, int, Token]


def _token_spans(segment: Segment) -> List[Span]:
    """Character spans (start, end) of each token inside segment.text."""
    spans: List[Span] = []
    cursor = 0
    for token in segment.tokens:
        index = segment.text.find(token.text, cursor)
        if index == -1:
            continue
        end = index + len(token.text)
        spans.append((index, end, token))
        cursor = end
    return spans


def get_first_token_for_selection(
    segment: Segment,
    selection_start: int,
    selection_end: int,
) -> Optional[Token]:
    """Return the token a character selection starts on.

    The selection must line up with token boundaries at both ends: some
    token must start at selection_start and some token (possibly the same)
    must end at selection_end.

    Args:
        segment: Segment whose text was selected.
        selection_start: Character offset of the selection start.
        selection_end: Character offset just past the selection end.

    Returns:
        The first selected token, or None if either end falls mid-token.
    """
    spans = _token_spans(segment)

    first = next((token for start, _, token in spans if start == selection_start), None)
    if first is None:
        return None

    if not any(end == selection_end and end > selection_start for _, end, _ in spans):
        return None

    return first


def get_first_matching_token(
    tokens: Sequence[Token],
    query: str,
    normalization: NormalizationLike = None,
) -> Optional[Token]:
    """Return the first token where ``query`` matches word for word.

    Both sides are normalized with the resolved normalization, so
    diacritics and punctuation do not prevent a match.
    """
    opts = resolve_normalization(normalization)
    words = [normalize_token_text(w, opts) for w in query.split()]
    words = [w for w in words if w]
    if not words:
        return None

    normalized = [normalize_token_text(t.text, opts) for t in tokens]
    for i in range(len(normalized) - len(words) + 1):
        if normalized[i:i + len(words)] == words:
            return tokens[i]

    return None

"""N-gram hint mining over token streams.

WHY: Recurring phrases (an opening formula, a speaker's catch phrase)
make good line-break hints, but nobody wants to list them by hand.
Counting repeated n-grams in a transcript surfaces them automatically.

HOW:
  1. Normalize every token text (Arabic-first default normalization).
  2. Count every n-gram for n in [min_n, max_n], skipping n-grams with an
     empty word or made only of stopwords.
  3. For n-grams with count >= min_n, collect start positions (capped)
     and the surface renderings seen.
  4. Closed dedup: drop a shorter phrase when a longer phrase with the
     same count contains it at the same offset in every occurrence.
  5. Sort by count desc, length desc, phrase asc and cut to top_k.

RULES:
- Phrase identity is the tuple of normalized words
- Occurrence lists are capped at OCCURRENCE_CAP; a truncated list never
  proves containment, so it neither removes nor is removed
- Invalid bounds (min_n < 1 or max_n < min_n) give [] without raising
- boundary="segment" mines each segment on its own and merges by phrase
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from paragrafs.core.ir import (
    ArabicNormalization,
    GeneratedHint,
    HintMiningOptions,
    Segment,
    Token,
)
from paragrafs.core.text import normalize_token_text, resolve_normalization

logger = logging.getLogger(__name__)

OCCURRENCE_CAP = 5000
SURFACE_VARIANTS_CAP = 5
TOP_SURFACE_FORMS = 3

Ngram = Tuple[str, ...]


class CappedOccurrences:
    """Start positions of one n-gram, bounded to ``cap`` entries.

    Once full, further positions are not stored and ``truncated`` is set.
    """

    def __init__(self, cap: int = OCCURRENCE_CAP) -> None:
        self.cap = cap
        self.positions: List[int] = []
        self.truncated = False

    def add(self, position: int) -> None:
        if len(self.positions) < self.cap:
            self.positions.append(position)
        else:
            self.truncated = True

    def as_set(self) -> Set[int]:
        return set(self.positions)


@dataclass
class _Candidate:
    count: int
    first_occurrence_index: Optional[int] = None
    occurrences: CappedOccurrences = field(default_factory=CappedOccurrences)
    surface_counts: Dict[str, int] = field(default_factory=dict)

    def add_surface(self, surface: str) -> None:
        if surface in self.surface_counts:
            self.surface_counts[surface] += 1
        elif len(self.surface_counts) < SURFACE_VARIANTS_CAP:
            self.surface_counts[surface] = 1

    def top_surfaces(self) -> List[str]:
        ranked = sorted(self.surface_counts.items(), key=lambda item: (-item[1], item[0]))
        return [surface for surface, _ in ranked[:TOP_SURFACE_FORMS]]


def _sort_key(hint: GeneratedHint) -> Tuple[int, int, str]:
    return (-hint.count, -hint.length, hint.normalized_phrase)


def _ngrams(
    normalized: Sequence[str],
    min_n: int,
    max_n: int,
    stopwords: Set[str],
) -> Iterable[Tuple[int, Ngram]]:
    """Yield (start index, n-gram) for every countable n-gram."""
    for i in range(len(normalized)):
        for n in range(min_n, max_n + 1):
            if i + n > len(normalized):
                break
            gram = tuple(normalized[i:i + n])
            if not all(gram):
                continue
            if stopwords and all(word in stopwords for word in gram):
                continue
            yield i, gram


def _closed_dedup(candidates: Dict[Ngram, _Candidate]) -> Set[Ngram]:
    """Return the shorter n-grams that a longer, equally frequent one contains.

    A sub-phrase at offset k is removable only if its start set equals the
    longer phrase's start set shifted by k and both counts are equal.
    """
    removable: Set[Ngram] = set()
    ordered = sorted(candidates.items(), key=lambda item: (-len(item[0]), -item[1].count))

    for long_gram, long_stats in ordered:
        if long_stats.occurrences.truncated:
            continue

        long_starts = long_stats.occurrences.as_set()
        for sub_len in range(1, len(long_gram)):
            for offset in range(len(long_gram) - sub_len + 1):
                sub_gram = long_gram[offset:offset + sub_len]
                sub_stats = candidates.get(sub_gram)
                if sub_stats is None or sub_stats.count != long_stats.count:
                    continue
                if sub_stats.occurrences.truncated:
                    continue
                shifted = {start + offset for start in long_starts}
                if shifted == sub_stats.occurrences.as_set():
                    removable.add(sub_gram)

    return removable


def _mine(tokens: Sequence[Token], options: HintMiningOptions) -> List[GeneratedHint]:
    """Mine one token stream; results are sorted but not cut to top_k."""
    if not tokens:
        return []
    if options.min_n < 1 or options.max_n < options.min_n:
        logger.debug("Invalid n-gram bounds min_n=%d max_n=%d", options.min_n, options.max_n)
        return []

    normalization: ArabicNormalization = resolve_normalization(options.normalization)
    normalized = [normalize_token_text(t.text, normalization) for t in tokens]
    stopwords = {normalize_token_text(w, normalization) for w in options.stopwords}
    stopwords.discard("")

    counts: Counter = Counter(gram for _, gram in _ngrams(normalized, options.min_n, options.max_n, stopwords))
    candidates: Dict[Ngram, _Candidate] = {
        gram: _Candidate(count=count)
        for gram, count in counts.items()
        if count >= options.min_count
    }
    if not candidates:
        return []

    for start, gram in _ngrams(normalized, options.min_n, options.max_n, stopwords):
        stats = candidates.get(gram)
        if stats is None:
            continue
        if stats.first_occurrence_index is None:
            stats.first_occurrence_index = start
        stats.occurrences.add(start)
        stats.add_surface(" ".join(t.text for t in tokens[start:start + len(gram)]))

    truncated = sum(1 for stats in candidates.values() if stats.occurrences.truncated)
    if truncated:
        logger.debug("%d candidates hit the occurrence cap of %d", truncated, OCCURRENCE_CAP)

    removable = _closed_dedup(candidates) if options.dedupe == "closed" else set()

    results: List[GeneratedHint] = []
    for gram, stats in candidates.items():
        if gram in removable:
            continue
        surfaces = stats.top_surfaces()
        normalized_phrase = " ".join(gram)
        results.append(GeneratedHint(
            count=stats.count,
            length=len(gram),
            normalized_phrase=normalized_phrase,
            phrase=surfaces[0] if surfaces else normalized_phrase,
            first_occurrence_index=stats.first_occurrence_index,
            top_surface_forms=surfaces,
        ))

    results.sort(key=_sort_key)
    return results


def _cut(hints: List[GeneratedHint], top_k: Optional[int]) -> List[GeneratedHint]:
    if top_k is None:
        return hints
    return hints[:max(0, top_k)]


def generate_hints_from_tokens(
    tokens: Sequence[Token],
    options: Optional[HintMiningOptions] = None,
) -> List[GeneratedHint]:
    """Mine frequent n-grams from a single token stream.

    Args:
        tokens: Tokens in order.
        options: Mining bounds, dedup mode, stopwords, and normalization.

    Returns:
        Hints sorted by count desc, length desc, normalized phrase asc.
    """
    opts = options or HintMiningOptions()
    return _cut(_mine(tokens, opts), opts.top_k)


def _merge_hint(combined: Dict[str, GeneratedHint], hint: GeneratedHint) -> None:
    existing = combined.get(hint.normalized_phrase)
    if existing is None:
        combined[hint.normalized_phrase] = GeneratedHint(
            count=hint.count,
            length=hint.length,
            normalized_phrase=hint.normalized_phrase,
            phrase=hint.phrase,
            first_occurrence_index=hint.first_occurrence_index,
            top_surface_forms=list(hint.top_surface_forms),
        )
        return

    existing.count += hint.count
    existing.length = max(existing.length, hint.length)
    surfaces = list(existing.top_surface_forms)
    for surface in hint.top_surface_forms:
        if surface not in surfaces:
            surfaces.append(surface)
    existing.top_surface_forms = surfaces[:TOP_SURFACE_FORMS]
    if hint.first_occurrence_index is not None:
        if existing.first_occurrence_index is None:
            existing.first_occurrence_index = hint.first_occurrence_index
        else:
            existing.first_occurrence_index = min(existing.first_occurrence_index, hint.first_occurrence_index)


def generate_hints_from_segments(
    segments: Sequence[Segment],
    options: Optional[HintMiningOptions] = None,
) -> List[GeneratedHint]:
    """Mine frequent n-grams from segments.

    RULES:
    - boundary="none": mine the concatenated tokens as one stream
    - boundary="segment": n-grams never cross a segment; per-segment
      results merge by normalized phrase (counts summed, surfaces
      unioned, earliest first occurrence kept), then re-sort and cut
    - first_occurrence_index is relative to the segment it came from
    """
    opts = options or HintMiningOptions()

    if opts.boundary == "none":
        tokens = [token for segment in segments for token in segment.tokens]
        return generate_hints_from_tokens(tokens, opts)

    combined: Dict[str, GeneratedHint] = {}
    for segment in segments:
        for hint in _mine(segment.tokens, opts):
            _merge_hint(combined, hint)

    merged = sorted(combined.values(), key=_sort_key)
    return _cut(merged, opts.top_k)

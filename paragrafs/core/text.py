"""Text normalization and small text helpers shared by every stage.

WHY: Matching ASR output against hints, ground truth, or itself only
works if both sides are compared in the same canonical form. Arabic
transcripts in particular differ in diacritics, hamza seats, alef
variants, and tatweel while meaning the same word.

HOW: normalize_word() strips marks and edge punctuation using Unicode
categories. normalize_token_text() layers the optional Arabic folding on
top. The default folding lives in DEFAULT_NORMALIZATION and is merged
with caller overrides by resolve_normalization() at each call site.
The remaining helpers (timestamp rendering, sentence-end detection,
ground-truth tokenization, hint map construction) are small pure
functions consumed by the pipeline.

RULES:
- Normalized text is for comparison only; surface text is never replaced by it
- Internal punctuation (e.g. "well-being") survives normalization
- DEFAULT_NORMALIZATION is a frozen value, never mutated
"""

from __future__ import annotations

import dataclasses
import math
import re
import unicodedata
from typing import Dict, Iterable, List, Optional, Union

from paragrafs.core.ir import ArabicNormalization, GeneratedHint, Hints

# Default Arabic folding for hints and mining (alef/ya folding + tatweel stripping).
DEFAULT_NORMALIZATION = ArabicNormalization(
    normalize_alef=True,
    normalize_hamza=False,
    normalize_ya=True,
    remove_tatweel=True,
)

NormalizationLike = Union[ArabicNormalization, Dict[str, bool], None]

_SENTENCE_END_RE = re.compile("[.!?\N{ARABIC QUESTION MARK}\N{ARABIC SEMICOLON}\N{HORIZONTAL ELLIPSIS}]$")
_ZERO_WIDTH_RE = re.compile("[\N{ZERO WIDTH SPACE}-\N{ZERO WIDTH JOINER}\N{ZERO WIDTH NO-BREAK SPACE}]")

_HAMZA_ABOVE = "\N{ARABIC HAMZA ABOVE}"
_HAMZA_MARKS = frozenset({"\N{ARABIC HAMZA ABOVE}", "\N{ARABIC HAMZA BELOW}"})
_HAMZA_SEATS = frozenset({"\N{ARABIC LETTER YEH}", "\N{ARABIC LETTER WAW}"})
_STANDALONE_HAMZA = "\N{ARABIC LETTER HAMZA}"
_TATWEEL = "\N{ARABIC TATWEEL}"
_ALEF_VARIANTS_RE = re.compile(
    "[\N{ARABIC LETTER ALEF WITH HAMZA ABOVE}"
    "\N{ARABIC LETTER ALEF WITH HAMZA BELOW}"
    "\N{ARABIC LETTER ALEF WITH MADDA ABOVE}]"
)
_ALEF = "\N{ARABIC LETTER ALEF}"
_ALEF_MAQSURA = "\N{ARABIC LETTER ALEF MAKSURA}"
_YA = "\N{ARABIC LETTER YEH}"


def resolve_normalization(overrides: NormalizationLike = None) -> ArabicNormalization:
    """Merge caller overrides onto DEFAULT_NORMALIZATION.

    Accepts None (defaults), a complete ArabicNormalization (used as is),
    or a dict of field overrides such as ``{"normalize_hamza": True}``.
    """
    if overrides is None:
        return DEFAULT_NORMALIZATION
    if isinstance(overrides, ArabicNormalization):
        return overrides
    return dataclasses.replace(DEFAULT_NORMALIZATION, **overrides)


def is_ending_with_punctuation(text: str) -> bool:
    """True if text ends with sentence punctuation (. ? ! ؟ ؛ …)."""
    return bool(_SENTENCE_END_RE.search(text))


def format_seconds_to_timestamp(seconds: float) -> str:
    """Render seconds as ``m:ss`` under an hour and ``h:mm:ss`` otherwise."""
    hrs = math.floor(seconds / 3600)
    mins = math.floor((seconds % 3600) / 60)
    secs = math.floor(seconds % 60)
    if hrs > 0:
        return "{}:{:02d}:{:02d}".format(hrs, mins, secs)
    return "{}:{:02d}".format(mins, secs)


def _is_edge_char(ch: str) -> bool:
    category = unicodedata.category(ch)
    return category[0] in ("P", "S") or category == "Cf"


def _is_punctuation_or_symbol(ch: str) -> bool:
    return unicodedata.category(ch)[0] in ("P", "S")


def normalize_word(word: str) -> str:
    """Strip diacritics, zero-width characters, and edge punctuation.

    WHY: ASR output and human transcripts disagree on vowel marks and
    trailing punctuation far more often than on the words themselves.

    HOW:
      1. NFD-decompose so marks become separate code points.
      2. Drop zero-width joiners/non-joiners and BOMs.
      3. Drop every nonspacing mark (category Mn, includes Arabic harakat).
      4. Trim leading/trailing punctuation, symbols, and format characters.
      5. NFC-recompose.
    """
    decomposed = _ZERO_WIDTH_RE.sub("", unicodedata.normalize("NFD", word))
    bare = "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")

    start, end = 0, len(bare)
    while start < end and _is_edge_char(bare[start]):
        start += 1
    while end > start and _is_edge_char(bare[end - 1]):
        end -= 1

    return unicodedata.normalize("NFC", bare[start:end])


def _fold_hamza_seats(text: str) -> str:
    """Collapse ya/waw hamza seats into a standalone hamza.

    In NFD, ئ and ؤ become the seat letter plus U+0654, possibly with
    vowel marks in between. The seat, the marks, and the hamza collapse
    into ء; marks after the hamza are kept. Any remaining hamza marks
    (e.g. on alef) are dropped.
    """
    chars = unicodedata.normalize("NFD", text)
    out: List[str] = []
    i = 0
    while i < len(chars):
        ch = chars[i]
        if ch in _HAMZA_SEATS:
            # Find the last hamza-above inside the run of marks after the seat
            j = i + 1
            last_hamza = -1
            while j < len(chars) and unicodedata.category(chars[j]) == "Mn":
                if chars[j] == _HAMZA_ABOVE:
                    last_hamza = j
                j += 1
            if last_hamza != -1:
                out.append(_STANDALONE_HAMZA)
                i = last_hamza + 1
                continue
        out.append(ch)
        i += 1

    folded = "".join(c for c in out if c not in _HAMZA_MARKS)
    return unicodedata.normalize("NFC", folded)


def normalize_token_text(
    text: str,
    normalization: Optional[ArabicNormalization] = None,
) -> str:
    """Normalize a token for Arabic-first matching and mining.

    HOW: Hamza folding (if enabled) runs before normalize_word() because
    stripping combining marks would otherwise lose the hamza. Tatweel,
    alef, and ya folding run afterwards on the bare text.

    RULES:
    - normalization=None applies normalize_word() only, no Arabic folding
    - Use the same normalization for mining, hint building, and matching
    """
    opts = normalization or ArabicNormalization()
    value = text

    if opts.normalize_hamza:
        value = _fold_hamza_seats(value)

    value = normalize_word(value)

    if opts.remove_tatweel:
        value = value.replace(_TATWEEL, "")

    if opts.normalize_alef:
        value = _ALEF_VARIANTS_RE.sub(_ALEF, value)

    if opts.normalize_ya:
        value = value.replace(_ALEF_MAQSURA, _YA)

    return value


def tokenize_ground_truth(ground_truth: str) -> List[str]:
    """Split ground-truth text into words, attaching stray punctuation.

    WHY: Human transcripts often put spaces before punctuation
    ("world ." or Arabic "لله ،"). A standalone punctuation run would
    otherwise become a word with no counterpart in the ASR tokens.

    RULES:
    - Split on any whitespace
    - A raw token made only of punctuation/symbols joins the previous word
    - A leading punctuation-only token stays on its own (nothing to join)
    """
    words: List[str] = []
    for raw in ground_truth.split():
        if words and all(_is_punctuation_or_symbol(ch) for ch in raw):
            words[-1] += raw
        else:
            words.append(raw)
    return words


def create_hints(*phrases: str, normalization: NormalizationLike = None) -> Hints:
    """Build a Hints map from plain phrases.

    WHY: Recurring phrases (e.g. an opening formula) should always start
    a new line. Keying the normalized phrases by their first word keeps
    matching cheap during the marking scan.

    HOW: Each phrase is split on whitespace, every word is normalized with
    the resolved normalization, empty words are dropped, and the word list
    is appended under its first word.

    RULES:
    - Phrases that normalize to nothing are skipped
    - The returned Hints carries the normalization used, for matching

    Args:
        *phrases: Hint phrases, one per argument.
        normalization: Overrides merged onto DEFAULT_NORMALIZATION.

    Returns:
        Hints ready to pass to the divider marker.
    """
    opts = resolve_normalization(normalization)
    hint_map: Dict[str, List[List[str]]] = {}

    for phrase in phrases:
        words = [normalize_token_text(w, opts) for w in phrase.split()]
        words = [w for w in words if w]
        if not words:
            continue
        hint_map.setdefault(words[0], []).append(words)

    return Hints(map=hint_map, normalization=opts)


def create_hints_from_generated(
    generated: Iterable[GeneratedHint],
    normalization: NormalizationLike = None,
) -> Hints:
    """Build a Hints map from mined hint candidates."""
    return create_hints(
        *(hint.normalized_phrase for hint in generated),
        normalization=normalization,
    )

"""Word-list files and companion-file discovery.

WHY: Fillers, hint phrases, and stopwords differ per speaker or per
show, and a corrected transcript belongs to one recording. Users keep
them as plain text files next to the input so they don't have to pass
every path on the command line.

HOW: resolve_companion_files() discovers files by naming convention.
load_word_list() reads the one-entry-per-line format. load_ground_truth()
reads a corrected transcript as a whole.

RULES:
- Companion files sit next to the input: {stem}-fillers.txt,
  {stem}-hints.txt, {stem}-stopwords.txt, {stem}-truth.txt
- Word lists: one entry per line, strip whitespace, ignore blank lines
  and lines starting with '#'
- A hint entry is a whole phrase; its words are split later
- Missing companion files are not an error
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass
class CompanionFiles:
    """Resolved paths to optional companion files (None when absent)."""

    fillers_path: Path | None = None
    hints_path: Path | None = None
    stopwords_path: Path | None = None
    truth_path: Path | None = None


def _stem(path: Path) -> str:
    # Strip all extensions ("talk.words.json" -> "talk")
    stem = path.name
    while "." in stem:
        stem = stem.rsplit(".", 1)[0]
    return stem


def resolve_companion_files(input_path: str | Path) -> CompanionFiles:
    """Discover companion files next to the input file.

    Args:
        input_path: Path to the token/segment JSON file.

    Returns:
        CompanionFiles with resolved paths (None for files not found).
    """
    source = Path(input_path)
    directory = source.parent
    stem = _stem(source)

    result = CompanionFiles()
    for kind in ("fillers", "hints", "stopwords", "truth"):
        candidate = directory / f"{stem}-{kind}.txt"
        if candidate.is_file():
            setattr(result, f"{kind}_path", candidate)

    return result


def load_word_list(path: str | Path) -> list[str]:
    """Load a word list (fillers, hint phrases, or stopwords) from a text file.

    RULES:
    - One entry per line, in file order
    - Leading/trailing whitespace stripped
    - Blank lines and '#' comment lines skipped
    - File must be UTF-8 encoded; FileNotFoundError if missing
    """
    entries: list[str] = []
    for line in Path(path).read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        entries.append(stripped)
    return entries


def load_ground_truth(path: str | Path) -> str:
    """Read a corrected transcript, stripped of surrounding whitespace."""
    return Path(path).read_text(encoding="utf-8").strip()

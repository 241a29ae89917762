"""Default segmentation settings and .env loading.

WHY: Thresholds like the silence gap or the maximum paragraph length
depend on the material (lectures vs. interviews). Keeping the defaults
in one place, overridable from the environment, means nobody has to edit
code or repeat CLI flags to tune them.

HOW: python-dotenv loads the .env file on import. Each default is a
module-level constant read from an environment variable with a fallback.

RULES:
- Only the CLI reads this module; core functions take explicit values
- All defaults can be overridden via PARAGRAFS_* environment variables
- Malformed numeric overrides raise ValueError at import, naming the variable
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the working directory
load_dotenv()


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _env_list(name: str, default: str) -> list[str]:
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


# ---------------------------------------------------------------------------
# Segmentation defaults
# ---------------------------------------------------------------------------

GAP_THRESHOLD = _env_float("PARAGRAFS_GAP_THRESHOLD", 2.0)
"""Silence in seconds between two words that suggests a new paragraph."""

MAX_SECONDS_PER_SEGMENT = _env_float("PARAGRAFS_MAX_SECONDS_PER_SEGMENT", 240.0)
MIN_WORDS_PER_SEGMENT = int(_env_float("PARAGRAFS_MIN_WORDS_PER_SEGMENT", 5))
MAX_SECONDS_PER_LINE = _env_float("PARAGRAFS_MAX_SECONDS_PER_LINE", 30.0)

DEFAULT_FILLERS: list[str] = _env_list("PARAGRAFS_FILLERS", "uh,umm,um,uhh")
"""Filler words replaced by soft breaks (exact text match)."""

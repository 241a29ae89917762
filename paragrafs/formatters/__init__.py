"""Output formatter registry: pluggable format hub.

WHY: The CLI needs a single lookup to find the right formatter by name.
A central dict makes it trivial to add new formats: create the formatter
class, import it here, add one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["plain_text"]()``.

RULES:
- Keys are snake_case identifiers (used in CLI flags)
- Values are BaseFormatter subclasses (not instances)
- Every formatter listed here must be importable without side effects
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from paragrafs.formatters.plain_text import PlainTextFormatter
from paragrafs.formatters.segments_json import SegmentsJsonFormatter
from paragrafs.formatters.timestamped_text import TimestampedTextFormatter

if TYPE_CHECKING:
    from paragrafs.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "timestamped_text": TimestampedTextFormatter,
    "plain_text": PlainTextFormatter,
    "segments_json": SegmentsJsonFormatter,
}


def get_formatter(key: str, max_seconds_per_line: float | None = None) -> BaseFormatter:
    """Instantiate a registered formatter by key.

    Raises:
        ValueError: If the key is not registered.
    """
    try:
        formatter_cls = FORMATTERS[key]
    except KeyError:
        raise ValueError(
            "Unknown format {!r}; choose from: {}".format(key, ", ".join(sorted(FORMATTERS)))
        ) from None
    return formatter_cls(max_seconds_per_line=max_seconds_per_line)

"""Parse timed-word JSON from transcription providers into IR segments.

WHY: Every provider names its fields differently (word/text/t,
start/s, end/e) and some nest words inside segments while others return
one flat array. Files are also often snippets cut out of a larger export
with the closing brackets missing. Everything downstream wants a plain
list of Segment objects.

HOW:
  1. try_parse_json() parses the text, trying bracket completions when
     the input is truncated.
  2. parse_input() checks the shape against INPUT_SCHEMA (jsonschema)
     and builds Segment/Token dataclasses.

RULES:
- Accepted shapes: a list of segments (each with "tokens" or "words"),
  a flat list of token objects, or an object with a "segments" or
  "tokens" key holding one of those lists
- A flat token list becomes one segment spanning all tokens
- Tokens with empty text are skipped; a missing end defaults to start
- Segment start/end/text default to the first/last token and joined text
- Shape errors raise jsonschema.ValidationError, unparseable text ValueError
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List

import jsonschema

from paragrafs.core.ir import Segment, Token

logger = logging.getLogger(__name__)

_TEXT_KEYS = ("text", "word", "t")

_TOKEN_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "anyOf": [{"required": [key]} for key in _TEXT_KEYS],
    "properties": {
        "text": {"type": "string"},
        "word": {"type": "string"},
        "t": {"type": "string"},
        "start": {"type": "number"},
        "s": {"type": "number"},
        "end": {"type": "number"},
        "e": {"type": "number"},
    },
}

_SEGMENT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "anyOf": [{"required": ["tokens"]}, {"required": ["words"]}],
    "properties": {
        "start": {"type": "number"},
        "end": {"type": "number"},
        "text": {"type": "string"},
        "tokens": {"type": "array", "items": _TOKEN_SCHEMA},
        "words": {"type": "array", "items": _TOKEN_SCHEMA},
    },
}

INPUT_SCHEMA: Dict[str, Any] = {
    "anyOf": [
        {"type": "array", "items": _SEGMENT_SCHEMA},
        {"type": "array", "items": _TOKEN_SCHEMA},
    ],
}
"""Accepted input: all segments or all tokens, never mixed."""


def try_parse_json(raw: str) -> Any:
    """Parse JSON, attempting to fix input with missing closing brackets.

    HOW:
      1. Normalize line endings, strip whitespace.
      2. Try direct json.loads().
      3. Strip a trailing comma and try appending closing brackets.

    Raises:
        ValueError: If the JSON cannot be parsed even with attempted fixes.
    """
    raw = raw.replace("\r\n", "\n").replace("\r", "\n").strip()

    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        pass

    raw_clean = re.sub(r",\s*$", "", raw)
    suffixes = ["]", "}]", "}]}", "]}", "]}]", "}]}]"]

    for candidate in (raw_clean, raw):
        for suffix in suffixes:
            try:
                data = json.loads(candidate + suffix)
            except json.JSONDecodeError:
                continue
            logger.debug("Recovered truncated JSON by appending %r", suffix)
            return data

    raise ValueError("Could not parse JSON input (even with attempted fixes)")


def _unwrap(data: Any) -> Any:
    if isinstance(data, dict):
        for key in ("segments", "tokens", "words"):
            if isinstance(data.get(key), list):
                return data[key]
    return data


def _token_from_dict(item: Dict[str, Any]) -> Token | None:
    text = next((item[key] for key in _TEXT_KEYS if key in item), "").strip()
    if not text:
        return None
    start = float(item.get("start", item.get("s", 0)))
    end = float(item.get("end", item.get("e", start)))
    return Token(start=start, end=end, text=text)


def _build_segment(tokens: List[Token], meta: Dict[str, Any]) -> Segment:
    start = meta.get("start", tokens[0].start if tokens else 0.0)
    end = meta.get("end", tokens[-1].end if tokens else start)
    text = meta.get("text", " ".join(t.text for t in tokens))
    return Segment(start=float(start), end=float(end), text=text, tokens=tokens)


def parse_input(data: Any) -> List[Segment]:
    """Validate parsed JSON and convert it into IR segments.

    Args:
        data: Parsed JSON (list of segments, flat token list, or wrapper object).

    Returns:
        Segments in input order.

    Raises:
        jsonschema.ValidationError: If the data has an unsupported shape.
    """
    items = _unwrap(data)
    jsonschema.validate(instance=items, schema=INPUT_SCHEMA)

    if not items:
        return []

    if any(key in items[0] for key in ("tokens", "words")):
        segments: List[Segment] = []
        for item in items:
            raw_tokens = item.get("tokens", item.get("words", []))
            tokens = [t for t in (_token_from_dict(raw) for raw in raw_tokens) if t is not None]
            segments.append(_build_segment(tokens, item))
        return segments

    tokens = [t for t in (_token_from_dict(raw) for raw in items) if t is not None]
    return [_build_segment(tokens, {})]


def load_segments(path: str | Path) -> List[Segment]:
    """Read a JSON file and parse it into segments.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not parseable JSON.
        jsonschema.ValidationError: If the JSON has an unsupported shape.
    """
    raw = Path(path).read_text(encoding="utf-8")
    segments = parse_input(try_parse_json(raw))
    logger.info("Loaded %d segments from %s", len(segments), path)
    return segments

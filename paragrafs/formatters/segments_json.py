"""Segments JSON formatter.

WHY: Downstream tools (players, editors, search indexes) need the
paragraphs with their timings and per-word tokens in a machine-readable
form. The same shape carries grounded segments, where each token also
says whether it had a ground-truth counterpart.

HOW: Segments are converted to plain dicts, validated against
SEGMENTS_SCHEMA with jsonschema, then serialized.

RULES:
- Top level: {"segments": [{"start", "end", "text", "tokens": [...]}]}
- Tokens: {"start", "end", "text"}, plus "isUnknown" for grounded tokens
- Schema validation is mandatory: raises on invalid output
- Output suffix: "-segments.json"
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Sequence, Union

import jsonschema

from paragrafs.core.formatting import map_segments_into_formatted_segments
from paragrafs.core.ir import GroundedSegment, GroundedToken, MarkedSegment, Segment, Token
from paragrafs.formatters.base import BaseFormatter, FormatterOutput

AnySegment = Union[Segment, GroundedSegment]

SEGMENTS_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["segments"],
    "additionalProperties": False,
    "properties": {
        "segments": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["start", "end", "text", "tokens"],
                "properties": {
                    "start": {"type": "number", "minimum": 0},
                    "end": {"type": "number", "minimum": 0},
                    "text": {"type": "string"},
                    "tokens": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "required": ["start", "end", "text"],
                            "properties": {
                                "start": {"type": "number", "minimum": 0},
                                "end": {"type": "number", "minimum": 0},
                                "text": {"type": "string"},
                                "isUnknown": {"type": "boolean"},
                            },
                        },
                    },
                },
            },
        },
    },
}


def _token_to_dict(token: Token) -> Dict[str, Any]:
    item: Dict[str, Any] = {"start": token.start, "end": token.end, "text": token.text}
    if isinstance(token, GroundedToken):
        item["isUnknown"] = token.is_unknown
    return item


def render_segments_json(segments: Sequence[AnySegment]) -> str:
    """Serialize segments to validated JSON.

    Raises:
        jsonschema.ValidationError: If the output does not match SEGMENTS_SCHEMA
            (e.g. negative timings from malformed input).
    """
    output = {
        "segments": [
            {
                "start": segment.start,
                "end": segment.end,
                "text": segment.text,
                "tokens": [_token_to_dict(t) for t in segment.tokens],
            }
            for segment in segments
        ],
    }
    jsonschema.validate(instance=output, schema=SEGMENTS_SCHEMA)
    return json.dumps(output, indent=2, ensure_ascii=False)


class SegmentsJsonFormatter(BaseFormatter):
    """Formatter that writes formatted segments with their tokens as JSON."""

    @property
    def name(self) -> str:
        return "Segments JSON"

    def format(self, segments: List[MarkedSegment]) -> List[FormatterOutput]:
        """Render the segments as JSON.

        Raises:
            jsonschema.ValidationError: If the generated JSON does not
                conform to SEGMENTS_SCHEMA.
        """
        formatted = map_segments_into_formatted_segments(segments, self.max_seconds_per_line)
        return [
            FormatterOutput(
                suffix="-segments.json",
                content=render_segments_json(formatted),
                media_type="application/json",
            )
        ]

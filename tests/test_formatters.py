"""Unit tests for all formatter modules.

WHY: Each formatter turns marked segments into a file the user opens
directly. A wrong suffix overwrites another output; a malformed JSON file
breaks every downstream tool that reads it.

HOW: Two small marked segments (one with a SOFT break after a sentence,
one starting past the one-minute mark) run through every registered
formatter:
  - Registry: keys, lookup errors, formatter names
  - Plain text: paragraphs and line breaks
  - Timestamped text: line policy with default and explicit limits
  - Segments JSON: schema validation and grounded-token flags

RULES:
- Schema validation uses SEGMENTS_SCHEMA from the formatter itself
"""

import json

import jsonschema
import pytest

from paragrafs.core.ir import GroundedSegment, GroundedToken, MarkedSegment, Segment, Token
from paragrafs.formatters import FORMATTERS, get_formatter
from paragrafs.formatters.base import BaseFormatter
from paragrafs.formatters.segments_json import SEGMENTS_SCHEMA, render_segments_json
from conftest import SOFT


@pytest.fixture
def marked_segments():
    return [
        MarkedSegment(
            start=0,
            end=3,
            tokens=[Token(0, 1, "Hello"), Token(1, 2, "world."), SOFT, Token(2, 3, "Again")],
        ),
        MarkedSegment(start=65, end=66, tokens=[Token(65, 66, "Bye.")]),
    ]


def _single_output(formatter, segments):
    outputs = formatter.format(segments)
    assert len(outputs) == 1
    return outputs[0]


class TestRegistry:

    def test_keys(self):
        assert set(FORMATTERS) == {"timestamped_text", "plain_text", "segments_json"}

    def test_all_are_formatters(self):
        for key in FORMATTERS:
            formatter = get_formatter(key)
            assert isinstance(formatter, BaseFormatter)
            assert formatter.name

    def test_unknown_key(self):
        with pytest.raises(ValueError, match="Unknown format 'srt'"):
            get_formatter("srt")

    def test_suffixes_are_unique(self, marked_segments):
        suffixes = [_single_output(get_formatter(key), marked_segments).suffix for key in FORMATTERS]
        assert len(set(suffixes)) == len(suffixes)
        assert all(suffix.startswith("-") for suffix in suffixes)

    def test_line_limit_is_passed_through(self):
        assert get_formatter("plain_text", 12.5).max_seconds_per_line == 12.5


class TestPlainTextFormatter:

    def test_paragraphs_and_lines(self, marked_segments):
        output = _single_output(get_formatter("plain_text"), marked_segments)
        assert output.suffix == "-paragraphs.txt"
        assert output.media_type == "text/plain"
        assert output.content == "Hello world.\nAgain\n\nBye.\n"

    def test_line_limit_keeps_short_lines_together(self, marked_segments):
        output = _single_output(get_formatter("plain_text", 10), marked_segments)
        assert output.content == "Hello world. Again\n\nBye.\n"

    def test_no_segments(self):
        assert _single_output(get_formatter("plain_text"), []).content == ""


class TestTimestampedTextFormatter:

    def test_default_limit_keeps_short_lines(self, marked_segments, monkeypatch):
        monkeypatch.setattr("paragrafs.config.MAX_SECONDS_PER_LINE", 30.0)
        output = _single_output(get_formatter("timestamped_text"), marked_segments)
        assert output.suffix == "-timestamped.txt"
        assert output.content == "0:00: Hello world. Again\n1:05: Bye.\n"

    def test_explicit_limit(self, marked_segments):
        output = _single_output(get_formatter("timestamped_text", 1), marked_segments)
        assert output.content == "0:00: Hello world.\n0:02: Again\n1:05: Bye.\n"

    def test_no_segments(self):
        assert _single_output(get_formatter("timestamped_text"), []).content == ""


class TestSegmentsJsonFormatter:

    def test_output_matches_schema(self, marked_segments):
        output = _single_output(get_formatter("segments_json"), marked_segments)
        assert output.suffix == "-segments.json"
        assert output.media_type == "application/json"

        data = json.loads(output.content)
        jsonschema.validate(instance=data, schema=SEGMENTS_SCHEMA)

        first = data["segments"][0]
        assert (first["start"], first["end"]) == (0, 3)
        assert first["text"] == "Hello world.\nAgain"
        assert [t["text"] for t in first["tokens"]] == ["Hello", "world.", "Again"]
        assert all("isUnknown" not in t for t in first["tokens"])

    def test_unicode_is_written_as_is(self):
        content = render_segments_json([Segment(start=0, end=1, text="مرحبا", tokens=[Token(0, 1, "مرحبا")])])
        assert "مرحبا" in content

    def test_grounded_tokens_carry_unknown_flag(self):
        segment = GroundedSegment(
            start=0,
            end=2,
            text="A B",
            tokens=[GroundedToken(0, 1, "A"), GroundedToken(1, 2, "x", is_unknown=True)],
        )
        data = json.loads(render_segments_json([segment]))
        assert [t["isUnknown"] for t in data["segments"][0]["tokens"]] == [False, True]

    def test_negative_timings_fail_validation(self):
        segment = Segment(start=-1, end=1, text="a", tokens=[Token(-1, 1, "a")])
        with pytest.raises(jsonschema.ValidationError):
            render_segments_json([segment])

    def test_no_segments(self):
        assert json.loads(render_segments_json([])) == {"segments": []}

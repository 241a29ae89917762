"""Tests for the command-line interface.

WHY: The CLI is the only surface most users touch. It has to find the
companion files, name outputs without overwriting earlier runs, and turn
every expected failure into a one-line error with exit status 1.

HOW: Each test writes a small timed-word JSON into tmp_path and calls
main() with explicit argv. Status and error lines are read from stderr
through capsys.
"""

import json

import pytest

from paragrafs import config
from paragrafs.cli import build_parser, main


def _write_input(directory, text, name="talk.json"):
    tokens = [
        {"text": word, "start": i * 0.5, "end": i * 0.5 + 0.4}
        for i, word in enumerate(text.split())
    ]
    path = directory / name
    path.write_text(json.dumps(tokens, ensure_ascii=False), encoding="utf-8")
    return path


SAMPLE_TEXT = "Hello everyone and welcome. basically this is a short test. We will see how it goes today."


class TestParser:

    def test_format_defaults_come_from_config(self):
        args = build_parser().parse_args(["format", "talk.json"])
        assert args.command == "format"
        assert args.gap_threshold == config.GAP_THRESHOLD
        assert args.min_words_per_segment == config.MIN_WORDS_PER_SEGMENT
        assert args.mine_hints == 0

    def test_hints_options(self):
        args = build_parser().parse_args(
            ["hints", "talk.json", "--min-n", "3", "--top-k", "5", "--dedupe", "none", "--normalize-hamza"]
        )
        assert (args.min_n, args.max_n, args.top_k) == (3, 6, 5)
        assert args.dedupe == "none"
        assert args.normalize_hamza is True

    def test_command_is_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_invalid_choice(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["hints", "talk.json", "--boundary", "line"])


class TestFormatCommand:

    def test_writes_every_format(self, tmp_path):
        input_path = _write_input(tmp_path, SAMPLE_TEXT)
        main(["format", str(input_path)])

        assert (tmp_path / "talk-timestamped.txt").is_file()
        assert (tmp_path / "talk-paragraphs.txt").is_file()
        segments = json.loads((tmp_path / "talk-segments.json").read_text(encoding="utf-8"))
        assert segments["segments"]

    def test_selected_formats_only(self, tmp_path):
        input_path = _write_input(tmp_path, SAMPLE_TEXT)
        main(["format", str(input_path), "--formats", "plain_text"])

        assert sorted(p.name for p in tmp_path.iterdir()) == ["talk-paragraphs.txt", "talk.json"]

    def test_second_run_does_not_overwrite(self, tmp_path):
        input_path = _write_input(tmp_path, SAMPLE_TEXT)
        main(["format", str(input_path), "--formats", "plain_text"])
        main(["format", str(input_path), "--formats", "plain_text"])

        assert (tmp_path / "talk-paragraphs.txt").is_file()
        assert (tmp_path / "talk-paragraphs-2.txt").is_file()

    def test_companion_fillers_are_removed(self, tmp_path):
        input_path = _write_input(tmp_path, SAMPLE_TEXT)
        (tmp_path / "talk-fillers.txt").write_text("basically\n", encoding="utf-8")
        main(["format", str(input_path), "--formats", "plain_text"])

        content = (tmp_path / "talk-paragraphs.txt").read_text(encoding="utf-8")
        assert "basically" not in content
        assert "Hello" in content

    def test_output_dir(self, tmp_path):
        input_path = _write_input(tmp_path, SAMPLE_TEXT)
        out = tmp_path / "out"
        out.mkdir()
        main(["format", str(input_path), "--formats", "segments_json", "--output-dir", str(out)])

        assert (out / "talk-segments.json").is_file()

    def test_mined_hints(self, tmp_path, capsys):
        input_path = _write_input(tmp_path, "in the name of God. in the name of God.")
        main(["format", str(input_path), "--formats", "plain_text", "--mine-hints", "3"])

        assert "Mined 1 hint phrases" in capsys.readouterr().err

    def test_unknown_format_exits(self, tmp_path, capsys):
        input_path = _write_input(tmp_path, SAMPLE_TEXT)
        with pytest.raises(SystemExit) as exc:
            main(["format", str(input_path), "--formats", "srt"])

        assert exc.value.code == 1
        assert "Error: Unknown format 'srt'" in capsys.readouterr().err

    def test_missing_input_exits(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["format", str(tmp_path / "missing.json")])

        assert exc.value.code == 1
        assert "Input file not found" in capsys.readouterr().err

    def test_invalid_input_shape_exits(self, tmp_path, capsys):
        path = tmp_path / "talk.json"
        path.write_text('[{"start": 0}]', encoding="utf-8")
        with pytest.raises(SystemExit) as exc:
            main(["format", str(path)])

        assert exc.value.code == 1
        assert "Error:" in capsys.readouterr().err

    def test_missing_output_dir_exits(self, tmp_path, capsys):
        input_path = _write_input(tmp_path, SAMPLE_TEXT)
        with pytest.raises(SystemExit):
            main(["format", str(input_path), "--output-dir", str(tmp_path / "nope")])

        assert "Output directory does not exist" in capsys.readouterr().err


class TestAlignCommand:

    def test_uses_companion_truth(self, tmp_path):
        input_path = _write_input(tmp_path, "The Buick crown flock jumps")
        (tmp_path / "talk-truth.txt").write_text("The quick brown fox jumps\n", encoding="utf-8")
        main(["align", str(input_path)])

        data = json.loads((tmp_path / "talk-aligned.json").read_text(encoding="utf-8"))
        (segment,) = data["segments"]
        assert segment["text"] == "The quick brown fox jumps"
        assert [t["isUnknown"] for t in segment["tokens"]] == [False] * 5

    def test_explicit_truth_path(self, tmp_path):
        input_path = _write_input(tmp_path, "A B X C")
        truth = tmp_path / "corrected.txt"
        truth.write_text("A B C", encoding="utf-8")
        main(["align", str(input_path), "--truth", str(truth)])

        data = json.loads((tmp_path / "talk-aligned.json").read_text(encoding="utf-8"))
        assert [t["isUnknown"] for t in data["segments"][0]["tokens"]] == [False, False, True, False]

    def test_missing_truth_exits(self, tmp_path, capsys):
        input_path = _write_input(tmp_path, SAMPLE_TEXT)
        with pytest.raises(SystemExit) as exc:
            main(["align", str(input_path)])

        assert exc.value.code == 1
        assert "Error: No ground truth given" in capsys.readouterr().err


class TestHintsCommand:

    def test_json_output(self, tmp_path):
        input_path = _write_input(tmp_path, "A B C A B C")
        main(["hints", str(input_path)])

        data = json.loads((tmp_path / "talk-hints.json").read_text(encoding="utf-8"))
        assert [h["normalized_phrase"] for h in data] == ["A B C"]
        assert data[0]["count"] == 2

    def test_text_output(self, tmp_path):
        input_path = _write_input(tmp_path, "A B C A B C")
        main(["hints", str(input_path), "--output-format", "text", "--dedupe", "none"])

        content = (tmp_path / "talk-hints.txt").read_text(encoding="utf-8")
        assert content == "A B C\nA B\nB C\n"

    def test_companion_stopwords(self, tmp_path):
        input_path = _write_input(tmp_path, "x y the of x y the of")
        (tmp_path / "talk-stopwords.txt").write_text("the\nof\n", encoding="utf-8")
        main(["hints", str(input_path), "--output-format", "text", "--max-n", "2"])

        content = (tmp_path / "talk-hints.txt").read_text(encoding="utf-8")
        assert "the of" not in content
        assert "x y" in content

"""Command-line interface for paragrafs.

WHY: Users need a simple way to turn a provider's timed-word JSON into
readable transcripts, to carry corrections back onto the timings, and to
discover recurring phrases, without writing Python. The CLI wires the
loaders, word lists, core pipelines, and formatters behind three commands.

HOW: argparse subcommands:
  format: mark, clean, group, merge, then run the selected formatters
  align: ground the tokens against a corrected transcript
  hints: mine recurring n-grams (reusable as a hints file)
Each command loads the input JSON, discovers companion word lists next to
it ({stem}-fillers.txt, {stem}-hints.txt, {stem}-stopwords.txt,
{stem}-truth.txt) unless explicit paths are given, and saves outputs next
to the input (or to --output-dir).

RULES:
- Positional argument: input JSON file path
- Output naming: {stem}{suffix}, numeric suffix for conflicts (-segments-2.json)
- Status output goes to stderr (not stdout)
- Errors print "Error: ..." to stderr and exit with status 1
- Defaults come from config (PARAGRAFS_* environment variables / .env)
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import jsonschema

from paragrafs import config
from paragrafs.core.aligner import update_segment_with_ground_truth
from paragrafs.core.hints import generate_hints_from_segments
from paragrafs.core.ir import HintMiningOptions, Segment, SegmentationOptions
from paragrafs.core.segmenter import mark_and_combine_segments
from paragrafs.core.text import create_hints
from paragrafs.formatters import FORMATTERS, get_formatter
from paragrafs.formatters.base import FormatterOutput
from paragrafs.formatters.segments_json import render_segments_json
from paragrafs.loaders import load_segments
from paragrafs.wordlists import (
    load_ground_truth,
    load_word_list,
    resolve_companion_files,
)


def _status(msg: str) -> None:
    """Print a status message to stderr.

    WHY: Status output must not pollute stdout so the CLI can be piped.
    """
    print(msg, file=sys.stderr, flush=True)


def _resolve_output_path(
    stem: str,
    suffix: str,
    output_dir: Path,
) -> Path:
    """Resolve the output file path, adding numeric suffix on conflict.

    WHY: Users may run the tool several times on the same file.
    Overwriting previous output would lose work.

    RULES:
    - First attempt: {stem}{suffix} (e.g. talk-segments.json)
    - Conflict: split suffix at last dot, insert counter before extension
      (e.g. talk-segments-2.json)
    - Counter starts at 2 and increments

    Returns:
        A Path that does not yet exist.
    """
    base_path = output_dir / "{}{}".format(stem, suffix)
    if not base_path.exists():
        return base_path

    dot_idx = suffix.rfind(".")
    if dot_idx > 0:
        suffix_name = suffix[:dot_idx]
        suffix_ext = suffix[dot_idx:]
    else:
        suffix_name = suffix
        suffix_ext = ""

    counter = 2
    while True:
        candidate = output_dir / "{}{}-{}{}".format(stem, suffix_name, counter, suffix_ext)
        if not candidate.exists():
            return candidate
        counter += 1


def _save_output(
    output: FormatterOutput,
    stem: str,
    output_dir: Path,
) -> Path:
    """Write one formatter output as UTF-8 and return where it went."""
    path = _resolve_output_path(stem, output.suffix, output_dir)
    path.write_text(output.content, encoding="utf-8")
    _status("  Saved: {}".format(path.name))
    return path


def _stem(input_path: Path) -> str:
    stem = input_path.name
    while "." in stem:
        stem = stem.rsplit(".", 1)[0]
    return stem


def _output_dir(args: argparse.Namespace, input_path: Path) -> Path:
    output_dir = Path(args.output_dir).resolve() if args.output_dir else input_path.parent
    if not output_dir.is_dir():
        raise ValueError("Output directory does not exist: {}".format(output_dir))
    return output_dir


def _optional_list(explicit: Optional[str], discovered: Optional[Path]) -> Optional[List[str]]:
    """Load an explicitly given word list, else a discovered companion, else None."""
    path = explicit or discovered
    if path is None:
        return None
    _status("  Word list: {}".format(Path(path).name))
    return load_word_list(path)


def _load_input(args: argparse.Namespace) -> tuple:
    input_path = Path(args.input_file).resolve()
    if not input_path.is_file():
        raise FileNotFoundError("Input file not found: {}".format(input_path))

    _status("Loading {}...".format(input_path.name))
    segments = load_segments(input_path)
    token_count = sum(len(s.tokens) for s in segments)
    _status("  {} segments, {} tokens".format(len(segments), token_count))

    companions = resolve_companion_files(input_path)
    return input_path, segments, companions


def _mining_options(args: argparse.Namespace, stopwords: Optional[List[str]]) -> HintMiningOptions:
    normalization = {"normalize_hamza": True} if args.normalize_hamza else None
    return HintMiningOptions(
        min_n=args.min_n,
        max_n=args.max_n,
        min_count=args.min_count,
        top_k=args.top_k,
        dedupe=args.dedupe,
        boundary=args.boundary,
        stopwords=list(stopwords or []),
        normalization=normalization,
    )


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _run_format(args: argparse.Namespace) -> None:
    input_path, segments, companions = _load_input(args)
    output_dir = _output_dir(args, input_path)

    if args.formats:
        format_keys = [f.strip() for f in args.formats.split(",") if f.strip()]
    else:
        format_keys = list(FORMATTERS.keys())
    formatters = [get_formatter(key, args.max_seconds_per_line) for key in format_keys]

    fillers = _optional_list(args.fillers, companions.fillers_path)
    phrases = _optional_list(args.hints, companions.hints_path) or []

    if args.mine_hints:
        mined = generate_hints_from_segments(segments, HintMiningOptions(top_k=args.mine_hints))
        _status("  Mined {} hint phrases".format(len(mined)))
        phrases = [hint.normalized_phrase for hint in mined] + phrases
    hints = create_hints(*phrases) if phrases else None

    options = SegmentationOptions(
        gap_threshold=args.gap_threshold,
        max_seconds_per_segment=args.max_seconds_per_segment,
        min_words_per_segment=args.min_words_per_segment,
        fillers=list(config.DEFAULT_FILLERS if fillers is None else fillers),
        hints=hints,
    )

    _status("Segmenting...")
    marked = mark_and_combine_segments(segments, options)
    _status("  {} paragraphs".format(len(marked)))

    _status("Formatting output...")
    stem = _stem(input_path)
    for formatter in formatters:
        _status("  Running {} formatter...".format(formatter.name))
        for output in formatter.format(marked):
            _save_output(output, stem, output_dir)


def _run_align(args: argparse.Namespace) -> None:
    input_path, segments, companions = _load_input(args)
    output_dir = _output_dir(args, input_path)

    truth_path = args.truth or companions.truth_path
    if truth_path is None:
        raise ValueError(
            "No ground truth given. Pass --truth or add {}-truth.txt next to the input.".format(
                _stem(input_path)
            )
        )
    ground_truth = load_ground_truth(truth_path)

    tokens = [token for segment in segments for token in segment.tokens]
    whole = Segment(
        start=tokens[0].start if tokens else 0.0,
        end=tokens[-1].end if tokens else 0.0,
        text=" ".join(t.text for t in tokens),
        tokens=tokens,
    )

    _status("Aligning against {}...".format(Path(truth_path).name))
    grounded = update_segment_with_ground_truth(whole, ground_truth)
    unknown = sum(1 for t in grounded.tokens if t.is_unknown)
    _status("  {} tokens, {} unknown".format(len(grounded.tokens), unknown))

    output = FormatterOutput(
        suffix="-aligned.json",
        content=render_segments_json([grounded]),
        media_type="application/json",
    )
    _save_output(output, _stem(input_path), output_dir)


def _run_hints(args: argparse.Namespace) -> None:
    input_path, segments, companions = _load_input(args)
    output_dir = _output_dir(args, input_path)

    stopwords = _optional_list(args.stopwords, companions.stopwords_path)
    options = _mining_options(args, stopwords)

    _status("Mining {}-{} grams...".format(options.min_n, options.max_n))
    mined = generate_hints_from_segments(segments, options)
    _status("  {} hint phrases".format(len(mined)))

    if args.output_format == "json":
        output = FormatterOutput(
            suffix="-hints.json",
            content=json.dumps([dataclasses.asdict(h) for h in mined], indent=2, ensure_ascii=False),
            media_type="application/json",
        )
    else:
        # One phrase per line, loadable again as a hints word list
        lines = "".join("{}\n".format(h.phrase) for h in mined)
        output = FormatterOutput(suffix="-hints.txt", content=lines, media_type="text/plain")

    _save_output(output, _stem(input_path), output_dir)


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable: tests can inspect the parser without running a command.

    RULES:
    - Subcommands: format, align, hints (one is required)
    - Shared: input_file, --output-dir, --verbose
    - Numeric defaults come from config
    """
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "input_file",
        help="Path to the timed-word JSON file (flat tokens or segments).",
    )
    common.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: same as input file).",
    )
    common.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    parser = argparse.ArgumentParser(
        prog="paragrafs",
        description="Segment timed transcripts into paragraphs, align them with "
                    "corrected text, and mine recurring phrases.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    fmt = subparsers.add_parser(
        "format", parents=[common],
        help="Segment the transcript and write formatted output.",
    )
    fmt.add_argument(
        "--formats",
        default=None,
        help="Comma-separated list of output formats. "
             "Available: {}. Default: all.".format(", ".join(sorted(FORMATTERS.keys()))),
    )
    fmt.add_argument(
        "--gap-threshold", type=float, default=config.GAP_THRESHOLD,
        help="Silence in seconds that suggests a break (default: %(default)s).",
    )
    fmt.add_argument(
        "--max-seconds-per-segment", type=float, default=config.MAX_SECONDS_PER_SEGMENT,
        help="Paragraph length after which the next break closes it (default: %(default)s).",
    )
    fmt.add_argument(
        "--min-words-per-segment", type=int, default=config.MIN_WORDS_PER_SEGMENT,
        help="Shorter paragraphs merge into the previous one (default: %(default)s).",
    )
    fmt.add_argument(
        "--max-seconds-per-line", type=float, default=config.MAX_SECONDS_PER_LINE,
        help="Line length before a soft break ends the line (default: %(default)s).",
    )
    fmt.add_argument(
        "--fillers", default=None,
        help="Path to a filler word list (default: {stem}-fillers.txt or built-in list).",
    )
    fmt.add_argument(
        "--hints", default=None,
        help="Path to a hint phrase list (default: {stem}-hints.txt if present).",
    )
    fmt.add_argument(
        "--mine-hints", type=int, default=0, metavar="K",
        help="Mine the K most frequent phrases from the input and use them as hints.",
    )
    fmt.set_defaults(func=_run_format)

    align = subparsers.add_parser(
        "align", parents=[common],
        help="Align the tokens with a corrected transcript.",
    )
    align.add_argument(
        "--truth", default=None,
        help="Path to the corrected transcript (default: {stem}-truth.txt).",
    )
    align.set_defaults(func=_run_align)

    hints = subparsers.add_parser(
        "hints", parents=[common],
        help="Mine recurring phrases from the transcript.",
    )
    hints.add_argument("--min-n", type=int, default=2, help="Shortest phrase length (default: %(default)s).")
    hints.add_argument("--max-n", type=int, default=6, help="Longest phrase length (default: %(default)s).")
    hints.add_argument("--min-count", type=int, default=2, help="Minimum occurrences (default: %(default)s).")
    hints.add_argument("--top-k", type=int, default=None, help="Keep only the K most frequent phrases.")
    hints.add_argument("--dedupe", choices=["closed", "none"], default="closed")
    hints.add_argument("--boundary", choices=["segment", "none"], default="segment")
    hints.add_argument(
        "--stopwords", default=None,
        help="Path to a stopword list (default: {stem}-stopwords.txt if present).",
    )
    hints.add_argument(
        "--normalize-hamza", action="store_true",
        help="Also fold waw/ya hamza seats before counting.",
    )
    hints.add_argument(
        "--output-format", choices=["json", "text"], default="json",
        help="json: full statistics; text: one phrase per line (default: %(default)s).",
    )
    hints.set_defaults(func=_run_hints)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        args.func(args)
    except jsonschema.ValidationError as e:
        print("Error: {}".format(e.message), file=sys.stderr)
        sys.exit(1)
    except (ValueError, OSError) as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)

    _status("Done!")


if __name__ == "__main__":
    main()

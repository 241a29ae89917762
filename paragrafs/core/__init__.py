"""Core segmentation, alignment, and mining modules.

WHY: The core package holds the pure algorithms: the IR dataclasses,
text normalization, the segmentation pipeline, line formatting, ground
truth alignment, and hint mining. Formatters, loaders, and the CLI all
build on these and never reimplement them.

HOW: ir.py defines the data structures, text.py the normalizer and small
text helpers, segmenter.py the mark/clean/group/merge pipeline,
formatting.py the line flattening, lcs.py and aligner.py ground-truth
sync, hints.py n-gram mining, selection.py token lookups.

RULES:
- No I/O and no configuration reads in core; callers pass explicit values
- Functions return new values and never mutate their inputs
- Malformed but well-typed input degrades gracefully instead of raising
"""

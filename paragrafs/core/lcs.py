"""Longest-common-subsequence table and backtracking over word lists."""

from __future__ import annotations

from typing import Dict, List, Sequence

LcsTable = List[List[int]]


def build_lcs_table(a: Sequence[str], b: Sequence[str]) -> LcsTable:
    """Build the (len(a)+1) x (len(b)+1) LCS dynamic-programming table.

    Cost is O(len(a) * len(b)) in time and memory.
    """
    m, n = len(a), len(b)
    table = [[0] * (n + 1) for _ in range(m + 1)]

    for i in range(m):
        row, next_row = table[i], table[i + 1]
        for j in range(n):
            if a[i] == b[j]:
                next_row[j + 1] = row[j] + 1
            else:
                next_row[j + 1] = max(row[j + 1], next_row[j])

    return table


def extract_lcs_matches(
    table: LcsTable,
    original: Sequence[str],
    ground: Sequence[str],
) -> Dict[int, int]:
    """Backtrack the table into matched index pairs.

    Walks from the bottom-right corner. Equal words match immediately;
    otherwise the walk moves up when that keeps at least as long a
    subsequence, else left. With repeated words this prefers the later
    occurrence in ``original``.

    Returns:
        Mapping of original index -> ground index. Both sides are strictly
        increasing when iterated in original-index order.
    """
    matches: Dict[int, int] = {}
    i, j = len(original), len(ground)

    while i > 0 and j > 0:
        if original[i - 1] == ground[j - 1]:
            matches[i - 1] = j - 1
            i -= 1
            j -= 1
        elif table[i - 1][j] >= table[i][j - 1]:
            i -= 1
        else:
            j -= 1

    return matches

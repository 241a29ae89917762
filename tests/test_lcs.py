"""Unit tests for the LCS table and backtracking."""

from paragrafs.core.lcs import build_lcs_table, extract_lcs_matches


class TestBuildLcsTable:

    def test_dimensions(self):
        table = build_lcs_table(["a", "b", "c"], ["a", "c"])
        assert len(table) == 4
        assert all(len(row) == 3 for row in table)

    def test_length_in_corner(self):
        table = build_lcs_table(["The", "Buick", "crown", "fox"], ["The", "quick", "brown", "fox"])
        assert table[-1][-1] == 2

    def test_no_overlap(self):
        table = build_lcs_table(["x", "y"], ["a", "b"])
        assert table[-1][-1] == 0

    def test_empty_side(self):
        assert build_lcs_table([], ["a"]) == [[0, 0]]


class TestExtractLcsMatches:

    def _matches(self, a, b):
        return extract_lcs_matches(build_lcs_table(a, b), a, b)

    def test_basic(self):
        assert self._matches(["a", "b", "c"], ["a", "c"]) == {0: 0, 2: 1}

    def test_empty(self):
        assert self._matches([], []) == {}
        assert self._matches(["a"], []) == {}

    def test_prefers_later_duplicate(self):
        assert self._matches(["x", "x"], ["x"]) == {1: 0}

    def test_pairs_increase_on_both_sides(self):
        a = ["a", "b", "a", "c", "b", "d", "a"]
        b = ["b", "a", "d", "c", "a"]
        matches = self._matches(a, b)
        pairs = sorted(matches.items())
        assert len(pairs) == build_lcs_table(a, b)[-1][-1]
        for (i1, j1), (i2, j2) in zip(pairs, pairs[1:]):
            assert i1 < i2
            assert j1 < j2
        for i, j in pairs:
            assert a[i] == b[j]

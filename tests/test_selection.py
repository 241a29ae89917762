"""Unit tests for selection and phrase lookup."""

from paragrafs.core.ir import Segment, Token
from paragrafs.core.selection import get_first_matching_token, get_first_token_for_selection
from conftest import make_tokens


def _segment(text):
    tokens = make_tokens(text)
    return Segment(start=tokens[0].start, end=tokens[-1].end, text=text, tokens=tokens)


class TestGetFirstTokenForSelection:

    def test_selection_on_token_boundaries(self):
        segment = _segment("Hello world again")
        assert get_first_token_for_selection(segment, 0, 11) is segment.tokens[0]
        assert get_first_token_for_selection(segment, 6, 17) is segment.tokens[1]

    def test_single_token_selection(self):
        segment = _segment("Hello world again")
        assert get_first_token_for_selection(segment, 6, 11) is segment.tokens[1]

    def test_end_inside_a_token(self):
        segment = _segment("Hello world again")
        assert get_first_token_for_selection(segment, 6, 8) is None

    def test_start_inside_a_token(self):
        segment = _segment("Hello world again")
        assert get_first_token_for_selection(segment, 1, 5) is None

    def test_empty_selection(self):
        segment = _segment("Hello world")
        assert get_first_token_for_selection(segment, 6, 6) is None

    def test_repeated_words_resolve_in_order(self):
        first, second = Token(0, 1, "go"), Token(1, 2, "go")
        segment = Segment(start=0, end=2, text="go go", tokens=[first, second])
        assert get_first_token_for_selection(segment, 3, 5) is second
        assert get_first_token_for_selection(segment, 0, 5) is first

    def test_text_with_line_breaks(self):
        tokens = make_tokens("A B. C")
        segment = Segment(start=0, end=3, text="A B.\nC", tokens=tokens)
        assert get_first_token_for_selection(segment, 5, 6) is tokens[2]


class TestGetFirstMatchingToken:

    def test_matches_normalized_words(self):
        tokens = make_tokens("Hello, world again")
        assert get_first_matching_token(tokens, "Hello world") is tokens[0]

    def test_first_match_wins(self):
        tokens = make_tokens("a b a b")
        assert get_first_matching_token(tokens, "a b") is tokens[0]
        assert get_first_matching_token(tokens, "b") is tokens[1]

    def test_no_match(self):
        assert get_first_matching_token(make_tokens("a b"), "b a") is None

    def test_query_longer_than_tokens(self):
        assert get_first_matching_token(make_tokens("a"), "a b") is None

    def test_empty_query(self):
        tokens = make_tokens("a b")
        assert get_first_matching_token(tokens, "") is None
        assert get_first_matching_token(tokens, "... ،") is None

    def test_arabic_variants_use_default_normalization(self):
        tokens = make_tokens("ذهبت إلى السوق")
        assert get_first_matching_token(tokens, "الى السوق") is tokens[1]

    def test_explicit_normalization_overrides(self):
        tokens = make_tokens("على الله")
        assert get_first_matching_token(tokens, "علي", {"normalize_ya": False}) is None
        assert get_first_matching_token(tokens, "علي") is tokens[0]

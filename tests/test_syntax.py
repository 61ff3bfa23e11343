"""Tests for expression boundary scanning."""

from inline_eval.syntax import (
    backward_sexp,
    fontify,
    forward_sexp,
    skip_whitespace_backward,
)


class TestBackwardSexp:

    def test_list(self):
        assert backward_sexp("(+ 1 2)", 7) == 0

    def test_nested_list(self):
        assert backward_sexp("(a (b c))", 9) == 0

    def test_inner_list(self):
        assert backward_sexp("(a (b c))", 8) == 3

    def test_symbol(self):
        assert backward_sexp("foo bar", 7) == 4

    def test_skips_trailing_whitespace(self):
        assert backward_sexp("(+ 1 2)  \n\n", 11) == 0

    def test_quote_prefix_is_included(self):
        assert backward_sexp("'(1 2)", 6) == 0

    def test_closer_inside_string(self):
        assert backward_sexp('(str ")")', 9) == 0

    def test_string(self):
        assert backward_sexp('x "a b"', 7) == 2

    def test_trailing_comment_is_skipped(self):
        assert backward_sexp("(+ 1 2) ; sum", 13) == 0

    def test_unbalanced_stops_at_start(self):
        assert backward_sexp("1 2)", 4) == 0

    def test_start_of_text(self):
        assert backward_sexp("   ", 3) == 0


class TestForwardSexp:

    def test_list(self):
        assert forward_sexp("(+ 1 2) rest", 0) == 7

    def test_symbol_after_whitespace(self):
        assert forward_sexp("  foo bar", 0) == 5

    def test_escaped_quote_in_string(self):
        assert forward_sexp('"a\\"b" x', 0) == 6

    def test_comment_inside_list(self):
        assert forward_sexp("(a ; )\n b)", 0) == 10

    def test_end_of_text(self):
        assert forward_sexp("abc", 3) == 3


def test_skip_whitespace_backward():
    assert skip_whitespace_backward("ab \t\n", 5) == 2
    assert skip_whitespace_backward("ab", 99) == 2


def test_fontify():
    runs = fontify(' => "hi" :k 42 nil')
    assert runs == [
        (4, 8, "string"),
        (9, 11, "constant"),
        (12, 14, "constant"),
        (15, 18, "constant"),
    ]


def test_fontify_ignores_digits_inside_symbols():
    assert fontify("x1 y-2") == []

"""Tests for core data structures."""

import pytest
from inline_eval.core import Annotation, Position, RemovalKind, RemovalPolicy, Span, StyleRun


class TestPosition:
    """Tests for Position class."""

    def test_create_position(self):
        pos = Position(offset=10, line=1, column=5)
        assert pos.offset == 10
        assert pos.line == 1
        assert pos.column == 5

    def test_invalid_offset(self):
        with pytest.raises(ValueError):
            Position(offset=-1)


class TestSpan:
    """Tests for Span class."""

    def test_create_span(self):
        span = Span(start=10, end=20)
        assert span.start == 10
        assert span.end == 20
        assert span.length == 10
        assert not span.is_empty

    def test_invalid_span(self):
        with pytest.raises(ValueError):
            Span(start=20, end=10)  # start > end

    def test_negative_span(self):
        with pytest.raises(ValueError):
            Span(start=-1, end=3)

    def test_overlapping_spans(self):
        assert Span(0, 10).overlaps(Span(5, 15))
        assert Span(5, 15).overlaps(Span(0, 10))

    def test_adjacent_spans_do_not_overlap(self):
        assert not Span(0, 5).overlaps(Span(5, 10))

    def test_point_span_overlaps_enclosing_span(self):
        assert Span(5, 5).overlaps(Span(0, 10))
        assert Span(0, 10).overlaps(Span(10, 10))
        assert not Span(11, 11).overlaps(Span(0, 10))


class TestRemovalPolicy:
    """Tests for RemovalPolicy parsing."""

    def test_parse_loose_values(self):
        assert RemovalPolicy.parse(None).kind is RemovalKind.NEVER
        assert RemovalPolicy.parse("never").kind is RemovalKind.NEVER
        assert RemovalPolicy.parse("command").kind is RemovalKind.BEFORE_NEXT_COMMAND
        assert RemovalPolicy.parse("change").kind is RemovalKind.ON_CHANGE

        timed = RemovalPolicy.parse(5)
        assert timed.kind is RemovalKind.AFTER_DURATION
        assert timed.seconds == 5.0

    def test_parse_rejects_unknown(self):
        with pytest.raises(ValueError):
            RemovalPolicy.parse("sometimes")
        with pytest.raises(ValueError):
            RemovalPolicy.parse(True)

    def test_negative_duration(self):
        with pytest.raises(ValueError):
            RemovalPolicy.after(-1)

    def test_to_value(self):
        assert RemovalPolicy.after(2.5).to_value() == 2.5
        assert RemovalPolicy.before_next_command().to_value() == "command"
        assert RemovalPolicy.never().to_value() is None


class TestAnnotation:
    """Tests for Annotation class."""

    def test_defaults(self):
        ann = Annotation(span=Span(0, 7), display_text=" => 3 ")
        assert ann.category == "result"
        assert ann.removal_policy.kind is RemovalKind.BEFORE_NEXT_COMMAND
        assert ann.cursor_index == 0
        assert not ann.removed
        assert not ann.is_live  # not attached to a buffer

    def test_detach_is_idempotent(self):
        ann = Annotation(span=Span(0, 7), display_text=" => 3 ")
        assert ann.detach() is True
        assert ann.detach() is False
        assert ann.removed

    def test_annotation_to_dict(self):
        ann = Annotation(
            span=Span(0, 7),
            display_text=" => 3 ",
            category="debug",
            removal_policy=RemovalPolicy.after(3),
            runs=[StyleRun(0, 6, ("result",))],
        )
        d = ann.to_dict()
        assert d["display_text"] == " => 3 "
        assert d["category"] == "debug"
        assert d["removal_policy"] == 3.0
        assert d["span"] == {"start": 0, "end": 7}


class TestStyleRun:

    def test_shifted(self):
        run = StyleRun(0, 4, ("string", "result"))
        assert run.shifted(2) == StyleRun(2, 6, ("string", "result"))

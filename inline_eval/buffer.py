"""
Buffers: editable documents that carry inline annotations.

A buffer owns its text, cursor, markers, the set of annotations attached to
it, and the notification channels annotations depend on: edit subscriptions
for spans, a pre-command hook registry, and a change hook registry.
"""

import logging
import weakref
from typing import Callable, Iterator, Optional

from .core import Annotation, Position, Span
from .formatting import display_width
from .hooks import HookRegistry
from .syntax import backward_sexp, forward_sexp, skip_whitespace_backward

logger = logging.getLogger(__name__)


class Marker:
    """A position in a buffer that moves as text is inserted or deleted."""

    def __init__(self, buffer: "Buffer", offset: int):
        self.buffer = buffer
        self.offset = offset

    @property
    def alive(self) -> bool:
        return self.buffer.alive

    def __repr__(self) -> str:
        return f"Marker({self.buffer.name!r}, {self.offset})"


class EditSubscription:
    """Callback fired when an edit touches a span. Cancel to stop listening."""

    def __init__(self, buffer: "Buffer", span_of: Callable[[], Span], callback: Callable[[], None]):
        self.buffer = buffer
        self.span_of = span_of
        self.callback = callback
        self.active = True

    def cancel(self) -> None:
        if not self.active:
            return
        self.active = False
        self.buffer._subscriptions.discard(self)


def _adjust(offset: int, start: int, end: int, delta: int) -> int:
    """Where offset ends up after text[start:end] is replaced, growing by delta."""
    if offset <= start:
        return offset
    if offset >= end:
        return offset + delta
    return start


class Buffer:
    """
    An in-memory document.

    Offsets are character offsets into text. The buffer is the single place
    where annotation spans and markers are moved in response to edits.
    """

    def __init__(self, text: str = "", name: str = "untitled", point: Optional[int] = None):
        self.name = name
        self.text = text
        self.point = len(text) if point is None else point
        self.mark: Optional[int] = None
        self.alive = True

        self._annotations: list[Annotation] = []
        self._subscriptions: set[EditSubscription] = set()
        self._markers: "weakref.WeakSet[Marker]" = weakref.WeakSet()

        self.pre_command_hooks = HookRegistry(f"{name} pre-command")
        self.change_hooks = HookRegistry(f"{name} change")

    def __repr__(self) -> str:
        state = "live" if self.alive else "killed"
        return f"<Buffer {self.name!r} {state} chars={len(self.text)}>"

    # Lines and columns

    @property
    def line_count(self) -> int:
        return self.text.count("\n") + 1

    def _clamp(self, offset: int) -> int:
        return min(max(offset, 0), len(self.text))

    def line_start(self, offset: int) -> int:
        offset = self._clamp(offset)
        return self.text.rfind("\n", 0, offset) + 1

    def line_end(self, offset: int) -> int:
        offset = self._clamp(offset)
        newline = self.text.find("\n", offset)
        return len(self.text) if newline == -1 else newline

    def line_of(self, offset: int) -> int:
        """Line number (0-indexed) containing offset."""
        return self.text.count("\n", 0, self._clamp(offset))

    def column_of(self, offset: int) -> int:
        """Display column of offset within its line."""
        offset = self._clamp(offset)
        return display_width(self.text[self.line_start(offset):offset])

    def offset_to_position(self, offset: int) -> Position:
        """Convert a character offset to a Position with line/column."""
        if offset < 0 or offset > len(self.text):
            raise ValueError(f"Offset {offset} out of range [0, {len(self.text)}]")
        return Position(offset=offset, line=self.line_of(offset),
                        column=offset - self.line_start(offset))

    def position_to_offset(self, line: int, column: int = 0) -> int:
        """Convert line/column to character offset."""
        if line < 0 or line >= self.line_count:
            raise ValueError(f"Line {line} out of range [0, {self.line_count - 1}]")
        start = 0
        for _ in range(line):
            start = self.text.index("\n", start) + 1
        return min(start + column, self.line_end(start))

    def get_line(self, line_num: int) -> str:
        """Get the content of a specific line (0-indexed)."""
        start = self.position_to_offset(line_num)
        return self.text[start:self.line_end(start)]

    def get_text_at_span(self, span: Span) -> str:
        return self.text[span.start:span.end]

    # Syntax

    def skip_whitespace_backward(self, offset: int) -> int:
        return skip_whitespace_backward(self.text, offset)

    def expression_start(self, offset: int) -> int:
        """Start of the expression ending at or before offset."""
        return backward_sexp(self.text, offset)

    def expression_end(self, offset: int) -> int:
        """End of the expression starting at or after offset."""
        return forward_sexp(self.text, offset)

    # Markers

    def marker(self, offset: Optional[int] = None) -> Marker:
        """Create a marker at offset (default: point)."""
        marker = Marker(self, self._clamp(self.point if offset is None else offset))
        self._markers.add(marker)
        return marker

    @property
    def region(self) -> Optional[Span]:
        """The span between mark and point, if a mark is set."""
        if self.mark is None:
            return None
        return Span(min(self.mark, self.point), max(self.mark, self.point))

    # Annotations

    def add_annotation(self, annotation: Annotation) -> None:
        annotation.buffer = self
        self._annotations.append(annotation)

    def discard_annotation(self, annotation: Annotation) -> bool:
        """Detach annotation from this buffer. Returns whether it was attached."""
        try:
            self._annotations.remove(annotation)
        except ValueError:
            return False
        return True

    def annotations(self, category: Optional[str] = None, span: Optional[Span] = None) -> list[Annotation]:
        """Attached annotations, optionally filtered by category and overlap with span."""
        found = []
        for annotation in self._annotations:
            if category is not None and annotation.category != category:
                continue
            if span is not None and not annotation.span.overlaps(span):
                continue
            found.append(annotation)
        return found

    def __iter__(self) -> Iterator[Annotation]:
        return iter(list(self._annotations))

    def subscribe_edits(self, span_of: Callable[[], Span], callback: Callable[[], None]) -> EditSubscription:
        """Call callback (once per edit) whenever an edit touches span_of()."""
        subscription = EditSubscription(self, span_of, callback)
        self._subscriptions.add(subscription)
        return subscription

    # Editing

    def insert(self, offset: int, text: str) -> None:
        self.replace(Span(offset, offset), text)

    def delete(self, span: Span) -> None:
        self.replace(span, "")

    def replace(self, span: Span, text: str) -> None:
        """
        Replace the text in span.

        Subscribers whose span the edit touches are notified before the text
        changes. An insertion touches a span only strictly inside it; a
        deletion touches any span it overlaps.
        """
        if not self.alive:
            raise RuntimeError(f"Buffer {self.name!r} has been killed")
        if span.end > len(self.text):
            raise ValueError(f"Span {span} out of range [0, {len(self.text)}]")

        for subscription in list(self._subscriptions):
            if not subscription.active:
                continue
            target = subscription.span_of()
            if span.is_empty:
                touched = target.start < span.start < target.end
            else:
                touched = span.overlaps(target)
            if touched:
                try:
                    subscription.callback()
                except Exception:
                    logger.exception("Edit subscriber failed in %r", self)

        delta = len(text) - span.length
        self.text = self.text[:span.start] + text + self.text[span.end:]

        for annotation in self._annotations:
            annotation.span = Span(
                _adjust(annotation.span.start, span.start, span.end, delta),
                _adjust(annotation.span.end, span.start, span.end, delta),
            )
        for marker in list(self._markers):
            marker.offset = _adjust(marker.offset, span.start, span.end, delta)
        if span.is_empty and self.point == span.start:
            self.point += len(text)
        else:
            self.point = _adjust(self.point, span.start, span.end, delta)
        if self.mark is not None:
            self.mark = _adjust(self.mark, span.start, span.end, delta)

        self.change_hooks.run()

    def kill(self) -> None:
        """Kill the buffer, dropping every annotation and pending hook."""
        if not self.alive:
            return
        for annotation in list(self._annotations):
            annotation.detach()
        self._annotations.clear()
        for subscription in list(self._subscriptions):
            subscription.cancel()
        self.pre_command_hooks.clear()
        self.change_hooks.clear()
        self.alive = False
        logger.debug("Killed %r", self)

    # Rendering

    def render(self) -> str:
        """Render the text with each annotation's display text after its span."""
        ordered = sorted(
            enumerate(self._annotations),
            key=lambda item: (item[1].span.end, item[0]),
            reverse=True,
        )
        result = self.text
        for _, annotation in ordered:
            end = annotation.span.end
            result = result[:end] + annotation.display_text + result[end:]
        return result

"""
Annotation manager: places evaluation results inline and removes them again.
"""

import logging
from typing import Any, Optional, Union

from .buffer import Buffer, Marker
from .config import AnnotationOptions, OverlayConfig
from .core import Annotation, AnnotationStyle, RemovalKind, Span
from .editor import EditorSurface, Viewport
from .evaluator import Evaluator
from .formatting import (
    LINE_BREAK_PREFIX,
    apply_template,
    break_line,
    default_format,
    display_width,
    layer_under,
    needs_line_break,
    render_value,
    truncate,
    uniform_runs,
    validate_template,
    widest_line,
)

logger = logging.getLogger(__name__)

Location = Union[None, int, Marker, tuple]


class AnnotationManager:
    """
    Creates and removes inline result annotations.

    All work happens synchronously on the caller's thread. Removal is
    best-effort: it never raises, and is safe to repeat or to trigger from
    inside another removal, an edit notification, or a hook.
    """

    def __init__(
        self,
        editor: EditorSurface,
        evaluator: Optional[Evaluator] = None,
        config: Optional[OverlayConfig] = None,
    ):
        self.editor = editor
        self.evaluator = evaluator
        self.config = config or OverlayConfig()

    # Creation

    def create(
        self,
        value: Any,
        where: Location = None,
        options: Optional[AnnotationOptions] = None,
    ) -> Optional[Annotation]:
        """
        Attach value as an inline annotation and schedule its removal.

        Args:
            value: The evaluation result, printed with config.printer
            where: None for the current buffer's point, an offset or Marker,
                or a (start, end) pair of offsets or Markers
            options: Category, removal policy, display format and style
                overrides for this annotation

        Returns:
            The annotation if it is visible in the buffer's viewport, None if
            it is not (or could not be created). A hidden annotation stays
            attached; None only tells the caller to present the value some
            other way.
        """
        options = options or AnnotationOptions()
        template = options.display_format or default_format(self.config.result_prefix)
        validate_template(template)
        policy = options.removal_policy or self.config.removal_policy

        if not self.config.use_overlays:
            return None

        buffer = self._resolve_buffer(where)
        if buffer is None or not buffer.alive:
            logger.debug("Not annotating: target buffer is gone")
            return None

        span, anchor = self._resolve_span(buffer, where)
        viewport = self.editor.viewport_for(buffer)
        width = viewport.width if viewport is not None else self.config.default_width
        column = buffer.column_of(span.end)

        text = apply_template(template, render_value(value, self.config.printer))

        if self.config.use_syntax_coloring:
            runs = layer_under(text, self.editor.fontify(text), options.face)
        else:
            runs = uniform_runs(text, options.face)

        if needs_line_break(text, width - column):
            text, runs = break_line(text, runs)
        text, runs = truncate(text, runs, width)

        self.remove_by_category(buffer, options.category, span)

        properties = dict(self.config.properties)
        properties.update(options.properties)
        annotation = Annotation(
            span=span,
            display_text=text,
            category=options.category,
            removal_policy=policy,
            style=AnnotationStyle(
                face=options.face,
                attributes=self.config.face.resolve(self.editor.background_mode),
                syntax_colored=self.config.use_syntax_coloring,
                properties=properties,
            ),
            runs=runs,
            cursor_index=0,
        )
        buffer.add_annotation(annotation)
        annotation.subscription = buffer.subscribe_edits(
            lambda: annotation.span, lambda: self.remove(annotation)
        )
        self._apply_policy(buffer, annotation)

        if annotation.removed:
            return None
        if not self._is_visible(buffer, annotation, anchor, viewport):
            logger.debug("Annotation at %s is outside the viewport of %r", span, buffer)
            return None
        return annotation

    def _resolve_buffer(self, where: Location) -> Optional[Buffer]:
        if isinstance(where, Marker):
            return where.buffer
        if isinstance(where, tuple) and where and isinstance(where[0], Marker):
            return where[0].buffer
        return self.editor.current_buffer

    def _resolve_span(self, buffer: Buffer, where: Location) -> tuple[Span, int]:
        """Return the annotation span and the offset used as its anchor."""
        if isinstance(where, tuple):
            if len(where) != 2:
                raise ValueError(f"Span must be a (start, end) pair, got {where!r}")
            start, end = (w.offset if isinstance(w, Marker) else w for w in where)
            span = Span(start, end)
            return span, span.end

        if where is None:
            offset = buffer.point
        elif isinstance(where, Marker):
            offset = where.offset
        else:
            offset = where
        anchor = buffer.skip_whitespace_backward(offset)
        start = buffer.expression_start(anchor)
        end = buffer.line_end(anchor)
        return Span(min(start, end), end), anchor

    def _apply_policy(self, buffer: Buffer, annotation: Annotation) -> None:
        policy = annotation.removal_policy
        category = annotation.category

        if policy.kind is RemovalKind.AFTER_DURATION:
            annotation.timer = self.editor.schedule(
                policy.seconds, lambda: self.remove(annotation)
            )
        elif policy.kind is RemovalKind.BEFORE_NEXT_COMMAND:
            if self.editor.in_command:
                buffer.pre_command_hooks.add(
                    category, lambda: self._remove_with_policy(buffer, category, policy.kind)
                )
            else:
                # No command is running, so no next-command boundary will catch it
                self.remove(annotation)
        elif policy.kind is RemovalKind.ON_CHANGE:
            buffer.change_hooks.add(
                category, lambda: self._remove_with_policy(buffer, category, policy.kind)
            )

    def _remove_with_policy(self, buffer: Buffer, category: str, kind: RemovalKind) -> int:
        """Remove the category's annotations in buffer whose policy is kind."""
        count = 0
        for annotation in buffer.annotations(category=category):
            if annotation.removal_policy.kind is kind and self.remove(annotation):
                count += 1
        return count

    def _is_visible(
        self,
        buffer: Buffer,
        annotation: Annotation,
        anchor: int,
        viewport: Optional[Viewport],
    ) -> bool:
        """
        Whether the anchor is on screen and the text fits beside it.

        Text that starts on its own line must fit the full width on every
        line; otherwise it must fit in the columns left after the span.
        """
        if viewport is None:
            return False
        if not viewport.shows_line(buffer.line_of(anchor)):
            return False
        if viewport.soft_wrap:
            return True

        text = annotation.display_text
        if text.startswith(LINE_BREAK_PREFIX):
            return widest_line(text[len(LINE_BREAK_PREFIX):]) <= viewport.width
        column = buffer.column_of(annotation.span.end)
        return column + display_width(text) <= viewport.width

    # Removal

    def remove(self, annotation: Annotation) -> bool:
        """
        Remove one annotation. Returns False if it was already gone.

        Never raises.
        """
        try:
            removed = annotation.detach()
        except Exception:
            logger.debug("Ignoring failure removing %r", annotation, exc_info=True)
            return False
        if removed:
            logger.debug("Removed %s annotation at %s", annotation.category, annotation.span)
        return removed

    def remove_by_category(
        self,
        buffer: Optional[Buffer],
        category: str = "result",
        span: Optional[Span] = None,
    ) -> int:
        """
        Remove annotations of category from buffer, optionally only those
        overlapping span. Clearing the whole category also withdraws its
        pending removal hooks; a span-limited removal leaves them for the
        annotations outside the span. Returns the number removed.
        """
        if buffer is None or not buffer.alive:
            return 0
        if span is None:
            buffer.pre_command_hooks.discard(category)
            buffer.change_hooks.discard(category)

        count = 0
        for annotation in buffer.annotations(category=category, span=span):
            if self.remove(annotation):
                count += 1
        return count

    # Evaluation

    def evaluate_and_annotate(self, span: Span, buffer: Optional[Buffer] = None) -> Any:
        """
        Evaluate the source in span and show its value inline.

        The value always goes to the status line as well, whether or not the
        annotation is visible. Evaluation errors propagate unchanged and no
        annotation is created.
        """
        if self.evaluator is None:
            raise RuntimeError("AnnotationManager has no evaluator")
        buffer = buffer or self.editor.current_buffer

        raw = buffer.get_text_at_span(span)
        source = raw.strip()
        leading = len(raw) - len(raw.lstrip())
        end = self._end_of_source(buffer, span.start + leading, source)
        anchor = buffer.marker(end)

        value = self.evaluator.evaluate(source)

        self.create(value, where=anchor)
        self.editor.echo(render_value(value, self.config.printer))
        return value

    @staticmethod
    def _end_of_source(buffer: Buffer, start: int, source: str) -> int:
        """End of the evaluated text, moved past the expression it ends in."""
        end = start + len(source)
        if not source:
            return end
        expression_end = buffer.expression_end(buffer.expression_start(end))
        return max(end, min(expression_end, buffer.line_end(end)))

    def eval_at_point(self, buffer: Optional[Buffer] = None) -> Any:
        """Evaluate the expression that ends at point."""
        buffer = buffer or self.editor.current_buffer
        end = buffer.skip_whitespace_backward(buffer.point)
        start = buffer.expression_start(end)
        return self.evaluate_and_annotate(Span(start, end), buffer)


"""
Core data structures for inline evaluation results.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .buffer import Buffer, EditSubscription
    from .editor import Timer


@dataclass(frozen=True)
class Position:
    """Represents a position in a buffer."""
    offset: int  # Character offset from start of buffer
    line: int = 0  # Line number (0-indexed)
    column: int = 0  # Column number (0-indexed)

    def __post_init__(self):
        if self.offset < 0:
            raise ValueError("Offset must be non-negative")


@dataclass(frozen=True)
class Span:
    """Represents a span of text in a buffer."""
    start: int  # Start character offset (inclusive)
    end: int  # End character offset (exclusive)

    def __post_init__(self):
        if self.start < 0 or self.end < 0:
            raise ValueError("Offsets must be non-negative")
        if self.start > self.end:
            raise ValueError("Start must be <= end")

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def contains(self, offset: int) -> bool:
        """Check whether offset lies within the span, both ends included."""
        return self.start <= offset <= self.end

    def overlaps(self, other: "Span") -> bool:
        """
        Check whether two spans share any text.

        Zero-width spans overlap anything that contains their offset, so a
        point annotation is found by a query over the region around it.
        """
        if self.is_empty:
            return other.contains(self.start)
        if other.is_empty:
            return self.contains(other.start)
        return self.start < other.end and other.start < self.end


class RemovalKind(Enum):
    """When an annotation is removed automatically."""
    NEVER = "never"
    AFTER_DURATION = "after_duration"
    BEFORE_NEXT_COMMAND = "before_next_command"
    ON_CHANGE = "on_change"


@dataclass(frozen=True)
class RemovalPolicy:
    """Removal rule for an annotation, with the delay for timed removal."""
    kind: RemovalKind
    seconds: float = 0.0

    def __post_init__(self):
        if self.kind is RemovalKind.AFTER_DURATION and self.seconds < 0:
            raise ValueError("Duration must be non-negative")

    @classmethod
    def never(cls) -> "RemovalPolicy":
        return cls(RemovalKind.NEVER)

    @classmethod
    def after(cls, seconds: float) -> "RemovalPolicy":
        return cls(RemovalKind.AFTER_DURATION, float(seconds))

    @classmethod
    def before_next_command(cls) -> "RemovalPolicy":
        return cls(RemovalKind.BEFORE_NEXT_COMMAND)

    @classmethod
    def on_change(cls) -> "RemovalPolicy":
        return cls(RemovalKind.ON_CHANGE)

    @classmethod
    def parse(cls, value: Any) -> "RemovalPolicy":
        """
        Build a policy from a loose configuration value.

        Accepts None or "never", a number of seconds, "command", "change",
        or an existing RemovalPolicy.
        """
        if isinstance(value, RemovalPolicy):
            return value
        if value is None or value == "never":
            return cls.never()
        if isinstance(value, bool):
            raise ValueError(f"Invalid removal policy: {value!r}")
        if isinstance(value, (int, float)):
            return cls.after(value)
        if value == "command":
            return cls.before_next_command()
        if value == "change":
            return cls.on_change()
        raise ValueError(f"Invalid removal policy: {value!r}")

    def to_value(self) -> Any:
        """Inverse of parse()."""
        if self.kind is RemovalKind.AFTER_DURATION:
            return self.seconds
        if self.kind is RemovalKind.BEFORE_NEXT_COMMAND:
            return "command"
        if self.kind is RemovalKind.ON_CHANGE:
            return "change"
        return None


@dataclass(frozen=True)
class StyleRun:
    """Faces applied to display_text[start:end], highest priority first."""
    start: int
    end: int
    faces: tuple[str, ...]

    def shifted(self, delta: int) -> "StyleRun":
        return StyleRun(self.start + delta, self.end + delta, self.faces)


@dataclass
class AnnotationStyle:
    """Visual styling resolved for an annotation."""
    face: str = "result"
    attributes: dict = field(default_factory=dict)  # e.g. background, box
    syntax_colored: bool = False
    properties: dict = field(default_factory=dict)  # pass-through attributes


@dataclass(eq=False)
class Annotation:
    """
    A transient result attached to a buffer span.

    The annotation never alters buffer text; display_text is rendered after
    the span. Annotations are replaced, not mutated. Only the owning buffer
    moves the span when text is inserted or deleted around it.
    """
    span: Span
    display_text: str
    category: str = "result"
    removal_policy: RemovalPolicy = field(default_factory=RemovalPolicy.before_next_command)
    style: AnnotationStyle = field(default_factory=AnnotationStyle)
    runs: list[StyleRun] = field(default_factory=list)
    cursor_index: int = 0
    buffer: Optional["Buffer"] = field(default=None, repr=False)
    removed: bool = False

    # Set by the manager, released on removal
    timer: Optional["Timer"] = field(default=None, repr=False)
    subscription: Optional["EditSubscription"] = field(default=None, repr=False)

    @property
    def is_live(self) -> bool:
        return not self.removed and self.buffer is not None and self.buffer.alive

    def detach(self) -> bool:
        """
        Stop the timer and edit subscription and leave the buffer.

        Returns False if the annotation was already removed.
        """
        if self.removed:
            return False
        self.removed = True
        timer, self.timer = self.timer, None
        if timer is not None:
            timer.cancel()
        subscription, self.subscription = self.subscription, None
        if subscription is not None:
            subscription.cancel()
        if self.buffer is not None:
            self.buffer.discard_annotation(self)
        return True

    def to_dict(self) -> dict:
        """Convert annotation to dictionary representation."""
        return {
            "span": {"start": self.span.start, "end": self.span.end},
            "display_text": self.display_text,
            "category": self.category,
            "removal_policy": self.removal_policy.to_value(),
            "face": self.style.face,
            "attributes": dict(self.style.attributes),
            "properties": dict(self.style.properties),
            "syntax_colored": self.style.syntax_colored,
            "cursor_index": self.cursor_index,
            "removed": self.removed,
        }

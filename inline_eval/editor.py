"""
Editor surface interface and an in-memory implementation.
"""

import heapq
import itertools
import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from .buffer import Buffer
from .syntax import fontify

logger = logging.getLogger(__name__)


@dataclass
class Viewport:
    """The visible part of a buffer: a range of lines and a width in columns."""
    first_line: int = 0
    height: int = 24
    width: int = 80
    soft_wrap: bool = False

    def __post_init__(self):
        if self.height <= 0 or self.width <= 0:
            raise ValueError("Viewport height and width must be positive")

    @property
    def last_line(self) -> int:
        return self.first_line + self.height - 1

    def shows_line(self, line: int) -> bool:
        return self.first_line <= line <= self.last_line


class Timer:
    """A one-shot scheduled callback."""

    def __init__(self, due: float, callback: Callable[[], None]):
        self.due = due
        self.callback = callback
        self.cancelled = False
        self.fired = False

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        if not self.pending:
            return
        self.fired = True
        self.callback()


class EditorSurface(ABC):
    """What the annotation manager needs from the host editor."""

    @property
    @abstractmethod
    def current_buffer(self) -> Buffer:
        """The buffer user commands act on."""
        pass

    @property
    @abstractmethod
    def in_command(self) -> bool:
        """Whether a user command is currently executing."""
        pass

    @abstractmethod
    def viewport_for(self, buffer: Buffer) -> Optional[Viewport]:
        """The viewport showing buffer, or None if it is not displayed."""
        pass

    @abstractmethod
    def schedule(self, delay: float, callback: Callable[[], None]) -> Timer:
        """Run callback once, delay seconds from now."""
        pass

    @abstractmethod
    def echo(self, text: str) -> None:
        """Show text on the status line."""
        pass

    @property
    def background_mode(self) -> str:
        """Either "light" or "dark"."""
        return "light"

    def fontify(self, text: str) -> list[tuple[int, int, str]]:
        """Syntax faces for text as (start, end, face) triples."""
        return fontify(text)


class MemoryEditor(EditorSurface):
    """
    Headless editor for tests, scripts, and the command line.

    Time only moves when advance() is called, and command cycles are explicit
    via the command() context manager.
    """

    def __init__(
        self,
        width: int = 80,
        height: int = 24,
        background_mode: str = "light",
        soft_wrap: bool = False,
    ):
        if background_mode not in ("light", "dark"):
            raise ValueError(f"Unknown background mode: {background_mode}")
        self.width = width
        self.height = height
        self.soft_wrap = soft_wrap
        self._background_mode = background_mode

        self.buffers: list[Buffer] = []
        self.viewports: dict[int, Viewport] = {}
        self.messages: list[str] = []
        self.now = 0.0

        self._current: Optional[Buffer] = None
        self._command_depth = 0
        self._timers: list[tuple[float, int, Timer]] = []
        self._sequence = itertools.count()

    # Buffers and viewports

    def open(self, text: str = "", name: str = "untitled", point: Optional[int] = None,
             visible: bool = True) -> Buffer:
        """Create a buffer, make it current, and (by default) display it."""
        buffer = Buffer(text, name=name, point=point)
        self.buffers.append(buffer)
        self._current = buffer
        if visible:
            self.show(buffer)
        return buffer

    def show(self, buffer: Buffer, viewport: Optional[Viewport] = None) -> Viewport:
        if viewport is None:
            viewport = Viewport(height=self.height, width=self.width, soft_wrap=self.soft_wrap)
        self.viewports[id(buffer)] = viewport
        return viewport

    def hide(self, buffer: Buffer) -> None:
        self.viewports.pop(id(buffer), None)

    def switch_to(self, buffer: Buffer) -> None:
        if not buffer.alive:
            raise ValueError(f"Cannot switch to killed buffer {buffer.name!r}")
        self._current = buffer

    def kill(self, buffer: Buffer) -> None:
        buffer.kill()
        self.hide(buffer)
        if buffer in self.buffers:
            self.buffers.remove(buffer)
        if self._current is buffer:
            self._current = self.buffers[-1] if self.buffers else None

    @property
    def current_buffer(self) -> Buffer:
        if self._current is None:
            self._current = self.open(name="scratch")
        return self._current

    def viewport_for(self, buffer: Buffer) -> Optional[Viewport]:
        if not buffer.alive:
            return None
        return self.viewports.get(id(buffer))

    @property
    def background_mode(self) -> str:
        return self._background_mode

    # Command cycles

    @property
    def in_command(self) -> bool:
        return self._command_depth > 0

    @contextmanager
    def command(self, buffer: Optional[Buffer] = None) -> Iterator[Buffer]:
        """
        Run one user command against buffer (default: the current buffer).

        The buffer's pre-command hooks fire on entry, before the command body.
        """
        target = buffer or self.current_buffer
        if target.alive:
            target.pre_command_hooks.run()
        self._command_depth += 1
        try:
            yield target
        finally:
            self._command_depth -= 1

    # Timers

    def schedule(self, delay: float, callback: Callable[[], None]) -> Timer:
        timer = Timer(self.now + max(delay, 0.0), callback)
        heapq.heappush(self._timers, (timer.due, next(self._sequence), timer))
        return timer

    @property
    def pending_timers(self) -> int:
        return sum(1 for _, _, timer in self._timers if timer.pending)

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing due timers in order. Returns how many fired."""
        deadline = self.now + seconds
        fired = 0
        while self._timers and self._timers[0][0] <= deadline:
            due, _, timer = heapq.heappop(self._timers)
            self.now = max(self.now, due)
            if not timer.pending:
                continue
            try:
                timer.fire()
            except Exception:
                logger.exception("Timer callback failed")
            fired += 1
        self.now = deadline
        return fired

    # Status line

    def echo(self, text: str) -> None:
        self.messages.append(text)
        logger.info("%s", text)

    @property
    def last_message(self) -> Optional[str]:
        return self.messages[-1] if self.messages else None

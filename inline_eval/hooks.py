"""
Per-buffer registry of one-shot callbacks.

Editors notify buffers at command boundaries and after text changes. Each
pending callback is keyed (usually by annotation category), fires at most
once, and can be withdrawn before it fires.
"""

import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class HookRegistry:
    """Keyed one-shot callbacks, run in registration order."""

    def __init__(self, name: str = "hooks"):
        self.name = name
        self._pending: dict[str, Callable[[], None]] = {}
        self._running: Optional[dict[str, Callable[[], None]]] = None

    def add(self, key: str, callback: Callable[[], None]) -> None:
        """Register callback under key, replacing any pending one."""
        self._pending.pop(key, None)
        self._pending[key] = callback

    def discard(self, key: str) -> bool:
        """Withdraw the callback for key. Returns whether one was pending."""
        found = self._pending.pop(key, None) is not None
        if self._running is not None:
            found = self._running.pop(key, None) is not None or found
        return found

    def pending(self, key: str) -> bool:
        return key in self._pending

    def clear(self) -> None:
        self._pending.clear()
        if self._running is not None:
            self._running.clear()

    def run(self) -> int:
        """
        Fire every pending callback once and forget it.

        The pending set is swapped out before anything runs: hooks added by a
        callback wait for the next run, and hooks discarded by a callback are
        skipped. Failures are logged and do not stop the remaining hooks.
        """
        batch, self._pending = self._pending, {}
        self._running = batch
        fired = 0
        try:
            while batch:
                key = next(iter(batch))
                callback = batch.pop(key)
                try:
                    callback()
                except Exception:
                    logger.exception("%s hook %r failed", self.name, key)
                fired += 1
        finally:
            self._running = None
        return fired

    def __len__(self) -> int:
        return len(self._pending)

    def __contains__(self, key: str) -> bool:
        return key in self._pending

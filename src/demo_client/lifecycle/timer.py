"""
RepeatingTimer - an explicit, cancellable scheduled task.

Built on loop.call_later() so that scheduling and cancellation are plain
synchronous calls on the event loop:
- start() schedules the first tick and returns the timer itself as handle
- each tick runs the callback synchronously, then schedules the next one
- cancel() is idempotent; once it returns no further tick will run

The callback must not block. Work that needs to await (a network fetch)
is started as a task by the callback and is not awaited by the timer.
"""

import asyncio
import logging
from typing import Callable

logger = logging.getLogger(__name__)


class RepeatingTimer:
    """
    Invoke a callback every `interval` seconds until cancelled.

    Example:
        timer = RepeatingTimer(3.0, on_tick).start()
        ...
        timer.cancel()  # synchronous; safe to call more than once
    """

    def __init__(self, interval: float, callback: Callable[[], None]) -> None:
        """
        Initialize the timer without scheduling anything.

        Args:
            interval: Seconds between ticks (must be positive)
            callback: Invoked on the event loop at each tick
        """
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.interval = interval
        self._callback = callback
        self._handle: asyncio.TimerHandle | None = None
        self._cancelled = False
        self.tick_count = 0

    @property
    def active(self) -> bool:
        return self._handle is not None and not self._cancelled

    def start(self) -> "RepeatingTimer":
        """
        Schedule the first tick one interval from now.

        Must be called from inside a running event loop.

        Returns:
            self, as the handle used to cancel.
        """
        if self._cancelled:
            raise RuntimeError("cannot restart a cancelled timer")
        if self._handle is None:
            self._schedule()
        return self

    def cancel(self) -> None:
        """Stop the timer. Idempotent and synchronous."""
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _schedule(self) -> None:
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.interval, self._fire)

    def _fire(self) -> None:
        if self._cancelled:
            return
        self.tick_count += 1
        try:
            self._callback()
        finally:
            # The callback may have cancelled the timer
            if not self._cancelled:
                self._schedule()

"""Next-frame scheduling primitives.

The integrator only needs "call me on the next frame" and "never mind".
``ManualFrameScheduler`` lets tests and one-shot renders drive frames by hand;
``AsyncioFrameScheduler`` drives them from a running event loop.
"""

import asyncio
import itertools
import logging
from typing import Callable, Protocol

from entity_topology.config import settings

logger = logging.getLogger(__name__)

FrameCallback = Callable[[], None]


class FrameScheduler(Protocol):
    """Anything that can run a callback on its next frame."""

    def request_frame(self, callback: FrameCallback) -> int:
        """Schedule ``callback`` for the next frame and return a handle."""
        ...

    def cancel_frame(self, handle: int) -> None:
        """Cancel a scheduled callback. Unknown handles are ignored."""
        ...


class ManualFrameScheduler:
    """Frame scheduler advanced explicitly by calling ``run_frame``."""

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self._pending: dict[int, FrameCallback] = {}
        self.frames_run = 0

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def request_frame(self, callback: FrameCallback) -> int:
        handle = next(self._ids)
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle: int) -> None:
        self._pending.pop(handle, None)

    def run_frame(self) -> int:
        """Run every callback scheduled before this frame started.

        Callbacks requested while the frame runs wait for the next frame.

        Returns:
            Number of callbacks executed
        """
        due = self._pending
        self._pending = {}
        self.frames_run += 1
        for callback in due.values():
            callback()
        return len(due)

    def run_frames(self, count: int) -> int:
        """Run ``count`` frames, returning the total number of callbacks."""
        return sum(self.run_frame() for _ in range(count))


class AsyncioFrameScheduler:
    """Frame scheduler backed by ``loop.call_later`` at a fixed frame interval."""

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop | None = None,
        interval: float | None = None,
    ) -> None:
        self._loop = loop
        self.interval = interval if interval is not None else settings.frame_interval
        self._ids = itertools.count(1)
        self._timers: dict[int, asyncio.TimerHandle] = {}

    @property
    def pending_count(self) -> int:
        return len(self._timers)

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def request_frame(self, callback: FrameCallback) -> int:
        handle = next(self._ids)

        def _fire() -> None:
            self._timers.pop(handle, None)
            callback()

        self._timers[handle] = self._get_loop().call_later(self.interval, _fire)
        return handle

    def cancel_frame(self, handle: int) -> None:
        timer = self._timers.pop(handle, None)
        if timer is not None:
            timer.cancel()

    def cancel_all(self) -> None:
        """Cancel every outstanding frame."""
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()

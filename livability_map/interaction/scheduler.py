"""
Frame Scheduler

Cancellable "run at the next frame boundary" tasks. Pointer handlers
cancel the previous handle before scheduling a new one, so at most one
recomputation runs per frame and superseded work never runs.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Callable, Optional

DEFAULT_FRAME_INTERVAL = 1.0 / 60.0

Callback = Callable[[], None]


class FrameHandle:
    """Handle to a scheduled frame callback."""

    def __init__(self, callback: Callback):
        self._callback = callback
        self._cancelled = False
        self._done = False
        self._timer: Optional[asyncio.TimerHandle] = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def done(self) -> bool:
        return self._done

    @property
    def pending(self) -> bool:
        return not (self._cancelled or self._done)

    def cancel(self) -> bool:
        """
        Cancel the callback if it has not run yet.

        Returns
        -------
        bool
            True if this call cancelled a pending callback
        """
        if not self.pending:
            return False
        self._cancelled = True
        if self._timer is not None:
            self._timer.cancel()
        return True

    def run(self) -> None:
        """Invoke the callback once, unless cancelled or already run."""
        if not self.pending:
            return
        self._done = True
        self._callback()


class FrameScheduler(ABC):
    """Schedules callbacks for the next frame boundary."""

    @abstractmethod
    def schedule(self, callback: Callback) -> FrameHandle:
        """Schedule `callback` for the next frame; returns a cancellable handle."""


class AsyncioFrameScheduler(FrameScheduler):
    """
    Frame scheduler on an asyncio event loop.

    Parameters
    ----------
    frame_interval : float, optional
        Seconds between frames (default: 1/60)
    loop : asyncio.AbstractEventLoop, optional
        Loop to schedule on (default: the running loop at schedule time)
    """

    def __init__(self, frame_interval: float = DEFAULT_FRAME_INTERVAL,
                 loop: Optional[asyncio.AbstractEventLoop] = None):
        if frame_interval < 0:
            raise ValueError(f"frame_interval must be non-negative, got {frame_interval}")
        self.frame_interval = float(frame_interval)
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            return self._loop
        return asyncio.get_running_loop()

    def _delay(self, loop: asyncio.AbstractEventLoop) -> float:
        """Time until the next frame boundary on the loop clock."""
        if self.frame_interval == 0:
            return 0.0
        now = loop.time()
        return self.frame_interval - (now % self.frame_interval)

    def schedule(self, callback: Callback) -> FrameHandle:
        loop = self._get_loop()
        handle = FrameHandle(callback)
        handle._timer = loop.call_later(self._delay(loop), handle.run)
        return handle

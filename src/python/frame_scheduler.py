"""
Frame schedulers: cancelable per-frame callbacks for animation loops.

The zoom engine never talks to a display directly. It asks a scheduler to
run a callback on the next frame and keeps the returned handle so it can
cancel the loop when a newer gesture takes over.

- QtFrameScheduler drives frames from single-shot QTimers on the Qt event loop
- ManualFrameScheduler lets tests step frames with synthetic timestamps
"""

import itertools
import logging
from abc import ABC, abstractmethod

from PyQt6.QtCore import QElapsedTimer, QTimer

from config_manager import config
from custom_types import FrameCallback

logger = logging.getLogger(__name__)


class FrameScheduler(ABC):
    """Schedule one callback per frame; callbacks receive a timestamp in ms."""

    @abstractmethod
    def schedule(self, callback: FrameCallback) -> int:
        """Run `callback(timestamp_ms)` on the next frame and return a handle."""
        pass

    @abstractmethod
    def cancel(self, handle: int) -> None:
        """Drop a scheduled callback; unknown or already-run handles are a no-op."""
        pass


class ManualFrameScheduler(FrameScheduler):
    """Scheduler stepped by hand with synthetic timestamps."""

    def __init__(self, start_ms: float = 0.0, frame_ms: float = 16.0) -> None:
        self.now = float(start_ms)
        self.frame_ms = float(frame_ms)
        self._handles = itertools.count(1)
        self._pending: dict[int, FrameCallback] = {}

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def schedule(self, callback: FrameCallback) -> int:
        handle = next(self._handles)
        self._pending[handle] = callback
        return handle

    def cancel(self, handle: int) -> None:
        self._pending.pop(handle, None)

    def run_frame(self, timestamp: float | None = None) -> int:
        """Advance to the next frame and run everything scheduled before it.

        Callbacks scheduled while the frame runs wait for the following frame.

        Returns:
            int: Number of callbacks that ran
        """
        self.now = self.now + self.frame_ms if timestamp is None else float(timestamp)
        due, self._pending = self._pending, {}
        for callback in due.values():
            callback(self.now)
        return len(due)

    def run_until_idle(self, max_frames: int = 10_000) -> int:
        """Step frames until nothing is scheduled; returns frames run."""
        frames = 0
        while self._pending and frames < max_frames:
            self.run_frame()
            frames += 1
        if self._pending:
            logger.warning("Frame loop still pending after %d frames", frames)
        return frames


class QtFrameScheduler(FrameScheduler):
    """Frame callbacks driven by single-shot QTimers on the Qt event loop."""

    def __init__(self, interval_ms: int | None = None) -> None:
        self.interval_ms = interval_ms if interval_ms is not None else config.get_frame_interval_ms()
        self._clock = QElapsedTimer()
        self._clock.start()
        self._handles = itertools.count(1)
        self._timers: dict[int, tuple[QTimer, FrameCallback]] = {}

    def now(self) -> float:
        """Milliseconds since the scheduler was created."""
        return self._clock.nsecsElapsed() / 1_000_000.0

    def schedule(self, callback: FrameCallback) -> int:
        handle = next(self._handles)
        timer = QTimer()
        timer.setSingleShot(True)
        timer.setInterval(self.interval_ms)
        timer.timeout.connect(lambda h=handle: self._fire(h))
        self._timers[handle] = (timer, callback)
        timer.start()
        return handle

    def cancel(self, handle: int) -> None:
        entry = self._timers.pop(handle, None)
        if entry is None:
            return
        timer, _ = entry
        timer.stop()
        timer.deleteLater()

    def _fire(self, handle: int) -> None:
        entry = self._timers.pop(handle, None)
        if entry is None:
            return
        timer, callback = entry
        timer.deleteLater()
        callback(self.now())

    def cancel_all(self) -> None:
        for handle in list(self._timers):
            self.cancel(handle)

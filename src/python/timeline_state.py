"""
TimelineState: the single source of truth for the timeline viewport.

Holds scroll offset, live scale, viewport width, the derived center year,
a one-shot pending navigation request and an optional active interval.
Every setter recomputes the derived center year in the same step, so a
reader never sees a center year that disagrees with scroll and scale.
"""

import logging
import threading
from typing import Any, Protocol, runtime_checkable

from custom_types import ActiveInterval, NavRequest, ViewportSnapshot
from error_handler import is_finite_number
from year_coordinates import (
    center_year_for,
    clamp_scale,
    clamp_year,
    total_width,
    year_to_pixel,
)

logger = logging.getLogger(__name__)


@runtime_checkable
class TimelineStateObserver(Protocol):
    """Anything that wants to hear about state mutations.

    Operations:
        "view": scroll offset and/or scale changed
        "viewport_width": the viewport was resized
        "pending_nav": a navigation request was set or consumed
        "active_interval": the highlighted interval changed
    """

    def on_timeline_changed(self, operation: str, **kwargs: Any) -> None:
        ...


class TimelineState:
    """Viewport state with atomic, clamping setters."""

    _scroll_left: float
    _viewport_width: float
    _px_per_year: float
    _center_year: int
    _pending_nav: NavRequest | None
    _active_interval: ActiveInterval | None
    _observers: list[TimelineStateObserver]
    _lock: threading.RLock

    def __init__(self, px_per_year: float = 5.0, viewport_width: float = 0.0,
                 scroll_left: float = 0.0) -> None:
        self._px_per_year = clamp_scale(float(px_per_year))
        self._viewport_width = max(0.0, float(viewport_width))
        self._scroll_left = self._clamp_scroll(float(scroll_left), self._px_per_year)
        self._center_year = self._derive_center()
        self._pending_nav = None
        self._active_interval = None
        self._observers = []
        self._lock = threading.RLock()

    @classmethod
    def centered_on(cls, year: int, px_per_year: float, viewport_width: float = 0.0) -> "TimelineState":
        """Create a state with `year` in the middle of the viewport."""
        state = cls(px_per_year=px_per_year, viewport_width=viewport_width)
        scroll = year_to_pixel(clamp_year(year) + 0.5, state.px_per_year) - state.viewport_width / 2
        state._scroll_left = state._clamp_scroll(scroll, state.px_per_year)
        state._center_year = state._derive_center()
        return state

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def scroll_left(self) -> float:
        return self._scroll_left

    @property
    def viewport_width(self) -> float:
        return self._viewport_width

    @property
    def px_per_year(self) -> float:
        return self._px_per_year

    @property
    def center_year(self) -> int:
        """Year under the viewport center (derived, never set directly)."""
        return self._center_year

    @property
    def pending_nav(self) -> NavRequest | None:
        return self._pending_nav

    @property
    def active_interval(self) -> ActiveInterval | None:
        return self._active_interval

    @property
    def max_scroll_left(self) -> float:
        return self._max_scroll(self._px_per_year)

    def snapshot(self) -> ViewportSnapshot:
        """Consistent read of scroll, width, scale and center year."""
        with self._lock:
            return ViewportSnapshot(
                scroll_left=self._scroll_left,
                viewport_width=self._viewport_width,
                px_per_year=self._px_per_year,
                center_year=self._center_year,
            )

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def add_observer(self, observer: TimelineStateObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def remove_observer(self, observer: TimelineStateObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def _notify_observers(self, operation: str, **kwargs: Any) -> None:
        for observer in list(self._observers):
            observer.on_timeline_changed(operation, **kwargs)

    # ------------------------------------------------------------------
    # Viewport writes
    # ------------------------------------------------------------------

    def _max_scroll(self, px_per_year: float) -> float:
        return max(0.0, total_width(px_per_year) - self._viewport_width)

    def _clamp_scroll(self, scroll_left: float, px_per_year: float) -> float:
        return min(max(scroll_left, 0.0), self._max_scroll(px_per_year))

    def _derive_center(self) -> int:
        return center_year_for(self._scroll_left, self._viewport_width, self._px_per_year)

    def set_view(self, scroll_left: float, px_per_year: float) -> bool:
        """Set scroll and scale together; the only write path for gestures.

        Returns:
            bool: False when the input was not finite and was ignored
        """
        if not is_finite_number(scroll_left, px_per_year):
            logger.debug("Ignoring non-finite view (%r, %r)", scroll_left, px_per_year)
            return False
        with self._lock:
            old = (self._scroll_left, self._px_per_year)
            self._px_per_year = clamp_scale(float(px_per_year))
            self._scroll_left = self._clamp_scroll(float(scroll_left), self._px_per_year)
            self._center_year = self._derive_center()
            changed = old != (self._scroll_left, self._px_per_year)
        if changed:
            self._notify_observers("view", scroll_left=self._scroll_left,
                         px_per_year=self._px_per_year, center_year=self._center_year)
        return True

    def set_scroll_left(self, scroll_left: float) -> bool:
        """Update scroll position (native pan), recomputing the center year."""
        return self.set_view(scroll_left, self._px_per_year)

    def set_px_per_year(self, px_per_year: float) -> bool:
        """Zoom to a new scale, keeping the current center year pinned."""
        if not is_finite_number(px_per_year):
            logger.debug("Ignoring non-finite scale %r", px_per_year)
            return False
        new_px = clamp_scale(float(px_per_year))
        scroll = year_to_pixel(self._center_year + 0.5, new_px) - self._viewport_width / 2
        return self.set_view(scroll, new_px)

    def set_viewport_width(self, width: float) -> bool:
        """Update viewport width; negative widths clamp to zero."""
        if not is_finite_number(width):
            logger.debug("Ignoring non-finite viewport width %r", width)
            return False
        with self._lock:
            old = self._viewport_width
            self._viewport_width = max(0.0, float(width))
            self._scroll_left = self._clamp_scroll(self._scroll_left, self._px_per_year)
            self._center_year = self._derive_center()
        if old != self._viewport_width:
            self._notify_observers("viewport_width", viewport_width=self._viewport_width,
                         center_year=self._center_year)
        return True

    # ------------------------------------------------------------------
    # Navigation request
    # ------------------------------------------------------------------

    def set_pending_nav(self, year: float, zoom: float) -> bool:
        """Request an animated jump; consumed once by the zoom engine."""
        if not is_finite_number(year, zoom):
            logger.debug("Ignoring non-finite navigation request (%r, %r)", year, zoom)
            return False
        with self._lock:
            self._pending_nav = NavRequest(year=int(clamp_year(int(year))), zoom=clamp_scale(float(zoom)))
        self._notify_observers("pending_nav", request=self._pending_nav)
        return True

    def take_pending_nav(self) -> NavRequest | None:
        """Return and clear the pending navigation request."""
        with self._lock:
            request, self._pending_nav = self._pending_nav, None
        if request is not None:
            self._notify_observers("pending_nav", request=None)
        return request

    # ------------------------------------------------------------------
    # Active interval
    # ------------------------------------------------------------------

    def set_active_interval(self, start: float, end: float) -> bool:
        """Highlight [start, end]; ends are clamped to the axis and ordered."""
        if not is_finite_number(start, end):
            logger.debug("Ignoring non-finite interval (%r, %r)", start, end)
            return False
        lo, hi = sorted((int(clamp_year(int(start))), int(clamp_year(int(end)))))
        interval = ActiveInterval(start=lo, end=hi)
        with self._lock:
            changed = interval != self._active_interval
            self._active_interval = interval
        if changed:
            self._notify_observers("active_interval", interval=interval)
        return True

    def clear_active_interval(self) -> None:
        with self._lock:
            changed = self._active_interval is not None
            self._active_interval = None
        if changed:
            self._notify_observers("active_interval", interval=None)

    def __repr__(self) -> str:
        return (
            f"TimelineState(scroll_left={self._scroll_left:.1f}, "
            f"px_per_year={self._px_per_year:.3f}, "
            f"viewport_width={self._viewport_width:.0f}, "
            f"center_year={self._center_year})"
        )

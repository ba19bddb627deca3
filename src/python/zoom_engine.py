"""
ZoomEngine: wheel momentum, pinch, pan and landing animations.

The engine is the only writer of scroll offset and scale while a gesture
is in flight. Exactly one of wheel momentum, pinch or landing owns the
viewport at a time; starting one cancels the frame loop of any other.

Scale changes run in natural-log space so equal wheel clicks give equal
ratios of zoom at any scale. While the scale moves, one year stays pinned
under one viewport pixel:

    scroll_left = max(0, year_to_pixel(pinned_year, scale) - anchor_px)
"""

import logging
import math
from dataclasses import dataclass, field

from config_manager import ConfigManager
from custom_types import ViewportSnapshot
from enums import EngineMode
from error_handler import is_finite_number
from frame_scheduler import FrameScheduler
from timeline_state import TimelineState
from year_coordinates import (
    MIN_PX_PER_YEAR,
    clamp_log_scale,
    clamp_scale,
    clamp_year,
    pixel_to_year_continuous,
    scale_from_log,
    year_to_pixel,
)

logger = logging.getLogger(__name__)


def ease_out_expo(t: float) -> float:
    """1 - 2^(-10t) on [0, 1), exactly 1 at t >= 1."""
    if t >= 1.0:
        return 1.0
    if t <= 0.0:
        return 0.0
    return 1.0 - 2.0 ** (-10.0 * t)


@dataclass
class ZoomSettings:
    """Tunables for the zoom engine.

    Attributes:
        lerp_factor: Fraction of the remaining log distance covered per frame
        log_epsilon: Log distance below which momentum snaps to the target
        wheel_zoom_speed: Log units of zoom per unit of wheel deltaY
        landing_offset_px: Landing starts this many px/yr below the target
        landing_duration_ms: Landing animation length
        presets: Keyboard key -> preset pxPerYear
    """
    lerp_factor: float = 0.1
    log_epsilon: float = 0.0002
    wheel_zoom_speed: float = 0.0015
    landing_offset_px: float = 50.0
    landing_duration_ms: float = 400.0
    presets: dict[str, float] = field(default_factory=lambda: {"1": 5.0, "2": 50.0, "3": 500.0})

    @classmethod
    def from_config(cls, cfg: ConfigManager) -> "ZoomSettings":
        zoom = cfg.get_zoom_config()
        defaults = cls()
        presets = zoom.get("presets", defaults.presets)
        return cls(
            lerp_factor=float(zoom.get("lerpFactor", defaults.lerp_factor)),
            log_epsilon=float(zoom.get("logEpsilon", defaults.log_epsilon)),
            wheel_zoom_speed=float(zoom.get("wheelZoomSpeed", defaults.wheel_zoom_speed)),
            landing_offset_px=float(zoom.get("landingOffsetPx", defaults.landing_offset_px)),
            landing_duration_ms=float(zoom.get("landingDurationMs", defaults.landing_duration_ms)),
            presets={str(k): float(v) for k, v in presets.items()},
        )


class ZoomEngine:
    """Owns the live scale and drives every gesture that changes it.

    Attributes:
        state: The injected TimelineState this engine writes to
        scheduler: Frame scheduler used for momentum and landing loops
        settings: ZoomSettings tunables
        pointer_x: Last known viewport-relative pointer x, or None
    """

    def __init__(self, state: TimelineState, scheduler: FrameScheduler,
                 settings: ZoomSettings | None = None) -> None:
        self.state = state
        self.scheduler = scheduler
        self.settings = settings or ZoomSettings()
        self.pointer_x: float | None = None

        self._mode = EngineMode.IDLE
        self._frame_handle: int | None = None
        self._disposed = False

        # Anchor pinning (wheel and pinch)
        self._pinned_year = 0.0
        self._anchor_px = 0.0

        # Wheel momentum, log space
        self._current_log = 0.0
        self._target_log = 0.0

        # Pinch
        self._pinch_start_log = 0.0
        self._pinch_start_distance = 0.0

        # Landing
        self._landing_year = 0
        self._landing_start_scale = 0.0
        self._landing_target_scale = 0.0
        self._landing_start_ms: float | None = None

        self.state.add_observer(self)
        # A request stored before this engine existed is still owed a landing
        self.consume_pending_nav()

    @property
    def mode(self) -> EngineMode:
        return self._mode

    @property
    def is_animating(self) -> bool:
        return self._frame_handle is not None

    @property
    def target_scale(self) -> float | None:
        """Scale the running momentum loop is heading for, if any."""
        if self._mode is EngineMode.WHEEL_MOMENTUM:
            return scale_from_log(self._target_log)
        if self._mode is EngineMode.LANDING:
            return self._landing_target_scale
        return None

    # ------------------------------------------------------------------
    # Ownership of the viewport
    # ------------------------------------------------------------------

    def cancel(self) -> None:
        """Stop whatever loop is running; safe to call when idle."""
        if self._frame_handle is not None:
            self.scheduler.cancel(self._frame_handle)
            self._frame_handle = None
        if self._mode is not EngineMode.IDLE:
            logger.debug("Cancelled %s", self._mode)
        self._mode = EngineMode.IDLE

    def dispose(self) -> None:
        """Cancel loops and detach from the state; no writes after this."""
        self.cancel()
        self.state.remove_observer(self)
        self._disposed = True

    def _take_over(self, mode: EngineMode) -> None:
        self.cancel()
        self._mode = mode
        logger.debug("Gesture started: %s", mode)

    def _schedule(self, callback) -> None:
        if self._frame_handle is None:
            self._frame_handle = self.scheduler.schedule(callback)

    # ------------------------------------------------------------------
    # Pointer / anchor
    # ------------------------------------------------------------------

    def set_pointer(self, x: float) -> bool:
        if not is_finite_number(x):
            return False
        self.pointer_x = float(x)
        return True

    def clear_pointer(self) -> None:
        self.pointer_x = None

    def _pin(self, snap: ViewportSnapshot, anchor_px: float) -> None:
        """Record the year currently under `anchor_px`."""
        self._anchor_px = anchor_px
        self._pinned_year = pixel_to_year_continuous(snap.scroll_left + anchor_px, snap.px_per_year)

    def _apply_pinned(self, scale: float) -> None:
        scroll = max(0.0, year_to_pixel(self._pinned_year, scale) - self._anchor_px)
        self.state.set_view(scroll, scale)

    def _default_anchor(self, snap: ViewportSnapshot) -> float:
        # No pointer seen yet: zoom around the viewport center
        if self.pointer_x is None:
            return snap.viewport_width / 2
        return self.pointer_x

    # ------------------------------------------------------------------
    # Wheel
    # ------------------------------------------------------------------

    def handle_wheel(self, delta_x: float, delta_y: float, modifiers: bool = False) -> bool:
        """Route a wheel event to pan or to momentum zoom.

        Horizontal-dominant deltas or a held modifier pan; everything else
        zooms around the pointer (or the viewport center).

        Returns:
            bool: True if the event changed or will change the view
        """
        if self._disposed or not is_finite_number(delta_x, delta_y):
            logger.debug("Ignoring wheel event (%r, %r)", delta_x, delta_y)
            return False

        if abs(delta_x) > abs(delta_y) or modifiers:
            delta = delta_x if abs(delta_x) > abs(delta_y) else delta_y
            return self.pan_by(delta)

        if delta_y == 0:
            return False

        snap = self.state.snapshot()
        if self._mode is not EngineMode.WHEEL_MOMENTUM:
            self._take_over(EngineMode.WHEEL_MOMENTUM)
            self._current_log = math.log(snap.px_per_year)
            self._target_log = self._current_log

        self._pin(snap, self._default_anchor(snap))
        self._target_log = clamp_log_scale(self._target_log - delta_y * self.settings.wheel_zoom_speed)
        self._schedule(self._momentum_frame)
        return True

    def _momentum_frame(self, timestamp: float) -> None:
        self._frame_handle = None
        if self._mode is not EngineMode.WHEEL_MOMENTUM:
            return

        self._current_log += (self._target_log - self._current_log) * self.settings.lerp_factor
        settled = abs(self._target_log - self._current_log) < self.settings.log_epsilon
        if settled:
            self._current_log = self._target_log

        self._apply_pinned(scale_from_log(self._current_log))

        if settled:
            self._mode = EngineMode.IDLE
            logger.debug("Wheel momentum settled at %.3f px/yr", self.state.px_per_year)
        else:
            self._schedule(self._momentum_frame)

    # ------------------------------------------------------------------
    # Pan
    # ------------------------------------------------------------------

    def pan_by(self, delta_px: float) -> bool:
        """Shift the viewport by `delta_px`, cancelling any running animation."""
        if self._disposed or not is_finite_number(delta_px):
            return False
        self.cancel()
        return self.state.set_scroll_left(self.state.scroll_left + delta_px)

    # ------------------------------------------------------------------
    # Pinch
    # ------------------------------------------------------------------

    def begin_pinch(self, distance: float, center_x: float) -> bool:
        """Start a two-pointer pinch anchored at the touch midpoint."""
        if self._disposed or not is_finite_number(distance, center_x) or distance <= 0:
            logger.debug("Ignoring pinch start (%r, %r)", distance, center_x)
            return False
        self._take_over(EngineMode.PINCH_ZOOM)
        snap = self.state.snapshot()
        self._pinch_start_log = math.log(snap.px_per_year)
        self._pinch_start_distance = float(distance)
        self._pin(snap, float(center_x))
        return True

    def update_pinch(self, distance: float, center_x: float | None = None) -> bool:
        """Scale by the ratio of current to initial pointer distance."""
        if self._mode is not EngineMode.PINCH_ZOOM:
            return False
        if not is_finite_number(distance) or distance <= 0:
            logger.debug("Ignoring degenerate pinch distance %r", distance)
            return False
        if center_x is not None and is_finite_number(center_x):
            self._anchor_px = float(center_x)

        new_log = clamp_log_scale(
            self._pinch_start_log + math.log(distance / self._pinch_start_distance)
        )
        self._apply_pinned(scale_from_log(new_log))
        return True

    def end_pinch(self) -> bool:
        if self._mode is not EngineMode.PINCH_ZOOM:
            return False
        self._mode = EngineMode.IDLE
        logger.debug("Pinch ended at %.3f px/yr", self.state.px_per_year)
        return True

    # ------------------------------------------------------------------
    # Landing
    # ------------------------------------------------------------------

    def land(self, year: float, zoom: float | None = None) -> bool:
        """Fly to `year` while easing the scale up to `zoom`.

        The landing starts `landing_offset_px` below the target scale and
        keeps `year` centered at every interpolated scale. When the start
        scale equals the target the jump is instant.
        """
        if zoom is None:
            zoom = self.state.px_per_year
        if self._disposed or not is_finite_number(year, zoom):
            logger.debug("Ignoring landing request (%r, %r)", year, zoom)
            return False

        self._take_over(EngineMode.LANDING)
        self._landing_year = int(clamp_year(int(year)))
        self._landing_target_scale = clamp_scale(float(zoom))
        self._landing_start_scale = max(MIN_PX_PER_YEAR,
                                        self._landing_target_scale - self.settings.landing_offset_px)
        self._landing_start_ms = None

        if (self._landing_start_scale == self._landing_target_scale
                or self.settings.landing_duration_ms <= 0):
            self._center_on(self._landing_year, self._landing_target_scale)
            self._mode = EngineMode.IDLE
            logger.debug("Instant jump to %d at %.3f px/yr", self._landing_year, self._landing_target_scale)
            return True

        logger.debug("Landing on %d: %.3f -> %.3f px/yr", self._landing_year,
                     self._landing_start_scale, self._landing_target_scale)
        self._center_on(self._landing_year, self._landing_start_scale)
        self._schedule(self._landing_frame)
        return True

    def landing_scale_at(self, t: float) -> float:
        """Interpolated landing scale at normalised time `t`; exact target at t >= 1."""
        if t >= 1.0:
            return self._landing_target_scale
        span = self._landing_target_scale - self._landing_start_scale
        return self._landing_start_scale + span * ease_out_expo(t)

    def _center_on(self, year: int, scale: float) -> None:
        # Center on the middle of the year block so flooring lands on `year`
        scroll = year_to_pixel(year + 0.5, scale) - self.state.viewport_width / 2
        self.state.set_view(scroll, scale)

    def _landing_frame(self, timestamp: float) -> None:
        self._frame_handle = None
        if self._mode is not EngineMode.LANDING:
            return

        if self._landing_start_ms is None:
            self._landing_start_ms = timestamp
        t = (timestamp - self._landing_start_ms) / self.settings.landing_duration_ms

        self._center_on(self._landing_year, self.landing_scale_at(t))

        if t >= 1.0:
            self._mode = EngineMode.IDLE
            logger.debug("Landed on %d at %.3f px/yr", self._landing_year, self._landing_target_scale)
        else:
            self._schedule(self._landing_frame)

    # ------------------------------------------------------------------
    # Discrete jumps
    # ------------------------------------------------------------------

    def consume_pending_nav(self) -> bool:
        """Launch a landing for the state's pending request and clear it."""
        if self._disposed:
            return False
        request = self.state.take_pending_nav()
        if request is None:
            return False
        return self.land(request.year, request.zoom)

    def zoom_to_preset(self, key: str) -> bool:
        """Land on a preset scale at the current center year."""
        scale = self.settings.presets.get(str(key))
        if scale is None:
            return False
        return self.land(self.state.center_year, scale)

    def on_timeline_changed(self, operation: str, **kwargs) -> None:
        if operation == "pending_nav" and kwargs.get("request") is not None:
            self.consume_pending_nav()

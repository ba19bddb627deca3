"""TimelineController: single dispatch point between input and the timeline engine.

This controller owns the viewport state, the zoom engine and the frame
scheduler, and exposes what a renderer needs:
- The visible year range for culling
- Pixel offsets for any year at the live scale
- Cluster lists for a marker set
- The live (scroll_left, px_per_year, center_year) position
"""

import logging
from typing import Any, Iterable

from PyQt6.QtCore import QObject, pyqtSignal
from pydantic import ValidationError

from commands import command_for_key
from config_manager import ConfigManager, config
from custom_types import ActiveInterval, Cluster, Column, Marker, VisibleRange, YearArray
from enums import YearNotation
from error_handler import ErrorHandler
from event_clusterer import EventClusterer, column_buckets
from frame_scheduler import FrameScheduler, QtFrameScheduler
from input_events import (
    InputEvent,
    KeyPress,
    NavigateTo,
    PanInput,
    PinchEnd,
    PinchMove,
    PinchStart,
    PointerLeave,
    PointerMove,
    Resize,
    WheelInput,
    parse_input_event,
)
from timeline_state import TimelineState
from virtualization import visible_markers, visible_range
from year_coordinates import format_year, hovered_year, tick_years, year_to_pixel
from zoom_engine import ZoomEngine, ZoomSettings

logger = logging.getLogger(__name__)


class TimelineController(QObject):
    """Routes input events to the engine and publishes view changes.

    Attributes:
        state: The TimelineState shared with the engine
        scheduler: Frame scheduler driving animation loops
        engine: ZoomEngine, the only writer during gestures
        clusterer: EventClusterer caching clusters per scale
        notation: Year notation used by format_year
        buffer: Virtualization buffer in years
    """

    # Signals
    view_changed = pyqtSignal(float, float, int)  # scroll_left, px_per_year, center_year
    visible_range_changed = pyqtSignal(int, int)  # start_year, end_year
    interval_changed = pyqtSignal(object)  # ActiveInterval or None

    def __init__(
        self,
        state: TimelineState | None = None,
        scheduler: FrameScheduler | None = None,
        settings: ZoomSettings | None = None,
        cfg: ConfigManager = config,
    ) -> None:
        """Initialize the TimelineController.

        Args:
            state: Existing state to drive; defaults to 1 AD at the configured initial scale
            scheduler: Frame scheduler; defaults to a QtFrameScheduler
            settings: Engine tunables; defaults to the configured ones
            cfg: Configuration source
        """
        super().__init__()
        if state is None:
            initial = cfg.get_zoom_config().get("initialPxPerYear", 5)
            state = TimelineState.centered_on(0, initial)
        self.state = state
        self.scheduler = scheduler or QtFrameScheduler(cfg.get_frame_interval_ms())
        self.engine = ZoomEngine(self.state, self.scheduler, settings or ZoomSettings.from_config(cfg))
        self.clusterer = EventClusterer(cfg.get_min_cluster_px())
        self.notation: YearNotation = cfg.get_notation()
        self.buffer: int = cfg.get_buffer()

        self._last_range: VisibleRange = self.visible_range()
        self.state.add_observer(self)

    # ------------------------------------------------------------------
    # Input dispatch
    # ------------------------------------------------------------------

    def handle_input(self, event: InputEvent) -> bool:
        """Dispatch one validated input event.

        Returns:
            bool: True if the event was handled
        """
        match event:
            case WheelInput():
                return self.engine.handle_wheel(event.delta_x, event.delta_y, event.modifiers)
            case PointerMove():
                return self.engine.set_pointer(event.x)
            case PointerLeave():
                self.engine.clear_pointer()
                return True
            case PinchStart():
                return self.engine.begin_pinch(event.distance, event.center_x)
            case PinchMove():
                return self.engine.update_pinch(event.distance, event.center_x)
            case PinchEnd():
                return self.engine.end_pinch()
            case NavigateTo():
                return self.jump_to(event.year, event.scale)
            case KeyPress():
                command = command_for_key(self, event.key)
                if command is None:
                    return False
                command.execute()
                return True
            case Resize():
                return self.state.set_viewport_width(event.width)
            case PanInput():
                return self.engine.pan_by(event.delta_x)
            case _:
                logger.warning(f"Unhandled input event: {event!r}")
                return False

    def handle_raw_input(self, data: dict[str, Any]) -> bool:
        """Validate and dispatch a raw event dictionary; malformed events are dropped."""
        try:
            event = parse_input_event(data)
        except ValidationError as e:
            ErrorHandler.log_exception(e, context="Rejected input event")
            return False
        return self.handle_input(event)

    # ------------------------------------------------------------------
    # Reads for renderers
    # ------------------------------------------------------------------

    def visible_range(self) -> VisibleRange:
        snap = self.state.snapshot()
        return visible_range(snap.scroll_left, snap.viewport_width, snap.px_per_year, self.buffer)

    def pixel_for_year(self, year: float) -> float:
        return year_to_pixel(year, self.state.px_per_year)

    def clusters_for(self, markers: Iterable[Marker]) -> list[Cluster]:
        return self.clusterer.cluster(list(markers), self.state.px_per_year)

    def columns_for(self, markers: Iterable[Marker]) -> list[Column]:
        """Visible markers bucketed into dot-width columns."""
        return column_buckets(self.visible_markers(markers), self.state.px_per_year)

    def visible_markers(self, markers: Iterable[Marker]) -> list[Marker]:
        return visible_markers(markers, self.visible_range())

    def position(self) -> tuple[float, float, int]:
        """Live (scroll_left, px_per_year, center_year)."""
        snap = self.state.snapshot()
        return snap.scroll_left, snap.px_per_year, snap.center_year

    def hovered_year(self) -> int | None:
        return hovered_year(self.state.scroll_left, self.engine.pointer_x, self.state.px_per_year)

    def tick_years(self) -> YearArray:
        """Tick-aligned years inside the visible range."""
        visible = self.visible_range()
        return tick_years(visible.start_year, visible.end_year, self.state.px_per_year)

    def format_year(self, year: int) -> str:
        return format_year(year, self.notation)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def set_notation(self, notation: YearNotation | str) -> None:
        self.notation = YearNotation(notation)
        logger.debug(f"Notation set to {self.notation}")

    def jump_to(self, year: float, zoom: float | None = None) -> bool:
        """Request a landing animation on `year`, keeping the scale if `zoom` is None."""
        if zoom is None:
            zoom = self.state.px_per_year
        return self.state.set_pending_nav(year, zoom)

    def set_active_interval(self, start: float, end: float) -> bool:
        return self.state.set_active_interval(start, end)

    def clear_active_interval(self) -> None:
        self.state.clear_active_interval()

    @property
    def active_interval(self) -> ActiveInterval | None:
        return self.state.active_interval

    # ------------------------------------------------------------------
    # State notifications
    # ------------------------------------------------------------------

    def on_timeline_changed(self, operation: str, **kwargs: Any) -> None:
        match operation:
            case "view" | "viewport_width":
                scroll_left, px_per_year, center_year = self.position()
                self.view_changed.emit(scroll_left, px_per_year, center_year)
                self._emit_range_if_changed()
            case "active_interval":
                self.interval_changed.emit(kwargs.get("interval"))
            case _:
                pass

    def _emit_range_if_changed(self) -> None:
        visible = self.visible_range()
        if visible != self._last_range:
            self._last_range = visible
            self.visible_range_changed.emit(visible.start_year, visible.end_year)

    def shutdown(self) -> None:
        """Stop animations and detach from the state."""
        self.engine.dispose()
        self.state.remove_observer(self)
        logger.debug("TimelineController shut down")

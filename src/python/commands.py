"""
Command pattern for discrete timeline actions.
"""
from abc import ABC, abstractmethod
from typing import Any, Optional, TYPE_CHECKING
from enums import YearNotation

if TYPE_CHECKING:
    from controllers.timeline_controller import TimelineController

class Command(ABC):
    """Base class for controller commands."""
    def __init__(self, controller: 'TimelineController') -> None:
        self.controller = controller

    @abstractmethod
    def execute(self) -> Any:
        """Execute the command against the controller."""
        pass

class JumpToYearCommand(Command):
    """Fly to a year (search result, deep link, sidebar button)."""
    def __init__(self, controller: 'TimelineController', year: float, zoom: Optional[float] = None) -> None:
        super().__init__(controller)
        self.year = year
        self.zoom = zoom

    def execute(self) -> bool:
        return self.controller.jump_to(self.year, self.zoom)

class ZoomPresetCommand(Command):
    """Land on one of the keyboard zoom presets at the current center year."""
    def __init__(self, controller: 'TimelineController', key: str) -> None:
        super().__init__(controller)
        self.key = key

    def execute(self) -> bool:
        return self.controller.engine.zoom_to_preset(self.key)

class PanCommand(Command):
    """Shift the viewport by a pixel amount."""
    def __init__(self, controller: 'TimelineController', delta_px: float) -> None:
        super().__init__(controller)
        self.delta_px = delta_px

    def execute(self) -> bool:
        return self.controller.engine.pan_by(self.delta_px)

class SetNotationCommand(Command):
    """Switch year labels between BC/AD, BCE/CE and BH/AH."""
    def __init__(self, controller: 'TimelineController', notation: str | YearNotation) -> None:
        super().__init__(controller)
        # Convert string to enum if necessary
        self.notation = YearNotation(notation) if isinstance(notation, str) else notation

    def execute(self) -> None:
        self.controller.set_notation(self.notation)

class SetIntervalCommand(Command):
    """Highlight an interval, or clear it when either end is None."""
    def __init__(self, controller: 'TimelineController', start: Optional[float], end: Optional[float]) -> None:
        super().__init__(controller)
        self.start = start
        self.end = end

    def execute(self) -> bool:
        if self.start is None or self.end is None:
            self.controller.clear_active_interval()
            return True
        return self.controller.set_active_interval(self.start, self.end)

def command_for_key(controller: 'TimelineController', key: str) -> Optional[Command]:
    """Map a key press to its command, or None for unbound keys."""
    if key in controller.engine.settings.presets:
        return ZoomPresetCommand(controller, key)
    match key:
        case "Escape":
            return SetIntervalCommand(controller, None, None)
        case _:
            return None

"""Input event models for the timeline controller.

Toolkit-neutral tagged union: every event carries a ``kind`` literal so
raw dictionaries (from a widget, a test, or a replay log) validate into
exactly one model.
"""
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter


class WheelInput(BaseModel):
    """Mouse wheel or trackpad scroll.

    Vertical-dominant deltas zoom; horizontal-dominant deltas or a held
    modifier pan.
    """
    kind: Literal["wheel"] = "wheel"
    delta_x: float = Field(0.0, description="Horizontal scroll delta")
    delta_y: float = Field(0.0, description="Vertical scroll delta")
    modifiers: bool = Field(False, description="Shift/Ctrl/Meta held")


class PointerMove(BaseModel):
    """Pointer moved inside the viewport."""
    kind: Literal["pointer_move"] = "pointer_move"
    x: float = Field(..., description="Viewport-relative x in pixels")
    y: float = Field(0.0, description="Viewport-relative y in pixels")


class PointerLeave(BaseModel):
    """Pointer left the viewport."""
    kind: Literal["pointer_leave"] = "pointer_leave"


class PinchStart(BaseModel):
    """Second pointer went down."""
    kind: Literal["pinch_start"] = "pinch_start"
    distance: float = Field(..., description="Distance between the two pointers")
    center_x: float = Field(..., description="Viewport-relative midpoint x")


class PinchMove(BaseModel):
    kind: Literal["pinch_move"] = "pinch_move"
    distance: float = Field(..., description="Distance between the two pointers")
    center_x: Optional[float] = Field(None, description="Viewport-relative midpoint x")


class PinchEnd(BaseModel):
    kind: Literal["pinch_end"] = "pinch_end"


class NavigateTo(BaseModel):
    """Discrete jump (search result, deep link, sidebar button)."""
    kind: Literal["navigate"] = "navigate"
    year: float = Field(..., description="Internal year to center on")
    scale: Optional[float] = Field(None, description="Target pxPerYear; keeps current if omitted")


class KeyPress(BaseModel):
    kind: Literal["key"] = "key"
    key: str = Field(..., min_length=1, description="Key text, e.g. '1'")


class Resize(BaseModel):
    kind: Literal["resize"] = "resize"
    width: float = Field(..., description="New viewport width in pixels")


class PanInput(BaseModel):
    """Native scroll (scrollbar drag, touch pan)."""
    kind: Literal["pan"] = "pan"
    delta_x: float = Field(..., description="Pixels to shift the viewport by")


InputEvent = Annotated[
    Union[
        WheelInput,
        PointerMove,
        PointerLeave,
        PinchStart,
        PinchMove,
        PinchEnd,
        NavigateTo,
        KeyPress,
        Resize,
        PanInput,
    ],
    Field(discriminator="kind"),
]

_input_event_adapter: TypeAdapter[InputEvent] = TypeAdapter(InputEvent)


def parse_input_event(data: dict[str, Any]) -> InputEvent:
    """Validate a raw event dictionary into its model.

    Raises:
        pydantic.ValidationError: unknown ``kind`` or malformed fields
    """
    return _input_event_adapter.validate_python(data)

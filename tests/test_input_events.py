"""
Tests for input event validation and the tagged union.
"""
import pytest
from pydantic import ValidationError

from input_events import (
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


@pytest.mark.parametrize("data,model", [
    ({"kind": "wheel", "delta_x": 1, "delta_y": -3}, WheelInput),
    ({"kind": "pointer_move", "x": 10}, PointerMove),
    ({"kind": "pointer_leave"}, PointerLeave),
    ({"kind": "pinch_start", "distance": 120, "center_x": 400}, PinchStart),
    ({"kind": "pinch_move", "distance": 150}, PinchMove),
    ({"kind": "pinch_end"}, PinchEnd),
    ({"kind": "navigate", "year": 1065, "scale": 50}, NavigateTo),
    ({"kind": "key", "key": "2"}, KeyPress),
    ({"kind": "resize", "width": 1280}, Resize),
    ({"kind": "pan", "delta_x": -40}, PanInput),
])
def test_parse_dispatches_on_kind(data, model):
    event = parse_input_event(data)
    assert isinstance(event, model)
    assert event.kind == data["kind"]


def test_wheel_defaults():
    event = parse_input_event({"kind": "wheel"})
    assert event.delta_x == 0.0
    assert event.delta_y == 0.0
    assert event.modifiers is False


def test_navigate_scale_optional():
    event = parse_input_event({"kind": "navigate", "year": -44})
    assert event.year == -44
    assert event.scale is None


def test_pinch_move_center_optional():
    assert parse_input_event({"kind": "pinch_move", "distance": 10}).center_x is None


def test_numeric_strings_coerced():
    event = parse_input_event({"kind": "resize", "width": "800"})
    assert event.width == 800.0


@pytest.mark.parametrize("data", [
    {"kind": "teleport", "year": 0},
    {"year": 0},
    {"kind": "wheel", "delta_y": "lots"},
    {"kind": "pointer_move"},
    {"kind": "pinch_start", "distance": 10},
    {"kind": "navigate"},
    {"kind": "key", "key": ""},
    {"kind": "resize", "width": None},
])
def test_malformed_events_rejected(data):
    with pytest.raises(ValidationError):
        parse_input_event(data)


def test_models_construct_directly():
    event = WheelInput(delta_y=-120, modifiers=True)
    assert event.kind == "wheel"
    assert event.modifiers

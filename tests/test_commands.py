"""
Tests for Command classes and key bindings.
"""
import pytest
from commands import (
    JumpToYearCommand,
    PanCommand,
    SetIntervalCommand,
    SetNotationCommand,
    ZoomPresetCommand,
    command_for_key,
)
from enums import YearNotation
from zoom_engine import ZoomSettings

class DummyController:
    def __init__(self):
        # Fake engine recording what the commands ask for
        class Engine:
            def __init__(self):
                self.settings = ZoomSettings()
                self.presets = []
                self.pans = []
            def zoom_to_preset(self, key):
                self.presets.append(key)
                return True
            def pan_by(self, delta):
                self.pans.append(delta)
                return True
        self.engine = Engine()
        self.jumps = []
        self.notation = None
        self.interval = "unset"
    def jump_to(self, year, zoom=None):
        self.jumps.append((year, zoom))
        return True
    def set_notation(self, notation):
        self.notation = notation
    def set_active_interval(self, start, end):
        self.interval = (start, end)
        return True
    def clear_active_interval(self):
        self.interval = None

@pytest.mark.parametrize("year,zoom", [
    (1065, 50),
    (-500, None),
])
def test_jump_to_year_command(year, zoom):
    ctrl = DummyController()
    assert JumpToYearCommand(ctrl, year, zoom).execute()
    assert ctrl.jumps == [(year, zoom)]

def test_zoom_preset_command():
    ctrl = DummyController()
    ZoomPresetCommand(ctrl, "2").execute()
    assert ctrl.engine.presets == ["2"]

@pytest.mark.parametrize("delta", [120.0, -35.5])
def test_pan_command(delta):
    ctrl = DummyController()
    PanCommand(ctrl, delta).execute()
    assert ctrl.engine.pans == [delta]

@pytest.mark.parametrize("notation", ["BCE/CE", YearNotation.BH_AH])
def test_set_notation_command(notation):
    ctrl = DummyController()
    cmd = SetNotationCommand(ctrl, notation)
    assert isinstance(cmd.notation, YearNotation)
    cmd.execute()
    assert ctrl.notation == YearNotation(notation)

def test_set_notation_command_rejects_unknown():
    with pytest.raises(ValueError):
        SetNotationCommand(DummyController(), "AUC")

def test_set_interval_command():
    ctrl = DummyController()
    SetIntervalCommand(ctrl, 10, -10).execute()
    assert ctrl.interval == (10, -10)
    SetIntervalCommand(ctrl, None, 5).execute()
    assert ctrl.interval is None

@pytest.mark.parametrize("key,cls", [
    ("1", ZoomPresetCommand),
    ("2", ZoomPresetCommand),
    ("3", ZoomPresetCommand),
    ("Escape", SetIntervalCommand),
])
def test_command_for_key(key, cls):
    assert isinstance(command_for_key(DummyController(), key), cls)

@pytest.mark.parametrize("key", ["4", "q", " "])
def test_unbound_keys(key):
    assert command_for_key(DummyController(), key) is None

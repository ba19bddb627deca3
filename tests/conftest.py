"""
conftest.py - Shared pytest fixtures for timeline engine tests

This module provides standardized test fixtures for use across all tests.
It includes fixtures for:
- Python path configuration
- Configuration management
- Deterministic frame scheduling
- Viewport state and zoom engine wiring
- Root logger isolation for logging setup
"""
import os
import sys
import logging
import json
import pathlib
import pytest

# Run Qt headless unless a platform is explicitly configured
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

# Add the src/python directory to the Python path
sys.path.insert(0, str(pathlib.Path(__file__).parent.parent / "src" / "python"))

# Imports from engine modules (now that path is configured)
from config_manager import ConfigManager
import logging_config
from frame_scheduler import ManualFrameScheduler
from timeline_state import TimelineState
from zoom_engine import ZoomEngine, ZoomSettings


# Configuration Fixtures
# ---------------------

@pytest.fixture
def test_config_data():
    """Create minimal test configuration data."""
    return {
        "zoom": {
            "initialPxPerYear": 10,
            "lerpFactor": 0.2,
            "logEpsilon": 0.001,
            "wheelZoomSpeed": 0.002,
            "landingOffsetPx": 40,
            "landingDurationMs": 200,
            "presets": {"1": 5, "2": 50, "3": 500}
        },
        "virtualization": {
            "buffer": 3
        },
        "clustering": {
            "minClusterPx": 100
        },
        "display": {
            "notation": "BCE/CE"
        },
        "scheduler": {
            "frameIntervalMs": 8
        },
        "logging": {
            "level": "DEBUG",
            "console": False
        }
    }


@pytest.fixture
def test_config_files(tmp_path, test_config_data):
    """Create a temporary config file."""
    config_file = tmp_path / "test_config.json"

    with open(config_file, 'w') as f:
        json.dump(test_config_data, f)

    return {
        "config_path": config_file,
        "tmp_path": tmp_path
    }


@pytest.fixture
def test_config_manager(test_config_files):
    """Create a ConfigManager instance with test configuration."""
    return ConfigManager(
        cfg_path=test_config_files["config_path"],
        exit_on_error=False
    )


# Engine Fixtures
# ---------------

@pytest.fixture
def manual_scheduler():
    """Frame scheduler stepped by hand, 16ms per frame starting at t=1000."""
    return ManualFrameScheduler(start_ms=1000.0, frame_ms=16.0)


@pytest.fixture
def timeline_state():
    """1000px viewport at 5 px/yr scrolled to the left edge of the axis."""
    return TimelineState(px_per_year=5.0, viewport_width=1000.0, scroll_left=0.0)


@pytest.fixture
def zoom_settings():
    """Default engine tunables."""
    return ZoomSettings()


@pytest.fixture
def engine(timeline_state, manual_scheduler, zoom_settings):
    """ZoomEngine wired to the shared state and manual scheduler."""
    zoom_engine = ZoomEngine(timeline_state, manual_scheduler, zoom_settings)
    yield zoom_engine
    zoom_engine.dispose()


# Logging Fixtures
# ----------------

@pytest.fixture
def isolated_logging(test_config_manager, tmp_path):
    """Send file logs under tmp_path and restore the root logger afterwards."""
    test_config_manager.set_setting("logging", "file", str(tmp_path / "logs" / "test.log"))
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    yield root
    for handler in logging_config._installed:
        handler.close()
    logging_config._installed.clear()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)

import json
import pathlib
import sys
import logging
from typing import Any

from custom_types import ZoomConfig
from enums import YearNotation
from timeline_config import CONFIG_FILE

logger = logging.getLogger(__name__)

class ConfigManager:
    """Manages engine configuration: zoom tunables, buffers, notation and logging"""

    zoom: dict[str, Any]
    virtualization: dict[str, Any]
    clustering: dict[str, Any]
    display: dict[str, Any]
    exit_on_error: bool
    _cfg: dict[str, Any]
    cfg_path: str | pathlib.Path

    REQUIRED_SECTIONS = ("zoom", "virtualization", "clustering", "display")

    def __init__(
        self,
        cfg_path: str | pathlib.Path | None = None,
        exit_on_error: bool = True
    ) -> None:
        """Initialize the ConfigManager with an optional custom path.

        Args:
            cfg_path: Path to the config.json file (defaults to standard location if None)
            exit_on_error: Whether to exit the program on configuration errors
        """
        self.zoom = {}
        self.virtualization = {}
        self.clustering = {}
        self.display = {}
        self.exit_on_error = exit_on_error
        self._cfg = {}

        self.cfg_path = cfg_path if cfg_path is not None else self._default_config_path()

        self.load_config()

    def _default_config_path(self) -> pathlib.Path:
        """Get the path of the config.json shipped in the timeline_config package."""
        return CONFIG_FILE

    def load_config(self) -> None:
        """Load master configuration from the configured path."""
        try:
            with open(self.cfg_path, 'r') as f:
                self._cfg = json.load(f)
        except Exception as e:
            error_msg = "Critical error loading configuration '%s': %s"
            logger.error(error_msg, self.cfg_path, e)
            if self.exit_on_error:
                sys.exit(1)
            else:
                raise RuntimeError(f"Critical error loading configuration '{self.cfg_path}': {e}")

        # Validate and assign sections
        try:
            for section in self.REQUIRED_SECTIONS:
                setattr(self, section, self._cfg[section])
        except KeyError as e:
            error_msg = "Configuration missing key: %s"
            logger.error(error_msg, e)
            if self.exit_on_error:
                sys.exit(1)
            else:
                raise KeyError(f"Configuration missing key: {e}")

        logger.debug("Loaded configuration from %s", self.cfg_path)

    def get_setting(self, section: str, key: str, default: Any = None) -> Any:
        """Get a generic setting from the master config"""
        section_data = self._cfg.get(section, {})
        if not isinstance(section_data, dict):
            return default
        return section_data.get(key, default)

    def set_setting(self, section: str, key: str, value: Any) -> None:
        """Set a setting in memory (does not persist to file).

        Args:
            section: Configuration section (e.g., 'zoom', 'display')
            key: Setting key within the section
            value: Value to set
        """
        if section not in self._cfg:
            self._cfg[section] = {}
        self._cfg[section][key] = value

    def get_logging_setting(self, key: str, default: Any = None) -> Any:
        """Get a logging configuration setting"""
        return self.get_setting("logging", key, default)

    # ============================================================================
    # Typed Accessors
    # ============================================================================

    def get_zoom_config(self) -> ZoomConfig:
        """Get the zoom engine section.

        Returns:
            dict: Zoom configuration with keys:
                - initialPxPerYear: Scale used when a session starts
                - lerpFactor: Fraction of the remaining log-distance covered per frame
                - logEpsilon: Log-space distance at which momentum snaps to target
                - wheelZoomSpeed: Log units of zoom per unit of wheel deltaY
                - landingOffsetPx: How far below the target scale a landing starts
                - landingDurationMs: Landing animation length
                - presets: Keyboard key -> preset pxPerYear
        """
        return self._cfg.get("zoom", {})

    def get_notation(self, default: YearNotation = YearNotation.BC_AD) -> YearNotation:
        """Get the configured year notation, falling back on unknown values."""
        raw = self.get_setting("display", "notation", default)
        try:
            return YearNotation(raw)
        except ValueError:
            logger.warning("Unknown notation %r in configuration, using %s", raw, default)
            return default

    def get_buffer(self, default: int = 5) -> int:
        """Get the virtualization buffer in years."""
        return int(self.get_setting("virtualization", "buffer", default))

    def get_min_cluster_px(self, default: float = 150.0) -> float:
        """Get the minimum on-screen separation between cluster dots."""
        return float(self.get_setting("clustering", "minClusterPx", default))

    def get_frame_interval_ms(self, default: int = 16) -> int:
        """Get the frame interval used by the timer-driven scheduler."""
        return int(self.get_setting("scheduler", "frameIntervalMs", default))


# Create a singleton instance
config = ConfigManager()

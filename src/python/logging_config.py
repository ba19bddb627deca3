"""
Logging setup for the timeline engine.

Handlers are built from the 'logging' section of a ConfigManager:

    level        root level (DEBUG, INFO, ...)
    file         rotating log file, created with its parent directory
    maxBytes     rotation size
    backupCount  rotated files kept
    console      attach a stderr handler
    consoleLevel level of the stderr handler

Calling setup_logging again swaps out only the handlers it installed
itself. Handlers attached by a host application or by pytest are left alone.
"""

import logging
import logging.handlers
from pathlib import Path

from config_manager import ConfigManager, config

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LOG_FILE = "logs/yearline.log"

# Third-party loggers held at WARNING whatever the root level is
QUIET_LOGGERS = ("PyQt6",)

_installed: list[logging.Handler] = []


def _level(name, default: int) -> int:
    return logging.getLevelNamesMapping().get(str(name).upper(), default)


def _file_handler(cfg: ConfigManager, level: int, formatter: logging.Formatter) -> logging.Handler | None:
    path = Path(cfg.get_logging_setting("file", DEFAULT_LOG_FILE))
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.handlers.RotatingFileHandler(
            path,
            maxBytes=cfg.get_logging_setting("maxBytes", 10 * 1024 * 1024),
            backupCount=cfg.get_logging_setting("backupCount", 3),
            encoding="utf-8",
        )
    except OSError as e:
        # The engine runs fine without a log file
        logging.getLogger(__name__).warning("File logging disabled for %s: %s", path, e)
        return None
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(cfg: ConfigManager = config, debug: bool = False) -> list[logging.Handler]:
    """
    Configure the root logger from `cfg`.

    Args:
        cfg: Configuration source
        debug: Force DEBUG on the root logger and the console handler

    Returns:
        list[logging.Handler]: The handlers now installed
    """
    level = logging.DEBUG if debug else _level(cfg.get_logging_setting("level", "INFO"), logging.INFO)
    console_level = logging.DEBUG if debug else _level(
        cfg.get_logging_setting("consoleLevel", "WARNING"), logging.WARNING)

    root = logging.getLogger()
    for handler in _installed:
        root.removeHandler(handler)
        handler.close()
    _installed.clear()
    root.setLevel(level)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    if cfg.get_logging_setting("console", True):
        console = logging.StreamHandler()
        console.setLevel(console_level)
        console.setFormatter(formatter)
        _installed.append(console)

    file_handler = _file_handler(cfg, level, formatter)
    if file_handler is not None:
        _installed.append(file_handler)

    for handler in _installed:
        root.addHandler(handler)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        "Logging at %s to %s", logging.getLevelName(level),
        file_handler.baseFilename if file_handler is not None else "console only")
    return list(_installed)

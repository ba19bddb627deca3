"""Default configuration shipped with the engine."""
import pathlib

CONFIG_FILE = pathlib.Path(__file__).with_name("config.json")

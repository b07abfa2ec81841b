"""
Configuration for the Krill text editor.

Settings live in ~/krill/config/krill.conf as plain `key=value` lines:

    tab_stop=4
    quit_times=2
    message_timeout=5
    read_timeout=0.1
    log_file=krill.log

Missing files, unknown keys and bad values never stop the editor; they are
logged and the defaults are kept.
"""
import os
from dataclasses import dataclass, fields

from krill import logger

CONFIG_PATH = os.path.expanduser("~/krill/config/krill.conf")

@dataclass
class EditorConfig:
    tab_stop: int = 4
    quit_times: int = 2
    message_timeout: float = 5.0
    read_timeout: float = 0.1
    log_file: str = "krill.log"

# Lowest accepted value for the numeric settings
_MINIMUMS = {
    "tab_stop": 1,
    "quit_times": 0,
    "message_timeout": 0,
    "read_timeout": 0.01,
}

def _convert(name: str, kind, value: str):
    if kind is str:
        return value
    converted = kind(value)
    if converted < _MINIMUMS[name]:
        raise ValueError(f"must be at least {_MINIMUMS[name]}")
    return converted

def parse_config(text: str) -> EditorConfig:
    """Build an EditorConfig from the contents of a config file."""
    config = EditorConfig()
    types = {f.name: f.type for f in fields(EditorConfig)}
    # dataclass field types may be strings under postponed evaluation
    kinds = {"int": int, "float": float, "str": str}
    for lineno, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            logger.log(f"config line {lineno}: expected key=value, got '{line}'")
            continue
        key, value = (part.strip() for part in line.split("=", 1))
        if key not in types:
            logger.log(f"config line {lineno}: unknown setting '{key}'")
            continue
        kind = types[key]
        kind = kinds.get(kind, kind)
        try:
            setattr(config, key, _convert(key, kind, value))
        except ValueError as e:
            logger.log(f"config line {lineno}: bad value for {key}: {e}")
    return config

def load_config(path: str = CONFIG_PATH) -> EditorConfig:
    """
    Load settings from `path`. If the file is missing or unreadable,
    the defaults are returned.
    """
    if not os.path.isfile(path):
        return EditorConfig()
    try:
        with open(path, 'r', encoding='utf-8') as f:
            text = f.read()
    except OSError as e:
        logger.log(f"could not read config {path}: {e}")
        return EditorConfig()
    return parse_config(text)

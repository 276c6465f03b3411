from __future__ import annotations

import configparser
import sys
from dataclasses import dataclass
from pathlib import Path

from PySide6.QtCore import QStandardPaths


@dataclass(frozen=True)
class SerialConfig:
    """Serial link to the car's onboard controller."""

    port: str
    baudrate: int
    write_timeout: float


@dataclass(frozen=True)
class UiConfig:
    window_width: int = 256
    window_height: int = 256


@dataclass(frozen=True)
class AppConfig:
    """Everything read from config.ini."""

    serial: SerialConfig
    ui: UiConfig


# -------------------------------------------------------------------------
# Default values for all settings
# -------------------------------------------------------------------------

DEFAULT_SERIAL_PORT: str = "COM10" if sys.platform.startswith("win") else "/dev/ttyUSB0"
DEFAULT_BAUDRATE: int = 9600
DEFAULT_WRITE_TIMEOUT: float = 1.0  # seconds

DEFAULT_WINDOW_WIDTH: int = 256
DEFAULT_WINDOW_HEIGHT: int = 256


def config_path() -> Path:
    # e.g., C:\Users\<user>\AppData\Local\RC Car Controller on Windows
    config_dir = Path(QStandardPaths.writableLocation(QStandardPaths.AppConfigLocation))
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir / "config.ini"


def default_serial_config() -> SerialConfig:
    return SerialConfig(
        port=DEFAULT_SERIAL_PORT,
        baudrate=DEFAULT_BAUDRATE,
        write_timeout=DEFAULT_WRITE_TIMEOUT,
    )


def ensure_config_exists() -> None:
    """Create config.ini with all default values if it doesn't exist."""
    path = config_path()
    if path.exists():
        return

    parser = configparser.ConfigParser()
    parser["serial"] = {
        "port": DEFAULT_SERIAL_PORT,
        "baudrate": str(DEFAULT_BAUDRATE),
        "write_timeout": str(DEFAULT_WRITE_TIMEOUT),
    }
    parser["ui"] = {
        "window_width": str(DEFAULT_WINDOW_WIDTH),
        "window_height": str(DEFAULT_WINDOW_HEIGHT),
    }

    with path.open("w", encoding="utf-8") as f:
        parser.write(f)


def _read_parser() -> configparser.ConfigParser:
    parser = configparser.ConfigParser()
    path = config_path()
    if path.exists():
        parser.read(path, encoding="utf-8")
    return parser


def load_serial_config() -> SerialConfig:
    parser = _read_parser()
    if "serial" not in parser:
        return default_serial_config()
    section = parser["serial"]
    try:
        port = section.get("port", "").strip() or DEFAULT_SERIAL_PORT
        baudrate = int(section.get("baudrate", str(DEFAULT_BAUDRATE)))
        write_timeout = float(section.get("write_timeout", str(DEFAULT_WRITE_TIMEOUT)))
    except ValueError:
        return default_serial_config()
    if baudrate <= 0 or write_timeout <= 0:
        return default_serial_config()
    return SerialConfig(port=port, baudrate=baudrate, write_timeout=write_timeout)


def load_ui_config() -> UiConfig:
    parser = _read_parser()
    if "ui" not in parser:
        return UiConfig()
    section = parser["ui"]
    try:
        width = int(section.get("window_width", str(DEFAULT_WINDOW_WIDTH)))
        height = int(section.get("window_height", str(DEFAULT_WINDOW_HEIGHT)))
    except ValueError:
        return UiConfig()
    return UiConfig(window_width=max(64, width), window_height=max(64, height))


def load_app_config() -> AppConfig:
    """Load the full configuration, creating a default config if needed."""
    ensure_config_exists()
    return AppConfig(serial=load_serial_config(), ui=load_ui_config())

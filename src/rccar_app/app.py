import logging
import sys

from PySide6.QtWidgets import QApplication

from .config import UiConfig
from .controller import CommandTransport

APP_NAME = "RC Car Controller"
APP_VERSION = "0.1.0"

LOG_FORMAT = "%(levelname)s %(name)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def create_application(argv: list[str] | None = None) -> QApplication:
    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv if argv is None else argv)
    app.setApplicationName(APP_NAME)
    app.setApplicationVersion(APP_VERSION)
    return app


def create_main_window(
    transport: CommandTransport,
    *,
    port_name: str = "",
    ui: UiConfig | None = None,
) -> "MainWindow":
    from .ui.main_window import MainWindow  # Local import keeps Qt widgets out of module import time.

    ui = ui or UiConfig()
    return MainWindow(
        app_name=APP_NAME,
        version=APP_VERSION,
        transport=transport,
        port_name=port_name,
        width=ui.window_width,
        height=ui.window_height,
    )

"""Main window for the RC Car Controller application.

Design notes:
- The window only captures key events and hosts the arrow display.
- Key handling and command encoding live in `rccar_app.controller`.
- Transport failures are re-emitted as `fatal_error`; the runner in
  `rccar_app.main` decides how the process ends.
"""

from __future__ import annotations

import logging

from PySide6.QtCore import QEvent, Signal
from PySide6.QtWidgets import QMainWindow, QStatusBar

from ..controller import CommandTransport, ControllerDispatcher
from ..input.keymap import is_bound
from ..input.serial_backend import TransportError
from ..motion import Direction
from .arrow_view import ArrowView

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """Window showing the current heading and forwarding keys to the car."""

    fatal_error = Signal(str)

    def __init__(
        self,
        *,
        app_name: str,
        version: str,
        transport: CommandTransport,
        port_name: str = "",
        width: int = 256,
        height: int = 256,
    ) -> None:
        super().__init__()
        self._app_name = app_name
        self._version = version
        self._port_name = port_name
        self._failed = False
        self.setWindowTitle(f"{self._app_name} - v{self._version}")

        self._arrow_view = ArrowView()
        self.setCentralWidget(self._arrow_view)

        self._status_bar = QStatusBar()
        self.setStatusBar(self._status_bar)

        self._dispatcher = ControllerDispatcher(self._arrow_view, transport)

        self.resize(width, height)
        self._arrow_view.setFocus()
        self._update_status()

    @property
    def arrow_view(self) -> ArrowView:
        return self._arrow_view

    @property
    def dispatcher(self) -> ControllerDispatcher:
        return self._dispatcher

    @property
    def failed(self) -> bool:
        return self._failed

    # -------------------------------------------------------------------------
    # Qt event handlers
    # -------------------------------------------------------------------------

    def keyPressEvent(self, event) -> None:  # noqa: N802 (Qt naming)
        if event.isAutoRepeat() or not self._dispatch(event.key(), True):
            super().keyPressEvent(event)

    def keyReleaseEvent(self, event) -> None:  # noqa: N802 (Qt naming)
        if event.isAutoRepeat() or not self._dispatch(event.key(), False):
            super().keyReleaseEvent(event)

    def changeEvent(self, event) -> None:  # noqa: N802 (Qt naming)
        # Release events are lost once focus moves elsewhere.
        if event.type() == QEvent.ActivationChange and not self.isActiveWindow():
            self._run(self._dispatcher.release_all)
            self._refresh_status()
        super().changeEvent(event)

    def closeEvent(self, event) -> None:  # noqa: N802 (Qt naming)
        """Stop the motors before the window goes away."""
        self._run(self._dispatcher.shutdown)
        self._refresh_status()
        super().closeEvent(event)

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def _dispatch(self, key_code: int, pressed: bool) -> bool:
        """Forward a key to the dispatcher. Returns False for unbound keys."""
        if not is_bound(key_code):
            return False
        self._run(lambda: self._dispatcher.handle_key(key_code, pressed))
        self._refresh_status()
        return True

    def _run(self, action) -> None:
        if self._failed:
            return
        try:
            action()
        except TransportError as e:
            self._failed = True
            self._status_bar.showMessage(f"Transport failure: {e}")
            self.fatal_error.emit(str(e))

    def _refresh_status(self) -> None:
        # Keep the failure message visible once the link is gone.
        if not self._failed:
            self._update_status()

    def _update_status(self) -> None:
        command = self._dispatcher.encoder.last_command
        direction = self._dispatcher.direction
        heading = "stopped" if direction is Direction.STOPPED else direction.name
        port = self._port_name or "no port"
        self._status_bar.showMessage(f"{port} | {heading} | speed {command.speed} turn {command.turn}")

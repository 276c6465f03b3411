from __future__ import annotations

import os

import pytest

# Widget tests run without a display.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture
def qapp():
    """Create a QApplication for widget tests."""
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


class RecordingTransport:
    """Transport double that keeps every write, optionally failing."""

    def __init__(self, *, fail_with: Exception | None = None) -> None:
        self.writes: list[bytes] = []
        self.fail_with = fail_with

    def write(self, data: bytes) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.writes.append(data)


class RecordingDisplay:
    def __init__(self) -> None:
        self.directions = []

    def set_direction(self, direction) -> None:
        self.directions.append(direction)


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def display() -> RecordingDisplay:
    return RecordingDisplay()


@pytest.fixture
def failing_transport():
    """Factory for a transport whose every write raises `error`."""

    def make(error: Exception) -> RecordingTransport:
        return RecordingTransport(fail_with=error)

    return make

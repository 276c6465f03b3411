"""UI package for RC Car Controller.

Exports:
    MainWindow: Main application window.
    ArrowView: Direction indicator widget.
"""

from .arrow_view import ArrowView
from .main_window import MainWindow

__all__ = [
    "MainWindow",
    "ArrowView",
]

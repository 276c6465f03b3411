from __future__ import annotations

from collections.abc import Iterable
from typing import Optional

from PySide6.QtCore import Qt

from ..motion import KeyState, LogicalKey

# Arrow keys and WASD drive the car interchangeably.
KEY_BINDINGS: dict[int, LogicalKey] = {
    int(Qt.Key.Key_Up): LogicalKey.UP,
    int(Qt.Key.Key_W): LogicalKey.UP,
    int(Qt.Key.Key_Down): LogicalKey.DOWN,
    int(Qt.Key.Key_S): LogicalKey.DOWN,
    int(Qt.Key.Key_Left): LogicalKey.LEFT,
    int(Qt.Key.Key_A): LogicalKey.LEFT,
    int(Qt.Key.Key_Right): LogicalKey.RIGHT,
    int(Qt.Key.Key_D): LogicalKey.RIGHT,
}


def logical_key(key_code: int) -> Optional[LogicalKey]:
    """Return the control key bound to a Qt key code, or None if unbound."""
    return KEY_BINDINGS.get(int(key_code))


def is_bound(key_code: int) -> bool:
    return int(key_code) in KEY_BINDINGS


def apply_key_event(held: frozenset[int], key_code: int, pressed: bool) -> frozenset[int]:
    """Return the set of held physical keys after a press or release.

    Unbound keys leave the set untouched.
    """
    key_code = int(key_code)
    if key_code not in KEY_BINDINGS:
        return held
    if pressed:
        return held | {key_code}
    return held - {key_code}


def key_state_from_held(held: Iterable[int]) -> KeyState:
    """A control key counts as held while any of its bound keys is down."""
    return KeyState.from_keys(KEY_BINDINGS[k] for k in held if k in KEY_BINDINGS)

"""Dispatcher turning key events into display updates and serial commands.

The dispatcher owns the only copy of the held-key state. Each accepted key
event is one step: derive KeyState, resolve the heading, tell the display if
it changed, encode the motor command and write whatever axes changed to the
transport in a single write. Transport failures are raised to the caller;
deciding to terminate is left to the top-level runner.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional, Protocol

from .input.keymap import apply_key_event, is_bound, key_state_from_held
from .motion import CommandUpdate, Direction, KeyState, MotorCommandEncoder, resolve_direction

logger = logging.getLogger(__name__)


class DirectionDisplay(Protocol):
    def set_direction(self, direction: Direction) -> None: ...


class CommandTransport(Protocol):
    def write(self, data: bytes) -> None: ...


@dataclass(frozen=True, slots=True)
class ControlUpdate:
    """Outcome of one dispatcher step."""

    keys: KeyState
    direction: Direction
    direction_changed: bool
    command: CommandUpdate


class ControllerDispatcher:
    def __init__(
        self,
        display: DirectionDisplay,
        transport: CommandTransport,
        encoder: Optional[MotorCommandEncoder] = None,
    ) -> None:
        self._display = display
        self._transport = transport
        self._encoder = encoder or MotorCommandEncoder()
        self._lock = threading.Lock()
        self._held: frozenset[int] = frozenset()
        self._keys = KeyState()
        self._direction = Direction.STOPPED

    @property
    def keys(self) -> KeyState:
        return self._keys

    @property
    def direction(self) -> Direction:
        return self._direction

    @property
    def encoder(self) -> MotorCommandEncoder:
        return self._encoder

    def handle_key(self, key_code: int, pressed: bool) -> Optional[ControlUpdate]:
        """Apply a press/release. Returns None for keys that are not bound.

        Raises:
            TransportError: the command could not be written.
        """
        if not is_bound(key_code):
            return None
        with self._lock:
            self._held = apply_key_event(self._held, key_code, pressed)
            return self._step()

    def release_all(self) -> ControlUpdate:
        """Treat every key as released, e.g. when the window loses focus."""
        with self._lock:
            self._held = frozenset()
            return self._step()

    def shutdown(self) -> None:
        """Bring both motors to zero if the last command left them running."""
        with self._lock:
            self._held = frozenset()
            self._keys = KeyState()
            self._set_direction(Direction.STOPPED)
            payload = self._encoder.stop_payload()
            if payload:
                logger.info("Stopping motors")
                self._transport.write(payload)

    def _step(self) -> ControlUpdate:
        keys = key_state_from_held(self._held)
        direction = resolve_direction(*keys.as_tuple())
        self._keys = keys
        direction_changed = self._set_direction(direction)

        update = self._encoder.encode(*keys.as_tuple())
        if update.changed:
            logger.debug("Command %s -> %r", update.command, update.payload)
            self._transport.write(update.payload)
        return ControlUpdate(
            keys=keys,
            direction=direction,
            direction_changed=direction_changed,
            command=update,
        )

    def _set_direction(self, direction: Direction) -> bool:
        """Record the heading and tell the display. Returns True if it changed."""
        if direction == self._direction:
            return False
        self._direction = direction
        self._display.set_direction(direction)
        return True

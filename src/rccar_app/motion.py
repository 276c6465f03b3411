"""Key state to motion command mapping.

Combines the four directional keys into one of nine headings and into the
two motor speeds sent to the car. Nothing here touches Qt or the serial
port, so it can be exercised directly from tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional

# Wire protocol
SPEED_CHANNEL = 1
TURN_CHANNEL = 3
FULL_SPEED = 255
COMMAND_WORD = "set-motor-speed"

_ALLOWED_SPEEDS = (-FULL_SPEED, 0, FULL_SPEED)


class LogicalKey(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


class Direction(IntEnum):
    """Heading shown on the display; 0 is forward, +45 degrees clockwise per step."""

    STOPPED = -1
    N = 0
    NE = 1
    E = 2
    SE = 3
    S = 4
    SW = 5
    W = 6
    NW = 7

    @property
    def angle_degrees(self) -> Optional[float]:
        if self is Direction.STOPPED:
            return None
        return self.value * 45.0


@dataclass(frozen=True, slots=True)
class KeyState:
    """Which control keys are currently held."""

    up: bool = False
    down: bool = False
    left: bool = False
    right: bool = False

    @classmethod
    def from_keys(cls, keys) -> "KeyState":
        keys = set(keys)
        return cls(
            up=LogicalKey.UP in keys,
            down=LogicalKey.DOWN in keys,
            left=LogicalKey.LEFT in keys,
            right=LogicalKey.RIGHT in keys,
        )

    def as_tuple(self) -> tuple[bool, bool, bool, bool]:
        return (self.up, self.down, self.left, self.right)


@dataclass(frozen=True, slots=True)
class MotorCommand:
    """Drive and steering speeds.

    - `speed` is positive forward, negative backward.
    - `turn` is positive right, negative left.

    Each axis is either fully on or off, so only -255, 0 and 255 are valid.
    """

    speed: int = 0
    turn: int = 0

    def __post_init__(self) -> None:
        for value in (self.speed, self.turn):
            if value not in _ALLOWED_SPEEDS:
                raise ValueError(f"MotorCommand values must be one of {_ALLOWED_SPEEDS}, got {value}")


@dataclass(frozen=True, slots=True)
class CommandUpdate:
    """Outcome of a single encode call."""

    command: MotorCommand
    lines: tuple[str, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.lines)

    @property
    def payload(self) -> bytes:
        return "".join(self.lines).encode("ascii")


def _pick(a: bool, b: bool, a_value: Direction, neutral: Direction, b_value: Direction) -> Direction:
    if a and not b:
        return a_value
    if b and not a:
        return b_value
    return neutral


def resolve_direction(up: bool, down: bool, left: bool, right: bool) -> Direction:
    """Map held keys to a heading.

    Opposing keys held together cancel out on that axis, the same as
    holding neither of them.
    """
    if up and not down:
        return _pick(left, right, Direction.NW, Direction.N, Direction.NE)
    if down and not up:
        return _pick(left, right, Direction.SW, Direction.S, Direction.SE)
    return _pick(left, right, Direction.W, Direction.STOPPED, Direction.E)


def motor_command(up: bool, down: bool, left: bool, right: bool) -> MotorCommand:
    """Map held keys to motor speeds. Forward wins over backward, left over right."""
    speed = FULL_SPEED if up else -FULL_SPEED if down else 0
    turn = -FULL_SPEED if left else FULL_SPEED if right else 0
    return MotorCommand(speed=speed, turn=turn)


def format_value(value: int) -> str:
    """Render an integer the way the car's command interpreter expects.

    The interpreter has no negative literals, so -255 is sent as `0 255 -`.
    """
    if value < 0:
        return f"0 {-value} -"
    return str(value)


def format_line(channel: int, value: int) -> str:
    return f"{channel} {format_value(value)} {COMMAND_WORD}\n"


class MotorCommandEncoder:
    """Encode key state into command lines, emitting only axes that changed."""

    def __init__(self) -> None:
        self._last = MotorCommand()

    @property
    def last_command(self) -> MotorCommand:
        return self._last

    def reset(self) -> None:
        self._last = MotorCommand()

    def encode(self, up: bool, down: bool, left: bool, right: bool) -> CommandUpdate:
        return self.encode_command(motor_command(up, down, left, right))

    def encode_command(self, command: MotorCommand) -> CommandUpdate:
        lines: list[str] = []
        if command.speed != self._last.speed:
            lines.append(format_line(SPEED_CHANNEL, command.speed))
        if command.turn != self._last.turn:
            lines.append(format_line(TURN_CHANNEL, command.turn))
        self._last = command
        return CommandUpdate(command=command, lines=tuple(lines))

    def stop_payload(self) -> bytes:
        """Lines that bring both axes back to zero from the last encoded state."""
        return self.encode_command(MotorCommand()).payload

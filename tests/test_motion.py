"""Tests for the motion module.

This module tests direction resolution, motor command mapping and the
command line encoder.
"""

from __future__ import annotations

import itertools

import pytest

from rccar_app.motion import (
    CommandUpdate,
    Direction,
    KeyState,
    LogicalKey,
    MotorCommand,
    MotorCommandEncoder,
    format_line,
    format_value,
    motor_command,
    resolve_direction,
)


# ============================================================================
# Direction Resolver Tests
# ============================================================================

# (up, down, left, right) -> expected heading, all 16 combinations
DIRECTION_TABLE = [
    ((False, False, False, False), Direction.STOPPED),
    ((False, False, False, True), Direction.E),
    ((False, False, True, False), Direction.W),
    ((False, False, True, True), Direction.STOPPED),
    ((False, True, False, False), Direction.S),
    ((False, True, False, True), Direction.SE),
    ((False, True, True, False), Direction.SW),
    ((False, True, True, True), Direction.S),
    ((True, False, False, False), Direction.N),
    ((True, False, False, True), Direction.NE),
    ((True, False, True, False), Direction.NW),
    ((True, False, True, True), Direction.N),
    ((True, True, False, False), Direction.STOPPED),
    ((True, True, False, True), Direction.E),
    ((True, True, True, False), Direction.W),
    ((True, True, True, True), Direction.STOPPED),
]


class TestResolveDirection:
    """Tests for resolve_direction."""

    @pytest.mark.parametrize("keys, expected", DIRECTION_TABLE)
    def test_direction_table(self, keys, expected) -> None:
        assert resolve_direction(*keys) is expected

    def test_table_covers_every_combination(self) -> None:
        assert sorted(k for k, _ in DIRECTION_TABLE) == sorted(itertools.product((False, True), repeat=4))

    def test_is_deterministic(self) -> None:
        """Repeated calls with the same input give the same heading."""
        for keys in itertools.product((False, True), repeat=4):
            assert resolve_direction(*keys) == resolve_direction(*keys)

    def test_up_and_down_fall_back_to_sideways(self) -> None:
        """Both vertical keys held behaves as if neither were held."""
        assert resolve_direction(True, True, True, False) == resolve_direction(False, False, True, False)


class TestDirection:
    """Tests for the Direction enum."""

    def test_integer_codes(self) -> None:
        assert int(Direction.STOPPED) == -1
        assert [int(d) for d in (Direction.N, Direction.NE, Direction.E, Direction.SE)] == [0, 1, 2, 3]
        assert [int(d) for d in (Direction.S, Direction.SW, Direction.W, Direction.NW)] == [4, 5, 6, 7]

    def test_nine_members(self) -> None:
        assert len(Direction) == 9

    def test_angle_degrees(self) -> None:
        assert Direction.STOPPED.angle_degrees is None
        assert Direction.N.angle_degrees == 0.0
        assert Direction.E.angle_degrees == 90.0
        assert Direction.NW.angle_degrees == 315.0


# ============================================================================
# Motor Command Tests
# ============================================================================


class TestMotorCommand:
    """Tests for motor_command and the MotorCommand dataclass."""

    def test_forward(self) -> None:
        assert motor_command(True, False, False, False) == MotorCommand(speed=255, turn=0)

    def test_backward_right(self) -> None:
        assert motor_command(False, True, False, True) == MotorCommand(speed=-255, turn=255)

    def test_forward_wins_over_backward(self) -> None:
        assert motor_command(True, True, False, False).speed == 255

    def test_left_wins_over_right(self) -> None:
        assert motor_command(False, False, True, True).turn == -255

    def test_nothing_held(self) -> None:
        assert motor_command(False, False, False, False) == MotorCommand()

    def test_magnitudes_are_zero_or_full(self) -> None:
        for keys in itertools.product((False, True), repeat=4):
            cmd = motor_command(*keys)
            assert abs(cmd.speed) in (0, 255)
            assert abs(cmd.turn) in (0, 255)

    @pytest.mark.parametrize("speed, turn", [(100, 0), (0, -1), (256, 0)])
    def test_rejects_partial_speeds(self, speed: int, turn: int) -> None:
        with pytest.raises(ValueError, match="must be one of"):
            MotorCommand(speed=speed, turn=turn)

    def test_is_immutable(self) -> None:
        cmd = MotorCommand(speed=255, turn=0)
        with pytest.raises(AttributeError):
            cmd.speed = 0  # type: ignore


class TestKeyState:
    """Tests for the KeyState dataclass."""

    def test_defaults_to_nothing_held(self) -> None:
        assert KeyState().as_tuple() == (False, False, False, False)

    def test_from_keys(self) -> None:
        state = KeyState.from_keys([LogicalKey.UP, LogicalKey.RIGHT])
        assert state == KeyState(up=True, right=True)


# ============================================================================
# Formatting Tests
# ============================================================================


class TestFormatting:
    """Tests for the wire format helpers."""

    def test_positive_value(self) -> None:
        assert format_value(255) == "255"

    def test_zero_value(self) -> None:
        assert format_value(0) == "0"

    def test_negative_value(self) -> None:
        assert format_value(-255) == "0 255 -"

    def test_line(self) -> None:
        assert format_line(1, 255) == "1 255 set-motor-speed\n"

    def test_negative_line(self) -> None:
        assert format_line(1, -255) == "1 0 255 - set-motor-speed\n"


# ============================================================================
# Encoder Tests
# ============================================================================


class TestMotorCommandEncoder:
    """Tests for MotorCommandEncoder change tracking."""

    def test_forward_emits_only_speed_line(self) -> None:
        update = MotorCommandEncoder().encode(True, False, False, False)
        assert update.command == MotorCommand(speed=255, turn=0)
        assert update.lines == ("1 255 set-motor-speed\n",)
        assert update.payload == b"1 255 set-motor-speed\n"

    def test_backward_right_emits_both_lines(self) -> None:
        update = MotorCommandEncoder().encode(False, True, False, True)
        assert update.command == MotorCommand(speed=-255, turn=255)
        assert update.lines == (
            "1 0 255 - set-motor-speed\n",
            "3 255 set-motor-speed\n",
        )

    def test_left_uses_negative_form(self) -> None:
        update = MotorCommandEncoder().encode(False, False, True, False)
        assert update.lines == ("3 0 255 - set-motor-speed\n",)

    def test_repeat_state_emits_nothing(self) -> None:
        encoder = MotorCommandEncoder()
        encoder.encode(True, False, True, False)
        update = encoder.encode(True, False, True, False)
        assert not update.changed
        assert update.payload == b""

    def test_first_stopped_call_emits_nothing(self) -> None:
        assert MotorCommandEncoder().encode(False, False, False, False).lines == ()

    def test_forward_then_right_then_stop(self) -> None:
        encoder = MotorCommandEncoder()
        first = encoder.encode(True, False, False, False)
        second = encoder.encode(True, False, False, True)
        third = encoder.encode(False, False, False, False)
        assert first.lines == ("1 255 set-motor-speed\n",)
        assert second.lines == ("3 255 set-motor-speed\n",)
        assert third.lines == ("1 0 set-motor-speed\n", "3 0 set-motor-speed\n")

    def test_last_command_tracks_encoded_state(self) -> None:
        encoder = MotorCommandEncoder()
        encoder.encode(False, True, True, False)
        assert encoder.last_command == MotorCommand(speed=-255, turn=-255)

    def test_reset_forgets_last_state(self) -> None:
        encoder = MotorCommandEncoder()
        encoder.encode(True, False, False, False)
        encoder.reset()
        assert encoder.encode(True, False, False, False).lines == ("1 255 set-motor-speed\n",)

    def test_stop_payload(self) -> None:
        encoder = MotorCommandEncoder()
        encoder.encode(False, True, False, False)
        assert encoder.stop_payload() == b"1 0 set-motor-speed\n"
        assert encoder.stop_payload() == b""

    def test_update_is_immutable(self) -> None:
        update = CommandUpdate(command=MotorCommand())
        with pytest.raises(AttributeError):
            update.lines = ("x",)  # type: ignore

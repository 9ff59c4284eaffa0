"""Tests for the domain models."""

from __future__ import annotations

import pytest
from pydantic import TypeAdapter, ValidationError

from jogserver.domain.models import (
    Command,
    ExitCommand,
    Location,
    LowerCommand,
    RaiseCommand,
    ServerState,
)


class TestCommands:
    def test_commands_are_frozen(self) -> None:
        cmd = RaiseCommand(magnitude=1.0)
        with pytest.raises(ValidationError):
            cmd.magnitude = 2.0  # type: ignore[misc]

    def test_negative_magnitude_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LowerCommand(magnitude=-1.0)

    def test_non_finite_magnitude_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RaiseCommand(magnitude=float("inf"))

    def test_discriminated_union(self) -> None:
        adapter = TypeAdapter(Command)
        assert isinstance(adapter.validate_python({"kind": "lower", "magnitude": 0.1}), LowerCommand)
        assert isinstance(adapter.validate_python({"kind": "exit"}), ExitCommand)

    def test_offsets_are_signed(self) -> None:
        assert RaiseCommand(magnitude=0.5).offset_mm == 0.5
        assert LowerCommand(magnitude=0.5).offset_mm == -0.5


class TestLocation:
    def test_add_offset_only_moves_z(self) -> None:
        loc = Location(x=1.0, y=2.0, z=3.0, rotation=90.0)
        moved = loc.add_offset(-0.5)
        assert moved == Location(x=1.0, y=2.0, z=2.5, rotation=90.0)
        assert loc.z == 3.0

    def test_str(self) -> None:
        assert str(Location(z=1.0)) == "(0.0000, 0.0000, 1.0000, 0.0000 mm)"


def test_server_state_values() -> None:
    assert [s.value for s in ServerState] == ["unbound", "probing", "listening", "stopped"]

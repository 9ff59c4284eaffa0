"""Tests for the MachineAdapter interface and factory."""

from __future__ import annotations

import pytest

from jogserver.config.settings import MachineConfig
from jogserver.machine import SimulatedMachine
from jogserver.machine.base import MachineAdapter, MachineAdapterError, create_machine


class TestMachineAdapter:
    def test_cannot_instantiate_abstract(self) -> None:
        with pytest.raises(TypeError):
            MachineAdapter()  # type: ignore[abstract]

    def test_error_carries_backend(self) -> None:
        err = MachineAdapterError("no nozzle", backend="host")
        assert str(err) == "no nozzle"
        assert err.backend == "host"


class TestCreateMachine:
    def test_simulated(self) -> None:
        machine = create_machine(MachineConfig(backend="simulated", start_z=2.0, max_z=5.0))
        assert isinstance(machine, SimulatedMachine)
        assert machine.location.z == 2.0

    def test_none(self) -> None:
        assert create_machine(MachineConfig(backend="none")) is None

    def test_unknown_attribute(self) -> None:
        import jogserver.machine

        with pytest.raises(AttributeError):
            jogserver.machine.DoesNotExist  # noqa: B018

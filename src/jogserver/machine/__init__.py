"""Machine adapter module for jogserver.

The control server only needs one capability from the host machine:
move the active tool by a signed offset. Backends implement that
capability; the server never reaches for a global machine object.

Public API:
    MachineAdapter -- Abstract base class
    MachineAdapterError -- Raised when a move cannot be carried out
    SimulatedMachine -- In-process backend that tracks a location
    create_machine -- Build the backend named in the configuration
"""

from jogserver.machine.base import MachineAdapter, MachineAdapterError, create_machine

__all__ = ["MachineAdapter", "MachineAdapterError", "SimulatedMachine", "create_machine"]


def __getattr__(name: str) -> type:
    """Lazy import for concrete implementations."""
    if name == "SimulatedMachine":
        from jogserver.machine.simulated import SimulatedMachine
        return SimulatedMachine
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

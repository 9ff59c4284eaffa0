"""Abstract base class for the machine adapter.

The host application owns the machine. It hands the control server an
adapter that can move the active tool; the server calls it and reports
the outcome to the browser. Swapping the simulated backend for a real
one changes nothing else.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from jogserver.config.settings import MachineConfig

logger = logging.getLogger(__name__)


class MachineAdapter(ABC):
    """Abstract interface for moving the machine's active tool.

    Example usage::

        machine = SimulatedMachine()
        await machine.move_active_tool(0.1)    # raise 0.1 mm
        await machine.move_active_tool(-1.0)   # lower 1 mm
    """

    backend: str = ""

    @abstractmethod
    async def move_active_tool(self, offset_mm: float) -> None:
        """Move the active tool along Z by a signed offset.

        Implementations may hand the move off to a host-owned execution
        context and return once it has been queued.

        Args:
            offset_mm: Signed distance in millimeters. Positive raises
                       the tool, negative lowers it. No bounds are
                       applied by the caller.

        Raises:
            MachineAdapterError: If the move is refused or fails.
        """
        ...


class MachineAdapterError(Exception):
    """Raised when the machine adapter cannot carry out a move."""

    def __init__(self, message: str, backend: str = "") -> None:
        super().__init__(message)
        self.backend = backend


def create_machine(config: MachineConfig) -> MachineAdapter | None:
    """Build the machine backend selected in the configuration.

    Returns None for the ``none`` backend; the server then drops jog
    commands with a logged message.
    """
    if config.backend == "none":
        logger.warning("No machine backend configured; jog commands will be dropped")
        return None

    from jogserver.machine.simulated import SimulatedMachine

    return SimulatedMachine(
        start_z=config.start_z,
        min_z=config.min_z,
        max_z=config.max_z,
    )

"""Simulated machine backend.

Keeps the active tool location in memory and applies jog offsets to it.
Used when jogserver runs outside a host application and in tests.
"""

from __future__ import annotations

import logging

from jogserver.domain.models import Location
from jogserver.machine.base import MachineAdapter, MachineAdapterError

logger = logging.getLogger(__name__)


class SimulatedMachine(MachineAdapter):
    """An in-process machine with a single tool on a Z axis.

    Optional soft limits reject moves that would leave ``[min_z, max_z]``,
    the way a real controller refuses to drive past its travel.
    """

    backend = "simulated"

    def __init__(
        self,
        start_z: float = 0.0,
        min_z: float | None = None,
        max_z: float | None = None,
    ) -> None:
        self._location = Location(z=start_z)
        self._min_z = min_z
        self._max_z = max_z
        self._moves = 0

    @property
    def location(self) -> Location:
        return self._location

    @property
    def move_count(self) -> int:
        return self._moves

    async def move_active_tool(self, offset_mm: float) -> None:
        """Apply the offset to the tool location, honoring soft limits."""
        current = self._location
        logger.info("Current location: %s", current)

        target = current.add_offset(offset_mm)
        if self._min_z is not None and target.z < self._min_z:
            raise MachineAdapterError(
                f"Move to Z={target.z:.4f} is below the soft limit {self._min_z:.4f}",
                backend=self.backend,
            )
        if self._max_z is not None and target.z > self._max_z:
            raise MachineAdapterError(
                f"Move to Z={target.z:.4f} is above the soft limit {self._max_z:.4f}",
                backend=self.backend,
            )

        logger.info("Moving to new location: %s", target)
        self._location = target
        self._moves += 1

"""Core domain models for the jogserver system.

These models represent the data flowing through the control surface:
jog commands parsed from the query string, the rejected outcome for bad
input, the lifecycle of the listening server, and the tool location the
machine adapter moves.
"""

from __future__ import annotations

import enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class RejectReason(str, enum.Enum):
    """Why a raw command string was not accepted."""

    EMPTY = "empty"
    MISSING_PARAMETER = "missing_parameter"
    INVALID_PARAMETER = "invalid_parameter"
    UNKNOWN_VERB = "unknown_verb"

    @property
    def is_malformed(self) -> bool:
        """True for malformed input, False for a well-formed unknown verb."""
        return self is not RejectReason.UNKNOWN_VERB


class ServerState(str, enum.Enum):
    """Lifecycle of the single control listener."""

    UNBOUND = "unbound"
    PROBING = "probing"  # Asking a previous instance on the port to exit
    LISTENING = "listening"
    STOPPED = "stopped"


# ---------------------------------------------------------------------------
# Command Models (discriminated union)
# ---------------------------------------------------------------------------


class RaiseCommand(BaseModel):
    """Move the active tool up by ``magnitude`` millimeters."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["raise"] = "raise"
    magnitude: float = Field(ge=0, allow_inf_nan=False, description="Distance in millimeters")

    @property
    def offset_mm(self) -> float:
        return self.magnitude


class LowerCommand(BaseModel):
    """Move the active tool down by ``magnitude`` millimeters."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["lower"] = "lower"
    magnitude: float = Field(ge=0, allow_inf_nan=False, description="Distance in millimeters")

    @property
    def offset_mm(self) -> float:
        return -self.magnitude


class ExitCommand(BaseModel):
    """Stop the listener that receives it."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["exit"] = "exit"


# Discriminated union for jog commands
Command = Annotated[
    Union[RaiseCommand, LowerCommand, ExitCommand],
    Field(discriminator="kind"),
]


class CommandRejected(BaseModel):
    """Outcome of parsing a string that is not a valid command.

    The ``message`` is meant for the person holding the phone, not for
    a program; there is no structured error code beyond ``reason``.
    """

    model_config = ConfigDict(frozen=True)

    raw: str = Field(description="The command string as received")
    reason: RejectReason
    message: str = Field(description="Human-readable explanation")


# ---------------------------------------------------------------------------
# Machine Models
# ---------------------------------------------------------------------------


class Location(BaseModel):
    """Tool location in millimeters (rotation in degrees)."""

    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    rotation: float = 0.0

    def add_offset(self, z: float) -> Location:
        """Return a new location shifted along Z."""
        return self.model_copy(update={"z": self.z + z})

    def __str__(self) -> str:
        return f"({self.x:.4f}, {self.y:.4f}, {self.z:.4f}, {self.rotation:.4f} mm)"

"""Domain models for jogserver.

Commands accepted over the wire, their rejected outcome, the server
lifecycle states, and the machine location value object. All models use
Pydantic v2.
"""

from jogserver.domain.models import (
    Command,
    CommandRejected,
    ExitCommand,
    Location,
    LowerCommand,
    RaiseCommand,
    RejectReason,
    ServerState,
)

__all__ = [
    "Command",
    "CommandRejected",
    "ExitCommand",
    "Location",
    "LowerCommand",
    "RaiseCommand",
    "RejectReason",
    "ServerState",
]

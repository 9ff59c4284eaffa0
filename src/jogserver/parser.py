"""Parse raw command strings from the control page.

The wire vocabulary is tiny::

    exit
    raise <millimeters>
    lower <millimeters>

Anything else becomes a CommandRejected carrying a message that is
echoed back to the browser. Parsing never raises.
"""

from __future__ import annotations

import logging
import math
import re

from jogserver.domain.models import (
    Command,
    CommandRejected,
    ExitCommand,
    LowerCommand,
    RaiseCommand,
    RejectReason,
)

logger = logging.getLogger(__name__)

EXIT_COMMAND = "exit"

# Plain decimal notation only: "1", "1.0", "0.01", ".5"
_DECIMAL = re.compile(r"^(?:\d+(?:\.\d*)?|\.\d+)$", re.ASCII)

_VERBS = {
    "raise": RaiseCommand,
    "lower": LowerCommand,
}


def parse_command(raw: str) -> Command | CommandRejected:
    """Turn a raw command string into a Command or a rejected outcome.

    ``exit`` is matched exactly; verbs are matched case-insensitively.
    No bounds are applied to the magnitude beyond it being a finite,
    non-negative number.
    """
    if raw == EXIT_COMMAND:
        return ExitCommand()

    parts = raw.split()
    if not parts:
        return _reject(raw, RejectReason.EMPTY, "Empty command")

    verb = parts[0].lower()
    model = _VERBS.get(verb)
    if model is None:
        return _reject(raw, RejectReason.UNKNOWN_VERB, f"Unknown command: {raw}")

    if len(parts) < 2:
        return _reject(
            raw, RejectReason.MISSING_PARAMETER, f"Missing distance for '{verb}'"
        )
    if len(parts) > 2:
        return _reject(
            raw,
            RejectReason.INVALID_PARAMETER,
            f"Expected '{verb} <millimeters>', got {len(parts) - 1} parameters",
        )

    parameter = parts[1]
    magnitude = _parse_magnitude(parameter)
    if magnitude is None:
        return _reject(
            raw,
            RejectReason.INVALID_PARAMETER,
            f"Invalid distance for '{verb}': {parameter}",
        )

    return model(magnitude=magnitude)


def _parse_magnitude(text: str) -> float | None:
    if not _DECIMAL.match(text):
        return None
    value = float(text)
    # Very long digit strings overflow to inf
    if not math.isfinite(value):
        return None
    return value


def _reject(raw: str, reason: RejectReason, message: str) -> CommandRejected:
    logger.debug("Rejected command %r: %s", raw, reason.value)
    return CommandRejected(raw=raw, reason=reason, message=message)

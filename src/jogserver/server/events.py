"""Lifecycle events emitted by the control server.

Presentation collaborators (a console hint, a host dialog, a QR code
window) subscribe to these events instead of being called from inside
the request handlers.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class ControlListener:
    """Receives control server events. Override the ones you need."""

    def on_started(self, url: str) -> None:
        """The server is listening and reachable at ``url``."""

    def on_first_request(self) -> None:
        """The first request of any kind has arrived."""

    def on_stopped(self) -> None:
        """The server has stopped listening."""


class ServerEvents:
    """Fans events out to listeners, isolating the server from their errors.

    ``started``, ``first request`` and ``stopped`` are each delivered at
    most once.
    """

    def __init__(self, listeners: list[ControlListener] | None = None) -> None:
        self._listeners = list(listeners or [])
        self._started = False
        self._seen_request = False
        self._stopped = False

    def subscribe(self, listener: ControlListener) -> None:
        self._listeners.append(listener)

    @property
    def request_seen(self) -> bool:
        return self._seen_request

    def started(self, url: str) -> None:
        if self._started:
            return
        self._started = True
        self._emit("on_started", url)

    def request_observed(self) -> None:
        if self._seen_request:
            return
        self._seen_request = True
        self._emit("on_first_request")

    def stopped(self) -> None:
        if self._stopped:
            return
        self._stopped = True
        self._emit("on_stopped")

    def _emit(self, name: str, *args: object) -> None:
        for listener in self._listeners:
            try:
                getattr(listener, name)(*args)
            except Exception:
                logger.exception("Listener %r failed handling %s", listener, name)


class ConnectionHint(ControlListener):
    """Tells the operator which address to open on the phone."""

    def __init__(self) -> None:
        self.url: str | None = None

    def on_started(self, url: str) -> None:
        self.url = url
        print(f"\nOpen {url} in your phone's browser to jog the nozzle.")
        print("Press EXIT on the page (or run 'jogserver stop') to shut down.\n")

    def on_first_request(self) -> None:
        logger.info("First request received from %s; connection hint dismissed", self.url)

    def on_stopped(self) -> None:
        logger.info("Control page at %s is no longer available", self.url)

"""Single-instance control server lifecycle.

Starting a server replaces whatever jogserver already holds the port::

    Unbound -> Probing -> Listening -> Stopped

While probing, the new instance sends ``exit`` to the port it wants.
If a previous instance answers, it shuts down on receipt, and the new
instance waits a grace interval before binding. The bind itself is
retried with exponential backoff in case the old listener is slow to
let go. If the port never frees up, startup fails loudly.
"""

from __future__ import annotations

import logging
import socket
import threading
import time

import uvicorn

from jogserver.config.settings import ServerConfig
from jogserver.domain.models import ServerState
from jogserver.machine.base import MachineAdapter
from jogserver.server.app import create_app
from jogserver.server.events import ControlListener, ServerEvents
from jogserver.server.network import public_url, send_exit

logger = logging.getLogger(__name__)

BIND_BACKLOG = 2048


class PortUnavailableError(Exception):
    """Raised when the control port cannot be bound."""

    def __init__(self, host: str, port: int, attempts: int, cause: OSError | None = None) -> None:
        super().__init__(
            f"Could not bind {host or '*'}:{port} after {attempts} attempt(s): {cause}"
        )
        self.host = host
        self.port = port
        self.attempts = attempts
        self.cause = cause


class ControlServer(ControlListener):
    """Owns the control port for the lifetime of one instance.

    Usage::

        server = ControlServer(ServerConfig(port=4445), machine=SimulatedMachine())
        server.run()   # blocks until an exit command arrives
    """

    def __init__(
        self,
        config: ServerConfig | None = None,
        machine: MachineAdapter | None = None,
        listeners: list[ControlListener] | None = None,
    ) -> None:
        self._config = config or ServerConfig()
        self._machine = machine
        # Own state tracking comes before presentation listeners
        self._events = ServerEvents([self, *(listeners or [])])
        self._state = ServerState.UNBOUND
        self._uvicorn: uvicorn.Server | None = None
        self._stop_requested = threading.Event()

    @property
    def state(self) -> ServerState:
        return self._state

    @property
    def config(self) -> ServerConfig:
        return self._config

    @property
    def events(self) -> ServerEvents:
        return self._events

    # -------------------------------------------------------------------
    # Replacement protocol
    # -------------------------------------------------------------------

    def probe_previous_instance(self) -> bool:
        """Send ``exit`` to the port; True if a previous instance answered."""
        cfg = self._config
        return send_exit(cfg.host, cfg.port, timeout=cfg.probe_timeout)

    def claim_port(self, previous_found: bool = False) -> socket.socket:
        """Bind the control port, retrying while a previous owner lets go.

        Raises:
            PortUnavailableError: If every bind attempt fails.
        """
        cfg = self._config
        if previous_found and cfg.grace_interval > 0:
            logger.info("Waiting %.2fs for the previous server to stop", cfg.grace_interval)
            time.sleep(cfg.grace_interval)

        delay = cfg.bind_backoff
        last_error: OSError | None = None
        for attempt in range(1, cfg.bind_attempts + 1):
            try:
                sock = _bind_socket(cfg.host, cfg.port)
            except OSError as e:
                last_error = e
                if attempt == cfg.bind_attempts:
                    break
                logger.debug(
                    "Bind attempt %d/%d on port %d failed (%s), retrying in %.2fs",
                    attempt, cfg.bind_attempts, cfg.port, e, delay,
                )
                time.sleep(delay)
                delay = min(delay * 2, cfg.bind_backoff_max)
                continue
            logger.info("Bound %s:%d on attempt %d", cfg.host, cfg.port, attempt)
            return sock

        raise PortUnavailableError(cfg.host, cfg.port, cfg.bind_attempts, last_error)

    # -------------------------------------------------------------------
    # Running
    # -------------------------------------------------------------------

    def run(self) -> None:
        """Replace any previous instance, then serve until told to exit.

        Raises:
            PortUnavailableError: If the port is still taken after the
                                  replacement handshake.
        """
        cfg = self._config
        self._state = ServerState.PROBING
        previous = self.probe_previous_instance()
        try:
            sock = self.claim_port(previous_found=previous)
        except PortUnavailableError:
            self._state = ServerState.STOPPED
            raise

        app = create_app(
            machine=self._machine,
            on_exit=self.stop,
            events=self._events,
            url=public_url(cfg.host, sock.getsockname()[1]),
        )
        self._uvicorn = uvicorn.Server(
            uvicorn.Config(app, log_level="warning", lifespan="on")
        )
        if self._stop_requested.is_set():
            self._uvicorn.should_exit = True

        try:
            self._uvicorn.run(sockets=[sock])
        finally:
            sock.close()
            self._state = ServerState.STOPPED
            self._events.stopped()
            logger.info("HTTP server stopped.")

    def stop(self) -> None:
        """Ask the server to stop. Safe to call from any thread, repeatedly."""
        self._stop_requested.set()
        if self._uvicorn is not None:
            self._uvicorn.should_exit = True

    # -------------------------------------------------------------------
    # ControlListener
    # -------------------------------------------------------------------

    def on_started(self, url: str) -> None:
        self._state = ServerState.LISTENING
        logger.info("HTTP server running at %s", url)


def _bind_socket(host: str, port: int) -> socket.socket:
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        # Allows rebinding over TIME_WAIT; a live listener still blocks the bind
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
        # Bound but not listening sockets can share a port under SO_REUSEADDR,
        # so the claim is only complete once listen() succeeds
        sock.listen(BIND_BACKLOG)
    except OSError:
        sock.close()
        raise
    sock.set_inheritable(True)
    return sock

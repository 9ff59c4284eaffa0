"""FastAPI application for the jog control surface.

Two routes do real work, everything else gets a plain-text refusal::

    GET /                        -> control page (HTML)
    GET /send?command=raise 0.1  -> "Command processed: raise 0.1"
    GET /send?command=exit       -> "Command processed: exit", then stop

Every response is 200. Rejected commands, a missing machine adapter and
failed moves are all reported in the plain-text body; nothing escapes a
handler as a server error.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, Response
from starlette.background import BackgroundTask

from jogserver import __version__
from jogserver.domain.models import CommandRejected, ExitCommand, LowerCommand, RaiseCommand
from jogserver.machine.base import MachineAdapter, MachineAdapterError
from jogserver.parser import parse_command
from jogserver.server.events import ServerEvents
from jogserver.server.page import CONTROL_PAGE

logger = logging.getLogger(__name__)

INVALID_REQUEST = "Invalid endpoint or no command provided."

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


# ---------------------------------------------------------------------------
# Route handlers
# ---------------------------------------------------------------------------


class RouteHandler(ABC):
    """A route's behavior, independent of how it is mounted.

    Calling the handler records the request with the server events
    before delegating to :meth:`handle`.
    """

    def __init__(self, events: ServerEvents) -> None:
        self._events = events

    async def __call__(self, request: Request) -> Response:
        self._events.request_observed()
        return await self.handle(request)

    @abstractmethod
    async def handle(self, request: Request) -> Response:
        ...


class ControlPageHandler(RouteHandler):
    """Serves the fixed control page."""

    async def handle(self, request: Request) -> Response:
        return HTMLResponse(CONTROL_PAGE)


class InvalidRequestHandler(RouteHandler):
    async def handle(self, request: Request) -> Response:
        logger.debug("Invalid request: %s %s", request.method, request.url.path)
        return PlainTextResponse(INVALID_REQUEST)


class CommandHandler(RouteHandler):
    """Parses ``command`` from the query string and executes it.

    After an exit command the handler stops accepting commands, and
    ``on_exit`` runs once the acknowledgement has been sent.
    """

    def __init__(
        self,
        events: ServerEvents,
        machine: MachineAdapter | None = None,
        on_exit: Callable[[], None] | None = None,
    ) -> None:
        super().__init__(events)
        self._machine = machine
        self._on_exit = on_exit
        self._accepting = True

    @property
    def accepting(self) -> bool:
        return self._accepting

    async def handle(self, request: Request) -> Response:
        raw = request.query_params.get("command")
        if raw is None:
            return PlainTextResponse(INVALID_REQUEST)

        if not self._accepting:
            logger.warning("Server stopped; ignoring command %r", raw)
            return PlainTextResponse(f"Server stopped; command ignored: {raw}")

        command = parse_command(raw)

        if isinstance(command, CommandRejected):
            logger.warning("Rejected command %r: %s", raw, command.message)
            return PlainTextResponse(f"Command rejected: {command.message}")

        if isinstance(command, ExitCommand):
            logger.info("Exit command received. Stopping server...")
            self._accepting = False
            background = BackgroundTask(self._on_exit) if self._on_exit else None
            return PlainTextResponse("Command processed: exit", background=background)

        return await self._move(raw, command)

    async def _move(self, raw: str, command: RaiseCommand | LowerCommand) -> Response:
        if self._machine is None:
            logger.warning("No machine adapter configured; dropping command %r", raw)
            return PlainTextResponse("Command dropped: no machine adapter configured")

        verb = "Raising" if isinstance(command, RaiseCommand) else "Lowering"
        logger.info("%s nozzle by %smm", verb, command.magnitude)
        try:
            await self._machine.move_active_tool(command.offset_mm)
        except MachineAdapterError as e:
            logger.error("Move failed (%s): %s", e.backend or "machine", e)
            return PlainTextResponse(f"Command failed: {e}")
        except Exception as e:
            logger.exception("Machine adapter raised while handling %r", raw)
            return PlainTextResponse(f"Command failed: {e}")

        return PlainTextResponse(f"Command processed: {raw}")


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------


def create_app(
    machine: MachineAdapter | None = None,
    on_exit: Callable[[], None] | None = None,
    events: ServerEvents | None = None,
    url: str | None = None,
) -> FastAPI:
    """Create the jog control application.

    Args:
        machine: Adapter that moves the active tool. None drops jog
                 commands with a logged message.
        on_exit: Called after the response to an exit command is sent.
        events: Event fan-out shared with the owning server.
        url: Address announced to listeners once the app has started.
    """
    events = events or ServerEvents()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Control server started (machine=%s)", machine.backend if machine else "none")
        if url is not None:
            events.started(url)
        yield
        logger.info("Control server stopped")

    app = FastAPI(
        title="jogserver",
        description="Phone-browser jog control for a machine axis",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    page = ControlPageHandler(events)
    commands = CommandHandler(events, machine=machine, on_exit=on_exit)
    invalid = InvalidRequestHandler(events)

    app.state.events = events
    app.state.commands = commands

    @app.api_route("/", methods=["GET", "HEAD"])
    async def control_page(request: Request) -> Response:
        return await page(request)

    @app.get("/send")
    async def send_command(request: Request) -> Response:
        return await commands(request)

    @app.api_route("/{path:path}", methods=ALL_METHODS)
    async def invalid_request(request: Request) -> Response:
        return await invalid(request)

    return app

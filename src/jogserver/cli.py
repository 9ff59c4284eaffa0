"""Command-line interface for jogserver.

Provides the main entry point for serving the control page and for
stopping an instance that is already running.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="jogserver",
        description="Phone-browser jog control for a machine axis",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: config/jogserver.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_parser = subparsers.add_parser(
        "serve", help="Serve the control page, replacing any running instance",
    )
    serve_parser.add_argument("--host", type=str, default=None, help="Address to bind")
    serve_parser.add_argument("--port", type=int, default=None, help="Port to bind")

    stop_parser = subparsers.add_parser("stop", help="Tell a running instance to exit")
    stop_parser.add_argument("--host", type=str, default=None, help="Address of the instance")
    stop_parser.add_argument("--port", type=int, default=None, help="Port of the instance")

    return parser.parse_args(argv)


def _serve(settings) -> int:
    """Run the control server until an exit command arrives."""
    from jogserver.machine.base import create_machine
    from jogserver.server.events import ConnectionHint
    from jogserver.server.lifecycle import ControlServer, PortUnavailableError

    server = ControlServer(
        config=settings.server,
        machine=create_machine(settings.machine),
        listeners=[ConnectionHint()],
    )
    try:
        server.run()
    except PortUnavailableError as e:
        logger.error("Error starting server: %s", e)
        print(f"jogserver: port {e.port} is in use by another program", file=sys.stderr)
        return 1
    return 0


def _stop(settings) -> int:
    """Send the exit command to a running instance."""
    from jogserver.server.network import send_exit

    cfg = settings.server
    if send_exit(cfg.host, cfg.port, timeout=cfg.probe_timeout):
        print(f"Exit command sent to port {cfg.port}")
        return 0
    print(f"No jogserver running on port {cfg.port}")
    return 1


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the jogserver CLI."""
    args = parse_args(argv)

    if args.command is None:
        parse_args(["--help"])
        return

    from jogserver.config.settings import LoggingConfig, load_settings
    from jogserver.utils.logging import setup_logging

    # Console output for messages logged while the configuration loads
    setup_logging(LoggingConfig(level="DEBUG" if args.verbose else "INFO"))
    settings = load_settings(args.config)

    if args.verbose:
        settings.logging.level = "DEBUG"
    if args.host is not None:
        settings.server.host = args.host
    if args.port is not None:
        settings.server.port = args.port

    setup_logging(settings.logging)

    if args.command == "serve":
        logger.info("Starting control server on port %d", settings.server.port)
        code = _serve(settings)
    else:
        code = _stop(settings)

    if code:
        sys.exit(code)


if __name__ == "__main__":
    main()

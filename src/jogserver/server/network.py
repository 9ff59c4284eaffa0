"""Network helpers: local address discovery and the exit probe."""

from __future__ import annotations

import ipaddress
import logging
import socket

import httpx

logger = logging.getLogger(__name__)

WILDCARD_HOSTS = {"", "0.0.0.0", "::"}

FALLBACK_ADDRESS = "127.0.0.1"


def best_local_address() -> str:
    """Return the site-local IPv4 address of the default route.

    Connecting a UDP socket sends nothing; it only makes the kernel pick
    the outgoing interface. Falls back to 127.0.0.1.
    """
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as probe:
            probe.connect(("10.255.255.255", 1))
            address = probe.getsockname()[0]
    except OSError as e:
        logger.debug("Could not determine local address: %s", e)
        return FALLBACK_ADDRESS

    ip = ipaddress.ip_address(address)
    if ip.is_loopback or ip.is_link_local or not ip.is_private:
        return FALLBACK_ADDRESS
    return address


def probe_host(host: str) -> str:
    """Address to reach a server bound on ``host`` from this machine."""
    return FALLBACK_ADDRESS if host in WILDCARD_HOSTS else host


def public_url(host: str, port: int) -> str:
    """URL a phone on the same network should open."""
    address = best_local_address() if host in WILDCARD_HOSTS else host
    return f"http://{address}:{port}"


def send_exit(host: str, port: int, timeout: float = 1.0) -> bool:
    """Ask a jogserver listening on ``host:port`` to exit.

    Returns True if something accepted the connection, meaning a previous
    instance was live. A refused or unreachable port is the normal case
    when no instance runs and returns False.
    """
    url = f"http://{probe_host(host)}:{port}/send"
    try:
        # trust_env=False keeps proxy settings away from a loopback probe
        resp = httpx.get(url, params={"command": "exit"}, timeout=timeout, trust_env=False)
    except (httpx.ConnectError, httpx.ConnectTimeout) as e:
        logger.info("No previous server found on port %d (%s)", port, e)
        return False
    except httpx.TimeoutException as e:
        # Connected but got no answer; someone holds the port
        logger.warning("Previous server on port %d did not answer: %s", port, e)
        return True
    except httpx.HTTPError as e:
        logger.warning("Exit probe to port %d failed: %s", port, e)
        return True

    logger.info("Exit command sent to the previous server (%s)", resp.text.strip())
    return True

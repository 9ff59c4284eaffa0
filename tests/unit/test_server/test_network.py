"""Tests for local address discovery and the exit probe."""

from __future__ import annotations

import socket
from unittest.mock import MagicMock, patch

import httpx

from jogserver.server import network
from jogserver.server.network import (
    FALLBACK_ADDRESS,
    best_local_address,
    probe_host,
    public_url,
    send_exit,
)


def _fake_socket(address: str) -> MagicMock:
    sock = MagicMock()
    sock.__enter__.return_value = sock
    sock.getsockname.return_value = (address, 54321)
    return sock


class TestBestLocalAddress:
    def test_site_local_address(self) -> None:
        with patch.object(network.socket, "socket", return_value=_fake_socket("192.168.1.42")):
            assert best_local_address() == "192.168.1.42"

    def test_loopback_falls_back(self) -> None:
        with patch.object(network.socket, "socket", return_value=_fake_socket("127.0.1.1")):
            assert best_local_address() == FALLBACK_ADDRESS

    def test_public_address_falls_back(self) -> None:
        with patch.object(network.socket, "socket", return_value=_fake_socket("8.8.4.4")):
            assert best_local_address() == FALLBACK_ADDRESS

    def test_no_route_falls_back(self) -> None:
        sock = _fake_socket("0.0.0.0")
        sock.connect.side_effect = OSError("Network is unreachable")
        with patch.object(network.socket, "socket", return_value=sock):
            assert best_local_address() == FALLBACK_ADDRESS


class TestUrls:
    def test_probe_host_for_wildcard(self) -> None:
        assert probe_host("0.0.0.0") == "127.0.0.1"
        assert probe_host("") == "127.0.0.1"
        assert probe_host("10.0.0.5") == "10.0.0.5"

    def test_public_url_explicit_host(self) -> None:
        assert public_url("10.0.0.5", 4445) == "http://10.0.0.5:4445"

    def test_public_url_wildcard(self) -> None:
        with patch.object(network, "best_local_address", return_value="192.168.0.9"):
            assert public_url("0.0.0.0", 4445) == "http://192.168.0.9:4445"


class TestSendExit:
    def test_no_listener_returns_false(self, free_port: int) -> None:
        assert send_exit("127.0.0.1", free_port, timeout=0.5) is False

    def test_answering_peer_returns_true(self) -> None:
        resp = httpx.Response(200, text="Command processed: exit")
        with patch.object(network.httpx, "get", return_value=resp) as get:
            assert send_exit("0.0.0.0", 4445, timeout=0.3) is True
        get.assert_called_once_with(
            "http://127.0.0.1:4445/send",
            params={"command": "exit"},
            timeout=0.3,
            trust_env=False,
        )

    def test_silent_peer_counts_as_live(self) -> None:
        with patch.object(network.httpx, "get", side_effect=httpx.ReadTimeout("timed out")):
            assert send_exit("127.0.0.1", 4445) is True

    def test_connect_timeout_counts_as_absent(self) -> None:
        with patch.object(network.httpx, "get", side_effect=httpx.ConnectTimeout("timed out")):
            assert send_exit("127.0.0.1", 4445) is False

    def test_silent_listener_is_detected(self) -> None:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            sock.bind(("127.0.0.1", 0))
            sock.listen(1)
            port = sock.getsockname()[1]
            assert send_exit("127.0.0.1", port, timeout=0.2) is True

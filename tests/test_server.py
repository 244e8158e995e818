"""Listener binding and the dashboard-api entry point."""

import errno
import socket

import pytest

from dashboard_api import server
from dashboard_api.server import BindError, InsufficientPrivilege, bind_socket


@pytest.fixture
def occupied_port():
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    sock.listen(1)
    yield sock.getsockname()[1]
    sock.close()


def test_bind_socket_listens_on_free_port():
    sock = bind_socket("127.0.0.1", 0)
    try:
        host, port = sock.getsockname()
        assert host == "127.0.0.1"
        assert port > 0
    finally:
        sock.close()


def test_bind_occupied_port_raises_bind_error(occupied_port):
    with pytest.raises(BindError) as exc_info:
        bind_socket("127.0.0.1", occupied_port)

    assert exc_info.value.port == occupied_port
    assert not isinstance(exc_info.value, InsufficientPrivilege)


def test_serve_raises_before_starting_uvicorn(occupied_port, monkeypatch):
    def fail_run(*args, **kwargs):
        raise AssertionError("uvicorn must not start")

    monkeypatch.setattr(server.uvicorn.Server, "run", fail_run)

    with pytest.raises(BindError):
        server.serve("127.0.0.1", occupied_port)


def test_permission_denied_is_insufficient_privilege(monkeypatch):
    def deny(self, address):
        raise PermissionError(errno.EACCES, "Permission denied")

    monkeypatch.setattr(socket.socket, "bind", deny)

    with pytest.raises(InsufficientPrivilege) as exc_info:
        bind_socket("0.0.0.0", 80)

    assert isinstance(exc_info.value, BindError)
    assert "Permission denied" in str(exc_info.value)


def test_main_exits_non_zero_on_bind_failure(occupied_port, monkeypatch):
    monkeypatch.setattr(server.config, "host", "127.0.0.1")
    monkeypatch.setattr(server.config, "port", occupied_port)

    with pytest.raises(SystemExit) as exc_info:
        server.main()

    assert exc_info.value.code == 1


def test_serve_hands_bound_socket_to_uvicorn(monkeypatch):
    captured = {}

    def fake_run(self, sockets=None):
        captured["sockets"] = sockets
        captured["keep_alive"] = self.config.timeout_keep_alive

    monkeypatch.setattr(server.uvicorn.Server, "run", fake_run)

    server.serve("127.0.0.1", 0)

    assert len(captured["sockets"]) == 1
    assert captured["keep_alive"] == server.config.keep_alive_timeout

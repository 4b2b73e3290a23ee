import socket

import pytest

from xyutools import errorlog
from xyutools.p2p.client import Client


@pytest.fixture(autouse=True)
def log_root(tmp_path):
    errorlog.init_errorlog("DEBUG", 3, tmp_path)
    yield tmp_path
    errorlog.init_errorlog("DEBUG", 3)


@pytest.fixture
def server():
    srv = socket.create_server(("127.0.0.1", 0))
    srv.settimeout(5)
    yield srv
    srv.close()


def _address(srv):
    host, port = srv.getsockname()[:2]
    return f"{host}:{port}"


def test_new_client_is_offline():
    client = Client("127.0.0.1:1", 10001, "key")
    assert client.is_login() is False
    assert client.send_message("x") is False
    assert client.read_packet() == b""


def test_handshake_send_and_read(server):
    client = Client(_address(server), 1, "key")
    assert client.handshake() is True
    assert client.is_login() is True
    conn, _ = server.accept()
    with conn:
        conn.settimeout(5)
        assert client.send_message("hello") is True
        assert conn.recv(100) == b"hello"
        conn.sendall(b"ping")
        assert client.read_packet() == b"ping"
    client.logout()
    assert client.is_login() is False


def test_read_after_logout_is_empty(server):
    client = Client(_address(server), 1, "key")
    assert client.handshake()
    client.logout()
    assert client.read_packet() == b""
    assert client.send_message("late") is False


def test_handshake_refused():
    srv = socket.create_server(("127.0.0.1", 0))
    address = _address(srv)
    srv.close()
    client = Client(address, 1, "key")
    assert client.handshake() is False
    assert client.is_login() is False


def test_handshake_bad_address():
    assert Client("not an address", 1, "key").handshake() is False
"""TCP client connection to the monitoring platform."""

from __future__ import annotations

import socket
import threading
from datetime import datetime

from .. import errorlog

CONNECT_TIMEOUT = 10.0
READ_TIMEOUT = 10.0
READ_SIZE = 4096


class Client:
    """A connection to ``host:port`` that tracks whether it is online."""

    def __init__(self, address: str, user_id: int, sec_key: str) -> None:
        self.address = address
        self.user_id = user_id
        self.sec_key = sec_key
        self._logined = False
        self._session: socket.socket | None = None
        self._lock = threading.Lock()

    def is_login(self) -> bool:
        """True while the connection is up."""
        return self._logined

    def logout(self) -> None:
        """Mark the client offline and close the connection."""
        self._logined = False
        with self._lock:
            if self._session is not None:
                errorlog.error_log_info(
                    "client",
                    "client offline",
                    f"client offline, time: {datetime.now():%Y-%m-%d %H:%M:%S}",
                )
                try:
                    self._session.close()
                except OSError:
                    pass
                self._session = None

    def read_packet(self) -> bytes:
        """Read up to 4096 bytes, waiting at most ten seconds; b'' when nothing came."""
        session = self._session
        if not self._logined or session is None:
            return b""
        try:
            session.settimeout(READ_TIMEOUT)
            data = session.recv(READ_SIZE)
        except OSError:
            return b""
        if data:
            errorlog.error_log_debug(
                "clientdata", "received", f"[{self._local_address(session)}] {data.decode('utf-8', 'replace')}"
            )
        return data

    def handshake(self) -> bool:
        """Connect to the address; True when the connection is established."""
        host, _, port_text = self.address.rpartition(":")
        try:
            port = int(port_text)
            infos = socket.getaddrinfo(host or None, port, socket.AF_INET, socket.SOCK_STREAM)
        except (ValueError, OSError):
            return False
        if not infos:
            return False
        try:
            conn = socket.create_connection((host or "localhost", port), timeout=CONNECT_TIMEOUT)
        except OSError:
            return False
        conn.setsockopt(socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1)
        conn.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        self._session = conn
        self._logined = True
        return True

    def send_message(self, text: str) -> bool:
        """Send text; on failure the client is marked offline and False returned."""
        session = self._session
        if not self._logined or session is None:
            return False
        try:
            session.sendall(text.encode("utf-8"))
        except OSError:
            errorlog.error_log_debug("clientdata", "send failed", f"[{self._local_address(session)}] {text}")
            self._logined = False
            return False
        errorlog.error_log_debug("clientdata", "sent", f"[{self._local_address(session)}] {text}")
        return True

    @staticmethod
    def _local_address(session: socket.socket) -> str:
        try:
            host, port = session.getsockname()[:2]
        except OSError:
            return "?"
        return f"{host}:{port}"
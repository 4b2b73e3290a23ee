"""A Modbus server (slave) answering over TCP and serial lines."""

from __future__ import annotations

import logging
import socket
import struct
import threading
from contextlib import suppress
from typing import Callable

import serial

from .exceptions import ExceptionCode
from .frame import Framer
from .framertu import parse_rtu_frame
from .frametcp import parse_tcp_frame
from .functions import (
    HandlerResult,
    read_coils,
    read_discrete_inputs,
    read_holding_registers,
    read_input_registers,
    write_holding_register,
    write_holding_registers,
    write_multiple_coils,
    write_single_coil,
)

logger = logging.getLogger(__name__)

MEMORY_SIZE = 65536
PACKET_SIZE = 512
_POLL_INTERVAL = 0.1

FunctionHandler = Callable[["Server", Framer], HandlerResult]


class Server:
    """Modbus slave with memory for discrete inputs, coils and registers.

    Requests are handled one at a time so that memory is never corrupted.
    """

    def __init__(self) -> None:
        self.debug = False
        self.discrete_inputs = bytearray(MEMORY_SIZE)
        self.coils = bytearray(MEMORY_SIZE)
        self.holding_registers = [0] * MEMORY_SIZE
        self.input_registers = [0] * MEMORY_SIZE
        self._functions: dict[int, FunctionHandler] = {
            1: read_coils,
            2: read_discrete_inputs,
            3: read_holding_registers,
            4: read_input_registers,
            5: write_single_coil,
            6: write_holding_register,
            15: write_multiple_coils,
            16: write_holding_registers,
        }
        self._handle_lock = threading.Lock()
        self._state_lock = threading.Lock()
        self._closing = threading.Event()
        self._listeners: list[socket.socket] = []
        self._connections: set[socket.socket] = set()
        self._ports: list = []
        self._port_threads: list[threading.Thread] = []

    def register_function_handler(self, func_code: int, function: FunctionHandler) -> None:
        """Replace the handler for one Modbus function code."""
        self._functions[func_code & 0xFF] = function

    def handle(self, frame: Framer) -> Framer:
        """Build the response frame for a request frame."""
        response = frame.copy()
        handler = self._functions.get(frame.function)
        if handler is None:
            exception = ExceptionCode.ILLEGAL_FUNCTION
        else:
            data, exception = handler(self, frame)
            response.set_data(data)
        if exception != ExceptionCode.SUCCESS:
            response.set_exception(exception)
        return response

    def _respond(self, frame: Framer, write: Callable[[bytes], object]) -> None:
        with self._handle_lock:
            response = self.handle(frame)
            write(response.to_bytes())

    # TCP

    def listen_tcp(self, address: str) -> tuple[str, int]:
        """Listen on ``"host:port"`` and return the address actually bound."""
        host, _, port = address.rpartition(":")
        listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            listener.bind((host, int(port)))
            listener.listen()
        except (OSError, ValueError):
            listener.close()
            logger.error("failed to listen on %s", address)
            raise
        listener.settimeout(_POLL_INTERVAL)
        with self._state_lock:
            self._listeners.append(listener)
        threading.Thread(target=self._accept, args=(listener,), daemon=True).start()
        bound_host, bound_port = listener.getsockname()[:2]
        return bound_host, bound_port

    def _accept(self, listener: socket.socket) -> None:
        while not self._closing.is_set():
            try:
                conn, _ = listener.accept()
            except socket.timeout:
                continue
            except OSError as exc:
                if not self._closing.is_set():
                    logger.error("unable to accept connections: %s", exc)
                return
            conn.settimeout(None)
            with self._state_lock:
                self._connections.add(conn)
            threading.Thread(target=self._serve_connection, args=(conn,), daemon=True).start()

    def _serve_connection(self, conn: socket.socket) -> None:
        try:
            with conn:
                while not self._closing.is_set():
                    try:
                        packet = conn.recv(PACKET_SIZE)
                    except OSError as exc:
                        if not self._closing.is_set():
                            logger.warning("read error %s", exc)
                        return
                    if not packet:
                        return
                    try:
                        frame = parse_tcp_frame(packet)
                    except ValueError as exc:
                        logger.warning("bad packet error %s", exc)
                        return
                    try:
                        self._respond(frame, conn.sendall)
                    except (struct.error, IndexError, OSError) as exc:
                        logger.warning("request failed %s", exc)
                        return
        finally:
            with self._state_lock:
                self._connections.discard(conn)

    # Serial

    def listen_rtu(self, port_name: str, baudrate: int = 115200) -> None:
        """Serve RTU frames on a serial device (or pyserial URL)."""
        port = serial.serial_for_url(
            port_name,
            baudrate=baudrate,
            timeout=_POLL_INTERVAL,
            inter_byte_timeout=0.01,
        )
        thread = threading.Thread(target=self._serve_serial, args=(port,), daemon=True)
        with self._state_lock:
            self._ports.append(port)
            self._port_threads.append(thread)
        thread.start()

    def _serve_serial(self, port) -> None:
        while not self._closing.is_set():
            try:
                packet = port.read(PACKET_SIZE)
            except (serial.SerialException, OSError) as exc:
                if not self._closing.is_set():
                    logger.warning("serial read error %s", exc)
                return
            if not packet:
                continue
            try:
                frame = parse_rtu_frame(packet)
            except ValueError as exc:
                logger.warning("bad serial frame error %s; keeping the RTU server running", exc)
                continue
            try:
                self._respond(frame, port.write)
            except (struct.error, IndexError) as exc:
                logger.warning("request failed %s", exc)
            except (serial.SerialException, OSError) as exc:
                logger.warning("serial write error %s", exc)
                return

    def close(self) -> None:
        """Stop listening on TCP ports and close the serial ports."""
        self._closing.set()
        with self._state_lock:
            listeners = list(self._listeners)
            connections = list(self._connections)
            threads = list(self._port_threads)
            ports = list(self._ports)
        for listener in listeners:
            with suppress(OSError):
                listener.close()
        for conn in connections:
            with suppress(OSError):
                conn.shutdown(socket.SHUT_RDWR)
            with suppress(OSError):
                conn.close()
        for thread in threads:
            thread.join(timeout=2.0)
        for port in ports:
            with suppress(Exception):
                port.close()

    def __enter__(self) -> "Server":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
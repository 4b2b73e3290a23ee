"""Control system services and inspect running processes."""

from __future__ import annotations

import ipaddress
import logging
import socket
import subprocess
from typing import Callable, Iterator, Sequence

logger = logging.getLogger(__name__)

Runner = Callable[[Sequence[str]], subprocess.CompletedProcess]


def _run(args: Sequence[str]) -> subprocess.CompletedProcess:
    return subprocess.run(list(args), check=True, capture_output=True, text=True)


class _ServiceControl:
    """Shared command execution with logging of each command line."""

    def __init__(self, runner: Runner | None = None) -> None:
        self._runner = runner or _run

    def _execute(self, args: Sequence[str]) -> subprocess.CompletedProcess:
        logger.info("%s", " ".join(args))
        try:
            return self._runner(list(args))
        except (subprocess.CalledProcessError, OSError) as exc:
            logger.error("Error %s running %s", exc, " ".join(args))
            raise


class LinuxServiceControl(_ServiceControl):
    """Starts and stops services with the ``service`` command.

    Each action is followed by ``service <name> stat``; the first line of
    its output is returned.
    """

    def _action(self, service_name: str, command: str) -> str:
        self._execute(["sh", "-c", command])
        status = self._execute(["sh", "-c", f"service {service_name} stat"])
        output = status.stdout or ""
        if isinstance(output, bytes):
            output = output.decode("utf-8", "replace")
        first, newline, _ = output.partition("\n")
        return first.strip() if newline else ""

    def start(self, service_name: str) -> str:
        line = self._action(service_name, f"service {service_name} start")
        if line:
            logger.info("%s process pid:%s", service_name, line)
        return line

    def stop(self, service_name: str) -> str:
        return self._action(service_name, f" service {service_name} stop")

    def restart(self, service_name: str) -> str:
        line = self._action(service_name, f" service {service_name} restart")
        if line:
            logger.info("%s process pid:%s", service_name, line)
        return line


class WindowsServiceControl(_ServiceControl):
    """Starts and stops services with ``net`` and restarts them with ``nssm``."""

    def start(self, service_name: str) -> None:
        self._execute(["sh", "-c", f"net start  {service_name}"])

    def stop(self, service_name: str) -> None:
        self._execute(["sh", "-c", f" net stop {service_name}"])

    def restart(self, service_name: str) -> None:
        self._execute(["cmd", "/C", f" nssm restart {service_name}"])


def parse_process_lines(output: str, process_name: str) -> list[str]:
    """Lines of ``ps`` output that name ``/<process_name>``, fields joined by ';'.

    Each field is followed by a ';'.
    """
    needle = "/" + process_name
    result = []
    for line in output.splitlines():
        if needle not in line:
            continue
        fields = [token for token in line.split(" ") if token and token not in ("\t", "\n")]
        result.append("".join(token + ";" for token in fields))
    return result


def get_process_info(process_name: str) -> list[str]:
    """PID, %CPU, %MEM, RSS and command line of processes with that name."""
    command = (
        f"ps -eo pid,%cpu,%mem,rss,command | grep {process_name}| grep -v grep"
    )
    try:
        completed = subprocess.run(
            ["/bin/sh", "-c", command], capture_output=True, text=True
        )
    except OSError:
        return []
    if completed.returncode != 0:
        return []
    return parse_process_lines(completed.stdout, process_name)


def _candidate_addresses() -> Iterator[str]:
    try:
        infos = socket.getaddrinfo(socket.gethostname(), None, socket.AF_INET)
    except OSError:
        infos = []
    for info in infos:
        yield info[4][0]
    try:
        probe = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    except OSError:
        return
    with probe:
        try:
            probe.connect(("10.255.255.255", 1))
            yield probe.getsockname()[0]
        except OSError:
            return


def net_info() -> str:
    """First IPv4 address of this host that is not a loopback address."""
    for address in _candidate_addresses():
        try:
            ip = ipaddress.IPv4Address(address)
        except ValueError:
            continue
        if not ip.is_loopback and not ip.is_unspecified:
            return str(ip)
    raise OSError("no find ip")
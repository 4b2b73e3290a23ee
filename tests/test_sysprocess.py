import socket
import subprocess
from unittest import mock

import pytest

from xyutools.sysprocess import (
    LinuxServiceControl,
    WindowsServiceControl,
    get_process_info,
    net_info,
    parse_process_lines,
)


class Recorder:
    def __init__(self, stdout="", fail_on=None):
        self.calls = []
        self.stdout = stdout
        self.fail_on = fail_on

    def __call__(self, args):
        self.calls.append(list(args))
        if self.fail_on is not None and self.fail_on in " ".join(args):
            raise subprocess.CalledProcessError(1, args)
        return subprocess.CompletedProcess(args, 0, stdout=self.stdout, stderr="")


def test_linux_start_runs_service_commands_and_returns_pid_line():
    recorder = Recorder(stdout="1234\nmore\n")
    control = LinuxServiceControl(runner=recorder)
    assert control.start("demo") == "1234"
    assert recorder.calls == [
        ["sh", "-c", "service demo start"],
        ["sh", "-c", "service demo stat"],
    ]


def test_linux_stop_and_restart_commands():
    recorder = Recorder(stdout="")
    control = LinuxServiceControl(runner=recorder)
    assert control.stop("demo") == ""
    assert control.restart("demo") == ""
    assert recorder.calls == [
        ["sh", "-c", " service demo stop"],
        ["sh", "-c", "service demo stat"],
        ["sh", "-c", " service demo restart"],
        ["sh", "-c", "service demo stat"],
    ]


def test_linux_status_without_newline_gives_empty_line():
    control = LinuxServiceControl(runner=Recorder(stdout="partial"))
    assert control.restart("demo") == ""


def test_linux_failure_stops_before_status():
    recorder = Recorder(fail_on="start")
    control = LinuxServiceControl(runner=recorder)
    with pytest.raises(subprocess.CalledProcessError):
        control.start("demo")
    assert len(recorder.calls) == 1


def test_windows_commands():
    recorder = Recorder()
    control = WindowsServiceControl(runner=recorder)
    control.start("svc")
    control.stop("svc")
    control.restart("svc")
    assert recorder.calls == [
        ["sh", "-c", "net start  svc"],
        ["sh", "-c", " net stop svc"],
        ["cmd", "/C", " nssm restart svc"],
    ]


def test_windows_failure_raises():
    control = WindowsServiceControl(runner=Recorder(fail_on="nssm"))
    with pytest.raises(subprocess.CalledProcessError):
        control.restart("svc")


def test_parse_process_lines_keeps_matching_paths():
    output = "  101  0.5  1.2  2048 /usr/bin/demo --flag\n 202 0.0 0.1 512 grepdemo\n"
    assert parse_process_lines(output, "demo") == ["101;0.5;1.2;2048;/usr/bin/demo;--flag;"]


def test_parse_process_lines_empty_output():
    assert parse_process_lines("", "demo") == []


def test_get_process_info_unknown_process():
    assert get_process_info("no_such_process_qzxw") == []


@mock.patch("socket.getaddrinfo")
def test_net_info_skips_loopback(getaddrinfo):
    getaddrinfo.return_value = [
        (socket.AF_INET, socket.SOCK_STREAM, 6, "", ("127.0.0.1", 0)),
        (socket.AF_INET, socket.SOCK_STREAM, 6, "", ("192.0.2.7", 0)),
    ]
    assert net_info() == "192.0.2.7"


@mock.patch("socket.socket", side_effect=OSError)
@mock.patch("socket.getaddrinfo")
def test_net_info_without_address_raises(getaddrinfo, _socket):
    getaddrinfo.return_value = [
        (socket.AF_INET, socket.SOCK_STREAM, 6, "", ("127.0.0.1", 0)),
    ]
    with pytest.raises(OSError, match="no find ip"):
        net_info()
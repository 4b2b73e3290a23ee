"""Small text, path and file helpers for the platform client."""

from __future__ import annotations

import os
import shutil
import sys
from contextlib import suppress


def byte_to_string(data: bytes) -> str:
    """Text up to the first zero byte."""
    head, _, _ = bytes(data).partition(b"\x00")
    return head.decode("utf-8", "replace")


def substr(text: str, start: int, end: int) -> str:
    """Characters ``start`` up to, not including, ``end``."""
    length = len(text)
    if start < 0 or start > length:
        raise ValueError("start is wrong")
    if end < 0 or end > length:
        raise ValueError("end is wrong")
    if start > end:
        raise ValueError("start is after end")
    return text[start:end]


def str_to_time(text: str) -> str:
    """Turn ``YYYYMMDDhhmmss...`` (16 bytes or more) into ``YYYY-MM-DD hh:mm:ss``."""
    if len(text.encode("utf-8")) < 16:
        raise ValueError("conversion failed")
    return f"{text[0:4]}-{text[4:6]}-{text[6:8]} {text[8:10]}:{text[10:12]}:{text[12:14]}"


def get_server_path(path: str) -> str:
    """Directory part of a file path, keeping the trailing separator."""
    index = max(path.rfind("/"), path.rfind("\\"))
    if index > 0:
        return path[: index + 1]
    raise ValueError("conversion failed")


def get_local_path() -> str:
    """Absolute path of the running program; FileNotFoundError if it cannot be found."""
    program = sys.argv[0] if sys.argv else ""
    if not program:
        raise FileNotFoundError("program path unknown")
    if "/" in program or os.sep in program:
        if not os.path.isfile(program):
            raise FileNotFoundError(program)
        found = program
    else:
        found = shutil.which(program)
        if found is None:
            raise FileNotFoundError(program)
    return os.path.abspath(found)


def is_exist_path(path: str) -> bool:
    """True when the path cannot be examined, that is when it is missing."""
    try:
        os.stat(path)
    except OSError:
        return True
    return False


def create_ini_dir(path: str = "config") -> None:
    """Create the configuration directory and make it writable for everyone."""
    os.makedirs(path, mode=0o777, exist_ok=True)
    with suppress(OSError):
        os.chmod(path, 0o777)


def create_file(file_path: str) -> None:
    """Create the file if missing, leaving existing content untouched."""
    fd = os.open(file_path, os.O_CREAT | os.O_RDWR | os.O_APPEND, 0o777)
    os.close(fd)
    with suppress(OSError):
        os.chmod(file_path, 0o777)
"""Reading, writing and locating files."""

from __future__ import annotations

import os
import shutil
import sys
from contextlib import suppress

CHUNK_SIZE = 1024


def get_local_path() -> str:
    """Absolute path of the running program, with forward slashes; '' if unknown."""
    program = sys.argv[0] if sys.argv else ""
    if not program:
        return ""
    if os.path.dirname(program) or os.path.exists(program):
        candidate = program
    else:
        candidate = shutil.which(program) or ""
    if not candidate:
        return ""
    return os.path.abspath(candidate).replace("\\", "/")


def _make_dirs(directory: str) -> None:
    existed = os.path.isdir(directory)
    os.makedirs(directory, mode=0o777, exist_ok=True)
    if not existed:
        with suppress(OSError):
            os.chmod(directory, 0o777)


def get_file_path(file_addr: str) -> tuple[str, str]:
    """Split a file address into (directory with trailing '/', file name).

    The directory is created when missing.
    """
    parts = file_addr.replace("\\", "/").split("/")
    name = parts[-1]
    directory = "".join(part + "/" for part in parts[:-1])
    if directory:
        with suppress(OSError):
            _make_dirs(directory)
    return directory, name


def _resolve(path: str) -> str:
    """Make './' paths relative to the program's directory."""
    path = os.fspath(path)
    if path.startswith("./"):
        directory, _ = get_file_path(get_local_path())
        return path.replace("./", directory)
    return path


def create_dir(file_path: str) -> None:
    """Create a directory and its parents."""
    _make_dirs(_resolve(file_path))


def read_data(file_addr: str) -> str:
    """Return the whole file as text."""
    with open(_resolve(file_addr), encoding="utf-8") as fh:
        return fh.read()


def write_data_bytes(file_addr: str, data: bytes) -> None:
    """Write bytes from the start of the file without truncating it."""
    fd = os.open(_resolve(file_addr), os.O_WRONLY | os.O_CREAT, 0o777)
    with os.fdopen(fd, "wb") as fh:
        fh.write(data)


def write_data(file_addr: str, content: str) -> None:
    """Write text from the start of the file without truncating it."""
    write_data_bytes(file_addr, content.encode("utf-8"))
    with suppress(OSError):
        os.chmod(_resolve(file_addr), 0o777)


def append_data_bytes(file_addr: str, data: bytes) -> None:
    """Append bytes to the file, creating it when missing."""
    with open(_resolve(file_addr), "ab") as fh:
        fh.write(data)


def get_file_size(file_addr: str) -> int:
    return os.stat(_resolve(file_addr)).st_size


def get_file_chunk(file_addr: str, index: int) -> bytes:
    """Return the 1024-byte chunk number ``index``, counting from 1.

    Raises ValueError for an index below 1 and EOFError past the end.
    """
    with open(_resolve(file_addr), "rb") as fh:
        if index < 1:
            raise ValueError("chunk index must start at 1")
        fh.seek((index - 1) * CHUNK_SIZE)
        chunk = fh.read(CHUNK_SIZE)
    if not chunk:
        raise EOFError("file has been read completely")
    return chunk


def get_file_data_all(file_addr: str) -> bytes:
    with open(_resolve(file_addr), "rb") as fh:
        return fh.read()


def check_file_exists(file_path: str) -> bool:
    try:
        os.stat(_resolve(file_path))
    except FileNotFoundError:
        return False
    except OSError:
        return True
    return True


def get_file_list(dir_path: str) -> list[str]:
    """Names of the entries of a directory."""
    return os.listdir(_resolve(dir_path))


def copy_file(src: str, dst: str) -> int:
    """Copy ``src`` to ``dst`` and return the number of bytes copied."""
    with open(src, "rb") as source, open(dst, "wb") as target:
        shutil.copyfileobj(source, target)
        return target.tell()


def delete_file(file_path: str) -> None:
    os.remove(file_path)
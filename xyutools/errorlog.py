"""Levelled log files grouped by day directory and by mode name."""

from __future__ import annotations

import inspect
import os
import shutil
import sys
import threading
from contextlib import suppress
from datetime import datetime, timedelta
from enum import IntEnum
from pathlib import Path

from . import filebase


class Level(IntEnum):
    """Severity of a log record."""

    DEBUG = 1
    INFO = 2
    WARN = 3
    ERROR = 4


_MAX_CONSOLE_MESSAGE = 102400
_THIS_FILE = os.path.normcase(os.path.abspath(__file__))

_lock = threading.Lock()
_log_level: Level = Level.DEBUG
_log_keep: int = 3
_root: Path | None = None


def init_errorlog(log_level: str, log_keep: int = 3, root: str | os.PathLike | None = None) -> None:
    """Set the minimum level, the days of logs to keep and the log root directory.

    An unknown level name selects INFO. Without a root, logs go beside the program.
    """
    global _log_level, _log_keep, _root
    try:
        _log_level = Level[log_level]
    except KeyError:
        _log_level = Level.INFO
    _log_keep = log_keep
    _root = Path(root) if root is not None else None


def _base_dir() -> Path:
    if _root is not None:
        return _root
    directory = os.path.dirname(filebase.get_local_path())
    return Path(directory) if directory else Path(".")


def _day_dir(day: datetime) -> Path:
    return _base_dir() / "Log" / day.strftime("%Y%m%d")


def _caller() -> str:
    frame = inspect.currentframe()
    while frame is not None and os.path.normcase(os.path.abspath(frame.f_code.co_filename)) == _THIS_FILE:
        frame = frame.f_back
    if frame is None:
        return "[?:0]"
    return f"[{os.path.basename(frame.f_code.co_filename)}:{frame.f_lineno}]"


def _console_time(now: datetime) -> str:
    millis = f"{now.microsecond // 1000:03d}".rstrip("0")
    stamp = now.strftime("%Y-%m-%d %H:%M:%S")
    return f"{stamp}.{millis}" if millis else stamp


def error_log(level: int, mode: str, name: str, msg: str) -> Path | None:
    """Append a record to ``<root>/Log/<YYYYMMDD>/<mode>.log``.

    Returns the file written, or None when the record was filtered out or
    the file could not be opened.
    """
    with _lock:
        if level < _log_level or level > Level.ERROR:
            return None
        level = Level(level)
        now = datetime.now()
        log_dir = _day_dir(now)
        with suppress(OSError):
            log_dir.mkdir(parents=True, exist_ok=True)
        path = log_dir / f"{mode or 'system'}.log"
        text = f"[{level.name}][{name}]{_caller()}  {msg}"
        try:
            with open(path, "a", encoding="utf-8", newline="") as fh:
                fh.write(f"\r\n{now:%Y/%m/%d %H:%M:%S}.{now.microsecond:06d} {text}\n")
        except OSError as exc:
            print(f"Fatal error: {exc}", file=sys.stderr)
            return None
        with suppress(OSError):
            os.chmod(path, 0o777)
        if len(text.encode("utf-8")) <= _MAX_CONSOLE_MESSAGE:
            print(_console_time(now), text)
        return path


def error_log_debug(mode: str, name: str, msg: str) -> Path | None:
    return error_log(Level.DEBUG, mode, name, msg)


def error_log_info(mode: str, name: str, msg: str) -> Path | None:
    return error_log(Level.INFO, mode, name, msg)


def error_log_warn(mode: str, name: str, msg: str) -> Path | None:
    return error_log(Level.WARN, mode, name, msg)


def error_log_error(mode: str, name: str, msg: str) -> Path | None:
    return error_log(Level.ERROR, mode, name, msg)


def remove_expired_logs(now: datetime | None = None) -> bool:
    """Delete the day directory that is exactly the keep period old.

    Returns True when a directory was removed.
    """
    now = now or datetime.now()
    target = _day_dir(now - timedelta(days=_log_keep))
    if not target.exists():
        return False
    try:
        if target.is_dir():
            shutil.rmtree(target)
        else:
            target.unlink()
    except OSError:
        print(f"failed to remove old logs {target}", file=sys.stderr)
        return False
    return True


def run_log_cleanup(interval: float = 300.0, stop_event: threading.Event | None = None) -> None:
    """Remove expired log directories every ``interval`` seconds until stopped."""
    stop_event = stop_event or threading.Event()
    error_log(Level.INFO, "system", "log", "log cleanup started")
    while not stop_event.wait(interval):
        remove_expired_logs()
"""Messages exchanged with the monitoring platform, and their JSON form."""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass, field
from typing import Any

_HTML_SAFE = str.maketrans(
    {
        "<": "\\u003c",
        ">": "\\u003e",
        "&": "\\u0026",
        "\u2028": "\\u2028",
        "\u2029": "\\u2029",
    }
)


def _marshal(obj: Any) -> str:
    """Compact JSON with markup characters escaped, as the platform expects."""
    text = json.dumps(obj, ensure_ascii=False, separators=(",", ":"))
    return text.translate(_HTML_SAFE)


@dataclass
class DbSettings:
    """Connection settings of one database."""

    db_type: str = ""
    db_ip: str = ""
    db_port: str = ""
    db_instance: str = ""
    db_user: str = ""
    db_password: str = ""
    data_type: str = ""
    remark: str = ""


@dataclass
class Message:
    """Service description carried by register and config messages."""

    service_name: str = ""
    service_code: str = ""
    service_ip: str = ""
    service_port: str = ""
    soft_version: str = ""
    watchdog_code: str = ""
    service_addr: str = ""
    servicetype_code: str = ""
    protocaltype_code: str = ""
    db: list[DbSettings] = field(default_factory=list)


@dataclass
class ConfigService:
    """Register or config message."""

    type: str = ""
    message: Message = field(default_factory=Message)

    def to_json(self) -> str:
        return _marshal(dataclasses.asdict(self))


@dataclass
class MonitorInfo:
    """Service monitoring message."""

    type: str = ""
    service_code: str = ""
    watchdog_code: str = ""
    service_state: str = ""
    service_addr: str = ""

    def to_json(self) -> str:
        return _marshal(
            {
                "type": self.type,
                "message": {
                    "service_code": self.service_code,
                    "watchdog_code": self.watchdog_code,
                    "service_state": self.service_state,
                    "service_addr": self.service_addr,
                },
            }
        )


@dataclass
class StartStopInfo:
    """Start or stop command for a service."""

    type: str = ""
    service_code: str = ""
    watchdog_code: str = ""
    service_addr: str = ""

    def to_json(self) -> str:
        return _marshal(
            {
                "type": self.type,
                "message": {
                    "service_code": self.service_code,
                    "watchdog_code": self.watchdog_code,
                    "service_addr": self.service_addr,
                },
            }
        )


@dataclass
class ServiceInfo:
    """Heartbeat message."""

    type: str = ""
    service_code: str = ""

    def to_json(self) -> str:
        return _marshal({"type": self.type, "message": {"service_code": self.service_code}})


@dataclass
class ReplyInfo:
    """Reply to a command: receive, success or failed."""

    type: str = ""
    message: str = ""

    def to_json(self) -> str:
        return _marshal({"type": self.type, "message": self.message})


@dataclass
class ReplyStartStopInfo:
    """Reply to a start or stop command for one service."""

    type: str = ""
    service_code: str = ""
    message: str = ""

    def to_json(self) -> str:
        return _marshal(
            {"type": self.type, "service_code": self.service_code, "message": self.message}
        )
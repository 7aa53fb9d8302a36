import datetime
import threading
from typing import Any

import msgspec

from .log_level import LogLevel


class Entry(msgspec.Struct, kw_only=True):
    message: str
    level: LogLevel

    def render(self, template: str, **context: Any) -> str:
        fields = {name: getattr(self, name) for name in self.__struct_fields__}
        fields["level"] = self.level.value

        return template.format(**{**fields, **context})


class Log(msgspec.Struct, kw_only=True):
    entry: Entry
    filename: str
    function_name: str
    line_number: int
    thread_id: int = msgspec.field(
        default_factory=threading.get_native_id,
    )
    timestamp: str = msgspec.field(
        default_factory=lambda: datetime.datetime.now(datetime.UTC).isoformat()
    )


class ListenerInfo(Entry, kw_only=True):
    host: str
    port: int
    routes: int
    level: LogLevel = LogLevel.INFO


class ListenerFatal(Entry, kw_only=True):
    error: str
    host: str | None = None
    port: int | None = None
    level: LogLevel = LogLevel.FATAL


class ConnectionDebug(Entry, kw_only=True):
    client_host: str
    client_port: int
    level: LogLevel = LogLevel.DEBUG


class ConnectionInfo(Entry, kw_only=True):
    client_host: str
    client_port: int
    route_key: str
    sent: int
    received: int
    level: LogLevel = LogLevel.INFO


class RelayConnectionError(Entry, kw_only=True):
    client_host: str
    client_port: int
    error_type: str
    category: str
    context: dict[str, Any] = msgspec.field(default_factory=dict)
    cause: str | None = None
    level: LogLevel = LogLevel.ERROR


class RouteInfo(Entry, kw_only=True):
    client_host: str
    client_port: int
    route_key: str
    backend_host: str
    backend_port: int
    protocol_version: int
    next_state: str
    level: LogLevel = LogLevel.INFO

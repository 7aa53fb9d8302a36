"""
Relay Error Hierarchy

Categorized exceptions for the handshake relay. Every error carries:
- Category: what kind of error (framing, protocol, routing, backend,
  transport, configuration)
- Context: additional debugging info for structured logging
- Cause: the original exception when wrapping one

All categories except CONFIGURATION are local to a single client
connection and only terminate that connection's handler.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any


class ErrorCategory(Enum):
    """What kind of error is this?"""

    FRAMING = auto()
    """Oversized VarInt, truncated field, invalid UTF-8."""

    PROTOCOL = auto()
    """Legacy ping, unexpected packet id, invalid next state."""

    ROUTING = auto()
    """Requested host:port has no configured backend."""

    BACKEND = auto()
    """Connecting to the resolved backend failed."""

    TRANSPORT = auto()
    """Read/write failure on an established socket."""

    CONFIGURATION = auto()
    """Startup configuration could not be read or parsed."""


@dataclass
class RelayError(Exception):
    """
    Base exception for relay errors.

    Example:
        raise HostNotConfiguredError("unknown.example.com:25565")
    """

    message: str
    category: ErrorCategory
    context: dict[str, Any] = field(default_factory=dict)
    cause: BaseException | None = None

    def __str__(self) -> str:
        ctx = f" {self.context}" if self.context else ""
        cause = ""
        if self.cause:
            cause_str = str(self.cause)
            cause_type = type(self.cause).__name__
            if cause_str:
                cause = f" (caused by {cause_type}: {cause_str})"
            else:
                cause = f" (caused by {cause_type})"
        return f"[{self.category.name}] {self.message}{ctx}{cause}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"category={self.category}, "
            f"context={self.context})"
        )

    def __hash__(self) -> int:
        return id(self)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.name,
            "context": self.context,
            "cause": str(self.cause) if self.cause else None,
        }


# =============================================================================
# Framing Errors - the bytes on the wire cannot be decoded
# =============================================================================


class FramingError(RelayError):
    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        **context: Any,
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.FRAMING,
            context=context,
            cause=cause,
        )


class VarIntTooLargeError(FramingError):
    """VarInt needs more than five bytes, or a value exceeds int32."""

    def __init__(self, value: int | None = None):
        if value is None:
            message = "VarInt exceeds 5 bytes"

        else:
            message = f"VarInt value {value} exceeds 32 bits"

        super().__init__(
            message=message,
            value=value,
        )


class NegativeVarIntError(FramingError):
    def __init__(self, value: int):
        super().__init__(
            message=f"Cannot encode negative VarInt {value}",
            value=value,
        )


class TruncatedReadError(FramingError):
    """Stream ended before a fixed-length field was complete."""

    def __init__(
        self,
        expected: int,
        received: int,
        cause: BaseException | None = None,
    ):
        super().__init__(
            message=f"Stream ended after {received} of {expected} bytes",
            expected=expected,
            received=received,
            cause=cause,
        )


class InvalidUtf8Error(FramingError):
    def __init__(
        self,
        length: int,
        cause: BaseException | None = None,
    ):
        super().__init__(
            message=f"String of {length} bytes is not valid UTF-8",
            length=length,
            cause=cause,
        )


# =============================================================================
# Protocol Errors - well-framed, but not a handshake we accept
# =============================================================================


class ProtocolViolationError(RelayError):
    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        **context: Any,
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.PROTOCOL,
            context=context,
            cause=cause,
        )


class LegacyPingUnsupportedError(ProtocolViolationError):
    """Client sent the pre-framing server list ping."""

    def __init__(self):
        super().__init__(
            message="Received legacy server list ping",
        )


class UnexpectedPacketIdError(ProtocolViolationError):
    def __init__(self, packet_id: int, expected: int = 0):
        super().__init__(
            message=f"Expected handshake packet id {expected}, got {packet_id}",
            packet_id=packet_id,
            expected=expected,
        )


class InvalidNextStateError(ProtocolViolationError):
    def __init__(self, next_state: int):
        super().__init__(
            message=f"Invalid next state {next_state}",
            next_state=next_state,
        )


# =============================================================================
# Routing / Backend / Transport Errors
# =============================================================================


class RoutingError(RelayError):
    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        **context: Any,
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.ROUTING,
            context=context,
            cause=cause,
        )


class HostNotConfiguredError(RoutingError):
    def __init__(self, route_key: str):
        super().__init__(
            message=f"Host {route_key} not in routing table",
            route_key=route_key,
        )


class BackendUnavailableError(RelayError):
    def __init__(
        self,
        host: str,
        port: int,
        cause: BaseException | None = None,
    ):
        super().__init__(
            message=f"Could not connect to backend {host}:{port}",
            category=ErrorCategory.BACKEND,
            context={"host": host, "port": port},
            cause=cause,
        )


class TransportError(RelayError):
    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        **context: Any,
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.TRANSPORT,
            context=context,
            cause=cause,
        )


# =============================================================================
# Configuration Errors - fatal, raised before the listener binds
# =============================================================================


class RoutesConfigError(RelayError):
    def __init__(
        self,
        path: str,
        reason: str,
        cause: BaseException | None = None,
    ):
        super().__init__(
            message=f"Invalid routes config {path}: {reason}",
            category=ErrorCategory.CONFIGURATION,
            context={"path": path},
            cause=cause,
        )


class EnvConfigError(RelayError):
    def __init__(
        self,
        reason: str,
        cause: BaseException | None = None,
        **context: Any,
    ):
        super().__init__(
            message=f"Invalid environment config: {reason}",
            category=ErrorCategory.CONFIGURATION,
            context=context,
            cause=cause,
        )

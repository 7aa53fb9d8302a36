from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import IntEnum

from hostrelay.errors import (
    InvalidNextStateError,
    LegacyPingUnsupportedError,
    UnexpectedPacketIdError,
)
from hostrelay.routing.backend_address import BackendAddress

from .codec import (
    encode_varint,
    read_string,
    read_uint16,
    read_varint,
    write_string,
    write_uint16,
    write_varint,
)

HANDSHAKE_PACKET_ID = 0

# The legacy server list ping (0xFE 0x03 ...) read as a frame length VarInt.
LEGACY_PING_FRAME_LENGTH = 510


class NextState(IntEnum):
    STATUS = 1
    LOGIN = 2


@dataclass(frozen=True, slots=True)
class HandshakeRecord:
    protocol_version: int
    hostname: str
    port: int
    next_state: NextState
    packet_length: int | None = None

    @property
    def route_key(self) -> str:
        return f"{self.hostname}:{self.port}"


async def read_handshake(reader: asyncio.StreamReader) -> HandshakeRecord:
    """
    Consume exactly one handshake packet from the client stream.

    The declared frame length is kept on the record but the fields that
    follow are not bounds-checked against it.
    """
    packet_length = await read_varint(reader)
    if packet_length == LEGACY_PING_FRAME_LENGTH:
        raise LegacyPingUnsupportedError()

    packet_id = await read_varint(reader)
    if packet_id != HANDSHAKE_PACKET_ID:
        raise UnexpectedPacketIdError(packet_id, expected=HANDSHAKE_PACKET_ID)

    protocol_version = await read_varint(reader)
    hostname = await read_string(reader)
    port = await read_uint16(reader)

    next_state = await read_varint(reader)
    try:
        next_state = NextState(next_state)

    except ValueError:
        raise InvalidNextStateError(next_state) from None

    return HandshakeRecord(
        protocol_version=protocol_version,
        hostname=hostname,
        port=port,
        next_state=next_state,
        packet_length=packet_length,
    )


def encode_handshake(
    record: HandshakeRecord,
    backend: BackendAddress,
) -> bytes:
    """
    Frame a handshake for the backend, replacing the client's requested
    host and port with the backend's own address.
    """
    body = bytearray()
    write_varint(body, HANDSHAKE_PACKET_ID)
    write_varint(body, record.protocol_version)
    write_string(body, backend.host)
    write_uint16(body, backend.port)
    write_varint(body, int(record.next_state))

    return encode_varint(len(body)) + bytes(body)

from __future__ import annotations

import asyncio

from hostrelay.errors import (
    FramingError,
    InvalidUtf8Error,
    NegativeVarIntError,
    TruncatedReadError,
    VarIntTooLargeError,
)

# A 32-bit value needs at most five 7-bit groups.
VARINT_MAX_BYTES = 5
VARINT_SEGMENT_BITS = 0x7F
VARINT_CONTINUE_BIT = 0x80

INT32_MAX = 2**31 - 1
UINT16_MAX = 2**16 - 1


async def read_exactly(reader: asyncio.StreamReader, count: int) -> bytes:
    try:
        return await reader.readexactly(count)

    except asyncio.IncompleteReadError as err:
        raise TruncatedReadError(
            expected=count,
            received=len(err.partial),
            cause=err,
        ) from err


async def read_varint(reader: asyncio.StreamReader) -> int:
    """
    Read a VarInt, least significant group first. The result is the
    low 32 bits of the accumulated value interpreted as a signed int32.
    """
    value = 0

    for position in range(VARINT_MAX_BYTES):
        (part,) = await read_exactly(reader, 1)
        value |= (part & VARINT_SEGMENT_BITS) << (7 * position)

        if part & VARINT_CONTINUE_BIT == 0:
            value &= 0xFFFFFFFF
            if value > INT32_MAX:
                value -= 2**32

            return value

    raise VarIntTooLargeError()


def write_varint(buffer: bytearray, value: int) -> None:
    if value < 0:
        raise NegativeVarIntError(value)

    if value > INT32_MAX:
        raise VarIntTooLargeError(value)

    while True:
        if value & ~VARINT_SEGMENT_BITS == 0:
            buffer.append(value)
            return

        buffer.append((value & VARINT_SEGMENT_BITS) | VARINT_CONTINUE_BIT)
        value >>= 7


def encode_varint(value: int) -> bytes:
    buffer = bytearray()
    write_varint(buffer, value)
    return bytes(buffer)


async def read_uint16(reader: asyncio.StreamReader) -> int:
    return int.from_bytes(await read_exactly(reader, 2), "big")


def write_uint16(buffer: bytearray, value: int) -> None:
    if not 0 <= value <= UINT16_MAX:
        raise FramingError(
            f"Value {value} does not fit in an unsigned 16-bit integer",
            value=value,
        )

    buffer += value.to_bytes(2, "big")


async def read_string(reader: asyncio.StreamReader) -> str:
    length = await read_varint(reader)
    if length < 0:
        raise FramingError(
            f"Negative string length {length}",
            length=length,
        )

    data = await read_exactly(reader, length)

    try:
        return data.decode("utf-8")

    except UnicodeDecodeError as err:
        raise InvalidUtf8Error(length, cause=err) from err


def write_string(buffer: bytearray, value: str) -> None:
    data = value.encode("utf-8")
    write_varint(buffer, len(data))
    buffer += data

"""
Pytest configuration for hostrelay tests.

Async tests run under pytest-asyncio (asyncio_mode = "auto" in
pyproject.toml).
"""

import asyncio
import socket
from typing import AsyncGenerator, Callable

import pytest

from hostrelay.protocol import NextState, encode_varint, write_string, write_uint16, write_varint


class FakeBackend:
    def __init__(self) -> None:
        self.connections: asyncio.Queue[
            tuple[asyncio.StreamReader, asyncio.StreamWriter]
        ] = asyncio.Queue()
        self.server: asyncio.Server | None = None
        self._writers: list[asyncio.StreamWriter] = []

    async def _accept(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ):
        self._writers.append(writer)
        await self.connections.put((reader, writer))

    async def start(self):
        self.server = await asyncio.start_server(
            self._accept,
            host="127.0.0.1",
            port=0,
        )

    @property
    def port(self) -> int:
        return self.server.sockets[0].getsockname()[1]

    async def next_connection(self, timeout: float = 5):
        return await asyncio.wait_for(self.connections.get(), timeout)

    async def close(self):
        for writer in self._writers:
            if not writer.is_closing():
                writer.close()

        self.server.close()
        await self.server.wait_closed()


@pytest.fixture
def stream_reader_factory() -> Callable[[bytes, bool], asyncio.StreamReader]:
    def create_reader(data: bytes, eof: bool = True) -> asyncio.StreamReader:
        reader = asyncio.StreamReader()
        reader.feed_data(data)

        if eof:
            reader.feed_eof()

        return reader

    return create_reader


@pytest.fixture
def handshake_factory():
    def create_handshake(
        protocol_version: int = 758,
        hostname: str = "play.example.com",
        port: int = 25565,
        next_state: int = NextState.LOGIN,
        packet_id: int = 0,
    ) -> bytes:
        body = bytearray()
        write_varint(body, packet_id)
        write_varint(body, protocol_version)
        write_string(body, hostname)
        write_uint16(body, port)
        write_varint(body, int(next_state))

        return encode_varint(len(body)) + bytes(body)

    return create_handshake


@pytest.fixture
async def fake_backend() -> AsyncGenerator[FakeBackend, None]:
    backend = FakeBackend()
    await backend.start()
    yield backend
    await backend.close()


@pytest.fixture
def unused_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]

import asyncio
import socket

import pytest

from hostrelay.errors import TransportError
from hostrelay.relay import pipe, relay


async def open_pair():
    left, right = socket.socketpair()
    left_streams = await asyncio.open_connection(sock=left)
    right_streams = await asyncio.open_connection(sock=right)
    return left_streams, right_streams


class ResettingWriter:
    def __init__(self) -> None:
        self.written = bytearray()
        self.closed = False

    def write(self, data: bytes):
        self.written.extend(data)

    async def drain(self):
        raise ConnectionResetError("Connection reset by peer")

    def is_closing(self) -> bool:
        return self.closed

    def close(self):
        self.closed = True

    async def wait_closed(self):
        return None


class StalledWriter(ResettingWriter):
    async def drain(self):
        await asyncio.Event().wait()


class TestRelay:
    @pytest.mark.asyncio
    async def test_copies_both_directions_until_client_closes(self):
        (client_app_reader, client_app_writer), (client_reader, client_writer) = await open_pair()
        (backend_reader, backend_writer), (backend_app_reader, backend_app_writer) = await open_pair()

        relay_task = asyncio.create_task(
            relay(
                client_reader,
                client_writer,
                backend_reader,
                backend_writer,
                buffer_size=1024,
            )
        )

        upstream_payload = bytes(range(256)) * 40
        client_app_writer.write(upstream_payload)
        await client_app_writer.drain()

        assert await asyncio.wait_for(
            backend_app_reader.readexactly(len(upstream_payload)), 5
        ) == upstream_payload

        downstream_payload = b"status-response" * 100
        backend_app_writer.write(downstream_payload)
        await backend_app_writer.drain()

        assert await asyncio.wait_for(
            client_app_reader.readexactly(len(downstream_payload)), 5
        ) == downstream_payload

        client_app_writer.close()

        sent, received = await asyncio.wait_for(relay_task, 5)

        assert sent == len(upstream_payload)
        assert received == len(downstream_payload)
        assert await asyncio.wait_for(backend_app_reader.read(), 5) == b""

        backend_app_writer.close()

    @pytest.mark.asyncio
    async def test_backend_close_terminates_client_side(self):
        (client_app_reader, client_app_writer), (client_reader, client_writer) = await open_pair()
        (backend_reader, backend_writer), (backend_app_reader, backend_app_writer) = await open_pair()

        relay_task = asyncio.create_task(
            relay(
                client_reader,
                client_writer,
                backend_reader,
                backend_writer,
            )
        )

        backend_app_writer.write(b"disconnect")
        await backend_app_writer.drain()
        backend_app_writer.close()

        await asyncio.wait_for(relay_task, 5)

        assert await asyncio.wait_for(client_app_reader.read(), 5) == b"disconnect"
        assert client_writer.is_closing()
        assert backend_writer.is_closing()

        client_app_writer.close()

    @pytest.mark.asyncio
    async def test_cancellation_closes_both_sides(self):
        (client_app_reader, client_app_writer), (client_reader, client_writer) = await open_pair()
        (backend_reader, backend_writer), (backend_app_reader, backend_app_writer) = await open_pair()

        relay_task = asyncio.create_task(
            relay(
                client_reader,
                client_writer,
                backend_reader,
                backend_writer,
            )
        )

        await asyncio.sleep(0)
        relay_task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await relay_task

        assert await asyncio.wait_for(client_app_reader.read(), 5) == b""
        assert await asyncio.wait_for(backend_app_reader.read(), 5) == b""

        client_app_writer.close()
        backend_app_writer.close()


class TestRelayFailures:
    @pytest.mark.asyncio
    async def test_backend_reset_raises_transport_error(self):
        (client_app_reader, client_app_writer), (client_reader, client_writer) = await open_pair()
        backend_reader = asyncio.StreamReader()
        backend_writer = ResettingWriter()

        relay_task = asyncio.create_task(
            relay(
                client_reader,
                client_writer,
                backend_reader,
                backend_writer,
            )
        )

        client_app_writer.write(b"hello")
        await client_app_writer.drain()

        with pytest.raises(TransportError) as err:
            await asyncio.wait_for(relay_task, 5)

        assert err.value.context["direction"] == "client->backend"
        assert err.value.context["sent"] == 5
        assert isinstance(err.value.cause, ConnectionResetError)

        assert backend_writer.closed
        assert client_writer.is_closing()
        assert await asyncio.wait_for(client_app_reader.read(), 5) == b""

        client_app_writer.close()

    @pytest.mark.asyncio
    async def test_client_reset_raises_transport_error(self):
        client_reader = asyncio.StreamReader()
        client_writer = ResettingWriter()
        (backend_reader, backend_writer), (backend_app_reader, backend_app_writer) = await open_pair()

        relay_task = asyncio.create_task(
            relay(
                client_reader,
                client_writer,
                backend_reader,
                backend_writer,
            )
        )

        backend_app_writer.write(b"status")
        await backend_app_writer.drain()

        with pytest.raises(TransportError) as err:
            await asyncio.wait_for(relay_task, 5)

        assert err.value.context["direction"] == "backend->client"
        assert err.value.context["received"] == 6

        assert client_writer.closed
        assert backend_writer.is_closing()
        assert await asyncio.wait_for(backend_app_reader.read(), 5) == b""

        backend_app_writer.close()


class TestPipe:
    @pytest.mark.asyncio
    async def test_cancelled_during_drain_counts_written_bytes(self, stream_reader_factory):
        reader = stream_reader_factory(b"x" * 100, eof=False)
        writer = StalledWriter()
        transferred = [0]

        task = asyncio.create_task(pipe(reader, writer, transferred=transferred))

        while not writer.written:
            await asyncio.sleep(0)

        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        assert transferred == [100]
        assert bytes(writer.written) == b"x" * 100

import asyncio

from hostrelay.errors import TransportError

DEFAULT_BUFFER_SIZE = 64 * 1024


async def pipe(
    reader: asyncio.StreamReader,
    writer: asyncio.StreamWriter,
    buffer_size: int = DEFAULT_BUFFER_SIZE,
    transferred: list[int] | None = None,
) -> int:
    if transferred is None:
        transferred = [0]

    while True:
        data = await reader.read(buffer_size)
        if not data:
            return transferred[0]

        writer.write(data)
        transferred[0] += len(data)

        await writer.drain()


async def close_writer(writer: asyncio.StreamWriter) -> None:
    if writer.is_closing():
        return

    writer.close()

    try:
        await writer.wait_closed()

    except (OSError, RuntimeError):
        return


async def relay(
    client_reader: asyncio.StreamReader,
    client_writer: asyncio.StreamWriter,
    backend_reader: asyncio.StreamReader,
    backend_writer: asyncio.StreamWriter,
    buffer_size: int = DEFAULT_BUFFER_SIZE,
) -> tuple[int, int]:
    """
    Copy bytes unmodified in both directions until either side reaches
    end of stream or fails. Whichever direction finishes first ends the
    relay: the other direction is cancelled and both sockets are closed.

    Returns the byte counts moved (client to backend, backend to client).
    Raises TransportError if the direction that ended the relay failed.
    """
    sent = [0]
    received = [0]

    upstream = asyncio.create_task(
        pipe(client_reader, backend_writer, buffer_size=buffer_size, transferred=sent)
    )
    downstream = asyncio.create_task(
        pipe(backend_reader, client_writer, buffer_size=buffer_size, transferred=received)
    )

    try:
        done, _ = await asyncio.wait(
            [upstream, downstream],
            return_when=asyncio.FIRST_COMPLETED,
        )

    finally:
        for task in (upstream, downstream):
            if not task.done():
                task.cancel()

        await asyncio.gather(upstream, downstream, return_exceptions=True)

        await close_writer(client_writer)
        await close_writer(backend_writer)

    for task in done:
        error = task.exception()
        if isinstance(error, OSError):
            direction = "client->backend" if task is upstream else "backend->client"
            raise TransportError(
                f"Relay {direction} failed",
                cause=error,
                direction=direction,
                sent=sent[0],
                received=received[0],
            ) from error

        elif error is not None:
            raise error

    return sent[0], received[0]

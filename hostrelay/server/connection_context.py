import asyncio
from dataclasses import dataclass

from hostrelay.relay import close_writer


@dataclass(slots=True)
class ConnectionContext:
    client_reader: asyncio.StreamReader
    client_writer: asyncio.StreamWriter
    client_host: str = "unknown"
    client_port: int = 0
    backend_reader: asyncio.StreamReader | None = None
    backend_writer: asyncio.StreamWriter | None = None

    @classmethod
    def accept(
        cls,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ):
        peername = writer.get_extra_info("peername")

        client_host = "unknown"
        client_port = 0
        if isinstance(peername, tuple) and len(peername) >= 2:
            client_host, client_port = peername[0], peername[1]

        return cls(
            client_reader=reader,
            client_writer=writer,
            client_host=client_host,
            client_port=client_port,
        )

    def attach_backend(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ):
        self.backend_reader = reader
        self.backend_writer = writer

    async def close(self):
        await close_writer(self.client_writer)

        if self.backend_writer is not None:
            await close_writer(self.backend_writer)

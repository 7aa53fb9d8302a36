from __future__ import annotations

import asyncio

from hostrelay.errors import (
    BackendUnavailableError,
    HostNotConfiguredError,
    RelayError,
    TransportError,
)
from hostrelay.logging import (
    ConnectionDebug,
    ConnectionInfo,
    ListenerInfo,
    RelayConnectionError,
    RelayLogger,
    RouteInfo,
)
from hostrelay.protocol import encode_handshake, read_handshake
from hostrelay.relay import DEFAULT_BUFFER_SIZE, relay
from hostrelay.routing import BackendAddress, RoutingTable

from .connection_context import ConnectionContext


class RelayServer:
    """
    Accepts client connections and runs one independent pipeline per
    connection: read handshake, resolve the requested ``host:port``,
    connect to the backend, forward a rewritten handshake, then relay
    bytes unmodified until either side closes.

    A failure in any step closes that connection only. Nothing is sent
    back to the client on failure. There is no connection limit and no
    handshake timeout, so a client that never finishes its handshake
    holds its handler until the socket itself errors or closes.
    """

    def __init__(
        self,
        routes: RoutingTable,
        host: str = "0.0.0.0",
        port: int = 25565,
        relay_buffer_size: int = DEFAULT_BUFFER_SIZE,
        logger: RelayLogger | None = None,
    ) -> None:
        if logger is None:
            logger = RelayLogger()

        self._routes = routes
        self._host = host
        self._port = port
        self._relay_buffer_size = relay_buffer_size
        self._logger = logger

        self._server: asyncio.Server | None = None
        self._connections: set[asyncio.Task] = set()

    @property
    def routes(self) -> RoutingTable:
        return self._routes

    @property
    def active_connections(self) -> int:
        return len(self._connections)

    @property
    def address(self) -> tuple[str, int]:
        if self._server and self._server.sockets:
            host, port = self._server.sockets[0].getsockname()[:2]
            return host, port

        return self._host, self._port

    async def start(self):
        if self._server is not None:
            return

        self._server = await asyncio.start_server(
            self._handle_connection,
            host=self._host,
            port=self._port,
        )

        host, port = self.address
        await self._logger.log(
            ListenerInfo(
                message=f"Listening on {host}:{port} with {len(self._routes)} route(s)",
                host=host,
                port=port,
                routes=len(self._routes),
            )
        )

    async def run_forever(self):
        await self.start()
        await self._server.serve_forever()

    async def close(self):
        if self._server is not None:
            self._server.close()

        for task in list(self._connections):
            task.cancel()

        await asyncio.gather(*self._connections, return_exceptions=True)

        if self._server is not None:
            await self._server.wait_closed()
            self._server = None

        await self._logger.close()

    async def _handle_connection(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ):
        task = asyncio.current_task()
        self._connections.add(task)

        context = ConnectionContext.accept(reader, writer)

        try:
            await self._logger.log(
                ConnectionDebug(
                    message=f"Accepted connection from {context.client_host}:{context.client_port}",
                    client_host=context.client_host,
                    client_port=context.client_port,
                )
            )

            await self._proxy(context)

        except RelayError as err:
            await self._log_error(context, err)

        except OSError as err:
            await self._log_error(
                context,
                TransportError("Connection failed", cause=err),
            )

        except Exception as err:
            await self._log_error(context, err)

        finally:
            await context.close()
            self._connections.discard(task)

            await self._logger.log(
                ConnectionDebug(
                    message=f"Closed connection from {context.client_host}:{context.client_port}",
                    client_host=context.client_host,
                    client_port=context.client_port,
                )
            )

    async def _proxy(self, context: ConnectionContext):
        handshake = await read_handshake(context.client_reader)

        backend = self._routes.resolve(handshake.route_key)
        if backend is None:
            raise HostNotConfiguredError(handshake.route_key)

        await self._logger.log(
            RouteInfo(
                message=f"Routing {handshake.route_key} to {backend}",
                client_host=context.client_host,
                client_port=context.client_port,
                route_key=handshake.route_key,
                backend_host=backend.host,
                backend_port=backend.port,
                protocol_version=handshake.protocol_version,
                next_state=handshake.next_state.name,
            )
        )

        backend_reader, backend_writer = await self._open_backend(backend)
        context.attach_backend(backend_reader, backend_writer)

        try:
            backend_writer.write(encode_handshake(handshake, backend))
            await backend_writer.drain()

        except OSError as err:
            raise TransportError(
                "Failed to forward handshake",
                cause=err,
                backend=str(backend),
            ) from err

        sent, received = await relay(
            context.client_reader,
            context.client_writer,
            backend_reader,
            backend_writer,
            buffer_size=self._relay_buffer_size,
        )

        await self._logger.log(
            ConnectionInfo(
                message=f"Relayed {sent} byte(s) to {backend} and {received} byte(s) back",
                client_host=context.client_host,
                client_port=context.client_port,
                route_key=handshake.route_key,
                sent=sent,
                received=received,
            )
        )

    async def _open_backend(
        self,
        backend: BackendAddress,
    ) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        try:
            return await asyncio.open_connection(backend.host, backend.port)

        except OSError as err:
            raise BackendUnavailableError(
                backend.host,
                backend.port,
                cause=err,
            ) from err

    async def _log_error(
        self,
        context: ConnectionContext,
        err: Exception,
    ):
        if isinstance(err, RelayError):
            details = err.to_dict()

        else:
            details = {
                "error_type": type(err).__name__,
                "category": "INTERNAL",
                "context": {},
                "cause": None,
            }

        await self._logger.log(
            RelayConnectionError(
                message=str(err),
                client_host=context.client_host,
                client_port=context.client_port,
                error_type=details["error_type"],
                category=details["category"],
                context=details["context"],
                cause=details["cause"],
            )
        )

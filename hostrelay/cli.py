import asyncio
import os

import click
import uvloop

from hostrelay.env import Env, load_env
from hostrelay.errors import EnvConfigError, RoutesConfigError
from hostrelay.logging import ListenerFatal, LoggingConfig, RelayLogger
from hostrelay.routing import load_routes
from hostrelay.server import RelayServer

LOGFILE_NAME = "hostrelay.log.json"


async def log_fatal(
    logger: RelayLogger,
    message: str,
    error: str,
    host: str | None = None,
    port: int | None = None,
):
    await logger.log(
        ListenerFatal(
            message=message,
            error=error,
            host=host,
            port=port,
        )
    )
    await logger.close()


async def serve(env: Env):
    log_path: str | None = None
    if env.HOSTRELAY_LOGS_DIRECTORY:
        log_path = os.path.join(env.HOSTRELAY_LOGS_DIRECTORY, LOGFILE_NAME)

    logger = RelayLogger(path=log_path)

    host = env.HOSTRELAY_LISTEN_HOST
    port = env.HOSTRELAY_LISTEN_PORT

    try:
        routes = load_routes(env.HOSTRELAY_ROUTES_PATH)

    except RoutesConfigError as err:
        await log_fatal(logger, str(err), type(err).__name__, host=host, port=port)
        raise click.ClickException(str(err)) from err

    server = RelayServer(
        routes,
        host=host,
        port=port,
        relay_buffer_size=env.HOSTRELAY_RELAY_BUFFER_SIZE,
        logger=logger,
    )

    try:
        await server.start()

    except OSError as err:
        message = f"Could not bind {host}:{port}: {err}"
        await log_fatal(logger, message, type(err).__name__, host=host, port=port)
        raise click.ClickException(message) from err

    try:
        await server.run_forever()

    except asyncio.CancelledError:
        pass

    finally:
        await server.close()


@click.command(help="Route game clients to backends by the host:port in their handshake.")
@click.option("--routes", "routes_path", default=None, type=str, help="Path to the JSON routes file.")
@click.option("--host", default=None, type=str, help="Interface to listen on.")
@click.option("--port", default=None, type=int, help="Port to listen on.")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["trace", "debug", "info", "warn", "error", "critical", "fatal"]),
)
@click.option("--env-file", default=None, type=str, help="Path to a .env file.")
def run(
    routes_path: str | None,
    host: str | None,
    port: int | None,
    log_level: str | None,
    env_file: str | None,
):
    override = {
        "HOSTRELAY_ROUTES_PATH": routes_path,
        "HOSTRELAY_LISTEN_HOST": host,
        "HOSTRELAY_LISTEN_PORT": port,
        "HOSTRELAY_LOG_LEVEL": log_level,
    }

    try:
        env = load_env(
            Env,
            env_file=env_file,
            override={name: value for name, value in override.items() if value is not None},
        )

    except EnvConfigError as err:
        uvloop.run(log_fatal(RelayLogger(), err.message, type(err).__name__))
        raise click.ClickException(err.message) from err

    logging_config = LoggingConfig()
    logging_config.update(**env.get_logging_config())

    try:
        uvloop.run(serve(env))

    except KeyboardInterrupt:
        pass


def main():
    run()

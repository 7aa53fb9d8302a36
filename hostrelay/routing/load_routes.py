import os
from typing import Annotated, Dict, Tuple

import orjson
from pydantic import BaseModel, Field, StrictInt, StrictStr, ValidationError

from hostrelay.errors import RoutesConfigError

from .backend_address import BackendAddress
from .routing_table import RoutingTable

BackendPort = Annotated[StrictInt, Field(ge=0, le=65535)]


class RoutesConfig(BaseModel):
    routes: Dict[StrictStr, Tuple[StrictStr, BackendPort]]

    def to_routing_table(self) -> RoutingTable:
        return RoutingTable(
            {
                route_key: BackendAddress(host=host, port=port)
                for route_key, (host, port) in self.routes.items()
            }
        )


def load_routes(path: str) -> RoutingTable:
    """
    Load the ``{"host:port": ["backend_host", backend_port]}`` JSON map.
    Any failure is fatal to startup and raised as RoutesConfigError.
    """
    if not os.path.isfile(path):
        raise RoutesConfigError(path, "file not found")

    try:
        with open(path, "rb") as routes_file:
            data = orjson.loads(routes_file.read())

    except orjson.JSONDecodeError as err:
        raise RoutesConfigError(path, "invalid JSON", cause=err) from err

    except OSError as err:
        raise RoutesConfigError(path, "unreadable", cause=err) from err

    if not isinstance(data, dict):
        raise RoutesConfigError(path, "expected a JSON object at top level")

    try:
        config = RoutesConfig(routes=data)

    except ValidationError as err:
        raise RoutesConfigError(
            path,
            f"{err.error_count()} invalid route(s)",
            cause=err,
        ) from err

    return config.to_routing_table()

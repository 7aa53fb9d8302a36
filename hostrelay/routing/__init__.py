from .backend_address import BackendAddress as BackendAddress
from .load_routes import (
    RoutesConfig as RoutesConfig,
    load_routes as load_routes,
)
from .routing_table import RoutingTable as RoutingTable

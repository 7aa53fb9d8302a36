from .errors import (
    BackendUnavailableError as BackendUnavailableError,
    EnvConfigError as EnvConfigError,
    ErrorCategory as ErrorCategory,
    FramingError as FramingError,
    HostNotConfiguredError as HostNotConfiguredError,
    ProtocolViolationError as ProtocolViolationError,
    RelayError as RelayError,
    RoutesConfigError as RoutesConfigError,
    RoutingError as RoutingError,
    TransportError as TransportError,
)
from .routing import (
    BackendAddress as BackendAddress,
    RoutingTable as RoutingTable,
    load_routes as load_routes,
)
from .server import RelayServer as RelayServer

from .connection_context import ConnectionContext as ConnectionContext
from .relay_server import RelayServer as RelayServer

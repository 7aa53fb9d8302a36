from .entries import (
    ConnectionDebug as ConnectionDebug,
    ConnectionInfo as ConnectionInfo,
    Entry as Entry,
    ListenerFatal as ListenerFatal,
    ListenerInfo as ListenerInfo,
    Log as Log,
    RelayConnectionError as RelayConnectionError,
    RouteInfo as RouteInfo,
)
from .log_level import (
    LogLevel as LogLevel,
    LogLevelName as LogLevelName,
)
from .logging_config import (
    LoggingConfig as LoggingConfig,
    LogOutput as LogOutput,
    StreamType as StreamType,
)
from .relay_logger import (
    DEFAULT_TEMPLATE as DEFAULT_TEMPLATE,
    RelayLogger as RelayLogger,
)

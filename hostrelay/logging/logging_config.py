import contextvars
from enum import Enum
from typing import Literal

from .log_level import LogLevel, LogLevelName

LogOutput = Literal['stdout', 'stderr']


class StreamType(Enum):
    STDOUT = "stdout"
    STDERR = "stderr"


_global_log_level = contextvars.ContextVar("_global_log_level", default=LogLevel.INFO)
_global_log_output_type = contextvars.ContextVar("_global_log_output_type", default=StreamType.STDERR)


class LoggingConfig:
    def __init__(self) -> None:
        self._log_level: contextvars.ContextVar[LogLevel] = _global_log_level
        self._log_output_type: contextvars.ContextVar[StreamType] = _global_log_output_type

    def update(
        self,
        log_level: LogLevelName | None = None,
        log_output: LogOutput | None = None,
    ):
        if log_level:
            self._log_level.set(
                LogLevel.to_level(log_level)
            )

        if log_output:
            self._log_output_type.set(
                StreamType.STDOUT if log_output == 'stdout' else StreamType.STDERR
            )

    def enabled(self, log_level: LogLevel) -> bool:
        return log_level.rank >= self._log_level.get().rank

    @property
    def level(self) -> LogLevel:
        return self._log_level.get()

    @property
    def output(self) -> StreamType:
        return self._log_output_type.get()

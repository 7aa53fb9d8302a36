from __future__ import annotations
from pydantic import BaseModel, Field, StrictStr, StrictInt
from typing import Annotated, Callable, Dict, Literal, Union

PrimaryType = Union[str, int, float, bytes, bool]


class Env(BaseModel):
    HOSTRELAY_ROUTES_PATH: StrictStr = "config.json"
    HOSTRELAY_LISTEN_HOST: StrictStr = "0.0.0.0"
    HOSTRELAY_LISTEN_PORT: Annotated[StrictInt, Field(ge=0, le=65535)] = 25565
    HOSTRELAY_RELAY_BUFFER_SIZE: Annotated[StrictInt, Field(gt=0)] = 64 * 1024
    HOSTRELAY_LOG_LEVEL: Literal[
        "trace", "debug", "info", "warn", "error", "critical", "fatal"
    ] = "info"
    HOSTRELAY_LOG_OUTPUT: Literal["stdout", "stderr"] = "stderr"
    HOSTRELAY_LOGS_DIRECTORY: StrictStr | None = None

    @classmethod
    def types_map(cls) -> Dict[str, Callable[[str], PrimaryType]]:
        return {
            "HOSTRELAY_ROUTES_PATH": str,
            "HOSTRELAY_LISTEN_HOST": str,
            "HOSTRELAY_LISTEN_PORT": int,
            "HOSTRELAY_RELAY_BUFFER_SIZE": int,
            "HOSTRELAY_LOG_LEVEL": str.lower,
            "HOSTRELAY_LOG_OUTPUT": str.lower,
            "HOSTRELAY_LOGS_DIRECTORY": str,
        }

    def get_logging_config(self) -> dict:
        """Get LoggingConfig.update() kwargs from environment settings."""
        return {
            "log_level": self.HOSTRELAY_LOG_LEVEL,
            "log_output": self.HOSTRELAY_LOG_OUTPUT,
        }

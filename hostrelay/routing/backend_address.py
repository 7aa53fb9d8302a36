from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class BackendAddress:
    host: str
    port: int

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"

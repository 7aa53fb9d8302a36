import os
from typing import Dict, Union

from dotenv import dotenv_values
from pydantic import ValidationError

from hostrelay.errors import EnvConfigError

from .env import Env

PrimaryType = Union[str, int, bool, float, bytes]


def _cast(envar_name: str, envar_value: str, envar_type) -> PrimaryType:
    try:
        return envar_type(envar_value)

    except ValueError as err:
        raise EnvConfigError(
            f"{envar_name}={envar_value!r} is not a valid value",
            cause=err,
            name=envar_name,
        ) from err


def load_env(
    default: type[Env],
    env_file: str | None = None,
    override: Dict[str, PrimaryType] | None = None,
) -> Env:
    envars = default.types_map()

    if env_file is None:
        env_file = ".env"

    values: Dict[str, PrimaryType] = {}
    for envar_name, envar_type in envars.items():
        envar_value = os.getenv(envar_name)
        if envar_value:
            values[envar_name] = _cast(envar_name, envar_value, envar_type)

    if env_file and os.path.exists(env_file):
        env_file_values = dotenv_values(dotenv_path=env_file)

        for envar_name, envar_value in env_file_values.items():
            envar_type = envars.get(envar_name)
            if envar_type and envar_value is not None:
                values[envar_name] = _cast(envar_name, envar_value, envar_type)

    if override:
        values.update(override)

    try:
        return default(
            **{name: value for name, value in values.items() if value is not None}
        )

    except ValidationError as err:
        names = sorted({str(error["loc"][0]) for error in err.errors() if error["loc"]})
        raise EnvConfigError(
            f"invalid {', '.join(names)}",
            cause=err,
            names=names,
        ) from err

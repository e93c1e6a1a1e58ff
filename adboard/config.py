"""Service configuration read from a dotenv file and the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import dotenv_values

DEFAULT_ENV_FILE = ".env"
PASSWORD = "password"


@dataclass(frozen=True)
class DatabaseConfig:
    """Database connection settings."""

    host: str = "localhost"
    port: str = "5432"
    database: str = "postgres"
    username: str = "mac"
    password: str = PASSWORD
    path: str = "adboard.db"

    @property
    def url(self) -> str:
        """Connection URL built from the network settings."""
        return (
            f"postgresql://{self.username}:{self.password}@{self.host}:{self.port}"
            f"/{self.database}?sslmode=disable"
        )


@dataclass(frozen=True)
class Config:
    """Ports of the RPC and REST servers and the database settings."""

    grpc_port: int = 8080
    rest_port: int = 8081
    database: DatabaseConfig = field(default_factory=DatabaseConfig)


def _int(values: Mapping[str, str], key: str, default: int) -> int:
    raw = values.get(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{key}: invalid integer {raw!r}") from None


def _str(values: Mapping[str, str], key: str, default: str) -> str:
    raw = values.get(key)
    return default if raw is None or raw == "" else raw


def load_config(env_file: str | os.PathLike[str] = DEFAULT_ENV_FILE) -> Config:
    """Read the config file; environment variables override its values."""
    path = Path(env_file)
    if not path.is_file():
        raise FileNotFoundError(f"config file not found: {path}")
    values: dict[str, str] = {
        key: value for key, value in dotenv_values(path).items() if value is not None
    }
    values.update(os.environ)

    defaults = DatabaseConfig()
    database = DatabaseConfig(
        host=_str(values, "HOST", defaults.host),
        port=_str(values, "PORT", defaults.port),
        database=_str(values, "DATABASE", defaults.database),
        username=_str(values, "USERNAME", defaults.username),
        password=_str(values, "PASSWORD", defaults.password),
        path=_str(values, "DB_PATH", defaults.path),
    )
    base = Config()
    return Config(
        grpc_port=_int(values, "GRPC_PORT", base.grpc_port),
        rest_port=_int(values, "REST_PORT", base.rest_port),
        database=database,
    )
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv
from sqlalchemy.engine import URL, make_url


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - DB_HOST, DB_PORT, DB_USER, DB_PASSWORD, DB_NAME: PostgreSQL connection details
    - DB_SSLMODE: libpq sslmode passed to the driver. Default 'disable'
    - DATABASE_URL: full SQLAlchemy URL; overrides the DB_* variables when set
    - DB_ECHO: 'true' to log every emitted SQL statement (default: false)
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - LOG_LEVEL: root log level name. Default 'INFO'
    - HOST, PORT: listener address. Default 0.0.0.0:3000
    """

    db_host: str
    db_port: int
    db_user: str
    db_password: str
    db_name: str
    db_sslmode: str
    database_url_override: Optional[str]
    db_echo: bool
    cors_allow_origins: List[str]
    log_level: str
    host: str
    port: int

    @property
    def database_url(self) -> URL:
        """SQLAlchemy URL of the backing database."""
        if self.database_url_override:
            return make_url(self.database_url_override)
        return URL.create(
            "postgresql+psycopg",
            username=self.db_user,
            password=self.db_password or None,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
            query={"sslmode": self.db_sslmode},
        )


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_bool(value: str, default: bool = False) -> bool:
    v = value.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    return default


def _parse_int(value: str, default: int) -> int:
    try:
        return int(value.strip())
    except ValueError:
        return default


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def load_env(path: Optional[str] = None) -> bool:
    """
    Load a .env file (by default the nearest one from the working directory)
    into the process environment without overriding variables
    that are already set. Returns True when a file was found and loaded.
    """
    return load_dotenv(dotenv_path=path or find_dotenv(usecwd=True), override=False)


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    database_url = os.getenv("DATABASE_URL", "").strip() or None

    return Settings(
        db_host=_get_env("DB_HOST", "localhost").strip(),
        db_port=_parse_int(_get_env("DB_PORT", "5432"), 5432),
        db_user=_get_env("DB_USER", "postgres").strip(),
        db_password=os.getenv("DB_PASSWORD", ""),
        db_name=_get_env("DB_NAME", "todos").strip(),
        db_sslmode=_get_env("DB_SSLMODE", "disable").strip(),
        database_url_override=database_url,
        db_echo=_parse_bool(_get_env("DB_ECHO", "false"), False),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
        host=_get_env("HOST", "0.0.0.0").strip(),
        port=_parse_int(_get_env("PORT", "3000"), 3000),
    )

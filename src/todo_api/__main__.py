"""
Process entry point: ``python -m todo_api`` or the ``todo-api`` console script.

Loads .env and environment configuration, configures logging, and serves the
application with uvicorn. The schema migration runs during app startup.
"""
from __future__ import annotations

import uvicorn

from .logging_setup import setup_logging
from .main import create_app
from .settings import get_settings, load_env


def main() -> None:
    load_env()
    settings = get_settings()
    setup_logging(settings.log_level)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        log_config=None,  # share the root logging configuration
    )


if __name__ == "__main__":
    main()

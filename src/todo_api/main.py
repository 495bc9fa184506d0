from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Sequence

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .db import engine_from_settings, migrate, ping
from .graphql_api import create_graphql_router
from .logging_setup import setup_logging
from .routers import todos as todos_router
from .settings import Settings, get_settings, load_env

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and database connectivity."},
    {"name": "todos", "description": "CRUD operations for Todo items."},
    {"name": "graphql", "description": "GraphQL endpoint exposing the same Todo operations."},
]


def _is_path_error(error: dict) -> bool:
    loc = error.get("loc") or ()
    return len(loc) > 0 and loc[0] == "path"


def _has_malformed_id(request: Request) -> bool:
    # FastAPI stops at an unparseable body before it validates path params
    raw_id = request.path_params.get("todo_id")
    if raw_id is None:
        return False
    try:
        uuid.UUID(str(raw_id))
    except ValueError:
        return True
    return False


def _bad_request_message(request: Request, errors: Sequence[dict] = ()) -> str:
    if _has_malformed_id(request) or any(_is_path_error(e) for e in errors):
        return "Invalid ID"
    return "Cannot parse JSON"


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Map request validation failures to 400 responses.

    A malformed path id wins over a malformed body so every method reports
    "Invalid ID" for a bad id.
    """
    errors = exc.errors()
    logger.debug("Rejected %s %s: %s", request.method, request.url.path, errors)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": _bad_request_message(request, errors)},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Render every HTTPException as {"error": detail}.

    The only 400s come from FastAPI failing to read the request body (for
    example bytes that are not UTF-8); they use the same messages as
    validation failures.
    """
    detail = exc.detail
    if exc.status_code == status.HTTP_400_BAD_REQUEST:
        logger.debug("Rejected %s %s: %s", request.method, request.url.path, detail)
        detail = _bad_request_message(request)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": detail},
        headers=getattr(exc, "headers", None),
    )


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None, engine: Optional[Engine] = None) -> FastAPI:
    """
    Build the FastAPI application.

    The schema migration runs when the application starts. An engine passed in
    by the caller is left open on shutdown; one built from settings is disposed.

    Without explicit settings the process environment (and .env) is read and
    logging is configured, which is what ``uvicorn todo_api.main:app`` relies on.
    """
    if settings is None:
        load_env()
        settings = get_settings()
        setup_logging(settings.log_level)
    owns_engine = engine is None
    if engine is None:
        engine = engine_from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Starting todo service")
        migrate(app.state.engine)
        yield
        logger.info("Stopping todo service")
        if owns_engine:
            app.state.engine.dispose()

    app = FastAPI(
        title="Todo Service",
        description="Todo list service exposing REST and GraphQL endpoints over a relational database.",
        version="0.1.0",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )
    app.state.engine = engine
    app.state.settings = settings

    # Configure CORS based on settings (.env -> CORS_ALLOW_ORIGINS), with '*' fallback
    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    @app.get("/", summary="Health Check", tags=["health"])
    def health_check(request: Request):
        """
        Health check endpoint.

        Returns:
            A JSON object with the service status and database dialect, or 503
            when the database cannot be reached.
        """
        db_engine: Engine = request.app.state.engine
        try:
            ping(db_engine)
        except SQLAlchemyError:
            logger.exception("Database health check failed")
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"error": "Database unavailable"},
            )
        return {"message": "Healthy", "database": db_engine.dialect.name}

    app.include_router(todos_router.router)
    app.include_router(create_graphql_router(), prefix="/graphql")
    return app


app = create_app()

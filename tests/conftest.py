import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

# Use in-memory SQLite so importing the module-level app needs no PostgreSQL server
os.environ.setdefault("DATABASE_URL", "sqlite://")

from todo_api.db import build_engine  # noqa: E402
from todo_api.main import create_app  # noqa: E402
from todo_api.repositories import get_repository  # noqa: E402
from todo_api.settings import get_settings  # noqa: E402


@pytest.fixture
def engine():
    eng = build_engine("sqlite://")
    yield eng
    eng.dispose()


@pytest.fixture
def app(engine):
    return create_app(get_settings(), engine=engine)


@pytest.fixture
def client(app):
    # Entering the client runs the lifespan, which creates the schema
    with TestClient(app) as c:
        yield c


class BrokenRepository:
    """Stands in for a repository whose database is gone."""

    def _fail(self, *args, **kwargs):
        raise OperationalError("SELECT oid FROM todos", {}, Exception("connection refused"))

    list = create = get = update = delete = _fail


@pytest.fixture
def broken_repository(app):
    app.dependency_overrides[get_repository] = lambda: BrokenRepository()
    yield
    app.dependency_overrides.clear()

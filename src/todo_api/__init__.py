"""
Todo service package.

A FastAPI application exposing a single Todo entity over REST (/todos) and
GraphQL (/graphql), persisted through SQLModel/SQLAlchemy. Build an app with
``todo_api.main.create_app`` or run ``python -m todo_api``.
"""

__version__ = "0.1.0"

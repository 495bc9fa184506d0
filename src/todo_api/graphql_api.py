"""
GraphQL endpoint for the Todo service.

Strawberry schema mirroring the REST operations. Resolvers share the
TodoRepository used by the REST handlers; the request-scoped repository is
placed on the context by the router's context getter.
"""
import logging
import uuid
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional

import strawberry
from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError
from strawberry.fastapi import GraphQLRouter
from strawberry.types import Info

from .models import Todo, as_utc
from .repositories import TodoNotFoundError, TodoRepository, get_repository

logger = logging.getLogger(__name__)


@strawberry.type(name="Todo")
class TodoType:
    id: uuid.UUID
    task: str
    completed: bool
    created_at: datetime

    @classmethod
    def from_model(cls, todo: Todo) -> "TodoType":
        return cls(id=todo.id, task=todo.task, completed=todo.completed, created_at=as_utc(todo.created_at))


@strawberry.input
class CreateTodoInput:
    task: str
    completed: bool = False


@strawberry.input
class UpdateTodoInput:
    task: str
    completed: bool


class TodoServiceError(Exception):
    """GraphQL-facing failure whose message is safe to return to clients."""


@contextmanager
def _database_errors(message: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception(message)
        raise TodoServiceError(message) from exc


def _repo(info: Info) -> TodoRepository:
    return info.context["repo"]


@strawberry.type
class Query:
    @strawberry.field(description="All todos, oldest first.")
    def todos(self, info: Info) -> List[TodoType]:
        with _database_errors("Cannot retrieve todos"):
            items = _repo(info).list()
        return [TodoType.from_model(t) for t in items]

    @strawberry.field(description="A single todo, or null when the id is unknown.")
    def todo(self, info: Info, id: uuid.UUID) -> Optional[TodoType]:
        try:
            with _database_errors("Cannot retrieve todo"):
                return TodoType.from_model(_repo(info).get(id))
        except TodoNotFoundError:
            return None


@strawberry.type
class Mutation:
    @strawberry.mutation
    def create_todo(self, info: Info, input: CreateTodoInput) -> TodoType:
        with _database_errors("Cannot create todo"):
            created = _repo(info).create(input.task, input.completed)
        logger.info("Created todo %s", created.id)
        return TodoType.from_model(created)

    @strawberry.mutation
    def update_todo(self, info: Info, id: uuid.UUID, input: UpdateTodoInput) -> TodoType:
        with _database_errors("Cannot update todo"):
            updated = _repo(info).update(id, input.task, input.completed)
        logger.info("Updated todo %s", id)
        return TodoType.from_model(updated)

    @strawberry.mutation
    def delete_todo(self, info: Info, id: uuid.UUID) -> bool:
        with _database_errors("Cannot delete todo"):
            _repo(info).delete(id)
        logger.info("Deleted todo %s", id)
        return True


schema = strawberry.Schema(query=Query, mutation=Mutation)


def get_context(repo: TodoRepository = Depends(get_repository)) -> Dict[str, Any]:
    return {"repo": repo}


# PUBLIC_INTERFACE
def create_graphql_router() -> GraphQLRouter:
    """Return the FastAPI router serving the schema over POST only, without an IDE."""
    return GraphQLRouter(
        schema,
        context_getter=get_context,
        graphql_ide=None,
        allow_queries_via_get=False,
        tags=["graphql"],
    )

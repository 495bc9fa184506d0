from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from typing import Generator, List

from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from .db import get_session
from .models import Todo

logger = logging.getLogger(__name__)


class TodoNotFoundError(LookupError):
    """Raised when no todo exists for the requested id."""

    def __init__(self, todo_id: uuid.UUID) -> None:
        super().__init__("Todo not found")
        self.todo_id = todo_id


# PUBLIC_INTERFACE
class TodoRepository:
    """
    Data-access client for Todo rows.

    Every mutation commits immediately. SQLAlchemy errors propagate to the
    caller after the session has been rolled back.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def list(self) -> List[Todo]:
        """Return all todos, oldest first."""
        return list(self._session.exec(select(Todo).order_by(Todo.created_at)).all())

    def create(self, task: str, completed: bool = False) -> Todo:
        """Insert a new todo; id and created_at come from the schema defaults."""
        todo = Todo(task=task, completed=completed)
        with self._rollback_on_error():
            self._session.add(todo)
            self._session.commit()
        self._session.refresh(todo)
        return todo

    def get(self, todo_id: uuid.UUID) -> Todo:
        """Return the todo with the given id or raise TodoNotFoundError."""
        todo = self._session.get(Todo, todo_id)
        if todo is None:
            raise TodoNotFoundError(todo_id)
        return todo

    def update(self, todo_id: uuid.UUID, task: str, completed: bool) -> Todo:
        """Replace task and completed of an existing todo."""
        todo = self.get(todo_id)
        todo.task = task
        todo.completed = completed
        with self._rollback_on_error():
            self._session.add(todo)
            self._session.commit()
        self._session.refresh(todo)
        return todo

    def delete(self, todo_id: uuid.UUID) -> None:
        """Remove the todo with the given id or raise TodoNotFoundError."""
        todo = self.get(todo_id)
        with self._rollback_on_error():
            self._session.delete(todo)
            self._session.commit()

    @contextmanager
    def _rollback_on_error(self) -> Generator[None, None, None]:
        try:
            yield
        except SQLAlchemyError as exc:
            logger.warning("Rolling back session after database error: %s", exc)
            self._session.rollback()
            raise


# PUBLIC_INTERFACE
def get_repository(session: Session = Depends(get_session)) -> TodoRepository:
    """FastAPI dependency returning a TodoRepository bound to the request session."""
    return TodoRepository(session)

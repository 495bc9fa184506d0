import uuid

import pytest
from sqlalchemy import inspect
from sqlalchemy.exc import OperationalError
from sqlmodel import Session

from todo_api.db import migrate
from todo_api.repositories import TodoNotFoundError, TodoRepository


@pytest.fixture
def session(engine):
    migrate(engine)
    with Session(engine) as s:
        yield s


@pytest.fixture
def repo(session):
    return TodoRepository(session)


def test_migrate_creates_todos_table_with_oid_column(engine):
    migrate(engine)
    columns = {c["name"] for c in inspect(engine).get_columns("todos")}
    assert columns == {"oid", "task", "completed", "created_at"}


def test_migrate_is_idempotent(engine):
    migrate(engine)
    migrate(engine)
    assert inspect(engine).has_table("todos")


def test_create_applies_defaults(repo):
    todo = repo.create("Water plants")
    assert isinstance(todo.id, uuid.UUID)
    assert todo.completed is False
    assert todo.created_at is not None


def test_get_missing_raises(repo):
    missing = uuid.uuid4()
    with pytest.raises(TodoNotFoundError) as excinfo:
        repo.get(missing)
    assert excinfo.value.todo_id == missing
    assert str(excinfo.value) == "Todo not found"


def test_update_replaces_fields_only(repo):
    todo = repo.create("Draft", completed=False)
    original_id, original_created = todo.id, todo.created_at

    updated = repo.update(original_id, "Final", True)
    assert updated.id == original_id
    assert updated.created_at == original_created
    assert (updated.task, updated.completed) == ("Final", True)


def test_update_and_delete_missing_raise(repo):
    with pytest.raises(TodoNotFoundError):
        repo.update(uuid.uuid4(), "x", False)
    with pytest.raises(TodoNotFoundError):
        repo.delete(uuid.uuid4())


def test_delete_removes_row(repo):
    todo = repo.create("Temporary")
    repo.delete(todo.id)
    assert repo.list() == []
    with pytest.raises(TodoNotFoundError):
        repo.get(todo.id)


def test_list_is_ordered_by_creation(repo):
    tasks = ["first", "second", "third"]
    for task in tasks:
        repo.create(task)
    assert [t.task for t in repo.list()] == tasks


def test_failed_commit_rolls_back(repo, session, monkeypatch):
    calls = []

    def failing_commit():
        raise OperationalError("INSERT", {}, Exception("disk full"))

    monkeypatch.setattr(session, "commit", failing_commit)
    monkeypatch.setattr(session, "rollback", lambda: calls.append("rollback"))

    with pytest.raises(OperationalError):
        repo.create("Never stored")
    assert calls == ["rollback"]

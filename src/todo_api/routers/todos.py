from __future__ import annotations

import logging
import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError

from ..repositories import TodoNotFoundError, TodoRepository, get_repository
from ..schemas import DeleteResult, ErrorOut, TodoIn, TodoOut

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/todos",
    tags=["todos"],
)

_NOT_FOUND = "Todo not found"

_BAD_REQUEST = {400: {"model": ErrorOut, "description": "Invalid ID or malformed JSON body"}}
_NOT_FOUND_RESPONSE = {404: {"model": ErrorOut, "description": "Todo not found"}}
_SERVER_ERROR = {500: {"model": ErrorOut, "description": "Database failure"}}


def _server_error(message: str) -> HTTPException:
    logger.exception(message)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message)


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TodoOut],
    summary="List Todos",
    description="Return every Todo item, oldest first.",
    responses={200: {"description": "List retrieved successfully"}, **_SERVER_ERROR},
)
def list_todos(repo: TodoRepository = Depends(get_repository)) -> List[TodoOut]:
    """
    List all todos.
    """
    try:
        items = repo.list()
    except SQLAlchemyError:
        raise _server_error("Cannot retrieve todos")
    return [TodoOut.model_validate(it) for it in items]


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TodoOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description="Create a new Todo item and return the created resource.",
    responses={201: {"description": "Todo created successfully"}, **_BAD_REQUEST, **_SERVER_ERROR},
)
def create_todo(payload: TodoIn, repo: TodoRepository = Depends(get_repository)) -> TodoOut:
    """
    Create a new Todo. The id and created_at timestamp are generated.
    """
    try:
        created = repo.create(payload.task, payload.completed)
    except SQLAlchemyError:
        raise _server_error("Cannot create todo")
    logger.info("Created todo %s", created.id)
    return TodoOut.model_validate(created)


# PUBLIC_INTERFACE
@router.get(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Get Todo",
    description="Get a single Todo item by ID.",
    responses={200: {"description": "Todo found"}, **_BAD_REQUEST, **_NOT_FOUND_RESPONSE, **_SERVER_ERROR},
)
def get_todo(todo_id: uuid.UUID, repo: TodoRepository = Depends(get_repository)) -> TodoOut:
    """
    Retrieve a single Todo item by its ID.
    """
    try:
        item = repo.get(todo_id)
    except TodoNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND)
    except SQLAlchemyError:
        raise _server_error("Cannot retrieve todo")
    return TodoOut.model_validate(item)


# PUBLIC_INTERFACE
@router.put(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Replace Todo",
    description="Replace the task and completed flag of an existing Todo item.",
    responses={200: {"description": "Todo updated"}, **_BAD_REQUEST, **_NOT_FOUND_RESPONSE, **_SERVER_ERROR},
)
def update_todo(
    todo_id: uuid.UUID,
    payload: TodoIn,
    repo: TodoRepository = Depends(get_repository),
) -> TodoOut:
    """
    Full update (replace) of task and completed; an omitted completed resets it to false.
    """
    try:
        updated = repo.update(todo_id, payload.task, payload.completed)
    except TodoNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND)
    except SQLAlchemyError:
        raise _server_error("Cannot update todo")
    logger.info("Updated todo %s", todo_id)
    return TodoOut.model_validate(updated)


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    response_model=DeleteResult,
    summary="Delete Todo",
    description="Delete a Todo item by ID.",
    responses={200: {"description": "Todo deleted"}, **_BAD_REQUEST, **_NOT_FOUND_RESPONSE, **_SERVER_ERROR},
)
def delete_todo(todo_id: uuid.UUID, repo: TodoRepository = Depends(get_repository)) -> DeleteResult:
    """
    Delete a Todo. Returns a result message on success, 404 if not found.
    """
    try:
        repo.delete(todo_id)
    except TodoNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND)
    except SQLAlchemyError:
        raise _server_error("Cannot delete todo")
    logger.info("Deleted todo %s", todo_id)
    return DeleteResult(result="Todo deleted")

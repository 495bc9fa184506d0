from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import as_utc


# PUBLIC_INTERFACE
class TodoIn(BaseModel):
    """
    Request body for creating or replacing a Todo item.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "task": "Buy groceries",
                "completed": False,
            }
        }
    )

    task: str = Field(..., description="Free-text description of the todo item")
    completed: bool = Field(default=False, description="Completion status flag")


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item.
    """

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "3f1c2a9e-8b4d-4c55-9f5e-2d7a1b6c0e11",
                "task": "Buy groceries",
                "completed": False,
                "created_at": "2025-01-25T10:15:30.123456Z",
            }
        },
    )

    id: uuid.UUID = Field(..., description="Unique identifier of the todo item")
    task: str = Field(..., description="Free-text description of the todo item")
    completed: bool = Field(..., description="Completion status flag")
    created_at: datetime = Field(..., description="Creation timestamp (UTC)")

    @field_validator("created_at")
    @classmethod
    def normalize_created_at(cls, v: datetime) -> datetime:
        """
        Always report created_at in UTC with an explicit offset.
        """
        return as_utc(v)


class ErrorOut(BaseModel):
    """Body of every error response."""

    error: str = Field(..., description="Human readable error message")


class DeleteResult(BaseModel):
    """Body returned after a successful delete."""

    result: str = Field(..., description="Outcome of the delete operation")

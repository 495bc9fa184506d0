import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Uuid
from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# PUBLIC_INTERFACE
def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive timestamps read back from backends that drop the offset (SQLite)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# PUBLIC_INTERFACE
class Todo(SQLModel, table=True):
    """
    Schema descriptor for the Todo entity, persisted in the ``todos`` table.

    Fields:
    - id: UUID generated on creation, stored in the ``oid`` column, never reassigned
    - task: Free-text description of the item
    - completed: Completion flag, false until updated
    - created_at: UTC creation timestamp, set once on insert
    """

    __tablename__ = "todos"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        sa_column=Column("oid", Uuid, primary_key=True),
    )
    task: str = Field(nullable=False)
    completed: bool = Field(default=False, nullable=False)
    created_at: datetime = Field(
        default_factory=_utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )

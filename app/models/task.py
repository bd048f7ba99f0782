"""
Task model.

Represents a task owned by a user, with its priority/status enums and the
lifecycle helpers used by the service layer.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, Enum as SAEnum, Index, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.utils.time import ensure_utc, utc_now


class TaskPriority(str, Enum):
    """Task priority levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class TaskStatus(str, Enum):
    """Task status for tracking completion."""

    PENDING = "pending"
    IN_PROGRESS = "inprogress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


def _enum_column(enum_cls: type, name: str) -> SAEnum:
    # Stored as VARCHAR holding the lowercase value, so raw filter clauses
    # can compare against plain strings.
    return SAEnum(
        enum_cls,
        name=name,
        native_enum=False,
        length=20,
        values_callable=lambda members: [member.value for member in members],
    )


class Task(Base):
    """
    Task table - the only persistent entity of the service.

    ``completed_at`` is stamped whenever the status moves to completed and is
    kept if the task is later moved back to another status.
    """

    __tablename__ = "tasks"
    __table_args__ = (
        Index("ix_tasks_user_id_status", "user_id", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    priority: Mapped[TaskPriority] = mapped_column(
        _enum_column(TaskPriority, "task_priority"),
        nullable=False,
        default=TaskPriority.MEDIUM,
    )

    status: Mapped[TaskStatus] = mapped_column(
        _enum_column(TaskStatus, "task_status"),
        nullable=False,
        default=TaskStatus.PENDING,
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    due_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    completed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    @classmethod
    def new(cls, title: str, user_id: uuid.UUID) -> "Task":
        """Create a task with default priority/status and a fresh identity."""
        now = utc_now()
        return cls(
            id=uuid.uuid4(),
            title=title,
            description=None,
            priority=TaskPriority.MEDIUM,
            status=TaskStatus.PENDING,
            user_id=user_id,
            created_at=now,
            updated_at=now,
            due_date=None,
            completed_at=None,
        )

    def complete(self) -> None:
        """Mark task as completed."""
        now = utc_now()
        self.status = TaskStatus.COMPLETED
        self.completed_at = now
        self.updated_at = now

    def update_status(self, status: TaskStatus, now: Optional[datetime] = None) -> None:
        """Set the status, stamping completed_at when it becomes completed."""
        now = now or utc_now()
        self.status = status
        self.updated_at = now

        if status == TaskStatus.COMPLETED:
            self.completed_at = now

    def is_overdue(self) -> bool:
        if self.due_date is None or self.status == TaskStatus.COMPLETED:
            return False
        return utc_now() > ensure_utc(self.due_date)

    def age_in_days(self) -> int:
        """Whole days since creation."""
        return (utc_now() - ensure_utc(self.created_at)).days

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, title='{self.title}', status={self.status})>"

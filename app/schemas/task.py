"""
Task Pydantic schemas.

Request DTOs validate themselves and know how to turn into / merge onto a
``Task``; ``TaskQuery`` turns list filters into a WHERE fragment plus the
positional parameters bound to its ``?`` placeholders.
"""

from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.errors import ApiError
from app.models.task import Task, TaskPriority, TaskStatus
from app.utils.time import ensure_utc, utc_now

TITLE_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 2000

DEFAULT_PAGE_LIMIT = 20
MAX_PAGE_LIMIT = 100

# page and limit are unsigned 32-bit on the wire
MAX_QUERY_VALUE = 2**32 - 1

ALWAYS_TRUE_CLAUSE = "1=1"
OVERDUE_CLAUSE = "due_date < CURRENT_TIMESTAMP AND status != 'completed'"


def _check_title(title: str) -> None:
    if not title.strip():
        raise ApiError.validation("Title cannot be empty")
    if len(title) > TITLE_MAX_LENGTH:
        raise ApiError.validation(f"Title must be {TITLE_MAX_LENGTH} characters or less")


def _check_description(description: Optional[str]) -> None:
    if description is not None and len(description) > DESCRIPTION_MAX_LENGTH:
        raise ApiError.validation(f"Description must be {DESCRIPTION_MAX_LENGTH} characters or less")


def _check_due_date(due_date: Optional[datetime]) -> None:
    if due_date is not None and due_date <= utc_now():
        raise ApiError.validation("Due date must be in the future")


class CreateTaskRequest(BaseModel):
    """Schema for creating a new task."""

    title: str
    description: Optional[str] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None

    @field_validator("due_date")
    @classmethod
    def due_date_as_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value)

    def validate(self) -> None:
        """Raise a validation ApiError on the first failed check."""
        _check_title(self.title)
        _check_description(self.description)
        _check_due_date(self.due_date)

    def into_task(self, user_id: UUID) -> Task:
        """Build a new Task owned by ``user_id``."""
        task = Task.new(self.title, user_id)
        task.description = self.description
        task.priority = self.priority or TaskPriority.MEDIUM
        task.due_date = self.due_date
        return task


class UpdateTaskRequest(BaseModel):
    """Schema for updating a task. All fields optional; absent fields are left untouched."""

    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[TaskPriority] = None
    status: Optional[TaskStatus] = None
    due_date: Optional[datetime] = None

    @field_validator("due_date")
    @classmethod
    def due_date_as_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value)

    def validate(self) -> None:
        """Validate only the fields that are present."""
        if self.title is not None:
            _check_title(self.title)
        _check_description(self.description)
        _check_due_date(self.due_date)

    def apply_to_task(self, task: Task) -> None:
        """
        Merge the present fields onto ``task`` in place.

        Expects ``validate()`` to have passed; nothing is re-checked here.
        """
        now = utc_now()

        if self.title is not None:
            task.title = self.title
        if self.description is not None:
            task.description = self.description
        if self.priority is not None:
            task.priority = self.priority
        if self.status is not None:
            task.update_status(self.status, now=now)
        if self.due_date is not None:
            task.due_date = self.due_date

        task.updated_at = now


class TaskQuery(BaseModel):
    """Query parameters for filtering and paginating tasks."""

    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    user_id: Optional[UUID] = None
    overdue: Optional[bool] = None
    page: Optional[int] = Field(default=None, ge=0, le=MAX_QUERY_VALUE)
    limit: Optional[int] = Field(default=None, ge=0, le=MAX_QUERY_VALUE)

    def build_where_clause(self) -> Tuple[str, List[str]]:
        """
        Build the SQL WHERE fragment for the present filters.

        Predicates are AND-joined in the order status, priority, user_id,
        overdue. Each ``?`` placeholder has exactly one entry in the returned
        parameter list, in the same position. With no filters the clause is
        always true so callers can AND it unconditionally.
        """
        conditions: List[str] = []
        params: List[str] = []

        if self.status is not None:
            conditions.append("status = ?")
            params.append(self.status.value)

        if self.priority is not None:
            conditions.append("priority = ?")
            params.append(self.priority.value)

        if self.user_id is not None:
            conditions.append("user_id = ?")
            params.append(str(self.user_id))

        if self.overdue:
            conditions.append(OVERDUE_CLAUSE)

        if not conditions:
            return ALWAYS_TRUE_CLAUSE, params
        return " AND ".join(conditions), params

    def get_page(self) -> int:
        return max(self.page or 1, 1)

    def get_limit(self) -> int:
        """Page size, capped at 100."""
        limit = DEFAULT_PAGE_LIMIT if self.limit is None else self.limit
        return min(limit, MAX_PAGE_LIMIT)

    def get_offset(self) -> int:
        return (self.get_page() - 1) * self.get_limit()


class TaskRead(BaseModel):
    """Schema for reading task data (API response)."""

    id: UUID
    title: str
    description: Optional[str] = None
    priority: TaskPriority
    status: TaskStatus
    user_id: UUID
    created_at: datetime
    updated_at: datetime
    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    # This tells Pydantic to work with SQLAlchemy models
    model_config = ConfigDict(from_attributes=True)


class TaskListResponse(BaseModel):
    """Paginated task list."""

    tasks: List[TaskRead]
    total: int
    page: int
    limit: int

"""
Schemas package.

Import all schemas here for easy access.
"""

from app.schemas.task import (
    CreateTaskRequest,
    TaskListResponse,
    TaskQuery,
    TaskRead,
    UpdateTaskRequest,
)

__all__ = [
    "CreateTaskRequest",
    "TaskListResponse",
    "TaskQuery",
    "TaskRead",
    "UpdateTaskRequest",
]

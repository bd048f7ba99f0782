"""
Task business logic service.
"""

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import ApiError
from app.models.task import Task
from app.repositories.task_repository import TaskRepository
from app.schemas.task import CreateTaskRequest, TaskQuery, UpdateTaskRequest

logger = logging.getLogger(__name__)


class TaskService:
    """Service for task business logic."""

    def __init__(self, db: Optional[AsyncSession] = None, repository: Optional[TaskRepository] = None):
        if repository is None:
            if db is None:
                raise ValueError("TaskService needs either a session or a repository")
            repository = TaskRepository(db)
        self.repository = repository

    async def list_with_filters(self, query: TaskQuery) -> Tuple[List[Task], int]:
        """List tasks with filters; returns the page and the total match count."""
        return await self.repository.list(query)

    async def get_by_id(self, task_id: UUID) -> Task:
        """Get a task by ID or raise NOT_FOUND."""
        task = await self.repository.get_by_id(task_id)
        if task is None:
            raise ApiError.not_found("Task")
        return task

    async def create(self, user_id: UUID, data: CreateTaskRequest) -> Task:
        """Validate and create a new task owned by ``user_id``."""
        data.validate()
        task = await self.repository.add(data.into_task(user_id))
        await self.repository.commit()
        logger.info("Created task %s for user %s", task.id, user_id)
        return task

    async def update(self, task_id: UUID, data: UpdateTaskRequest) -> Task:
        """Validate and apply a partial update."""
        data.validate()
        task = await self.get_by_id(task_id)
        data.apply_to_task(task)
        task = await self.repository.save(task)
        await self.repository.commit()
        logger.info("Updated task %s", task_id)
        return task

    async def complete(self, task_id: UUID) -> Task:
        """Mark a task as completed."""
        task = await self.get_by_id(task_id)
        task.complete()
        task = await self.repository.save(task)
        await self.repository.commit()
        logger.info("Completed task %s", task_id)
        return task

    async def delete(self, task_id: UUID) -> None:
        """Delete a task or raise NOT_FOUND."""
        if not await self.repository.delete(task_id):
            raise ApiError.not_found("Task")
        await self.repository.commit()
        logger.info("Deleted task %s", task_id)

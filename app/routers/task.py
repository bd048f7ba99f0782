"""
Task router - API endpoints for tasks.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from app.core.dependencies import get_current_user_id, get_task_service
from app.models.task import TaskPriority, TaskStatus
from app.schemas.task import (
    MAX_QUERY_VALUE,
    CreateTaskRequest,
    TaskListResponse,
    TaskQuery,
    TaskRead,
    UpdateTaskRequest,
)
from app.services.task_service import TaskService

router = APIRouter(
    prefix="/tasks",
    tags=["tasks"],
    dependencies=[Depends(get_current_user_id)],
)


@router.get("", response_model=TaskListResponse)
async def list_tasks(
    service: TaskService = Depends(get_task_service),
    status: Optional[TaskStatus] = None,
    priority: Optional[TaskPriority] = None,
    user_id: Optional[UUID] = None,
    overdue: Optional[bool] = None,
    page: Optional[int] = Query(None, ge=0, le=MAX_QUERY_VALUE),
    limit: Optional[int] = Query(None, ge=0, le=MAX_QUERY_VALUE),
):
    """
    List tasks with pagination and filters.

    Filters: status, priority, user_id, overdue.
    ``limit`` defaults to 20 and is capped at 100; ``page`` is 1-based.
    """
    query = TaskQuery(
        status=status,
        priority=priority,
        user_id=user_id,
        overdue=overdue,
        page=page,
        limit=limit,
    )
    tasks, total = await service.list_with_filters(query)
    return TaskListResponse(
        tasks=[TaskRead.model_validate(task) for task in tasks],
        total=total,
        page=query.get_page(),
        limit=query.get_limit(),
    )


@router.get("/{task_id}", response_model=TaskRead)
async def get_task(
    task_id: UUID,
    service: TaskService = Depends(get_task_service),
):
    """Get a task by ID."""
    return await service.get_by_id(task_id)


@router.post("", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
async def create_task(
    data: CreateTaskRequest,
    user_id: UUID = Depends(get_current_user_id),
    service: TaskService = Depends(get_task_service),
):
    """Create a new task owned by the calling user."""
    return await service.create(user_id, data)


@router.put("/{task_id}", response_model=TaskRead)
async def update_task(
    task_id: UUID,
    data: UpdateTaskRequest,
    service: TaskService = Depends(get_task_service),
):
    """Update a task. Only the fields present in the body are changed."""
    return await service.update(task_id, data)


@router.post("/{task_id}/complete", response_model=TaskRead)
async def complete_task(
    task_id: UUID,
    service: TaskService = Depends(get_task_service),
):
    """Mark a task as completed."""
    return await service.complete(task_id)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: UUID,
    service: TaskService = Depends(get_task_service),
):
    """Delete a task."""
    await service.delete(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""
FastAPI dependencies for the application.
"""

from uuid import UUID

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.errors import ApiError
from app.services.task_service import TaskService


async def get_current_user_id(x_user_id: str = Header(None)) -> UUID:
    """
    Extract the calling user's id from the X-User-ID header.

    Raises 401 if the header is missing or is not a UUID.
    """
    if not x_user_id:
        raise ApiError.unauthorized("X-User-ID header is required")
    try:
        return UUID(x_user_id)
    except ValueError:
        raise ApiError.unauthorized("X-User-ID header must be a valid UUID") from None


async def get_task_service(db: AsyncSession = Depends(get_db)) -> TaskService:
    """Dependency to get a TaskService bound to the request's session."""
    return TaskService(db)

"""
Task repository - database operations for Task.
"""

from typing import Dict, List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import delete, func, select, text
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.task import Task
from app.schemas.task import TaskQuery


def bind_positional(clause: str, params: Sequence[str]) -> Tuple[str, Dict[str, str]]:
    """
    Rewrite each ``?`` placeholder as a named bind parameter.

    ``params[i]`` is bound to the i-th placeholder, so the clause can be passed
    to ``text()`` whatever the driver's native paramstyle is.
    """
    parts = clause.split("?")
    if len(parts) - 1 != len(params):
        raise ValueError(
            f"Clause has {len(parts) - 1} placeholders but {len(params)} parameters were given"
        )

    sql = parts[0]
    binds: Dict[str, str] = {}
    for index, (value, rest) in enumerate(zip(params, parts[1:])):
        name = f"p{index}"
        sql += f":{name}{rest}"
        binds[name] = value
    return sql, binds


class TaskRepository:
    """Repository for Task database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(self, query: TaskQuery) -> Tuple[List[Task], int]:
        """Return one page of tasks matching ``query`` and the total match count."""
        clause, params = query.build_where_clause()
        sql, binds = bind_positional(clause, params)

        count_stmt = select(func.count()).select_from(Task).where(text(sql))
        total = (await self.db.execute(count_stmt, binds)).scalar_one()

        stmt = (
            select(Task)
            .where(text(sql))
            .order_by(Task.created_at.desc())
            .limit(query.get_limit())
            .offset(query.get_offset())
        )
        result = await self.db.execute(stmt, binds)
        return list(result.scalars().all()), total

    async def get_by_id(self, task_id: UUID) -> Optional[Task]:
        """Get a task by ID."""
        result = await self.db.execute(select(Task).where(Task.id == task_id))
        return result.scalar_one_or_none()

    async def add(self, task: Task) -> Task:
        """Persist a new task."""
        self.db.add(task)
        await self.db.flush()
        await self.db.refresh(task)
        return task

    async def save(self, task: Task) -> Task:
        """Flush pending changes made to a loaded task."""
        await self.db.flush()
        await self.db.refresh(task)
        return task

    async def delete(self, task_id: UUID) -> bool:
        """Delete a task; False when no row matched."""
        result = await self.db.execute(delete(Task).where(Task.id == task_id))
        return result.rowcount > 0

    async def commit(self) -> None:
        await self.db.commit()

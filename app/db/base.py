"""
SQLAlchemy declarative base.

All task-service tables inherit from this Base class so Alembic can
discover them through ``Base.metadata``.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass

"""
SQLAlchemy declarative base and the mixins shared by the snapshot tables.

All SQLAlchemy models should inherit from Base.
"""
from datetime import datetime
from sqlalchemy import DateTime, Integer, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Usage:
        from usermgmt.core.database.base import Base, PositionMixin

        class RoleRecord(Base, PositionMixin):
            __tablename__ = "roles"

            id: Mapped[str] = mapped_column(String(64), primary_key=True)
            name: Mapped[str] = mapped_column(String(50))
    """
    pass


class TimestampMixin:
    """
    created_at / updated_at columns.

    The snapshot carries its own timestamps, so values written by the store
    override the server defaults.
    """
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class PositionMixin:
    """
    Index of the row inside its snapshot collection.

    Snapshot collections are ordered tuples; load_state sorts on this column
    to give them back in the order they were saved.
    """
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

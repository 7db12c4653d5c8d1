"""
Role table.
"""
from typing import Any, Dict
from sqlalchemy import Boolean, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from usermgmt.core.database.base import Base, PositionMixin, TimestampMixin
from usermgmt.utils import generate_ulid


class RoleRecord(Base, TimestampMixin, PositionMixin):
    """
    Stored role.

    The grid is kept as JSON: {"projects": {"create": true, ...}, ...}
    """
    __tablename__ = "roles"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=generate_ulid)
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    is_system: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    permissions: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    def __repr__(self) -> str:
        return f"<RoleRecord(id={self.id}, name={self.name!r}, system={self.is_system})>"

"""
Entity hierarchy table (adjacency list).
"""
from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from usermgmt.core.database.base import Base, PositionMixin


class EntityRecord(Base, PositionMixin):
    __tablename__ = "entities"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    type: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    parent_id: Mapped[str | None] = mapped_column(
        String(64),
        ForeignKey("entities.id", ondelete="CASCADE"),
        nullable=True,
        index=True
    )

    def __repr__(self) -> str:
        return f"<EntityRecord(id={self.id}, type={self.type}, parent_id={self.parent_id})>"

"""
Group table and the user-group association table.
"""
from sqlalchemy import Column, ForeignKey, Integer, String, Table, Text
from sqlalchemy.orm import Mapped, mapped_column

from usermgmt.core.database.base import Base, PositionMixin, TimestampMixin
from usermgmt.utils import generate_ulid


# User-Group membership
# member_position orders UserGroup.member_ids, group_position orders User.group_ids
group_members = Table(
    "group_members",
    Base.metadata,
    Column("group_id", String(64), ForeignKey("user_groups.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", String(64), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("member_position", Integer, nullable=False, default=0),
    Column("group_position", Integer, nullable=False, default=0),
)


class GroupRecord(Base, TimestampMixin, PositionMixin):
    """Stored user group."""
    __tablename__ = "user_groups"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=generate_ulid)
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    def __repr__(self) -> str:
        return f"<GroupRecord(id={self.id}, name={self.name!r})>"

"""
User table.
"""
from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from usermgmt.core.database.base import Base, PositionMixin, TimestampMixin
from usermgmt.utils import generate_ulid


class UserRecord(Base, TimestampMixin, PositionMixin):
    """
    Stored user.

    Group membership lives in the group_members association table; both
    User.group_ids and UserGroup.member_ids are rebuilt from it on load.
    """
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=generate_ulid)

    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    function: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    role_id: Mapped[str] = mapped_column(String(64), ForeignKey("roles.id"), nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<UserRecord(id={self.id}, email={self.email!r}, role_id={self.role_id})>"

"""
Group permission override table.
"""
from typing import Any, Dict, List
from sqlalchemy import ForeignKey, JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from usermgmt.core.database.base import Base, PositionMixin, TimestampMixin
from usermgmt.utils import generate_ulid


class GroupPermissionOverrideRecord(Base, TimestampMixin, PositionMixin):
    """
    Stored group override.

    Examples:
    - scope="all", permissions={"create": true}
    - scope="specific", specific_entity_ids=["project-1-design-1"], permissions={"delete": false}

    Rows are removed with their group (ondelete CASCADE).
    """
    __tablename__ = "group_permission_overrides"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=generate_ulid)

    group_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("user_groups.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    entity_type: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    scope: Mapped[str] = mapped_column(String(16), nullable=False, default="all")
    specific_entity_ids: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    # Partial set: only the actions the override speaks to are present
    permissions: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    def __repr__(self) -> str:
        return (
            f"<GroupPermissionOverrideRecord(id={self.id}, group_id={self.group_id}, "
            f"entity_type={self.entity_type}, scope={self.scope})>"
        )

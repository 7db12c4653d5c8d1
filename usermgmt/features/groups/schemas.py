"""
Pydantic schemas for user groups.
"""
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator

from usermgmt.utils import as_utc, generate_ulid, utcnow


class UserGroup(BaseModel):
    """Group of users. member_ids mirrors User.group_ids."""
    id: str = Field(default_factory=generate_ulid)
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field("", max_length=1000)
    member_ids: tuple[str, ...] = ()
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    @field_validator("created_at", "updated_at")
    @classmethod
    def normalize_utc(cls, v: datetime) -> datetime:
        return as_utc(v)

"""
Pydantic schemas for users.
"""
from datetime import datetime
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from usermgmt.utils import as_utc, generate_ulid, utcnow


class User(BaseModel):
    """
    A user with exactly one role and any number of groups.

    group_ids is a denormalized mirror of UserGroup.member_ids; the state
    mutations keep both sides in step.
    """
    id: str = Field(default_factory=generate_ulid)
    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    function: str = Field(..., min_length=1, max_length=255, description="Job function/title")
    role_id: str = Field(..., min_length=1)
    group_ids: tuple[str, ...] = ()
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    @field_validator("created_at", "updated_at")
    @classmethod
    def normalize_utc(cls, v: datetime) -> datetime:
        return as_utc(v)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

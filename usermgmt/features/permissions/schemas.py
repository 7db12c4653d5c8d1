"""
Pydantic schemas for permission sets and group permission overrides.

A complete PermissionSet carries all four CRUD actions and is used for role
defaults and resolved results. A PartialPermissionSet only carries the
actions an override speaks to; an absent action (None) leaves the inherited
value alone, an explicit False is a real value.
"""
import enum
from datetime import datetime
from typing import Iterator

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from usermgmt.features.entities.schemas import EntityType
from usermgmt.utils import as_utc, generate_ulid, utcnow


class PermissionAction(str, enum.Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


class PermissionSet(BaseModel):
    """Complete CRUD grant. Every action is always present."""
    create: bool = False
    read: bool = False
    update: bool = False
    delete: bool = False

    model_config = ConfigDict(frozen=True)

    @classmethod
    def none(cls) -> "PermissionSet":
        return cls()

    @classmethod
    def full(cls) -> "PermissionSet":
        return cls(create=True, read=True, update=True, delete=True)

    @classmethod
    def read_only(cls) -> "PermissionSet":
        return cls(read=True)

    def allows(self, action: PermissionAction | str) -> bool:
        return getattr(self, PermissionAction(action).value)

    def granted_actions(self) -> list[PermissionAction]:
        return [action for action in PermissionAction if self.allows(action)]

    def any_granted(self) -> bool:
        return bool(self.granted_actions())


class PartialPermissionSet(BaseModel):
    """Override payload. None means "not specified"."""
    create: bool | None = None
    read: bool | None = None
    update: bool | None = None
    delete: bool | None = None

    model_config = ConfigDict(frozen=True)

    def present_actions(self) -> Iterator[tuple[PermissionAction, bool]]:
        """Yield (action, value) for every action this set speaks to."""
        for action in PermissionAction:
            value = getattr(self, action.value)
            if value is not None:
                yield action, value

    def is_empty(self) -> bool:
        return next(self.present_actions(), None) is None

    def grants_any(self) -> bool:
        return any(value for _, value in self.present_actions())


class OverrideScope(str, enum.Enum):
    """Whether an override covers every instance of a type or an enumerated subset."""
    ALL = "all"
    SPECIFIC = "specific"


class GroupPermissionOverride(BaseModel):
    """
    Group-scoped adjustment of CRUD permissions on one entity type.

    With scope "all", specific_entity_ids is cleared on construction.
    """
    id: str = Field(default_factory=generate_ulid)
    group_id: str = Field(..., min_length=1)
    entity_type: EntityType
    scope: OverrideScope = OverrideScope.ALL
    specific_entity_ids: tuple[str, ...] = ()
    permissions: PartialPermissionSet = Field(default_factory=PartialPermissionSet)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def drop_ids_for_all_scope(cls, data):
        if isinstance(data, dict) and data.get("scope", OverrideScope.ALL) in (OverrideScope.ALL, "all"):
            data = {**data, "specific_entity_ids": ()}
        return data

    @field_validator("created_at", "updated_at")
    @classmethod
    def normalize_utc(cls, v: datetime) -> datetime:
        """Stored in UTC so (created_at, id) ordering survives a store round trip."""
        return as_utc(v)

    def applies_to(self, entity_id: str | None) -> bool:
        """True when this is a specific override naming entity_id."""
        if entity_id is None or self.scope != OverrideScope.SPECIFIC:
            return False
        return entity_id in self.specific_entity_ids


class EntityPermissionRow(BaseModel):
    """One row of a user's effective permission grid."""
    entity_type: EntityType
    label: str
    level: int
    permissions: PermissionSet


class PermissionPreview(BaseModel):
    """Effective permissions for one user, with the context shown next to them."""
    user_id: str
    user_name: str
    role_name: str
    group_names: list[str] = []
    rows: list[EntityPermissionRow] = []

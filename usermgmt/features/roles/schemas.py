"""
Pydantic schemas for the role registry.
"""
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator

from usermgmt.features.entities.schemas import EntityType
from usermgmt.features.permissions.schemas import PermissionSet
from usermgmt.utils import as_utc, generate_ulid, utcnow


class Role(BaseModel):
    """
    A named role with a complete permission grid.

    Entity types missing from the input grid are filled with an all-false
    set, so every role covers the whole EntityType enumeration.
    """
    id: str = Field(default_factory=generate_ulid)
    name: str = Field(..., min_length=1, max_length=50)
    description: str = Field("", max_length=1000)
    is_system: bool = False
    permissions: dict[EntityType, PermissionSet] = Field(default_factory=dict, validate_default=True)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    @field_validator("permissions")
    @classmethod
    def complete_grid(cls, v: dict[EntityType, PermissionSet]) -> dict[EntityType, PermissionSet]:
        """Give every entity type an entry, in enumeration order."""
        return {entity_type: v.get(entity_type, PermissionSet.none()) for entity_type in EntityType}

    @field_validator("created_at", "updated_at")
    @classmethod
    def normalize_utc(cls, v: datetime) -> datetime:
        return as_utc(v)

    def permissions_for(self, entity_type: EntityType) -> PermissionSet:
        return self.permissions.get(entity_type, PermissionSet.none())

    def grants_anything(self) -> bool:
        return any(permission_set.any_granted() for permission_set in self.permissions.values())


def uniform_grid(permission_set: PermissionSet, **overrides: PermissionSet) -> dict[EntityType, PermissionSet]:
    """
    Build a grid with one set for every entity type.

    Keyword arguments replace the set for single types, keyed by EntityType value:
        uniform_grid(PermissionSet.full(), user_management=PermissionSet.read_only())
    """
    grid = {entity_type: permission_set for entity_type in EntityType}
    for key, value in overrides.items():
        grid[EntityType(key)] = value
    return grid

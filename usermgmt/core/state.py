"""
Immutable application snapshot.

Every caller action produces a new AppState through the feature services;
the resolver reads one snapshot per call and never sees a half-applied
change.
"""
from pydantic import BaseModel, ConfigDict

from usermgmt.core.errors import NotFoundError
from usermgmt.features.entities.schemas import Entity
from usermgmt.features.groups.schemas import UserGroup
from usermgmt.features.permissions.schemas import GroupPermissionOverride
from usermgmt.features.roles.schemas import Role
from usermgmt.features.users.schemas import User


class AppState(BaseModel):
    users: tuple[User, ...] = ()
    groups: tuple[UserGroup, ...] = ()
    roles: tuple[Role, ...] = ()
    entities: tuple[Entity, ...] = ()
    permission_overrides: tuple[GroupPermissionOverride, ...] = ()

    model_config = ConfigDict(frozen=True)

    def find_user(self, user_id: str) -> User | None:
        return next((user for user in self.users if user.id == user_id), None)

    def find_group(self, group_id: str) -> UserGroup | None:
        return next((group for group in self.groups if group.id == group_id), None)

    def find_role(self, role_id: str) -> Role | None:
        return next((role for role in self.roles if role.id == role_id), None)

    def find_override(self, override_id: str) -> GroupPermissionOverride | None:
        return next((override for override in self.permission_overrides if override.id == override_id), None)

    def get_user(self, user_id: str) -> User:
        user = self.find_user(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    def get_group(self, group_id: str) -> UserGroup:
        group = self.find_group(group_id)
        if group is None:
            raise NotFoundError("Group", group_id)
        return group

    def get_role(self, role_id: str) -> Role:
        role = self.find_role(role_id)
        if role is None:
            raise NotFoundError("Role", role_id)
        return role

    def get_override(self, override_id: str) -> GroupPermissionOverride:
        override = self.find_override(override_id)
        if override is None:
            raise NotFoundError("Permission override", override_id)
        return override

    def users_with_role(self, role_id: str) -> list[User]:
        return [user for user in self.users if user.role_id == role_id]

    def overrides_for_group(self, group_id: str) -> list[GroupPermissionOverride]:
        return [override for override in self.permission_overrides if override.group_id == group_id]

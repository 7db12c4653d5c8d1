"""
Role registry mutations.

Rules:
- role names are unique, compared case-insensitively after trimming
- a role must grant at least one action somewhere in its grid
- system roles keep their id, name and system flag, and cannot be deleted
- a role still assigned to users can only be deleted together with a
  reassignment of those users to a replacement role
"""
from usermgmt.core.errors import (
    DuplicateNameError,
    NotFoundError,
    RoleInUseError,
    SystemRoleError,
    ValidationFailedError,
)
from usermgmt.core.state import AppState
from usermgmt.features.roles.schemas import Role
from usermgmt.utils import get_logger, utcnow


log = get_logger(__name__)


def _check_role(state: AppState, role: Role) -> Role:
    name = role.name.strip()
    if not name:
        raise ValidationFailedError("name", "Role name is required")
    if any(r.id != role.id and r.name.strip().lower() == name.lower() for r in state.roles):
        raise DuplicateNameError("Role", name)
    if not role.grants_anything():
        raise ValidationFailedError("permissions", "At least one permission must be granted")
    return role.model_copy(update={"name": name})


def add_role(state: AppState, role: Role) -> AppState:
    """Register a custom role. The system flag is always cleared."""
    if state.find_role(role.id) is not None:
        raise ValidationFailedError("id", f"Role already exists: {role.id}")
    role = _check_role(state, role).model_copy(update={"is_system": False})

    log.info(f"Adding role {role.id} ({role.name!r})")
    return state.model_copy(update={"roles": state.roles + (role,)})


def update_role(state: AppState, role: Role) -> AppState:
    """Full replace keyed by id. System roles may only change description and grid."""
    existing = state.get_role(role.id)
    if existing.is_system and role.name.strip() != existing.name:
        raise SystemRoleError(role.id, f"System role cannot be renamed: {existing.name}")

    role = _check_role(state, role).model_copy(update={
        "is_system": existing.is_system,
        "created_at": existing.created_at,
        "updated_at": utcnow(),
    })

    log.info(f"Updating role {role.id}")
    return state.model_copy(update={
        "roles": tuple(role if r.id == role.id else r for r in state.roles),
    })


def delete_role(state: AppState, role_id: str, replacement_role_id: str | None = None) -> AppState:
    """
    Delete a custom role, reassigning its users to replacement_role_id.

    Raises:
        SystemRoleError: the role is a system role
        RoleInUseError: users still hold the role and no replacement was given
        NotFoundError: the role or the replacement does not exist
        ValidationFailedError: the replacement is the role being deleted
    """
    role = state.get_role(role_id)
    if role.is_system:
        raise SystemRoleError(role_id)

    affected = state.users_with_role(role_id)
    users = state.users
    if affected:
        if replacement_role_id is None:
            raise RoleInUseError(role_id, len(affected))
        if replacement_role_id == role_id:
            raise ValidationFailedError("replacement_role_id", "Replacement role must differ from the deleted role")
        if state.find_role(replacement_role_id) is None:
            raise NotFoundError("Role", replacement_role_id)

        now = utcnow()
        users = tuple(
            u.model_copy(update={"role_id": replacement_role_id, "updated_at": now}) if u.role_id == role_id else u
            for u in state.users
        )
        log.info(f"Reassigning {len(affected)} user(s) from role {role_id} to {replacement_role_id}")

    log.info(f"Deleting role {role_id} ({role.name!r})")
    return state.model_copy(update={
        "roles": tuple(r for r in state.roles if r.id != role_id),
        "users": users,
    })

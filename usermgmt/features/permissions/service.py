"""
Permission override mutations and the effective-permission preview.
"""
from usermgmt.core.errors import NotFoundError, ValidationFailedError
from usermgmt.core.state import AppState
from usermgmt.features.entities.schemas import EntityType
from usermgmt.features.entities.tree import find_entity
from usermgmt.features.permissions.resolver import resolve_all_permissions
from usermgmt.features.permissions.schemas import (
    EntityPermissionRow,
    GroupPermissionOverride,
    OverrideScope,
    PermissionPreview,
)
from usermgmt.utils import get_logger, utcnow


log = get_logger(__name__)


# ============================================================================
# Override Validation
# ============================================================================

def _check_override(state: AppState, override: GroupPermissionOverride) -> GroupPermissionOverride:
    """
    Validate an override against the snapshot.

    - the group must exist
    - at least one action must be specified
    - "specific" scope needs a non-empty list of entities of the override's type
    """
    if state.find_group(override.group_id) is None:
        raise NotFoundError("Group", override.group_id)
    if override.permissions.is_empty():
        raise ValidationFailedError("permissions", "Override must specify at least one action")

    if override.scope == OverrideScope.ALL:
        return override.model_copy(update={"specific_entity_ids": ()})

    entity_ids = tuple(dict.fromkeys(override.specific_entity_ids))
    if not entity_ids:
        raise ValidationFailedError("specific_entity_ids", "Specific scope requires at least one entity")
    for entity_id in entity_ids:
        entity = find_entity(state.entities, entity_id)
        if entity is None:
            raise NotFoundError("Entity", entity_id)
        if entity.type != override.entity_type:
            raise ValidationFailedError(
                "specific_entity_ids",
                f"Entity {entity_id} is a {entity.type.value}, not a {override.entity_type.value}",
            )
    return override.model_copy(update={"specific_entity_ids": entity_ids})


# ============================================================================
# Override Operations
# ============================================================================

def add_override(state: AppState, override: GroupPermissionOverride) -> AppState:
    if state.find_override(override.id) is not None:
        raise ValidationFailedError("id", f"Permission override already exists: {override.id}")
    override = _check_override(state, override)

    log.info(
        f"Adding {override.scope.value} override {override.id} for group {override.group_id} "
        f"on {override.entity_type.value}"
    )
    return state.model_copy(update={"permission_overrides": state.permission_overrides + (override,)})


def update_override(state: AppState, override: GroupPermissionOverride) -> AppState:
    """Full replace keyed by id. Position and creation time are kept."""
    existing = state.get_override(override.id)
    override = _check_override(state, override).model_copy(update={
        "created_at": existing.created_at,
        "updated_at": utcnow(),
    })

    log.info(f"Updating override {override.id}")
    return state.model_copy(update={
        "permission_overrides": tuple(
            override if o.id == override.id else o for o in state.permission_overrides
        ),
    })


def delete_override(state: AppState, override_id: str) -> AppState:
    state.get_override(override_id)

    log.info(f"Deleting override {override_id}")
    return state.model_copy(update={
        "permission_overrides": tuple(o for o in state.permission_overrides if o.id != override_id),
    })


# ============================================================================
# Preview
# ============================================================================

def build_permission_preview(state: AppState, user_id: str) -> PermissionPreview:
    """
    Effective permission grid of a user with role and group names.

    A dangling role shows as "Unknown"; group ids without a group are skipped.
    """
    user = state.get_user(user_id)
    role = state.find_role(user.role_id)
    grid = resolve_all_permissions(user, state.permission_overrides, state.roles)

    group_names = []
    for group_id in user.group_ids:
        group = state.find_group(group_id)
        if group is not None:
            group_names.append(group.name)

    return PermissionPreview(
        user_id=user.id,
        user_name=user.full_name,
        role_name=role.name if role is not None else "Unknown",
        group_names=group_names,
        rows=[
            EntityPermissionRow(
                entity_type=entity_type,
                label=entity_type.label,
                level=entity_type.level,
                permissions=grid[entity_type],
            )
            for entity_type in EntityType
        ],
    )

"""
Effective permission resolution.

A user's effective permission on an entity type is computed fresh on every
call from a snapshot supplied by the caller:

1. Start with the role default for the user's role (all-false when the role
   or the entity type is unknown).
2. Collect the overrides of the user's groups that target the entity type.
3. Apply every "all"-scoped override as an OR-union per present action.
   These can only add.
4. Apply every "specific"-scoped override naming the queried entity as a
   direct overwrite per present action. These can grant and revoke, and run
   last so they have the final say.

Specific overrides are applied in ascending (created_at, id) order, so when
two groups disagree about the same entity the most recently created
override wins, independent of storage order.

Nothing here raises: unknown references degrade to least privilege.
"""
from collections.abc import Callable, Iterable, Sequence
from datetime import datetime

from usermgmt.features.entities.schemas import EntityType
from usermgmt.features.permissions.schemas import (
    GroupPermissionOverride,
    OverrideScope,
    PartialPermissionSet,
    PermissionAction,
    PermissionSet,
)
from usermgmt.features.roles.schemas import Role
from usermgmt.features.users.schemas import User
from usermgmt.utils import get_logger


log = get_logger(__name__)

MergeStrategy = Callable[[PermissionSet, PartialPermissionSet], PermissionSet]


# ============================================================================
# Merge Strategies
# ============================================================================

def union_merge(effective: PermissionSet, override: PartialPermissionSet) -> PermissionSet:
    """OR each present action into the effective set."""
    changes = {
        action.value: effective.allows(action) or value
        for action, value in override.present_actions()
    }
    return effective.model_copy(update=changes) if changes else effective


def overwrite_merge(effective: PermissionSet, override: PartialPermissionSet) -> PermissionSet:
    """Replace each present action in the effective set."""
    changes = {action.value: value for action, value in override.present_actions()}
    return effective.model_copy(update=changes) if changes else effective


MERGE_STRATEGIES: dict[OverrideScope, MergeStrategy] = {
    OverrideScope.ALL: union_merge,
    OverrideScope.SPECIFIC: overwrite_merge,
}

# Two-phase pass: additive grants first, instance-level control last
SCOPE_ORDER: tuple[OverrideScope, ...] = (OverrideScope.ALL, OverrideScope.SPECIFIC)


# ============================================================================
# Role Defaults
# ============================================================================

def get_role_defaults(
    role_id: str,
    entity_type: EntityType,
    roles: Iterable[Role],
) -> PermissionSet:
    """Role's grant on an entity type, or all-false when either is unknown."""
    for role in roles:
        if role.id == role_id:
            return role.permissions_for(entity_type)
    log.debug(f"Role {role_id} not found - no base permissions on {entity_type.value}")
    return PermissionSet.none()


# ============================================================================
# Override Selection
# ============================================================================

def _override_sort_key(override: GroupPermissionOverride) -> tuple[datetime, str]:
    return (override.created_at, override.id)


def select_overrides(
    user: User,
    entity_type: EntityType,
    entity_id: str | None,
    overrides: Iterable[GroupPermissionOverride],
) -> dict[OverrideScope, list[GroupPermissionOverride]]:
    """
    Partition the overrides that apply to a user on one entity type by scope.

    Specific overrides are only selected when entity_id is given and listed in
    the override; they come back sorted for deterministic application.
    """
    selected: dict[OverrideScope, list[GroupPermissionOverride]] = {scope: [] for scope in SCOPE_ORDER}
    group_ids = set(user.group_ids)
    if not group_ids:
        return selected

    for override in overrides:
        if override.group_id not in group_ids or override.entity_type != entity_type:
            continue
        if override.scope == OverrideScope.ALL:
            selected[OverrideScope.ALL].append(override)
        elif override.applies_to(entity_id):
            selected[OverrideScope.SPECIFIC].append(override)

    selected[OverrideScope.SPECIFIC].sort(key=_override_sort_key)
    return selected


# ============================================================================
# Resolution
# ============================================================================

def resolve_permissions(
    user: User,
    entity_type: EntityType,
    entity_id: str | None,
    overrides: Sequence[GroupPermissionOverride],
    roles: Sequence[Role],
) -> PermissionSet:
    """
    Resolve the effective permission set of a user on an entity type.

    Args:
        user: The user to resolve for
        entity_type: Entity type being queried
        entity_id: Optional entity instance; enables "specific" overrides
        overrides: Every override in the system
        roles: Every role in the system

    Returns:
        The effective PermissionSet. Never raises.
    """
    base = get_role_defaults(user.role_id, entity_type, roles)

    if not user.group_ids:
        return base

    selected = select_overrides(user, entity_type, entity_id, overrides)
    if not any(selected.values()):
        return base

    effective = base
    for scope in SCOPE_ORDER:
        merge = MERGE_STRATEGIES[scope]
        for override in selected[scope]:
            effective = merge(effective, override.permissions)

    log.debug(
        f"Resolved {entity_type.value} for user {user.id} (entity={entity_id}): "
        f"{[action.value for action in effective.granted_actions()]}"
    )
    return effective


def resolve_all_permissions(
    user: User,
    overrides: Sequence[GroupPermissionOverride],
    roles: Sequence[Role],
) -> dict[EntityType, PermissionSet]:
    """
    Resolve every entity type for a user, without an entity instance.

    Only role defaults and "all"-scoped overrides can influence the result.
    """
    return {
        entity_type: resolve_permissions(user, entity_type, None, overrides, roles)
        for entity_type in EntityType
    }


def check_permission(
    user: User,
    entity_type: EntityType,
    action: PermissionAction | str,
    overrides: Sequence[GroupPermissionOverride],
    roles: Sequence[Role],
    entity_id: str | None = None,
) -> bool:
    """True if the resolved set allows the action."""
    return resolve_permissions(user, entity_type, entity_id, overrides, roles).allows(action)

"""
Group mutations.

Membership lives on both sides (UserGroup.member_ids and User.group_ids);
every operation here rewrites both in the same state transition. Deleting a
group also removes its permission overrides.
"""
from collections.abc import Iterable

from usermgmt.core.errors import NotFoundError, ValidationFailedError
from usermgmt.core.state import AppState
from usermgmt.features.groups.schemas import UserGroup
from usermgmt.features.users.schemas import User
from usermgmt.utils import get_logger, utcnow


log = get_logger(__name__)


# ============================================================================
# Membership Sync
# ============================================================================

def _dedupe(ids: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(ids))


def sync_user_into_groups(
    groups: Iterable[UserGroup],
    user_id: str,
    group_ids: Iterable[str],
) -> tuple[UserGroup, ...]:
    """Make user_id a member of exactly the given groups. Untouched groups are returned as-is."""
    wanted = set(group_ids)
    now = utcnow()
    result = []
    for group in groups:
        is_member = user_id in group.member_ids
        if group.id in wanted and not is_member:
            group = group.model_copy(update={"member_ids": group.member_ids + (user_id,), "updated_at": now})
        elif group.id not in wanted and is_member:
            group = group.model_copy(update={
                "member_ids": tuple(member for member in group.member_ids if member != user_id),
                "updated_at": now,
            })
        result.append(group)
    return tuple(result)


def sync_group_into_users(
    users: Iterable[User],
    group_id: str,
    member_ids: Iterable[str],
) -> tuple[User, ...]:
    """Make exactly the given users carry group_id in their group_ids."""
    wanted = set(member_ids)
    now = utcnow()
    result = []
    for user in users:
        has_group = group_id in user.group_ids
        if user.id in wanted and not has_group:
            user = user.model_copy(update={"group_ids": user.group_ids + (group_id,), "updated_at": now})
        elif user.id not in wanted and has_group:
            user = user.model_copy(update={
                "group_ids": tuple(gid for gid in user.group_ids if gid != group_id),
                "updated_at": now,
            })
        result.append(user)
    return tuple(result)


def _check_group(state: AppState, group: UserGroup) -> UserGroup:
    name = group.name.strip()
    if not name:
        raise ValidationFailedError("name", "Group name is required")
    for member_id in group.member_ids:
        if state.find_user(member_id) is None:
            raise NotFoundError("User", member_id)
    return group.model_copy(update={"name": name, "member_ids": _dedupe(group.member_ids)})


# ============================================================================
# Operations
# ============================================================================

def add_group(state: AppState, group: UserGroup) -> AppState:
    if state.find_group(group.id) is not None:
        raise ValidationFailedError("id", f"Group already exists: {group.id}")
    group = _check_group(state, group)

    log.info(f"Adding group {group.id} ({group.name!r}) with {len(group.member_ids)} member(s)")
    return state.model_copy(update={
        "groups": state.groups + (group,),
        "users": sync_group_into_users(state.users, group.id, group.member_ids),
    })


def update_group(state: AppState, group: UserGroup) -> AppState:
    """Full replace keyed by id. Member changes are mirrored onto users."""
    existing = state.get_group(group.id)
    group = _check_group(state, group).model_copy(update={
        "created_at": existing.created_at,
        "updated_at": utcnow(),
    })

    log.info(f"Updating group {group.id}")
    return state.model_copy(update={
        "groups": tuple(group if g.id == group.id else g for g in state.groups),
        "users": sync_group_into_users(state.users, group.id, group.member_ids),
    })


def set_group_members(state: AppState, group_id: str, member_ids: Iterable[str]) -> AppState:
    group = state.get_group(group_id)
    return update_group(state, group.model_copy(update={"member_ids": tuple(member_ids)}))


def delete_group(state: AppState, group_id: str) -> AppState:
    """Remove a group, strip it from every user and cascade-delete its overrides."""
    state.get_group(group_id)
    removed_overrides = len(state.overrides_for_group(group_id))

    log.info(f"Deleting group {group_id} and {removed_overrides} override(s)")
    return state.model_copy(update={
        "groups": tuple(g for g in state.groups if g.id != group_id),
        "users": sync_group_into_users(state.users, group_id, ()),
        "permission_overrides": tuple(
            override for override in state.permission_overrides if override.group_id != group_id
        ),
    })

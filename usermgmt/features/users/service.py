"""
User mutations.

A user must reference an existing role and existing groups; group membership
is mirrored onto UserGroup.member_ids in the same transition.
"""
from usermgmt.core.errors import NotFoundError, ValidationFailedError
from usermgmt.core.state import AppState
from usermgmt.features.groups.service import sync_user_into_groups
from usermgmt.features.users.schemas import User
from usermgmt.utils import get_logger, utcnow


log = get_logger(__name__)


def _check_user(state: AppState, user: User) -> User:
    if state.find_role(user.role_id) is None:
        raise NotFoundError("Role", user.role_id)
    for group_id in user.group_ids:
        if state.find_group(group_id) is None:
            raise NotFoundError("Group", group_id)
    return user.model_copy(update={"group_ids": tuple(dict.fromkeys(user.group_ids))})


def add_user(state: AppState, user: User) -> AppState:
    if state.find_user(user.id) is not None:
        raise ValidationFailedError("id", f"User already exists: {user.id}")
    user = _check_user(state, user)

    log.info(f"Adding user {user.id} <{user.email}> with role {user.role_id}")
    return state.model_copy(update={
        "users": state.users + (user,),
        "groups": sync_user_into_groups(state.groups, user.id, user.group_ids),
    })


def update_user(state: AppState, user: User) -> AppState:
    """Full replace keyed by id. Group changes are mirrored onto groups."""
    existing = state.get_user(user.id)
    user = _check_user(state, user).model_copy(update={
        "created_at": existing.created_at,
        "updated_at": utcnow(),
    })

    log.info(f"Updating user {user.id}")
    return state.model_copy(update={
        "users": tuple(user if u.id == user.id else u for u in state.users),
        "groups": sync_user_into_groups(state.groups, user.id, user.group_ids),
    })


def delete_user(state: AppState, user_id: str) -> AppState:
    """Remove a user and strip the id from every group."""
    state.get_user(user_id)

    log.info(f"Deleting user {user_id}")
    return state.model_copy(update={
        "users": tuple(u for u in state.users if u.id != user_id),
        "groups": sync_user_into_groups(state.groups, user_id, ()),
    })

"""Tests for user and group mutations and membership mirroring."""

from datetime import datetime, timedelta, timezone

import pytest

from usermgmt.core.errors import NotFoundError, ValidationFailedError
from usermgmt.core.seed import reset_to_seed
from usermgmt.features.entities.schemas import EntityType
from usermgmt.features.groups.schemas import UserGroup
from usermgmt.features.groups.service import (
    add_group,
    delete_group,
    set_group_members,
    update_group,
)
from usermgmt.features.permissions.service import add_override
from usermgmt.features.users.schemas import User
from usermgmt.features.users.service import add_user, delete_user, update_user


def assert_mirrors_agree(state):
    for group in state.groups:
        for member_id in group.member_ids:
            assert group.id in state.get_user(member_id).group_ids
    for user in state.users:
        for group_id in user.group_ids:
            assert user.id in state.get_group(group_id).member_ids


def test_seed_mirrors_agree(seed_state):
    assert_mirrors_agree(seed_state)
    assert seed_state.get_user("user-2").group_ids == ("group-1", "group-3")
    assert seed_state.get_user("user-5").group_ids == ("group-2",)


# ── Users ─────────────────────────────────────────────────────────

class TestAddUser:

    def test_adds_and_joins_groups(self, seed_state, user_factory):
        user = user_factory("user-9", role_id="role-user", group_ids=["group-1", "group-2"])

        state = add_user(seed_state, user)

        assert state.get_user("user-9").role_id == "role-user"
        assert "user-9" in state.get_group("group-1").member_ids
        assert "user-9" in state.get_group("group-2").member_ids
        assert "user-9" not in state.get_group("group-3").member_ids
        assert_mirrors_agree(state)

    def test_input_state_unchanged(self, seed_state, user_factory):
        before = seed_state.model_copy(deep=True)

        add_user(seed_state, user_factory("user-9", group_ids=["group-1"]))

        assert seed_state == before

    def test_unknown_role_rejected(self, seed_state, user_factory):
        with pytest.raises(NotFoundError) as exc_info:
            add_user(seed_state, user_factory("user-9", role_id="role-missing"))
        assert exc_info.value.resource == "Role"

    def test_unknown_group_rejected(self, seed_state, user_factory):
        with pytest.raises(NotFoundError):
            add_user(seed_state, user_factory("user-9", role_id="role-user", group_ids=["group-missing"]))

    def test_duplicate_id_rejected(self, seed_state, user_factory):
        with pytest.raises(ValidationFailedError):
            add_user(seed_state, user_factory("user-1", role_id="role-user"))

    def test_duplicate_group_ids_collapse(self, seed_state, user_factory):
        state = add_user(seed_state, user_factory("user-9", group_ids=["group-1", "group-1"]))

        assert state.get_user("user-9").group_ids == ("group-1",)
        assert state.get_group("group-1").member_ids.count("user-9") == 1


class TestUpdateUser:

    def test_group_change_is_mirrored(self, seed_state):
        user = seed_state.get_user("user-2")  # group-1, group-3

        state = update_user(seed_state, user.model_copy(update={"group_ids": ("group-2",)}))

        assert "user-2" not in state.get_group("group-1").member_ids
        assert "user-2" not in state.get_group("group-3").member_ids
        assert "user-2" in state.get_group("group-2").member_ids
        assert_mirrors_agree(state)

    def test_keeps_created_at(self, seed_state):
        user = seed_state.get_user("user-3")

        state = update_user(seed_state, user.model_copy(update={"function": "Lead Engineer"}))

        updated = state.get_user("user-3")
        assert updated.function == "Lead Engineer"
        assert updated.created_at == user.created_at
        assert updated.updated_at > user.updated_at

    def test_missing_user(self, seed_state, user_factory):
        with pytest.raises(NotFoundError):
            update_user(seed_state, user_factory("user-404", role_id="role-user"))


def test_delete_user_strips_memberships(seed_state):
    state = delete_user(seed_state, "user-2")

    assert state.find_user("user-2") is None
    assert all("user-2" not in group.member_ids for group in state.groups)
    assert len(state.groups) == len(seed_state.groups)
    assert_mirrors_agree(state)


def test_delete_missing_user(seed_state):
    with pytest.raises(NotFoundError):
        delete_user(seed_state, "user-404")


# ── Groups ────────────────────────────────────────────────────────

class TestGroups:

    def test_add_group_updates_members(self, seed_state):
        group = UserGroup(id="group-9", name="  Finance  ", member_ids=("user-4", "user-1"))

        state = add_group(seed_state, group)

        assert state.get_group("group-9").name == "Finance"
        assert state.get_user("user-4").group_ids == ("group-2", "group-9")
        assert "group-9" in state.get_user("user-1").group_ids
        assert_mirrors_agree(state)

    def test_add_group_with_unknown_member(self, seed_state):
        with pytest.raises(NotFoundError):
            add_group(seed_state, UserGroup(id="group-9", name="Ghosts", member_ids=("user-404",)))

    def test_add_group_duplicate_id(self, seed_state, group):
        with pytest.raises(ValidationFailedError):
            add_group(seed_state, group.model_copy(update={"id": "group-1"}))

    def test_update_group_members(self, seed_state):
        group = seed_state.get_group("group-1")  # user-2, user-3

        state = update_group(seed_state, group.model_copy(update={"member_ids": ("user-3", "user-5")}))

        assert "group-1" not in state.get_user("user-2").group_ids
        assert "group-1" in state.get_user("user-5").group_ids
        assert state.get_group("group-1").created_at == group.created_at
        assert_mirrors_agree(state)

    def test_set_group_members(self, seed_state):
        state = set_group_members(seed_state, "group-3", ["user-4", "user-4"])

        assert state.get_group("group-3").member_ids == ("user-4",)
        assert "group-3" not in state.get_user("user-1").group_ids
        assert "group-3" not in state.get_user("user-2").group_ids
        assert_mirrors_agree(state)

    def test_set_members_of_missing_group(self, seed_state):
        with pytest.raises(NotFoundError):
            set_group_members(seed_state, "group-404", [])

    def test_delete_group_cascades(self, seed_state, override_factory):
        state = add_override(seed_state, override_factory("group-1", EntityType.DESIGNS, create=True))
        state = add_override(state, override_factory("group-2", EntityType.DESIGNS, read=True))

        state = delete_group(state, "group-1")

        assert state.find_group("group-1") is None
        assert all("group-1" not in user.group_ids for user in state.users)
        assert [override.group_id for override in state.permission_overrides] == ["group-2"]
        assert_mirrors_agree(state)

    def test_delete_group_leaves_input_alone(self, seed_state):
        delete_group(seed_state, "group-2")

        assert seed_state.find_group("group-2") is not None
        assert "group-2" in seed_state.get_user("user-4").group_ids


def test_reset_to_seed_discards_changes(seed_state, user_factory):
    changed = delete_group(add_user(seed_state, user_factory("user-9")), "group-1")

    fresh = reset_to_seed()

    assert fresh == seed_state
    assert fresh != changed


def test_user_and_group_timestamps_are_utc(user_factory):
    madeira_offset = timezone(timedelta(hours=1))
    created = datetime(2025, 4, 1, 9, 0, tzinfo=madeira_offset)

    user = User.model_validate({**user_factory("user-9").model_dump(), "created_at": created})
    group = UserGroup(id="group-9", name="Field Crew", created_at=created)

    for stamp in (user.created_at, group.created_at):
        assert stamp.utcoffset() == timedelta(0)
        assert stamp == datetime(2025, 4, 1, 8, 0, tzinfo=timezone.utc)

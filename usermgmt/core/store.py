"""
Snapshot persistence.

The whole AppState is written and read as one unit through SQLAlchemy
tables:

    roles, users, user_groups, group_members, entities, group_permission_overrides

Membership is stored once (group_members); User.group_ids and
UserGroup.member_ids are both rebuilt from it, so a loaded snapshot always
has consistent mirrors.
"""
from collections import defaultdict

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from usermgmt.core import config
from usermgmt.core.seed import build_seed_state
from usermgmt.core.state import AppState
from usermgmt.features.entities.models import EntityRecord
from usermgmt.features.entities.schemas import Entity
from usermgmt.features.entities.tree import iter_entities
from usermgmt.features.groups.models import GroupRecord, group_members
from usermgmt.features.groups.schemas import UserGroup
from usermgmt.features.permissions.models import GroupPermissionOverrideRecord
from usermgmt.features.permissions.schemas import GroupPermissionOverride
from usermgmt.features.roles.models import RoleRecord
from usermgmt.features.roles.schemas import Role
from usermgmt.features.users.models import UserRecord
from usermgmt.features.users.schemas import User
from usermgmt.utils import as_utc, get_logger


log = get_logger(__name__)


# ============================================================================
# Load
# ============================================================================

def _build_entity_tree(records: list[EntityRecord]) -> tuple[Entity, ...]:
    children_of: dict[str | None, list[EntityRecord]] = defaultdict(list)
    for record in records:
        children_of[record.parent_id].append(record)

    def _build(parent_id: str | None) -> tuple[Entity, ...]:
        return tuple(
            Entity(
                id=record.id,
                type=record.type,
                name=record.name,
                parent_id=record.parent_id,
                children=_build(record.id),
            )
            for record in children_of.get(parent_id, [])
        )

    return _build(None)


async def is_empty(db: AsyncSession) -> bool:
    result = await db.execute(select(RoleRecord.id).limit(1))
    return result.first() is None


async def load_state(db: AsyncSession) -> AppState:
    """Read the stored snapshot. An empty store yields an empty AppState."""
    roles = (await db.execute(select(RoleRecord).order_by(RoleRecord.position))).scalars().all()
    users = (await db.execute(select(UserRecord).order_by(UserRecord.position))).scalars().all()
    groups = (await db.execute(select(GroupRecord).order_by(GroupRecord.position))).scalars().all()
    entities = (await db.execute(select(EntityRecord).order_by(EntityRecord.position))).scalars().all()
    overrides = (
        await db.execute(
            select(GroupPermissionOverrideRecord).order_by(GroupPermissionOverrideRecord.position)
        )
    ).scalars().all()
    memberships = (await db.execute(select(group_members))).all()

    member_ids: dict[str, list[tuple[int, str]]] = defaultdict(list)
    group_ids: dict[str, list[tuple[int, str]]] = defaultdict(list)
    for row in memberships:
        member_ids[row.group_id].append((row.member_position, row.user_id))
        group_ids[row.user_id].append((row.group_position, row.group_id))

    state = AppState(
        roles=tuple(
            Role(
                id=record.id,
                name=record.name,
                description=record.description,
                is_system=record.is_system,
                permissions=record.permissions,
                created_at=as_utc(record.created_at),
                updated_at=as_utc(record.updated_at),
            )
            for record in roles
        ),
        users=tuple(
            User(
                id=record.id,
                first_name=record.first_name,
                last_name=record.last_name,
                email=record.email,
                function=record.function,
                role_id=record.role_id,
                group_ids=tuple(gid for _, gid in sorted(group_ids.get(record.id, []))),
                created_at=as_utc(record.created_at),
                updated_at=as_utc(record.updated_at),
            )
            for record in users
        ),
        groups=tuple(
            UserGroup(
                id=record.id,
                name=record.name,
                description=record.description,
                member_ids=tuple(uid for _, uid in sorted(member_ids.get(record.id, []))),
                created_at=as_utc(record.created_at),
                updated_at=as_utc(record.updated_at),
            )
            for record in groups
        ),
        entities=_build_entity_tree(list(entities)),
        permission_overrides=tuple(
            GroupPermissionOverride(
                id=record.id,
                group_id=record.group_id,
                entity_type=record.entity_type,
                scope=record.scope,
                specific_entity_ids=tuple(record.specific_entity_ids or ()),
                permissions=record.permissions,
                created_at=as_utc(record.created_at),
                updated_at=as_utc(record.updated_at),
            )
            for record in overrides
        ),
    )

    log.info(
        f"Loaded state: {len(state.roles)} roles, {len(state.users)} users, "
        f"{len(state.groups)} groups, {len(state.permission_overrides)} overrides"
    )
    return state


# ============================================================================
# Save
# ============================================================================

async def clear_state(db: AsyncSession):
    """Delete every stored row, children before parents."""
    await db.execute(delete(GroupPermissionOverrideRecord))
    await db.execute(delete(group_members))
    await db.execute(delete(UserRecord))
    await db.execute(delete(GroupRecord))
    await db.execute(delete(RoleRecord))
    await db.execute(delete(EntityRecord))


async def save_state(db: AsyncSession, state: AppState):
    """
    Replace the stored snapshot with state in one transaction.

    Membership is written from UserGroup.member_ids; User.group_ids only
    contributes its ordering, since the two are kept in step by the
    mutations.
    """
    try:
        await clear_state(db)

        db.add_all(
            RoleRecord(
                id=role.id,
                name=role.name,
                description=role.description,
                is_system=role.is_system,
                permissions={
                    entity_type.value: permission_set.model_dump()
                    for entity_type, permission_set in role.permissions.items()
                },
                position=position,
                created_at=as_utc(role.created_at),
                updated_at=as_utc(role.updated_at),
            )
            for position, role in enumerate(state.roles)
        )
        await db.flush()

        db.add_all(
            GroupRecord(
                id=group.id,
                name=group.name,
                description=group.description,
                position=position,
                created_at=as_utc(group.created_at),
                updated_at=as_utc(group.updated_at),
            )
            for position, group in enumerate(state.groups)
        )
        db.add_all(
            UserRecord(
                id=user.id,
                first_name=user.first_name,
                last_name=user.last_name,
                email=user.email,
                function=user.function,
                role_id=user.role_id,
                position=position,
                created_at=as_utc(user.created_at),
                updated_at=as_utc(user.updated_at),
            )
            for position, user in enumerate(state.users)
        )
        await db.flush()

        group_order = {
            (user.id, group_id): position
            for user in state.users
            for position, group_id in enumerate(user.group_ids)
        }
        membership_rows = [
            {
                "group_id": group.id,
                "user_id": user_id,
                "member_position": position,
                "group_position": group_order.get((user_id, group.id), 0),
            }
            for group in state.groups
            for position, user_id in enumerate(group.member_ids)
        ]
        if membership_rows:
            await db.execute(insert(group_members), membership_rows)

        # Pre-order walk keeps parents ahead of their children
        db.add_all(
            EntityRecord(
                id=entity.id,
                type=entity.type.value,
                name=entity.name,
                parent_id=entity.parent_id,
                position=position,
            )
            for position, entity in enumerate(iter_entities(state.entities))
        )
        await db.flush()

        db.add_all(
            GroupPermissionOverrideRecord(
                id=override.id,
                group_id=override.group_id,
                entity_type=override.entity_type.value,
                scope=override.scope.value,
                specific_entity_ids=list(override.specific_entity_ids),
                permissions=override.permissions.model_dump(exclude_none=True),
                position=position,
                created_at=as_utc(override.created_at),
                updated_at=as_utc(override.updated_at),
            )
            for position, override in enumerate(state.permission_overrides)
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    log.info(
        f"Saved state: {len(state.roles)} roles, {len(state.users)} users, "
        f"{len(state.groups)} groups, {len(state.permission_overrides)} overrides"
    )


async def load_or_seed_state(db: AsyncSession) -> AppState:
    """Load the stored snapshot, seeding an empty store when SEED_ON_EMPTY is set."""
    if config.SEED_ON_EMPTY and await is_empty(db):
        log.info("Store is empty - writing seed data")
        state = build_seed_state()
        await save_state(db, state)
        return state
    return await load_state(db)

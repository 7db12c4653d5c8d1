"""Pytest configuration and fixtures.

Provides seed snapshots, small hand-built snapshots for resolver tests and an
in-memory SQLite engine for store tests.
"""

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from usermgmt.core.database.engine import init_db
from usermgmt.core.seed import build_seed_state
from usermgmt.core.state import AppState
from usermgmt.features.entities.schemas import EntityType
from usermgmt.features.groups.schemas import UserGroup
from usermgmt.features.permissions.schemas import (
    GroupPermissionOverride,
    OverrideScope,
    PartialPermissionSet,
    PermissionSet,
)
from usermgmt.features.roles.schemas import Role
from usermgmt.features.users.schemas import User


T0 = datetime(2025, 1, 1, tzinfo=timezone.utc)


# ── Builders ──────────────────────────────────────────────────────

def make_user(user_id: str = "u-1", role_id: str = "role-viewer", group_ids=()) -> User:
    return User(
        id=user_id,
        first_name="Test",
        last_name=user_id,
        email=f"{user_id}@solarworks.pt",
        function="Engineer",
        role_id=role_id,
        group_ids=tuple(group_ids),
    )


def make_override(
    group_id: str,
    entity_type: EntityType,
    scope: OverrideScope = OverrideScope.ALL,
    entity_ids=(),
    minutes: int = 0,
    override_id: str | None = None,
    **permissions: bool,
) -> GroupPermissionOverride:
    data = dict(
        group_id=group_id,
        entity_type=entity_type,
        scope=scope,
        specific_entity_ids=tuple(entity_ids),
        permissions=PartialPermissionSet(**permissions),
        created_at=T0 + timedelta(minutes=minutes),
    )
    if override_id is not None:
        data["id"] = override_id
    return GroupPermissionOverride(**data)


# ── Snapshots ─────────────────────────────────────────────────────

@pytest.fixture
def seed_state() -> AppState:
    return build_seed_state()


@pytest.fixture
def roles() -> list[Role]:
    """Viewer reads projects only; Designer has full access on designs."""
    return [
        Role(
            id="role-viewer",
            name="Viewer",
            is_system=True,
            permissions={EntityType.PROJECTS: PermissionSet.read_only()},
        ),
        Role(
            id="role-designer",
            name="Designer",
            permissions={EntityType.DESIGNS: PermissionSet.full()},
        ),
    ]


@pytest.fixture
def group() -> UserGroup:
    return UserGroup(id="g-1", name="Design Leads")


# ── Store ─────────────────────────────────────────────────────────

@pytest_asyncio.fixture
async def test_engine():
    """In-memory SQLite shared across sessions."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await init_db(bind=engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


# ── Factories ─────────────────────────────────────────────────────

@pytest.fixture
def user_factory():
    return make_user


@pytest.fixture
def override_factory():
    return make_override

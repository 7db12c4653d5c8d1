"""
Print a user's effective permission grid.

Usage:
    python -m scripts.preview_permissions user-2
    python -m scripts.preview_permissions user-2 --entity-id project-1-design-1
"""
import argparse
import asyncio

from usermgmt.core.database.engine import get_db, init_db
from usermgmt.core.errors import NotFoundError
from usermgmt.core.state import AppState
from usermgmt.core.store import load_or_seed_state
from usermgmt.features.entities.tree import entity_path, find_entity
from usermgmt.features.permissions.resolver import resolve_permissions
from usermgmt.features.permissions.schemas import PermissionAction, PermissionSet
from usermgmt.features.permissions.service import build_permission_preview
from usermgmt.utils import get_logger


log = get_logger(__name__)


def _format_row(label: str, permission_set: PermissionSet, indent: int = 0) -> str:
    marks = "  ".join(
        f"{action.value[0].upper()}:{'yes' if permission_set.allows(action) else 'no '}"
        for action in PermissionAction
    )
    return f"{'  ' * indent}{label:<{28 - 2 * indent}} {marks}"


def render_preview(state: AppState, user_id: str, entity_id: str | None = None) -> str:
    preview = build_permission_preview(state, user_id)
    lines = [
        f"{preview.user_name} - Effective Permissions",
        f"Role:   {preview.role_name}",
        f"Groups: {', '.join(preview.group_names) or 'No groups'}",
        "",
    ]
    lines.extend(_format_row(row.label, row.permissions, row.level) for row in preview.rows)

    if entity_id is not None:
        entity = find_entity(state.entities, entity_id)
        if entity is None:
            raise NotFoundError("Entity", entity_id)
        resolved = resolve_permissions(
            state.get_user(user_id), entity.type, entity.id, state.permission_overrides, state.roles
        )
        lines.append("")
        lines.append(" / ".join(entity_path(state.entities, entity_id)))
        lines.append(_format_row(entity.type.label, resolved))

    return "\n".join(lines)


async def main(user_id: str, entity_id: str | None = None) -> int:
    await init_db()
    async for db in get_db():
        state = await load_or_seed_state(db)
        break

    try:
        print(render_preview(state, user_id, entity_id))
    except NotFoundError as e:
        log.error(e.message)
        return 1
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Show a user's effective permissions")
    parser.add_argument("user_id")
    parser.add_argument("--entity-id", default=None, help="also resolve one entity instance")
    args = parser.parse_args()
    raise SystemExit(asyncio.run(main(args.user_id, args.entity_id)))

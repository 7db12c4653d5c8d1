"""
Seed data: system roles, sample users, groups and the entity tree.

Used by scripts/seed_state.py, by the store when it is empty, and by
reset_to_seed().
"""
from datetime import datetime, timezone

from usermgmt.core.state import AppState
from usermgmt.features.entities.schemas import Entity, EntityType
from usermgmt.features.groups.schemas import UserGroup
from usermgmt.features.permissions.schemas import PermissionSet
from usermgmt.features.roles.schemas import Role, uniform_grid
from usermgmt.features.users.schemas import User


SEED_TIMESTAMP = datetime(2024, 1, 1, tzinfo=timezone.utc)


# (id, name, description, grid)
SYSTEM_ROLES = [
    (
        "role-admin", "Admin", "Full system access including user management",
        uniform_grid(PermissionSet.full()),
    ),
    (
        "role-user", "User", "Standard user access with full project permissions",
        uniform_grid(PermissionSet.full(), user_management=PermissionSet.read_only()),
    ),
    (
        "role-viewer", "Viewer", "Read-only access to projects and files",
        uniform_grid(PermissionSet.read_only(), user_management=PermissionSet.none()),
    ),
]

# (id, first name, last name, email, function, role id)
SEED_USERS = [
    ("user-1", "Ana", "Ferreira", "ana.ferreira@solarworks.pt", "Head of Engineering", "role-admin"),
    ("user-2", "Miguel", "Santos", "miguel.santos@solarworks.pt", "Project Manager", "role-user"),
    ("user-3", "Joana", "Costa", "joana.costa@solarworks.pt", "Electrical Engineer", "role-user"),
    ("user-4", "Ricardo", "Almeida", "ricardo.almeida@solarworks.pt", "External Auditor", "role-viewer"),
    ("user-5", "Sofia", "Rodrigues", "sofia.rodrigues@solarworks.pt", "Investor Relations", "role-viewer"),
]

# (id, name, description, member ids)
SEED_GROUPS = [
    (
        "group-1", "Project Alpha Team",
        "Core team working on Project Alpha development and implementation",
        ("user-2", "user-3"),
    ),
    (
        "group-2", "External Reviewers",
        "External stakeholders with review and audit access",
        ("user-4", "user-5"),
    ),
    (
        "group-3", "Design Leads",
        "Senior design and engineering leadership team",
        ("user-1", "user-2"),
    ),
]

# Nested (id, type, name, children)
SEED_ENTITIES = [
    ("project-1", EntityType.PROJECTS, "Solar Farm Alentejo", [
        ("project-1-file-1", EntityType.PROJECT_FILES, "Site Analysis Report.pdf", []),
        ("project-1-file-2", EntityType.PROJECT_FILES, "Environmental Impact Study.pdf", []),
        ("project-1-model-1", EntityType.FINANCIAL_MODELS, "ROI Projection Q1-Q4 2025", []),
        ("project-1-design-1", EntityType.DESIGNS, "Array Layout Design v3", [
            ("project-1-design-1-file-1", EntityType.DESIGN_FILES, "array-layout-v3.dwg", []),
            ("project-1-design-1-file-2", EntityType.DESIGN_FILES, "electrical-schematic.pdf", []),
            ("project-1-design-1-comment-1", EntityType.DESIGN_COMMENTS,
             "Review: Optimize spacing for maintenance access", []),
        ]),
    ]),
    ("project-2", EntityType.PROJECTS, "Rooftop Porto Industrial", [
        ("project-2-file-1", EntityType.PROJECT_FILES, "Structural Assessment.pdf", []),
        ("project-2-model-1", EntityType.FINANCIAL_MODELS, "Cost-Benefit Analysis 2025", []),
        ("project-2-design-1", EntityType.DESIGNS, "Rooftop Integration Design v2", [
            ("project-2-design-1-file-1", EntityType.DESIGN_FILES, "rooftop-layout.pdf", []),
            ("project-2-design-1-comment-1", EntityType.DESIGN_COMMENTS, "Approved with minor adjustments", []),
        ]),
    ]),
    ("project-3", EntityType.PROJECTS, "Floating PV Alqueva", [
        ("project-3-file-1", EntityType.PROJECT_FILES, "Hydrology Study.pdf", []),
        ("project-3-file-2", EntityType.PROJECT_FILES, "Anchoring System Specs.pdf", []),
        ("project-3-model-1", EntityType.FINANCIAL_MODELS, "Investment Model 10-Year", []),
        ("project-3-design-1", EntityType.DESIGNS, "Floating Platform Design v1", [
            ("project-3-design-1-file-1", EntityType.DESIGN_FILES, "floating-platform-cad.dwg", []),
            ("project-3-design-1-file-2", EntityType.DESIGN_FILES, "mooring-details.pdf", []),
            ("project-3-design-1-comment-1", EntityType.DESIGN_COMMENTS, "Pending: Wave load calculations", []),
            ("project-3-design-1-comment-2", EntityType.DESIGN_COMMENTS,
             "Consider alternative anchoring method", []),
        ]),
    ]),
]


def _build_entities(nodes, parent_id: str | None = None) -> tuple[Entity, ...]:
    return tuple(
        Entity(
            id=entity_id,
            type=entity_type,
            name=name,
            parent_id=parent_id,
            children=_build_entities(children, entity_id),
        )
        for entity_id, entity_type, name, children in nodes
    )


def build_seed_state() -> AppState:
    """Return a fresh seed snapshot. No permission overrides are seeded."""
    roles = tuple(
        Role(
            id=role_id,
            name=name,
            description=description,
            is_system=True,
            permissions=grid,
            created_at=SEED_TIMESTAMP,
            updated_at=SEED_TIMESTAMP,
        )
        for role_id, name, description, grid in SYSTEM_ROLES
    )
    groups = tuple(
        UserGroup(
            id=group_id,
            name=name,
            description=description,
            member_ids=member_ids,
            created_at=SEED_TIMESTAMP,
            updated_at=SEED_TIMESTAMP,
        )
        for group_id, name, description, member_ids in SEED_GROUPS
    )
    users = tuple(
        User(
            id=user_id,
            first_name=first_name,
            last_name=last_name,
            email=email,
            function=function,
            role_id=role_id,
            group_ids=tuple(group.id for group in groups if user_id in group.member_ids),
            created_at=SEED_TIMESTAMP,
            updated_at=SEED_TIMESTAMP,
        )
        for user_id, first_name, last_name, email, function, role_id in SEED_USERS
    )
    return AppState(
        users=users,
        groups=groups,
        roles=roles,
        entities=_build_entities(SEED_ENTITIES),
        permission_overrides=(),
    )


def reset_to_seed() -> AppState:
    return build_seed_state()

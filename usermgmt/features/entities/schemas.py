"""
Pydantic schemas for entity types and the entity hierarchy.
"""
import enum
from pydantic import BaseModel, ConfigDict, Field


class EntityType(str, enum.Enum):
    """Closed set of resource kinds. Declaration order is display order."""
    WORKSPACES = "workspaces"
    PROJECTS = "projects"
    PROJECT_FILES = "project_files"
    FINANCIAL_MODELS = "financial_models"
    DESIGNS = "designs"
    DESIGN_FILES = "design_files"
    DESIGN_COMMENTS = "design_comments"
    USER_MANAGEMENT = "user_management"

    @property
    def label(self) -> str:
        return ENTITY_TYPE_LABELS[self]

    @property
    def level(self) -> int:
        return ENTITY_TYPE_LEVELS[self]


ENTITY_TYPE_LABELS: dict[EntityType, str] = {
    EntityType.WORKSPACES: "Workspaces",
    EntityType.PROJECTS: "Projects",
    EntityType.PROJECT_FILES: "Project Files",
    EntityType.FINANCIAL_MODELS: "Financial Models",
    EntityType.DESIGNS: "Designs",
    EntityType.DESIGN_FILES: "Design Files",
    EntityType.DESIGN_COMMENTS: "Design Comments",
    EntityType.USER_MANAGEMENT: "User Management",
}

# Indentation depth in permission grids
ENTITY_TYPE_LEVELS: dict[EntityType, int] = {
    EntityType.WORKSPACES: 0,
    EntityType.PROJECTS: 1,
    EntityType.PROJECT_FILES: 2,
    EntityType.FINANCIAL_MODELS: 2,
    EntityType.DESIGNS: 2,
    EntityType.DESIGN_FILES: 3,
    EntityType.DESIGN_COMMENTS: 3,
    EntityType.USER_MANAGEMENT: 0,
}


class Entity(BaseModel):
    """A node of the entity hierarchy."""
    id: str = Field(..., min_length=1)
    type: EntityType
    name: str = Field(..., min_length=1, max_length=255)
    parent_id: str | None = None
    children: tuple["Entity", ...] = ()

    model_config = ConfigDict(frozen=True)


Entity.model_rebuild()

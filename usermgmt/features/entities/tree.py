"""
Helpers for walking the entity hierarchy.
"""
from collections.abc import Iterable, Iterator

from usermgmt.features.entities.schemas import Entity, EntityType


def iter_entities(entities: Iterable[Entity]) -> Iterator[Entity]:
    """Depth-first, pre-order walk over a forest of entities."""
    for entity in entities:
        yield entity
        yield from iter_entities(entity.children)


def find_entity(entities: Iterable[Entity], entity_id: str) -> Entity | None:
    for entity in iter_entities(entities):
        if entity.id == entity_id:
            return entity
    return None


def entities_of_type(entities: Iterable[Entity], entity_type: EntityType) -> list[Entity]:
    """All entities of one type, in tree order. Feeds the "specific" override selector."""
    return [entity for entity in iter_entities(entities) if entity.type == entity_type]


def entity_path(entities: Iterable[Entity], entity_id: str) -> list[str]:
    """
    Names from the root down to the entity.

    Returns an empty list when the id is not in the tree.
    """
    def _walk(nodes: Iterable[Entity], trail: list[str]) -> list[str] | None:
        for node in nodes:
            path = trail + [node.name]
            if node.id == entity_id:
                return path
            found = _walk(node.children, path)
            if found is not None:
                return found
        return None

    return _walk(entities, []) or []

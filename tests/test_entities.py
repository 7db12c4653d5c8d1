"""Tests for entity types and the entity tree helpers."""

from usermgmt.features.entities.schemas import ENTITY_TYPE_LABELS, EntityType
from usermgmt.features.entities.tree import entities_of_type, entity_path, find_entity, iter_entities


def test_entity_type_order_and_labels():
    assert [entity_type.value for entity_type in EntityType] == [
        "workspaces",
        "projects",
        "project_files",
        "financial_models",
        "designs",
        "design_files",
        "design_comments",
        "user_management",
    ]
    assert set(ENTITY_TYPE_LABELS) == set(EntityType)
    assert EntityType.FINANCIAL_MODELS.label == "Financial Models"
    assert EntityType.DESIGN_COMMENTS.level == 3


def test_iter_entities_is_pre_order(seed_state):
    ids = [entity.id for entity in iter_entities(seed_state.entities)]

    assert ids[0] == "project-1"
    assert ids.index("project-1-design-1") < ids.index("project-1-design-1-file-1")
    assert ids.index("project-1-design-1-comment-1") < ids.index("project-2")
    assert len(ids) == len(set(ids))


def test_parent_ids_match_tree(seed_state):
    for entity in iter_entities(seed_state.entities):
        for child in entity.children:
            assert child.parent_id == entity.id


def test_find_entity(seed_state):
    entity = find_entity(seed_state.entities, "project-2-design-1-file-1")

    assert entity.type == EntityType.DESIGN_FILES
    assert entity.parent_id == "project-2-design-1"
    assert find_entity(seed_state.entities, "missing") is None


def test_entities_of_type(seed_state):
    designs = entities_of_type(seed_state.entities, EntityType.DESIGNS)

    assert [entity.id for entity in designs] == ["project-1-design-1", "project-2-design-1", "project-3-design-1"]
    assert entities_of_type(seed_state.entities, EntityType.WORKSPACES) == []


def test_entity_path(seed_state):
    assert entity_path(seed_state.entities, "project-3-design-1-comment-2") == [
        "Floating PV Alqueva",
        "Floating Platform Design v1",
        "Consider alternative anchoring method",
    ]
    assert entity_path(seed_state.entities, "project-1") == ["Solar Farm Alentejo"]
    assert entity_path(seed_state.entities, "missing") == []

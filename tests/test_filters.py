"""
tests/test_filters.py
Unit tests for nestgen.filters: per-artifact projections of an entity.
"""

from __future__ import annotations

import pytest

from nestgen.filters import (
    controller_projection,
    dto_projection,
    many_to_one_join_columns,
    model_projection,
    project,
    service_projection,
)
from nestgen.models import ArtifactType, Entity, RelationType


def _column_names(entity: Entity):
    return [c.tsc_name for c in entity.columns]


class TestModelProjection:

    def test_primary_columns_dropped(self, pet_entity: Entity) -> None:
        projected = model_projection(pet_entity).entity
        assert _column_names(projected) == ["name", "ownerId"]

    def test_relations_unfiltered(self, pet_entity: Entity) -> None:
        projected = model_projection(pet_entity).entity
        assert projected.relations == pet_entity.relations

    def test_composite_key_fully_dropped(self) -> None:
        entity = Entity.model_validate(
            {
                "tscName": "membership",
                "columns": [
                    {"tscName": "userId", "primary": True},
                    {"tscName": "groupId", "primary": True},
                    {"tscName": "role"},
                ],
            }
        )
        assert _column_names(model_projection(entity).entity) == ["role"]


class TestDtoProjection:

    def test_join_columns_and_keys_dropped(self, pet_entity: Entity) -> None:
        projected = dto_projection(pet_entity).entity
        assert _column_names(projected) == ["name"]

    def test_only_one_to_many_relations(self, pet_entity: Entity, person_entity: Entity) -> None:
        assert dto_projection(pet_entity).entity.relations == []
        kept = dto_projection(person_entity).entity.relations
        assert [r.field_name for r in kept] == ["pets"]
        assert all(r.relation_type is RelationType.ONE_TO_MANY for r in kept)

    def test_join_column_names(self, pet_entity: Entity, person_entity: Entity) -> None:
        assert many_to_one_join_columns(pet_entity) == frozenset({"ownerId"})
        assert many_to_one_join_columns(person_entity) == frozenset()


class TestControllerAndService:

    def test_controller_keeps_entity_and_adds_one_to_many(self, person_entity: Entity) -> None:
        projection = controller_projection(person_entity)
        assert projection.entity is person_entity
        assert [r.field_name for r in projection.relations_one_to_many] == ["pets"]

    def test_controller_context(self, pet_entity: Entity) -> None:
        context = controller_projection(pet_entity).as_context()
        assert context["entity"] is pet_entity
        assert context["relations_one_to_many"] == []

    def test_service_is_unfiltered(self, pet_entity: Entity) -> None:
        assert service_projection(pet_entity).entity is pet_entity


class TestProjectDispatch:

    def test_source_entity_never_mutated(self, pet_entity: Entity) -> None:
        before = pet_entity.model_dump()
        for kind in (ArtifactType.MODEL, ArtifactType.DTO, ArtifactType.CONTROLLER, ArtifactType.SERVICE):
            project(pet_entity, kind)
        assert pet_entity.model_dump() == before
        assert _column_names(pet_entity) == ["id", "name", "ownerId"]

    @pytest.mark.parametrize("kind", [ArtifactType.MODULE, ArtifactType.INDEX])
    def test_aggregate_kinds_have_no_projection(self, pet_entity: Entity, kind: ArtifactType) -> None:
        with pytest.raises(KeyError):
            project(pet_entity, kind)

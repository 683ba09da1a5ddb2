# File: nestgen/filters.py
"""
nestgen - Artifact Filters
===========================
Decides which columns and relations of an entity each artifact kind sees.

Every function here is pure.  The shared ``Entity`` instances are never
modified: projections are shallow copies made with ``model_copy`` whose
``columns`` / ``relations`` lists are freshly built.

Rules:

    model       all relations; columns minus primary columns
    dto         OneToMany relations only; columns minus primary columns and
                minus every column named by a ManyToOne join column
    controller  unfiltered entity + the OneToMany relations as extra data
    service     unfiltered entity
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, List, Tuple

from nestgen.models import ArtifactType, Column, Entity, Relation, RelationType

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("nestgen.filters")


@dataclass(frozen=True, slots=True)
class EntityProjection:
    """What a per-entity template receives."""

    entity: Entity
    relations_one_to_many: Tuple[Relation, ...] = ()

    def as_context(self) -> Dict[str, object]:
        return {
            "entity": self.entity,
            "relations_one_to_many": list(self.relations_one_to_many),
        }


# ---------------------------------------------------------------------------
# Building blocks
# ---------------------------------------------------------------------------


def one_to_many_relations(entity: Entity) -> List[Relation]:
    """OneToMany relations of *entity*, in declaration order."""
    return entity.relations_of(RelationType.ONE_TO_MANY)


def many_to_one_join_columns(entity: Entity) -> FrozenSet[str]:
    """Names of the foreign-key columns backing ManyToOne relations."""
    return frozenset(
        name
        for relation in entity.relations_of(RelationType.MANY_TO_ONE)
        for name in relation.join_column_names
    )


def non_primary_columns(entity: Entity) -> List[Column]:
    return [c for c in entity.columns if not c.primary]


# ---------------------------------------------------------------------------
# Per-kind projections
# ---------------------------------------------------------------------------


def model_projection(entity: Entity) -> EntityProjection:
    """Primary keys come from the shared base model and are not redeclared."""
    projected: Entity = entity.model_copy(
        update={
            "columns": non_primary_columns(entity),
            "relations": list(entity.relations),
        }
    )
    return EntityProjection(entity=projected)


def dto_projection(entity: Entity) -> EntityProjection:
    """
    To-one relations are not embedded in a DTO; their foreign keys are
    reached through navigation, so the raw key columns are dropped too.
    """
    excluded: FrozenSet[str] = many_to_one_join_columns(entity)
    columns: List[Column] = [
        c for c in entity.columns if not c.primary and c.tsc_name not in excluded
    ]
    projected: Entity = entity.model_copy(
        update={"columns": columns, "relations": one_to_many_relations(entity)}
    )
    logger.debug(
        "DTO projection of '%s': %d/%d columns, %d relations.",
        entity.sql_name,
        len(columns),
        len(entity.columns),
        len(projected.relations),
    )
    return EntityProjection(entity=projected)


def controller_projection(entity: Entity) -> EntityProjection:
    return EntityProjection(
        entity=entity,
        relations_one_to_many=tuple(one_to_many_relations(entity)),
    )


def service_projection(entity: Entity) -> EntityProjection:
    return EntityProjection(entity=entity)


_PROJECTIONS: Dict[ArtifactType, Callable[[Entity], EntityProjection]] = {
    ArtifactType.MODEL: model_projection,
    ArtifactType.DTO: dto_projection,
    ArtifactType.CONTROLLER: controller_projection,
    ArtifactType.SERVICE: service_projection,
}


def project(entity: Entity, artifact: ArtifactType) -> EntityProjection:
    """
    Projection of *entity* for a per-entity artifact kind.

    Raises:
        KeyError: *artifact* is an aggregate kind (module / index).
    """
    return _PROJECTIONS[artifact](entity)


__all__: List[str] = [
    "EntityProjection",
    "one_to_many_relations",
    "many_to_one_join_columns",
    "non_primary_columns",
    "model_projection",
    "dto_projection",
    "controller_projection",
    "service_projection",
    "project",
]

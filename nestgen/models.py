# File: nestgen/models.py
"""
nestgen - Core Data Models
===========================
Pydantic V2 models for the schema graph (``Entity`` / ``Column`` /
``Relation``) and for the generation options.  These models are the single
source of truth for the pipeline:

    Schema File → Entity list + GenerationOptions → Render → Export

The entity graph is built once per run and then read by every artifact
pass.  All models are frozen; per-artifact adjustments are made on shallow
copies (``model_copy``) and never on the shared instances.
"""

from __future__ import annotations

import json
import logging
import os
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Literal, Mapping, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    computed_field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from nestgen.errors import ConfigurationError

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("nestgen.models")

# ---------------------------------------------------------------------------
# Enums: closed sets used across the entire project
# ---------------------------------------------------------------------------


class CaseStyle(str, Enum):
    """Deterministic identifier casing transforms."""

    CAMEL = "camel"
    PASCAL = "pascal"
    PARAM = "param"
    NONE = "none"
    SNAKE = "snake"

    @classmethod
    def parse(
        cls,
        value: Any,
        allowed: Optional[FrozenSet["CaseStyle"]] = None,
        *,
        context: str = "case style",
    ) -> "CaseStyle":
        """
        Resolve *value* into a member, failing fast on anything unknown.

        This is the only fallible constructor for case styles; past this
        boundary a ``CaseStyle`` is always one of the five members.

        Raises:
            ConfigurationError: *value* is not a known style, or is not in
                *allowed* for the requesting call site.
        """
        try:
            style: CaseStyle = value if isinstance(value, cls) else cls(value)
        except ValueError:
            raise ConfigurationError(
                f"Unknown case style {value!r} for {context}. "
                f"Expected one of: {sorted(m.value for m in (allowed or cls))}."
            ) from None
        if allowed is not None and style not in allowed:
            raise ConfigurationError(
                f"Case style '{style.value}' is not supported for {context}. "
                f"Expected one of: {sorted(m.value for m in allowed)}."
            )
        return style


# Legal styles per naming call site
ENTITY_CASE_STYLES: FrozenSet[CaseStyle] = frozenset(
    {CaseStyle.CAMEL, CaseStyle.PASCAL, CaseStyle.NONE}
)
FILE_CASE_STYLES: FrozenSet[CaseStyle] = frozenset(
    {CaseStyle.CAMEL, CaseStyle.PARAM, CaseStyle.PASCAL, CaseStyle.NONE}
)
PROPERTY_CASE_STYLES: FrozenSet[CaseStyle] = frozenset(
    {CaseStyle.CAMEL, CaseStyle.PASCAL, CaseStyle.NONE, CaseStyle.SNAKE}
)


class RelationType(str, Enum):
    """ORM relationship cardinalities."""

    ONE_TO_ONE = "OneToOne"
    ONE_TO_MANY = "OneToMany"
    MANY_TO_ONE = "ManyToOne"
    MANY_TO_MANY = "ManyToMany"

    @property
    def is_to_many(self) -> bool:
        return self in (RelationType.ONE_TO_MANY, RelationType.MANY_TO_MANY)


class EolStyle(str, Enum):
    """Line-ending sequences a generated file can be written with."""

    LF = "LF"
    CRLF = "CRLF"

    @property
    def sequence(self) -> str:
        return "\r\n" if self is EolStyle.CRLF else "\n"

    @classmethod
    def platform_default(cls) -> "EolStyle":
        return cls.CRLF if os.linesep == "\r\n" else cls.LF


class PropertyVisibility(str, Enum):
    """Access modifier placed in front of generated properties."""

    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"
    NONE = "none"


class ExportType(str, Enum):
    """How generated symbols are exported (and therefore imported)."""

    DEFAULT = "default"
    NAMED = "named"


class StrictMode(str, Enum):
    """Property-declaration strictness marker."""

    NONE = "none"
    OPTIONAL = "?"
    DEFINITE = "!"


class FormatterKind(str, Enum):
    """Available post-render pretty-printers."""

    PRETTIER = "prettier"
    NONE = "none"


class ArtifactType(str, Enum):
    """Categories of generated files."""

    MODEL = "model"
    DTO = "dto"
    SERVICE = "service"
    CONTROLLER = "controller"
    MODULE = "module"
    INDEX = "index"


# ---------------------------------------------------------------------------
# Shared model configuration
# ---------------------------------------------------------------------------

_SHARED_CONFIG: ConfigDict = ConfigDict(
    populate_by_name=True,
    alias_generator=to_camel,
    extra="forbid",
    frozen=True,
)


# ---------------------------------------------------------------------------
# Columns
# ---------------------------------------------------------------------------


class Column(BaseModel):
    """
    A single column of an entity.

    ``tsc_type`` is the semantic (target-language) type descriptor, ``type``
    the database type.  ``options`` is passed verbatim to the column
    decorator (``nullable``, ``length``, ``name``, ...).
    """

    model_config = _SHARED_CONFIG

    tsc_name: str = Field(..., min_length=1, description="Property identifier.")
    tsc_type: str = Field(default="string", description="Semantic type descriptor.")
    type: str = Field(default="varchar", description="Database column type.")
    primary: bool = Field(default=False, description="Part of the primary key?")
    generated: Optional[Literal["increment", "uuid"]] = Field(
        default=None, description="Value generation strategy."
    )
    default: Optional[str] = Field(
        default=None, description="Default expression, emitted verbatim."
    )
    options: Dict[str, Any] = Field(
        default_factory=dict, description="Column decorator options."
    )

    @field_validator("default", mode="before")
    @classmethod
    def _default_as_expression(cls, v: Any) -> Any:
        # YAML scalars (numbers, booleans) become their JSON literal text
        if v is None or isinstance(v, str):
            return v
        return json.dumps(v)

    @computed_field  # type: ignore[misc]
    @property
    def nullable(self) -> bool:
        return bool(self.options.get("nullable", False))

    def __repr__(self) -> str:
        pk_flag: str = " PK" if self.primary else ""
        null_flag: str = " NULL" if self.nullable else ""
        return f"<Column {self.tsc_name} {self.type}{pk_flag}{null_flag}>"


# ---------------------------------------------------------------------------
# Relations
# ---------------------------------------------------------------------------


class JoinColumnOption(BaseModel):
    """Foreign-key column on the owning side of a to-one relation."""

    model_config = _SHARED_CONFIG

    name: str = Field(..., min_length=1, description="Foreign-key column name.")
    referenced_column_name: Optional[str] = Field(
        default=None, description="Referenced column on the related entity."
    )


class JoinTableOption(BaseModel):
    """Association table of the owning side of a ManyToMany relation."""

    model_config = _SHARED_CONFIG

    name: str = Field(..., min_length=1, description="Join table name.")
    join_columns: List[JoinColumnOption] = Field(default_factory=list)
    inverse_join_columns: List[JoinColumnOption] = Field(default_factory=list)


class Relation(BaseModel):
    """
    A navigation property between two entities.

    ``related_table`` is a weak reference: the ``tsc_name`` of another
    entity in the same run, never an owned object.
    """

    model_config = _SHARED_CONFIG

    relation_type: RelationType = Field(..., description="Cardinality.")
    related_table: str = Field(..., min_length=1, description="Related entity name.")
    field_name: str = Field(..., min_length=1, description="Navigation property.")
    related_field: Optional[str] = Field(
        default=None, description="Inverse navigation property on the related side."
    )
    join_column_options: Optional[List[JoinColumnOption]] = Field(
        default=None, description="Owning-side join columns (to-one only)."
    )
    join_table_options: Optional[JoinTableOption] = Field(
        default=None, description="Owning-side join table (ManyToMany only)."
    )
    relation_options: Dict[str, Any] = Field(
        default_factory=dict, description="Relation decorator options."
    )

    @computed_field  # type: ignore[misc]
    @property
    def join_column_names(self) -> List[str]:
        return [jc.name for jc in self.join_column_options or []]

    @model_validator(mode="after")
    def _join_columns_on_to_one_only(self) -> "Relation":
        if self.join_column_options and self.relation_type.is_to_many:
            raise ValueError(
                f"Relation '{self.field_name}' is {self.relation_type.value}; "
                "joinColumnOptions are only valid on a to-one owning side."
            )
        return self

    def __repr__(self) -> str:
        return (
            f"<Relation {self.field_name} ({self.relation_type.value}) "
            f"→ {self.related_table}>"
        )


# ---------------------------------------------------------------------------
# Entity
# ---------------------------------------------------------------------------


class EntityIndex(BaseModel):
    """Index declared on an entity."""

    model_config = _SHARED_CONFIG

    name: str = Field(..., min_length=1)
    columns: List[str] = Field(..., min_length=1)
    options: Dict[str, Any] = Field(default_factory=dict)


class Entity(BaseModel):
    """
    Complete representation of a single schema table.

    One ``Entity`` drives creation of a model, a DTO, a service and a
    controller, and contributes to the module and index files.
    """

    model_config = _SHARED_CONFIG

    tsc_name: str = Field(..., min_length=1, description="Canonical identifier.")
    file_name: str = Field(..., min_length=1, description="Canonical file stem.")
    sql_name: str = Field(..., min_length=1, description="Source table name.")
    database: Optional[str] = Field(default=None, description="Source database.")
    schema_name: Optional[str] = Field(
        default=None, alias="schema", description="Source schema."
    )
    columns: List[Column] = Field(default_factory=list)
    relations: List[Relation] = Field(default_factory=list)
    indices: List[EntityIndex] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _default_names(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            data = dict(data)
            tsc: Any = data.get("tscName", data.get("tsc_name"))
            if tsc is not None:
                if "fileName" not in data and "file_name" not in data:
                    data["file_name"] = tsc
                if "sqlName" not in data and "sql_name" not in data:
                    data["sql_name"] = tsc
        return data

    @field_validator("columns")
    @classmethod
    def _unique_column_names(cls, v: List[Column]) -> List[Column]:
        names: List[str] = [c.tsc_name for c in v]
        if len(names) != len(set(names)):
            dupes: List[str] = sorted({n for n in names if names.count(n) > 1})
            raise ValueError(f"Duplicate column names: {dupes}")
        return v

    @model_validator(mode="after")
    def _warn_without_primary_key(self) -> "Entity":
        if self.columns and not any(c.primary for c in self.columns):
            logger.warning(
                "Entity '%s' has no primary column; its model will rely "
                "entirely on the shared base class.",
                self.sql_name,
            )
        return self

    @computed_field  # type: ignore[misc]
    @property
    def primary_columns(self) -> List[str]:
        return [c.tsc_name for c in self.columns if c.primary]

    def relations_of(self, relation_type: RelationType) -> List[Relation]:
        """Relations of one cardinality, in declaration order."""
        return [r for r in self.relations if r.relation_type is relation_type]

    def __repr__(self) -> str:
        return (
            f"<Entity {self.tsc_name} "
            f"({len(self.columns)} cols, {len(self.relations)} rels)>"
        )


# ---------------------------------------------------------------------------
# Generation options
# ---------------------------------------------------------------------------


class GenerationOptions(BaseModel):
    """
    Every knob that shapes the generated output.

    Immutable for the duration of a run.  Build it with
    ``GenerationOptions.from_mapping`` at configuration boundaries so that
    invalid input surfaces as ``ConfigurationError``.
    """

    model_config = _SHARED_CONFIG

    results_path: str = Field(default="./output", min_length=1)
    no_configs: bool = Field(
        default=False, description="Skip sub-directories and project config files."
    )
    index_file: bool = Field(default=False, description="Emit models/index barrel.")
    convert_case_file: CaseStyle = Field(default=CaseStyle.PASCAL)
    convert_case_entity: CaseStyle = Field(default=CaseStyle.PASCAL)
    convert_case_property: CaseStyle = Field(default=CaseStyle.CAMEL)
    convert_eol: EolStyle = Field(default_factory=EolStyle.platform_default)
    lazy: bool = Field(default=False, description="Wrap relations in Promise<>.")
    property_visibility: PropertyVisibility = Field(default=PropertyVisibility.NONE)
    export_type: ExportType = Field(default=ExportType.NAMED)
    strict_mode: StrictMode = Field(default=StrictMode.NONE)
    formatter: FormatterKind = Field(default=FormatterKind.PRETTIER)
    formatter_timeout: float = Field(default=30.0, gt=0)
    extension: str = Field(default="ts", pattern=r"^[A-Za-z0-9]+$")

    @field_validator("convert_case_file", mode="before")
    @classmethod
    def _file_case(cls, v: Any) -> CaseStyle:
        return CaseStyle.parse(v, FILE_CASE_STYLES, context="convertCaseFile")

    @field_validator("convert_case_entity", mode="before")
    @classmethod
    def _entity_case(cls, v: Any) -> CaseStyle:
        return CaseStyle.parse(v, ENTITY_CASE_STYLES, context="convertCaseEntity")

    @field_validator("convert_case_property", mode="before")
    @classmethod
    def _property_case(cls, v: Any) -> CaseStyle:
        return CaseStyle.parse(v, PROPERTY_CASE_STYLES, context="convertCaseProperty")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "GenerationOptions":
        """Validate raw option data, converting failures to ConfigurationError."""
        try:
            return cls.model_validate(dict(data))
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid generation options: {exc}") from exc


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "CaseStyle",
    "ENTITY_CASE_STYLES",
    "FILE_CASE_STYLES",
    "PROPERTY_CASE_STYLES",
    "RelationType",
    "EolStyle",
    "PropertyVisibility",
    "ExportType",
    "StrictMode",
    "FormatterKind",
    "ArtifactType",
    "Column",
    "JoinColumnOption",
    "JoinTableOption",
    "Relation",
    "EntityIndex",
    "Entity",
    "GenerationOptions",
]

logger.debug("nestgen.models loaded, %d public symbols.", len(__all__))

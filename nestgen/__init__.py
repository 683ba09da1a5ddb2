# File: nestgen/__init__.py
"""
nestgen - TypeORM / NestJS Source Generator
============================================

Turns a relational schema model (entities with columns and relations) into
TypeScript sources: TypeORM model classes, DTOs, NestJS services and
controllers, a NestJS module and an optional barrel index, all named by one
configurable ``NamingPolicy``.

Architecture overview::

    ┌──────────────┐     ┌────────────────┐     ┌──────────────────┐
    │  CLI / Entry │────▶│ ModelGenerator │────▶│ TemplateRenderer │
    │   (cli.py)   │     │ (generator.py) │     │  (rendering.py)  │
    └──────────────┘     └───────┬────────┘     └──────────────────┘
                                 │
           ┌──────────┬──────────┼───────────┬────────────┐
           ▼          ▼          ▼           ▼            ▼
      ┌────────┐ ┌─────────┐ ┌─────────┐ ┌────────────┐ ┌───────────┐
      │ naming │ │ filters │ │ imports │ │ formatting │ │ exporters │
      └────────┘ └─────────┘ └─────────┘ └────────────┘ └───────────┘

Usage::

    # As a library
    from nestgen import ModelGenerator, parse_raw_schema
    entities, options = parse_raw_schema(raw)
    ModelGenerator().generate(entities, options)

    # From the command line
    python -m nestgen --schema schema.yaml --output ./src/shop -v
"""

from __future__ import annotations

__version__: str = "0.1.0"
__license__: str = "MIT"

from nestgen.errors import ConfigurationError, FormattingFailure, NestgenError
from nestgen.models import (
    ArtifactType,
    CaseStyle,
    Column,
    Entity,
    EolStyle,
    ExportType,
    FormatterKind,
    GenerationOptions,
    JoinColumnOption,
    JoinTableOption,
    PropertyVisibility,
    Relation,
    RelationType,
    StrictMode,
)
from nestgen.naming import NamingPolicy, convert_case
from nestgen.filters import project
from nestgen.imports import prune_unused_imports
from nestgen.formatting import (
    Formatter,
    FormatterAdapter,
    PassthroughFormatter,
    PrettierFormatter,
    normalize_line_endings,
)
from nestgen.rendering import TemplateRenderer
from nestgen.exporters import FileRecord, OutputLayout, OutputWriter
from nestgen.generator import (
    GenerationPhase,
    GenerationReport,
    ModelGenerator,
    load_schema_file,
    parse_raw_schema,
)

# ---------------------------------------------------------------------------
# Public API surface
# ---------------------------------------------------------------------------

__all__: list[str] = [
    "__version__",
    "__license__",
    # Core orchestrator
    "ModelGenerator",
    "GenerationPhase",
    "GenerationReport",
    "load_schema_file",
    "parse_raw_schema",
    # Errors
    "NestgenError",
    "ConfigurationError",
    "FormattingFailure",
    # Models
    "ArtifactType",
    "CaseStyle",
    "Column",
    "Entity",
    "EolStyle",
    "ExportType",
    "FormatterKind",
    "GenerationOptions",
    "JoinColumnOption",
    "JoinTableOption",
    "PropertyVisibility",
    "Relation",
    "RelationType",
    "StrictMode",
    # Pipeline pieces
    "NamingPolicy",
    "convert_case",
    "project",
    "prune_unused_imports",
    "Formatter",
    "FormatterAdapter",
    "PassthroughFormatter",
    "PrettierFormatter",
    "normalize_line_endings",
    "TemplateRenderer",
    "FileRecord",
    "OutputLayout",
    "OutputWriter",
]

# File: nestgen/generator.py
"""
nestgen - Master Generation Pipeline (Orchestrator)
====================================================

Connects every phase together:

    Schema Input → Naming Policy → Render → Prune → Format → Write

The ``ModelGenerator`` class provides both a programmatic API and the
backend for the CLI.

Workflow::

    1. Load schema from JSON/YAML file (or accept in-memory objects).
    2. Parse into ``Entity`` list + ``GenerationOptions`` (models.py).
    3. Build the ``NamingPolicy``; invalid styles stop the run here,
       before anything touches the filesystem.
    4. Ensure the output directories (exporters.py).
    5. Emit the optional index, then models, services, controllers, the
       module and the DTOs, in that order.
    6. Emit ``tsconfig.json`` unless configs are disabled.
    7. Return a ``GenerationReport`` with metrics and status.

Error handling strategy:
    - Configuration errors are raised before any directory or file exists.
    - Formatter failures are recovered per file: the unformatted text is
      written and the failure is listed in the report.
    - Template and filesystem errors abort the run and propagate.

Complexity: O(K × E × (C + R)) where K = artifact kinds, E = entities,
C = columns, R = relations.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import jinja2
import yaml
from pydantic import ValidationError

from nestgen.errors import ConfigurationError
from nestgen.exporters import FileRecord, OutputLayout, OutputWriter
from nestgen.filters import project
from nestgen.formatting import (
    Formatter,
    FormatterAdapter,
    build_formatter,
    normalize_line_endings,
)
from nestgen.imports import prune_unused_imports, remove_empty_import
from nestgen.models import ArtifactType, Entity, GenerationOptions
from nestgen.naming import NamingPolicy, module_identifier
from nestgen.rendering import TemplateRenderer
from nestgen.utils import Timer

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("nestgen.generator")

_ENTITY_KEYS: Tuple[str, ...] = ("entities", "tables")
_OPTION_KEYS: Tuple[str, ...] = ("config", "options")


# ---------------------------------------------------------------------------
# Phases & artifact kinds
# ---------------------------------------------------------------------------


class GenerationPhase(str, Enum):
    """Milestones of a run, in the order they are reached."""

    INIT = "init"
    DIRECTORIES_ENSURED = "directories_ensured"
    INDEXED = "indexed"
    MODELS_EMITTED = "models_emitted"
    SERVICES_EMITTED = "services_emitted"
    CONTROLLERS_EMITTED = "controllers_emitted"
    MODULES_EMITTED = "modules_emitted"
    DTOS_EMITTED = "dtos_emitted"
    CONFIGS_EMITTED = "configs_emitted"
    DONE = "done"


@dataclass(frozen=True, slots=True)
class ArtifactKind:
    """
    Everything ``_emit_kind`` needs to know about one artifact kind.

    ``per_entity`` kinds are rendered once per entity with that entity's
    projection; aggregate kinds are rendered once with the whole list.
    """

    artifact: ArtifactType
    template_name: str
    phase: GenerationPhase
    step_name: str
    per_entity: bool = True
    prune_imports: bool = True
    strip_empty_import: bool = False
    parser: str = "typescript"


MODEL_KIND: ArtifactKind = ArtifactKind(
    artifact=ArtifactType.MODEL,
    template_name="model.ts.jinja2",
    phase=GenerationPhase.MODELS_EMITTED,
    step_name="Models",
)
SERVICE_KIND: ArtifactKind = ArtifactKind(
    artifact=ArtifactType.SERVICE,
    template_name="service.ts.jinja2",
    phase=GenerationPhase.SERVICES_EMITTED,
    step_name="Services",
    strip_empty_import=True,
)
CONTROLLER_KIND: ArtifactKind = ArtifactKind(
    artifact=ArtifactType.CONTROLLER,
    template_name="controller.ts.jinja2",
    phase=GenerationPhase.CONTROLLERS_EMITTED,
    step_name="Controllers",
    strip_empty_import=True,
)
MODULE_KIND: ArtifactKind = ArtifactKind(
    artifact=ArtifactType.MODULE,
    template_name="module.ts.jinja2",
    phase=GenerationPhase.MODULES_EMITTED,
    step_name="Module",
    per_entity=False,
    strip_empty_import=True,
)
DTO_KIND: ArtifactKind = ArtifactKind(
    artifact=ArtifactType.DTO,
    template_name="dto.ts.jinja2",
    phase=GenerationPhase.DTOS_EMITTED,
    step_name="DTOs",
    strip_empty_import=True,
)
INDEX_KIND: ArtifactKind = ArtifactKind(
    artifact=ArtifactType.INDEX,
    template_name="index.ts.jinja2",
    phase=GenerationPhase.INDEXED,
    step_name="Index",
    per_entity=False,
    prune_imports=False,
)

EMISSION_ORDER: Tuple[ArtifactKind, ...] = (
    MODEL_KIND,
    SERVICE_KIND,
    CONTROLLER_KIND,
    MODULE_KIND,
    DTO_KIND,
)

TSCONFIG_TEMPLATE: str = "tsconfig.json.jinja2"
TSCONFIG_FILE_NAME: str = "tsconfig.json"


# ---------------------------------------------------------------------------
# Generation report
# ---------------------------------------------------------------------------


@dataclass(frozen=False, slots=True)
class GenerationStepMetric:
    """Timing and outcome for a single pipeline step."""

    step_name: str = ""
    success: bool = True
    elapsed_seconds: float = 0.0
    detail: str = ""


@dataclass(frozen=False, slots=True)
class GenerationReport:
    """
    Report produced by ``ModelGenerator.generate()``.

    A run that reaches ``DONE`` is successful even when some files could
    not be formatted; those are listed in ``formatting_errors``.
    """

    success: bool = False
    module_name: str = ""
    output_directory: str = ""

    # Metrics
    total_entities: int = 0
    total_elapsed_seconds: float = 0.0

    phases: List[GenerationPhase] = field(
        default_factory=lambda: [GenerationPhase.INIT]
    )
    step_metrics: List[GenerationStepMetric] = field(default_factory=list)
    files: List[FileRecord] = field(default_factory=list)
    formatting_errors: List[str] = field(default_factory=list)

    @property
    def phase(self) -> GenerationPhase:
        return self.phases[-1]

    @property
    def total_files(self) -> int:
        return len(self.files)

    @property
    def total_bytes(self) -> int:
        return sum(f.size_bytes for f in self.files)

    @property
    def total_lines(self) -> int:
        return sum(f.line_count for f in self.files)

    def summary(self) -> str:
        """Return a human-readable summary string."""
        lines: List[str] = []
        status: str = "✅ SUCCESS" if self.success else "❌ FAILED"
        lines.append(f"{'='*60}")
        lines.append("  nestgen - Generation Report")
        lines.append(f"{'='*60}")
        lines.append(f"  Status:           {status}")
        lines.append(f"  Module:           {self.module_name}")
        lines.append(f"  Output:           {self.output_directory}")
        lines.append(f"  Entities:         {self.total_entities}")
        lines.append(f"  Files generated:  {self.total_files}")
        lines.append(f"  Total lines:      {self.total_lines:,}")
        lines.append(f"  Total bytes:      {self.total_bytes:,}")
        lines.append(f"  Total time:       {self.total_elapsed_seconds:.3f}s")
        lines.append(f"{'─'*60}")

        if self.step_metrics:
            lines.append("  Pipeline Steps:")
            for step in self.step_metrics:
                icon: str = "✓" if step.success else "✗"
                lines.append(
                    f"    {icon} {step.step_name:<28s} "
                    f"{step.elapsed_seconds:>7.3f}s  "
                    f"{step.detail}"
                )

        if self.formatting_errors:
            lines.append(f"{'─'*60}")
            lines.append(
                f"  Formatting Errors ({len(self.formatting_errors)}):"
            )
            for err in self.formatting_errors:
                lines.append(f"    ✗ {err}")

        lines.append(f"{'='*60}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Schema loader helpers
# ---------------------------------------------------------------------------


def _load_json_file(path: Path) -> Dict[str, Any]:
    """Load and parse a JSON file. Raises ConfigurationError on parse errors."""
    try:
        data: Any = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Expected a JSON object at top level, got {type(data).__name__}."
        )
    return data


def _load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML file. Raises ConfigurationError on parse errors."""
    try:
        data: Any = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Expected a YAML mapping at top level, got {type(data).__name__}."
        )
    return data


def load_schema_file(path: Path) -> Dict[str, Any]:
    """
    Load a schema file (JSON or YAML), dispatching on the extension.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ConfigurationError: If the file can't be parsed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Schema file not found: {path}")

    if not path.is_file():
        raise ConfigurationError(f"Schema path is not a file: {path}")

    suffix: str = path.suffix.lower()

    if suffix in (".yaml", ".yml"):
        return _load_yaml_file(path)
    elif suffix == ".json":
        return _load_json_file(path)
    else:
        logger.info("Unknown extension '%s', trying JSON then YAML.", suffix)
        try:
            return _load_json_file(path)
        except ConfigurationError:
            return _load_yaml_file(path)


def _first_key(raw: Mapping[str, Any], keys: Sequence[str]) -> Optional[str]:
    for key in keys:
        if key in raw:
            return key
    return None


def _merge_overrides(
    options: Mapping[str, Any], overrides: Mapping[str, Any]
) -> Dict[str, Any]:
    """
    Overlay *overrides* (keyed by field name) on raw *options* that may use
    either field names or their camelCase aliases.
    """
    merged: Dict[str, Any] = dict(options)
    for name, value in overrides.items():
        info = GenerationOptions.model_fields.get(name)
        alias: str = info.alias if info is not None and info.alias else name
        merged.pop(name, None)
        merged.pop(alias, None)
        merged[alias] = value
    return merged


def parse_raw_schema(
    raw: Mapping[str, Any],
) -> Tuple[List[Entity], GenerationOptions]:
    """
    Parse a raw dictionary (from JSON/YAML) into validated models.

    Expected top-level keys:
        - "entities" or "tables": list of entity mappings
        - "config" or "options": generation options (optional)

    Raises:
        ConfigurationError: If required keys are missing or validation fails.
    """
    entity_key: Optional[str] = _first_key(raw, _ENTITY_KEYS)
    if entity_key is None:
        raise ConfigurationError(
            "Cannot find entity definitions in input. "
            "Expected top-level key: 'entities' or 'tables'."
        )
    entity_data: Any = raw[entity_key]
    if not isinstance(entity_data, list):
        raise ConfigurationError(
            f"'{entity_key}' must be a list, got {type(entity_data).__name__}."
        )

    option_key: Optional[str] = _first_key(raw, _OPTION_KEYS)
    option_data: Any = raw[option_key] if option_key is not None else None
    if option_data is None:
        logger.info("No generation options found in input, using defaults.")
        option_data = {}
    if not isinstance(option_data, Mapping):
        raise ConfigurationError(
            f"'{option_key}' must be a mapping, got {type(option_data).__name__}."
        )

    entities: List[Entity] = []
    for position, item in enumerate(entity_data):
        try:
            entities.append(Entity.model_validate(item))
        except ValidationError as exc:
            raise ConfigurationError(
                f"Entity #{position} failed validation: {exc}"
            ) from exc

    names: List[str] = [e.tsc_name for e in entities]
    if len(names) != len(set(names)):
        dupes: List[str] = sorted({n for n in names if names.count(n) > 1})
        raise ConfigurationError(f"Duplicate entity names: {dupes}")

    options: GenerationOptions = GenerationOptions.from_mapping(option_data)
    return entities, options


# ---------------------------------------------------------------------------
# Per-run state
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class _Run:
    """Collaborators and inputs shared by every step of one run."""

    entities: Tuple[Entity, ...]
    options: GenerationOptions
    policy: NamingPolicy
    renderer: TemplateRenderer
    adapter: FormatterAdapter
    writer: OutputWriter
    report: GenerationReport
    module: str
    entity_files: Dict[str, str]

    def enter(self, phase: GenerationPhase) -> None:
        self.report.phases.append(phase)
        logger.debug("Phase → %s", phase.value)


# ---------------------------------------------------------------------------
# ModelGenerator (master orchestrator)
# ---------------------------------------------------------------------------


class ModelGenerator:
    """
    Master pipeline orchestrator.

    Usage::

        generator = ModelGenerator()

        # From a file
        report = generator.generate_from_file(Path("schema.yaml"))

        # From in-memory objects
        report = generator.generate(entities, options)

        print(report.summary())

    The generator is reusable: create once, call generate() many times.
    A *formatter* passed here replaces the one selected by the options.
    """

    def __init__(self, formatter: Optional[Formatter] = None) -> None:
        self._formatter: Optional[Formatter] = formatter
        logger.debug(
            "ModelGenerator initialised: formatter=%s.",
            type(formatter).__name__ if formatter else "from options",
        )

    # -----------------------------------------------------------------
    # Public: generate from file
    # -----------------------------------------------------------------

    def generate_from_file(
        self,
        schema_path: Path,
        *,
        config_overrides: Optional[Mapping[str, Any]] = None,
    ) -> GenerationReport:
        """
        Full pipeline: load file → parse → generate.

        *config_overrides* are merged over the file's own options before
        validation.
        """
        with Timer("load_schema") as t_load:
            raw_data: Dict[str, Any] = load_schema_file(schema_path)
            if config_overrides:
                option_key: str = _first_key(raw_data, _OPTION_KEYS) or "config"
                raw_data[option_key] = _merge_overrides(
                    raw_data.get(option_key) or {}, config_overrides
                )
            entities, options = parse_raw_schema(raw_data)

        logger.info(
            "Loaded schema file: %s (%d entities) in %.3fs.",
            schema_path,
            len(entities),
            t_load.elapsed,
        )
        report: GenerationReport = self.generate(entities, options)
        report.step_metrics.insert(
            0,
            GenerationStepMetric(
                step_name="Load Schema File",
                success=True,
                elapsed_seconds=t_load.elapsed,
                detail=f"from {schema_path.name}",
            ),
        )
        report.total_elapsed_seconds += t_load.elapsed
        return report

    # -----------------------------------------------------------------
    # Public: generate from in-memory objects
    # -----------------------------------------------------------------

    def generate(
        self,
        entities: Sequence[Entity],
        options: GenerationOptions,
    ) -> GenerationReport:
        """
        Run every phase for *entities* under *options*.

        Raises:
            ConfigurationError: invalid naming configuration; nothing has
                been written.
            jinja2.TemplateError: a template failed to render.
            OSError: a directory or file could not be written.
        """
        pipeline_start: float = time.perf_counter()

        # Fail fast: nothing below this line runs with a bad policy
        policy: NamingPolicy = NamingPolicy.from_options(options)
        formatter: Formatter = self._formatter or build_formatter(options)

        layout: OutputLayout = OutputLayout.resolve(
            options.results_path, no_configs=options.no_configs
        )
        module: str = module_identifier(options.results_path)
        report: GenerationReport = GenerationReport(
            module_name=module,
            output_directory=str(layout.root),
            total_entities=len(entities),
        )
        run: _Run = _Run(
            entities=tuple(entities),
            options=options,
            policy=policy,
            renderer=TemplateRenderer(policy),
            adapter=FormatterAdapter(formatter),
            writer=OutputWriter(layout),
            report=report,
            module=module,
            entity_files={e.tsc_name: e.file_name for e in entities},
        )

        try:
            self._step_directories(run)
            if options.index_file:
                self._emit_kind(run, INDEX_KIND)
            for kind in EMISSION_ORDER:
                self._emit_kind(run, kind)
            if not options.no_configs:
                self._step_configs(run)
        except (jinja2.TemplateError, OSError) as exc:
            logger.error(
                "Generation aborted after phase '%s': %s: %s",
                report.phase.value,
                type(exc).__name__,
                exc,
            )
            raise
        finally:
            report.files = list(run.writer.records)
            report.formatting_errors = list(run.adapter.diagnostics)
            report.total_elapsed_seconds = time.perf_counter() - pipeline_start

        run.enter(GenerationPhase.DONE)
        report.success = True

        if report.formatting_errors:
            logger.warning(
                "Generation finished with %d unformatted file(s).",
                len(report.formatting_errors),
            )
        logger.info(
            "Generation complete: %d files for %d entities in %.3fs.",
            report.total_files,
            report.total_entities,
            report.total_elapsed_seconds,
        )
        return report

    # -----------------------------------------------------------------
    # Pipeline step: directories
    # -----------------------------------------------------------------

    def _step_directories(self, run: _Run) -> None:
        with Timer("directories") as t:
            created: List[Path] = run.writer.ensure_directories(
                include_sub_directories=not run.options.no_configs
            )
        run.enter(GenerationPhase.DIRECTORIES_ENSURED)
        run.report.step_metrics.append(
            GenerationStepMetric(
                step_name="Ensure Directories",
                elapsed_seconds=t.elapsed,
                detail=f"{len(created)} created",
            )
        )

    # -----------------------------------------------------------------
    # Pipeline step: one artifact kind
    # -----------------------------------------------------------------

    def _emit_kind(self, run: _Run, kind: ArtifactKind) -> None:
        """Render, post-process and write every file of *kind*."""
        errors_before: int = len(run.adapter.diagnostics)
        written: int = 0

        with Timer(kind.step_name) as t:
            if kind.per_entity:
                for entity in run.entities:
                    projection = project(entity, kind.artifact)
                    self._render_artifact(
                        run,
                        kind,
                        source=entity.sql_name,
                        file_base=entity.file_name,
                        context=projection.as_context(),
                    )
                    written += 1
            else:
                self._render_artifact(
                    run,
                    kind,
                    source=kind.artifact.value,
                    file_base=run.module,
                    context={"entities": list(run.entities), "module": run.module},
                )
                written += 1

        unformatted: int = len(run.adapter.diagnostics) - errors_before
        run.enter(kind.phase)
        run.report.step_metrics.append(
            GenerationStepMetric(
                step_name=kind.step_name,
                success=unformatted == 0,
                elapsed_seconds=t.elapsed,
                detail=(
                    f"{written} files"
                    + (f", {unformatted} unformatted" if unformatted else "")
                ),
            )
        )
        logger.info(
            "%s: %d file(s) written in %.3fs.", kind.step_name, written, t.elapsed
        )

    def _render_artifact(
        self,
        run: _Run,
        kind: ArtifactKind,
        *,
        source: str,
        file_base: str,
        context: Dict[str, Any],
    ) -> FileRecord:
        """The shared render → normalise → prune → format → write pipeline."""
        text: str = run.renderer.render(
            kind.template_name,
            paths=run.writer.layout.import_prefixes(kind.artifact),
            entity_files=run.entity_files,
            **context,
        )
        text = normalize_line_endings(text, run.options.convert_eol)
        if kind.prune_imports:
            text = prune_unused_imports(text)
            if kind.strip_empty_import:
                text = remove_empty_import(text)
        text = run.adapter.format(text, source=source, parser=kind.parser)

        file_name: str = (
            f"{run.policy.file_name(kind.artifact, file_base)}"
            f".{run.options.extension}"
        )
        record: FileRecord = run.writer.write(kind.artifact, file_name, text)
        logger.debug("Generated %s (%d bytes).", record.relative_path, record.size_bytes)
        return record

    # -----------------------------------------------------------------
    # Pipeline step: project configuration
    # -----------------------------------------------------------------

    def _step_configs(self, run: _Run) -> None:
        with Timer("configs") as t:
            text: str = run.renderer.render(TSCONFIG_TEMPLATE)
            text = normalize_line_endings(text, run.options.convert_eol)
            text = run.adapter.format(text, source="tsconfig", parser="json")
            run.writer.write_root(TSCONFIG_FILE_NAME, text)
        run.enter(GenerationPhase.CONFIGS_EMITTED)
        run.report.step_metrics.append(
            GenerationStepMetric(
                step_name="Project Config",
                elapsed_seconds=t.elapsed,
                detail=TSCONFIG_FILE_NAME,
            )
        )


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ModelGenerator",
    "GenerationPhase",
    "ArtifactKind",
    "EMISSION_ORDER",
    "GenerationReport",
    "GenerationStepMetric",
    "load_schema_file",
    "parse_raw_schema",
]

logger.debug("nestgen.generator loaded.")

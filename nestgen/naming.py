# File: nestgen/naming.py
"""
nestgen - Naming Policy
========================
Case conversion and every derived name the templates need.

The low-level converters split an identifier into words (on case
transitions and on any non-alphanumeric run) and re-join them in the
requested style.  They are pure and ``lru_cache``-d, since the same handful
of identifiers is converted thousands of times across the five passes.

``NamingPolicy`` binds the configured styles and output conventions into one
immutable value that is handed to the renderer explicitly.
"""

from __future__ import annotations

import functools
import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, FrozenSet, List, Mapping, Optional, Tuple

from nestgen.errors import ConfigurationError
from nestgen.models import (
    ENTITY_CASE_STYLES,
    FILE_CASE_STYLES,
    PROPERTY_CASE_STYLES,
    ArtifactType,
    CaseStyle,
    ExportType,
    GenerationOptions,
    PropertyVisibility,
    RelationType,
    StrictMode,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("nestgen.naming")

# ---------------------------------------------------------------------------
# Pre-compiled regex patterns (compiled once at module load)
# ---------------------------------------------------------------------------

_SPLIT_LOWER_UPPER_RE: re.Pattern[str] = re.compile(r"([a-z0-9])([A-Z])")
_SPLIT_UPPER_WORD_RE: re.Pattern[str] = re.compile(r"([A-Z])([A-Z][a-z])")
_NON_ALPHANUM_RE: re.Pattern[str] = re.compile(r"[^A-Za-z0-9]+")
_QUOTED_KEY_RE: re.Pattern[str] = re.compile(r'"([^()"]+)":')

# Fixed suffixes appended after case conversion
_NAME_SUFFIXES: Dict[ArtifactType, str] = {
    ArtifactType.MODEL: "Model",
    ArtifactType.DTO: "Dto",
    ArtifactType.SERVICE: "Service",
    ArtifactType.CONTROLLER: "Controller",
    ArtifactType.MODULE: "Module",
}

_FILE_SUFFIXES: Dict[ArtifactType, str] = {
    ArtifactType.MODEL: ".model",
    ArtifactType.DTO: ".dto",
    ArtifactType.SERVICE: ".service",
    ArtifactType.CONTROLLER: ".controller",
    ArtifactType.MODULE: ".module",
}


# ---------------------------------------------------------------------------
# Cached string transformation functions
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=None)
def split_words(name: str) -> Tuple[str, ...]:
    """
    Split an identifier in any casing style into its words.

    Examples:
        >>> split_words("user_profile")
        ('user', 'profile')
        >>> split_words("XMLHttpRequest")
        ('XML', 'Http', 'Request')
        >>> split_words("order2Item")
        ('order2', 'Item')
    """
    s: str = _SPLIT_LOWER_UPPER_RE.sub(r"\1 \2", name)
    s = _SPLIT_UPPER_WORD_RE.sub(r"\1 \2", s)
    s = _NON_ALPHANUM_RE.sub(" ", s)
    return tuple(s.split())


def _capitalize_word(word: str, index: int) -> str:
    first: str = word[0]
    rest: str = word[1:].lower()
    # A digit cannot start a non-leading word without losing the boundary
    if index > 0 and first.isdigit():
        return f"_{first}{rest}"
    return f"{first.upper()}{rest}"


@functools.lru_cache(maxsize=None)
def to_camel_case(name: str) -> str:
    """
    Convert any string to camelCase.

    Examples:
        >>> to_camel_case("user_profile")
        'userProfile'
        >>> to_camel_case("UserProfile")
        'userProfile'
    """
    words: Tuple[str, ...] = split_words(name)
    return "".join(
        w.lower() if i == 0 else _capitalize_word(w, i) for i, w in enumerate(words)
    )


@functools.lru_cache(maxsize=None)
def to_pascal_case(name: str) -> str:
    """
    Convert any string to PascalCase.

    Examples:
        >>> to_pascal_case("user_profile")
        'UserProfile'
        >>> to_pascal_case("HTTPResponse")
        'HttpResponse'
    """
    return "".join(_capitalize_word(w, i) for i, w in enumerate(split_words(name)))


@functools.lru_cache(maxsize=None)
def to_param_case(name: str) -> str:
    """Convert any string to param-case (kebab-case)."""
    return "-".join(w.lower() for w in split_words(name))


@functools.lru_cache(maxsize=None)
def to_snake_case(name: str) -> str:
    """Convert any string to snake_case."""
    return "_".join(w.lower() for w in split_words(name))


def _identity(name: str) -> str:
    return name


_CONVERTERS: Dict[CaseStyle, Callable[[str], str]] = {
    CaseStyle.CAMEL: to_camel_case,
    CaseStyle.PASCAL: to_pascal_case,
    CaseStyle.PARAM: to_param_case,
    CaseStyle.SNAKE: to_snake_case,
    CaseStyle.NONE: _identity,
}


def convert_case(
    raw: str,
    style: Any,
    allowed: Optional[FrozenSet[CaseStyle]] = None,
    *,
    context: str = "case style",
) -> str:
    """
    Convert *raw* to *style*.

    *style* may be a ``CaseStyle`` or its string value.  When *allowed* is
    given, styles outside it are rejected as well.

    Raises:
        ConfigurationError: unknown or disallowed style.
    """
    resolved: CaseStyle = CaseStyle.parse(style, allowed, context=context)
    return _CONVERTERS[resolved](raw)


def module_identifier(results_path: str) -> str:
    """
    Terminal path segment of the resolved results directory.

    Raises:
        ConfigurationError: the results path resolves to a filesystem root.
    """
    name: str = Path(results_path).resolve().name
    if not name:
        raise ConfigurationError(
            f"Results path {results_path!r} has no directory name to derive the module from."
        )
    return name


# ---------------------------------------------------------------------------
# NamingPolicy
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class NamingPolicy:
    """
    Immutable naming and declaration conventions for one run.

    Construction validates every case style against its call site, so an
    invalid policy can never reach the renderer.
    """

    entity_case: CaseStyle = CaseStyle.PASCAL
    file_case: CaseStyle = CaseStyle.PASCAL
    property_case: CaseStyle = CaseStyle.CAMEL
    lazy: bool = False
    property_visibility: PropertyVisibility = PropertyVisibility.NONE
    export_type: ExportType = ExportType.NAMED
    strict: StrictMode = StrictMode.NONE

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "entity_case",
            CaseStyle.parse(self.entity_case, ENTITY_CASE_STYLES, context="entity names"),
        )
        object.__setattr__(
            self,
            "file_case",
            CaseStyle.parse(self.file_case, FILE_CASE_STYLES, context="file names"),
        )
        object.__setattr__(
            self,
            "property_case",
            CaseStyle.parse(
                self.property_case, PROPERTY_CASE_STYLES, context="property names"
            ),
        )
        object.__setattr__(
            self, "property_visibility", PropertyVisibility(self.property_visibility)
        )
        object.__setattr__(self, "export_type", ExportType(self.export_type))
        object.__setattr__(self, "strict", StrictMode(self.strict))

    @classmethod
    def from_options(cls, options: GenerationOptions) -> "NamingPolicy":
        return cls(
            entity_case=options.convert_case_entity,
            file_case=options.convert_case_file,
            property_case=options.convert_case_property,
            lazy=options.lazy,
            property_visibility=options.property_visibility,
            export_type=options.export_type,
            strict=options.strict_mode,
        )

    # -----------------------------------------------------------------
    # Symbol names
    # -----------------------------------------------------------------

    def entity_base(self, base: str) -> str:
        return _CONVERTERS[self.entity_case](base)

    def symbol_name(self, artifact: ArtifactType, base: str) -> str:
        """Cased *base* plus the artifact's class-name suffix."""
        return f"{self.entity_base(base)}{_NAME_SUFFIXES[artifact]}"

    def model_name(self, base: str) -> str:
        return self.symbol_name(ArtifactType.MODEL, base)

    def dto_name(self, base: str) -> str:
        return self.symbol_name(ArtifactType.DTO, base)

    def service_name(self, base: str) -> str:
        return self.symbol_name(ArtifactType.SERVICE, base)

    def controller_name(self, base: str) -> str:
        return self.symbol_name(ArtifactType.CONTROLLER, base)

    def module_name(self, base: str) -> str:
        return self.symbol_name(ArtifactType.MODULE, base)

    def property_name(self, raw: str) -> str:
        return _CONVERTERS[self.property_case](raw)

    # -----------------------------------------------------------------
    # File names (without extension)
    # -----------------------------------------------------------------

    def file_stem(self, base: str) -> str:
        return _CONVERTERS[self.file_case](base)

    def file_name(self, artifact: ArtifactType, base: str) -> str:
        """
        File name token for a per-entity artifact, e.g. ``UserProfile.model``.

        Module files keep their identifier verbatim; only the fixed dotted
        suffix is appended.
        """
        if artifact is ArtifactType.MODULE:
            return f"{base}{_FILE_SUFFIXES[artifact]}"
        if artifact is ArtifactType.INDEX:
            return self.index_file_name()
        return f"{self.file_stem(base)}{_FILE_SUFFIXES[artifact]}"

    def model_file_name(self, base: str) -> str:
        return self.file_name(ArtifactType.MODEL, base)

    def dto_file_name(self, base: str) -> str:
        return self.file_name(ArtifactType.DTO, base)

    def service_file_name(self, base: str) -> str:
        return self.file_name(ArtifactType.SERVICE, base)

    def controller_file_name(self, base: str) -> str:
        return self.file_name(ArtifactType.CONTROLLER, base)

    def module_file_name(self, module: str) -> str:
        return self.file_name(ArtifactType.MODULE, module)

    def index_file_name(self) -> str:
        return self.file_stem("index")

    # -----------------------------------------------------------------
    # Declaration helpers
    # -----------------------------------------------------------------

    def relation_type_expr(self, type_name: str, relation_type: Any) -> str:
        """
        Type expression for a navigation property.

        To-many relations become ``T[]``; with lazy relations enabled every
        relation, whatever its cardinality, is wrapped in ``Promise<...>``.
        """
        expr: str = type_name
        if RelationType(relation_type).is_to_many:
            expr = f"{expr}[]"
        if self.lazy:
            expr = f"Promise<{expr}>"
        return expr

    def visibility(self) -> str:
        if self.property_visibility is PropertyVisibility.NONE:
            return ""
        return f"{self.property_visibility.value} "

    def is_default_export(self) -> bool:
        return self.export_type is ExportType.DEFAULT

    def default_export(self) -> str:
        return "default" if self.is_default_export() else ""

    def local_import(self, symbol: str) -> str:
        """Import clause for a generated symbol: ``X`` or ``{X}``."""
        if self.is_default_export():
            return symbol
        return f"{{{symbol}}}"

    def strict_mode(self) -> str:
        if self.strict is StrictMode.NONE:
            return ""
        return self.strict.value

    @staticmethod
    def json_literal(value: Mapping[str, Any]) -> str:
        """
        Object-literal body of *value*: JSON with unquoted keys, no braces.

        ``{"nullable": true, "name": "x"}`` → ``nullable:true,name:"x"``
        """
        text: str = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
        text = _QUOTED_KEY_RE.sub(r"\1:", text)
        return text[1:-1]

    def template_helpers(self) -> Dict[str, Callable[..., Any]]:
        """Every helper a template may call, keyed by its template name."""
        return {
            "model_name": self.model_name,
            "dto_name": self.dto_name,
            "service_name": self.service_name,
            "controller_name": self.controller_name,
            "module_name": self.module_name,
            "property_name": self.property_name,
            "model_file_name": self.model_file_name,
            "dto_file_name": self.dto_file_name,
            "service_file_name": self.service_file_name,
            "controller_file_name": self.controller_file_name,
            "relation_type_expr": self.relation_type_expr,
            "visibility": self.visibility,
            "is_default_export": self.is_default_export,
            "default_export": self.default_export,
            "local_import": self.local_import,
            "strict_mode": self.strict_mode,
            "json": self.json_literal,
        }


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "split_words",
    "to_camel_case",
    "to_pascal_case",
    "to_param_case",
    "to_snake_case",
    "convert_case",
    "module_identifier",
    "NamingPolicy",
]

logger.debug("nestgen.naming loaded, %d public symbols.", len(__all__))

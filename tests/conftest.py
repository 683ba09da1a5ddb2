"""
tests/conftest.py
Shared fixtures for the nestgen test suite.

No external mocking libraries are used; real file I/O is performed inside
temporary directories managed by pytest's tmp_path fixtures, and the
external pretty-printer is replaced by small in-process formatters.
"""

from __future__ import annotations

import copy
import logging
import pathlib
from typing import Any, Callable, Dict, List

import pytest
import yaml

from nestgen.errors import FormattingFailure
from nestgen.formatting import Formatter
from nestgen.generator import parse_raw_schema
from nestgen.models import Entity, GenerationOptions


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

ROOT_DIR: pathlib.Path = pathlib.Path(__file__).resolve().parent.parent
SCHEMA_EXAMPLE_PATH: pathlib.Path = ROOT_DIR / "schema_example.yaml"


# ---------------------------------------------------------------------------
# Logging isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_nestgen_logger():
    """The CLI reconfigures the package logger; undo it after every test."""
    yield
    package_logger: logging.Logger = logging.getLogger("nestgen")
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


# ---------------------------------------------------------------------------
# Fake formatters
# ---------------------------------------------------------------------------


class FailingFormatter(Formatter):
    """Rejects every input, like prettier on a syntax error."""

    def __init__(self) -> None:
        self.calls: int = 0

    def format(self, code: str, parser: str = "typescript") -> str:
        self.calls += 1
        raise FormattingFailure("prettier exited with status 2", stderr="SyntaxError")


class MarkingFormatter(Formatter):
    """Prefixes a marker line so tests can tell formatted output apart."""

    MARKER: str = "// formatted\n"

    def __init__(self) -> None:
        self.parsers: List[str] = []

    def format(self, code: str, parser: str = "typescript") -> str:
        self.parsers.append(parser)
        return self.MARKER + code


@pytest.fixture()
def failing_formatter() -> FailingFormatter:
    return FailingFormatter()


@pytest.fixture()
def marking_formatter() -> MarkingFormatter:
    return MarkingFormatter()


# ---------------------------------------------------------------------------
# Raw schema data fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def raw_schema_dict() -> Dict[str, Any]:
    """Load the reference schema_example.yaml once per session and return as dict."""
    assert SCHEMA_EXAMPLE_PATH.exists(), (
        f"Reference schema not found at {SCHEMA_EXAMPLE_PATH}. "
        "Make sure schema_example.yaml is in the project root."
    )
    with open(SCHEMA_EXAMPLE_PATH, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    assert isinstance(data, dict), "Top-level YAML must be a mapping."
    return data


@pytest.fixture()
def schema_dict(raw_schema_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Return a deep copy so each test can mutate freely."""
    return copy.deepcopy(raw_schema_dict)


@pytest.fixture()
def pets_schema_dict() -> Dict[str, Any]:
    """
    Two entities: a person owns many pets; each pet points back to its
    owner through the ``ownerId`` join column.
    """
    return {
        "config": {
            "formatter": "none",
            "convertEol": "LF",
        },
        "entities": [
            {
                "tscName": "person",
                "sqlName": "people",
                "columns": [
                    {"tscName": "id", "tscType": "number", "type": "int", "primary": True},
                    {"tscName": "name", "type": "varchar", "options": {"length": 100}},
                ],
                "relations": [
                    {
                        "relationType": "OneToMany",
                        "relatedTable": "pet",
                        "fieldName": "pets",
                        "relatedField": "owner",
                    }
                ],
            },
            {
                "tscName": "pet",
                "sqlName": "pets",
                "columns": [
                    {"tscName": "id", "tscType": "number", "type": "int", "primary": True},
                    {"tscName": "name", "type": "varchar"},
                    {
                        "tscName": "ownerId",
                        "tscType": "number",
                        "type": "int",
                        "options": {"name": "owner_id"},
                    },
                ],
                "relations": [
                    {
                        "relationType": "ManyToOne",
                        "relatedTable": "person",
                        "fieldName": "owner",
                        "relatedField": "pets",
                        "joinColumnOptions": [
                            {"name": "ownerId", "referencedColumnName": "id"}
                        ],
                    }
                ],
            },
        ],
    }


@pytest.fixture()
def pets_schema_yaml_path(
    pets_schema_dict: Dict[str, Any], tmp_path: pathlib.Path
) -> pathlib.Path:
    """Write the pets schema to a temp YAML file and return its path."""
    path = tmp_path / "pets.yaml"
    with open(path, "w", encoding="utf-8") as fh:
        yaml.dump(pets_schema_dict, fh, default_flow_style=False, allow_unicode=True)
    return path


@pytest.fixture()
def pets_entities(pets_schema_dict: Dict[str, Any]) -> List[Entity]:
    entities, _ = parse_raw_schema(pets_schema_dict)
    return entities


@pytest.fixture()
def pet_entity(pets_entities: List[Entity]) -> Entity:
    return pets_entities[1]


@pytest.fixture()
def person_entity(pets_entities: List[Entity]) -> Entity:
    return pets_entities[0]


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------


@pytest.fixture()
def results_dir(tmp_path: pathlib.Path) -> pathlib.Path:
    """Results directory whose last segment names the module ``shop``."""
    return tmp_path / "out" / "shop"


@pytest.fixture()
def make_options(results_dir: pathlib.Path) -> Callable[..., GenerationOptions]:
    """Factory for options pointing at ``results_dir``; keyword overrides win."""

    def _make(**overrides: Any) -> GenerationOptions:
        data: Dict[str, Any] = {
            "resultsPath": str(results_dir),
            "formatter": "none",
            "convertEol": "LF",
        }
        data.update(overrides)
        return GenerationOptions.from_mapping(data)

    return _make


def read_tree(root: pathlib.Path) -> Dict[str, bytes]:
    """Every file below *root*, keyed by posix relative path."""
    return {
        p.relative_to(root).as_posix(): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


@pytest.fixture()
def read_output(results_dir: pathlib.Path) -> Callable[[], Dict[str, bytes]]:
    """Snapshot of everything written below ``results_dir``."""
    return lambda: read_tree(results_dir)

# File: nestgen/cli.py
"""
nestgen - Command-Line Interface
=================================

CLI built with the standard-library ``argparse`` module.

Usage examples::

    # Basic generation into ./output
    python -m nestgen --schema schema.yaml

    # Flat output, no tsconfig, param-case file names
    nestgen -s schema.yaml -o ./src/shop --no-configs --case-file param

    # Default exports, lazy relations, skip prettier
    nestgen -s schema.json -o ./out --export-type default --lazy --formatter none

    # Show version
    nestgen --version

Exit codes:
    0  success (unformatted files are reported, not fatal)
    1  configuration error
    2  generation (template) error
    3  I/O error
    4  input/argument error
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, NoReturn, Optional, Sequence

import jinja2

from nestgen.errors import ConfigurationError
from nestgen.models import (
    ENTITY_CASE_STYLES,
    FILE_CASE_STYLES,
    PROPERTY_CASE_STYLES,
    EolStyle,
    ExportType,
    FormatterKind,
    PropertyVisibility,
    StrictMode,
)

# ---------------------------------------------------------------------------
# Logger (configured in _setup_logging)
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("nestgen")


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0
EXIT_CONFIGURATION_ERROR: int = 1
EXIT_GENERATION_ERROR: int = 2
EXIT_IO_ERROR: int = 3
EXIT_INPUT_ERROR: int = 4


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(verbosity: int) -> None:
    """
    Configure the root nestgen logger based on verbosity level.

    Args:
        verbosity: -1 = ERROR, 0 = WARNING, 1 = INFO, 2+ = DEBUG.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    elif verbosity == 0:
        level = logging.WARNING
    else:
        level = logging.ERROR

    handler: logging.StreamHandler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    fmt: str = "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s"
    datefmt: str = "%H:%M:%S"
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root_logger: logging.Logger = logging.getLogger("nestgen")
    root_logger.setLevel(level)

    # Remove existing handlers to prevent duplication
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.propagate = False


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _values(members) -> List[str]:
    return sorted(m.value for m in members)


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    from nestgen import __version__

    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="nestgen",
        description=(
            "nestgen: TypeORM / NestJS source generator.\n\n"
            "Turns an entity schema (JSON/YAML) into models, DTOs, services, "
            "controllers and a module under one naming policy."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  %(prog)s -s schema.yaml -o ./src/shop\n"
            "  %(prog)s -s schema.yaml --no-configs --case-file param\n"
            "  %(prog)s -s schema.json --formatter none -vv\n"
        ),
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"nestgen v{__version__}",
    )

    # --- Required arguments ---
    parser.add_argument(
        "-s", "--schema",
        type=str,
        required=True,
        metavar="PATH",
        help="Path to the schema file (JSON or YAML).",
    )

    # --- Output ---
    output_group = parser.add_argument_group("output layout")
    output_group.add_argument(
        "-o", "--output",
        dest="results_path",
        type=str,
        default=None,
        metavar="DIR",
        help="Results directory; its last segment names the module.",
    )
    output_group.add_argument(
        "--no-configs",
        action="store_true",
        default=None,
        help="Write every file into the results root and skip tsconfig.json.",
    )
    output_group.add_argument(
        "--index-file",
        action="store_true",
        default=None,
        help="Also emit a barrel index for the models.",
    )
    output_group.add_argument(
        "--extension",
        type=str,
        default=None,
        metavar="EXT",
        help="Extension of generated source files (default: ts).",
    )

    # --- Naming ---
    naming_group = parser.add_argument_group("naming policy")
    naming_group.add_argument(
        "--case-file",
        type=str,
        default=None,
        choices=_values(FILE_CASE_STYLES),
        help="Case style of file names.",
    )
    naming_group.add_argument(
        "--case-entity",
        type=str,
        default=None,
        choices=_values(ENTITY_CASE_STYLES),
        help="Case style of class names.",
    )
    naming_group.add_argument(
        "--case-property",
        type=str,
        default=None,
        choices=_values(PROPERTY_CASE_STYLES),
        help="Case style of property names.",
    )

    # --- Declarations ---
    decl_group = parser.add_argument_group("declarations")
    decl_group.add_argument(
        "--eol",
        type=str,
        default=None,
        choices=_values(EolStyle),
        help="Line endings of generated files (default: platform).",
    )
    decl_group.add_argument(
        "--lazy",
        action="store_true",
        default=None,
        help="Type relations as Promise<...>.",
    )
    decl_group.add_argument(
        "--visibility",
        type=str,
        default=None,
        choices=_values(PropertyVisibility),
        help="Access modifier for generated properties.",
    )
    decl_group.add_argument(
        "--export-type",
        type=str,
        default=None,
        choices=_values(ExportType),
        help="Export generated classes as default or named exports.",
    )
    decl_group.add_argument(
        "--strict-mode",
        type=str,
        default=None,
        choices=_values(StrictMode),
        help="Property strictness marker ('?' or '!').",
    )

    # --- Formatting ---
    format_group = parser.add_argument_group("formatting")
    format_group.add_argument(
        "--formatter",
        type=str,
        default=None,
        choices=_values(FormatterKind),
        help="Pretty-printer run on every generated file.",
    )
    format_group.add_argument(
        "--formatter-timeout",
        type=float,
        default=None,
        metavar="SECONDS",
        help="Per-file formatter timeout.",
    )

    # --- Verbosity ---
    verbosity_group = parser.add_argument_group("verbosity")
    verbosity_group.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for INFO, -vv for DEBUG).",
    )
    verbosity_group.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=False,
        help="Suppress all output except errors.",
    )

    return parser


# ---------------------------------------------------------------------------
# Config override builder
# ---------------------------------------------------------------------------

# argparse destination → option field
_OVERRIDE_FIELDS: Dict[str, str] = {
    "results_path": "results_path",
    "no_configs": "no_configs",
    "index_file": "index_file",
    "extension": "extension",
    "case_file": "convert_case_file",
    "case_entity": "convert_case_entity",
    "case_property": "convert_case_property",
    "eol": "convert_eol",
    "lazy": "lazy",
    "visibility": "property_visibility",
    "export_type": "export_type",
    "strict_mode": "strict_mode",
    "formatter": "formatter",
    "formatter_timeout": "formatter_timeout",
}


def _build_config_overrides(args: argparse.Namespace) -> Dict[str, object]:
    """Options given on the command line, keyed by option field name."""
    overrides: Dict[str, object] = {}
    for dest, option in _OVERRIDE_FIELDS.items():
        value = getattr(args, dest)
        if value is not None:
            overrides[option] = value
    return overrides


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


def _run_generation(schema_path: Path, args: argparse.Namespace) -> int:
    """
    Run the full generation pipeline.

    Returns the appropriate exit code.
    """
    from nestgen.generator import GenerationReport, ModelGenerator

    overrides: Dict[str, object] = _build_config_overrides(args)
    generator: ModelGenerator = ModelGenerator()

    try:
        report: GenerationReport = generator.generate_from_file(
            schema_path,
            config_overrides=overrides or None,
        )
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        return EXIT_CONFIGURATION_ERROR
    except jinja2.TemplateError as exc:
        logger.error("Template error: %s: %s", type(exc).__name__, exc)
        return EXIT_GENERATION_ERROR
    except OSError as exc:
        logger.error("I/O error: %s", exc)
        return EXIT_IO_ERROR

    print(report.summary())
    return EXIT_SUCCESS if report.success else EXIT_GENERATION_ERROR


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def cli_main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """
    Main CLI entry point.

    Can be called from ``__main__.py`` or directly for testing.

    Args:
        argv: Optional argument list (defaults to sys.argv[1:]).
    """
    parser: argparse.ArgumentParser = _build_parser()
    try:
        args: argparse.Namespace = parser.parse_args(argv)
    except SystemExit as exc:
        # --help / --version exit 0; usage errors map to the input code
        sys.exit(EXIT_SUCCESS if exc.code == 0 else EXIT_INPUT_ERROR)

    verbosity: int = -1 if args.quiet else args.verbose
    _setup_logging(verbosity)

    # --- Schema path ---
    schema_path: Path = Path(args.schema).resolve()

    if not schema_path.exists():
        logger.error("Schema file not found: %s", schema_path)
        sys.exit(EXIT_INPUT_ERROR)

    if not schema_path.is_file():
        logger.error("Schema path is not a file: %s", schema_path)
        sys.exit(EXIT_INPUT_ERROR)

    logger.info("Schema:  %s", schema_path)
    if args.results_path is not None:
        logger.info("Output:  %s", Path(args.results_path).resolve())

    exit_code: int = _run_generation(schema_path, args)

    if exit_code == EXIT_SUCCESS:
        logger.info("Generation completed successfully.")
    else:
        logger.error("Generation failed with exit code %d.", exit_code)

    sys.exit(exit_code)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "cli_main",
    "EXIT_SUCCESS",
    "EXIT_CONFIGURATION_ERROR",
    "EXIT_GENERATION_ERROR",
    "EXIT_IO_ERROR",
    "EXIT_INPUT_ERROR",
]

logger.debug("nestgen.cli loaded.")

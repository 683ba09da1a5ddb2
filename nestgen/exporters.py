# File: nestgen/exporters.py
"""
nestgen - Output Writer
========================

Responsible for:
    1. Resolving the output directory layout from the options.
    2. Creating the directories idempotently.
    3. Writing generated files, overwriting existing content.
    4. Keeping a ``FileRecord`` per written file for the run report.

Writes are plain full overwrites: re-running the generator replaces every
file it produced before.  Filesystem errors are not caught here; they
propagate to the caller and abort the run.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Tuple

from nestgen.models import ArtifactType
from nestgen.utils import count_lines, ensure_directory, sha256_hex, write_file

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("nestgen.exporters")

# Sub-directory per per-entity artifact kind
_KIND_DIRECTORIES: Dict[ArtifactType, str] = {
    ArtifactType.MODEL: "models",
    ArtifactType.DTO: "dtos",
    ArtifactType.SERVICE: "services",
    ArtifactType.CONTROLLER: "controllers",
}

# Shared base classes live here; never generated
COMMON_DIRECTORY: str = "common"


@dataclass(frozen=True, slots=True)
class FileRecord:
    """Immutable record of a single written file."""

    relative_path: str
    absolute_path: str
    size_bytes: int
    line_count: int
    sha256: str


@dataclass(frozen=True, slots=True)
class OutputLayout:
    """
    Where each artifact kind is written.

    With sub-directories: ``models/``, ``dtos/``, ``services/`` and
    ``controllers/`` under the root, the module file at the root and the
    index inside ``models/``.  Without them everything lands in the root.
    """

    root: Path
    directories: Tuple[Tuple[ArtifactType, Path], ...]

    @classmethod
    def resolve(cls, results_path: str, *, no_configs: bool) -> "OutputLayout":
        root: Path = Path(results_path).resolve()
        pairs: List[Tuple[ArtifactType, Path]] = []
        for kind in ArtifactType:
            if no_configs or kind is ArtifactType.MODULE:
                pairs.append((kind, root))
            elif kind is ArtifactType.INDEX:
                pairs.append((kind, root / _KIND_DIRECTORIES[ArtifactType.MODEL]))
            else:
                pairs.append((kind, root / _KIND_DIRECTORIES[kind]))
        return cls(root=root, directories=tuple(pairs))

    def directory_for(self, kind: ArtifactType) -> Path:
        return dict(self.directories)[kind]

    def sub_directories(self) -> List[Path]:
        """Distinct directories below the root, in artifact order."""
        seen: List[Path] = []
        for _, path in self.directories:
            if path != self.root and path not in seen:
                seen.append(path)
        return seen

    @staticmethod
    def _relative_module(target: Path, start: Path) -> str:
        rel: str = os.path.relpath(target, start).replace(os.sep, "/")
        if rel == ".":
            return "."
        return rel if rel.startswith(".") else f"./{rel}"

    def import_prefix(self, source: ArtifactType, target: ArtifactType) -> str:
        """
        Relative module path from *source*'s directory to *target*'s,
        e.g. ``../models`` or ``.``.
        """
        return self._relative_module(
            self.directory_for(target), self.directory_for(source)
        )

    def import_prefixes(self, source: ArtifactType) -> Dict[str, str]:
        """
        Import prefixes from *source* to every per-entity kind, plus
        ``common`` for the hand-written shared code next to the output.
        """
        prefixes: Dict[str, str] = {
            _KIND_DIRECTORIES[kind]: self.import_prefix(source, kind)
            for kind in _KIND_DIRECTORIES
        }
        prefixes[COMMON_DIRECTORY] = self._relative_module(
            self.root / COMMON_DIRECTORY, self.directory_for(source)
        )
        return prefixes


class OutputWriter:
    """
    Writes generated files below a resolved ``OutputLayout``.

    Thread-safety: NOT thread-safe.  Use one writer per run.
    """

    def __init__(self, layout: OutputLayout) -> None:
        self._layout: OutputLayout = layout
        self.records: List[FileRecord] = []

    @property
    def layout(self) -> OutputLayout:
        return self._layout

    def ensure_directories(self, *, include_sub_directories: bool = True) -> List[Path]:
        """
        Create the results root and, if requested, every artifact
        sub-directory.  Returns the directories created by this call.
        """
        created: List[Path] = []
        targets: List[Path] = [self._layout.root]
        if include_sub_directories:
            targets.extend(self._layout.sub_directories())
        for path in targets:
            if ensure_directory(path):
                created.append(path)
        logger.info(
            "Output directories ready under %s (%d created).",
            self._layout.root,
            len(created),
        )
        return created

    def write(self, kind: ArtifactType, file_name: str, content: str) -> FileRecord:
        """Write *content* as *file_name* in *kind*'s directory."""
        return self._write_to(self._layout.directory_for(kind) / file_name, content)

    def write_root(self, file_name: str, content: str) -> FileRecord:
        """Write a project-level file directly into the results root."""
        return self._write_to(self._layout.root / file_name, content)

    def _write_to(self, target: Path, content: str) -> FileRecord:
        size: int = write_file(target, content)
        record: FileRecord = FileRecord(
            relative_path=target.relative_to(self._layout.root).as_posix(),
            absolute_path=str(target),
            size_bytes=size,
            line_count=count_lines(content),
            sha256=sha256_hex(content),
        )
        self.records.append(record)
        return record


__all__: List[str] = [
    "COMMON_DIRECTORY",
    "FileRecord",
    "OutputLayout",
    "OutputWriter",
]

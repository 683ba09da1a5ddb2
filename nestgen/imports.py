# File: nestgen/imports.py
"""
nestgen - Import Pruning
=========================
Templates open with one grouped import that lists every decorator the
artifact *might* use, e.g.::

    import {Index,Entity,Column,OneToMany,ManyToOne,JoinColumn,BaseEntity} from "typeorm";

After rendering, ``prune_unused_imports`` drops the names the body never
applies.  A name survives when the body contains ``@Name(``; the base class
name survives on any mention at all, since it is used in ``extends`` rather
than as a decorator.
"""

from __future__ import annotations

import logging
import re
from typing import List

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("nestgen.imports")

BASE_CLASS_NAME: str = "BaseEntity"

_EMPTY_IMPORT_RE: re.Pattern[str] = re.compile(
    r"""import\s*\{\s*\}\s*from\s*(["'])[^"'\r\n]*\1\s*;?[ \t]*(?:\r\n|\n|\r)?"""
)


def prune_unused_imports(text: str, base_class: str = BASE_CLASS_NAME) -> str:
    """
    Remove unreferenced names from the first ``{...}`` group of *text*.

    Names keep their original order and are re-joined with ``,``.  Text
    without a ``{`` followed by a ``}`` has no import group and is returned
    unchanged.  Pruning is idempotent.
    """
    open_index: int = text.find("{")
    if open_index == -1:
        return text
    close_index: int = text.find("}", open_index + 1)
    if close_index == -1:
        return text

    head: str = text[: open_index + 1]
    rest: str = text[close_index:]
    candidates: List[str] = [
        name.strip() for name in text[open_index + 1 : close_index].split(",")
    ]

    kept: List[str] = [
        name
        for name in candidates
        if name
        and (f"@{name}(" in rest or (name == base_class and name in rest))
    ]

    dropped: int = sum(1 for name in candidates if name) - len(kept)
    if dropped:
        logger.debug("Pruned %d unused import(s); kept %s.", dropped, kept)

    return f"{head}{','.join(kept)}{rest}"


def remove_empty_import(text: str) -> str:
    """
    Drop the first import statement whose group is empty (``import {} from
    "x";``), as left behind when pruning removed every name.
    """
    return _EMPTY_IMPORT_RE.sub("", text, count=1)


__all__: List[str] = [
    "BASE_CLASS_NAME",
    "prune_unused_imports",
    "remove_empty_import",
]

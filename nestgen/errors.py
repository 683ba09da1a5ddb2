# File: nestgen/errors.py
"""
nestgen - Error Taxonomy
=========================

Three classes of failure exist in a generation run:

    ConfigurationError  fatal, raised before any file is written
    FormattingFailure   recovered by ``FormatterAdapter`` only
    OSError             fatal, propagated unchanged from the filesystem

Template errors (``jinja2.TemplateError``) are not wrapped; they propagate
as-is and abort the run.
"""

from __future__ import annotations

from typing import List


class NestgenError(Exception):
    """Base class for every error raised by nestgen itself."""


class ConfigurationError(NestgenError, ValueError):
    """An option, case style or schema document is invalid."""


class FormattingFailure(NestgenError):
    """The external pretty-printer rejected or could not process a file."""

    def __init__(self, message: str, *, stderr: str = "") -> None:
        super().__init__(message)
        self.stderr: str = stderr

    def __str__(self) -> str:
        base: str = super().__str__()
        if self.stderr:
            return f"{base}: {self.stderr.strip()}"
        return base


__all__: List[str] = [
    "NestgenError",
    "ConfigurationError",
    "FormattingFailure",
]

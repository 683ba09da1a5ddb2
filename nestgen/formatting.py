# File: nestgen/formatting.py
"""
nestgen - Post-Render Formatting
=================================
Line-ending normalisation and best-effort pretty-printing.

Formatting is the one recoverable step of the pipeline: when the formatter
rejects a file, ``FormatterAdapter`` logs which entity it was, records the
diagnostic, and hands back the unformatted text so the run can continue.
"""

from __future__ import annotations

import logging
import os
import re
import subprocess
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from nestgen.errors import FormattingFailure
from nestgen.models import EolStyle, FormatterKind, GenerationOptions

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("nestgen.formatting")

_LINE_BREAK_RE: re.Pattern[str] = re.compile(r"\r\n|\n|\r")


# ---------------------------------------------------------------------------
# Line endings
# ---------------------------------------------------------------------------


def normalize_line_endings(
    text: str,
    eol: EolStyle,
    platform_eol: Optional[str] = None,
) -> str:
    """
    Rewrite every line break in *text* to *eol*.

    Nothing is rewritten when *eol* already is the platform's line ending,
    because templates render with the platform line ending.
    """
    platform: str = os.linesep if platform_eol is None else platform_eol
    target: str = eol.sequence
    if platform == target:
        return text
    return _LINE_BREAK_RE.sub(target, text)


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------


class Formatter(ABC):
    """Abstract base class for code formatters."""

    @abstractmethod
    def format(self, code: str, parser: str = "typescript") -> str:
        """
        Format the given code.

        Raises:
            FormattingFailure: the code could not be formatted.
        """


class PassthroughFormatter(Formatter):
    """Returns code unchanged."""

    def format(self, code: str, parser: str = "typescript") -> str:
        return code


class PrettierFormatter(Formatter):
    """Formatter driving the ``prettier`` CLI over stdin/stdout."""

    def __init__(
        self,
        command: Sequence[str] = ("prettier",),
        timeout: float = 30.0,
    ) -> None:
        self._command: List[str] = list(command)
        self._timeout: float = timeout

    def format(self, code: str, parser: str = "typescript") -> str:
        # Bytes in and out: text mode would translate the line endings
        cmd: List[str] = [*self._command, "--parser", parser, "--end-of-line", "auto"]
        try:
            result = subprocess.run(
                cmd,
                input=code.encode("utf-8"),
                capture_output=True,
                timeout=self._timeout,
            )
        except FileNotFoundError as exc:
            raise FormattingFailure(f"{self._command[0]} executable not found") from exc
        except subprocess.TimeoutExpired as exc:
            raise FormattingFailure(
                f"{self._command[0]} timed out after {self._timeout:g}s"
            ) from exc
        except (subprocess.SubprocessError, OSError) as exc:
            raise FormattingFailure(f"{self._command[0]} could not run: {exc}") from exc

        if result.returncode != 0:
            raise FormattingFailure(
                f"{self._command[0]} exited with status {result.returncode}",
                stderr=result.stderr.decode("utf-8", errors="replace"),
            )
        return result.stdout.decode("utf-8")


def build_formatter(options: GenerationOptions) -> Formatter:
    """Formatter selected by the generation options."""
    if options.formatter is FormatterKind.NONE:
        return PassthroughFormatter()
    return PrettierFormatter(timeout=options.formatter_timeout)


# ---------------------------------------------------------------------------
# Recovering adapter
# ---------------------------------------------------------------------------


class FormatterAdapter:
    """
    Best-effort pretty-printing.

    Every failure of the wrapped formatter is logged with the offending
    source name, appended to ``diagnostics``, and answered with the input
    text.  Only the formatter call itself is guarded.
    """

    def __init__(self, formatter: Formatter) -> None:
        self._formatter: Formatter = formatter
        self.diagnostics: List[str] = []

    def format(self, text: str, *, source: str, parser: str = "typescript") -> str:
        try:
            return self._formatter.format(text, parser=parser)
        except Exception as exc:
            message: str = f"{source}: {exc}"
            self.diagnostics.append(message)
            logger.error(
                "There were some problems with model generation for table: %s",
                source,
            )
            logger.error("  ✗ %s: %s", type(exc).__name__, exc)
            return text


__all__: List[str] = [
    "normalize_line_endings",
    "Formatter",
    "PassthroughFormatter",
    "PrettierFormatter",
    "build_formatter",
    "FormatterAdapter",
]

# File: nestgen/rendering.py
"""
nestgen - Template Renderer
============================
Thin Jinja2 substrate for the bundled templates in ``nestgen/templates/``.

Each renderer owns its own ``Environment`` with the ``NamingPolicy`` helpers
installed as globals and the platform line ending as its newline
sequence, so two runs with different policies never share
helper state.  Rendering errors are not recovered: a missing template or an
undefined variable aborts the run.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, List, Optional

import jinja2

from nestgen.naming import NamingPolicy

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("nestgen.rendering")

CURRENT_DIR: Path = Path(__file__).parent
TEMPLATES_DIR: Path = CURRENT_DIR / "templates"


class TemplateRenderer:
    """
    Renders named templates with a policy-bound helper set.

    Usage::

        renderer = TemplateRenderer(policy)
        text = renderer.render("model.ts.jinja2", entity=entity)
    """

    def __init__(
        self,
        policy: NamingPolicy,
        templates_dir: Optional[Path] = None,
    ) -> None:
        self._policy: NamingPolicy = policy
        self._templates_dir: Path = templates_dir or TEMPLATES_DIR
        self.jinja_env: jinja2.Environment = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(self._templates_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
            keep_trailing_newline=True,
            newline_sequence=os.linesep,
            undefined=jinja2.StrictUndefined,
            autoescape=False,
        )
        self.jinja_env.globals.update(policy.template_helpers())
        logger.debug("Template renderer ready on %s.", self._templates_dir)

    @property
    def policy(self) -> NamingPolicy:
        return self._policy

    def render(self, template_name: str, **context: Any) -> str:
        """
        Render *template_name* with *context*.

        Raises:
            jinja2.TemplateError: missing template, syntax error or an
                undefined variable.
        """
        template: jinja2.Template = self.jinja_env.get_template(template_name)
        return template.render(**context)


__all__: List[str] = [
    "TEMPLATES_DIR",
    "TemplateRenderer",
]

"""Template rendering for release notes."""

from __future__ import annotations

from importlib import resources
from pathlib import Path
from typing import Optional

from jinja2 import Environment, TemplateError

from .context import RenderContext

DEFAULT_TEMPLATE_NAME = "release-notes.md.j2"


def create_environment() -> Environment:
    """Return the Jinja environment used for every release-notes template."""
    return Environment(
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def load_template(template_path: Optional[Path] = None) -> str:
    """Return the template source from a user path or the packaged default."""
    if template_path is not None:
        return template_path.read_text(encoding="utf-8")
    return (
        resources.files("commit_notes")
        .joinpath("templates")
        .joinpath(DEFAULT_TEMPLATE_NAME)
        .read_text(encoding="utf-8")
    )


def render_release_notes(context: RenderContext, template: Optional[str] = None) -> str:
    """Render the release notes for a finalized context.

    Raises ValueError when the template cannot be compiled or rendered.
    """
    source = template if template is not None else load_template()
    environment = create_environment()
    try:
        compiled = environment.from_string(source)
        rendered = compiled.render(**context.as_dict())
    except TemplateError as exc:
        raise ValueError(f"failed to render release notes template: {exc}") from exc
    return rendered.strip() + "\n"

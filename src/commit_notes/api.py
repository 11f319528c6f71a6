"""Python-friendly facade for generating release notes."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from .commits import normalize_commit
from .config import ReleaseNotesConfig, load_config
from .context import RenderContext
from .pipeline import build_context
from .rendering import load_template, render_release_notes


class ReleaseNotes:
    """High-level helper that mirrors the CLI commands for Python callers."""

    def __init__(self, config: ReleaseNotesConfig) -> None:
        self._config = config

    @classmethod
    def from_file(cls, path: Path | str) -> "ReleaseNotes":
        """Create a helper from a YAML config file."""

        return cls(load_config(Path(path)))

    @property
    def config(self) -> ReleaseNotesConfig:
        return self._config

    def normalize(
        self, record: Mapping[str, Any], *, now: Optional[datetime] = None
    ) -> Optional[dict[str, Any]]:
        """Normalize a single commit record with the configured sections."""

        return normalize_commit(record, self._config.sections, now=now)

    def build_context(
        self,
        records: Iterable[Mapping[str, Any]],
        *,
        version: Optional[str],
        date: Optional[str] = None,
        env: Mapping[str, str] | None = None,
        now: Optional[datetime] = None,
    ) -> RenderContext:
        """Return the grouped and finalized render context for the records."""

        return build_context(records, self._config, version=version, date=date, env=env, now=now)

    def render(
        self,
        records: Iterable[Mapping[str, Any]],
        *,
        version: Optional[str],
        date: Optional[str] = None,
        template: Optional[str] = None,
        env: Mapping[str, str] | None = None,
        now: Optional[datetime] = None,
    ) -> str:
        """Render release notes for the records.

        Args:
            records: Commit records as exported by the release tooling.
            version: Version being released, e.g. ``2.0.0-beta.1``.
            date: Optional release date shown in the notes.
            template: Template source overriding the configured template.
            env: Environment used to look up the repository slug.
            now: Timestamp substituted for commits without a valid date.
        """

        context = self.build_context(records, version=version, date=date, env=env, now=now)
        if template is None:
            template = load_template(self._config.template_path)
        return render_release_notes(context, template)

"""End-to-end flow from raw commit records to rendered release notes."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Mapping, Optional

from .commits import normalize_commit
from .config import ReleaseNotesConfig
from .context import RenderContext
from .rendering import load_template, render_release_notes
from .sections import SectionConfig
from .sorting import group_commits
from .utils import log_debug


def normalize_commits(
    records: Iterable[Mapping[str, Any]],
    sections: Optional[SectionConfig] = None,
    *,
    now: Optional[datetime] = None,
) -> list[dict[str, Any]]:
    """Normalize every record, skipping the ones that should not be rendered."""
    kept: list[dict[str, Any]] = []
    dropped = 0
    for record in records:
        normalized = normalize_commit(record, sections, now=now)
        if normalized is None:
            dropped += 1
            continue
        kept.append(normalized)
    log_debug(f"kept {len(kept)} commit(s), dropped {dropped}.")
    return kept


def build_context(
    records: Iterable[Mapping[str, Any]],
    config: ReleaseNotesConfig,
    *,
    version: Optional[str],
    date: Optional[str] = None,
    env: Mapping[str, str] | None = None,
    now: Optional[datetime] = None,
) -> RenderContext:
    """Return a finalized render context with grouped and ordered commits."""
    commits = normalize_commits(records, config.sections, now=now)
    context = RenderContext(
        version=version,
        date=date or "",
        commit_groups=group_commits(commits, config.sections),
    )
    return config.finalize(context, env=env)


def generate_release_notes(
    records: Iterable[Mapping[str, Any]],
    config: ReleaseNotesConfig,
    *,
    version: Optional[str],
    date: Optional[str] = None,
    template: Optional[str] = None,
    env: Mapping[str, str] | None = None,
    now: Optional[datetime] = None,
) -> str:
    """Render release notes for the records using the configured template."""
    context = build_context(records, config, version=version, date=date, env=env, now=now)
    if template is None:
        template = load_template(config.template_path)
    return render_release_notes(context, template)

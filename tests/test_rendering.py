"""Tests for release-notes rendering and the end-to-end pipeline."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

from commit_notes.config import ReleaseNotesConfig
from commit_notes.context import RenderContext
from commit_notes.pipeline import build_context, generate_release_notes, normalize_commits
from commit_notes.rendering import load_template, render_release_notes

NOW = datetime(2025, 6, 1, tzinfo=timezone.utc)

RECORDS = [
    {"type": "chore", "subject": "Bump dependencies"},
    {"type": "fix", "scope": "ui", "subject": "Fix button alignment"},
    {"type": "feat", "scope": "api", "subject": "Add export", "body": "Supports CSV.\nAnd JSON."},
    {"type": "fix", "scope": "api", "subject": "Handle empty payloads"},
    {"header": "Merge pull request #7 from owner/branch"},
    {"type": "docs", "subject": "  "},
]


@pytest.fixture
def config() -> ReleaseNotesConfig:
    return ReleaseNotesConfig(
        component_dir="custom_components/met_rain_risk",
        project_name="Met Rain Risk",
        repo_slug="owner/met-rain-risk",
    )


def test_normalize_commits_drops_noise() -> None:
    kept = normalize_commits(RECORDS, now=NOW)

    assert [commit["subject"] for commit in kept] == [
        "Bump dependencies",
        "Fix button alignment",
        "Add export",
        "Handle empty payloads",
    ]


def test_build_context_groups_and_finalizes(config: ReleaseNotesConfig) -> None:
    context = build_context(RECORDS, config, version="2.0.0-beta.1", env={}, now=NOW)

    assert context.prerelease is True
    assert context.zip_name == "met_rain_risk.zip"
    assert [group.title for group in context.commit_groups] == [
        "New features",
        "Bug fixes",
        "Maintenance",
    ]
    assert [commit["scope"] for commit in context.commit_groups[1].commits] == ["api", "ui"]


def test_default_template_renders_sections(config: ReleaseNotesConfig) -> None:
    notes = generate_release_notes(
        RECORDS, config, version="2.0.0-beta.1", date="2025-06-01", env={}, now=NOW
    )

    assert notes.startswith("## Met Rain Risk 2.0.0-beta.1 (pre-release)\n")
    assert "_Released 2025-06-01_" in notes
    assert notes.index("### New features") < notes.index("### Bug fixes")
    assert notes.index("### Bug fixes") < notes.index("### Maintenance")
    assert "- **api:** Add export\n  Supports CSV.\n  And JSON.\n" in notes
    assert "- Bump dependencies\n" in notes
    assert "Merge pull request" not in notes
    assert "met_rain_risk.zip" in notes
    assert "https://github.com/owner/met-rain-risk/releases/tag/v2.0.0-beta.1" in notes
    assert notes.endswith("\n")


def test_default_template_without_commits(config: ReleaseNotesConfig) -> None:
    notes = generate_release_notes([], config, version="1.0.0", env={}, now=NOW)

    assert "(pre-release)" not in notes
    assert "_No notable changes._" in notes
    assert "_Released" not in notes


def test_custom_template_file(tmp_path: Path) -> None:
    template_path = tmp_path / "notes.md.j2"
    template_path.write_text(
        "{{ version }}|{% for group in commitGroups %}{{ group.title }};{% endfor %}",
        encoding="utf-8",
    )
    config = ReleaseNotesConfig(component_dir="components/weather", template_path=template_path)

    notes = generate_release_notes(RECORDS, config, version="1.0.0", env={}, now=NOW)

    assert notes == "1.0.0|New features;Bug fixes;Maintenance;\n"


def test_render_release_notes_rejects_broken_template() -> None:
    with pytest.raises(ValueError, match="failed to render"):
        render_release_notes(RenderContext(version="1.0.0"), "{% for %}")


def test_load_template_returns_packaged_default() -> None:
    template = load_template()

    assert "commitGroups" in template
    assert "bodyIndented" in template

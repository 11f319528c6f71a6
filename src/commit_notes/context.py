"""Render context handed to the release-notes template."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from .sorting import CommitGroup

REPOSITORY_ENV_KEY = "GITHUB_REPOSITORY"


@dataclass
class RenderContext:
    """Mutable per-release context, enriched once before rendering."""

    version: Optional[str] = None
    date: str = ""
    prerelease: bool = False
    project_name: str = ""
    repo_slug: str = ""
    component_name: str = ""
    zip_name: str = ""
    commit_groups: list[CommitGroup] = field(default_factory=list)

    def as_dict(self) -> dict[str, object]:
        """Return the context as plain data for templates and JSON export.

        Keys are camelCase to match the commit record keys next to them.
        """
        return {
            "version": self.version or "",
            "date": self.date,
            "prerelease": self.prerelease,
            "projectName": self.project_name,
            "repoSlug": self.repo_slug,
            "componentName": self.component_name,
            "zipName": self.zip_name,
            "commitGroups": [group.as_dict() for group in self.commit_groups],
        }


def is_prerelease(version: object) -> bool:
    """Return True when the version carries a pre-release suffix such as ``-beta.1``."""
    return "-" in str(version or "")


def finalize_context(
    context: RenderContext,
    *,
    project_name: Optional[str] = None,
    repo_slug: Optional[str] = None,
    component_name: str = "",
    zip_name: str = "",
    env: Mapping[str, str] | None = None,
) -> RenderContext:
    """Enrich the context in place and return it."""
    env_mapping = env if env is not None else os.environ
    context.prerelease = is_prerelease(context.version)
    context.project_name = project_name or component_name
    context.repo_slug = repo_slug or env_mapping.get(REPOSITORY_ENV_KEY) or ""
    context.component_name = component_name
    context.zip_name = zip_name
    return context

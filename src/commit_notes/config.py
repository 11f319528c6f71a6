"""Configuration helpers for commit-notes."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Optional

import yaml

from .context import RenderContext, finalize_context
from .sections import (
    DEFAULT_RELEASE_NOTE_TYPES,
    DEFAULT_SECTION_ORDER,
    SectionConfig,
    parse_section_order,
    parse_type_mapping,
)

CONFIG_RELATIVE_PATH = Path("commit-notes.yaml")


def default_config_path(project_root: Path) -> Path:
    """Return the default config path for a project root."""
    return project_root / CONFIG_RELATIVE_PATH


def _optional_string(raw: Mapping[str, Any], key: str) -> Optional[str]:
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"Config option '{key}' must be a string.")
    return value.strip() or None


@dataclass
class ReleaseNotesConfig:
    """Structured representation of the release-notes config."""

    component_dir: str
    project_name: Optional[str] = None
    repo_slug: Optional[str] = None
    zip_name: Optional[str] = None
    template_path: Optional[Path] = None
    sections: SectionConfig = field(default_factory=SectionConfig)

    def __post_init__(self) -> None:
        if not self.component_dir or not self.component_dir.strip():
            raise ValueError("Config missing 'component_dir'")

    @property
    def component_name(self) -> str:
        return posixpath.basename(self.component_dir.rstrip("/"))

    @property
    def resolved_zip_name(self) -> str:
        return self.zip_name or f"{self.component_name}.zip"

    def finalize(
        self, context: RenderContext, *, env: Mapping[str, str] | None = None
    ) -> RenderContext:
        """Enrich a render context with this project's identity."""
        return finalize_context(
            context,
            project_name=self.project_name,
            repo_slug=self.repo_slug,
            component_name=self.component_name,
            zip_name=self.resolved_zip_name,
            env=env,
        )


def parse_config(raw: object, *, base_dir: Path | None = None) -> ReleaseNotesConfig:
    """Build a config from already-parsed YAML data."""
    if raw is None:
        raw = {}
    if not isinstance(raw, MutableMapping):
        raise ValueError("Config root must be a mapping")

    component_dir = _optional_string(raw, "component_dir")
    if not component_dir:
        raise ValueError("Config missing 'component_dir'")

    template_raw = _optional_string(raw, "template")
    template_path: Optional[Path] = None
    if template_raw:
        # Relative templates resolve against the directory holding the config.
        template_path = Path(template_raw)
        if base_dir is not None and not template_path.is_absolute():
            template_path = base_dir / template_path

    sections = SectionConfig(
        order=parse_section_order(raw.get("sections")),
        types=parse_type_mapping(raw.get("types")),
    )

    return ReleaseNotesConfig(
        component_dir=component_dir,
        project_name=_optional_string(raw, "project_name"),
        repo_slug=_optional_string(raw, "repo_slug"),
        zip_name=_optional_string(raw, "zip_name"),
        template_path=template_path,
        sections=sections,
    )


def load_config(path: Path) -> ReleaseNotesConfig:
    """Load the configuration from disk."""
    if not path.exists():
        raise FileNotFoundError(f"No config found at {path}.")
    with path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle)
    return parse_config(raw, base_dir=path.parent)


def dump_config(config: ReleaseNotesConfig) -> dict[str, Any]:
    """Convert a config into a plain dictionary suitable for YAML output."""
    data: dict[str, Any] = {"component_dir": config.component_dir}
    if config.project_name:
        data["project_name"] = config.project_name
    if config.repo_slug:
        data["repo_slug"] = config.repo_slug
    if config.zip_name:
        data["zip_name"] = config.zip_name
    if config.template_path:
        data["template"] = str(config.template_path)
    if config.sections.order != DEFAULT_SECTION_ORDER:
        data["sections"] = list(config.sections.order)
    if dict(config.sections.types) != dict(DEFAULT_RELEASE_NOTE_TYPES):
        data["types"] = dict(config.sections.types)
    return data


def save_config(config: ReleaseNotesConfig, path: Path) -> None:
    """Write the configuration to disk."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(dump_config(config), handle, sort_keys=False)

"""Core package exports for commit-notes."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version as metadata_version
from typing import TYPE_CHECKING, Any

__all__ = ["__version__", "ReleaseNotes", "normalize_commit"]

try:
    __version__ = metadata_version("commit-notes")
except PackageNotFoundError:  # pragma: no cover - fallback for editable installs
    __version__ = "0.0.0"

if TYPE_CHECKING:  # pragma: no cover
    from .api import ReleaseNotes
    from .commits import normalize_commit


def __getattr__(name: str) -> Any:  # pragma: no cover - simple delegation
    if name == "ReleaseNotes":
        from .api import ReleaseNotes as _ReleaseNotes

        return _ReleaseNotes
    if name == "normalize_commit":
        from .commits import normalize_commit as _normalize_commit

        return _normalize_commit
    raise AttributeError(f"module 'commit_notes' has no attribute {name!r}")

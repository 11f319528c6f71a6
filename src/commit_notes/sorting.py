"""Ordering of commit groups and of commits within a group."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional

from .sections import DEFAULT_SECTIONS, SectionConfig
from .utils import as_text


@dataclass
class CommitGroup:
    """Normalized commits sharing one section title."""

    title: str
    commits: list[dict[str, Any]] = field(default_factory=list)

    def as_dict(self) -> dict[str, object]:
        return {"title": self.title, "commits": list(self.commits)}


def _title_of(group: object) -> str:
    if isinstance(group, str):
        return group
    if isinstance(group, Mapping):
        return as_text(group.get("title"))
    return as_text(getattr(group, "title", None))


def _compare_keys(left: tuple[Any, ...], right: tuple[Any, ...]) -> int:
    return (left > right) - (left < right)


def group_sort_key(group: object, sections: Optional[SectionConfig] = None) -> tuple[int, str]:
    """Return the (rank, title) key for a group title, group mapping, or CommitGroup.

    Ranked titles sort by declaration order; unknown titles sort after every
    ranked title and alphabetically among themselves.
    """
    sections = sections or DEFAULT_SECTIONS
    title = _title_of(group)
    return sections.rank(title), title


def compare_groups(left: object, right: object, sections: Optional[SectionConfig] = None) -> int:
    """Three-way comparison of two groups, usable with functools.cmp_to_key."""
    return _compare_keys(group_sort_key(left, sections), group_sort_key(right, sections))


def commit_sort_key(commit: Mapping[str, Any]) -> tuple[str, str]:
    """Return the (scope, subject) key; commits without a scope sort first."""
    return as_text(commit.get("scope")), as_text(commit.get("subject"))


def compare_commits(left: Mapping[str, Any], right: Mapping[str, Any]) -> int:
    """Three-way comparison of two commits by scope, then subject."""
    return _compare_keys(commit_sort_key(left), commit_sort_key(right))


def sort_groups(groups: Iterable[Any], sections: Optional[SectionConfig] = None) -> list[Any]:
    return sorted(groups, key=lambda group: group_sort_key(group, sections))


def group_commits(
    commits: Iterable[Mapping[str, Any]],
    sections: Optional[SectionConfig] = None,
) -> list[CommitGroup]:
    """Group normalized commits by their section title and order everything."""
    by_title: dict[str, list[dict[str, Any]]] = {}
    for commit in commits:
        title = as_text(commit.get("type"))
        by_title.setdefault(title, []).append(dict(commit))
    groups = [
        CommitGroup(title=title, commits=sorted(members, key=commit_sort_key))
        for title, members in by_title.items()
    ]
    return sort_groups(groups, sections)

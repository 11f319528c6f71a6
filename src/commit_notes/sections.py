"""Section titles, their order, and the commit type mapping."""

from __future__ import annotations

import sys
from collections.abc import Iterable as IterableABC
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

WILDCARD_TYPE = "*"
UNRANKED = sys.maxsize

DEFAULT_SECTION_ORDER: tuple[str, ...] = (
    "New features",
    "Bug fixes",
    "Documentation",
    "Maintenance",
    "Other changes",
)

# `refactor` shares Maintenance with `chore` to keep the heading count small.
DEFAULT_RELEASE_NOTE_TYPES: Mapping[str, str] = MappingProxyType(
    {
        "feat": "New features",
        "fix": "Bug fixes",
        "docs": "Documentation",
        "refactor": "Maintenance",
        "chore": "Maintenance",
        WILDCARD_TYPE: "Other changes",
    }
)


def build_section_order_index(order: Iterable[str]) -> Mapping[str, int]:
    """Return a read-only mapping from section title to its 0-based rank."""
    index: dict[str, int] = {}
    for rank, title in enumerate(order):
        index.setdefault(title, rank)
    return MappingProxyType(index)


def parse_type_mapping(value: object | None) -> dict[str, str]:
    """Parse a type mapping from config, supporting both dict and list formats.

    Accepts:
      - A mapping of type tokens to titles: {feat: "New features"}
      - A list of {type, section} mappings: [{type: feat, section: "New features"}]
      - None: -> the default mapping
    """
    if value is None:
        return dict(DEFAULT_RELEASE_NOTE_TYPES)
    result: dict[str, str] = {}
    if isinstance(value, Mapping):
        items = [(key, section) for key, section in value.items()]
    elif isinstance(value, IterableABC) and not isinstance(value, str):
        items = []
        for item in value:
            if not isinstance(item, Mapping):
                raise ValueError("Each 'types' item must be a mapping with 'type' and 'section'.")
            items.append((item.get("type"), item.get("section")))
    else:
        raise ValueError("Config option 'types' must be a mapping or a list.")
    for raw_type, raw_section in items:
        type_token = str(raw_type or "").strip()
        section = str(raw_section or "").strip()
        if not type_token or not section:
            raise ValueError("Type mappings require a non-empty type and section.")
        if type_token != WILDCARD_TYPE:
            type_token = type_token.lower()
        result[type_token] = section
    return result


def parse_section_order(value: object | None) -> tuple[str, ...]:
    """Parse the ordered list of section titles from config."""
    if value is None:
        return DEFAULT_SECTION_ORDER
    if isinstance(value, str) or not isinstance(value, IterableABC):
        raise ValueError("Config option 'sections' must be a list of titles.")
    titles: list[str] = []
    for item in value:
        title = str(item or "").strip()
        if title and title not in titles:
            titles.append(title)
    return tuple(titles)


@dataclass(frozen=True)
class SectionConfig:
    """Read-only section order and type mapping shared by one release run."""

    order: tuple[str, ...] = DEFAULT_SECTION_ORDER
    types: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_RELEASE_NOTE_TYPES))
    order_index: Mapping[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if WILDCARD_TYPE not in self.types:
            raise ValueError(f"Type mapping must define a '{WILDCARD_TYPE}' fallback section.")
        object.__setattr__(self, "order", tuple(self.order))
        object.__setattr__(self, "types", MappingProxyType(dict(self.types)))
        object.__setattr__(self, "order_index", build_section_order_index(self.order))

    @property
    def fallback_section(self) -> str:
        return self.types[WILDCARD_TYPE]

    def resolve(self, type_token: object) -> str:
        """Return the section title for a raw conventional-commit type token."""
        if not isinstance(type_token, str) or not type_token.strip():
            type_token = WILDCARD_TYPE
        elif type_token != WILDCARD_TYPE:
            type_token = type_token.lower()
        return self.types.get(type_token, self.fallback_section)

    def rank(self, title: object) -> int:
        """Return the rank of a section title, or UNRANKED when it is unknown."""
        if not isinstance(title, str):
            return UNRANKED
        return self.order_index.get(title, UNRANKED)


DEFAULT_SECTIONS = SectionConfig()

"""Commit record normalization for release notes."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from .sections import DEFAULT_SECTIONS, SectionConfig
from .utils import as_text, coerce_datetime, format_iso_timestamp, log_debug

MERGE_PATTERNS = (
    re.compile(r"^merge pull request", re.IGNORECASE),
    re.compile(r"^merge branch", re.IGNORECASE),
)
BODY_INDENT = "  "
_LINE_BREAK = re.compile(r"\r?\n")


def is_merge_artifact(header: object) -> bool:
    """Return True for headers generated by merging a branch or pull request."""
    text = as_text(header)
    return any(pattern.match(text) for pattern in MERGE_PATTERNS)


def indent_body(body: object) -> Optional[str]:
    """Return the body with every line indented for list continuation, or None if blank."""
    text = as_text(body).strip()
    if not text:
        return None
    return "\n".join(f"{BODY_INDENT}{line}" for line in _LINE_BREAK.split(text))


def _nested(raw: Mapping[str, Any], *keys: str) -> object:
    value: object = raw
    for key in keys:
        if not isinstance(value, Mapping):
            return None
        value = value.get(key)
    return value


def _raw_commit_date(raw: Mapping[str, Any]) -> object:
    candidates = (
        raw.get("committerDate"),
        raw.get("authorDate"),
        _nested(raw, "commit", "committer", "date"),
        _nested(raw, "commit", "author", "date"),
    )
    for candidate in candidates:
        if candidate:
            return candidate
    return None


def resolve_commit_date(raw: Mapping[str, Any], *, now: Optional[datetime] = None) -> str:
    """Return the commit timestamp as ISO-8601, substituting the current time when invalid."""
    raw_date = _raw_commit_date(raw)
    parsed = coerce_datetime(raw_date)
    if parsed is not None:
        try:
            return format_iso_timestamp(parsed)
        except (OverflowError, ValueError):
            pass
    log_debug(f"commit date {raw_date!r} is missing or invalid, using current time.")
    return format_iso_timestamp(now if now is not None else datetime.now(timezone.utc))


def normalize_commit(
    raw: Mapping[str, Any],
    sections: Optional[SectionConfig] = None,
    *,
    now: Optional[datetime] = None,
) -> Optional[dict[str, Any]]:
    """Return an enriched copy of a commit record, or None when it should be dropped.

    Merge commits and commits without a renderable subject are dropped. Kept
    commits are always visible, carry their section title in ``type`` (the
    received token moves to ``originalType``), get ``bodyIndented`` when they
    have a body, and always hold a valid ISO-8601 ``committerDate``.
    """
    sections = sections or DEFAULT_SECTIONS

    header = as_text(raw.get("header")) or as_text(raw.get("subject"))
    if is_merge_artifact(header):
        log_debug(f"dropping merge commit: {header}")
        return None

    subject = as_text(raw.get("subject")) or as_text(raw.get("header"))
    if not subject.strip():
        log_debug(f"dropping commit without subject: {raw.get('hash', '<unknown>')}")
        return None

    normalized: dict[str, Any] = dict(raw)
    normalized["subject"] = subject
    normalized["hidden"] = False

    original_type = raw.get("type")
    normalized["originalType"] = original_type
    normalized["type"] = sections.resolve(original_type)

    body_indented = indent_body(raw.get("body"))
    if body_indented is None:
        normalized.pop("bodyIndented", None)
    else:
        normalized["bodyIndented"] = body_indented

    normalized["committerDate"] = resolve_commit_date(raw, now=now)
    return normalized

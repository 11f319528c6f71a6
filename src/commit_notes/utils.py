"""Shared utilities for logging, console output, and value coercion."""

from __future__ import annotations

import logging
import sys
from datetime import date, datetime, timezone
from email.utils import parsedate_to_datetime
from typing import NoReturn, Optional

import click
import mdformat
from rich.console import Console
from rich.style import Style
from rich.theme import Theme

SUCCESS = logging.INFO + 5
logging.addLevelName(SUCCESS, "SUCCESS")

# Terminal markers shown in front of every log line, by level.
LEVEL_MARKERS = {
    logging.DEBUG: "\033[95m◆\033[0m",
    logging.INFO: "\033[94;1mi\033[0m",
    SUCCESS: "\033[92;1m✔\033[0m",
    logging.WARNING: "○",
    logging.ERROR: "\033[31m✘\033[0m",
}

_LOGGER = logging.getLogger("commit_notes")

# Rich output (previews, tables) shares stderr with the log so stdout stays
# machine-readable.
console = Console(
    stderr=True,
    theme=Theme(
        {
            "markdown.code": Style(bold=True, color="cyan"),
            "markdown.code_block": Style(color="cyan"),
            "table.header": Style(bold=True),
        }
    ),
)


class MarkerFormatter(logging.Formatter):
    """Prefix each record with the marker for its level."""

    def format(self, record: logging.LogRecord) -> str:
        marker = LEVEL_MARKERS.get(record.levelno, "")
        message = record.getMessage()
        return f"{marker} {message}" if message else marker


def configure_logging(debug: bool = False) -> logging.Logger:
    """Point the package logger at stderr, at DEBUG or INFO level."""
    level = logging.DEBUG if debug else logging.INFO
    for handler in list(_LOGGER.handlers):
        _LOGGER.removeHandler(handler)
        handler.close()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(MarkerFormatter())
    _LOGGER.addHandler(handler)
    _LOGGER.setLevel(level)
    _LOGGER.propagate = False
    return _LOGGER


def _log(level: int, message: str) -> None:
    for line in message.splitlines() or [""]:
        _LOGGER.log(level, line)


def log_debug(message: str) -> None:
    _log(logging.DEBUG, message)


def log_info(message: str) -> None:
    _log(logging.INFO, message)


def log_success(message: str) -> None:
    """Log a completed step; shown at INFO verbosity."""
    _log(SUCCESS, message)


def log_warning(message: str) -> None:
    _log(logging.WARNING, message)


def log_error(message: str) -> None:
    _log(logging.ERROR, message)


def abort_on_user_interrupt(exc: BaseException | None = None) -> NoReturn:
    """Report a Ctrl+C and leave with exit status 130."""
    log_error("cancelled by user (Ctrl+C).")
    raise click.exceptions.Exit(130) from exc


def emit_output(content: str, *, newline: bool = True) -> None:
    """Write command results to stdout, keeping stderr for diagnostics."""
    click.echo(content, nl=newline, err=False)


def as_text(value: object) -> str:
    """Return a string for arbitrary record values, mapping None to ''."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def coerce_datetime(value: object) -> Optional[datetime]:
    """Return a UTC-aware datetime object for timestamp-like inputs, preserving None.

    Accepts datetime objects, date objects (converted to midnight UTC),
    integers (epoch milliseconds), ISO-formatted strings (with or without time
    component, with a trailing ``Z``), and RFC 2822 strings as printed by git.
    All returned datetimes are timezone-aware. Unparseable input yields None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    text = str(value).strip()
    if not text:
        return None
    iso_text = text[:-1] + "+00:00" if text[-1] in "zZ" else text
    try:
        dt = datetime.fromisoformat(iso_text)
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt
    except ValueError:
        pass
    # Try parsing as date-only and convert to midnight UTC
    try:
        d = date.fromisoformat(text)
        return datetime(d.year, d.month, d.day, tzinfo=timezone.utc)
    except ValueError:
        pass
    try:
        dt = parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        return None
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def format_iso_timestamp(value: datetime) -> str:
    """Return a UTC ISO-8601 timestamp with millisecond precision and a Z suffix.

    Raises OverflowError when the value falls outside years 1-9999 once
    converted to UTC.
    """
    utc_value = value.astimezone(timezone.utc)
    return utc_value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def normalize_markdown(text: str) -> str:
    """Return Markdown with paragraphs normalized to single lines."""
    if not text.strip():
        return ""
    formatted = mdformat.text(text, options={"wrap": "no"})
    return formatted.rstrip("\n")

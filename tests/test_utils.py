"""Unit tests for shared utilities."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone

import click
import pytest

from commit_notes.utils import (
    abort_on_user_interrupt,
    as_text,
    coerce_datetime,
    configure_logging,
    format_iso_timestamp,
    log_debug,
    log_error,
    log_success,
    log_warning,
    normalize_markdown,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("2024-01-02", datetime(2024, 1, 2, tzinfo=timezone.utc)),
        ("2024-01-02T03:04:05z", datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)),
        (date(2024, 1, 2), datetime(2024, 1, 2, tzinfo=timezone.utc)),
        (
            "Tue, 2 Jan 2024 03:04:05 -0100",
            datetime(2024, 1, 2, 4, 4, 5, tzinfo=timezone.utc),
        ),
    ],
)
def test_coerce_datetime_parses_common_formats(value: object, expected: datetime) -> None:
    assert coerce_datetime(value) == expected


@pytest.mark.parametrize("value", [None, "", "   ", "not-a-date", True, [], "2024-13-45"])
def test_coerce_datetime_rejects_invalid_values(value: object) -> None:
    assert coerce_datetime(value) is None


def test_format_iso_timestamp_uses_utc_and_milliseconds() -> None:
    value = datetime(2024, 1, 2, 3, 4, 5, 678999, tzinfo=timezone(timedelta(hours=2)))

    assert format_iso_timestamp(value) == "2024-01-02T01:04:05.678Z"


def test_format_iso_timestamp_pads_early_years() -> None:
    assert format_iso_timestamp(datetime(99, 1, 1, tzinfo=timezone.utc)) == (
        "0099-01-01T00:00:00.000Z"
    )
    with pytest.raises(OverflowError):
        format_iso_timestamp(datetime(9999, 12, 31, 23, tzinfo=timezone(timedelta(hours=-2))))


def test_as_text_maps_none_to_empty_string() -> None:
    assert as_text(None) == ""
    assert as_text("x") == "x"
    assert as_text(12) == "12"


def test_normalize_markdown_handles_whitespace_only() -> None:
    assert normalize_markdown("   \n  ") == ""
    assert normalize_markdown("# Title\n\n* item") == "# Title\n\n- item"


def test_log_helpers_respect_debug_flag(capsys: pytest.CaptureFixture[str]) -> None:
    logger = configure_logging(debug=False)
    assert logger.level == logging.INFO

    log_debug("hidden detail")
    log_warning("first line\nsecond line")
    captured = capsys.readouterr()

    assert "hidden detail" not in captured.err
    assert "○ first line" in captured.err
    assert "○ second line" in captured.err

    configure_logging(debug=True)
    log_debug("visible detail")
    assert "visible detail" in capsys.readouterr().err


def test_log_helpers_mark_each_level(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging(debug=False)

    log_success("wrote notes")
    log_error("broken template")
    log_warning("")
    err = capsys.readouterr().err.splitlines()

    assert err[0].endswith("✔\033[0m wrote notes")
    assert err[1].endswith("✘\033[0m broken template")
    assert err[2] == "○"


def test_abort_on_user_interrupt_exits_130(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging(debug=False)

    with pytest.raises(click.exceptions.Exit) as excinfo:
        abort_on_user_interrupt(KeyboardInterrupt())

    assert excinfo.value.exit_code == 130
    assert "cancelled by user" in capsys.readouterr().err

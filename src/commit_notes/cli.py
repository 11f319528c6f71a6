"""Command-line interface for commit-notes."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from importlib.metadata import PackageNotFoundError, version as metadata_version
from pathlib import Path
from typing import Any, Optional

import click
import yaml
from packaging.version import InvalidVersion, Version
from rich.markdown import Markdown
from rich.table import Table

from . import __version__ as package_version
from .config import ReleaseNotesConfig, default_config_path, load_config
from .pipeline import build_context
from .rendering import load_template, render_release_notes
from .sections import WILDCARD_TYPE
from .utils import (
    abort_on_user_interrupt,
    configure_logging,
    console,
    emit_output,
    log_debug,
    log_info,
    log_success,
    log_warning,
    normalize_markdown,
)

__all__ = ["CLIContext", "cli", "create_cli_context", "main"]

VERSION_FLAGS = {"--version", "-V"}
STDIN_MARKER = "-"


def _resolve_cli_version() -> str:
    try:
        return metadata_version("commit-notes")
    except PackageNotFoundError:
        return package_version


@dataclass
class CLIContext:
    """Shared command context."""

    config_path: Path
    _config: Optional[ReleaseNotesConfig] = None

    def ensure_config(self) -> ReleaseNotesConfig:
        if self._config is None:
            try:
                self._config = load_config(self.config_path)
            except FileNotFoundError:
                log_info(f"no commit-notes config found at {self.config_path}.")
                log_info("create a commit-notes.yaml with a 'component_dir' or pass --config.")
                raise click.exceptions.Exit(1)
            except (ValueError, yaml.YAMLError) as error:
                raise click.ClickException(str(error)) from error
        return self._config


def create_cli_context(*, config: Optional[Path] = None, debug: bool = False) -> CLIContext:
    """Return a CLIContext using the same resolution logic as the CLI entry point."""

    configure_logging(debug)
    config_path = config.resolve() if config else default_config_path(Path(".").resolve())
    log_debug(f"using config path: {config_path}")
    return CLIContext(config_path=config_path)


def _read_records_text(source: str) -> str:
    if source == STDIN_MARKER:
        if sys.stdin.isatty():
            raise click.ClickException(
                "No input provided on stdin. Pipe commit records or pass a file."
            )
        return sys.stdin.read()
    path = Path(source)
    if not path.is_file():
        raise click.ClickException(f"Commit file not found: {path}")
    return path.read_text(encoding="utf-8")


def _read_records_payload(source: str) -> object:
    try:
        text = _read_records_text(source)
    except (OSError, UnicodeDecodeError) as exc:
        raise click.ClickException(f"Failed to read commit records: {exc}") from exc
    suffix = "" if source == STDIN_MARKER else Path(source).suffix.lower()
    try:
        if suffix == ".json":
            return json.loads(text)
        # YAML also accepts JSON documents piped through stdin.
        return yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise click.ClickException(f"Failed to parse commit records: {exc}") from exc


def read_commit_records(source: str) -> list[dict[str, Any]]:
    """Load commit records from a JSON/YAML file, or stdin when source is '-'."""
    payload = _read_records_payload(source)
    if isinstance(payload, dict) and "commits" in payload:
        payload = payload["commits"]
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise click.ClickException("Commit records must be a list of mappings.")
    records: list[dict[str, Any]] = []
    for index, item in enumerate(payload, start=1):
        if not isinstance(item, dict):
            raise click.ClickException(f"Commit record #{index} must be a mapping.")
        records.append(item)
    return records


def _warn_on_unusual_version(version: str) -> None:
    try:
        Version(version)
    except InvalidVersion:
        log_warning(f"'{version}' is not a valid version number; rendering anyway.")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    type=click.Path(path_type=Path, dir_okay=False),
    help="Path to an explicit commit-notes config YAML file.",
)
@click.option(
    "--debug",
    "-d",
    is_flag=True,
    help="Enable debug logging.",
)
@click.version_option(version=_resolve_cli_version())
@click.pass_context
def cli(ctx: click.Context, config: Optional[Path], debug: bool) -> None:
    """Generate release notes from conventional commit records."""

    ctx.obj = create_cli_context(config=config, debug=debug)


@cli.command("render")
@click.argument("commits", metavar="COMMITS")
@click.option("--version", "release_version", required=True, help="Version being released.")
@click.option("--date", "release_date", help="Release date shown in the notes.")
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path, dir_okay=False, writable=True),
    help="Write the notes to a file instead of stdout.",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    help="Emit the grouped render context as JSON instead of rendered text.",
)
@click.option(
    "--normalize/--no-normalize",
    default=False,
    help="Normalize the rendered Markdown with mdformat.",
)
@click.option(
    "--preview",
    is_flag=True,
    help="Also display the rendered notes on the terminal.",
)
@click.pass_obj
def render_cmd(
    ctx: CLIContext,
    commits: str,
    release_version: str,
    release_date: Optional[str],
    output: Optional[Path],
    as_json: bool,
    normalize: bool,
    preview: bool,
) -> None:
    """Render release notes from COMMITS (a JSON/YAML file, or - for stdin)."""

    config = ctx.ensure_config()
    records = read_commit_records(commits)
    _warn_on_unusual_version(release_version)

    context = build_context(records, config, version=release_version, date=release_date)
    if as_json:
        content = json.dumps(context.as_dict(), indent=2, default=str) + "\n"
    else:
        try:
            template = load_template(config.template_path)
            content = render_release_notes(context, template)
        except (OSError, ValueError) as exc:
            raise click.ClickException(str(exc)) from exc
        if normalize:
            content = normalize_markdown(content) + "\n"
        if preview:
            console.print(Markdown(content))

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(content, encoding="utf-8")
        commit_count = sum(len(group.commits) for group in context.commit_groups)
        log_success(f"wrote release notes for {commit_count} commit(s) to {output}")
    else:
        emit_output(content, newline=False)


@cli.command("sections")
@click.pass_obj
def sections_cmd(ctx: CLIContext) -> None:
    """Show the section order and the commit types mapped to each section."""

    config = ctx.ensure_config()
    sections = config.sections
    types_by_section: dict[str, list[str]] = {}
    for type_token, title in sections.types.items():
        types_by_section.setdefault(title, []).append(type_token)

    titles = list(sections.order)
    titles.extend(sorted(title for title in types_by_section if title not in sections.order_index))

    table = Table(title=f"Sections for {config.project_name or config.component_name}")
    table.add_column("#", justify="right", no_wrap=True)
    table.add_column("Section")
    table.add_column("Types")
    for title in titles:
        rank = sections.rank(title)
        position = str(rank + 1) if title in sections.order_index else "-"
        tokens = sorted(types_by_section.get(title, []), key=lambda token: token == WILDCARD_TYPE)
        table.add_row(position, title, ", ".join(tokens))
    console.print(table)


def main(argv: list[str] | None = None) -> int:
    """Entry point for console_scripts."""
    args = list(argv) if argv is not None else list(sys.argv[1:])

    command_index = next(
        (index for index, arg in enumerate(args) if arg in cli.commands), len(args)
    )
    if any(flag in args[:command_index] for flag in VERSION_FLAGS):
        click.echo(_resolve_cli_version())
        return 0

    try:
        result = cli.main(args=args, prog_name="commit-notes", standalone_mode=False)
    except click.ClickException as exc:
        exc.show(file=sys.stderr)
        exit_code = getattr(exc, "exit_code", 1)
        return exit_code if isinstance(exit_code, int) else 1
    except KeyboardInterrupt as exc:
        try:
            abort_on_user_interrupt(exc)
        except click.exceptions.Exit as exit_exc:
            exit_code = getattr(exit_exc, "exit_code", 130)
            return exit_code if isinstance(exit_code, int) else 130
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 0
    return result if isinstance(result, int) else 0

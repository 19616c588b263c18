"""Command-line interface for xerlens-core."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import click

from xerlens import __core_api_version__, __version__
from xerlens.errors import XerError


@click.group()
@click.version_option(
    version=f"{__version__} (core_api={__core_api_version__})",
    prog_name="xerlens",
)
@click.option(
    "--config-dir",
    "config_dir",
    default=".",
    type=click.Path(file_okay=False),
    help="Directory containing xerlens.yaml.",
)
@click.pass_context
def main(ctx: click.Context, config_dir: str) -> None:
    """xerlens -- inspect tab-delimited project schedule exports."""
    from xerlens.config import load_config
    from xerlens.logging import set_log_dir

    try:
        config = load_config(Path(config_dir))
    except XerError as e:
        raise click.ClickException(str(e))

    set_log_dir(
        config["log_dir"],
        fsync=bool(config["logging_fsync"]),
        tail_bytes=int(config["logging_tail_bytes"]),
    )
    ctx.obj = config


# ---------------------------------------------------------------------------
# helpers
# ---------------------------------------------------------------------------


def _read_text(config: dict[str, Any], file: str) -> str:
    from xerlens.config import read_export_text

    return read_export_text(Path(file), config)


def _load_project(config: dict[str, Any], file: str):
    from xerlens.mapper import parse_project

    try:
        return parse_project(_read_text(config, file))
    except XerError as e:
        raise click.ClickException(str(e))


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_obj
def summary(config: dict[str, Any], file: str, as_json: bool) -> None:
    """Show project identity and record counts for FILE."""
    from xerlens.filters import critical_activities

    model = _load_project(config, file)
    info = {
        "project": model.project.model_dump(),
        "header": model.header.model_dump() if model.header else None,
        "wbs_nodes": len(model.wbs),
        "activities": len(model.activities),
        "critical_activities": len(critical_activities(model.activities)),
        "relationships": len(model.relationships),
    }
    if as_json:
        click.echo(json.dumps(info, indent=2))
        return

    click.echo(f"Project: {model.project.short_name} - {model.project.name} (id {model.project.id})")
    if model.header:
        click.echo(f"Exported: {model.header.export_date} by {model.header.user_name} (v{model.header.version})")
    click.echo(f"WBS nodes: {info['wbs_nodes']}")
    click.echo(f"Activities: {info['activities']} ({info['critical_activities']} critical)")
    click.echo(f"Relationships: {info['relationships']}")


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def tables(config: dict[str, Any], file: str) -> None:
    """List every table in FILE with its column and row counts."""
    from xerlens.tables import parse_tables

    parsed = parse_tables(_read_text(config, file))
    if not parsed:
        click.echo("No tables found.")
        return
    for t in parsed:
        click.echo(f"  {t.name:20s} {len(t.columns):4d} cols {len(t.rows):8d} rows")


# ---------------------------------------------------------------------------
# WBS
# ---------------------------------------------------------------------------


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--max-depth", "max_depth", type=int, default=None, help="Hide levels deeper than N.")
@click.option("--json", "as_json", is_flag=True, help="Output as a flat JSON node list.")
@click.pass_obj
def wbs(config: dict[str, Any], file: str, max_depth: int | None, as_json: bool) -> None:
    """Print the WBS tree of FILE."""
    from xerlens.hierarchy import build_hierarchy, flatten_tree, walk_tree

    model = _load_project(config, file)
    roots = build_hierarchy(model.wbs)
    if as_json:
        click.echo(json.dumps(flatten_tree(roots), indent=2))
        return
    if not roots:
        click.echo("No WBS nodes.")
        return
    for node in walk_tree(roots, max_depth=max_depth):
        click.echo(f"{'  ' * node.level}{node.short_name}  {node.name}  [{node.wbs_id}]")


# ---------------------------------------------------------------------------
# Activities
# ---------------------------------------------------------------------------


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--wbs", "wbs_id", default=None, help="Only activities under this WBS id.")
@click.option("--critical", is_flag=True, help="Only activities with total float <= 0.")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_obj
def activities(
    config: dict[str, Any], file: str, wbs_id: str | None, critical: bool, as_json: bool
) -> None:
    """List activities in FILE, optionally limited to a WBS subtree."""
    from xerlens.filters import critical_activities, filter_activities

    model = _load_project(config, file)
    selected = filter_activities(wbs_id, model.activities, model.wbs)
    if critical:
        selected = critical_activities(selected)

    if as_json:
        click.echo(json.dumps([a.model_dump() for a in selected], indent=2))
        return
    for a in selected:
        flag = "*" if a.is_critical else " "
        click.echo(
            f"{flag} {a.task_code:12s} {a.task_name:40s} "
            f"{a.early_start_date:16s} {a.early_end_date:16s} {a.total_float:8.1f}"
        )
    click.echo(f"{len(selected)} activities")


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


@main.command("export")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.argument("out_dir", type=click.Path(file_okay=False))
@click.option("--format", "fmt", type=click.Choice(["csv", "parquet"]), default=None, help="Output format.")
@click.option("--table", "names", multiple=True, help="Only export these tables (repeatable).")
@click.pass_obj
def export_tables(
    config: dict[str, Any], file: str, out_dir: str, fmt: str | None, names: tuple[str, ...]
) -> None:
    """Write the tables of FILE to OUT_DIR as CSV or Parquet."""
    from xerlens.frames import write_tables
    from xerlens.logging.events import (
        EXPORT_WRITE_FAILED,
        EventType,
        emit_error,
        emit_info,
    )
    from xerlens.tables import parse_tables

    fmt = fmt or config["export_format"]
    parsed = parse_tables(_read_text(config, file))
    try:
        written = write_tables(parsed, Path(out_dir), fmt, list(names) or None)
    except (OSError, ValueError) as e:
        emit_error(EventType.export_written, str(e), {"out_dir": out_dir}, error_code=EXPORT_WRITE_FAILED)
        raise click.ClickException(str(e))

    emit_info(
        EventType.export_written,
        f"Wrote {len(written)} table file(s)",
        {"out_dir": out_dir, "format": fmt, "files": [p.name for p in written]},
    )
    for p in written:
        click.echo(f"  {p}")
    click.echo(f"Exported {len(written)} tables to {out_dir}")


# ---------------------------------------------------------------------------
# Logs
# ---------------------------------------------------------------------------


@main.command()
@click.option("--level", default=None, type=click.Choice(["info", "warning", "error"]))
@click.option("--event-type", "event_type", default=None, help="Filter by event type.")
@click.option("--limit", default=50, type=int, help="Maximum number of events.")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def logs(level: str | None, event_type: str | None, limit: int, as_json: bool) -> None:
    """Show recent events from the configured log directory."""
    from xerlens.logging import get_sink

    sink = get_sink()
    if sink is None:
        raise click.ClickException("Logging is disabled; set log_dir in xerlens.yaml")

    events = sink.read_events(level=level, event_type=event_type, limit=limit)
    if as_json:
        click.echo(json.dumps(events, indent=2))
        return
    if not events:
        click.echo("No events.")
        return
    for e in events:
        click.echo(f"{e.get('ts', '')}  {e.get('level', ''):7s}  {e.get('event_type', ''):18s}  {e.get('message', '')}")

"""Typer based command line entry points for SheetPulse."""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Optional

import typer

from sheetpulse.config import Settings, load_settings
from sheetpulse.core.controller import DashboardController, describe_error
from sheetpulse.core.errors import ConfigError, SheetPulseError
from sheetpulse.core.logger import get_logger, set_level
from sheetpulse.core.pipeline import StatusPipeline
from sheetpulse.render.base import NullRenderer, Renderer
from sheetpulse.render.console import ConsoleRenderer
from sheetpulse.render.json_renderer import JsonRenderer
from sheetpulse.services.feed.http import build_export_url
from sheetpulse.services.links.models import SourceDescriptor
from sheetpulse.services.links.parser import build_sheet_view_url, parse_link
from sheetpulse.services.report.exporter import export_records
from sheetpulse_persist.stores.source_store import SourceStore

app = typer.Typer(help="Project status dashboards from a Google Sheets feed.")

_CONFIG_OPTION = typer.Option(None, "--config", help="Settings YAML file (defaults to SHEETPULSE_CONFIG or packaged settings).")
_PROJECT_OPTION = typer.Option(None, "--project", help="Show only this project.")
_OWNER_OPTION = typer.Option(None, "--owner", help="Show only projects with this owner.")
_PHASE_OPTION = typer.Option(None, "--phase", help="Show only projects in this phase.")
_MILESTONE_OPTION = typer.Option(None, "--milestone", help="Show only projects with this next milestone.")
_QUERY_OPTION = typer.Option(None, "--query", "-q", help="Free-text search across the main columns.")


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        help="Set global logging level (e.g. DEBUG/INFO/WARNING).",
    ),
) -> None:
    """Configure global CLI behaviour before executing commands."""

    try:
        set_level(log_level)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--log-level") from exc


def _load_settings(config: Optional[Path]) -> Settings:
    try:
        return load_settings(config)
    except ConfigError as exc:
        get_logger().error("cli.config_error: %s", exc)
        typer.secho(f"Unable to load configuration: {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=2) from exc


def _build_controller(settings: Settings) -> DashboardController:
    try:
        pipeline = StatusPipeline(settings)
    except ConfigError as exc:
        typer.secho(f"Unable to load column mapping: {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=2) from exc
    store = SourceStore(settings.state_root)
    return DashboardController(pipeline, NullRenderer(), store=store)


def _apply_cli_filters(
    controller: DashboardController,
    *,
    project: Optional[str],
    owner: Optional[str],
    phase: Optional[str],
    milestone: Optional[str],
    query: Optional[str],
) -> None:
    for name, value in (("project", project), ("owner", owner), ("phase", phase), ("milestone", milestone)):
        if value:
            controller.filter_changed(name, value)
    if query:
        controller.query_changed(query)


def _render(controller: DashboardController, *, as_json: bool, show_options: bool) -> None:
    renderer: Renderer = JsonRenderer() if as_json else ConsoleRenderer(show_options=show_options)
    controller.renderer = renderer
    controller.refresh()
    if isinstance(renderer, JsonRenderer):
        renderer.flush()


@app.command("parse")
def cli_parse(
    link: str = typer.Argument(..., help="Google Sheets / Drive / Forms / Looker Studio link"),
    as_json: bool = typer.Option(False, "--json", help="Print the descriptor as JSON"),
    config: Optional[Path] = _CONFIG_OPTION,
) -> None:
    """Validate a link and show what it resolves to."""

    settings = _load_settings(config)
    try:
        parsed = parse_link(link)
    except SheetPulseError as exc:
        typer.secho(describe_error(exc), fg=typer.colors.RED)
        raise typer.Exit(code=2) from exc

    payload = asdict(parsed)
    if isinstance(parsed, SourceDescriptor):
        payload["view_url"] = build_sheet_view_url(parsed)
        payload["export_url"] = build_export_url(parsed, default_tab=settings.default_tab)
    if as_json:
        typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))
        return
    for key, value in payload.items():
        typer.echo(f"{key}: {value if value is not None else '-'}")


@app.command("load")
def cli_load(
    link: str = typer.Argument(..., help="Google Sheets link to load and remember"),
    project: Optional[str] = _PROJECT_OPTION,
    owner: Optional[str] = _OWNER_OPTION,
    phase: Optional[str] = _PHASE_OPTION,
    milestone: Optional[str] = _MILESTONE_OPTION,
    query: Optional[str] = _QUERY_OPTION,
    as_json: bool = typer.Option(False, "--json", help="Emit KPIs, rows and filter options as JSON"),
    show_options: bool = typer.Option(False, "--show-options/--hide-options", help="List available filter values"),
    config: Optional[Path] = _CONFIG_OPTION,
) -> None:
    """Load a sheet link, save it as the current source, and show its status."""

    settings = _load_settings(config)
    controller = _build_controller(settings)
    try:
        parsed = controller.submit_link(link)
        _apply_cli_filters(controller, project=project, owner=owner, phase=phase, milestone=milestone, query=query)
        _render(controller, as_json=as_json, show_options=show_options)
    finally:
        controller.close()
    if parsed is None:
        raise typer.Exit(code=2)
    if isinstance(parsed, SourceDescriptor) and not controller.state.records:
        raise typer.Exit(code=1)


@app.command("show")
def cli_show(
    project: Optional[str] = _PROJECT_OPTION,
    owner: Optional[str] = _OWNER_OPTION,
    phase: Optional[str] = _PHASE_OPTION,
    milestone: Optional[str] = _MILESTONE_OPTION,
    query: Optional[str] = _QUERY_OPTION,
    as_json: bool = typer.Option(False, "--json", help="Emit KPIs, rows and filter options as JSON"),
    show_options: bool = typer.Option(False, "--show-options/--hide-options", help="List available filter values"),
    config: Optional[Path] = _CONFIG_OPTION,
) -> None:
    """Show status for the saved source (or the configured default)."""

    settings = _load_settings(config)
    controller = _build_controller(settings)
    try:
        parsed = controller.start()
        _apply_cli_filters(controller, project=project, owner=owner, phase=phase, milestone=milestone, query=query)
        _render(controller, as_json=as_json, show_options=show_options)
    finally:
        controller.close()
    if isinstance(parsed, SourceDescriptor) and not controller.state.records:
        raise typer.Exit(code=1)
    if parsed is None:
        raise typer.Exit(code=2)


@app.command("reset-source")
def cli_reset_source(config: Optional[Path] = _CONFIG_OPTION) -> None:
    """Forget the saved link and go back to the configured default sheet."""

    settings = _load_settings(config)
    if not settings.default_link:
        typer.secho("No default_link configured; nothing to reset to.", fg=typer.colors.RED)
        raise typer.Exit(code=2)
    SourceStore(settings.state_root).save_last_source(settings.default_link)
    typer.echo(f"Reset to default master status sheet: {settings.default_link}")


@app.command("export")
def cli_export(
    link: str = typer.Argument(..., help="Google Sheets link to export"),
    output: Path = typer.Option(..., "--output", "-o", help="Target .csv or .xlsx file", resolve_path=True),
    project: Optional[str] = _PROJECT_OPTION,
    owner: Optional[str] = _OWNER_OPTION,
    phase: Optional[str] = _PHASE_OPTION,
    milestone: Optional[str] = _MILESTONE_OPTION,
    query: Optional[str] = _QUERY_OPTION,
    config: Optional[Path] = _CONFIG_OPTION,
) -> None:
    """Export the (filtered) project rows plus a KPI summary."""

    if output.suffix.lower() not in {".csv", ".xlsx"}:
        raise typer.BadParameter("output must end with .csv or .xlsx", param_hint="--output")
    settings = _load_settings(config)
    controller = _build_controller(settings)
    try:
        parsed = controller.submit_link(link)
        if not isinstance(parsed, SourceDescriptor) or not controller.state.records:
            typer.secho(controller.state.feedback or "Link has no tabular data.", fg=typer.colors.RED)
            raise typer.Exit(code=1)
        _apply_cli_filters(controller, project=project, owner=owner, phase=phase, milestone=milestone, query=query)
        result = export_records(
            controller.visible_records,
            controller.kpis,
            output,
            source_url=build_sheet_view_url(parsed),
        )
    finally:
        controller.close()
    typer.echo(f"Exported {result.rows} rows to {result.table_path}")
    typer.echo(f"Summary written to {result.summary_path}")


@app.command("health")
def cli_health(config: Optional[Path] = _CONFIG_OPTION) -> None:
    """Check that the state directory used for the saved source is writable."""

    settings = _load_settings(config)
    health = SourceStore(settings.state_root).healthcheck()
    status = "OK" if health.is_healthy() else "FAIL"
    typer.echo(f"[{status}] source store")
    for path, ok in health.writable_paths.items():
        typer.echo(f"  writable {path}: {'yes' if ok else 'no'}")
    if health.issues:
        typer.echo("  issues:")
        for issue in health.issues:
            typer.echo(f"    - {issue}")
        raise typer.Exit(code=1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()

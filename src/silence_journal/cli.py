"""CLI entry point for the journal analytics."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Any

import click

from .core.config import Settings, load_settings
from .core.errors import JournalError
from .journal.export import TradeExporter, default_filename
from .journal.service import JournalAnalytics
from .llm.factory import build_insight_provider
from .observability.logger import bind_context, get_logger, setup_logging
from .storage.json_store import JsonSettingsStore, JsonTradeStore

log = get_logger(__name__)


def _echo_json(payload: Any) -> None:
    click.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def _analytics(settings: Settings) -> JournalAnalytics:
    return JournalAnalytics(
        JsonTradeStore(settings.storage.trades_path),
        JsonSettingsStore(settings.storage.settings_path),
        insights=build_insight_provider(settings),
    )


def _run(ctx: click.Context, command: str, fn) -> Any:
    bind_context(command=command)
    try:
        return fn(_analytics(ctx.obj))
    except JournalError as exc:
        log.error("command_failed", command=command, error=str(exc))
        raise click.ClickException(str(exc)) from exc


@click.group()
@click.option("--config", "config_path", default=None, help="TOML config file path")
@click.option("--data-dir", default=None, help="Directory holding the journal documents")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, data_dir: str | None) -> None:
    """Silence Journal trade analytics."""
    overrides: dict[str, Any] = {}
    if data_dir:
        overrides["storage"] = {"data_dir": data_dir}
    settings = load_settings(config_path, overrides)
    setup_logging(settings.observability.log_level, settings.observability.log_format)
    ctx.obj = settings


@main.command()
@click.pass_context
def metrics(ctx: click.Context) -> None:
    """Dashboard metrics over every trade."""
    result = _run(ctx, "metrics", lambda a: a.metrics())
    _echo_json(result.to_document())


@main.command()
@click.option("--system-id", required=True, help="Trading system id")
@click.option("--recent", is_flag=True, help="Only the trailing 30 days")
@click.pass_context
def violations(ctx: click.Context, system_id: str, recent: bool) -> None:
    """Rule violation ranking for one system."""
    result = _run(ctx, "violations", lambda a: a.rule_violations(system_id, recent=recent))
    _echo_json([stat.to_document() for stat in result])


@main.command()
@click.pass_context
def psychology(ctx: click.Context) -> None:
    """Psychology score, strengths, risks and warnings."""
    result = _run(ctx, "psychology", lambda a: a.psychology())
    _echo_json(result.to_document())


@main.command()
@click.option("--system-id", required=True, help="Trading system id")
@click.pass_context
def system(ctx: click.Context, system_id: str) -> None:
    """Edge diagnostics for one system."""
    result = _run(ctx, "system", lambda a: a.system_intelligence(system_id))
    _echo_json(result.to_document())


@main.command()
@click.option("--system-id", required=True, help="Trading system id")
@click.pass_context
def coach(ctx: click.Context, system_id: str) -> None:
    """Coaching narrative for one system."""
    result = _run(ctx, "coach", lambda a: a.coach(system_id))
    _echo_json(result.to_document())


@main.command()
@click.option(
    "--format", "fmt", type=click.Choice(["csv", "json"]), default="csv", help="Export format"
)
@click.option("--output", default=None, help="Output file (default: dated file in the data dir)")
@click.option("--stdout", "to_stdout", is_flag=True, help="Print instead of writing a file")
@click.pass_context
def export(ctx: click.Context, fmt: str, output: str | None, to_stdout: bool) -> None:
    """Export every trade as CSV or JSON."""
    settings: Settings = ctx.obj
    bind_context(command="export")
    try:
        trades = JsonTradeStore(settings.storage.trades_path).list()
        user_settings = JsonSettingsStore(settings.storage.settings_path).get()
    except JournalError as exc:
        raise click.ClickException(str(exc)) from exc

    exporter = TradeExporter()
    if fmt == "csv":
        content = exporter.to_csv(trades, user_settings)
    else:
        content = exporter.to_json(trades, user_settings)

    if to_stdout:
        click.echo(content)
        return

    path = Path(output) if output else Path(settings.storage.data_dir) / default_filename(fmt, date.today())
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    log.info("export_written", path=str(path), trades=len(trades), format=fmt)
    _echo_json({"path": str(path), "totalTrades": len(trades), "format": fmt})


if __name__ == "__main__":
    main()

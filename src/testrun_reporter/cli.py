from pathlib import Path
from typing import Optional
import sys
import typer
from .config import load_config, ReporterConfig
from .logging import setup_logging
from .replay import replay as replay_events, ReplayError
from .reporters.verbose import VerboseReporter

app = typer.Typer(add_completion=False, help="testrun-reporter - render test-run event streams for the terminal")

@app.callback()
def main():
    """Render recorded test-run events as a verbose terminal report."""

@app.command()
def replay(
    events: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON-lines event log to replay"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to reporter config YAML"),
    watch: Optional[bool] = typer.Option(None, "--watch/--no-watch", help="Render as a watch-mode session"),
    threshold: Optional[int] = typer.Option(None, "--threshold", help="Show durations above this many ms"),
    project_dir: Optional[str] = typer.Option(None, "--project-dir", help="Show paths relative to this directory"),
    color: Optional[bool] = typer.Option(None, "--color/--no-color", help="Force colors on or off"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level for diagnostics on stderr"),
):
    log = setup_logging(log_level.upper())
    cfg: ReporterConfig = load_config(config) if config else ReporterConfig()
    overrides = {"watching": watch, "duration_threshold": threshold, "project_dir": project_dir, "color": color}
    cfg = ReporterConfig.model_validate({**cfg.model_dump(), **{k: v for k, v in overrides.items() if v is not None}})
    log.debug("replaying %s with %s", events, cfg)

    reporter = VerboseReporter(cfg, report_stream=sys.stdout, std_stream=sys.stderr)
    with events.open(encoding="utf-8") as f:
        try:
            stats = replay_events(f, reporter)
        except ReplayError as e:
            typer.echo(f"{events}: {e}", err=True)
            raise typer.Exit(code=2)

    failed = stats is not None and (
        stats.failed_hooks or stats.failed_tests or stats.unhandled_rejections or stats.uncaught_exceptions
    )
    raise typer.Exit(code=1 if failed else 0)

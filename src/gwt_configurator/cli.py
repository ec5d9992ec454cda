"""Typer-based CLI for the GWT project configurator."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.progress import BarColumn, Progress, TaskID, TextColumn
from rich.table import Table

from .config import Config, ConfigError, load_config, save_config
from .configurator import build_configurator, describe_project
from .errors import PomError
from .pom import load_project

app = typer.Typer(help="Configure Maven GWT projects for Eclipse.")
console = Console()


def _configure_logging(level: str, log_file: Path | None) -> None:
    logger.remove()
    logger.add(console.print, level=level, format="{level}: {message}")
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(log_file, level=level)


class RichProgressMonitor:
    """Show artifact resolution progress on the console."""

    def __init__(self, progress: Progress) -> None:
        self.progress = progress
        self.task: TaskID | None = None

    def begin_task(self, name: str, total: int) -> None:
        self.task = self.progress.add_task(name, total=total)

    def worked(self, amount: int) -> None:
        if self.task is not None:
            self.progress.advance(self.task, amount)

    def done(self) -> None:
        if self.task is not None:
            self.progress.remove_task(self.task)
            self.task = None

    def is_canceled(self) -> bool:
        return False


def _load(config_path: Optional[Path]) -> Config:
    try:
        return load_config(config_path)
    except ConfigError as exc:
        console.print(f"[red]Configuration error:[/red] {exc}")
        raise typer.Exit(code=4)


@app.command()
def configure(
    path: Path = typer.Argument(..., exists=True, readable=True, help="pom.xml or the project directory"),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to configuration YAML"),
    offline: bool = typer.Option(False, "--offline", help="Do not download gwt-dev"),
    local_repo: Optional[Path] = typer.Option(None, "--local-repo", help="Local Maven repository"),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write the log to this file"),
) -> None:
    """Attach the GWT nature and write the web app settings for a project."""

    _configure_logging(log_level.upper(), log_file)
    settings = _load(config)
    if offline:
        settings.resolution.offline = True
    if local_repo is not None:
        settings.resolution.local_repository = local_repo

    try:
        project = load_project(path)
    except PomError as exc:
        console.print(f"[red]POM error:[/red] {exc}")
        raise typer.Exit(code=3)

    configurator = build_configurator(settings)
    with Progress(TextColumn("{task.description}"), BarColumn(), console=console, transient=True) as progress:
        result = configurator.configure(project, monitor=RichProgressMonitor(progress))

    for message in result.errors:
        console.print(f"[red]ERROR:[/red] {message.text}")
    for message in result.warnings:
        console.print(f"[yellow]WARNING:[/yellow] {message.text}")

    if result.has_errors:
        raise typer.Exit(code=2)
    if not result.has_nature:
        console.print(f"[yellow]{project.artifact_id} is not a GWT project; nothing configured.[/yellow]")
        return
    for effect in result.side_effects:
        detail = f" ({effect.detail})" if effect.detail else ""
        console.print(f"  {effect.kind.value}: {effect.target}{detail}")
    console.print("[green]GWT project configured.[/green]")


@app.command()
def inspect(
    path: Path = typer.Argument(..., exists=True, readable=True),
    config: Optional[Path] = typer.Option(None, "--config"),
) -> None:
    """Show what configure would do, without changing anything."""

    settings = _load(config)
    try:
        summary = describe_project(path, config=settings)
    except PomError as exc:
        console.print(f"[red]POM error:[/red] {exc}")
        raise typer.Exit(code=3)

    table = Table(title=f"{summary.artifact_id}:{summary.version}")
    table.add_column("Setting")
    table.add_column("Value")
    table.add_row("GWT project", "yes" if summary.is_gwt_project else "no")
    table.add_row("GWT version", summary.gwt_version or "-")
    table.add_row("Plugin convention", summary.convention.value)
    table.add_row("GWT nature attached", "yes" if summary.has_nature else "no")
    table.add_row("warSrcDir", summary.war_src_dir)
    table.add_row("warSrcDirIsOutput", str(summary.launch_from_war_dir).lower())
    table.add_row("lastWarOutDir", str(summary.war_out_dir) if summary.war_out_dir else f"- ({summary.war_out_dir_error})")
    console.print(table)


@app.command("init-config")
def init_config(path: Path = typer.Argument(..., writable=True, resolve_path=True)) -> None:
    """Write a default configuration file to PATH."""

    save_config(Config(), path)
    console.print(f"[green]Wrote configuration to {path}[/green]")


if __name__ == "__main__":
    app()

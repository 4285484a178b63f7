"""
Command-line interface for termnews.

Uses Typer for commands and Rich for output. Configuration is loaded once in
the app callback and shared with the commands through the Typer context.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from .config import AppConfig, config_template, find_config_path, load_config, user_config_path
from .core.errors import (
    AllSourcesFailed,
    ConfigError,
    ExtractionError,
    FetchError,
    UnsupportedContent,
)
from .core.types import AggregatedFeed, FeedItem
from .output.saver import save_article, save_bookmark
from .runner import read_url, refresh_group
from .utils.logging import setup_logging

# Extracted bodies shorter than this are probably a script-rendered page
EMPTY_CONTENT_CHARS = 50

app = typer.Typer(add_completion=False, help="Read RSS/Atom news groups in the terminal.")
console = Console()
err_console = Console(stderr=True)


class _State:
    def __init__(self, cfg: AppConfig, logger: logging.Logger, config_path: Path | None):
        self.cfg = cfg
        self.logger = logger
        self.config_path = config_path


@app.callback()
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(None, "--config", "-c", help="Path to config.yaml."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    log_file: bool | None = typer.Option(
        None, "--log-file/--no-log-file", help="Enable or disable file logging."
    ),
):
    """Load configuration and set up logging for every command."""
    config_path = find_config_path(str(config) if config else None)
    if ctx.invoked_subcommand == "edit-config":
        ctx.obj = _State(AppConfig(), logging.getLogger("termnews"), config_path)
        return
    try:
        cfg = load_config(str(config_path) if config_path else None)
        if log_level:
            cfg.logging.level = log_level
        if log_file is not None:
            cfg.logging.file = log_file
        logger = setup_logging(cfg.logging, log_dir=Path("logs"))
    except ConfigError as exc:
        err_console.print(f"[red]Config error:[/red] {exc}")
        raise typer.Exit(code=2)
    ctx.obj = _State(cfg, logger, config_path)


@app.command()
def groups(ctx: typer.Context):
    """List the configured feed groups."""
    state: _State = ctx.obj
    table = Table(title="Feed groups")
    table.add_column("#", justify="right")
    table.add_column("Name")
    table.add_column("Sources", justify="right")
    for index, group in enumerate(state.cfg.groups(), start=1):
        table.add_row(str(index), group.name, str(len(group.source_urls)))
    console.print(table)


@app.command()
def refresh(
    ctx: typer.Context,
    group: str = typer.Argument(..., help="Group name or 1-based index."),
    limit: int | None = typer.Option(None, "--limit", "-n", min=1, help="Show at most N items."),
    as_json: bool = typer.Option(False, "--json", help="Print items as JSON."),
):
    """Fetch every feed of a group and print the merged items, newest first."""
    state: _State = ctx.obj
    selected = state.cfg.find_group(group)
    if selected is None:
        err_console.print(f"[red]Unknown group:[/red] {group}")
        raise typer.Exit(code=2)

    try:
        feed = refresh_group(selected, state.cfg, logger=state.logger)
    except AllSourcesFailed as exc:
        err_console.print(f"[red]{exc}[/red]")
        for failure in exc.failures:
            err_console.print(f"  {failure.url}: {failure.error}")
        raise typer.Exit(code=1)

    for failure in feed.failures:
        err_console.print(f"[yellow]Skipped {failure.url}[/yellow] ({failure.kind}: {failure.error})")

    items = feed.items[:limit] if limit else feed.items
    if as_json:
        console.print_json(json.dumps([_item_to_dict(item) for item in items]))
        return
    _print_feed(feed, items)


@app.command()
def read(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Article URL."),
    save: bool = typer.Option(False, "--save", help="Also save the article as Markdown."),
    raw_fallback: bool | None = typer.Option(
        None,
        "--raw-fallback/--no-raw-fallback",
        help="Show the page's plain text when no article body is found.",
    ),
):
    """Fetch an article and show its readable content."""
    state: _State = ctx.obj
    try:
        result = read_url(url, state.cfg, logger=state.logger, raw_fallback=raw_fallback)
    except FetchError as exc:
        err_console.print(f"[red]Could not fetch {url}:[/red] {exc}")
        raise typer.Exit(code=1)
    except UnsupportedContent as exc:
        err_console.print(f"[yellow]Media file ({exc.content_type}).[/yellow] {_open_hint(url)}")
        raise typer.Exit(code=1)
    except ExtractionError as exc:
        err_console.print(f"[red]Could not read {url}:[/red] {exc}")
        err_console.print(_open_hint(url))
        raise typer.Exit(code=1)

    if result.article is None:
        err_console.print(f"[yellow]Reader mode failed ({result.error}); showing raw text.[/yellow]")
        console.print(result.raw_text or "(no text)")
        return

    article = result.article
    if article.title:
        console.rule(f"[bold]{article.title}[/bold]")
    console.print(f"[dim]{article.source_url}[/dim]\n")
    console.print(article.body_text)
    if len(article.body_text.strip()) < EMPTY_CONTENT_CHARS:
        err_console.print(f"[yellow]Empty content.[/yellow] {_open_hint(article.source_url)}")
    if save:
        path = save_article(article, Path(state.cfg.output.articles_dir))
        console.print(f"\n[green]Saved to {path}[/green]")


@app.command()
def save(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Link to save."),
    title: str = typer.Option("", "--title", "-t", help="Link text."),
):
    """Append a link to the saved-news file."""
    state: _State = ctx.obj
    try:
        message = save_bookmark(title, url, Path(state.cfg.output.saved_file))
    except ValueError as exc:
        err_console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=2)
    console.print(f"[green]{message}[/green]")


@app.command("open")
def open_url(url: str = typer.Argument(..., help="URL to open.")):
    """Open a link in the default browser."""
    typer.launch(url)


@app.command("edit-config")
def edit_config(ctx: typer.Context):
    """Create the config file from a template if missing, then open it."""
    state: _State = ctx.obj
    path = state.config_path or user_config_path()
    if not path.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(config_template(), encoding="utf-8")
        console.print(f"Created {path}")
    typer.launch(str(path))


def _open_hint(url: str) -> str:
    return f"Run: termnews open {url}"


def _print_feed(feed: AggregatedFeed, items: list[FeedItem]) -> None:
    table = Table(title=f"{feed.group} ({len(feed)} items)", show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Published", no_wrap=True)
    table.add_column("Title")
    table.add_column("Source", style="cyan")
    for index, item in enumerate(items, start=1):
        published = item.published_at.strftime("%Y-%m-%d %H:%M") if item.published_at else "-"
        table.add_row(str(index), published, item.title, item.source_feed)
    console.print(table)


def _item_to_dict(item: FeedItem) -> dict:
    return {
        "title": item.title,
        "link": item.link,
        "summary": item.summary,
        "published_at": item.published_at.isoformat() if item.published_at else None,
        "source_feed": item.source_feed,
    }


if __name__ == "__main__":
    app()

#!/usr/bin/env python3
"""
Headline Curator CLI - command line interface for the ingestion pipeline.

Commands:
    ingest       Run one ingestion pass and print the run summary
    process-url  Fetch, analyze and store a single article URL
    prune        Delete published headlines older than the retention window
    score        Show the keyword relevance score of a piece of text
    sources      List configured sources
    version      Show version information
"""
import asyncio
import sys
from datetime import timedelta
from pathlib import Path
from typing import Optional
import json

import typer
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn

# Add the app directory to the path for imports
sys.path.insert(0, str(Path(__file__).parent))

app = typer.Typer(
    name="curator",
    help="Headline Curator - news ingestion and curation CLI",
    add_completion=False,
)
console = Console()


async def init_services():
    """Initialize database tables."""
    from app.database import init_db
    await init_db()


def _setup_logging(verbose: bool):
    from app.core.logging import init_logging
    init_logging(verbose=verbose, session_log=True)


def _finish_logging():
    from app.core.logging import get_session_log_file, shutdown_logging

    log_file = get_session_log_file()
    if log_file:
        console.print(f"[dim]Session log: {log_file}[/dim]")
    shutdown_logging()


# ============================================================================
# INGEST Command - Run the pipeline once
# ============================================================================

@app.command()
def ingest(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress to the console"),
    json_output: bool = typer.Option(False, "--json", help="Output summary as JSON"),
):
    """
    Run one ingestion pass.

    Fetches all sources, deduplicates, analyzes and stores new drafts.

    Examples:
        curator ingest           # Run and print a summary table
        curator ingest --json    # Machine-readable summary
    """
    _setup_logging(verbose)

    async def _ingest():
        await init_services()

        from app.core.dependencies import init_coordinator

        coordinator = init_coordinator()

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            disable=json_output,
        ) as progress:
            task = progress.add_task("Running ingestion...", total=None)
            summary = await coordinator.run_ingestion()
            progress.update(task, description="Ingestion complete!")

        if json_output:
            console.print_json(json.dumps(summary.to_response()))
            return

        color = "red" if summary.error else "green"
        console.print(f"\n[{color}]{summary.message}[/{color}]")

        table = Table(title="Run Summary", show_header=True)
        table.add_column("Counter", style="cyan")
        table.add_column("Value", justify="right")
        table.add_row("Fetched", str(summary.total_candidates))
        table.add_row("Unique", str(summary.unique_candidates))
        table.add_row("Filtered", str(summary.filtered_count))
        table.add_row("Skipped", str(summary.skipped_count))
        table.add_row("Stored", f"[green]{summary.processed_count}[/green]")
        table.add_row("Errors", f"[red]{summary.error_count}[/red]" if summary.error_count else "0")
        table.add_row("Duration", f"{summary.duration_seconds:.1f}s")
        console.print(table)

        sources_table = Table(title="\nSources", show_header=True)
        sources_table.add_column("Name", style="cyan")
        sources_table.add_column("Type", style="dim")
        sources_table.add_column("Status")
        sources_table.add_column("Kept", justify="right")
        for collector in coordinator.collectors:
            status = collector.get_status()
            color = {"healthy": "green", "degraded": "yellow"}.get(status["health"], "red")
            sources_table.add_row(
                status["name"],
                status["source_type"],
                f"[{color}]{status['health']}[/{color}]",
                str(status["last_run_items"]),
            )
        console.print(sources_table)

        if summary.failed_sources:
            console.print(f"[yellow]Failed sources: {', '.join(summary.failed_sources)}[/yellow]")
        if summary.error:
            console.print(f"[red]Error: {summary.error}[/red]")

    try:
        asyncio.run(_ingest())
    finally:
        _finish_logging()


# ============================================================================
# PROCESS-URL Command - Manual single article
# ============================================================================

@app.command("process-url")
def process_url(
    url: str = typer.Argument(..., help="Article URL"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress to the console"),
):
    """
    Fetch, analyze and store a single article.

    Examples:
        curator process-url https://example.com/news/model-launch
    """
    _setup_logging(verbose)

    async def _process():
        await init_services()

        from app.core.dependencies import init_manual_processor
        from app.services.ingestion import ManualProcessError

        processor = init_manual_processor()
        try:
            draft = await processor.process(url)
        except ManualProcessError as e:
            console.print(f"[red]Failed ({e.status_code}): {e.message}[/red]")
            raise typer.Exit(code=1)

        console.print(Panel(
            f"[bold]{draft.title}[/bold]\n\n"
            f"{draft.summary}\n\n"
            f"[dim]Hype: {draft.hype_score} | Category: {draft.category} | Source: {draft.source}[/dim]",
            title="Stored draft",
            border_style="green",
        ))

    try:
        asyncio.run(_process())
    finally:
        _finish_logging()


# ============================================================================
# PRUNE Command
# ============================================================================

@app.command()
def prune(
    hours: Optional[int] = typer.Option(None, "--hours", "-h", help="Retention window (default PRUNE_AFTER_HOURS)"),
):
    """
    Delete published headlines older than the retention window.

    Drafts awaiting moderation are never deleted.
    """
    _setup_logging(False)

    async def _prune():
        await init_services()

        from app.core.config import settings
        from app.core.dependencies import init_store
        from app.services.collectors.base import utc_now
        from app.services.ingestion import StoreWriteError

        window = hours if hours is not None else settings.PRUNE_AFTER_HOURS
        cutoff = utc_now() - timedelta(hours=window)
        try:
            deleted = await init_store().prune_published(cutoff)
        except StoreWriteError as e:
            console.print(f"[red]Prune failed: {e}[/red]")
            raise typer.Exit(code=1)

        console.print(f"[green]Deleted {deleted} published headlines older than {window}h[/green]")

    try:
        asyncio.run(_prune())
    finally:
        _finish_logging()


# ============================================================================
# SCORE Command - Inspect relevance scoring
# ============================================================================

@app.command()
def score(
    text: str = typer.Argument(..., help="Title and/or snippet to score"),
):
    """
    Show the relevance score of a text and which keyword groups matched.

    Examples:
        curator score "OpenAI raises funding for new LLM"
    """
    from app.core.config import settings
    from app.services.processing import RelevanceScorer

    breakdown = RelevanceScorer().breakdown(text)
    passes = breakdown.score >= settings.RELEVANCE_FLOOR
    verdict = "[green]kept[/green]" if passes else "[red]below floor[/red]"

    console.print(f"\n[bold]Score:[/bold] {breakdown.score}/5 ({verdict}, floor {settings.RELEVANCE_FLOOR})")
    console.print(f"[bold]Weighted total:[/bold] {breakdown.weighted_total}")

    if breakdown.components:
        table = Table(show_header=True)
        table.add_column("Keyword group", style="cyan")
        table.add_column("Contribution", justify="right")
        for name, value in sorted(breakdown.components.items(), key=lambda x: -x[1]):
            table.add_row(name, str(value))
        console.print(table)


# ============================================================================
# SOURCES Command
# ============================================================================

@app.command()
def sources():
    """List configured sources."""
    from app.services.collectors import get_source_status

    status = get_source_status()

    newsdata = status["newsdata"]
    configured = "[green]configured[/green]" if newsdata["configured"] else "[yellow]no API key[/yellow]"
    console.print(f"\n[bold]NewsData.io:[/bold] {configured} ({newsdata['endpoint']})")

    table = Table(title="\nRSS Feeds", show_header=True)
    table.add_column("Source", style="cyan")
    table.add_column("Category", style="dim")
    table.add_column("URL")
    for feed in status["rss"]["feeds"]:
        table.add_row(feed["source_name"], feed["category"] or "", feed["url"])
    console.print(table)


# ============================================================================
# VERSION Command
# ============================================================================

@app.command()
def version():
    """Show version information."""
    console.print(Panel(
        "[bold cyan]HEADLINE CURATOR[/bold cyan]\n"
        "News ingestion and curation pipeline\n\n"
        "[dim]Version: 0.1.0[/dim]",
        title="Headline Curator",
        border_style="cyan",
    ))


# ============================================================================
# Main entry point
# ============================================================================

if __name__ == "__main__":
    app()

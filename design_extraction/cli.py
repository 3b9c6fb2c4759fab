"""
Command-line interface for the design extraction scheduler.

Loads a design tree from JSON, runs the bounded extraction over every node
and reports the run statistics and recommendations.
"""

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from design_extraction.config import (
    CachingConfig,
    ProcessingConfig,
    StreamingConfig,
    get_settings,
)
from design_extraction.extractors import summarize_node
from design_extraction.models import FallbackStrategy, OptimizationResult
from design_extraction.optimizer.optimizer import create_optimizer
from design_extraction.tree import flatten_nodes, load_nodes
from design_extraction.utils.errors import DesignExtractionError
from design_extraction.utils.logging import setup_logging

app = typer.Typer(
    name="design-extraction",
    help="Bounded, prioritized extraction of large design-document trees",
    add_completion=False,
)
console = Console()


def _render_result(result: OptimizationResult) -> None:
    stats = result.performance

    table = Table(title="Extraction run")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Total nodes", str(stats.total_nodes))
    table.add_row("Processed", str(stats.processed_nodes))
    table.add_row("Skipped (budget)", str(stats.skipped_nodes))
    table.add_row("Served from cache", str(stats.cached_nodes))
    table.add_row("Failed (fallback)", str(stats.error_count))
    table.add_row("Records", str(len(result.results)))
    table.add_row("Total time", f"{stats.processing_time_ms:.1f} ms")
    table.add_row("Average per node", f"{stats.average_node_time_ms:.2f} ms")
    console.print(table)

    if not result.recommendations:
        console.print("[green]✓[/green] No recommendations")
        return

    rec_table = Table(title="Recommendations")
    rec_table.add_column("Priority", justify="center")
    rec_table.add_column("Type", style="magenta")
    rec_table.add_column("Title", style="bold")
    rec_table.add_column("Description")
    for rec in result.recommendations:
        rec_table.add_row(rec.priority.value, rec.type.value, rec.title, rec.description)
    console.print(rec_table)


@app.command()
def extract(
    source: Path = typer.Argument(..., help="JSON file containing the design tree"),
    max_nodes: Optional[int] = typer.Option(None, "--max-nodes", "-n", help="Node budget"),
    batch_size: int = typer.Option(50, "--batch-size", "-b", help="Nodes per batch"),
    parallel: bool = typer.Option(True, "--parallel/--sequential", help="Run nodes of a batch concurrently"),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", help="Concurrent extractions per chunk"),
    timeout: float = typer.Option(30.0, "--timeout", help="Seconds allowed per extraction attempt"),
    retries: int = typer.Option(3, "--retries", help="Retries after a failed attempt"),
    fallback: FallbackStrategy = typer.Option(FallbackStrategy.SIMPLIFY, "--fallback", help="Fallback strategy"),
    no_cache: bool = typer.Option(False, "--no-cache", help="Disable the result cache"),
    include_hidden: bool = typer.Option(True, "--include-hidden/--visible-only", help="Extract hidden nodes"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the run result as JSON"),
):
    """Extract records from every node of a design tree."""

    async def _extract():
        try:
            settings = get_settings()
            roots = load_nodes(source)
            nodes = flatten_nodes(roots, include_hidden=include_hidden)

            overrides = {
                "streaming": StreamingConfig(batch_size=batch_size),
                "caching": CachingConfig(enabled=not no_cache, ttl=settings.cache_ttl),
                "processing": ProcessingConfig(
                    parallel=parallel,
                    max_workers=workers or settings.max_workers,
                    timeout=timeout,
                    retries=retries,
                    fallback=fallback,
                ),
            }
            if max_nodes is not None:
                overrides["max_nodes"] = max_nodes
            config = settings.build_optimization_config(**overrides)
        except (DesignExtractionError, ValueError) as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1)

        optimizer = create_optimizer(config)

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            progress.add_task(f"Extracting {len(nodes)} nodes...", total=None)
            result = await optimizer.optimize_extraction(nodes, summarize_node)

        _render_result(result)

        if output:
            output.write_text(json.dumps(result.to_dict(), indent=2), encoding="utf-8")
            console.print(f"[green]✓[/green] Results written to {output}")

    asyncio.run(_extract())


@app.command("show-config")
def show_config():
    """Print the effective optimizer configuration."""
    try:
        config = get_settings().build_optimization_config()
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print_json(config.model_dump_json())


@app.callback()
def main(
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """Design extraction scheduler."""
    try:
        setup_logging(log_level="DEBUG" if debug else None)
    except ValueError as e:
        console.print(f"[red]Error:[/red] invalid settings: {e}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()

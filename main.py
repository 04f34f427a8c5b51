#!/usr/bin/env python3
"""
Note Graph Analysis - graph measures and co-citations for a Markdown vault
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

import click
import yaml
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent))

# Setup logger
logger = logging.getLogger(__name__)

from graph_analysis.algorithms.models import CoCitation, Subtype
from graph_analysis.algorithms.registry import get_algorithm_info, parse_subtype
from graph_analysis.config import GraphAnalysisSettings
from graph_analysis.config import load_config as read_config_file
from graph_analysis.engine import GraphAnalysisEngine
from graph_analysis.errors import GraphAnalysisError
from graph_analysis.ranking import (
    RankedResult,
    best_evidence,
    get_algorithm_display_name,
    group_by_source,
    present_path,
    rank_communities,
    rank_results,
)

console = Console()


def load_config(config_path: str = "config/config.yaml") -> dict:
    """Load configuration from YAML file."""
    try:
        return read_config_file(config_path)
    except FileNotFoundError:
        console.print(f"[red]❌ Configuration file not found: {config_path}[/red]")
        sys.exit(1)
    except yaml.YAMLError as e:
        console.print(f"[red]❌ Error parsing configuration file: {e}[/red]")
        sys.exit(1)


def setup_logging(config: dict):
    """Setup logging configuration."""
    log_config = config.get("logging", {}) or {}
    debug = (config.get("debug", {}) or {}).get("enabled", False)
    log_level = logging.DEBUG if debug else getattr(logging, log_config.get("level", "INFO"))
    log_format = log_config.get("format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    # Create logs directory if it doesn't exist
    log_file = log_config.get("file", "logs/graph_analysis.log")
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=log_level,
        format=log_format,
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler()
        ]
    )


def format_sentence(co_citation: CoCitation) -> str:
    """Render an evidence sentence with the matched spans highlighted."""
    parts = [escape(part) for part in co_citation.sentence]
    for index in range(1, len(parts), 2):
        parts[index] = f"[bold yellow]{parts[index]}[/bold yellow]"
    return "".join(parts).strip()


class GraphAnalysisApp:
    """Command-line front end around the analysis engine."""

    def __init__(self, config: dict):
        self.config = config
        self.console = console
        self.settings = GraphAnalysisSettings.from_config(config)
        self.engine = GraphAnalysisEngine(self.settings)
        self.limit = (config.get("display", {}) or {}).get("limit", 20)

    async def load(self) -> bool:
        """Index the vault and build the graph."""
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=self.console
        ) as progress:
            task = progress.add_task(f"Indexing {self.settings.vault_path}...", total=None)
            outcome = await self.engine.refresh_graph()
            progress.update(task, description="Graph ready" if outcome.ok else "Indexing failed")

        self.show_notices(outcome.notices)
        return outcome.ok

    def show_notices(self, notices: List[str]):
        for notice in notices:
            self.console.print(Panel(
                escape(notice),
                title="[bold yellow]Notice[/bold yellow]",
                border_style="yellow"
            ))

    async def analyze(self, note: str, algorithm: Optional[str], limit: int, asc: bool = False):
        """Run one algorithm for a note and print the ranked results."""
        subtype = parse_subtype(algorithm) if algorithm else self.settings.default_subtype
        source = self.engine.resolve_note(note)

        outcome = await self.engine.analyze(subtype, source)
        self.show_notices(outcome.notices)

        if subtype == Subtype.LABEL_PROPAGATION:
            self.display_communities(outcome.result, source, limit)
        elif subtype == Subtype.LOUVAIN:
            self.display_community_members(outcome.result, source)
        else:
            rows = rank_results(
                outcome.result,
                source,
                self.engine.metadata.resolved_links,
                self.settings,
                asc=asc,
                in_vault=lambda path: self.engine.metadata.get_file(path) is not None,
            )
            self.display_ranked(rows[:limit], subtype, source)

    def display_ranked(self, rows: List[RankedResult], subtype: Subtype, source: str):
        """Display ranked results in a formatted table."""
        if not rows:
            self.console.print(f"[yellow]No results for {escape(present_path(source))}[/yellow]")
            return

        display_name = get_algorithm_display_name(subtype, self.settings)
        table = Table(title=f"{display_name} for {escape(present_path(source))}")
        table.add_column("Note", style="cyan")
        table.add_column("Measure", style="white", justify="right")
        table.add_column("Linked", style="green")

        co_citations = subtype == Subtype.CO_CITATIONS
        if co_citations:
            table.add_column("Sources", style="magenta", justify="right")
            table.add_column("Best Evidence", style="white")
        else:
            table.add_column("Details", style="dim")

        for row in rows:
            name = escape(present_path(row.to) if row.to.endswith(".md") else row.to)
            if not row.resolved:
                name = f"[dim]{name}[/dim]"
            cells = [name, f"{row.measure:g}", "✅ Yes" if row.linked else "❌ No"]
            if co_citations:
                best = best_evidence(row.co_citations)
                cells.append(str(len(group_by_source(row.co_citations))))
                cells.append(format_sentence(best) if best else "")
            else:
                details = [present_path(e) if e.endswith(".md") else e for e in row.extra[:5]]
                cells.append(escape(", ".join(details)))
            table.add_row(*cells)

        self.console.print(table)

    def display_communities(self, communities: dict, source: Optional[str], limit: int):
        table = Table(title="Label Propagation Communities")
        table.add_column("Label", style="cyan")
        table.add_column("Size", style="white", justify="right")
        table.add_column("Members", style="white")

        for label, members in rank_communities(communities)[:limit]:
            shown = ", ".join(present_path(m) for m in members[:10])
            if len(members) > 10:
                shown += f", ... (+{len(members) - 10})"
            style = "bold" if source in members else None
            table.add_row(escape(present_path(label)), str(len(members)), escape(shown), style=style)

        self.console.print(table)

    def display_community_members(self, members: List[str], source: str):
        if not members:
            return
        table = Table(title=f"Louvain Community of {escape(present_path(source))}")
        table.add_column("Note", style="cyan")
        table.add_column("Path", style="dim")
        for member in members:
            table.add_row(escape(present_path(member)), escape(member))
        self.console.print(table)

    def show_algorithms(self):
        """Display the available algorithms."""
        table = Table(title="Analysis Algorithms")
        table.add_column("Algorithm", style="cyan")
        table.add_column("Category", style="magenta")
        table.add_column("Scope", style="white")
        table.add_column("Shown", style="green")
        table.add_column("Description", style="white")

        for subtype in Subtype:
            info = get_algorithm_info(subtype)
            table.add_row(
                get_algorithm_display_name(info.subtype, self.settings),
                info.anl,
                "Global" if info.global_ else "Local",
                "✅ Yes" if info.subtype in self.settings.algs_to_show else "❌ No",
                info.desc,
            )
        self.console.print(table)

    def show_stats(self):
        """Display vault and graph statistics."""
        stats = self.engine.get_stats()

        table = Table(title="Vault Graph Statistics")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="white")

        table.add_row("Vault", str(self.settings.vault_path))
        table.add_row("Files", str(stats["total_files"]))
        table.add_row("Notes", str(stats["total_notes"]))
        table.add_row("Tags", str(stats["tags"]))
        table.add_row("Graph Nodes", str(stats["total_nodes"]))
        table.add_row("Graph Edges", str(stats["total_edges"]))
        table.add_row("Unresolved Edges", str(stats["unresolved_edges"]))
        table.add_row("Weakly Connected Components", str(stats["weakly_connected_components"]))

        self.console.print(table)


def create_app(ctx) -> GraphAnalysisApp:
    try:
        return GraphAnalysisApp(ctx.obj['config'])
    except GraphAnalysisError as e:
        console.print(f"[red]❌ Invalid configuration: {escape(str(e))}[/red]")
        sys.exit(1)


def run_loaded(app: GraphAnalysisApp, action):
    """Build the graph, then run ``action``; configuration errors end the process."""
    async def run():
        if await app.load():
            await action()

    try:
        asyncio.run(run())
    except GraphAnalysisError as e:
        console.print(f"[red]❌ {escape(str(e))}[/red]")
        sys.exit(1)


@click.group()
@click.option('--config', '-c', default='config/config.yaml', help='Configuration file path')
@click.option('--debug', '-d', is_flag=True, help='Enable debug mode')
@click.option('--vault', '-v', default=None, help='Vault directory (overrides the configuration)')
@click.pass_context
def cli(ctx, config, debug, vault):
    """Note Graph Analysis CLI."""
    ctx.ensure_object(dict)
    ctx.obj['config'] = load_config(config)
    ctx.obj['debug'] = debug

    # Enable debug mode in config
    if debug:
        ctx.obj['config'].setdefault('debug', {})['enabled'] = True
    if vault:
        ctx.obj['config'].setdefault('vault', {})['path'] = vault

    # Setup logging
    setup_logging(ctx.obj['config'])


@cli.command()
@click.argument('note')
@click.option('--algorithm', '-a', default=None, help='Algorithm to run (defaults to the configured one)')
@click.option('--limit', '-n', default=None, type=int, help='Maximum number of rows')
@click.option('--asc', is_flag=True, help='Sort ascending')
@click.pass_context
def analyze(ctx, note, algorithm, limit, asc):
    """Analyse a note with one algorithm."""
    app = create_app(ctx)

    async def run_analyze():
        await app.analyze(note, algorithm, limit or app.limit, asc=asc)

    run_loaded(app, run_analyze)


@cli.command()
@click.argument('note', required=False)
@click.option('--algorithm', '-a', default=Subtype.LABEL_PROPAGATION.value,
              type=click.Choice([Subtype.LABEL_PROPAGATION.value, Subtype.LOUVAIN.value]),
              help='Community detection algorithm')
@click.option('--limit', '-n', default=None, type=int, help='Maximum number of communities')
@click.pass_context
def communities(ctx, note, algorithm, limit):
    """Show communities of the vault (Louvain needs a NOTE)."""
    if algorithm == Subtype.LOUVAIN.value and not note:
        raise click.UsageError("Louvain shows the community of a note; pass NOTE")

    app = create_app(ctx)

    async def run_communities():
        await app.analyze(note or "", algorithm, limit or app.limit)

    run_loaded(app, run_communities)


@cli.command()
@click.pass_context
def algorithms(ctx):
    """List the available algorithms."""
    app = create_app(ctx)
    app.show_algorithms()


@cli.command()
@click.pass_context
def stats(ctx):
    """Show vault and graph statistics."""
    app = create_app(ctx)

    async def show():
        app.show_stats()

    run_loaded(app, show)


if __name__ == "__main__":
    cli()

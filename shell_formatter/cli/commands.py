"""
Command-line interface for shell-formatter.

This module provides CLI commands for formatting shell scripts, Dockerfile
RUN instructions and fenced shell blocks in Markdown, and for checking
whether files are already formatted.
"""

import json
import sys
import click
import logging
from pathlib import Path
from typing import Optional, Set
from rich.console import Console
from rich.table import Table
from rich.progress import Progress
from rich.panel import Panel

from .. import __version__
from ..core.aggregator import FileOutcome, RunAggregator
from ..core.dispatch import FormatKind, detect_kind_from_label
from ..core.runner import FileProcessor, run_jobs
from ..core.scanner import FileScanner

# Initialize Rich console for output
console = Console()

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def parse_kinds(ctx, param, value) -> Set[FormatKind]:
    """Parse comma separated kind names such as ``sh,dockerfile``."""
    kinds = set()
    for item in value:
        for name in item.split(','):
            if not name.strip():
                continue
            kind = detect_kind_from_label(name)
            if kind is None:
                raise click.BadParameter(f"unknown kind '{name.strip()}'")
            kinds.add(kind)
    return kinds


def selection_options(func):
    """Options shared by the commands that collect files."""
    func = click.option('--skip', multiple=True, callback=parse_kinds,
                        help='Skip these kinds (comma separated)')(func)
    func = click.option('--only', multiple=True, callback=parse_kinds,
                        help='Only process these kinds (comma separated, e.g. sh,md)')(func)
    func = click.option('--ignore', multiple=True,
                        help='Extra glob patterns to ignore')(func)
    func = click.option('--jobs', '-j', type=click.IntRange(min=1),
                        help='Number of worker threads (default: CPU cores)')(func)
    func = click.argument('paths', nargs=-1, required=True, type=click.Path(exists=True))(func)
    return func


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
def main(verbose):
    """shell-formatter - heuristic formatter for shell scripts."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        console.print("[dim]Verbose mode enabled[/dim]")


@main.command()
@selection_options
@click.option('--output', '-o', type=click.Path(file_okay=False),
              help='Mirror output under this directory instead of overwriting')
@click.option('--dry-run', is_flag=True, help='Show what would change without writing anything')
@click.option('--report', type=click.Path(dir_okay=False), help='Save a JSON report of the run')
def format(paths, jobs, ignore, only, skip, output, dry_run, report):
    """Format files in place, or into a mirror directory."""
    if dry_run:
        console.print("[dim]Running in dry-run mode - no changes will be made[/dim]")

    processor = FileProcessor(output_root=Path(output) if output else None, write=not dry_run)
    aggregator = run(paths, processor, jobs, ignore, only, skip)
    if aggregator is None:
        return

    if dry_run:
        display_dry_run_results(aggregator)
    display_summary(aggregator)

    if report:
        save_report_to_file(aggregator, report)
        console.print(f"[green]Report saved to {report}[/green]")

    if aggregator.generate_summary().errors:
        sys.exit(1)


@main.command()
@selection_options
def check(paths, jobs, ignore, only, skip):
    """Check whether files are formatted; exit 1 if any would change."""
    processor = FileProcessor(write=False)
    aggregator = run(paths, processor, jobs, ignore, only, skip)
    if aggregator is None:
        return

    display_dry_run_results(aggregator)
    display_summary(aggregator)

    summary = aggregator.generate_summary()
    if summary.formatted:
        console.print(f"[red]{summary.formatted} file(s) would be reformatted[/red]")
        sys.exit(1)
    if summary.errors:
        sys.exit(1)


def run(paths, processor: FileProcessor, jobs: Optional[int], ignore, only, skip) -> Optional[RunAggregator]:
    """Collect files and process them with a progress bar."""
    scanner = FileScanner(ignore_patterns=ignore, only=only, skip=skip)
    files = scanner.collect(paths)

    if not files:
        console.print("[yellow]No files matched.[/yellow]")
        return None

    with Progress(console=console, transient=True) as progress:
        task = progress.add_task("Formatting files...", total=len(files))
        aggregator = run_jobs(files, processor, workers=jobs,
                              on_done=lambda report: progress.advance(task))

    return aggregator


def display_summary(aggregator: RunAggregator):
    """Display the run summary and any failures."""
    summary = aggregator.generate_summary()
    console.print(Panel(summary.describe(), title="Summary", border_style="blue"))

    failures = aggregator.get_files_by_outcome()[FileOutcome.ERROR]
    if not failures:
        return

    table = Table(title="Errors")
    table.add_column("File", style="cyan")
    table.add_column("Message", style="red")
    for report in failures:
        table.add_row(str(report.path), report.message)
    console.print(table)


def display_dry_run_results(aggregator: RunAggregator):
    """Display the files that would be reformatted."""
    changed = aggregator.get_files_by_outcome()[FileOutcome.FORMATTED]
    if not changed:
        console.print("[green]All files are formatted[/green]")
        return

    table = Table(title="Files to Format")
    table.add_column("File", style="cyan")
    table.add_column("Kind", justify="center")

    for report in changed:
        table.add_row(str(report.path), report.kind.value if report.kind else "-")

    console.print(table)


def save_report_to_file(aggregator: RunAggregator, output_path):
    """Save the run report as JSON."""
    with open(output_path, 'w') as f:
        json.dump(aggregator.export_report(), f, indent=2)


if __name__ == '__main__':
    main()

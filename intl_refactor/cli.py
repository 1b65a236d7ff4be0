"""Command-line interface for the extraction and refactoring pipeline."""

import functools
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.table import Table

from . import __version__
from .config import Config, config
from .errors import IntlRefactorError, RootNotFoundError
from .extraction.context import ExtractionContext
from .generation.key_generator import KeyFormat
from .generation.resource_store import MergeMode, ResourceStore
from .logging_config import configure_logging
from .models.refactor_result import RunSummary
from .services.pipeline import LocalizationPipeline
from .validation.pattern_classifier import DEFAULT_EXCLUDE_PATTERNS, PATTERN_CATEGORIES, PatternClassifier

console = Console()

KEY_FORMATS = [f.value for f in KeyFormat]
MERGE_MODES = [m.value for m in MergeMode]


def _exit_on_error(func):
    """Print pipeline errors as one red line and exit with a status code."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except RootNotFoundError as e:
            console.print(f"[red]Error:[/red] {e}")
            sys.exit(2)
        except IntlRefactorError as e:
            console.print(f"[red]Error:[/red] {e}")
            sys.exit(1)

    return wrapper


def _settings(**overrides) -> Config:
    """Global config with the command's options applied, validated."""
    settings = replace(config, **{k: v for k, v in overrides.items() if v is not None})
    errors = settings.validate()
    if errors:
        console.print("[red]Configuration errors:[/red]")
        for error in errors:
            console.print(f"  - {error}")
        raise click.Abort()
    return settings


def _run_with_progress(description: str, run):
    """Call run(progress_callback) while showing a progress bar."""
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task(description, total=None)

        def update_progress(current, total, path):
            progress.update(task, completed=current, total=total, description=f"{description} {Path(path).name[:40]}")

        return run(update_progress)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Minimum level of diagnostic messages"
)
@click.option(
    "--json-logs",
    is_flag=True,
    help="Write diagnostics as JSON lines"
)
def cli(log_level: str, json_logs: bool):
    """Flutter string extraction and localization refactoring CLI."""
    configure_logging(level=log_level, json_output=json_logs)


@cli.command()
@click.argument("directory", default="lib", type=click.Path())
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="List every string with its line number"
)
@click.option(
    "--no-default-patterns",
    is_flag=True,
    help="Only apply exclude patterns from INTL_EXCLUDE_PATTERNS"
)
@_exit_on_error
def scan(directory: str, verbose: bool, no_default_patterns: bool):
    """Scan a directory for translatable strings."""
    settings = _settings()
    context = None
    if no_default_patterns:
        context = ExtractionContext.create(
            exclude_patterns=settings.load_exclude_patterns() or [],
            accessor_class=settings.accessor_class,
        )

    console.print(f"[blue]Scanning:[/blue] {directory}")
    result = _run_with_progress(
        "Scanning",
        lambda cb: LocalizationPipeline(settings, context=context, progress=cb).scan(directory),
    )
    extraction = result.extraction

    if not extraction:
        console.print(f"[yellow]No translatable strings found in {directory}[/yellow]")
    elif verbose:
        table = Table(show_header=True)
        table.add_column("File", style="dim", max_width=40)
        table.add_column("Line", justify="right")
        table.add_column("String", max_width=60)
        for path, literals in (result.literals or {}).items():
            for literal in literals:
                table.add_row(path, str(literal.line), literal.value)
        console.print(table)
    else:
        table = Table(title=f"Strings in {directory}")
        table.add_column("File", style="cyan")
        table.add_column("Strings", justify="right")
        for path, values in extraction.files.items():
            table.add_row(path, str(len(values)))
        console.print(table)

    _print_summary(
        RunSummary(
            files_scanned=result.files_scanned,
            strings_found=len(extraction.unique_values()),
            skipped=result.skipped,
        ),
        title="Scan Summary",
    )


@cli.command()
@click.argument("directory", default="lib", type=click.Path())
@click.option(
    "--output", "-o",
    "output_path",
    type=click.Path(),
    help="Path to the .arb file (defaults to <output dir>/app_<locale>.arb)"
)
@click.option(
    "--key-format", "-k",
    type=click.Choice(KEY_FORMATS),
    default=None,
    help="Key naming convention"
)
@click.option(
    "--scope", "-s",
    default=None,
    help="Write a feature file (feature_<scope>.arb) instead of the app file"
)
@click.option(
    "--merge-mode", "-m",
    type=click.Choice(MERGE_MODES),
    default=None,
    help="Reuse keys of identical stored values, or always write generated keys"
)
@_exit_on_error
def generate(
    directory: str,
    output_path: Optional[str],
    key_format: Optional[str],
    scope: Optional[str],
    merge_mode: Optional[str],
):
    """Extract strings and merge them into an .arb file."""
    settings = _settings(key_format=key_format, merge_mode=merge_mode)
    console.print(f"[blue]Scanning:[/blue] {directory}")
    summary = _run_with_progress(
        "Scanning",
        lambda cb: LocalizationPipeline(settings, progress=cb).generate(directory, output_path=output_path, scope=scope),
    )

    console.print(f"[green]Updated:[/green] {summary.resource_path}")
    _print_summary(summary, title="Generate Summary")


def _rewrite_options(func):
    """Options shared by the commands that rewrite source files."""
    options = [
        click.argument("directory", default="lib", type=click.Path()),
        click.option(
            "--output", "-o",
            "output_path",
            type=click.Path(),
            help="Path to the .arb file (defaults to <output dir>/app_<locale>.arb)"
        ),
        click.option(
            "--key-format", "-k",
            type=click.Choice(KEY_FORMATS),
            default=None,
            help="Key naming convention"
        ),
        click.option(
            "--scope", "-s",
            default=None,
            help="Use a feature file (feature_<scope>.arb) instead of the app file"
        ),
        click.option(
            "--dry-run",
            is_flag=True,
            help="Preview changes without writing files"
        ),
        click.option(
            "--backup",
            is_flag=True,
            help="Keep a .bak copy of every rewritten file"
        ),
        click.option(
            "--no-app-localizations",
            is_flag=True,
            help='Use tr("key") instead of AppLocalizations.of(context).key'
        ),
        click.option(
            "--preserve-const",
            is_flag=True,
            help="Keep const modifiers where no accessor is introduced"
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _run_rewrite(
    directory: str,
    output_path: Optional[str],
    key_format: Optional[str],
    scope: Optional[str],
    dry_run: bool,
    backup: bool,
    no_app_localizations: bool,
    preserve_const: bool,
    update_resources: bool,
    title: str,
):
    settings = _settings(
        key_format=key_format,
        use_app_localizations=False if no_app_localizations else None,
    )
    console.print(f"[blue]Processing:[/blue] {directory}")
    summary = _run_with_progress(
        "Processing",
        lambda cb: LocalizationPipeline(settings, progress=cb).internationalize(
            directory,
            output_path=output_path,
            dry_run=dry_run,
            backup=backup,
            scope=scope,
            preserve_const=preserve_const,
            update_resources=update_resources,
        ),
    )

    changed = [record for record in summary.records if record.changed]
    if changed:
        table = Table(title="Would change" if dry_run else "Changed files")
        table.add_column("File", style="cyan")
        table.add_column("Replacements", justify="right")
        for record in changed:
            table.add_row(record.path, str(record.replacements))
        console.print(table)

    if dry_run:
        console.print("\n[yellow]Dry run - no changes saved[/yellow]")
    elif update_resources:
        console.print(f"[green]Updated:[/green] {summary.resource_path}")
    _print_summary(summary, title=title)


@cli.command()
@_rewrite_options
@_exit_on_error
def refactor(**options):
    """Replace string literals with localization keys (the .arb file is only read)."""
    _run_rewrite(update_resources=False, title="Refactor Summary", **options)


@cli.command()
@_rewrite_options
@_exit_on_error
def internationalize(**options):
    """Complete workflow: scan, update the .arb file and refactor the code."""
    _run_rewrite(update_resources=True, title="Internationalize Summary", **options)


@cli.command()
@click.option(
    "--file", "-f",
    "file_path",
    type=click.Path(),
    help="Path to the .arb file (defaults to <output dir>/app_<locale>.arb)"
)
@click.option(
    "--dir", "-d",
    "directory",
    type=click.Path(),
    help="Clean every .arb file in this directory"
)
@_exit_on_error
def clean(file_path: Optional[str], directory: Optional[str]):
    """Remove entries with invalid keys or malformed placeholders."""
    settings = _settings()
    if file_path and directory:
        raise click.UsageError("Use either --file or --dir, not both")

    if directory:
        if not Path(directory).is_dir():
            raise RootNotFoundError(directory)
        paths: List[Path] = sorted(Path(directory).glob("*.arb"))
    else:
        paths = [Path(file_path) if file_path else settings.resource_path()]

    total = 0
    for path in paths:
        if not path.exists():
            console.print(f"[yellow]Not found:[/yellow] {path}")
            continue
        removed = ResourceStore(path, locale=settings.locale).clean_invalid_entries()
        total += len(removed)
        if removed:
            console.print(f"[green]Cleaned:[/green] {path} ({len(removed)} removed)")
            for key in removed:
                console.print(f"  - {key}")
        else:
            console.print(f"[dim]{path}: nothing to clean[/dim]")

    console.print(f"\n[bold]Removed entries:[/bold] {total}")


@cli.command()
@click.option(
    "--test", "-t",
    "sample",
    default=None,
    help="Check whether a text would be extracted"
)
@_exit_on_error
def patterns(sample: Optional[str]):
    """List exclude patterns, or test a text against them."""
    settings = _settings()
    classifier = PatternClassifier.from_patterns(settings.load_exclude_patterns())

    if sample is not None:
        result = classifier.classify(sample)
        if result.excluded:
            console.print(f"[yellow]Excluded:[/yellow] {escape(repr(sample))}")
            console.print(f"  [dim]Rule:[/dim] {escape(result.reason)}")
        else:
            console.print(f"[green]Translatable:[/green] {escape(repr(sample))}")
        return

    active = set(classifier.patterns)
    for category, category_patterns in PATTERN_CATEGORIES.items():
        console.print(f"\n[bold]{category}[/bold]")
        table = Table(show_header=False)
        table.add_column("Pattern", style="cyan")
        table.add_column("Active", justify="center")
        for pattern in category_patterns:
            table.add_row(escape(pattern), "yes" if pattern in active else "[dim]no[/dim]")
        console.print(table)

    custom = [p for p in classifier.patterns if p not in set(DEFAULT_EXCLUDE_PATTERNS)]
    if custom:
        console.print("\n[bold]Custom Patterns[/bold]")
        table = Table(show_header=False)
        table.add_column("Pattern", style="cyan")
        for pattern in custom:
            table.add_row(escape(pattern))
        console.print(table)


def _print_summary(summary: RunSummary, title: str):
    """Print the end-of-run counts."""
    lines = [
        f"[bold]Files scanned:[/bold] {summary.files_scanned}",
        f"[bold]Strings found:[/bold] {summary.strings_found}",
        f"[bold]Files changed:[/bold] {summary.files_changed}",
        f"[bold]Entries added:[/bold] {summary.entries_added}",
    ]
    skipped_color = "red" if summary.files_skipped else "green"
    lines.append(f"[{skipped_color}]Files skipped:[/{skipped_color}] {summary.files_skipped}")
    for error in summary.skipped:
        lines.append(f"  [dim]{error.path}: {error.reason}[/dim]")

    console.print(Panel("\n".join(lines), title=title))


if __name__ == "__main__":
    cli()

#!/usr/bin/env python3
"""Service registry CLI - Entry point for the registry generator.

Usage:
    # Scan a source tree statically
    python main.py --source ./src

    # Import modules and inspect the live classes
    python main.py --source ./src --module example --symbol-model import

    # Write registry files and factories somewhere else
    python main.py --source ./src --class-output ./build --source-output ./build
"""

import logging
import sys
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from diagnostics import Messager
from processor import process_sources
from symbols import list_symbol_models as get_available_symbol_models
from config import settings


console = Console()


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )


@click.command()
@click.option(
    "--source", "-s", "sources",
    multiple=True,
    type=click.Path(exists=True, file_okay=False),
    help="Source root to scan (repeatable)"
)
@click.option(
    "--module", "-m", "modules",
    multiple=True,
    help="Module or package to import (import symbol model only, repeatable)"
)
@click.option(
    "--class-output",
    default=None,
    help="Root for META-INF/services (default: first source root)"
)
@click.option(
    "--source-output",
    default=None,
    help="Root for generated factory modules (default: first source root)"
)
@click.option(
    "--symbol-model",
    type=click.Choice(["ast", "static", "import", "reflection"]),
    default=None,
    help=f"How candidates are discovered (default: {settings.symbol_model})"
)
@click.option(
    "--list-symbol-models",
    is_flag=True,
    help="List available symbol models and exit"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Verbose output"
)
def main(
    sources: Tuple[str, ...],
    modules: Tuple[str, ...],
    class_output: Optional[str],
    source_output: Optional[str],
    symbol_model: Optional[str],
    list_symbol_models: bool,
    verbose: bool,
):
    """Service registry generator.

    Finds classes marked with @service_provider, writes one
    META-INF/services registry file per contract and generates factory
    modules for contracts that asked for one.
    """
    # Handle --list-symbol-models
    if list_symbol_models:
        console.print("[bold]Available symbol models:[/bold]\n")
        for name, description in get_available_symbol_models().items():
            console.print(f"  {name:12} {description}")
        return

    if not sources and not modules:
        console.print("[red]Error: --source or --module is required[/red]")
        sys.exit(1)

    configure_logging(verbose)

    console.print(Panel.fit(
        "[bold blue]Service Registry[/bold blue]\n"
        "[dim]Registry file and factory generator[/dim]",
        border_style="blue"
    ))

    messager = Messager(console=console)
    result = process_sources(
        sources=sources,
        modules=modules,
        class_output=class_output,
        source_output=source_output,
        symbol_model=symbol_model,
        messager=messager,
    )

    if result.entries:
        table = Table(title="Registries")
        table.add_column("Contract", style="cyan")
        table.add_column("Providers")
        for entry in result.entries:
            table.add_row(entry.contract_name, "\n".join(entry.implementations))
        console.print(table)
    else:
        console.print("[dim]No service providers found[/dim]")

    if result.registry_files:
        console.print(f"\n[bold]Registry files:[/bold]")
        for path in result.registry_files:
            console.print(f"  - {path}")

    if result.generated_sources:
        console.print(f"\n[bold]Generated factories:[/bold]")
        for path in result.generated_sources:
            console.print(f"  - {path}")

    if result.has_errors:
        console.print(f"\n[red]{len(result.errors)} error(s)[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()

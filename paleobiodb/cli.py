"""
Command-line interface for the PBDB client.

Usage:
    pbdb fetch occurrences -p base_name=Canidae --show coords,phylo -o canidae.csv
    pbdb fetch occurrence --id 1001 --vocab pbdb
    pbdb run my_query.yaml
    pbdb endpoints
"""

from __future__ import annotations

import sys

import click
import pandas as pd
from rich.console import Console
from rich.table import Table

from paleobiodb import __version__
from paleobiodb.api import DEFAULT_TIMEOUT, ENDPOINTS, PBDB_API_BASE, PBDBError
from paleobiodb.config import (
    OUTPUT_FORMATS,
    Config,
    create_example_config,
    get_config_dir,
    list_presets,
    save_preset,
)
from paleobiodb.exporters import get_exporter
from paleobiodb.utils import parse_param_pairs, sanitize_filename, setup_logging

console = Console()

EXTENSIONS = {"excel": ".xlsx", "csv": ".csv", "geojson": ".geojson"}


def print_banner():
    """Print the application banner."""
    console.print(
        "\n[bold blue]PBDB Client[/bold blue] "
        f"[dim]v{__version__}[/dim]",
    )
    console.print("[dim]Query the Paleobiology Database[/dim]\n")


@click.group(invoke_without_command=True)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output",
)
@click.option(
    "--version",
    is_flag=True,
    help="Show version and exit",
)
@click.pass_context
def main(ctx, verbose, version):
    """
    Query the Paleobiology Database and save the results.

    Examples:

    \b
    # Miocene canids with coordinates
    pbdb fetch occurrences -p base_name=Canidae -p interval=Miocene --show coords -o canids.csv

    \b
    # A single collection, full field names
    pbdb fetch collection --id 1003 --vocab pbdb

    \b
    # Run a saved query
    pbdb run my_query.yaml
    """
    if version:
        console.print(f"paleobiodb-client version {__version__}")
        sys.exit(0)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        sys.exit(0)

    setup_logging(verbose=verbose)


@main.command()
@click.argument("resource", type=click.Choice(sorted(ENDPOINTS)))
@click.option(
    "--id", "record_id",
    help="Record identifier (required for single-record resources)",
)
@click.option(
    "--param", "-p", "params",
    multiple=True,
    metavar="NAME=VALUE",
    help="Query parameter; repeat a name to send a list",
)
@click.option(
    "--show",
    help="Optional field groups, comma-separated (e.g., coords,phylo)",
)
@click.option(
    "--vocab",
    help="Field naming vocabulary (e.g., pbdb, com, dwc)",
)
@click.option(
    "--limit",
    help='Maximum number of rows ("all" for no cap)',
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    default="csv",
    help="Output format (default: csv)",
)
@click.option(
    "--output", "-o",
    type=click.Path(),
    help="Output file path (preview only when omitted)",
)
@click.option(
    "--base-url",
    default=PBDB_API_BASE,
    show_default=True,
    help="API base address",
)
@click.option(
    "--timeout",
    type=float,
    default=DEFAULT_TIMEOUT,
    help="Request timeout in seconds",
)
@click.option(
    "--save-preset",
    "preset_name",
    help="Also save this query as a named preset",
)
@click.option(
    "--rows",
    type=int,
    default=10,
    help="Number of rows to preview (default: 10)",
)
def fetch(
    resource,
    record_id,
    params,
    show,
    vocab,
    limit,
    output_format,
    output,
    base_url,
    timeout,
    preset_name,
    rows,
):
    """Fetch RESOURCE (see `pbdb endpoints`) and preview or save it."""
    print_banner()

    try:
        query = parse_param_pairs(params)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    for name, value in (("show", show), ("vocab", vocab), ("limit", limit)):
        if value is None:
            continue
        if name in query:
            console.print(f"[red]Error: '{name}' given both as option and --param[/red]")
            sys.exit(1)
        query[name] = value

    config = Config(
        resource=resource,
        params=query,
        record_id=record_id,
        output_format=output_format,
        output_path=output,
        base_url=base_url,
        timeout=timeout,
    )

    if preset_name:
        path = save_preset(sanitize_filename(preset_name), config)
        console.print(f"[green]Saved preset:[/green] {path}\n")

    run_query(config, output, rows)


@main.command()
@click.argument("config_file", type=click.Path(exists=True))
@click.option(
    "--output", "-o",
    type=click.Path(),
    help="Output file path (overrides the config)",
)
@click.option(
    "--rows",
    type=int,
    default=10,
    help="Number of rows to preview (default: 10)",
)
def run(config_file, output, rows):
    """Run a query saved in a YAML config file."""
    print_banner()

    try:
        config = Config.load(config_file)
    except Exception as e:
        console.print(f"[red]Error loading config: {e}[/red]")
        sys.exit(1)

    console.print(f"[green]Loaded config from: {config_file}[/green]\n")

    if not output and config.output_path:
        output = config.output_path

    if not output:
        ext = EXTENSIONS[config.output_format]
        output = f"{sanitize_filename(config.resource)}_PBDB{ext}"

    run_query(config, output, rows)


def run_query(config: Config, output_path: str | None, rows: int = 10):
    """
    Run a query and preview or export the result.

    Args:
        config: Query configuration
        output_path: Where to write the table (None to only preview)
        rows: Number of rows to preview
    """
    show_query(config)

    try:
        with console.status(f"[bold blue]Querying {config.resource}..."):
            with config.client() as client:
                df = client.call(config.resource, id=config.record_id, query=config.params)
    except PBDBError as e:
        console.print(f"\n[red]PBDB API error: {e}[/red]")
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Query interrupted by user.[/yellow]")
        sys.exit(130)

    console.print(f"[green]Rows returned:[/green] {len(df):,}\n")

    if df.empty:
        console.print("[yellow]No records matched the query.[/yellow]")
        return

    show_preview(df, rows)

    if not output_path:
        return

    try:
        with console.status(f"[bold blue]Exporting to {config.output_format}..."):
            exporter = get_exporter(config.output_format)()
            output_file = exporter.export(df, output_path)
    except ValueError as e:
        console.print(f"\n[red]Export error: {e}[/red]")
        sys.exit(1)

    console.print(f"\n[bold green]Success![/bold green] Saved to: {output_file}")


def show_query(config: Config):
    """Display the query about to be sent."""
    table = Table(title="Query", show_header=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    endpoint = ENDPOINTS[config.resource]
    table.add_row("Resource", f"{config.resource} ({endpoint.path})")
    if config.record_id is not None:
        table.add_row("Id", str(config.record_id))
    for name, value in config.params.items():
        if isinstance(value, (list, tuple)):
            value = ", ".join(str(item) for item in value)
        table.add_row(name, str(value))

    console.print(table)
    console.print()


def show_preview(df: pd.DataFrame, rows: int = 10, max_columns: int = 8):
    """Display the first rows and columns of a result table."""
    columns = list(df.columns[:max_columns])

    table = Table(title=f"First {min(rows, len(df))} rows")
    for column in columns:
        table.add_column(str(column))

    for _, row in df.head(rows).iterrows():
        table.add_row(*("" if pd.isna(row[c]) else str(row[c]) for c in columns))

    console.print(table)

    hidden = len(df.columns) - len(columns)
    if hidden > 0:
        console.print(f"[dim]... and {hidden} more columns[/dim]")


@main.command()
def endpoints():
    """List the resources that can be fetched."""
    table = Table(title="PBDB resources")
    table.add_column("Resource", style="cyan", no_wrap=True)
    table.add_column("Endpoint", no_wrap=True)
    table.add_column("Needs id")
    table.add_column("Description", style="dim")

    for endpoint in ENDPOINTS.values():
        table.add_row(
            endpoint.name,
            endpoint.path,
            "Yes" if endpoint.requires_id else "No",
            endpoint.description,
        )

    console.print(table)


@main.command()
@click.argument("path", type=click.Path(), default="example_query.yaml")
def init(path):
    """Create an example configuration file."""
    print_banner()

    output_path = create_example_config(path)
    console.print(f"[green]Created example config:[/green] {output_path}")
    console.print("[dim]Edit this file and use with: pbdb run example_query.yaml[/dim]")


@main.command()
def presets():
    """List available preset configurations."""
    print_banner()

    preset_list = list_presets()

    if not preset_list:
        console.print("[yellow]No presets found.[/yellow]")
        console.print("[dim]Create one with: pbdb fetch ... --save-preset NAME[/dim]")
        return

    console.print("[bold]Available presets:[/bold]\n")
    for preset in preset_list:
        console.print(f"  - {preset}")

    console.print(f"\n[dim]Use with: pbdb run {get_config_dir()}/PRESET.yaml[/dim]")


if __name__ == "__main__":
    main()

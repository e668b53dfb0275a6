"""CLI commands for inspecting the raw contents of the configured backend"""

import asyncio
import json
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from hookstore.matching import matches

console = Console(stderr=True)


def get_backend():
    """Create the configured backend, exiting with an error if it is unknown."""
    from hookstore.backends import create_backend
    from hookstore.config import settings
    from hookstore.exceptions import ConfigurationError

    try:
        return create_backend(settings)
    except ConfigurationError as e:
        console.print(f"[red]ERROR: {escape(str(e))}[/red]")
        sys.exit(1)


async def _collect(backend, pattern: str) -> dict:
    try:
        keys = [key for key in await backend.get_all_keys() if matches(key, pattern)]
        pairs = await backend.multi_get(keys)
        return {key: value for key, value in pairs}
    finally:
        await backend.close()


@click.command()
@click.option('--pattern', '-p', default='*', help='Only dump keys matching this pattern (supports wildcards like "user:*")')
@click.option('--output', '-o', type=click.Path(path_type=Path), help='Output file path (default: stdout)')
@click.option('--pretty', is_flag=True, help='Pretty-print JSON output')
def dump_storage(pattern: str, output: Path | None, pretty: bool):
    """
    Dump the stored key/value pairs as JSON.

    Values are read straight from the backend, without running any hooks,
    so encrypted or JSON-encoded values are shown as stored.

    Examples:

        # Dump everything to stdout
        hookstore dump

        # Dump one key family to a file
        hookstore dump -p "session:*" -o sessions.json
    """
    backend = get_backend()
    data = asyncio.run(_collect(backend, pattern))
    text = json.dumps(data, indent=2 if pretty else None, default=str)

    if output:
        output.write_text(text + "\n")
        console.print(f"[green]Wrote {len(data)} keys to {output}[/green]")
    else:
        click.echo(text)


@click.command()
@click.option('--pattern', '-p', default='*', help='Only list keys matching this pattern')
def list_keys(pattern: str):
    """List stored keys with the type of their raw value."""
    backend = get_backend()
    data = asyncio.run(_collect(backend, pattern))

    if not data:
        console.print("[yellow]No keys found.[/yellow]")
        return

    table = Table(title=f"Keys matching {escape(pattern)}")
    table.add_column("Key", style="cyan")
    table.add_column("Type")
    table.add_column("Size", justify="right")

    for key in sorted(data):
        value = data[key]
        table.add_row(escape(key), type(value).__name__, str(len(json.dumps(value, default=str))))

    console.print(table)
    console.print(f"[bold]Total:[/bold] {len(data)} keys")

"""Plugin and backend discovery commands"""

import click

from hookstore import loader
from hookstore.plugins import BUILTIN_PLUGINS


def _describe(component) -> str:
    doc = (getattr(component, '__doc__', None) or '').strip()
    return doc.splitlines()[0] if doc else ''


@click.command()
def plugins():
    """List all discovered plugins"""
    discovered = {**BUILTIN_PLUGINS, **loader.get_components('plugins')}
    click.echo(f"Plugins ({len(discovered)}):")

    for name in sorted(discovered):
        factory = discovered[name]
        click.echo(f"  - {name:10} ({factory.__module__}) {_describe(factory)}")


@click.command()
def backends():
    """List all discovered storage backends"""
    discovered = loader.get_components('backends')
    click.echo(f"Backends ({len(discovered)}):")

    for name in sorted(discovered):
        cls = discovered[name]
        click.echo(f"  - {name:10} ({cls.__module__})")

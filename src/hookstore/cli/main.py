"""Main CLI entry point"""

import logging
from pathlib import Path

import click
from dotenv import load_dotenv

# Load .env file from current working directory before importing anything else
# This ensures environment variables are set before pydantic-settings reads them
_env_file = Path.cwd() / ".env"
if _env_file.exists():
    load_dotenv(_env_file)


@click.group()
@click.version_option(version='0.1.0', prog_name='hookstore')
@click.option('--log-level', default=None, help='Logging level (default: HOOKSTORE_LOG_LEVEL or WARNING)')
def cli(log_level: str | None):
    """hookstore CLI - Plugin, backend and storage inspection commands"""
    from hookstore.config import settings

    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def setup_cli():
    """Register all CLI commands"""
    from .components_cmd import backends, plugins
    from .dump_cmd import dump_storage, list_keys

    cli.add_command(plugins, name='plugins')
    cli.add_command(backends, name='backends')
    cli.add_command(dump_storage, name='dump')
    cli.add_command(list_keys, name='keys')


# Setup commands when module is imported
setup_cli()

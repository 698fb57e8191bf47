"""Configuration commands."""

from pathlib import Path

import click

from rdmpatcher.models import AppConfig
from rdmpatcher.models.config import DEFAULT_CONFIG_PATH

from ..context import cli_errors, load_config


def _config_path(ctx: click.Context) -> Path:
    return ctx.find_root().obj.get('config_file') or DEFAULT_CONFIG_PATH


@click.group(name="config")
def config():
    """Inspect and reset rdmpatcher settings."""
    pass


@config.command(name="show")
@click.pass_context
@cli_errors
def show_config(ctx):
    """Display the current configuration as JSON."""
    click.echo(load_config(ctx).model_dump_json(indent=2))


@config.command(name="path")
@click.pass_context
def config_path(ctx):
    """Print the config file location."""
    click.echo(str(_config_path(ctx)))


@config.command(name="reset")
@click.confirmation_option(prompt="Reset configuration to defaults?")
@click.pass_context
@cli_errors
def reset_config(ctx):
    """Write a default configuration file."""
    path = _config_path(ctx)
    AppConfig().save(path)
    click.echo(f"Wrote default configuration to {path}")

"""Helpers shared by CLI commands."""

import logging
import sys
from functools import wraps
from pathlib import Path

import click

from rdmpatcher.exceptions import RdmPatcherError, format_error_for_display
from rdmpatcher.models import AppConfig
from rdmpatcher.registry import JsonFileRegistry
from rdmpatcher.services import PatchService

logger = logging.getLogger(__name__)


def load_config(ctx: click.Context) -> AppConfig:
    """Load the config named by --config-file (or the default one)."""
    return AppConfig.load_or_default(ctx.obj.get('config_file') if ctx.obj else None)


def open_patch(config: AppConfig, patch_file: Path) -> tuple[JsonFileRegistry, PatchService]:
    """
    Open a patch file and build a service over it.

    The registry doubles as the update channel, so committed moves are
    written back to the same file.
    """
    registry = JsonFileRegistry.open(patch_file, address_space=config.address_space)
    service = PatchService(registry, address_space=config.address_space, universe=registry.universe)
    service.set_devices(registry.load_devices())
    return registry, service


def cli_errors(func):
    """
    Turn expected errors into a clean message and exit code 1.

    Unexpected exceptions are logged with a traceback and reported the same way.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except click.ClickException:
            raise
        except (RdmPatcherError, FileNotFoundError) as e:
            logger.error(f"Command failed: {getattr(e, 'technical_message', e)}")
            _report(e)
        except Exception as e:
            logger.exception("Unexpected error running command")
            _report(e)
    return wrapper


def _report(error: Exception) -> None:
    user_message, recovery_hint = format_error_for_display(error)
    click.echo(f"ERROR: {user_message}", err=True)
    if recovery_hint:
        click.echo(f"\n{recovery_hint}", err=True)

    ctx = click.get_current_context(silent=True)
    log_path = ctx.find_root().obj.get('log_path') if ctx and ctx.find_root().obj else None
    if log_path:
        click.echo(f"\nFor details, check the log file: {log_path}", err=True)
    sys.exit(1)

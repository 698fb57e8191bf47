"""Patch inspection and editing commands."""

import asyncio
from pathlib import Path

import click

from rdmpatcher.models import parse_start_address
from rdmpatcher.render import TextPatchRenderer

from ..context import cli_errors, load_config, open_patch

PATCH_FILE = click.Path(exists=True, dir_okay=False, path_type=Path)


@click.command()
@click.argument('patch_file', type=PATCH_FILE)
@click.option('--cell-width', type=click.IntRange(min=3), default=6, show_default=True,
              help='Characters per slot cell')
@click.option('--all-rows', is_flag=True, help='Also show rows with no devices')
@click.pass_context
@cli_errors
def show(ctx, patch_file: Path, cell_width: int, all_rows: bool):
    """Render the patch as text, one block per row of slots."""
    config = load_config(ctx)
    _, service = open_patch(config, patch_file)
    assignment = service.assignment

    click.echo(
        f"Universe {service.universe}: {assignment.device_count} devices "
        f"in {assignment.lane_count} lane(s)\n"
    )
    renderer = TextPatchRenderer(cell_width=cell_width)
    click.echo(renderer.render(assignment, skip_empty_rows=not all_rows))

    overflowing = [d for d in service.devices if d.overflows]
    for device in overflowing:
        click.echo(
            f"\nWarning: {device.display_label} overflows the "
            f"{config.address_space.total_slots} slot limit",
            err=True,
        )


@click.command()
@click.argument('patch_file', type=PATCH_FILE)
@click.pass_context
@cli_errors
def lanes(ctx, patch_file: Path):
    """List every device with its address range and lane."""
    config = load_config(ctx)
    _, service = open_patch(config, patch_file)
    assignment = service.assignment

    click.echo(f"{assignment.lane_count} lane(s)\n")
    for device in sorted(service.devices, key=lambda d: d.start):
        flag = "  OVERFLOW" if device.overflows else ""
        click.echo(
            f"  lane {assignment.lane_of(device.uid)}  "
            f"{device.start_address:>3}-{device.end + 1:<3}  "
            f"{device.uid}  {device.label}{flag}"
        )


@click.command()
@click.argument('patch_file', type=PATCH_FILE)
@click.argument('uid')
@click.argument('address')
@click.pass_context
@cli_errors
def move(ctx, patch_file: Path, uid: str, address: str):
    """Set the start ADDRESS (1-based) of device UID."""
    config = load_config(ctx)
    _, service = open_patch(config, patch_file)
    start_address = parse_start_address(address, config.address_space)

    device = asyncio.run(service.set_start_address(uid, start_address))
    click.echo(
        f"Moved {device.display_label} to {device.start_address} "
        f"(lane {service.assignment.lane_of(uid)} of {service.assignment.lane_count})"
    )


@click.command()
@click.argument('patch_file', type=PATCH_FILE)
@click.argument('uid')
@click.argument('delta_x', type=float)
@click.argument('delta_y', type=float)
@click.option('--row-width', type=click.FloatRange(min=1), default=None,
              help='Pixel width of one row (default: from config)')
@click.pass_context
@cli_errors
def drop(ctx, patch_file: Path, uid: str, delta_x: float, delta_y: float, row_width):
    """Drop device UID at a drag offset of DELTA_X, DELTA_Y pixels from the patch origin."""
    config = load_config(ctx)
    _, service = open_patch(config, patch_file)

    session = service.begin_drag(uid, row_width or config.row_width_px)
    device = asyncio.run(service.complete_drag(session, delta_x, delta_y))
    click.echo(f"Dropped {device.display_label} at {device.start_address}")


@click.command()
@click.argument('patch_file', type=PATCH_FILE)
@click.option('--cell-width', type=click.IntRange(min=3), default=8, show_default=True,
              help='Characters per slot cell')
@click.pass_context
@cli_errors
def edit(ctx, patch_file: Path, cell_width: int):
    """Open the interactive patch view."""
    # Lazy import keeps textual out of the non-interactive commands
    from rdmpatcher.tui import PatchView

    config = load_config(ctx)
    _, service = open_patch(config, patch_file)
    PatchView(service, cell_width=cell_width).run()

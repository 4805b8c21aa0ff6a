"""CLI entry point for anvilcompact."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from anvilcompact.errors import CompactError


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _load(world: Path, config_path: str | None, overrides: dict | None = None) -> dict:
    from anvilcompact.config import apply_overrides, load_config

    try:
        config = load_config(world, Path(config_path) if config_path else None)
        if overrides:
            config = apply_overrides(config, overrides)
    except CompactError as exc:
        raise click.ClickException(str(exc)) from exc
    return config


@click.group()
@click.version_option(package_name="anvilcompact")
def cli() -> None:
    """anvilcompact: shrink Minecraft worlds by dropping empty chunks."""


@cli.command()
@click.argument("world", type=click.Path(exists=True, resolve_path=True))
@click.option(
    "--keep-empty-chunks",
    is_flag=True,
    default=False,
    help="Copy every chunk, only defragmenting region files.",
)
@click.option(
    "--skip-player-data",
    is_flag=True,
    default=False,
    help="Leave level.dat untouched.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, resolve_path=True),
    default=None,
    help="YAML settings file (default: <world>/.anvilcompact.yaml if present).",
)
@click.option("-v", "--verbose", is_flag=True, help="Log every dropped chunk.")
def compact(
    world: str,
    keep_empty_chunks: bool,
    skip_player_data: bool,
    config_path: str | None,
    verbose: bool,
) -> None:
    """Remove empty chunks from WORLD and rewrite its region files.

    Every rewritten directory or file is first moved to a .bak sibling.
    Remove the backups once the compacted world has been verified.
    """
    from anvilcompact.compact import compact_world

    _configure_logging(verbose)

    root = Path(world)
    overrides: dict = {}
    if keep_empty_chunks:
        overrides["avoid_empty_chunks"] = False
    if skip_player_data:
        overrides["player_data"] = {"enabled": False}
    config = _load(root, config_path, overrides)

    try:
        report = compact_world(root, config)
    except (CompactError, OSError) as exc:
        raise click.ClickException(str(exc)) from exc

    stats = report.region.stats
    click.echo(f"Compacted {root}:")
    click.echo(
        f"  {report.region.path.name}: kept {stats.written} of {stats.present} chunks"
        f" ({stats.filtered} empty dropped, {stats.corrupt} unreadable skipped)"
    )
    for result in report.metadata:
        click.echo(
            f"  {result.path.name}: kept {result.stats.written} records"
            f" ({result.stats.corrupt} unreadable skipped)"
        )
    if report.player_data_scrubbed:
        click.echo(f"  {config['player_data']['file']}: Player data cleared")

    click.echo("\nBackups (remove after verifying the world):")
    for backup in report.backups:
        click.echo(f"  {backup}")
    if report.player_data_scrubbed:
        level_dat = root / config["player_data"]["file"]
        click.echo(f"  {level_dat.with_name(level_dat.name + config['backup_suffix'])}")


@cli.command()
@click.argument("world", type=click.Path(exists=True, resolve_path=True))
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, resolve_path=True),
    default=None,
    help="YAML settings file (default: <world>/.anvilcompact.yaml if present).",
)
def scan(world: str, config_path: str | None) -> None:
    """Report what compaction would drop from WORLD, without writing anything."""
    from anvilcompact.compact import primary_dir, scan_region

    root = Path(world)
    config = _load(root, config_path)
    try:
        report = scan_region(primary_dir(root, config))
    except (CompactError, OSError) as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(f"Scanned {report.path}:")
    click.echo(f"  Regions: {report.regions}")
    click.echo(f"  Chunks: {report.present}")
    click.echo(f"  Empty: {report.empty}")
    click.echo(f"  Would keep: {report.kept}")
    if report.corrupt:
        click.echo(f"  Unreadable: {report.corrupt}")
    if report.undecoded:
        click.echo(f"  Undecoded (kept): {report.undecoded}")
    for kind, count in sorted(report.schemas.items()):
        click.echo(f"  Schema {kind}: {count}")


@cli.command("scrub-player")
@click.argument("level_dat", type=click.Path(exists=True, dir_okay=False, resolve_path=True))
def scrub_player(level_dat: str) -> None:
    """Clear the embedded single-player state from LEVEL_DAT."""
    from anvilcompact.compact import backup_path, scrub_player_data

    path = Path(level_dat)
    try:
        changed = scrub_player_data(path)
    except (CompactError, OSError) as exc:
        raise click.ClickException(str(exc)) from exc

    if changed:
        click.echo(f"Cleared Player data in {path}")
        click.echo(f"  Backup: {backup_path(path)}")
    else:
        click.echo("Player data already empty; nothing to do.")

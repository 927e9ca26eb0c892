"""Command line interface for vaultsnap."""

from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.table import Table

from .core.config import Config
from .core.errors import ConfigurationError, NotFoundError, SnapshotError
from .core.export import SnapshotExporter, latest_snapshot, list_snapshots, snapshot_time
from .core.logging import setup_logging
from .core.restore import MAPPING_IDENTITY, SnapshotImporter

console = Console()


def _load_config(ctx: click.Context, workspace: Optional[Path]) -> Config:
    """Build the configuration from the config file and the workspace option."""
    config = Config(workspace)
    config_file = ctx.obj.get("config_file") if ctx.obj else None
    if config_file is not None:
        config.load_config(config_file)
    if workspace is not None:
        config.load_from_dict({"workspace_root": str(workspace.expanduser().absolute())})
    return config


def _vault_paths(vaults: Tuple[Path, ...]) -> Optional[list]:
    if not vaults:
        return None
    return [str(v.expanduser().absolute()) for v in vaults]


def _check_config(config: Config, check_paths: bool) -> None:
    """Stop on configuration problems before anything is written."""
    errors = config.validate(check_paths=check_paths)
    if errors:
        raise ConfigurationError("; ".join(errors))


@click.group()
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML file with vaultsnap settings",
)
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--log-file", type=click.Path(dir_okay=False), help="Also write logs to this file")
@click.pass_context
def cli(ctx: click.Context, config_file: Optional[Path], debug: bool, log_file: Optional[str]) -> None:
    """Vault snapshot tool.

    Captures one or more vault directories into a timestamped snapshot under
    an archive root, and restores a snapshot back onto vaults.

    Main commands:

      export    Snapshot vaults into the archive root
      import    Restore a snapshot onto vaults
      list      List snapshots in an archive root

    Run 'vaultsnap COMMAND --help' for more information on a specific command.
    """
    setup_logging(debug=debug, log_file=log_file)
    ctx.ensure_object(dict)
    ctx.obj["config_file"] = config_file


@cli.command()
@click.argument(
    "vaults",
    nargs=-1,
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
)
@click.option("--dest", "-d", help="Archive root for snapshots (default: <workspace>/snapshots)")
@click.option("--ignore", "-i", help="Comma-separated globs to leave out (default: .git)")
@click.option(
    "--workspace",
    "-w",
    type=click.Path(file_okay=False, dir_okay=True, path_type=Path),
    help="Workspace root used to resolve relative paths (default: current directory)",
)
@click.pass_context
def export(
    ctx: click.Context,
    vaults: Tuple[Path, ...],
    dest: Optional[str],
    ignore: Optional[str],
    workspace: Optional[Path],
) -> None:
    """Snapshot vaults into the archive root.

    VAULTS are the vault directories to snapshot. When none are given, the
    vaults from the config file are used.

    Each export creates a directory named after the current time in
    milliseconds, holding one copy of each vault.

    Examples:

      # Snapshot two vaults into ./snapshots
      vaultsnap export notes journal

      # Snapshot into a different archive root, skipping git and temp files
      vaultsnap export notes --dest ~/backups/notes --ignore ".git,**/*.tmp"
    """
    try:
        config = _load_config(ctx, workspace)
        config.load_from_dict({"dest": dest, "ignore": ignore, "vaults": _vault_paths(vaults)})
        _check_config(config, check_paths=True)
        export_config = config.export_config()

        exporter = SnapshotExporter(console=console)
        result = exporter.export(config.get_vaults(), export_config.dest, export_config.ignore)
        click.echo(result.snapshot_dir_path)
    except (SnapshotError, ValueError) as e:
        console.print(f"[red]Error: {e}")
        raise click.Abort()


@cli.command("import")
@click.argument("src", type=click.Path(path_type=Path))
@click.argument("vaults", nargs=-1, type=click.Path(file_okay=False, dir_okay=True, path_type=Path))
@click.option(
    "--workspace",
    "-w",
    type=click.Path(file_okay=False, dir_okay=True, path_type=Path),
    help="Workspace root; the default vault is <workspace>/vault",
)
@click.option(
    "--latest",
    "-l",
    is_flag=True,
    help="SRC is an archive root; restore its newest snapshot",
)
@click.option(
    "--match-identity",
    is_flag=True,
    help="Restore each archived vault onto the vault with the same name",
)
@click.pass_context
def import_(
    ctx: click.Context,
    src: Path,
    vaults: Tuple[Path, ...],
    workspace: Optional[Path],
    latest: bool,
    match_identity: bool,
) -> None:
    """Restore a snapshot onto vaults.

    SRC is the snapshot directory to restore (e.g., snapshots/1700000000000).

    VAULTS are the vault directories to restore onto. Files in the snapshot
    overwrite files in the vaults; files missing from the snapshot are kept.
    Without VAULTS, the vaults from the config file are used, or
    <workspace>/vault when none are configured.

    By default every archived vault is restored onto the first vault. Use
    --match-identity to restore each archived vault onto the vault with the
    same directory name.

    Examples:

      # Restore a snapshot onto a vault
      vaultsnap import snapshots/1700000000000 notes

      # Restore the newest snapshot in ./snapshots, matching vaults by name
      vaultsnap import snapshots notes journal --latest --match-identity
    """
    try:
        config = _load_config(ctx, workspace)
        config.load_from_dict(
            {
                "src": str(src.expanduser().absolute()),
                "vaults": _vault_paths(vaults),
                "mapping": MAPPING_IDENTITY if match_identity else None,
            }
        )
        _check_config(config, check_paths=False)
        snapshot_dir = config.import_config().src

        if latest:
            newest = latest_snapshot(snapshot_dir)
            if newest is None:
                raise NotFoundError(f"no snapshot found in {snapshot_dir}")
            snapshot_dir = newest

        importer = SnapshotImporter(mapping=config.mapping, console=console)
        importer.restore(snapshot_dir, config.get_vaults(), config.workspace_root)
    except (SnapshotError, ValueError) as e:
        console.print(f"[red]Error: {e}")
        raise click.Abort()


@cli.command("list")
@click.argument("archive_root", required=False, type=click.Path(path_type=Path))
@click.option(
    "--workspace",
    "-w",
    type=click.Path(file_okay=False, dir_okay=True, path_type=Path),
    help="Workspace root used to resolve the default archive root",
)
@click.pass_context
def list_command(ctx: click.Context, archive_root: Optional[Path], workspace: Optional[Path]) -> None:
    """List snapshots in an archive root, newest first.

    ARCHIVE_ROOT defaults to the configured dest (<workspace>/snapshots).

    Examples:

      # List snapshots in ./snapshots
      vaultsnap list

      # List snapshots in another archive root
      vaultsnap list ~/backups/notes
    """
    try:
        config = _load_config(ctx, workspace)
        if archive_root is not None:
            config.load_from_dict({"dest": str(archive_root.expanduser().absolute())})
        root = config.export_config().dest
    except (SnapshotError, ValueError) as e:
        console.print(f"[red]Error: {e}")
        raise click.Abort()

    snapshots = list_snapshots(root)
    if not snapshots:
        console.print("[yellow]No snapshots found.")
        return

    table = Table(title=f"Snapshots in {root}")
    table.add_column("Snapshot", style="cyan")
    table.add_column("Created", style="yellow")
    table.add_column("Vaults", style="magenta")

    for snapshot in snapshots:
        vault_names = sorted(p.name for p in snapshot.iterdir() if p.is_dir())
        table.add_row(
            snapshot.name,
            snapshot_time(snapshot).strftime("%Y-%m-%d %H:%M:%S"),
            ", ".join(vault_names) or "No content",
        )

    console.print(table)


def main() -> None:
    """Entry point for the vaultsnap CLI."""
    cli()


if __name__ == "__main__":
    main()

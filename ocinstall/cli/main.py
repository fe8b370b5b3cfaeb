"""Main CLI application for ocinstall."""

import contextlib
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ocinstall import __version__
from ocinstall.config.parser import ConfigError, load_installer_config, save_installer_config
from ocinstall.config.schemas import InstallerConfig, parse_mode
from ocinstall.core.errors import InstallError
from ocinstall.core.installer import OpencartInstaller

# Create the main Typer app
app = typer.Typer(
    name="ocinstall",
    help="Install-lifecycle file handling for OpenCart packages",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()
error_console = Console(stderr=True)

# Set up logger for the ocinstall package
logger = logging.getLogger("ocinstall")

InstallPathArg = Annotated[
    Path,
    typer.Argument(help="OpenCart installation directory"),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="YAML file overriding the managed path lists",
    ),
]
PermsOption = Annotated[
    str | None,
    typer.Option(
        "--perms",
        help="Base permissions in octal (e.g. 644); directories also get 111",
    ),
]


# -v count -> level; anything past -vv stays at DEBUG
VERBOSITY_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)


def get_log_handler(verbosity: int) -> RichHandler:
    """Get the stderr handler for install-step diagnostics, attaching it once.

    Until the CLI runs, the package logger only carries its NullHandler.
    """
    for handler in logger.handlers:
        if isinstance(handler, RichHandler):
            return handler

    handler = RichHandler(
        console=error_console,
        show_time=verbosity >= 2,
        show_path=verbosity >= 3,
        rich_tracebacks=True,
    )
    logger.addHandler(handler)
    return handler


def setup_logging(verbosity: int) -> None:
    """Show install-step diagnostics on stderr at the level -v asks for."""
    level = VERBOSITY_LEVELS[min(verbosity, len(VERBOSITY_LEVELS) - 1)]
    logger.setLevel(level)
    get_log_handler(verbosity).setLevel(level)


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    error_console.print(f"[red]Error:[/red] {message}")


def print_status(message: str, warning: bool = False) -> None:
    """Print a step outcome, marked with a check or a warning sign."""
    marker = "[yellow]⚠[/yellow]" if warning else "[green]✓[/green]"
    console.print(f"{marker} {message}")


def get_installer(config_path: Path | None = None) -> OpencartInstaller:
    """Build an installer from the given config, exiting on config errors."""
    try:
        config = load_installer_config(config_path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(1) from e
    return OpencartInstaller(config)


def get_install_path(path: Path) -> Path:
    """Check that the install path is an existing directory."""
    if not path.is_dir():
        print_error(f"Directory does not exist: {path}")
        raise typer.Exit(1)
    return path


def get_perms(perms: str | None, installer: OpencartInstaller) -> int:
    """Parse --perms, falling back to the configured base permissions."""
    if perms is None:
        return installer.config.base_perms
    try:
        return parse_mode(perms)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(1) from e


@contextlib.contextmanager
def install_step(name: str) -> Iterator[None]:
    """Report a failed install step and exit with status 1."""
    try:
        yield
    except InstallError as e:
        print_error(f"{name} failed: {e}")
        raise typer.Exit(1) from e


@app.callback()
def callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            count=True,
            help="Increase verbosity (-v info, -vv debug, -vvv trace)",
        ),
    ] = 0,
) -> None:
    """ocinstall - keeps OpenCart user files and permissions intact across reinstalls."""
    setup_logging(verbose)


@app.command()
def version() -> None:
    """Show the ocinstall version."""
    console.print(f"ocinstall {__version__}")


@app.command("init-config")
def init_config(
    path: Annotated[
        Path,
        typer.Argument(help="Where to write the config file"),
    ] = Path("ocinstall.yaml"),
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite an existing config file",
        ),
    ] = False,
) -> None:
    """Write the default configuration to a YAML file for editing."""
    if path.exists() and not force:
        print_error(f"Config file already exists: {path}")
        print_error("Use --force to overwrite it")
        raise typer.Exit(1)

    save_installer_config(path, InstallerConfig())
    print_status(f"Wrote default config to {path}")


@app.command()
def save(path: InstallPathArg, config: ConfigOption = None) -> None:
    """Save user-modified files to temporary storage."""
    installer = get_installer(config)
    root = get_install_path(path)

    with install_step("Save"):
        saved = installer.preserver.save_modified_files(root)

    print_status(f"Saved {len(saved)} item(s)")
    for item in saved:
        console.print(f"  {item}")


@app.command()
def restore(path: InstallPathArg, config: ConfigOption = None) -> None:
    """Move saved files back into the installation."""
    installer = get_installer(config)
    root = get_install_path(path)

    with install_step("Restore"):
        restored = installer.preserver.restore_modified_files(root)

    print_status(f"Restored {len(restored)} item(s)")
    for item in restored:
        console.print(f"  {item}")


@app.command()
def rotate(path: InstallPathArg, config: ConfigOption = None) -> None:
    """Unwrap a single top-level directory left by archive extraction."""
    installer = get_installer(config)
    root = get_install_path(path)

    with install_step("Rotate"):
        rotated = installer.normalizer.rotate_installed_files(root)

    if rotated:
        print_status(f"Rotated files into {root}")
    else:
        console.print("Layout already flat, nothing to rotate")


@app.command("copy-config")
def copy_config(path: InstallPathArg, config: ConfigOption = None) -> None:
    """Copy *-dist.php templates to their live config files."""
    installer = get_installer(config)
    root = get_install_path(path)

    with install_step("Config copy"):
        written = installer.materializer.copy_config_files(root)

    print_status(f"Wrote {len(written)} config file(s)")
    for item in written:
        console.print(f"  {item}")


@app.command("chmod")
def chmod(path: InstallPathArg, perms: PermsOption = None, config: ConfigOption = None) -> None:
    """Apply the required permissions to writable nodes."""
    installer = get_installer(config)
    root = get_install_path(path)
    base_perms = get_perms(perms, installer)

    with install_step("Chmod"):
        applied = installer.permission_setter.set_permissions(root, base_perms)

    print_status(f"Set permissions on {len(applied)} node(s)")
    for item, mode in applied.items():
        console.print(f"  {format(mode, 'o')}  {item}")


@app.command()
def prepare(path: InstallPathArg, config: ConfigOption = None) -> None:
    """Run the pre-install step (save user-modified files)."""
    installer = get_installer(config)
    root = get_install_path(path)

    with install_step("Prepare"):
        saved = installer.prepare(root)

    print_status(f"Prepared {root} ({len(saved)} item(s) saved)")


@app.command()
def finalize(path: InstallPathArg, perms: PermsOption = None, config: ConfigOption = None) -> None:
    """Run the post-install steps: rotate, copy configs, restore, chmod."""
    installer = get_installer(config)
    root = get_install_path(path)
    base_perms = get_perms(perms, installer)

    with install_step("Finalize"):
        summary = installer.finalize(root, base_perms)

    if summary.rotated:
        print_status("Rotated archive layout")
    if summary.configs_written:
        print_status(f"Wrote {len(summary.configs_written)} config file(s)")
    else:
        print_status("No config templates found", warning=True)
    print_status(f"Restored {len(summary.restored)} item(s)")
    print_status(f"Set permissions on {len(summary.permissions)} node(s)")


@app.command()
def status(path: InstallPathArg, config: ConfigOption = None) -> None:
    """Show which preserved items currently have a saved copy."""
    installer = get_installer(config)
    root = get_install_path(path)

    table = Table(title="Preserved Items")
    table.add_column("Item", style="cyan")
    table.add_column("Key", style="dim")
    table.add_column("Saved", style="green")

    for entry in installer.status(root):
        table.add_row(entry.relative, entry.saved.name, "yes" if entry.is_saved else "no")

    console.print(table)


@app.command()
def purge(path: InstallPathArg, config: ConfigOption = None) -> None:
    """Delete saved copies that were never restored."""
    installer = get_installer(config)

    # Saved copies may outlive the installation directory itself
    with install_step("Purge"):
        removed = installer.purge(path)

    if not removed:
        console.print("No saved items to remove")
        return
    print_status(f"Removed {len(removed)} saved item(s)")


if __name__ == "__main__":
    app()

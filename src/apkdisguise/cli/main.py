"""Root CLI application for apkdisguise."""

import typer
from rich.table import Table

from apkdisguise import __version__
from apkdisguise.cli import apps, device, disguise
from apkdisguise.core.adb import ADBWrapper
from apkdisguise.utils.config import get_config_str
from apkdisguise.utils.deps import (
    TOOL_INSTALL_HINTS,
    TOOL_KEYS,
    get_adb_command,
    get_tools_dir,
    resolve_tool_paths,
)
from apkdisguise.utils.logging import setup_logging
from apkdisguise.utils.output import console

app = typer.Typer(
    name="apkdisguise",
    help="Repackage Android APKs under a new package name.",
    no_args_is_help=True,
)

# Register subcommands
app.add_typer(device.app, name="device", help="Discover devices and suggest prefixes")
app.add_typer(apps.app, name="apps", help="List and uninstall installed applications")
app.command("disguise")(disguise.disguise_apk)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"apkdisguise {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    log_level: str = typer.Option(
        None,
        "--log-level",
        help="Log level for diagnostics on stderr (default: WARNING).",
    ),
) -> None:
    """apkdisguise - rename, rebuild, sign and install APKs."""
    console.set_json_mode(False)
    setup_logging(log_level or get_config_str("log_level"))


@app.command("check")
def check_adb() -> None:
    """Check whether adb is available."""
    adb = ADBWrapper(get_adb_command())

    if adb.is_available():
        console.print_success(f"adb available ({adb.adb})")
        return

    console.print_error("adb not available")
    console.print_info(f"  Install: {TOOL_INSTALL_HINTS['adb']}")
    raise typer.Exit(1)


@app.command("tools")
def show_tools() -> None:
    """Show where each external tool was found."""
    tools_dir = get_tools_dir()
    resolved = resolve_tool_paths(tools_dir)

    table = Table(title="External Tools")
    table.add_column("Tool", style="cyan")
    table.add_column("Path")

    for key in TOOL_KEYS:
        path = resolved.get(key)
        table.add_row(key, str(path) if path else "[red]not found[/red]")

    console.print(table)
    console.print_info(f"Tools directory: {tools_dir}")

    for key in TOOL_KEYS:
        if key not in resolved:
            console.print_warning(f"{key}: {TOOL_INSTALL_HINTS[key]}")


if __name__ == "__main__":
    app()

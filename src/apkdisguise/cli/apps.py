"""CLI commands for installed applications."""

import json

import typer
from rich.table import Table

from apkdisguise.core.adb import ADBWrapper
from apkdisguise.exceptions import DisguiseError
from apkdisguise.utils.deps import get_adb_command
from apkdisguise.utils.output import console

app = typer.Typer(no_args_is_help=True)


@app.command("list")
def list_apps(
    device: str = typer.Option(
        None,
        "--device",
        "-d",
        help="Target device ID.",
    ),
    user_only: bool = typer.Option(
        False,
        "--user",
        "-u",
        help="Only show user-installed applications.",
    ),
    system_only: bool = typer.Option(
        False,
        "--system",
        "-s",
        help="Only show system applications.",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Output as JSON.",
    ),
) -> None:
    """List installed applications, sorted by name."""
    if user_only and system_only:
        console.print_error("Cannot use both --user and --system")
        raise typer.Exit(1)

    console.set_json_mode(json_output)

    try:
        adb = ADBWrapper(get_adb_command())
        target = adb.resolve_device(device)

        with console.status("Loading applications..."):
            apps = adb.list_installed_applications(target)

        if user_only:
            apps = [a for a in apps if not a.is_system]
        elif system_only:
            apps = [a for a in apps if a.is_system]

        if json_output:
            typer.echo(json.dumps([a.model_dump() for a in apps], indent=2))
            return

        if not apps:
            console.print_warning("No applications found")
            raise typer.Exit(1) from None

        table = Table(title=f"Installed Applications ({len(apps)})")
        table.add_column("Name", style="cyan")
        table.add_column("Package Name", style="green")
        table.add_column("Type")

        for a in apps:
            kind = "[yellow]system[/yellow]" if a.is_system else "user"
            table.add_row(a.display_name, a.package_name, kind)

        console.print(table)

        system_count = sum(1 for a in apps if a.is_system)
        console.print_info(
            f"{len(apps)} application(s) (user: {len(apps) - system_count}, "
            f"system: {system_count})"
        )

    except DisguiseError as e:
        console.print_error(str(e))
        raise typer.Exit(1) from None


@app.command("uninstall")
def uninstall_app(
    package_name: str = typer.Argument(
        ...,
        help="Package name to uninstall.",
    ),
    device: str = typer.Option(
        None,
        "--device",
        "-d",
        help="Target device ID.",
    ),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Skip confirmation prompts.",
    ),
) -> None:
    """Uninstall an application from a device.

    System applications ask for a second confirmation.
    """
    try:
        adb = ADBWrapper(get_adb_command())
        target = adb.resolve_device(device)

        if not yes:
            is_system = package_name in adb.list_system_packages(target)
            typer.confirm(f"Uninstall {package_name} from {target}?", abort=True)
            if is_system:
                console.print_warning(
                    "This is a system application. Removing it may make the "
                    "device unstable."
                )
                typer.confirm("Really uninstall a system application?", abort=True)

        with console.status(f"Uninstalling {package_name}..."):
            removed = adb.uninstall(target, package_name)

        if not removed:
            console.print_error(f"Failed to uninstall {package_name}")
            raise typer.Exit(1)

        console.print_success(f"Uninstalled {package_name}")

    except DisguiseError as e:
        console.print_error(str(e))
        raise typer.Exit(1) from None

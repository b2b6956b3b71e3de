"""CLI commands for devices and prefix suggestions."""

import json

import typer
from rich.table import Table

from apkdisguise.core.adb import ADBWrapper
from apkdisguise.core.prefixes import PrefixScanner
from apkdisguise.exceptions import DisguiseError
from apkdisguise.models.apk import PrefixSource
from apkdisguise.utils.deps import get_adb_command
from apkdisguise.utils.output import console

app = typer.Typer(no_args_is_help=True)


@app.command("list")
def list_devices(
    json_output: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Output as JSON.",
    ),
) -> None:
    """List connected Android devices that are ready for commands."""
    console.set_json_mode(json_output)

    try:
        adb = ADBWrapper(get_adb_command())
        devices = adb.list_devices()

        if json_output:
            typer.echo(json.dumps(devices, indent=2))
            return

        if not devices:
            console.print_warning("No devices connected")
            raise typer.Exit(1) from None

        table = Table(title="Connected Devices")
        table.add_column("#", style="cyan", width=4)
        table.add_column("ID", style="green")

        for i, device_id in enumerate(devices, 1):
            table.add_row(str(i), device_id)

        console.print(table)
        console.print_info(f"{len(devices)} device(s) connected")

    except DisguiseError as e:
        console.print_error(str(e))
        raise typer.Exit(1) from None


@app.command("prefixes")
def scan_prefixes(
    device: str = typer.Option(
        None,
        "--device",
        "-d",
        help="Target device ID.",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Output as JSON.",
    ),
) -> None:
    """Suggest package prefixes that blend in with the device's apps."""
    console.set_json_mode(json_output)

    try:
        adb = ADBWrapper(get_adb_command())
        target = adb.resolve_device(device)
        prefixes = PrefixScanner(adb).scan(target)

        if json_output:
            output = [p.model_dump(mode="json") for p in prefixes]
            typer.echo(json.dumps(output, indent=2))
            return

        table = Table(title=f"Trusted Prefixes ({target})")
        table.add_column("Prefix", style="cyan")
        table.add_column("Count", justify="right")
        table.add_column("Source")

        for entry in prefixes:
            if entry.source is PrefixSource.RECOMMENDED:
                source = "[green]recommended[/green]"
                count = "-"
            else:
                source = "device scan"
                count = str(entry.count)
            table.add_row(entry.prefix, count, source)

        console.print(table)

    except DisguiseError as e:
        console.print_error(str(e))
        raise typer.Exit(1) from None

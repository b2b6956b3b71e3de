"""CLI command running the identity transformation pipeline."""

import json
from pathlib import Path

import typer

from apkdisguise.core.adb import ADBWrapper
from apkdisguise.core.pipeline import DisguisePipeline
from apkdisguise.exceptions import DisguiseError
from apkdisguise.models.pipeline import PipelineStep, SigningConfig
from apkdisguise.utils.config import get_signing_config
from apkdisguise.utils.deps import build_tool_paths, resolve_tool_paths
from apkdisguise.utils.output import console

STEP_LABELS: dict[PipelineStep, str] = {
    PipelineStep.DECOMPILE: "Decompiling...",
    PipelineStep.REBUILD: "Rebuilding...",
    PipelineStep.ZIPALIGN: "Aligning...",
    PipelineStep.SIGN: "Signing...",
    PipelineStep.INSTALL: "Installing...",
}


def disguise_apk(
    apk_path: Path = typer.Argument(
        ...,
        help="Path to the APK to repackage.",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    prefix: str = typer.Option(
        ...,
        "--prefix",
        "-p",
        help="New package prefix (see `apkdisguise device prefixes`).",
    ),
    suffix: str = typer.Option(
        None,
        "--suffix",
        "-s",
        help="Last package segment (default: derived from the file name).",
    ),
    install: bool = typer.Option(
        False,
        "--install",
        help="Install the signed APK on the device (replaces existing).",
    ),
    device: str = typer.Option(
        None,
        "--device",
        "-d",
        help="Target device ID (for --install).",
    ),
    java: Path = typer.Option(None, "--java", help="Java executable."),
    apktool: Path = typer.Option(None, "--apktool", help="apktool jar."),
    zipalign: Path = typer.Option(None, "--zipalign", help="zipalign executable."),
    apksigner: Path = typer.Option(None, "--apksigner", help="apksigner jar."),
    keystore: Path = typer.Option(None, "--keystore", "-k", help="Keystore file."),
    key_alias: str = typer.Option(None, "--key-alias", help="Key alias in keystore."),
    keystore_pass: str = typer.Option(None, "--keystore-pass", help="Keystore password."),
    key_pass: str = typer.Option(None, "--key-pass", help="Key password."),
    json_output: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Output as JSON.",
    ),
) -> None:
    """Rename an APK's package, then rebuild, align and sign it.

    Workflow: apktool d -> patch manifest -> apktool b -> zipalign -> apksigner

    Intermediate files are removed after a successful build. When a stage
    fails, the last artifact produced is kept and reported.

    Examples:

        # Derive the suffix from the file name: cn.chinapost.game
        apkdisguise disguise game.apk --prefix cn.chinapost

        # Explicit suffix, then install on the connected device
        apkdisguise disguise game.apk -p com.nlscan -s scanner --install
    """
    console.set_json_mode(json_output)

    try:
        resolved = resolve_tool_paths(
            overrides={
                "java": java,
                "apktool": apktool,
                "zipalign": zipalign,
                "apksigner": apksigner,
                "keystore": keystore,
            }
        )
        tools = build_tool_paths(resolved)

        signing = get_signing_config()
        signing = SigningConfig(
            key_alias=key_alias or signing.key_alias,
            keystore_pass=keystore_pass or signing.keystore_pass,
            key_pass=key_pass or signing.key_pass,
        )

        target = None
        if install:
            target = ADBWrapper(tools.adb).resolve_device(device)

        if not json_output:
            console.print_info(f"Repackaging {apk_path.name} under {prefix}...")

        with console.status("Starting...") as status:

            def on_step(step: PipelineStep) -> None:
                status.update(STEP_LABELS.get(step, step.value))

            result = DisguisePipeline(tools, signing).run(
                apk_path,
                prefix,
                suffix=suffix,
                device_id=target,
                install_after=install,
                on_step=on_step,
            )

        if json_output:
            typer.echo(json.dumps(result.model_dump(mode="json"), indent=2))
        else:
            console.print_pipeline_result(result)

        if not result.success:
            raise typer.Exit(1)

    except DisguiseError as e:
        console.print_error(str(e))
        raise typer.Exit(1) from None

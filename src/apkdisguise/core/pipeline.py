"""APK identity transformation: decompile, rename, rebuild, align, sign, install."""

import asyncio
from collections.abc import Callable
from pathlib import Path

from apkdisguise.core import classifier
from apkdisguise.core.adb import ADBWrapper
from apkdisguise.core.manifest import derive_suffix, new_package_name, patch_manifest
from apkdisguise.core.workspace import discard_intermediates, reset_work_dir, workspace_lock
from apkdisguise.exceptions import LaunchError
from apkdisguise.models.pipeline import (
    PipelineResult,
    PipelineStep,
    SigningConfig,
    ToolPaths,
    WorkspaceArtifacts,
)
from apkdisguise.utils.apk import validate_source_apk
from apkdisguise.utils.logging import get_logger
from apkdisguise.utils.process import ProcessResult, run_tool

logger = get_logger(__name__)

StepCallback = Callable[[PipelineStep], None]


class DisguisePipeline:
    """Repackages an APK under a new package name.

    Stages run strictly in order and the first tool-reported failure ends the
    run with a failed PipelineResult. Launch and manifest I/O failures are
    raised instead, since they mean the environment needs fixing.
    """

    def __init__(
        self,
        tools: ToolPaths,
        signing: SigningConfig | None = None,
        temp_root: Path | None = None,
    ):
        """Initialize the pipeline.

        Args:
            tools: External tool locations.
            signing: Keystore credentials. Defaults to SigningConfig().
            temp_root: Directory for working directories. Defaults to the
                system temp directory.
        """
        self.tools = tools
        self.signing = signing or SigningConfig()
        self.temp_root = temp_root
        self.adb = ADBWrapper(tools.adb)

    def _java_jar(self, jar: Path, *args: str) -> list[str]:
        return [self.tools.java, "-jar", str(jar), *args]

    def decompile(self, apk_path: Path, artifacts: WorkspaceArtifacts) -> ProcessResult:
        """Decode the APK's manifest and resources, leaving dex files as-is."""
        reset_work_dir(artifacts)

        # -f: overwrite the output directory, -s: skip smali disassembly
        cmd = self._java_jar(
            self.tools.apktool,
            "d",
            str(apk_path),
            "-o",
            str(artifacts.work_dir),
            "-f",
            "-s",
        )
        return run_tool(cmd)

    def rebuild(self, artifacts: WorkspaceArtifacts) -> ProcessResult:
        """Build an unsigned APK from the working directory."""
        cmd = self._java_jar(
            self.tools.apktool,
            "b",
            str(artifacts.work_dir),
            "-o",
            str(artifacts.rebuilt_apk),
        )
        return run_tool(cmd)

    def align(self, artifacts: WorkspaceArtifacts) -> ProcessResult:
        """4-byte align the rebuilt APK."""
        cmd = [
            str(self.tools.zipalign),
            "-f",
            "-v",
            "4",
            str(artifacts.rebuilt_apk),
            str(artifacts.aligned_apk),
        ]
        return run_tool(cmd)

    def sign(self, artifacts: WorkspaceArtifacts) -> ProcessResult:
        """Sign the aligned APK with the v1 scheme only."""
        cmd = self._java_jar(
            self.tools.apksigner,
            "sign",
            "--ks",
            str(self.tools.keystore),
            "--ks-pass",
            f"pass:{self.signing.keystore_pass}",
            "--ks-key-alias",
            self.signing.key_alias,
            "--key-pass",
            f"pass:{self.signing.key_pass}",
            "--v1-signing-enabled",
            "true",
            "--v2-signing-enabled",
            "false",
            "--out",
            str(artifacts.final_apk),
            str(artifacts.aligned_apk),
        )
        return run_tool(cmd)

    def install(
        self, device_id: str, artifacts: WorkspaceArtifacts, package_name: str
    ) -> PipelineResult:
        """Install the signed APK; failures here leave the APK in place."""
        try:
            result = self.adb.install(device_id, artifacts.final_apk)
        except LaunchError as e:
            return self._failed(
                PipelineStep.INSTALL,
                f"Install command failed to start: {e}",
                artifacts.final_apk,
                package_name,
            )

        if not classifier.INSTALL.succeeded(result):
            return self._failed(
                PipelineStep.INSTALL,
                f"Install failed: {result.stdout.strip() or result.stderr.strip()}",
                artifacts.final_apk,
                package_name,
            )

        logger.info("Installed disguised APK", device=device_id, package=package_name)
        return PipelineResult(
            success=True,
            message=f"Installed successfully. New package: {package_name}",
            output_path=artifacts.final_apk,
            step=PipelineStep.INSTALL,
            package_name=package_name,
        )

    def _failed(
        self,
        step: PipelineStep,
        message: str,
        output_path: Path | None = None,
        package_name: str | None = None,
    ) -> PipelineResult:
        logger.warning(
            "Pipeline stage failed",
            step=step.value,
            kept=str(output_path) if output_path else None,
        )
        return PipelineResult(
            success=False,
            message=message,
            output_path=output_path,
            step=step,
            package_name=package_name,
        )

    def run(
        self,
        apk_path: Path,
        new_prefix: str,
        suffix: str | None = None,
        device_id: str | None = None,
        install_after: bool = False,
        on_step: StepCallback | None = None,
    ) -> PipelineResult:
        """Execute the full workflow for one APK.

        Args:
            apk_path: Source APK.
            new_prefix: Namespace prefix for the new package (e.g., com.example).
            suffix: Last package segment. Derived from the file name if empty.
            device_id: Device to install on.
            install_after: Install the signed APK when a device is given.
            on_step: Called with each stage before it starts.

        Returns:
            PipelineResult describing the terminal state of the run.

        Raises:
            InvalidApkError: If apk_path is not an APK file.
            LaunchError: If a build tool cannot be started.
            ManifestError: If the manifest cannot be read, patched or written.
        """
        apk_path = validate_source_apk(apk_path)
        artifacts = WorkspaceArtifacts.for_source(apk_path, self.temp_root)

        with workspace_lock(artifacts):
            return self._run_locked(
                apk_path, artifacts, new_prefix, suffix, device_id, install_after, on_step
            )

    async def arun(
        self,
        apk_path: Path,
        new_prefix: str,
        suffix: str | None = None,
        device_id: str | None = None,
        install_after: bool = False,
        on_step: StepCallback | None = None,
    ) -> PipelineResult:
        """Run the pipeline on a worker thread so the event loop stays free."""
        return await asyncio.to_thread(
            self.run, apk_path, new_prefix, suffix, device_id, install_after, on_step
        )

    def _run_locked(
        self,
        apk_path: Path,
        artifacts: WorkspaceArtifacts,
        new_prefix: str,
        suffix: str | None,
        device_id: str | None,
        install_after: bool,
        on_step: StepCallback | None,
    ) -> PipelineResult:
        def enter(step: PipelineStep) -> None:
            logger.info("Pipeline stage", step=step.value, apk=apk_path.name)
            if on_step is not None:
                on_step(step)

        enter(PipelineStep.DECOMPILE)
        result = self.decompile(apk_path, artifacts)
        if not classifier.EXIT_STATUS.succeeded(result):
            return self._failed(
                PipelineStep.DECOMPILE, f"Decompile failed: {result.output}"
            )

        package_name = new_package_name(new_prefix, derive_suffix(apk_path, suffix))
        original_package = patch_manifest(artifacts.manifest, package_name)
        logger.info("Patched manifest", original=original_package, new=package_name)

        enter(PipelineStep.REBUILD)
        result = self.rebuild(artifacts)
        if not classifier.EXIT_STATUS.succeeded(result):
            return self._failed(
                PipelineStep.REBUILD,
                f"Rebuild failed: {result.output}",
                package_name=package_name,
            )

        enter(PipelineStep.ZIPALIGN)
        result = self.align(artifacts)
        if not classifier.EXIT_STATUS.succeeded(result):
            return self._failed(
                PipelineStep.ZIPALIGN,
                f"Alignment failed: {result.stderr.strip()}",
                artifacts.rebuilt_apk,
                package_name,
            )

        enter(PipelineStep.SIGN)
        result = self.sign(artifacts)
        if not classifier.EXIT_STATUS.succeeded(result):
            return self._failed(
                PipelineStep.SIGN,
                f"Signing failed: {result.stderr.strip()}",
                artifacts.aligned_apk,
                package_name,
            )

        leftovers = discard_intermediates(artifacts)
        if leftovers:
            logger.warning(
                "Intermediate artifacts left on disk",
                paths=[str(path) for path in leftovers],
            )

        if install_after and device_id:
            enter(PipelineStep.INSTALL)
            return self.install(device_id, artifacts, package_name)

        return PipelineResult(
            success=True,
            message=f"Done. New package: {package_name}",
            output_path=artifacts.final_apk,
            step=PipelineStep.COMPLETE,
            package_name=package_name,
        )

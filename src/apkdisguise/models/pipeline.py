"""Pydantic models for the identity transformation pipeline."""

import tempfile
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict


class PipelineStep(StrEnum):
    """Stage that produced a pipeline result."""

    DECOMPILE = "decompile"
    REBUILD = "rebuild"
    ZIPALIGN = "zipalign"
    SIGN = "sign"
    INSTALL = "install"
    COMPLETE = "complete"


class PipelineResult(BaseModel):
    """Terminal outcome of one pipeline run."""

    model_config = ConfigDict(frozen=True)

    success: bool
    """Whether the run reached its goal."""

    message: str
    """Human-readable outcome, or the failing tool's diagnostic output."""

    output_path: Path | None = None
    """Most advanced artifact that exists at the time of return."""

    step: PipelineStep | None = None
    """Stage that produced this result."""

    package_name: str | None = None
    """New package identity, once it has been derived."""


class ToolPaths(BaseModel):
    """Locations of the external tools the pipeline invokes."""

    java: str = "java"
    """Java runtime used to launch apktool and apksigner jars."""

    apktool: Path
    """apktool jar."""

    zipalign: Path
    """zipalign executable."""

    apksigner: Path
    """apksigner jar."""

    keystore: Path
    """Keystore holding the signing key."""

    adb: str = "adb"
    """ADB executable, used by the install stage."""


class SigningConfig(BaseModel):
    """Credentials used with the keystore when signing."""

    key_alias: str = "my-alias"
    keystore_pass: str = "123456"
    key_pass: str = "123456"


class WorkspaceArtifacts(BaseModel):
    """File-system footprint of one pipeline run.

    All paths derive from the source APK's stem, so repeated runs on the same
    file always land on the same locations.
    """

    work_dir: Path
    """Decompiled sources."""

    rebuilt_apk: Path
    """apktool output, unaligned and unsigned."""

    aligned_apk: Path
    """zipalign output, unsigned."""

    final_apk: Path
    """Signed APK, the run's deliverable."""

    @classmethod
    def for_source(cls, apk_path: Path, temp_root: Path | None = None) -> "WorkspaceArtifacts":
        """Derive the artifact paths for a source APK."""
        stem = apk_path.stem or "apk"
        parent = apk_path.parent
        root = temp_root if temp_root is not None else Path(tempfile.gettempdir())
        return cls(
            work_dir=root / f"apk_disguise_{stem}",
            rebuilt_apk=parent / f"{stem}_rebuilt.apk",
            aligned_apk=parent / f"{stem}_aligned.apk",
            final_apk=parent / f"{stem}_fixed.apk",
        )

    @property
    def manifest(self) -> Path:
        """Decompiled AndroidManifest.xml."""
        return self.work_dir / "AndroidManifest.xml"

    @property
    def intermediates(self) -> list[Path]:
        """Artifacts removed after a successful build."""
        return [self.work_dir, self.rebuilt_apk, self.aligned_apk]

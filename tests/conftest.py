"""Shared fixtures for apkdisguise tests."""

from pathlib import Path

import pytest

from apkdisguise.models.pipeline import ToolPaths
from apkdisguise.utils.process import ProcessResult

MANIFEST = """<?xml version="1.0" encoding="utf-8" standalone="no"?>
<manifest xmlns:android="http://schemas.android.com/apk/res/android" package="com.original.game">
    <application android:label="@string/app_name">
    </application>
</manifest>
"""


def make_result(cmd=None, returncode=0, stdout="", stderr=""):
    return ProcessResult(
        command=cmd or [],
        returncode=returncode,
        stdout=stdout,
        stderr=stderr,
    )


class FakeToolchain:
    """Stands in for apktool/zipalign/apksigner, writing the files each would produce.

    Args:
        fail: Stage name ("decompile", "rebuild", "zipalign", "sign") that
            exits non-zero.
        manifest: Manifest text written by the decompile stage.
    """

    def __init__(self, fail=None, manifest=MANIFEST):
        self.fail = fail
        self.manifest = manifest
        self.calls = []

    def _stage(self, cmd):
        if cmd[0].endswith("zipalign"):
            return "zipalign"
        if cmd[2].endswith("apksigner.jar"):
            return "sign"
        return {"d": "decompile", "b": "rebuild"}[cmd[3]]

    def __call__(self, cmd, **kwargs):
        self.calls.append(cmd)
        stage = self._stage(cmd)

        if stage == self.fail:
            return make_result(cmd, 1, stdout=f"{stage} out", stderr=f"{stage} broke")

        if stage == "decompile":
            work_dir = Path(cmd[cmd.index("-o") + 1])
            work_dir.mkdir(parents=True)
            (work_dir / "AndroidManifest.xml").write_text(self.manifest)
            (work_dir / "apktool.yml").write_text("version: 2.9.3\n")
        elif stage == "rebuild":
            Path(cmd[cmd.index("-o") + 1]).write_bytes(b"PK\x03\x04rebuilt")
        elif stage == "zipalign":
            Path(cmd[-1]).write_bytes(b"PK\x03\x04aligned")
        elif stage == "sign":
            Path(cmd[cmd.index("--out") + 1]).write_bytes(b"PK\x03\x04signed")

        return make_result(cmd, 0, stdout="ok")

    def stages(self):
        return [self._stage(cmd) for cmd in self.calls]


@pytest.fixture
def source_apk(tmp_path):
    apk = tmp_path / "game.apk"
    apk.write_bytes(b"PK\x03\x04source")
    return apk.resolve()


@pytest.fixture
def work_root(tmp_path):
    root = tmp_path / "work"
    root.mkdir()
    return root.resolve()


@pytest.fixture
def tools(tmp_path):
    return ToolPaths(
        java="java",
        apktool=tmp_path / "tools" / "apktool.jar",
        zipalign=tmp_path / "tools" / "zipalign",
        apksigner=tmp_path / "tools" / "apksigner.jar",
        keystore=tmp_path / "tools" / "release-key.jks",
        adb="adb",
    )

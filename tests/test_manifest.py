"""Tests for manifest rewriting and suffix derivation."""

from pathlib import Path

import pytest

from apkdisguise.core.manifest import (
    derive_suffix,
    new_package_name,
    patch_manifest,
    read_package_name,
    rewrite_manifest,
)
from apkdisguise.exceptions import ManifestError
from conftest import MANIFEST


class TestDeriveSuffix:
    def test_from_file_name(self):
        assert derive_suffix(Path("/x/game.apk")) == "game"

    def test_lowercases_and_strips_non_alphanumerics(self):
        assert derive_suffix(Path("My-Game_v2.1.apk")) == "mygamev21"

    def test_truncates_to_twelve(self):
        assert derive_suffix(Path("SuperLongApplicationName.apk")) == "superlongapp"

    def test_custom_suffix_wins(self):
        assert derive_suffix(Path("game.apk"), "scanner") == "scanner"

    def test_empty_custom_suffix_is_ignored(self):
        assert derive_suffix(Path("game.apk"), "") == "game"

    def test_nothing_left_falls_back(self):
        assert derive_suffix(Path("___.apk")) == "app"

    def test_scenario_identity(self):
        assert new_package_name("cn.chinapost", derive_suffix(Path("game.apk"))) == (
            "cn.chinapost.game"
        )


class TestRewriteManifest:
    def test_replaces_package(self):
        patched = rewrite_manifest(MANIFEST, "cn.chinapost.game")

        assert 'package="cn.chinapost.game"' in patched
        assert "com.original.game" not in patched
        assert read_package_name(patched) == "cn.chinapost.game"

    def test_inserts_uses_sdk_before_application(self):
        patched = rewrite_manifest(MANIFEST, "a.b.c")

        sdk = patched.index("<uses-sdk")
        assert sdk < patched.index("<application")
        assert 'android:minSdkVersion="19"' in patched
        assert 'android:targetSdkVersion="27"' in patched

    def test_existing_uses_sdk_left_alone(self):
        manifest = MANIFEST.replace(
            "    <application",
            '    <uses-sdk android:minSdkVersion="21"/>\n    <application',
        )
        patched = rewrite_manifest(manifest, "a.b.c")

        assert patched.count("<uses-sdk") == 1
        assert 'android:minSdkVersion="21"' in patched

    def test_only_first_package_attribute_replaced(self):
        manifest = MANIFEST.replace(
            "<application",
            '<queries><package android:name="x" package="keep.me"/></queries>\n<application',
        )
        patched = rewrite_manifest(manifest, "a.b.c")

        assert 'package="a.b.c"' in patched
        assert 'package="keep.me"' in patched

    def test_backslashes_in_name_are_literal(self):
        patched = rewrite_manifest(MANIFEST, r"cn.x.a\1\g<0>")

        assert r'package="cn.x.a\1\g<0>"' in patched
        assert "com.original.game" not in patched

    def test_missing_package_attribute(self):
        with pytest.raises(ManifestError, match="no package attribute"):
            rewrite_manifest("<manifest><application/></manifest>", "a.b.c")


class TestPatchManifest:
    def test_rewrites_file_and_returns_original(self, tmp_path):
        manifest = tmp_path / "AndroidManifest.xml"
        manifest.write_text(MANIFEST)

        original = patch_manifest(manifest, "cn.chinapost.game")

        assert original == "com.original.game"
        assert read_package_name(manifest.read_text()) == "cn.chinapost.game"

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ManifestError, match="Failed to read manifest"):
            patch_manifest(tmp_path / "AndroidManifest.xml", "a.b.c")

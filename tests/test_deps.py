"""Tests for tool discovery and configuration."""

import json
from pathlib import Path

import pytest

from apkdisguise.exceptions import ToolNotFoundError
from apkdisguise.utils import android_sdk, config, deps
from apkdisguise.utils.android_sdk import find_apksigner_jar, find_build_tools, find_zipalign


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point config and SDK lookups at empty temp locations."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("APKDISGUISE_HOME", str(home))
    monkeypatch.delenv("APKDISGUISE_TOOLS_DIR", raising=False)
    monkeypatch.delenv("ANDROID_HOME", raising=False)
    monkeypatch.delenv("ANDROID_SDK_ROOT", raising=False)
    monkeypatch.delenv("JAVA_HOME", raising=False)
    monkeypatch.setattr(deps, "find_build_tools", lambda: None)
    monkeypatch.setattr(deps.shutil, "which", lambda name: None)
    config.reload_config()
    yield home
    config.reload_config()


def write_config(home, data):
    (home / "config.json").write_text(json.dumps(data))
    config.reload_config()


def populate_tools_dir(tools_dir):
    tools_dir.mkdir(parents=True, exist_ok=True)
    for name in ("apktool.jar", "zipalign", "apksigner.jar", "release-key.jks"):
        (tools_dir / name).write_bytes(b"")


class TestConfig:
    def test_missing_file(self):
        assert config.load_config() == {}

    def test_malformed_file(self, isolated_env):
        (isolated_env / "config.json").write_text("{not json")
        config.reload_config()
        assert config.load_config() == {}

    def test_non_dict_file(self, isolated_env):
        write_config(isolated_env, ["a"])
        assert config.load_config() == {}

    def test_signing_defaults(self):
        signing = config.get_signing_config()
        assert signing.key_alias == "my-alias"
        assert signing.keystore_pass == "123456"
        assert signing.key_pass == "123456"

    def test_signing_overrides(self, isolated_env):
        write_config(isolated_env, {"key_alias": "release", "key_pass": "", "keystore_pass": "s3"})
        signing = config.get_signing_config()
        assert signing.key_alias == "release"
        assert signing.keystore_pass == "s3"
        assert signing.key_pass == "123456"


class TestResolveToolPaths:
    def test_nothing_installed(self, tmp_path):
        assert deps.resolve_tool_paths(tmp_path / "empty") == {}

    def test_bundled_tools_dir(self, tmp_path):
        tools_dir = tmp_path / "tools"
        populate_tools_dir(tools_dir)

        resolved = deps.resolve_tool_paths(tools_dir)

        assert set(resolved) == {"apktool", "zipalign", "apksigner", "keystore"}
        assert resolved["apktool"] == (tools_dir / "apktool.jar").resolve()
        assert resolved["keystore"] == (tools_dir / "release-key.jks").resolve()

    def test_default_tools_dir_under_home(self, isolated_env):
        populate_tools_dir(isolated_env / "tools")
        assert "apktool" in deps.resolve_tool_paths()

    def test_env_tools_dir(self, tmp_path, monkeypatch):
        tools_dir = tmp_path / "elsewhere"
        populate_tools_dir(tools_dir)
        monkeypatch.setenv("APKDISGUISE_TOOLS_DIR", str(tools_dir))

        assert deps.get_tools_dir() == tools_dir
        assert "zipalign" in deps.resolve_tool_paths()

    def test_override_beats_tools_dir(self, tmp_path):
        tools_dir = tmp_path / "tools"
        populate_tools_dir(tools_dir)
        custom = tmp_path / "custom.jks"
        custom.write_bytes(b"")

        resolved = deps.resolve_tool_paths(tools_dir, overrides={"keystore": custom})

        assert resolved["keystore"] == custom.resolve()

    def test_config_path_beats_tools_dir(self, tmp_path, isolated_env):
        tools_dir = tmp_path / "tools"
        populate_tools_dir(tools_dir)
        jar = tmp_path / "apktool_2.9.jar"
        jar.write_bytes(b"")
        write_config(isolated_env, {"apktool_path": str(jar)})

        assert deps.resolve_tool_paths(tools_dir)["apktool"] == jar.resolve()

    def test_missing_override_falls_through(self, tmp_path):
        tools_dir = tmp_path / "tools"
        populate_tools_dir(tools_dir)

        resolved = deps.resolve_tool_paths(
            tools_dir, overrides={"apktool": tmp_path / "nope.jar"}
        )

        assert resolved["apktool"] == (tools_dir / "apktool.jar").resolve()

    def test_java_and_adb_from_path(self, tmp_path, monkeypatch):
        java = tmp_path / "bin" / "java"
        java.parent.mkdir()
        java.write_bytes(b"")
        monkeypatch.setattr(
            deps.shutil, "which", lambda name: str(java) if name == "java" else None
        )

        resolved = deps.resolve_tool_paths(tmp_path / "empty")

        assert resolved["java"] == java.resolve()
        assert "adb" not in resolved


class TestBuildToolPaths:
    def test_complete(self, tmp_path):
        tools_dir = tmp_path / "tools"
        populate_tools_dir(tools_dir)
        resolved = deps.resolve_tool_paths(tools_dir)
        resolved["java"] = tmp_path / "java"

        tools = deps.build_tool_paths(resolved)

        assert tools.apktool == resolved["apktool"]
        assert tools.java == str(tmp_path / "java")
        assert tools.adb == "adb"

    def test_missing_tool_has_hint(self, tmp_path):
        with pytest.raises(ToolNotFoundError, match="java") as exc_info:
            deps.build_tool_paths({})

        assert exc_info.value.install_hint == deps.TOOL_INSTALL_HINTS["java"]

    def test_missing_keystore(self, tmp_path):
        resolved = {key: tmp_path / key for key in ("java", "apktool", "zipalign", "apksigner")}
        with pytest.raises(ToolNotFoundError, match="keystore"):
            deps.build_tool_paths(resolved)


class TestAndroidSdk:
    def test_latest_build_tools(self, tmp_path):
        for version in ("29.0.3", "33.0.1", "34.0.0", "not-a-version"):
            (tmp_path / "build-tools" / version).mkdir(parents=True)

        assert find_build_tools(tmp_path) == tmp_path / "build-tools" / "34.0.0"

    def test_too_old(self, tmp_path):
        (tmp_path / "build-tools" / "28.0.0").mkdir(parents=True)
        assert find_build_tools(tmp_path) is None

    def test_zipalign_and_apksigner_jar(self, tmp_path, monkeypatch):
        monkeypatch.setattr("platform.system", lambda: "Linux")
        build_tools = tmp_path / "34.0.0"
        (build_tools / "lib").mkdir(parents=True)
        (build_tools / "zipalign").write_bytes(b"")
        (build_tools / "lib" / "apksigner.jar").write_bytes(b"")

        assert find_zipalign(build_tools) == build_tools / "zipalign"
        assert find_apksigner_jar(build_tools) == build_tools / "lib" / "apksigner.jar"

    def test_android_home_config_beats_env(self, tmp_path, isolated_env, monkeypatch):
        from_env = tmp_path / "env-sdk"
        from_config = tmp_path / "config-sdk"
        from_env.mkdir()
        from_config.mkdir()
        monkeypatch.setenv("ANDROID_HOME", str(from_env))

        assert android_sdk.get_android_home() == from_env

        write_config(isolated_env, {"android_home": str(from_config)})
        assert android_sdk.get_android_home() == from_config

    def test_android_home_skips_missing_dirs(self, tmp_path, isolated_env, monkeypatch):
        sdk_root = tmp_path / "sdk"
        sdk_root.mkdir()
        write_config(isolated_env, {"android_home": str(tmp_path / "gone")})
        monkeypatch.setenv("ANDROID_SDK_ROOT", str(sdk_root))

        assert android_sdk.get_android_home() == sdk_root

    def test_android_home_not_found(self, monkeypatch):
        monkeypatch.setattr(android_sdk, "default_sdk_locations", lambda: ())
        assert android_sdk.get_android_home() is None

    def test_default_locations_per_platform(self):
        assert android_sdk.default_sdk_locations("Plan9") == ()
        assert Path("/opt/android-sdk") in android_sdk.default_sdk_locations("Linux")

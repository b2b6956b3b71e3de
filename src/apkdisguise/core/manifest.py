"""Rewriting the package identity in a decompiled AndroidManifest.xml."""

import re
from pathlib import Path

from apkdisguise.exceptions import ManifestError

MAX_SUFFIX_LENGTH = 12
FALLBACK_SUFFIX = "app"

PACKAGE_ATTR_RE = re.compile(r'package="([^"]+)"')

USES_SDK_TAG = "<uses-sdk"
APPLICATION_TAG = "<application"
USES_SDK_ELEMENT = (
    '    <uses-sdk android:minSdkVersion="19" android:targetSdkVersion="27"/>\n    '
)


def derive_suffix(apk_path: Path, custom_suffix: str | None = None) -> str:
    """Choose the last package segment for the new identity.

    A non-empty custom suffix is used as given. Otherwise the APK's file name
    is lowercased, reduced to alphanumerics and cut to 12 characters.
    """
    if custom_suffix:
        return custom_suffix

    clean = "".join(c for c in apk_path.stem.lower() if c.isalnum())
    return clean[:MAX_SUFFIX_LENGTH] or FALLBACK_SUFFIX


def new_package_name(prefix: str, suffix: str) -> str:
    """Join prefix and suffix into a package identity."""
    return f"{prefix}.{suffix}"


def read_package_name(manifest_text: str) -> str | None:
    """Get the declared package name, if any."""
    match = PACKAGE_ATTR_RE.search(manifest_text)
    return match.group(1) if match else None


def rewrite_manifest(manifest_text: str, package_name: str) -> str:
    """Replace the package attribute and make sure an SDK declaration exists.

    Raises:
        ManifestError: If the manifest has no package attribute.
    """
    # Callable replacement: the name is inserted literally, never as a template
    patched, replaced = PACKAGE_ATTR_RE.subn(
        lambda _match: f'package="{package_name}"', manifest_text, count=1
    )
    if not replaced:
        raise ManifestError("Manifest has no package attribute to rewrite")

    # apktool b fails on some inputs without an explicit SDK range
    if USES_SDK_TAG not in patched:
        pos = patched.find(APPLICATION_TAG)
        if pos != -1:
            patched = patched[:pos] + USES_SDK_ELEMENT + patched[pos:]

    return patched


def patch_manifest(manifest_path: Path, package_name: str) -> str | None:
    """Rewrite a manifest file in place.

    Args:
        manifest_path: Decompiled AndroidManifest.xml.
        package_name: New package identity.

    Returns:
        The package name declared before patching.

    Raises:
        ManifestError: If the file cannot be read or written, or has no
            package attribute.
    """
    try:
        original = manifest_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(f"Failed to read manifest {manifest_path}: {e}") from e

    patched = rewrite_manifest(original, package_name)

    try:
        manifest_path.write_text(patched, encoding="utf-8")
    except OSError as e:
        raise ManifestError(f"Failed to write manifest {manifest_path}: {e}") from e

    return read_package_name(original)

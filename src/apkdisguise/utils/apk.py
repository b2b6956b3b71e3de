"""Source APK checks run before any tool is launched."""

from pathlib import Path

from apkdisguise.exceptions import InvalidApkError

# APKs are ZIP archives
ZIP_MAGIC = b"PK\x03\x04"


def read_magic(apk_path: Path) -> bytes:
    try:
        with apk_path.open("rb") as f:
            return f.read(len(ZIP_MAGIC))
    except OSError as e:
        raise InvalidApkError(f"Cannot read {apk_path.name}: {e}") from e


def validate_source_apk(apk_path: Path) -> Path:
    """Check that apk_path names a readable APK and return it resolved.

    Raises:
        InvalidApkError: If the path is missing, not a regular file, lacks the
            .apk extension or does not start with a ZIP header.
    """
    apk_path = apk_path.expanduser().resolve()

    if not apk_path.exists():
        raise InvalidApkError(f"APK not found: {apk_path}")
    if not apk_path.is_file():
        raise InvalidApkError(f"Not a file: {apk_path}")
    if apk_path.suffix.lower() != ".apk":
        raise InvalidApkError(f"Expected an .apk file, got: {apk_path.name}")

    magic = read_magic(apk_path)
    if magic != ZIP_MAGIC:
        raise InvalidApkError(f"{apk_path.name} is not a ZIP archive (read {magic!r})")

    return apk_path

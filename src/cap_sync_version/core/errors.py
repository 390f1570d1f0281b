"""Error hierarchy for cap-sync-version.

Two families:
- Version-level errors (`InvalidVersionError`, `VersionCodeOverflowError`)
  apply to a whole run or a whole platform.
- `PatchError` subclasses apply to a single target file and are collected by
  the orchestrator instead of aborting sibling files.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable


class CapSyncVersionError(Exception):
    """Base class for every error raised by this package."""


class InvalidVersionError(CapSyncVersionError):
    def __init__(self, raw: str, reason: str | None = None) -> None:
        self.raw = raw
        message = f"Invalid semantic version: {raw!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class VersionCodeOverflowError(CapSyncVersionError):
    """The Android version code cannot be derived within the allowed range."""


class PackageManifestError(CapSyncVersionError):
    """package.json is missing, unreadable or has no usable version."""


class PatchError(CapSyncVersionError):
    """A single target file could not be patched."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = Path(path)
        super().__init__(f"{self.path}: {message}")


class TargetFileNotFoundError(PatchError):
    def __init__(self, path: Path) -> None:
        super().__init__(path, "file not found")


class FieldNotFoundError(PatchError):
    def __init__(self, path: Path, fields: Iterable[str]) -> None:
        self.fields = tuple(fields)
        super().__init__(path, f"missing field(s): {', '.join(self.fields)}")


class MalformedFileError(PatchError):
    """The file cannot be read as its expected format."""


class MalformedGradleError(MalformedFileError):
    pass


class MalformedPlistError(MalformedFileError):
    pass

"""package.json reader.

Only the `version` field matters here; everything else in the manifest is
ignored.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from cap_sync_version.core.errors import PackageManifestError


class PackageManifest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    version: str = Field(..., min_length=1)


def load_package_manifest(path: Path) -> PackageManifest:
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise PackageManifestError(f"{path}: file not found") from exc
    except OSError as exc:
        raise PackageManifestError(f"{path}: {exc}") from exc

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise PackageManifestError(f"{path}: invalid JSON ({exc.msg} at line {exc.lineno})") from exc

    try:
        return PackageManifest.model_validate(data)
    except ValidationError as exc:
        raise PackageManifestError(f"{path}: no usable version field") from exc


def read_package_version(path: Path) -> str:
    """Return the `version` declared in the package.json at `path`."""

    return load_package_manifest(path).version

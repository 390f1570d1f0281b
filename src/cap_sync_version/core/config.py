"""Core configuration.

Centralizes the target file locations and the build-version policy
(pydantic-settings) so the CLI and the orchestrator read them the same way.
Defaults follow the layout of a Capacitor project.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from cap_sync_version.core.domain.platform import BuildVersionPolicy


class AppSettings(BaseSettings):
    """Application settings, overridable with `CAP_SYNC_VERSION_*` env vars."""

    model_config = SettingsConfigDict(
        env_prefix="CAP_SYNC_VERSION_",
        extra="ignore",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    project_root: Path = Field(
        default=Path("."),
        description="Directory all relative paths are resolved against.",
    )
    package_json_path: Path = Field(
        default=Path("package.json"),
        description="Manifest holding the source-of-truth version.",
    )
    android_gradle_path: Path = Field(
        default=Path("android/app/build.gradle"),
        description="Android app module build descriptor.",
    )
    ios_plist_path: Path = Field(
        default=Path("ios/App/App/Info.plist"),
        description="Default iOS Info.plist.",
    )
    ios_project_path: Path = Field(
        default=Path("ios/App/App.xcodeproj/project.pbxproj"),
        description="iOS project build-configuration descriptor.",
    )
    ios_build_version_policy: BuildVersionPolicy = Field(
        default=BuildVersionPolicy.MIRROR,
        description="How CFBundleVersion/CURRENT_PROJECT_VERSION is derived.",
    )

    def resolve(self, path: Path | str) -> Path:
        """Resolve `path` against `project_root` unless it is already absolute."""

        candidate = Path(path)
        if candidate.is_absolute():
            return candidate
        return self.project_root / candidate

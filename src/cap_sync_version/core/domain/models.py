"""Domain models (Pydantic v2).

These models describe *what* is synced, not *how* files are found or
rewritten. Everything here lives for a single sync run.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cap_sync_version.core.domain.platform import FileFormat, Platform

_IDENTIFIER_CHARS = frozenset("0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ-")


class SemanticVersion(BaseModel):
    """An immutable parsed semantic version."""

    model_config = ConfigDict(frozen=True)

    major: int = Field(..., ge=0)
    minor: int = Field(..., ge=0)
    patch: int = Field(..., ge=0)
    prerelease: tuple[str, ...] = Field(
        default=(),
        description="Dot-separated prerelease identifiers, e.g. ('beta', '1').",
    )
    build: tuple[str, ...] = Field(
        default=(),
        description="Dot-separated build metadata identifiers.",
    )

    @field_validator("prerelease", "build")
    @classmethod
    def _check_identifiers(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        for ident in value:
            if not ident or not set(ident) <= _IDENTIFIER_CHARS:
                raise ValueError(f"invalid identifier {ident!r}")
        return value

    @property
    def release(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    @property
    def release_string(self) -> str:
        """`major.minor.patch` without prerelease or build metadata."""

        return f"{self.major}.{self.minor}.{self.patch}"

    def __str__(self) -> str:
        text = self.release_string
        if self.prerelease:
            text += "-" + ".".join(self.prerelease)
        if self.build:
            text += "+" + ".".join(self.build)
        return text


class AndroidVersionDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    version_name: str = Field(..., min_length=1)
    version_code: int = Field(..., ge=1)


class IosVersionDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    marketing_version: str = Field(..., min_length=1)
    build_version: str = Field(..., min_length=1)


class TargetFile(BaseModel):
    """A file the patchers operate on. Holds no open handle."""

    model_config = ConfigDict(frozen=True)

    path: Path
    format: FileFormat


class PatchResult(BaseModel):
    """Outcome of patching one file.

    `values` maps each field name to the value now in the file. On failure
    `error` holds a human readable message and the flags describe how far the
    patch got.
    """

    path: Path
    format: FileFormat
    file_found: bool = True
    field_found: bool = False
    changed: bool = False
    values: dict[str, str] = Field(default_factory=dict)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class PlatformReport(BaseModel):
    """Per-platform outcome: one result per file plus platform-wide failures."""

    platform: Platform
    results: list[PatchResult] = Field(default_factory=list)
    error: str | None = Field(
        default=None,
        description="Failure that prevented any file of this platform from being patched.",
    )

    @property
    def ok(self) -> bool:
        return self.error is None and all(r.ok for r in self.results)

    @property
    def changed(self) -> bool:
        return any(r.changed for r in self.results)


class SyncReport(BaseModel):
    version: str
    platforms: list[PlatformReport] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(p.ok for p in self.platforms)

    @property
    def changed(self) -> bool:
        return any(p.changed for p in self.platforms)

    @property
    def results(self) -> list[PatchResult]:
        return [r for p in self.platforms for r in p.results]

    def for_platform(self, platform: Platform) -> PlatformReport | None:
        for report in self.platforms:
            if report.platform is platform:
                return report
        return None

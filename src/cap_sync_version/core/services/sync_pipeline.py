"""Version sync orchestration.

The CLI delegates the whole run to `sync`: parse the version once, derive the
platform descriptors, then patch every target file. Side-effects other than
the file writes (printing, progress) stay in the caller through
`SyncHooks`.

Failure policy:
- An invalid version raises before any file is touched.
- A derivation failure is recorded on its platform only.
- A file failure is recorded on that file's `PatchResult`; sibling files and
  the other platform are still attempted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Sequence, TypeVar

from cap_sync_version.adapters.patchers import (
    patch_gradle,
    patch_plist,
    patch_project_descriptor,
)
from cap_sync_version.core.config import AppSettings
from cap_sync_version.core.derivers import derive_android, derive_ios
from cap_sync_version.core.domain.models import (
    PatchResult,
    PlatformReport,
    SemanticVersion,
    SyncReport,
    TargetFile,
)
from cap_sync_version.core.domain.platform import FileFormat, Platform
from cap_sync_version.core.errors import (
    CapSyncVersionError,
    PatchError,
    TargetFileNotFoundError,
)
from cap_sync_version.core.interfaces.patcher import FilePatcher
from cap_sync_version.core.semver import parse_version

logger = logging.getLogger(__name__)

D = TypeVar("D")


@dataclass
class SyncOptions:
    """Platform selection and extra plist files for one run."""

    android: bool = True
    ios: bool = True
    extra_plists: Sequence[str] = field(default_factory=list)


@dataclass
class SyncHooks:
    """Optional callbacks for UI layers."""

    platform_start: Callable[[Platform], None] | None = None
    file_done: Callable[[PatchResult], None] | None = None


def normalize_plist_paths(paths: Iterable[str]) -> list[str]:
    """Trim entries, drop blanks and duplicates (first occurrence wins)."""

    seen: set[str] = set()
    out: list[str] = []
    for raw in paths:
        value = raw.strip()
        if not value or value in seen:
            continue
        seen.add(value)
        out.append(value)
    return out


def android_targets(settings: AppSettings) -> list[TargetFile]:
    return [TargetFile(path=settings.resolve(settings.android_gradle_path), format=FileFormat.GRADLE)]


def ios_targets(settings: AppSettings, extra_plists: Iterable[str] = ()) -> list[TargetFile]:
    """Default Info.plist, then extra plists in the given order, then the project descriptor."""

    targets = [TargetFile(path=settings.resolve(settings.ios_plist_path), format=FileFormat.PLIST)]
    known = {targets[0].path}
    for extra in normalize_plist_paths(extra_plists):
        path = settings.resolve(extra)
        if path in known:
            continue
        known.add(path)
        targets.append(TargetFile(path=path, format=FileFormat.PLIST))
    targets.append(TargetFile(path=settings.resolve(settings.ios_project_path), format=FileFormat.PBXPROJ))
    return targets


def _failed_result(target: TargetFile, exc: Exception) -> PatchResult:
    return PatchResult(
        path=target.path,
        format=target.format,
        file_found=not isinstance(exc, TargetFileNotFoundError),
        field_found=False,
        changed=False,
        error=str(exc),
    )


def _apply(target: TargetFile, patcher: FilePatcher[D], descriptor: D, hooks: SyncHooks) -> PatchResult:
    try:
        result = patcher(target.path, descriptor)
    except PatchError as exc:
        logger.warning("%s", exc)
        result = _failed_result(target, exc)
    except OSError as exc:
        logger.warning("%s: %s", target.path, exc)
        result = _failed_result(target, exc)
    if hooks.file_done:
        hooks.file_done(result)
    return result


def sync_android(version: SemanticVersion, settings: AppSettings, hooks: SyncHooks | None = None) -> PlatformReport:
    hooks = hooks or SyncHooks()
    report = PlatformReport(platform=Platform.ANDROID)
    if hooks.platform_start:
        hooks.platform_start(Platform.ANDROID)

    try:
        descriptor = derive_android(version)
    except CapSyncVersionError as exc:
        logger.error("Android sync skipped: %s", exc)
        report.error = str(exc)
        return report

    logger.info("Android: versionName=%s versionCode=%d", descriptor.version_name, descriptor.version_code)
    for target in android_targets(settings):
        report.results.append(_apply(target, patch_gradle, descriptor, hooks))
    return report


def sync_ios(
    version: SemanticVersion,
    settings: AppSettings,
    extra_plists: Iterable[str] = (),
    hooks: SyncHooks | None = None,
) -> PlatformReport:
    hooks = hooks or SyncHooks()
    report = PlatformReport(platform=Platform.IOS)
    if hooks.platform_start:
        hooks.platform_start(Platform.IOS)

    try:
        descriptor = derive_ios(version, settings.ios_build_version_policy)
    except CapSyncVersionError as exc:
        logger.error("iOS sync skipped: %s", exc)
        report.error = str(exc)
        return report

    logger.info(
        "iOS: marketing version=%s build version=%s",
        descriptor.marketing_version,
        descriptor.build_version,
    )
    for target in ios_targets(settings, extra_plists):
        patcher = patch_plist if target.format is FileFormat.PLIST else patch_project_descriptor
        report.results.append(_apply(target, patcher, descriptor, hooks))
    return report


def sync(
    version: str,
    options: SyncOptions | None = None,
    *,
    settings: AppSettings | None = None,
    hooks: SyncHooks | None = None,
) -> SyncReport:
    """Sync `version` into the selected platforms.

    Raises `InvalidVersionError` when `version` is not a semantic version;
    every other failure ends up in the returned report.
    """

    options = options or SyncOptions()
    settings = settings or AppSettings()
    hooks = hooks or SyncHooks()

    parsed = parse_version(version)
    report = SyncReport(version=str(parsed))

    if options.android:
        report.platforms.append(sync_android(parsed, settings, hooks))
    if options.ios:
        report.platforms.append(sync_ios(parsed, settings, options.extra_plists, hooks))
    return report

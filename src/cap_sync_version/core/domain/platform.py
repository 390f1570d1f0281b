"""Platform and file-format enums shared by the core, adapters and CLI."""

from __future__ import annotations

from enum import Enum


class Platform(str, Enum):
    """Native platforms a package version can be synced into."""

    ANDROID = "android"
    IOS = "ios"

    def label(self) -> str:
        """Human readable label for tables and logging."""

        return "Android" if self is Platform.ANDROID else "iOS"


class FileFormat(str, Enum):
    """Formats of the target files the patchers understand."""

    GRADLE = "gradle"
    PLIST = "plist"
    PBXPROJ = "pbxproj"


class BuildVersionPolicy(str, Enum):
    """How the iOS build version is derived from the semantic version.

    - MIRROR: same string as the marketing version ("1.2.3").
    - VERSION_CODE: the Android version code as a monotonic counter ("1002003").
    """

    MIRROR = "mirror"
    VERSION_CODE = "version-code"

"""Platform version derivation.

Both derivers work from the release triple only. Prerelease and build
metadata are dropped: folding them into an integer code produced colliding
or non-monotonic codes across releases.
"""

from __future__ import annotations

from cap_sync_version.core.domain.models import (
    AndroidVersionDescriptor,
    IosVersionDescriptor,
    SemanticVersion,
)
from cap_sync_version.core.domain.platform import BuildVersionPolicy
from cap_sync_version.core.errors import VersionCodeOverflowError

# versionCode = major * MAJOR_WEIGHT + minor * MINOR_WEIGHT + patch
MINOR_WEIGHT = 1_000
MAJOR_WEIGHT = 1_000_000

# Largest versionCode accepted by Google Play.
MAX_VERSION_CODE = 2_100_000_000


def android_version_code(version: SemanticVersion) -> int:
    """Compute the Android version code for `version`.

    For any two versions with release triples a < b, the codes satisfy
    code(a) < code(b) as long as minor and patch stay below MINOR_WEIGHT.
    """

    if version.patch >= MINOR_WEIGHT:
        raise VersionCodeOverflowError(
            f"patch {version.patch} does not fit in a version code (must be < {MINOR_WEIGHT})"
        )
    if version.minor >= MAJOR_WEIGHT // MINOR_WEIGHT:
        raise VersionCodeOverflowError(
            f"minor {version.minor} does not fit in a version code "
            f"(must be < {MAJOR_WEIGHT // MINOR_WEIGHT})"
        )

    code = version.major * MAJOR_WEIGHT + version.minor * MINOR_WEIGHT + version.patch
    if code > MAX_VERSION_CODE:
        raise VersionCodeOverflowError(
            f"version code {code} for {version.release_string} exceeds the maximum {MAX_VERSION_CODE}"
        )
    if code < 1:
        raise VersionCodeOverflowError(
            f"version {version.release_string} yields version code {code}; Android requires a positive code"
        )
    return code


def derive_android(version: SemanticVersion) -> AndroidVersionDescriptor:
    return AndroidVersionDescriptor(
        version_name=version.release_string,
        version_code=android_version_code(version),
    )


def derive_ios(
    version: SemanticVersion,
    policy: BuildVersionPolicy = BuildVersionPolicy.MIRROR,
) -> IosVersionDescriptor:
    """Derive the iOS marketing and build versions.

    `policy` is the single place where the build version may diverge from the
    marketing version. With `VERSION_CODE` the same range limits as Android
    apply.
    """

    marketing = version.release_string
    if policy is BuildVersionPolicy.VERSION_CODE:
        build = str(android_version_code(version))
    else:
        build = marketing
    return IosVersionDescriptor(marketing_version=marketing, build_version=build)

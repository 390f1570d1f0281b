"""Semantic version parsing (SemVer 2.0.0)."""

from __future__ import annotations

import re

from pydantic import ValidationError

from cap_sync_version.core.domain.models import SemanticVersion
from cap_sync_version.core.errors import InvalidVersionError

# Grammar from semver.org: no leading zeros in numeric parts or numeric
# prerelease identifiers.
_NUM = r"0|[1-9]\d*"
_PRE_IDENT = r"(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
_BUILD_IDENT = r"[0-9a-zA-Z-]+"

_SEMVER_RE = re.compile(
    rf"^(?P<major>{_NUM})\.(?P<minor>{_NUM})\.(?P<patch>{_NUM})"
    rf"(?:-(?P<prerelease>{_PRE_IDENT}(?:\.{_PRE_IDENT})*))?"
    rf"(?:\+(?P<build>{_BUILD_IDENT}(?:\.{_BUILD_IDENT})*))?$"
)


def parse_version(raw: str) -> SemanticVersion:
    """Parse `raw` into a `SemanticVersion`.

    Surrounding whitespace is ignored. Raises `InvalidVersionError` for
    anything outside the SemVer grammar (including "v"-prefixed strings and
    partial versions such as "1.2").
    """

    if not isinstance(raw, str):
        raise InvalidVersionError(repr(raw), "not a string")

    text = raw.strip()
    if not text:
        raise InvalidVersionError(raw, "empty")

    match = _SEMVER_RE.match(text)
    if match is None:
        raise InvalidVersionError(raw, "expected MAJOR.MINOR.PATCH[-PRERELEASE][+BUILD]")

    prerelease = match.group("prerelease")
    build = match.group("build")
    try:
        return SemanticVersion(
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(match.group("patch")),
            prerelease=tuple(prerelease.split(".")) if prerelease else (),
            build=tuple(build.split(".")) if build else (),
        )
    except ValidationError as exc:  # pragma: no cover - the regex already enforces this
        raise InvalidVersionError(raw, str(exc)) from exc

"""Xcode project.pbxproj patcher.

The same build setting is usually repeated per build configuration and per
target. Every `MARKETING_VERSION` and `CURRENT_PROJECT_VERSION` assignment in
the file is rewritten, including quoted keys and SDK-conditional variants
such as `"MARKETING_VERSION[sdk=iphoneos*][arch=arm64]"`. Comments and string
literals are consumed by the scanner first, so text inside them is never
touched.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from cap_sync_version.adapters.text_file import read_text, write_text
from cap_sync_version.core.domain.models import IosVersionDescriptor, PatchResult
from cap_sync_version.core.domain.platform import FileFormat
from cap_sync_version.core.errors import FieldNotFoundError

logger = logging.getLogger(__name__)

MARKETING_VERSION = "MARKETING_VERSION"
CURRENT_PROJECT_VERSION = "CURRENT_PROJECT_VERSION"

_SETTINGS = f"{MARKETING_VERSION}|{CURRENT_PROJECT_VERSION}"

# Alternatives are tried in order at each position: an assignment wins over a
# bare string literal, which lets quoted keys (plain or conditional) match.
_TOKEN_RE = re.compile(
    rf"""
    (?P<assign>
        (?:(?<![\w$./])(?P<bare>{_SETTINGS})|"(?P<cond>{_SETTINGS})(?:\[[^"\]]*\])*")
        (?P<sep>\s*=\s*)
        (?P<value>"(?:[^"\\]|\\.)*"|[^;\s"]+)
        \s*;
    )
    |(?P<comment>/\*.*?\*/|//[^\n]*)
    |(?P<string>"(?:[^"\\]|\\.)*")
    """,
    re.DOTALL | re.VERBOSE,
)

# Characters allowed in an unquoted OpenStep plist string.
_UNQUOTED_RE = re.compile(r"^[A-Za-z0-9_$/:.-]+$")


def _unquote(token: str) -> str:
    if token.startswith('"') and token.endswith('"') and len(token) >= 2:
        return re.sub(r"\\(.)", r"\1", token[1:-1])
    return token


def _format_value(value: str, quoted: bool) -> str:
    if not quoted and _UNQUOTED_RE.match(value):
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def patch_project_descriptor(path: Path, descriptor: IosVersionDescriptor) -> PatchResult:
    """Set every MARKETING_VERSION / CURRENT_PROJECT_VERSION occurrence."""

    path = Path(path)
    text = read_text(path)

    new_values = {
        MARKETING_VERSION: descriptor.marketing_version,
        CURRENT_PROJECT_VERSION: descriptor.build_version,
    }

    pieces: list[str] = []
    last = 0
    found: dict[str, int] = {}
    for match in _TOKEN_RE.finditer(text):
        if match.group("assign") is None:
            continue
        setting = match.group("bare") or match.group("cond")
        found[setting] = found.get(setting, 0) + 1

        token = match.group("value")
        new_value = new_values[setting]
        if _unquote(token) == new_value:
            continue
        pieces.append(text[last : match.start("value")])
        pieces.append(_format_value(new_value, quoted=token.startswith('"')))
        last = match.end("value")

    if not found:
        raise FieldNotFoundError(path, list(new_values))

    pieces.append(text[last:])
    new_text = "".join(pieces)

    for setting, count in found.items():
        logger.debug("%s: %d occurrence(s) of %s", path, count, setting)

    changed = new_text != text
    if changed:
        write_text(path, new_text)

    return PatchResult(
        path=path,
        format=FileFormat.PBXPROJ,
        file_found=True,
        field_found=True,
        changed=changed,
        values={setting: new_values[setting] for setting in new_values if setting in found},
    )

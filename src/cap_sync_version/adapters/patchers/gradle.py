"""Android build.gradle / build.gradle.kts patcher.

Scope:
- Only the `defaultConfig { ... }` block of the app module is considered.
- Both Groovy (`versionCode 3`) and Kotlin DSL (`versionCode = 3`) forms are
  recognized, with single or double quotes for `versionName`.
- Comments and string literals are masked before searching, so commented-out
  declarations and braces inside strings are ignored.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from cap_sync_version.adapters.text_file import read_text, write_text
from cap_sync_version.core.domain.models import AndroidVersionDescriptor, PatchResult
from cap_sync_version.core.domain.platform import FileFormat
from cap_sync_version.core.errors import FieldNotFoundError, MalformedGradleError

logger = logging.getLogger(__name__)

VERSION_CODE = "versionCode"
VERSION_NAME = "versionName"

_BLOCK_RE = re.compile(r"\bdefaultConfig\s*\{")
_KEY_RE = {
    VERSION_CODE: re.compile(r"\bversionCode\b"),
    VERSION_NAME: re.compile(r"\bversionName\b"),
}
_CODE_VALUE_RE = re.compile(r"(?:[ \t]*=[ \t]*|[ \t]+)(\d+)\b")
_NAME_VALUE_RE = re.compile(r"""(?:[ \t]*=[ \t]*|[ \t]+)(["'])((?:\\.|(?!\1)[^\\\n])*)\1""")


def _mask_comments_and_strings(text: str) -> str:
    """Return `text` with comments and string literals blanked out.

    Offsets are unchanged (every masked character becomes a space, newlines
    are kept) so positions found in the mask map straight back to `text`.
    """

    out = list(text)
    i = 0
    n = len(text)

    def blank(start: int, end: int) -> None:
        for k in range(start, end):
            if out[k] != "\n":
                out[k] = " "

    while i < n:
        ch = text[i]
        two = text[i : i + 2]
        if two == "//":
            end = text.find("\n", i)
            end = n if end == -1 else end
            blank(i, end)
            i = end
        elif two == "/*":
            end = text.find("*/", i + 2)
            end = n if end == -1 else end + 2
            blank(i, end)
            i = end
        elif text.startswith('"""', i) or text.startswith("'''", i):
            quote = text[i : i + 3]
            end = text.find(quote, i + 3)
            end = n if end == -1 else end + 3
            blank(i, end)
            i = end
        elif ch in ("'", '"'):
            j = i + 1
            while j < n and text[j] != ch and text[j] != "\n":
                j += 2 if text[j] == "\\" else 1
            end = min(j + 1, n)
            blank(i, end)
            i = end
        else:
            i += 1
    return "".join(out)


def _find_default_config(path: Path, masked: str) -> tuple[int, int]:
    """Return the (start, end) offsets of the defaultConfig block body."""

    match = _BLOCK_RE.search(masked)
    if match is None:
        raise FieldNotFoundError(path, ["defaultConfig"])

    depth = 0
    for pos in range(match.end() - 1, len(masked)):
        ch = masked[pos]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return match.end(), pos
    raise MalformedGradleError(path, "unbalanced braces in defaultConfig block")


def patch_gradle(path: Path, descriptor: AndroidVersionDescriptor) -> PatchResult:
    """Update `versionCode` and `versionName` inside `defaultConfig`."""

    path = Path(path)
    text = read_text(path)
    masked = _mask_comments_and_strings(text)
    body_start, body_end = _find_default_config(path, masked)

    new_values = {
        VERSION_CODE: str(descriptor.version_code),
        VERSION_NAME: descriptor.version_name,
    }
    value_patterns = {VERSION_CODE: _CODE_VALUE_RE, VERSION_NAME: _NAME_VALUE_RE}

    # (value start, value end, new value), applied back to front
    edits: list[tuple[int, int, str]] = []
    missing: list[str] = []
    for field, key_re in _KEY_RE.items():
        value_match = None
        for key_match in key_re.finditer(masked, body_start, body_end):
            value_match = value_patterns[field].match(text, key_match.end(), body_end)
            if value_match is not None:
                break
        if value_match is None:
            missing.append(field)
            continue
        group = 1 if field == VERSION_CODE else 2
        edits.append((value_match.start(group), value_match.end(group), new_values[field]))

    if missing:
        raise FieldNotFoundError(path, missing)

    new_text = text
    for start, end, value in sorted(edits, reverse=True):
        new_text = new_text[:start] + value + new_text[end:]

    changed = new_text != text
    if changed:
        write_text(path, new_text)
    else:
        logger.debug("%s already at versionName %s", path, descriptor.version_name)

    return PatchResult(
        path=path,
        format=FileFormat.GRADLE,
        file_found=True,
        field_found=True,
        changed=changed,
        values=new_values,
    )

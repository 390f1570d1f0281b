"""iOS property list patcher (Info.plist and caller-supplied plists).

The file is validated with `plistlib`, but XML plists are never
re-serialized: the `<string>` values of the two version keys in the root
dict are replaced in the raw text, so the XML declaration, DOCTYPE,
comments, key order and indentation stay exactly as authored. Binary plists
carry no formatting and are rewritten through `plistlib`.
"""

from __future__ import annotations

import html
import logging
import plistlib
import re
from pathlib import Path
from xml.parsers.expat import ExpatError
from xml.sax.saxutils import escape

from cap_sync_version.adapters.text_file import read_bytes, write_text
from cap_sync_version.core.domain.models import IosVersionDescriptor, PatchResult
from cap_sync_version.core.domain.platform import FileFormat
from cap_sync_version.core.errors import FieldNotFoundError, MalformedPlistError

logger = logging.getLogger(__name__)

MARKETING_VERSION_KEY = "CFBundleShortVersionString"
BUILD_VERSION_KEY = "CFBundleVersion"

_BINARY_MAGIC = b"bplist00"

# $(MARKETING_VERSION), ${CURRENT_PROJECT_VERSION}, $(VAR:default) ...
_BUILD_SETTING_REF_RE = re.compile(r"^\$[({][A-Za-z_][A-Za-z0-9_]*(?::[^)}]*)?[)}]$")

_TOKEN_RE = re.compile(
    r"<!--.*?-->"
    r"|<!\[CDATA\[.*?\]\]>"
    r"|<\?.*?\?>"
    r"|<!DOCTYPE[^>]*>"
    r"|<(/?)([A-Za-z_][\w.:-]*)[^>]*?(/?)>",
    re.DOTALL,
)

_ROOT = ["plist", "dict"]


def is_build_setting_reference(value: str) -> bool:
    """True for values such as `$(MARKETING_VERSION)` resolved by Xcode at build time."""

    return bool(_BUILD_SETTING_REF_RE.match(value.strip()))


def _load(path: Path, data: bytes) -> dict:
    try:
        root = plistlib.loads(data)
    except (plistlib.InvalidFileException, ExpatError, ValueError, TypeError, OverflowError) as exc:
        raise MalformedPlistError(path, f"not a well-formed property list ({exc})") from exc
    if not isinstance(root, dict):
        raise MalformedPlistError(path, f"root element is {type(root).__name__}, expected dict")
    return root


def _root_string_spans(path: Path, text: str, keys: set[str]) -> dict[str, tuple[int, int, bool]]:
    """Locate the `<string>` value of each key in `keys` within the root dict.

    Returns key -> (start, end, empty_element). For `<string>v</string>` the
    span covers `v`; for `<string/>` it covers the whole element.
    """

    spans: dict[str, tuple[int, int, bool]] = {}
    stack: list[str] = []
    pending_key: str | None = None
    key_start = 0
    string_for: str | None = None
    string_start = 0

    for match in _TOKEN_RE.finditer(text):
        name = match.group(2)
        if name is None:
            continue
        closing = match.group(1) == "/"
        self_closing = match.group(3) == "/"

        if closing:
            if not stack or stack[-1] != name:
                raise MalformedPlistError(path, f"unexpected </{name}>")
            stack.pop()
            if stack == _ROOT:
                if name == "key":
                    pending_key = html.unescape(text[key_start : match.start()])
                elif name == "string" and string_for is not None:
                    spans.setdefault(string_for, (string_start, match.start(), False))
                    string_for = None
            continue

        if stack == _ROOT:
            if name == "key":
                key_start = match.end()
                if self_closing:
                    pending_key = ""
            else:
                if pending_key in keys and name == "string":
                    if self_closing:
                        spans.setdefault(pending_key, (match.start(), match.end(), True))
                    else:
                        string_for = pending_key
                        string_start = match.end()
                pending_key = None

        if not self_closing:
            stack.append(name)

    return spans


def patch_plist(path: Path, descriptor: IosVersionDescriptor) -> PatchResult:
    """Set CFBundleShortVersionString and CFBundleVersion in one plist file."""

    path = Path(path)
    data = read_bytes(path)
    root = _load(path, data)

    wanted = {
        MARKETING_VERSION_KEY: descriptor.marketing_version,
        BUILD_VERSION_KEY: descriptor.build_version,
    }

    missing = [key for key in wanted if key not in root]
    if missing:
        raise FieldNotFoundError(path, missing)
    for key in wanted:
        if not isinstance(root[key], str):
            raise MalformedPlistError(path, f"{key} is {type(root[key]).__name__}, expected string")

    values: dict[str, str] = {}
    updates: dict[str, str] = {}
    for key, new_value in wanted.items():
        current = root[key]
        if is_build_setting_reference(current):
            logger.info("%s: %s references build setting %s, leaving it", path, key, current)
            values[key] = current
        else:
            values[key] = new_value
            if current != new_value:
                updates[key] = new_value

    if updates:
        if data.startswith(_BINARY_MAGIC):
            root.update(updates)
            logger.info("Writing %s (binary plist)", path)
            path.write_bytes(plistlib.dumps(root, fmt=plistlib.FMT_BINARY, sort_keys=False))
        else:
            try:
                text = data.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise MalformedPlistError(path, f"not valid UTF-8 ({exc.reason})") from exc
            spans = _root_string_spans(path, text, set(updates))
            unlocated = [key for key in updates if key not in spans]
            if unlocated:
                raise MalformedPlistError(path, f"could not locate value of {', '.join(unlocated)}")
            new_text = text
            for key, (start, end, empty) in sorted(spans.items(), key=lambda item: item[1][0], reverse=True):
                escaped = escape(updates[key])
                replacement = f"<string>{escaped}</string>" if empty else escaped
                new_text = new_text[:start] + replacement + new_text[end:]
            write_text(path, new_text)

    return PatchResult(
        path=path,
        format=FileFormat.PLIST,
        file_found=True,
        field_found=True,
        changed=bool(updates),
        values=values,
    )

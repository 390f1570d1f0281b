"""Byte-preserving text file access for the patchers.

Files are decoded as UTF-8 from raw bytes so line endings and a leading BOM
survive the round trip exactly.
"""

from __future__ import annotations

import logging
from pathlib import Path

from cap_sync_version.core.errors import MalformedFileError, TargetFileNotFoundError

logger = logging.getLogger(__name__)


def read_bytes(path: Path) -> bytes:
    if not path.is_file():
        raise TargetFileNotFoundError(path)
    logger.debug("Reading %s", path)
    return path.read_bytes()


def read_text(path: Path) -> str:
    data = read_bytes(path)
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedFileError(path, f"not valid UTF-8 ({exc.reason})") from exc


def write_text(path: Path, text: str) -> None:
    logger.info("Writing %s", path)
    path.write_bytes(text.encode("utf-8"))

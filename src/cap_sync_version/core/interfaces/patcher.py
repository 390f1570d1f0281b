"""Contract for file patchers.

A patcher is a plain callable: it owns the read-modify-write cycle of one
file for the duration of a call and keeps no state between calls.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, TypeVar, runtime_checkable

from cap_sync_version.core.domain.models import PatchResult

D_contra = TypeVar("D_contra", contravariant=True)


@runtime_checkable
class FilePatcher(Protocol[D_contra]):
    """Rewrite the version fields of one file.

    Rules:
    - Only existing fields are updated; nothing is inserted.
    - The file is written only when a value actually changes.
    - Failures are raised as `PatchError` subclasses.
    """

    def __call__(self, path: Path, descriptor: D_contra) -> PatchResult:
        ...

"""Shared fixtures: a throwaway copy of a small Capacitor project."""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from cap_sync_version.core.config import AppSettings

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Copy of tests/fixtures/capacitor, safe to modify."""

    root = tmp_path / "project"
    shutil.copytree(FIXTURES_DIR / "capacitor", root)
    return root


@pytest.fixture
def settings(project_root: Path) -> AppSettings:
    return AppSettings(project_root=project_root)


@pytest.fixture
def gradle_path(project_root: Path) -> Path:
    return project_root / "android" / "app" / "build.gradle"


@pytest.fixture
def plist_path(project_root: Path) -> Path:
    return project_root / "ios" / "App" / "App" / "Info.plist"


@pytest.fixture
def pbxproj_path(project_root: Path) -> Path:
    return project_root / "ios" / "App" / "App.xcodeproj" / "project.pbxproj"


def changed_lines(before: str, after: str) -> list[tuple[str, str]]:
    """Pairs of differing lines; both texts must have the same line count."""

    old_lines = before.splitlines(keepends=True)
    new_lines = after.splitlines(keepends=True)
    assert len(old_lines) == len(new_lines)
    return [(a, b) for a, b in zip(old_lines, new_lines) if a != b]

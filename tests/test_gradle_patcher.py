from __future__ import annotations

from pathlib import Path

import pytest

from cap_sync_version.adapters.patchers.gradle import patch_gradle
from cap_sync_version.core.domain.models import AndroidVersionDescriptor
from cap_sync_version.core.domain.platform import FileFormat
from cap_sync_version.core.errors import (
    FieldNotFoundError,
    MalformedGradleError,
    TargetFileNotFoundError,
)
from conftest import changed_lines

DESCRIPTOR = AndroidVersionDescriptor(version_name="1.2.3", version_code=1_002_003)


def test_updates_only_value_tokens(gradle_path: Path):
    before = gradle_path.read_text(encoding="utf-8")

    result = patch_gradle(gradle_path, DESCRIPTOR)

    after = gradle_path.read_text(encoding="utf-8")
    assert result.format is FileFormat.GRADLE
    assert result.field_found and result.changed and result.ok
    assert result.values == {"versionCode": "1002003", "versionName": "1.2.3"}
    assert changed_lines(before, after) == [
        ("        versionCode 1\n", "        versionCode 1002003\n"),
        ('        versionName "1.0"\n', '        versionName "1.2.3"\n'),
    ]


def test_commented_declaration_is_ignored(gradle_path: Path):
    patch_gradle(gradle_path, DESCRIPTOR)
    assert "// versionCode 999" in gradle_path.read_text(encoding="utf-8")


def test_second_run_is_a_noop(gradle_path: Path):
    patch_gradle(gradle_path, DESCRIPTOR)
    first = gradle_path.read_bytes()
    mtime = gradle_path.stat().st_mtime_ns

    result = patch_gradle(gradle_path, DESCRIPTOR)

    assert result.changed is False
    assert result.field_found is True
    assert gradle_path.read_bytes() == first
    assert gradle_path.stat().st_mtime_ns == mtime


def test_kotlin_dsl(tmp_path: Path):
    path = tmp_path / "build.gradle.kts"
    path.write_text(
        "android {\n"
        "    defaultConfig {\n"
        '        applicationId = "com.example.kts"\n'
        "        versionCode = 7\n"
        '        versionName = "0.7.0"\n'
        "    }\n"
        "}\n",
        encoding="utf-8",
    )

    result = patch_gradle(path, DESCRIPTOR)

    assert result.changed
    text = path.read_text(encoding="utf-8")
    assert "versionCode = 1002003\n" in text
    assert 'versionName = "1.2.3"\n' in text
    assert 'applicationId = "com.example.kts"' in text


def test_single_quotes_and_crlf_are_preserved(tmp_path: Path):
    path = tmp_path / "build.gradle"
    path.write_bytes(
        b"android {\r\n  defaultConfig {\r\n    versionCode 3\r\n    versionName '0.3'\r\n  }\r\n}\r\n"
    )

    patch_gradle(path, DESCRIPTOR)

    assert path.read_bytes() == (
        b"android {\r\n  defaultConfig {\r\n    versionCode 1002003\r\n    versionName '1.2.3'\r\n  }\r\n}\r\n"
    )


def test_declarations_outside_default_config_are_untouched(tmp_path: Path):
    path = tmp_path / "build.gradle"
    path.write_text(
        "android {\n"
        "    defaultConfig {\n"
        '        resValue "string", "label", "{braces}"\n'
        "        versionCode 3\n"
        '        versionName "0.3"\n'
        "    }\n"
        "    productFlavors {\n"
        "        beta {\n"
        "            versionCode 42\n"
        '            versionName "beta"\n'
        "        }\n"
        "    }\n"
        "}\n",
        encoding="utf-8",
    )

    patch_gradle(path, DESCRIPTOR)

    text = path.read_text(encoding="utf-8")
    assert "            versionCode 42\n" in text
    assert '            versionName "beta"\n' in text
    assert "        versionCode 1002003\n" in text


def test_missing_version_name_is_not_inserted(tmp_path: Path):
    path = tmp_path / "build.gradle"
    original = "android {\n    defaultConfig {\n        versionCode 3\n    }\n}\n"
    path.write_text(original, encoding="utf-8")

    with pytest.raises(FieldNotFoundError) as excinfo:
        patch_gradle(path, DESCRIPTOR)

    assert excinfo.value.fields == ("versionName",)
    assert path.read_text(encoding="utf-8") == original


def test_missing_default_config(tmp_path: Path):
    path = tmp_path / "build.gradle"
    path.write_text('versionCode 3\nversionName "0.3"\n', encoding="utf-8")

    with pytest.raises(FieldNotFoundError) as excinfo:
        patch_gradle(path, DESCRIPTOR)

    assert excinfo.value.fields == ("defaultConfig",)


def test_unbalanced_block(tmp_path: Path):
    path = tmp_path / "build.gradle"
    path.write_text("android {\n    defaultConfig {\n        versionCode 3\n", encoding="utf-8")

    with pytest.raises(MalformedGradleError):
        patch_gradle(path, DESCRIPTOR)


def test_missing_file(tmp_path: Path):
    with pytest.raises(TargetFileNotFoundError):
        patch_gradle(tmp_path / "nope.gradle", DESCRIPTOR)

from __future__ import annotations

from pathlib import Path

import pytest

from cap_sync_version.adapters.patchers.pbxproj import patch_project_descriptor
from cap_sync_version.core.domain.models import IosVersionDescriptor
from cap_sync_version.core.domain.platform import FileFormat
from cap_sync_version.core.errors import FieldNotFoundError
from conftest import changed_lines

DESCRIPTOR = IosVersionDescriptor(marketing_version="1.2.3", build_version="1.2.3")


def test_updates_every_occurrence(pbxproj_path: Path):
    before = pbxproj_path.read_text(encoding="utf-8")

    result = patch_project_descriptor(pbxproj_path, DESCRIPTOR)

    after = pbxproj_path.read_text(encoding="utf-8")
    assert result.format is FileFormat.PBXPROJ
    assert result.ok and result.changed and result.field_found
    assert result.values == {"MARKETING_VERSION": "1.2.3", "CURRENT_PROJECT_VERSION": "1.2.3"}
    assert after.count("MARKETING_VERSION = 1.2.3;") == 2
    assert after.count("CURRENT_PROJECT_VERSION = 1.2.3;") == 2
    assert "MARKETING_VERSION = 1.0;" not in after
    assert sorted(changed_lines(before, after)) == sorted(
        [
            ("\t\t\t\tCURRENT_PROJECT_VERSION = 1;\n", "\t\t\t\tCURRENT_PROJECT_VERSION = 1.2.3;\n"),
            ("\t\t\t\tMARKETING_VERSION = 1.0;\n", "\t\t\t\tMARKETING_VERSION = 1.2.3;\n"),
        ]
        * 2
    )


def test_strings_and_comments_are_untouched(pbxproj_path: Path):
    patch_project_descriptor(pbxproj_path, DESCRIPTOR)

    text = pbxproj_path.read_text(encoding="utf-8")
    assert 'shellScript = "echo \\"MARKETING_VERSION = 9.9.9;\\"\\n";' in text
    assert text.startswith("// !$*UTF8*$!\n")
    assert "/* Pods-App.release.xcconfig */" in text


def test_second_run_is_a_noop(pbxproj_path: Path):
    patch_project_descriptor(pbxproj_path, DESCRIPTOR)
    first = pbxproj_path.read_bytes()

    result = patch_project_descriptor(pbxproj_path, DESCRIPTOR)

    assert result.changed is False
    assert pbxproj_path.read_bytes() == first


def test_n_duplicated_keys_all_updated(tmp_path: Path):
    blocks = "".join(
        f"\t\tID{i} /* Config {i} */ = {{\n"
        "\t\t\tbuildSettings = {\n"
        f"\t\t\t\tMARKETING_VERSION = 0.{i}.0;\n"
        "\t\t\t};\n"
        "\t\t};\n"
        for i in range(7)
    )
    path = tmp_path / "project.pbxproj"
    path.write_text("{\n\tobjects = {\n" + blocks + "\t};\n}\n", encoding="utf-8")

    result = patch_project_descriptor(path, DESCRIPTOR)

    text = path.read_text(encoding="utf-8")
    assert text.count("MARKETING_VERSION = 1.2.3;") == 7
    assert result.values == {"MARKETING_VERSION": "1.2.3"}


def test_quoted_and_conditional_values(tmp_path: Path):
    path = tmp_path / "project.pbxproj"
    path.write_text(
        "buildSettings = {\n"
        '\tMARKETING_VERSION = "1.0";\n'
        '\t"MARKETING_VERSION[sdk=iphoneos*]" = 1.0;\n'
        '\t"MARKETING_VERSION[sdk=iphoneos*][arch=arm64]" = 1.0;\n'
        "\tCURRENT_PROJECT_VERSION=4;\n"
        "};\n",
        encoding="utf-8",
    )

    patch_project_descriptor(path, IosVersionDescriptor(marketing_version="2.0.0", build_version="42"))

    assert path.read_text(encoding="utf-8") == (
        "buildSettings = {\n"
        '\tMARKETING_VERSION = "2.0.0";\n'
        '\t"MARKETING_VERSION[sdk=iphoneos*]" = 2.0.0;\n'
        '\t"MARKETING_VERSION[sdk=iphoneos*][arch=arm64]" = 2.0.0;\n'
        "\tCURRENT_PROJECT_VERSION=42;\n"
        "};\n"
    )


def test_quoted_plain_keys(tmp_path: Path):
    path = tmp_path / "project.pbxproj"
    path.write_text(
        'buildSettings = {\n\t"MARKETING_VERSION" = "1.0";\n\t"CURRENT_PROJECT_VERSION" = 1;\n};\n',
        encoding="utf-8",
    )

    result = patch_project_descriptor(path, DESCRIPTOR)

    assert result.changed
    assert result.values == {"MARKETING_VERSION": "1.2.3", "CURRENT_PROJECT_VERSION": "1.2.3"}
    assert path.read_text(encoding="utf-8") == (
        'buildSettings = {\n\t"MARKETING_VERSION" = "1.2.3";\n\t"CURRENT_PROJECT_VERSION" = 1.2.3;\n};\n'
    )


def test_similar_setting_names_are_ignored(tmp_path: Path):
    path = tmp_path / "project.pbxproj"
    original = (
        "buildSettings = {\n"
        "\tMY_MARKETING_VERSION = 0.1;\n"
        "\tMARKETING_VERSION_SUFFIX = beta;\n"
        "\tMARKETING_VERSION = 0.1;\n"
        "};\n"
    )
    path.write_text(original, encoding="utf-8")

    patch_project_descriptor(path, DESCRIPTOR)

    text = path.read_text(encoding="utf-8")
    assert "\tMY_MARKETING_VERSION = 0.1;\n" in text
    assert "\tMARKETING_VERSION_SUFFIX = beta;\n" in text
    assert "\tMARKETING_VERSION = 1.2.3;\n" in text


def test_no_occurrence_at_all(tmp_path: Path):
    path = tmp_path / "project.pbxproj"
    original = "// MARKETING_VERSION = 1.0;\n{\n\tobjects = {\n\t};\n}\n"
    path.write_text(original, encoding="utf-8")

    with pytest.raises(FieldNotFoundError):
        patch_project_descriptor(path, DESCRIPTOR)

    assert path.read_text(encoding="utf-8") == original

from pathlib import Path

import pytest

from lproj_lint.config import ConfigError, load_config, resource_root


def test_defaults(tmp_path):
    cfg = load_config(cwd=tmp_path)
    assert cfg.root == tmp_path
    assert cfg.development_language == ""
    assert cfg.groups is None
    assert not cfg.dry_run
    assert cfg.warn_malformed


def test_env_like_xcode_build(tmp_path):
    env = {"SRCROOT": str(tmp_path), "TARGET_NAME": "App", "DEVELOPMENT_LANGUAGE": "en"}
    cfg = load_config(directory="/Resources/", env=env, cwd=Path("/"))
    assert cfg.root == tmp_path / "App" / "Resources"
    assert cfg.development_language == "en"


def test_cli_wins_over_env_and_file(tmp_path):
    (tmp_path / "localization.yaml").write_text(
        "development_language: de\ndirectory: Res\ngroups: [A.strings]\n", encoding="utf-8"
    )
    cfg = load_config(
        language="fr",
        project_root=str(tmp_path),
        groups=("B.strings",),
        env={"DEVELOPMENT_LANGUAGE": "en"},
    )
    assert cfg.development_language == "fr"
    assert cfg.groups == ("B.strings",)
    assert cfg.root == tmp_path / "Res"


def test_config_file_values(tmp_path):
    (tmp_path / "localization.yaml").write_text(
        "development_language: de\ngroups:\n  - A.strings\ndry_run: true\nwarn_malformed: false\n",
        encoding="utf-8",
    )
    cfg = load_config(project_root=str(tmp_path))
    assert cfg.development_language == "de"
    assert cfg.groups == ("A.strings",)
    assert cfg.dry_run
    assert not cfg.warn_malformed


def test_unknown_key_is_config_error(tmp_path):
    (tmp_path / "localization.yaml").write_text("langauge: en\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="langauge"):
        load_config(project_root=str(tmp_path))


def test_wrong_type_is_config_error(tmp_path):
    (tmp_path / "localization.yaml").write_text("groups: Localizable.strings\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(project_root=str(tmp_path))


def test_invalid_yaml_is_config_error(tmp_path):
    p = tmp_path / "custom.yaml"
    p.write_text("groups: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(config_path=str(p), cwd=tmp_path)


def test_explicit_missing_config_is_error(tmp_path):
    with pytest.raises(ConfigError):
        load_config(config_path="missing.yaml", cwd=tmp_path)


def test_language_from_project_file(tmp_path):
    (tmp_path / "Package.swift").write_text(
        'let package = Package(name: "App", defaultLocalization: "en-GB", targets: [])\n', encoding="utf-8"
    )
    cfg = load_config(project_root=str(tmp_path), project_file="Package.swift")
    assert cfg.development_language == "en-GB"

    cfg = load_config(project_root=str(tmp_path), project_file="Package.swift", language="fr")
    assert cfg.development_language == "fr"


def test_resource_root_skips_missing_parts(tmp_path):
    assert resource_root(tmp_path, None, None) == tmp_path
    assert resource_root(tmp_path, "T", "") == tmp_path / "T"
    assert resource_root(tmp_path, None, "a/b/") == tmp_path / "a" / "b"


def test_project_file_auto(tmp_path):
    proj = tmp_path / "App.xcodeproj"
    proj.mkdir()
    (proj / "project.pbxproj").write_text("\t\t\tdevelopmentRegion = de;\n", encoding="utf-8")

    cfg = load_config(project_root=str(tmp_path), project_file="auto")
    assert cfg.development_language == "de"

    (tmp_path / "localization.yaml").write_text("project_file: auto\n", encoding="utf-8")
    assert load_config(project_root=str(tmp_path)).development_language == "de"

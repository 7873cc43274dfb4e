"""Tests for canonlint.infrastructure.config — canon.config.{yml,yaml,json}."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from canonlint.infrastructure.config import CanonConfig, find_config_file, load_config

if TYPE_CHECKING:
    from pathlib import Path


class TestFindConfigFile:
    def test_none(self, tmp_path: Path) -> None:
        assert find_config_file(tmp_path) is None

    def test_yml_preferred(self, tmp_path: Path) -> None:
        (tmp_path / "canon.config.json").write_text("{}")
        (tmp_path / "canon.config.yml").write_text("{}")
        assert find_config_file(tmp_path) == tmp_path / "canon.config.yml"


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        config = load_config(tmp_path)
        assert config == CanonConfig()
        assert config.source is None

    def test_empty_file(self, tmp_path: Path) -> None:
        (tmp_path / "canon.config.yml").write_text("")
        config = load_config(tmp_path)
        assert config.rules == {}
        assert config.source == tmp_path / "canon.config.yml"

    def test_full_yaml(self, tmp_path: Path) -> None:
        (tmp_path / "canon.config.yml").write_text(
            "colorTokens:\n"
            "  allowedRawClasses: [text-white, bg-black]\n"
            "structure:\n"
            "  topLevel: [docs]\n"
            "  topLevelFiles: [CHANGELOG.md]\n"
            "  srcFolders: [lib]\n"
            "components:\n"
            "  typography: [Lead]\n"
            "rules:\n"
            "  no-inline-styles: off\n"
            "  no-raw-colors: error\n"
            "  prefer-alias-imports:\n"
            "    severity: error\n"
            "    alias: '~/'\n"
        )
        config = load_config(tmp_path)

        assert config.allowed_raw_classes == ("text-white", "bg-black")
        assert config.extra_top_level_dirs == ("docs",)
        assert config.extra_top_level_files == ("CHANGELOG.md",)
        assert config.extra_src_folders == ("lib",)
        assert config.typography_components == ("Lead",)
        assert config.is_enabled("no-inline-styles") is False
        assert config.is_enabled("no-raw-colors") is True
        assert config.severity_for("no-raw-colors") == "error"
        assert config.severity_for("prefer-alias-imports") == "error"
        assert config.rule_options("prefer-alias-imports") == {"alias": "~/"}

    def test_json(self, tmp_path: Path) -> None:
        (tmp_path / "canon.config.json").write_text(
            '{"rules": {"no-inline-svg": "off"}, "structure": {"srcFolders": ["lib"]}}'
        )
        config = load_config(tmp_path)
        assert config.is_enabled("no-inline-svg") is False
        assert config.extra_src_folders == ("lib",)

    def test_tab_indented_json(self, tmp_path: Path) -> None:
        (tmp_path / "canon.config.json").write_text(
            '{\n\t"rules": {\n\t\t"no-raw-colors": "off"\n\t}\n}\n'
        )
        config = load_config(tmp_path)
        assert config.source == tmp_path / "canon.config.json"
        assert config.is_enabled("no-raw-colors") is False

    def test_malformed_json_warns(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        (tmp_path / "canon.config.json").write_text('{"rules": ')
        with caplog.at_level(logging.WARNING, logger="canonlint.infrastructure.config"):
            config = load_config(tmp_path)
        assert config == CanonConfig()
        assert "using default configuration" in caplog.text

    def test_yaml_zero_disables(self, tmp_path: Path) -> None:
        (tmp_path / "canon.config.yml").write_text("rules:\n  no-raw-colors: 0\n")
        assert load_config(tmp_path).is_enabled("no-raw-colors") is False

    def test_malformed_yaml_warns(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        (tmp_path / "canon.config.yml").write_text("rules: [unclosed\n")
        with caplog.at_level(logging.WARNING, logger="canonlint.infrastructure.config"):
            config = load_config(tmp_path)
        assert config == CanonConfig()
        assert "using default configuration" in caplog.text

    def test_non_mapping_warns(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        (tmp_path / "canon.config.yml").write_text("- a\n- b\n")
        with caplog.at_level(logging.WARNING, logger="canonlint.infrastructure.config"):
            config = load_config(tmp_path)
        assert config == CanonConfig()
        assert "must contain a mapping" in caplog.text

    def test_rules_list_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "canon.config.yml").write_text("rules:\n  - no-inline-styles\n")
        config = load_config(tmp_path)
        assert config.rules == {}
        assert config.is_enabled("no-inline-styles") is True


class TestCanonConfig:
    def test_default_everything_enabled(self) -> None:
        config = CanonConfig()
        assert config.is_enabled("no-raw-colors") is True
        assert config.severity_for("no-raw-colors") is None
        assert config.rule_options("no-raw-colors") == {}

    @pytest.mark.parametrize("value", [False, 0, "off", "OFF", "false", "0"])
    def test_disabled_values(self, value: object) -> None:
        assert CanonConfig(rules={"x": value}).is_enabled("x") is False

    @pytest.mark.parametrize("value", [True, 1, "warn", {"severity": "error"}])
    def test_enabled_values(self, value: object) -> None:
        assert CanonConfig(rules={"x": value}).is_enabled("x") is True

    def test_invalid_severity_ignored(self) -> None:
        assert CanonConfig(rules={"x": "fatal"}).severity_for("x") is None

    def test_allowed_raw_classes_merged(self) -> None:
        config = CanonConfig(
            allowed_raw_classes=("text-white",),
            rules={"no-raw-colors": {"allowedClasses": ["bg-black"]}},
        )
        assert config.rule_options("no-raw-colors") == {
            "allowedClasses": ["text-white", "bg-black"]
        }

    def test_typography_not_overriding_rule_options(self) -> None:
        config = CanonConfig(
            typography_components=("Lead",),
            rules={"prefer-typography-components": {"components": ["Title"]}},
        )
        assert config.rule_options("prefer-typography-components") == {"components": ["Title"]}
        assert CanonConfig(typography_components=("Lead",)).rule_options(
            "prefer-typography-components"
        ) == {"components": ["Lead"]}

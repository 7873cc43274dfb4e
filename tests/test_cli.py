"""Tests for the ``canonlint`` CLI: audit, validate and watch."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING
from unittest.mock import patch

from click.testing import CliRunner, Result

from canonlint import __version__
from canonlint.cli import main

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

RAW_COLOR_BLOCK = (
    "export default function Hero1() {\n"
    '  return <div className="bg-gray-500">x</div>\n'
    "}\n"
)


def _audit(project: Path, *args: str) -> Result:
    runner = CliRunner()
    return runner.invoke(main, ["audit", "--project", str(project), *args])


# ---------------------------------------------------------------------------
# audit
# ---------------------------------------------------------------------------


class TestAuditCommand:
    def test_clean_project(self, canon_project: Path) -> None:
        result = _audit(canon_project)
        assert result.exit_code == 0, result.output
        # Not a TTY, so porcelain: nothing to print.
        assert result.stdout == ""

    def test_porcelain_output(
        self, canon_project: Path, write_file: Callable[[Path, str, str], Path]
    ) -> None:
        write_file(canon_project, "src/blocks/hero-1.tsx", RAW_COLOR_BLOCK)
        result = _audit(canon_project)

        assert result.exit_code == 0
        assert result.stdout.splitlines() == [
            "src/blocks/hero-1.tsx:2:15:warn:no-raw-colors:"
            '[Canon 009] Avoid raw Tailwind color "bg-gray-500". Use a semantic token instead.'
        ]

    def test_strict_exit_code(
        self, canon_project: Path, write_file: Callable[[Path, str, str], Path]
    ) -> None:
        write_file(canon_project, "src/blocks/hero-1.tsx", RAW_COLOR_BLOCK)
        assert _audit(canon_project, "--strict").exit_code == 1

    def test_strict_clean(self, canon_project: Path) -> None:
        assert _audit(canon_project, "--strict").exit_code == 0

    def test_json_format(
        self, canon_project: Path, write_file: Callable[[Path, str, str], Path]
    ) -> None:
        write_file(canon_project, "src/blocks/hero-1.tsx", RAW_COLOR_BLOCK)
        result = _audit(canon_project, "--format", "json")

        document = json.loads(result.stdout)
        assert document["summary"]["violations_count"] == 1
        assert document["summary"]["files_scanned"] == 1
        assert document["violations"][0]["ruleId"] == "no-raw-colors"

    def test_rich_format(
        self, canon_project: Path, write_file: Callable[[Path, str, str], Path]
    ) -> None:
        write_file(canon_project, "src/blocks/hero-1.tsx", RAW_COLOR_BLOCK)
        result = _audit(canon_project, "--format", "rich")

        assert "src/blocks/hero-1.tsx" in result.stdout
        assert "✗ 1 violation found" in result.stdout

    def test_explicit_path(
        self, canon_project: Path, write_file: Callable[[Path, str, str], Path]
    ) -> None:
        write_file(canon_project, "src/components/card.tsx", RAW_COLOR_BLOCK)
        result = _audit(canon_project, "src/components", "--format", "json", "--jobs", "2")
        assert json.loads(result.stdout)["summary"]["violations_count"] == 1

    def test_missing_path(self, canon_project: Path) -> None:
        result = _audit(canon_project, "src/nope")
        assert result.exit_code == 1
        assert "Path not found" in result.output

    def test_missing_project_root(self, tmp_path: Path) -> None:
        result = _audit(tmp_path / "nope")
        assert result.exit_code == 1
        assert "Project directory not found" in result.output

    def test_config_disables_rule(
        self, canon_project: Path, write_file: Callable[[Path, str, str], Path]
    ) -> None:
        write_file(canon_project, "src/blocks/hero-1.tsx", RAW_COLOR_BLOCK)
        write_file(canon_project, "canon.config.yml", "rules:\n  no-raw-colors: off\n")
        result = _audit(canon_project, "--strict")
        assert result.exit_code == 0
        assert result.stdout == ""


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


class TestValidateCommand:
    def test_valid(self, canon_project: Path) -> None:
        result = CliRunner().invoke(main, ["validate", str(canon_project)])
        assert result.exit_code == 0
        assert "✓ Project structure is valid" in result.stdout

    def test_orphan_json(self, canon_project: Path) -> None:
        (canon_project / "random-notes.txt").write_text("")
        result = CliRunner().invoke(main, ["validate", str(canon_project), "--json"])

        assert result.exit_code == 0
        document = json.loads(result.stdout)
        assert document["valid"] is False
        assert document["violations"][0]["type"] == "orphan-file"

    def test_strict(self, canon_project: Path) -> None:
        (canon_project / "assets").mkdir()
        result = CliRunner().invoke(main, ["validate", str(canon_project), "--strict"])
        assert result.exit_code == 1
        assert "Invalid top-level directory: assets" in result.stdout

    def test_config_extras(self, canon_project: Path) -> None:
        (canon_project / "assets").mkdir()
        (canon_project / "canon.config.yml").write_text("structure:\n  topLevel: [assets]\n")
        result = CliRunner().invoke(main, ["validate", str(canon_project), "--strict"])
        assert result.exit_code == 0

    def test_missing_root(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(main, ["validate", str(tmp_path / "missing")])
        assert result.exit_code == 1
        assert "Path does not exist" in result.output


# ---------------------------------------------------------------------------
# watch and global options
# ---------------------------------------------------------------------------


class TestWatchCommand:
    def test_no_watchfiles(self, canon_project: Path) -> None:
        with patch.dict("sys.modules", {"canonlint.infrastructure.watcher": None}):
            result = CliRunner().invoke(main, ["watch", "--project", str(canon_project)])
        assert result.exit_code == 1
        assert "pip install canonlint[watch]" in result.output

    def test_missing_project_root(self, tmp_path: Path) -> None:
        with patch("canonlint.infrastructure.watcher.watch") as mock_watch:
            result = CliRunner().invoke(main, ["watch", "--project", str(tmp_path / "nope")])
        assert result.exit_code == 1
        assert "Project directory not found" in result.output
        mock_watch.assert_not_called()

    def test_passes_options(self, canon_project: Path) -> None:
        with patch("canonlint.infrastructure.watcher.watch") as mock_watch:
            result = CliRunner().invoke(
                main,
                ["watch", "src", "--project", str(canon_project), "--debounce", "50"],
            )
        assert result.exit_code == 0, result.output
        mock_watch.assert_called_once_with(canon_project, "src", debounce_ms=50)

    def test_help(self) -> None:
        result = CliRunner().invoke(main, ["watch", "--help"])
        assert result.exit_code == 0
        assert "--debounce" in result.output


class TestGlobalOptions:
    def test_version(self) -> None:
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_commands_listed(self) -> None:
        result = CliRunner().invoke(main, ["--help"])
        for command in ("audit", "validate", "watch"):
            assert command in result.output

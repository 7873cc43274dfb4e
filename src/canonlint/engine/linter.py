"""Audit orchestrator: collect source files, run the rule set, format results."""

from __future__ import annotations

import json
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from canonlint.engine.parser import supported_extensions
from canonlint.engine.rule_engine import RunContext, Violation, analyze_file
from canonlint.infrastructure.config import load_config
from canonlint.rules import build_rules

if TYPE_CHECKING:
    from canonlint.engine.rule_engine import Rule
    from canonlint.infrastructure.config import CanonConfig

logger = logging.getLogger(__name__)

DEFAULT_AUDIT_PATH = "src/blocks/"

# Directories never descended into while collecting sources.
SKIP_DIRS: frozenset[str] = frozenset({"node_modules", "dist", "build", "out", ".next"})


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class LintError(Exception):
    """Raised when an audit cannot run."""


class ProjectNotFoundError(LintError):
    """Raised when the audited root or path does not exist."""


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class LintResult:
    """Result of an audit run."""

    violations: list[Violation] = field(default_factory=list)
    rules_evaluated: int = 0
    files_scanned: int = 0
    elapsed_ms: float = 0.0

    @property
    def error_count(self) -> int:
        return sum(1 for v in self.violations if v.severity == "error")

    @property
    def warning_count(self) -> int:
        return len(self.violations) - self.error_count


# ---------------------------------------------------------------------------
# File collection
# ---------------------------------------------------------------------------


def _relative(path: Path, project_root: Path) -> str:
    try:
        return path.relative_to(project_root).as_posix()
    except ValueError:
        return path.as_posix()


def collect_sources(target: Path, extensions: frozenset[str] | None = None) -> list[Path]:
    """Return every supported source file under *target*, sorted.

    *target* may itself be a file.  Hidden directories and build output
    (``node_modules``, ``dist``, ...) are skipped.
    """
    exts = extensions if extensions is not None else supported_extensions()
    if target.is_file():
        return [target] if target.suffix in exts else []

    files: list[Path] = []
    for path in target.rglob("*"):
        if not path.is_file() or path.suffix not in exts:
            continue
        parts = path.relative_to(target).parts[:-1]
        if any(part.startswith(".") or part in SKIP_DIRS for part in parts):
            continue
        files.append(path)
    return sorted(files)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def audit(
    project_root: Path,
    path: str | Path | None = None,
    *,
    config: CanonConfig | None = None,
    rules: list[Rule] | None = None,
    jobs: int = 1,
    run: RunContext | None = None,
) -> LintResult:
    """Run the Canon rule set over the source files under *path*.

    Parameters
    ----------
    project_root:
        Project directory; holds ``canon.config.*`` and ``package.json``.
    path:
        File or directory to audit, relative to *project_root* unless
        absolute.  Defaults to ``src/blocks/``.
    config:
        Pre-loaded configuration.  When *None* it is read from *project_root*.
    rules:
        Explicit rule instances; overrides the rules built from *config*.
    jobs:
        Number of worker threads.  Results keep file order regardless.
    run:
        Run-scoped context.  A fresh one is created when omitted.

    Raises
    ------
    ProjectNotFoundError
        When *project_root* or the audited path does not exist.
    """
    start = time.monotonic()

    if not project_root.is_dir():
        msg = f"Project directory not found: {project_root}"
        raise ProjectNotFoundError(msg)

    target = Path(path) if path is not None else Path(DEFAULT_AUDIT_PATH)
    if not target.is_absolute():
        target = project_root / target
    if not target.exists():
        msg = f"Path not found: {target}"
        raise ProjectNotFoundError(msg)

    if rules is None:
        rules = build_rules(config if config is not None else load_config(project_root))
    run = run or RunContext(project_root)

    files = collect_sources(target)
    logger.debug("Auditing %d files with %d rules", len(files), len(rules))

    def _analyze(file_path: Path) -> list[Violation]:
        return analyze_file(
            file_path, rules, run, source_path=_relative(file_path, project_root)
        )

    if jobs > 1 and len(files) > 1:
        with ThreadPoolExecutor(max_workers=jobs, thread_name_prefix="canonlint-audit") as pool:
            per_file = list(pool.map(_analyze, files))
    else:
        per_file = [_analyze(f) for f in files]

    violations = [v for file_violations in per_file for v in file_violations]
    elapsed = (time.monotonic() - start) * 1000
    return LintResult(
        violations=violations,
        rules_evaluated=len(rules),
        files_scanned=len(files),
        elapsed_ms=elapsed,
    )


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------


def violation_to_dict(v: Violation) -> dict[str, object]:
    """Serialize a rule violation for JSON output."""
    return {
        "ruleId": v.rule_id,
        "severity": v.severity,
        "path": v.path,
        "line": v.line_number,
        "column": v.column,
        "message": v.message,
        "data": v.data_dict(),
    }


def format_rich(result: LintResult) -> str:
    """Format a LintResult as human-readable text grouped by file.

    Example output with violations::

        Rules: 20 loaded
        Files: 12 scanned

        src/blocks/hero-5.tsx
          3:7  warn  [Canon 009] Avoid raw Tailwind color "bg-gray-500". ...  no-raw-colors

        1 violation found (20 rules evaluated, 0.1s)
    """
    lines: list[str] = []

    lines.append(f"Rules: {result.rules_evaluated} loaded")
    lines.append(f"Files: {result.files_scanned} scanned")
    lines.append("")

    elapsed_str = f"{result.elapsed_ms / 1000:.1f}s"

    if not result.violations:
        lines.append(
            f"✓ No violations found ({result.rules_evaluated} rules evaluated, {elapsed_str})"
        )
        return "\n".join(lines)

    current_path: str | None = None
    for v in result.violations:
        if v.path != current_path:
            if current_path is not None:
                lines.append("")
            lines.append(v.path)
            current_path = v.path
        position = f"{v.line_number or 0}:{v.column or 0}"
        lines.append(f"  {position:<7} {v.severity:<5}  {v.message}  {v.rule_id or ''}".rstrip())
    lines.append("")

    count = len(result.violations)
    noun = "violation" if count == 1 else "violations"
    lines.append(
        f"✗ {count} {noun} found "
        f"({result.error_count} errors, {result.warning_count} warnings; "
        f"{result.rules_evaluated} rules evaluated, {elapsed_str})"
    )
    return "\n".join(lines)


def format_json(result: LintResult) -> str:
    """Format a LintResult as structured JSON with ``violations`` and ``summary``."""
    output: dict[str, object] = {
        "violations": [violation_to_dict(v) for v in result.violations],
        "summary": {
            "rules_evaluated": result.rules_evaluated,
            "violations_count": len(result.violations),
            "errors": result.error_count,
            "warnings": result.warning_count,
            "files_scanned": result.files_scanned,
            "elapsed_ms": result.elapsed_ms,
        },
    }
    return json.dumps(output, indent=2)


def format_porcelain(result: LintResult) -> str:
    """Format a LintResult as one ``path:line:column:severity:rule_id:message`` line each.

    Returns an empty string when there are no violations.
    """
    if not result.violations:
        return ""

    lines: list[str] = []
    for v in result.violations:
        line_number = str(v.line_number) if v.line_number is not None else ""
        column = str(v.column) if v.column is not None else ""
        lines.append(
            f"{v.path}:{line_number}:{column}:{v.severity}:{v.rule_id or ''}:{v.message}"
        )
    return "\n".join(lines)

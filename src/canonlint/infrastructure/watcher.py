"""File watcher: re-run the audit when sources or project config change."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

from canonlint.infrastructure.config import CONFIG_FILENAMES

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

DEFAULT_DEBOUNCE_MS = 500

_WATCH_EXTENSIONS = frozenset({".ts", ".tsx", ".js", ".jsx", ".mjs"})

# Project files whose change invalidates the loaded rule set or setup check.
_PROJECT_FILES: tuple[str, ...] = (*CONFIG_FILENAMES, "package.json")


def _get_watch_paths(project_root: Path, target: Path) -> list[Path]:
    """Return the audited path plus whichever project files exist."""
    paths: list[Path] = []
    if target.exists():
        paths.append(target)
    for name in _PROJECT_FILES:
        candidate = project_root / name
        if candidate.is_file():
            paths.append(candidate)
    return paths


def _is_project_file(path_str: str, project_root: Path) -> bool:
    """Check if *path_str* is one of the root-level config/manifest files."""
    p = Path(path_str)
    return p.parent == project_root and p.name in _PROJECT_FILES


def _filter_relevant(
    changes: Iterable[tuple[object, str]],
    project_root: Path,
) -> list[tuple[object, str]]:
    """Keep source and project-file changes, ignoring hidden/temp files."""
    result: list[tuple[object, str]] = []

    for change_type, path_str in changes:
        p = Path(path_str)

        if p.name.startswith("~") or p.name.endswith(".tmp"):
            continue

        if _is_project_file(path_str, project_root):
            result.append((change_type, path_str))
            continue

        if p.suffix not in _WATCH_EXTENSIONS:
            continue

        try:
            rel = p.relative_to(project_root)
        except ValueError:
            continue

        # Hidden directories and installed packages never hold project sources.
        if any(part.startswith(".") or part == "node_modules" for part in rel.parts[:-1]):
            continue

        result.append((change_type, path_str))

    return result


def _format_time() -> str:
    """Return current time as ``HH:MM:SS`` string."""
    return datetime.now(tz=timezone.utc).strftime("%H:%M:%S")


@dataclass(frozen=True)
class WatchEvent:
    """A single re-audit after filtering and debounce."""

    files_changed: int
    is_config_change: bool
    violations: int


def watch(
    project_root: Path,
    path: str | Path | None = None,
    debounce_ms: int = DEFAULT_DEBOUNCE_MS,
    callback: Callable[[WatchEvent], None] | None = None,
) -> None:
    """Watch the audited path and re-run the audit on every relevant change.

    Each re-run gets a fresh run context, so the project setup check is
    repeated once per batch.  Config or manifest changes reload the config.

    Requires ``watchfiles`` (optional dependency).
    """
    from rich.console import Console
    from watchfiles import watch as fs_watch

    from canonlint.engine.linter import (
        DEFAULT_AUDIT_PATH,
        ProjectNotFoundError,
        audit,
        format_rich,
    )
    from canonlint.infrastructure.config import load_config

    console = Console()

    target = Path(path) if path is not None else Path(DEFAULT_AUDIT_PATH)
    if not target.is_absolute():
        target = project_root / target

    watch_paths = _get_watch_paths(project_root, target)
    if not target.exists() or not watch_paths:
        console.print(f"[red]Nothing to watch: {target} does not exist.[/red]")
        return

    config = load_config(project_root)

    path_names = ", ".join(
        p.relative_to(project_root).as_posix() if p.is_relative_to(project_root) else str(p)
        for p in watch_paths
    )
    console.print(f"[bold blue]Watching:[/bold blue] {path_names}")
    console.print(f"[dim]Debounce: {debounce_ms}ms  |  Press Ctrl+C to stop[/dim]")
    console.print()

    try:
        for batch in fs_watch(*watch_paths, debounce=debounce_ms):
            relevant = _filter_relevant(batch, project_root)
            if not relevant:
                continue

            config_changed = any(_is_project_file(p, project_root) for _, p in relevant)
            if config_changed:
                config = load_config(project_root)

            try:
                result = audit(project_root, target, config=config)
            except ProjectNotFoundError as exc:
                console.print(f"[red]{exc}[/red]")
                continue

            timestamp = _format_time()
            console.print(
                f"[dim]{timestamp}[/dim] "
                f"[green]audit[/green] "
                f"({len(relevant)} file{'s' if len(relevant) != 1 else ''} changed"
                f"{', config reloaded' if config_changed else ''})"
            )
            console.print(format_rich(result), markup=False, highlight=False)
            console.print()

            if callback is not None:
                callback(
                    WatchEvent(
                        files_changed=len(relevant),
                        is_config_change=config_changed,
                        violations=len(result.violations),
                    )
                )

    except KeyboardInterrupt:
        console.print("\n[yellow]Watch stopped.[/yellow]")

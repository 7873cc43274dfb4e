"""canonlint CLI entry point."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from canonlint import __version__


@click.group()
@click.version_option(version=__version__, prog_name="canonlint")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Minimal output (errors only).")
@click.pass_context
def main(ctx: click.Context, *, verbose: bool, quiet: bool) -> None:
    """canonlint - Canon compliance engine for component-library templates."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet

    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@main.command()
@click.argument("path", required=False, default=None)
@click.option(
    "--project",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Project root (default: current directory).",
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["rich", "json", "porcelain"]),
    default=None,
    help="Output format (default: rich if TTY, porcelain if piped).",
)
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Exit 1 if violations found.",
)
@click.option(
    "--jobs",
    "-j",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Number of files analyzed in parallel.",
)
def audit(
    path: str | None,
    *,
    project: Path | None,
    fmt: str | None,
    strict: bool,
    jobs: int,
) -> None:
    """Run the Canon rules against source files under PATH.

    PATH is relative to the project root and defaults to src/blocks/.
    Exit codes: 0 = clean or violations without --strict,
    1 = violations with --strict, or PATH does not exist.
    """
    from canonlint.engine.linter import ProjectNotFoundError
    from canonlint.engine.linter import audit as run_audit
    from canonlint.engine.linter import format_json as _format_json
    from canonlint.engine.linter import format_porcelain as _format_porcelain
    from canonlint.engine.linter import format_rich as _format_rich

    project_root = project or Path.cwd()

    # Resolve output format: explicit flag > TTY detection.
    if fmt is None:
        fmt = "rich" if sys.stdout.isatty() else "porcelain"

    try:
        result = run_audit(project_root, path, jobs=jobs)
    except ProjectNotFoundError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    formatters = {
        "rich": _format_rich,
        "json": _format_json,
        "porcelain": _format_porcelain,
    }
    output = formatters[fmt](result)
    if output:
        click.echo(output)

    if strict and result.violations:
        sys.exit(1)


@main.command()
@click.argument("path", required=False, default=".")
@click.option("--json", "as_json", is_flag=True, default=False, help="Output as JSON.")
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Exit 1 if violations found.",
)
def validate(path: str, *, as_json: bool, strict: bool) -> None:
    """Validate the directory structure of the project at PATH."""
    from canonlint.engine.linter import ProjectNotFoundError
    from canonlint.engine.tree_validator import format_json, format_text, validate_structure
    from canonlint.infrastructure.config import load_config

    root = Path(path)
    try:
        violations = validate_structure(root, load_config(root) if root.is_dir() else None)
    except ProjectNotFoundError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    click.echo(format_json(violations) if as_json else format_text(violations))

    if strict and violations:
        sys.exit(1)


@main.command("watch")
@click.argument("path", required=False, default=None)
@click.option(
    "--project",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Project root (default: current directory).",
)
@click.option(
    "--debounce",
    type=int,
    default=500,
    show_default=True,
    help="Debounce delay in milliseconds.",
)
def watch_cmd(path: str | None, *, project: Path | None, debounce: int) -> None:
    """Watch files and re-run the audit on changes.

    Requires watchfiles: pip install canonlint[watch]
    """
    try:
        from canonlint.infrastructure.watcher import watch
    except ImportError:
        click.echo(
            "Error: watch requires 'watchfiles'. Install with: pip install canonlint[watch]",
            err=True,
        )
        sys.exit(1)

    project_root = project or Path.cwd()
    if not project_root.is_dir():
        click.echo(f"Error: Project directory not found: {project_root}", err=True)
        sys.exit(1)

    try:
        watch(project_root, path, debounce_ms=debounce)
    except ImportError:
        click.echo(
            "Error: watch requires 'watchfiles'. Install with: pip install canonlint[watch]",
            err=True,
        )
        sys.exit(1)

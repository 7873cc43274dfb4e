"""Project tree validator: top-level and ``src/`` allow-lists for a Canon project."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from canonlint.engine.linter import ProjectNotFoundError
from canonlint.engine.rule_engine import (
    INVALID_SRC_FOLDER,
    INVALID_TOP_LEVEL,
    ORPHAN_FILE,
    Violation,
)

if TYPE_CHECKING:
    from pathlib import Path

    from canonlint.infrastructure.config import CanonConfig

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Allow-lists
# ---------------------------------------------------------------------------

ALLOWED_TOP_LEVEL: tuple[str, ...] = (
    "src",
    "public",
    "_scripts",
    "_data",
    "_docs",
    "node_modules",
)

ALLOWED_SRC_FOLDERS: tuple[str, ...] = (
    "app",
    "blocks",
    "blog",
    "components",
    "hooks",
    "styles",
    "template",
    "tools",
    "types",
    "utils",
)

ALLOWED_TOP_LEVEL_FILES: tuple[str, ...] = (
    "package.json",
    "package-lock.json",
    "tsconfig.json",
    "tsconfig.tsbuildinfo",
    "next.config.mjs",
    "next.config.js",
    "next-env.d.ts",
    "eslint.config.mjs",
    "eslint.config.js",
    "postcss.config.js",
    "tailwind.config.js",
    "tailwind.config.ts",
    "README.md",
    "LICENSE",
    "CHANGELOG.md",
    "canon.config.yml",
    "canon.config.yaml",
)

# Root files with these endings are treated as tool configuration.
CONFIG_FILE_SUFFIXES: tuple[str, ...] = (
    ".config.js",
    ".config.mjs",
    ".config.ts",
    ".json",
    ".md",
    ".sh",
)

ROUTE_GROUP_DEFAULT = "(default)"


@dataclass(frozen=True)
class TreeAllowList:
    """Effective allow-lists: the built-in ones plus configured extras."""

    top_level: frozenset[str]
    top_level_files: frozenset[str]
    src_folders: frozenset[str]

    @classmethod
    def from_config(cls, config: CanonConfig | None = None) -> TreeAllowList:
        extra_dirs: tuple[str, ...] = ()
        extra_files: tuple[str, ...] = ()
        extra_src: tuple[str, ...] = ()
        if config is not None:
            extra_dirs = config.extra_top_level_dirs
            extra_files = config.extra_top_level_files
            extra_src = config.extra_src_folders
        return cls(
            top_level=frozenset(ALLOWED_TOP_LEVEL + extra_dirs),
            top_level_files=frozenset(ALLOWED_TOP_LEVEL_FILES + extra_files),
            src_folders=frozenset(ALLOWED_SRC_FOLDERS + extra_src),
        )


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def is_dotfile(name: str) -> bool:
    return name.startswith(".")


def is_config_file(name: str) -> bool:
    return name.endswith(CONFIG_FILE_SUFFIXES)


def is_archive_content_folder(name: str, allowed: frozenset[str] | None = None) -> bool:
    """Return True for a ``src/`` folder accepted as a new content zone.

    Any name outside the allow-list qualifies, so this never rejects.
    """
    return name not in (allowed if allowed is not None else frozenset(ALLOWED_SRC_FOLDERS))


def is_route_group(name: str) -> bool:
    return name == ROUTE_GROUP_DEFAULT or name.startswith("(")


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def _top_level_order(name: str) -> tuple[int, str]:
    # Built-in directories in their listed order, configured extras after.
    if name in ALLOWED_TOP_LEVEL:
        return (ALLOWED_TOP_LEVEL.index(name), name)
    return (len(ALLOWED_TOP_LEVEL), name)


def _sorted_entries(directory: Path) -> list[Path]:
    return sorted(directory.iterdir(), key=lambda p: p.name)


def _check_top_level(root: Path, allow: TreeAllowList) -> list[Violation]:
    violations: list[Violation] = []
    allowed_dirs = ", ".join(sorted(allow.top_level, key=_top_level_order))
    for entry in _sorted_entries(root):
        name = entry.name
        if is_dotfile(name):
            continue
        if entry.is_dir():
            if name not in allow.top_level:
                violations.append(
                    Violation(
                        kind=INVALID_TOP_LEVEL,
                        path=name,
                        message=(
                            f"Invalid top-level directory: {name}. "
                            f"Allowed: {allowed_dirs} (dotfolders exempt)"
                        ),
                    )
                )
        elif name not in allow.top_level_files and not is_config_file(name):
            violations.append(
                Violation(
                    kind=ORPHAN_FILE,
                    path=name,
                    message=(
                        f"Orphan file at project root: {name}. "
                        "Files should be in defined zones."
                    ),
                )
            )
    return violations


def _check_src(src: Path, allow: TreeAllowList) -> list[Violation]:
    violations: list[Violation] = []
    allowed_src = ", ".join(sorted(allow.src_folders))
    for entry in _sorted_entries(src):
        if not entry.is_dir():
            continue
        name = entry.name
        if name in allow.src_folders:
            continue
        if is_archive_content_folder(name, allow.src_folders):
            logger.debug("Accepting src/%s as an archive content folder", name)
            continue
        violations.append(
            Violation(
                kind=INVALID_SRC_FOLDER,
                path=f"src/{name}",
                message=(
                    f"Invalid folder in /src: {name}. "
                    f"Allowed: {allowed_src} or archive content folders"
                ),
            )
        )

    app = src / "app"
    if app.is_dir() and not any(is_route_group(e.name) for e in app.iterdir()):
        violations.append(
            Violation(
                kind=INVALID_SRC_FOLDER,
                path="src/app",
                message="src/app should have at least one route group folder (e.g., (default)/)",
            )
        )
    return violations


def validate_structure(root: Path, config: CanonConfig | None = None) -> list[Violation]:
    """Validate the two-level shape of the project at *root*.

    Entries are visited in sorted order, so repeated runs over an unchanged
    tree return identical lists.

    Raises
    ------
    ProjectNotFoundError
        When *root* does not exist or is not a directory.
    """
    if not root.is_dir():
        msg = f"Path does not exist: {root}"
        raise ProjectNotFoundError(msg)

    allow = TreeAllowList.from_config(config)
    violations = _check_top_level(root, allow)

    src = root / "src"
    if src.is_dir():
        violations.extend(_check_src(src, allow))
    return violations


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------


def tree_violation_to_dict(v: Violation) -> dict[str, str]:
    return {"type": v.kind, "path": v.path, "message": v.message}


def format_json(violations: list[Violation]) -> str:
    """Return the ``{"valid": bool, "violations": [...]}`` document."""
    document = {
        "valid": not violations,
        "violations": [tree_violation_to_dict(v) for v in violations],
    }
    return json.dumps(document, indent=2, ensure_ascii=False)


def format_text(violations: list[Violation]) -> str:
    if not violations:
        return "✓ Project structure is valid"
    lines = [f"Found {len(violations)} violation(s):", ""]
    lines.extend(f"  ✗ {v.message}" for v in violations)
    return "\n".join(lines)

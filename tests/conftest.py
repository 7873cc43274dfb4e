"""Shared test fixtures for canonlint."""

from __future__ import annotations

import copy
import json
from typing import TYPE_CHECKING, Any

import pytest

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

# A manifest that satisfies the project setup rule with its default options.
COMPLIANT_PACKAGE_JSON: dict[str, object] = {
    "name": "site",
    "private": True,
    "scripts": {
        "unused": "knip",
        "check": "npm run lint && npm run ts && npm run unused",
        "lint": "eslint src/",
        "lint:gallop": "eslint src/blocks/",
        "ts": "tsc --noEmit",
        "audit": "canonlint audit",
        "audit:strict": "canonlint audit --strict",
        "audit:json": "canonlint audit --format json",
        "generate:ai-rules": "gallop generate .cursorrules",
        "update:canon": "npm update @gallop.software/canon",
    },
    "devDependencies": {
        "knip": "^5.0.0",
        "@gallop.software/canon": "^2.0.0",
    },
}


def _write_file(root: Path, rel_path: str, content: str) -> Path:
    path = root / rel_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture()
def write_file() -> Callable[[Path, str, str], Path]:
    """Return a helper writing *content* to ``root / rel_path`` (parents created)."""
    return _write_file


@pytest.fixture()
def canon_project(tmp_path: Path) -> Path:
    """Create a minimal, valid Canon project skeleton."""
    project = tmp_path / "site"
    for folder in ("src/blocks", "src/components", "src/app/(default)", "public"):
        (project / folder).mkdir(parents=True)
    (project / "package.json").write_text(json.dumps(COMPLIANT_PACKAGE_JSON, indent=2))
    (project / "README.md").write_text("# site\n")
    return project


@pytest.fixture()
def compliant_manifest() -> dict[str, Any]:
    """Return a fresh, mutable copy of :data:`COMPLIANT_PACKAGE_JSON`."""
    return copy.deepcopy(COMPLIANT_PACKAGE_JSON)

"""Project setup rule: the package manifest must carry the Canon tooling."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from canonlint.engine.rule_engine import Rule, Visitor

if TYPE_CHECKING:
    from tree_sitter import Node as TSNode

    from canonlint.engine.rule_engine import RuleContext

logger = logging.getLogger(__name__)

MANIFEST_NAME = "package.json"

REQUIRED_DEPENDENCIES: tuple[str, ...] = ("knip", "@gallop.software/canon")

# script name -> (substring the command must contain, suggested definition)
REQUIRED_SCRIPTS: dict[str, tuple[str, str]] = {
    "unused": ("knip", '"unused": "knip"'),
    "check": ("npm run", '"check": "npm run lint && npm run ts && npm run unused"'),
    "lint": ("eslint", '"lint": "eslint src/"'),
    "lint:gallop": ("eslint src/blocks/", '"lint:gallop": "eslint src/blocks/"'),
    "ts": ("tsc", '"ts": "tsc --noEmit"'),
    "audit": ("canonlint audit", '"audit": "canonlint audit"'),
    "audit:strict": ("canonlint audit", '"audit:strict": "canonlint audit --strict"'),
    "audit:json": ("canonlint audit", '"audit:json": "canonlint audit --format json"'),
    "generate:ai-rules": (
        "gallop generate",
        '"generate:ai-rules": "gallop generate .cursorrules"',
    ),
    "update:canon": (
        "@gallop.software/canon",
        '"update:canon": "npm update @gallop.software/canon"',
    ),
}


def find_manifest(start: Path) -> Path | None:
    """Walk up from *start* (a file or directory) to the nearest ``package.json``."""
    directory = start if start.is_dir() else start.parent
    for candidate_dir in (directory, *directory.parents):
        candidate = candidate_dir / MANIFEST_NAME
        if candidate.is_file():
            return candidate
    return None


def load_manifest(path: Path) -> dict[str, Any] | None:
    """Parse *path* as JSON.  Unreadable or malformed manifests yield ``None``."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.debug("Cannot parse %s: %s", path, exc)
        return None
    if not isinstance(data, dict):
        logger.debug("Ignoring %s: top level is not an object", path)
        return None
    return data


class RequireCanonSetup(Rule):
    """Check the project manifest once per run for required dependencies and scripts.

    The check runs on the first analyzed file that has a manifest above it;
    every later file in the same run is skipped via
    :meth:`RunContext.claim_setup_check`.

    Options: ``dependencies`` (list of package names) and ``scripts``
    (``{name: required substring}``) replace the defaults.
    """

    rule_id = "require-canon-setup"
    canon_id = ""
    description = "Require Canon setup in package.json"
    messages = {
        "missingDependency": 'Missing required dependency: "{dep}". Run: npm install -D {dep}',
        "missingScript": (
            'Missing required npm script "{script}". Add to package.json scripts: {definition}'
        ),
        "invalidScript": 'Script "{script}" should contain "{expected}". Expected: {definition}',
    }

    @property
    def required_dependencies(self) -> tuple[str, ...]:
        deps = self.options.get("dependencies")
        if deps is None:
            return REQUIRED_DEPENDENCIES
        return tuple(str(d) for d in deps)

    @property
    def required_scripts(self) -> dict[str, tuple[str, str]]:
        scripts = self.options.get("scripts")
        if scripts is None:
            return REQUIRED_SCRIPTS
        return {
            str(name): (str(contains), f'"{name}": "{contains}"')
            for name, contains in scripts.items()
        }

    def visitors(self) -> dict[str, Visitor]:
        return {"program": self._visit_program}

    def _visit_program(self, node: TSNode, ctx: RuleContext) -> None:
        if ctx.run.setup_checked:
            return
        file_path = Path(ctx.source.path)
        if ctx.run.project_root is not None and not file_path.is_absolute():
            file_path = ctx.run.project_root / file_path
        manifest_path = find_manifest(file_path)
        if manifest_path is None:
            return
        if not ctx.run.claim_setup_check():
            return

        manifest = load_manifest(manifest_path)
        if manifest is None:
            return
        self.check_manifest(manifest, node, ctx)

    def check_manifest(self, manifest: dict[str, Any], node: TSNode, ctx: RuleContext) -> None:
        all_deps: dict[str, Any] = {}
        for key in ("dependencies", "devDependencies"):
            section = manifest.get(key)
            if isinstance(section, dict):
                all_deps.update(section)
        scripts = manifest.get("scripts")
        if not isinstance(scripts, dict):
            scripts = {}

        for dep in self.required_dependencies:
            if not all_deps.get(dep):
                ctx.report(node, "missingDependency", dep=dep)

        for name, (contains, definition) in self.required_scripts.items():
            command = scripts.get(name)
            if not command:
                ctx.report(node, "missingScript", script=name, definition=definition)
            elif contains not in str(command):
                ctx.report(
                    node,
                    "invalidScript",
                    script=name,
                    expected=contains,
                    definition=definition,
                )

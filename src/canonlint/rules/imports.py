"""Import rules: zone boundaries, alias paths, generated data, and banned packages."""

from __future__ import annotations

from typing import TYPE_CHECKING

from canonlint.engine.rule_engine import Rule, SourceFile, Visitor
from canonlint.engine.syntax import identifier_name, import_source, string_value
from canonlint.engine.zones import (
    DEFAULT_ALIAS,
    SCRIPTS_ZONE,
    count_parent_segments,
    imports_data,
    imports_scripts,
    imports_zone,
    in_segment,
    relative_target_zone,
)

if TYPE_CHECKING:
    from tree_sitter import Node as TSNode

    from canonlint.engine.rule_engine import RuleContext

DEFAULT_ALIAS_ZONES: tuple[str, ...] = (
    "components",
    "blocks",
    "hooks",
    "utils",
    "tools",
    "template",
    "types",
    "styles",
)

CLASSNAMES_SOURCES: frozenset[str] = frozenset(
    {"classnames", "classnames/bind", "classnames/dedupe"}
)


class ImportRule(Rule):
    """A rule that looks at the module specifier of every ``import`` statement."""

    def visitors(self) -> dict[str, Visitor]:
        return {"import_statement": self._visit_import}

    def _visit_import(self, node: TSNode, ctx: RuleContext) -> None:
        target = import_source(node)
        if target is not None:
            self.check_import(node, target, ctx)

    def check_import(self, node: TSNode, target: str, ctx: RuleContext) -> None:
        raise NotImplementedError


class NoCrossZoneImports(ImportRule):
    """Import boundary checker.

    Edges: ``blocks`` may not import ``blocks``, ``components`` may not
    import ``blocks``, and nothing outside ``_scripts`` may import
    ``_scripts``.  Each violated edge is reported once per statement.
    """

    rule_id = "no-cross-zone-imports"
    canon_id = "021"
    description = "Enforce import boundaries between Canon zones"
    messages = {
        "blocksImportBlocks": (
            "Blocks cannot import from other blocks. "
            "Each block should be self-contained or import from components."
        ),
        "componentsImportBlocks": (
            "Components cannot import from blocks. "
            "Blocks compose components, not the other way around."
        ),
        "runtimeImportScripts": (
            "Runtime code cannot import from _scripts/. Scripts are for build-time only."
        ),
    }

    def applies_to(self, source: SourceFile) -> bool:
        return not in_segment(source.path, SCRIPTS_ZONE)

    def check_import(self, node: TSNode, target: str, ctx: RuleContext) -> None:
        zone = ctx.source.zone
        if zone == "blocks" and imports_zone(target, "blocks"):
            ctx.report(node, "blocksImportBlocks")
        if zone == "components" and imports_zone(target, "blocks"):
            ctx.report(node, "componentsImportBlocks")
        if imports_scripts(target):
            ctx.report(node, "runtimeImportScripts")


class PreferAliasImports(ImportRule):
    rule_id = "prefer-alias-imports"
    canon_id = "007"
    description = "Use @/ alias imports instead of deep relative paths"
    messages = {
        "useAlias": 'Use "{alias}{zone}/..." instead of "{import_path}".',
    }

    @property
    def alias(self) -> str:
        return str(self.options.get("alias") or DEFAULT_ALIAS)

    @property
    def zones(self) -> tuple[str, ...]:
        zones = self.options.get("zones") or DEFAULT_ALIAS_ZONES
        return tuple(str(z) for z in zones)

    def check_import(self, node: TSNode, target: str, ctx: RuleContext) -> None:
        # Only parent-relative imports; ``./sibling`` is always fine.
        if not target.startswith(".") or target.startswith("./"):
            return
        if count_parent_segments(target) < 2:
            return
        zone = relative_target_zone(target, self.zones)
        if zone is not None:
            ctx.report(node, "useAlias", alias=self.alias, zone=zone, import_path=target)


class NoDataImports(ImportRule):
    rule_id = "no-data-imports"
    canon_id = "022"
    description = "Prevent runtime code from directly importing _data/ files"
    messages = {
        "noDataImports": (
            "Do not import directly from _data/. Use utility functions or fetch data "
            "through proper APIs. _data/ is for generated content only."
        ),
    }

    def applies_to(self, source: SourceFile) -> bool:
        return not in_segment(source.path, SCRIPTS_ZONE)

    def check_import(self, node: TSNode, target: str, ctx: RuleContext) -> None:
        if imports_data(target):
            ctx.report(node, "noDataImports")


class NoClassnamesPackage(ImportRule):
    rule_id = "no-classnames-package"
    canon_id = "014"
    description = "Use clsx instead of classnames"
    messages = {
        "noClassnames": (
            'Use "clsx" instead of "classnames". Import: import {{ clsx }} from "clsx"'
        ),
    }

    def visitors(self) -> dict[str, Visitor]:
        visitors = super().visitors()
        visitors["call_expression"] = self._visit_call
        return visitors

    def check_import(self, node: TSNode, target: str, ctx: RuleContext) -> None:
        if target in CLASSNAMES_SOURCES:
            ctx.report(node, "noClassnames")

    def _visit_call(self, node: TSNode, ctx: RuleContext) -> None:
        # require("classnames")
        if identifier_name(node.child_by_field_name("function")) != "require":
            return
        arguments = node.child_by_field_name("arguments")
        if arguments is None:
            return
        args = [a for a in arguments.named_children if a.type != "comment"]
        if len(args) != 1:
            return
        if string_value(args[0]) in CLASSNAMES_SOURCES:
            ctx.report(node, "noClassnames")

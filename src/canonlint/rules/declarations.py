"""Declaration and expression rules: block exports, directives, and banned globals."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from canonlint.engine.naming import SOURCE_SUFFIX_RE, check_naming
from canonlint.engine.rule_engine import EXIT_SUFFIX, Rule, SourceFile, Visitor
from canonlint.engine.syntax import (
    FUNCTION_VALUE_KINDS,
    identifier_name,
    node_text,
    string_value,
)
from canonlint.engine.zones import DATA_ZONE, SCRIPTS_ZONE, in_segment
from canonlint.rules.markup import BlockRule

if TYPE_CHECKING:
    from tree_sitter import Node as TSNode

    from canonlint.engine.rule_engine import RuleContext

_FUNCTION_DECLARATION_KINDS: frozenset[str] = frozenset(
    {"function_declaration", "generator_function_declaration"}
)


# ---------------------------------------------------------------------------
# Export helpers
# ---------------------------------------------------------------------------


def is_default_export(node: TSNode) -> bool:
    """Return True for ``export default ...`` statements."""
    return any(child.type == "default" for child in node.children)


def default_function_name(node: TSNode) -> str | None:
    """Return the name of ``export default function Name() {}``, if that is the shape."""
    target = node.child_by_field_name("declaration") or node.child_by_field_name("value")
    if target is None:
        return None
    if target.type in _FUNCTION_DECLARATION_KINDS or target.type in FUNCTION_VALUE_KINDS:
        return identifier_name(target.child_by_field_name("name"))
    return None


def default_export_name(node: TSNode) -> str | None:
    """Return the identifier a default export binds: a named function or a bare name."""
    name = default_function_name(node)
    if name is not None:
        return name
    return identifier_name(node.child_by_field_name("value"))


def named_export_names(node: TSNode) -> list[str]:
    """Return the local names exported by a non-default ``export`` statement."""
    names: list[str] = []
    declaration = node.child_by_field_name("declaration")
    if declaration is not None:
        if declaration.type in ("lexical_declaration", "variable_declaration"):
            for declarator in declaration.named_children:
                if declarator.type == "variable_declarator":
                    name = identifier_name(declarator.child_by_field_name("name"))
                    if name is not None:
                        names.append(name)
        else:
            name = identifier_name(declaration.child_by_field_name("name"))
            if name is None:
                # Class names are ``type_identifier`` in the TypeScript grammar.
                name_node = declaration.child_by_field_name("name")
                name = node_text(name_node) or None
            if name is not None:
                names.append(name)
        return names

    for child in node.named_children:
        if child.type != "export_clause":
            continue
        for specifier in child.named_children:
            if specifier.type != "export_specifier":
                continue
            name = node_text(specifier.child_by_field_name("name"))
            if name:
                names.append(name)
    return names


# ---------------------------------------------------------------------------
# Block exports
# ---------------------------------------------------------------------------


class BlockNamingConvention(BlockRule):
    rule_id = "block-naming-convention"
    canon_id = "006"
    description = "Block export names must match filename pattern"
    messages = {
        "blockNamingMismatch": (
            'Block export "{actual}" should be "{expected}" to match the filename '
            '"{filename}". See: Block Naming pattern.'
        ),
        "blockNamingMissingNumber": (
            'Block export "{actual}" must end with a number (e.g. "{suggestion}"). '
            'Rename the block and its file to "{suggested_filename}". '
            "See: Block Naming pattern."
        ),
    }

    def visitors(self) -> dict[str, Visitor]:
        return {"export_statement": self._visit_export}

    def _visit_export(self, node: TSNode, ctx: RuleContext) -> None:
        if not is_default_export(node):
            return
        actual = default_function_name(node)
        if actual is None:
            return
        filename = ctx.source.filename
        finding = check_naming(filename, actual)
        if finding is None:
            return

        target = node.child_by_field_name("declaration") or node.child_by_field_name("value")
        name_node = target.child_by_field_name("name") if target is not None else None
        if finding.kind == "missing-number":
            ctx.report(
                name_node or node,
                "blockNamingMissingNumber",
                actual=actual,
                suggestion=finding.suggestion,
                suggested_filename=finding.suggested_filename + ".tsx",
            )
        else:
            ctx.report(
                name_node or node,
                "blockNamingMismatch",
                actual=actual,
                expected=finding.suggestion,
                filename=filename,
            )


@dataclass
class DeclarationState:
    """Per-file export bookkeeping for :class:`NoComponentInBlocks`."""

    default_export: str | None = None
    named_exports: set[str] = field(default_factory=set)
    candidates: list[tuple[str, TSNode]] = field(default_factory=list)


class NoComponentInBlocks(BlockRule):
    """Flag capitalized, named-exported functions that sit next to the block's default export."""

    rule_id = "no-component-in-blocks"
    canon_id = "025"
    description = "Components belong in src/components/, not in block files"
    messages = {
        "noComponentInBlocks": (
            "Component functions should not be defined in block files. "
            "Move this component to src/components/ and import it."
        ),
    }

    def new_state(self) -> DeclarationState:
        return DeclarationState()

    def visitors(self) -> dict[str, Visitor]:
        return {
            "export_statement": self._visit_export,
            "function_declaration": self._visit_function,
            "generator_function_declaration": self._visit_function,
            "variable_declarator": self._visit_declarator,
            "program" + EXIT_SUFFIX: self._finish,
        }

    def _visit_export(self, node: TSNode, ctx: RuleContext) -> None:
        state: DeclarationState = ctx.state
        if is_default_export(node):
            state.default_export = default_export_name(node)
        else:
            state.named_exports.update(named_export_names(node))

    def _visit_function(self, node: TSNode, ctx: RuleContext) -> None:
        name = identifier_name(node.child_by_field_name("name"))
        if name is not None and name[:1].isupper():
            ctx.state.candidates.append((name, node))

    def _visit_declarator(self, node: TSNode, ctx: RuleContext) -> None:
        value = node.child_by_field_name("value")
        if value is None or value.type not in FUNCTION_VALUE_KINDS:
            return
        name = identifier_name(node.child_by_field_name("name"))
        if name is not None and name[:1].isupper():
            ctx.state.candidates.append((name, node))

    def _finish(self, node: TSNode, ctx: RuleContext) -> None:
        state: DeclarationState = ctx.state
        for name, declaration in state.candidates:
            if name in state.named_exports and name != state.default_export:
                ctx.report(declaration, "noComponentInBlocks")


class NoClientBlocks(BlockRule):
    rule_id = "no-client-blocks"
    canon_id = "001"
    description = "Blocks must be server components"
    messages = {
        "noClientBlocks": (
            "Block \"{block_name}\" uses 'use client'. Extract hooks and client-side logic "
            "into a component in src/components/, then import it here. "
            "See: Server-First Blocks pattern."
        ),
    }

    def visitors(self) -> dict[str, Visitor]:
        return {"expression_statement": self._visit_statement}

    def _visit_statement(self, node: TSNode, ctx: RuleContext) -> None:
        expression = node.named_children[0] if node.named_children else None
        if expression is None or string_value(expression) != "use client":
            return
        block_name = SOURCE_SUFFIX_RE.sub("", ctx.source.filename) or "unknown"
        ctx.report(node, "noClientBlocks", block_name=block_name)


# ---------------------------------------------------------------------------
# Banned globals
# ---------------------------------------------------------------------------


def _constructor_name(node: TSNode) -> str | None:
    return identifier_name(node.child_by_field_name("constructor"))


class NoNativeDate(Rule):
    rule_id = "no-native-date"
    canon_id = "027"
    description = "Use Luxon DateTime, not native JavaScript Date"
    messages = {
        "noNewDate": (
            "Use Luxon's DateTime instead of new Date(). Native Date operates in the "
            "user's local timezone, causing inconsistencies. "
            "Import: import {{ DateTime }} from 'luxon'"
        ),
        "noDateNow": (
            "Use Luxon's DateTime.now() instead of Date.now(). "
            "Import: import {{ DateTime }} from 'luxon'"
        ),
        "noDateParse": (
            "Use Luxon's DateTime.fromISO() or DateTime.fromFormat() instead of "
            "Date.parse(). Import: import {{ DateTime }} from 'luxon'"
        ),
    }

    _METHOD_MESSAGES = {"now": "noDateNow", "parse": "noDateParse"}

    def applies_to(self, source: SourceFile) -> bool:
        if not in_segment(source.path, "src"):
            return False
        return not (in_segment(source.path, SCRIPTS_ZONE) or in_segment(source.path, DATA_ZONE))

    def visitors(self) -> dict[str, Visitor]:
        return {"new_expression": self._visit_new, "call_expression": self._visit_call}

    def _visit_new(self, node: TSNode, ctx: RuleContext) -> None:
        if _constructor_name(node) == "Date":
            ctx.report(node, "noNewDate")

    def _visit_call(self, node: TSNode, ctx: RuleContext) -> None:
        callee = node.child_by_field_name("function")
        if callee is None or callee.type != "member_expression":
            return
        if identifier_name(callee.child_by_field_name("object")) != "Date":
            return
        message_id = self._METHOD_MESSAGES.get(node_text(callee.child_by_field_name("property")))
        if message_id is not None:
            ctx.report(node, message_id)


class NoNativeIntersectionObserver(Rule):
    rule_id = "no-native-intersection-observer"
    canon_id = "024"
    description = "Use react-intersection-observer, not native IntersectionObserver"
    messages = {
        "usePackage": (
            "Use react-intersection-observer package instead of native IntersectionObserver. "
            "Install with: npm install react-intersection-observer"
        ),
    }

    def visitors(self) -> dict[str, Visitor]:
        return {"new_expression": self._visit_new}

    def _visit_new(self, node: TSNode, ctx: RuleContext) -> None:
        if _constructor_name(node) == "IntersectionObserver":
            ctx.report(node, "usePackage")

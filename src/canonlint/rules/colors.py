"""className color rules: named Tailwind palette colors and arbitrary color values."""

from __future__ import annotations

from typing import TYPE_CHECKING

from canonlint.engine.patterns import DEFAULT_PATTERNS, PatternTable
from canonlint.engine.resolver import CLASS_ATTRIBUTE, tokens
from canonlint.engine.rule_engine import Rule, Visitor
from canonlint.engine.syntax import jsx_attribute

if TYPE_CHECKING:
    from tree_sitter import Node as TSNode

    from canonlint.engine.rule_engine import RuleContext
    from canonlint.engine.syntax import JsxAttribute


class ClassTokenRule(Rule):
    """A rule that inspects the tokens of every ``className`` attribute."""

    patterns: PatternTable = DEFAULT_PATTERNS

    @property
    def allowed_classes(self) -> frozenset[str]:
        return frozenset(str(c) for c in self.options.get("allowedClasses") or ())

    def visitors(self) -> dict[str, Visitor]:
        return {"jsx_attribute": self._visit_attribute}

    def _visit_attribute(self, node: TSNode, ctx: RuleContext) -> None:
        attr = jsx_attribute(node)
        if attr is None or attr.name != CLASS_ATTRIBUTE:
            return
        self.check_tokens(attr, tokens(attr.value), ctx)

    def check_tokens(
        self, attr: JsxAttribute, class_tokens: tuple[str, ...], ctx: RuleContext
    ) -> None:
        raise NotImplementedError


class NoRawColors(ClassTokenRule):
    rule_id = "no-raw-colors"
    canon_id = "009"
    description = "Use semantic color tokens, not raw Tailwind colors"
    messages = {
        "noRawColors": 'Avoid raw Tailwind color "{class_name}". Use a semantic token instead.',
    }

    def check_tokens(
        self, attr: JsxAttribute, class_tokens: tuple[str, ...], ctx: RuleContext
    ) -> None:
        for match in self.patterns.find_raw_colors(class_tokens, self.allowed_classes):
            ctx.report(attr.node, "noRawColors", class_name=match)


class NoArbitraryColors(ClassTokenRule):
    rule_id = "no-arbitrary-colors"
    canon_id = "020"
    description = "Use color tokens, not arbitrary color values"
    messages = {
        "noArbitraryColors": (
            'Avoid arbitrary color value "{class_name}". Use defined Tailwind color tokens '
            "(e.g., bg-accent, text-contrast) instead of hardcoded colors. "
            "See: No Arbitrary Colors pattern."
        ),
    }

    def check_tokens(
        self, attr: JsxAttribute, class_tokens: tuple[str, ...], ctx: RuleContext
    ) -> None:
        for token in self.patterns.find_arbitrary_colors(class_tokens, self.allowed_classes):
            ctx.report(attr.node, "noArbitraryColors", class_name=token)

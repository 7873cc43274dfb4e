"""JSX markup rules: raw tags, inline styles, layout, nesting, and component props."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from canonlint.engine.patterns import has_grid_class
from canonlint.engine.resolver import class_attribute_value, tokens
from canonlint.engine.rule_engine import Rule, SourceFile, Visitor
from canonlint.engine.syntax import (
    JSX_TAG_KINDS,
    StringLiteral,
    closing_element_name,
    enclosing_element_names,
    has_direct_text,
    jsx_element,
)

if TYPE_CHECKING:
    from tree_sitter import Node as TSNode

    from canonlint.engine.rule_engine import RuleContext
    from canonlint.engine.syntax import JsxElement

DEFAULT_TYPOGRAPHY_COMPONENTS: tuple[str, ...] = (
    "Heading",
    "Paragraph",
    "Label",
    "Span",
    "Quote",
    "Subheading",
    "Accent",
)

_TEXT_CLASS_PREFIXES: tuple[str, ...] = ("text-", "font-", "leading-", "tracking-")
_DECORATIVE_RE = re.compile(r"\b(?:[wh]-\d|rounded-full)\b")


def _utility(token: str) -> str:
    """Strip responsive/state variants: ``md:hover:w-4`` -> ``w-4``."""
    return token.rsplit(":", 1)[-1]


class BlockRule(Rule):
    """A rule that only runs on files in the ``blocks`` zone."""

    def applies_to(self, source: SourceFile) -> bool:
        return source.zone == "blocks"


class TagRule(Rule):
    """A rule that inspects every opening and self-closing JSX tag."""

    def visitors(self) -> dict[str, Visitor]:
        return {kind: self._visit_tag for kind in JSX_TAG_KINDS}

    def _visit_tag(self, node: TSNode, ctx: RuleContext) -> None:
        element = jsx_element(node)
        if element is not None and element.name is not None:
            self.check_element(element, ctx)

    def check_element(self, element: JsxElement, ctx: RuleContext) -> None:
        raise NotImplementedError


# ---------------------------------------------------------------------------
# Tag identity
# ---------------------------------------------------------------------------


class NoInlineSvg(TagRule, BlockRule):
    rule_id = "no-inline-svg"
    canon_id = "012"
    description = "Use Icon component instead of inline SVGs"
    messages = {
        "noInlineSvg": (
            "Use the Icon component with Iconify icons instead of inline <svg>. "
            'Import: import {{ Icon }} from "@/components/icon"'
        ),
    }

    def check_element(self, element: JsxElement, ctx: RuleContext) -> None:
        if element.name == "svg":
            ctx.report(element.node, "noInlineSvg")


class PreferListComponents(TagRule, BlockRule):
    rule_id = "prefer-list-components"
    canon_id = "026"
    description = "Use List/Li, not raw ul/li tags"
    messages = {
        "useList": (
            'Use the List component instead of <ul>. Import: import {{ List }} from "@/components"'
        ),
        "useLi": (
            'Use the Li component instead of <li>. Import: import {{ Li }} from "@/components"'
        ),
    }

    def check_element(self, element: JsxElement, ctx: RuleContext) -> None:
        if element.name == "ul":
            ctx.report(element.node, "useList")
        elif element.name == "li":
            ctx.report(element.node, "useLi")


@dataclass(frozen=True)
class ClassNameInfo:
    """Heuristic reading of an element's class string."""

    is_gradient_text: bool
    is_visual_element: bool
    has_text_classes: bool


def class_name_info(element: JsxElement) -> ClassNameInfo:
    """Classify an element's ``className`` for the typography heuristics.

    * gradient text: ``bg-clip-text`` is present;
    * visual element: sizing tokens (``w-4``, ``min-h-2``, ``rounded-full``) with
      no ``text-*`` token, e.g. a decorative dot;
    * text classes: any ``text-``/``font-``/``leading-``/``tracking-`` token.
    """
    utilities = [_utility(t) for t in tokens(class_attribute_value(element))]
    has_text_prefix = any(u.startswith("text-") for u in utilities)
    has_sizing = any(_DECORATIVE_RE.search(u) for u in utilities)
    return ClassNameInfo(
        is_gradient_text="bg-clip-text" in utilities,
        is_visual_element=has_sizing and not has_text_prefix,
        has_text_classes=any(u.startswith(_TEXT_CLASS_PREFIXES) for u in utilities),
    )


class PreferTypographyComponents(TagRule, BlockRule):
    rule_id = "prefer-typography-components"
    canon_id = "003"
    description = "Use Paragraph/Span, not raw tags"
    messages = {
        "useParagraph": (
            "Use the Paragraph component instead of <p>. "
            'Import: import {{ Paragraph }} from "@/components"'
        ),
        "useSpan": (
            "Use the Span component instead of <span> for text content. "
            'Import: import {{ Span }} from "@/components"'
        ),
        "useQuote": (
            "Use the Quote component instead of <blockquote>. "
            'Import: import {{ Quote }} from "@/components"'
        ),
        "useTypographyForDiv": (
            "Use a typography component (Heading, Paragraph, Label, etc.) "
            "instead of <div> with text content."
        ),
    }

    @property
    def typography_components(self) -> frozenset[str]:
        names = self.options.get("components") or DEFAULT_TYPOGRAPHY_COMPONENTS
        return frozenset(str(n) for n in names)

    def _inside_typography(self, element: JsxElement) -> bool:
        allowed = self.typography_components
        return any(name in allowed for name in enclosing_element_names(element.node))

    def check_element(self, element: JsxElement, ctx: RuleContext) -> None:
        if element.name == "p":
            ctx.report(element.node, "useParagraph")
            return
        if element.name == "blockquote":
            ctx.report(element.node, "useQuote")
            return

        if element.name == "span":
            if self._inside_typography(element):
                return
            info = class_name_info(element)
            if info.is_gradient_text or info.is_visual_element:
                return
            if has_direct_text(element.node):
                ctx.report(element.node, "useSpan")
            return

        if element.name == "div":
            if self._inside_typography(element):
                return
            # Text content plus text styling means the div is doing typography.
            if class_name_info(element).has_text_classes and has_direct_text(element.node):
                ctx.report(element.node, "useTypographyForDiv")


# ---------------------------------------------------------------------------
# Attribute presence / class tokens
# ---------------------------------------------------------------------------


class NoInlineStyles(BlockRule):
    rule_id = "no-inline-styles"
    canon_id = "008"
    description = "No inline styles in blocks, use Tailwind exclusively"
    messages = {
        "noInlineStyles": (
            "Avoid inline style attribute in blocks. Use Tailwind CSS classes instead. "
            "See: Tailwind Only pattern."
        ),
    }

    def visitors(self) -> dict[str, Visitor]:
        return {"jsx_attribute": self._visit_attribute}

    def _visit_attribute(self, node: TSNode, ctx: RuleContext) -> None:
        name = node.named_children[0] if node.named_children else None
        if name is not None and name.type != "jsx_namespace_name" and name.text == b"style":
            ctx.report(node, "noInlineStyles")


class PreferLayoutComponents(TagRule, BlockRule):
    rule_id = "prefer-layout-components"
    canon_id = "018"
    description = "Use Grid/Columns, not raw div with grid"
    messages = {
        "useLayoutComponent": (
            'Use the Grid or Columns component instead of <div className="grid ...">. '
            'Import: import {{ Grid, Columns, Column }} from "@/components"'
        ),
    }

    def check_element(self, element: JsxElement, ctx: RuleContext) -> None:
        if element.name != "div":
            return
        if has_grid_class(tokens(class_attribute_value(element))):
            ctx.report(element.node, "useLayoutComponent")


class BackgroundImageRounded(TagRule, BlockRule):
    rule_id = "background-image-rounded"
    canon_id = "019"
    description = 'Background images must have rounded="rounded-none"'
    messages = {
        "requireRoundedNone": (
            "Background Image components (with absolute inset-0) must have "
            'rounded="rounded-none" to prevent corner clipping.'
        ),
    }

    def check_element(self, element: JsxElement, ctx: RuleContext) -> None:
        if element.name != "Image":
            return
        classes = tokens(class_attribute_value(element))
        if "absolute" not in classes or "inset-0" not in classes:
            return

        rounded = element.attribute("rounded")
        if rounded is None or not isinstance(rounded.value, StringLiteral):
            ctx.report(element.node, "requireRoundedNone")
            return
        if rounded.value.value != "rounded-none":
            ctx.report(element.node, "requireRoundedNone")


_MARGIN = re.compile(r"^m([by])?-")
_COLOR = re.compile(r"^text-(body|contrast|accent|white|black)")
_FONT_SIZE = re.compile(r"^text-(xs|sm|base|lg|xl|2xl|3xl|4xl|5xl|6xl|7xl|8xl|9xl)$")
_LINE_HEIGHT = re.compile(r"^leading-")
_TEXT_ALIGN = re.compile(r"^text-(left|center|right|justify)$")
_FONT_WEIGHT = re.compile(
    r"^font-(thin|extralight|light|normal|medium|semibold|bold|extrabold|black)$"
)

# Component -> ordered (prop name, class pattern) pairs.  The first matching
# prop wins for each class.
COMPONENT_PROP_MAPPINGS: dict[str, tuple[tuple[str, re.Pattern[str]], ...]] = {
    "Paragraph": (
        ("margin", _MARGIN),
        ("color", _COLOR),
        ("fontSize", _FONT_SIZE),
        ("lineHeight", _LINE_HEIGHT),
        ("textAlign", _TEXT_ALIGN),
        ("fontWeight", _FONT_WEIGHT),
    ),
    "Heading": (
        ("margin", _MARGIN),
        ("color", _COLOR),
        ("fontSize", _FONT_SIZE),
        ("lineHeight", _LINE_HEIGHT),
        ("textAlign", _TEXT_ALIGN),
        ("fontWeight", _FONT_WEIGHT),
    ),
    "Accent": (
        ("margin", _MARGIN),
        ("color", _COLOR),
        ("size", _FONT_SIZE),
        ("textAlign", _TEXT_ALIGN),
    ),
    "Button": (("margin", _MARGIN),),
    "Label": (
        ("margin", _MARGIN),
        ("color", _COLOR),
    ),
    "Quote": (
        ("margin", _MARGIN),
        ("color", _COLOR),
        ("fontSize", _FONT_SIZE),
        ("fontWeight", _FONT_WEIGHT),
        ("textAlign", _TEXT_ALIGN),
    ),
    "Image": (
        ("rounded", re.compile(r"^rounded(-none|-sm|-md|-lg|-xl|-2xl|-3xl|-full)?$")),
        ("aspect", re.compile(r"^aspect-")),
    ),
}


class PreferComponentProps(TagRule):
    rule_id = "prefer-component-props"
    canon_id = "004"
    description = "Use props over className for supported styles"
    messages = {
        "preferComponentProps": (
            '"{class_name}" in className should use the "{prop_name}" prop instead. '
            'Replace className="{class_name}" with {prop_name}="{class_name}".'
        ),
    }

    def check_element(self, element: JsxElement, ctx: RuleContext) -> None:
        mappings = COMPONENT_PROP_MAPPINGS.get(element.name or "")
        if mappings is None:
            return
        attr = element.attribute("className")
        if attr is None:
            return
        for cls in tokens(attr.value):
            for prop_name, pattern in mappings:
                if pattern.search(cls):
                    ctx.report(
                        attr.node, "preferComponentProps", class_name=cls, prop_name=prop_name
                    )
                    break


# ---------------------------------------------------------------------------
# Structural nesting
# ---------------------------------------------------------------------------


@dataclass
class NestingState:
    """Open ``Section`` elements seen so far in the current file."""

    depth: int = 0


class NoContainerInSection(Rule):
    rule_id = "no-container-in-section"
    canon_id = "002"
    description = "No Container inside Section"
    messages = {
        "noContainerInSection": (
            "Container inside Section is redundant. Section already provides max-width "
            "containment. Use Section's innerAlign prop or a plain div instead."
        ),
    }

    container = "Section"
    forbidden = "Container"

    def new_state(self) -> NestingState:
        return NestingState()

    def visitors(self) -> dict[str, Visitor]:
        return {
            "jsx_opening_element": self._visit_tag,
            "jsx_self_closing_element": self._visit_tag,
            "jsx_closing_element": self._visit_closing,
        }

    def _visit_tag(self, node: TSNode, ctx: RuleContext) -> None:
        element = jsx_element(node)
        if element is None or element.name is None:
            return
        state: NestingState = ctx.state
        # A self-closing <Section /> has no children to contain anything.
        if element.name == self.container and not element.self_closing:
            state.depth += 1
        if state.depth > 0 and element.name == self.forbidden:
            ctx.report(node, "noContainerInSection")

    def _visit_closing(self, node: TSNode, ctx: RuleContext) -> None:
        state: NestingState = ctx.state
        if closing_element_name(node) == self.container and state.depth > 0:
            state.depth -= 1

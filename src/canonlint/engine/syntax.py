"""Typed views over tree-sitter nodes.

Rules never poke at raw tree-sitter children directly to find JSX names,
attribute values, or import sources.  Instead the shapes they care about are
converted once, here, into small frozen dataclasses:

* :class:`AttributeValue` is a closed union over the four forms a
  ``className``-style attribute can take (``StringLiteral``,
  ``TemplateLiteral``, ``ConditionalCall``, ``OtherValue``).
  :func:`to_attribute_value` is the single converter and is total: every
  tree-sitter node maps to exactly one variant.
* :class:`JsxElement` / :class:`JsxAttribute` describe an opening or
  self-closing JSX tag.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from collections.abc import Iterator

    from tree_sitter import Node as TSNode

# Node kinds that open a JSX tag (``<div ...>`` and ``<div ... />``).
JSX_TAG_KINDS: tuple[str, ...] = ("jsx_opening_element", "jsx_self_closing_element")

# ``function () {}`` is ``function_expression`` in current grammars and
# ``function`` in older releases.
FUNCTION_VALUE_KINDS: frozenset[str] = frozenset(
    {"arrow_function", "function_expression", "function"}
)

_QUOTES = ("'", '"')


# ---------------------------------------------------------------------------
# Attribute values
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StringLiteral:
    """``className="a b"`` or ``className={'a b'}``."""

    value: str


@dataclass(frozen=True)
class TemplateLiteral:
    """``className={`a ${x} b`}`` — only the static fragments are kept."""

    fragments: tuple[str, ...]


@dataclass(frozen=True)
class ConditionalCall:
    """``className={clsx('a', cond && 'b', `c`)}``."""

    args: tuple[AttributeValue, ...]


@dataclass(frozen=True)
class OtherValue:
    """Anything that cannot be statically read (identifiers, member access, ...)."""


AttributeValue = Union[StringLiteral, TemplateLiteral, ConditionalCall, OtherValue]


@dataclass(frozen=True)
class JsxAttribute:
    """A single ``name=value`` attribute on a JSX tag.

    ``value`` is ``None`` for bare boolean attributes (``<input disabled />``).
    """

    name: str
    value: AttributeValue | None
    node: TSNode


@dataclass(frozen=True)
class JsxElement:
    """An opening (``<p>``) or self-closing (``<img />``) JSX tag.

    ``name`` is ``None`` for member (``<Foo.Bar>``) and namespaced tags; the
    rules only ever match plain identifiers.
    """

    name: str | None
    attributes: tuple[JsxAttribute, ...]
    self_closing: bool
    node: TSNode

    def attribute(self, name: str) -> JsxAttribute | None:
        """Return the first attribute called *name*, or ``None``."""
        for attr in self.attributes:
            if attr.name == name:
                return attr
        return None


# ---------------------------------------------------------------------------
# Low-level helpers
# ---------------------------------------------------------------------------


def node_text(node: TSNode | None) -> str:
    """Return the UTF-8 text of *node* (empty string for ``None``)."""
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8")


def string_value(node: TSNode) -> str | None:
    """Return the unquoted content of a ``string`` node, or ``None`` for other kinds.

    Escape sequences are kept verbatim; class strings never contain any that
    matter for matching.
    """
    if node.type != "string":
        return None
    raw = node_text(node)
    if len(raw) >= 2 and raw[0] in _QUOTES and raw[-1] == raw[0]:
        return raw[1:-1]
    return raw


def template_fragments(node: TSNode) -> tuple[str, ...]:
    """Return the static text between ``${...}`` holes of a ``template_string``.

    Mirrors ESTree ``quasis``: a template with *n* substitutions always yields
    *n + 1* fragments, possibly empty.
    """
    raw = node.text or b""
    base = node.start_byte
    # Skip the opening backtick.
    cursor = 1
    fragments: list[str] = []
    for child in node.children:
        if child.type != "template_substitution":
            continue
        fragments.append(raw[cursor : child.start_byte - base].decode("utf-8"))
        cursor = child.end_byte - base
    # Drop the closing backtick.
    fragments.append(raw[cursor : max(cursor, len(raw) - 1)].decode("utf-8"))
    return tuple(fragments)


def _first_named_child(node: TSNode) -> TSNode | None:
    for child in node.named_children:
        if child.type != "comment":
            return child
    return None


def to_attribute_value(node: TSNode | None) -> AttributeValue:
    """Convert an attribute value node into its :data:`AttributeValue` variant."""
    if node is None:
        return OtherValue()

    kind = node.type
    if kind in ("jsx_expression", "parenthesized_expression"):
        return to_attribute_value(_first_named_child(node))
    if kind == "string":
        value = string_value(node)
        return StringLiteral(value) if value is not None else OtherValue()
    if kind == "template_string":
        return TemplateLiteral(template_fragments(node))
    if kind == "call_expression":
        arguments = node.child_by_field_name("arguments")
        # Tagged templates (``css`...```) carry a template_string, not arguments.
        if arguments is None or arguments.type != "arguments":
            return OtherValue()
        return ConditionalCall(
            tuple(
                to_attribute_value(arg)
                for arg in arguments.named_children
                if arg.type != "comment"
            )
        )
    return OtherValue()


# ---------------------------------------------------------------------------
# JSX
# ---------------------------------------------------------------------------


def jsx_attribute(node: TSNode) -> JsxAttribute | None:
    """Build a :class:`JsxAttribute` view for a ``jsx_attribute`` node."""
    named = [c for c in node.named_children if c.type != "comment"]
    if not named:
        return None
    name = node_text(named[0])
    value = to_attribute_value(named[1]) if len(named) > 1 else None
    return JsxAttribute(name=name, value=value, node=node)


def jsx_element(node: TSNode) -> JsxElement | None:
    """Build a :class:`JsxElement` view for an opening or self-closing tag node."""
    if node.type not in JSX_TAG_KINDS:
        return None

    name = identifier_name(node.child_by_field_name("name"))

    attributes: list[JsxAttribute] = []
    for child in node.named_children:
        if child.type != "jsx_attribute":
            continue
        attr = jsx_attribute(child)
        if attr is not None:
            attributes.append(attr)

    return JsxElement(
        name=name,
        attributes=tuple(attributes),
        self_closing=node.type == "jsx_self_closing_element",
        node=node,
    )


def closing_element_name(node: TSNode) -> str | None:
    """Return the identifier name of a ``jsx_closing_element``."""
    return identifier_name(node.child_by_field_name("name"))


def _opening_tag(element: TSNode) -> TSNode | None:
    tag = element.child_by_field_name("open_tag")
    if tag is not None:
        return tag
    for child in element.named_children:
        if child.type == "jsx_opening_element":
            return child
    return None


def enclosing_element_names(node: TSNode) -> Iterator[str]:
    """Yield tag names of every ``jsx_element`` enclosing *node*, innermost first.

    For an opening tag, its own element is included.
    """
    parent = node.parent
    while parent is not None:
        if parent.type == "jsx_element":
            tag = _opening_tag(parent)
            if tag is not None:
                name_node = tag.child_by_field_name("name")
                if name_node is not None and name_node.type == "identifier":
                    yield node_text(name_node)
        parent = parent.parent


def has_direct_text(tag: TSNode) -> bool:
    """Return True if the element opened by *tag* has literal text children.

    Counts non-blank ``jsx_text`` and ``{"literal"}`` string expressions.
    Self-closing tags never have children.
    """
    if tag.type != "jsx_opening_element":
        return False
    element = tag.parent
    if element is None or element.type != "jsx_element":
        return False

    for child in element.named_children:
        if child.type == "jsx_text":
            if node_text(child).strip():
                return True
        elif child.type == "jsx_expression":
            inner = _first_named_child(child)
            if inner is not None and inner.type == "string":
                value = string_value(inner) or ""
                if value.strip():
                    return True
    return False


# ---------------------------------------------------------------------------
# Imports
# ---------------------------------------------------------------------------


def import_source(node: TSNode) -> str | None:
    """Return the module specifier of an ``import_statement``."""
    source = node.child_by_field_name("source")
    if source is None:
        for child in node.children:
            if child.type == "string":
                source = child
                break
    if source is None:
        return None
    return string_value(source)


def identifier_name(node: TSNode | None) -> str | None:
    """Return the text of an ``identifier`` node, else ``None``."""
    if node is None or node.type != "identifier":
        return None
    return node_text(node)

"""Attribute value resolver: flatten a ``className`` value into a token string."""

from __future__ import annotations

from typing import TYPE_CHECKING

from canonlint.engine.syntax import ConditionalCall, StringLiteral, TemplateLiteral

if TYPE_CHECKING:
    from canonlint.engine.syntax import AttributeValue, JsxElement

CLASS_ATTRIBUTE = "className"


def resolve(value: AttributeValue | None) -> str:
    """Return the statically known class text of *value*.

    * ``StringLiteral`` -> its value.
    * ``TemplateLiteral`` -> static fragments joined with a single space;
      ``${...}`` holes contribute nothing.
    * ``ConditionalCall`` -> every string/template argument, resolved and
      joined with a space.  Identifiers, nested calls and other expressions
      are ignored.
    * anything else -> ``""``.

    Never raises.
    """
    if isinstance(value, StringLiteral):
        return value.value if isinstance(value.value, str) else ""
    if isinstance(value, TemplateLiteral):
        return " ".join(value.fragments)
    if isinstance(value, ConditionalCall):
        return " ".join(
            resolve(arg) for arg in value.args if isinstance(arg, (StringLiteral, TemplateLiteral))
        )
    # OtherValue, or no value at all.
    return ""


def tokens(value: AttributeValue | None) -> tuple[str, ...]:
    """Return the whitespace-delimited tokens of *value*, in source order."""
    return tuple(resolve(value).split())


def class_attribute_value(element: JsxElement) -> AttributeValue | None:
    """Return the ``className`` value of *element*, or ``None`` when absent."""
    attr = element.attribute(CLASS_ATTRIBUTE)
    if attr is None:
        return None
    return attr.value


def class_string(element: JsxElement) -> str:
    """Return the resolved ``className`` string of *element* (``""`` when absent)."""
    return resolve(class_attribute_value(element))

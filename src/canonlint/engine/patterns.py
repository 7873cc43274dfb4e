"""Pattern table: className token matchers built once from the color category lists."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Category lists
# ---------------------------------------------------------------------------

# Tailwind utilities that take a color value.  ``from``/``via``/``to`` are the
# gradient color stops.
COLOR_PREFIXES: tuple[str, ...] = (
    "bg",
    "text",
    "border",
    "ring",
    "outline",
    "shadow",
    "accent",
    "caret",
    "fill",
    "stroke",
    "decoration",
    "divide",
    "from",
    "via",
    "to",
)

# Standard Tailwind named color families (neutrals + hues).
COLOR_FAMILIES: tuple[str, ...] = (
    "white",
    "black",
    "gray",
    "slate",
    "zinc",
    "neutral",
    "stone",
    "red",
    "orange",
    "amber",
    "yellow",
    "lime",
    "green",
    "emerald",
    "teal",
    "cyan",
    "sky",
    "blue",
    "indigo",
    "violet",
    "purple",
    "fuchsia",
    "pink",
    "rose",
)

# Custom properties under this namespace are the approved color tokens.
APPROVED_VAR_NAMESPACE = "color-"


# ---------------------------------------------------------------------------
# Regex builders
# ---------------------------------------------------------------------------


def build_raw_color_regex(
    families: Iterable[str] = COLOR_FAMILIES,
    prefixes: Iterable[str] = COLOR_PREFIXES,
) -> re.Pattern[str]:
    """Match ``{prefix}-{family}`` with an optional ``-{shade}`` (1-3 digits).

    Examples: ``text-white``, ``bg-gray-500``, ``hover:border-slate-200``.
    """
    prefix_group = "|".join(prefixes)
    family_group = "|".join(families)
    return re.compile(rf"\b(?:{prefix_group})-(?:{family_group})(?:-\d{{1,3}})?\b")


def build_arbitrary_color_regex(prefixes: Iterable[str] = COLOR_PREFIXES) -> re.Pattern[str]:
    """Match arbitrary color literals such as ``bg-[#fff]`` or ``text-[rgb(...)]``."""
    prefix_group = "|".join(prefixes)
    return re.compile(
        rf"\b(?:{prefix_group})-\[(?:#[0-9a-fA-F]{{3,8}}|rgba?\(|hsla?\(|color\(|oklch\(|oklab\()",
        re.IGNORECASE,
    )


def build_arbitrary_var_regex(prefixes: Iterable[str] = COLOR_PREFIXES) -> re.Pattern[str]:
    """Match ``var()`` references outside the approved color namespace (``bg-[var(--x)]``)."""
    prefix_group = "|".join(prefixes)
    namespace = re.escape(APPROVED_VAR_NAMESPACE)
    return re.compile(rf"\b(?:{prefix_group})-\[var\(--(?!{namespace})", re.IGNORECASE)


# ---------------------------------------------------------------------------
# Pattern table
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PatternTable:
    """Immutable set of token matchers shared by the color rules."""

    raw_color: re.Pattern[str]
    arbitrary_color: re.Pattern[str]
    arbitrary_var: re.Pattern[str]

    def find_raw_colors(
        self, class_tokens: Iterable[str], allowed: Iterable[str] = ()
    ) -> list[str]:
        """Return every raw color match, one entry per occurrence, in token order.

        Matches listed in *allowed* (exact strings) are skipped.
        """
        allowed_set = frozenset(allowed)
        matches: list[str] = []
        for token in class_tokens:
            for match in self.raw_color.finditer(token):
                if match.group(0) not in allowed_set:
                    matches.append(match.group(0))
        return matches

    def find_arbitrary_colors(
        self, class_tokens: Iterable[str], allowed: Iterable[str] = ()
    ) -> list[str]:
        """Return every token carrying an arbitrary color value, in token order."""
        allowed_set = frozenset(allowed)
        return [
            token
            for token in class_tokens
            if token not in allowed_set
            and (self.arbitrary_color.search(token) or self.arbitrary_var.search(token))
        ]


def build_pattern_table(families: Iterable[str] = COLOR_FAMILIES) -> PatternTable:
    """Build a :class:`PatternTable` for the given forbidden color families."""
    return PatternTable(
        raw_color=build_raw_color_regex(tuple(families)),
        arbitrary_color=build_arbitrary_color_regex(),
        arbitrary_var=build_arbitrary_var_regex(),
    )


DEFAULT_PATTERNS: PatternTable = build_pattern_table()


def has_grid_class(class_tokens: Iterable[str]) -> bool:
    """Return True for a standalone ``grid`` or any ``grid-cols-*`` token.

    ``grid-area``, ``grid-flow-row`` and names that merely contain "grid" do
    not count.
    """
    return any(token == "grid" or token.startswith("grid-cols-") for token in class_tokens)

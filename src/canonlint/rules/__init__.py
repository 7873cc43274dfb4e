"""Rule registry: every Canon source rule, and construction from project config."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from canonlint.rules.colors import NoArbitraryColors, NoRawColors
from canonlint.rules.declarations import (
    BlockNamingConvention,
    NoClientBlocks,
    NoComponentInBlocks,
    NoNativeDate,
    NoNativeIntersectionObserver,
)
from canonlint.rules.imports import (
    NoClassnamesPackage,
    NoCrossZoneImports,
    NoDataImports,
    PreferAliasImports,
)
from canonlint.rules.markup import (
    BackgroundImageRounded,
    NoContainerInSection,
    NoInlineStyles,
    NoInlineSvg,
    PreferComponentProps,
    PreferLayoutComponents,
    PreferListComponents,
    PreferTypographyComponents,
)
from canonlint.rules.setup import RequireCanonSetup

if TYPE_CHECKING:
    from canonlint.engine.rule_engine import Rule
    from canonlint.infrastructure.config import CanonConfig

logger = logging.getLogger(__name__)

# Ordered by Canon pattern id; the setup check runs last.
ALL_RULES: tuple[type[Rule], ...] = (
    NoClientBlocks,
    NoContainerInSection,
    PreferTypographyComponents,
    PreferComponentProps,
    BlockNamingConvention,
    PreferAliasImports,
    NoInlineStyles,
    NoRawColors,
    NoInlineSvg,
    NoClassnamesPackage,
    PreferLayoutComponents,
    BackgroundImageRounded,
    NoArbitraryColors,
    NoCrossZoneImports,
    NoDataImports,
    NoNativeIntersectionObserver,
    NoComponentInBlocks,
    PreferListComponents,
    NoNativeDate,
    RequireCanonSetup,
)

RULES_BY_ID: dict[str, type[Rule]] = {cls.rule_id: cls for cls in ALL_RULES}


def build_rules(config: CanonConfig | None = None) -> list[Rule]:
    """Instantiate every enabled rule with its configured options and severity."""
    if config is None:
        return [cls() for cls in ALL_RULES]

    unknown = sorted(set(config.rules) - set(RULES_BY_ID))
    for rule_id in unknown:
        logger.warning("Unknown rule in config: %s", rule_id)

    rules: list[Rule] = []
    for cls in ALL_RULES:
        if not config.is_enabled(cls.rule_id):
            logger.debug("Rule %s disabled by config", cls.rule_id)
            continue
        rules.append(
            cls(config.rule_options(cls.rule_id), severity=config.severity_for(cls.rule_id))
        )
    return rules


__all__ = [
    "ALL_RULES",
    "RULES_BY_ID",
    "BackgroundImageRounded",
    "BlockNamingConvention",
    "NoArbitraryColors",
    "NoClassnamesPackage",
    "NoClientBlocks",
    "NoComponentInBlocks",
    "NoContainerInSection",
    "NoCrossZoneImports",
    "NoDataImports",
    "NoInlineStyles",
    "NoInlineSvg",
    "NoNativeDate",
    "NoNativeIntersectionObserver",
    "NoRawColors",
    "PreferAliasImports",
    "PreferComponentProps",
    "PreferLayoutComponents",
    "PreferListComponents",
    "PreferTypographyComponents",
    "RequireCanonSetup",
    "build_rules",
]

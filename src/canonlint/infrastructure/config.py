"""Project configuration: ``canon.config.{yml,yaml,json}`` in the project root."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import yaml

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_FILENAMES: tuple[str, ...] = (
    "canon.config.yml",
    "canon.config.yaml",
    "canon.config.json",
)

_DISABLED_VALUES = frozenset({"off", "false", "0"})


@dataclass(frozen=True)
class CanonConfig:
    """Parsed project configuration.  Every field has a working default."""

    allowed_raw_classes: tuple[str, ...] = ()
    extra_top_level_dirs: tuple[str, ...] = ()
    extra_top_level_files: tuple[str, ...] = ()
    extra_src_folders: tuple[str, ...] = ()
    typography_components: tuple[str, ...] = ()
    rules: dict[str, Any] = field(default_factory=dict)
    source: Path | None = None

    def _rule_entry(self, rule_id: str) -> Any:
        return self.rules.get(rule_id)

    def is_enabled(self, rule_id: str) -> bool:
        """Return False when the rule is configured as ``off``, ``false`` or ``0``."""
        entry = self._rule_entry(rule_id)
        if entry is False or (type(entry) is int and entry == 0):
            return False
        return not (isinstance(entry, str) and entry.lower() in _DISABLED_VALUES)

    def severity_for(self, rule_id: str) -> str | None:
        """Return a configured severity override, or ``None`` for the rule default."""
        entry = self._rule_entry(rule_id)
        if isinstance(entry, str) and entry.lower() in ("error", "warn"):
            return entry.lower()
        if isinstance(entry, dict):
            severity = entry.get("severity")
            if isinstance(severity, str) and severity.lower() in ("error", "warn"):
                return severity.lower()
        return None

    def rule_options(self, rule_id: str) -> dict[str, Any]:
        """Return the option mapping for *rule_id* (``severity`` stripped)."""
        entry = self._rule_entry(rule_id)
        options: dict[str, Any] = {}
        if isinstance(entry, dict):
            options = {k: v for k, v in entry.items() if k != "severity"}

        # Project-wide settings feed the rules that consume them.
        if rule_id == "no-raw-colors" and self.allowed_raw_classes:
            merged = list(self.allowed_raw_classes)
            merged.extend(str(c) for c in options.get("allowedClasses") or ())
            options["allowedClasses"] = merged
        if (
            rule_id == "prefer-typography-components"
            and self.typography_components
            and "components" not in options
        ):
            options["components"] = list(self.typography_components)
        return options


def find_config_file(project_root: Path) -> Path | None:
    """Return the first existing config file in *project_root*, in search order."""
    for name in CONFIG_FILENAMES:
        candidate = project_root / name
        if candidate.is_file():
            return candidate
    return None


def _str_list(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(str(v) for v in value if isinstance(v, (str, int)))


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def load_config(project_root: Path) -> CanonConfig:
    """Load the project config, falling back to defaults.

    A missing file is normal.  An unreadable or malformed file is logged
    at WARNING and never raised.
    """
    config_path = find_config_file(project_root)
    if config_path is None:
        return CanonConfig()

    try:
        text = config_path.read_text(encoding="utf-8")
        data = json.loads(text) if config_path.suffix == ".json" else yaml.safe_load(text)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError):
        logger.warning("Failed to read %s, using default configuration", config_path.name)
        return CanonConfig()

    if data is None:
        return CanonConfig(source=config_path)
    if not isinstance(data, dict):
        logger.warning("%s must contain a mapping, using default configuration", config_path.name)
        return CanonConfig()

    structure = _section(data, "structure")
    components = _section(data, "components")

    rules = data.get("rules")
    if not isinstance(rules, dict):
        if rules is not None:
            # Documentation-style rule lists carry no lint settings.
            logger.debug("Ignoring non-mapping 'rules' in %s", config_path.name)
        rules = {}

    return CanonConfig(
        allowed_raw_classes=_str_list(_section(data, "colorTokens").get("allowedRawClasses")),
        extra_top_level_dirs=_str_list(structure.get("topLevel")),
        extra_top_level_files=_str_list(structure.get("topLevelFiles")),
        extra_src_folders=_str_list(structure.get("srcFolders")),
        typography_components=_str_list(components.get("typography")),
        rules={str(k): v for k, v in rules.items()},
        source=config_path,
    )

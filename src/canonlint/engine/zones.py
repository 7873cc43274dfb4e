"""Zone classifier and import-target predicates."""

from __future__ import annotations

# Ordered, mutually exclusive zone list.  First match wins.
ZONES: tuple[str, ...] = ("blocks", "components", "app", "hooks", "utils", "tools")

# Build-time-only zone: runtime code must never import from it.
SCRIPTS_ZONE = "_scripts"
# Generated content zone: only build scripts may import from it.
DATA_ZONE = "_data"

DEFAULT_ALIAS = "@/"


def normalize_path(path: str) -> str:
    """Return *path* with Windows separators converted to ``/``."""
    return path.replace("\\", "/")


def _anchored(path: str) -> str:
    normalized = normalize_path(path)
    return normalized if normalized.startswith("/") else "/" + normalized


def in_segment(path: str, segment: str) -> bool:
    """Return True if ``/segment/`` appears in *path* (either separator style)."""
    return f"/{segment}/" in _anchored(path)


def classify(path: str) -> str | None:
    """Return the zone of *path*, or ``None`` when it is in no known zone.

    >>> classify("src/blocks/hero-5.tsx")
    'blocks'
    >>> classify("src/lib/x.ts") is None
    True
    """
    normalized = _anchored(path)
    for zone in ZONES:
        if f"/{zone}/" in normalized:
            return zone
    return None


def imports_zone(import_path: str, zone: str, *, alias: str = DEFAULT_ALIAS) -> bool:
    """Return True if *import_path* targets *zone*.

    Alias imports (``@/blocks/hero``) must name the zone as their first
    segment; relative imports (``../../blocks/hero``) match anywhere.
    """
    if import_path.startswith(alias):
        return import_path.startswith(f"{alias}{zone}/")
    return f"/{zone}/" in normalize_path(import_path)


def imports_scripts(import_path: str, *, alias: str = DEFAULT_ALIAS) -> bool:
    """Return True if *import_path* targets the build-time ``_scripts`` zone."""
    return f"{SCRIPTS_ZONE}/" in normalize_path(import_path) or import_path.startswith(
        f"{alias}{SCRIPTS_ZONE}/"
    )


def imports_data(import_path: str, *, alias: str = DEFAULT_ALIAS) -> bool:
    """Return True if *import_path* targets the generated ``_data`` zone."""
    normalized = normalize_path(import_path)
    return (
        f"{DATA_ZONE}/" in normalized
        or import_path.startswith(f"{alias}{DATA_ZONE}/")
        or import_path in (DATA_ZONE, f"{alias}{DATA_ZONE}")
    )


def count_parent_segments(import_path: str) -> int:
    """Count the leading ``../`` segments of a relative import."""
    count = 0
    remaining = import_path
    while remaining.startswith("../"):
        count += 1
        remaining = remaining[3:]
    return count


def relative_target_zone(import_path: str, zones: tuple[str, ...] | list[str]) -> str | None:
    """Return the zone named right after the leading ``../`` run, if any.

    ``../../components/button`` -> ``components``.
    """
    remaining = import_path
    while remaining.startswith("../"):
        remaining = remaining[3:]
    first_segment = remaining.split("/", 1)[0]
    return first_segment if first_segment in zones else None

"""Source parser: tree-sitter grammar loading for TSX/TS/JSX/JS files."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from tree_sitter import Language, Parser

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from tree_sitter import Tree

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LangConfig:
    """Tree-sitter configuration for one source dialect."""

    name: str
    language: Language


# ---- Language loaders (lazy, handle ImportError) ----


def _load_typescript() -> LangConfig:
    import tree_sitter_typescript as tstypescript

    return LangConfig(name="typescript", language=Language(tstypescript.language_typescript()))


def _load_tsx() -> LangConfig:
    import tree_sitter_typescript as tstypescript

    return LangConfig(name="tsx", language=Language(tstypescript.language_tsx()))


# Extension -> loader function mapping.  Plain ``.js`` files routinely carry
# JSX in component libraries, so they go through the TSX grammar.
_EXTENSION_LOADERS: dict[str, Callable[[], LangConfig]] = {
    ".ts": _load_typescript,
    ".tsx": _load_tsx,
    ".js": _load_tsx,
    ".jsx": _load_tsx,
    ".mjs": _load_tsx,
}

# Cache for loaded languages (None means "tried and failed / unsupported").
_LANG_CACHE: dict[str, LangConfig | None] = {}


def get_lang_config(extension: str) -> LangConfig | None:
    """Get language config for a file extension, or ``None`` if unsupported/unavailable."""
    if extension in _LANG_CACHE:
        return _LANG_CACHE[extension]

    loader = _EXTENSION_LOADERS.get(extension)
    if loader is None:
        _LANG_CACHE[extension] = None
        return None

    try:
        config = loader()
    except ImportError:
        logger.warning("tree-sitter-typescript is not installed; cannot parse %s files", extension)
        _LANG_CACHE[extension] = None
        return None

    _LANG_CACHE[extension] = config
    return config


def supported_extensions() -> frozenset[str]:
    """Return the set of file extensions with available grammars."""
    return frozenset(ext for ext in _EXTENSION_LOADERS if get_lang_config(ext) is not None)


def clear_cache() -> None:
    """Clear the language config cache (useful for testing)."""
    _LANG_CACHE.clear()


def parse_source(content: str, extension: str = ".tsx") -> Tree | None:
    """Parse *content* with the grammar registered for *extension*.

    Returns ``None`` when the extension is unsupported or the grammar package
    is unavailable.  Syntax errors do not raise: tree-sitter produces a tree
    with ``ERROR`` nodes and rules simply see fewer recognizable shapes.
    """
    config = get_lang_config(extension)
    if config is None:
        return None
    parser = Parser(config.language)
    return parser.parse(content.encode("utf-8"))


def parse_file(file_path: Path) -> Tree | None:
    """Read and parse a source file, returning ``None`` if it cannot be read."""
    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        logger.warning("Cannot read file: %s", file_path)
        return None
    return parse_source(content, file_path.suffix)

"""Block naming convention: ``hero-5.tsx`` must default-export ``Hero5``."""

from __future__ import annotations

import re
from dataclasses import dataclass

SOURCE_SUFFIX_RE = re.compile(r"\.(?:tsx|ts|jsx|js)$")
TRAILING_NUMBER_RE = re.compile(r"[0-9]+$")

_UPPER_AFTER_LOWER_RE = re.compile(r"(?<=[a-z])(?=[A-Z])")
_DIGIT_AFTER_LETTER_RE = re.compile(r"(?<=[A-Za-z])(?=[0-9])")


@dataclass(frozen=True)
class NamingConvention:
    """A filename together with the export it implies and the export it has."""

    filename: str
    expected_export: str
    actual_export: str

    @property
    def matches(self) -> bool:
        return self.expected_export == self.actual_export


@dataclass(frozen=True)
class NamingFinding:
    """Outcome of a failed naming check.

    ``kind`` is ``"missing-number"`` when the export has no trailing digit
    group (``suggestion`` is ``{actual}1``) and ``"mismatch"`` otherwise
    (``suggestion`` is the expected export).
    """

    kind: str
    convention: NamingConvention
    suggestion: str
    suggested_filename: str


def expected_export(filename: str) -> str:
    """Derive the PascalCase export name from a kebab-case block filename.

    >>> expected_export("hero-5.tsx")
    'Hero5'
    >>> expected_export("content-split-39")
    'ContentSplit39'
    """
    base = SOURCE_SUFFIX_RE.sub("", filename)
    return "".join(part[:1].upper() + part[1:] for part in base.split("-"))


def expected_filename(export_name: str) -> str:
    """Derive the kebab-case filename stem from a PascalCase export name.

    >>> expected_filename("Hero5")
    'hero-5'
    >>> expected_filename("ContentSplit39")
    'content-split-39'
    """
    hyphenated = _UPPER_AFTER_LOWER_RE.sub("-", export_name)
    hyphenated = _DIGIT_AFTER_LETTER_RE.sub("-", hyphenated)
    return hyphenated.lower()


def has_trailing_number(name: str) -> bool:
    """Return True if *name* ends in a digit sequence."""
    return TRAILING_NUMBER_RE.search(name) is not None


def check_naming(filename: str, actual_export: str) -> NamingFinding | None:
    """Check *actual_export* against the export implied by *filename*.

    Returns ``None`` when the names agree.  A missing trailing number is
    reported in preference to a plain mismatch.
    """
    convention = NamingConvention(
        filename=filename,
        expected_export=expected_export(filename),
        actual_export=actual_export,
    )
    if not has_trailing_number(actual_export):
        suggestion = f"{actual_export}1"
        return NamingFinding(
            kind="missing-number",
            convention=convention,
            suggestion=suggestion,
            suggested_filename=expected_filename(suggestion),
        )
    if convention.matches:
        return None
    return NamingFinding(
        kind="mismatch",
        convention=convention,
        suggestion=convention.expected_export,
        suggested_filename=expected_filename(actual_export),
    )

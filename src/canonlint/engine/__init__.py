"""Engine domain: parser, resolver, pattern table, zones, naming, rule engine.

Note: ``canonlint.engine.linter`` and ``canonlint.engine.tree_validator`` are not
re-exported here because the audit orchestrator imports the rule registry,
which in turn imports this package.  Import them directly::

    from canonlint.engine.linter import audit
    from canonlint.engine.tree_validator import validate_structure
"""

from canonlint.engine.naming import (
    NamingConvention,
    NamingFinding,
    check_naming,
    expected_export,
    expected_filename,
)
from canonlint.engine.parser import parse_file, parse_source, supported_extensions
from canonlint.engine.patterns import (
    DEFAULT_PATTERNS,
    PatternTable,
    build_pattern_table,
    has_grid_class,
)
from canonlint.engine.resolver import class_string, resolve, tokens
from canonlint.engine.rule_engine import (
    Rule,
    RuleContext,
    RunContext,
    SourceFile,
    Violation,
    analyze_file,
    analyze_source,
    analyze_tree,
)
from canonlint.engine.zones import (
    ZONES,
    classify,
    imports_data,
    imports_scripts,
    imports_zone,
)

__all__ = [
    "DEFAULT_PATTERNS",
    "ZONES",
    "NamingConvention",
    "NamingFinding",
    "PatternTable",
    "Rule",
    "RuleContext",
    "RunContext",
    "SourceFile",
    "Violation",
    "analyze_file",
    "analyze_source",
    "analyze_tree",
    "build_pattern_table",
    "check_naming",
    "class_string",
    "classify",
    "expected_export",
    "expected_filename",
    "has_grid_class",
    "imports_data",
    "imports_scripts",
    "imports_zone",
    "parse_file",
    "parse_source",
    "resolve",
    "supported_extensions",
    "tokens",
]

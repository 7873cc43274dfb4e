"""Rule engine: rule contract, per-run context, visitor dispatch over a syntax tree."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING, Any, ClassVar

from canonlint.engine.parser import parse_file, parse_source
from canonlint.engine.zones import classify, normalize_path

if TYPE_CHECKING:
    from tree_sitter import Node as TSNode
    from tree_sitter import Tree

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

VALID_RULE_SEVERITIES: frozenset[str] = frozenset({"error", "warn"})

RULE_VIOLATION = "rule-violation"
ORPHAN_FILE = "orphan-file"
INVALID_TOP_LEVEL = "invalid-top-level"
INVALID_SRC_FOLDER = "invalid-src-folder"

VIOLATION_KINDS: frozenset[str] = frozenset(
    {RULE_VIOLATION, ORPHAN_FILE, INVALID_TOP_LEVEL, INVALID_SRC_FOLDER}
)

# Suffix appended to a node kind to subscribe to the post-children event.
EXIT_SUFFIX = ":exit"

# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SourceFile:
    """One file under analysis.  The zone is derived from the path on each access."""

    path: str

    @property
    def zone(self) -> str | None:
        return classify(self.path)

    @property
    def filename(self) -> str:
        return PurePosixPath(normalize_path(self.path)).name


@dataclass(frozen=True)
class Violation:
    """A single detected deviation.

    ``kind`` is ``rule-violation`` for source rules and one of the tree
    kinds (``orphan-file``, ``invalid-top-level``, ``invalid-src-folder``)
    for structure checks.  ``data`` keeps the template values of the
    rendered message as ordered ``(key, value)`` pairs.
    """

    kind: str
    path: str
    message: str
    rule_id: str | None = None
    line_number: int | None = None
    column: int | None = None
    data: tuple[tuple[str, str], ...] = ()
    severity: str = "warn"

    def __post_init__(self) -> None:
        if self.kind not in VIOLATION_KINDS:
            msg = f"Unknown violation kind: {self.kind!r}"
            raise ValueError(msg)

    @property
    def location(self) -> str:
        """``path[:line[:column]]``."""
        loc = self.path
        if self.line_number is not None:
            loc += f":{self.line_number}"
            if self.column is not None:
                loc += f":{self.column}"
        return loc

    def data_dict(self) -> dict[str, str]:
        return dict(self.data)


class RunContext:
    """State scoped to a single audit run.

    Holds the one-shot "project setup already checked" flag.  A new run
    (CLI invocation, watch-mode rebuild) constructs a new context; nothing
    leaks between runs.  :meth:`claim_setup_check` is safe to call from
    parallel workers.
    """

    def __init__(self, project_root: Path | None = None) -> None:
        self.project_root = project_root
        self._lock = threading.Lock()
        self._setup_checked = False

    @property
    def setup_checked(self) -> bool:
        return self._setup_checked

    def claim_setup_check(self) -> bool:
        """Return True exactly once per run; later callers get False."""
        with self._lock:
            if self._setup_checked:
                return False
            self._setup_checked = True
            return True


Visitor = Callable[["TSNode", "RuleContext"], None]


class Rule:
    """Base class for source rules.

    Subclasses set ``rule_id``, ``canon_id``, ``description`` and
    ``messages`` (``str.format`` templates keyed by message id), then
    implement :meth:`visitors`.  Instances are created once per run and
    must not hold per-file state: anything that has to persist across
    callbacks during one file's traversal lives in the object returned by
    :meth:`new_state`, which the engine builds fresh for every file.
    """

    rule_id: ClassVar[str] = ""
    canon_id: ClassVar[str] = ""
    description: ClassVar[str] = ""
    messages: ClassVar[dict[str, str]] = {}
    default_severity: ClassVar[str] = "warn"

    def __init__(
        self,
        options: Mapping[str, Any] | None = None,
        *,
        severity: str | None = None,
    ) -> None:
        self.options: Mapping[str, Any] = dict(options or {})
        self.severity = severity if severity in VALID_RULE_SEVERITIES else self.default_severity

    def applies_to(self, source: SourceFile) -> bool:
        """Return False to skip *source* entirely.  Most rules test the zone."""
        return True

    def new_state(self) -> Any:
        """Return fresh traversal state for one file (``None`` for stateless rules)."""
        return None

    def visitors(self) -> dict[str, Visitor]:
        """Return ``{node_kind: callback}``; ``"kind:exit"`` fires after children."""
        raise NotImplementedError

    def render(self, message_id: str, data: Mapping[str, str]) -> str:
        template = self.messages[message_id]
        tag = f"[Canon {self.canon_id}]" if self.canon_id else "[Canon]"
        return f"{tag} " + template.format(**data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.rule_id!r})"


class RuleContext:
    """What a rule callback sees: the file, its options, its state, and a report sink."""

    def __init__(
        self,
        rule: Rule,
        source: SourceFile,
        run: RunContext,
        state: Any,
        sink: list[Violation],
    ) -> None:
        self.rule = rule
        self.source = source
        self.run = run
        self.state = state
        self._sink = sink

    @property
    def options(self) -> Mapping[str, Any]:
        return self.rule.options

    def report(self, node: TSNode | None, message_id: str, **data: str) -> None:
        """Append a violation for *node* rendered from *message_id*."""
        line_number: int | None = None
        column: int | None = None
        if node is not None:
            # tree-sitter uses 0-based rows/columns; report 1-based.
            line_number = node.start_point.row + 1
            column = node.start_point.column + 1
        self._sink.append(
            Violation(
                kind=RULE_VIOLATION,
                path=self.source.path,
                message=self.rule.render(message_id, data),
                rule_id=self.rule.rule_id,
                line_number=line_number,
                column=column,
                data=tuple(data.items()),
                severity=self.rule.severity,
            )
        )


# ---------------------------------------------------------------------------
# Traversal
# ---------------------------------------------------------------------------


@dataclass
class _Subscription:
    rule: Rule
    context: RuleContext
    callback: Visitor


def _build_dispatch(
    rules: list[Rule],
    source: SourceFile,
    run: RunContext,
    sink: list[Violation],
) -> dict[str, list[_Subscription]]:
    dispatch: dict[str, list[_Subscription]] = {}
    for rule in rules:
        if not rule.applies_to(source):
            continue
        context = RuleContext(rule, source, run, rule.new_state(), sink)
        for kind, callback in rule.visitors().items():
            dispatch.setdefault(kind, []).append(_Subscription(rule, context, callback))
    return dispatch


def _fire(
    subscriptions: list[_Subscription] | None,
    node: TSNode,
    failed: set[str],
) -> None:
    if not subscriptions:
        return
    for sub in subscriptions:
        if sub.rule.rule_id in failed:
            continue
        try:
            sub.callback(node, sub.context)
        except Exception:
            # Disable the failing rule for the rest of this file.
            logger.exception(
                "Rule %s failed on %s; skipping it for this file",
                sub.rule.rule_id,
                sub.context.source.path,
            )
            failed.add(sub.rule.rule_id)


def analyze_tree(
    tree: Tree,
    source: SourceFile,
    rules: list[Rule],
    run: RunContext,
) -> list[Violation]:
    """Walk *tree* once, dispatching every named node to subscribed rule callbacks.

    Returns violations in report order.  Traversal is iterative so deeply
    nested JSX cannot exhaust the interpreter stack.
    """
    violations: list[Violation] = []
    dispatch = _build_dispatch(rules, source, run, violations)
    if not dispatch:
        return violations

    failed: set[str] = set()
    stack: list[tuple[TSNode, bool]] = [(tree.root_node, False)]
    while stack:
        node, exiting = stack.pop()
        if exiting:
            _fire(dispatch.get(node.type + EXIT_SUFFIX), node, failed)
            continue
        _fire(dispatch.get(node.type), node, failed)
        stack.append((node, True))
        children = node.named_children
        for child in reversed(children):
            stack.append((child, False))

    return violations


def analyze_source(
    content: str,
    path: str,
    rules: list[Rule],
    run: RunContext | None = None,
) -> list[Violation]:
    """Parse *content* as the file at *path* and run *rules* over it.

    Unsupported extensions yield no violations.
    """
    suffix = PurePosixPath(normalize_path(path)).suffix or ".tsx"
    tree = parse_source(content, suffix)
    if tree is None:
        logger.debug("No grammar for %s, skipping", path)
        return []
    return analyze_tree(tree, SourceFile(path), rules, run or RunContext())


def analyze_file(
    file_path: Path,
    rules: list[Rule],
    run: RunContext | None = None,
    *,
    source_path: str | None = None,
) -> list[Violation]:
    """Read, parse and analyze one file.  Unreadable files yield no violations.

    *source_path* is the path rules see (zone classification, reported
    location); the audit passes the project-relative path so that where the
    project itself lives on disk never affects zone membership.
    """
    tree = parse_file(file_path)
    if tree is None:
        return []

    source = SourceFile(source_path or file_path.as_posix())
    return analyze_tree(tree, source, rules, run or RunContext())

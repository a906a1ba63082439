"""
Runs the `use-client` rule over a module.

The tree is walked once, depth first, with an explicit stack. Enter handlers
are looked up by node type and feed their signals to the report controller;
the only exit handler is on `program`, where the removal decision is made.
"""
import logging
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

from tree_sitter import Node, Tree

from use_client_lint.config import MAX_FIX_PASSES
from use_client_lint.models import Diagnostic, FileReport, Fix, LintOptions
from use_client_lint.services.components import ComponentDetector, ReactClassClassifier
from use_client_lint.services.directive import analyze_module
from use_client_lint.services.globals_table import client_only_globals
from use_client_lint.services.parsing import SourceParseError, parse_source
from use_client_lint.services.report import ReportController, Signal
from use_client_lint.services.scanners import (
    ScanContext,
    scan_browser_construction,
    scan_browser_member_access,
    scan_callback_props,
    scan_class_component,
    scan_hook_call,
    scan_hook_statement,
    scan_third_party_component,
)
from use_client_lint.services.scope_analysis import ScopeManager, collect_undeclared_references

logger = logging.getLogger(__name__)

Scanner = Callable[[Node, ScanContext], Iterable[Signal]]

_JSX_ELEMENT_SCANNERS: Tuple[Scanner, ...] = (scan_third_party_component, scan_callback_props)

ENTER_HANDLERS: Dict[str, Tuple[Scanner, ...]] = {
    "new_expression": (scan_browser_construction,),
    "member_expression": (scan_browser_member_access,),
    "call_expression": (scan_hook_call,),
    "expression_statement": (scan_hook_statement,),
    "jsx_opening_element": _JSX_ELEMENT_SCANNERS,
    "jsx_self_closing_element": _JSX_ELEMENT_SCANNERS,
    "class_declaration": (scan_class_component,),
    "abstract_class_declaration": (scan_class_component,),
    "class": (scan_class_component,),
}


def _finish_module(controller: ReportController) -> None:
    controller.finish()


EXIT_HANDLERS: Dict[str, Callable[[ReportController], None]] = {
    "program": _finish_module,
}


def walk(root: Node, ctx: ScanContext, controller: ReportController) -> None:
    stack: List[Tuple[Node, bool]] = [(root, False)]
    while stack:
        node, exiting = stack.pop()
        if exiting:
            EXIT_HANDLERS[node.type](controller)
            continue

        for scanner in ENTER_HANDLERS.get(node.type, ()):
            for signal in scanner(node, ctx):
                controller.observe(signal)

        if node.type in EXIT_HANDLERS:
            stack.append((node, True))
        for child in reversed(node.named_children):
            stack.append((child, False))


def lint_tree(tree: Tree, options: Optional[LintOptions] = None) -> List[Diagnostic]:
    options = options or LintOptions()
    root = tree.root_node

    module = analyze_module(root, strict=options.strict_directive_position)
    scopes = ScopeManager(root)
    undeclared = collect_undeclared_references(scopes.module_scope)
    logger.debug("Undeclared names: %s", ", ".join(sorted(undeclared)) or "(none)")

    classifier = ReactClassClassifier(options.react_pragma)
    ctx = ScanContext(
        scopes=scopes,
        undeclared=undeclared,
        client_only_globals=client_only_globals(),
        components=ComponentDetector(classifier),
        classifier=classifier,
        options=options,
    )
    controller = ReportController(module)
    walk(root, ctx, controller)
    return controller.diagnostics


def lint_source(
    source: Union[str, bytes],
    filename: str = "module.tsx",
    options: Optional[LintOptions] = None,
) -> List[Diagnostic]:
    """Lint one module. Raises `SourceParseError` if it does not parse cleanly."""
    return lint_tree(parse_source(source, filename), options)


def apply_fixes(source: str, fixes: Iterable[Fix]) -> str:
    """
    Apply byte-range edits to `source`.

    Fixes are applied in order of position; a fix overlapping an earlier one
    is dropped and left for the next pass.
    """
    content = source.encode("utf-8")
    parts: List[bytes] = []
    cursor = 0
    for fix in sorted(fixes, key=lambda f: f.range):
        start, end = fix.range
        if start < cursor:
            logger.debug("Skipping overlapping fix at byte %d", start)
            continue
        parts.append(content[cursor:start])
        parts.append(fix.text.encode("utf-8"))
        cursor = end
    parts.append(content[cursor:])
    return b"".join(parts).decode("utf-8")


def fix_source(
    source: str,
    filename: str = "module.tsx",
    options: Optional[LintOptions] = None,
) -> Tuple[str, List[Diagnostic]]:
    """Fix until the output is stable; returns the output and what is left to report."""
    current = source
    for _ in range(MAX_FIX_PASSES):
        diagnostics = lint_source(current, filename, options)
        fixes = [d.fix for d in diagnostics if d.fix is not None]
        if not fixes:
            return current, diagnostics
        fixed = apply_fixes(current, fixes)
        if fixed == current:
            return current, diagnostics
        current = fixed
    logger.warning("%s: fixes did not settle after %d passes", filename, MAX_FIX_PASSES)
    return current, lint_source(current, filename, options)


def lint_file(path: Union[str, Path], options: Optional[LintOptions] = None, fix: bool = False) -> FileReport:
    """
    Lint a file from disk.

    Read and parse failures are recorded on the report instead of raised. With
    `fix`, the report's `output` holds the fixed source when it differs; the
    file itself is not written.
    """
    path = Path(path)
    try:
        source = path.read_text(encoding="utf-8")
        if fix:
            output, diagnostics = fix_source(source, path.name, options)
            return FileReport(
                filename=str(path),
                diagnostics=diagnostics,
                output=output if output != source else None,
            )
        return FileReport(filename=str(path), diagnostics=lint_source(source, path.name, options))
    except (OSError, UnicodeDecodeError, SourceParseError) as e:
        logger.warning("Could not lint %s: %s", path, e)
        return FileReport(filename=str(path), error=str(e))

"""
Detectors for features that only work in Client Components.

Each scanner takes one node plus the read-only `ScanContext` and yields the
signals it finds. Scanners never decide what gets reported; that belongs to
the report controller.
"""
import re
from dataclasses import dataclass, field
from typing import FrozenSet, Iterator, List, Optional, Set

from tree_sitter import Node

from use_client_lint.config import SERVER_SAFE_HOOKS
from use_client_lint.models import LintOptions
from use_client_lint.services.interfaces import (
    ClassComponentClassifier,
    ComponentBoundaryResolver,
    ScopeProvider,
)
from use_client_lint.services.parsing import node_text
from use_client_lint.services.react_events import is_event_handler_prop
from use_client_lint.services.report import Signal, SignalKind
from use_client_lint.services.scope_analysis import Scope, ScopeKind

# Hooks are recognized by name only.
HOOK_NAME = re.compile(r"^use[A-Z]")

_JSX_TAGS = {"jsx_opening_element", "jsx_closing_element", "jsx_self_closing_element"}
_DOTTED_NAME_TYPES = {"member_expression", "nested_identifier"}
_INLINE_FUNCTION_TYPES = {"arrow_function", "function_expression"}


@dataclass
class ScanContext:
    scopes: ScopeProvider
    undeclared: FrozenSet[str]
    client_only_globals: FrozenSet[str]
    components: ComponentBoundaryResolver
    classifier: ClassComponentClassifier
    options: LintOptions = field(default_factory=LintOptions)

    def __post_init__(self) -> None:
        self.exempt_hooks: FrozenSet[str] = frozenset(SERVER_SAFE_HOOKS) | frozenset(self.options.allowed_server_hooks)
        self.client_namespaces: FrozenSet[str] = frozenset(self.options.client_component_namespaces)

    def is_client_only_global(self, name: str) -> bool:
        return name in self.undeclared and name in self.client_only_globals

    def is_client_only_hook(self, name: str) -> bool:
        return bool(HOOK_NAME.match(name)) and name not in self.exempt_hooks


def _first_named(node: Node) -> Optional[Node]:
    for child in node.named_children:
        if child.type != "comment":
            return child
    return None


def _is_jsx_element_name(node: Node) -> bool:
    """True for the `a.b` in `<a.b />`, which is a tag name and not a member access."""
    current = node
    parent = node.parent
    while parent is not None and parent.type in _DOTTED_NAME_TYPES:
        current, parent = parent, parent.parent
    if parent is None or parent.type not in _JSX_TAGS:
        return False
    name_node = parent.child_by_field_name("name")
    return name_node is not None and name_node.id == current.id


def dotted_path(node: Node) -> List[str]:
    """`a.b.c` as ["a", "b", "c"], root first."""
    parts: List[str] = []
    current = node
    while current.type in _DOTTED_NAME_TYPES:
        named = current.named_children
        obj = current.child_by_field_name("object") or (named[0] if named else None)
        prop = current.child_by_field_name("property") or (named[-1] if named else None)
        if obj is None or prop is None:
            break
        parts.append(node_text(prop))
        current = obj
    parts.append(node_text(current))
    parts.reverse()
    return parts


def scan_browser_construction(node: Node, ctx: ScanContext) -> Iterator[Signal]:
    """`new IntersectionObserver(...)` and friends, anywhere in the module."""
    constructor = node.child_by_field_name("constructor")
    if constructor is None or constructor.type != "identifier":
        return
    name = node_text(constructor)
    if ctx.is_client_only_global(name):
        yield Signal(SignalKind.BROWSER_API_CONSTRUCT, node, name)


def scan_browser_member_access(node: Node, ctx: ScanContext) -> Iterator[Signal]:
    """
    `window.foo` at module scope or inside a component.

    Accesses inside unrelated helper functions are ignored; they may never run
    during render.
    """
    if _is_jsx_element_name(node):
        return
    obj = node.child_by_field_name("object")
    if obj is None or obj.type != "identifier":
        return
    name = node_text(obj)
    if not ctx.is_client_only_global(name):
        return
    if ctx.scopes.scope_for(node).kind == ScopeKind.MODULE or ctx.components.parent_component(node) is not None:
        yield Signal(SignalKind.BROWSER_API_MEMBER, obj, name)


def scan_hook_call(node: Node, ctx: ScanContext) -> Iterator[Signal]:
    callee = node.child_by_field_name("function")
    if callee is None:
        return
    if callee.type == "identifier":
        name = node_text(callee)
    elif callee.type == "member_expression":
        # React.useState(...) is keyed by the property name
        prop = callee.child_by_field_name("property")
        if prop is None or prop.type != "property_identifier":
            return
        name = node_text(prop)
    else:
        return
    if not ctx.is_client_only_hook(name):
        return
    if ctx.scopes.scope_for(node).kind != ScopeKind.FUNCTION:
        return
    if ctx.components.parent_component(node) is not None:
        yield Signal(SignalKind.CLIENT_HOOK, callee, name)


def scan_hook_statement(node: Node, ctx: ScanContext) -> Iterator[Signal]:
    """A hook called for its side effect only, e.g. `useEffect(() => {...});`."""
    expression = _first_named(node)
    if expression is None or expression.type != "call_expression":
        return
    callee = expression.child_by_field_name("function")
    if callee is None or callee.type != "identifier":
        return
    name = node_text(callee)
    if ctx.is_client_only_hook(name) and ctx.components.parent_component(node) is not None:
        yield Signal(SignalKind.CLIENT_HOOK_STATEMENT, callee, name)


def _function_variable_names(scope: Scope) -> Set[str]:
    """Function-valued variables bound in `scope` or its immediate parent."""
    names: Set[str] = set()
    for current in (scope, scope.upper):
        if current is None:
            continue
        for variable in current.variables.values():
            for definition in variable.defs:
                if definition.kind == "function-name" or (
                    definition.init is not None and definition.init.type in _INLINE_FUNCTION_TYPES
                ):
                    names.add(variable.name)
                    break
    return names


def scan_callback_props(node: Node, ctx: ScanContext) -> Iterator[Signal]:
    """Event handlers and functions passed as JSX props."""
    function_names: Optional[Set[str]] = None
    for attribute in node.named_children:
        if attribute.type != "jsx_attribute":
            # Spread attributes are `{...props}` expressions, not jsx_attribute.
            continue
        children = attribute.children
        value = children[-1] if len(children) >= 3 else None
        if value is None or value.type != "jsx_expression":
            continue

        name_node = children[0]
        prop_name = node_text(name_node)
        if is_event_handler_prop(prop_name):
            yield Signal(SignalKind.CALLBACK_PROP, name_node, prop_name)

        expression = _first_named(value)
        if expression is None:
            continue
        if expression.type in _INLINE_FUNCTION_TYPES:
            yield Signal(SignalKind.CALLBACK_PROP, attribute, prop_name)
        elif expression.type == "identifier" and ctx.options.function_identifier_props:
            if function_names is None:
                function_names = _function_variable_names(ctx.scopes.scope_for(node))
            if node_text(expression) in function_names:
                yield Signal(SignalKind.CALLBACK_PROP, attribute, prop_name)


def scan_third_party_component(node: Node, ctx: ScanContext) -> Iterator[Signal]:
    """`<motion.div>` style components from always-client libraries."""
    name_node = node.child_by_field_name("name")
    if name_node is None or name_node.type not in _DOTTED_NAME_TYPES:
        return
    path = dotted_path(name_node)
    if path[0] in ctx.client_namespaces:
        yield Signal(SignalKind.THIRD_PARTY_CLIENT_COMPONENT, name_node, ".".join(path))


def _is_default_export(node: Node) -> bool:
    parent = node.parent
    return parent is not None and parent.type == "export_statement" and any(
        c.type == "default" for c in parent.children
    )


def scan_class_component(node: Node, ctx: ScanContext) -> Iterator[Signal]:
    # Class expressions only count as `export default class ...`.
    if node.type == "class" and not _is_default_export(node):
        return
    if ctx.classifier.is_class_component(node):
        yield Signal(SignalKind.CLASS_COMPONENT, node, node_text(node.child_by_field_name("name")) or None)

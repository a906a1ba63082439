from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional, Set

from tree_sitter import Node

from use_client_lint.services.parsing import node_text

logger = logging.getLogger(__name__)


class ScopeKind(str, Enum):
    MODULE = "module"
    FUNCTION = "function"
    BLOCK = "block"


FUNCTION_NODE_TYPES: Set[str] = {
    "function_declaration",
    "function_expression",
    "arrow_function",
    "method_definition",
    "generator_function",
    "generator_function_declaration",
}

CLASS_NODE_TYPES: Set[str] = {
    "class_declaration",
    "abstract_class_declaration",
    "class",
}

# Nodes (besides function bodies) that open a lexical block scope.
_BLOCK_SCOPE_TYPES: Set[str] = {
    "statement_block",
    "for_statement",
    "for_in_statement",
    "catch_clause",
    "switch_statement",
    "class_body",
}

# Subtrees that only describe types. Identifiers inside them are neither
# bindings nor runtime references.
_TYPE_ONLY_TYPES: Set[str] = {
    "type_annotation",
    "type_arguments",
    "type_parameters",
    "type_alias_declaration",
    "interface_declaration",
    "type_query",
    "function_signature",
    "method_signature",
    "abstract_method_signature",
    "call_signature",
    "construct_signature",
    "index_signature",
    "property_signature",
    "asserts_annotation",
    "type_predicate_annotation",
    "omitting_type_annotation",
    "opting_type_annotation",
}

_JSX_ELEMENT_TAGS: Set[str] = {
    "jsx_opening_element",
    "jsx_closing_element",
    "jsx_self_closing_element",
}


@dataclass(eq=False)
class Definition:
    name: str
    # 'function-name' | 'variable' | 'parameter' | 'import' | 'class'
    # | 'catch-parameter' | 'enum' | 'namespace'
    kind: str
    node: Node
    declaration: Optional[Node] = None
    # Initializer of a variable declarator, e.g. the arrow in `const f = () => {}`
    init: Optional[Node] = None


@dataclass(eq=False)
class Variable:
    name: str
    defs: List[Definition] = field(default_factory=list)


@dataclass(eq=False)
class Reference:
    name: str
    identifier: Node
    from_scope: "Scope"
    resolved: Optional[Variable] = None


@dataclass(eq=False)
class Scope:
    id: int
    kind: ScopeKind
    block: Node
    upper: Optional["Scope"]
    variables: Dict[str, Variable] = field(default_factory=dict)
    # References that were not resolved in this scope and escape outward.
    through: List[Reference] = field(default_factory=list)
    children: List["Scope"] = field(default_factory=list)

    @property
    def bound_names(self) -> Set[str]:
        return set(self.variables)

    def define(self, definition: Definition) -> None:
        variable = self.variables.get(definition.name)
        if variable is None:
            variable = Variable(name=definition.name)
            self.variables[definition.name] = variable
        variable.defs.append(definition)

    def nearest_var_scope(self) -> "Scope":
        """Scope that receives `var` declarations (function or module)."""
        scope = self
        while scope.kind == ScopeKind.BLOCK and scope.upper is not None:
            scope = scope.upper
        return scope


def pattern_identifiers(pattern: Optional[Node]) -> List[Node]:
    """Binding identifiers introduced by a declaration or parameter pattern."""
    found: List[Node] = []
    if pattern is None:
        return found
    stack = [pattern]
    while stack:
        current = stack.pop()
        kind = current.type
        if kind in {"identifier", "shorthand_property_identifier_pattern"}:
            found.append(current)
        elif kind == "pair_pattern":
            # `{ key: value }` only binds the value side
            value = current.child_by_field_name("value")
            if value is not None:
                stack.append(value)
        elif kind in {"assignment_pattern", "object_assignment_pattern"}:
            # The default value on the right is a reference, not a binding.
            left = current.child_by_field_name("left")
            if left is not None:
                stack.append(left)
        elif kind in {"object_pattern", "array_pattern", "rest_pattern"}:
            stack.extend(reversed(current.named_children))
    return found


def _declaration_kind(node: Node) -> Optional[str]:
    kind = node.child_by_field_name("kind")
    if kind is not None:
        return node_text(kind)
    for child in node.children:
        if child.type in {"const", "let", "var"}:
            return child.type
    return None


class ScopeManager:
    """
    Static lexical scopes for one module.

    Scopes are built in two passes over the tree: the first records every
    binding so hoisted names are known up front, the second resolves each
    identifier reference against the scope chain. References that resolve
    nowhere accumulate in the `through` list of every scope they pass, so the
    module scope's `through` holds exactly the module's undeclared names.
    """

    def __init__(self, root: Node):
        self.root = root
        self.scopes: List[Scope] = []
        self._scope_by_block: Dict[int, Scope] = {}
        self._binding_ids: Set[int] = set()
        self.references: List[Reference] = []

        self.module_scope = self._new_scope(ScopeKind.MODULE, root, None)
        self._collect_bindings()
        self._resolve_references()

    # --- public API ---

    def scope_for(self, node: Node) -> Scope:
        """Innermost scope containing `node` (a scope block maps to its own scope)."""
        current: Optional[Node] = node
        while current is not None:
            scope = self._scope_by_block.get(current.id)
            if scope is not None:
                return scope
            current = current.parent
        return self.module_scope

    def is_binding(self, node: Node) -> bool:
        return node.id in self._binding_ids

    # --- construction ---

    def _new_scope(self, kind: ScopeKind, block: Node, upper: Optional[Scope]) -> Scope:
        scope = Scope(id=len(self.scopes), kind=kind, block=block, upper=upper)
        self.scopes.append(scope)
        self._scope_by_block[block.id] = scope
        if upper is not None:
            upper.children.append(scope)
        if kind == ScopeKind.FUNCTION and block.type != "arrow_function":
            # Every non-arrow function implicitly binds `arguments`.
            scope.variables["arguments"] = Variable(name="arguments")
        return scope

    def _opens_scope(self, node: Node) -> Optional[ScopeKind]:
        if node.type in FUNCTION_NODE_TYPES:
            return ScopeKind.FUNCTION
        if node.type in _BLOCK_SCOPE_TYPES:
            parent = node.parent
            # Function and catch bodies share the scope of their owner.
            if node.type == "statement_block" and parent is not None and (
                parent.type in FUNCTION_NODE_TYPES or parent.type == "catch_clause"
            ):
                return None
            return ScopeKind.BLOCK
        return None

    def _bind(self, scope: Scope, ident: Node, kind: str, declaration: Optional[Node] = None, init: Optional[Node] = None) -> None:
        name = node_text(ident)
        if not name:
            return
        self._binding_ids.add(ident.id)
        scope.define(Definition(name=name, kind=kind, node=ident, declaration=declaration, init=init))

    def _collect_bindings(self) -> None:
        stack = [(self.root, self.module_scope)]
        while stack:
            node, scope = stack.pop()
            inner = scope
            if node.id != self.root.id:
                existing = self._scope_by_block.get(node.id)
                if existing is not None:
                    # Class bodies are created early by their class node.
                    inner = existing
                else:
                    kind = self._opens_scope(node)
                    if kind is not None:
                        inner = self._new_scope(kind, node, scope)

            self._declare(node, scope, inner)

            if node.type in _TYPE_ONLY_TYPES or node.type == "import_statement":
                continue
            for child in reversed(node.children):
                stack.append((child, inner))

    def _declare(self, node: Node, outer: Scope, inner: Scope) -> None:
        kind = node.type

        if kind == "import_statement":
            self._declare_import(node)

        elif kind == "variable_declarator":
            target = inner
            parent = node.parent
            if parent is not None and parent.type == "variable_declaration":
                target = inner.nearest_var_scope()
            init = node.child_by_field_name("value")
            for ident in pattern_identifiers(node.child_by_field_name("name")):
                self._bind(target, ident, "variable", declaration=node, init=init)

        elif kind in {"function_declaration", "generator_function_declaration"}:
            name_node = node.child_by_field_name("name")
            if name_node is not None:
                # The name lives in the enclosing scope, not the function's own.
                self._bind(outer, name_node, "function-name", declaration=node)

        elif kind in {"function_expression", "generator_function"}:
            name_node = node.child_by_field_name("name")
            if name_node is not None:
                self._bind(inner, name_node, "function-name", declaration=node)

        elif kind == "function_signature":
            name_node = node.child_by_field_name("name")
            if name_node is not None:
                self._bind(outer, name_node, "function-name", declaration=node)

        elif kind == "arrow_function":
            param = node.child_by_field_name("parameter")
            if param is not None:
                self._bind(inner, param, "parameter", declaration=node)

        elif kind in {"required_parameter", "optional_parameter"}:
            # Visited with the owning function's scope already pushed.
            for ident in pattern_identifiers(node.child_by_field_name("pattern")):
                self._bind(outer, ident, "parameter", declaration=node)

        elif kind == "catch_clause":
            for ident in pattern_identifiers(node.child_by_field_name("parameter")):
                self._bind(inner, ident, "catch-parameter", declaration=node)

        elif kind == "for_in_statement":
            declared = _declaration_kind(node)
            if declared is not None:
                target = inner.nearest_var_scope() if declared == "var" else inner
                for ident in pattern_identifiers(node.child_by_field_name("left")):
                    self._bind(target, ident, "variable", declaration=node)

        elif kind in CLASS_NODE_TYPES and node.is_named:
            name_node = node.child_by_field_name("name")
            if name_node is not None:
                if kind != "class":
                    self._bind(outer, name_node, "class", declaration=node)
                # The class name is also visible inside its own body.
                body = node.child_by_field_name("body")
                if body is not None:
                    body_scope = self._scope_by_block.get(body.id) or self._new_scope(ScopeKind.BLOCK, body, outer)
                    self._bind(body_scope, name_node, "class", declaration=node)

        elif kind == "enum_declaration":
            name_node = node.child_by_field_name("name")
            if name_node is not None:
                self._bind(outer, name_node, "enum", declaration=node)

        elif kind in {"internal_module", "module"}:
            name_node = node.child_by_field_name("name")
            if name_node is not None and name_node.type == "identifier":
                self._bind(outer, name_node, "namespace", declaration=node)

    def _declare_import(self, node: Node) -> None:
        # `import type { X }` never produces runtime bindings.
        if any(c.type == "type" for c in node.children):
            return
        for child in node.named_children:
            if child.type == "import_require_clause":
                for ident in child.named_children:
                    if ident.type == "identifier":
                        self._bind(self.module_scope, ident, "import", declaration=node)
                        break
            if child.type != "import_clause":
                continue
            for part in child.named_children:
                if part.type == "identifier":
                    # import Foo from "x"
                    self._bind(self.module_scope, part, "import", declaration=node)
                elif part.type == "namespace_import":
                    # import * as ns from "x"
                    for ident in part.named_children:
                        if ident.type == "identifier":
                            self._bind(self.module_scope, ident, "import", declaration=node)
                elif part.type == "named_imports":
                    # import { A, B as C } from "x"
                    for specifier in part.named_children:
                        if specifier.type != "import_specifier":
                            continue
                        if any(c.type == "type" for c in specifier.children):
                            continue
                        local = specifier.child_by_field_name("alias") or specifier.child_by_field_name("name")
                        if local is not None and local.type == "identifier":
                            self._bind(self.module_scope, local, "import", declaration=node)

    # --- resolution ---

    def _reference_children(self, node: Node) -> Iterable[Node]:
        """Children that may contain runtime references."""
        kind = node.type
        if kind in _TYPE_ONLY_TYPES or kind == "import_statement":
            return ()
        if kind in _JSX_ELEMENT_TAGS:
            # Tag names are not variable references.
            name_node = node.child_by_field_name("name")
            if name_node is None:
                return node.children
            return [c for c in node.children if c.id != name_node.id]
        if kind == "jsx_attribute":
            # The first child is the attribute name.
            return node.children[1:]
        if kind == "export_statement" and node.child_by_field_name("source") is not None:
            # export { a } from "b" re-exports another module's names
            return ()
        if kind == "export_specifier":
            name_node = node.child_by_field_name("name")
            return [name_node] if name_node is not None else ()
        return node.children

    def _resolve_references(self) -> None:
        stack = [(self.root, self.module_scope)]
        while stack:
            node, scope = stack.pop()
            scope = self._scope_by_block.get(node.id, scope)

            if node.type in {"identifier", "shorthand_property_identifier"} and not self.is_binding(node):
                self._resolve(node, scope)

            for child in reversed(list(self._reference_children(node))):
                stack.append((child, scope))

        logger.debug(
            "Resolved %d references, %d escape the module",
            len(self.references),
            len(self.module_scope.through),
        )

    def _resolve(self, ident: Node, scope: Scope) -> None:
        name = node_text(ident)
        if not name:
            return
        reference = Reference(name=name, identifier=ident, from_scope=scope)
        self.references.append(reference)
        current: Optional[Scope] = scope
        while current is not None:
            variable = current.variables.get(name)
            if variable is not None:
                reference.resolved = variable
                return
            current.through.append(reference)
            current = current.upper


def collect_undeclared_references(module_scope: Scope) -> FrozenSet[str]:
    """Names referenced in the module that resolve to no local binding."""
    return frozenset(reference.name for reference in module_scope.through)

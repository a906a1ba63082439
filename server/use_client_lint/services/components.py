"""
React component recognition.

`ComponentDetector.parent_component` answers "which component does this node
belong to?" by walking up the syntax tree to the nearest function or class
that looks like a React component. Function components are recognized by
their name casing and by returning JSX (or `null`); class components by their
superclass.
"""
import re
from typing import Dict, Optional, Tuple

from tree_sitter import Node

from use_client_lint.config import DEFAULT_REACT_PRAGMA
from use_client_lint.services.parsing import node_text
from use_client_lint.services.scope_analysis import CLASS_NODE_TYPES, FUNCTION_NODE_TYPES

_JSX_NODE_TYPES = {"jsx_element", "jsx_self_closing_element", "jsx_fragment", "null"}
_LOGICAL_OPERATORS = {"&&", "||", "??"}
_WRAPPER_NAMES = ("memo", "forwardRef")
_TRANSPARENT_EXPRESSIONS = {"parenthesized_expression", "as_expression", "satisfies_expression", "non_null_expression"}

_EXTENDS_TAG = re.compile(r"@(?:extends|augments)\s+\{?\s*([\w$.]+)")


def _first_named(node: Node) -> Optional[Node]:
    for child in node.named_children:
        if child.type != "comment":
            return child
    return None


def is_capitalized(name: str) -> bool:
    first = name.lstrip("_")[:1]
    return bool(first) and first.upper() == first


class ReactClassClassifier:
    """Recognizes ES6 class components: `class X extends React.Component`."""

    def __init__(self, pragma: str = DEFAULT_REACT_PRAGMA):
        self.pragma = pragma
        self._superclass_pattern = re.compile(rf"^({re.escape(pragma)}\.)?(Pure)?Component$")

    def superclass(self, node: Node) -> Optional[Node]:
        for child in node.children:
            if child.type != "class_heritage":
                continue
            for clause in child.named_children:
                if clause.type == "extends_clause":
                    return clause.child_by_field_name("value") or _first_named(clause)
                if clause.type != "implements_clause":
                    # JavaScript grammar: the heritage holds the expression itself.
                    return clause
        return None

    def is_class_component(self, node: Node) -> bool:
        superclass = self.superclass(node)
        if superclass is None:
            return False
        if self._extends_tag_matches(node):
            return True
        return bool(self._superclass_pattern.match("".join(node_text(superclass).split())))

    def _extends_tag_matches(self, node: Node) -> bool:
        anchor = node
        if node.parent is not None and node.parent.type == "export_statement":
            anchor = node.parent
        comment = anchor.prev_named_sibling
        if comment is None or comment.type != "comment":
            return False
        text = node_text(comment)
        if not text.startswith("/**"):
            return False
        match = _EXTENDS_TAG.search(text)
        return bool(match and self._superclass_pattern.match(match.group(1)))


class ComponentDetector:
    def __init__(self, classifier: ReactClassClassifier):
        self._classifier = classifier
        pragma = classifier.pragma
        self._wrappers = set(_WRAPPER_NAMES) | {f"{pragma}.{name}" for name in _WRAPPER_NAMES}
        self._create_element = {"createElement", f"{pragma}.createElement"}
        self._function_cache: Dict[int, bool] = {}

    def parent_component(self, node: Node) -> Optional[Node]:
        current: Optional[Node] = node
        while current is not None:
            if current.type in FUNCTION_NODE_TYPES:
                if self.is_function_component(current):
                    return current
            elif current.type in CLASS_NODE_TYPES and current.is_named:
                if self._classifier.is_class_component(current):
                    return current
            current = current.parent
        return None

    def is_function_component(self, fn: Node) -> bool:
        cached = self._function_cache.get(fn.id)
        if cached is not None:
            return cached

        result = False
        if fn.type != "method_definition":
            name, wrapped, default_export = self._binding_site(fn)
            if name is None:
                named_ok = wrapped or default_export
            else:
                named_ok = is_capitalized(name)
            result = named_ok and self.returns_jsx_or_null(fn)

        self._function_cache[fn.id] = result
        return result

    def _binding_site(self, fn: Node) -> Tuple[Optional[str], bool, bool]:
        """(name, wrapped in memo/forwardRef, is the default export) for a function."""
        if fn.type in {"function_declaration", "generator_function_declaration"}:
            parent = fn.parent
            default_export = parent is not None and parent.type == "export_statement" and any(
                c.type == "default" for c in parent.children
            )
            return node_text(fn.child_by_field_name("name")) or None, False, default_export

        wrapped = False
        current = fn
        parent = fn.parent
        while parent is not None:
            if parent.type in _TRANSPARENT_EXPRESSIONS:
                current, parent = parent, parent.parent
                continue
            if parent.type == "arguments" and parent.parent is not None and parent.parent.type == "call_expression":
                callee = parent.parent.child_by_field_name("function")
                if node_text(callee) in self._wrappers:
                    wrapped = True
                    current, parent = parent.parent, parent.parent.parent
                    continue
            break

        if parent is None:
            return None, wrapped, False
        if parent.type == "variable_declarator":
            name_node = parent.child_by_field_name("name")
            if name_node is not None and name_node.type == "identifier":
                return node_text(name_node), wrapped, False
        elif parent.type == "assignment_expression":
            left = parent.child_by_field_name("left")
            if left is not None and left.type in {"identifier", "member_expression"}:
                return node_text(left).split(".")[-1], wrapped, False
        elif parent.type == "pair":
            key = parent.child_by_field_name("key")
            if key is not None and key.type in {"property_identifier", "identifier"}:
                return node_text(key), wrapped, False
        elif parent.type == "export_statement":
            return None, wrapped, True

        own_name = fn.child_by_field_name("name")
        if own_name is not None:
            return node_text(own_name), wrapped, False
        return None, wrapped, False

    def returns_jsx_or_null(self, fn: Node) -> bool:
        body = fn.child_by_field_name("body")
        if body is None:
            return False
        if body.type != "statement_block":
            # Arrow function with an expression body
            return self.is_jsx_or_null(body)

        stack = [body]
        while stack:
            node = stack.pop()
            if node.type == "return_statement":
                value = _first_named(node)
                if value is not None and self.is_jsx_or_null(value):
                    return True
                continue
            for child in node.named_children:
                # Returns of nested functions belong to those functions.
                if child.type in FUNCTION_NODE_TYPES or child.type in CLASS_NODE_TYPES:
                    continue
                stack.append(child)
        return False

    def is_jsx_or_null(self, expression: Node) -> bool:
        stack = [expression]
        while stack:
            node = stack.pop()
            if node.type in _JSX_NODE_TYPES:
                return True
            if node.type == "call_expression" and self._is_create_element(node):
                return True
            if node.type in _TRANSPARENT_EXPRESSIONS:
                inner = _first_named(node)
                if inner is not None:
                    stack.append(inner)
            elif node.type == "ternary_expression":
                for field_name in ("consequence", "alternative"):
                    branch = node.child_by_field_name(field_name)
                    if branch is not None:
                        stack.append(branch)
            elif node.type == "binary_expression":
                operator = node.child_by_field_name("operator")
                if operator is not None and operator.type in _LOGICAL_OPERATORS:
                    for field_name in ("left", "right"):
                        side = node.child_by_field_name(field_name)
                        if side is not None:
                            stack.append(side)
        return False

    def _is_create_element(self, call: Node) -> bool:
        callee = call.child_by_field_name("function")
        return callee is not None and "".join(node_text(callee).split()) in self._create_element

from dataclasses import dataclass
from typing import List, Optional

from tree_sitter import Node

from use_client_lint.config import DIRECTIVE, DIRECTIVE_STATEMENT
from use_client_lint.models import Fix
from use_client_lint.services.parsing import node_text

# Named children of `program` that are not statements.
_NON_STATEMENT_TYPES = {"comment", "hash_bang_line"}


@dataclass
class ModuleInfo:
    root: Node
    statements: List[Node]
    directive: Optional[Node] = None

    @property
    def has_directive(self) -> bool:
        return self.directive is not None


def top_level_statements(root: Node) -> List[Node]:
    return [c for c in root.named_children if c.type not in _NON_STATEMENT_TYPES]


def _string_statement_value(statement: Node) -> Optional[str]:
    """Value of a `'...';` or `('...');` expression statement, or None for anything else."""
    if statement.type != "expression_statement":
        return None
    expressions = statement.named_children
    if len(expressions) != 1:
        return None
    expression = expressions[0]
    while expression.type == "parenthesized_expression" and len(expression.named_children) == 1:
        expression = expression.named_children[0]
    if expression.type != "string":
        return None
    raw = node_text(expression)
    if len(raw) < 2 or raw[0] not in "'\"" or raw[-1] != raw[0]:
        return None
    return raw[1:-1]


def find_directive(statements: List[Node], strict: bool = False) -> Optional[Node]:
    """
    Return the statement holding the `"use client"` directive, if any.

    By default every top-level statement is checked, so a directive that is
    not in leading position still counts. With `strict`, only the directive
    prologue (the leading run of string statements) is considered.
    """
    for statement in statements:
        value = _string_statement_value(statement)
        if value == DIRECTIVE:
            return statement
        if strict and value is None:
            return None
    return None


def analyze_module(root: Node, strict: bool = False) -> ModuleInfo:
    statements = top_level_statements(root)
    return ModuleInfo(root=root, statements=statements, directive=find_directive(statements, strict))


def insertion_fix(module: ModuleInfo) -> Optional[Fix]:
    """Insert the directive as the new first statement, followed by a blank line."""
    if not module.statements:
        return None
    first = module.statements[0]
    on_first_line = first.start_point.row == 0
    text = ("" if on_first_line else "\n") + DIRECTIVE_STATEMENT + "\n\n"
    return Fix(range=(first.start_byte, first.start_byte), text=text)


def removal_fix(statement: Node) -> Fix:
    return Fix(range=(statement.start_byte, statement.end_byte), text="")

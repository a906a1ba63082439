from pathlib import Path
from typing import Optional, Union

import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Node, Parser, Tree

from use_client_lint.config import TYPESCRIPT_SUFFIXES

# Load TypeScript and TSX grammars. Plain JS/JSX goes through the TSX grammar,
# which is a superset that understands JSX.
TYPESCRIPT_LANGUAGE = Language(tstypescript.language_typescript())
TSX_LANGUAGE = Language(tstypescript.language_tsx())

_ts_parser: Optional[Parser] = None
_tsx_parser: Optional[Parser] = None


class SourceParseError(ValueError):
    """Raised when tree-sitter cannot produce an error-free tree for a module."""

    def __init__(self, filename: str, line: int, column: int):
        self.filename = filename
        self.line = line
        self.column = column
        super().__init__(f"{filename}:{line}:{column}: syntax error")


def get_parser(filename: str) -> Parser:
    global _ts_parser, _tsx_parser
    if Path(filename).suffix.lower() in TYPESCRIPT_SUFFIXES:
        if _ts_parser is None:
            _ts_parser = Parser(TYPESCRIPT_LANGUAGE)
        return _ts_parser
    if _tsx_parser is None:
        _tsx_parser = Parser(TSX_LANGUAGE)
    return _tsx_parser


def _first_error(node: Node) -> Optional[Node]:
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "ERROR" or current.is_missing:
            return current
        if current.has_error:
            stack.extend(reversed(current.children))
    return None


def parse_source(source: Union[str, bytes], filename: str = "module.tsx") -> Tree:
    """
    Parse a module and return its tree.

    The detection rules assume a well-formed tree, so any syntax error aborts
    the analysis here with a `SourceParseError` pointing at the first problem.
    """
    content = source.encode("utf-8") if isinstance(source, str) else source
    tree = get_parser(filename).parse(content)
    if tree.root_node.has_error:
        bad = _first_error(tree.root_node) or tree.root_node
        raise SourceParseError(filename, bad.start_point.row + 1, bad.start_point.column + 1)
    return tree


def node_text(node: Optional[Node]) -> str:
    if node is None:
        return ""
    return node.text.decode("utf-8", errors="ignore")

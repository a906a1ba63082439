from use_client_lint.services.parsing import parse_source
from use_client_lint.services.scope_analysis import (
    ScopeKind,
    ScopeManager,
    collect_undeclared_references,
)


def _scopes(code: str, filename: str = "module.tsx") -> ScopeManager:
    tree = parse_source(code, filename)
    return ScopeManager(tree.root_node)


def _undeclared(code: str, filename: str = "module.tsx") -> frozenset:
    return collect_undeclared_references(_scopes(code, filename).module_scope)


def _find(node, node_type: str, text: str):
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == node_type and current.text.decode("utf-8") == text:
            return current
        stack.extend(reversed(current.children))
    return None


def test_imports_and_locals_resolve() -> None:
    code = """import { useState } from "react";
const local = 1;
function f(param) { return param + local + globalThing; }
window.addEventListener("x", f);
"""
    assert _undeclared(code) == {"globalThing", "window"}


def test_var_is_hoisted_to_function_scope() -> None:
    code = """function f() {
  if (true) { var hoisted = 1; }
  return hoisted;
}
"""
    assert _undeclared(code) == frozenset()


def test_let_is_block_scoped() -> None:
    code = """function f() {
  { let inner = 1; }
  return inner;
}
"""
    assert _undeclared(code) == {"inner"}


def test_type_positions_are_not_references() -> None:
    code = """interface Props { el: HTMLElement }
type Handler = (e: MouseEvent) => void;
let node: HTMLDivElement | null = null;
export function g(p: Props): Handler { return () => p; }
"""
    assert _undeclared(code, "module.ts") == frozenset()


def test_type_only_import_binds_nothing() -> None:
    code = """import type { Config } from "./config";
const c: Config = load();
"""
    assert _undeclared(code, "module.ts") == {"load"}


def test_catch_parameter() -> None:
    code = "try { run(); } catch (err) { report(err); }\n"
    assert _undeclared(code) == {"run", "report"}


def test_named_function_expression_sees_itself() -> None:
    code = "const f = function fact(n) { return n ? fact(n - 1) : 1; };\n"
    assert _undeclared(code) == frozenset()


def test_class_name_visible_in_body() -> None:
    code = "class Tree { clone() { return new Tree(); } }\n"
    assert _undeclared(code) == frozenset()


def test_arguments_only_in_non_arrow_functions() -> None:
    assert _undeclared("function f() { return arguments.length; }\n") == frozenset()
    assert _undeclared("const g = () => arguments;\n") == {"arguments"}


def test_jsx_names_are_not_references() -> None:
    code = "export const A = () => <Widget title={label} onClick={handler} />;\n"
    assert _undeclared(code) == {"label", "handler"}


def test_exports_and_reexports() -> None:
    assert _undeclared('export { a as b } from "./m";\n') == frozenset()
    assert _undeclared("const a = 1;\nexport { a as b };\n") == frozenset()


def test_shorthand_property_is_a_reference() -> None:
    assert _undeclared("const o = { missing };\n") == {"missing"}


def test_destructured_and_rest_parameters() -> None:
    code = "function f({ a, b: [c] }, ...rest) { return a + c + rest.length; }\n"
    assert _undeclared(code) == frozenset()


def test_default_value_is_a_reference() -> None:
    code = "function f({ size = fallback } = {}) { return size; }\n"
    assert _undeclared(code) == {"fallback"}


def test_scope_for_nested_block() -> None:
    code = """const top = 1;
function Outer() {
  if (top) {
    const inside = 2;
  }
}
"""
    manager = _scopes(code)
    inside = _find(manager.root, "identifier", "inside")

    scope = manager.scope_for(inside)

    assert scope.kind == ScopeKind.BLOCK
    assert "inside" in scope.variables
    assert scope.upper.kind == ScopeKind.FUNCTION
    assert scope.upper.upper is manager.module_scope
    assert manager.is_binding(inside)


def test_function_body_shares_function_scope() -> None:
    code = "function f(a) { const b = a; }\n"
    manager = _scopes(code)

    scope = manager.scope_for(_find(manager.root, "identifier", "b"))

    assert scope.kind == ScopeKind.FUNCTION
    assert {"a", "b", "arguments"} <= scope.bound_names


def test_function_declaration_binds_in_enclosing_scope() -> None:
    manager = _scopes("function outer() {}\n")

    definition = manager.module_scope.variables["outer"].defs[0]

    assert definition.kind == "function-name"
    assert definition.declaration.type == "function_declaration"


def test_unresolved_reference_escapes_every_scope() -> None:
    code = "function f() { if (x) { return y; } }\n"
    manager = _scopes(code)

    inner = manager.scope_for(_find(manager.root, "identifier", "y"))

    assert [r.name for r in inner.through] == ["y"]
    assert {r.name for r in manager.module_scope.through} == {"x", "y"}
    assert all(r.resolved is None for r in manager.module_scope.through)

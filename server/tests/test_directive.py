from use_client_lint.services.directive import (
    analyze_module,
    insertion_fix,
    removal_fix,
    top_level_statements,
)
from use_client_lint.services.parsing import parse_source


def _module(code: str, strict: bool = False):
    return analyze_module(parse_source(code).root_node, strict=strict)


def test_single_and_double_quotes() -> None:
    assert _module("'use client';\nexport const a = 1;\n").has_directive
    assert _module('"use client"\nexport const a = 1;\n').has_directive


def test_parenthesized_directive() -> None:
    code = "('use client');\nexport const a = 1;\n"
    module = _module(code)

    assert module.has_directive
    assert removal_fix(module.directive).range == (0, len("('use client');"))


def test_other_strings_are_not_the_directive() -> None:
    assert not _module("'use strict';\n").has_directive
    assert not _module("`use client`;\n").has_directive
    assert not _module("'use  client';\n").has_directive
    assert not _module("const mode = 'use client';\n").has_directive


def test_nested_directive_does_not_count() -> None:
    code = "export function Foo() {\n  'use client';\n  return null;\n}\n"
    assert not _module(code).has_directive


def test_hashbang_and_comments_are_not_statements() -> None:
    code = "#!/usr/bin/env node\n// banner\n'use client';\nrun();\n"
    module = _module(code, strict=True)

    assert module.has_directive
    assert module.statements[0].id == module.directive.id
    assert len(top_level_statements(module.root)) == 2


def test_strict_position_only_reads_the_prologue() -> None:
    prologue = "'use strict';\n'use client';\nrun();\n"
    late = "run();\n'use client';\n"

    assert _module(prologue, strict=True).has_directive
    assert not _module(late, strict=True).has_directive
    assert _module(late).has_directive


def test_insertion_on_first_line() -> None:
    fix = insertion_fix(_module("run();\n"))

    assert fix.range == (0, 0)
    assert fix.text == "'use client';\n\n"


def test_insertion_below_comment() -> None:
    code = "// c\nrun();\n"

    fix = insertion_fix(_module(code))

    assert fix.range == (5, 5)
    assert fix.text == "\n'use client';\n\n"


def test_insertion_uses_byte_offsets() -> None:
    code = "// café\nrun();\n"

    fix = insertion_fix(_module(code))

    offset = len("// café\n".encode("utf-8"))
    assert fix.range == (offset, offset)


def test_no_statements_no_insertion() -> None:
    assert insertion_fix(_module("// only a comment\n")) is None


def test_removal_covers_the_statement() -> None:
    code = "run();\n\"use client\";\n"
    module = _module(code)

    fix = removal_fix(module.directive)

    assert fix.range == (7, 7 + len('"use client";'))
    assert fix.text == ""

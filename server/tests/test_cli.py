import io
import json
from pathlib import Path

import pytest

from use_client_lint import run

HOOK_COMPONENT = "export function Counter() { const [n] = useState(0); return <b>{n}</b>; }\n"


def _run(*argv: str):
    out = io.StringIO()
    code = run.main(list(argv), stdout=out)
    return code, out.getvalue()


def test_reports_problems_in_stylish_format(tmp_path: Path) -> None:
    f = tmp_path / "Counter.tsx"
    f.write_text(HOOK_COMPONENT, encoding="utf-8")

    code, out = _run(str(tmp_path))

    assert code == 1
    assert str(f) in out
    assert f"1:{HOOK_COMPONENT.index('useState') + 1}  error  useState only works" in out
    assert "use-client" in out
    assert "1 problem (1 errors, 0 warnings)" in out


def test_json_format(tmp_path: Path) -> None:
    (tmp_path / "Counter.tsx").write_text(HOOK_COMPONENT, encoding="utf-8")

    code, out = _run(str(tmp_path), "--format", "json")

    data = json.loads(out)
    assert code == 1
    assert data["errorCount"] == 1
    assert data["files"][0]["diagnostics"][0]["messageId"] == "addUseClientHooks"


def test_clean_project_exits_zero(tmp_path: Path) -> None:
    (tmp_path / "Title.tsx").write_text("export function Title() { return <h1 />; }\n", encoding="utf-8")

    code, out = _run(str(tmp_path))

    assert code == 0
    assert out == ""


def test_fix_writes_files(tmp_path: Path) -> None:
    f = tmp_path / "Counter.tsx"
    f.write_text(HOOK_COMPONENT, encoding="utf-8")

    code, out = _run(str(tmp_path), "--fix")

    assert code == 0
    assert f.read_text(encoding="utf-8") == "'use client';\n\n" + HOOK_COMPONENT
    assert "Fixed 1 file(s)." in out


def test_option_flags(tmp_path: Path) -> None:
    (tmp_path / "Foo.tsx").write_text("export function Foo() { useFoo(); return <div />; }\n", encoding="utf-8")
    (tmp_path / "Anim.tsx").write_text("export function Anim() { return <motion.div />; }\n", encoding="utf-8")

    code, _ = _run(str(tmp_path), "--allowed-server-hook", "useFoo", "--client-namespace", "animated")

    assert code == 0


def test_parse_errors_fail_the_run(tmp_path: Path) -> None:
    (tmp_path / "broken.tsx").write_text("export function ( {\n", encoding="utf-8")

    code, out = _run(str(tmp_path))

    assert code == 1
    assert "Parsing error:" in out


def test_missing_path_exits(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        _run(str(tmp_path / "missing"))
    assert "Path does not exist" in str(excinfo.value)


def test_invalid_config_exits(tmp_path: Path) -> None:
    (tmp_path / "Counter.tsx").write_text(HOOK_COMPONENT, encoding="utf-8")
    config = tmp_path / "opts.json"
    config.write_text('{"allowedHooks": []}', encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        _run(str(tmp_path), "--config", str(config))
    assert "invalid rule options" in str(excinfo.value)

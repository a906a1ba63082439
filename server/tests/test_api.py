from pathlib import Path

from fastapi.testclient import TestClient

from use_client_lint.main import app

HOOK_COMPONENT = "export default function Foo(){ const [s,set]=useState(0); return <div/>; }"


def _client() -> TestClient:
    return TestClient(app)


def test_lint_source() -> None:
    client = _client()
    resp = client.post("/api/lint", json={"source": HOOK_COMPONENT, "filename": "Foo.tsx"})

    assert resp.status_code == 200
    data = resp.json()
    assert data["filename"] == "Foo.tsx"
    assert len(data["diagnostics"]) == 1
    d = data["diagnostics"][0]
    assert d["ruleId"] == "use-client"
    assert d["messageId"] == "addUseClientHooks"
    assert d["line"] == 1
    assert d["fix"] == {"range": [0, 0], "text": "'use client';\n\n"}


def test_lint_source_with_options_and_fix() -> None:
    client = _client()
    resp = client.post(
        "/api/lint",
        json={
            "source": "function Foo(){ useFoo(); return <div/>; }",
            "options": {"allowedServerHooks": ["useFoo"]},
        },
    )
    assert resp.status_code == 200
    assert resp.json()["diagnostics"] == []

    resp = client.post("/api/lint", json={"source": HOOK_COMPONENT, "fix": True})
    assert resp.status_code == 200
    data = resp.json()
    assert data["output"] == "'use client';\n\n" + HOOK_COMPONENT
    assert data["diagnostics"] == []


def test_lint_source_syntax_error() -> None:
    client = _client()
    resp = client.post("/api/lint", json={"source": "export function Foo( {"})

    assert resp.status_code == 422
    assert "syntax error" in resp.json()["detail"]


def test_lint_source_rejects_unknown_options() -> None:
    client = _client()
    resp = client.post("/api/lint", json={"source": "", "options": {"allowedHooks": []}})

    assert resp.status_code == 422


def test_lint_path(tmp_path: Path) -> None:
    (tmp_path / "Foo.tsx").write_text(HOOK_COMPONENT, encoding="utf-8")
    (tmp_path / "Bar.tsx").write_text("export const Bar = () => <p />;\n", encoding="utf-8")

    client = _client()
    resp = client.get("/api/lint/path", params={"path": str(tmp_path)})

    assert resp.status_code == 200
    data = resp.json()
    assert data["errorCount"] == 1
    assert data["fixedCount"] == 0
    assert len(data["files"]) == 2


def test_lint_path_never_writes(tmp_path: Path) -> None:
    source = "'use client';\nexport const a = 1;\n"
    f = tmp_path / "a.tsx"
    f.write_text(source, encoding="utf-8")

    client = _client()
    resp = client.get("/api/lint/path", params={"path": str(f), "fix": "true"})

    assert resp.status_code == 200
    assert resp.json()["errorCount"] == 1
    assert f.read_text(encoding="utf-8") == source


def test_fix_path_rewrites_files(tmp_path: Path) -> None:
    f = tmp_path / "a.tsx"
    f.write_text("'use client';\nexport const a = 1;\n", encoding="utf-8")

    client = _client()
    resp = client.post("/api/lint/path/fix", params={"path": str(f)})

    assert resp.status_code == 200
    data = resp.json()
    assert data["fixedCount"] == 1
    assert data["errorCount"] == 0
    assert f.read_text(encoding="utf-8") == "\nexport const a = 1;\n"


def test_fix_path_not_found(tmp_path: Path) -> None:
    client = _client()
    resp = client.post("/api/lint/path/fix", params={"path": str(tmp_path / "missing")})

    assert resp.status_code == 404


def test_lint_path_not_found(tmp_path: Path) -> None:
    client = _client()
    resp = client.get("/api/lint/path", params={"path": str(tmp_path / "missing")})

    assert resp.status_code == 404
    assert resp.json()["detail"] == "Path not found"


def test_lint_path_bad_config(tmp_path: Path) -> None:
    (tmp_path / ".use-client-lint.json").write_text('{"bogus": true}', encoding="utf-8")

    client = _client()
    resp = client.get("/api/lint/path", params={"path": str(tmp_path)})

    assert resp.status_code == 400


def test_rule_metadata() -> None:
    client = _client()
    resp = client.get("/api/lint/rule")

    assert resp.status_code == 200
    data = resp.json()
    assert data["ruleId"] == "use-client"
    assert data["type"] == "problem"
    assert data["fixable"] == "code"
    assert set(data["messages"]) == {
        "addUseClientHooks",
        "addUseClientBrowserAPI",
        "addUseClientCallbacks",
        "addUseClientClassComponent",
        "addUseClientThirdPartyComponent",
        "removeUseClient",
    }
    assert "allowedServerHooks" in data["optionsSchema"]["properties"]

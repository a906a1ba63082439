from use_client_lint.services.globals_table import (
    BROWSER_GLOBALS,
    SERVER_GLOBALS,
    classify_client_only,
    client_only_globals,
)


def test_browser_only_names() -> None:
    names = client_only_globals()
    for name in ("window", "document", "localStorage", "IntersectionObserver", "ResizeObserver", "navigator"):
        assert name in names, name


def test_shared_names_are_not_client_only() -> None:
    names = client_only_globals()
    for name in ("console", "setTimeout", "fetch", "URL", "TextEncoder", "Event", "performance"):
        assert name in BROWSER_GLOBALS, name
        assert name in SERVER_GLOBALS, name
        assert name not in names, name


def test_server_only_names_are_not_client_only() -> None:
    assert "process" not in client_only_globals()


def test_partition_is_a_set_difference() -> None:
    assert classify_client_only({"a", "b"}, {"b", "c"}) == {"a"}
    assert classify_client_only(set(), {"b"}) == frozenset()


def test_partition_is_computed_once() -> None:
    assert client_only_globals() is client_only_globals()

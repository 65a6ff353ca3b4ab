"""Pytest configuration and shared fixtures.

Fixtures are organized by category:
- Module fixtures: module factories and small dependency graphs
- Manifest fixtures: manifest files written to a temp directory
- Logging fixtures: log context isolation
"""

from collections.abc import Callable
from pathlib import Path

import pytest

from module_sequencer.models.module import Module
from module_sequencer.observability.logger import clear_all_context

# =============================================================================
# Module Fixtures
# =============================================================================


@pytest.fixture
def make_module() -> Callable[..., Module]:
    """Factory creating modules from a key and optional dependencies.

    Example:
        def test_something(make_module):
            three = make_module("three")
            two = make_module("two", [three])
    """

    def _make(key: str, dependencies: list | None = None) -> Module:
        return Module(key=key, dependencies=list(dependencies or []))

    return _make


@pytest.fixture
def chain_modules(make_module) -> dict[str, Module]:
    """Chain a -> b -> c (a depends on b, b depends on c)."""
    c = make_module("c")
    b = make_module("b", [c])
    a = make_module("a", [b])
    return {"a": a, "b": b, "c": c}


@pytest.fixture
def cyclic_modules(make_module) -> dict[str, Module]:
    """Two-cycle a <-> b."""
    a = make_module("a")
    b = make_module("b", [a])
    a.depends_on(b)
    return {"a": a, "b": b}


# =============================================================================
# Manifest Fixtures
# =============================================================================


@pytest.fixture
def manifest_file(tmp_path: Path) -> Path:
    """Manifest where 'two' depends on the later 'three'."""
    path = tmp_path / "modules.yaml"
    path.write_text(
        "modules:\n"
        "  - key: one\n"
        "  - key: two\n"
        "    dependencies: [three]\n"
        "  - key: three\n"
        "    metadata:\n"
        "      description: Third module\n"
    )
    return path


@pytest.fixture
def cyclic_manifest_file(tmp_path: Path) -> Path:
    """Manifest where 'a' and 'b' depend on each other."""
    path = tmp_path / "cyclic.yaml"
    path.write_text(
        "modules:\n"
        "  - key: a\n"
        "    dependencies: [b]\n"
        "  - key: b\n"
        "    dependencies: [a]\n"
    )
    return path


@pytest.fixture
def unknown_dependency_manifest_file(tmp_path: Path) -> Path:
    """Manifest where 'one' depends on an undeclared module."""
    path = tmp_path / "unknown.yaml"
    path.write_text(
        "modules:\n"
        "  - key: one\n"
        "    dependencies: [missing]\n"
        "  - key: two\n"
    )
    return path


# =============================================================================
# Logging Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _isolate_log_context():
    """Reset log context between tests."""
    clear_all_context()
    yield
    clear_all_context()

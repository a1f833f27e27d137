"""Shared pytest fixtures for servicewire tests."""

import importlib
import textwrap
import uuid
from collections.abc import Callable
from pathlib import Path

import pytest

from servicewire.container import Container
from servicewire.registry import TypeRegistry

PackageFactory = Callable[[dict[str, str]], str]


@pytest.fixture()
def container() -> Container:
    """Container scanning the ``wired_app`` sample package."""
    return Container("wired_app")


@pytest.fixture()
def registry() -> TypeRegistry:
    """Empty, open registry."""
    return TypeRegistry()


@pytest.fixture()
def make_package(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> PackageFactory:
    """Write a throw-away package under ``tmp_path`` and return its import name.

    Keys are paths relative to the package directory, values are module sources.
    Each package gets a unique name so ``sys.modules`` never leaks between tests.
    """
    monkeypatch.syspath_prepend(str(tmp_path))

    def factory(files: dict[str, str]) -> str:
        name = f"pkg_{uuid.uuid4().hex[:12]}"
        package_dir = tmp_path / name
        package_dir.mkdir()
        (package_dir / "__init__.py").write_text("", encoding="utf-8")
        for relative_path, source in files.items():
            module_path = package_dir / relative_path
            module_path.parent.mkdir(parents=True, exist_ok=True)
            module_path.write_text(textwrap.dedent(source), encoding="utf-8")
        importlib.invalidate_caches()
        return name

    return factory

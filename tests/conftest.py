"""Shared fixtures: throwaway source trees that can be scanned or imported."""

import importlib
import sys
import textwrap
import uuid
from pathlib import Path
from typing import Dict

import pytest


class SourceTree:
    """A source root under ``tmp_path`` holding one uniquely named package."""

    def __init__(self, root: Path, package: str):
        self.root = root
        self.package = package

    def write(self, files: Dict[str, str]) -> None:
        """Write ``{relative path: source}``; ``{pkg}`` in paths and sources is the package name."""
        for relative, source in files.items():
            path = self.root / relative.format(pkg=self.package)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(source).replace("{pkg}", self.package), encoding="utf-8")
        importlib.invalidate_caches()

    def name(self, dotted: str) -> str:
        """``{pkg}.x.Y`` expanded to the real dotted name."""
        return dotted.replace("{pkg}", self.package)


@pytest.fixture
def source_tree(tmp_path, monkeypatch):
    """Source root on sys.path with a fresh package name; its modules are unloaded afterwards."""
    root = tmp_path / "src"
    root.mkdir()
    package = f"pkg_{uuid.uuid4().hex[:12]}"
    monkeypatch.syspath_prepend(str(root))
    yield SourceTree(root, package)
    for name in [m for m in sys.modules if m == package or m.startswith(package + ".")]:
        del sys.modules[name]


SPI_SOURCES = {
    "{pkg}/__init__.py": "",
    "{pkg}/spi/__init__.py": """
        from .greeter import Greeter

        __all__ = ["Greeter"]
    """,
    "{pkg}/spi/greeter.py": """
        from abc import ABC, abstractmethod


        class Greeter(ABC):
            @abstractmethod
            def greet(self, name): ...
    """,
    "{pkg}/impl.py": """
        from services import service_provider
        from {pkg}.spi import Greeter


        @service_provider(Greeter, generate_factory=True)
        class EnglishGreeter(Greeter):
            def greet(self, name):
                return f"Hello, {name}"


        @service_provider(Greeter)
        class FrenchGreeter(Greeter):
            def greet(self, name):
                return f"Bonjour, {name}"
    """,
}


@pytest.fixture
def greeter_tree(source_tree):
    """Package with a Greeter contract and two providers, the first asking for a factory."""
    source_tree.write(SPI_SOURCES)
    return source_tree

"""Loading context for service lookups.

A ``ResourceLoader`` knows where registry files live and how provider and
factory names are turned into Python objects. Lookups use the loader bound
to the current execution context and fall back to the default loader (the
directories on ``sys.path``) when none is bound.
"""

import importlib
import os
import pkgutil
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from types import ModuleType
from typing import Any, Iterable, Iterator, List, Optional, Union


class ResourceLoader:
    """Finds registry resources and resolves dotted names.

    Args:
        roots: Directories searched for resources, in order. Defaults to the
            live contents of ``sys.path``.
    """

    def __init__(self, roots: Optional[Iterable[Union[str, Path]]] = None):
        self._roots = None if roots is None else [Path(root) for root in roots]

    @property
    def roots(self) -> List[Path]:
        if self._roots is not None:
            return list(self._roots)
        # An empty sys.path entry stands for the working directory
        return [Path(entry or os.getcwd()) for entry in sys.path]

    def get_resources(self, name: str) -> List[Path]:
        """Return every file called ``name`` under the roots, first root first."""
        found: List[Path] = []
        seen = set()
        for root in self.roots:
            candidate = root / name
            if not candidate.is_file():
                continue
            key = candidate.resolve()
            if key in seen:
                continue
            seen.add(key)
            found.append(candidate)
        return found

    def import_module(self, name: str) -> ModuleType:
        return importlib.import_module(name)

    def resolve_name(self, name: str) -> Any:
        """Resolve ``pkg.mod.Class`` or ``pkg.mod:Class`` to an object."""
        return pkgutil.resolve_name(name)

    def __repr__(self) -> str:
        roots = "sys.path" if self._roots is None else [str(r) for r in self._roots]
        return f"ResourceLoader(roots={roots})"


DEFAULT_LOADER = ResourceLoader()

_current_loader: ContextVar[Optional[ResourceLoader]] = ContextVar("services_loader", default=None)


def current_loader() -> Optional[ResourceLoader]:
    """The loader bound to the current context, if any."""
    return _current_loader.get()


def get_loader() -> ResourceLoader:
    """The loader bound to the current context, else the default loader."""
    return _current_loader.get() or DEFAULT_LOADER


@contextmanager
def bind_loader(loader: ResourceLoader) -> Iterator[ResourceLoader]:
    """Bind ``loader`` for the duration of the ``with`` block."""
    token = _current_loader.set(loader)
    try:
        yield loader
    finally:
        _current_loader.reset(token)

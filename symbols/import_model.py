"""Symbol model built by importing modules and inspecting their classes."""

import enum
import importlib
import inspect
import logging
import pkgutil
import sys
from contextlib import contextmanager
from pathlib import Path
from types import ModuleType
from typing import TYPE_CHECKING, Any, Dict, Iterable, Iterator, List, Optional

from contracts import AnnotationMirror, ElementKind, Modifier, TypeElement
from services import SERVICE_PROVIDER, get_service_provider, is_subtype, qualified_name
from .base import SymbolModel

if TYPE_CHECKING:
    from diagnostics import Messager


logger = logging.getLogger(__name__)


@contextmanager
def _search_path(roots: List[Path]) -> Iterator[None]:
    """Put ``roots`` in front of ``sys.path`` while importing."""
    added = [str(root) for root in roots if str(root) not in sys.path]
    sys.path[:0] = added
    try:
        yield
    finally:
        for entry in added:
            if entry in sys.path:
                sys.path.remove(entry)


def _nested_classes(cls: type) -> Iterator[type]:
    for value in vars(cls).values():
        if isinstance(value, type) and value.__qualname__ == f"{cls.__qualname__}.{value.__name__}":
            yield value
            yield from _nested_classes(value)


class ImportSymbolModel(SymbolModel):
    """Symbol model over imported modules.

    Packages are walked recursively. Only classes defined in a scanned module
    are declared by it; re-exported classes are attributed to their own module.

    Args:
        modules: Module or package names to import
        messager: Receives a diagnostic for each module that fails to import
        search_path: Directories placed on ``sys.path`` while importing
        recursive: Whether to import the submodules of packages
    """

    def __init__(
        self,
        modules: Iterable[str] = (),
        messager: Optional["Messager"] = None,
        search_path: Iterable[Any] = (),
        recursive: bool = True,
    ):
        super().__init__(messager)
        self.module_names = list(modules)
        self.search_path = [Path(root) for root in search_path]
        self.recursive = recursive
        self._types: Optional[Dict[str, type]] = None
        self._contracts: Dict[str, type] = {}
        self._elements: Dict[str, TypeElement] = {}

    @property
    def name(self) -> str:
        return "import"

    def get_type_elements(self) -> List[TypeElement]:
        return [self._element(cls) for cls in self._scan().values()]

    def get_type_element(self, qualified_name: str) -> Optional[TypeElement]:
        cls = self._scan().get(qualified_name)
        return self._element(cls) if cls is not None else None

    def is_assignable(self, element: TypeElement, contract: TypeElement) -> bool:
        types = self._scan()
        impl = types.get(element.qualified_name)
        target = types.get(contract.qualified_name) or self._contracts.get(contract.qualified_name)
        if impl is None or target is None:
            return super().is_assignable(element, contract)
        return is_subtype(impl, target)

    # ------------------------------------------------------------------

    def _scan(self) -> Dict[str, type]:
        if self._types is not None:
            return self._types
        self._types = {}
        with _search_path(self.search_path):
            for name in self.module_names:
                for module in self._import_all(name):
                    self._collect(module)
        logger.debug("Imported %d classes from %s", len(self._types), self.module_names)
        return self._types

    def _import(self, name: str) -> Optional[ModuleType]:
        try:
            return importlib.import_module(name)
        except Exception as e:
            self._report(f"Could not import {name}: {e}")
            return None

    def _import_all(self, name: str) -> Iterator[ModuleType]:
        module = self._import(name)
        if module is None:
            return
        yield module
        if not self.recursive or not hasattr(module, "__path__"):
            return
        for info in sorted(pkgutil.walk_packages(module.__path__, prefix=name + "."), key=lambda i: i.name):
            submodule = self._import(info.name)
            if submodule is not None:
                yield submodule

    def _collect(self, module: ModuleType) -> None:
        for value in list(vars(module).values()):
            if not isinstance(value, type) or value.__module__ != module.__name__:
                continue
            if "." in value.__qualname__:
                continue
            for cls in [value, *_nested_classes(value)]:
                self._types.setdefault(qualified_name(cls), cls)

    def _element(self, cls: type, with_annotations: bool = True) -> TypeElement:
        key = qualified_name(cls)
        if with_annotations and key in self._elements:
            return self._elements[key]

        if getattr(cls, "_is_protocol", False):
            kind = ElementKind.INTERFACE
        elif issubclass(cls, enum.Enum):
            kind = ElementKind.ENUM
        else:
            kind = ElementKind.CLASS
        modifiers = set()
        if inspect.isabstract(cls):
            modifiers.add(Modifier.ABSTRACT)
        if getattr(cls, "__final__", False):
            modifiers.add(Modifier.FINAL)

        try:
            source = inspect.getsourcefile(cls)
            _, lineno = inspect.getsourcelines(cls)
        except (OSError, TypeError):
            source, lineno = None, None

        element = TypeElement(
            module=cls.__module__,
            qualname=cls.__qualname__,
            kind=kind,
            modifiers=frozenset(modifiers),
            annotations=self._annotations(cls) if with_annotations else [],
            supertypes=[qualified_name(base) for base in cls.__bases__],
            is_package=hasattr(sys.modules.get(cls.__module__), "__path__"),
            source_path=Path(source) if source else None,
            lineno=lineno or None,
        )
        if with_annotations:
            self._elements[key] = element
        return element

    def _annotations(self, cls: type) -> List[AnnotationMirror]:
        marker = get_service_provider(cls)
        if marker is None:
            return []
        values: Dict[str, Any] = {"generate_factory": marker.generate_factory}
        if isinstance(marker.value, type):
            self._contracts.setdefault(qualified_name(marker.value), marker.value)
            values["value"] = self._element(marker.value, with_annotations=False)
        elif isinstance(marker.value, str):
            values["value"] = marker.value
        return [AnnotationMirror(annotation_type=SERVICE_PROVIDER, element_values=values)]

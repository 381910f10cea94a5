"""Base symbol model interface."""

import logging
from abc import ABC, abstractmethod
from collections import deque
from typing import TYPE_CHECKING, Iterable, List, Optional

from contracts import ElementKind, TypeElement

if TYPE_CHECKING:
    from diagnostics import Messager


logger = logging.getLogger(__name__)


class SymbolModel(ABC):
    """Read-only view over the types declared for one processing round."""

    def __init__(self, messager: Optional["Messager"] = None):
        self.messager = messager

    @property
    @abstractmethod
    def name(self) -> str:
        """Symbol model name (ast, import)."""
        pass

    @abstractmethod
    def get_type_elements(self) -> List[TypeElement]:
        """All declared types, in discovery order."""
        pass

    @abstractmethod
    def get_type_element(self, qualified_name: str) -> Optional[TypeElement]:
        """Look up a declared type by its qualified name."""
        pass

    def get_type_reference(self, qualified_name: str) -> TypeElement:
        """The declared type, or an ``OTHER`` placeholder when it is not declared here."""
        element = self.get_type_element(qualified_name)
        if element is not None:
            return element
        module, _, qualname = qualified_name.rpartition(".")
        return TypeElement(module=module, qualname=qualname, kind=ElementKind.OTHER)

    def get_elements_annotated_with(self, annotation_types: Iterable[str]) -> List[TypeElement]:
        """Declared types carrying any of the given markers, in discovery order."""
        names = set(annotation_types)
        return [e for e in self.get_type_elements() if e.get_annotation(names) is not None]

    def is_assignable(self, element: TypeElement, contract: TypeElement) -> bool:
        """Whether ``element`` is ``contract`` or inherits from it.

        Walks the declared supertypes breadth first. Supertypes that are not
        declared in this model end the walk along their branch.
        """
        target = contract.qualified_name
        seen = set()
        queue = deque([element])
        while queue:
            current = queue.popleft()
            if current.qualified_name == target:
                return True
            for name in current.supertypes:
                if name == target:
                    return True
                if name in seen:
                    continue
                seen.add(name)
                parent = self.get_type_element(name)
                if parent is not None:
                    queue.append(parent)
        return False

    def get_binary_name(self, element: TypeElement) -> str:
        return element.binary_name

    def _report(self, message: str) -> None:
        if self.messager is not None:
            self.messager.error(message)
        else:
            logger.warning(message)

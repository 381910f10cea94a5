"""Symbol contracts: a read-only view over declared types and their markers."""

from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, List, Optional
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ElementKind(str, Enum):
    """Kind of a declared type."""
    CLASS = "class"
    INTERFACE = "interface"  # typing.Protocol
    ENUM = "enum"
    OTHER = "other"  # referenced but not declared in the scanned sources


class Modifier(str, Enum):
    """Modifiers that affect whether a type can be registered."""
    ABSTRACT = "abstract"
    FINAL = "final"


class AnnotationMirror(BaseModel):
    """A marker decorator as written on a declaration."""
    model_config = ConfigDict(frozen=True)

    annotation_type: str = Field(..., description="Qualified name of the marker")
    element_values: Dict[str, Any] = Field(
        default_factory=dict,
        description="Arguments given explicitly on the marker, by name",
    )

    def get_value(self, name: str = "value") -> Optional[Any]:
        """Value of the named argument, or None if it was not given."""
        return self.element_values.get(name)


class TypeElement(BaseModel):
    """A declared class."""
    model_config = ConfigDict(frozen=True)

    module: str = Field(..., description="Module declaring the type")
    qualname: str = Field(..., description="Qualified name inside the module")
    kind: ElementKind = Field(default=ElementKind.CLASS)
    modifiers: FrozenSet[Modifier] = Field(default_factory=frozenset)
    annotations: List[AnnotationMirror] = Field(default_factory=list)
    supertypes: List[str] = Field(
        default_factory=list,
        description="Qualified names of the direct base classes",
    )
    is_package: bool = Field(
        default=False,
        description="Whether the declaring module is a package (an __init__.py)",
    )
    source_path: Optional[Path] = Field(default=None)
    lineno: Optional[int] = Field(default=None)

    @property
    def qualified_name(self) -> str:
        return f"{self.module}.{self.qualname}" if self.module else self.qualname

    @property
    def binary_name(self) -> str:
        """Name written to registry files and resolved at runtime."""
        return self.qualified_name

    @property
    def simple_name(self) -> str:
        return self.qualname.rpartition(".")[2]

    @property
    def package_name(self) -> str:
        if self.is_package:
            return self.module
        return self.module.rpartition(".")[0]

    @property
    def is_abstract(self) -> bool:
        return Modifier.ABSTRACT in self.modifiers

    def get_annotation(self, annotation_types: Iterable[str]) -> Optional[AnnotationMirror]:
        """The first marker whose type is one of ``annotation_types``."""
        names = set(annotation_types)
        for mirror in self.annotations:
            if mirror.annotation_type in names:
                return mirror
        return None

    def location(self) -> str:
        """``path:line`` of the declaration when known, else its name."""
        if self.source_path is None:
            return self.qualified_name
        if self.lineno is None:
            return str(self.source_path)
        return f"{self.source_path}:{self.lineno}"

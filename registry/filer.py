"""Output sink for registry files and generated modules."""

import logging
from pathlib import Path
from typing import Optional, Set, TextIO, Union

from config import settings
from services.naming import registry_resource


logger = logging.getLogger(__name__)


class FilerError(OSError):
    """A file cannot be created, typically because it was already created in this run."""


class Filer:
    """Opens registry resources and generated source files.

    Registry files live under the class output root, generated modules under
    the source output root. A module may be created only once per filer;
    resources may be rewritten by later rounds.

    Args:
        class_output: Root receiving ``META-INF/services`` files
        source_output: Root receiving generated modules
        services_dir: Registry directory relative to the class output
        encoding: Text encoding of everything the filer opens
    """

    def __init__(
        self,
        class_output: Union[str, Path],
        source_output: Union[str, Path],
        services_dir: Optional[str] = None,
        encoding: Optional[str] = None,
    ):
        self.class_output = Path(class_output)
        self.source_output = Path(source_output)
        self.services_dir = services_dir or settings.services_dir
        self.encoding = encoding or settings.encoding
        self._created_sources: Set[str] = set()

    def registry_resource(self, contract_name: str) -> str:
        """Relative resource name of a contract's registry file."""
        return registry_resource(contract_name, self.services_dir)

    def resource_path(self, relative_name: str) -> Path:
        return self.class_output / relative_name

    def source_path(self, package: str, module: str) -> Path:
        directory = self.source_output.joinpath(*package.split(".")) if package else self.source_output
        return directory / f"{module}.py"

    def get_resource(self, relative_name: str) -> TextIO:
        """Open an existing resource for reading.

        Raises:
            FileNotFoundError: If the resource does not exist
        """
        return open(self.resource_path(relative_name), "r", encoding=self.encoding)

    def create_resource(self, relative_name: str) -> TextIO:
        """Open a resource for writing, replacing any previous content."""
        path = self.resource_path(relative_name)
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.debug("Writing resource %s", path)
        return open(path, "w", encoding=self.encoding, newline="\n")

    def create_source_file(self, package: str, module: str) -> TextIO:
        """Open a new module for writing.

        Raises:
            FilerError: If this filer already created the module
        """
        name = f"{package}.{module}" if package else module
        if name in self._created_sources:
            raise FilerError(f"Attempt to recreate a file for module {name}")
        path = self.source_path(package, module)
        path.parent.mkdir(parents=True, exist_ok=True)
        handle = open(path, "w", encoding=self.encoding, newline="\n")
        self._created_sources.add(name)
        logger.debug("Writing source %s", path)
        return handle

    @property
    def created_sources(self) -> Set[str]:
        return set(self._created_sources)

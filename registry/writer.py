"""Registry file writer."""

import logging
from pathlib import Path
from typing import Iterable, List

from contracts import RegistryEntry
from diagnostics import Messager
from .filer import Filer


logger = logging.getLogger(__name__)


def render_registry(entry: RegistryEntry) -> str:
    """Registry file content: one name per line, each newline-terminated."""
    return "".join(f"{name}\n" for name in entry.implementations)


class RegistryWriter:
    """Writes merged registry entries through a filer."""

    def __init__(self, filer: Filer, messager: Messager):
        self.filer = filer
        self.messager = messager

    def write(self, entries: Iterable[RegistryEntry]) -> List[Path]:
        """Overwrite the registry file of every non-empty entry.

        Returns:
            Paths that were written successfully
        """
        written: List[Path] = []
        for entry in entries:
            if not entry.implementations:
                continue
            resource = self.filer.registry_resource(entry.contract_name)
            try:
                with self.filer.create_resource(resource) as writer:
                    writer.write(render_registry(entry))
            except OSError as e:
                self.messager.error(f"Could not write {self.filer.resource_path(resource)}: {e}")
                continue
            written.append(self.filer.resource_path(resource))
            logger.debug("Wrote %d names for %s", len(entry.implementations), entry.contract_name)
        return written

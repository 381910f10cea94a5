"""Contract for resolving named properties."""

from abc import ABC, abstractmethod
from typing import Optional


class PropertyResolver(ABC):
    """Resolves a property name such as ``os.name`` to its value."""

    @abstractmethod
    def resolve(self, name: str) -> Optional[str]:
        """Return the property value, or None if the property is unknown."""

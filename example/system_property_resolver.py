"""Property resolver backed by the running interpreter and platform."""

import os
import platform
import sys
from typing import Callable, Dict, Optional

from services import service_provider
from example.spi import PropertyResolver


@service_provider(PropertyResolver, generate_factory=True)
class SystemPropertyResolver(PropertyResolver):
    """Resolves ``os.*`` and ``python.*`` properties, then environment variables."""

    _PROPERTIES: Dict[str, Callable[[], str]] = {
        "os.name": platform.system,
        "os.version": platform.release,
        "os.arch": platform.machine,
        "python.version": platform.python_version,
        "python.implementation": platform.python_implementation,
        "python.compiler": platform.python_compiler,
        "python.build": lambda: " ".join(platform.python_build()),
        "python.executable": lambda: sys.executable,
    }

    def resolve(self, name: str) -> Optional[str]:
        getter = self._PROPERTIES.get(name)
        if getter is not None:
            return getter()
        return os.environ.get(name)

"""Dynamic discovery of contract implementations from registry files."""

import inspect
import re
from pathlib import Path
from typing import Any, Generic, Iterator, List, Optional, Set, Type, TypeVar

from .context import ResourceLoader, get_loader
from .errors import ServiceConfigurationError
from .naming import SERVICES_DIR, registry_resource


S = TypeVar("S")

_NAME_PART = re.compile(r"[.:]")


def qualified_name(cls: type) -> str:
    """Registry key of a class: ``module.QualName``."""
    return f"{cls.__module__}.{cls.__qualname__}"


def is_subtype(cls: type, contract: type) -> bool:
    """Nominal subtype check that also works for non-runtime protocols."""
    try:
        return issubclass(cls, contract)
    except TypeError:
        return contract in inspect.getmro(cls)


def parse_line(source: Path, lineno: int, line: str) -> Optional[str]:
    """Parse one registry line, returning the provider name or None.

    Everything after ``#`` is a comment; blank lines are skipped.
    """
    name = line.split("#", 1)[0].strip()
    if not name:
        return None
    if not all(part.isidentifier() for part in _NAME_PART.split(name)):
        raise ServiceConfigurationError(f"{source}:{lineno}: Illegal provider-class name: {name}")
    return name


class Provider(Generic[S]):
    """Lazy handle on one provider: the type is resolved, the instance is not."""

    def __init__(self, service: Type[S], provider_type: type):
        self.service = service
        self.type = provider_type
        self._instance: Optional[S] = None

    def get(self) -> S:
        if self._instance is None:
            self._instance = _instantiate(self.service, self.type)
        return self._instance

    def __repr__(self) -> str:
        return f"Provider({qualified_name(self.type)})"


def _instantiate(service: type, provider_type: type) -> Any:
    try:
        return provider_type()
    except Exception as e:
        raise ServiceConfigurationError(
            f"{qualified_name(service)}: Provider {qualified_name(provider_type)} could not be instantiated"
        ) from e


class ServiceLoader(Generic[S]):
    """Lazy, restartable sequence of the providers registered for a contract.

    Providers are read from every ``META-INF/services/<contract>`` file the
    loader can see and instantiated on first iteration. Instances are cached,
    so iterating again yields the same objects; ``reload()`` clears the cache.
    """

    def __init__(self, service: Type[S], loader: ResourceLoader, services_dir: str = SERVICES_DIR):
        self.service = service
        self.loader = loader
        self.services_dir = services_dir
        self._providers: List[S] = []
        self._pending: Optional[Iterator[type]] = None

    @classmethod
    def load(cls, service: Type[S], loader: Optional[ResourceLoader] = None) -> "ServiceLoader[S]":
        """Create a loader for ``service`` using the current loading context."""
        return cls(service, loader or get_loader())

    def reload(self) -> None:
        self._providers = []
        self._pending = None

    def __iter__(self) -> Iterator[S]:
        index = 0
        while index < len(self._providers) or self._advance():
            yield self._providers[index]
            index += 1

    def find_first(self) -> Optional[S]:
        """First provider instance, or None when nothing is registered."""
        return next(iter(self), None)

    def stream(self) -> Iterator[Provider[S]]:
        """Yield lazy provider handles without instantiating anything."""
        for provider_type in self._provider_types():
            yield Provider(self.service, provider_type)

    def provider_names(self) -> List[str]:
        """Provider names in lookup order, duplicates removed."""
        names: List[str] = []
        seen: Set[str] = set()
        resource = registry_resource(qualified_name(self.service), self.services_dir)
        for path in self.loader.get_resources(resource):
            try:
                text = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise ServiceConfigurationError(f"{qualified_name(self.service)}: Error reading {path}") from e
            for lineno, line in enumerate(text.splitlines(), start=1):
                name = parse_line(path, lineno, line)
                if name is not None and name not in seen:
                    seen.add(name)
                    names.append(name)
        return names

    def _provider_types(self) -> Iterator[type]:
        for name in self.provider_names():
            yield self._resolve(name)

    def _resolve(self, name: str) -> type:
        try:
            provider_type = self.loader.resolve_name(name)
        except (ImportError, AttributeError, ValueError) as e:
            raise ServiceConfigurationError(f"{qualified_name(self.service)}: Provider {name} not found") from e
        if not isinstance(provider_type, type) or not is_subtype(provider_type, self.service):
            raise ServiceConfigurationError(f"{qualified_name(self.service)}: Provider {name} not a subtype")
        return provider_type

    def _advance(self) -> bool:
        if self._pending is None:
            self._pending = self._provider_types()
        try:
            provider_type = next(self._pending)
        except StopIteration:
            return False
        self._providers.append(_instantiate(self.service, provider_type))
        return True

    def __repr__(self) -> str:
        return f"ServiceLoader[{qualified_name(self.service)}]"

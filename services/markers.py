"""Class decorators read by the service registry generator.

``@service_provider`` marks a concrete class as an implementation of a
contract. At runtime it only records the marker on the class; the registry
files and the optional factory module are produced at build time.

Example:
    @service_provider(PropertyResolver, generate_factory=True)
    class SystemPropertyResolver(PropertyResolver):
        ...
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional, Type, TypeVar


T = TypeVar("T", bound=type)

# Qualified names the generator recognises for the two decorators
SERVICE_PROVIDER = "services.service_provider"
GENERATED = "services.generated"

DEFAULT_GENERATE_FACTORY = False


@dataclass(frozen=True)
class ServiceProviderMarker:
    """Arguments given to ``@service_provider``."""
    value: Optional[type]
    generate_factory: bool = DEFAULT_GENERATE_FACTORY


@dataclass(frozen=True)
class Generated:
    """Arguments given to ``@generated`` on machine-written classes."""
    value: str
    date: Optional[str] = None
    comments: Optional[str] = None


def service_provider(
    value: Optional[type] = None,
    *,
    generate_factory: bool = DEFAULT_GENERATE_FACTORY,
) -> Callable[[T], T]:
    """Mark a class as a provider of ``value``.

    Args:
        value: The contract type the class implements
        generate_factory: Whether a ``<Contract>Factory`` accessor module
            should be generated for the contract

    Returns:
        A decorator returning the class unchanged
    """
    marker = ServiceProviderMarker(value=value, generate_factory=generate_factory)

    def decorate(cls: T) -> T:
        if not isinstance(cls, type):
            raise TypeError(f"@service_provider can only mark classes, got {cls!r}")
        cls.__service_provider__ = marker
        return cls

    return decorate


def generated(value: str, date: Optional[str] = None, comments: Optional[str] = None) -> Callable[[T], T]:
    """Mark a class as written by a code generator."""
    marker = Generated(value=value, date=date, comments=comments)

    def decorate(cls: T) -> T:
        cls.__generated__ = marker
        return cls

    return decorate


def get_service_provider(cls: Type[Any]) -> Optional[ServiceProviderMarker]:
    """Return the marker declared on ``cls`` itself (inherited markers are ignored)."""
    return vars(cls).get("__service_provider__")

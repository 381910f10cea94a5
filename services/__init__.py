"""Runtime support for registered services.

Marker decorators read by the registry generator, the ``ServiceLoader``
discovery mechanism and the ``ServiceFactory`` lookup of generated factories.
"""

from .markers import (
    DEFAULT_GENERATE_FACTORY,
    GENERATED,
    SERVICE_PROVIDER,
    Generated,
    ServiceProviderMarker,
    generated,
    get_service_provider,
    service_provider,
)
from .context import (
    DEFAULT_LOADER,
    ResourceLoader,
    bind_loader,
    current_loader,
    get_loader,
)
from .errors import ServiceConfigurationError, ServiceFactoryError
from .loader import Provider, ServiceLoader, is_subtype, qualified_name
from .factory import ServiceFactory

__all__ = [
    # Markers
    "DEFAULT_GENERATE_FACTORY",
    "GENERATED",
    "SERVICE_PROVIDER",
    "Generated",
    "ServiceProviderMarker",
    "generated",
    "get_service_provider",
    "service_provider",
    # Loading context
    "DEFAULT_LOADER",
    "ResourceLoader",
    "bind_loader",
    "current_loader",
    "get_loader",
    # Discovery
    "Provider",
    "ServiceLoader",
    "is_subtype",
    "qualified_name",
    "ServiceFactory",
    # Errors
    "ServiceConfigurationError",
    "ServiceFactoryError",
]

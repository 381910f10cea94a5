"""Reflective lookup of generated factories."""

import inspect
import sys
from typing import Type, TypeVar

from .context import get_loader
from .errors import ServiceFactoryError
from .loader import is_subtype
from .naming import ACCESSOR_NAME, factory_class_name, factory_module_path, split_package


T = TypeVar("T")


def package_of(service_type: type) -> str:
    """Package holding the factory of ``service_type``.

    A type declared in a package's ``__init__`` belongs to that package itself.
    """
    module = sys.modules.get(service_type.__module__)
    if hasattr(module, "__path__"):
        return service_type.__module__
    package, _ = split_package(service_type.__module__)
    return package


class ServiceFactory:
    """Gets service instances from their generated factories."""

    @staticmethod
    def get_instance(service_type: Type[T]) -> T:
        """Get an instance of a service from its factory.

        The factory must be a class named after the service with ``Factory``
        appended, defined in the ``<snake_case>_factory`` module of the
        service's package, and expose a static ``get_instance()``.

        Args:
            service_type: The type of the service to locate

        Returns:
            The implementation returned by the factory (None when the factory
            found no provider)

        Raises:
            ServiceFactoryError: If the factory cannot be imported or its
                ``get_instance()`` cannot be invoked
        """
        package = package_of(service_type)
        module_name = factory_module_path(package, service_type.__name__)
        try:
            module = get_loader().import_module(module_name)
            factory = getattr(module, factory_class_name(service_type.__name__))
            if not isinstance(inspect.getattr_static(factory, ACCESSOR_NAME), staticmethod):
                raise TypeError(f"{factory.__qualname__}.{ACCESSOR_NAME} is not a static method")
            instance = getattr(factory, ACCESSOR_NAME)()
            if instance is not None and not is_subtype(type(instance), service_type):
                raise TypeError(f"{type(instance).__qualname__} is not a {service_type.__qualname__}")
            return instance
        except Exception as e:
            raise ServiceFactoryError(
                f"Could not find or invoke factory method {ACCESSOR_NAME}() on {module_name}"
            ) from e

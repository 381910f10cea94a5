"""Naming conventions shared by the generator and the runtime lookup."""

import re
from typing import Tuple

# Directory (relative to a class path root) holding the registry files
SERVICES_DIR = "META-INF/services"

FACTORY_SUFFIX = "Factory"
ACCESSOR_NAME = "get_instance"

_FIRST_CAP = re.compile(r"(.)([A-Z][a-z]+)")
_ALL_CAP = re.compile(r"([a-z0-9])([A-Z])")


def snake_case(name: str) -> str:
    """Convert a CamelCase class name to a snake_case module name.

    >>> snake_case("PropertyResolverFactory")
    'property_resolver_factory'
    >>> snake_case("HTTPClientFactory")
    'http_client_factory'
    """
    partial = _FIRST_CAP.sub(r"\1_\2", name)
    return _ALL_CAP.sub(r"\1_\2", partial).lower()


def split_package(module: str) -> Tuple[str, str]:
    """Split ``pkg.sub.mod`` into ``("pkg.sub", "mod")``."""
    if "." not in module:
        return "", module
    package, _, leaf = module.rpartition(".")
    return package, leaf


def factory_class_name(simple_name: str) -> str:
    return simple_name + FACTORY_SUFFIX


def factory_module_name(simple_name: str) -> str:
    return snake_case(factory_class_name(simple_name))


def factory_module_path(package: str, simple_name: str) -> str:
    """Fully qualified module name of the factory generated for a contract.

    The factory lives in the contract's package, next to the module that
    declares the contract.
    """
    module = factory_module_name(simple_name)
    return f"{package}.{module}" if package else module


def registry_resource(contract_name: str, services_dir: str = SERVICES_DIR) -> str:
    """Relative path of the registry file for a contract."""
    return f"{services_dir.rstrip('/')}/{contract_name}"

"""Code generation for contract factory modules."""

from .model import FactorySource
from .factory_generator import FactoryGenerator, create_environment

__all__ = [
    "FactorySource",
    "FactoryGenerator",
    "create_environment",
]

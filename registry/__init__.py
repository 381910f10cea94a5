"""Registry aggregation, persistence and output sink."""

from .filer import Filer, FilerError
from .aggregator import RegistryAggregator, read_registry_lines
from .writer import RegistryWriter, render_registry

__all__ = [
    "Filer",
    "FilerError",
    "RegistryAggregator",
    "read_registry_lines",
    "RegistryWriter",
    "render_registry",
]

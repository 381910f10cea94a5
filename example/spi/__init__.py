"""Service provider interface of the example."""

from .property_resolver import PropertyResolver

__all__ = ["PropertyResolver"]

"""Pydantic contracts for the service registry generator.

All handoffs between the symbol model, resolver, aggregator, writer and
generator are typed through these contracts.
"""

from .symbol_contracts import (
    ElementKind,
    Modifier,
    AnnotationMirror,
    TypeElement,
)

from .diagnostic_contracts import (
    Severity,
    Diagnostic,
)

from .registry_contracts import (
    ProviderBinding,
    GenerationRequest,
    RegistryEntry,
    RoundResult,
)

__all__ = [
    # Symbols
    "ElementKind",
    "Modifier",
    "AnnotationMirror",
    "TypeElement",
    # Diagnostics
    "Severity",
    "Diagnostic",
    # Registry
    "ProviderBinding",
    "GenerationRequest",
    "RegistryEntry",
    "RoundResult",
]

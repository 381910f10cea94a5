"""Contract resolution and validation for marked candidates.

For each class carrying ``@service_provider``, reads the contract given as
the marker's ``value`` and checks that the class can be registered for it.
Failures are reported to the messager and the candidate is dropped; they
never stop the round.
"""

from typing import Iterable, Optional

from contracts import ElementKind, ProviderBinding, TypeElement
from diagnostics import Messager
from services.markers import DEFAULT_GENERATE_FACTORY
from symbols import SymbolModel
from config import settings


class ContractResolver:
    """Resolves and validates the contract declared by a candidate."""

    def __init__(
        self,
        symbols: SymbolModel,
        messager: Messager,
        marker_names: Optional[Iterable[str]] = None,
    ):
        """Initialize the resolver.

        Args:
            symbols: Symbol model of the current round
            messager: Diagnostics sink
            marker_names: Qualified marker names (default from settings)
        """
        self.symbols = symbols
        self.messager = messager
        self.marker_names = set(marker_names or settings.marker_names)

    def resolve(self, element: TypeElement) -> Optional[ProviderBinding]:
        """Validate a candidate and bind it to its contract.

        Returns:
            ProviderBinding, or None if the candidate was rejected
        """
        contract = self.resolve_class(element)
        if not self.is_valid(element, contract):
            return None
        return ProviderBinding(
            contract=contract,
            implementation=element,
            generate_factory=self.generate_factory(element),
        )

    def resolve_class(self, element: TypeElement) -> Optional[TypeElement]:
        """The contract named by the marker's ``value``, or None if absent."""
        mirror = element.get_annotation(self.marker_names)
        if mirror is None:
            return None
        value = mirror.get_value()
        if isinstance(value, str):
            return self.symbols.get_type_reference(value)
        if isinstance(value, TypeElement):
            return self.symbols.get_type_element(value.qualified_name) or value
        return None

    def generate_factory(self, element: TypeElement) -> bool:
        mirror = element.get_annotation(self.marker_names)
        value = mirror.get_value("generate_factory") if mirror is not None else None
        return bool(value) if value is not None else DEFAULT_GENERATE_FACTORY

    def is_valid(self, element: TypeElement, contract: Optional[TypeElement]) -> bool:
        if element.kind != ElementKind.CLASS or element.is_abstract:
            self.messager.error(f"{element.qualified_name} must be a concrete class", element)
            return False
        elif contract is None:
            self.messager.error("Missing required value argument", element)
            return False
        # Validate the class implements or extends the contract
        elif not self.symbols.is_assignable(element, contract):
            self.messager.error(
                f"Type {self.symbols.get_binary_name(element)} is not assignable "
                f"from {self.symbols.get_binary_name(contract)}",
                element,
            )
            return False
        return True

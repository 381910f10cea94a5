"""Registry contracts: resolved providers, registry entries and round results."""

from pathlib import Path
from typing import Iterable, List

from pydantic import BaseModel, ConfigDict, Field

from .symbol_contracts import TypeElement
from .diagnostic_contracts import Diagnostic, Severity


class ProviderBinding(BaseModel):
    """A validated candidate together with the contract it provides."""
    model_config = ConfigDict(frozen=True)

    contract: TypeElement = Field(..., description="Declared contract type")
    implementation: TypeElement = Field(..., description="Concrete provider class")
    generate_factory: bool = Field(default=False, description="Whether a factory was requested")


class GenerationRequest(BaseModel):
    """Request to generate the factory module for one contract."""
    model_config = ConfigDict(frozen=True)

    contract: TypeElement
    generate_factory: bool = True


class RegistryEntry(BaseModel):
    """Ordered, duplicate-free implementation names for one contract."""
    contract_name: str = Field(..., description="Binary name of the contract")
    implementations: List[str] = Field(default_factory=list)

    def add(self, name: str) -> bool:
        """Append ``name`` unless present. Returns True if it was added."""
        if name in self.implementations:
            return False
        self.implementations.append(name)
        return True

    def merge(self, names: Iterable[str]) -> int:
        """Append every name not yet present, keeping their order."""
        return sum(1 for name in names if self.add(name))

    def __len__(self) -> int:
        return len(self.implementations)


class RoundResult(BaseModel):
    """Summary of one processing round."""
    entries: List[RegistryEntry] = Field(default_factory=list)
    generation_requests: List[GenerationRequest] = Field(default_factory=list)
    registry_files: List[Path] = Field(default_factory=list)
    generated_sources: List[Path] = Field(default_factory=list)
    diagnostics: List[Diagnostic] = Field(default_factory=list)

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.ERROR]

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def get_entry(self, contract_name: str) -> RegistryEntry:
        for entry in self.entries:
            if entry.contract_name == contract_name:
                return entry
        raise KeyError(f"No registry entry for {contract_name}")

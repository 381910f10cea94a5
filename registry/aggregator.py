"""Registry aggregation for one processing round.

Groups validated providers by contract, keeping discovery order, and merges
each group with the registry file already on disk. Round-discovered names
come first, followed by names from the existing file that are not already
present. Nothing is ever removed.
"""

import logging
from typing import Dict, List, Optional, TextIO

from contracts import GenerationRequest, ProviderBinding, RegistryEntry, TypeElement
from diagnostics import Messager
from .filer import Filer


logger = logging.getLogger(__name__)


def read_registry_lines(reader: TextIO) -> List[str]:
    """Every line of a registry file, terminators stripped, nothing skipped."""
    return [line[:-1] if line.endswith("\n") else line for line in reader]


class RegistryAggregator:
    """Maps contract binary names to ordered implementation sets."""

    def __init__(self):
        self._entries: Dict[str, RegistryEntry] = {}
        self._contracts: Dict[str, TypeElement] = {}
        self._requests: List[GenerationRequest] = []

    def add(self, binding: ProviderBinding) -> Optional[GenerationRequest]:
        """Register one provider.

        Returns:
            The generation request enqueued when this binding is the first
            for its contract and asks for a factory, else None
        """
        key = binding.contract.binary_name
        entry = self._entries.get(key)
        request = None
        if entry is None:
            entry = RegistryEntry(contract_name=key)
            self._entries[key] = entry
            self._contracts[key] = binding.contract
            # Generate the factory if required
            if binding.generate_factory:
                request = GenerationRequest(contract=binding.contract)
                self._requests.append(request)
        entry.add(binding.implementation.binary_name)
        return request

    def merge_existing(self, filer: Filer, messager: Messager) -> None:
        """Append the names already registered on disk for every touched contract."""
        for key, entry in self._entries.items():
            resource = filer.registry_resource(key)
            try:
                with filer.get_resource(resource) as reader:
                    added = entry.merge(read_registry_lines(reader))
            except FileNotFoundError:
                # No previous registry file: nothing to merge
                continue
            except (OSError, UnicodeDecodeError) as e:
                messager.error(f"Could not read {filer.resource_path(resource)}: {e}")
                continue
            logger.debug("Merged %d existing names into %s", added, key)

    @property
    def entries(self) -> List[RegistryEntry]:
        return list(self._entries.values())

    @property
    def generation_requests(self) -> List[GenerationRequest]:
        return list(self._requests)

    def get_contract(self, contract_name: str) -> TypeElement:
        return self._contracts[contract_name]

    def __contains__(self, contract_name: str) -> bool:
        return contract_name in self._entries

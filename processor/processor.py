"""Service provider processor - drives one processing round.

A round:
1. Finds the classes carrying ``@service_provider`` in the symbol model
2. Resolves and validates each one's contract
3. Groups providers by contract and merges with the registry files on disk
4. Writes the merged registry files
5. Generates a factory module for each newly seen contract that asked for one
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Set, Union

from contracts import RoundResult
from diagnostics import Messager
from registry import Filer, RegistryAggregator, RegistryWriter
from resolver import ContractResolver
from codegen import FactoryGenerator
from symbols import SymbolModel, get_symbol_model
from config import settings


logger = logging.getLogger(__name__)


class ServiceProviderProcessor:
    """Builds service registries from marked providers.

    Holds no state between rounds besides what the filer has written.
    """

    def __init__(
        self,
        filer: Filer,
        messager: Optional[Messager] = None,
        marker_names: Optional[Iterable[str]] = None,
        generator: Optional[FactoryGenerator] = None,
    ):
        """Initialize the processor.

        Args:
            filer: Sink for registry files and generated modules
            messager: Diagnostics sink (a silent one is created if omitted)
            marker_names: Qualified marker names (default from settings)
            generator: Factory generator (default writes through ``filer``)
        """
        self.filer = filer
        self.messager = messager or Messager()
        self.marker_names = list(marker_names or settings.marker_names)
        self.generator = generator or FactoryGenerator(filer, self.messager)

    def get_supported_annotation_types(self) -> Set[str]:
        return set(self.marker_names)

    def process(self, round_env: SymbolModel) -> RoundResult:
        """Run one processing round over ``round_env``.

        Returns:
            RoundResult with the merged entries, written files and the
            diagnostics reported during the round
        """
        first_diagnostic = len(self.messager.diagnostics)

        # Only rounds that contain marked classes produce anything
        implementations = round_env.get_elements_annotated_with(self.marker_names)
        if not implementations:
            return RoundResult(diagnostics=self.messager.since(first_diagnostic))
        logger.debug("Processing %d candidates with the %s symbol model", len(implementations), round_env.name)

        resolver = ContractResolver(round_env, self.messager, self.marker_names)
        aggregator = RegistryAggregator()
        for impl in implementations:
            binding = resolver.resolve(impl)
            if binding is not None:
                aggregator.add(binding)

        # Check for existing files
        aggregator.merge_existing(self.filer, self.messager)

        registry_files = RegistryWriter(self.filer, self.messager).write(aggregator.entries)

        generated_sources: List[Path] = []
        for request in aggregator.generation_requests:
            path = self.generator.generate(request)
            if path is not None:
                generated_sources.append(path)

        return RoundResult(
            entries=aggregator.entries,
            generation_requests=aggregator.generation_requests,
            registry_files=registry_files,
            generated_sources=generated_sources,
            diagnostics=self.messager.since(first_diagnostic),
        )


def process_sources(
    sources: Iterable[Union[str, Path]] = (),
    modules: Iterable[str] = (),
    class_output: Optional[Union[str, Path]] = None,
    source_output: Optional[Union[str, Path]] = None,
    symbol_model: Optional[str] = None,
    messager: Optional[Messager] = None,
) -> RoundResult:
    """Convenience function to run a single round over source roots.

    Args:
        sources: Source roots to scan (and to import from, for the import model)
        modules: Modules to import (import model only)
        class_output: Root for registry files (default: settings, else first source root)
        source_output: Root for generated modules (default: settings, else first source root)
        symbol_model: Symbol model name (default from settings)
        messager: Diagnostics sink

    Returns:
        RoundResult for the round
    """
    roots = [Path(s) for s in sources]
    default_root = roots[0] if roots else None
    messager = messager or Messager()
    filer = Filer(
        class_output=Path(class_output) if class_output else settings.get_class_output_path(default_root),
        source_output=Path(source_output) if source_output else settings.get_source_output_path(default_root),
    )
    model = get_symbol_model(symbol_model, sources=roots, modules=modules, messager=messager)
    processor = ServiceProviderProcessor(filer, messager)
    return processor.process(model)

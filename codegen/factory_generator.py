"""Generation of ``<Contract>Factory`` accessor modules."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from contracts import GenerationRequest, TypeElement
from diagnostics import Messager
from registry import Filer
from config import settings
from .model import FactorySource


logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
FACTORY_TEMPLATE = "factory.py.j2"


def _local_now() -> datetime:
    return datetime.now().astimezone()


def create_environment() -> Environment:
    """Jinja2 environment for Python source templates."""
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=False,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )
    env.filters["pyrepr"] = repr
    return env


class FactoryGenerator:
    """Writes one factory module per generation request.

    The factory loads the contract's providers through ``ServiceLoader`` once,
    when the module is imported, and keeps the first one (or None).
    """

    def __init__(
        self,
        filer: Filer,
        messager: Messager,
        generator_name: Optional[str] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize the generator.

        Args:
            filer: Sink for the generated modules
            messager: Diagnostics sink
            generator_name: Name recorded in @generated (default from settings)
            clock: Source of the generation timestamp, timezone-aware
        """
        self.filer = filer
        self.messager = messager
        self.generator_name = generator_name or settings.generator_name
        self.clock = clock or _local_now
        self._env = create_environment()

    def build(self, contract: TypeElement) -> FactorySource:
        date = self.clock().strftime(settings.timestamp_format)
        return FactorySource.for_contract(contract, generator=self.generator_name, date=date)

    def render(self, source: FactorySource) -> str:
        return self._env.get_template(FACTORY_TEMPLATE).render(source=source)

    def generate(self, request: GenerationRequest) -> Optional[Path]:
        """Write the factory module for the request's contract.

        Returns:
            Path of the written module, or None if it could not be written
        """
        source = self.build(request.contract)
        text = self.render(source)
        try:
            with self.filer.create_source_file(source.package, source.module_name) as writer:
                writer.write(text)
        except OSError as e:
            self.messager.error(f"Error generating factory class: {e}", request.contract)
            return None
        path = self.filer.source_path(source.package, source.module_name)
        logger.debug("Generated %s for %s", source.qualified_module, source.contract_name)
        return path

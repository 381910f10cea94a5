"""Configuration settings for the service registry generator."""

from dotenv import load_dotenv

from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List, Optional
from pathlib import Path

from services.markers import SERVICE_PROVIDER
from services.naming import SERVICES_DIR

# Load .env into os.environ before the settings are read
load_dotenv()


class Settings(BaseSettings):
    """Global settings for the generator.

    Settings can be overridden via environment variables with SERVICE_REGISTRY_ prefix.
    Example: SERVICE_REGISTRY_CLASS_OUTPUT_DIR=./build/classes
    """

    # Markers
    marker_names: List[str] = Field(
        default=[SERVICE_PROVIDER, "services.markers.service_provider"],
        description="Qualified decorator names that mark a service provider",
    )

    # Symbol model
    symbol_model: str = Field(
        default="ast",
        description="Symbol model used to find candidates (ast, import)",
    )
    ignore_dirs: List[str] = Field(
        default=[
            ".git", "__pycache__", ".venv", "venv", "node_modules",
            "dist", "build", ".pytest_cache", ".mypy_cache", ".tox",
        ],
        description="Directory names skipped while scanning source roots",
    )

    # Outputs
    services_dir: str = Field(
        default=SERVICES_DIR,
        description="Registry directory, relative to the class output root",
    )
    class_output_dir: Optional[str] = Field(
        default=None,
        description="Root receiving registry files (default: first source root)",
    )
    source_output_dir: Optional[str] = Field(
        default=None,
        description="Root receiving generated modules (default: first source root)",
    )
    encoding: str = Field(
        default="utf-8",
        description="Encoding of sources, registry files and generated modules",
    )

    # Generated code
    generator_name: str = Field(
        default="processor.ServiceProviderProcessor",
        description="Name recorded in the @generated marker of factory modules",
    )
    timestamp_format: str = Field(
        default="%Y-%m-%dT%H:%M:%S%z",
        description="strftime pattern of the @generated date",
    )

    model_config = {
        "env_prefix": "SERVICE_REGISTRY_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    def get_class_output_path(self, default: Optional[Path] = None) -> Path:
        """Class output root as Path object."""
        if self.class_output_dir:
            return Path(self.class_output_dir)
        return Path(default) if default is not None else Path.cwd()

    def get_source_output_path(self, default: Optional[Path] = None) -> Path:
        """Generated source root as Path object."""
        if self.source_output_dir:
            return Path(self.source_output_dir)
        return Path(default) if default is not None else Path.cwd()


# Create singleton instance
settings = Settings()

"""Processor module driving service registry rounds."""

from .processor import ServiceProviderProcessor, process_sources

__all__ = [
    "ServiceProviderProcessor",
    "process_sources",
]

"""Resolver module for contract resolution and candidate validation."""

from .contract_resolver import ContractResolver

__all__ = [
    "ContractResolver",
]

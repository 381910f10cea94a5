"""Diagnostics channel shared by every processing stage."""

from .messager import Messager

__all__ = [
    "Messager",
]

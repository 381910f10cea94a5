"""Symbol model abstraction over declared types."""

from .base import SymbolModel
from .ast_model import AstSymbolModel
from .import_model import ImportSymbolModel
from .factory import get_symbol_model, list_symbol_models

__all__ = [
    "SymbolModel",
    "AstSymbolModel",
    "ImportSymbolModel",
    "get_symbol_model",
    "list_symbol_models",
]

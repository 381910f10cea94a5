"""Factory for creating symbol models."""

from typing import TYPE_CHECKING, Any, Dict, Iterable, Optional, Type

from config import settings
from .base import SymbolModel
from .ast_model import AstSymbolModel
from .import_model import ImportSymbolModel

if TYPE_CHECKING:
    from diagnostics import Messager


# Registry of available symbol models
SYMBOL_MODELS: Dict[str, Type[SymbolModel]] = {
    "ast": AstSymbolModel,
    "static": AstSymbolModel,
    "import": ImportSymbolModel,
    "reflection": ImportSymbolModel,
}

_ALIASES = {"static", "reflection"}


def get_symbol_model(
    name: Optional[str] = None,
    sources: Iterable[Any] = (),
    modules: Iterable[str] = (),
    messager: Optional["Messager"] = None,
) -> SymbolModel:
    """Get a symbol model instance.

    Args:
        name: Symbol model name (ast, import). Defaults to settings.symbol_model
        sources: Source roots. Scanned by the ast model; put on sys.path by
            the import model while it imports
        modules: Modules or packages imported by the import model
        messager: Diagnostics sink for unreadable sources or failed imports

    Returns:
        SymbolModel instance

    Examples:
        get_symbol_model("ast", sources=["./src"])
        get_symbol_model("import", sources=["./src"], modules=["example"])
    """
    key = (name or settings.symbol_model).lower()
    if key not in SYMBOL_MODELS:
        raise ValueError(
            f"Unknown symbol model: {name}. "
            f"Available: {list(SYMBOL_MODELS.keys())}"
        )
    model_class = SYMBOL_MODELS[key]
    if issubclass(model_class, ImportSymbolModel):
        return model_class(modules, messager=messager, search_path=sources)
    return model_class(sources, messager=messager)


def list_symbol_models() -> Dict[str, str]:
    """List symbol models and a one-line description of each.

    Returns:
        Dict mapping symbol model name to description
    """
    result = {}
    for name, model_class in SYMBOL_MODELS.items():
        # Skip aliases
        if name in _ALIASES:
            continue
        doc = (model_class.__doc__ or "").strip().splitlines()
        result[name] = doc[0] if doc else model_class.__name__
    return result

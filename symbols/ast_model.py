"""Static symbol model built from Python sources with ``ast``.

Nothing is imported or executed. Each module's names are resolved through
its imports and top-level classes, and re-exports through scanned packages
(``from .impl import Thing`` in an ``__init__.py``) are followed back to the
declaring module, so registry keys match ``module.__qualname__`` at runtime.
"""

import ast
import builtins
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, FrozenSet, Iterable, List, Optional, Set, Tuple

from contracts import AnnotationMirror, ElementKind, Modifier, TypeElement
from config import settings
from .base import SymbolModel

if TYPE_CHECKING:
    from diagnostics import Messager


logger = logging.getLogger(__name__)

PROTOCOL_BASES = {"typing.Protocol", "typing_extensions.Protocol"}
ENUM_BASES = {"enum.Enum", "enum.IntEnum", "enum.StrEnum", "enum.Flag", "enum.IntFlag"}
FINAL_DECORATORS = {"typing.final", "typing_extensions.final"}
ABSTRACT_DECORATORS = {"abstractmethod", "abstractproperty", "abstractclassmethod", "abstractstaticmethod"}

_BUILTIN_NAMES = set(dir(builtins))
_MAX_ALIAS_DEPTH = 16
_UNSUPPORTED = object()


@dataclass
class _ClassInfo:
    qualname: str
    node: ast.ClassDef


@dataclass
class _ModuleInfo:
    name: str
    path: Path
    is_package: bool
    imports: Dict[str, str] = field(default_factory=dict)
    classes: List[_ClassInfo] = field(default_factory=list)
    top_level: Set[str] = field(default_factory=set)

    @property
    def package(self) -> str:
        return self.name if self.is_package else self.name.rpartition(".")[0]


def _walk_py_files(root: Path, ignore_dirs: Iterable[str]) -> List[Path]:
    """Python files under ``root``, sorted by relative path."""
    ignored = set(ignore_dirs)
    out: List[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        # prune in-place so os.walk doesn't descend
        dirnames[:] = [d for d in dirnames if d not in ignored and not d.startswith(".")]
        for fn in filenames:
            if fn.startswith(".") or not fn.endswith(".py"):
                continue
            out.append(Path(dirpath) / fn)
    out.sort(key=lambda p: p.relative_to(root).as_posix())
    return out


def _module_name(root: Path, path: Path) -> Optional[str]:
    """Dotted module name of ``path`` relative to ``root``, or None if not importable."""
    parts = list(path.relative_to(root).with_suffix("").parts)
    if parts and parts[-1] == "__init__":
        parts = parts[:-1]
    if not parts or not all(part.isidentifier() for part in parts):
        return None
    return ".".join(parts)


def _dotted(node: ast.AST) -> Optional[str]:
    """``a.b.c`` for Name/Attribute chains, the base of a subscript, else None."""
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        base = _dotted(node.value)
        return f"{base}.{node.attr}" if base else None
    if isinstance(node, ast.Subscript):
        return _dotted(node.value)
    return None


def _import_base(module: _ModuleInfo, node: ast.ImportFrom) -> str:
    if not node.level:
        return node.module or ""
    package = module.package.split(".") if module.package else []
    drop = node.level - 1
    base = package[: max(len(package) - drop, 0)] if drop else package
    if node.module:
        base = base + node.module.split(".")
    return ".".join(base)


def _collect_imports(tree: ast.Module, module: _ModuleInfo) -> None:
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                if alias.asname:
                    module.imports[alias.asname] = alias.name
                else:
                    head = alias.name.split(".")[0]
                    module.imports[head] = head
        elif isinstance(node, ast.ImportFrom):
            base = _import_base(module, node)
            for alias in node.names:
                if alias.name == "*":
                    continue
                target = f"{base}.{alias.name}" if base else alias.name
                module.imports[alias.asname or alias.name] = target


def _collect_classes(body: List[ast.stmt], prefix: str, module: _ModuleInfo) -> None:
    """Record classes in source order, including nested ones and those under if/try."""
    for stmt in body:
        if isinstance(stmt, ast.ClassDef):
            qualname = f"{prefix}.{stmt.name}" if prefix else stmt.name
            if not prefix:
                module.top_level.add(stmt.name)
            module.classes.append(_ClassInfo(qualname=qualname, node=stmt))
            _collect_classes(stmt.body, qualname, module)
        elif isinstance(stmt, ast.If):
            _collect_classes(stmt.body + stmt.orelse, prefix, module)
        elif isinstance(stmt, ast.Try):
            blocks = stmt.body + stmt.orelse + stmt.finalbody
            for handler in stmt.handlers:
                blocks = blocks + handler.body
            _collect_classes(blocks, prefix, module)


def _is_abstract_method(node: ast.AST) -> bool:
    for decorator in getattr(node, "decorator_list", []):
        name = _dotted(decorator)
        if name and name.rpartition(".")[2] in ABSTRACT_DECORATORS:
            return True
    return False


def _class_members(node: ast.ClassDef) -> Tuple[Set[str], Set[str]]:
    """(abstract, concrete) member names defined directly in the class body."""
    abstract: Set[str] = set()
    concrete: Set[str] = set()
    for stmt in node.body:
        if isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef)):
            (abstract if _is_abstract_method(stmt) else concrete).add(stmt.name)
        elif isinstance(stmt, ast.Assign):
            for target in stmt.targets:
                if isinstance(target, ast.Name):
                    concrete.add(target.id)
        elif isinstance(stmt, ast.AnnAssign) and stmt.value is not None:
            if isinstance(stmt.target, ast.Name):
                concrete.add(stmt.target.id)
    return abstract, concrete


class AstSymbolModel(SymbolModel):
    """Symbol model over source roots, read statically.

    Args:
        source_roots: Directories that would be on ``sys.path`` at runtime
        messager: Receives a diagnostic for each file that cannot be parsed
        ignore_dirs: Directory names to skip (default from settings)
        encoding: Source encoding (default from settings)
    """

    def __init__(
        self,
        source_roots: Iterable[Any] = (),
        messager: Optional["Messager"] = None,
        ignore_dirs: Optional[Iterable[str]] = None,
        encoding: Optional[str] = None,
    ):
        super().__init__(messager)
        self.source_roots = [Path(root) for root in source_roots]
        self.ignore_dirs = list(ignore_dirs if ignore_dirs is not None else settings.ignore_dirs)
        self.encoding = encoding or settings.encoding

        self._modules: Dict[str, _ModuleInfo] = {}
        self._classes: Dict[str, Tuple[_ModuleInfo, _ClassInfo]] = {}
        self._supertypes_memo: Dict[str, List[str]] = {}
        self._abstract_memo: Dict[str, FrozenSet[str]] = {}
        self._enum_memo: Dict[str, bool] = {}
        self._elements: Optional[Dict[str, TypeElement]] = None

    @property
    def name(self) -> str:
        return "ast"

    def get_type_elements(self) -> List[TypeElement]:
        return list(self._scan().values())

    def get_type_element(self, qualified_name: str) -> Optional[TypeElement]:
        elements = self._scan()
        return elements.get(qualified_name) or elements.get(self._canonical(qualified_name))

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------

    def _scan(self) -> Dict[str, TypeElement]:
        if self._elements is not None:
            return self._elements

        for root in self.source_roots:
            if not root.is_dir():
                self._report(f"Source root not found: {root}")
                continue
            for path in _walk_py_files(root, self.ignore_dirs):
                self._load_module(root, path)

        # Pass 1: everything but marker arguments, which may reference any class
        self._elements = {}
        for qualified, (module, info) in self._classes.items():
            self._elements[qualified] = self._build_element(qualified, module, info)

        # Pass 2: markers, now that type references resolve to declared types
        for qualified, (module, info) in self._classes.items():
            annotations = [
                mirror
                for mirror in (self._annotation(module, d) for d in info.node.decorator_list)
                if mirror is not None
            ]
            self._elements[qualified] = self._elements[qualified].model_copy(update={"annotations": annotations})

        logger.debug("Scanned %d modules, %d classes", len(self._modules), len(self._elements))
        return self._elements

    def _load_module(self, root: Path, path: Path) -> None:
        name = _module_name(root, path)
        if name is None:
            return
        if name in self._modules:
            logger.debug("Skipping %s: module %s already loaded from %s", path, name, self._modules[name].path)
            return
        try:
            tree = ast.parse(path.read_text(encoding=self.encoding), filename=str(path))
        except (SyntaxError, UnicodeDecodeError, OSError) as e:
            self._report(f"Could not parse {path}: {e}")
            return

        module = _ModuleInfo(name=name, path=path, is_package=path.name == "__init__.py")
        _collect_imports(tree, module)
        _collect_classes(tree.body, "", module)
        self._modules[name] = module
        for info in module.classes:
            self._classes[f"{name}.{info.qualname}"] = (module, info)

    # ------------------------------------------------------------------
    # Name resolution
    # ------------------------------------------------------------------

    def _resolve(self, module: _ModuleInfo, dotted: str) -> str:
        """Qualified name of ``dotted`` as written in ``module``."""
        head, _, rest = dotted.partition(".")
        if head in module.top_level:
            resolved = f"{module.name}.{head}"
        elif head in module.imports:
            resolved = module.imports[head]
        elif head in _BUILTIN_NAMES:
            resolved = f"builtins.{head}"
        else:
            return dotted
        return self._canonical(f"{resolved}.{rest}" if rest else resolved)

    def _canonical(self, name: str, depth: int = 0) -> str:
        """Follow re-exports in scanned modules back to the declaring module."""
        if name in self._classes or depth > _MAX_ALIAS_DEPTH:
            return name
        parts = name.split(".")
        for i in range(len(parts) - 1, 0, -1):
            module = self._modules.get(".".join(parts[:i]))
            if module is None:
                continue
            head = parts[i]
            if head in module.imports and head not in module.top_level:
                return self._canonical(".".join([module.imports[head]] + parts[i + 1:]), depth + 1)
            return name
        return name

    # ------------------------------------------------------------------
    # Element construction
    # ------------------------------------------------------------------

    def _supertypes(self, qualified: str) -> List[str]:
        if qualified not in self._supertypes_memo:
            module, info = self._classes[qualified]
            names = [_dotted(base) for base in info.node.bases]
            self._supertypes_memo[qualified] = [self._resolve(module, n) for n in names if n]
        return self._supertypes_memo[qualified]

    def _abstract_methods(self, qualified: str) -> FrozenSet[str]:
        """Abstract members declared or inherited and not overridden."""
        if qualified in self._abstract_memo:
            return self._abstract_memo[qualified]
        self._abstract_memo[qualified] = frozenset()  # guards inheritance cycles
        _, info = self._classes[qualified]
        abstract, concrete = _class_members(info.node)
        inherited: Set[str] = set()
        for base in self._supertypes(qualified):
            if base in self._classes:
                inherited |= self._abstract_methods(base)
        result = frozenset(abstract | (inherited - concrete))
        self._abstract_memo[qualified] = result
        return result

    def _is_enum(self, qualified: str) -> bool:
        if qualified in self._enum_memo:
            return self._enum_memo[qualified]
        self._enum_memo[qualified] = False
        result = any(
            base in ENUM_BASES or (base in self._classes and self._is_enum(base))
            for base in self._supertypes(qualified)
        )
        self._enum_memo[qualified] = result
        return result

    def _build_element(self, qualified: str, module: _ModuleInfo, info: _ClassInfo) -> TypeElement:
        supertypes = self._supertypes(qualified)
        if any(base in PROTOCOL_BASES for base in supertypes):
            kind = ElementKind.INTERFACE
        elif self._is_enum(qualified):
            kind = ElementKind.ENUM
        else:
            kind = ElementKind.CLASS

        modifiers = set()
        if self._abstract_methods(qualified):
            modifiers.add(Modifier.ABSTRACT)
        for decorator in info.node.decorator_list:
            name = _dotted(decorator)
            if name and self._resolve(module, name) in FINAL_DECORATORS:
                modifiers.add(Modifier.FINAL)

        return TypeElement(
            module=module.name,
            qualname=info.qualname,
            kind=kind,
            modifiers=frozenset(modifiers),
            supertypes=supertypes,
            is_package=module.is_package,
            source_path=module.path,
            lineno=info.node.lineno,
        )

    def _annotation(self, module: _ModuleInfo, decorator: ast.expr) -> Optional[AnnotationMirror]:
        target = decorator.func if isinstance(decorator, ast.Call) else decorator
        name = _dotted(target)
        if name is None:
            return None
        values: Dict[str, Any] = {}
        if isinstance(decorator, ast.Call):
            if decorator.args:
                value = self._value(module, decorator.args[0])
                if value is not _UNSUPPORTED:
                    values["value"] = value
            for keyword in decorator.keywords:
                if keyword.arg is None:
                    continue
                value = self._value(module, keyword.value)
                if value is not _UNSUPPORTED:
                    values[keyword.arg] = value
        return AnnotationMirror(annotation_type=self._resolve(module, name), element_values=values)

    def _value(self, module: _ModuleInfo, node: ast.expr) -> Any:
        """Literal value of a marker argument, or a type reference for names."""
        if isinstance(node, ast.Constant):
            return node.value
        if isinstance(node, (ast.Name, ast.Attribute)):
            name = _dotted(node)
            if name is not None:
                return self.get_type_reference(self._resolve(module, name))
        return _UNSUPPORTED

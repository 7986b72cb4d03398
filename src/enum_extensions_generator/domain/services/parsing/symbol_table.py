#!/usr/bin/env python3

"""Whole-program symbol table built once per pass.

The table maps names used in a module to fully qualified identities by
following import statements through the modules of the program. It is
read-only once built; the memo tables it fills lazily never change an answer.

Resolution rules:
- ``import a.b`` binds ``a``; ``import a.b as c`` binds ``c`` to ``a.b``
- ``from x import y as z`` binds ``z`` to ``x.y`` (relative imports are anchored
  at the importing module's package)
- ``from x import *`` is followed for modules of the program only
- classes, functions and assignments bind ``<module>.<name>``; a plain
  ``Alias = Other.Name`` assignment is followed as an alias
- a name resolving into a module of the program is canonicalized by looking it
  up in that module, so re-exports lead to the defining module
- a name resolving outside the program is trusted as its import path
- a name bound nowhere, and not a builtin, is unresolvable
"""

import ast
import builtins
from collections.abc import Mapping
from dataclasses import dataclass, field

from ....infrastructure.logging import get_logger
from ...models import (
    Accessibility,
    DeclarationNode,
    DecorationData,
    EnumSymbol,
    MarkerRegistry,
)
from .constant_evaluator import LITERAL_EVAL_ERRORS, ConstantEvaluator
from .syntax_provider import ParsedModule, fingerprint, iter_scope_statements

logger = get_logger(__name__)

BUILTIN_NAMES: frozenset[str] = frozenset(dir(builtins))

# Bound on alias and re-export chains; import cycles end here
MAX_RESOLUTION_DEPTH = 32


@dataclass
class ModuleScope:
    """Names bound at the top level of one module."""

    name: str
    package: str
    bindings: dict[str, str] = field(default_factory=dict)
    definitions: set[str] = field(default_factory=set)
    aliases: dict[str, ast.expr] = field(default_factory=dict)
    star_imports: list[str] = field(default_factory=list)
    exported_names: frozenset[str] | None = None
    classes: dict[str, ast.ClassDef] = field(default_factory=dict)

    @classmethod
    def build(cls, module: ParsedModule) -> "ModuleScope":
        """Collect the bindings of a parsed module."""
        scope = cls(name=module.source.module, package=module.source.package)
        for stmt in iter_scope_statements(module.tree.body):
            if isinstance(stmt, ast.Import):
                scope._bind_import(stmt)
            elif isinstance(stmt, ast.ImportFrom):
                scope._bind_import_from(stmt)
            elif isinstance(stmt, (ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef)):
                scope._define(stmt.name)
            elif isinstance(stmt, (ast.Assign, ast.AnnAssign)):
                scope._bind_assignment(stmt)
            elif isinstance(stmt, ast.AugAssign):
                scope._augment_exports(stmt)
            elif isinstance(stmt, ast.Expr):
                scope._extend_exports(stmt.value)
        scope._collect_classes(module.tree.body, prefix="")
        return scope

    def qualify(self, name: str) -> str:
        """Fully qualified name of a top-level definition."""
        return f"{self.name}.{name}" if self.name else name

    def _define(self, name: str) -> None:
        self.bindings[name] = self.qualify(name)
        self.definitions.add(name)
        self.aliases.pop(name, None)

    def _bind(self, name: str, target: str) -> None:
        self.bindings[name] = target
        self.definitions.discard(name)
        self.aliases.pop(name, None)

    def _bind_import(self, stmt: ast.Import) -> None:
        for alias in stmt.names:
            if alias.asname:
                self._bind(alias.asname, alias.name)
            else:
                top = alias.name.split(".")[0]
                self._bind(top, top)

    def _bind_import_from(self, stmt: ast.ImportFrom) -> None:
        base = self._import_base(stmt)
        if base is None:
            logger.debug(f"{self.name}: relative import beyond top-level package ignored")
            return
        for alias in stmt.names:
            if alias.name == "*":
                self.star_imports.append(base)
            else:
                target = f"{base}.{alias.name}" if base else alias.name
                self._bind(alias.asname or alias.name, target)

    def _import_base(self, stmt: ast.ImportFrom) -> str | None:
        if not stmt.level:
            return stmt.module or ""
        parts = self.package.split(".") if self.package else []
        drop = stmt.level - 1
        if drop > len(parts):
            return None
        anchor = parts[: len(parts) - drop]
        if stmt.module:
            anchor.append(stmt.module)
        return ".".join(anchor)

    def _bind_assignment(self, stmt: ast.Assign | ast.AnnAssign) -> None:
        targets = stmt.targets if isinstance(stmt, ast.Assign) else [stmt.target]
        for target in targets:
            if not isinstance(target, ast.Name):
                continue
            if target.id == "__all__" and stmt.value is not None:
                self._collect_exports(stmt.value)
            if stmt.value is not None and dotted_parts(stmt.value) is not None:
                self.bindings.pop(target.id, None)
                self.definitions.discard(target.id)
                self.aliases[target.id] = stmt.value
            else:
                self._define(target.id)

    def _collect_exports(self, value: ast.expr) -> None:
        names = _literal_names(value)
        if names is not None:
            self.exported_names = names

    def _add_exports(self, names: frozenset[str] | None) -> None:
        if names is not None:
            self.exported_names = (self.exported_names or frozenset()) | names

    def _augment_exports(self, stmt: ast.AugAssign) -> None:
        """Handle ``__all__ += [...]``."""
        if not isinstance(stmt.target, ast.Name) or not isinstance(stmt.op, ast.Add):
            return
        if stmt.target.id == "__all__":
            self._add_exports(_literal_names(stmt.value))

    def _extend_exports(self, value: ast.expr) -> None:
        """Handle ``__all__.extend([...])`` and ``__all__.append("...")``."""
        if not isinstance(value, ast.Call) or len(value.args) != 1 or value.keywords:
            return
        if dotted_parts(value.func) == ["__all__", "extend"]:
            self._add_exports(_literal_names(value.args[0]))
        elif dotted_parts(value.func) == ["__all__", "append"]:
            arg = value.args[0]
            if isinstance(arg, ast.Constant) and isinstance(arg.value, str):
                self._add_exports(frozenset([arg.value]))

    def _collect_classes(self, body: list[ast.stmt], prefix: str) -> None:
        for stmt in iter_scope_statements(body):
            if isinstance(stmt, ast.ClassDef):
                qualname = f"{prefix}{stmt.name}"
                self.classes[qualname] = stmt
                self._collect_classes(stmt.body, prefix=f"{qualname}.")


def dotted_parts(expr: ast.expr) -> list[str] | None:
    """Split a ``Name``/``Attribute`` chain into its parts, or None for other shapes."""
    parts: list[str] = []
    while isinstance(expr, ast.Attribute):
        parts.append(expr.attr)
        expr = expr.value
    if not isinstance(expr, ast.Name):
        return None
    parts.append(expr.id)
    return parts[::-1]


def _literal_names(value: ast.expr) -> frozenset[str] | None:
    """String names of a literal list or tuple, or None for other expressions."""
    try:
        names = ast.literal_eval(value)
    except LITERAL_EVAL_ERRORS:
        return None
    if isinstance(names, (list, tuple)):
        return frozenset(n for n in names if isinstance(n, str))
    return None


def _constant_or_none(expr: ast.expr) -> object:
    if isinstance(expr, ast.Constant):
        return expr.value
    return None


@dataclass(frozen=True)
class _EnumKind:
    is_flag: bool
    is_str_enum: bool
    underlying_type: str | None


class SymbolTable:
    """Read-only view of the program's names for one pass."""

    def __init__(self, parsed: Mapping[str, ParsedModule]):
        """Build the table.

        Args:
            parsed: Parsed modules keyed by dotted module name
        """
        self._scopes: dict[str, ModuleScope] = {
            name: ModuleScope.build(module) for name, module in parsed.items()
        }
        self._symbols: dict[tuple[str, str], EnumSymbol | None] = {}
        logger.debug(f"Symbol table built for {len(self._scopes)} module(s)")

    @property
    def modules(self) -> frozenset[str]:
        """Dotted names of the program's modules."""
        return frozenset(self._scopes)

    def scope(self, module: str) -> ModuleScope | None:
        """Top-level scope of a module, if it is part of the program."""
        return self._scopes.get(module)

    def resolve_expression(self, module: str, expr: ast.expr) -> str | None:
        """Resolve a name or attribute chain used in a module.

        Args:
            module: Module the expression appears in
            expr: Expression to resolve

        Returns:
            Fully qualified identity, or None if unresolvable
        """
        parts = dotted_parts(expr)
        if parts is None:
            return None
        return self._resolve_parts(module, parts, depth=0)

    def resolve_decoration(self, module: str, decorator: ast.expr) -> DecorationData | None:
        """Resolve ``@X`` or ``@X(...)`` to the identity of ``X``.

        Keyword arguments of a call are kept in source order; a keyword whose
        value is not a constant is kept with the value None.

        Args:
            module: Module the decorator appears in
            decorator: Decorator expression

        Returns:
            Resolved decoration, or None if unresolvable
        """
        call = decorator if isinstance(decorator, ast.Call) else None
        target = call.func if call is not None else decorator
        qualified_name = self.resolve_expression(module, target)
        if qualified_name is None:
            return None

        named_arguments: tuple[tuple[str, object], ...] = ()
        if call is not None:
            named_arguments = tuple(
                (kw.arg, _constant_or_none(kw.value)) for kw in call.keywords if kw.arg is not None
            )
        return DecorationData(qualified_name=qualified_name, named_arguments=named_arguments)

    def get_declared_symbol(self, declaration: DeclarationNode) -> EnumSymbol | None:
        """Map a declaration to its enum symbol.

        Args:
            declaration: Declaration found by the syntax provider

        Returns:
            The symbol, or None when the declaration is not known to this table
            (module missing, class shadowed by a different later definition) or
            is not an enum
        """
        key = (declaration.identity, declaration.fingerprint)
        if key not in self._symbols:
            self._symbols[key] = self._build_symbol(declaration)
        return self._symbols[key]

    def _build_symbol(self, declaration: DeclarationNode) -> EnumSymbol | None:
        scope = self._scopes.get(declaration.module)
        if scope is None:
            return None
        node = scope.classes.get(declaration.qualname)
        if node is None or fingerprint(node) != declaration.fingerprint:
            return None

        kind = self._classify(scope, node, depth=0)
        if kind is None:
            return None

        decorations = tuple(
            data
            for data in (self.resolve_decoration(scope.name, d) for d in node.decorator_list)
            if data is not None
        )
        evaluator = ConstantEvaluator(
            resolve=lambda expr: self.resolve_expression(scope.name, expr),
            is_flag=kind.is_flag,
            underlying_type=kind.underlying_type,
            is_str_enum=kind.is_str_enum,
        )
        return EnumSymbol(
            name=node.name,
            qualname=declaration.qualname,
            module=scope.name,
            accessibility=self._accessibility(scope, declaration.qualname, node.name),
            decorations=decorations,
            underlying_type=kind.underlying_type,
            is_flag=kind.is_flag,
            members=evaluator.evaluate_members(node.body),
        )

    @staticmethod
    def _accessibility(scope: ModuleScope, qualname: str, name: str) -> Accessibility:
        if name.startswith("_"):
            return Accessibility.PRIVATE
        is_top_level = "." not in qualname
        if is_top_level and scope.exported_names is not None and name not in scope.exported_names:
            return Accessibility.INTERNAL
        return Accessibility.PUBLIC

    def _classify(self, scope: ModuleScope, node: ast.ClassDef, depth: int) -> _EnumKind | None:
        """Enum kind of a class from its bases, or None if it is not an enum."""
        if depth > MAX_RESOLUTION_DEPTH:
            return None

        is_enum = is_flag = is_str_enum = False
        underlying_type: str | None = None
        for base in node.bases:
            qualified_name = self.resolve_expression(scope.name, base)
            if qualified_name is None:
                continue
            kind = self._enum_kind(qualified_name, depth + 1)
            if kind is not None:
                is_enum = True
                is_flag = is_flag or kind.is_flag
                is_str_enum = is_str_enum or kind.is_str_enum
                underlying_type = underlying_type or kind.underlying_type
            elif underlying_type is None:
                underlying_type = self._mixin_type(qualified_name)

        if not is_enum:
            return None
        return _EnumKind(is_flag=is_flag, is_str_enum=is_str_enum, underlying_type=underlying_type)

    def _enum_kind(self, qualified_name: str, depth: int) -> _EnumKind | None:
        if MarkerRegistry.is_enum_base(qualified_name):
            return _EnumKind(
                is_flag=MarkerRegistry.is_flag_base(qualified_name),
                is_str_enum=qualified_name == "enum.StrEnum",
                underlying_type=MarkerRegistry.implied_underlying_type(qualified_name),
            )
        located = self._locate_class(qualified_name)
        if located is None:
            return None
        scope, node = located
        return self._classify(scope, node, depth)

    def _mixin_type(self, qualified_name: str) -> str | None:
        """Storage type contributed by a non-enum base."""
        if qualified_name.startswith("builtins."):
            name = qualified_name.removeprefix("builtins.")
            return None if name == "object" else name
        if self._locate_class(qualified_name) is not None:
            return None  # behaviour mixin declared in the program
        return qualified_name

    def _locate_class(self, qualified_name: str) -> tuple[ModuleScope, ast.ClassDef] | None:
        parts = qualified_name.split(".")
        for i in range(len(parts) - 1, 0, -1):
            scope = self._scopes.get(".".join(parts[:i]))
            if scope is not None:
                node = scope.classes.get(".".join(parts[i:]))
                return (scope, node) if node is not None else None
        scope = self._scopes.get("")
        if scope is not None and qualified_name in scope.classes:
            return scope, scope.classes[qualified_name]
        return None

    def _resolve_parts(self, module: str, parts: list[str], depth: int) -> str | None:
        scope = self._scopes.get(module)
        if scope is None:
            return None
        target = self._lookup(scope, parts[0], depth)
        if target is None:
            if parts[0] in BUILTIN_NAMES:
                return ".".join(["builtins", *parts])
            return None
        return self._canonicalize(".".join([target, *parts[1:]]), depth + 1)

    def _lookup(self, scope: ModuleScope, name: str, depth: int) -> str | None:
        """Target bound to a top-level name of a module, following aliases."""
        if depth > MAX_RESOLUTION_DEPTH:
            return None
        if name in scope.bindings:
            return scope.bindings[name]
        if name in scope.aliases:
            parts = dotted_parts(scope.aliases[name])
            if parts is None or parts[0] == name:
                return None
            return self._resolve_parts(scope.name, parts, depth + 1)
        for star_module in scope.star_imports:
            source = self._scopes.get(star_module)
            if source is None:
                continue
            if source.exported_names is not None:
                if name not in source.exported_names:
                    continue
            elif name.startswith("_"):
                continue
            target = self._lookup(source, name, depth + 1)
            if target is not None:
                return target
        return None

    def _canonicalize(self, dotted: str, depth: int) -> str | None:
        """Follow re-exports until the defining module of a dotted name."""
        if depth > MAX_RESOLUTION_DEPTH:
            return None

        parts = dotted.split(".")
        for i in range(len(parts), 0, -1):
            module = ".".join(parts[:i])
            scope = self._scopes.get(module)
            if scope is None:
                continue
            rest = parts[i:]
            if not rest:
                return module
            if rest[0] in scope.definitions:
                return ".".join([scope.qualify(rest[0]), *rest[1:]])
            target = self._lookup(scope, rest[0], depth + 1)
            if target is None:
                return None
            if target == f"{module}.{rest[0]}":
                # ``from . import sub`` naming a submodule outside the program
                return dotted
            return self._canonicalize(".".join([target, *rest[1:]]), depth + 1)

        return dotted

#!/usr/bin/env python3

"""Syntax trees for a program snapshot and the cheap candidate filter.

Nothing in this module resolves names: it only parses source text and
inspects node shapes, so it can run over every class of a large program on
every pass.
"""

import ast
import hashlib
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass

from ....infrastructure.logging import get_logger
from ...models import DeclarationNode, ProgramSnapshot, SourceFile
from ...repositories.cache import LRUCache

logger = get_logger(__name__)


@dataclass(frozen=True)
class ParsedModule:
    """A source file with its syntax tree."""

    source: SourceFile
    tree: ast.Module


def is_syntax_target(node: ast.AST) -> bool:
    """Check if a node may be an opted-in enum declaration.

    True for any class with at least one base and at least one decorator.
    Whether the bases make it an enum and whether a decorator is the opt-in
    marker is decided later against the symbol table.

    Args:
        node: Any syntax node

    Returns:
        True if the node is worth resolving
    """
    return isinstance(node, ast.ClassDef) and bool(node.bases) and bool(node.decorator_list)


def iter_scope_statements(nodes: Iterable[ast.AST]) -> Iterator[ast.stmt]:
    """Yield the statements executing directly in one scope.

    Compound statements such as `if`, `try` and `with` are descended into;
    function and class bodies are separate scopes and are not.
    """
    for node in nodes:
        if isinstance(node, ast.expr):
            continue
        if isinstance(node, ast.stmt):
            yield node
            if isinstance(node, (ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef)):
                continue
        yield from iter_scope_statements(ast.iter_child_nodes(node))


def fingerprint(node: ast.AST) -> str:
    """Digest of a node's structure, independent of its position in the file.

    Nodes are hashed breadth-first with their scalar fields and the shape of
    their child fields, so arbitrarily deep expressions do not recurse.
    """
    digest = hashlib.sha256()
    for current in ast.walk(node):
        digest.update(type(current).__name__.encode("utf-8"))
        for name, value in ast.iter_fields(current):
            if isinstance(value, ast.AST):
                shape = "node"
            elif isinstance(value, list):
                shape = "[" + ",".join(
                    "node" if isinstance(item, ast.AST) else repr(item) for item in value
                ) + "]"
            else:
                shape = repr(value)
            digest.update(f"\0{name}={shape}".encode("utf-8"))
        digest.update(b"\n")
    return digest.hexdigest()


class SyntaxProvider:
    """Parses snapshots, reusing trees of files whose text did not change."""

    def __init__(self, cache_size: int = 2048):
        """Initialize syntax provider.

        Args:
            cache_size: Number of parsed files kept between passes
        """
        self._trees = LRUCache(max_size=cache_size)

    def parse(self, snapshot: ProgramSnapshot) -> dict[str, ParsedModule]:
        """Parse every file of a snapshot.

        Files that fail to parse are logged and left out of the pass. When two
        files claim the same module name the later one wins.

        Args:
            snapshot: Program files for this pass

        Returns:
            Parsed modules keyed by dotted module name
        """
        parsed: dict[str, ParsedModule] = {}
        for source in snapshot.files:
            tree = self._parse_file(source)
            if tree is None:
                continue
            if source.module in parsed:
                logger.warning(
                    f"Module {source.module!r} provided by both "
                    f"{parsed[source.module].source.path} and {source.path}; using the latter"
                )
            parsed[source.module] = ParsedModule(source=source, tree=tree)
        return parsed

    def _parse_file(self, source: SourceFile) -> ast.Module | None:
        """Parse one file, consulting the tree cache first."""
        key = hashlib.sha256(f"{source.path}\0{source.text}".encode()).hexdigest()
        tree = self._trees.get(key)
        if tree is not None:
            return tree

        try:
            tree = ast.parse(source.text, filename=source.path)
        except (SyntaxError, ValueError, RecursionError, MemoryError) as e:
            logger.warning(f"Skipping {source.path}: cannot parse ({e})")
            return None

        self._trees.put(key, tree)
        return tree

    def iter_declarations(self, parsed: Mapping[str, ParsedModule]) -> Iterator[DeclarationNode]:
        """Yield every addressable class declaration.

        Module-level classes and classes nested in class bodies are visited;
        classes defined inside functions have no stable qualified name and are
        not.

        Args:
            parsed: Modules returned by parse()

        Yields:
            DeclarationNode for each class, in source order
        """
        for module_name, module in parsed.items():
            yield from self._walk(module_name, module.source.path, module.tree.body, prefix="")

    def _walk(
        self, module: str, path: str, body: list[ast.stmt], prefix: str
    ) -> Iterator[DeclarationNode]:
        for stmt in iter_scope_statements(body):
            if not isinstance(stmt, ast.ClassDef):
                continue
            qualname = f"{prefix}{stmt.name}"
            yield DeclarationNode(
                module=module,
                qualname=qualname,
                fingerprint=fingerprint(stmt),
                path=path,
                line=stmt.lineno,
                node=stmt,
            )
            yield from self._walk(module, path, stmt.body, prefix=f"{qualname}.")

    def iter_candidates(self, parsed: Mapping[str, ParsedModule]) -> Iterator[DeclarationNode]:
        """Yield declarations passing the syntactic candidate filter."""
        for declaration in self.iter_declarations(parsed):
            if is_syntax_target(declaration.node):
                yield declaration

    def stats(self) -> dict[str, object]:
        """Statistics of the parsed-tree cache."""
        return self._trees.stats()

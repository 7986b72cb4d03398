#!/usr/bin/env python3

"""Confirms syntactic candidates against the symbol table."""

from collections.abc import Iterable

from ....infrastructure.logging import get_logger
from ...models import DeclarationNode, MarkerIdentity, MarkerRegistry
from ..parsing import SymbolTable

logger = get_logger(__name__)


class SemanticResolver:
    """Keeps only candidates carrying the opt-in marker.

    A decoration counts only when it resolves to the marker's identity, so a
    local class that happens to be called ``EnumExtensions`` does not qualify.
    Decorations that cannot be resolved are skipped without error.
    """

    def resolve(self, candidate: DeclarationNode, symbol_table: SymbolTable) -> DeclarationNode | None:
        """Return the candidate if one of its decorations is the opt-in marker.

        Args:
            candidate: Declaration that passed the syntactic filter
            symbol_table: Symbol table of the current pass

        Returns:
            The candidate unchanged, or None
        """
        for decorator in candidate.node.decorator_list:
            decoration = symbol_table.resolve_decoration(candidate.module, decorator)
            if decoration is None:
                continue
            if MarkerRegistry.identify(decoration.qualified_name) is MarkerIdentity.ENUM_EXTENSIONS:
                return candidate
        return None

    def resolve_all(
        self, candidates: Iterable[DeclarationNode], symbol_table: SymbolTable
    ) -> list[DeclarationNode]:
        """Dedupe candidates, then keep the opted-in ones.

        Args:
            candidates: Declarations that passed the syntactic filter
            symbol_table: Symbol table of the current pass

        Returns:
            Distinct opted-in declarations in discovery order
        """
        distinct = list(dict.fromkeys(candidates))
        resolved = [c for c in distinct if self.resolve(c, symbol_table) is not None]
        logger.debug(f"{len(resolved)} of {len(distinct)} candidate(s) carry the opt-in marker")
        return resolved

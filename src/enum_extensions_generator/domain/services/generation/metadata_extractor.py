#!/usr/bin/env python3

"""Reduces a resolved enum declaration to its description record."""

from collections.abc import Callable
from dataclasses import dataclass
from functools import reduce

from ....infrastructure.logging import get_logger
from ...models import (
    EXTENSION_CLASS_NAME,
    EXTENSION_CLASS_NAMESPACE,
    Accessibility,
    DeclarationNode,
    DecorationData,
    EnumMember,
    EnumSymbol,
    EnumToGenerate,
    MarkerIdentity,
    MarkerRegistry,
)
from ..parsing import SymbolTable

logger = get_logger(__name__)

# Storage type of an enum declaring none
DEFAULT_UNDERLYING_TYPE = "int"


@dataclass(frozen=True)
class _Options:
    """Fields decided by the decoration list."""

    name: str
    namespace: str
    has_flags: bool = False


def _apply_decoration(options: _Options, decoration: DecorationData) -> _Options:
    marker = MarkerRegistry.identify(decoration.qualified_name)
    if marker is MarkerIdentity.HAS_FLAGS:
        return _Options(options.name, options.namespace, has_flags=True)
    if marker is not MarkerIdentity.ENUM_EXTENSIONS:
        return options

    name, namespace = options.name, options.namespace
    for key, value in decoration.named_arguments:
        if value is None:
            continue
        if key == EXTENSION_CLASS_NAMESPACE:
            namespace = str(value)
        elif key == EXTENSION_CLASS_NAME:
            name = str(value)
    return _Options(name, namespace, options.has_flags)


class MetadataExtractor:
    """Builds EnumToGenerate records.

    The reduction reads only values from the symbol, never node identities or
    table internals, so an unchanged declaration yields an equal record on
    every pass.
    """

    def extract(
        self,
        candidate: DeclarationNode,
        symbol_table: SymbolTable,
        reuse: Callable[[str, object], EnumToGenerate | None] | None = None,
    ) -> EnumToGenerate | None:
        """Describe a resolved candidate.

        Args:
            candidate: Declaration confirmed by the semantic resolver
            symbol_table: Symbol table of the current pass
            reuse: Lookup of a previous record by identity and inputs; when it
                returns a record, the symbol is not described again

        Returns:
            The record, or None if the declared symbol cannot be obtained
        """
        inputs = self.inputs(candidate, symbol_table)
        if inputs is None:
            logger.debug(f"No enum symbol for {candidate.identity}")
            return None
        if reuse is not None:
            previous = reuse(candidate.identity, inputs)
            if previous is not None:
                return previous
        return self.describe(inputs[1])

    @staticmethod
    def inputs(candidate: DeclarationNode, symbol_table: SymbolTable) -> tuple[str, EnumSymbol] | None:
        """Upstream inputs a record is computed from: syntax fingerprint and symbol."""
        symbol = symbol_table.get_declared_symbol(candidate)
        if symbol is None:
            return None
        return candidate.fingerprint, symbol

    def describe(self, symbol: EnumSymbol) -> EnumToGenerate:
        """Fold an enum symbol into its description record.

        Decorations are applied in order: the bit-flags marker sets
        ``has_flags``; the opt-in marker's ``ExtensionClassNamespace`` and
        ``ExtensionClassName`` arguments override the defaults, later
        occurrences winning. Members without a constant value are left out.

        Args:
            symbol: Resolved enum symbol

        Returns:
            Description record
        """
        defaults = _Options(name=f"{symbol.name}Extensions", namespace=symbol.module)
        options = reduce(_apply_decoration, symbol.decorations, defaults)

        return EnumToGenerate(
            name=options.name,
            fully_qualified_name=symbol.qualified_name,
            namespace=options.namespace,
            is_public=symbol.accessibility is Accessibility.PUBLIC,
            has_flags=options.has_flags,
            underlying_type=symbol.underlying_type or DEFAULT_UNDERLYING_TYPE,
            members=tuple(
                EnumMember(member.name, member.constant_value)
                for member in symbol.members
                if member.constant_value is not None
            ),
        )

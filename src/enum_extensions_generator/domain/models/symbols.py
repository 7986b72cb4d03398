#!/usr/bin/env python3

"""Resolved symbol values exposed by the symbol table.

All symbol types are frozen value objects: two passes over unchanged input
produce equal symbols, which the description cache relies on.
"""

from dataclasses import dataclass
from enum import Enum


class Accessibility(Enum):
    """Declared visibility of a class, following Python naming conventions."""

    PUBLIC = "public"
    INTERNAL = "internal"  # public name left out of the module's __all__
    PRIVATE = "private"  # leading underscore


@dataclass(frozen=True)
class DecorationData:
    """A resolved decoration with its keyword arguments.

    ``named_arguments`` keeps source order. A value is the constant passed for
    the keyword, or None when the argument is None or not a constant.
    """

    qualified_name: str
    named_arguments: tuple[tuple[str, object], ...] = ()


@dataclass(frozen=True)
class EnumMemberSymbol:
    """An enum member; ``constant_value`` is None when not statically known."""

    name: str
    constant_value: int | str | None


@dataclass(frozen=True)
class EnumSymbol:
    """Semantic view of an enum declaration."""

    name: str
    qualname: str
    module: str
    accessibility: Accessibility
    decorations: tuple[DecorationData, ...]
    underlying_type: str | None
    is_flag: bool
    members: tuple[EnumMemberSymbol, ...]

    @property
    def qualified_name(self) -> str:
        """Dotted display form used to reference the declaration."""
        if self.module:
            return f"{self.module}.{self.qualname}"
        return self.qualname

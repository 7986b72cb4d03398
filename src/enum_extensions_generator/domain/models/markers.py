#!/usr/bin/env python3

"""Well-known identities recognised by the pipeline.

Markers are recognised by comparing a resolved fully qualified name against
these constants, never through inheritance or runtime reflection.
"""

from enum import Enum

# Module injected into every analysed program
MARKER_MODULE = "enum_extensions"

# Named options of the opt-in marker
EXTENSION_CLASS_NAME = "ExtensionClassName"
EXTENSION_CLASS_NAMESPACE = "ExtensionClassNamespace"


class MarkerIdentity(Enum):
    """Decorations the extractor acts on."""

    ENUM_EXTENSIONS = f"{MARKER_MODULE}.EnumExtensions"
    HAS_FLAGS = f"{MARKER_MODULE}.HasFlags"


# Standard library bases that make a class an enum
ENUM_BASE_TYPES: frozenset[str] = frozenset(
    [
        "enum.Enum",
        "enum.IntEnum",
        "enum.StrEnum",
        "enum.ReprEnum",
        "enum.Flag",
        "enum.IntFlag",
    ]
)

# Bases whose auto() values are powers of two
FLAG_BASE_TYPES: frozenset[str] = frozenset(["enum.Flag", "enum.IntFlag"])

# Bases implying a storage type without an explicit mixin
IMPLIED_UNDERLYING_TYPES: dict[str, str] = {
    "enum.IntEnum": "int",
    "enum.IntFlag": "int",
    "enum.StrEnum": "str",
}

# Callables with special meaning inside an enum body
AUTO = "enum.auto"
MEMBER = "enum.member"
NONMEMBER = "enum.nonmember"


class MarkerRegistry:
    """Centralized lookup of recognised identities."""

    _BY_NAME: dict[str, MarkerIdentity] = {m.value: m for m in MarkerIdentity}

    @classmethod
    def identify(cls, qualified_name: str | None) -> MarkerIdentity | None:
        """Map a resolved fully qualified name to a known marker.

        Args:
            qualified_name: Resolved identity, or None if unresolved

        Returns:
            The marker, or None for unrelated or unresolved decorations
        """
        if qualified_name is None:
            return None
        return cls._BY_NAME.get(qualified_name)

    @classmethod
    def is_enum_base(cls, qualified_name: str) -> bool:
        """Check if a resolved base class name is a standard enum type."""
        return qualified_name in ENUM_BASE_TYPES

    @classmethod
    def is_flag_base(cls, qualified_name: str) -> bool:
        """Check if a resolved base class name is a standard flag type."""
        return qualified_name in FLAG_BASE_TYPES

    @classmethod
    def implied_underlying_type(cls, qualified_name: str) -> str | None:
        """Storage type implied by a standard enum base, if any."""
        return IMPLIED_UNDERLYING_TYPES.get(qualified_name)

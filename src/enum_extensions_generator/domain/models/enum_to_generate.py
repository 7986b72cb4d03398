#!/usr/bin/env python3

"""Description record driving extension emission and incremental caching."""

from dataclasses import dataclass
from typing import Any

HINT_SUFFIX = "_EnumExtensions"


@dataclass(frozen=True)
class EnumMember:
    """A member name with its constant value."""

    name: str
    value: int | str


@dataclass(frozen=True)
class EnumToGenerate:
    """Normalized, value-comparable description of one opted-in enum.

    Two records are equal iff every field is equal, members compared
    element-wise in declaration order. Records are never mutated after
    construction.
    """

    name: str
    fully_qualified_name: str
    namespace: str
    is_public: bool
    has_flags: bool
    underlying_type: str
    members: tuple[EnumMember, ...]

    @property
    def hint_name(self) -> str:
        """Deterministic name of the output unit produced for this record."""
        return f"{self.name}{HINT_SUFFIX}"

    @property
    def is_contiguous(self) -> bool:
        """True if the distinct integer values form one unbroken ascending run."""
        values = [m.value for m in self.members]
        if not values or not all(isinstance(v, int) for v in values):
            return False
        distinct = sorted(set(values))
        return distinct == list(range(distinct[0], distinct[0] + len(distinct)))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dictionary."""
        return {
            "name": self.name,
            "fully_qualified_name": self.fully_qualified_name,
            "namespace": self.namespace,
            "is_public": self.is_public,
            "has_flags": self.has_flags,
            "underlying_type": self.underlying_type,
            "members": [[m.name, m.value] for m in self.members],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EnumToGenerate":
        """Rebuild a record serialized with to_dict().

        Raises:
            KeyError: If a field is missing
        """
        return cls(
            name=data["name"],
            fully_qualified_name=data["fully_qualified_name"],
            namespace=data["namespace"],
            is_public=bool(data["is_public"]),
            has_flags=bool(data["has_flags"]),
            underlying_type=data["underlying_type"],
            members=tuple(EnumMember(name, value) for name, value in data["members"]),
        )

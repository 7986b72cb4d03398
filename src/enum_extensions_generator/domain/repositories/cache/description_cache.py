#!/usr/bin/env python3

"""Cross-pass store of description records and their outputs.

This is the only pipeline component keeping state between passes. A pass
stages its results and commits them when it completes; a cancelled pass
discards them, leaving the previous pass's entries valid.
"""

from dataclasses import dataclass
from typing import Any

from ....infrastructure.logging import get_logger
from ...models import EnumToGenerate, OutputUnit

logger = get_logger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """Result cached for one declaration identity."""

    inputs: object
    record: EnumToGenerate
    output: OutputUnit


class DescriptionCache:
    """Maps declaration identities to the previous pass's record and output."""

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._staged: dict[str, CacheEntry] | None = None
        self.record_hits = 0
        self.record_misses = 0
        self.output_hits = 0
        self.output_misses = 0

    def begin_pass(self) -> None:
        """Start staging results for a new pass."""
        if self._staged is not None:
            logger.debug("Previous pass was never committed; discarding its staged entries")
        self._staged = {}

    def lookup_record(self, identity: str, inputs: object) -> EnumToGenerate | None:
        """Return the previous record if the declaration's inputs are unchanged.

        Args:
            identity: Declaration identity
            inputs: Value-comparable upstream inputs (syntax fingerprint and symbol)

        Returns:
            The previous pass's record, or None if it must be recomputed
        """
        entry = self._entries.get(identity)
        if entry is not None and entry.inputs == inputs:
            self.record_hits += 1
            return entry.record

        self.record_misses += 1
        return None

    def lookup_output(self, identity: str, record: EnumToGenerate) -> OutputUnit | None:
        """Return the previous output if the fresh record equals the previous one.

        Args:
            identity: Declaration identity
            record: Record computed in the current pass

        Returns:
            Previous output unit (re-emission not needed), or None
        """
        entry = self._entries.get(identity)
        if entry is not None and entry.record == record:
            self.output_hits += 1
            return entry.output

        self.output_misses += 1
        return None

    def stage(self, identity: str, inputs: object, record: EnumToGenerate, output: OutputUnit) -> None:
        """Record a result of the current pass.

        Raises:
            RuntimeError: If no pass was started with begin_pass()
        """
        if self._staged is None:
            raise RuntimeError("stage() called outside of a pass")
        self._staged[identity] = CacheEntry(inputs=inputs, record=record, output=output)

    def commit(self) -> None:
        """Replace the previous pass's entries with the staged ones.

        Declarations absent from the committed pass are forgotten.
        """
        if self._staged is None:
            raise RuntimeError("commit() called outside of a pass")
        dropped = self._entries.keys() - self._staged.keys()
        if dropped:
            logger.debug(f"Forgetting {len(dropped)} declaration(s): {sorted(dropped)}")
        self._entries = self._staged
        self._staged = None

    def discard(self) -> None:
        """Drop the staged entries of an abandoned pass."""
        self._staged = None

    def get(self, identity: str) -> CacheEntry | None:
        """Committed entry for an identity, if any."""
        return self._entries.get(identity)

    def clear(self) -> None:
        """Forget everything, including counters."""
        self._entries.clear()
        self._staged = None
        self.record_hits = 0
        self.record_misses = 0
        self.output_hits = 0
        self.output_misses = 0

    def stats(self) -> dict[str, Any]:
        """Get cache statistics.

        Returns:
            Dictionary with cache performance metrics
        """
        return {
            "size": len(self._entries),
            "record_hits": self.record_hits,
            "record_misses": self.record_misses,
            "output_hits": self.output_hits,
            "output_misses": self.output_misses,
        }

    def __len__(self) -> int:
        """Return number of committed entries."""
        return len(self._entries)

    def __contains__(self, identity: str) -> bool:
        """Check if an identity has a committed entry."""
        return identity in self._entries

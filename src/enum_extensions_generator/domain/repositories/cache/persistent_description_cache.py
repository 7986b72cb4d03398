#!/usr/bin/env python3

"""Persistent record cache shared by successive command line runs."""

import json
from pathlib import Path
from time import time
from typing import Any

from ....infrastructure.logging import get_logger
from ...models import EnumToGenerate

logger = get_logger(__name__)

CACHE_FORMAT_VERSION = "1.0"


class PersistentDescriptionCache:
    """Manages disk-based identity -> (record, output digest) mappings."""

    def __init__(self, cache_file: str | Path):
        """Initialize persistent cache.

        Args:
            cache_file: Path to cache file
        """
        self.cache_file = Path(cache_file)
        self._modified = False
        self.data = self._load_cache()

    def _load_cache(self) -> dict[str, Any]:
        """Load cached entries from disk.

        Returns:
            Cache data dictionary

        Raises:
            ValueError: If the cache contents are inconsistent
        """
        try:
            if self.cache_file.exists():
                with open(self.cache_file, encoding="utf-8") as f:
                    data: dict[str, Any] = json.load(f)
                if data.get("version") != CACHE_FORMAT_VERSION:
                    logger.warning(
                        f"Ignoring cache {self.cache_file} with format "
                        f"{data.get('version')!r} (expected {CACHE_FORMAT_VERSION})"
                    )
                    return self._create_empty_cache()
                self._validate_cache_integrity(data)
                logger.info(
                    f"Loaded cache from {self.cache_file} "
                    f"({len(data.get('entries', {}))} declarations)"
                )
                return data
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Failed to load cache from {self.cache_file}: {e}")

        return self._create_empty_cache()

    def _validate_cache_integrity(self, data: dict[str, Any]) -> None:
        """Validate cache data integrity.

        Every entry must hold a readable record whose hint name matches the
        stored one.

        Args:
            data: Cache data to validate

        Raises:
            ValueError: If the cache is corrupted
        """
        problems = []
        for identity, entry in data.get("entries", {}).items():
            try:
                record = EnumToGenerate.from_dict(entry["record"])
            except (KeyError, TypeError, ValueError) as e:
                problems.append(f"{identity}: unreadable record ({e!r})")
                continue
            if entry.get("hint_name") != record.hint_name:
                problems.append(
                    f"{identity}: hint name {entry.get('hint_name')!r} "
                    f"does not match record {record.hint_name!r}"
                )

        if problems:
            error_msg = (
                f"Cache file is corrupted.\n"
                f"Delete the cache file and regenerate: {self.cache_file}\n"
                f"Inconsistencies found:\n  " + "\n  ".join(problems)
            )
            logger.error(error_msg)
            raise ValueError(error_msg)

    def _create_empty_cache(self) -> dict[str, Any]:
        """Create empty cache structure.

        Returns:
            Empty cache dictionary
        """
        return {
            "version": CACHE_FORMAT_VERSION,
            "entries": {},
            "created": time(),
            "last_updated": time(),
        }

    def get_record(self, identity: str) -> EnumToGenerate | None:
        """Get the last written record for a declaration.

        Args:
            identity: Declaration identity

        Returns:
            Record or None if not cached
        """
        entry = self.data["entries"].get(identity)
        return EnumToGenerate.from_dict(entry["record"]) if entry is not None else None

    def get_digest(self, identity: str) -> str | None:
        """Get the digest of the last written output for a declaration."""
        entry = self.data["entries"].get(identity)
        return str(entry["digest"]) if entry is not None else None

    def is_up_to_date(self, identity: str, record: EnumToGenerate, digest: str) -> bool:
        """Check whether a declaration's output was already written as-is.

        Args:
            identity: Declaration identity
            record: Record of the current run
            digest: Digest of the file currently on disk

        Returns:
            True if both the record and the on-disk text are unchanged
        """
        return self.get_record(identity) == record and self.get_digest(identity) == digest

    def update(self, identity: str, record: EnumToGenerate, digest: str) -> tuple[str, str] | None:
        """Store the record and output digest written for a declaration.

        Args:
            identity: Declaration identity
            record: Record that produced the output
            digest: Digest of the written text

        Returns:
            (namespace, hint name) the declaration was previously written to,
            if that location differs from the record's, otherwise None
        """
        previous = self.data["entries"].get(identity)
        moved_from = None
        if previous is not None:
            location = (previous["namespace"], previous["hint_name"])
            if location != (record.namespace, record.hint_name):
                moved_from = location
        entry = {
            "hint_name": record.hint_name,
            "namespace": record.namespace,
            "digest": digest,
            "record": record.to_dict(),
        }
        if previous != entry:
            self.data["entries"][identity] = entry
            self.data["last_updated"] = time()
            self._modified = True
        return moved_from

    def prune(self, live_identities: set[str]) -> list[tuple[str, str]]:
        """Drop entries for declarations that no longer produce output.

        Args:
            live_identities: Identities produced by the current run

        Returns:
            (namespace, hint name) of each dropped entry, so stale files can be removed
        """
        stale = [i for i in self.data["entries"] if i not in live_identities]
        dropped = []
        for identity in stale:
            entry = self.data["entries"].pop(identity)
            dropped.append((entry["namespace"], entry["hint_name"]))
        if stale:
            self.data["last_updated"] = time()
            self._modified = True
        return dropped

    def save(self) -> None:
        """Save cache to disk if modified."""
        if self._modified:
            try:
                self.cache_file.parent.mkdir(parents=True, exist_ok=True)
                with open(self.cache_file, "w", encoding="utf-8") as f:
                    json.dump(self.data, f, indent=2)
                logger.debug(
                    f"Saved cache to {self.cache_file} "
                    f"({len(self.data['entries'])} declarations)"
                )
                self._modified = False
            except OSError as e:
                logger.error(f"Failed to save cache to {self.cache_file}: {e}")

    def get_statistics(self) -> dict[str, Any]:
        """Get cache statistics for monitoring.

        Returns:
            Dictionary with cache statistics
        """
        return {
            "declarations": len(self.data["entries"]),
            "file_size": self.cache_file.stat().st_size if self.cache_file.exists() else 0,
            "last_updated": self.data.get("last_updated", 0),
        }

#!/usr/bin/env python3

"""Tests for the cross-pass description cache."""

import pytest

from enum_extensions_generator.domain.models import EnumMember, EnumToGenerate, OutputUnit
from enum_extensions_generator.domain.repositories.cache import DescriptionCache


def make_record(name: str = "ColorExtensions", value: int = 1) -> EnumToGenerate:
    return EnumToGenerate(
        name=name,
        fully_qualified_name="app.Color",
        namespace="app",
        is_public=True,
        has_flags=False,
        underlying_type="int",
        members=(EnumMember("RED", value),),
    )


def make_output(record: EnumToGenerate) -> OutputUnit:
    return OutputUnit(record.hint_name, record.namespace, f"# {record.name}\n", record)


@pytest.fixture
def committed_cache() -> DescriptionCache:
    """Cache holding one committed entry for ``app:Color``."""
    cache = DescriptionCache()
    record = make_record()
    cache.begin_pass()
    cache.stage("app:Color", ("digest", "symbol"), record, make_output(record))
    cache.commit()
    return cache


@pytest.mark.unit
class TestDescriptionCache:
    def test_empty_cache_misses(self):
        cache = DescriptionCache()
        assert cache.lookup_record("app:Color", ("digest", "symbol")) is None
        assert cache.lookup_output("app:Color", make_record()) is None
        assert cache.stats()["record_misses"] == 1
        assert cache.stats()["output_misses"] == 1

    def test_record_hit_on_equal_inputs(self, committed_cache: DescriptionCache):
        assert committed_cache.lookup_record("app:Color", ("digest", "symbol")) == make_record()
        assert committed_cache.lookup_record("app:Color", ("changed", "symbol")) is None
        assert committed_cache.stats()["record_hits"] == 1

    def test_output_hit_on_equal_record(self, committed_cache: DescriptionCache):
        output = committed_cache.lookup_output("app:Color", make_record())
        assert output is not None
        assert output.text == "# ColorExtensions\n"
        assert committed_cache.lookup_output("app:Color", make_record(value=2)) is None

    def test_staged_entries_invisible_until_commit(self, committed_cache: DescriptionCache):
        changed = make_record(value=2)
        committed_cache.begin_pass()
        committed_cache.stage("app:Color", ("new", "symbol"), changed, make_output(changed))

        assert committed_cache.get("app:Color").record == make_record()
        committed_cache.commit()
        assert committed_cache.get("app:Color").record == changed

    def test_discard_keeps_previous_pass(self, committed_cache: DescriptionCache):
        committed_cache.begin_pass()
        changed = make_record(value=2)
        committed_cache.stage("app:Color", ("new", "symbol"), changed, make_output(changed))
        committed_cache.discard()

        assert committed_cache.get("app:Color").record == make_record()

    def test_commit_forgets_absent_identities(self, committed_cache: DescriptionCache):
        committed_cache.begin_pass()
        committed_cache.commit()
        assert "app:Color" not in committed_cache
        assert len(committed_cache) == 0

    def test_stage_outside_pass(self):
        cache = DescriptionCache()
        record = make_record()
        with pytest.raises(RuntimeError):
            cache.stage("app:Color", None, record, make_output(record))

    def test_commit_outside_pass(self):
        with pytest.raises(RuntimeError):
            DescriptionCache().commit()

    def test_clear(self, committed_cache: DescriptionCache):
        committed_cache.lookup_record("app:Color", ("digest", "symbol"))
        committed_cache.clear()
        assert committed_cache.stats() == {
            "size": 0,
            "record_hits": 0,
            "record_misses": 0,
            "output_hits": 0,
            "output_misses": 0,
        }

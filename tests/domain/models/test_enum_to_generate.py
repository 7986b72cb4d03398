#!/usr/bin/env python3

"""Tests for the description record."""

import dataclasses

import pytest

from enum_extensions_generator.domain.models import EnumMember, EnumToGenerate


def make_record(**overrides) -> EnumToGenerate:
    fields = {
        "name": "ColorExtensions",
        "fully_qualified_name": "app.colors.Color",
        "namespace": "app.colors",
        "is_public": True,
        "has_flags": False,
        "underlying_type": "int",
        "members": (EnumMember("RED", 1), EnumMember("GREEN", 2), EnumMember("BLUE", 3)),
    }
    fields.update(overrides)
    return EnumToGenerate(**fields)


@pytest.mark.unit
class TestEnumToGenerate:
    """Test record equality and derived properties."""

    def test_structural_equality(self):
        assert make_record() == make_record()
        assert hash(make_record()) == hash(make_record())

    @pytest.mark.parametrize(
        "overrides",
        [
            {"name": "Other"},
            {"namespace": "app"},
            {"is_public": False},
            {"has_flags": True},
            {"underlying_type": "str"},
            {"members": (EnumMember("RED", 1),)},
        ],
    )
    def test_any_field_difference_breaks_equality(self, overrides):
        assert make_record() != make_record(**overrides)

    def test_member_order_matters(self):
        reordered = make_record(
            members=(EnumMember("GREEN", 2), EnumMember("RED", 1), EnumMember("BLUE", 3))
        )
        assert make_record() != reordered

    def test_is_immutable(self):
        record = make_record()
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.name = "Changed"  # type: ignore[misc]

    def test_hint_name(self):
        assert make_record().hint_name == "ColorExtensions_EnumExtensions"
        assert make_record(name="Foo").hint_name == "Foo_EnumExtensions"

    def test_is_contiguous(self):
        assert make_record().is_contiguous
        with_alias = make_record(members=(EnumMember("A", 0), EnumMember("B", 1), EnumMember("C", 0)))
        assert with_alias.is_contiguous

    def test_not_contiguous(self):
        assert not make_record(members=(EnumMember("A", 1), EnumMember("B", 4))).is_contiguous
        assert not make_record(members=()).is_contiguous
        assert not make_record(members=(EnumMember("A", "a"),)).is_contiguous

    def test_dict_round_trip(self):
        record = make_record(members=(EnumMember("A", "a"), EnumMember("B", -2)))
        assert EnumToGenerate.from_dict(record.to_dict()) == record

    def test_from_dict_missing_field(self):
        data = make_record().to_dict()
        del data["namespace"]
        with pytest.raises(KeyError):
            EnumToGenerate.from_dict(data)

"""Test the marker registry."""

import pytest

from enum_extensions_generator.domain.models import MarkerIdentity, MarkerRegistry


@pytest.mark.unit
class TestMarkerRegistry:
    """Test identification of well-known names."""

    def test_identify_markers(self):
        assert MarkerRegistry.identify("enum_extensions.EnumExtensions") is MarkerIdentity.ENUM_EXTENSIONS
        assert MarkerRegistry.identify("enum_extensions.HasFlags") is MarkerIdentity.HAS_FLAGS

    def test_identify_unrelated(self):
        assert MarkerRegistry.identify("dataclasses.dataclass") is None
        assert MarkerRegistry.identify("app.EnumExtensions") is None
        assert MarkerRegistry.identify(None) is None

    def test_enum_bases(self):
        for name in ("enum.Enum", "enum.IntEnum", "enum.StrEnum", "enum.Flag", "enum.IntFlag"):
            assert MarkerRegistry.is_enum_base(name)
        assert not MarkerRegistry.is_enum_base("enum.EnumMeta")
        assert not MarkerRegistry.is_enum_base("builtins.int")

    def test_flag_bases(self):
        assert MarkerRegistry.is_flag_base("enum.Flag")
        assert MarkerRegistry.is_flag_base("enum.IntFlag")
        assert not MarkerRegistry.is_flag_base("enum.IntEnum")

    def test_implied_underlying_type(self):
        assert MarkerRegistry.implied_underlying_type("enum.IntEnum") == "int"
        assert MarkerRegistry.implied_underlying_type("enum.IntFlag") == "int"
        assert MarkerRegistry.implied_underlying_type("enum.StrEnum") == "str"
        assert MarkerRegistry.implied_underlying_type("enum.Enum") is None

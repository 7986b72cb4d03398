#!/usr/bin/env python3

"""Tests for the generation pass orchestrator."""

import textwrap
from unittest.mock import MagicMock

import pytest

from enum_extensions_generator.application import CancellationToken, EnumGenerator, PassCancelledError
from enum_extensions_generator.application.generators import (
    DIAGNOSTIC_DUPLICATE_HINT_NAME,
    DIAGNOSTIC_SYMBOL_UNAVAILABLE,
)
from enum_extensions_generator.domain.models import EnumMember, SourceFile
from enum_extensions_generator.domain.services.generation import ExtensionEmitter

SHAPES = """
    from enum import IntEnum

    from enum_extensions import EnumExtensions


    @EnumExtensions(ExtensionClassName="ShapeHelpers")
    class Shape(IntEnum):
        CIRCLE = 0
        SQUARE = 1
    """


@pytest.fixture
def emitter() -> MagicMock:
    """Default emitter wrapped to count emissions."""
    return MagicMock(wraps=ExtensionEmitter())


@pytest.fixture
def generator(emitter: MagicMock) -> EnumGenerator:
    return EnumGenerator(emitter=emitter)


class CancellingEmitter:
    """Emitter requesting cancellation as soon as it is used."""

    def __init__(self, token: CancellationToken):
        self.token = token
        self.inner = ExtensionEmitter()

    def emit(self, record):
        self.token.cancel()
        return self.inner.emit(record)


@pytest.mark.integration
class TestSupply:
    """Test single passes."""

    def test_no_candidates(self, generator, make_snapshot, emitter):
        snapshot = make_snapshot({"app/plain.py": "from enum import Enum\nclass A(Enum):\n    X = 1\n"})

        assert generator.supply(snapshot) == []
        assert generator.diagnostics == []
        assert len(generator.cache) == 0
        emitter.emit.assert_not_called()

    def test_empty_snapshot(self, generator, make_snapshot):
        assert generator.supply(make_snapshot({})) == []

    def test_single_enum(self, generator, make_snapshot, colors_source):
        outputs = generator.supply(make_snapshot({"app/colors.py": colors_source}))

        assert len(outputs) == 1
        unit = outputs[0]
        assert unit.hint_name == "ColorExtensions_EnumExtensions"
        assert unit.namespace == "app.colors"
        assert not unit.reused
        assert unit.record.members == (
            EnumMember("RED", 1),
            EnumMember("GREEN", 2),
            EnumMember("BLUE", 3),
        )
        assert "class ColorExtensions:" in unit.text

    def test_outputs_in_discovery_order(self, generator, make_snapshot, colors_source):
        outputs = generator.supply(make_snapshot({"app/colors.py": colors_source, "app/shapes.py": SHAPES}))
        assert [u.hint_name for u in outputs] == [
            "ColorExtensions_EnumExtensions",
            "ShapeHelpers_EnumExtensions",
        ]

    def test_symbol_unavailable(self, generator, make_snapshot, colors_source):
        snapshot = make_snapshot(
            {
                "app/colors.py": colors_source,
                "app/broken.py": """
                    from enum_extensions import EnumExtensions

                    class Base:
                        pass

                    @EnumExtensions
                    class NotAnEnum(Base):
                        X = 1
                    """,
            }
        )

        outputs = generator.supply(snapshot)

        assert [u.hint_name for u in outputs] == ["ColorExtensions_EnumExtensions"]
        assert len(generator.diagnostics) == 1
        diagnostic = generator.diagnostics[0]
        assert diagnostic.code == DIAGNOSTIC_SYMBOL_UNAVAILABLE
        assert diagnostic.path == "app/broken.py"
        assert "NotAnEnum" in diagnostic.message

    def test_duplicate_hint_name(self, generator, make_snapshot, colors_source):
        snapshot = make_snapshot({"app/colors.py": colors_source, "lib/colors.py": colors_source})

        outputs = generator.supply(snapshot)

        assert [u.record.fully_qualified_name for u in outputs] == ["app.colors.Color"]
        assert [d.code for d in generator.diagnostics] == [DIAGNOSTIC_DUPLICATE_HINT_NAME]

    def test_unparsable_file_does_not_stop_pass(self, generator, make_snapshot, colors_source):
        snapshot = make_snapshot({"app/colors.py": colors_source, "app/broken.py": "def (:\n"})
        assert len(generator.supply(snapshot)) == 1

    def test_without_injected_marker_module(self, make_snapshot, colors_source):
        generator = EnumGenerator(inject_marker_module=False)
        outputs = generator.supply(make_snapshot({"app/colors.py": colors_source}))
        assert [u.hint_name for u in outputs] == ["ColorExtensions_EnumExtensions"]


@pytest.mark.integration
class TestIncrementalPasses:
    """Test reuse of records and outputs between passes."""

    def test_unchanged_program_is_reused(self, generator, make_snapshot, colors_source, emitter):
        snapshot = make_snapshot({"app/colors.py": colors_source})

        first = generator.supply(snapshot)
        second = generator.supply(snapshot)

        assert emitter.emit.call_count == 1
        assert second[0].reused
        assert second[0].text == first[0].text
        assert second[0].record == first[0].record

    def test_unrelated_edit_is_reused(self, generator, make_snapshot, colors_source, emitter):
        generator.supply(make_snapshot({"app/colors.py": colors_source, "app/util.py": "x = 1\n"}))
        outputs = generator.supply(
            make_snapshot({"app/colors.py": "import os\n\n" + textwrap.dedent(colors_source), "app/util.py": "x = 2\n"})
        )

        assert emitter.emit.call_count == 1
        assert all(u.reused for u in outputs)

    def test_member_change_is_emitted(self, generator, make_snapshot, colors_source, emitter):
        generator.supply(make_snapshot({"app/colors.py": colors_source}))
        changed = colors_source.replace("BLUE = auto()", "BLUE = auto()\n            ALPHA = 10")

        outputs = generator.supply(make_snapshot({"app/colors.py": changed}))

        assert emitter.emit.call_count == 2
        assert not outputs[0].reused
        assert outputs[0].record.members[-1] == EnumMember("ALPHA", 10)

    def test_removed_declaration_is_forgotten(self, generator, make_snapshot, colors_source):
        generator.supply(make_snapshot({"app/colors.py": colors_source}))
        generator.supply(make_snapshot({"app/colors.py": "x = 1\n"}))
        assert "app.colors:Color" not in generator.cache

    def test_diagnostics_reset_each_pass(self, generator, make_snapshot, colors_source):
        generator.supply(make_snapshot({"app/colors.py": colors_source, "lib/colors.py": colors_source}))
        generator.supply(make_snapshot({"app/colors.py": colors_source}))
        assert generator.diagnostics == []


@pytest.mark.integration
class TestCancellation:
    """Test abandoned passes."""

    def test_cancelled_before_start(self, generator, make_snapshot, colors_source):
        token = CancellationToken()
        token.cancel()

        with pytest.raises(PassCancelledError):
            generator.supply(make_snapshot({"app/colors.py": colors_source}), cancellation=token)

        assert len(generator.cache) == 0

    def test_cancelled_pass_keeps_previous_cache(self, generator, make_snapshot, colors_source):
        files = {"app/colors.py": colors_source, "app/shapes.py": SHAPES}
        first = generator.supply(make_snapshot(files))

        edited = {
            "app/colors.py": colors_source.replace("RED = 1", "RED = 100"),
            "app/shapes.py": SHAPES.replace("SQUARE = 1", "SQUARE = 4"),
        }
        token = CancellationToken()
        generator.emitter = CancellingEmitter(token)
        with pytest.raises(PassCancelledError):
            generator.supply(make_snapshot(edited), cancellation=token)

        assert generator.cache.get("app.colors:Color").record == first[0].record
        assert generator.cache.get("app.shapes:Shape").record == first[1].record

        generator.emitter = ExtensionEmitter()
        again = generator.supply(make_snapshot(files))
        assert all(u.reused for u in again)

    def test_cancellation_keeps_previous_diagnostics(self, generator, make_snapshot, colors_source):
        generator.supply(make_snapshot({"app/colors.py": colors_source, "lib/colors.py": colors_source}))
        token = CancellationToken()
        token.cancel()

        with pytest.raises(PassCancelledError):
            generator.supply(make_snapshot({"app/colors.py": colors_source}), cancellation=token)

        assert len(generator.diagnostics) == 1


@pytest.mark.unit
def test_snapshot_file_replacement(make_snapshot, colors_source):
    """Test that a snapshot edited through with_file is picked up."""
    generator = EnumGenerator()
    snapshot = make_snapshot({"app/colors.py": colors_source})
    generator.supply(snapshot)

    outputs = generator.supply(
        snapshot.with_file(SourceFile("app/colors.py", "app.colors", "x = 1\n"))
    )

    assert outputs == []


@pytest.mark.integration
def test_deep_member_does_not_abort_the_pass(generator, make_snapshot, colors_source):
    deep = " + ".join(["1"] * 1200)
    sizes = f"""
from enum import IntEnum

from enum_extensions import EnumExtensions


@EnumExtensions
class Size(IntEnum):
    HUGE = {deep}
    SMALL = 2
"""
    snapshot = make_snapshot({"app/colors.py": colors_source, "app/sizes.py": sizes})

    outputs = generator.supply(snapshot)

    by_hint = {unit.hint_name: unit for unit in outputs}
    assert set(by_hint) == {"ColorExtensions_EnumExtensions", "SizeExtensions_EnumExtensions"}
    assert EnumMember("SMALL", 2) in by_hint["SizeExtensions_EnumExtensions"].record.members

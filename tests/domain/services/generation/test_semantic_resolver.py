#!/usr/bin/env python3

"""Tests for opt-in marker confirmation."""

import pytest

from enum_extensions_generator.domain.services.generation import SemanticResolver


@pytest.mark.unit
class TestSemanticResolver:
    def test_marker_confirms_candidate(self, analyse, colors_source):
        program = analyse({"app/colors.py": colors_source})
        candidate = program.declaration("app.colors", "Color")

        assert SemanticResolver().resolve(candidate, program.symbol_table) is candidate

    def test_called_and_aliased_marker(self, analyse):
        program = analyse(
            {
                "m.py": """
                    import enum
                    import enum_extensions as ee

                    @ee.EnumExtensions(ExtensionClassName="Fast")
                    class Color(enum.Enum):
                        RED = 1
                    """
            }
        )
        candidate = program.declaration("m", "Color")
        assert SemanticResolver().resolve(candidate, program.symbol_table) is candidate

    def test_unrelated_decorators(self, analyse):
        program = analyse(
            {
                "m.py": """
                    from enum import Enum, unique

                    @unique
                    @undefined_decorator
                    class Color(Enum):
                        RED = 1
                    """
            }
        )
        candidate = program.declaration("m", "Color")
        assert SemanticResolver().resolve(candidate, program.symbol_table) is None

    def test_local_look_alike_is_not_the_marker(self, analyse):
        program = analyse(
            {
                "m.py": """
                    from enum import Enum

                    def EnumExtensions(cls):
                        return cls

                    @EnumExtensions
                    class Color(Enum):
                        RED = 1
                    """
            }
        )
        candidate = program.declaration("m", "Color")
        assert SemanticResolver().resolve(candidate, program.symbol_table) is None

    def test_resolve_all_dedupes(self, analyse, colors_source):
        program = analyse({"app/colors.py": colors_source, "app/other.py": "x = 1\n"})
        candidates = program.candidates()

        resolved = SemanticResolver().resolve_all(candidates + candidates, program.symbol_table)

        assert [c.identity for c in resolved] == ["app.colors:Color"]

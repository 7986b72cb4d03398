"""Tests for snapshot, declaration and diagnostic values."""

import ast

import pytest

from enum_extensions_generator.domain.models import (
    DeclarationNode,
    Diagnostic,
    ProgramSnapshot,
    SourceFile,
)


def class_node(source: str) -> ast.ClassDef:
    node = ast.parse(source).body[0]
    assert isinstance(node, ast.ClassDef)
    return node


@pytest.mark.unit
class TestSourceFile:
    def test_module_file(self):
        source = SourceFile(path="app/colors.py", module="app.colors", text="")
        assert not source.is_package
        assert source.package == "app"

    def test_package_file(self):
        source = SourceFile(path="app/__init__.py", module="app", text="")
        assert source.is_package
        assert source.package == "app"

    def test_top_level_module(self):
        assert SourceFile(path="script.py", module="script", text="").package == ""


@pytest.mark.unit
class TestProgramSnapshot:
    def test_has_module(self):
        snapshot = ProgramSnapshot((SourceFile("a.py", "a", ""),))
        assert snapshot.has_module("a")
        assert not snapshot.has_module("b")

    def test_with_file_replaces_by_path(self):
        snapshot = ProgramSnapshot((SourceFile("a.py", "a", "x = 1"),))
        updated = snapshot.with_file(SourceFile("a.py", "a", "x = 2"))
        assert [f.text for f in updated.files] == ["x = 2"]
        assert [f.text for f in snapshot.files] == ["x = 1"]

    def test_with_file_appends(self):
        snapshot = ProgramSnapshot().with_file(SourceFile("a.py", "a", ""))
        assert len(snapshot.with_file(SourceFile("b.py", "b", "")).files) == 2


@pytest.mark.unit
class TestDeclarationNode:
    def test_equality_ignores_position_and_node_identity(self):
        first = DeclarationNode("m", "C", "digest", "m.py", 1, class_node("class C: pass"))
        second = DeclarationNode("m", "C", "digest", "m.py", 40, class_node("class C: pass"))
        assert first == second
        assert len({first, second}) == 1

    def test_fingerprint_distinguishes(self):
        node = class_node("class C: pass")
        assert DeclarationNode("m", "C", "a", "m.py", 1, node) != DeclarationNode("m", "C", "b", "m.py", 1, node)

    def test_identity_and_name(self):
        declaration = DeclarationNode("m", "Outer.C", "d", "m.py", 1, class_node("class C: pass"))
        assert declaration.identity == "m:Outer.C"
        assert declaration.name == "C"


@pytest.mark.unit
def test_diagnostic_str():
    assert str(Diagnostic("EEG001", "skipped", path="m.py", line=3)) == "m.py:3: EEG001 skipped"
    assert str(Diagnostic("EEG002", "duplicate")) == "EEG002 duplicate"

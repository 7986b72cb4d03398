"""Pytest configuration and shared fixtures."""

import sys
import textwrap
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from enum_extensions_generator.domain.models import DeclarationNode, ProgramSnapshot, SourceFile
from enum_extensions_generator.domain.services.generation import with_marker_module
from enum_extensions_generator.domain.services.parsing import (
    ParsedModule,
    SymbolTable,
    SyntaxProvider,
)
from enum_extensions_generator.infrastructure.logging import LoggerSetup


def module_for(path: str) -> str:
    """Dotted module name of a snapshot-relative path."""
    module = path.removesuffix(".py").replace("/", ".")
    if module == "__init__":
        return ""
    return module.removesuffix(".__init__")


def source_file(path: str, text: str) -> SourceFile:
    """SourceFile with dedented text and a module name derived from the path."""
    return SourceFile(path=path, module=module_for(path), text=textwrap.dedent(text))


@pytest.fixture
def make_snapshot() -> Callable[..., ProgramSnapshot]:
    """Build a snapshot from ``{path: source}``; sources are dedented."""

    def _make(files: dict[str, str]) -> ProgramSnapshot:
        return ProgramSnapshot(tuple(source_file(path, text) for path, text in files.items()))

    return _make


class AnalysedProgram:
    """Parsed modules and symbol table of a snapshot, as the pipeline builds them."""

    def __init__(self, snapshot: ProgramSnapshot):
        self.provider = SyntaxProvider()
        self.parsed: dict[str, ParsedModule] = self.provider.parse(with_marker_module(snapshot))
        self.symbol_table = SymbolTable(self.parsed)

    def declaration(self, module: str, qualname: str) -> DeclarationNode:
        for declaration in self.provider.iter_declarations(self.parsed):
            if declaration.module == module and declaration.qualname == qualname:
                return declaration
        raise LookupError(f"{module}:{qualname}")

    def candidates(self) -> list[DeclarationNode]:
        return list(self.provider.iter_candidates(self.parsed))


@pytest.fixture
def analyse(make_snapshot: Callable[..., ProgramSnapshot]) -> Callable[..., AnalysedProgram]:
    """Parse ``{path: source}`` and build its symbol table."""

    def _analyse(files: dict[str, str]) -> AnalysedProgram:
        return AnalysedProgram(make_snapshot(files))

    return _analyse


@pytest.fixture
def colors_source() -> str:
    """A small opted-in enum used across tests."""
    return """
        from enum import Enum, auto

        from enum_extensions import EnumExtensions


        @EnumExtensions
        class Color(Enum):
            RED = 1
            GREEN = auto()
            BLUE = auto()
        """


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate tests from ENUMGEN_* variables and logging set up by other tests."""
    import os

    for key in list(os.environ):
        if key.startswith("ENUMGEN_"):
            monkeypatch.delenv(key)
    yield
    if LoggerSetup.is_initialized():
        LoggerSetup.reset()

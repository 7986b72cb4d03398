#!/usr/bin/env python3

"""Inputs and outputs of one analysis pass."""

import ast
from dataclasses import dataclass, field
from pathlib import PurePath

from .enum_to_generate import EnumToGenerate


@dataclass(frozen=True)
class SourceFile:
    """One source file of the analysed program."""

    path: str
    module: str
    text: str

    @property
    def is_package(self) -> bool:
        """True for a package's ``__init__.py``."""
        return PurePath(self.path).name == "__init__.py"

    @property
    def package(self) -> str:
        """Package used as the anchor for relative imports."""
        if self.is_package:
            return self.module
        return self.module.rpartition(".")[0]


@dataclass(frozen=True)
class ProgramSnapshot:
    """Immutable set of source files supplied for one pass."""

    files: tuple[SourceFile, ...] = ()

    def has_module(self, module: str) -> bool:
        """Check if a module with this dotted name is part of the snapshot."""
        return any(f.module == module for f in self.files)

    def with_file(self, source: SourceFile) -> "ProgramSnapshot":
        """Return a snapshot with a file added or replaced (matched by path)."""
        files = tuple(f for f in self.files if f.path != source.path)
        return ProgramSnapshot(files + (source,))


@dataclass(frozen=True)
class DeclarationNode:
    """A class declaration found in a syntax tree.

    Identity is (module, qualname, fingerprint). The fingerprint is a digest of
    the position-free AST, so edits elsewhere in the file do not change it and
    the same node reached twice compares equal.
    """

    module: str
    qualname: str
    fingerprint: str
    path: str = field(compare=False)
    line: int = field(compare=False)
    node: ast.ClassDef = field(compare=False, repr=False)

    @property
    def name(self) -> str:
        """Declared (unqualified) name."""
        return self.node.name

    @property
    def identity(self) -> str:
        """Stable key of the declaration across passes."""
        return f"{self.module}:{self.qualname}"


@dataclass(frozen=True)
class Diagnostic:
    """Non-fatal event reported for one pass."""

    code: str
    message: str
    path: str | None = None
    line: int | None = None

    def __str__(self) -> str:
        location = f"{self.path}:{self.line}: " if self.path else ""
        return f"{location}{self.code} {self.message}"


@dataclass(frozen=True)
class OutputUnit:
    """Named text produced for one description record."""

    hint_name: str
    namespace: str
    text: str
    record: EnumToGenerate
    reused: bool = False

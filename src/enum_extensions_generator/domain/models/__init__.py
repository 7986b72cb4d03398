#!/usr/bin/env python3

"""Domain models for the enum extensions generator."""

from .enum_to_generate import EnumMember, EnumToGenerate
from .markers import (
    ENUM_BASE_TYPES,
    EXTENSION_CLASS_NAME,
    EXTENSION_CLASS_NAMESPACE,
    FLAG_BASE_TYPES,
    MARKER_MODULE,
    MarkerIdentity,
    MarkerRegistry,
)
from .program import Diagnostic, DeclarationNode, OutputUnit, ProgramSnapshot, SourceFile
from .symbols import Accessibility, DecorationData, EnumMemberSymbol, EnumSymbol

__all__ = [
    "Accessibility",
    "DecorationData",
    "DeclarationNode",
    "Diagnostic",
    "ENUM_BASE_TYPES",
    "EXTENSION_CLASS_NAME",
    "EXTENSION_CLASS_NAMESPACE",
    "EnumMember",
    "EnumMemberSymbol",
    "EnumSymbol",
    "EnumToGenerate",
    "FLAG_BASE_TYPES",
    "MARKER_MODULE",
    "MarkerIdentity",
    "MarkerRegistry",
    "OutputUnit",
    "ProgramSnapshot",
    "SourceFile",
]

#!/usr/bin/env python3

"""Parsing services: syntax trees, constant folding and symbol resolution."""

from .constant_evaluator import ConstantEvaluator, NotConstant
from .symbol_table import ModuleScope, SymbolTable
from .syntax_provider import ParsedModule, SyntaxProvider, is_syntax_target

__all__ = [
    "ConstantEvaluator",
    "ModuleScope",
    "NotConstant",
    "ParsedModule",
    "SymbolTable",
    "SyntaxProvider",
    "is_syntax_target",
]

#!/usr/bin/env python3

"""Generator orchestrators."""

from .enum_generator import (
    DIAGNOSTIC_DUPLICATE_HINT_NAME,
    DIAGNOSTIC_SYMBOL_UNAVAILABLE,
    EnumGenerator,
)

__all__ = [
    "DIAGNOSTIC_DUPLICATE_HINT_NAME",
    "DIAGNOSTIC_SYMBOL_UNAVAILABLE",
    "EnumGenerator",
]

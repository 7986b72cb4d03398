#!/usr/bin/env python3

"""Application layer: the pass orchestrator."""

from .cancellation import CancellationToken, PassCancelledError
from .generators import EnumGenerator

__all__ = [
    "CancellationToken",
    "EnumGenerator",
    "PassCancelledError",
]

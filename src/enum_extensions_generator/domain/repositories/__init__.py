#!/usr/bin/env python3

"""Repositories holding state across passes."""

from . import cache

__all__ = [
    "cache",
]

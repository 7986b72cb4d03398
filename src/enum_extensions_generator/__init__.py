"""Enum extensions generator - fast helper classes for opted-in Python enums."""

from .application.generators import EnumGenerator
from .infrastructure.config import Config
from .main import main

__all__ = ["Config", "EnumGenerator", "main"]

"""Infrastructure configuration module."""

from .application_config import Config
from .generator_config import get_cache_file_path, get_config

__all__ = ["Config", "get_cache_file_path", "get_config"]

#!/usr/bin/env python3

"""Tunables for the generation pipeline and its caches."""

import os
from pathlib import Path
from typing import Any

# Default configuration values
DEFAULT_CONFIG: dict[str, Any] = {
    # Parsed syntax trees kept between passes
    "PARSE_CACHE_SIZE": 2048,

    # Cache file settings
    "CACHE_FILE": "enum_extensions_cache.json",
    "CACHE_DIR": ".cache",

    # Feature flags
    "ENABLE_PERSISTENT_CACHE": True,
    "INJECT_MARKER_MODULE": True,
}


def get_config() -> dict[str, Any]:
    """Get configuration with environment variable overrides.

    Every key can be overridden with an ``ENUMGEN_<KEY>`` variable; values
    that do not convert to the default's type are ignored.

    Returns:
        Configuration dictionary
    """
    config = DEFAULT_CONFIG.copy()

    for key in config:
        env_value = os.getenv(f"ENUMGEN_{key}")
        if env_value is None:
            continue
        # bool before int: bool is an int subclass
        if isinstance(config[key], bool):
            config[key] = env_value.lower() in ("true", "1", "yes", "on")
        elif isinstance(config[key], int):
            try:
                config[key] = int(env_value)
            except ValueError:
                pass
        else:
            config[key] = env_value

    return config


def get_cache_file_path(output_dir: str | Path) -> Path:
    """Get the persistent cache file path for an output directory.

    Args:
        output_dir: Directory receiving generated modules

    Returns:
        Path to cache file (its directory is created on demand)
    """
    config = get_config()
    cache_dir = Path(output_dir) / config["CACHE_DIR"]
    cache_dir.mkdir(parents=True, exist_ok=True)
    return cache_dir / config["CACHE_FILE"]

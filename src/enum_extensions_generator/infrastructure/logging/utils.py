#!/usr/bin/env python3

"""Logging utility functions and decorators."""

import logging
from collections.abc import Callable
from functools import wraps
from time import perf_counter
from typing import Any, TypeVar, cast

# Type variable for generic function decoration
F = TypeVar("F", bound=Callable[..., Any])


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for the given module name.

    Args:
        name: Module name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)


def log_timing(func: F) -> F:
    """
    Decorator to log how long a pipeline stage or command takes.

    Exceptions are logged at DEBUG level and re-raised unchanged; the caller
    decides whether an exception is an error.

    Args:
        func: Function to decorate

    Returns:
        Wrapped function that logs timing
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        logger = get_logger(func.__module__)
        func_name = func.__qualname__

        logger.debug(f"[STAGE] {func_name} started")
        start_time = perf_counter()

        try:
            result = func(*args, **kwargs)
            elapsed = perf_counter() - start_time
            logger.debug(f"[STAGE] {func_name} finished in {elapsed:.3f}s")
            return result
        except Exception as e:
            elapsed = perf_counter() - start_time
            logger.debug(f"[STAGE] {func_name} raised after {elapsed:.3f}s: {e!r}")
            raise

    return cast("F", wrapper)

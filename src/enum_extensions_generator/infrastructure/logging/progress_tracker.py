#!/usr/bin/env python3

"""Progress tracking for analysis passes."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from time import perf_counter

import psutil


class ProgressTracker:
    """
    Track and report analysis pass progress with detailed statistics.

    Counts candidates, extracted records, reused outputs and skipped
    declarations for one pass.
    """

    def __init__(self, logger: logging.Logger):
        """
        Initialize progress tracker.

        Args:
            logger: Logger instance for progress reporting
        """
        self.logger = logger
        self.start_time = perf_counter()
        self.candidate_count = 0
        self.extracted_count = 0
        self.reused_count = 0
        self.skipped_count = 0
        self.operation_stack: list[tuple[str, float]] = []

    @contextmanager
    def track_operation(self, operation_name: str) -> Iterator[None]:
        """
        Track a high-level operation with timing.

        Args:
            operation_name: Name of the operation being tracked

        Yields:
            None
        """
        start_time = perf_counter()
        self.operation_stack.append((operation_name, start_time))

        self.logger.debug(f"Starting operation: {operation_name}")

        try:
            yield
            elapsed = perf_counter() - start_time
            self.logger.debug(f"Completed operation: {operation_name} in {elapsed:.3f}s")
        except Exception as e:
            elapsed = perf_counter() - start_time
            self.logger.debug(f"Abandoned operation: {operation_name} after {elapsed:.3f}s: {e!r}")
            raise
        finally:
            self.operation_stack.pop()

    def count_candidate(self) -> None:
        """Increment candidate counter."""
        self.candidate_count += 1

    def count_extracted(self) -> None:
        """Increment counter of records produced by the extractor."""
        self.extracted_count += 1

    def count_reused(self) -> None:
        """Increment counter of outputs reused from the previous pass."""
        self.reused_count += 1

    def count_skipped(self) -> None:
        """Increment counter of candidates dropped with a diagnostic."""
        self.skipped_count += 1

    def report_summary(self) -> None:
        """Report final pass statistics."""
        total_time = perf_counter() - self.start_time

        self.logger.info(
            f"Pass complete: {self.candidate_count} candidates, "
            f"{self.extracted_count} extracted, {self.reused_count} reused, "
            f"{self.skipped_count} skipped in {total_time:.3f}s"
        )

    def get_current_context(self) -> str:
        """
        Get current operation context for logging.

        Returns:
            String describing current operation stack
        """
        if not self.operation_stack:
            return "idle"

        operations = [op[0] for op in self.operation_stack]
        return " -> ".join(operations)

    def log_memory_usage(self) -> None:
        """Log resident memory of the current process."""
        try:
            memory_mb = psutil.Process().memory_info().rss / 1024 / 1024
            self.logger.debug(f"Memory usage: {memory_mb:.1f} MB")
        except psutil.Error as e:
            self.logger.debug(f"Could not get memory usage: {e}")

    def reset(self) -> None:
        """Reset all counters and timers."""
        self.start_time = perf_counter()
        self.candidate_count = 0
        self.extracted_count = 0
        self.reused_count = 0
        self.skipped_count = 0
        self.operation_stack.clear()

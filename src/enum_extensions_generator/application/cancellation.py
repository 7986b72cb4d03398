#!/usr/bin/env python3

"""Cooperative cancellation of analysis passes."""

import threading


class PassCancelledError(Exception):
    """Raised when a pass is abandoned because cancellation was requested."""


class CancellationToken:
    """Flag set by the host environment and polled between candidates."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation of the pass using this token."""
        self._event.set()

    @property
    def is_cancellation_requested(self) -> bool:
        """True once cancel() was called."""
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        """Raise PassCancelledError if cancellation was requested."""
        if self._event.is_set():
            raise PassCancelledError("Analysis pass cancelled")

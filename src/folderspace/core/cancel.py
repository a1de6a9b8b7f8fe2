"""Cooperative cancellation flag shared between a controller and a worker."""

from __future__ import annotations

import threading


class CancellationToken:
    """Polled cancellation signal.

    Setting and reading never block, so the worker can check it at every
    directory boundary and the controller can set it from any thread.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.is_cancelled})"

"""
Run-state handle shared by extraction, the orchestrator, and the matcher.

One RunState is created per page (or per caller) and passed explicitly; it
replaces process-wide "running" / "stop requested" flags.  Cancellation is
cooperative: holders check ``cancelled`` at batch boundaries and before each
control commit, so an in-flight request always completes.
"""

from __future__ import annotations

from .errors import RunInProgressError


class RunState:
    """Tracks whether a run is active and whether a stop was requested."""

    def __init__(self) -> None:
        self._running = False
        self._cancel_requested = False

    def start(self) -> None:
        """
        Mark a run as active.

        Raises:
            RunInProgressError: A run on this state is already active.
        """
        if self._running:
            raise RunInProgressError("Auto-fill already in progress")
        self._running = True

    def finish(self) -> None:
        self._running = False

    def is_running(self) -> bool:
        return self._running

    def cancel(self) -> None:
        """Request a stop; honoured at the next checkpoint."""
        self._cancel_requested = True

    @property
    def cancelled(self) -> bool:
        return self._cancel_requested

    def reset(self) -> None:
        """Clear a previous stop request so the state can be reused."""
        self._cancel_requested = False

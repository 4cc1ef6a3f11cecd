"""
Exponential backoff and the per-batch retry driver.

Schedule: after failed attempt i (0-based) wait min(1 s * 2**i, 5 s), so
1 s, 2 s, 4 s, 5 s, ...  The final attempt's failure propagates without a
wait.  No jitter.  A retried call repeats the identical request.
"""

from __future__ import annotations

import time

from .config import BACKOFF_BASE_SECONDS, BACKOFF_CAP_SECONDS, MAX_ATTEMPTS
from .errors import ServiceError
from .executor import generate_answers
from .models import Question, RawAnswer


# ---------------------------------------------------------------------------
# Backoff helpers
# ---------------------------------------------------------------------------

def backoff_seconds(attempt: int) -> float:
    """
    Return the wait before retrying after ``attempt`` failed.

    Args:
        attempt: 0-based index of the attempt that just failed.

    Returns:
        Seconds to wait before the next attempt.
    """
    return min(BACKOFF_BASE_SECONDS * 2 ** attempt, BACKOFF_CAP_SECONDS)


def wait_with_progress(seconds: float, label: str = "Waiting") -> None:
    """
    Sleep for ``seconds`` with a printed progress indicator.

    Args:
        seconds: Duration to sleep.
        label: Prefix text for the printed message.
    """
    print(f"  {label} {seconds:g}s...", end="", flush=True)
    time.sleep(seconds)
    print(" Done.")


# ---------------------------------------------------------------------------
# Main retry wrapper
# ---------------------------------------------------------------------------

def generate_with_retry(
    batch: list[Question],
    credential: str,
    max_attempts: int = MAX_ATTEMPTS,
) -> list[RawAnswer]:
    """
    Call :func:`executor.generate_answers` with bounded retries.

    Every :class:`ServiceError` is retried; any other exception is a bug
    and propagates immediately.

    Args:
        batch: Questions to send in one request.
        credential: API key for the service.
        max_attempts: Total attempts allowed (initial call + retries).

    Returns:
        RawAnswers from the first successful attempt.

    Raises:
        ServiceError: The last attempt's failure once all attempts are spent.
        ValueError: ``max_attempts`` is less than 1.
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")

    for attempt in range(max_attempts):
        try:
            return generate_answers(batch, credential)
        except ServiceError as exc:
            print(
                f"  Attempt {attempt + 1}/{max_attempts} failed "
                f"[{exc.category}]: {exc.message[:120]}"
            )
            if attempt == max_attempts - 1:
                raise
            wait_with_progress(backoff_seconds(attempt), label="Retrying in")

    # Unreachable: the loop either returns or re-raises on the last attempt
    raise AssertionError("retry loop exited without a result")

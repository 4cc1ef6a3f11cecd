"""
Question partitioning, batch plan export, and run orchestration.

Batches are processed strictly sequentially: the request for batch n+1 is
never issued before batch n has succeeded or exhausted its retries.  A
failed batch is recorded and the run moves on; only a missing credential
aborts a run, and it does so before any request is made.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pandas as pd

from .config import (
    BASE_OVERHEAD,
    BATCH_PLAN_LOG,
    CHARS_PER_COST_UNIT,
    MAX_ATTEMPTS,
    MAX_BATCH_COST,
)
from .errors import ConfigurationError, ServiceError
from .models import BatchOutcome, ProcessingResult, Question
from .retry import generate_with_retry
from .run_state import RunState


# ---------------------------------------------------------------------------
# Partitioning
# ---------------------------------------------------------------------------

def estimate_question_cost(question: Question) -> int:
    """
    Approximate the request cost of one question.

    One unit per 4 characters of question text plus concatenated option
    text, rounded up.  Not a real token count.
    """
    n_chars = len(question.text) + len("".join(question.options or ()))
    # Ceiling division without math.ceil
    return -(-n_chars // CHARS_PER_COST_UNIT)


def partition_questions(
    questions: list[Question],
    max_batch_cost: int = MAX_BATCH_COST,
    base_overhead: int = BASE_OVERHEAD,
) -> list[list[Question]]:
    """
    Split questions into contiguous batches under an approximate cost budget.

    A batch is closed when adding the next question would push its running
    cost past ``max_batch_cost``; the next batch starts at ``base_overhead``.
    A single question over budget is placed alone in its own batch, never
    split or dropped.

    Args:
        questions: Questions in page order.
        max_batch_cost: Budget per batch in cost units.
        base_overhead: Starting cost of every batch after the first.

    Returns:
        Non-empty batches whose concatenation equals ``questions``.
    """
    batches: list[list[Question]] = []
    current: list[Question] = []
    running_cost = 0

    for question in questions:
        cost = estimate_question_cost(question)

        if running_cost + cost > max_batch_cost and current:
            batches.append(current)
            current = []
            running_cost = base_overhead

        current.append(question)
        running_cost += cost

    if current:
        batches.append(current)

    return batches


def describe_batches(batches: list[list[Question]]) -> pd.DataFrame:
    """
    Tabulate a batch plan, one row per question.

    Columns: ``batch`` (1-based), ``position`` (1-based within the batch),
    ``sequence_index``, ``kind``, ``n_options``, ``cost``, ``question``.
    """
    rows = [
        {
            "batch": batch_no,
            "position": position,
            "sequence_index": q.sequence_index,
            "kind": q.kind,
            "n_options": len(q.options or ()),
            "cost": estimate_question_cost(q),
            "question": q.text,
        }
        for batch_no, batch in enumerate(batches, start=1)
        for position, q in enumerate(batch, start=1)
    ]
    return pd.DataFrame(
        rows,
        columns=[
            "batch", "position", "sequence_index", "kind",
            "n_options", "cost", "question",
        ],
    )


def export_batch_plan(
    batches: list[list[Question]],
    log_path: Path = BATCH_PLAN_LOG,
) -> pd.DataFrame:
    """
    Write the batch plan to CSV for diagnostics.

    Args:
        batches: Output of :func:`partition_questions`.
        log_path: Destination CSV path; parent directories are created.

    Returns:
        The DataFrame that was written.
    """
    plan_df = describe_batches(batches)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    plan_df.to_csv(log_path, index=False)

    if not plan_df.empty:
        per_batch = plan_df.groupby("batch")["cost"].sum()
        print(
            f"Batch plan ({len(batches)} batches, {len(plan_df)} questions, "
            f"max batch cost {int(per_batch.max())}) logged to {log_path}"
        )
    else:
        print(f"Empty batch plan logged to {log_path}")

    return plan_df


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------

def process_batch(
    batch: list[Question],
    ordinal: int,
    credential: str,
    max_attempts: int = MAX_ATTEMPTS,
) -> BatchOutcome:
    """
    Drive one batch to its terminal outcome.

    Args:
        batch: Questions to send.
        ordinal: 1-based batch number, used in the failure record.
        credential: API key for the service.
        max_attempts: Total attempts for this batch.

    Returns:
        ``status='success'`` with the answers, or ``status='failed'`` with the
        last ServiceError's message.
    """
    try:
        answers = generate_with_retry(batch, credential, max_attempts=max_attempts)
    except ServiceError as exc:
        return BatchOutcome(batch=ordinal, status="failed", message=exc.message)

    return BatchOutcome(batch=ordinal, status="success", answers=tuple(answers))


def process_questions(
    questions: list[Question],
    credential: str | None,
    run_state: RunState | None = None,
    max_attempts: int = MAX_ATTEMPTS,
    plan_log_path: Path | None = None,
) -> ProcessingResult:
    """
    Answer a list of questions through sequential, retried batch requests.

    Args:
        questions: Questions in page order.
        credential: API key for the service.
        run_state: Optional cancellation token, checked before each batch.
        max_attempts: Total attempts per batch.
        plan_log_path: If given, the batch plan is written there as CSV.

    Returns:
        ProcessingResult with answers in batch order and one failure record
        per batch that exhausted its retries (``failures`` is ``None`` when
        every batch succeeded).

    Raises:
        ConfigurationError: ``credential`` is empty or missing.
    """
    if not credential or not credential.strip():
        raise ConfigurationError("No API key configured")

    if not questions:
        return ProcessingResult(total_count=0)

    batches = partition_questions(questions)
    if plan_log_path is not None:
        export_batch_plan(batches, plan_log_path)

    run_start = datetime.now()
    print(f"\nStarting run: {len(questions)} questions in {len(batches)} batches\n")

    outcomes: list[BatchOutcome] = []
    cancelled = False

    for ordinal, batch in enumerate(batches, start=1):
        if run_state is not None and run_state.cancelled:
            print(f"Stop requested; skipping batches {ordinal}-{len(batches)}")
            cancelled = True
            break

        print(f"[{ordinal}/{len(batches)}] Batch of {len(batch)} questions")
        outcome = process_batch(batch, ordinal, credential, max_attempts=max_attempts)
        if outcome.succeeded:
            print(f"  Received {len(outcome.answers)} answers")
        else:
            print(f"  Batch {ordinal} failed: {outcome.message}")
        outcomes.append(outcome)

    result = ProcessingResult.from_outcomes(
        outcomes,
        total_count=len(questions),
        cancelled=cancelled,
    )

    duration = (datetime.now() - run_start).total_seconds()
    n_failed = len(result.failures) if result.failures else 0
    sep = "=" * 60
    print(f"\n{sep}")
    print("RUN CANCELLED" if cancelled else "RUN COMPLETE")
    print(f"  Answers:   {result.processed_count} / {result.total_count}")
    print(f"  Batches:   {len(outcomes) - n_failed} succeeded, {n_failed} failed")
    print(f"  Duration:  {duration:.1f}s")
    print(f"{sep}\n")

    return result

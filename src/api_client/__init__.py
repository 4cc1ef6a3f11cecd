"""
src/api_client — batch orchestration against the generation service.

Module layout
-------------
config.py     — re-exported constants from config/, project paths, question kinds
models.py     — Question, RawAnswer, BatchOutcome, BatchFailure, ProcessingResult
text.py       — normalize_text (emphasis / whitespace normalization)
errors.py     — ConfigurationError, ServiceError, ExtractionError, RunInProgressError
run_state.py  — RunState cancellation / in-progress handle
parser.py     — reply text extraction, code-fence cleanup, answer mapping
executor.py   — prompt rendering, request construction, one call per batch
retry.py      — exponential backoff and the per-batch retry driver
batch.py      — question partitioning, batch plan export, run orchestration

Public interface
----------------
Answer a list of questions:
    process_questions(questions, credential, run_state=None)

Inspect how questions will be batched:
    partition_questions(questions)
    export_batch_plan(batches, log_path)

Call the service for one batch:
    generate_with_retry(batch, credential, max_attempts=3)
"""

from .batch import (
    export_batch_plan,
    partition_questions,
    process_batch,
    process_questions,
)
from .errors import (
    AutofillError,
    ConfigurationError,
    ExtractionError,
    RunInProgressError,
    ServiceError,
)
from .models import (
    BatchFailure,
    BatchOutcome,
    ProcessingResult,
    Question,
    RawAnswer,
)
from .retry import generate_with_retry
from .run_state import RunState

__all__ = [
    # Orchestration
    "process_questions",
    "process_batch",
    "partition_questions",
    "export_batch_plan",
    "generate_with_retry",
    # Records
    "Question",
    "RawAnswer",
    "BatchOutcome",
    "BatchFailure",
    "ProcessingResult",
    "RunState",
    # Errors
    "AutofillError",
    "ConfigurationError",
    "ExtractionError",
    "RunInProgressError",
    "ServiceError",
]

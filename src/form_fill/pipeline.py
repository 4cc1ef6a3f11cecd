"""
End-to-end fill flow and the request/response relay handler.

Two entry points:

  handle_process_form — the relay side: question payload in, response dict
                        out.  Gates on the enable flag and the stored key,
                        then runs the orchestrator.
  run_autofill        — the page side: extract questions, hand them to the
                        relay handler, and write the answers back.

Status lines are printed where a host would show its status banner.
"""

from __future__ import annotations

from pathlib import Path

from ..api_client.batch import process_questions
from ..api_client.config import MAX_ATTEMPTS, REQUIRE_ENABLED_FLAG, SKIP_EMPTY_ANSWERS
from ..api_client.errors import ConfigurationError, ExtractionError, RunInProgressError
from ..api_client.models import Question, RawAnswer
from ..api_client.run_state import RunState

from .extraction import extract_questions
from .matcher import apply_answers
from .storage import SettingsStore

AUTOFILL_OFF = "AUTOFILL_OFF"
NO_API_KEY = "NO_API_KEY"

USER_MESSAGES: dict[str, str] = {
    AUTOFILL_OFF: "AutoFill is turned OFF",
    NO_API_KEY: "Please set your Gemini API key in extension settings",
}


def _error_response(code: str) -> dict:
    return {"error": code, "user_message": USER_MESSAGES[code]}


def handle_process_form(
    questions: list[Question],
    store: SettingsStore,
    run_state: RunState | None = None,
    require_enabled: bool = REQUIRE_ENABLED_FLAG,
    max_attempts: int = MAX_ATTEMPTS,
    plan_log_path: Path | None = None,
) -> dict:
    """
    Answer a question payload and return the relay response.

    Returns:
        ``{"error", "user_message"}`` when autofill is off or no key is
        stored; otherwise :meth:`ProcessingResult.to_response` output
        (``answers``, ``failures``, ``processed``, ``total``, ``cancelled``).
    """
    if require_enabled and not store.is_enabled():
        print("AutoFill is OFF. Request ignored.")
        return _error_response(AUTOFILL_OFF)

    try:
        result = process_questions(
            questions,
            store.get_api_key(),
            run_state=run_state,
            max_attempts=max_attempts,
            plan_log_path=plan_log_path,
        )
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}")
        return _error_response(NO_API_KEY)

    return result.to_response()


def _summary(status: str, message: str, filled: int = 0, total: int = 0) -> dict:
    print(f"[autofill] {message}")
    return {"status": status, "filled": filled, "total": total, "message": message}


def run_autofill(
    nodes,
    store: SettingsStore,
    run_state: RunState | None = None,
    require_enabled: bool = REQUIRE_ENABLED_FLAG,
    skip_empty: bool = SKIP_EMPTY_ANSWERS,
    max_attempts: int = MAX_ATTEMPTS,
) -> dict:
    """
    Extract, answer, and fill one page.

    Args:
        nodes: Question nodes in page order (see :mod:`.extraction`).
        store: Settings store holding the key and the enable flag.
        run_state: Shared handle for this page; a new one is used if omitted.
        require_enabled: Refuse to run unless the enable flag is on.
        skip_empty: Do not write empty answers.
        max_attempts: Total attempts per batch.

    Returns:
        Dict with ``status`` (``'filled'``, ``'stopped'``, ``'disabled'``,
        ``'in_progress'``, ``'no_questions'``, or ``'error'``), ``filled``,
        ``total``, and a user-facing ``message``.
    """
    if run_state is None:
        run_state = RunState()

    if require_enabled and not store.is_enabled():
        return _summary("disabled", "AutoFill is OFF")

    if run_state.cancelled:
        return _summary("stopped", "AutoFill stopped before start")

    try:
        run_state.start()
    except RunInProgressError as exc:
        return _summary("in_progress", str(exc))

    try:
        print("[autofill] Extracting form questions...")
        try:
            questions = extract_questions(nodes, run_state=run_state)
        except ExtractionError as exc:
            return _summary("error", str(exc))

        if run_state.cancelled:
            return _summary("stopped", "AutoFill stopped", total=len(questions))
        if not questions:
            return _summary("no_questions", "No questions found")

        print(f"[autofill] Processing {len(questions)} questions...")
        response = handle_process_form(
            questions,
            store,
            run_state=run_state,
            require_enabled=require_enabled,
            max_attempts=max_attempts,
        )
        if response.get("error"):
            return _summary("error", response["user_message"], total=len(questions))

        if run_state.cancelled:
            return _summary("stopped", "AutoFill stopped", total=len(questions))

        answers = [RawAnswer.from_dict(item) for item in response["answers"]]
        filled = apply_answers(nodes, answers, run_state=run_state, skip_empty=skip_empty)

        message = f"Filled {filled}/{len(questions)} questions"
        if response.get("failures"):
            message += f" ({len(response['failures'])} batches failed)"
        return _summary("filled", message, filled=filled, total=len(questions))

    finally:
        run_state.finish()

"""
Writing answers back into page controls.

Answers are matched to page questions by exact equality of normalized text
(emphasis markers removed, whitespace collapsed, case kept).  Nodes expose
the same ``heading`` / ``kind`` / ``choices`` as in extraction, plus:

    text_control  — for 'short' / 'paragraph': an object with a writable
                    ``value`` and ``dispatch_event(name)``
    choices       — for 'mcq' / 'checkbox': objects with ``label`` and
                    ``activate()``

After a text write the host's change-notification sequence ``input``,
``change``, ``blur`` is dispatched so page scripts treat it as a real edit.
"""

from __future__ import annotations

from ..api_client.config import SKIP_EMPTY_ANSWERS
from ..api_client.models import RawAnswer
from ..api_client.run_state import RunState
from ..api_client.text import normalize_text

TEXT_CHANGE_EVENTS: tuple[str, ...] = ("input", "change", "blur")


def _as_list(value: str | tuple[str, ...]) -> list[str]:
    if isinstance(value, (tuple, list)):
        return list(value)
    return [value]


def _as_scalar(value: str | tuple[str, ...]) -> str:
    if isinstance(value, (tuple, list)):
        return value[0] if value else ""
    return value


def build_answer_index(answers: list[RawAnswer]) -> dict[str, RawAnswer]:
    """Map normalized question text → answer; the first answer for a text wins."""
    index: dict[str, RawAnswer] = {}
    for answer in answers:
        key = normalize_text(answer.question_text)
        if key and key not in index:
            index[key] = answer
    return index


# ---------------------------------------------------------------------------
# Per-kind commits
# ---------------------------------------------------------------------------

def fill_text(node, value: str | tuple[str, ...]) -> bool:
    control = getattr(node, "text_control", None)
    if control is None:
        return False

    text = ", ".join(value) if isinstance(value, (tuple, list)) else value
    control.value = text
    for event in TEXT_CHANGE_EVENTS:
        control.dispatch_event(event)
    return True


def fill_single_choice(node, value: str | tuple[str, ...]) -> bool:
    """Activate the one choice whose label matches; ``False`` if none does."""
    wanted = normalize_text(_as_scalar(value))
    if not wanted:
        return False

    for choice in getattr(node, "choices", None) or []:
        if normalize_text(choice.label) == wanted:
            choice.activate()
            return True
    return False


def fill_multi_choice(node, value: str | tuple[str, ...]) -> bool:
    """Activate every choice named in the answer; ``True`` if any was."""
    wanted = {normalize_text(v) for v in _as_list(value)}
    wanted.discard("")

    activated = 0
    for choice in getattr(node, "choices", None) or []:
        if normalize_text(choice.label) in wanted:
            choice.activate()
            activated += 1
    return activated > 0


_FILLERS = {
    "short": fill_text,
    "paragraph": fill_text,
    "mcq": fill_single_choice,
    "checkbox": fill_multi_choice,
}


def apply_answers(
    nodes,
    answers: list[RawAnswer],
    run_state: RunState | None = None,
    skip_empty: bool = SKIP_EMPTY_ANSWERS,
) -> int:
    """
    Commit answers into the page's controls.

    Nodes without a matching answer, with an unrecognized kind, or (when
    ``skip_empty``) with an empty answer are left untouched.  With
    ``skip_empty=False`` an empty answer clears a text control.

    Args:
        nodes: Question nodes in page order.
        answers: Answers from :func:`process_questions`.
        run_state: Optional cancellation token, checked before each commit.
        skip_empty: Do not write empty answers.

    Returns:
        Number of questions filled.
    """
    index = build_answer_index(answers)
    filled = 0

    for node in nodes:
        if run_state is not None and run_state.cancelled:
            break

        answer = index.get(normalize_text(getattr(node, "heading", "")))
        if answer is None:
            continue
        if answer.is_empty and skip_empty:
            continue

        filler = _FILLERS.get(getattr(node, "kind", None))
        if filler is None:
            continue

        if filler(node, answer.answer_value):
            filled += 1

    return filled

"""
Question extraction from page nodes.

A page is represented by a sequence of question nodes in page order.  Each
node exposes:

    heading       — raw heading text (may contain emphasis markers)
    kind          — 'short', 'paragraph', 'mcq', 'checkbox', or anything
                    else for widgets this package does not recognize
    choices       — selectable controls, each with a ``label`` attribute
                    (empty for text questions)

Locating nodes in a live document is the host's job; this module only turns
nodes into Question records.
"""

from __future__ import annotations

from ..api_client.config import CHOICE_KINDS, QUESTION_KINDS
from ..api_client.errors import ExtractionError
from ..api_client.models import Question
from ..api_client.run_state import RunState
from ..api_client.text import normalize_options, normalize_text


def collect_option_texts(node) -> list[str]:
    """
    Return the node's normalized, non-empty, de-duplicated choice labels
    in page order.
    """
    choices = getattr(node, "choices", None) or []
    return normalize_options(getattr(choice, "label", "") for choice in choices)


def extract_questions(nodes, run_state: RunState | None = None) -> list[Question]:
    """
    Build Question records from page nodes.

    Nodes with an empty heading or an unrecognized kind are skipped, as are
    choice questions without any usable option label.  ``sequence_index``
    is the node's position among all nodes on the page.

    Args:
        nodes: Question nodes in page order.
        run_state: Optional cancellation token, checked before each node.

    Returns:
        Questions in page order; those gathered so far if a stop is requested.

    Raises:
        ExtractionError: The page has no question nodes at all.
    """
    nodes = list(nodes)
    if not nodes:
        raise ExtractionError(
            "No form questions found. Make sure the page contains a survey form."
        )

    questions: list[Question] = []
    for index, node in enumerate(nodes):
        if run_state is not None and run_state.cancelled:
            break

        text = normalize_text(getattr(node, "heading", ""))
        kind = getattr(node, "kind", None)
        if not text or kind not in QUESTION_KINDS:
            continue

        options = None
        if kind in CHOICE_KINDS:
            options = collect_option_texts(node)
            if not options:
                continue

        questions.append(Question(
            text=text,
            kind=kind,
            options=tuple(options) if options is not None else None,
            sequence_index=index,
        ))

    return questions

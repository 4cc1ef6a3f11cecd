"""
src/form_fill — page-side question extraction, answer filling, and the
end-to-end autofill flow.

Module layout
-------------
extraction.py  — page nodes → Question records
matcher.py     — answers → control writes (text, single choice, multi choice)
storage.py     — JSON-file settings store (API key, enable flag)
pipeline.py    — relay handler and the extract → answer → fill flow
runner.py      — command-line entry point

Public interface
----------------
Fill one page:
    run_autofill(nodes, store, run_state=None)

Relay handler (question payload → response dict):
    handle_process_form(questions, store)

Individual steps:
    extract_questions(nodes)
    apply_answers(nodes, answers)
"""

from ..api_client.text import normalize_text

from .extraction import extract_questions
from .matcher import apply_answers
from .pipeline import handle_process_form, run_autofill
from .storage import SettingsStore

__all__ = [
    "run_autofill",
    "handle_process_form",
    "extract_questions",
    "apply_answers",
    "SettingsStore",
    "normalize_text",
]

"""
Shared pytest fixtures and page fakes for the autofill tests.

The fake page nodes implement the duck-typed node interface used by
src/form_fill/extraction.py and src/form_fill/matcher.py: ``heading``,
``kind``, ``choices`` (objects with ``label`` / ``activate()``), and
``text_control`` (object with ``value`` / ``dispatch_event()``).
"""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest

from src.api_client.models import Question, RawAnswer
from src.form_fill.storage import SettingsStore

# A key long enough to pass SettingsStore validation
TEST_API_KEY = "test-key-0123456789abcdef"


# ---------------------------------------------------------------------------
# Page fakes
# ---------------------------------------------------------------------------

class FakeTextControl:
    """Text input that records the events dispatched on it."""

    def __init__(self, value: str = "") -> None:
        self.value = value
        self.events: list[str] = []

    def dispatch_event(self, name: str) -> None:
        self.events.append(name)


class FakeChoice:
    """Radio button / checkbox that records activation."""

    def __init__(self, label: str) -> None:
        self.label = label
        self.activated = 0

    def activate(self) -> None:
        self.activated += 1


class FakeQuestionNode:
    def __init__(
        self,
        heading: str,
        kind: str | None = "short",
        options: list[str] | None = None,
    ) -> None:
        self.heading = heading
        self.kind = kind
        self.choices = [FakeChoice(label) for label in options or []]
        self.text_control = (
            FakeTextControl() if kind in ("short", "paragraph") else None
        )

    def activated_labels(self) -> list[str]:
        return [c.label for c in self.choices if c.activated]


def text_node(heading: str, kind: str = "short") -> FakeQuestionNode:
    return FakeQuestionNode(heading, kind=kind)


def choice_node(heading: str, options: list[str], kind: str = "mcq") -> FakeQuestionNode:
    return FakeQuestionNode(heading, kind=kind, options=options)


# ---------------------------------------------------------------------------
# Record builders
# ---------------------------------------------------------------------------

def make_question(
    text: str = "What is your name?",
    kind: str = "short",
    options: list[str] | None = None,
    index: int = 0,
) -> Question:
    return Question(
        text=text,
        kind=kind,
        options=tuple(options) if options is not None else None,
        sequence_index=index,
    )


def make_questions(n: int, prefix: str = "Question") -> list[Question]:
    """n short questions with distinct texts."""
    return [make_question(f"{prefix} {i}", index=i) for i in range(n)]


def make_answer(question: str, answer: str | tuple[str, ...], kind: str = "short") -> RawAnswer:
    return RawAnswer(question_text=question, answer_value=answer, kind=kind)


# ---------------------------------------------------------------------------
# Service reply builders
# ---------------------------------------------------------------------------

def gemini_reply(text: str | None) -> dict:
    """A generateContent reply whose first candidate carries ``text``."""
    if text is None:
        return {"candidates": [{"content": {"parts": []}}]}
    return {"candidates": [{"content": {"parts": [{"text": text}]}, "finishReason": "STOP"}]}


def answers_text(entries: list[dict]) -> str:
    return json.dumps({"answers": entries})


def mock_http_response(json_body=None, status_code: int = 200, json_error: bool = False):
    """MagicMock standing in for requests.Response."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 300
    if json_error:
        resp.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        resp.json.return_value = json_body
    return resp


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def settings_store(tmp_path, monkeypatch):
    """Empty settings store in a temp dir, with the env fallback cleared."""
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    return SettingsStore(tmp_path / "settings.json")


@pytest.fixture
def enabled_store(settings_store):
    """Settings store with a saved key and the enable flag on."""
    settings_store.save_api_key(TEST_API_KEY)
    settings_store.set_enabled(True)
    return settings_store


@pytest.fixture
def no_sleep(monkeypatch):
    """Record backoff waits instead of sleeping."""
    waits: list[float] = []
    monkeypatch.setattr("src.api_client.retry.time.sleep", waits.append)
    return waits

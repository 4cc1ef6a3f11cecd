"""
Tests for the command-line runner (src/form_fill/runner.py).
"""

from __future__ import annotations

import json
from unittest.mock import patch

import pandas as pd
import pytest

from src.form_fill.runner import build_parser, load_questions, main
from src.form_fill.storage import SettingsStore

from .conftest import TEST_API_KEY, make_answer

GENERATE = "src.api_client.batch.generate_with_retry"

PAYLOAD = [
    {"question": "Your name", "type": "short", "options": None, "index": 0},
    {"question": "Favorite color", "type": "mcq", "options": ["Red", "Blue"], "index": 1},
]


def echo_answers(batch, credential, max_attempts=3):
    return [make_answer(q.text, "Blue", kind=q.kind) for q in batch]


@pytest.fixture
def question_file(tmp_path):
    path = tmp_path / "questions.json"
    path.write_text(json.dumps(PAYLOAD), encoding="utf-8")
    return path


@pytest.fixture
def settings_file(tmp_path, monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    path = tmp_path / "settings.json"
    store = SettingsStore(path)
    store.save_api_key(TEST_API_KEY)
    store.set_enabled(True)
    return path


class TestLoadQuestions:

    def test_loads_payload(self, question_file):
        questions = load_questions(question_file)
        assert [q.kind for q in questions] == ["short", "mcq"]
        assert questions[1].options == ("Red", "Blue")

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_questions(tmp_path / "missing.json")

    def test_non_list_payload(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text('{"question": "x"}', encoding="utf-8")
        with pytest.raises(ValueError):
            load_questions(path)


    def test_entries_are_normalized(self, tmp_path):
        path = tmp_path / "raw.json"
        path.write_text(json.dumps([
            {"question": "  Your   name *", "type": "short"},
            {"question": "Color", "type": "mcq", "options": ["Red", "Red ", "Blue"]},
        ]), encoding="utf-8")

        questions = load_questions(path)
        assert questions[0].text == "Your name"
        assert questions[1].options == ("Red", "Blue")

    @pytest.mark.parametrize("entry", [
        {"type": "short"},
        {"question": "Color", "type": "mcq"},
        "just a string",
    ])
    def test_bad_entry_raises_value_error(self, tmp_path, entry):
        path = tmp_path / "bad_entry.json"
        path.write_text(json.dumps([entry]), encoding="utf-8")
        with pytest.raises(ValueError, match="entry 0"):
            load_questions(path)


class TestMain:

    def test_defaults(self, question_file):
        args = build_parser().parse_args([str(question_file)])
        assert args.max_attempts == 3
        assert args.plan_log is None
        assert args.ignore_enabled_flag is False

    def test_successful_run(self, question_file, settings_file, capsys):
        with patch(GENERATE, side_effect=echo_answers):
            code = main([str(question_file), "--settings", str(settings_file)])

        out = capsys.readouterr().out
        assert code == 0
        assert '"processed": 2' in out
        assert '"failures": null' in out

    def test_plan_log_written(self, question_file, settings_file, tmp_path):
        plan_log = tmp_path / "logs" / "plan.csv"
        with patch(GENERATE, side_effect=echo_answers):
            main([
                str(question_file),
                "--settings", str(settings_file),
                "--plan-log", str(plan_log),
            ])

        plan_df = pd.read_csv(plan_log)
        assert list(plan_df["question"]) == ["Your name", "Favorite color"]

    def test_disabled_flag_exit_code(self, question_file, tmp_path, monkeypatch, capsys):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        store = SettingsStore(tmp_path / "settings.json")
        store.save_api_key(TEST_API_KEY)

        with patch(GENERATE) as mock_gen:
            code = main([str(question_file), "--settings", str(store.path)])

        assert code == 1
        assert "AUTOFILL_OFF" in capsys.readouterr().out
        mock_gen.assert_not_called()

    def test_ignore_enabled_flag(self, question_file, tmp_path, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        store = SettingsStore(tmp_path / "settings.json")
        store.save_api_key(TEST_API_KEY)

        with patch(GENERATE, side_effect=echo_answers):
            code = main([
                str(question_file),
                "--settings", str(store.path),
                "--ignore-enabled-flag",
            ])
        assert code == 0

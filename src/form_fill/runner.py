"""
Command-line runner for the relay handler.

Reads a JSON list of question dicts (``question``, ``type``, ``options``,
``index``), answers them, and prints the relay response as JSON.

Usage (from project root):
    python -m src.form_fill.runner questions.json
    python -m src.form_fill.runner questions.json --plan-log logs/batch_plan.csv

The API key and enable flag come from the settings store (``--settings``),
with ``GEMINI_API_KEY`` as the key fallback.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from ..api_client.config import MAX_ATTEMPTS, REQUIRE_ENABLED_FLAG, SETTINGS_PATH
from ..api_client.models import Question

from .pipeline import handle_process_form
from .storage import SettingsStore


def load_questions(path: Path) -> list[Question]:
    """
    Load a question payload file.

    Raises:
        FileNotFoundError: ``path`` does not exist.
        ValueError: The file does not hold a JSON list, or an entry is invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Question file not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        payload = json.load(fh)
    if not isinstance(payload, list):
        raise ValueError(f"Expected a JSON list of questions in {path}")

    questions: list[Question] = []
    for position, item in enumerate(payload):
        try:
            questions.append(Question.from_dict(item))
        except ValueError as exc:
            raise ValueError(f"Invalid question entry {position} in {path}: {exc}") from exc
    return questions


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Answer survey questions through the generation service.",
    )
    parser.add_argument("questions", type=Path, help="JSON file of questions")
    parser.add_argument(
        "--settings", type=Path, default=SETTINGS_PATH,
        help=f"settings file (default: {SETTINGS_PATH})",
    )
    parser.add_argument(
        "--plan-log", type=Path, default=None,
        help="write the batch plan CSV here",
    )
    parser.add_argument(
        "--max-attempts", type=int, default=MAX_ATTEMPTS,
        help=f"attempts per batch (default: {MAX_ATTEMPTS})",
    )
    parser.add_argument(
        "--ignore-enabled-flag", action="store_true",
        help="run even if the stored enable flag is off",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    questions = load_questions(args.questions)
    response = handle_process_form(
        questions,
        SettingsStore(args.settings),
        require_enabled=REQUIRE_ENABLED_FLAG and not args.ignore_enabled_flag,
        max_attempts=args.max_attempts,
        plan_log_path=args.plan_log,
    )

    print(json.dumps(response, indent=2, ensure_ascii=False))
    return 1 if response.get("error") else 0


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())

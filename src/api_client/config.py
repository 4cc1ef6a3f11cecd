"""
API configuration, generation parameters, and project path constants.

Constants are defined in the top-level ``config`` package and re-exported
here so that modules in src/api_client/ have a single import site.
"""

from pathlib import Path

from config.api_config import (
    API_CONFIG,
    API_KEY_SETTING,
    ENABLED_SETTING,
    MIN_API_KEY_LENGTH,
    MODEL_ID,
)
from config.behavior import REQUIRE_ENABLED_FLAG, SKIP_EMPTY_ANSWERS
from config.model_params import (
    BACKOFF_BASE_SECONDS,
    BACKOFF_CAP_SECONDS,
    BASE_OVERHEAD,
    CHARS_PER_COST_UNIT,
    GENERATION_CONFIG,
    MAX_ATTEMPTS,
    MAX_BATCH_COST,
    REQUEST_TIMEOUT_SECONDS,
)

# ---------------------------------------------------------------------------
# Project paths
# ---------------------------------------------------------------------------

# Resolve from this file: src/api_client/config.py → src/api_client → src → root
PROJECT_ROOT = Path(__file__).resolve().parents[2]

DATA_DIR = PROJECT_ROOT / "data"
LOGS_DIR = PROJECT_ROOT / "logs"

SETTINGS_PATH = DATA_DIR / "settings.json"
BATCH_PLAN_LOG = LOGS_DIR / "batch_plan.csv"

# ---------------------------------------------------------------------------
# Question kinds
# ---------------------------------------------------------------------------

TEXT_KINDS: frozenset[str] = frozenset({"short", "paragraph"})
CHOICE_KINDS: frozenset[str] = frozenset({"mcq", "checkbox"})
QUESTION_KINDS: frozenset[str] = TEXT_KINDS | CHOICE_KINDS

__all__ = [
    "API_CONFIG",
    "API_KEY_SETTING",
    "BACKOFF_BASE_SECONDS",
    "BACKOFF_CAP_SECONDS",
    "BASE_OVERHEAD",
    "BATCH_PLAN_LOG",
    "CHARS_PER_COST_UNIT",
    "CHOICE_KINDS",
    "DATA_DIR",
    "ENABLED_SETTING",
    "GENERATION_CONFIG",
    "LOGS_DIR",
    "MAX_ATTEMPTS",
    "MAX_BATCH_COST",
    "MIN_API_KEY_LENGTH",
    "MODEL_ID",
    "PROJECT_ROOT",
    "QUESTION_KINDS",
    "REQUEST_TIMEOUT_SECONDS",
    "REQUIRE_ENABLED_FLAG",
    "SETTINGS_PATH",
    "SKIP_EMPTY_ANSWERS",
    "TEXT_KINDS",
]

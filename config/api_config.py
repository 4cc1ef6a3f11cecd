"""
Generation service endpoint and authentication configuration.

This is the AUTHORITATIVE source for API configuration.
src/api_client/config.py imports from here. Do not maintain parallel copies.

BEFORE RUNNING:
1. Save an API key through the settings store, or export GEMINI_API_KEY.
2. Verify the model id is still served on the v1 endpoint.

ENVIRONMENT VARIABLES:
    GEMINI_API_KEY      — fallback API key when the settings store holds none
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# API configuration
# ---------------------------------------------------------------------------
#
# Fields:
#   endpoint     : Full URL of the generateContent method
#   model_id     : Provider-specific model identifier string
#   auth_type    : 'api_key_header' → key sent in the x-goog-api-key header
#   api_key_env  : Name of the environment variable holding the API key

MODEL_ID: str = "gemini-2.5-flash-lite"

API_CONFIG: dict[str, str] = {
    "endpoint": (
        "https://generativelanguage.googleapis.com"
        f"/v1/models/{MODEL_ID}:generateContent"
    ),
    "model_id": MODEL_ID,
    "auth_type": "api_key_header",
    "api_key_env": "GEMINI_API_KEY",
}

# Storage keys used by the settings store
API_KEY_SETTING: str = "GEMINI_API_KEY"
ENABLED_SETTING: str = "AUTOFILL_ENABLED"

# Keys shorter than this are rejected on save
MIN_API_KEY_LENGTH: int = 20

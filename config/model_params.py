"""
Generation parameters, batch budget, and retry schedule.

This is the AUTHORITATIVE source for all parameter and execution constants.
src/api_client/config.py imports from here. Do not maintain parallel copies.

Design rationale:
- Generation parameters are fixed; callers cannot tune them per run.
- The batch cost is an approximation (4 characters per unit), not a real
  token count.  MAX_BATCH_COST leaves headroom below the model's context.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Generation parameters (Gemini generationConfig names)
# ---------------------------------------------------------------------------

GENERATION_CONFIG: dict[str, int | float] = {
    "temperature": 0.2,       # Low randomness
    "topP": 0.8,
    "topK": 40,
    "maxOutputTokens": 4096,  # Bounded reply size
    "candidateCount": 1,      # Only the first candidate is read
}

# ---------------------------------------------------------------------------
# Batch budget
# ---------------------------------------------------------------------------

# Characters per cost unit in the cost estimate
CHARS_PER_COST_UNIT: int = 4

# Upper bound on the estimated cost of one batch
MAX_BATCH_COST: int = 3000

# Cost charged to every batch after the first for the fixed prompt text
BASE_OVERHEAD: int = 100

# ---------------------------------------------------------------------------
# Retry schedule
# ---------------------------------------------------------------------------

# Total attempts per batch (initial call + retries)
MAX_ATTEMPTS: int = 3

# Backoff after failed attempt i (0-based): min(BASE * 2**i, CAP) seconds
BACKOFF_BASE_SECONDS: float = 1.0
BACKOFF_CAP_SECONDS: float = 5.0

# HTTP request timeout; expiry counts as a failed attempt
REQUEST_TIMEOUT_SECONDS: int = 60

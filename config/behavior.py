"""
Behavior switches for the fill flow.

Both switches can be overridden per call by the functions that read them.
"""

from __future__ import annotations

# Empty answers from the service are not written into controls
SKIP_EMPTY_ANSWERS: bool = True

# The stored AUTOFILL_ENABLED flag must be on before anything runs
REQUIRE_ENABLED_FLAG: bool = True

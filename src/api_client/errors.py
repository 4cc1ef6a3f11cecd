"""
Exception types raised by the autofill engine.

ServiceError carries a category so retry output and failure records can say
what kind of failure a batch hit; every category is retried.
"""

from __future__ import annotations


class AutofillError(Exception):
    """Base class for all autofill errors."""


class ConfigurationError(AutofillError):
    """No usable API credential; fatal to the whole run."""


class ExtractionError(AutofillError):
    """The page exposes no recognizable question nodes."""


class RunInProgressError(AutofillError):
    """A run was started while another run on the same state is active."""


class ServiceError(AutofillError):
    """
    One generation request failed.

    Attributes:
        message: Human-readable description, preserved verbatim in failures.
        category: One of the category constants below.
    """

    TIMEOUT = "timeout"
    TRANSPORT = "transport"
    HTTP_STATUS = "http_status"
    SAFETY_BLOCK = "safety_block"
    INVALID_RESPONSE = "invalid_response"

    def __init__(self, message: str, category: str = TRANSPORT) -> None:
        super().__init__(message)
        self.message = message
        self.category = category

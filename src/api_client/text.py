"""Text normalization shared by the question model, extraction, and answer matching."""

from __future__ import annotations

import re

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_text(text: str | None) -> str:
    """
    Strip ``*`` emphasis markers, collapse whitespace runs, and trim.

    Case is preserved: ``"  Favorite *Color*  "`` → ``"Favorite Color"``.
    """
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text.replace("*", "")).strip()


def normalize_options(labels) -> list[str]:
    """
    Normalize option labels, dropping empty ones and later duplicates.

    Page order is kept: ``["Red ", "Red", "", "Blue*"]`` → ``["Red", "Blue"]``.
    """
    options: list[str] = []
    for label in labels:
        label = normalize_text(label)
        if label and label not in options:
            options.append(label)
    return options

"""
Prompt construction and generation-service request execution.

One call to :func:`generate_answers` issues exactly one HTTP request for one
batch.  Every failure is raised as :class:`ServiceError` so the retry driver
can treat transport, status, safety, and parse failures uniformly.
"""

from __future__ import annotations

import requests

from .config import API_CONFIG, GENERATION_CONFIG, REQUEST_TIMEOUT_SECONDS
from .errors import ServiceError
from .models import Question, RawAnswer
from .parser import extract_error_message, parse_api_response

# ---------------------------------------------------------------------------
# Prompt text
# ---------------------------------------------------------------------------

PROMPT_HEADER = """You are a form-filling assistant. Answer each question accurately and concisely.

For multiple choice questions (MCQ): Select the exact option text from the provided options.
For checkboxes: Return an array of exact option texts if multiple selections are needed.
For text inputs: Provide a brief, relevant answer.
For paragraphs: Provide a clear, complete answer in 2-3 sentences.

Questions to answer:"""

PROMPT_INSTRUCTIONS = """CRITICAL INSTRUCTIONS:
1. Respond with ONLY a single valid JSON object, no text before or after it
2. Use double quotes
3. Escape quotes inside strings
4. No trailing commas
5. Leave out any question you cannot answer

{"answers":[{"q":"question","a":"answer","type":"mcq"}]}"""


def format_question(question: Question, number: int) -> str:
    """
    Render one question block.

    Example::

        Question 2:
        Favorite color?
        Options: 1. Red | 2. Blue
        Type: mcq
    """
    options_text = ""
    if question.options:
        labelled = " | ".join(
            f"{i}. {option}" for i, option in enumerate(question.options, start=1)
        )
        options_text = f"\nOptions: {labelled}"
    return f"Question {number}:\n{question.text}{options_text}\nType: {question.kind}"


def build_prompt(batch: list[Question]) -> str:
    """Render the full prompt for a batch; questions are numbered from 1."""
    questions_text = "\n\n".join(
        format_question(q, number) for number, q in enumerate(batch, start=1)
    )
    return f"{PROMPT_HEADER}\n\n{questions_text}\n\n{PROMPT_INSTRUCTIONS}"


# ---------------------------------------------------------------------------
# Request construction
# ---------------------------------------------------------------------------

def build_request_payload(prompt: str) -> dict:
    """Construct the generateContent JSON body with the fixed parameters."""
    return {
        "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        "generationConfig": dict(GENERATION_CONFIG),
    }


def build_request_headers(credential: str) -> dict:
    """
    The service authenticates via the ``x-goog-api-key`` header; the key
    never goes into the URL.
    """
    return {
        "x-goog-api-key": credential,
        "Content-Type": "application/json",
    }


def redact_credential(text: str, credential: str) -> str:
    """Replace every occurrence of ``credential`` in ``text`` with a mask."""
    if not credential:
        return text
    return text.replace(credential, "[REDACTED]")


# ---------------------------------------------------------------------------
# API call execution
# ---------------------------------------------------------------------------

def generate_answers(batch: list[Question], credential: str) -> list[RawAnswer]:
    """
    Send one batch to the generation service and parse the reply.

    Args:
        batch: Non-empty list of questions.
        credential: API key for the service.

    Returns:
        RawAnswers in the order the service returned them; possibly fewer
        than the questions in the batch, possibly empty.

    Raises:
        ServiceError: Transport failure or timeout, non-2xx status, safety
                      block, or an undecodable payload.
    """
    payload = build_request_payload(build_prompt(batch))

    try:
        response = requests.post(
            API_CONFIG["endpoint"],
            headers=build_request_headers(credential),
            json=payload,
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
    except requests.Timeout as exc:
        raise ServiceError(
            "Request timed out: " + redact_credential(str(exc), credential),
            category=ServiceError.TIMEOUT,
        ) from exc
    except requests.RequestException as exc:
        raise ServiceError(
            "Request failed: " + redact_credential(str(exc), credential),
            category=ServiceError.TRANSPORT,
        ) from exc

    if not response.ok:
        try:
            error_json = response.json()
        except ValueError:
            error_json = None
        raise ServiceError(
            redact_credential(
                extract_error_message(error_json, response.status_code), credential
            ),
            category=ServiceError.HTTP_STATUS,
        )

    try:
        response_json = response.json()
    except ValueError as exc:
        raise ServiceError(
            f"Service returned a non-JSON body: {exc}",
            category=ServiceError.INVALID_RESPONSE,
        ) from exc

    if not isinstance(response_json, dict):
        raise ServiceError(
            "Service returned an unexpected body shape",
            category=ServiceError.INVALID_RESPONSE,
        )

    return parse_api_response(response_json)

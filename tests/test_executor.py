"""
Unit tests for src/api_client/executor.py.

Covers:
- build_prompt: 1-based numbering within the batch, labelled options, kind
  line, fixed instruction text.
- build_request_payload: fixed generation parameters, single candidate.
- generate_answers: request wiring (endpoint, key header, timeout), every
  failure path mapped to ServiceError with the right category, and the key
  masked in failure messages.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest
import requests

from src.api_client.config import API_CONFIG, GENERATION_CONFIG, REQUEST_TIMEOUT_SECONDS
from src.api_client.errors import ServiceError
from src.api_client.executor import (
    build_prompt,
    build_request_payload,
    format_question,
    generate_answers,
)

from .conftest import (
    TEST_API_KEY,
    answers_text,
    gemini_reply,
    make_question,
    mock_http_response,
)

POST = "src.api_client.executor.requests.post"


# ---------------------------------------------------------------------------
# Class: prompt construction
# ---------------------------------------------------------------------------

class TestBuildPrompt:

    def test_text_question_block(self):
        block = format_question(make_question("Your name?"), 1)
        assert block == "Question 1:\nYour name?\nType: short"

    def test_options_are_labelled(self):
        q = make_question("Color?", kind="mcq", options=["Red", "Blue"])
        block = format_question(q, 2)
        assert block == "Question 2:\nColor?\nOptions: 1. Red | 2. Blue\nType: mcq"

    def test_numbering_restarts_per_batch(self):
        batch = [make_question("A?", index=7), make_question("B?", index=8)]
        prompt = build_prompt(batch)
        assert "Question 1:\nA?" in prompt
        assert "Question 2:\nB?" in prompt
        assert "Question 3" not in prompt

    def test_instructions_demand_answers_object(self):
        prompt = build_prompt([make_question("A?")])
        assert '{"answers":[{"q":"question","a":"answer","type":"mcq"}]}' in prompt
        assert "ONLY" in prompt


class TestBuildRequestPayload:

    def test_payload_shape(self):
        payload = build_request_payload("hello")
        assert payload["contents"] == [{"role": "user", "parts": [{"text": "hello"}]}]
        assert payload["generationConfig"] == GENERATION_CONFIG

    def test_fixed_parameters(self):
        config = build_request_payload("x")["generationConfig"]
        assert config["candidateCount"] == 1
        assert config["temperature"] <= 0.2
        assert config["maxOutputTokens"] == 4096

    def test_payload_does_not_share_config_dict(self):
        build_request_payload("x")["generationConfig"]["temperature"] = 1.5
        assert GENERATION_CONFIG["temperature"] == 0.2


# ---------------------------------------------------------------------------
# Class: generate_answers
# ---------------------------------------------------------------------------

class TestGenerateAnswers:

    def test_request_wiring(self):
        reply = gemini_reply(answers_text([{"q": "A?", "a": "yes", "type": "short"}]))
        with patch(POST, return_value=mock_http_response(reply)) as mock_post:
            answers = generate_answers([make_question("A?")], TEST_API_KEY)

        assert answers[0].answer_value == "yes"
        args, kwargs = mock_post.call_args
        assert args[0] == API_CONFIG["endpoint"]
        assert kwargs["headers"]["x-goog-api-key"] == TEST_API_KEY
        assert "params" not in kwargs
        assert TEST_API_KEY not in args[0]
        assert kwargs["timeout"] == REQUEST_TIMEOUT_SECONDS
        assert "A?" in kwargs["json"]["contents"][0]["parts"][0]["text"]

    def test_fenced_reply(self):
        text = "```json\n" + answers_text([{"q": "A?", "a": "x", "type": "short"}]) + "\n```"
        with patch(POST, return_value=mock_http_response(gemini_reply(text))):
            answers = generate_answers([make_question("A?")], TEST_API_KEY)
        assert answers[0].question_text == "A?"

    def test_empty_reply_is_not_an_error(self):
        with patch(POST, return_value=mock_http_response(gemini_reply(None))):
            assert generate_answers([make_question("A?")], TEST_API_KEY) == []

    def test_timeout(self):
        with patch(POST, side_effect=requests.Timeout("read timed out")):
            with pytest.raises(ServiceError) as exc_info:
                generate_answers([make_question("A?")], TEST_API_KEY)
        assert exc_info.value.category == ServiceError.TIMEOUT

    def test_connection_error(self):
        with patch(POST, side_effect=requests.ConnectionError("DNS failure")):
            with pytest.raises(ServiceError) as exc_info:
                generate_answers([make_question("A?")], TEST_API_KEY)
        assert exc_info.value.category == ServiceError.TRANSPORT
        assert "DNS failure" in exc_info.value.message

    def test_http_error_uses_structured_message(self):
        body = {"error": {"code": 400, "message": "API key not valid. Please pass a valid API key."}}
        with patch(POST, return_value=mock_http_response(body, status_code=400)):
            with pytest.raises(ServiceError) as exc_info:
                generate_answers([make_question("A?")], TEST_API_KEY)
        assert exc_info.value.message == "API key not valid. Please pass a valid API key."
        assert exc_info.value.category == ServiceError.HTTP_STATUS

    def test_http_error_without_body_uses_status(self):
        with patch(POST, return_value=mock_http_response(status_code=503, json_error=True)):
            with pytest.raises(ServiceError) as exc_info:
                generate_answers([make_question("A?")], TEST_API_KEY)
        assert exc_info.value.message == "HTTP 503"

    def test_safety_block(self):
        reply = {"promptFeedback": {"blockReason": "SAFETY"}}
        with patch(POST, return_value=mock_http_response(reply)):
            with pytest.raises(ServiceError) as exc_info:
                generate_answers([make_question("A?")], TEST_API_KEY)
        assert exc_info.value.category == ServiceError.SAFETY_BLOCK

    def test_unparseable_text(self):
        reply = gemini_reply("Sorry, I can't help with that form.")
        with patch(POST, return_value=mock_http_response(reply)):
            with pytest.raises(ServiceError) as exc_info:
                generate_answers([make_question("A?")], TEST_API_KEY)
        assert exc_info.value.category == ServiceError.INVALID_RESPONSE

    def test_non_json_success_body(self):
        with patch(POST, return_value=mock_http_response(json_error=True)):
            with pytest.raises(ServiceError):
                generate_answers([make_question("A?")], TEST_API_KEY)

    def test_connection_error_never_echoes_key(self):
        url = f"{API_CONFIG['endpoint']}?key={TEST_API_KEY}"
        error = requests.ConnectionError(f"Max retries exceeded with url: {url}")
        with patch(POST, side_effect=error):
            with pytest.raises(ServiceError) as exc_info:
                generate_answers([make_question("A?")], TEST_API_KEY)
        assert TEST_API_KEY not in exc_info.value.message
        assert "[REDACTED]" in exc_info.value.message

    def test_timeout_never_echoes_key(self):
        with patch(POST, side_effect=requests.Timeout(f"key={TEST_API_KEY} timed out")):
            with pytest.raises(ServiceError) as exc_info:
                generate_answers([make_question("A?")], TEST_API_KEY)
        assert TEST_API_KEY not in exc_info.value.message

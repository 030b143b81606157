"""
Tests for advisory.py module.

Tests:
- strip_code_fences
- LLMAdvisoryGateway prompt building, tier routing and error wrapping
"""

import json
import os
import sys
from unittest.mock import Mock

import httpx
import pytest
from openai import APIConnectionError

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from advisory import AdvisoryFailure, AdvisoryGateway, LLMAdvisoryGateway, strip_code_fences
from prompts import NO_COMPONENTS_PLACEHOLDER


@pytest.fixture
def client():
    """Mock LLMClient."""
    mock = Mock()
    mock.ask.return_value = "Respuesta"
    return mock


@pytest.fixture
def gateway(client):
    return LLMAdvisoryGateway(client)


# =============================================================================
# Test strip_code_fences
# =============================================================================

class TestStripCodeFences:
    """Tests for strip_code_fences helper."""

    def test_plain_code_unchanged(self):
        assert strip_code_fences("void loop() {}\n") == "void loop() {}"

    def test_fenced_with_language(self):
        text = "```cpp\nvoid setup() {}\nvoid loop() {}\n```"
        assert strip_code_fences(text) == "void setup() {}\nvoid loop() {}"

    def test_fenced_without_closing(self):
        assert strip_code_fences("```\nint x = 1;") == "int x = 1;"


# =============================================================================
# Test LLMAdvisoryGateway
# =============================================================================

class TestLLMAdvisoryGateway:
    """Tests for the LLM-backed gateway."""

    def test_is_gateway(self, gateway):
        assert isinstance(gateway, AdvisoryGateway)

    def test_feedback_prompt(self, gateway, client):
        """Feedback embeds the question and the JSON snapshot on the pro tier."""
        snapshot = {"project_name": "Brazo Robótico", "requirements": []}

        reply = gateway.request_feedback("¿Seguridad?", snapshot)

        assert reply == "Respuesta"
        prompt = client.ask.call_args[0][0]
        assert "Mechatronics Engineering Professor" in prompt
        assert "¿Seguridad?" in prompt
        assert json.dumps(snapshot, ensure_ascii=False) in prompt
        assert client.ask.call_args[1] == {"tier": "pro", "thinking": True}

    def test_control_code_prompt(self, gateway, client):
        """Code drafts list the components and logic on the flash tier."""
        client.ask.return_value = "```cpp\nvoid loop() {}\n```"

        code = gateway.request_control_code_draft(["Arduino Uno R3", "Servo MG996R"], "Mover el brazo")

        assert code == "void loop() {}"
        prompt = client.ask.call_args[0][0]
        assert "Arduino Uno R3, Servo MG996R" in prompt
        assert "Mover el brazo" in prompt
        assert client.ask.call_args[1]["tier"] == "flash"

    def test_control_code_without_components(self, gateway, client):
        gateway.request_control_code_draft([], "Parpadear un LED")

        assert NO_COMPONENTS_PLACEHOLDER in client.ask.call_args[0][0]

    def test_model_explanation_prompt(self, gateway, client):
        gateway.request_model_explanation("Llenado de tanque")

        prompt = client.ask.call_args[0][0]
        assert "Llenado de tanque" in prompt
        assert "LaTeX" in prompt
        assert client.ask.call_args[1]["tier"] == "pro"

    def test_api_errors_become_failures(self, gateway, client):
        """OpenAI errors surface as AdvisoryFailure with the cause chained."""
        error = APIConnectionError(request=httpx.Request("POST", "https://test.api.com"))
        client.ask.side_effect = error

        with pytest.raises(AdvisoryFailure) as exc_info:
            gateway.request_model_explanation("PID")

        assert exc_info.value.__cause__ is error

    def test_other_errors_propagate(self, gateway, client):
        """Non-API errors are not disguised as advisory failures."""
        client.ask.side_effect = TypeError("bug")

        with pytest.raises(TypeError):
            gateway.request_feedback("?", {})


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

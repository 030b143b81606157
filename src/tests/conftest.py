"""
Shared test fixtures and utilities for MecaMaster tests.

This module provides:
- Fresh ProjectStore fixtures
- A scriptable fake AdvisoryGateway
- A mock OpenAI client for LLMClient tests
"""

import os
import sys
import threading
from unittest.mock import Mock

import pytest

# Add src to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from advisory import AdvisoryFailure, AdvisoryGateway
from config import LLMConfig, TutorConfig
from state import ProjectStore


# =============================================================================
# Fake Gateway
# =============================================================================

class FakeGateway(AdvisoryGateway):
    """
    In-memory AdvisoryGateway.

    Replies come from the `replies` dict keyed by request shape; a reply
    that is an exception instance is raised instead of returned. Every call
    is recorded in `calls`. If `gates` holds an Event for a call number
    (1-based), that call blocks until the event is set.
    """

    def __init__(self, replies: dict | None = None):
        self.replies = {
            "feedback": "Buen trabajo.",
            "control_code": "void setup() {}\nvoid loop() {}",
            "model_explanation": "$$\\frac{dh}{dt} = q_{in} - q_{out}$$",
        }
        self.replies.update(replies or {})
        self.calls: list[tuple] = []
        self.gates: dict[int, threading.Event] = {}
        self._cond = threading.Condition()

    def wait_for_calls(self, count: int, timeout: float = 5) -> bool:
        """Block until at least `count` calls have reached the gateway."""
        with self._cond:
            return self._cond.wait_for(lambda: len(self.calls) >= count, timeout)

    def _reply(self, shape: str, *args):
        with self._cond:
            self.calls.append((shape, *args))
            number = len(self.calls)
            self._cond.notify_all()
        gate = self.gates.get(number)
        if gate is not None:
            gate.wait(timeout=5)
        reply = self.replies[shape]
        if isinstance(reply, list):
            reply = reply[number - 1] if number <= len(reply) else reply[-1]
        if isinstance(reply, BaseException):
            raise reply
        return reply

    def request_feedback(self, prompt_text, project_snapshot):
        return self._reply("feedback", prompt_text, project_snapshot)

    def request_control_code_draft(self, component_names, control_logic_description):
        return self._reply("control_code", list(component_names), control_logic_description)

    def request_model_explanation(self, physics_concept):
        return self._reply("model_explanation", physics_concept)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def store():
    """Fresh, empty project store."""
    return ProjectStore()


@pytest.fixture
def gateway():
    """Fake gateway with default successful replies."""
    return FakeGateway()


@pytest.fixture
def failing_gateway():
    """Fake gateway whose every request fails."""
    failure = AdvisoryFailure("service unavailable")
    return FakeGateway({
        "feedback": failure,
        "control_code": failure,
        "model_explanation": failure,
    })


@pytest.fixture
def tutor_config():
    return TutorConfig()


@pytest.fixture
def llm_config():
    """LLMConfig pointing at a fake endpoint."""
    return LLMConfig(
        base_url="https://test.api.com",
        api_key="test-key",
        pro_model="test-pro",
        flash_model="test-flash",
        pro_temperature=0.5,
        flash_temperature=0.2,
        timeout=10.0,
        max_retries=3,
        thinking_budget=1000,
    )


@pytest.fixture
def mock_openai():
    """Mock OpenAI client returning a single completion."""
    mock = Mock()
    mock_completion = Mock()
    mock_completion.choices = [Mock(message=Mock(content="Test response"))]
    mock_completion.usage = Mock(prompt_tokens=10, completion_tokens=5)
    mock.chat.completions.create.return_value = mock_completion
    return mock

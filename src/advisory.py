"""
Advisory gateway: the boundary to the remote text-generation service.

AdvisoryGateway is the narrow interface the core depends on. It has three
request shapes, each returning plain text or raising AdvisoryFailure.
LLMAdvisoryGateway implements it on top of LLMClient.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Sequence

from openai import OpenAIError

from llm import LLMClient
from logging_utils import get_logger
from prompts import (
    NO_COMPONENTS_PLACEHOLDER,
    PROMPT_CONTROL_CODE,
    PROMPT_FEEDBACK,
    PROMPT_MODEL_EXPLANATION,
)

logger = get_logger(__name__)


class AdvisoryFailure(Exception):
    """The advisory service could not produce an answer."""


class AdvisoryGateway(ABC):
    """Text-generation service used by the tutor."""

    @abstractmethod
    def request_feedback(self, prompt_text: str, project_snapshot: dict[str, Any]) -> str:
        """Free-text guidance on the project, given a question and a snapshot."""

    @abstractmethod
    def request_control_code_draft(
        self, component_names: Sequence[str], control_logic_description: str
    ) -> str:
        """A control-code draft (Arduino sketch) as plain text."""

    @abstractmethod
    def request_model_explanation(self, physics_concept: str) -> str:
        """An explanation of the mathematical model behind a physics concept."""


def strip_code_fences(response: str) -> str:
    """
    Remove a surrounding markdown code block from an LLM response.

    Handles ```cpp / ```arduino / bare ``` openers. Text without a leading
    fence is returned unchanged apart from surrounding whitespace.
    """
    content = response.strip()

    if content.startswith("```"):
        lines = content.split('\n')
        # Remove first line (```cpp or ```)
        lines = lines[1:]
        # Remove last line if it's ```
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        content = '\n'.join(lines)

    return content


class LLMAdvisoryGateway(AdvisoryGateway):
    """
    AdvisoryGateway backed by an OpenAI-compatible chat API.

    Feedback and model explanations go to the "pro" tier (feedback with the
    thinking budget), code drafts to the "flash" tier. Retries and timeouts
    are LLMClient's business; whatever error survives them is reported as
    AdvisoryFailure.
    """

    def __init__(self, client: LLMClient):
        self.client = client

    def request_feedback(self, prompt_text: str, project_snapshot: dict[str, Any]) -> str:
        prompt = PROMPT_FEEDBACK.format(
            snapshot=json.dumps(project_snapshot, ensure_ascii=False),
            prompt=prompt_text,
        )
        return self._ask("feedback", prompt, tier="pro", thinking=True)

    def request_control_code_draft(
        self, component_names: Sequence[str], control_logic_description: str
    ) -> str:
        prompt = PROMPT_CONTROL_CODE.format(
            components=", ".join(component_names) or NO_COMPONENTS_PLACEHOLDER,
            logic=control_logic_description,
        )
        return strip_code_fences(self._ask("control code", prompt, tier="flash"))

    def request_model_explanation(self, physics_concept: str) -> str:
        prompt = PROMPT_MODEL_EXPLANATION.format(concept=physics_concept)
        return self._ask("model explanation", prompt, tier="pro")

    def _ask(self, what: str, prompt: str, tier: str, thinking: bool = False) -> str:
        try:
            return self.client.ask(prompt, tier=tier, thinking=thinking)
        except OpenAIError as e:
            logger.error("Advisory %s request failed: %s", what, e)
            raise AdvisoryFailure(f"{what} request failed: {e}") from e

"""
LLM Client: Clean interface for language model interactions.

This module provides a dependency-injectable LLM client that doesn't rely on globals.
All configuration is passed explicitly.

Design principles:
- No global state
- Configuration passed via constructor
- Two model tiers: "pro" for reasoning-heavy answers, "flash" for drafts
- Transient API errors retried with exponential backoff
- Optional logging of every exchange to a JSON-lines file
"""

import functools
import json
import os
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, TypeVar, Literal

import tiktoken
from openai import (
    OpenAI,
    APIConnectionError,
    APITimeoutError,
    InternalServerError,
    RateLimitError,
)

from config import LLMConfig
from logging_utils import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

ModelTier = Literal["pro", "flash"]

RETRYABLE_ERRORS = (APIConnectionError, APITimeoutError, InternalServerError, RateLimitError)


def retry_with_backoff(
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
    retryable_exceptions: tuple = (Exception,),
):
    """
    Decorator for retrying functions with exponential backoff.

    Args:
        max_retries: Maximum number of attempts.
        base_delay: Initial delay in seconds.
        max_delay: Maximum delay between retries.
        exponential_base: Base for exponential backoff calculation.
        retryable_exceptions: Tuple of exception types to retry on.

    Usage:
        @retry_with_backoff(max_retries=3)
        def my_api_call():
            ...
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> T:
            last_exception = None

            for attempt in range(max_retries):
                try:
                    return func(*args, **kwargs)
                except retryable_exceptions as e:
                    last_exception = e

                    if attempt < max_retries - 1:
                        delay = min(
                            base_delay * (exponential_base ** attempt),
                            max_delay
                        )
                        logger.warning(
                            "Retry %d/%d in %.1fs: %s",
                            attempt + 1, max_retries - 1, delay, e.__class__.__name__,
                        )
                        time.sleep(delay)

            # All retries exhausted
            raise last_exception

        return wrapper
    return decorator


@dataclass
class LLMResponse:
    """Structured response from LLM call."""
    content: str
    model: str = ""
    prompt_tokens: int = 0
    completion_tokens: int = 0


@dataclass
class LLMStats:
    """Statistics for LLM usage tracking."""
    pro_calls: int = 0
    pro_prompt_tokens: int = 0
    pro_completion_tokens: int = 0
    flash_calls: int = 0
    flash_prompt_tokens: int = 0
    flash_completion_tokens: int = 0

    def record(self, tier: ModelTier, prompt_tokens: int, completion_tokens: int) -> None:
        if tier == "pro":
            self.pro_calls += 1
            self.pro_prompt_tokens += prompt_tokens
            self.pro_completion_tokens += completion_tokens
        else:
            self.flash_calls += 1
            self.flash_prompt_tokens += prompt_tokens
            self.flash_completion_tokens += completion_tokens

    @property
    def total_tokens(self) -> int:
        return (
            self.pro_prompt_tokens + self.pro_completion_tokens
            + self.flash_prompt_tokens + self.flash_completion_tokens
        )


def estimate_tokens(text: str) -> int:
    """Estimate token count using tiktoken cl100k_base encoding."""
    encoding = tiktoken.get_encoding("cl100k_base")
    return len(encoding.encode(text))


class LLMClient:
    """
    LLM client with explicit configuration.

    Usage:
        config = LLMConfig.from_env()
        client = LLMClient(config)

        # Single question (stateless)
        answer = client.ask("Explain PID control", tier="pro")

        # Full message list
        response = client.ask_messages([{"role": "user", "content": "..."}], tier="flash")
    """

    def __init__(
        self,
        config: LLMConfig,
        log_path: str | None = None,
    ):
        """
        Initialize LLM client.

        Args:
            config: LLM configuration (endpoint, key, models, etc.)
            log_path: Optional path to write exchange logs. If None, no logging.

        Raises:
            RuntimeError: If no API key is configured.
        """
        if not config.api_key:
            raise RuntimeError("GEMINI_API_KEY environment variable not set")

        self.config = config
        self.log_path = log_path
        self.stats = LLMStats()
        # Retries are handled here, not inside the SDK
        self._client = OpenAI(
            base_url=config.base_url,
            api_key=config.api_key,
            timeout=config.timeout,
            max_retries=0,
        )
        self._call_api = retry_with_backoff(
            max_retries=max(config.max_retries, 1),
            retryable_exceptions=RETRYABLE_ERRORS,
        )(self._create_completion)

    def model_for(self, tier: ModelTier) -> str:
        return self.config.pro_model if tier == "pro" else self.config.flash_model

    def temperature_for(self, tier: ModelTier) -> float:
        return self.config.pro_temperature if tier == "pro" else self.config.flash_temperature

    def ask(self, question: str, tier: ModelTier = "flash", thinking: bool = False) -> str:
        """
        Ask a single question (stateless).

        Args:
            question: The question to ask.
            tier: Which model tier answers.
            thinking: Request the configured thinking budget.

        Returns:
            The model's response content.
        """
        messages = [{"role": "user", "content": question}]
        return self.ask_messages(messages, tier=tier, thinking=thinking).content

    def ask_messages(
        self,
        messages: list[dict[str, str]],
        tier: ModelTier = "flash",
        thinking: bool = False,
    ) -> LLMResponse:
        """
        Send messages to the model of the given tier.

        Args:
            messages: List of message dicts with 'role' and 'content'.
            tier: Which model tier answers.
            thinking: Request the configured thinking budget.

        Returns:
            LLMResponse with content and token counts.
        """
        model = self.model_for(tier)
        logger.info("LLM call: tier=%s model=%s", tier, model)
        completion = self._call_api(messages, tier, thinking)

        content = ""
        if completion.choices:
            content = completion.choices[0].message.content or ""

        if completion.usage:
            prompt_tokens = completion.usage.prompt_tokens
            completion_tokens = completion.usage.completion_tokens
        else:
            prompt_tokens = estimate_tokens(json.dumps(messages, ensure_ascii=False))
            completion_tokens = estimate_tokens(content)

        response = LLMResponse(
            content=content,
            model=model,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
        )

        self.stats.record(tier, response.prompt_tokens, response.completion_tokens)
        self._log(tier, messages, response)

        return response

    def _create_completion(self, messages: list[dict[str, str]], tier: ModelTier, thinking: bool):
        """Make the actual API call (wrapped with retry in __init__)."""
        kwargs = {}
        if thinking and self.config.thinking_budget:
            kwargs["extra_body"] = {
                "extra_body": {
                    "google": {"thinking_config": {"thinking_budget": self.config.thinking_budget}}
                }
            }
        return self._client.chat.completions.create(
            messages=messages,
            model=self.model_for(tier),
            temperature=self.temperature_for(tier),
            stream=False,
            **kwargs,
        )

    def _log(
        self,
        tier: ModelTier,
        messages: list[dict[str, str]],
        response: LLMResponse,
    ) -> None:
        """Write log entry to file if log_path is set."""
        if not self.log_path:
            return

        log_entry = {
            "tier": tier,
            "model": response.model,
            "messages": messages,
            "response": response.content,
            "prompt_tokens": response.prompt_tokens,
            "completion_tokens": response.completion_tokens,
            "timestamp": datetime.now().isoformat(),
        }

        # Ensure directory exists
        log_dir = os.path.dirname(self.log_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        with open(self.log_path, 'a', encoding='utf-8') as f:
            f.write(json.dumps(log_entry, ensure_ascii=False) + '\n')

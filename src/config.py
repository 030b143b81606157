"""
AppConfig: Immutable application configuration.

This module contains ONLY static configuration that doesn't change during a session.
All runtime project data belongs in ProjectStore (see state.py).

Design principles:
- Frozen dataclasses prevent accidental mutation
- Configuration loaded once at startup
- Environment variables override config file values
- The API key only ever reaches the advisory gateway
"""

import json
import os
from dataclasses import dataclass, field

from logging_utils import get_logger

logger = get_logger(__name__)

GEMINI_OPENAI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"

DEFAULT_CONFIG_FILENAME = "mecamaster_config.json"


@dataclass(frozen=True)
class LLMConfig:
    """Immutable LLM configuration."""
    base_url: str = GEMINI_OPENAI_BASE_URL
    api_key: str = ""
    pro_model: str = "gemini-3-pro-preview"
    flash_model: str = "gemini-3-flash-preview"
    pro_temperature: float = 0.7
    flash_temperature: float = 0.4
    timeout: float = 120.0  # seconds
    max_retries: int = 3
    thinking_budget: int | None = 15000

    @classmethod
    def from_env(cls) -> "LLMConfig":
        """Create LLMConfig from environment variables."""
        defaults = cls()
        budget = os.environ.get("THINKING_BUDGET", "")
        return cls(
            base_url=os.environ.get("OPENAI_BASE_URL") or defaults.base_url,
            api_key=os.environ.get("GEMINI_API_KEY") or os.environ.get("OPENAI_API_KEY", ""),
            pro_model=os.environ.get("PRO_MODEL_NAME") or defaults.pro_model,
            flash_model=os.environ.get("FLASH_MODEL_NAME") or defaults.flash_model,
            pro_temperature=float(os.environ.get("PRO_TEMPERATURE", defaults.pro_temperature)),
            flash_temperature=float(os.environ.get("FLASH_TEMPERATURE", defaults.flash_temperature)),
            timeout=float(os.environ.get("LLM_TIMEOUT", defaults.timeout)),
            max_retries=int(os.environ.get("LLM_MAX_RETRIES", defaults.max_retries)),
            thinking_budget=int(budget) if budget else defaults.thinking_budget,
        )


@dataclass(frozen=True)
class TutorConfig:
    """User-facing tutor texts (Spanish, as shown to students)."""
    greeting: str = (
        "¡Hola! Soy tu tutor de Mecatrónica. Comencemos dándole un nombre a tu "
        "proyecto y definiendo los requerimientos de tu sistema."
    )
    fallback_message: str = (
        "Lo siento, hubo un error al procesar tu consulta con la IA. "
        "Por favor, intenta de nuevo."
    )
    empty_reply_message: str = "No pude generar una respuesta."
    code_ready_message: str = (
        "He generado un borrador de código para tu sistema. "
        "Revísalo en la pestaña de programación."
    )
    model_ready_message: str = (
        "He analizado el modelo matemático. Las derivadas e integrales son clave "
        "para el control PID o la dinámica del sistema."
    )
    default_control_logic: str = "Control de flujo basado en sensores seleccionados"


@dataclass(frozen=True)
class AppConfig:
    """
    Complete immutable application configuration.

    This is the single source of truth for all static configuration.
    Create once at startup and pass to functions that need it.
    """
    llm: LLMConfig = field(default_factory=LLMConfig)
    tutor: TutorConfig = field(default_factory=TutorConfig)
    log_level: str = "INFO"
    llm_log_path: str | None = None


def default_config_path() -> str:
    """Location of the optional JSON config file (<root>/inputs/)."""
    src_dir = os.path.dirname(os.path.abspath(__file__))
    root_dir = os.path.dirname(src_dir)
    return os.path.join(root_dir, "inputs", DEFAULT_CONFIG_FILENAME)


def load_config(config_path: str | None = None) -> AppConfig:
    """
    Load configuration from JSON file and environment variables.

    Priority: Environment variables > Config file > Defaults

    Args:
        config_path: Path to JSON config file. If None, uses default location.

    Returns:
        Immutable AppConfig instance.
    """
    if config_path is None:
        config_path = default_config_path()

    # Load from JSON if exists
    config_data = {}
    if os.path.exists(config_path):
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config_data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Failed to load config from %s: %s", config_path, e)
        if not isinstance(config_data, dict):
            logger.warning("Ignoring config %s: top level must be a JSON object", config_path)
            config_data = {}

    # Set environment variables from config (env vars take priority)
    _set_env_if_not_exists("GEMINI_API_KEY", config_data.get("GEMINI_API_KEY", ""))
    _set_env_if_not_exists("OPENAI_BASE_URL", config_data.get("OPENAI_BASE_URL", ""))
    _set_env_if_not_exists("PRO_MODEL_NAME", config_data.get("PRO_MODEL_NAME", ""))
    _set_env_if_not_exists("FLASH_MODEL_NAME", config_data.get("FLASH_MODEL_NAME", ""))

    tutor_defaults = TutorConfig()
    tutor_data = config_data.get("tutor", {})
    if not isinstance(tutor_data, dict):
        logger.warning("Ignoring 'tutor' section in %s: expected a JSON object", config_path)
        tutor_data = {}
    tutor = TutorConfig(**{
        key: tutor_data.get(key, getattr(tutor_defaults, key))
        for key in TutorConfig.__dataclass_fields__
    })

    return AppConfig(
        llm=LLMConfig.from_env(),
        tutor=tutor,
        log_level=os.environ.get("MECAMASTER_LOG_LEVEL") or config_data.get("log_level", "INFO"),
        llm_log_path=os.environ.get("MECAMASTER_LLM_LOG") or config_data.get("llm_log_path"),
    )


def _set_env_if_not_exists(key: str, value: str) -> None:
    """Set environment variable only if not already set and value is non-empty."""
    if key not in os.environ or not os.environ[key]:
        if value:
            os.environ[key] = value

"""Configuration for issue triage governance."""

import os

from pydantic import BaseModel, Field

from .triage.constants import INVALID_LABEL, NEEDS_INFO_LABEL

DEFAULT_MODEL = "openai:gpt-4o-mini"

DEFAULT_QUESTION_SIGNAL_KEYWORDS = [
    "how do",
    "how to",
    "how can",
    "can i",
    "is there a way",
    "what is",
    "help",
    "cómo",
    "como puedo",
    "ayuda",
    "duda",
]

DEFAULT_QUESTION_FALLBACK_CHECKLIST = [
    "- Share the exact steps and commands you ran",
    "- Share your current .env values (redact secrets)",
    "- Include your runtime and package versions",
    "- Paste the full error output or logs",
]


def validate_model_string(model: str) -> tuple[str, str]:
    """Validate and parse model string format.

    Args:
        model: Model identifier (e.g., 'openai:gpt-4o-mini')

    Returns:
        Tuple of (provider, model_name)

    Raises:
        ValueError: If model string format is invalid
    """
    provider, separator, model_name = model.partition(":")
    if not separator or not provider or not model_name:
        raise ValueError(
            f"Invalid model format '{model}'. Expected format: provider:model\n\n"
            f"💡 Examples of valid model formats:\n"
            f"   openai:gpt-4o-mini\n"
            f"   anthropic:claude-3-5-haiku-latest\n"
            f"   ollama:llama3.1"
        )
    return provider.lower(), model_name


class TriageSettings(BaseModel):
    """Thresholds, labels and model parameters for triage."""

    classification_confidence_threshold: float = Field(default=0.8, ge=0.0, le=1.0)
    sentiment_confidence_threshold: float = Field(default=0.75, ge=0.0, le=1.0)
    duplicate_similarity_threshold: float = Field(default=0.85, ge=0.0, le=1.0)
    documentation_confidence_threshold: float = Field(default=0.9, ge=0.0, le=1.0)
    help_wanted_confidence_threshold: float = Field(default=0.9, ge=0.0, le=1.0)
    good_first_issue_confidence_threshold: float = Field(
        default=0.95, ge=0.0, le=1.0
    )

    recent_issues_limit: int = Field(default=15, ge=1, le=100)
    needs_info_label: str = NEEDS_INFO_LABEL
    governance_error_labels: list[str] = Field(
        default_factory=lambda: [NEEDS_INFO_LABEL, INVALID_LABEL],
        description="Labels removed once an issue passes integrity validation",
    )
    question_signal_keywords: list[str] = Field(
        default_factory=lambda: list(DEFAULT_QUESTION_SIGNAL_KEYWORDS)
    )
    question_fallback_checklist: list[str] = Field(
        default_factory=lambda: list(DEFAULT_QUESTION_FALLBACK_CHECKLIST)
    )
    bot_login: str = Field(
        default="github-actions[bot]",
        description="Login the bot comments under, used for idempotency lookups",
    )

    model: str = DEFAULT_MODEL
    temperature: float = 0.1
    max_tokens: int = 700
    timeout_seconds: float = 7.0

    @classmethod
    def from_env(cls) -> "TriageSettings":
        """Build settings from environment variables, falling back to defaults.

        Raises:
            ValueError: If an override cannot be parsed
        """
        overrides: dict[str, object] = {}

        float_variables = {
            "TRIAGE_CLASSIFICATION_THRESHOLD": "classification_confidence_threshold",
            "TRIAGE_SENTIMENT_THRESHOLD": "sentiment_confidence_threshold",
            "TRIAGE_DUPLICATE_THRESHOLD": "duplicate_similarity_threshold",
            "TRIAGE_TEMPERATURE": "temperature",
            "TRIAGE_TIMEOUT_SECONDS": "timeout_seconds",
        }
        for variable, field_name in float_variables.items():
            raw = os.getenv(variable)
            if raw is None or not raw.strip():
                continue
            try:
                overrides[field_name] = float(raw)
            except ValueError:
                raise ValueError(f"{variable} must be a number, got '{raw}'")

        int_variables = {
            "TRIAGE_RECENT_ISSUES_LIMIT": "recent_issues_limit",
            "TRIAGE_MAX_TOKENS": "max_tokens",
        }
        for variable, field_name in int_variables.items():
            raw = os.getenv(variable)
            if raw is None or not raw.strip():
                continue
            try:
                overrides[field_name] = int(raw)
            except ValueError:
                raise ValueError(f"{variable} must be an integer, got '{raw}'")

        error_labels = os.getenv("TRIAGE_GOVERNANCE_ERROR_LABELS")
        if error_labels:
            overrides["governance_error_labels"] = [
                label.strip() for label in error_labels.split(",") if label.strip()
            ]

        bot_login = os.getenv("GITHUB_BOT_LOGIN")
        if bot_login:
            overrides["bot_login"] = bot_login

        model = os.getenv("TRIAGE_MODEL")
        if model:
            validate_model_string(model)
            overrides["model"] = model

        return cls(**overrides)

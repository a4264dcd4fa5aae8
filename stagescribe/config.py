"""Configuration for stagescribe.

User settings are loaded from ~/.stagescribe/config.yaml and can be
overridden per run from the command line.
Use 'stagescribe config' commands to modify settings.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class LLMProvider(Enum):
    """Supported LLM providers."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE = "google"
    GROQ = "groq"
    OPENROUTER = "openrouter"


class CallShape(Enum):
    """How the prompt is sent to the model."""

    COMPLETION = "completion"
    CHAT = "chat"


class EmptyStagePolicy(Enum):
    """What to do when nothing is staged."""

    SKIP = "skip"
    GENERATE = "generate"


class DiffGranularity(Enum):
    """Unit the diff renderer compares."""

    LINE = "line"
    WORD = "word"


# ============================================================
# DEFAULT VALUES
# ============================================================

DEFAULT_PROVIDER = LLMProvider.OPENAI
DEFAULT_SHAPE = CallShape.CHAT
DEFAULT_MAX_TOKENS = 256
DEFAULT_TEMPERATURE = 0.5
DEFAULT_TIMEOUT = 60.0
DEFAULT_LANGUAGE = "English"
DEFAULT_TEMPLATE = "generic"
DEFAULT_MAX_DIFF_CHARS = 50000
DEFAULT_ON_EMPTY = EmptyStagePolicy.SKIP
DEFAULT_GRANULARITY = DiffGranularity.LINE

# Auto-generated files that add noise without describing the change
DEFAULT_EXCLUDE_PATTERNS = [
    "poetry.lock",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "Cargo.lock",
    "Gemfile.lock",
    "composer.lock",
    "go.sum",
]


# ============================================================
# AVAILABLE MODELS PER PROVIDER
# ============================================================

AVAILABLE_MODELS = {
    LLMProvider.OPENAI: [
        "gpt-4o-mini",
        "gpt-4o",
        "gpt-4.1",
        "gpt-4.1-mini",
        "gpt-3.5-turbo-instruct",
    ],
    LLMProvider.ANTHROPIC: [
        "claude-sonnet-4-20250514",
        "claude-3-5-sonnet-latest",
        "claude-3-5-haiku-latest",
    ],
    LLMProvider.GOOGLE: [
        "gemini-2.0-flash",
        "gemini-2.0-flash-lite",
        "gemini-2.5-flash",
        "gemini-2.5-pro",
    ],
    LLMProvider.GROQ: [
        "llama-3.3-70b-versatile",
        "llama-3.1-8b-instant",
    ],
    LLMProvider.OPENROUTER: [
        "openai/gpt-4o-mini",
        "anthropic/claude-sonnet-4",
        "google/gemini-2.0-flash-001",
        "meta-llama/llama-3.3-70b-instruct",
        "deepseek/deepseek-chat",
    ],
}

# Model used when none is configured; completions need an instruct model
DEFAULT_MODELS = {
    (LLMProvider.OPENAI, CallShape.COMPLETION): "gpt-3.5-turbo-instruct",
    (LLMProvider.OPENAI, CallShape.CHAT): "gpt-4o-mini",
    (LLMProvider.GOOGLE, CallShape.COMPLETION): "gemini-2.0-flash",
    (LLMProvider.ANTHROPIC, CallShape.CHAT): "claude-3-5-haiku-latest",
    (LLMProvider.GROQ, CallShape.CHAT): "llama-3.3-70b-versatile",
    (LLMProvider.OPENROUTER, CallShape.CHAT): "openai/gpt-4o-mini",
}

# Call shapes each provider can serve
SUPPORTED_SHAPES = {
    LLMProvider.OPENAI: (CallShape.COMPLETION, CallShape.CHAT),
    LLMProvider.GOOGLE: (CallShape.COMPLETION,),
    LLMProvider.ANTHROPIC: (CallShape.CHAT,),
    LLMProvider.GROQ: (CallShape.CHAT,),
    LLMProvider.OPENROUTER: (CallShape.CHAT,),
}


# ============================================================
# API KEY ENVIRONMENT VARIABLES
# ============================================================

API_KEY_ENV_VARS = {
    LLMProvider.OPENAI: "OPENAI_API_KEY",
    LLMProvider.ANTHROPIC: "ANTHROPIC_API_KEY",
    LLMProvider.GOOGLE: "GOOGLE_API_KEY",
    LLMProvider.GROQ: "GROQ_API_KEY",
    LLMProvider.OPENROUTER: "OPENROUTER_API_KEY",
}


def get_api_key_env_var(provider: LLMProvider) -> str:
    """Get the environment variable name for the API key.

    Args:
        provider: The LLM provider.

    Returns:
        The environment variable name.
    """
    return API_KEY_ENV_VARS[provider]


class Settings(BaseModel):
    """Validated settings for one run.

    Attributes:
        provider: Hosted model provider.
        shape: Completion or chat call shape.
        model: Model name, or None for the provider default.
        max_tokens: Output token budget.
        temperature: Sampling temperature.
        timeout: Seconds to wait for the remote call.
        template: Built-in template name or a custom template containing {diff}.
        language: Output language for the localized template.
        file_headers: Prefix each file diff with --- a/ and +++ b/ lines.
        granularity: Line or word level diff rendering.
        max_diff_chars: Truncate the diff payload past this length.
        on_empty: Skip or still call the model when nothing is staged.
        exclude: Glob patterns of staged paths left out of the diff.
    """

    provider: LLMProvider = DEFAULT_PROVIDER
    shape: CallShape = DEFAULT_SHAPE
    model: Optional[str] = None
    max_tokens: int = Field(DEFAULT_MAX_TOKENS, gt=0)
    temperature: float = Field(DEFAULT_TEMPERATURE, ge=0.0, le=2.0)
    timeout: float = Field(DEFAULT_TIMEOUT, gt=0)
    template: str = DEFAULT_TEMPLATE
    language: str = DEFAULT_LANGUAGE
    file_headers: bool = True
    granularity: DiffGranularity = DEFAULT_GRANULARITY
    max_diff_chars: int = Field(DEFAULT_MAX_DIFF_CHARS, gt=0)
    on_empty: EmptyStagePolicy = DEFAULT_ON_EMPTY
    exclude: list[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS))

    @field_validator("template")
    @classmethod
    def template_must_not_be_empty(cls, v: str) -> str:
        """Ensure a template name or text is given."""
        if not v or not v.strip():
            raise ValueError("template cannot be empty")
        return v

    @property
    def effective_model(self) -> str:
        """The configured model, or the default for the provider and shape."""
        if self.model:
            return self.model
        return DEFAULT_MODELS.get((self.provider, self.shape), AVAILABLE_MODELS[self.provider][0])


def load_settings(**overrides: Any) -> Settings:
    """Build settings from defaults, the global config file and overrides.

    The model and shape stored in the config file belong to the stored
    provider. When a different provider is given without a model, the
    provider default model is used, and a stored shape the provider cannot
    serve falls back to one it can. An explicit shape is kept as given.

    Args:
        **overrides: Explicit values (e.g. from CLI options). None values are ignored.

    Returns:
        Validated Settings.

    Raises:
        GlobalConfigError: If the config file cannot be read.
        pydantic.ValidationError: If a value is invalid.
    """
    # Import here to avoid circular dependency
    from stagescribe import global_config

    values = dict(global_config.load_global_config())
    explicit = {key: value for key, value in overrides.items() if value is not None}

    if "provider" in explicit and "model" not in explicit:
        stored_provider = values.get("provider", DEFAULT_PROVIDER.value)
        if _provider_value(explicit["provider"]) != _provider_value(stored_provider):
            values.pop("model", None)

    values.update(explicit)
    known = {key: value for key, value in values.items() if key in Settings.model_fields}
    settings = Settings(**known)

    supported = SUPPORTED_SHAPES[settings.provider]
    if settings.shape not in supported and "shape" not in explicit:
        settings = settings.model_copy(update={"shape": supported[-1]})
    return settings


def _provider_value(provider: Any) -> str:
    if isinstance(provider, LLMProvider):
        return provider.value
    return str(provider)

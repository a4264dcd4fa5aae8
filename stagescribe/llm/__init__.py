"""Message generator module for stagescribe.

This module provides one generate(prompt) interface over several LLM
providers and the two call shapes (completion, chat). The implementation
is chosen from Settings when the generator is built.
"""

from typing import Optional

from stagescribe.config import CallShape, LLMProvider, SUPPORTED_SHAPES, Settings
from stagescribe.llm.base import BaseMessageGenerator, run_cancellable
from stagescribe.llm.exceptions import (
    GenerationError,
    GenerationErrorKind,
    LLMError,
    MissingAPIKeyError,
)


def _generator_class(provider: LLMProvider, shape: CallShape) -> type[BaseMessageGenerator]:
    if provider == LLMProvider.OPENAI:
        from stagescribe.llm.openai_provider import (
            OpenAIChatGenerator,
            OpenAICompletionGenerator,
        )

        if shape == CallShape.COMPLETION:
            return OpenAICompletionGenerator
        return OpenAIChatGenerator

    elif provider == LLMProvider.GOOGLE:
        from stagescribe.llm.google_provider import GoogleCompletionGenerator

        return GoogleCompletionGenerator

    elif provider == LLMProvider.ANTHROPIC:
        from stagescribe.llm.anthropic_provider import AnthropicChatGenerator

        return AnthropicChatGenerator

    elif provider == LLMProvider.GROQ:
        from stagescribe.llm.groq_provider import GroqChatGenerator

        return GroqChatGenerator

    elif provider == LLMProvider.OPENROUTER:
        from stagescribe.llm.openrouter_provider import OpenRouterChatGenerator

        return OpenRouterChatGenerator

    raise ValueError(f"Unsupported provider: {provider}")


def get_generator(settings: Settings, api_key: Optional[str]) -> BaseMessageGenerator:
    """Build the message generator selected by the settings.

    Args:
        settings: Provider, call shape and sampling settings.
        api_key: API key for the provider.

    Returns:
        A generator instance.

    Raises:
        ValueError: If the provider does not support the call shape.
        MissingAPIKeyError: If api_key is empty.
    """
    provider = LLMProvider(settings.provider)
    shape = CallShape(settings.shape)

    if shape not in SUPPORTED_SHAPES.get(provider, ()):
        supported = ", ".join(s.value for s in SUPPORTED_SHAPES.get(provider, ()))
        raise ValueError(
            f"Provider {provider.value} does not support the {shape.value} call shape "
            f"(supported: {supported or 'none'})"
        )

    generator_class = _generator_class(provider, shape)
    return generator_class(
        api_key=api_key,
        model=settings.effective_model,
        max_tokens=settings.max_tokens,
        temperature=settings.temperature,
        timeout=settings.timeout,
    )


# Export commonly used items
__all__ = [
    "BaseMessageGenerator",
    "GenerationError",
    "GenerationErrorKind",
    "LLMError",
    "MissingAPIKeyError",
    "get_generator",
    "run_cancellable",
]

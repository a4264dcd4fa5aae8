"""Groq provider implementation."""

from typing import Any, Optional

import groq
from groq import Groq

from stagescribe.config import CallShape, LLMProvider
from stagescribe.llm.base import (
    BaseMessageGenerator,
    classify_sdk_error,
    openai_style_usage,
)
from stagescribe.llm.exceptions import GenerationErrorKind


class GroqChatGenerator(BaseMessageGenerator):
    """Groq chat generator (fast inference for open-source models)."""

    provider = LLMProvider.GROQ
    shape = CallShape.CHAT
    display_name = "Groq"

    def _create_client(self) -> Groq:
        return Groq(api_key=self.api_key, timeout=self.timeout, max_retries=0)

    def _send(self, client: Groq, prompt_text: str) -> Any:
        # OpenAI-compatible chat API
        return client.chat.completions.create(
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            messages=[{"role": "user", "content": prompt_text}],
        )

    def _extract_candidates(self, response: Any) -> list[Optional[str]]:
        return [choice.message.content for choice in response.choices]

    def _extract_usage(self, response: Any) -> tuple[int, int]:
        return openai_style_usage(response)

    def _classify_error(self, error: Exception) -> GenerationErrorKind:
        return classify_sdk_error(error, groq)

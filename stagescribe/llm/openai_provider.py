"""OpenAI provider implementations (completion and chat call shapes)."""

from typing import Any, Optional

import openai
from openai import OpenAI

from stagescribe.config import CallShape, LLMProvider
from stagescribe.llm.base import (
    BaseMessageGenerator,
    classify_sdk_error,
    openai_style_usage,
)
from stagescribe.llm.exceptions import GenerationErrorKind


class _OpenAIClientMixin:
    """Client construction and error mapping shared by the OpenAI generators."""

    base_url: Optional[str] = None

    def _create_client(self) -> OpenAI:
        # Retries are left to the caller
        return OpenAI(
            api_key=self.api_key,
            base_url=self.base_url,
            timeout=self.timeout,
            max_retries=0,
        )

    def _classify_error(self, error: Exception) -> GenerationErrorKind:
        return classify_sdk_error(error, openai)

    def _extract_usage(self, response: Any) -> tuple[int, int]:
        return openai_style_usage(response)


class OpenAICompletionGenerator(_OpenAIClientMixin, BaseMessageGenerator):
    """Single-prompt completion against the OpenAI completions endpoint."""

    provider = LLMProvider.OPENAI
    shape = CallShape.COMPLETION
    display_name = "OpenAI"

    def _send(self, client: OpenAI, prompt_text: str) -> Any:
        return client.completions.create(
            model=self.model,
            prompt=prompt_text,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            n=1,
        )

    def _extract_candidates(self, response: Any) -> list[Optional[str]]:
        return [choice.text for choice in response.choices]


class OpenAIChatGenerator(_OpenAIClientMixin, BaseMessageGenerator):
    """Chat completion with the prompt as the single user message."""

    provider = LLMProvider.OPENAI
    shape = CallShape.CHAT
    display_name = "OpenAI"

    def _request_options(self) -> dict:
        return {}

    def _send(self, client: OpenAI, prompt_text: str) -> Any:
        return client.chat.completions.create(
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            messages=[{"role": "user", "content": prompt_text}],
            **self._request_options(),
        )

    def _extract_candidates(self, response: Any) -> list[Optional[str]]:
        return [choice.message.content for choice in response.choices]

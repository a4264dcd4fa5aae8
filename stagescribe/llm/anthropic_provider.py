"""Anthropic Claude provider implementation."""

from typing import Any, Optional

import anthropic
from anthropic import Anthropic

from stagescribe.config import CallShape, LLMProvider
from stagescribe.llm.base import BaseMessageGenerator, classify_sdk_error
from stagescribe.llm.exceptions import GenerationErrorKind


class AnthropicChatGenerator(BaseMessageGenerator):
    """Claude messages API with the prompt as the single user message."""

    provider = LLMProvider.ANTHROPIC
    shape = CallShape.CHAT
    display_name = "Anthropic"

    def _create_client(self) -> Anthropic:
        return Anthropic(api_key=self.api_key, timeout=self.timeout, max_retries=0)

    def _send(self, client: Anthropic, prompt_text: str) -> Any:
        return client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            messages=[{"role": "user", "content": prompt_text}],
        )

    def _extract_candidates(self, response: Any) -> list[Optional[str]]:
        # Claude returns content blocks; text blocks are the candidates
        return [block.text for block in response.content if block.type == "text"]

    def _extract_usage(self, response: Any) -> tuple[int, int]:
        usage = getattr(response, "usage", None)
        if usage is None:
            return 0, 0
        return usage.input_tokens or 0, usage.output_tokens or 0

    def _classify_error(self, error: Exception) -> GenerationErrorKind:
        return classify_sdk_error(error, anthropic)

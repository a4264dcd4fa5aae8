"""Google Gemini provider implementation (completion call shape)."""

from typing import Any, Optional

import httpx
from google import genai
from google.genai import errors, types

from stagescribe.config import CallShape, LLMProvider
from stagescribe.llm.base import BaseMessageGenerator
from stagescribe.llm.exceptions import GenerationError, GenerationErrorKind


class GoogleCompletionGenerator(BaseMessageGenerator):
    """Single-prompt generate_content call asking for exactly one candidate."""

    provider = LLMProvider.GOOGLE
    shape = CallShape.COMPLETION
    display_name = "Google Gemini"

    def _create_client(self) -> genai.Client:
        # HttpOptions takes the timeout in milliseconds
        return genai.Client(
            api_key=self.api_key,
            http_options=types.HttpOptions(timeout=int(self.timeout * 1000)),
        )

    def _send(self, client: genai.Client, prompt_text: str) -> Any:
        return client.models.generate_content(
            model=self.model,
            contents=prompt_text,
            config=types.GenerateContentConfig(
                max_output_tokens=self.max_tokens,
                temperature=self.temperature,
                candidate_count=1,
            ),
        )

    def _extract_candidates(self, response: Any) -> list[Optional[str]]:
        candidates = response.candidates or []
        if candidates:
            finish_reason = str(getattr(candidates[0], "finish_reason", "") or "")
            if "SAFETY" in finish_reason:
                raise GenerationError(
                    f"Google Gemini blocked response due to safety filters: {finish_reason}",
                    kind=GenerationErrorKind.REMOTE,
                )

        texts = []
        for candidate in candidates:
            content = candidate.content
            if content is None or not content.parts:
                texts.append(None)
                continue
            texts.append("".join(part.text or "" for part in content.parts))
        return texts

    def _extract_usage(self, response: Any) -> tuple[int, int]:
        usage = getattr(response, "usage_metadata", None)
        if usage is None:
            return 0, 0
        return (
            getattr(usage, "prompt_token_count", 0) or 0,
            getattr(usage, "candidates_token_count", 0) or 0,
        )

    def _classify_error(self, error: Exception) -> GenerationErrorKind:
        if isinstance(error, httpx.TimeoutException):
            return GenerationErrorKind.TIMEOUT
        if isinstance(error, httpx.TransportError):
            return GenerationErrorKind.NETWORK
        if isinstance(error, errors.APIError):
            if error.code in (401, 403):
                return GenerationErrorKind.AUTHENTICATION
            if error.code == 429:
                return GenerationErrorKind.RATE_LIMIT
        return GenerationErrorKind.REMOTE

"""OpenRouter provider implementation.

OpenRouter provides unified access to many models through a single API.
It uses an OpenAI-compatible API format.
"""

from stagescribe.config import CallShape, LLMProvider
from stagescribe.llm.openai_provider import OpenAIChatGenerator

# OpenRouter API base URL
OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


class OpenRouterChatGenerator(OpenAIChatGenerator):
    """Chat generator for OpenRouter models (provider/model-name)."""

    provider = LLMProvider.OPENROUTER
    shape = CallShape.CHAT
    display_name = "OpenRouter"
    base_url = OPENROUTER_BASE_URL

    def _request_options(self) -> dict:
        return {
            "extra_headers": {
                "HTTP-Referer": "https://github.com/stagescribe",
                "X-Title": "stagescribe",
            }
        }
